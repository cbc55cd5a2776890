# mdx_l10n/cli/main.py
"""mdx-l10n CLI 的主入口点。"""

from pathlib import Path
from typing import Annotated, Optional

import typer
from dotenv import load_dotenv
from rich.console import Console

import mdx_l10n
from mdx_l10n.cli.commands import report_error, run_extract, run_update, run_upload
from mdx_l10n.cli.interactive import run_interactive
from mdx_l10n.cli.state import State
from mdx_l10n.config import LocalizerConfig
from mdx_l10n.exceptions import L10nError
from mdx_l10n.logging_config import setup_logging

# 创建主 Typer 应用
app = typer.Typer(
    name="mdx-l10n",
    help="🌐 mdx-l10n: 提取 MDX 文档中的可翻译文本，并将译文按原始偏移回填。",
    add_completion=False,
    no_args_is_help=True,
)

console = Console()

ExistingFiles = Annotated[
    list[Path],
    typer.Argument(exists=True, dir_okay=False, readable=True, help="一个或多个 MDX 文档。"),
]


def version_callback(value: bool) -> None:
    """处理 --version 选项的回调函数。"""
    if value:
        console.print(f"mdx-l10n [bold cyan]v{mdx_l10n.__version__}[/bold cyan]")
        raise typer.Exit()


@app.callback()
def main(
    ctx: typer.Context,
    version: Annotated[
        Optional[bool],
        typer.Option(
            "--version",
            "-v",
            help="显示版本信息并退出。",
            callback=version_callback,
            is_eager=True,
        ),
    ] = None,
    log_level: Annotated[
        Optional[str], typer.Option("--log-level", help="覆盖配置中的日志级别。")
    ] = None,
) -> None:
    """主回调函数，在任何子命令执行前加载配置并初始化日志。"""
    load_dotenv()
    try:
        config = LocalizerConfig()
        setup_logging(
            log_level=log_level or config.logging.level,
            log_format=config.logging.format,
        )
        ctx.obj = State(config=config)
    except Exception as e:
        console.print("[bold red]❌ 启动失败：无法加载配置或初始化日志。[/bold red]")
        console.print(f"[dim]{e}[/dim]")
        raise typer.Exit(code=1) from e


@app.command("extract")
def extract(
    ctx: typer.Context,
    files: ExistingFiles,
    out: Annotated[
        Optional[Path],
        typer.Option("--out", "-o", file_okay=False, help="输出目录；省略时将载荷打印到标准输出。"),
    ] = None,
) -> None:
    """提取文档中的可翻译文本，生成上传载荷与上下文 HTML。"""
    state: State = ctx.obj
    try:
        run_extract(state.config, files, out)
    except L10nError as e:
        report_error(e)
        raise typer.Exit(code=1) from e


@app.command("upload")
def upload(
    ctx: typer.Context,
    files: ExistingFiles,
    job_name: Annotated[
        Optional[str], typer.Option("--job-name", "-j", help="Smartling 任务名称。")
    ] = None,
) -> None:
    """提取并上传文档到 Smartling。"""
    state: State = ctx.obj
    try:
        run_upload(state.config, files, job_name)
    except L10nError as e:
        report_error(e)
        raise typer.Exit(code=1) from e


@app.command("update")
def update(
    ctx: typer.Context,
    source: Annotated[
        Path, typer.Argument(exists=True, dir_okay=False, readable=True, help="源 MDX 文档。")
    ],
    translated: Annotated[
        Path,
        typer.Argument(exists=True, dir_okay=False, readable=True, help="包含译文的 JSON 文件。"),
    ],
    output: Annotated[
        Optional[Path], typer.Option("--output", "-o", help="输出路径；省略时覆盖源文档。")
    ] = None,
    emphasize: Annotated[
        Optional[bool],
        typer.Option("--emphasize/--no-emphasize", help="将译文大写并标记空格，便于核对。"),
    ] = None,
) -> None:
    """将译文按提取时的偏移回填到源文档。"""
    state: State = ctx.obj
    try:
        run_update(state.config, source, translated, output, emphasize)
    except L10nError as e:
        report_error(e)
        raise typer.Exit(code=1) from e


@app.command("interactive")
def interactive(ctx: typer.Context) -> None:
    """启动交互式菜单。"""
    state: State = ctx.obj
    run_interactive(state.config)


if __name__ == "__main__":
    app()
