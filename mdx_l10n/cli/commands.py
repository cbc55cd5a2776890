# mdx_l10n/cli/commands.py
"""CLI 命令与交互式菜单共用的执行逻辑。"""

import asyncio
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.markup import escape

from mdx_l10n.config import LocalizerConfig
from mdx_l10n.patching import PatchOptions
from mdx_l10n.pipeline import extract_document, update_document, upload_documents

console = Console()


def report_error(e: Exception) -> None:
    """输出一条红色错误信息。"""
    console.print(f"[bold red]❌ {escape(str(e))}[/bold red]", soft_wrap=True)


def run_extract(
    config: LocalizerConfig, files: list[Path], out_dir: Optional[Path] = None
) -> list[Path]:
    """提取文档；指定 `out_dir` 时写入 JSON 载荷与上下文 HTML，否则直接打印载荷。"""
    written: list[Path] = []
    for path in files:
        extraction = extract_document(path, config)
        if out_dir is None:
            typer.echo(extraction.payload.to_json(indent=2))
            continue

        out_dir.mkdir(parents=True, exist_ok=True)
        json_path = out_dir / f"{path.name}.json"
        html_path = out_dir / f"{path.name}.html"
        json_path.write_text(extraction.payload.to_json(indent=2), encoding="utf-8")
        html_path.write_text(extraction.context_html, encoding="utf-8")
        written.extend([json_path, html_path])
        console.print(
            f"[green]✅ {path}[/green]: {len(extraction.changes)} 条变更 -> [cyan]{json_path}[/cyan]"
        )
    return written


def run_upload(config: LocalizerConfig, files: list[Path], job_name: Optional[str]) -> None:
    extractions = asyncio.run(upload_documents(files, config, job_name=job_name))
    console.print(f"[bold green]✅ 已上传 {len(extractions)} 个文档到 Smartling。[/bold green]")


def run_update(
    config: LocalizerConfig,
    source: Path,
    translated: Path,
    output: Optional[Path],
    emphasize: Optional[bool],
) -> Path:
    options = PatchOptions(emphasize=config.emphasize if emphasize is None else emphasize)
    target = update_document(source, translated, config, output_path=output, options=options)
    console.print(f"[bold green]✅ 译文已写入 {target}[/bold green]")
    return target
