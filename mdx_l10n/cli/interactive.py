# mdx_l10n/cli/interactive.py
"""基于 questionary 的交互式菜单。"""

from pathlib import Path
from typing import Optional

import questionary
from rich.console import Console

from mdx_l10n.cli.commands import report_error, run_extract, run_update, run_upload
from mdx_l10n.config import LocalizerConfig
from mdx_l10n.exceptions import L10nError

console = Console()

EXTRACT = "📄 提取 (Extract)"
UPLOAD = "☁️ 上传 (Upload)"
UPDATE = "📝 回填 (Update)"
EXIT = "🚪 退出 (Exit)"


def _ask_files(message: str) -> list[Path]:
    answer = questionary.text(message).ask()
    if not answer:
        return []
    paths = [Path(p) for p in answer.split()]
    missing = [p for p in paths if not p.is_file()]
    if missing:
        console.print(f"[yellow]文件不存在: {', '.join(map(str, missing))}[/yellow]")
        return []
    return paths


def _ask_path(message: str, default: str = "") -> Optional[Path]:
    answer = questionary.path(message, default=default).ask()
    return Path(answer) if answer else None


def run_interactive(config: LocalizerConfig) -> None:
    while True:
        choice = questionary.select(
            "请选择一个操作:", choices=[EXTRACT, UPLOAD, UPDATE, EXIT]
        ).ask()
        if choice is None or choice == EXIT:
            break

        try:
            if choice == EXTRACT:
                files = _ask_files("请输入要提取的文档路径 (空格分隔):")
                if files:
                    run_extract(config, files, _ask_path("输出目录 (留空则打印):"))
            elif choice == UPLOAD:
                files = _ask_files("请输入要上传的文档路径 (空格分隔):")
                if files and questionary.confirm(
                    f"确定要上传 {len(files)} 个文档到 Smartling 吗?", default=False
                ).ask():
                    job_name = questionary.text("任务名称 (留空使用默认值):").ask()
                    run_upload(config, files, job_name or None)
            elif choice == UPDATE:
                source = _ask_path("源文档路径:")
                translated = _ask_path("译文 JSON 路径:")
                if source and translated:
                    output = _ask_path("输出路径 (留空则覆盖源文档):")
                    emphasize = questionary.confirm("是否强调显示译文?", default=config.emphasize).ask()
                    run_update(config, source, translated, output, emphasize)
        except L10nError as e:
            report_error(e)
        console.print("\n")
