# mdx_l10n/pipeline.py
"""
面向文件的处理流水线：提取、上传、回填。

每个文档独立处理：各自解析出一棵语法树、各自产生变更列表，文档之间不共享任何可变状态。
核心库抛出的任何错误都会被包装为 DocumentProcessingError，并指明出错的文件，
保证不会输出偏移已损坏的部分结果。
"""

import json
import os
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional

import structlog
from pydantic import BaseModel

from mdx_l10n.collector import collect_changes, validate_change_list
from mdx_l10n.config import LocalizerConfig
from mdx_l10n.exceptions import ConfigurationError, DocumentProcessingError, L10nError
from mdx_l10n.parsing import parse_document
from mdx_l10n.patching import PatchOptions, apply_changes, transform_for
from mdx_l10n.payload import UploadPayload, build_payload, load_translated_changes
from mdx_l10n.rendering import render_context_html
from mdx_l10n.smartling import SmartlingClient
from mdx_l10n.tree import Node
from mdx_l10n.types import Change, ChangeKind

log = structlog.get_logger(__name__)


class DocumentExtraction(BaseModel):
    """单个文档的提取结果。"""

    path: Path
    source: str
    payload: UploadPayload
    context_html: str

    @property
    def changes(self) -> list[Change]:
        return self.payload.strings


def read_source(path: Path) -> str:
    """按原样读取文档，保留 CRLF 换行，偏移量以原始文本为准。"""
    with path.open(encoding="utf-8", newline="") as f:
        return f.read()


def write_source(path: Path, text: str) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    with path.open("w", encoding="utf-8", newline="") as f:
        f.write(text)


def dump_ast(root: Node, path: Path, debug_dir: Path) -> Path:
    debug_dir.mkdir(parents=True, exist_ok=True)
    target = debug_dir / f"ast-{path.name}.json"
    target.write_text(
        json.dumps(root.to_dict(), ensure_ascii=False, indent=4), encoding="utf-8"
    )
    log.debug("语法树已写入调试目录", path=str(target))
    return target


def extract_document(path: Path, config: LocalizerConfig) -> DocumentExtraction:
    """读取并提取一个文档。"""
    log.info(f"--- {path} ---")
    try:
        source = read_source(path)
        root = parse_document(source)
        if config.debug_dir is not None:
            dump_ast(root, path, config.debug_dir)

        changes = collect_changes(root, source, config)
        validate_change_list(changes, source)

        title = next((c.text for c in changes if c.kind == ChangeKind.TITLE), path.stem)
        context_html = render_context_html(source, title=title, lang=config.short_locale)
    except (L10nError, OSError, UnicodeDecodeError) as e:
        raise DocumentProcessingError(str(path), e) from e

    return DocumentExtraction(
        path=path,
        source=source,
        payload=build_payload(changes),
        context_html=context_html,
    )


def default_job_name() -> str:
    """在 CI 中使用 `<commit> - <ref>`，否则使用时间戳。"""
    sha = os.environ.get("GITHUB_SHA")
    ref = os.environ.get("GITHUB_REF")
    if sha and ref:
        return f"{sha} - {ref}"
    return f"mdx-l10n {datetime.now(timezone.utc):%Y-%m-%d %H:%M:%S}"


async def upload_documents(
    paths: list[Path],
    config: LocalizerConfig,
    job_name: Optional[str] = None,
    client: Optional[SmartlingClient] = None,
) -> list[DocumentExtraction]:
    """
    先提取全部文档，再依次上传。

    任一文档提取失败时不会发起任何网络请求。
    """
    settings = config.smartling
    if not settings.is_complete:
        raise ConfigurationError(
            "Smartling 配置不完整，请设置 project_id、user_id 与 user_secret。"
        )
    assert settings.user_id is not None and settings.user_secret is not None

    extractions = [extract_document(path, config) for path in paths]
    file_uris = [str(e.path) for e in extractions]

    client = client or SmartlingClient(config)
    async with client:
        await client.authenticate(settings.user_id, settings.user_secret.get_secret_value())
        job_uid = await client.create_job(job_name or default_job_name())
        batch_uid = await client.create_batch(file_uris, job_uid)

        for extraction, file_uri in zip(extractions, file_uris):
            await client.upload_file_to_batch(
                extraction.payload.to_json().encode("utf-8"), file_uri, batch_uid
            )
            await client.upload_context(
                file_uri, extraction.context_html.encode("utf-8"), job_uid
            )

    log.info("全部文档已上传", count=len(extractions), job_uid=job_uid)
    return extractions


def update_document(
    source_path: Path,
    translated_path: Path,
    config: LocalizerConfig,
    output_path: Optional[Path] = None,
    options: Optional[PatchOptions] = None,
) -> Path:
    """将译文文件中的变更回填到源文档，写入 `output_path`（默认覆盖源文件）。"""
    options = options or PatchOptions(emphasize=config.emphasize)
    target = output_path or source_path
    try:
        source = read_source(source_path)
        changes = load_translated_changes(translated_path.read_text(encoding="utf-8"))
        result = apply_changes(source, changes, transform=transform_for(options))
    except (L10nError, OSError, UnicodeDecodeError) as e:
        raise DocumentProcessingError(str(source_path), e) from e

    write_source(target, result)
    log.info("译文已回填", source=str(source_path), output=str(target), count=len(changes))
    return target
