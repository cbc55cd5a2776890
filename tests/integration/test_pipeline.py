# tests/integration/test_pipeline.py
"""端到端测试：提取、上传与回填流水线。"""

import json
from pathlib import Path

import httpx
import pytest

from mdx_l10n.config import LocalizerConfig
from mdx_l10n.exceptions import ConfigurationError, DocumentProcessingError
from mdx_l10n.patching import PatchOptions
from mdx_l10n.pipeline import (
    default_job_name,
    extract_document,
    update_document,
    upload_documents,
)
from mdx_l10n.smartling import SmartlingClient
from mdx_l10n.types import ChangeKind
from tests.helpers.documents import SAMPLE_MDX


def test_extract_sample_document(docs_dir: Path, config: LocalizerConfig) -> None:
    extraction = extract_document(docs_dir / "guide.mdx", config)

    kinds = [c.kind for c in extraction.changes]
    assert len(kinds) == 16
    assert kinds[0] == ChangeKind.TITLE
    assert kinds.count(ChangeKind.REFERENCE) == 1
    assert kinds.count(ChangeKind.DIRECTIVE_LABEL) == 1
    assert "<title>Getting Started</title>" in extraction.context_html
    assert '<html lang="en">' in extraction.context_html


def test_extracted_spans_are_disjoint(docs_dir: Path, config: LocalizerConfig) -> None:
    extraction = extract_document(docs_dir / "guide.mdx", config)

    spans = sorted((c.start, c.end) for c in extraction.changes)
    for (_, first_end), (second_start, _) in zip(spans, spans[1:]):
        assert first_end <= second_start


def test_context_title_falls_back_to_file_name(docs_dir: Path, config: LocalizerConfig) -> None:
    extraction = extract_document(docs_dir / "hello.mdx", config)
    assert "<title>hello</title>" in extraction.context_html


def test_debug_dir_receives_ast(docs_dir: Path, tmp_path: Path) -> None:
    debug_dir = tmp_path / "debug"
    config = LocalizerConfig(debug_dir=debug_dir)

    extract_document(docs_dir / "hello.mdx", config)

    dumped = json.loads((debug_dir / "ast-hello.mdx.json").read_text(encoding="utf-8"))
    assert dumped["type"] == "root"


def test_missing_file_is_wrapped(tmp_path: Path, config: LocalizerConfig) -> None:
    with pytest.raises(DocumentProcessingError) as excinfo:
        extract_document(tmp_path / "missing.mdx", config)
    assert "missing.mdx" in str(excinfo.value)
    assert isinstance(excinfo.value.cause, OSError)


def test_update_round_trip(docs_dir: Path, tmp_path: Path, config: LocalizerConfig) -> None:
    """提取后只翻译文档标题，其余变更原样回填。"""
    extraction = extract_document(docs_dir / "guide.mdx", config)
    payload = extraction.payload.to_dict()
    for item in payload["strings"]:
        if item["notes"] == "title for document":
            item["text"] = "Erste Schritte"
    translated = tmp_path / "guide.de.json"
    translated.write_text(json.dumps(payload, ensure_ascii=False), encoding="utf-8")
    output = tmp_path / "de" / "guide.mdx"

    update_document(docs_dir / "guide.mdx", translated, config, output_path=output)

    result = output.read_text(encoding="utf-8")
    assert result.startswith("---\ntitle: Erste Schritte\nsidebar_position: 2\n---\n")
    assert 'import Intro from "../%%locale%%/_intro.mdx";' in result
    assert "Read the [install guide](/%%locale%%/install) before you begin." in result
    assert (docs_dir / "guide.mdx").read_text(encoding="utf-8") == SAMPLE_MDX


def test_update_with_emphasis(docs_dir: Path, tmp_path: Path, config: LocalizerConfig) -> None:
    translated = tmp_path / "hello.json"
    translated.write_text(
        json.dumps({"strings": [{"type": "content", "text": "texte monde", "start": 9, "end": 19}]}),
        encoding="utf-8",
    )

    target = update_document(
        docs_dir / "hello.mdx", translated, config, options=PatchOptions(emphasize=True)
    )

    assert target == docs_dir / "hello.mdx"
    assert target.read_text(encoding="utf-8") == "# Hello\n\nTEXTE..MONDE\n"


def test_update_rejects_bad_range(docs_dir: Path, tmp_path: Path, config: LocalizerConfig) -> None:
    translated = tmp_path / "hello.json"
    translated.write_text(json.dumps([{"text": "x", "start": 0, "end": 500}]), encoding="utf-8")

    with pytest.raises(DocumentProcessingError):
        update_document(docs_dir / "hello.mdx", translated, config)
    assert (docs_dir / "hello.mdx").read_text(encoding="utf-8") == "# Hello\n\nWorld text\n"


def test_default_job_name_in_ci(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("GITHUB_SHA", "abc123")
    monkeypatch.setenv("GITHUB_REF", "refs/heads/main")
    assert default_job_name() == "abc123 - refs/heads/main"


def test_default_job_name_locally(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("GITHUB_SHA", raising=False)
    monkeypatch.delenv("GITHUB_REF", raising=False)
    assert default_job_name().startswith("mdx-l10n ")


@pytest.mark.asyncio
async def test_upload_requires_credentials(docs_dir: Path, config: LocalizerConfig) -> None:
    with pytest.raises(ConfigurationError):
        await upload_documents([docs_dir / "guide.mdx"], config)


@pytest.mark.asyncio
async def test_upload_documents(docs_dir: Path, smartling_config: LocalizerConfig) -> None:
    paths: list[str] = []

    def handler(request: httpx.Request) -> httpx.Response:
        paths.append(request.url.path)
        data = {
            "accessToken": "token-1",
            "translationJobUid": "job-1",
            "batchUid": "batch-1",
        }
        return httpx.Response(200, json={"response": {"code": "SUCCESS", "data": data}})

    http_client = httpx.AsyncClient(
        base_url=smartling_config.smartling.base_url, transport=httpx.MockTransport(handler)
    )
    client = SmartlingClient(smartling_config, http_client=http_client)
    documents = [docs_dir / "guide.mdx", docs_dir / "hello.mdx"]

    extractions = await upload_documents(
        documents, smartling_config, job_name="Release", client=client
    )
    await http_client.aclose()

    assert [e.path for e in extractions] == documents
    assert paths == [
        "/auth-api/v2/authenticate",
        "/jobs-api/v3/projects/proj-1/jobs",
        "/job-batches-api/v2/projects/proj-1/batches",
        "/job-batches-api/v2/projects/proj-1/batches/batch-1/file",
        "/context-api/v2/projects/proj-1/contexts/upload-and-match-async",
        "/job-batches-api/v2/projects/proj-1/batches/batch-1/file",
        "/context-api/v2/projects/proj-1/contexts/upload-and-match-async",
    ]


@pytest.mark.asyncio
async def test_upload_extracts_before_any_request(
    tmp_path: Path, docs_dir: Path, smartling_config: LocalizerConfig
) -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise AssertionError("不应发起任何网络请求")

    http_client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    client = SmartlingClient(smartling_config, http_client=http_client)

    with pytest.raises(DocumentProcessingError):
        await upload_documents(
            [docs_dir / "guide.mdx", tmp_path / "missing.mdx"], smartling_config, client=client
        )
    await http_client.aclose()


def test_update_preserves_crlf_line_endings(tmp_path: Path, config: LocalizerConfig) -> None:
    source_path = tmp_path / "crlf.mdx"
    source_path.write_bytes(b"---\r\ntitle: Guide\r\n---\r\n\r\nWorld text\r\n")

    extraction = extract_document(source_path, config)
    payload = extraction.payload.to_dict()
    for item in payload["strings"]:
        item["text"] = {"Guide": "Leitfaden", "World text": "Welt Text"}[item["text"]]
    translated = tmp_path / "crlf.json"
    translated.write_text(json.dumps(payload), encoding="utf-8")

    update_document(source_path, translated, config)

    assert source_path.read_bytes() == b"---\r\ntitle: Leitfaden\r\n---\r\n\r\nWelt Text\r\n"
