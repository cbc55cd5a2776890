# tests/unit/extraction/test_frontmatter.py
"""针对 `extract_frontmatter` 的单元测试。"""

import pytest

from mdx_l10n.extraction import extract_frontmatter
from mdx_l10n.parsing import parse_document
from mdx_l10n.types import ChangeKind


def test_title_is_extracted_with_exact_offsets() -> None:
    source = "---\ntitle: Guide\n---\n\nBody"
    changes = extract_frontmatter(parse_document(source))

    assert len(changes) == 1
    change = changes[0]
    assert change.kind == ChangeKind.TITLE
    assert change.text == "Guide"
    assert source[change.start : change.end] == "Guide"
    assert change.notes == "title for document"


def test_title_on_later_line() -> None:
    source = "---\nsidebar_position: 2\ntitle:   Install the CLI  \n---\n"
    change = extract_frontmatter(parse_document(source))[0]

    assert change.text == "Install the CLI"
    assert source[change.start : change.end] == "Install the CLI"


@pytest.mark.parametrize("quoted", ['"Quoted: title"', "'Quoted: title'"])
def test_quotes_are_excluded_from_span(quoted: str) -> None:
    source = f"---\ntitle: {quoted}\n---\n"
    change = extract_frontmatter(parse_document(source))[0]

    assert change.text == "Quoted: title"
    assert source[change.start : change.end] == "Quoted: title"


def test_missing_frontmatter_returns_empty() -> None:
    assert extract_frontmatter(parse_document("# No metadata\n")) == []


def test_missing_title_returns_empty() -> None:
    source = "---\ndescription: nothing here\n---\n"
    assert extract_frontmatter(parse_document(source)) == []


def test_subtitle_key_is_not_a_title() -> None:
    source = "---\nsubtitle: Nope\n---\n"
    assert extract_frontmatter(parse_document(source)) == []


def test_crlf_frontmatter_offsets() -> None:
    source = "---\r\nsidebar_position: 2\r\ntitle: Guide\r\n---\r\n\r\nBody\r\n"
    change = extract_frontmatter(parse_document(source))[0]

    assert change.text == "Guide"
    assert source[change.start : change.end] == "Guide"
