# tests/unit/extraction/test_content.py
"""针对正文遍历器 `ContentWalker` 的单元测试。"""

import pytest
from pytest_mock import MockerFixture

from mdx_l10n.exceptions import MissingPositionError
from mdx_l10n.extraction import ContentWalker, MarkdownSerializer, extract_content
from mdx_l10n.extraction import content as content_module
from mdx_l10n.parsing import parse_document
from mdx_l10n.tree import JsxAttribute, NodeType
from mdx_l10n.types import Change, ChangeKind
from tests.helpers.documents import jsx, node, span, text


def _extract(source: str) -> list[Change]:
    return extract_content(parse_document(source), source)


def _assert_disjoint(changes: list[Change], source: str) -> None:
    ordered = sorted(changes, key=lambda c: c.start)
    for change in ordered:
        assert 0 <= change.start < change.end <= len(source)
    for previous, current in zip(ordered, ordered[1:]):
        assert previous.end <= current.start


def test_heading_and_paragraph_become_content_blocks() -> None:
    source = "# Hello\n\nWorld text"
    changes = _extract(source)

    assert [c.kind for c in changes] == [ChangeKind.CONTENT_BLOCK] * 2
    heading, paragraph = changes
    assert heading.text == "Hello"
    assert source[heading.start : heading.end] == "Hello"
    assert paragraph.text == "World text"
    assert source[paragraph.start : paragraph.end] == "World text"


def test_link_target_is_rewritten_without_own_change() -> None:
    source = "Read the [install guide](/en/install) first."
    changes = _extract(source)

    assert len(changes) == 1
    assert changes[0].text == "Read the [install guide](/%%locale%%/install) first."
    assert source[changes[0].start : changes[0].end] == source


def test_list_items_are_flattened() -> None:
    source = "- First\n- Second\n  - Nested\n"
    changes = _extract(source)

    assert [c.text for c in changes] == ["First", "Second", "Nested"]
    _assert_disjoint(changes, source)


def test_table_cells_are_flattened() -> None:
    source = "| A | B |\n| - | - |\n| one | two |\n"
    changes = _extract(source)

    assert [c.text for c in changes] == ["A", "B", "one", "two"]
    assert all(c.kind == ChangeKind.CONTENT_BLOCK for c in changes)


def test_directive_label_and_body() -> None:
    source = ":::tip[See also]\nRead the [guide](/en/guide).\n:::\n"
    label, body = _extract(source)

    assert label.kind == ChangeKind.DIRECTIVE_LABEL
    assert label.text == "See also"
    assert source[label.start : label.end] == "See also"
    assert label.notes == 'title for the "tip" callout'

    assert body.kind == ChangeKind.CONTENT_BLOCK
    assert body.text == "Read the [guide](/%%locale%%/guide)."
    assert source[body.start : body.end] == "Read the [guide](/en/guide)."
    assert body.notes == 'content for the "tip" callout'


def test_directive_label_child_is_removed_from_tree() -> None:
    source = ":::tip[Label]\nBody.\n:::\n"
    root = parse_document(source)
    extract_content(root, source)

    directive = root.children[0]
    assert [c.type for c in directive.children] == [NodeType.PARAGRAPH]
    assert not directive.children[0].data.get("directiveLabel")


def test_directive_children_are_concatenated() -> None:
    """指令正文的多个子节点按顺序直接拼接，代码块前插入一个换行。"""
    source = ":::warning\nFirst.\n\nRun this:\n\n```sh\nmake\n```\n:::\n"
    changes = _extract(source)

    assert len(changes) == 1
    body = changes[0]
    assert body.text == "First.Run this:\n```sh\nmake\n```"
    assert source[body.start : body.end] == "First.\n\nRun this:\n\n```sh\nmake\n```"


def test_directive_with_only_label_emits_no_content_block() -> None:
    source = ":::note[Heads up]\n:::\n"
    changes = _extract(source)

    assert [c.kind for c in changes] == [ChangeKind.DIRECTIVE_LABEL]


def test_list_inside_directive_splits_body() -> None:
    """指令内的列表被扁平化，正文块在列表两侧分段，保证区间互不重叠。"""
    source = ":::note\nIntro text.\n\n- a\n- b\n\nOutro text.\n:::\n"
    changes = _extract(source)

    assert [c.text for c in changes] == ["Intro text.", "a", "b", "Outro text."]
    assert changes[0].notes == 'content for the "note" callout'
    assert changes[1].notes == ""
    _assert_disjoint(changes, source)


def test_relative_link_title_attribute() -> None:
    source = '<RelativeLink href="/en/next" title="Next steps" />\n'
    changes = _extract(source)

    assert len(changes) == 1
    change = changes[0]
    assert change.kind == ChangeKind.TITLE
    assert change.text == "Next steps"
    assert source[change.start : change.end] == "Next steps"
    assert change.notes == "'title' attribute for RelativeLink"


def test_accordion_item_title_and_flattened_children() -> None:
    source = (
        '<AccordionItem title="More details">\n\n'
        "Hidden paragraph.\n\n"
        "- item one\n\n"
        "</AccordionItem>\n"
    )
    changes = _extract(source)

    assert [(c.kind, c.text) for c in changes] == [
        (ChangeKind.TITLE, "More details"),
        (ChangeKind.CONTENT_BLOCK, "Hidden paragraph."),
        (ChangeKind.CONTENT_BLOCK, "item one"),
    ]
    _assert_disjoint(changes, source)


def test_unknown_jsx_element_is_ignored() -> None:
    source = '<Tabs title="Not extracted" />\n'
    assert _extract(source) == []


def test_missing_title_attribute_is_logged_and_skipped(mocker: MockerFixture) -> None:
    source = '<RelativeLink href="/en/next" />\n\nStill extracted.\n'
    mock_log = mocker.patch.object(content_module, "log")
    changes = _extract(source)

    assert [c.text for c in changes] == ["Still extracted."]
    mock_log.error.assert_called_once()


def test_image_and_unlisted_kinds_are_ignored() -> None:
    source = "> quoted text\n\n---\n\n```\ncode\n```\n"
    assert _extract(source) == []


def test_image_in_paragraph_is_not_localized() -> None:
    source = "![Diagram](/en/diagram.png)\n"
    changes = _extract(source)
    assert [c.text for c in changes] == ["![Diagram](/en/diagram.png)"]


def test_top_level_image_node_is_a_noop() -> None:
    root = node(NodeType.ROOT, node(NodeType.IMAGE, url="/en/a.png", span=span(0, 10)))
    assert ContentWalker(MarkdownSerializer("x" * 10)).walk(root) == []


def test_missing_span_on_content_node_is_fatal() -> None:
    root = node(NodeType.ROOT, node(NodeType.PARAGRAPH, text("Hello", 0)))
    with pytest.raises(MissingPositionError):
        ContentWalker(MarkdownSerializer("Hello")).walk(root)


def test_missing_span_on_child_is_fatal() -> None:
    root = node(NodeType.ROOT, node(NodeType.PARAGRAPH, text("Hello"), span=span(0, 5)))
    with pytest.raises(MissingPositionError):
        ContentWalker(MarkdownSerializer("Hello")).walk(root)


def test_expression_title_attribute_is_skipped() -> None:
    source = "0123456789"
    element = jsx("RelativeLink", span=span(0, 10))
    element.attributes.append(JsxAttribute(name="title", value="{t}"))
    root = node(NodeType.ROOT, element)
    assert ContentWalker(MarkdownSerializer(source)).walk(root) == []


def test_handcrafted_relative_link_uses_value_span() -> None:
    source = '<RelativeLink title="Hi" />'
    element = jsx("RelativeLink", {"title": ("Hi", 21)}, span=span(0, len(source)))
    changes = ContentWalker(MarkdownSerializer(source)).walk(node(NodeType.ROOT, element))

    assert [(c.start, c.end, c.text) for c in changes] == [(21, 23, "Hi")]
