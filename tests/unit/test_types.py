# tests/unit/test_types.py
"""针对 `mdx_l10n.types` 中 Span 与 Change 的单元测试。"""

import pytest

from mdx_l10n.types import Change, ChangeKind, Span


def test_span_accepts_invalid_values_without_validation() -> None:
    """构造时不校验，回填器负责拒绝非法区间。"""
    span = Span(start=-1, end=-5)
    assert span.is_valid_for(10) is False


@pytest.mark.parametrize(
    "start, end, length, expected",
    [
        (0, 1, 1, True),
        (0, 10, 10, True),
        (-1, 3, 10, False),
        (3, 3, 10, False),
        (5, 11, 10, False),
    ],
)
def test_span_is_valid_for(start: int, end: int, length: int, expected: bool) -> None:
    assert Span(start=start, end=end).is_valid_for(length) is expected


def test_span_overlap_is_half_open() -> None:
    assert Span(start=0, end=5).overlaps(Span(start=4, end=6))
    assert not Span(start=0, end=5).overlaps(Span(start=5, end=6))


def test_change_payload_round_trip() -> None:
    change = Change(
        kind=ChangeKind.DIRECTIVE_LABEL,
        text="See also",
        span=Span(start=7, end=15),
        notes='title for the "tip" callout',
    )
    payload = change.to_payload()

    assert payload == {
        "type": "containerDirectiveLabel",
        "text": "See also",
        "start": 7,
        "end": 15,
        "notes": 'title for the "tip" callout',
    }
    assert Change.from_payload(payload) == change


def test_from_payload_defaults_to_content_block() -> None:
    change = Change.from_payload({"text": "x", "start": "3", "end": "4"})
    assert change.kind == ChangeKind.CONTENT_BLOCK
    assert change.span == Span(start=3, end=4)
    assert change.notes == ""


def test_with_text_keeps_span() -> None:
    change = Change(kind=ChangeKind.TITLE, text="Guide", span=Span(start=11, end=16))
    translated = change.with_text("指南")

    assert translated.text == "指南"
    assert translated.span == change.span
    assert change.text == "Guide"
