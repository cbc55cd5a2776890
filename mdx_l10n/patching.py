# mdx_l10n/patching.py
"""
将变更列表回填到原始文本。

变更按 `start` 从大到小依次应用。由于每次替换只影响当前区间及其之后的文本，
尚未应用的变更（都位于更靠前的位置）所记录的偏移在应用时仍然有效，
即使替换文本的长度与原区间不同。
"""

from typing import Callable, Optional

import structlog
from pydantic import BaseModel

from mdx_l10n.exceptions import InvalidRangeError, OverlappingChangesError
from mdx_l10n.types import Change

log = structlog.get_logger(__name__)

Transform = Callable[[str], str]


class PatchOptions(BaseModel):
    emphasize: bool = False


def emphasize(text: str) -> str:
    """调试用：大写并把空格替换为 `..`，使回填结果一目了然。"""
    return text.upper().replace(" ", "..")


def transform_for(options: Optional[PatchOptions]) -> Optional[Transform]:
    if options is not None and options.emphasize:
        return emphasize
    return None


def replace_span(text: str, change: Change, transform: Optional[Transform] = None) -> str:
    start, end = change.start, change.end
    if start < 0 or end > len(text) or start >= end:
        raise InvalidRangeError(start, end)
    replacement = transform(change.text) if transform else change.text
    return text[:start] + replacement + text[end:]


def apply_changes(
    content: str, changes: list[Change], transform: Optional[Transform] = None
) -> str:
    """
    将全部变更应用到 `content`，返回新文本。

    所有区间在应用前统一校验，任何一个非法都不会产生部分替换的结果。

    Raises:
        InvalidRangeError: 区间越界或为空。
        OverlappingChangesError: 两个区间重叠。
    """
    for change in changes:
        if not change.span.is_valid_for(len(content)):
            raise InvalidRangeError(change.start, change.end)

    ordered = sorted(changes, key=lambda c: c.start, reverse=True)
    for later, earlier in zip(ordered, ordered[1:]):
        if earlier.span.overlaps(later.span):
            raise OverlappingChangesError(
                (earlier.start, earlier.end), (later.start, later.end)
            )

    result = content
    for change in ordered:
        result = replace_span(result, change, transform)
    log.debug("回填完成", count=len(changes), length=len(result))
    return result
