# mdx_l10n/collector.py
"""
汇总三个提取器的结果：frontmatter、import 引用、正文，依次拼接。

结果按提取器顺序排列（各自内部保持文档顺序），并不按偏移排序。
"""

from typing import Optional

import structlog

from mdx_l10n.config import LocalizerConfig
from mdx_l10n.exceptions import InvalidRangeError, OverlappingChangesError
from mdx_l10n.extraction import extract_content, extract_frontmatter, extract_references
from mdx_l10n.tree import Node
from mdx_l10n.types import Change

log = structlog.get_logger(__name__)


def collect_changes(
    root: Node, source: str, config: Optional[LocalizerConfig] = None
) -> list[Change]:
    """对一棵语法树运行全部提取器。语法树会被就地修改，调用后应丢弃。"""
    config = config or LocalizerConfig()
    locale = config.default_locale
    placeholder = config.placeholder_name

    changes = [
        *extract_frontmatter(root),
        *extract_references(root, locale=locale, placeholder=placeholder),
        *extract_content(root, source, locale=locale, placeholder=placeholder),
    ]
    log.info("变更收集完成", total=len(changes))
    return changes


def validate_change_list(changes: list[Change], source: str) -> None:
    """
    校验变更列表可以安全回填到 `source`。

    Raises:
        InvalidRangeError: 某个区间超出文本范围或为空。
        OverlappingChangesError: 两个区间发生重叠。
    """
    for change in changes:
        if not change.span.is_valid_for(len(source)):
            raise InvalidRangeError(change.start, change.end)

    ordered = sorted(changes, key=lambda c: (c.start, c.end))
    for previous, current in zip(ordered, ordered[1:]):
        if previous.span.overlaps(current.span):
            raise OverlappingChangesError(
                (previous.start, previous.end), (current.start, current.end)
            )
