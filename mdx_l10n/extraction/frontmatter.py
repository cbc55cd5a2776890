# mdx_l10n/extraction/frontmatter.py
"""从文档开头的 YAML 元数据块中提取 `title` 字段。"""

import re

import structlog

from mdx_l10n.tree import Node, NodeType
from mdx_l10n.types import Change, ChangeKind, Span

log = structlog.get_logger(__name__)

# 语法树中 yaml 节点的内容不包含开头的分隔行；缺少 valueStart 时按 LF 分隔行推算
FRONTMATTER_DELIMITER = "---\n"
TITLE_PATTERN = re.compile(r"^(title:[ \t]*)(.+?)[ \t\r]*$", re.MULTILINE)
QUOTES = ("'", '"')


def extract_frontmatter(root: Node) -> list[Change]:
    frontmatter = root.find_child(NodeType.YAML)
    if frontmatter is None:
        log.info("未找到 frontmatter 元数据块")
        return []

    match = TITLE_PATTERN.search(frontmatter.value or "")
    if match is None:
        log.info("frontmatter 中没有 title 字段")
        return []

    value_start = match.start(2)
    value = match.group(2)
    if len(value) >= 2 and value[0] in QUOTES and value[-1] == value[0]:
        value_start += 1
        value = value[1:-1]
    if not value:
        log.info("frontmatter 中的 title 为空")
        return []

    block_start = frontmatter.data.get(
        "valueStart", frontmatter.require_span().start + len(FRONTMATTER_DELIMITER)
    )
    start = block_start + value_start
    log.info("已提取文档标题", title=value)
    return [
        Change(
            kind=ChangeKind.TITLE,
            text=value,
            span=Span(start=start, end=start + len(value)),
            notes="title for document",
        )
    ]
