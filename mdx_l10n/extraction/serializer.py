# mdx_l10n/extraction/serializer.py
"""
将语法树节点序列化回 Markdown 文本。

序列化以源文本切片为基础：节点的原文区间中，每个带位置的子节点区域都被替换为
该子节点自身的序列化结果。这样未被修改的部分逐字保留，而被提取器就地修改过的
节点（例如改写了地址的链接）会按其当前属性重建。
"""

import re

from mdx_l10n.tree import Node, NodeType

# 链接标题以原文形式保存（保留转义序列），只需转义尚未转义的双引号
UNESCAPED_QUOTE_PATTERN = re.compile(r'(\\.)|"')


class MarkdownSerializer:
    def __init__(self, source: str) -> None:
        self.source = source

    def serialize(self, node: Node) -> str:
        if node.type == NodeType.LINK:
            return self._link(node)
        if node.type == NodeType.TEXT and node.span is None:
            return node.value or ""
        if node.type == NodeType.INLINE_CODE and node.span is None:
            return f"`{node.value or ''}`"
        if node.type == NodeType.CODE and node.span is None:
            lang = node.data.get("lang", "")
            return f"```{lang}\n{node.value or ''}\n```\n"
        return self._splice(node)

    def serialize_children(self, node: Node) -> str:
        return "".join(self.serialize(child) for child in node.children)

    def _splice(self, node: Node) -> str:
        if node.span is None:
            return self.serialize_children(node) if node.children else (node.value or "")

        start, end = node.span.start, node.span.end
        pieces: list[str] = []
        cursor = start
        for child in node.children:
            if child.span is None or child.span.start < cursor or child.span.end > end:
                continue
            pieces.append(self.source[cursor : child.span.start])
            pieces.append(self.serialize(child))
            cursor = child.span.end
        pieces.append(self.source[cursor:end])
        return "".join(pieces)

    def _link(self, node: Node) -> str:
        label = self.serialize_children(node)
        url = node.url or ""
        if node.data.get("angle"):
            url = f"<{url}>"
        if node.title is not None:
            title = UNESCAPED_QUOTE_PATTERN.sub(
                lambda m: m.group(1) or '\\"', node.title
            )
            return f'[{label}]({url} "{title}")'
        return f"[{label}]({url})"
