# mdx_l10n/tree.py
"""
带位置信息的文档语法树。

节点类型沿用 mdast 的命名（paragraph、listItem、containerDirective ...），
每个节点可携带一个指向原始文本的 `Span`。语法树在一次提取过程中归提取器独占，
提取器可以就地修改它（改写链接地址、移除指令标题子节点），提取结束后即被丢弃。
"""

from dataclasses import dataclass, field
from typing import Any, Optional

from mdx_l10n.exceptions import MissingPositionError
from mdx_l10n.types import Span


class NodeType:
    """语法树中出现的节点类型名。"""

    ROOT = "root"
    YAML = "yaml"
    MDX_ESM = "mdxjsEsm"
    IMPORT_DECLARATION = "importDeclaration"
    HEADING = "heading"
    PARAGRAPH = "paragraph"
    TEXT = "text"
    LINK = "link"
    IMAGE = "image"
    INLINE_CODE = "inlineCode"
    CODE = "code"
    LIST = "list"
    LIST_ITEM = "listItem"
    TABLE = "table"
    TABLE_ROW = "tableRow"
    TABLE_CELL = "tableCell"
    CONTAINER_DIRECTIVE = "containerDirective"
    JSX_FLOW_ELEMENT = "mdxJsxFlowElement"
    BLOCKQUOTE = "blockquote"
    HTML = "html"
    THEMATIC_BREAK = "thematicBreak"


@dataclass
class JsxAttribute:
    """JSX 元素上的一个字符串属性，例如 `title="Guide"`。"""

    name: str
    value: str
    span: Optional[Span] = None
    value_span: Optional[Span] = None


@dataclass
class Node:
    type: str
    children: list["Node"] = field(default_factory=list)
    span: Optional[Span] = None
    value: Optional[str] = None
    name: Optional[str] = None
    attributes: list[JsxAttribute] = field(default_factory=list)
    url: Optional[str] = None
    title: Optional[str] = None
    depth: Optional[int] = None
    data: dict[str, Any] = field(default_factory=dict)

    def require_span(self) -> Span:
        """返回节点的位置；缺失时抛出 MissingPositionError。"""
        if self.span is None:
            raise MissingPositionError(self.type)
        return self.span

    def find_child(self, node_type: str) -> Optional["Node"]:
        return next((c for c in self.children if c.type == node_type), None)

    def attribute(self, name: str) -> Optional[JsxAttribute]:
        return next((a for a in self.attributes if a.name == name), None)

    def to_dict(self) -> dict[str, Any]:
        """转换为可 JSON 序列化的字典，用于调试输出。"""
        result: dict[str, Any] = {"type": self.type}
        for key in ("name", "value", "url", "title", "depth"):
            value = getattr(self, key)
            if value is not None:
                result[key] = value
        if self.attributes:
            result["attributes"] = [
                {
                    "name": a.name,
                    "value": a.value,
                    "position": _span_dict(a.value_span),
                }
                for a in self.attributes
            ]
        if self.data:
            result["data"] = self.data
        if self.span is not None:
            result["position"] = _span_dict(self.span)
        if self.children:
            result["children"] = [c.to_dict() for c in self.children]
        return result


def _span_dict(span: Optional[Span]) -> Optional[dict[str, int]]:
    if span is None:
        return None
    return {"start": span.start, "end": span.end}
