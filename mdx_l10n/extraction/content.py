# mdx_l10n/extraction/content.py
"""
正文提取：按节点类型分派的递归遍历。

遍历从根节点的一组顶层块类型开始，每种节点类型对应一个处理函数：
- 容器类节点（列表、列表项、表格、表格行）不产生自身的变更，而是把每个子节点当作顶层节点处理（扁平化）；
- 段落、标题、表格单元格把所有子节点序列化为一个字符串，作为顶层节点时产生一个正文块变更；
- 指令容器先提取标题，再把剩余子节点序列化为正文块；
- 链接只就地改写地址，改动通过所在块的重建文本带出；
- 其余类型一律忽略。

语法树在一次遍历中归本遍历器独占，所有就地修改都发生在读取对应区域之前。
"""

from dataclasses import dataclass, field
from typing import Callable, Optional, Union

import structlog

from mdx_l10n.extraction.serializer import MarkdownSerializer
from mdx_l10n.tree import Node, NodeType
from mdx_l10n.types import Change, ChangeKind, Span
from mdx_l10n.utils import DEFAULT_PLACEHOLDER_NAME, chomp, localize_url

log = structlog.get_logger(__name__)

TOP_LEVEL_NODE_TYPES = frozenset(
    {
        NodeType.CONTAINER_DIRECTIVE,
        NodeType.HEADING,
        NodeType.IMAGE,
        NodeType.LIST,
        NodeType.JSX_FLOW_ELEMENT,
        NodeType.PARAGRAPH,
        NodeType.TABLE,
    }
)

Handler = Callable[[Node, bool], list[Change]]


@dataclass
class _Segment:
    """正文块的累积状态：重建文本与首尾子节点的位置。"""

    pieces: list[str] = field(default_factory=list)
    start: Optional[int] = None
    end: Optional[int] = None

    def add(self, text: str, span: Span) -> None:
        if self.start is None:
            self.start = span.start
        self.end = span.end
        self.pieces.append(text)

    @property
    def text(self) -> str:
        return "".join(self.pieces)


class ContentWalker:
    def __init__(
        self,
        serializer: MarkdownSerializer,
        locale: str = "en-US",
        placeholder: str = DEFAULT_PLACEHOLDER_NAME,
    ) -> None:
        self.serializer = serializer
        self.locale = locale
        self.placeholder = placeholder
        self._handlers: dict[str, Handler] = {
            NodeType.LINK: self._visit_link,
            NodeType.JSX_FLOW_ELEMENT: self._visit_jsx_element,
            NodeType.IMAGE: self._visit_image,
            NodeType.LIST: self._visit_flattened,
            NodeType.LIST_ITEM: self._visit_flattened,
            NodeType.TABLE: self._visit_flattened,
            NodeType.TABLE_ROW: self._visit_flattened,
            NodeType.HEADING: self._visit_block,
            NodeType.PARAGRAPH: self._visit_block,
            NodeType.TABLE_CELL: self._visit_block,
            NodeType.CONTAINER_DIRECTIVE: self._visit_directive,
        }
        self._jsx_handlers: dict[str, Handler] = {
            "RelativeLink": self._visit_relative_link,
            "AccordionItem": self._visit_accordion_item,
        }

    def walk(self, root: Node) -> list[Change]:
        changes: list[Change] = []
        for node in root.children:
            if node.type in TOP_LEVEL_NODE_TYPES:
                log.debug("解析顶层节点", node_type=node.type)
                changes.extend(self.visit(node, root=True))
        log.info("正文解析完成", count=len(changes))
        return changes

    def visit(self, node: Node, root: bool = False) -> list[Change]:
        handler = self._handlers.get(node.type)
        if handler is None:
            return []
        if node.children:
            # 包含可本地化内容的节点必须带有位置信息
            node.require_span()
        return handler(node, root)

    # ------------------------------------------------------------------
    # 各类型的处理函数
    # ------------------------------------------------------------------

    def _visit_link(self, node: Node, root: bool) -> list[Change]:
        if node.url is not None:
            node.url = localize_url(node.url, self.locale, self.placeholder)
        return []

    def _visit_image(self, node: Node, root: bool) -> list[Change]:
        # 图片地址不做本地化
        return []

    def _visit_jsx_element(self, node: Node, root: bool) -> list[Change]:
        handler = self._jsx_handlers.get(node.name or "")
        if handler is None:
            return []
        return handler(node, root)

    def _visit_relative_link(self, node: Node, root: bool) -> list[Change]:
        return self._attribute_change("title", node)

    def _visit_accordion_item(self, node: Node, root: bool) -> list[Change]:
        changes = self._attribute_change("title", node)
        changes.extend(self._visit_flattened(node, root))
        return changes

    def _visit_flattened(self, node: Node, root: bool) -> list[Change]:
        changes: list[Change] = []
        for child in node.children:
            changes.extend(self.visit(child, root=True))
        return changes

    def _visit_block(self, node: Node, root: bool) -> list[Change]:
        return self._emit(self._reconstruct(node.children), emit_segments=root)

    def _visit_directive(self, node: Node, root: bool) -> list[Change]:
        changes: list[Change] = []
        name = node.name or ""

        first = node.children[0] if node.children else None
        if first is not None and first.data.get("directiveLabel"):
            span = first.require_span()
            for child in first.children:
                self.visit(child)
            changes.append(
                Change(
                    kind=ChangeKind.DIRECTIVE_LABEL,
                    text=chomp(self.serializer.serialize_children(first)),
                    # 去掉两侧的方括号
                    span=Span(start=span.start + 1, end=span.end - 1),
                    notes=f'title for the "{name}" callout',
                )
            )
            node.children = node.children[1:]

        items = self._reconstruct(node.children)
        changes.extend(
            self._emit(items, emit_segments=True, notes=f'content for the "{name}" callout')
        )
        return changes

    # ------------------------------------------------------------------
    # 重建
    # ------------------------------------------------------------------

    def _reconstruct(self, children: list[Node]) -> list[Union[Change, _Segment]]:
        """
        按文档顺序累积子节点的序列化文本。

        自身产生了变更的子节点（被扁平化的列表、JSX 元素、嵌套指令等）不计入累积文本，
        并把累积结果切分为多个片段，从而保证正文块的区间与这些变更互不重叠。
        返回按文档顺序排列的变更与片段。
        """
        items: list[Union[Change, _Segment]] = []
        current = _Segment()

        for child in children:
            emitted = self.visit(child)
            if emitted or child.type == NodeType.LIST:
                if current.pieces:
                    items.append(current)
                    current = _Segment()
                items.extend(emitted)
                continue

            text = chomp(self.serializer.serialize(child))
            if child.type == NodeType.CODE:
                text = "\n" + text
            current.add(text, child.require_span())

        if current.pieces:
            items.append(current)
        return items

    def _emit(
        self, items: list[Union[Change, _Segment]], emit_segments: bool, notes: str = ""
    ) -> list[Change]:
        changes: list[Change] = []
        for item in items:
            if isinstance(item, Change):
                changes.append(item)
            elif emit_segments and item.start is not None and item.end is not None:
                if item.end > item.start:
                    changes.append(
                        Change(
                            kind=ChangeKind.CONTENT_BLOCK,
                            text=item.text,
                            span=Span(start=item.start, end=item.end),
                            notes=notes,
                        )
                    )
        return changes

    def _attribute_change(self, name: str, node: Node) -> list[Change]:
        attribute = node.attribute(name)
        if attribute is None or attribute.value_span is None or not attribute.value:
            log.error(f"{node.name} 缺少 {name} 属性", element=node.name, attribute=name)
            return []
        return [
            Change(
                kind=ChangeKind.TITLE,
                text=attribute.value,
                span=attribute.value_span,
                notes=f"'{name}' attribute for {node.name}",
            )
        ]


def extract_content(
    root: Node,
    source: str,
    locale: str = "en-US",
    placeholder: str = DEFAULT_PLACEHOLDER_NAME,
) -> list[Change]:
    walker = ContentWalker(MarkdownSerializer(source), locale=locale, placeholder=placeholder)
    return walker.walk(root)
