# mdx_l10n/parsing/parser.py
"""
负责将 MDX 文本解析为带位置信息的语法树。

本解析器复用 markdown-it-py 的块级解析结果：
1.  使用 markdown-it-py（commonmark + 表格 + front matter + 容器指令）得到 token 流；
2.  利用 token 的 `map` 属性（行号范围）结合 `LineIndex` 换算出块节点在原文中的精确偏移；
3.  对段落、标题、表格单元格，先定位其行内内容在原文中的区域，再交给行内扫描器切分子节点；
4.  最后在兄弟节点序列上识别 MDX 扩展：顶层 import 语句、以大写字母开头的 JSX 流式元素。
"""

import re
from typing import Optional

import structlog
from markdown_it import MarkdownIt
from markdown_it.token import Token
from mdit_py_plugins.container import container_plugin
from mdit_py_plugins.front_matter import front_matter_plugin

from mdx_l10n.parsing.inline import scan_inline
from mdx_l10n.parsing.lines import LineIndex
from mdx_l10n.parsing.mdx import (
    JSX_NAME_PATTERN,
    closing_tag_pattern,
    is_esm,
    scan_imports,
    scan_jsx_tag,
)
from mdx_l10n.tree import Node, NodeType
from mdx_l10n.types import Span

log = structlog.get_logger(__name__)

DIRECTIVE_TOKEN = "directive"
DIRECTIVE_INFO_PATTERN = re.compile(r"^\s*([A-Za-z][\w-]*)")
DIRECTIVE_LINE_PATTERN = re.compile(r"^([ \t]*:{3,}[ \t]*)([A-Za-z][\w-]*)(\[(.*)\])?")
ATX_MARKER_PATTERN = re.compile(r"^[ \t]*#{1,6}")


def _validate_directive(params: str, *args: object) -> bool:
    return DIRECTIVE_INFO_PATTERN.match(params) is not None


def create_markdown_parser() -> MarkdownIt:
    """创建解析与渲染共用的 MarkdownIt 实例。"""
    md = MarkdownIt("commonmark", {"html": True}).enable("table")
    md.use(front_matter_plugin)
    md.use(container_plugin, name=DIRECTIVE_TOKEN, validate=_validate_directive)
    return md


def parse_document(source: str, md: Optional[MarkdownIt] = None) -> Node:
    """将完整文档解析为根节点。"""
    md = md or create_markdown_parser()
    converter = _BlockConverter(source, md, 0, len(source), top_level=True)
    root = Node(
        type=NodeType.ROOT,
        children=converter.convert(),
        span=Span(start=0, end=len(source)) if source else None,
    )
    log.debug("文档解析完成", node_count=len(root.children))
    return root


class _BlockConverter:
    """把 `source[start:end]` 的 token 流转换为节点列表。片段解析会创建新的实例。"""

    def __init__(
        self, source: str, md: MarkdownIt, start: int, end: int, top_level: bool = False
    ) -> None:
        self.source = source
        self.md = md
        self.start = start
        self.end = end
        self.top_level = top_level
        self.lines = LineIndex(source[start:end], base=start)

    def convert(self) -> list[Node]:
        tokens = self.md.parse(self.source[self.start : self.end])
        nodes = self._convert_range(tokens, 0, len(tokens))
        return self._fold_jsx(nodes)

    # ------------------------------------------------------------------
    # token 流 → 节点
    # ------------------------------------------------------------------

    def _convert_range(self, tokens: list[Token], begin: int, end: int) -> list[Node]:
        nodes: list[Node] = []
        i = begin
        while i < end:
            close = _find_close(tokens, i, end)
            node = self._convert_block(tokens, i, close)
            if node is not None:
                nodes.append(node)
            i = close + 1
        return nodes

    def _convert_block(self, tokens: list[Token], i: int, close: int) -> Optional[Node]:
        token = tokens[i]
        kind = token.type

        if kind == "front_matter":
            return self._front_matter(token)
        if kind == "heading_open":
            return self._heading(token, tokens[i + 1])
        if kind == "paragraph_open":
            return self._paragraph(token, tokens[i + 1])
        if kind in ("bullet_list_open", "ordered_list_open"):
            return self._container(NodeType.LIST, token, tokens, i, close, ordered=kind == "ordered_list_open")
        if kind == "list_item_open":
            item = self._container(NodeType.LIST_ITEM, token, tokens, i, close)
            item.children = self._fold_jsx(item.children)
            return item
        if kind == "blockquote_open":
            return self._container(NodeType.BLOCKQUOTE, token, tokens, i, close)
        if kind == "table_open":
            return self._table(token, tokens, i, close)
        if kind == f"container_{DIRECTIVE_TOKEN}_open":
            return self._directive(token, tokens, i, close)
        if kind in ("fence", "code_block"):
            return Node(
                type=NodeType.CODE,
                value=token.content,
                span=self._block_span(token),
                data={"lang": token.info.strip()} if token.info.strip() else {},
            )
        if kind == "html_block":
            span = self._block_span(token)
            return Node(
                type=NodeType.HTML,
                value=span.slice(self.source) if span else token.content,
                span=span,
            )
        if kind == "hr":
            return Node(type=NodeType.THEMATIC_BREAK, span=self._block_span(token))
        return None

    def _block_span(self, token: Token, closing_line: bool = False) -> Optional[Span]:
        if not token.map:
            return None
        first, last = token.map
        if closing_line and last < len(self.lines):
            last += 1
        start, end = self.lines.block_bounds(first, last)
        return Span(start=start, end=end)

    def _front_matter(self, token: Token) -> Optional[Node]:
        if not token.map:
            return None
        first, last = token.map
        value_first, value_last = first + 1, last - 2
        if value_last >= value_first:
            value = self.source[self.lines.start(value_first) : self.lines.end(value_last)]
        else:
            value = ""
        return Node(
            type=NodeType.YAML,
            value=value,
            # 分隔行可能以 CRLF 结尾，取值的起点直接由行索引给出
            data={"valueStart": self.lines.start(value_first)},
            span=Span(start=self.lines.start(first), end=self.lines.end(last - 1)),
        )

    def _heading(self, token: Token, inline: Token) -> Node:
        node = Node(
            type=NodeType.HEADING,
            depth=int(token.tag[1]),
            span=self._block_span(token),
            data={"setext": not token.markup.startswith("#")},
        )
        region = self._heading_region(token, inline)
        if region is not None:
            node.children = scan_inline(self.source, *region)
        return node

    def _paragraph(self, token: Token, inline: Token) -> Node:
        region = self._paragraph_region(inline)
        if region is None:
            return Node(type=NodeType.PARAGRAPH)

        start, end = region
        if self.top_level and token.level == 0 and is_esm(self.source[start:end]):
            return Node(
                type=NodeType.MDX_ESM,
                value=self.source[start:end],
                span=Span(start=start, end=end),
                children=[
                    Node(type=NodeType.IMPORT_DECLARATION, value=raw, span=span)
                    for raw, span in scan_imports(self.source, start, end)
                ],
            )
        return Node(
            type=NodeType.PARAGRAPH,
            span=Span(start=start, end=end),
            children=scan_inline(self.source, start, end),
        )

    def _container(
        self,
        node_type: str,
        token: Token,
        tokens: list[Token],
        i: int,
        close: int,
        ordered: bool = False,
    ) -> Node:
        node = Node(
            type=node_type,
            span=self._block_span(token),
            children=self._convert_range(tokens, i + 1, close),
        )
        if node_type == NodeType.LIST:
            node.data["ordered"] = ordered
        return node

    def _table(self, token: Token, tokens: list[Token], i: int, close: int) -> Node:
        table = Node(type=NodeType.TABLE, span=self._block_span(token))
        row: Optional[Node] = None
        cells: list[tuple[int, int]] = []
        cell_index = 0
        for j in range(i + 1, close):
            current = tokens[j]
            if current.type == "tr_open":
                row = Node(type=NodeType.TABLE_ROW, span=self._block_span(current))
                table.children.append(row)
                cells = self._cell_regions(current.map[0]) if current.map else []
                cell_index = 0
            elif current.type == "inline" and row is not None:
                cell = Node(type=NodeType.TABLE_CELL)
                if cell_index < len(cells):
                    start, end = cells[cell_index]
                    if end > start:
                        cell.span = Span(start=start, end=end)
                        cell.children = scan_inline(self.source, start, end)
                row.children.append(cell)
                cell_index += 1
        return table

    def _directive(self, token: Token, tokens: list[Token], i: int, close: int) -> Node:
        match = DIRECTIVE_INFO_PATTERN.match(token.info)
        node = Node(
            type=NodeType.CONTAINER_DIRECTIVE,
            name=match.group(1) if match else token.info.strip(),
            span=self._block_span(token, closing_line=True),
        )
        label = self._directive_label(token)
        if label is not None:
            node.children.append(label)
        node.children.extend(self._fold_jsx(self._convert_range(tokens, i + 1, close)))
        return node

    # ------------------------------------------------------------------
    # 行内区域定位
    # ------------------------------------------------------------------

    def _paragraph_region(self, inline: Token) -> Optional[tuple[int, int]]:
        if not inline.map or not inline.content:
            return None
        first, last = inline.map
        content_lines = inline.content.split("\n")
        if len(content_lines) != last - first:
            log.debug("行内内容与行号范围不一致，回退到整行定位", map=inline.map)
            return self.lines.block_bounds(first, last)

        start = self._line_offset(first, content_lines[0], is_last=len(content_lines) == 1)
        last_line = last - 1
        end = self._line_offset(last_line, content_lines[-1], is_last=True) + len(content_lines[-1])
        return start, max(start, end)

    def _line_offset(self, line: int, content: str, is_last: bool) -> int:
        """行内内容是源行（去除块缩进/引用前缀后）的后缀，据此反推其起点。"""
        text = self.lines.line(line)
        if is_last:
            text = text.rstrip(" \t")
        if text.endswith(content):
            return self.lines.start(line) + len(text) - len(content)
        core = content.strip()
        found = text.find(core) if core else -1
        if found == -1:
            found = len(text) - len(content.lstrip())
        return self.lines.start(line) + max(found, 0)

    def _heading_region(self, token: Token, inline: Token) -> Optional[tuple[int, int]]:
        if not inline.content:
            return None
        if not token.markup.startswith("#"):
            return self._paragraph_region(inline)
        if not token.map:
            return None
        line = token.map[0]
        text = self.lines.line(line)
        marker = ATX_MARKER_PATTERN.match(text)
        found = text.find(inline.content, marker.end() if marker else 0)
        if found == -1:
            return None
        start = self.lines.start(line) + found
        return start, start + len(inline.content)

    def _cell_regions(self, line: int) -> list[tuple[int, int]]:
        """按未转义的竖线切分表格行，返回每个单元格去除空白后的区域。"""
        text = self.lines.line(line)
        base = self.lines.start(line)
        bounds: list[tuple[int, int]] = []
        cell_start = 0
        escaped = False
        for pos, char in enumerate(text):
            if char == "|" and not escaped:
                bounds.append((cell_start, pos))
                cell_start = pos + 1
            escaped = char == "\\" and not escaped
        bounds.append((cell_start, len(text)))

        if bounds and not text[bounds[0][0] : bounds[0][1]].strip():
            bounds.pop(0)
        if bounds and not text[bounds[-1][0] : bounds[-1][1]].strip():
            bounds.pop()

        regions = []
        for start, end in bounds:
            cell = text[start:end]
            lead = len(cell) - len(cell.lstrip())
            trail = len(cell) - len(cell.rstrip())
            regions.append((base + start + lead, base + max(start + lead, end - trail)))
        return regions

    def _directive_label(self, token: Token) -> Optional[Node]:
        if not token.map:
            return None
        line = token.map[0]
        match = DIRECTIVE_LINE_PATTERN.match(self.lines.line(line))
        if match is None or match.group(3) is None or not match.group(4).strip():
            return None
        base = self.lines.start(line)
        inner_start, inner_end = base + match.start(4), base + match.end(4)
        return Node(
            type=NodeType.PARAGRAPH,
            span=Span(start=base + match.start(3), end=base + match.end(3)),
            children=scan_inline(self.source, inner_start, inner_end),
            data={"directiveLabel": True},
        )

    # ------------------------------------------------------------------
    # JSX 流式元素
    # ------------------------------------------------------------------

    def _fold_jsx(self, nodes: list[Node]) -> list[Node]:
        """将兄弟节点序列中的 JSX 开始/结束标签折叠为 mdxJsxFlowElement。"""
        result: list[Node] = []
        i = 0
        while i < len(nodes):
            node = nodes[i]
            element, consumed = self._jsx_element(nodes, i)
            if element is None:
                result.append(node)
                i += 1
            else:
                result.append(element)
                i += consumed
        return result

    def _jsx_element(self, nodes: list[Node], i: int) -> tuple[Optional[Node], int]:
        node = nodes[i]
        if node.type != NodeType.HTML or node.span is None:
            return None, 0
        html_start, html_end = node.span.start, node.span.end
        if not JSX_NAME_PATTERN.match(self.source, html_start, html_end):
            return None, 0
        tag = scan_jsx_tag(self.source, html_start, html_end)
        if tag is None:
            return None, 0

        element = Node(
            type=NodeType.JSX_FLOW_ELEMENT,
            name=tag.name,
            attributes=tag.attributes,
            span=tag.span,
        )
        if tag.self_closing:
            return element, 1

        closing = closing_tag_pattern(tag.name)
        # 1. 开始与结束标签位于同一个 HTML 块内
        same_block = closing.search(self.source, tag.span.end, html_end)
        if same_block is not None:
            element.children = self._parse_fragment(tag.span.end, same_block.start())
            element.span = Span(start=html_start, end=same_block.end())
            return element, 1

        # 2. 结束标签位于后续的某个兄弟 HTML 块中，同名元素嵌套时按深度匹配
        children = self._parse_fragment(tag.span.end, html_end)
        depth = 0
        for j in range(i + 1, len(nodes)):
            sibling = nodes[j]
            if sibling.type == NodeType.HTML and sibling.span is not None:
                found = closing.search(self.source, sibling.span.start, sibling.span.end)
                nested = scan_jsx_tag(self.source, sibling.span.start, sibling.span.end)
                if nested is not None and nested.name == tag.name and not nested.self_closing:
                    if found is None:
                        depth += 1
                elif found is not None:
                    if depth == 0:
                        children.extend(self._parse_fragment(sibling.span.start, found.start()))
                        element.children = self._fold_jsx(children)
                        element.span = Span(start=html_start, end=found.end())
                        return element, j - i + 1
                    depth -= 1
            children.append(sibling)

        log.warning("JSX 元素缺少结束标签，按无子节点处理", name=tag.name)
        return element, 1

    def _parse_fragment(self, start: int, end: int) -> list[Node]:
        if not self.source[start:end].strip():
            return []
        return _BlockConverter(self.source, self.md, start, end).convert()


def _find_close(tokens: list[Token], i: int, end: int) -> int:
    """返回与 `tokens[i]` 配对的关闭 token 下标；非开启 token 返回自身下标。"""
    token = tokens[i]
    if token.nesting != 1:
        return i
    for j in range(i + 1, end):
        if tokens[j].level == token.level and tokens[j].nesting == -1:
            return j
    return end - 1
