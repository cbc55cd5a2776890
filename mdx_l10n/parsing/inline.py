# mdx_l10n/parsing/inline.py
"""
带位置信息的行内扫描器。

markdown-it 的行内 token 不携带偏移量，因此这里直接在原文上扫描一个已定位的
行内区域，切分出 text / link / image / inlineCode 节点，每个节点都带有精确的 Span。
强调、删除线等标记保留在 text 节点的原文中，不单独建节点。
"""

from dataclasses import dataclass
from typing import Optional

from mdx_l10n.tree import Node, NodeType
from mdx_l10n.types import Span

ESCAPABLE = set("!\"#$%&'()*+,-./:;<=>?@[\\]^_`{|}~")


@dataclass
class _LinkParts:
    label_start: int
    label_end: int
    url: str
    url_span: Span
    title: Optional[str]
    angle: bool
    end: int


def scan_inline(source: str, start: int, end: int) -> list[Node]:
    """扫描 `source[start:end]`，返回按文档顺序排列的行内节点。"""
    nodes: list[Node] = []
    text_start = start
    pos = start

    def flush(upto: int) -> None:
        if upto > text_start:
            nodes.append(
                Node(
                    type=NodeType.TEXT,
                    value=source[text_start:upto],
                    span=Span(start=text_start, end=upto),
                )
            )

    while pos < end:
        char = source[pos]
        if char == "\\" and pos + 1 < end and source[pos + 1] in ESCAPABLE:
            pos += 2
            continue

        node: Optional[Node] = None
        if char == "`":
            node = _match_code_span(source, pos, end)
            if node is None:
                # 未闭合的反引号串按普通文本处理
                run = _run_length(source, pos, end, "`")
                pos += run
                continue
        elif char == "!" and pos + 1 < end and source[pos + 1] == "[":
            parts = _match_link(source, pos + 1, end)
            if parts is not None:
                node = Node(
                    type=NodeType.IMAGE,
                    url=parts.url,
                    title=parts.title,
                    value=source[parts.label_start : parts.label_end],
                    span=Span(start=pos, end=parts.end),
                    data={"url_span": parts.url_span.model_dump()},
                )
        elif char == "[":
            parts = _match_link(source, pos, end)
            if parts is not None:
                node = Node(
                    type=NodeType.LINK,
                    url=parts.url,
                    title=parts.title,
                    span=Span(start=pos, end=parts.end),
                    children=scan_inline(source, parts.label_start, parts.label_end),
                    data={"url_span": parts.url_span.model_dump(), "angle": parts.angle},
                )

        if node is None:
            pos += 1
            continue

        assert node.span is not None
        flush(node.span.start)
        nodes.append(node)
        pos = node.span.end
        text_start = pos

    flush(end)
    return nodes


def _run_length(source: str, pos: int, end: int, char: str) -> int:
    run = 0
    while pos + run < end and source[pos + run] == char:
        run += 1
    return run


def _match_code_span(source: str, pos: int, end: int) -> Optional[Node]:
    run = _run_length(source, pos, end, "`")
    search = pos + run
    while search < end:
        close = source.find("`" * run, search, end)
        if close == -1:
            return None
        close_run = _run_length(source, close, end, "`")
        if close_run == run:
            inner = source[pos + run : close]
            if inner.startswith(" ") and inner.endswith(" ") and inner.strip():
                inner = inner[1:-1]
            return Node(
                type=NodeType.INLINE_CODE,
                value=inner,
                span=Span(start=pos, end=close + run),
            )
        search = close + close_run
    return None


def _match_link(source: str, pos: int, end: int) -> Optional[_LinkParts]:
    """匹配 `[label](url "title")`，`pos` 指向左方括号。"""
    depth = 0
    cursor = pos
    label_end = -1
    while cursor < end:
        char = source[cursor]
        if char == "\\":
            cursor += 2
            continue
        if char == "`":
            code = _match_code_span(source, cursor, end)
            if code is not None and code.span is not None:
                cursor = code.span.end
                continue
        if char == "[":
            depth += 1
        elif char == "]":
            depth -= 1
            if depth == 0:
                label_end = cursor
                break
        cursor += 1

    if label_end == -1 or label_end + 1 >= end or source[label_end + 1] != "(":
        return None

    cursor = _skip_whitespace(source, label_end + 2, end)
    angle = False
    if cursor < end and source[cursor] == "<":
        close = source.find(">", cursor + 1, end)
        if close == -1:
            return None
        angle = True
        url_span = Span(start=cursor + 1, end=close)
        cursor = close + 1
    else:
        url_start = cursor
        parens = 0
        while cursor < end:
            char = source[cursor]
            if char == "\\":
                cursor += 2
                continue
            if char.isspace():
                break
            if char == "(":
                parens += 1
            elif char == ")":
                if parens == 0:
                    break
                parens -= 1
            cursor += 1
        url_span = Span(start=url_start, end=min(cursor, end))

    cursor = _skip_whitespace(source, cursor, end)
    title: Optional[str] = None
    if cursor < end and source[cursor] in "\"'(":
        closing = ")" if source[cursor] == "(" else source[cursor]
        title_end = cursor + 1
        while title_end < end and source[title_end] != closing:
            title_end += 2 if source[title_end] == "\\" else 1
        if title_end >= end:
            return None
        title = source[cursor + 1 : title_end]
        cursor = _skip_whitespace(source, title_end + 1, end)

    if cursor >= end or source[cursor] != ")":
        return None

    return _LinkParts(
        label_start=pos + 1,
        label_end=label_end,
        url=url_span.slice(source),
        url_span=url_span,
        title=title,
        angle=angle,
        end=cursor + 1,
    )


def _skip_whitespace(source: str, pos: int, end: int) -> int:
    while pos < end and source[pos] in " \t\r\n":
        pos += 1
    return pos
