# mdx_l10n/parsing/mdx.py
"""
MDX 扩展语法的定位扫描：JSX 流式元素的标签/属性，以及顶层的 ESM import 语句。

这里只做定位，不做语法校验；无法识别的写法一律返回 None，交由调用方按普通 HTML 处理。
"""

import re
from dataclasses import dataclass, field
from typing import Optional

from mdx_l10n.tree import JsxAttribute
from mdx_l10n.types import Span

JSX_NAME_PATTERN = re.compile(r"<([A-Z][\w.]*)")
JSX_ATTRIBUTE_NAME_PATTERN = re.compile(r"[A-Za-z_:][\w:.-]*")
ESM_PREFIX_PATTERN = re.compile(r"^(?:import|export)\b")
IMPORT_PATTERN = re.compile(
    r"""\bimport\s+(?:[^'";]*?\s*\bfrom\s*)?(?P<raw>(?P<quote>['"])(?P<source>[^'"\r\n]*)(?P=quote))"""
)


@dataclass
class JsxTag:
    name: str
    span: Span
    self_closing: bool
    attributes: list[JsxAttribute] = field(default_factory=list)


def closing_tag_pattern(name: str) -> re.Pattern[str]:
    return re.compile(rf"</\s*{re.escape(name)}\s*>")


def scan_jsx_tag(source: str, pos: int, end: int) -> Optional[JsxTag]:
    """从 `pos` 处解析一个 JSX 开始标签（或自闭合标签）。"""
    match = JSX_NAME_PATTERN.match(source, pos, end)
    if match is None:
        return None

    name = match.group(1)
    attributes: list[JsxAttribute] = []
    cursor = match.end()
    while cursor < end:
        while cursor < end and source[cursor].isspace():
            cursor += 1
        if cursor >= end:
            return None
        if source.startswith("/>", cursor):
            return JsxTag(name, Span(start=pos, end=cursor + 2), True, attributes)
        if source[cursor] == ">":
            return JsxTag(name, Span(start=pos, end=cursor + 1), False, attributes)
        if source[cursor] == "{":
            # 展开属性 {...props}
            close = _match_braces(source, cursor, end)
            if close is None:
                return None
            cursor = close
            continue

        name_match = JSX_ATTRIBUTE_NAME_PATTERN.match(source, cursor, end)
        if name_match is None:
            return None
        attr_name = name_match.group(0)
        attr_start = cursor
        cursor = name_match.end()
        if cursor < end and source[cursor] == "=":
            cursor += 1
            if cursor >= end:
                return None
            quote = source[cursor]
            if quote in "\"'":
                close = source.find(quote, cursor + 1, end)
                if close == -1:
                    return None
                attributes.append(
                    JsxAttribute(
                        name=attr_name,
                        value=source[cursor + 1 : close],
                        span=Span(start=attr_start, end=close + 1),
                        value_span=Span(start=cursor + 1, end=close),
                    )
                )
                cursor = close + 1
            elif quote == "{":
                close_brace = _match_braces(source, cursor, end)
                if close_brace is None:
                    return None
                # 表达式属性没有可回填的字面值，value_span 留空
                attributes.append(
                    JsxAttribute(
                        name=attr_name,
                        value=source[cursor:close_brace],
                        span=Span(start=attr_start, end=close_brace),
                    )
                )
                cursor = close_brace
            else:
                return None
        else:
            attributes.append(
                JsxAttribute(name=attr_name, value="", span=Span(start=attr_start, end=cursor))
            )
    return None


def _match_braces(source: str, pos: int, end: int) -> Optional[int]:
    depth = 0
    cursor = pos
    while cursor < end:
        char = source[cursor]
        if char in "\"'`":
            close = source.find(char, cursor + 1, end)
            if close == -1:
                return None
            cursor = close + 1
            continue
        if char == "{":
            depth += 1
        elif char == "}":
            depth -= 1
            if depth == 0:
                return cursor + 1
        cursor += 1
    return None


def is_esm(text: str) -> bool:
    return bool(ESM_PREFIX_PATTERN.match(text))


def scan_imports(source: str, start: int, end: int) -> list[tuple[str, Span]]:
    """返回区域内每条 import 语句的模块字面量（含引号）及其位置。"""
    results: list[tuple[str, Span]] = []
    region = source[start:end]
    for match in IMPORT_PATTERN.finditer(region):
        raw_span = Span(start=start + match.start("raw"), end=start + match.end("raw"))
        results.append((match.group("raw"), raw_span))
    return results
