# mdx_l10n/parsing/lines.py
"""行号 → 字符偏移的换算表。"""

import re

# 与 markdown-it 的换行规范化规则保持一致
NEWLINE_PATTERN = re.compile(r"\r\n?|\n")


class LineIndex:
    """
    记录一段文本中每一行的起止偏移。

    markdown-it 在解析前会把 `\\r\\n` 规范化为 `\\n`，因此 token 的行号与原文一致，
    但字符偏移不一致。所有偏移都必须通过本表在原始文本上换算。
    `base` 用于片段解析：片段内的行号换算为整篇文档中的绝对偏移。
    """

    def __init__(self, text: str, base: int = 0) -> None:
        self.text = text
        self.base = base
        self._starts: list[int] = [0]
        self._ends: list[int] = []
        for match in NEWLINE_PATTERN.finditer(text):
            self._ends.append(match.start())
            self._starts.append(match.end())
        self._ends.append(len(text))

    def __len__(self) -> int:
        return len(self._starts)

    def start(self, line: int) -> int:
        """行首的绝对偏移；越界时返回文本末尾。"""
        if line >= len(self._starts):
            return self.base + len(self.text)
        return self.base + self._starts[line]

    def end(self, line: int) -> int:
        """行尾（不含换行符）的绝对偏移。"""
        if line >= len(self._ends):
            return self.base + len(self.text)
        return self.base + self._ends[line]

    def line(self, line: int) -> str:
        """不含换行符的行文本。"""
        if line >= len(self._starts):
            return ""
        return self.text[self._starts[line] : self._ends[line]]

    def is_blank(self, line: int) -> bool:
        return not self.line(line).strip()

    def block_bounds(self, first: int, last: int) -> tuple[int, int]:
        """
        计算行区间 `[first, last)` 的偏移范围。
        起点跳过行首缩进，终点回退越过末尾的空行。
        """
        while last - 1 > first and self.is_blank(last - 1):
            last -= 1
        first_line = self.line(first)
        indent = len(first_line) - len(first_line.lstrip(" \t"))
        end_line = self.line(last - 1)
        start = self.start(first) + indent
        end = self.start(last - 1) + len(end_line.rstrip(" \t"))
        return start, max(start, end)
