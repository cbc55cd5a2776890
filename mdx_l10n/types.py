# mdx_l10n/types.py
"""
本模块定义了 mdx-l10n 的核心数据类型：偏移区间 (Span) 与本地化变更 (Change)。
这些类型是提取器、载荷构建器与回填器之间交换数据的契约。
"""

from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict


class ChangeKind(str, Enum):
    """本地化变更的种类，其值同时作为载荷中的 `type` 字段。"""

    TITLE = "title"
    REFERENCE = "import"
    DIRECTIVE_LABEL = "containerDirectiveLabel"
    CONTENT_BLOCK = "content"


class Span(BaseModel):
    """
    半开区间 `[start, end)`，单位与源文本的 `str` 索引一致。

    构造时不做校验：回填器需要能够接收并拒绝非法区间。
    """

    model_config = ConfigDict(frozen=True)

    start: int
    end: int

    @property
    def length(self) -> int:
        return self.end - self.start

    def is_valid_for(self, text_length: int) -> bool:
        """区间是否满足 `0 <= start < end <= text_length`。"""
        return 0 <= self.start < self.end <= text_length

    def overlaps(self, other: "Span") -> bool:
        return self.start < other.end and other.start < self.end

    def slice(self, text: str) -> str:
        return text[self.start : self.end]

    def shifted(self, delta: int) -> "Span":
        return Span(start=self.start + delta, end=self.end + delta)


class Change(BaseModel):
    """
    一个从文档中提取出的可本地化单元。

    对于 TITLE 与 REFERENCE，`text` 就是源文本的字面切片（引用为改写后的字面量）；
    对于 DIRECTIVE_LABEL 与 CONTENT_BLOCK，`text` 是由子节点序列化重建的内容，
    不保证与 `source[start:end]` 逐字相同。
    """

    model_config = ConfigDict(frozen=True)

    kind: ChangeKind
    text: str
    span: Span
    notes: str = ""

    @property
    def start(self) -> int:
        return self.span.start

    @property
    def end(self) -> int:
        return self.span.end

    def with_text(self, text: str) -> "Change":
        """返回一个替换了文本、但区间不变的副本（例如填入译文）。"""
        return self.model_copy(update={"text": text})

    def to_payload(self) -> dict[str, Any]:
        """序列化为上传载荷中的扁平字典。"""
        return {
            "type": self.kind.value,
            "text": self.text,
            "start": self.span.start,
            "end": self.span.end,
            "notes": self.notes,
        }

    @classmethod
    def from_payload(cls, data: dict[str, Any]) -> "Change":
        """从载荷字典还原一个变更。缺省的 `type` 视为正文块。"""
        return cls(
            kind=ChangeKind(data.get("type") or ChangeKind.CONTENT_BLOCK.value),
            text=data["text"],
            span=Span(start=int(data["start"]), end=int(data["end"])),
            notes=data.get("notes") or "",
        )
