# mdx_l10n/payload.py
"""
上传给 Smartling 的 JSON 载荷。

信封结构由翻译服务的 JSON 文件指令决定：`translate_paths` 指明每个字符串的
译文路径、查找键与说明字段。查找键取自提取时的起始偏移。
"""

import json
from typing import Any

from pydantic import BaseModel, Field, ValidationError

from mdx_l10n.exceptions import L10nError
from mdx_l10n.types import Change


class TranslatePath(BaseModel):
    path: str = "/strings/text"
    key: str = "/strings/start"
    instruction: str = "/strings/notes"
    key_generation_strategy: str = "strict"


class SmartlingDirectives(BaseModel):
    translate_paths: list[TranslatePath] = Field(default_factory=lambda: [TranslatePath()])
    variants_enabled: str = "false"


class UploadPayload(BaseModel):
    smartling: SmartlingDirectives = Field(default_factory=SmartlingDirectives)
    strings: list[Change] = Field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "smartling": self.smartling.model_dump(),
            "strings": [change.to_payload() for change in self.strings],
        }

    def to_json(self, indent: int | None = None) -> str:
        return json.dumps(self.to_dict(), ensure_ascii=False, indent=indent)


def build_payload(changes: list[Change]) -> UploadPayload:
    return UploadPayload(strings=list(changes))


def load_translated_changes(json_text: str) -> list[Change]:
    """解析翻译服务返回的 JSON 文件，还原带译文的变更列表。"""
    try:
        data = json.loads(json_text)
        strings = data["strings"] if isinstance(data, dict) else data
        return [Change.from_payload(item) for item in strings]
    except (json.JSONDecodeError, KeyError, TypeError, ValueError, ValidationError) as e:
        raise L10nError(f"无法解析译文文件: {e}") from e
