# mdx_l10n/__init__.py
"""mdx-l10n: 按精确偏移提取 MDX 文档中的可翻译文本，并在翻译后原位回填。

提取与回填是同步、无 I/O 的纯函数；文件读写、翻译服务调用与 CLI 位于外围模块。
"""

__version__ = "0.1.0"

from .collector import collect_changes, validate_change_list
from .config import LocalizerConfig
from .parsing import parse_document
from .patching import PatchOptions, apply_changes, emphasize, replace_span
from .payload import UploadPayload, build_payload, load_translated_changes
from .types import Change, ChangeKind, Span

__all__ = [
    "__version__",
    "Change",
    "ChangeKind",
    "LocalizerConfig",
    "PatchOptions",
    "Span",
    "UploadPayload",
    "apply_changes",
    "build_payload",
    "collect_changes",
    "emphasize",
    "load_translated_changes",
    "parse_document",
    "replace_span",
    "validate_change_list",
]
