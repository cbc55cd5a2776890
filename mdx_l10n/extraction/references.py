# mdx_l10n/extraction/references.py
"""改写顶层 import 语句中带有默认语言路径段的模块地址。"""

import structlog

from mdx_l10n.tree import Node, NodeType
from mdx_l10n.types import Change, ChangeKind
from mdx_l10n.utils import DEFAULT_PLACEHOLDER_NAME, localize_url

log = structlog.get_logger(__name__)


def extract_references(
    root: Node, locale: str = "en-US", placeholder: str = DEFAULT_PLACEHOLDER_NAME
) -> list[Change]:
    """
    对每条 import 语句计算本地化后的模块字面量。

    改写前后相同（不含默认语言路径段）时不产生变更；
    否则产生一个 REFERENCE 变更，区间即模块字面量（含引号）的区间，文本为改写后的字面量。
    """
    changes: list[Change] = []
    for node in root.children:
        if node.type != NodeType.MDX_ESM:
            continue
        for declaration in node.children:
            if declaration.type != NodeType.IMPORT_DECLARATION:
                continue
            original = declaration.value or ""
            localized = localize_url(original, locale, placeholder)
            if localized == original:
                continue
            log.debug("改写 import 地址", original=original, localized=localized)
            changes.append(
                Change(
                    kind=ChangeKind.REFERENCE,
                    text=localized,
                    span=declaration.require_span(),
                )
            )

    log.info("import 解析完成", count=len(changes))
    return changes
