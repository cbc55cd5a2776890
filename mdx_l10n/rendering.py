# mdx_l10n/rendering.py
"""
生成上传给翻译服务的可视化上下文 HTML。

复用解析器的 MarkdownIt 配置渲染文档正文；JSX 元素没有对应的 HTML 标签，
统一渲染为 `<span>` 包裹层，顶层的 import/export 语句不进入输出。
"""

import re
from typing import Optional

import structlog
from markdown_it import MarkdownIt
from markdown_it.common.utils import escapeHtml
from markdown_it.token import Token

from mdx_l10n.parsing import create_markdown_parser
from mdx_l10n.parsing.mdx import is_esm

log = structlog.get_logger(__name__)

JSX_TAG_PATTERN = re.compile(r"<(/?)([A-Z][\w.]*)(?:\s[^<>]*?)?(/?)>")

DOCUMENT_TEMPLATE = """<!doctype html>
<html lang="{lang}">
  <head>
    <meta charset="utf-8">
    <title>{title}</title>
    <meta name="viewport" content="width=device-width, initial-scale=1">
  </head>
  <body>
{body}  </body>
</html>
"""


def _jsx_to_span(match: re.Match[str]) -> str:
    closing, _, self_closing = match.groups()
    if closing:
        return "</span>"
    if self_closing:
        return "<span></span>"
    return "<span>"


def _prepare_tokens(tokens: list[Token]) -> None:
    for i, token in enumerate(tokens):
        if token.type in ("html_block", "html_inline"):
            token.content = JSX_TAG_PATTERN.sub(_jsx_to_span, token.content)
        elif token.type == "inline" and token.children:
            _prepare_tokens(token.children)
        elif (
            token.type == "paragraph_open"
            and token.level == 0
            and i + 1 < len(tokens)
            and is_esm(tokens[i + 1].content)
        ):
            token.hidden = True
            tokens[i + 1].children = []
            tokens[i + 2].hidden = True


def render_context_html(
    source: str, title: Optional[str] = None, lang: str = "en", md: Optional[MarkdownIt] = None
) -> str:
    md = md or create_markdown_parser()
    env: dict = {}
    tokens = md.parse(source, env)
    _prepare_tokens(tokens)
    body = md.renderer.render(tokens, md.options, env)
    log.debug("上下文 HTML 渲染完成", length=len(body))
    return DOCUMENT_TEMPLATE.format(
        lang=escapeHtml(lang), title=escapeHtml(title or ""), body=body
    )
