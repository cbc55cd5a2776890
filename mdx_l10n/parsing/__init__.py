# mdx_l10n/parsing/__init__.py
from mdx_l10n.parsing.parser import create_markdown_parser, parse_document

__all__ = ["create_markdown_parser", "parse_document"]
