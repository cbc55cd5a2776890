# mdx_l10n/extraction/__init__.py
from mdx_l10n.extraction.content import ContentWalker, extract_content
from mdx_l10n.extraction.frontmatter import extract_frontmatter
from mdx_l10n.extraction.references import extract_references
from mdx_l10n.extraction.serializer import MarkdownSerializer

__all__ = [
    "ContentWalker",
    "MarkdownSerializer",
    "extract_content",
    "extract_frontmatter",
    "extract_references",
]
