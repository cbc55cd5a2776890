# mdx_l10n/cli/__init__.py
from mdx_l10n.cli.main import app

__all__ = ["app"]
