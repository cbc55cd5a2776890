# tests/integration/conftest.py
"""集成测试共享的 Fixtures：在临时目录中准备示例文档。"""

from pathlib import Path

import pytest

from tests.helpers.documents import SAMPLE_MDX


@pytest.fixture
def docs_dir(tmp_path: Path) -> Path:
    root = tmp_path / "docs"
    root.mkdir()
    (root / "guide.mdx").write_text(SAMPLE_MDX, encoding="utf-8")
    (root / "hello.mdx").write_text("# Hello\n\nWorld text\n", encoding="utf-8")
    return root
