# tests/conftest.py
"""项目全局共享的测试 Fixtures。"""

import os
from collections.abc import Generator
from typing import Any

import pytest
from pytest_mock import MockerFixture
from rich.console import Console

from mdx_l10n.config import LocalizerConfig


@pytest.fixture(scope="session", autouse=True)
def disable_rich_colors_for_tests(
    session_mocker: MockerFixture,
) -> Generator[None, None, None]:
    """全局禁用 rich 库的颜色输出，以确保测试结果的确定性。"""
    original_init = Console.__init__

    def new_init(self: Console, *args: Any, **kwargs: Any) -> None:
        kwargs["force_terminal"] = False
        kwargs["color_system"] = None
        original_init(self, *args, **kwargs)

    session_mocker.patch("rich.console.Console.__init__", new=new_init)
    yield


@pytest.fixture(autouse=True)
def isolated_environment(
    monkeypatch: pytest.MonkeyPatch, tmp_path_factory: pytest.TempPathFactory
) -> None:
    """清除 MDX_L10N_ 环境变量，并在空目录中运行，避免读取开发者本地的 .env。"""
    for key in list(os.environ):
        if key.startswith("MDX_L10N_"):
            monkeypatch.delenv(key)
    monkeypatch.chdir(tmp_path_factory.mktemp("cwd"))


@pytest.fixture
def config() -> LocalizerConfig:
    return LocalizerConfig()


@pytest.fixture
def smartling_config() -> LocalizerConfig:
    return LocalizerConfig(
        smartling={
            "project_id": "proj-1",
            "user_id": "user-1",
            "user_secret": "secret-1",
        }
    )
