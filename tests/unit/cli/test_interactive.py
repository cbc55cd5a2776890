# tests/unit/cli/test_interactive.py
"""针对交互式菜单的单元测试，questionary 的提问全部被模拟。"""

from pathlib import Path
from unittest.mock import MagicMock

from pytest_mock import MockerFixture

from mdx_l10n.cli import interactive
from mdx_l10n.config import LocalizerConfig
from mdx_l10n.exceptions import L10nError


def _answers(*values: object) -> list[MagicMock]:
    prompts = []
    for value in values:
        prompt = MagicMock()
        prompt.ask.return_value = value
        prompts.append(prompt)
    return prompts


def test_exit_immediately(mocker: MockerFixture, config: LocalizerConfig) -> None:
    mocker.patch.object(interactive.questionary, "select", side_effect=_answers(interactive.EXIT))
    mock_extract = mocker.patch.object(interactive, "run_extract")

    interactive.run_interactive(config)

    mock_extract.assert_not_called()


def test_extract_flow(mocker: MockerFixture, tmp_path: Path, config: LocalizerConfig) -> None:
    doc = tmp_path / "a.mdx"
    doc.write_text("Hello", encoding="utf-8")
    mocker.patch.object(
        interactive.questionary,
        "select",
        side_effect=_answers(interactive.EXTRACT, interactive.EXIT),
    )
    mocker.patch.object(interactive.questionary, "text", side_effect=_answers(str(doc)))
    mocker.patch.object(interactive.questionary, "path", side_effect=_answers(""))
    mock_extract = mocker.patch.object(interactive, "run_extract")

    interactive.run_interactive(config)

    mock_extract.assert_called_once_with(config, [doc], None)


def test_missing_files_are_skipped(mocker: MockerFixture, config: LocalizerConfig) -> None:
    mocker.patch.object(
        interactive.questionary,
        "select",
        side_effect=_answers(interactive.EXTRACT, interactive.EXIT),
    )
    mocker.patch.object(interactive.questionary, "text", side_effect=_answers("nope.mdx"))
    mock_extract = mocker.patch.object(interactive, "run_extract")

    interactive.run_interactive(config)

    mock_extract.assert_not_called()


def test_errors_are_reported_and_menu_continues(
    mocker: MockerFixture, tmp_path: Path, config: LocalizerConfig
) -> None:
    source = tmp_path / "a.mdx"
    translated = tmp_path / "a.json"
    mocker.patch.object(
        interactive.questionary,
        "select",
        side_effect=_answers(interactive.UPDATE, interactive.EXIT),
    )
    mocker.patch.object(
        interactive.questionary, "path", side_effect=_answers(str(source), str(translated), "")
    )
    mocker.patch.object(interactive.questionary, "confirm", side_effect=_answers(True))
    error = L10nError("boom")
    mocker.patch.object(interactive, "run_update", side_effect=error)
    mock_report = mocker.patch.object(interactive, "report_error")

    interactive.run_interactive(config)

    mock_report.assert_called_once_with(error)
