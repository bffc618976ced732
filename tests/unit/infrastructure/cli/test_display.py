import pytest
from unittest.mock import MagicMock

from rich.panel import Panel
from rich.text import Text

from moviesdb.infrastructure.cli.display import ConsoleDisplay


@pytest.fixture
def mock_console():
    """Fixture to create a mock rich Console object for stdout."""
    return MagicMock()


@pytest.fixture
def mock_err_console():
    return MagicMock()


@pytest.fixture
def console_display(mock_console: MagicMock, mock_err_console: MagicMock):
    """Fixture to create a ConsoleDisplay instance with mocked consoles."""
    return ConsoleDisplay(console=mock_console, err_console=mock_err_console)


def test_display_json(console_display: ConsoleDisplay, mock_console: MagicMock):
    """Results are printed as JSON on stdout."""
    console_display.display_json({"id": "tt0111161", "titleText": {"text": "Shawshank"}})
    mock_console.print_json.assert_called_once_with('{"id": "tt0111161", "titleText": {"text": "Shawshank"}}')


def test_display_json_handles_non_ascii(console_display: ConsoleDisplay, mock_console: MagicMock):
    console_display.display_json(["Amélie"])
    mock_console.print_json.assert_called_once_with('["Amélie"]')


def test_display_error_goes_to_stderr(
    console_display: ConsoleDisplay, mock_console: MagicMock, mock_err_console: MagicMock
):
    """Errors are rendered as a red panel on the stderr console."""
    console_display.display_error("Something went wrong", title="api_error")
    mock_console.print.assert_not_called()
    mock_err_console.print.assert_called_once()
    panel = mock_err_console.print.call_args.args[0]
    assert isinstance(panel, Panel)
    assert panel.title == "api_error"
    assert panel.renderable.plain == "Something went wrong"


def test_display_info(console_display: ConsoleDisplay, mock_err_console: MagicMock):
    console_display.display_info("Fetching page 2")
    printed = mock_err_console.print.call_args.args[0]
    assert isinstance(printed, Text)
    assert printed.plain == "Fetching page 2"
