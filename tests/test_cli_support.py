"""Tests for CLI support utilities."""
from unittest.mock import Mock

import pytest
import typer
from rich.console import Console

from envstack.cli_support import (
    handle_cli_error,
    is_mock,
    print_error,
    print_info,
    print_success,
    print_warning,
)
from envstack.core.errors import CommandError, PreflightError


class TestIsMock:
    """Test mock mode detection."""

    def test_mock_enabled(self, monkeypatch):
        """Should return True when ENVSTACK_MOCK=1."""
        monkeypatch.setenv("ENVSTACK_MOCK", "1")
        assert is_mock() is True

    def test_mock_disabled(self, monkeypatch):
        """Should return False when ENVSTACK_MOCK is unset or not 1."""
        monkeypatch.delenv("ENVSTACK_MOCK", raising=False)
        assert is_mock() is False
        monkeypatch.setenv("ENVSTACK_MOCK", "yes")
        assert is_mock() is False


class TestHandleCliError:
    """Test error reporting and exit codes."""

    def test_precondition_exits_one(self):
        console = Mock()

        with pytest.raises(typer.Exit) as exc:
            handle_cli_error(PreflightError("not root"), console)

        assert exc.value.exit_code == 1
        assert "not root" in str(console.print.call_args)

    def test_command_error_uses_command_exit_code(self):
        with pytest.raises(typer.Exit) as exc:
            handle_cli_error(CommandError(['apt-get', 'update'], 100), Mock())

        assert exc.value.exit_code == 100

    def test_other_errors_exit_one(self):
        with pytest.raises(typer.Exit) as exc:
            handle_cli_error(OSError("disk full"), Mock())

        assert exc.value.exit_code == 1

    def test_explicit_exit_code(self):
        with pytest.raises(typer.Exit) as exc:
            handle_cli_error(PreflightError("x"), Mock(), exit_code=3)

        assert exc.value.exit_code == 3


class TestPrintHelpers:
    """Test colored message helpers."""

    @pytest.mark.parametrize("helper,symbol", [
        (print_success, "✓"),
        (print_error, "✗"),
        (print_warning, "⚠"),
        (print_info, "ℹ"),
    ])
    def test_prefix_and_message(self, helper, symbol):
        console = Console(record=True, width=120)
        helper(console, "Docker installed")

        assert console.export_text().strip() == f"{symbol} Docker installed"

    def test_markup_in_message_is_literal(self):
        console = Console(record=True, width=120)
        print_info(console, "deb [arch=amd64] repo")

        assert "deb [arch=amd64] repo" in console.export_text()
