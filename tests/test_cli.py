"""
Tests for the gmana command line interface.
"""

from unittest.mock import patch
import pytest
from click.testing import CliRunner

from gmana import __version__
from gmana.__main__ import cli
from gmana.config import ConfigManager
from gmana.exceptions import HistoryError
from gmana.history import HistoryManager
from gmana.utils.validation import PasswordOptions


def shown_password(output):
    """Extract the password printed under the banner."""
    lines = output.splitlines()
    return lines[lines.index(" Generated Password ") + 1]


@pytest.fixture
def runner():
    return CliRunner()


@pytest.fixture
def home(tmp_path):
    return tmp_path / "gmana-home"


@pytest.fixture(autouse=True)
def mock_clipboard():
    """Keep tests away from the real clipboard."""
    with patch("gmana.__main__.copy_to_clipboard", return_value=True) as mock_copy:
        yield mock_copy


def invoke(runner, home, *args, **kwargs):
    return runner.invoke(cli, ["--home", str(home), *args], **kwargs)


class TestGenCommand:
    """Test the gen command."""

    def test_default_generation(self, runner, home, mock_clipboard):
        """Test default generation prints password, strength and copies."""
        result = invoke(runner, home, "gen")

        assert result.exit_code == 0, result.output
        password = shown_password(result.output)
        assert len(password) == 12
        assert "Strength:" in result.output
        assert "/100)" in result.output
        mock_clipboard.assert_called_once_with(password)
        assert "Copied to clipboard!" in result.output

    def test_alias(self, runner, home):
        """Test the short alias runs gen."""
        result = invoke(runner, home, "g", "--no-copy", "-l", "20")

        assert result.exit_code == 0, result.output
        assert len(shown_password(result.output)) == 20

    def test_length_out_of_range(self, runner, home):
        """Test an invalid length is rejected, not clamped."""
        result = invoke(runner, home, "gen", "-l", "3")

        assert result.exit_code == 1
        assert "Error:" in result.output
        assert "at least 4" in result.output

    def test_no_character_types(self, runner, home):
        """Test an empty pool is reported as an error."""
        result = invoke(runner, home, "gen", "--no-uppercase", "--no-lowercase",
                        "--no-numbers", "--no-symbols")

        assert result.exit_code == 1
        assert "No character types selected" in result.output

    def test_custom_chars(self, runner, home):
        """Test custom characters replace the classes."""
        result = invoke(runner, home, "gen", "--custom-chars", "ab", "-l", "10", "--no-copy")

        assert result.exit_code == 0, result.output
        password = shown_password(result.output)
        assert len(password) == 10
        assert set(password) <= {"a", "b"}

    def test_exclude_similar(self, runner, home):
        """Test similar characters never appear."""
        result = invoke(runner, home, "gen", "-l", "128", "--no-symbols",
                        "--exclude-similar", "--no-copy")

        assert result.exit_code == 0, result.output
        assert not set(shown_password(result.output)) & set("il1Lo0O")

    def test_hide_strength(self, runner, home):
        result = invoke(runner, home, "gen", "--hide-strength", "--no-copy")

        assert result.exit_code == 0
        assert "Strength:" not in result.output

    def test_clipboard_failure_keeps_password(self, runner, home, mock_clipboard):
        """Test a clipboard failure is a warning only."""
        mock_clipboard.return_value = False

        result = invoke(runner, home, "gen", "--copy")

        assert result.exit_code == 0
        assert len(shown_password(result.output)) == 12
        assert "Failed to copy to clipboard" in result.output

    def test_save_to_history(self, runner, home):
        """Test --save records the password."""
        result = invoke(runner, home, "gen", "--save", "--no-copy", "-l", "16")

        assert result.exit_code == 0, result.output
        assert "Saved to history!" in result.output

        entries = HistoryManager(home=home).load()
        assert len(entries) == 1
        assert entries[0].password == shown_password(result.output)
        assert entries[0].options["length"] == 16

    def test_history_failure_keeps_password(self, runner, home):
        """Test a history write failure is a warning only."""
        with patch.object(HistoryManager, "add", side_effect=HistoryError("disk full")):
            result = invoke(runner, home, "gen", "--save", "--no-copy")

        assert result.exit_code == 0
        assert len(shown_password(result.output)) == 12
        assert "Warning: disk full" in result.output

    def test_zero_history_limit_skips_save(self, runner, home):
        """Test a zero history limit leaves existing history untouched."""
        HistoryManager(home=home).add("keepme123", PasswordOptions())
        ConfigManager(home=home).save(history_limit=0)

        result = invoke(runner, home, "gen", "--save", "--no-copy")

        assert result.exit_code == 0, result.output
        assert "password not saved" in result.output
        assert "Saved to history!" not in result.output
        assert [e.password for e in HistoryManager(home=home).load()] == ["keepme123"]

    def test_history_capped_at_100(self, runner, home):
        """Test a configured limit above 100 still caps the history."""
        history = HistoryManager(home=home)
        for i in range(100):
            history.add(f"password-{i}", PasswordOptions())
        ConfigManager(home=home).save(history_limit=1000)

        result = invoke(runner, home, "gen", "--save", "--no-copy")

        assert result.exit_code == 0, result.output
        entries = HistoryManager(home=home).load()
        assert len(entries) == 100
        assert entries[0].password == shown_password(result.output)

    def test_config_defaults_apply(self, runner, home, mock_clipboard):
        """Test unset flags fall back to the saved configuration."""
        ConfigManager(home=home).save(
            default_length=30,
            default_include_symbols=False,
            default_include_uppercase=False,
            auto_copy=False,
            save_history=True,
        )

        result = invoke(runner, home, "gen")

        assert result.exit_code == 0, result.output
        password = shown_password(result.output)
        assert len(password) == 30
        assert all(c.islower() or c.isdigit() for c in password)
        mock_clipboard.assert_not_called()
        assert len(HistoryManager(home=home).load()) == 1

    def test_flags_override_config(self, runner, home):
        """Test explicit flags win over configuration."""
        ConfigManager(home=home).save(default_include_symbols=False)

        result = invoke(runner, home, "gen", "--symbols", "--no-uppercase", "--no-lowercase",
                        "--no-numbers", "--no-copy")

        assert result.exit_code == 0, result.output
        assert set(shown_password(result.output)) <= set("!@#$%^&*")

    def test_interactive(self, runner, home):
        """Test interactive generation."""
        with patch("gmana.__main__.multiselect",
                   side_effect=[["lowercase", "numbers"], ["similar"]]):
            result = invoke(runner, home, "gen", "-i", input="16\nn\ny\n")

        assert result.exit_code == 0, result.output
        password = shown_password(result.output)
        assert len(password) == 16
        assert all(c.islower() or c.isdigit() for c in password)
        assert not set(password) & set("il1Lo0O")
        assert len(HistoryManager(home=home).load()) == 1
        assert "Done!" in result.output

    def test_interactive_cancelled(self, runner, home):
        with patch("gmana.__main__.multiselect", return_value=None):
            result = invoke(runner, home, "gen", "-i", input="16\n")

        assert result.exit_code == 0
        assert "Operation cancelled" in result.output
        assert "Generated Password" not in result.output


class TestConfigCommand:
    """Test the config command."""

    def test_show(self, runner, home):
        result = invoke(runner, home, "config", "--show")

        assert result.exit_code == 0
        assert "Current Configuration" in result.output
        assert "Default Length" in result.output
        assert "12" in result.output

    def test_set(self, runner, home):
        result = invoke(runner, home, "config", "--set", "length=20")

        assert result.exit_code == 0, result.output
        assert "Updated length = 20" in result.output
        assert ConfigManager(home=home).load().default_length == 20

    def test_set_invalid_length(self, runner, home):
        result = invoke(runner, home, "config", "--set", "length=3")

        assert result.exit_code == 1
        assert "Error:" in result.output

    def test_set_unknown_key(self, runner, home):
        result = invoke(runner, home, "config", "--set", "colour=blue")

        assert result.exit_code == 1
        assert "Unknown configuration key" in result.output

    def test_set_bad_format(self, runner, home):
        result = invoke(runner, home, "config", "--set", "length")

        assert result.exit_code == 1
        assert "key=value" in result.output

    def test_reset(self, runner, home):
        ConfigManager(home=home).save(default_length=50)

        result = invoke(runner, home, "config", "--reset", input="y\n")

        assert result.exit_code == 0
        assert "reset to defaults" in result.output
        assert ConfigManager(home=home).load().default_length == 12

    def test_reset_cancelled(self, runner, home):
        ConfigManager(home=home).save(default_length=50)

        result = invoke(runner, home, "config", "--reset", input="n\n")

        assert "Operation cancelled" in result.output
        assert ConfigManager(home=home).load().default_length == 50

    def test_interactive_behavior(self, runner, home):
        with patch("gmana.__main__.select", return_value="behavior"):
            result = invoke(runner, home, "config", input="n\n")

        assert result.exit_code == 0, result.output
        assert ConfigManager(home=home).load().auto_copy is False

    def test_interactive_history(self, runner, home):
        with patch("gmana.__main__.select", return_value="history"):
            result = invoke(runner, home, "c", input="y\n25\n")

        assert result.exit_code == 0, result.output
        config = ConfigManager(home=home).load()
        assert config.save_history is True
        assert config.history_limit == 25


class TestHistoryCommand:
    """Test the history command."""

    def test_list_empty(self, runner, home):
        result = invoke(runner, home, "history", "--list")

        assert result.exit_code == 0
        assert "No password history found" in result.output

    def test_list(self, runner, home):
        history = HistoryManager(home=home)
        history.add("firstPassword1", PasswordOptions(length=14))
        history.add("secondPassword2", PasswordOptions(length=15))

        result = invoke(runner, home, "h", "--list", "--limit", "1")

        assert result.exit_code == 0, result.output
        assert "(1 of 2)" in result.output
        assert "se•••••••••••d2" in result.output
        assert "secondPassword2" not in result.output
        assert "firstPassword1" not in result.output
        assert "L:15 A-Z a-z 0-9 !@#" in result.output

    def test_clear(self, runner, home):
        HistoryManager(home=home).add("password", PasswordOptions())

        result = invoke(runner, home, "history", "--clear", input="y\n")

        assert result.exit_code == 0
        assert "history cleared" in result.output
        assert HistoryManager(home=home).load() == []

    def test_interactive_copy(self, runner, home, mock_clipboard):
        entry = HistoryManager(home=home).add("copyMe123", PasswordOptions())

        with patch("gmana.__main__.select", side_effect=["copy", entry.id]):
            result = invoke(runner, home, "history")

        assert result.exit_code == 0, result.output
        mock_clipboard.assert_called_once_with("copyMe123")
        assert "Password copied to clipboard!" in result.output

    def test_interactive_copy_unknown_entry(self, runner, home, mock_clipboard):
        HistoryManager(home=home).add("copyMe123", PasswordOptions())

        with patch("gmana.__main__.select", side_effect=["copy", "missing-id"]):
            result = invoke(runner, home, "history")

        assert result.exit_code == 0, result.output
        mock_clipboard.assert_not_called()
        assert "No selection made." in result.output

    def test_interactive_empty(self, runner, home):
        result = invoke(runner, home, "history")

        assert result.exit_code == 0
        assert "Generate some passwords first!" in result.output


class TestGlobalOptions:
    """Test group level options."""

    def test_version(self, runner):
        result = runner.invoke(cli, ["--version"])

        assert result.exit_code == 0
        assert __version__ in result.output

    def test_home_from_env(self, runner, home):
        result = runner.invoke(cli, ["config", "--set", "length=40"],
                               env={"GMANA_HOME": str(home)})

        assert result.exit_code == 0, result.output
        assert ConfigManager(home=home).load().default_length == 40


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
