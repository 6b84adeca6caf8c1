"""
CLI interface for gmana password generator.
"""

import logging
import sys
import click
from pathlib import Path
from typing import List, Optional, Tuple

from . import __version__
from .clipboard import copy_to_clipboard
from .config import Config, get_config_manager
from .config.manager import (
    DEFAULT_HISTORY_LIMIT,
    MAX_HISTORY_LIMIT,
    MIN_HISTORY_LIMIT,
    parse_key_value,
)
from .exceptions import ConfigError, GenerationError, HistoryError, ValidationError
from .history import HistoryEntry, HistoryManager, get_history_manager
from .history.manager import format_options, mask_password
from .prompts import Choice, multiselect, select
from .utils.password_generator import PasswordGenerator
from .utils.strength import calculate_strength
from .utils.validation import MAX_PASSWORD_LENGTH, MIN_PASSWORD_LENGTH, PasswordOptions

RULE = "━" * 40

CHAR_TYPE_CHOICES = [
    Choice("uppercase", "Uppercase (A-Z)", "recommended"),
    Choice("lowercase", "Lowercase (a-z)", "recommended"),
    Choice("numbers", "Numbers (0-9)", "recommended"),
    Choice("symbols", "Symbols (!@#$)", "recommended"),
    Choice("extra_symbols", "Extra Symbols ([]{}|)", "optional"),
]

EXCLUDE_CHOICES = [
    Choice("similar", "Similar chars (il1Lo0O)"),
    Choice("ambiguous", "Ambiguous chars ({}[]/\\)"),
]


class AliasedGroup(click.Group):
    """Group that also resolves short command aliases."""

    ALIASES = {"g": "gen", "c": "config", "h": "history"}

    def get_command(self, ctx: click.Context, cmd_name: str) -> Optional[click.Command]:
        return super().get_command(ctx, self.ALIASES.get(cmd_name, cmd_name))

    def resolve_command(self, ctx: click.Context, args: List[str]):
        # Report the full command name rather than the alias
        _, cmd, args = super().resolve_command(ctx, args)
        return cmd.name if cmd else None, cmd, args


class AppContext:
    """Context object for sharing settings across commands."""

    def __init__(self, home: Optional[str] = None):
        self.config_manager = get_config_manager(home)
        self.home: Path = self.config_manager.home

    def load_config(self) -> Config:
        """Load user configuration (defaults if missing or invalid)."""
        return self.config_manager.load()

    def get_history(self, config: Optional[Config] = None) -> HistoryManager:
        """History manager honoring the configured entry limit, capped at 100."""
        config = config or self.load_config()
        limit = min(config.history_limit, DEFAULT_HISTORY_LIMIT)
        return get_history_manager(self.home, limit=limit)


@click.group(cls=AliasedGroup)
@click.version_option(__version__, "-v", "--version", prog_name="gmana")
@click.option(
    "--home",
    envvar="GMANA_HOME",
    type=click.Path(file_okay=False),
    default=None,
    help="Directory for config and history (default: ~/.gmana)",
)
@click.option("--debug", is_flag=True, help="Enable debug logging")
@click.pass_context
def cli(ctx: click.Context, home: Optional[str], debug: bool) -> None:
    """gmana - A modern password generator CLI."""
    if debug:
        logging.basicConfig(
            level=logging.DEBUG,
            format="%(levelname)s %(name)s: %(message)s",
        )
    ctx.obj = AppContext(home)


@cli.command(name="gen")
@click.option("--length", "-l", type=int, default=None,
              help=f"Password length ({MIN_PASSWORD_LENGTH}-{MAX_PASSWORD_LENGTH}, default from config)")
@click.option("--interactive", "-i", is_flag=True, help="Interactive mode")
@click.option("--uppercase/--no-uppercase", default=None, help="Include uppercase letters")
@click.option("--lowercase/--no-lowercase", default=None, help="Include lowercase letters")
@click.option("--numbers/--no-numbers", default=None, help="Include numbers")
@click.option("--symbols/--no-symbols", default=None, help="Include symbols")
@click.option("--extra-symbols", is_flag=True, help="Include extra symbols")
@click.option("--exclude-similar", is_flag=True, help="Exclude similar characters (il1Lo0O)")
@click.option("--exclude-ambiguous", is_flag=True, help="Exclude ambiguous characters")
@click.option("--custom-chars", default=None, help="Use only these characters")
@click.option("--copy/--no-copy", "-c", default=None, help="Copy to clipboard (default from config)")
@click.option("--save/--no-save", "-s", default=None, help="Save to history (default from config)")
@click.option("--show-strength/--hide-strength", default=True, help="Show password strength")
@click.pass_obj
def gen_command(app: AppContext, length: Optional[int], interactive: bool,
                uppercase: Optional[bool], lowercase: Optional[bool],
                numbers: Optional[bool], symbols: Optional[bool],
                extra_symbols: bool, exclude_similar: bool, exclude_ambiguous: bool,
                custom_chars: Optional[str], copy: Optional[bool], save: Optional[bool],
                show_strength: bool) -> None:
    """Generate a secure password."""
    config = app.load_config()

    if interactive:
        click.echo(click.style("🔐 Password Generator", fg="cyan"))
        request = _prompt_password_options(config)
        if request is None:
            click.echo("Operation cancelled")
            return

        options, copy, save = request
        _generate_and_display(app, config, options, copy=copy, save=save, show_strength=True)
        click.echo(click.style("✨ Done!", fg="green"))
        return

    def pick(flag: Optional[bool], default: bool) -> bool:
        return default if flag is None else flag

    try:
        options = PasswordOptions(
            length=length if length is not None else config.default_length,
            include_uppercase=pick(uppercase, config.default_include_uppercase),
            include_lowercase=pick(lowercase, config.default_include_lowercase),
            include_numbers=pick(numbers, config.default_include_numbers),
            include_symbols=pick(symbols, config.default_include_symbols),
            include_extra_symbols=extra_symbols,
            exclude_similar=exclude_similar,
            exclude_ambiguous=exclude_ambiguous,
            custom_chars=custom_chars,
        )
    except ValidationError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)

    _generate_and_display(
        app,
        config,
        options,
        copy=pick(copy, config.auto_copy),
        save=pick(save, config.save_history),
        show_strength=show_strength,
    )


def _prompt_password_options(config: Config) -> Optional[Tuple[PasswordOptions, bool, bool]]:
    """Collect generation options interactively; None if cancelled."""
    length = click.prompt(
        "Password length?",
        default=config.default_length,
        type=click.IntRange(MIN_PASSWORD_LENGTH, MAX_PASSWORD_LENGTH),
    )

    initial = [
        name for name, enabled in (
            ("uppercase", config.default_include_uppercase),
            ("lowercase", config.default_include_lowercase),
            ("numbers", config.default_include_numbers),
            ("symbols", config.default_include_symbols),
        ) if enabled
    ]
    char_types = multiselect("Select character types:", CHAR_TYPE_CHOICES, initial=initial)
    if char_types is None:
        return None

    exclusions = multiselect("Exclude characters? (optional)", EXCLUDE_CHOICES, required=False)
    if exclusions is None:
        return None

    copy = click.confirm("Copy to clipboard?", default=config.auto_copy)
    save = click.confirm("Save to history?", default=config.save_history)

    options = PasswordOptions(
        length=length,
        include_uppercase="uppercase" in char_types,
        include_lowercase="lowercase" in char_types,
        include_numbers="numbers" in char_types,
        include_symbols="symbols" in char_types,
        include_extra_symbols="extra_symbols" in char_types,
        exclude_similar="similar" in exclusions,
        exclude_ambiguous="ambiguous" in exclusions,
    )
    return options, copy, save


def _generate_and_display(app: AppContext, config: Config, options: PasswordOptions,
                          copy: bool, save: bool, show_strength: bool) -> None:
    """Generate a password, print it, then copy and save as requested."""
    try:
        generator = PasswordGenerator(options)
        password = generator.generate()
    except GenerationError as e:
        click.echo(f"Error generating password: {e}", err=True)
        sys.exit(1)

    click.echo(f"🔐 Generated {options.length}-character password using: "
               f"{generator.get_charset_info()}")
    click.echo()
    click.echo(click.style(" Generated Password ", fg="white", bg="blue"))
    click.echo(click.style(password, bold=True))

    if show_strength:
        strength = calculate_strength(password)
        if strength.score >= 75:
            color = "green"
        elif strength.score >= 50:
            color = "yellow"
        else:
            color = "red"

        click.echo(f"\n{click.style('Strength:', bold=True)} "
                   f"{click.style(strength.level, fg=color)} ({strength.score}/100)")

        if strength.feedback:
            click.echo(click.style("Suggestions: " + ", ".join(strength.feedback), dim=True))

    # Failures below are reported but never undo the generation
    if copy:
        if copy_to_clipboard(password):
            click.echo("📋 Copied to clipboard!")
        else:
            click.echo("Warning: Failed to copy to clipboard", err=True)

    if save:
        history = app.get_history(config)
        if history.limit == 0:
            click.echo("History is disabled (history_limit is 0), password not saved")
            return

        try:
            history.add(password, options)
            click.echo("💾 Saved to history!")
        except HistoryError as e:
            click.echo(f"Warning: {e}", err=True)


@cli.command(name="config")
@click.option("--show", "-s", is_flag=True, help="Show current configuration")
@click.option("--reset", "-r", is_flag=True, help="Reset to default configuration")
@click.option("--set", "set_pair", metavar="KEY=VALUE", help="Set a configuration value")
@click.pass_obj
def config_command(app: AppContext, show: bool, reset: bool, set_pair: Optional[str]) -> None:
    """Manage configuration settings."""
    try:
        if show:
            _show_config(app.load_config())
        elif reset:
            _reset_config(app)
        elif set_pair:
            key, value = parse_key_value(set_pair)
            app.config_manager.set_value(key, value)
            click.echo(f"✅ Updated {key} = {value}")
        else:
            _interactive_config(app)
    except (ConfigError, ValidationError) as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)
    except OSError as e:
        click.echo(f"Configuration failed: {e}", err=True)
        sys.exit(1)


def _show_config(config: Config) -> None:
    """Print the configuration as a table."""
    def mark(flag: bool) -> str:
        return "✅" if flag else "❌"

    entries = [
        ("Default Length", config.default_length),
        ("Include Uppercase", mark(config.default_include_uppercase)),
        ("Include Lowercase", mark(config.default_include_lowercase)),
        ("Include Numbers", mark(config.default_include_numbers)),
        ("Include Symbols", mark(config.default_include_symbols)),
        ("Auto Copy", mark(config.auto_copy)),
        ("Save History", mark(config.save_history)),
        ("History Limit", config.history_limit),
    ]

    click.echo(click.style("\n📋 Current Configuration:", fg="cyan"))
    click.echo(RULE)
    for label, value in entries:
        click.echo(f"{click.style(label.ljust(20), bold=True)}: {value}")
    click.echo(RULE + "\n")


def _reset_config(app: AppContext) -> None:
    if click.confirm("Are you sure you want to reset all settings to defaults?"):
        app.config_manager.reset()
        click.echo("🔄 Configuration reset to defaults")
    else:
        click.echo("Operation cancelled")


def _interactive_config(app: AppContext) -> None:
    """Menu-driven configuration."""
    click.echo(click.style("⚙️  Configuration Settings", fg="cyan"))
    config = app.load_config()

    action = select("What would you like to configure?", [
        Choice("defaults", "🎯 Default Password Settings"),
        Choice("behavior", "⚡ Behavior Settings"),
        Choice("history", "📚 History Settings"),
        Choice("show", "👀 Show Current Config"),
        Choice("reset", "🔄 Reset to Defaults"),
    ])

    if action is None:
        click.echo("Operation cancelled")
        return

    if action == "defaults":
        app.config_manager.save(
            default_length=click.prompt(
                "Default password length?",
                default=config.default_length,
                type=click.IntRange(MIN_PASSWORD_LENGTH, MAX_PASSWORD_LENGTH),
            ),
            default_include_uppercase=click.confirm(
                "Include uppercase letters by default?", default=config.default_include_uppercase),
            default_include_lowercase=click.confirm(
                "Include lowercase letters by default?", default=config.default_include_lowercase),
            default_include_numbers=click.confirm(
                "Include numbers by default?", default=config.default_include_numbers),
            default_include_symbols=click.confirm(
                "Include symbols by default?", default=config.default_include_symbols),
        )
    elif action == "behavior":
        app.config_manager.save(
            auto_copy=click.confirm("Auto-copy passwords to clipboard?", default=config.auto_copy)
        )
    elif action == "history":
        save_history = click.confirm("Save password history?", default=config.save_history)
        history_limit = config.history_limit
        if save_history:
            history_limit = click.prompt(
                "Maximum history entries?",
                default=config.history_limit,
                type=click.IntRange(MIN_HISTORY_LIMIT, MAX_HISTORY_LIMIT),
            )
        app.config_manager.save(save_history=save_history, history_limit=history_limit)
    elif action == "show":
        _show_config(config)
    elif action == "reset":
        _reset_config(app)

    click.echo(click.style("✨ Configuration updated!", fg="green"))


@cli.command(name="history")
@click.option("--list", "-l", "show_list", is_flag=True, help="List password history")
@click.option("--clear", "-c", is_flag=True, help="Clear password history")
@click.option("--limit", default=10, type=click.IntRange(min=1),
              help="Limit number of entries to show (default: 10)")
@click.pass_obj
def history_command(app: AppContext, show_list: bool, clear: bool, limit: int) -> None:
    """Manage password history."""
    history = app.get_history()

    try:
        if clear:
            _clear_history(history)
        elif show_list:
            _list_history(history.load(), limit)
        else:
            _interactive_history(history)
    except HistoryError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)


def _format_date(entry: HistoryEntry) -> str:
    created = entry.created_datetime
    if created is None:
        return entry.created_at
    return created.astimezone().strftime("%Y-%m-%d %H:%M:%S")


def _list_history(entries: List[HistoryEntry], limit: int = 10) -> None:
    """Print the newest entries with masked passwords."""
    if not entries:
        click.echo("📭 No password history found")
        return

    shown = entries[:limit]
    click.echo(click.style(f"\n📚 Password History ({len(shown)} of {len(entries)}):", fg="cyan"))
    click.echo(RULE)

    for index, entry in enumerate(shown, start=1):
        click.echo(f"\n{click.style(f'{index}.', bold=True)} {click.style(_format_date(entry), dim=True)}")
        click.echo(f"   Password: {click.style(mask_password(entry.password), fg='yellow')}")
        click.echo(f"   Settings: {click.style(format_options(entry.options), dim=True)}")

    click.echo("\n" + RULE + "\n")


def _clear_history(history: HistoryManager) -> None:
    if click.confirm("Are you sure you want to clear all password history?"):
        history.clear()
        click.echo("🗑️  Password history cleared")
    else:
        click.echo("Operation cancelled")


def _interactive_history(history: HistoryManager) -> None:
    """Menu-driven history browsing."""
    click.echo(click.style("📚 Password History", fg="cyan"))
    entries = history.load()

    if not entries:
        click.echo("📭 No password history found")
        click.echo("Generate some passwords first!")
        return

    action = select("What would you like to do?", [
        Choice("view", "👀 View History"),
        Choice("copy", "📋 Copy Password"),
        Choice("clear", "🗑️  Clear History"),
    ])

    if action is None:
        click.echo("Operation cancelled")
        return

    if action == "view":
        _list_history(entries, 20)
    elif action == "copy":
        _copy_from_history(history, entries)
    elif action == "clear":
        _clear_history(history)

    click.echo(click.style("✨ Done!", fg="green"))


def _copy_from_history(history: HistoryManager, entries: List[HistoryEntry]) -> None:
    choices = [
        Choice(
            entry.id,
            f"{mask_password(entry.password)} ({_format_date(entry)})",
            format_options(entry.options),
        )
        for entry in entries[:10]
    ]

    selected_id = select("Select password to copy:", choices)
    selected = history.get(selected_id) if selected_id else None
    if selected is None:
        click.echo("No selection made.")
        return

    if copy_to_clipboard(selected.password):
        click.echo("📋 Password copied to clipboard!")
    else:
        click.echo("Error: Failed to copy password to clipboard", err=True)


def main() -> None:
    """Main entry point for the CLI application."""
    cli()


if __name__ == "__main__":
    main()
