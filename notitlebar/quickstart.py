"""Interactive configuration wizard."""

from __future__ import annotations

import json
import shutil
import sys
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path

import questionary
from questionary import Choice

from .constants import CONFIG_FILE, CONFIG_SECTION
from .models import ExitCode, IgnoreListType
from .settings import NOTITLEBAR_SCHEMA

__all__ = ["Args", "backup_config", "generate_toml", "main", "parse_args", "run_wizard"]


@dataclass
class Args:
    """Parsed command line arguments."""

    dry_run: bool = False
    output: Path | None = None


def parse_args(argv: list[str]) -> Args:
    """Parse the quickstart arguments.

    Args:
        argv: Command line arguments (without the command name)

    Returns:
        Parsed arguments
    """
    args = Args()
    i = 0
    while i < len(argv):
        arg = argv[i]
        if arg == "--dry-run":
            args.dry_run = True
            i += 1
        elif arg == "--output" and i + 1 < len(argv):
            args.output = Path(argv[i + 1])
            i += 2
        else:
            i += 1
    return args


def _format_value(value: bool | str | list) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, list):
        return "[" + ", ".join(_format_value(item) for item in value) + "]"
    # TOML basic strings accept JSON escapes
    return json.dumps(value)


def generate_toml(section: dict) -> str:
    """Render the [notitlebar] section as TOML."""
    lines = [f"[{CONFIG_SECTION}]"]
    lines.extend(f"{key} = {_format_value(value)}" for key, value in section.items())
    return "\n".join(lines) + "\n"


def backup_config(config_path: Path) -> Path | None:
    """Copy an existing config file aside.

    Returns:
        The backup path, None if there was nothing to back up
    """
    if not config_path.exists():
        return None
    backup_path = config_path.with_name(f"{config_path.name}.{datetime.now():%Y%m%d-%H%M%S}.bak")
    shutil.copy2(config_path, backup_path)
    return backup_path


def _describe(name: str) -> str:
    field = NOTITLEBAR_SCHEMA.get(name)
    return field.description if field else name


def ask_section() -> dict | None:
    """Ask every setting.

    Returns:
        The section content, None if cancelled
    """
    only_main_monitor = questionary.confirm(
        _describe("only_main_monitor"),
        default=False,
    ).ask()
    if only_main_monitor is None:
        return None

    list_type = questionary.select(
        _describe("ignore_list_type"),
        choices=[
            Choice(title="Disabled", value=IgnoreListType.DISABLED.value),
            Choice(title="Blacklist: never hide the title bar of listed windows", value=IgnoreListType.BLACKLIST.value),
            Choice(title="Whitelist: only hide the title bar of listed windows", value=IgnoreListType.WHITELIST.value),
        ],
    ).ask()
    if list_type is None:
        return None

    patterns: list[str] = []
    if list_type != IgnoreListType.DISABLED.value:
        questionary.print(f"{_describe('ignore_list')}, eg: firefox, *Terminal*. Empty line to finish.", style="fg:gray")
        while True:
            pattern = questionary.text("Pattern:").ask()
            if pattern is None:
                return None
            if not pattern.strip():
                break
            patterns.append(pattern.strip())

    return {
        "only_main_monitor": only_main_monitor,
        "ignore_list_type": list_type,
        "ignore_list": patterns,
    }


def run_wizard(dry_run: bool = False, output: Path | None = None) -> ExitCode:
    """Run the configuration wizard.

    Args:
        dry_run: If True, only preview config without writing
        output: Custom output path
    """
    questionary.print("\nnotitlebar configuration\n", style="bold fg:cyan")

    section = ask_section()
    if section is None:
        return ExitCode.USAGE_ERROR

    content = generate_toml(section)
    if dry_run:
        questionary.print("\n── Generated Configuration (dry-run) ──", style="bold")
        print(content)
        return ExitCode.SUCCESS

    config_path = output or CONFIG_FILE
    backup_path = backup_config(config_path)
    if backup_path:
        questionary.print(f"Backup created: {backup_path}", style="fg:green")
    config_path.parent.mkdir(parents=True, exist_ok=True)
    config_path.write_text(content, encoding="utf-8")
    questionary.print(f"\n✓ Configuration written to: {config_path}", style="fg:green bold")
    questionary.print("Send SIGHUP to a running daemon to reload it.", style="fg:gray")
    return ExitCode.SUCCESS


def main(argv: list[str]) -> ExitCode:
    """Entry point for `notitlebar quickstart`."""
    args = parse_args(argv)
    try:
        return run_wizard(dry_run=args.dry_run, output=args.output)
    except KeyboardInterrupt:
        print("\n\nWizard cancelled.", file=sys.stderr)
        return ExitCode.USAGE_ERROR
