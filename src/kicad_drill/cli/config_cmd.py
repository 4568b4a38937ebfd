"""
Config command for kicad-drill CLI.

Usage:
    kicad-drill config --show       Show effective configuration with sources
    kicad-drill config --template   Print a documented template
    kicad-drill config --init       Create .kicad-drill.toml in the current directory
    kicad-drill config --paths      Show config file paths
"""

import argparse
import sys
from dataclasses import fields
from pathlib import Path

from kicad_drill.config import (
    CONFIG_FILENAMES,
    USER_CONFIG_PATH,
    Config,
    DrillConfig,
    generate_template,
    get_config_paths,
)


def add_config_arguments(parser: argparse.ArgumentParser) -> None:
    action_group = parser.add_mutually_exclusive_group()
    action_group.add_argument(
        "--show", action="store_true", help="Show effective configuration with sources"
    )
    action_group.add_argument(
        "--template", action="store_true", help="Print a documented config template"
    )
    action_group.add_argument(
        "--init", action="store_true", help="Create template config file in current directory"
    )
    action_group.add_argument("--paths", action="store_true", help="Show config file paths")


def run_config(args: argparse.Namespace) -> int:
    """Run the config command. ConfigError propagates to the caller."""
    if args.template:
        print(generate_template(), end="")
        return 0
    if args.init:
        return _init_config()
    if args.paths:
        return _show_paths()
    return _show_config()


def _show_config() -> int:
    """Show effective configuration with sources."""
    config = Config.load()

    print("# Effective kicad-drill configuration")
    print()
    print("[drill]")
    for f in fields(DrillConfig):
        _print_value(f.name, getattr(config.drill, f.name), config.get_source(f"drill.{f.name}"))
    return 0


def _print_value(key: str, value, source: str) -> None:
    """Print a config value with its source."""
    if isinstance(value, str):
        formatted = f'"{value}"'
    elif isinstance(value, bool):
        formatted = "true" if value else "false"
    elif value is None:
        formatted = "# not set"
    else:
        formatted = str(value)

    source_display = Path(source).name if source != "default" else source
    print(f"{key} = {formatted}  # from: {source_display}")


def _show_paths() -> int:
    """Show config file paths."""
    paths = get_config_paths()

    print(f"User config: {USER_CONFIG_PATH}")
    print(f"  Status: {'exists' if paths['user'] else 'not found'}")
    print(f"Project config search: {', '.join(CONFIG_FILENAMES)}")
    if paths["project"]:
        print(f"  Found: {paths['project']}")
    else:
        print("  Status: not found")
    return 0


def _init_config() -> int:
    """Create a template config file."""
    target = Path.cwd() / CONFIG_FILENAMES[0]

    if target.exists():
        print(f"Error: Config file already exists: {target}", file=sys.stderr)
        print("Remove it first or edit manually.", file=sys.stderr)
        return 1

    try:
        target.write_text(generate_template())
    except OSError as e:
        print(f"Error writing config file: {e}", file=sys.stderr)
        return 1

    print(f"Created config template: {target}")
    return 0
