"""Common CLI argument registration utilities."""
from __future__ import annotations

import argparse


def add_json_flag(parser: argparse.ArgumentParser) -> None:
    """Add --json flag for JSON output mode."""
    parser.add_argument(
        "--json",
        action="store_true",
        help="Output as JSON",
    )


def add_force_flag(parser: argparse.ArgumentParser, help_text: str = "Force the operation") -> None:
    parser.add_argument(
        "--force",
        action="store_true",
        help=help_text,
    )


def add_target_arg(parser: argparse.ArgumentParser) -> None:
    """Add the optional resource target (``agentpro:/agents/x.md`` or ``agents/x.md``).

    When omitted, commands present an interactive pick list.
    """
    parser.add_argument(
        "target",
        nargs="?",
        help="Resource URI or path relative to the resource root (omit to pick interactively)",
    )


__all__ = [
    "add_json_flag",
    "add_force_flag",
    "add_target_arg",
]
