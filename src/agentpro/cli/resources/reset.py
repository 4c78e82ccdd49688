"""
Agent Pro resources reset command.

SUMMARY: Forget the installed version so the next run reinstalls

Only the version marker is cleared by default; --purge removes the installed
resource tree too.
"""

from __future__ import annotations

import argparse
import sys

from agentpro.cli import OutputFormatter, add_json_flag
from agentpro.cli._utils import context_from_args
from agentpro.core.activation import build_installer

SUMMARY = "Forget the installed version so the next run reinstalls"


def register_args(parser: argparse.ArgumentParser) -> None:
    """Register command-specific arguments."""
    parser.add_argument(
        "--purge",
        action="store_true",
        help="Also delete the installed resource tree",
    )
    add_json_flag(parser)


def main(args: argparse.Namespace) -> int:
    formatter = OutputFormatter(json_mode=getattr(args, "json", False))

    try:
        installer = build_installer(context_from_args(args))
        previous = installer.marker.get()
        installer.reset(purge=bool(args.purge))
        formatter.success(
            {
                "previousVersion": previous,
                "purged": bool(args.purge),
                "resourcesPath": str(installer.resources_path),
            },
            f"Reset installed version (was {previous or 'none'})",
        )
        return 0

    except Exception as e:
        formatter.error(e, error_code="reset_error")
        return 1


if __name__ == "__main__":
    parser = argparse.ArgumentParser()
    register_args(parser)
    cli_args = parser.parse_args()
    sys.exit(main(cli_args))
