"""
Agent Pro resources export command.

SUMMARY: Copy a resource into a trusted project

The project folder (--project, default: current directory) must be trusted,
either with --trust or through workspace.trusted_folders in the user config.
"""

from __future__ import annotations

import argparse
import sys

from agentpro.cli import OutputFormatter, add_force_flag, add_json_flag, add_target_arg
from agentpro.cli._utils import activate_from_args, report_command_result

SUMMARY = "Copy a resource into a trusted project"


def register_args(parser: argparse.ArgumentParser) -> None:
    """Register command-specific arguments."""
    add_target_arg(parser)
    parser.add_argument(
        "--project",
        help="Project folder to export into (default: current directory)",
    )
    parser.add_argument(
        "--trust",
        action="store_true",
        help="Treat the project folder as trusted for this run",
    )
    add_force_flag(parser, "Overwrite an existing exported file without asking")
    add_json_flag(parser)


def main(args: argparse.Namespace) -> int:
    formatter = OutputFormatter(json_mode=getattr(args, "json", False))

    try:
        extension = activate_from_args(args)
        result = extension.commands.export_resource(args.target)
        return report_command_result(formatter, result)

    except Exception as e:
        formatter.error(e, error_code="export_error")
        return 1


if __name__ == "__main__":
    parser = argparse.ArgumentParser()
    register_args(parser)
    cli_args = parser.parse_args()
    sys.exit(main(cli_args))
