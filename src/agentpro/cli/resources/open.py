"""
Agent Pro resources open command.

SUMMARY: Print a resource read-only

Without a target an interactive pick list of every document is shown.
"""

from __future__ import annotations

import argparse
import sys

from agentpro.cli import OutputFormatter, add_json_flag, add_target_arg
from agentpro.cli._utils import activate_from_args, report_command_result

SUMMARY = "Print a resource read-only"


def register_args(parser: argparse.ArgumentParser) -> None:
    """Register command-specific arguments."""
    add_target_arg(parser)
    add_json_flag(parser)


def main(args: argparse.Namespace) -> int:
    formatter = OutputFormatter(json_mode=getattr(args, "json", False))

    try:
        extension = activate_from_args(args)
        result = extension.commands.open_resource(args.target)
        return report_command_result(formatter, result)

    except Exception as e:
        formatter.error(e, error_code="open_error")
        return 1


if __name__ == "__main__":
    parser = argparse.ArgumentParser()
    register_args(parser)
    cli_args = parser.parse_args()
    sys.exit(main(cli_args))
