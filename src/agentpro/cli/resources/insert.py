"""
Agent Pro resources insert command.

SUMMARY: Insert a resource into a file at a cursor position

The file named by --file plays the active editor; --line/--column place the
cursor (1-based, default: end of file). Without --file there is no active
editor and nothing is inserted.
"""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

from agentpro.cli import OutputFormatter, add_json_flag, add_target_arg
from agentpro.cli._utils import activate_from_args, report_command_result
from agentpro.core.host import FileTextEditor

SUMMARY = "Insert a resource into a file at a cursor position"


def register_args(parser: argparse.ArgumentParser) -> None:
    """Register command-specific arguments."""
    add_target_arg(parser)
    parser.add_argument(
        "--file",
        dest="file",
        help="File to insert into (acts as the active editor)",
    )
    parser.add_argument(
        "--line",
        type=int,
        help="1-based cursor line (default: end of file)",
    )
    parser.add_argument(
        "--column",
        type=int,
        default=1,
        help="1-based cursor column (default: 1)",
    )
    add_json_flag(parser)


def main(args: argparse.Namespace) -> int:
    formatter = OutputFormatter(json_mode=getattr(args, "json", False))

    try:
        editor = None
        if args.file:
            path = Path(args.file).expanduser()
            if path.is_file():
                editor = FileTextEditor(path, line=args.line, column=args.column)
        extension = activate_from_args(args, editor=editor)
        result = extension.commands.insert_resource(args.target)
        return report_command_result(formatter, result)

    except Exception as e:
        formatter.error(e, error_code="insert_error")
        return 1


if __name__ == "__main__":
    parser = argparse.ArgumentParser()
    register_args(parser)
    cli_args = parser.parse_args()
    sys.exit(main(cli_args))
