"""
Agent Pro resources list command.

SUMMARY: List every document as shown in the pick list
"""

from __future__ import annotations

import argparse
import sys

from agentpro.cli import OutputFormatter, add_json_flag
from agentpro.cli._utils import activate_from_args

SUMMARY = "List every document as shown in the pick list"


def register_args(parser: argparse.ArgumentParser) -> None:
    """Register command-specific arguments."""
    add_json_flag(parser)


def main(args: argparse.Namespace) -> int:
    formatter = OutputFormatter(json_mode=getattr(args, "json", False))

    try:
        extension = activate_from_args(args)
        items = extension.commands.build_pick_list()
        if formatter.json_mode:
            formatter.json_output(
                {
                    "resources": [
                        {
                            "label": item.label,
                            "category": item.description,
                            "uri": str(extension.fs.uri(item.label)),
                        }
                        for item in items
                    ]
                }
            )
        else:
            for item in items:
                formatter.text(item.label)
        return 0

    except Exception as e:
        formatter.error(e, error_code="list_error")
        return 1


if __name__ == "__main__":
    parser = argparse.ArgumentParser()
    register_args(parser)
    cli_args = parser.parse_args()
    sys.exit(main(cli_args))
