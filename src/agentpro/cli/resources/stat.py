"""
Agent Pro resources stat command.

SUMMARY: Show metadata for a resource URI
"""

from __future__ import annotations

import argparse
import sys

from agentpro.cli import OutputFormatter, add_json_flag
from agentpro.cli._utils import activate_from_args
from agentpro.core.exceptions import ResourceNotFoundError

SUMMARY = "Show metadata for a resource URI"


def register_args(parser: argparse.ArgumentParser) -> None:
    """Register command-specific arguments."""
    parser.add_argument(
        "uri",
        help="Resource URI (agentpro:/agents/x.md) or relative path",
    )
    add_json_flag(parser)


def main(args: argparse.Namespace) -> int:
    formatter = OutputFormatter(json_mode=getattr(args, "json", False))

    try:
        extension = activate_from_args(args)
        fs = extension.fs
        uri = fs.to_uri(args.uri)
        st = fs.stat(uri)
        data = {
            "uri": str(uri),
            "type": st.type.name.lower(),
            "size": st.size,
            "ctime": st.ctime,
            "mtime": st.mtime,
        }
        if formatter.json_mode:
            formatter.json_output(data)
        else:
            formatter.text(data["uri"])
            for key in ("type", "size", "ctime", "mtime"):
                formatter.text_kv(key, data[key])
        return 0

    except ResourceNotFoundError as e:
        formatter.error(e, error_code="not_found")
        return 1
    except Exception as e:
        formatter.error(e, error_code="stat_error")
        return 1

