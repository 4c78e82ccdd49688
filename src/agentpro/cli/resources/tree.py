"""
Agent Pro resources tree command.

SUMMARY: Show the category/document tree
"""

from __future__ import annotations

import argparse
import sys
from typing import Any, Dict, List

from agentpro.cli import OutputFormatter, add_json_flag
from agentpro.cli._utils import activate_from_args
from agentpro.core.resources import ResourceTreeProvider

SUMMARY = "Show the category/document tree"


def register_args(parser: argparse.ArgumentParser) -> None:
    """Register command-specific arguments."""
    parser.add_argument(
        "category",
        nargs="?",
        help="Only show this category",
    )
    add_json_flag(parser)


def _collect(tree: ResourceTreeProvider, node=None) -> List[Dict[str, Any]]:
    out: List[Dict[str, Any]] = []
    for child in tree.get_children(node):
        item = tree.get_tree_item(child)
        entry: Dict[str, Any] = {
            "label": item.label,
            "kind": child.kind.value,
            "uri": str(item.resource_uri),
        }
        if child.is_category:
            entry["children"] = _collect(tree, child)
        out.append(entry)
    return out


def _render(formatter: OutputFormatter, entries: List[Dict[str, Any]], depth: int = 0) -> None:
    for entry in entries:
        suffix = "/" if entry["kind"] == "category" else ""
        formatter.text(f"{'  ' * depth}{entry['label']}{suffix}")
        _render(formatter, entry.get("children", []), depth + 1)


def main(args: argparse.Namespace) -> int:
    formatter = OutputFormatter(json_mode=getattr(args, "json", False))

    try:
        extension = activate_from_args(args)
        entries = _collect(extension.tree, args.category)
        if formatter.json_mode:
            formatter.json_output({"root": args.category or "", "children": entries})
        elif not entries:
            formatter.text("No resources installed")
        else:
            _render(formatter, entries)
        return 0

    except Exception as e:
        formatter.error(e, error_code="tree_error")
        return 1


if __name__ == "__main__":
    parser = argparse.ArgumentParser()
    register_args(parser)
    cli_args = parser.parse_args()
    sys.exit(main(cli_args))
