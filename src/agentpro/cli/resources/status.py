"""
Agent Pro resources status command.

SUMMARY: Show installed version and resource counts
"""

from __future__ import annotations

import argparse
import sys

from agentpro.cli import OutputFormatter, add_json_flag
from agentpro.cli._utils import activate_from_args

SUMMARY = "Show installed version and resource counts"


def register_args(parser: argparse.ArgumentParser) -> None:
    """Register command-specific arguments."""
    add_json_flag(parser)


def main(args: argparse.Namespace) -> int:
    formatter = OutputFormatter(json_mode=getattr(args, "json", False))

    try:
        extension = activate_from_args(args)
        installer = extension.installer
        categories = {
            node.label: len(extension.tree.walk_documents(node))
            for node in extension.tree.get_children()
        }
        data = {
            "version": extension.context.version,
            "installedVersion": installer.marker.get(),
            "current": installer.is_current(extension.context.version),
            "storagePath": str(installer.storage_path),
            "resourcesPath": str(installer.resources_path),
            "categories": categories,
            "documents": sum(categories.values()),
        }
        if extension.install_error is not None:
            data["error"] = str(extension.install_error)

        if formatter.json_mode:
            formatter.json_output(data)
        else:
            formatter.text(f"Agent Pro {data['version']}")
            formatter.text_kv("Installed version", data["installedVersion"] or "(none)")
            formatter.text_kv("Resources", data["resourcesPath"])
            for name, count in categories.items():
                formatter.text_kv(name, f"{count} documents", prefix="    ")
        return 0 if extension.install_error is None else 1

    except Exception as e:
        formatter.error(e, error_code="status_error")
        return 1


if __name__ == "__main__":
    parser = argparse.ArgumentParser()
    register_args(parser)
    cli_args = parser.parse_args()
    sys.exit(main(cli_args))
