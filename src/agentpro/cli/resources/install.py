"""
Agent Pro resources install command.

SUMMARY: Install the bundled resources for the running version
"""

from __future__ import annotations

import argparse
import sys

from agentpro.cli import OutputFormatter, add_force_flag, add_json_flag
from agentpro.cli._utils import activate_from_args

SUMMARY = "Install the bundled resources for the running version"


def register_args(parser: argparse.ArgumentParser) -> None:
    """Register command-specific arguments."""
    add_force_flag(parser, "Reinstall even when the installed version is current")
    add_json_flag(parser)


def main(args: argparse.Namespace) -> int:
    """Run activation, reinstalling when --force is given."""
    formatter = OutputFormatter(json_mode=getattr(args, "json", False))

    try:
        extension = activate_from_args(args, force_install=bool(args.force))
        if extension.install_error is not None:
            formatter.error(extension.install_error, error_code="install_error")
            return 1

        result = extension.install_result
        if result.installed:
            message = f"Installed {result.files_copied} files for version {result.version} to {result.resources_path}"
        else:
            message = f"Resources already installed (version {result.version})"
        formatter.success(result.to_dict(), message)
        return 0

    except Exception as e:
        formatter.error(e, error_code="install_error")
        return 1


if __name__ == "__main__":
    parser = argparse.ArgumentParser()
    register_args(parser)
    cli_args = parser.parse_args()
    sys.exit(main(cli_args))
