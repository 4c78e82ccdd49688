"""
Agent Pro CLI package.

Provides the command-line interface with auto-discovery of commands
from subfolders (resources/, config/).

Framework utilities for building CLI commands:
- _output: Output formatting (JSON/text modes)
- _args: Common argument registration helpers
- _utils: Activation and host wiring shared by commands
"""
from ._output import OutputFormatter
from ._args import add_force_flag, add_json_flag, add_target_arg

__all__ = [
    # Output formatting
    "OutputFormatter",
    # Argument helpers
    "add_json_flag",
    "add_force_flag",
    "add_target_arg",
]
