"""CLI command implementations for the layoutplanner application.

- validate: Validate a configuration file
"""

from layoutplanner.cli.commands.validate import validate_command

__all__ = ["validate_command"]
