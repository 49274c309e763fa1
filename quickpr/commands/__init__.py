"""CLI command implementations."""

from quickpr.commands.extract_patch import cmd_extract_patch
from quickpr.commands.make_pr import cmd_make_pr

__all__ = ["cmd_extract_patch", "cmd_make_pr"]
