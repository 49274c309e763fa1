"""Console progress reporting.

Services report progress through the ProgressReporter protocol so they can be
tested without capturing stdout.
"""

from __future__ import annotations

import sys
from dataclasses import dataclass
from typing import Protocol


class ProgressReporter(Protocol):
    """Protocol for reporting progress and non-fatal problems."""

    def report(self, message: str) -> None:
        """Report a progress step."""
        ...

    def warn(self, message: str) -> None:
        """Report a non-fatal problem."""
        ...

    def debug(self, message: str) -> None:
        """Report low-level detail such as executed commands."""
        ...


@dataclass
class ConsoleReporter:
    """Prints progress to stdout and warnings to stderr.

    This is the production implementation of ProgressReporter.
    """

    verbose: bool = False

    def report(self, message: str) -> None:
        print(message)

    def warn(self, message: str) -> None:
        print(f"Warning: {message}", file=sys.stderr)

    def debug(self, message: str) -> None:
        if self.verbose:
            print(message, file=sys.stderr)
