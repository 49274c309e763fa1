"""Selection patch service.

Obtains diff text from git and turns it into the patch that becomes the pull
request. Read-only: never mutates the repository.
"""

from __future__ import annotations

import os
from pathlib import Path

from quickpr.domain.diff import SelectionRange, extract_patch_for_selection
from quickpr.infrastructure.console import ProgressReporter
from quickpr.services.git_operations import GitOperationsService


class SelectionPatchService:
    """Builds patches from a line selection or from the staged changes."""

    def __init__(
        self,
        git: GitOperationsService,
        context_lines: int = 3,
        reporter: ProgressReporter | None = None,
    ):
        self.git = git
        self.context_lines = context_lines
        self.reporter = reporter

    def create_patch_for_selection(
        self, file_path: str | Path, selection: SelectionRange
    ) -> str | None:
        """Build a patch of the hunks in one file that overlap a selection.

        Args:
            file_path: File path, absolute or relative to the repository root
            selection: Zero-based inclusive line range in the current file

        Returns:
            Patch text, or None when the file is unchanged or no hunk overlaps
        """
        relative_path = self.relative_path(file_path)
        if self.reporter is not None:
            self.reporter.debug(
                f"Selection {selection.start}-{selection.end} in {relative_path}"
            )
        diff = self.git.get_file_diff(relative_path, context_lines=self.context_lines)
        return extract_patch_for_selection(diff, selection)

    def get_staged_patch(self) -> str | None:
        """Get the full staged diff, or None when nothing is staged."""
        diff = self.git.get_staged_diff()
        return diff if diff.strip() else None

    def relative_path(self, file_path: str | Path) -> str:
        """Express a path relative to the repository root."""
        path = Path(file_path)
        if not path.is_absolute():
            return path.as_posix()
        return Path(os.path.relpath(path, self.git.repo_path.resolve())).as_posix()
