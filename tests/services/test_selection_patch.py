"""Tests for SelectionPatchService.

Tests cover:
- Diff retrieval with the configured context size
- Relative and absolute file paths
- Staged patch retrieval
"""

from __future__ import annotations

import tempfile
import unittest
from pathlib import Path
from unittest.mock import MagicMock

from quickpr.domain.diff import SelectionRange
from quickpr.services.git_operations import GitOperationsService
from quickpr.services.selection_patch import SelectionPatchService

DIFF = (
    "diff --git a/lib/util.py b/lib/util.py\n"
    "index 1111111..2222222 100644\n"
    "--- a/lib/util.py\n"
    "+++ b/lib/util.py\n"
    "@@ -5,3 +5,3 @@\n a\n-b\n+B\n c\n"
)


class TestSelectionPatchService(unittest.TestCase):
    """Tests for SelectionPatchService with a mocked git service."""

    def setUp(self):
        self._tmp = tempfile.TemporaryDirectory()
        self.addCleanup(self._tmp.cleanup)
        self.repo = Path(self._tmp.name).resolve()
        self.git = MagicMock(spec=GitOperationsService)
        self.git.repo_path = self.repo
        self.git.get_file_diff.return_value = DIFF
        self.service = SelectionPatchService(self.git, context_lines=0)

    def test_selection_patch_from_relative_path(self):
        patch = self.service.create_patch_for_selection("lib/util.py", SelectionRange(5, 5))

        self.assertEqual(patch, DIFF + "\n")
        self.git.get_file_diff.assert_called_once_with("lib/util.py", context_lines=0)

    def test_absolute_path_is_made_relative_to_repository(self):
        self.service.create_patch_for_selection(self.repo / "lib" / "util.py", SelectionRange(5, 5))

        self.git.get_file_diff.assert_called_once_with("lib/util.py", context_lines=0)

    def test_unchanged_file_gives_none(self):
        self.git.get_file_diff.return_value = ""

        self.assertIsNone(
            self.service.create_patch_for_selection("lib/util.py", SelectionRange(0, 100))
        )

    def test_selection_outside_hunks_gives_none(self):
        self.assertIsNone(
            self.service.create_patch_for_selection("lib/util.py", SelectionRange(50, 60))
        )

    def test_staged_patch_is_the_full_staged_diff(self):
        self.git.get_staged_diff.return_value = DIFF

        self.assertEqual(self.service.get_staged_patch(), DIFF)

    def test_nothing_staged_gives_none(self):
        self.git.get_staged_diff.return_value = "\n"

        self.assertIsNone(self.service.get_staged_patch())


if __name__ == "__main__":
    unittest.main()
