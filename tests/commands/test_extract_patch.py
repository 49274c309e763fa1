"""Tests for the extract command.

Tests cover:
- Reading the diff from a file, stdin, or the repository
- Exit codes for no overlap, missing input and git failures
"""

import unittest
from io import StringIO
from pathlib import Path
from tempfile import TemporaryDirectory
from unittest.mock import MagicMock, patch

from quickpr.commands.extract_patch import cmd_extract_patch
from quickpr.services.git_operations import GitDiffError, GitOperationsService

FILE_HEADER = (
    "diff --git a/app.py b/app.py\n"
    "index 1111111..2222222 100644\n"
    "--- a/app.py\n"
    "+++ b/app.py\n"
)
FIRST_HUNK = "@@ -2,3 +2,3 @@\n x\n-y\n+Y\n z"
SECOND_HUNK = "@@ -30,3 +30,4 @@\n p\n+q\n r\n s\n"
DIFF = FILE_HEADER + FIRST_HUNK + "\n" + SECOND_HUNK


class TestCmdExtractPatch(unittest.TestCase):
    """Tests for cmd_extract_patch."""

    def setUp(self):
        self.tmp = TemporaryDirectory()
        self.addCleanup(self.tmp.cleanup)
        self.diff_path = Path(self.tmp.name) / "app.diff"
        self.diff_path.write_text(DIFF)

        for stream in ("stdout", "stderr"):
            stream_patch = patch(f"sys.{stream}", new_callable=StringIO)
            setattr(self, stream, stream_patch.start())
            self.addCleanup(stream_patch.stop)

    def test_prints_overlapping_hunk_from_diff_file(self):
        exit_code = cmd_extract_patch(1, 2, diff_file=str(self.diff_path))

        self.assertEqual(exit_code, 0)
        self.assertEqual(self.stdout.getvalue(), FILE_HEADER + FIRST_HUNK + "\n")

    def test_reads_stdin_by_default(self):
        with patch("sys.stdin", StringIO(DIFF)):
            exit_code = cmd_extract_patch(31, 31)

        self.assertEqual(exit_code, 0)
        self.assertEqual(self.stdout.getvalue(), FILE_HEADER + SECOND_HUNK + "\n")

    def test_dash_reads_stdin(self):
        with patch("sys.stdin", StringIO(DIFF)):
            self.assertEqual(cmd_extract_patch(1, 1, diff_file="-"), 0)

    def test_no_overlap_returns_two(self):
        exit_code = cmd_extract_patch(10, 20, diff_file=str(self.diff_path))

        self.assertEqual(exit_code, 2)
        self.assertEqual(self.stdout.getvalue(), "")
        self.assertIn("No changes in selected lines.", self.stderr.getvalue())

    def test_empty_diff_returns_two(self):
        with patch("sys.stdin", StringIO("")):
            self.assertEqual(cmd_extract_patch(0, 5), 2)

    def test_missing_diff_file_returns_one(self):
        exit_code = cmd_extract_patch(1, 2, diff_file=str(Path(self.tmp.name) / "missing.diff"))

        self.assertEqual(exit_code, 1)
        self.assertIn("Input file not found", self.stderr.getvalue())

    def test_missing_start_returns_one(self):
        self.assertEqual(cmd_extract_patch(None, None, diff_file=str(self.diff_path)), 1)

    def test_reads_file_diff_from_repository(self):
        git = MagicMock(spec=GitOperationsService)
        git.repo_path = Path(self.tmp.name)
        git.get_file_diff.return_value = DIFF

        with patch("quickpr.commands.extract_patch.GitOperationsService", return_value=git):
            exit_code = cmd_extract_patch(1, 1, file_path="app.py", context_lines=5)

        self.assertEqual(exit_code, 0)
        git.get_file_diff.assert_called_once_with("app.py", context_lines=5)
        self.assertEqual(self.stdout.getvalue(), FILE_HEADER + FIRST_HUNK + "\n")

    def test_git_failure_returns_one(self):
        git = MagicMock(spec=GitOperationsService)
        git.repo_path = Path(self.tmp.name)
        git.get_file_diff.side_effect = GitDiffError("Git command failed: git diff")

        with patch("quickpr.commands.extract_patch.GitOperationsService", return_value=git):
            self.assertEqual(cmd_extract_patch(1, 1, file_path="app.py"), 1)

        self.assertIn("Failed to read diff", self.stderr.getvalue())


if __name__ == "__main__":
    unittest.main()
