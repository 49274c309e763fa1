"""Tests for working tree status and stash list parsing.

Tests cover:
- Porcelain status classification
- The unstaged-changes snapshot rule
- Stash list parsing and run-specific stash lookup
"""

from __future__ import annotations

import unittest

from quickpr.domain.git_status import (
    STASH_FIELD_SEPARATOR,
    StashEntry,
    WorkingTreeStatus,
    find_stash_entry,
)

SEP = STASH_FIELD_SEPARATOR


class TestWorkingTreeStatus(unittest.TestCase):
    """Tests for WorkingTreeStatus.from_porcelain."""

    def test_classifies_paths(self):
        status = WorkingTreeStatus.from_porcelain(
            " M src/a.py\n"
            "M  src/b.py\n"
            " D src/c.py\n"
            "?? notes.txt\n"
            "A  src/new.py\n"
        )

        self.assertEqual(status.modified, ["src/a.py", "src/b.py"])
        self.assertEqual(status.deleted, ["src/c.py"])
        self.assertEqual(status.untracked, ["notes.txt"])
        self.assertEqual(status.created, ["src/new.py"])

    def test_clean_tree_has_no_unstaged_changes(self):
        self.assertFalse(WorkingTreeStatus.from_porcelain("").has_unstaged_changes)

    def test_added_files_alone_do_not_count(self):
        self.assertFalse(WorkingTreeStatus.from_porcelain("A  src/new.py\n").has_unstaged_changes)

    def test_untracked_files_count(self):
        self.assertTrue(WorkingTreeStatus.from_porcelain("?? scratch.py\n").has_unstaged_changes)

    def test_modified_files_count(self):
        self.assertTrue(WorkingTreeStatus.from_porcelain("MM src/a.py\n").has_unstaged_changes)


class TestStashEntries(unittest.TestCase):
    """Tests for StashEntry parsing and find_stash_entry."""

    def setUp(self):
        self.entries = [
            StashEntry("stash@{0}", "aaa111", "On main: experiments"),
            StashEntry("stash@{1}", "bbb222", "On feature/wip: temp-stash-for-pr-1234"),
            StashEntry("stash@{2}", "ccc333", "WIP on main: 9f8e7d6 old work"),
            StashEntry("stash@{3}", "ddd444", "On release: hotfix notes"),
        ]

    def test_parses_formatted_line(self):
        entry = StashEntry.from_list_line(f"stash@{{1}}{SEP}bbb222{SEP}On main: my label")

        self.assertEqual(entry, StashEntry("stash@{1}", "bbb222", "On main: my label"))

    def test_rejects_malformed_line(self):
        self.assertIsNone(StashEntry.from_list_line("stash@{0}: On main: plain format"))

    def test_finds_entry_by_label(self):
        entry = find_stash_entry(self.entries, "temp-stash-for-pr-1234")

        self.assertEqual(entry.ref, "stash@{1}")

    def test_commit_id_takes_precedence(self):
        entry = find_stash_entry(self.entries, "temp-stash-for-pr-1234", commit="ddd444")

        self.assertEqual(entry.ref, "stash@{3}")

    def test_falls_back_to_label_when_commit_unknown(self):
        entry = find_stash_entry(self.entries, "temp-stash-for-pr-1234", commit="zzz999")

        self.assertEqual(entry.ref, "stash@{1}")

    def test_returns_none_when_nothing_matches(self):
        self.assertIsNone(find_stash_entry(self.entries, "temp-stash-for-pr-5678"))


if __name__ == "__main__":
    unittest.main()
