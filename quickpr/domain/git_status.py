"""Domain models for git working tree status and stash listings.

Parse-once pattern: porcelain output of `git status` and `git stash list` is
parsed into typed models at the boundary.
"""

from __future__ import annotations

from dataclasses import dataclass, field

# Field separator used with `git stash list --format`
STASH_FIELD_SEPARATOR = "\x1f"
STASH_LIST_FORMAT = f"%gd{STASH_FIELD_SEPARATOR}%H{STASH_FIELD_SEPARATOR}%gs"


@dataclass(frozen=True)
class WorkingTreeStatus:
    """Paths reported by `git status --porcelain`.

    Attributes:
        untracked: New files not yet added
        modified: Files modified in the index or the working tree
        deleted: Files deleted in the index or the working tree
        created: Files newly added to the index
    """

    untracked: list[str] = field(default_factory=list)
    modified: list[str] = field(default_factory=list)
    deleted: list[str] = field(default_factory=list)
    created: list[str] = field(default_factory=list)

    @classmethod
    def from_porcelain(cls, output: str) -> WorkingTreeStatus:
        """Parse `git status --porcelain` (v1) output."""
        untracked: list[str] = []
        modified: list[str] = []
        deleted: list[str] = []
        created: list[str] = []

        for line in output.splitlines():
            if len(line) < 4:
                continue
            codes, path = line[:2], line[3:]
            if codes == "??":
                untracked.append(path)
                continue
            if "M" in codes:
                modified.append(path)
            if "D" in codes:
                deleted.append(path)
            if codes[0] == "A":
                created.append(path)

        return cls(untracked=untracked, modified=modified, deleted=deleted, created=created)

    @property
    def has_unstaged_changes(self) -> bool:
        """Whether any untracked, modified or deleted paths exist.

        Newly added files alone do not count.
        """
        return bool(self.untracked or self.modified or self.deleted)


@dataclass(frozen=True)
class StashEntry:
    """One entry of the stash list.

    Attributes:
        ref: Reflog selector, e.g. "stash@{2}"
        commit: Object id of the stash commit
        message: Stash subject, e.g. "On main: temp-stash-for-pr-..."
    """

    ref: str
    commit: str
    message: str

    @classmethod
    def from_list_line(cls, line: str) -> StashEntry | None:
        """Parse one line produced with STASH_LIST_FORMAT."""
        parts = line.split(STASH_FIELD_SEPARATOR, 2)
        if len(parts) != 3:
            return None
        ref, commit, message = parts
        return cls(ref=ref, commit=commit, message=message)


def find_stash_entry(
    entries: list[StashEntry],
    label: str,
    commit: str | None = None,
) -> StashEntry | None:
    """Find the stash entry created for a run.

    Matches on the recorded commit id when known, otherwise on the label
    appearing in the entry message. Unrelated entries are never chosen.
    """
    if commit:
        for entry in entries:
            if entry.commit == commit:
                return entry
    for entry in entries:
        if label in entry.message:
            return entry
    return None
