"""Domain models for single-file unified diffs.

Parse-once pattern: raw `git diff` output for one file is parsed into
immutable DiffHunk models at the boundary. Patch extraction only selects
hunks and reassembles header + hunk text; diff content is never re-derived.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field

from quickpr.domain.errors import NoSelectionError

# Counts are optional; unified diff convention treats a missing count as 1
HUNK_HEADER_PATTERN = re.compile(r"^@@ -(\d+)(?:,(\d+))? \+(\d+)(?:,(\d+))? @@")

# diff --git, index, --- a/..., +++ b/...
FILE_HEADER_LINE_COUNT = 4


# ============================================================
# Domain Models
# ============================================================


@dataclass(frozen=True)
class DiffHunk:
    """One `@@ ... @@` block of a unified diff.

    Attributes:
        old_start: First line on the old side
        old_count: Number of old-side lines (1 when omitted in the header)
        new_start: First line on the new side
        new_count: Number of new-side lines (1 when omitted in the header)
        text: Header line plus every body line up to the next header,
            verbatim from the source diff
    """

    old_start: int
    old_count: int
    new_start: int
    new_count: int
    text: str

    # --------------------------------------------------------
    # Factory Methods
    # --------------------------------------------------------

    @classmethod
    def from_hunk_lines(cls, hunk_lines: list[str]) -> DiffHunk:
        """Build a hunk from its header line and body lines.

        Args:
            hunk_lines: Lines starting with the @@ header

        Returns:
            Parsed DiffHunk

        Raises:
            ValueError: If the first line is not a hunk header
        """
        match = HUNK_HEADER_PATTERN.match(hunk_lines[0]) if hunk_lines else None
        if not match:
            raise ValueError(f"Not a hunk header: {hunk_lines[0] if hunk_lines else ''!r}")

        old_start, old_count, new_start, new_count = match.groups()
        return cls(
            old_start=int(old_start),
            old_count=int(old_count) if old_count else 1,
            new_start=int(new_start),
            new_count=int(new_count) if new_count else 1,
            text="\n".join(hunk_lines),
        )

    # --------------------------------------------------------
    # Public API
    # --------------------------------------------------------

    @property
    def new_end(self) -> int:
        """Last new-side line covered by this hunk."""
        return self.new_start + self.new_count - 1

    def overlaps(self, selection: SelectionRange) -> bool:
        """Check whether this hunk overlaps a zero-based selection.

        The +1 converts the selection to the diff's one-based numbering and is
        lenient at both ends: a selection touching either boundary line of
        the hunk selects the whole hunk.
        """
        return self.new_start <= selection.end + 1 and self.new_end >= selection.start + 1


@dataclass(frozen=True)
class SelectionRange:
    """Zero-based, inclusive line range in the current (new-side) file content."""

    start: int
    end: int

    def __post_init__(self) -> None:
        if self.start < 0 or self.end < self.start:
            raise NoSelectionError(
                f"Invalid line selection: start={self.start}, end={self.end}"
            )

    @classmethod
    def from_optional(cls, start: int | None, end: int | None) -> SelectionRange:
        """Build a selection from possibly-missing editor coordinates.

        A missing end collapses the selection to the start line.

        Raises:
            NoSelectionError: If no start line was provided or the range is invalid
        """
        if start is None:
            raise NoSelectionError("Please select the lines you want to include in the PR")
        return cls(start=start, end=start if end is None else end)


@dataclass(frozen=True)
class FileDiff:
    """A unified diff for a single file, parsed into ordered hunks.

    Use from_diff_content() to parse raw diff output.
    """

    raw_content: str
    hunks: tuple[DiffHunk, ...] = field(default_factory=tuple)

    # --------------------------------------------------------
    # Factory Methods
    # --------------------------------------------------------

    @classmethod
    def from_diff_content(cls, diff_content: str) -> FileDiff:
        """Parse raw diff content into hunks.

        Lines before the first hunk header are discarded; every other line
        belongs to the most recently opened hunk.

        Args:
            diff_content: Raw output of `git diff -- <file>`

        Returns:
            FileDiff with hunks in source order
        """
        hunks: list[DiffHunk] = []
        current_hunk: list[str] = []

        for line in diff_content.split("\n"):
            if HUNK_HEADER_PATTERN.match(line):
                if current_hunk:
                    hunks.append(DiffHunk.from_hunk_lines(current_hunk))
                current_hunk = [line]
            elif current_hunk:
                current_hunk.append(line)

        if current_hunk:
            hunks.append(DiffHunk.from_hunk_lines(current_hunk))

        return cls(raw_content=diff_content, hunks=tuple(hunks))

    # --------------------------------------------------------
    # Public API
    # --------------------------------------------------------

    @property
    def file_header(self) -> str:
        """The first four lines of the diff, newline-terminated.

        Always exactly four lines, whatever the diff's actual header shape.
        """
        return "\n".join(self.raw_content.split("\n")[:FILE_HEADER_LINE_COUNT]) + "\n"

    def hunks_for_selection(self, selection: SelectionRange) -> list[DiffHunk]:
        """Get the hunks overlapping a selection, in source order."""
        return [hunk for hunk in self.hunks if hunk.overlaps(selection)]

    def build_patch(self, hunks: list[DiffHunk]) -> str:
        """Reassemble a standalone patch from the file header and given hunks."""
        return self.file_header + "\n".join(hunk.text for hunk in hunks) + "\n"

    def extract_patch(self, selection: SelectionRange) -> str | None:
        """Build a patch containing only the hunks overlapping a selection.

        Returns:
            Patch text, or None when no hunk overlaps the selection
        """
        selected = self.hunks_for_selection(selection)
        if not selected:
            return None
        return self.build_patch(selected)


# ============================================================
# Module API
# ============================================================


def parse_hunks(diff_text: str) -> list[DiffHunk]:
    """Parse a single-file unified diff into its ordered hunks."""
    return list(FileDiff.from_diff_content(diff_text).hunks)


def extract_patch_for_selection(diff_text: str, selection: SelectionRange) -> str | None:
    """Extract the sub-patch covering a selection, or None if nothing overlaps."""
    if not diff_text:
        return None
    return FileDiff.from_diff_content(diff_text).extract_patch(selection)
