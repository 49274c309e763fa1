"""Domain enum for patch source selection.

Selects whether the patch is extracted from a line selection in one file or
taken verbatim from the staged changes.
"""

from __future__ import annotations

from enum import Enum


class PatchSource(Enum):
    """Source of the patch that becomes the pull request.

    Attributes:
        SELECTION: Hunks of one file overlapping a line selection
        STAGED: The full `git diff --cached` output
    """

    SELECTION = "selection"
    STAGED = "staged"

    @classmethod
    def from_string(cls, value: str) -> PatchSource:
        """Parse PatchSource from string value.

        Args:
            value: String value ("selection" or "staged")

        Returns:
            Corresponding PatchSource enum value

        Raises:
            ValueError: If value is not a valid PatchSource

        Examples:
            >>> PatchSource.from_string("staged")
            <PatchSource.STAGED: 'staged'>
        """
        value_lower = value.lower()
        for member in cls:
            if member.value == value_lower:
                return member
        valid_values = [m.value for m in cls]
        raise ValueError(
            f"Invalid patch source: {value}. Must be one of: {', '.join(valid_values)}"
        )
