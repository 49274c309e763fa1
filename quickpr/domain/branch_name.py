"""Branch name derivation from a username and commit message."""

from __future__ import annotations

import re

from quickpr.domain.errors import InvalidCommitMessageError

# Characters of the commit message that feed the branch slug
BRANCH_SLUG_SOURCE_LENGTH = 20


def slugify_commit_message(commit_message: str) -> str:
    """Turn the start of a commit message into a branch-safe slug.

    Truncates to the first 20 characters before cleanup, replaces every
    non-alphanumeric run with one hyphen and lower-cases the result.
    """
    slug = re.sub(r"[^a-zA-Z0-9]", "-", commit_message[:BRANCH_SLUG_SOURCE_LENGTH])
    slug = re.sub(r"-+", "-", slug)
    return slug.strip("-").lower()


def create_branch_name(username: str, commit_message: str) -> str:
    """Derive `<username>/<slug>` from a commit message.

    Examples:
        >>> create_branch_name("Alice", "Add retry to fetch")
        'alice/add-retry-to-fetch'

    Raises:
        InvalidCommitMessageError: If the message yields an empty slug
    """
    slug = slugify_commit_message(commit_message)
    if not slug:
        raise InvalidCommitMessageError(
            f"Cannot derive a branch name from commit message: {commit_message!r}"
        )
    return f"{username.lower()}/{slug}"
