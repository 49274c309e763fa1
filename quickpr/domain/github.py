"""Domain model for GitHub-style remote repositories.

Parses a remote URL once into host/org/repo and builds the hosting
provider's "open a new pull request" URL from it.
"""

from __future__ import annotations

import re
from dataclasses import dataclass

from quickpr.domain.errors import QuickPrError

# git@github.com:owner/repo.git
_SSH_PATTERN = re.compile(r"^git@([^:]+):(.+?)/(.+?)(?:\.git)?/?$")
# https://github.com/owner/repo.git
_HTTPS_PATTERN = re.compile(r"^https://(?:[^@/]+@)?([^/]+)/(.+?)/(.+?)(?:\.git)?/?$")


class RemoteParseError(QuickPrError):
    """Raised when a remote URL is not in a recognized format."""

    pass


@dataclass(frozen=True)
class GitHubRepository:
    """A repository on a GitHub-style host."""

    host: str
    org: str
    repo: str

    @classmethod
    def from_remote_url(cls, remote_url: str) -> GitHubRepository:
        """Parse an SSH or HTTPS remote URL.

        Handles:
        - SSH format: git@github.com:owner/repo.git
        - HTTPS format: https://github.com/owner/repo.git
        - Either format without the .git suffix

        Raises:
            RemoteParseError: If the URL format is not recognized
        """
        url = remote_url.strip()
        match = _SSH_PATTERN.match(url) or _HTTPS_PATTERN.match(url)
        if not match:
            raise RemoteParseError(f"Failed to parse GitHub remote: {remote_url}")

        host, org, repo = match.groups()
        return cls(host=host, org=org, repo=repo)

    @property
    def web_url(self) -> str:
        return f"https://{self.host}/{self.org}/{self.repo}"

    def new_pull_request_url(self, branch: str) -> str:
        """URL of the page that opens a pull request for a branch."""
        return f"{self.web_url}/pull/new/{branch}"
