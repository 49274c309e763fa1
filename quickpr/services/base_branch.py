"""Base branch resolution service.

Best-effort lookup of the branch a pull request targets. Never fails: an
unresolvable remote falls back to the configured default branch.
"""

from __future__ import annotations

import re
from collections.abc import Callable

from quickpr.domain.config import QuickPrConfig
from quickpr.domain.github import GitHubRepository, RemoteParseError
from quickpr.infrastructure.console import ProgressReporter
from quickpr.infrastructure.github.api import GitHubApiClient, GitHubApiError
from quickpr.services.git_operations import GitCommandError, GitOperationsService

HEAD_BRANCH_PATTERN = re.compile(r"HEAD branch: (.+)")

# Reported by git when the remote HEAD is ambiguous
_UNKNOWN_HEAD = "(unknown)"


def parse_head_branch(remote_info: str) -> str | None:
    """Extract the advertised HEAD branch from `git remote show` output."""
    match = HEAD_BRANCH_PATTERN.search(remote_info)
    if not match:
        return None
    branch = match.group(1).strip()
    if not branch or branch == _UNKNOWN_HEAD:
        return None
    return branch


class BaseBranchResolver:
    """Resolves the remote's default branch.

    Order: `git remote show <remote>`, then the GitHub REST API when a token
    is configured, then `config.default_base_branch`.
    """

    def __init__(
        self,
        git: GitOperationsService,
        config: QuickPrConfig,
        reporter: ProgressReporter,
        api_client_factory: Callable[[str, str], GitHubApiClient] = GitHubApiClient,
    ):
        self.git = git
        self.config = config
        self.reporter = reporter
        self.api_client_factory = api_client_factory

    def resolve(self) -> str:
        """Get the base branch name."""
        try:
            branch = parse_head_branch(self.git.show_remote(self.config.remote))
        except GitCommandError as e:
            self.reporter.warn(f"Could not query remote {self.config.remote}: {e.stderr or e}")
            branch = None

        if branch:
            return branch

        if self.config.github_token:
            branch = self._resolve_from_api()
            if branch:
                return branch

        self.reporter.warn(
            f"Remote default branch not found, using {self.config.default_base_branch}"
        )
        return self.config.default_base_branch

    def _resolve_from_api(self) -> str | None:
        try:
            repository = GitHubRepository.from_remote_url(
                self.git.get_remote_url(self.config.remote)
            )
            client = self.api_client_factory(self.config.github_token, self.config.github_api_url)
            return client.get_default_branch(repository)
        except (GitCommandError, RemoteParseError, GitHubApiError) as e:
            self.reporter.warn(f"GitHub API lookup of default branch failed: {e}")
            return None
