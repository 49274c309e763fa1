"""GitHub API wrapper."""

from .api import GitHubApiClient, GitHubApiError

__all__ = ["GitHubApiClient", "GitHubApiError"]
