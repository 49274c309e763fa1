"""GitHub REST API client.

Used only as a fallback when the remote does not advertise its default
branch through `git remote show`.
"""

from __future__ import annotations

import requests

from quickpr.domain.github import GitHubRepository

DEFAULT_TIMEOUT_SECONDS = 10


class GitHubApiError(Exception):
    """Raised when a GitHub API request fails."""

    pass


class GitHubApiClient:
    """Minimal GitHub REST client."""

    def __init__(self, token: str, api_url: str = "https://api.github.com"):
        self.api_url = api_url.rstrip("/")
        self.headers = {
            "Authorization": f"token {token}",
            "Accept": "application/vnd.github.v3+json",
        }

    def get_default_branch(self, repository: GitHubRepository) -> str:
        """Get the default branch of a repository.

        Raises:
            GitHubApiError: If the request fails or the response has no default branch
        """
        url = f"{self.api_url}/repos/{repository.org}/{repository.repo}"
        try:
            response = requests.get(url, headers=self.headers, timeout=DEFAULT_TIMEOUT_SECONDS)
            response.raise_for_status()
            data = response.json()
        except (requests.RequestException, ValueError) as e:
            raise GitHubApiError(f"Error fetching repository info from GitHub: {e}")

        default_branch = data.get("default_branch") if isinstance(data, dict) else None
        if not default_branch:
            raise GitHubApiError(f"No default branch in response from {url}")
        return default_branch
