"""Infrastructure components for QuickPR.

This layer handles external system interactions:
- Console progress output
- Browser launching
- GitHub REST API via requests
"""

from .browser import open_url
from .console import ConsoleReporter, ProgressReporter
from .github import GitHubApiClient, GitHubApiError

__all__ = [
    "ConsoleReporter",
    "GitHubApiClient",
    "GitHubApiError",
    "ProgressReporter",
    "open_url",
]
