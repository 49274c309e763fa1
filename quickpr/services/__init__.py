"""Services for QuickPR.

Services encapsulate business logic and orchestrate domain models.
They receive dependencies via constructor injection.
"""

from quickpr.services.base_branch import BaseBranchResolver, parse_head_branch
from quickpr.services.git_operations import (
    GitApplyError,
    GitBranchError,
    GitCheckoutError,
    GitCommandError,
    GitCommitError,
    GitDiffError,
    GitOperationsService,
    GitPullError,
    GitPushError,
    GitRemoteError,
    GitRepositoryError,
    GitResetError,
    GitStashError,
    GitStatusError,
)
from quickpr.services.selection_patch import SelectionPatchService
from quickpr.services.transition_orchestrator import TransitionOrchestrator

__all__ = [
    "BaseBranchResolver",
    "GitApplyError",
    "GitBranchError",
    "GitCheckoutError",
    "GitCommandError",
    "GitCommitError",
    "GitDiffError",
    "GitOperationsService",
    "GitPullError",
    "GitPushError",
    "GitRemoteError",
    "GitRepositoryError",
    "GitResetError",
    "GitStashError",
    "GitStatusError",
    "SelectionPatchService",
    "TransitionOrchestrator",
    "parse_head_branch",
]
