"""Domain models for QuickPR."""

from quickpr.domain.branch_name import create_branch_name, slugify_commit_message
from quickpr.domain.config import ConfigError, QuickPrConfig
from quickpr.domain.diff import (
    DiffHunk,
    FileDiff,
    SelectionRange,
    extract_patch_for_selection,
    parse_hunks,
)
from quickpr.domain.errors import (
    ApplyFailureError,
    BranchPrepFailureError,
    CommitFailureError,
    EmptyPatchError,
    InvalidCommitMessageError,
    NoSelectionError,
    PatchStagingError,
    PushFailureError,
    QuickPrError,
    RecoveryError,
    RestoreFailureError,
    StashFailureError,
    TransitionError,
)
from quickpr.domain.git_status import StashEntry, WorkingTreeStatus, find_stash_entry
from quickpr.domain.github import GitHubRepository, RemoteParseError
from quickpr.domain.patch_source import PatchSource
from quickpr.domain.transition import (
    RecoveryStep,
    RepositoryTransitionState,
    TransitionProgress,
    TransitionResult,
    TransitionStage,
    build_recovery_plan,
)

__all__ = [
    "ApplyFailureError",
    "BranchPrepFailureError",
    "CommitFailureError",
    "ConfigError",
    "DiffHunk",
    "EmptyPatchError",
    "FileDiff",
    "GitHubRepository",
    "InvalidCommitMessageError",
    "NoSelectionError",
    "PatchSource",
    "PatchStagingError",
    "PushFailureError",
    "QuickPrConfig",
    "QuickPrError",
    "RecoveryError",
    "RecoveryStep",
    "RemoteParseError",
    "RepositoryTransitionState",
    "RestoreFailureError",
    "SelectionRange",
    "StashEntry",
    "StashFailureError",
    "TransitionError",
    "TransitionProgress",
    "TransitionResult",
    "TransitionStage",
    "WorkingTreeStatus",
    "build_recovery_plan",
    "create_branch_name",
    "extract_patch_for_selection",
    "find_stash_entry",
    "parse_hunks",
    "slugify_commit_message",
]
