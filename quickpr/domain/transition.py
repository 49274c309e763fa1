"""Domain models for the branch transition state machine.

The orchestrator walks TransitionStage in order and records the highest stage
reached in TransitionProgress. On failure, build_recovery_plan() maps that
marker to the undo steps the repository needs.
"""

from __future__ import annotations

import tempfile
import uuid
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path

from quickpr.domain.patch_source import PatchSource

STASH_LABEL_PREFIX = "temp-stash-for-pr-"
PATCH_FILE_PREFIX = "staged-changes-"


# ============================================================
# Stages
# ============================================================


class TransitionStage(Enum):
    """Stages of the transition in execution order.

    The enum order defines the execution sequence. UNSTAGED_STASHED, PUSHED
    and STASH_POPPED are optional and may be skipped, never reordered.
    """

    START = "start"
    PATCH_READY = "patch-ready"
    UNSTAGED_STASHED = "unstaged-stashed"
    BRANCH_PREPARED = "branch-prepared"
    PATCH_APPLIED = "patch-applied"
    COMMITTED = "committed"
    PUSHED = "pushed"
    ORIGINAL_BRANCH_RESTORED = "original-branch-restored"
    STASH_POPPED = "stash-popped"
    DONE = "done"

    def order(self) -> int:
        """Get the position of this stage in the sequence (START is 0)."""
        return list(TransitionStage).index(self)

    def is_before(self, other: TransitionStage) -> bool:
        return self.order() < other.order()

    def is_at_least(self, other: TransitionStage) -> bool:
        return self.order() >= other.order()



class RecoveryStep(Enum):
    """Undo actions available to the recovery path, in execution order."""

    DISCARD_PARTIAL_APPLY = "discard-partial-apply"
    CHECKOUT_ORIGINAL_BRANCH = "checkout-original-branch"
    DELETE_NEW_BRANCH = "delete-new-branch"
    POP_STASH = "pop-stash"
    RESTORE_SELECTION = "restore-selection"
    REMOVE_PATCH_FILE = "remove-patch-file"


# A step is skipped when any step it depends on failed or was skipped
RECOVERY_DEPENDENCIES: dict[RecoveryStep, frozenset[RecoveryStep]] = {
    RecoveryStep.DISCARD_PARTIAL_APPLY: frozenset(),
    RecoveryStep.CHECKOUT_ORIGINAL_BRANCH: frozenset(),
    RecoveryStep.DELETE_NEW_BRANCH: frozenset({RecoveryStep.CHECKOUT_ORIGINAL_BRANCH}),
    RecoveryStep.POP_STASH: frozenset({RecoveryStep.CHECKOUT_ORIGINAL_BRANCH}),
    RecoveryStep.RESTORE_SELECTION: frozenset({RecoveryStep.CHECKOUT_ORIGINAL_BRANCH}),
    # The patch file is the last copy of the selection until it is restored
    RecoveryStep.REMOVE_PATCH_FILE: frozenset({RecoveryStep.RESTORE_SELECTION}),
}


def build_recovery_plan(
    reached: TransitionStage,
    stash_created: bool,
    worktree_reset: bool,
    delete_branch_on_failure: bool,
) -> list[RecoveryStep]:
    """Map the highest stage reached to the undo steps recovery must run.

    Args:
        reached: Last stage that completed before the failure
        stash_created: Whether remaining changes were stashed
        worktree_reset: Whether the selection was removed from the working tree
        delete_branch_on_failure: Whether an uncommitted new branch is deleted

    Returns:
        Recovery steps in execution order
    """
    on_new_branch = reached.is_at_least(TransitionStage.BRANCH_PREPARED) and reached.is_before(
        TransitionStage.ORIGINAL_BRANCH_RESTORED
    )
    uncommitted = reached.is_before(TransitionStage.COMMITTED)
    branch_created = reached.is_at_least(TransitionStage.BRANCH_PREPARED)

    steps: list[RecoveryStep] = []
    # Only a tree emptied before branch prep is safe to hard-reset
    if on_new_branch and uncommitted and worktree_reset:
        steps.append(RecoveryStep.DISCARD_PARTIAL_APPLY)
    steps.append(RecoveryStep.CHECKOUT_ORIGINAL_BRANCH)
    if branch_created and uncommitted and delete_branch_on_failure:
        steps.append(RecoveryStep.DELETE_NEW_BRANCH)
    # A failed pop is never retried
    if stash_created and reached.is_before(TransitionStage.ORIGINAL_BRANCH_RESTORED):
        steps.append(RecoveryStep.POP_STASH)
    if worktree_reset and uncommitted:
        steps.append(RecoveryStep.RESTORE_SELECTION)
    steps.append(RecoveryStep.REMOVE_PATCH_FILE)
    return steps


# ============================================================
# State
# ============================================================


@dataclass(frozen=True)
class RepositoryTransitionState:
    """Everything recovery needs, captured before any mutating git command.

    Attributes:
        current_branch: Branch checked out when the run started
        base_branch: Branch the new branch is created from
        new_branch_name: Branch that receives the patch
        temporary_stash_label: Unique label for the stash of remaining changes
        has_unstaged_changes: Working tree snapshot taken before any mutation
        patch_file_path: Temporary file holding the patch
        patch_source: Whether the patch comes from a selection or the index
        commit_message: Commit message, also the pull request title
    """

    current_branch: str
    base_branch: str
    new_branch_name: str
    temporary_stash_label: str
    has_unstaged_changes: bool
    patch_file_path: Path
    patch_source: PatchSource
    commit_message: str

    @classmethod
    def create(
        cls,
        current_branch: str,
        base_branch: str,
        new_branch_name: str,
        has_unstaged_changes: bool,
        patch_source: PatchSource,
        commit_message: str,
        temp_dir: str | Path | None = None,
    ) -> RepositoryTransitionState:
        """Create a state with a fresh stash label and patch file path."""
        run_id = uuid.uuid4()
        directory = Path(temp_dir) if temp_dir is not None else Path(tempfile.gettempdir())
        return cls(
            current_branch=current_branch,
            base_branch=base_branch,
            new_branch_name=new_branch_name,
            temporary_stash_label=f"{STASH_LABEL_PREFIX}{run_id}",
            has_unstaged_changes=has_unstaged_changes,
            patch_file_path=directory / f"{PATCH_FILE_PREFIX}{run_id}.patch",
            patch_source=patch_source,
            commit_message=commit_message,
        )


@dataclass
class TransitionProgress:
    """Mutable record of how far a run got.

    Attributes:
        reached: Highest stage completed
        stash_created: Whether `stash push` saved an entry for this run
        stash_commit: Object id of that entry, once its label was seen
        worktree_reset: Whether the selection was removed from the working tree
        pushed: Whether the new branch was pushed
        stash_popped: Whether the stash was popped on the success path
        warnings: Non-fatal problems reported along the way
    """

    reached: TransitionStage = TransitionStage.START
    stash_created: bool = False
    stash_commit: str | None = None
    worktree_reset: bool = False
    pushed: bool = False
    stash_popped: bool = False
    warnings: list[str] = field(default_factory=list)

    def advance(self, stage: TransitionStage) -> None:
        """Record completion of a stage.

        Raises:
            ValueError: If the stage would move the marker backwards
        """
        if not self.reached.is_before(stage):
            raise ValueError(
                f"Cannot advance from {self.reached.value} to {stage.value}"
            )
        self.reached = stage


@dataclass(frozen=True)
class TransitionResult:
    """Outcome of a successful run."""

    new_branch_name: str
    base_branch: str
    pushed: bool
    stash_popped: bool
    pull_request_url: str | None = None
    warnings: tuple[str, ...] = ()
