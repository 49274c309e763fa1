"""Error hierarchy for the pull request workflow.

Pre-mutation errors (NoSelectionError, EmptyPatchError) are terminal and need
no rollback. TransitionError subclasses are raised once the repository has
started changing and are always re-raised after recovery.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from quickpr.domain.transition import RecoveryStep, TransitionStage


class QuickPrError(Exception):
    """Base class for workflow errors."""

    pass


class NoSelectionError(QuickPrError):
    """Raised when the line selection is empty or missing."""

    pass


class EmptyPatchError(QuickPrError):
    """Raised when the selection overlaps no hunk or nothing is staged."""

    pass


class InvalidCommitMessageError(QuickPrError):
    """Raised when no usable branch name can be derived from the commit message."""

    pass


# ============================================================
# Stage Failures
# ============================================================


class TransitionError(QuickPrError):
    """Raised when a stage of the branch transition fails.

    Attributes:
        stage: The stage that was running when the failure happened
    """

    def __init__(self, stage: TransitionStage, message: str):
        super().__init__(message)
        self.stage = stage


class PatchStagingError(TransitionError):
    """Raised when the extracted patch cannot be staged."""

    pass


class StashFailureError(TransitionError):
    """Raised when remaining changes cannot be set aside."""

    pass


class BranchPrepFailureError(TransitionError):
    """Raised when base checkout, pull, or branch creation fails."""

    pass


class ApplyFailureError(TransitionError):
    """Raised when the patch does not apply to the new branch."""

    pass


class CommitFailureError(TransitionError):
    """Raised when committing on the new branch fails."""

    pass


class PushFailureError(TransitionError):
    """Raised when pushing the new branch fails."""

    pass


class RestoreFailureError(TransitionError):
    """Raised when the original branch or stashed work cannot be restored."""

    pass


# ============================================================
# Recovery Failures
# ============================================================


class RecoveryError(QuickPrError):
    """Raised when one or more recovery steps fail after a stage failure.

    The triggering error is kept on `primary` and chained as `__cause__`.

    Attributes:
        primary: The stage failure that started recovery
        failures: Recovery steps that failed, with their errors
    """

    def __init__(
        self,
        primary: BaseException,
        failures: list[tuple[RecoveryStep, BaseException]],
    ):
        steps = ", ".join(f"{step.value}: {error}" for step, error in failures)
        super().__init__(f"Recovery incomplete after '{primary}' ({steps})")
        self.primary = primary
        self.failures = failures
