"""Tests for transition stages, run state and the recovery plan table.

Tests cover:
- Stage ordering and progress marker
- Unique stash labels and patch paths
- Recovery steps required for each stage reached
"""

from __future__ import annotations

import tempfile
import unittest
from pathlib import Path

from quickpr.domain.patch_source import PatchSource
from quickpr.domain.transition import (
    RECOVERY_DEPENDENCIES,
    STASH_LABEL_PREFIX,
    RecoveryStep,
    RepositoryTransitionState,
    TransitionProgress,
    TransitionStage,
    build_recovery_plan,
)


class TestTransitionStage(unittest.TestCase):
    """Tests for TransitionStage ordering."""

    def test_stages_follow_execution_order(self):
        self.assertEqual(
            [stage.value for stage in TransitionStage],
            [
                "start",
                "patch-ready",
                "unstaged-stashed",
                "branch-prepared",
                "patch-applied",
                "committed",
                "pushed",
                "original-branch-restored",
                "stash-popped",
                "done",
            ],
        )

    def test_order_starts_at_zero(self):
        self.assertEqual(TransitionStage.START.order(), 0)
        self.assertEqual(TransitionStage.DONE.order(), len(TransitionStage) - 1)

    def test_is_before_and_is_at_least(self):
        self.assertTrue(TransitionStage.PATCH_READY.is_before(TransitionStage.COMMITTED))
        self.assertFalse(TransitionStage.COMMITTED.is_before(TransitionStage.COMMITTED))
        self.assertTrue(TransitionStage.COMMITTED.is_at_least(TransitionStage.COMMITTED))


class TestTransitionProgress(unittest.TestCase):
    """Tests for the highest-stage-reached marker."""

    def test_starts_at_start(self):
        self.assertEqual(TransitionProgress().reached, TransitionStage.START)

    def test_advance_may_skip_optional_stages(self):
        progress = TransitionProgress()
        progress.advance(TransitionStage.PATCH_READY)
        progress.advance(TransitionStage.BRANCH_PREPARED)

        self.assertEqual(progress.reached, TransitionStage.BRANCH_PREPARED)

    def test_advance_never_moves_backwards(self):
        progress = TransitionProgress(reached=TransitionStage.COMMITTED)

        with self.assertRaises(ValueError):
            progress.advance(TransitionStage.PATCH_APPLIED)
        with self.assertRaises(ValueError):
            progress.advance(TransitionStage.COMMITTED)


class TestRepositoryTransitionState(unittest.TestCase):
    """Tests for RepositoryTransitionState.create."""

    def _create(self, temp_dir: str | None = None) -> RepositoryTransitionState:
        return RepositoryTransitionState.create(
            current_branch="feature/wip",
            base_branch="main",
            new_branch_name="alice/fix",
            has_unstaged_changes=True,
            patch_source=PatchSource.SELECTION,
            commit_message="Fix",
            temp_dir=temp_dir,
        )

    def test_stash_label_has_prefix(self):
        self.assertTrue(self._create().temporary_stash_label.startswith(STASH_LABEL_PREFIX))

    def test_labels_are_never_reused(self):
        labels = {self._create().temporary_stash_label for _ in range(20)}

        self.assertEqual(len(labels), 20)

    def test_patch_path_is_unique_and_in_temp_dir(self):
        with tempfile.TemporaryDirectory() as tmp:
            first = self._create(tmp)
            second = self._create(tmp)

        self.assertEqual(first.patch_file_path.parent, Path(tmp))
        self.assertEqual(first.patch_file_path.suffix, ".patch")
        self.assertNotEqual(first.patch_file_path, second.patch_file_path)

    def test_state_is_immutable(self):
        state = self._create()

        with self.assertRaises(AttributeError):
            state.current_branch = "other"


class TestBuildRecoveryPlan(unittest.TestCase):
    """Tests for the reached-stage to undo-steps table."""

    def test_failure_while_staging_only_cleans_up(self):
        plan = build_recovery_plan(
            TransitionStage.START,
            stash_created=False,
            worktree_reset=False,
            delete_branch_on_failure=True,
        )

        self.assertEqual(
            plan,
            [RecoveryStep.CHECKOUT_ORIGINAL_BRANCH, RecoveryStep.REMOVE_PATCH_FILE],
        )

    def test_failure_during_branch_prep_with_stash(self):
        plan = build_recovery_plan(
            TransitionStage.UNSTAGED_STASHED,
            stash_created=True,
            worktree_reset=True,
            delete_branch_on_failure=True,
        )

        self.assertEqual(
            plan,
            [
                RecoveryStep.CHECKOUT_ORIGINAL_BRANCH,
                RecoveryStep.POP_STASH,
                RecoveryStep.RESTORE_SELECTION,
                RecoveryStep.REMOVE_PATCH_FILE,
            ],
        )

    def test_failure_during_apply_with_stash(self):
        plan = build_recovery_plan(
            TransitionStage.BRANCH_PREPARED,
            stash_created=True,
            worktree_reset=True,
            delete_branch_on_failure=True,
        )

        self.assertEqual(
            plan,
            [
                RecoveryStep.DISCARD_PARTIAL_APPLY,
                RecoveryStep.CHECKOUT_ORIGINAL_BRANCH,
                RecoveryStep.DELETE_NEW_BRANCH,
                RecoveryStep.POP_STASH,
                RecoveryStep.RESTORE_SELECTION,
                RecoveryStep.REMOVE_PATCH_FILE,
            ],
        )

    def test_failure_during_apply_with_untouched_worktree_never_hard_resets(self):
        plan = build_recovery_plan(
            TransitionStage.BRANCH_PREPARED,
            stash_created=False,
            worktree_reset=False,
            delete_branch_on_failure=True,
        )

        self.assertNotIn(RecoveryStep.DISCARD_PARTIAL_APPLY, plan)
        self.assertIn(RecoveryStep.DELETE_NEW_BRANCH, plan)

    def test_keep_branch_on_failure(self):
        plan = build_recovery_plan(
            TransitionStage.PATCH_APPLIED,
            stash_created=False,
            worktree_reset=False,
            delete_branch_on_failure=False,
        )

        self.assertNotIn(RecoveryStep.DELETE_NEW_BRANCH, plan)

    def test_failure_after_commit_keeps_branch_and_selection(self):
        plan = build_recovery_plan(
            TransitionStage.COMMITTED,
            stash_created=True,
            worktree_reset=True,
            delete_branch_on_failure=True,
        )

        self.assertEqual(
            plan,
            [
                RecoveryStep.CHECKOUT_ORIGINAL_BRANCH,
                RecoveryStep.POP_STASH,
                RecoveryStep.REMOVE_PATCH_FILE,
            ],
        )

    def test_failed_pop_is_not_retried(self):
        plan = build_recovery_plan(
            TransitionStage.ORIGINAL_BRANCH_RESTORED,
            stash_created=True,
            worktree_reset=True,
            delete_branch_on_failure=True,
        )

        self.assertEqual(
            plan,
            [RecoveryStep.CHECKOUT_ORIGINAL_BRANCH, RecoveryStep.REMOVE_PATCH_FILE],
        )

    def test_empty_stash_still_restores_selection(self):
        plan = build_recovery_plan(
            TransitionStage.UNSTAGED_STASHED,
            stash_created=False,
            worktree_reset=True,
            delete_branch_on_failure=True,
        )

        self.assertEqual(
            plan,
            [
                RecoveryStep.CHECKOUT_ORIGINAL_BRANCH,
                RecoveryStep.RESTORE_SELECTION,
                RecoveryStep.REMOVE_PATCH_FILE,
            ],
        )

    def test_empty_stash_during_apply_discards_and_restores(self):
        plan = build_recovery_plan(
            TransitionStage.BRANCH_PREPARED,
            stash_created=False,
            worktree_reset=True,
            delete_branch_on_failure=True,
        )

        self.assertEqual(
            plan,
            [
                RecoveryStep.DISCARD_PARTIAL_APPLY,
                RecoveryStep.CHECKOUT_ORIGINAL_BRANCH,
                RecoveryStep.DELETE_NEW_BRANCH,
                RecoveryStep.RESTORE_SELECTION,
                RecoveryStep.REMOVE_PATCH_FILE,
            ],
        )

    def test_restore_does_not_wait_for_stash_pop(self):
        self.assertNotIn(
            RecoveryStep.POP_STASH, RECOVERY_DEPENDENCIES[RecoveryStep.RESTORE_SELECTION]
        )

    def test_patch_file_outlives_pending_restore(self):
        self.assertIn(
            RecoveryStep.RESTORE_SELECTION, RECOVERY_DEPENDENCIES[RecoveryStep.REMOVE_PATCH_FILE]
        )

    def test_every_plan_restores_branch_and_removes_patch(self):
        for stage in TransitionStage:
            for stash_created in (False, True):
                plan = build_recovery_plan(
                    stage, stash_created, stash_created, delete_branch_on_failure=True
                )
                self.assertIn(RecoveryStep.CHECKOUT_ORIGINAL_BRANCH, plan)
                self.assertEqual(plan[-1], RecoveryStep.REMOVE_PATCH_FILE)

    def test_dependencies_come_earlier_in_plan(self):
        plan = build_recovery_plan(
            TransitionStage.PATCH_APPLIED,
            stash_created=True,
            worktree_reset=True,
            delete_branch_on_failure=True,
        )

        for index, step in enumerate(plan):
            for dependency in RECOVERY_DEPENDENCIES[step]:
                self.assertIn(dependency, plan[:index])


if __name__ == "__main__":
    unittest.main()
