"""Transition orchestrator service.

Drives the repository from "changes in the working tree" to "changes
committed on a new branch" and back to the original branch:

    START -> PATCH_READY -> UNSTAGED_STASHED? -> BRANCH_PREPARED
          -> PATCH_APPLIED -> COMMITTED -> PUSHED? -> ORIGINAL_BRANCH_RESTORED
          -> STASH_POPPED? -> DONE

Stages run strictly in order. The highest stage reached is recorded in
TransitionProgress; any failure from PATCH_READY onward runs the recovery
plan for that stage and then re-raises the original error.

The caller must guarantee exclusive use of the working tree for the whole
run; no lock is taken.
"""

from __future__ import annotations

from collections.abc import Callable, Iterator
from contextlib import contextmanager
from pathlib import Path

from quickpr.domain.branch_name import create_branch_name
from quickpr.domain.config import QuickPrConfig
from quickpr.domain.diff import SelectionRange
from quickpr.domain.errors import (
    ApplyFailureError,
    BranchPrepFailureError,
    CommitFailureError,
    EmptyPatchError,
    NoSelectionError,
    PatchStagingError,
    PushFailureError,
    QuickPrError,
    RecoveryError,
    RestoreFailureError,
    StashFailureError,
    TransitionError,
)
from quickpr.domain.git_status import find_stash_entry
from quickpr.domain.github import GitHubRepository, RemoteParseError
from quickpr.domain.patch_source import PatchSource
from quickpr.domain.transition import (
    RECOVERY_DEPENDENCIES,
    RecoveryStep,
    RepositoryTransitionState,
    TransitionProgress,
    TransitionResult,
    TransitionStage,
    build_recovery_plan,
)
from quickpr.infrastructure.browser import open_url
from quickpr.infrastructure.console import ConsoleReporter, ProgressReporter
from quickpr.services.base_branch import BaseBranchResolver
from quickpr.services.git_operations import GitCommandError, GitOperationsService
from quickpr.services.selection_patch import SelectionPatchService

TEMPORARY_COMMIT_MESSAGE = "Temporary commit before stash"


class TransitionOrchestrator:
    """Creates a pull request branch from a subset of working tree changes.

    Attributes:
        git: Git command service for the repository
        config: Immutable run configuration
        reporter: Receives progress lines and warnings
    """

    def __init__(
        self,
        git: GitOperationsService,
        config: QuickPrConfig,
        reporter: ProgressReporter | None = None,
        patch_service: SelectionPatchService | None = None,
        base_branch_resolver: BaseBranchResolver | None = None,
        browser: Callable[[str], bool] = open_url,
        temp_dir: str | Path | None = None,
    ):
        self.git = git
        self.config = config
        self.reporter = reporter or ConsoleReporter()
        self.patch_service = patch_service or SelectionPatchService(
            git, context_lines=config.context_lines, reporter=self.reporter
        )
        self.base_branch_resolver = base_branch_resolver or BaseBranchResolver(
            git, config, self.reporter
        )
        self.browser = browser
        self.temp_dir = temp_dir

    # ============================================================
    # Public API
    # ============================================================

    def create_from_selection(
        self,
        file_path: str | Path,
        selection: SelectionRange | None,
        commit_message: str,
    ) -> TransitionResult:
        """Create a pull request branch from the hunks overlapping a selection.

        Raises:
            NoSelectionError: If no selection was given
            EmptyPatchError: If the selection overlaps no changed lines
            TransitionError: If a stage failed and recovery succeeded
            RecoveryError: If a stage failed and recovery was incomplete
        """
        if selection is None:
            raise NoSelectionError("Please select the lines you want to include in the PR")

        state = self.prepare_state(PatchSource.SELECTION, commit_message)
        patch = self.patch_service.create_patch_for_selection(file_path, selection)
        if not patch:
            raise EmptyPatchError("No changes in selected lines.")

        self.reporter.report("Creating PR from selected lines...")
        return self.run(state, patch)

    def create_from_staged(self, commit_message: str) -> TransitionResult:
        """Create a pull request branch from everything currently staged.

        Raises:
            EmptyPatchError: If nothing is staged
            TransitionError: If a stage failed and recovery succeeded
            RecoveryError: If a stage failed and recovery was incomplete
        """
        state = self.prepare_state(PatchSource.STAGED, commit_message)
        patch = self.patch_service.get_staged_patch()
        if not patch:
            raise EmptyPatchError("No changes staged.")

        self.reporter.report("Creating PR from staged changes...")
        return self.run(state, patch)

    def prepare_state(self, source: PatchSource, commit_message: str) -> RepositoryTransitionState:
        """Capture everything recovery needs. Runs only read-only git commands."""
        self.git.ensure_repository()
        new_branch_name = create_branch_name(self.config.github_username, commit_message)

        current_branch = self.git.get_current_branch()
        if current_branch == "HEAD":
            raise QuickPrError("Cannot create a PR from a detached HEAD; check out a branch first.")

        base_branch = self.base_branch_resolver.resolve()
        has_unstaged_changes = self.git.get_status().has_unstaged_changes

        return RepositoryTransitionState.create(
            current_branch=current_branch,
            base_branch=base_branch,
            new_branch_name=new_branch_name,
            has_unstaged_changes=has_unstaged_changes,
            patch_source=source,
            commit_message=commit_message,
            temp_dir=self.temp_dir,
        )

    def run(self, state: RepositoryTransitionState, patch: str) -> TransitionResult:
        """Execute every stage for a prepared state and patch.

        Args:
            state: State captured by prepare_state()
            patch: Non-empty patch text

        Returns:
            TransitionResult describing the new branch

        Raises:
            EmptyPatchError: If the patch is empty (nothing mutated)
            TransitionError: The original stage failure, after recovery
            RecoveryError: If recovery itself failed
        """
        if not patch.strip():
            raise EmptyPatchError("Patch is empty.")

        progress = TransitionProgress()
        try:
            self._make_patch_ready(state, patch, progress)
            if state.has_unstaged_changes:
                self._stash_remaining_changes(state, progress)
            self._prepare_branch(state, progress)
            self._apply_patch(state, progress)
            self._commit(state, progress)
            if self.config.push:
                self._push(state, progress)
            self._restore_original_branch(state, progress)
            if progress.stash_created:
                self._pop_stash(state, progress)
        except Exception as error:
            self.recover(state, progress, error)
            raise

        state.patch_file_path.unlink(missing_ok=True)
        progress.advance(TransitionStage.DONE)

        pull_request_url = None
        if progress.pushed:
            pull_request_url = self._open_pull_request_page(state, progress)

        self.reporter.report(f"PR created successfully from branch: {state.new_branch_name}")
        return TransitionResult(
            new_branch_name=state.new_branch_name,
            base_branch=state.base_branch,
            pushed=progress.pushed,
            stash_popped=progress.stash_popped,
            pull_request_url=pull_request_url,
            warnings=tuple(progress.warnings),
        )

    def recover(
        self,
        state: RepositoryTransitionState,
        progress: TransitionProgress,
        error: BaseException,
    ) -> None:
        """Run the recovery plan for the highest stage reached.

        Each step runs once. A step whose prerequisite failed or was skipped
        is skipped and reported.

        Raises:
            RecoveryError: If any recovery step failed, chained to `error`
        """
        plan = build_recovery_plan(
            progress.reached,
            progress.stash_created,
            progress.worktree_reset,
            self.config.delete_branch_on_failure,
        )
        self.reporter.warn(
            f"Failed after stage '{progress.reached.value}': {error}. "
            f"Restoring {state.current_branch}..."
        )

        failures: list[tuple[RecoveryStep, BaseException]] = []
        unavailable: set[RecoveryStep] = set()
        for step in plan:
            blocked = RECOVERY_DEPENDENCIES[step] & unavailable
            if blocked:
                self.reporter.warn(
                    f"Skipping {step.value}: requires "
                    f"{', '.join(sorted(s.value for s in blocked))}"
                )
                if step == RecoveryStep.REMOVE_PATCH_FILE:
                    self.reporter.warn(
                        f"Selected changes kept in {state.patch_file_path}; "
                        "apply them with `git apply`."
                    )
                unavailable.add(step)
                continue
            try:
                completed = self._run_recovery_step(step, state, progress)
            except (GitCommandError, OSError) as e:
                self.reporter.warn(f"Recovery step {step.value} failed: {e}")
                failures.append((step, e))
                unavailable.add(step)
                continue
            if not completed:
                unavailable.add(step)

        if failures:
            raise RecoveryError(error, failures) from error

    # ============================================================
    # Stages
    # ============================================================

    @contextmanager
    def _stage(
        self,
        stage: TransitionStage,
        error_cls: type[TransitionError],
        message: str,
    ) -> Iterator[None]:
        """Report a stage and convert git failures into the stage's error kind."""
        self.reporter.report(message)
        try:
            yield
        except (GitCommandError, OSError) as e:
            raise error_cls(stage, f"{message.rstrip('.')} failed: {e}") from e

    def _make_patch_ready(
        self, state: RepositoryTransitionState, patch: str, progress: TransitionProgress
    ) -> None:
        with self._stage(TransitionStage.PATCH_READY, PatchStagingError, "Preparing patch..."):
            state.patch_file_path.write_text(patch, encoding="utf-8")
            self.reporter.debug(f"Patch written to {state.patch_file_path}:\n{patch}")
            if state.patch_source == PatchSource.SELECTION:
                self.git.apply_to_index(state.patch_file_path)
        progress.advance(TransitionStage.PATCH_READY)

    def _stash_remaining_changes(
        self, state: RepositoryTransitionState, progress: TransitionProgress
    ) -> None:
        # A plain stash would take the staged patch with it; commit it first so
        # the stash holds only the remaining changes
        with self._stage(
            TransitionStage.UNSTAGED_STASHED, StashFailureError, "Stashing unstaged changes..."
        ):
            self.git.commit(TEMPORARY_COMMIT_MESSAGE, no_verify=True)
            try:
                self.git.stash_push(state.temporary_stash_label, include_untracked=True)
            except GitCommandError:
                self.git.reset("HEAD^", soft=True)
                raise
            progress.stash_created, progress.stash_commit = self._find_new_stash(state, progress)
            if not progress.stash_created:
                self.reporter.report("Nothing left to stash.")
            self.git.reset("HEAD^", hard=True)
            progress.worktree_reset = True
        progress.advance(TransitionStage.UNSTAGED_STASHED)

    def _find_new_stash(
        self, state: RepositoryTransitionState, progress: TransitionProgress
    ) -> tuple[bool, str | None]:
        """Check whether `stash push` saved an entry for this run.

        `git stash push` exits 0 without creating an entry when there is
        nothing to save, so the top of the stash list must carry this run's
        label before its commit id is trusted.

        Returns:
            (created, commit id); an unverifiable push counts as created with
            no commit id so later lookups match by label only
        """
        try:
            entries = self.git.list_stashes()
        except GitCommandError as e:
            self._warn(progress, f"Could not verify stash, will match by label: {e}")
            return True, None

        if entries and state.temporary_stash_label in entries[0].message:
            return True, entries[0].commit
        return False, None

    def _prepare_branch(
        self, state: RepositoryTransitionState, progress: TransitionProgress
    ) -> None:
        with self._stage(
            TransitionStage.BRANCH_PREPARED,
            BranchPrepFailureError,
            f"Creating new branch {state.new_branch_name} from {state.base_branch}...",
        ):
            self.git.checkout(state.base_branch)
            self.git.pull(self.config.remote, state.base_branch)
            self.git.create_branch(state.new_branch_name, state.base_branch)
        progress.advance(TransitionStage.BRANCH_PREPARED)

    def _apply_patch(self, state: RepositoryTransitionState, progress: TransitionProgress) -> None:
        with self._stage(
            TransitionStage.PATCH_APPLIED, ApplyFailureError, "Applying changes to new branch..."
        ):
            self.git.apply_three_way(state.patch_file_path)
        progress.advance(TransitionStage.PATCH_APPLIED)

    def _commit(self, state: RepositoryTransitionState, progress: TransitionProgress) -> None:
        with self._stage(TransitionStage.COMMITTED, CommitFailureError, "Committing changes..."):
            self.git.commit(state.commit_message)
        progress.advance(TransitionStage.COMMITTED)

    def _push(self, state: RepositoryTransitionState, progress: TransitionProgress) -> None:
        with self._stage(TransitionStage.PUSHED, PushFailureError, "Pushing branch..."):
            self.git.push(self.config.remote, state.new_branch_name, set_upstream=True)
        progress.pushed = True
        progress.advance(TransitionStage.PUSHED)

    def _restore_original_branch(
        self, state: RepositoryTransitionState, progress: TransitionProgress
    ) -> None:
        with self._stage(
            TransitionStage.ORIGINAL_BRANCH_RESTORED,
            RestoreFailureError,
            f"Switching back to {state.current_branch}...",
        ):
            self.git.checkout(state.current_branch)
        progress.advance(TransitionStage.ORIGINAL_BRANCH_RESTORED)

    def _pop_stash(self, state: RepositoryTransitionState, progress: TransitionProgress) -> None:
        with self._stage(
            TransitionStage.STASH_POPPED, RestoreFailureError, "Popping unstaged changes..."
        ):
            entry = find_stash_entry(
                self.git.list_stashes(), state.temporary_stash_label, progress.stash_commit
            )
            if entry is None:
                self._warn(
                    progress,
                    f"No stash matching {state.temporary_stash_label} found, skipping pop. "
                    "Your changes are still in the stash list.",
                )
                return
            self.reporter.debug(f"Found stash: {entry.ref}")
            self.git.stash_pop(entry.ref)
        progress.stash_popped = True
        progress.advance(TransitionStage.STASH_POPPED)

    def _open_pull_request_page(
        self, state: RepositoryTransitionState, progress: TransitionProgress
    ) -> str | None:
        try:
            repository = GitHubRepository.from_remote_url(
                self.git.get_remote_url(self.config.remote)
            )
        except (GitCommandError, RemoteParseError) as e:
            self._warn(progress, f"Failed to parse GitHub remote: {e}")
            return None

        url = repository.new_pull_request_url(state.new_branch_name)
        if self.config.open_browser:
            self.reporter.report(f"Opening {url}")
            if not self.browser(url):
                self._warn(progress, f"Could not open a browser; open {url} manually.")
        return url

    # ============================================================
    # Recovery Steps
    # ============================================================

    def _run_recovery_step(
        self,
        step: RecoveryStep,
        state: RepositoryTransitionState,
        progress: TransitionProgress,
    ) -> bool:
        """Run one recovery step.

        Returns:
            False if the step was not performed (e.g. stash not found)
        """
        if step == RecoveryStep.DISCARD_PARTIAL_APPLY:
            self.git.reset("HEAD", hard=True)
        elif step == RecoveryStep.CHECKOUT_ORIGINAL_BRANCH:
            self.git.checkout(state.current_branch)
        elif step == RecoveryStep.DELETE_NEW_BRANCH:
            self.git.delete_branch(state.new_branch_name)
        elif step == RecoveryStep.POP_STASH:
            return self._recover_stash(state, progress)
        elif step == RecoveryStep.RESTORE_SELECTION:
            self.git.apply_to_working_tree(state.patch_file_path)
        elif step == RecoveryStep.REMOVE_PATCH_FILE:
            state.patch_file_path.unlink(missing_ok=True)
        return True

    def _recover_stash(self, state: RepositoryTransitionState, progress: TransitionProgress) -> bool:
        """Best-effort pop of this run's stash.

        Lookup failures are reported and swallowed; a failing pop is raised.
        """
        try:
            raw_list = self.git.get_raw_stash_list()
            entries = self.git.list_stashes()
        except GitCommandError as e:
            self.reporter.warn(f"Could not list stashes: {e}")
            return False

        if state.temporary_stash_label not in raw_list:
            self.reporter.warn(f"No stash matching {state.temporary_stash_label} found, skipping pop.")
            return False

        entry = find_stash_entry(entries, state.temporary_stash_label, progress.stash_commit)
        if entry is None:
            self.reporter.warn(f"No stash matching {state.temporary_stash_label} found, skipping pop.")
            return False

        self.git.stash_pop(entry.ref)
        return True

    def _warn(self, progress: TransitionProgress, message: str) -> None:
        progress.warnings.append(message)
        self.reporter.warn(message)
