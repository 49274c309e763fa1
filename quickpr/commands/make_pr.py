"""Make PR command.

Thin command that wires configuration, services and the orchestrator.
No business logic - just wiring and error reporting.
"""

from __future__ import annotations

import sys
from pathlib import Path

from quickpr.domain.config import QuickPrConfig
from quickpr.domain.diff import SelectionRange
from quickpr.domain.errors import QuickPrError, RecoveryError
from quickpr.domain.patch_source import PatchSource
from quickpr.infrastructure.console import ConsoleReporter
from quickpr.services.git_operations import (
    GitCommandError,
    GitOperationsService,
    GitRepositoryError,
)
from quickpr.services.transition_orchestrator import TransitionOrchestrator


def cmd_make_pr(
    source: PatchSource,
    commit_message: str,
    repo_path: str = ".",
    config_path: str | None = None,
    file_path: str | None = None,
    start_line: int | None = None,
    end_line: int | None = None,
    username: str | None = None,
    push: bool | None = None,
    open_browser: bool | None = None,
    delete_branch_on_failure: bool | None = None,
    verbose: bool = False,
) -> int:
    """Create a pull request branch from a selection or the staged changes.

    Thin command that:
    1. Loads configuration and applies command-line overrides
    2. Builds the git service and orchestrator
    3. Runs the transition and reports the outcome

    Args:
        source: PatchSource.SELECTION or PatchSource.STAGED
        commit_message: Commit message, also used as the PR title
        repo_path: Path to the git repository
        config_path: Optional explicit configuration file
        file_path: File containing the selection (SELECTION only)
        start_line: Zero-based first selected line (SELECTION only)
        end_line: Zero-based last selected line (SELECTION only)
        username: Overrides github_username
        push: Overrides push
        open_browser: Overrides open_browser
        delete_branch_on_failure: Overrides delete_branch_on_failure
        verbose: Echo every git command

    Returns:
        Exit code (0 for success, 1 for failure)
    """
    # --------------------------------------------------------
    # 1. Configuration
    # --------------------------------------------------------
    if not commit_message.strip():
        print("Error creating PR: a commit message is required", file=sys.stderr)
        return 1

    try:
        config = QuickPrConfig.load(repo_path, config_path).with_overrides(
            github_username=username,
            push=push,
            open_browser=open_browser,
            delete_branch_on_failure=delete_branch_on_failure,
        )
    except QuickPrError as e:
        print(f"Error creating PR: {e}", file=sys.stderr)
        return 1

    # --------------------------------------------------------
    # 2. Wiring
    # --------------------------------------------------------
    reporter = ConsoleReporter(verbose=verbose)
    git = GitOperationsService(repo_path, reporter=reporter)
    orchestrator = TransitionOrchestrator(git, config, reporter=reporter)

    # --------------------------------------------------------
    # 3. Run
    # --------------------------------------------------------
    try:
        if source == PatchSource.SELECTION:
            if not file_path:
                print("Error creating PR: --file is required for a selection", file=sys.stderr)
                return 1
            selection = SelectionRange.from_optional(start_line, end_line)
            result = orchestrator.create_from_selection(Path(file_path), selection, commit_message)
        else:
            result = orchestrator.create_from_staged(commit_message)
    except RecoveryError as e:
        print(f"Error creating PR: {e.primary}", file=sys.stderr)
        for step, failure in e.failures:
            print(f"  Recovery step {step.value} failed: {failure}", file=sys.stderr)
        return 1
    except (QuickPrError, GitCommandError, GitRepositoryError) as e:
        print(f"Error creating PR: {e}", file=sys.stderr)
        return 1

    print()
    print(f"Branch: {result.new_branch_name} (base: {result.base_branch})")
    if result.pull_request_url:
        print(f"Pull request: {result.pull_request_url}")
    elif not result.pushed:
        print(f"Not pushed. Push with: git push --set-upstream {config.remote} {result.new_branch_name}")

    return 0
