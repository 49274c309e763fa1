"""Git operations service.

Core service for git command operations. Encapsulates all subprocess calls
to git commands and returns domain models where relevant. Every call blocks
until git exits.
"""

from __future__ import annotations

import subprocess
from pathlib import Path

from quickpr.domain.git_status import (
    STASH_LIST_FORMAT,
    StashEntry,
    WorkingTreeStatus,
)
from quickpr.infrastructure.console import ProgressReporter


class GitRepositoryError(Exception):
    """Raised when directory is not a git repository."""

    pass


class GitCommandError(Exception):
    """Raised when a git command exits with a non-zero status.

    Attributes:
        command: The full command line that failed
        stderr: Error output of the command
    """

    def __init__(self, message: str, command: list[str] | None = None, stderr: str = ""):
        super().__init__(message)
        self.command = command or []
        self.stderr = stderr


class GitDiffError(GitCommandError):
    """Raised when git diff command fails."""

    pass


class GitApplyError(GitCommandError):
    """Raised when a patch does not apply."""

    pass


class GitStatusError(GitCommandError):
    """Raised when git status fails."""

    pass


class GitCommitError(GitCommandError):
    """Raised when git commit fails."""

    pass


class GitStashError(GitCommandError):
    """Raised when a stash command fails."""

    pass


class GitResetError(GitCommandError):
    """Raised when git reset fails."""

    pass


class GitCheckoutError(GitCommandError):
    """Raised when git checkout fails."""

    pass


class GitBranchError(GitCommandError):
    """Raised when creating or deleting a branch fails."""

    pass


class GitPullError(GitCommandError):
    """Raised when git pull fails."""

    pass


class GitPushError(GitCommandError):
    """Raised when git push fails."""

    pass


class GitRemoteError(GitCommandError):
    """Raised when remote introspection fails."""

    pass


class GitOperationsService:
    """Core service for git command operations.

    Encapsulates all subprocess calls to git commands.
    Returns domain models where relevant.
    """

    def __init__(self, repo_path: str | Path = ".", reporter: ProgressReporter | None = None):
        """Initialize with repository path.

        Args:
            repo_path: Path to git repository (default: current directory)
            reporter: Optional reporter that receives every executed command
        """
        self.repo_path = Path(repo_path)
        self.reporter = reporter

    # --------------------------------------------------------
    # Repository
    # --------------------------------------------------------

    def is_git_repository(self) -> bool:
        """Check if the repository path is a git repository.

        Returns:
            True if valid git repo, False otherwise
        """
        try:
            subprocess.run(
                ["git", "rev-parse", "--git-dir"],
                cwd=self.repo_path,
                capture_output=True,
                check=True,
            )
            return True
        except (subprocess.CalledProcessError, FileNotFoundError):
            return False

    def ensure_repository(self) -> None:
        """Raise GitRepositoryError unless the path is a git repository."""
        if not self.is_git_repository():
            raise GitRepositoryError(
                f"Not a git repository: {self.repo_path}\n"
                "Make sure you're running from within a git repository."
            )

    def get_current_branch(self) -> str:
        """Get the name of the checked-out branch."""
        return self._run(["rev-parse", "--abbrev-ref", "HEAD"], GitCheckoutError).strip()

    def get_status(self) -> WorkingTreeStatus:
        """Get working tree status.

        Raises:
            GitStatusError: If git status fails
        """
        output = self._run(["status", "--porcelain"], GitStatusError)
        return WorkingTreeStatus.from_porcelain(output)

    # --------------------------------------------------------
    # Diff and Apply
    # --------------------------------------------------------

    def get_file_diff(self, file_path: str, context_lines: int = 3) -> str:
        """Get the unstaged diff of a single file.

        Args:
            file_path: Path relative to the repository root
            context_lines: Number of context lines (-U)

        Returns:
            Raw unified diff text (empty when the file is unchanged)
        """
        return self._run(["diff", f"-U{context_lines}", "--", file_path], GitDiffError)

    def get_staged_diff(self) -> str:
        """Get the diff of everything staged in the index."""
        return self._run(["diff", "--cached"], GitDiffError)

    def apply_to_index(self, patch_path: str | Path) -> None:
        """Stage a patch without touching the working tree."""
        self._run(["apply", "--cached", "--verbose", str(patch_path)], GitApplyError)

    def apply_three_way(self, patch_path: str | Path) -> None:
        """Apply a patch to index and working tree, falling back to a 3-way merge."""
        self._run(["apply", "--index", "--3way", "--verbose", str(patch_path)], GitApplyError)

    def apply_to_working_tree(self, patch_path: str | Path) -> None:
        """Apply a patch to the working tree only."""
        self._run(["apply", "--verbose", str(patch_path)], GitApplyError)

    # --------------------------------------------------------
    # Commit and Reset
    # --------------------------------------------------------

    def commit(self, message: str, no_verify: bool = False) -> None:
        """Commit the index.

        Args:
            message: Commit message
            no_verify: Skip pre-commit and commit-msg hooks
        """
        args = ["commit", "-m", message]
        if no_verify:
            args.append("--no-verify")
        self._run(args, GitCommitError)

    def reset(self, ref: str = "HEAD", hard: bool = False, soft: bool = False) -> None:
        """Reset HEAD to a ref."""
        args = ["reset"]
        if hard:
            args.append("--hard")
        elif soft:
            args.append("--soft")
        args.append(ref)
        self._run(args, GitResetError)

    # --------------------------------------------------------
    # Stash
    # --------------------------------------------------------

    def stash_push(self, label: str, include_untracked: bool = True) -> None:
        """Stash working tree changes under a label."""
        args = ["stash", "push"]
        if include_untracked:
            args.append("-u")
        args.extend(["-m", label])
        self._run(args, GitStashError)

    def list_stashes(self) -> list[StashEntry]:
        """Get stash entries, newest first."""
        output = self._run(["stash", "list", f"--format={STASH_LIST_FORMAT}"], GitStashError)
        entries = [StashEntry.from_list_line(line) for line in output.splitlines()]
        return [entry for entry in entries if entry is not None]

    def get_raw_stash_list(self) -> str:
        """Get `git stash list` output as text."""
        return self._run(["stash", "list"], GitStashError)

    def stash_pop(self, ref: str) -> None:
        """Pop a specific stash entry."""
        self._run(["stash", "pop", ref], GitStashError)

    # --------------------------------------------------------
    # Branches
    # --------------------------------------------------------

    def checkout(self, branch: str) -> None:
        """Switch to an existing branch."""
        self._run(["checkout", branch], GitCheckoutError)

    def create_branch(self, new_branch: str, start_point: str) -> None:
        """Create a branch from a start point and switch to it."""
        self._run(["checkout", "-b", new_branch, start_point], GitBranchError)

    def delete_branch(self, branch: str) -> None:
        """Force-delete a local branch."""
        self._run(["branch", "-D", branch], GitBranchError)

    def pull(self, remote: str, branch: str) -> None:
        """Pull a branch from a remote into the current branch."""
        self._run(["pull", remote, branch], GitPullError)

    def push(self, remote: str, branch: str, set_upstream: bool = True) -> None:
        """Push a branch to a remote."""
        args = ["push"]
        if set_upstream:
            args.append("--set-upstream")
        args.extend([remote, branch])
        self._run(args, GitPushError)

    # --------------------------------------------------------
    # Remotes
    # --------------------------------------------------------

    def show_remote(self, remote: str = "origin") -> str:
        """Get `git remote show <remote>` output."""
        return self._run(["remote", "show", remote], GitRemoteError)

    def get_remote_url(self, remote: str = "origin") -> str:
        """Get the fetch URL of a remote."""
        return self._run(["remote", "get-url", remote], GitRemoteError).strip()

    # --------------------------------------------------------
    # Private Helpers
    # --------------------------------------------------------

    def _run(self, args: list[str], error_cls: type[GitCommandError]) -> str:
        """Run a git command in the repository.

        Args:
            args: Git command arguments (without 'git')
            error_cls: Error raised when the command fails

        Returns:
            Command output (stdout)

        Raises:
            error_cls: If the command exits with a non-zero status
        """
        cmd = ["git"] + args
        if self.reporter is not None:
            self.reporter.debug(f"Executing command: {' '.join(cmd)} in {self.repo_path}")
        try:
            result = subprocess.run(
                cmd,
                cwd=self.repo_path,
                capture_output=True,
                text=True,
                check=True,
            )
            return result.stdout
        except subprocess.CalledProcessError as e:
            stderr = (e.stderr or "").strip()
            raise error_cls(
                f"Git command failed: {' '.join(cmd)}\n{stderr}",
                command=cmd,
                stderr=stderr,
            )
