"""Extract patch command.

Prints the patch a selection would produce without touching the repository.
Reads the diff from a file's working tree changes, a diff file, or stdin.
"""

from __future__ import annotations

import sys
from pathlib import Path

from quickpr.domain.diff import SelectionRange, extract_patch_for_selection
from quickpr.domain.errors import NoSelectionError
from quickpr.services.git_operations import (
    GitCommandError,
    GitOperationsService,
    GitRepositoryError,
)
from quickpr.services.selection_patch import SelectionPatchService


def cmd_extract_patch(
    start_line: int | None,
    end_line: int | None,
    file_path: str | None = None,
    diff_file: str | None = None,
    repo_path: str = ".",
    context_lines: int = 3,
) -> int:
    """Print the patch covering a selection.

    Args:
        start_line: Zero-based first selected line
        end_line: Zero-based last selected line
        file_path: Take the diff from this file's working tree changes
        diff_file: Take the diff from this file ("-" or None reads stdin)
        repo_path: Path to the git repository (file_path mode)
        context_lines: Context lines for the git diff (file_path mode)

    Returns:
        Exit code (0 for success, 1 for failure, 2 when nothing overlaps)
    """
    try:
        selection = SelectionRange.from_optional(start_line, end_line)
    except NoSelectionError as e:
        print(str(e), file=sys.stderr)
        return 1

    if file_path:
        git = GitOperationsService(repo_path)
        try:
            git.ensure_repository()
            patch = SelectionPatchService(git, context_lines).create_patch_for_selection(
                file_path, selection
            )
        except (GitCommandError, GitRepositoryError) as e:
            print(f"Failed to read diff: {e}", file=sys.stderr)
            return 1
    else:
        try:
            if diff_file and diff_file != "-":
                diff_content = Path(diff_file).read_text()
            else:
                diff_content = sys.stdin.read()
        except FileNotFoundError:
            print(f"Input file not found: {diff_file}", file=sys.stderr)
            return 1
        except OSError as e:
            print(f"Failed to read diff: {e}", file=sys.stderr)
            return 1
        patch = extract_patch_for_selection(diff_content, selection)

    if patch is None:
        print("No changes in selected lines.", file=sys.stderr)
        return 2

    sys.stdout.write(patch)
    return 0
