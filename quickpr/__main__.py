#!/usr/bin/env python3
"""CLI entry point for QuickPR.

Usage:
    python -m quickpr <command> [options]
    quickpr <command> [options]

Commands:
    selection   Create a PR branch from the hunks overlapping a line selection
    staged      Create a PR branch from the staged changes
    extract     Print the patch a selection would produce
"""

import argparse
import sys

from quickpr.commands.extract_patch import cmd_extract_patch
from quickpr.commands.make_pr import cmd_make_pr
from quickpr.domain.patch_source import PatchSource


def _add_run_options(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "-m",
        "--message",
        required=True,
        help="Commit message, also used as the PR title",
    )
    parser.add_argument(
        "--repo-path",
        default=".",
        help="Path to the git repository (default: current directory)",
    )
    parser.add_argument(
        "--config",
        help="Configuration file (default: .quickpr.yml, then ~/.config/quickpr/config.yml)",
    )
    parser.add_argument(
        "--username",
        help="Branch name prefix (overrides github_username)",
    )
    parser.add_argument(
        "--no-push",
        dest="push",
        action="store_const",
        const=False,
        help="Commit on the new branch without pushing it",
    )
    parser.add_argument(
        "--no-browser",
        dest="open_browser",
        action="store_const",
        const=False,
        help="Do not open the new pull request page",
    )
    parser.add_argument(
        "--keep-branch-on-failure",
        dest="delete_branch_on_failure",
        action="store_const",
        const=False,
        help="Keep the new branch if the run fails before committing",
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Echo every git command",
    )


def _add_selection_options(parser: argparse.ArgumentParser, file_required: bool) -> None:
    parser.add_argument(
        "--file",
        required=file_required,
        help="File containing the selected lines",
    )
    parser.add_argument(
        "--start",
        type=int,
        help="First selected line (zero-based, as reported by editors)",
    )
    parser.add_argument(
        "--end",
        type=int,
        help="Last selected line, inclusive (zero-based; default: --start)",
    )


def main() -> int:
    parser = argparse.ArgumentParser(
        description="Create a pull request from a subset of your working tree changes",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Commands:
  selection   Create a PR branch from the hunks overlapping a line selection
  staged      Create a PR branch from the staged changes
  extract     Print the patch a selection would produce

Examples:
  quickpr selection --file src/parser.py --start 40 --end 42 -m "Fix parser bug"
  quickpr staged -m "Bump dependencies" --no-browser
  git diff -- src/parser.py | quickpr extract --start 40 --end 42
        """,
    )
    subparsers = parser.add_subparsers(dest="command", help="Command to run")

    # selection command
    parser_selection = subparsers.add_parser(
        "selection",
        help="Create a PR branch from the hunks overlapping a line selection",
    )
    _add_selection_options(parser_selection, file_required=True)
    _add_run_options(parser_selection)

    # staged command
    parser_staged = subparsers.add_parser(
        "staged",
        help="Create a PR branch from the staged changes",
    )
    _add_run_options(parser_staged)

    # extract command
    parser_extract = subparsers.add_parser(
        "extract",
        help="Print the patch a selection would produce",
    )
    _add_selection_options(parser_extract, file_required=False)
    parser_extract.add_argument(
        "--diff-file",
        help="Read the diff from this file instead of stdin (ignored with --file)",
    )
    parser_extract.add_argument(
        "--repo-path",
        default=".",
        help="Path to the git repository (default: current directory)",
    )
    parser_extract.add_argument(
        "--context-lines",
        type=int,
        default=3,
        help="Context lines for git diff (default: 3)",
    )

    args = parser.parse_args()

    if not args.command:
        parser.print_help()
        return 1

    # Route to command implementations with explicit parameters
    if args.command in ("selection", "staged"):
        return cmd_make_pr(
            source=PatchSource.from_string(args.command),
            commit_message=args.message,
            repo_path=args.repo_path,
            config_path=args.config,
            file_path=getattr(args, "file", None),
            start_line=getattr(args, "start", None),
            end_line=getattr(args, "end", None),
            username=args.username,
            push=args.push,
            open_browser=args.open_browser,
            delete_branch_on_failure=args.delete_branch_on_failure,
            verbose=args.verbose,
        )

    elif args.command == "extract":
        return cmd_extract_patch(
            start_line=args.start,
            end_line=args.end,
            file_path=args.file,
            diff_file=args.diff_file,
            repo_path=args.repo_path,
            context_lines=args.context_lines,
        )

    else:
        parser.print_help()
        return 1


if __name__ == "__main__":
    sys.exit(main())
