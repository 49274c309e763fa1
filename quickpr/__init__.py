"""QuickPR: open a pull request from part of your working tree.

Extracts the diff hunks overlapping a line selection (or takes the staged
changes), moves them onto a fresh branch cut from the remote's default
branch, commits and pushes, then restores the original branch and every
change that was not selected.

Usage:
    python -m quickpr <command> [options]
    quickpr <command> [options]

Structure:
    quickpr/
    ├── __main__.py          # Entry point dispatcher
    ├── domain/              # Domain models (parse-once pattern)
    │   ├── diff.py          # DiffHunk, SelectionRange, FileDiff
    │   ├── transition.py    # TransitionStage, recovery plan, run state
    │   ├── config.py        # QuickPrConfig
    │   └── errors.py        # Error hierarchy
    ├── services/            # Business logic services
    │   ├── git_operations.py
    │   ├── selection_patch.py
    │   ├── base_branch.py
    │   └── transition_orchestrator.py
    ├── infrastructure/      # External system interactions
    │   ├── console.py
    │   ├── browser.py
    │   └── github/api.py
    └── commands/            # Thin command orchestrators
        ├── make_pr.py
        └── extract_patch.py
"""

__version__ = "0.1.0"
