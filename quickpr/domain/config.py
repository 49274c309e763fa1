"""Configuration value for a pull request run.

Loaded once from YAML at the boundary and passed explicitly into the
orchestrator; nothing reads configuration mid-flow.
"""

from __future__ import annotations

import dataclasses
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import yaml

from quickpr.domain.errors import QuickPrError

REPO_CONFIG_FILENAME = ".quickpr.yml"
USER_CONFIG_PATH = Path("~/.config/quickpr/config.yml")
GITHUB_TOKEN_ENV_VAR = "GITHUB_TOKEN"


class ConfigError(QuickPrError):
    """Raised when a configuration file is unreadable or invalid."""

    pass


@dataclass(frozen=True)
class QuickPrConfig:
    """Immutable settings for one run.

    Attributes:
        github_username: Prefix of generated branch names
        remote: Remote used for base-branch lookup, pull and push
        context_lines: Context lines for selection diffs
        default_base_branch: Base branch when the remote does not advertise one
        push: Push the new branch after committing
        open_browser: Open the new pull request page after success
        delete_branch_on_failure: Delete a created but uncommitted branch on failure
        github_token: Token for the GitHub REST fallback
        github_api_url: GitHub REST base URL
    """

    github_username: str = "user"
    remote: str = "origin"
    context_lines: int = 3
    default_base_branch: str = "main"
    push: bool = True
    open_browser: bool = True
    delete_branch_on_failure: bool = True
    github_token: str | None = None
    github_api_url: str = "https://api.github.com"

    # --------------------------------------------------------
    # Factory Methods
    # --------------------------------------------------------

    @classmethod
    def from_dict(cls, data: dict[str, Any] | None) -> QuickPrConfig:
        """Build a config from parsed YAML.

        Raises:
            ConfigError: On unknown keys or wrongly-typed values
        """
        if data is None:
            return cls()
        if not isinstance(data, dict):
            raise ConfigError(f"Configuration must be a mapping, got {type(data).__name__}")

        fields = {f.name: f for f in dataclasses.fields(cls)}
        unknown = sorted(set(data) - set(fields))
        if unknown:
            raise ConfigError(f"Unknown configuration keys: {', '.join(unknown)}")

        defaults = cls()
        for key, value in data.items():
            expected = type(getattr(defaults, key))
            if key == "github_token":
                if value is not None and not isinstance(value, str):
                    raise ConfigError("github_token must be a string")
                continue
            # bool is an int subclass; keep the two apart
            if not isinstance(value, expected) or (expected is int and isinstance(value, bool)):
                raise ConfigError(
                    f"{key} must be {expected.__name__}, got {type(value).__name__}"
                )

        if data.get("context_lines", 0) < 0:
            raise ConfigError("context_lines must not be negative")

        if "github_username" in data and not data["github_username"].strip():
            data = {**data, "github_username": defaults.github_username}

        return cls(**data)

    @classmethod
    def from_file(cls, path: str | Path) -> QuickPrConfig:
        """Load a config from a YAML file.

        Raises:
            ConfigError: If the file cannot be read or parsed
        """
        config_path = Path(path).expanduser()
        try:
            content = config_path.read_text()
        except OSError as e:
            raise ConfigError(f"Cannot read configuration {config_path}: {e}")

        try:
            data = yaml.safe_load(content)
        except yaml.YAMLError as e:
            raise ConfigError(f"Invalid YAML in {config_path}: {e}")

        return cls.from_dict(data)

    @classmethod
    def load(
        cls,
        repo_path: str | Path = ".",
        config_path: str | Path | None = None,
    ) -> QuickPrConfig:
        """Load the first config found, filling the token from the environment.

        Search order: explicit path, `<repo>/.quickpr.yml`,
        `~/.config/quickpr/config.yml`. No file means defaults.
        """
        if config_path is not None:
            config = cls.from_file(config_path)
        else:
            candidates = [Path(repo_path) / REPO_CONFIG_FILENAME, USER_CONFIG_PATH.expanduser()]
            existing = next((p for p in candidates if p.is_file()), None)
            config = cls.from_file(existing) if existing else cls()

        if config.github_token is None and os.environ.get(GITHUB_TOKEN_ENV_VAR):
            config = config.with_overrides(github_token=os.environ[GITHUB_TOKEN_ENV_VAR])
        return config

    # --------------------------------------------------------
    # Public API
    # --------------------------------------------------------

    def with_overrides(self, **overrides: Any) -> QuickPrConfig:
        """Return a copy with the given non-None values replaced."""
        changes = {key: value for key, value in overrides.items() if value is not None}
        return dataclasses.replace(self, **changes)
