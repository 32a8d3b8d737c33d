"""Configuration for the scaffolder.

Configuration is loaded from:
- environment variables
- and a local `.env` file (if present)

To avoid collisions with other tools that may also use `GITHUB_TOKEN`, this
project uses a dedicated token variable: `SCAFFOLD_GITHUB_TOKEN`.
"""

from __future__ import annotations

from typing import Annotated, Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict

DEFAULT_REQUIRED_STATUS_CHECKS: tuple[str, ...] = (
    "codecov/patch",
    "codecov/project",
    "lint-build-test-publish",
)


class MissingGitHubTokenError(ValueError):
    pass


class ScaffoldSettings(BaseSettings):
    """Settings for the scaffolder.

    Environment variables:
    - SCAFFOLD_GITHUB_TOKEN              (required for GitHub operations)
    - GITHUB_BASE_URL                    (optional)
    - LOG_LEVEL                          (optional)
    - LOG_FORMAT                         (optional, json or rich)
    - SCAFFOLD_REQUEST_TIMEOUT_SECONDS   (optional)
    - SCAFFOLD_PROTECTED_BRANCH          (optional)
    - SCAFFOLD_REQUIRED_STATUS_CHECKS    (optional, comma-separated)

    Notes:
        Pydantic-settings supports overriding the env file in tests via:
        `ScaffoldSettings(_env_file=path_to_env)`.
    """

    # The token is optional at load time so that file-only generation works offline.
    # GitHub-facing commands call `require_github_token()`.
    github_token: str = Field(
        default="",
        validation_alias="SCAFFOLD_GITHUB_TOKEN",
        description="GitHub token used for API authentication",
    )
    github_base_url: str = Field(
        default="https://api.github.com",
        validation_alias="GITHUB_BASE_URL",
        description="GitHub API base URL (useful for GitHub Enterprise)",
    )

    log_level: str = Field(
        default="INFO",
        validation_alias="LOG_LEVEL",
        description="Root logging level",
    )
    log_format: Literal["json", "rich"] = Field(
        default="json",
        validation_alias="LOG_FORMAT",
        description="Log output: JSON lines, or rich console output for interactive use",
    )

    request_timeout_seconds: float = Field(
        default=30.0,
        gt=0,
        validation_alias="SCAFFOLD_REQUEST_TIMEOUT_SECONDS",
        description="Timeout applied to every GitHub API request",
    )

    protected_branch: str = Field(
        default="master",
        validation_alias="SCAFFOLD_PROTECTED_BRANCH",
        description="Branch that receives branch protection rules",
    )

    required_status_checks: Annotated[list[str], NoDecode] = Field(
        default_factory=lambda: list(DEFAULT_REQUIRED_STATUS_CHECKS),
        validation_alias="SCAFFOLD_REQUIRED_STATUS_CHECKS",
        description="Status check contexts required before merging into the protected branch",
    )

    model_config = SettingsConfigDict(
        env_prefix="",
        env_file=".env",
        extra="ignore",
    )

    @field_validator("required_status_checks", mode="before")
    @classmethod
    def _split_status_checks(cls, value: object) -> object:
        if isinstance(value, str):
            return [part.strip() for part in value.split(",") if part.strip()]
        return value

    @field_validator("log_format", mode="before")
    @classmethod
    def _normalize_log_format(cls, value: object) -> object:
        return value.strip().lower() if isinstance(value, str) else value

    @field_validator("protected_branch")
    @classmethod
    def _require_branch(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("SCAFFOLD_PROTECTED_BRANCH must be non-empty")
        return value.strip()

    @property
    def has_github_token(self) -> bool:
        return bool(self.github_token.strip())

    def require_github_token(self) -> str:
        """Return the GitHub token, failing loudly when it is not configured."""

        if not self.has_github_token:
            raise MissingGitHubTokenError("SCAFFOLD_GITHUB_TOKEN is required for GitHub operations")
        return self.github_token.strip()
