"""Unit tests for settings loading."""

from __future__ import annotations

from pathlib import Path

import pytest
from pydantic import ValidationError

from github_repo_scaffold.config import (
    DEFAULT_REQUIRED_STATUS_CHECKS,
    MissingGitHubTokenError,
    ScaffoldSettings,
)


def test_settings_load_from_dotenv(isolated_env: Path) -> None:
    (isolated_env / ".env").write_text(
        "\n".join(
            [
                "SCAFFOLD_GITHUB_TOKEN=test-token",
                "LOG_LEVEL=DEBUG",
                "SCAFFOLD_REQUIRED_STATUS_CHECKS=build, lint ,",
                "",
            ]
        ),
        encoding="utf-8",
    )

    settings = ScaffoldSettings()

    assert settings.github_token == "test-token"
    assert settings.log_level == "DEBUG"
    assert settings.required_status_checks == ["build", "lint"]


def test_settings_defaults(settings: ScaffoldSettings) -> None:
    assert settings.github_base_url == "https://api.github.com"
    assert settings.protected_branch == "master"
    assert settings.request_timeout_seconds == 30.0
    assert settings.required_status_checks == list(DEFAULT_REQUIRED_STATUS_CHECKS)
    assert not settings.has_github_token


def test_token_is_only_required_on_demand(settings: ScaffoldSettings) -> None:
    with pytest.raises(MissingGitHubTokenError, match="SCAFFOLD_GITHUB_TOKEN"):
        settings.require_github_token()


def test_environment_token_is_stripped(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("SCAFFOLD_GITHUB_TOKEN", "  tok  ")

    assert ScaffoldSettings(_env_file=None).require_github_token() == "tok"


def test_plain_github_token_is_ignored(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("GITHUB_TOKEN", "other-tool")

    assert not ScaffoldSettings(_env_file=None).has_github_token


@pytest.mark.parametrize(
    ("name", "value"),
    [("SCAFFOLD_PROTECTED_BRANCH", "  "), ("SCAFFOLD_REQUEST_TIMEOUT_SECONDS", "0")],
)
def test_invalid_values_are_rejected(
    monkeypatch: pytest.MonkeyPatch, name: str, value: str
) -> None:
    monkeypatch.setenv(name, value)

    with pytest.raises(ValidationError):
        ScaffoldSettings(_env_file=None)


def test_log_format_is_case_insensitive(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("LOG_FORMAT", "Rich")

    assert ScaffoldSettings(_env_file=None).log_format == "rich"


def test_unknown_log_format_is_rejected(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("LOG_FORMAT", "xml")

    with pytest.raises(ValidationError):
        ScaffoldSettings(_env_file=None)
