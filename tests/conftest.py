"""Test configuration and fixtures."""

from __future__ import annotations

from pathlib import Path
from unittest.mock import Mock

import pytest

from github_repo_scaffold.config import ScaffoldSettings
from github_repo_scaffold.generators.unit import UnitContext
from github_repo_scaffold.github.reconciler import ResourceReconciler
from github_repo_scaffold.prompting import PresetPrompter
from github_repo_scaffold.rendering import JinjaTemplateRenderer
from tests.fakes import FakeGitHub

_SETTINGS_ENV_VARS = (
    "SCAFFOLD_GITHUB_TOKEN",
    "GITHUB_BASE_URL",
    "LOG_LEVEL",
    "LOG_FORMAT",
    "SCAFFOLD_REQUEST_TIMEOUT_SECONDS",
    "SCAFFOLD_PROTECTED_BRANCH",
    "SCAFFOLD_REQUIRED_STATUS_CHECKS",
)


@pytest.fixture(autouse=True)
def isolated_env(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Keep settings independent of the developer's environment and `.env`."""
    for name in _SETTINGS_ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    workdir = tmp_path / "cwd"
    workdir.mkdir()
    monkeypatch.chdir(workdir)
    return workdir


@pytest.fixture
def fake_github() -> FakeGitHub:
    return FakeGitHub(login="acme")


@pytest.fixture
def reconciler(fake_github: FakeGitHub) -> ResourceReconciler:
    return ResourceReconciler(client=fake_github)


@pytest.fixture
def settings() -> ScaffoldSettings:
    return ScaffoldSettings(_env_file=None)


@pytest.fixture
def destination(tmp_path: Path) -> Path:
    return tmp_path / "out"


@pytest.fixture
def unit_context(destination: Path, settings: ScaffoldSettings) -> UnitContext:
    """A context whose collaborators are mocks; suited to scheduler tests."""
    return UnitContext(
        destination=destination,
        renderer=Mock(spec=JinjaTemplateRenderer),
        prompter=PresetPrompter(),
        settings=settings,
    )
