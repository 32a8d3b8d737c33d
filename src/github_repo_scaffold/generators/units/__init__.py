"""Concrete generator units, addressable by identity."""

from github_repo_scaffold.generators.units.coverage import CodecovUnit, TestCoverageUnit
from github_repo_scaffold.generators.units.files import GitignoreUnit, ReadmeUnit
from github_repo_scaffold.generators.units.github import GitHubUnit
from github_repo_scaffold.generators.units.repository import RepositoryUnit

UNITS: dict[str, type] = {
    unit.identity: unit
    for unit in (
        RepositoryUnit,
        ReadmeUnit,
        GitignoreUnit,
        TestCoverageUnit,
        CodecovUnit,
        GitHubUnit,
    )
}

__all__ = [
    "UNITS",
    "CodecovUnit",
    "GitHubUnit",
    "GitignoreUnit",
    "ReadmeUnit",
    "RepositoryUnit",
    "TestCoverageUnit",
]
