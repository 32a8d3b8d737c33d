"""Desired-state specs and resource keys for the GitHub resources we manage.

Specs are immutable. Optional fields left as None are not managed: they are
omitted from create/update payloads so GitHub keeps whatever value it has.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, fields
from typing import Any
from urllib.parse import quote

_HEX_COLOR = re.compile(r"^[0-9A-Fa-f]{6}$")


def _require(value: str, what: str) -> str:
    if not value or not value.strip():
        raise ValueError(f"{what} is required")
    return value.strip()


@dataclass(frozen=True, slots=True)
class RepositoryKey:
    owner: str
    name: str

    def __post_init__(self) -> None:
        object.__setattr__(self, "owner", _require(self.owner, "owner"))
        object.__setattr__(self, "name", _require(self.name, "name"))

    @classmethod
    def parse(cls, value: str) -> RepositoryKey:
        """Parse an 'owner/name' string."""

        owner, sep, name = value.strip().strip("/").partition("/")
        if not sep or "/" in name:
            raise ValueError(f"repository must be in the form 'owner/name', got {value!r}")
        return cls(owner=owner, name=name)

    @property
    def full_name(self) -> str:
        return f"{self.owner}/{self.name}"

    @property
    def path(self) -> str:
        return f"repos/{self.owner}/{self.name}"

    def __str__(self) -> str:
        return self.full_name


@dataclass(frozen=True, slots=True)
class BranchKey:
    owner: str
    name: str
    branch: str

    def __post_init__(self) -> None:
        object.__setattr__(self, "owner", _require(self.owner, "owner"))
        object.__setattr__(self, "name", _require(self.name, "name"))
        object.__setattr__(self, "branch", _require(self.branch, "branch"))

    @classmethod
    def of(cls, repo: RepositoryKey, branch: str) -> BranchKey:
        return cls(owner=repo.owner, name=repo.name, branch=branch)

    @property
    def repository(self) -> RepositoryKey:
        return RepositoryKey(owner=self.owner, name=self.name)

    @property
    def protection_path(self) -> str:
        return f"{self.repository.path}/branches/{quote(self.branch, safe='')}/protection"

    def __str__(self) -> str:
        return f"{self.owner}/{self.name}@{self.branch}"


@dataclass(frozen=True, slots=True)
class LabelKey:
    owner: str
    name: str
    label: str

    def __post_init__(self) -> None:
        object.__setattr__(self, "owner", _require(self.owner, "owner"))
        object.__setattr__(self, "name", _require(self.name, "name"))
        object.__setattr__(self, "label", _require(self.label, "label"))

    @classmethod
    def of(cls, repo: RepositoryKey, label: str) -> LabelKey:
        return cls(owner=repo.owner, name=repo.name, label=label)

    @property
    def repository(self) -> RepositoryKey:
        return RepositoryKey(owner=self.owner, name=self.name)

    @property
    def path(self) -> str:
        # Label names carry emoji shortcodes and spaces (":fire: P0").
        return f"{self.repository.path}/labels/{quote(self.label, safe='')}"

    def __str__(self) -> str:
        return f"{self.owner}/{self.name}#{self.label}"


@dataclass(frozen=True, slots=True)
class RepositorySpec:
    """Repository metadata and merge settings."""

    description: str | None = None
    is_private: bool | None = None
    has_issues: bool | None = None
    allow_squash_merge: bool | None = None
    allow_merge_commit: bool | None = None
    allow_rebase_merge: bool | None = None
    allow_auto_merge: bool | None = None
    allow_update_branch: bool | None = None
    delete_branch_on_merge: bool | None = None
    use_squash_pr_title_as_default: bool | None = None

    def to_payload(self) -> dict[str, Any]:
        payload: dict[str, Any] = {}
        for f in fields(self):
            value = getattr(self, f.name)
            if value is None:
                continue
            key = "private" if f.name == "is_private" else f.name
            payload[key] = value
        return payload


@dataclass(frozen=True, slots=True)
class BranchProtectionSpec:
    """Branch protection rules.

    GitHub's protection endpoint is a full replace (PUT) and requires
    `required_status_checks`, `enforce_admins`, `required_pull_request_reviews`
    and `restrictions` on every call, so those are always sent. A
    `required_approving_review_count` of 0 keeps pull requests mandatory without
    requiring a human approval; None disables pull request reviews entirely.
    """

    required_status_checks: tuple[str, ...] | None = None
    required_status_checks_strict: bool = True
    required_approving_review_count: int | None = None
    enforce_admins: bool = False
    required_linear_history: bool = False
    allow_force_pushes: bool = False
    allow_deletions: bool = False
    required_conversation_resolution: bool = False

    def __post_init__(self) -> None:
        count = self.required_approving_review_count
        if count is not None and not 0 <= count <= 6:
            raise ValueError("required_approving_review_count must be between 0 and 6")
        if self.required_status_checks is not None:
            object.__setattr__(self, "required_status_checks", tuple(self.required_status_checks))

    def to_payload(self) -> dict[str, Any]:
        status_checks: dict[str, Any] | None = None
        if self.required_status_checks is not None:
            status_checks = {
                "strict": self.required_status_checks_strict,
                "contexts": list(self.required_status_checks),
            }

        reviews: dict[str, Any] | None = None
        if self.required_approving_review_count is not None:
            reviews = {"required_approving_review_count": self.required_approving_review_count}

        return {
            "required_status_checks": status_checks,
            "enforce_admins": self.enforce_admins,
            "required_pull_request_reviews": reviews,
            "restrictions": None,
            "required_linear_history": self.required_linear_history,
            "allow_force_pushes": self.allow_force_pushes,
            "allow_deletions": self.allow_deletions,
            "required_conversation_resolution": self.required_conversation_resolution,
        }


@dataclass(frozen=True, slots=True)
class CommitSignatureSpec:
    """Required commit signature verification on a protected branch.

    GitHub exposes this as its own endpoint with no settings: reconciling the
    spec turns verification on.
    """


@dataclass(frozen=True, slots=True)
class VulnerabilityAlertsSpec:
    """Dependabot vulnerability alerts toggle."""

    enabled: bool = True


@dataclass(frozen=True, slots=True)
class LabelSpec:
    name: str
    color: str
    description: str

    def __post_init__(self) -> None:
        object.__setattr__(self, "name", _require(self.name, "label name"))
        color = self.color.strip().lstrip("#")
        if not _HEX_COLOR.match(color):
            raise ValueError(f"label color must be 6 hex digits, got {self.color!r}")
        object.__setattr__(self, "color", color.upper())

    def to_create_payload(self) -> dict[str, Any]:
        return {"name": self.name, "color": self.color, "description": self.description}

    def to_update_payload(self) -> dict[str, Any]:
        return {"new_name": self.name, "color": self.color, "description": self.description}
