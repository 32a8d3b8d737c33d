"""Configure the GitHub side of a new repository.

Writing applies, in order:
1. repository metadata and merge settings
2. branch protection on the protected branch, then commit signature protection
3. vulnerability alerts
4. the label taxonomy (priority, issue type, state)

Branch protection requires the Codecov status checks, so this unit composes the
test-coverage unit.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence
from dataclasses import dataclass

from github_repo_scaffold.config import ScaffoldSettings
from github_repo_scaffold.generators.phases import Phase
from github_repo_scaffold.generators.unit import (
    Answers,
    GeneratorUnitRef,
    PhaseBehavior,
    UnitContext,
)
from github_repo_scaffold.generators.units.coverage import TestCoverageUnit
from github_repo_scaffold.generators.units.questions import (
    PACKAGE_DESCRIPTION,
    REPO_NAME,
    REPO_OWNER,
)
from github_repo_scaffold.github.label_sets import LabelSetReconciler
from github_repo_scaffold.github.reconciler import ResourceReconciler
from github_repo_scaffold.github.specs import (
    BranchKey,
    BranchProtectionSpec,
    RepositoryKey,
    RepositorySpec,
)
from github_repo_scaffold.prompting import Question

logger = logging.getLogger(__name__)

QUESTIONS: tuple[Question, ...] = (
    REPO_OWNER,
    REPO_NAME,
    PACKAGE_DESCRIPTION,
    Question(
        key="is_private_repo",
        prompt="Should this repo be private?",
        default=False,
        kind="confirm",
    ),
)


class GitHubNotConfiguredError(RuntimeError):
    pass


@dataclass(frozen=True, slots=True)
class GitHubDesiredState:
    repository: RepositoryKey
    repository_spec: RepositorySpec
    protected_branch: BranchKey
    branch_protection: BranchProtectionSpec


def repository_spec_from_answers(answers: Mapping[str, object]) -> RepositorySpec:
    description = answers.get("package_description")
    return RepositorySpec(
        description=None if description is None else str(description),
        is_private=bool(answers.get("is_private_repo", False)),
        has_issues=True,
        allow_auto_merge=True,
        allow_merge_commit=False,
        allow_rebase_merge=True,
        allow_squash_merge=True,
        allow_update_branch=True,
        delete_branch_on_merge=True,
        use_squash_pr_title_as_default=True,
    )


def branch_protection_spec(settings: ScaffoldSettings) -> BranchProtectionSpec:
    # Solo-maintained projects: pull requests stay mandatory, approvals do not.
    return BranchProtectionSpec(
        required_status_checks=tuple(settings.required_status_checks),
        required_status_checks_strict=True,
        required_approving_review_count=0,
        enforce_admins=False,
        required_linear_history=True,
        allow_force_pushes=False,
        allow_deletions=False,
        required_conversation_resolution=True,
    )


class GitHubUnit:
    identity = "github"
    location = "github"

    def __init__(self, context: UnitContext, *, branch: str | None = None) -> None:
        self._context = context
        self._branch = branch or context.settings.protected_branch
        self.answers = Answers()
        self.desired: GitHubDesiredState | None = None

    def compose_with(self) -> Sequence[GeneratorUnitRef]:
        return (GeneratorUnitRef.of(TestCoverageUnit),)

    def phase_behaviors(self) -> Mapping[Phase, PhaseBehavior]:
        return {
            Phase.PROMPTING: self.prompting,
            Phase.CONFIGURING: self.configuring,
            Phase.WRITING: self.writing,
        }

    def prompting(self) -> None:
        self.answers.update(self._context.ask(QUESTIONS))

    def configuring(self) -> None:
        repo = RepositoryKey(
            owner=str(self.answers["repo_owner"]), name=str(self.answers["repo_name"])
        )
        self.desired = GitHubDesiredState(
            repository=repo,
            repository_spec=repository_spec_from_answers(self.answers),
            protected_branch=BranchKey.of(repo, self._branch),
            branch_protection=branch_protection_spec(self._context.settings),
        )

    def _reconciler(self) -> ResourceReconciler:
        if self._context.reconciler is None:
            raise GitHubNotConfiguredError(
                "GitHub is not configured; set SCAFFOLD_GITHUB_TOKEN or skip the github unit"
            )
        return self._context.reconciler

    def writing(self) -> None:
        if self.desired is None:
            raise RuntimeError("GitHub unit reached writing without being configured")

        reconciler = self._reconciler()
        desired = self.desired

        reconciler.ensure_repository(desired.repository, desired.repository_spec)
        reconciler.ensure_branch_protection(desired.protected_branch, desired.branch_protection)
        reconciler.ensure_commit_signature_protection(desired.protected_branch)
        reconciler.ensure_vulnerability_alerts(desired.repository)
        LabelSetReconciler(reconciler).reconcile_label_groups(desired.repository)

        logger.info("GitHub repository configured", extra={"repo": desired.repository.full_name})
