"""Reconcile ordered label sets.

Failure policy:
- within a group, labels are applied in order and the first failure aborts the
  rest of that group;
- every group is attempted even when an earlier group failed;
- once all groups ran, any failure is raised as `LabelSyncError` carrying the
  full report;
- `AuthorizationDenied` aborts immediately, since every later call would fail
  the same way.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass, field

from github_repo_scaffold.github.errors import AuthorizationDenied, GitHubApiError
from github_repo_scaffold.github.reconciler import AppliedState, ResourceReconciler
from github_repo_scaffold.github.specs import LabelSpec, RepositoryKey
from github_repo_scaffold.github_labels import LABEL_GROUPS, LabelGroup

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class LabelGroupFailure:
    group: str
    label: str
    error: GitHubApiError


@dataclass(slots=True)
class LabelSyncReport:
    repository: RepositoryKey
    applied: list[AppliedState] = field(default_factory=list)
    failures: list[LabelGroupFailure] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.failures


class LabelSyncError(RuntimeError):
    """Raised after all label groups ran when at least one of them failed."""

    def __init__(self, report: LabelSyncReport) -> None:
        self.report = report
        details = "; ".join(f"{f.group}/{f.label}: {f.error}" for f in report.failures)
        super().__init__(f"Label sync failed for {report.repository}: {details}")


class _LabelFailed(Exception):
    def __init__(self, label: LabelSpec, error: GitHubApiError) -> None:
        super().__init__(str(error))
        self.label = label
        self.error = error


class LabelSetReconciler:
    def __init__(self, reconciler: ResourceReconciler) -> None:
        self._reconciler = reconciler

    def reconcile_label_set(
        self, repo: RepositoryKey, labels: Sequence[LabelSpec]
    ) -> list[AppliedState]:
        """Create or update each label in order; the first failure propagates."""

        return [self._reconciler.ensure_label(repo, spec) for spec in labels]

    def _reconcile_group(
        self, repo: RepositoryKey, group: LabelGroup, applied: list[AppliedState]
    ) -> None:
        for spec in group.labels:
            try:
                applied.append(self._reconciler.ensure_label(repo, spec))
            except AuthorizationDenied:
                raise
            except GitHubApiError as e:
                raise _LabelFailed(spec, e) from e

    def reconcile_label_groups(
        self, repo: RepositoryKey, groups: Sequence[LabelGroup] = LABEL_GROUPS
    ) -> LabelSyncReport:
        report = LabelSyncReport(repository=repo)

        for group in groups:
            try:
                self._reconcile_group(repo, group, report.applied)
            except _LabelFailed as failed:
                logger.error(
                    "Label group failed; continuing with the next group",
                    extra={
                        "repo": repo.full_name,
                        "group": group.name,
                        "label": failed.label.name,
                        "error": str(failed.error),
                    },
                )
                report.failures.append(
                    LabelGroupFailure(group=group.name, label=failed.label.name, error=failed.error)
                )

        logger.info(
            "Label sync finished",
            extra={
                "repo": repo.full_name,
                "applied": len(report.applied),
                "failed_groups": [f.group for f in report.failures],
            },
        )

        if not report.ok:
            raise LabelSyncError(report)
        return report
