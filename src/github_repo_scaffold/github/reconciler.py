"""Create-or-update reconciliation of GitHub resources.

For every managed kind the reconciler reads the current state, creates the
resource when GitHub reports it missing, and otherwise overwrites it with the
desired spec. It never diffs fields: an update is issued even when the remote
already matches, which keeps every call idempotent and re-runs safe.

The reconciler does not retry. Transient failures surface as
`TransientProviderError` for the caller to handle.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Protocol

from github_repo_scaffold.github.client import ResourceClient
from github_repo_scaffold.github.errors import ResourceNotFound
from github_repo_scaffold.github.specs import (
    BranchKey,
    BranchProtectionSpec,
    CommitSignatureSpec,
    LabelKey,
    LabelSpec,
    RepositoryKey,
    RepositorySpec,
    VulnerabilityAlertsSpec,
)

logger = logging.getLogger(__name__)


class ResourceKind(str, Enum):
    REPOSITORY = "repository"
    BRANCH_PROTECTION = "branch_protection"
    COMMIT_SIGNATURES = "commit_signatures"
    VULNERABILITY_ALERTS = "vulnerability_alerts"
    LABEL = "label"


class Action(str, Enum):
    CREATED = "created"
    UPDATED = "updated"
    # Kinds without a readable state are applied in one call.
    APPLIED = "applied"


@dataclass(frozen=True, slots=True)
class PlannedRequest:
    method: str
    path: str
    body: dict[str, Any] | None = None


@dataclass(frozen=True, slots=True)
class AppliedState:
    """What a reconciliation did and the state GitHub returned."""

    kind: ResourceKind
    key: object
    action: Action
    state: Any


class ResourceHandler(Protocol):
    """Maps one resource kind onto GitHub REST calls."""

    key_type: type
    spec_type: type

    def read_path(self, key: Any) -> str | None:
        """Path to GET the current state, or None when the kind has no readable state."""
        ...

    def create(self, client: ResourceClient, key: Any, spec: Any) -> PlannedRequest: ...

    def update(self, client: ResourceClient, key: Any, spec: Any) -> PlannedRequest: ...


class RepositoryHandler:
    key_type = RepositoryKey
    spec_type = RepositorySpec

    def read_path(self, key: RepositoryKey) -> str:
        return key.path

    def create(
        self, client: ResourceClient, key: RepositoryKey, spec: RepositorySpec
    ) -> PlannedRequest:
        # Personal repositories are created under /user; anything else is an org.
        if key.owner.lower() == client.authenticated_login.lower():
            path = "user/repos"
        else:
            path = f"orgs/{key.owner}/repos"
        return PlannedRequest("POST", path, {"name": key.name, **spec.to_payload()})

    def update(
        self, client: ResourceClient, key: RepositoryKey, spec: RepositorySpec
    ) -> PlannedRequest:
        return PlannedRequest("PATCH", key.path, spec.to_payload())


class BranchProtectionHandler:
    key_type = BranchKey
    spec_type = BranchProtectionSpec

    def read_path(self, key: BranchKey) -> str:
        return key.protection_path

    def create(
        self, client: ResourceClient, key: BranchKey, spec: BranchProtectionSpec
    ) -> PlannedRequest:
        return PlannedRequest("PUT", key.protection_path, spec.to_payload())

    def update(
        self, client: ResourceClient, key: BranchKey, spec: BranchProtectionSpec
    ) -> PlannedRequest:
        return PlannedRequest("PUT", key.protection_path, spec.to_payload())


class CommitSignatureHandler:
    key_type = BranchKey
    spec_type = CommitSignatureSpec

    def _path(self, key: BranchKey) -> str:
        return f"{key.protection_path}/required_signatures"

    def read_path(self, key: BranchKey) -> str:
        return self._path(key)

    def create(
        self, client: ResourceClient, key: BranchKey, spec: CommitSignatureSpec
    ) -> PlannedRequest:
        return PlannedRequest("POST", self._path(key))

    def update(
        self, client: ResourceClient, key: BranchKey, spec: CommitSignatureSpec
    ) -> PlannedRequest:
        return PlannedRequest("POST", self._path(key))


class VulnerabilityAlertsHandler:
    key_type = RepositoryKey
    spec_type = VulnerabilityAlertsSpec

    def read_path(self, key: RepositoryKey) -> None:
        return None

    def create(
        self, client: ResourceClient, key: RepositoryKey, spec: VulnerabilityAlertsSpec
    ) -> PlannedRequest:
        return self.update(client, key, spec)

    def update(
        self, client: ResourceClient, key: RepositoryKey, spec: VulnerabilityAlertsSpec
    ) -> PlannedRequest:
        method = "PUT" if spec.enabled else "DELETE"
        return PlannedRequest(method, f"{key.path}/vulnerability-alerts")


class LabelHandler:
    key_type = LabelKey
    spec_type = LabelSpec

    def read_path(self, key: LabelKey) -> str:
        return key.path

    def create(self, client: ResourceClient, key: LabelKey, spec: LabelSpec) -> PlannedRequest:
        return PlannedRequest("POST", f"{key.repository.path}/labels", spec.to_create_payload())

    def update(self, client: ResourceClient, key: LabelKey, spec: LabelSpec) -> PlannedRequest:
        return PlannedRequest("PATCH", key.path, spec.to_update_payload())


DEFAULT_HANDLERS: dict[ResourceKind, ResourceHandler] = {
    ResourceKind.REPOSITORY: RepositoryHandler(),
    ResourceKind.BRANCH_PROTECTION: BranchProtectionHandler(),
    ResourceKind.COMMIT_SIGNATURES: CommitSignatureHandler(),
    ResourceKind.VULNERABILITY_ALERTS: VulnerabilityAlertsHandler(),
    ResourceKind.LABEL: LabelHandler(),
}


class ResourceReconciler:
    """Bring GitHub resources into agreement with desired specs."""

    def __init__(
        self,
        *,
        client: ResourceClient,
        handlers: dict[ResourceKind, ResourceHandler] | None = None,
    ) -> None:
        self._client = client
        self._handlers = dict(DEFAULT_HANDLERS if handlers is None else handlers)

    def _handler(self, kind: ResourceKind, key: object, spec: object) -> ResourceHandler:
        try:
            handler = self._handlers[kind]
        except KeyError as e:
            raise ValueError(f"Unsupported resource kind: {kind}") from e
        if not isinstance(key, handler.key_type):
            raise TypeError(f"{kind.value} expects a {handler.key_type.__name__} key")
        if not isinstance(spec, handler.spec_type):
            raise TypeError(f"{kind.value} expects a {handler.spec_type.__name__} spec")
        return handler

    def _exists(self, path: str) -> bool:
        try:
            self._client.request("GET", path)
        except ResourceNotFound:
            return False
        return True

    def reconcile(self, kind: ResourceKind, key: object, spec: object) -> AppliedState:
        """Create the resource if it is missing, otherwise overwrite it with `spec`."""

        handler = self._handler(kind, key, spec)

        read_path = handler.read_path(key)
        if read_path is None:
            action = Action.APPLIED
            planned = handler.update(self._client, key, spec)
        elif self._exists(read_path):
            action = Action.UPDATED
            planned = handler.update(self._client, key, spec)
        else:
            action = Action.CREATED
            planned = handler.create(self._client, key, spec)

        response = self._client.request(planned.method, planned.path, planned.body)
        logger.info(
            "Reconciled GitHub resource",
            extra={"kind": kind.value, "key": str(key), "action": action.value},
        )
        return AppliedState(kind=kind, key=key, action=action, state=response.body)

    def ensure_repository(self, key: RepositoryKey, spec: RepositorySpec) -> AppliedState:
        return self.reconcile(ResourceKind.REPOSITORY, key, spec)

    def ensure_branch_protection(self, key: BranchKey, spec: BranchProtectionSpec) -> AppliedState:
        return self.reconcile(ResourceKind.BRANCH_PROTECTION, key, spec)

    def ensure_commit_signature_protection(
        self, key: BranchKey, spec: CommitSignatureSpec | None = None
    ) -> AppliedState:
        return self.reconcile(ResourceKind.COMMIT_SIGNATURES, key, spec or CommitSignatureSpec())

    def ensure_vulnerability_alerts(
        self, key: RepositoryKey, spec: VulnerabilityAlertsSpec | None = None
    ) -> AppliedState:
        return self.reconcile(
            ResourceKind.VULNERABILITY_ALERTS, key, spec or VulnerabilityAlertsSpec()
        )

    def ensure_label(self, repo: RepositoryKey, spec: LabelSpec) -> AppliedState:
        return self.reconcile(ResourceKind.LABEL, LabelKey.of(repo, spec.name), spec)
