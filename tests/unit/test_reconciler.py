"""Unit tests for create-or-update reconciliation against an in-memory GitHub."""

from __future__ import annotations

import pytest

from github_repo_scaffold.github.errors import ResourceConflict, TransientProviderError
from github_repo_scaffold.github.reconciler import Action, ResourceKind, ResourceReconciler
from github_repo_scaffold.github.specs import (
    BranchKey,
    BranchProtectionSpec,
    LabelKey,
    LabelSpec,
    RepositoryKey,
    RepositorySpec,
    VulnerabilityAlertsSpec,
)
from tests.fakes import FakeGitHub

WIDGET = RepositoryKey(owner="acme", name="widget")


def test_missing_repository_is_created_once_without_updates(
    fake_github: FakeGitHub, reconciler: ResourceReconciler
) -> None:
    spec = RepositorySpec(is_private=False, has_issues=True)

    applied = reconciler.ensure_repository(WIDGET, spec)

    assert applied.action == Action.CREATED
    assert fake_github.calls_with("POST") == [
        ("POST", "user/repos", {"name": "widget", "private": False, "has_issues": True})
    ]
    assert fake_github.calls_with("PATCH") == []


def test_existing_private_repository_is_updated_to_public(
    fake_github: FakeGitHub, reconciler: ResourceReconciler
) -> None:
    fake_github.resources["repos/acme/widget"] = {"name": "widget", "private": True}

    applied = reconciler.ensure_repository(
        WIDGET, RepositorySpec(is_private=False, has_issues=True)
    )

    assert applied.action == Action.UPDATED
    assert fake_github.calls_with("POST") == []
    assert fake_github.calls_with("PATCH") == [
        ("PATCH", "repos/acme/widget", {"private": False, "has_issues": True})
    ]
    assert fake_github.resources["repos/acme/widget"]["private"] is False


def test_repository_for_other_owner_is_created_in_the_organization() -> None:
    fake = FakeGitHub(login="someone")
    ResourceReconciler(client=fake).ensure_repository(WIDGET, RepositorySpec(description="W"))

    assert fake.calls_with("POST") == [
        ("POST", "orgs/acme/repos", {"name": "widget", "description": "W"})
    ]


def test_reconciling_twice_converges_and_second_call_updates(
    fake_github: FakeGitHub, reconciler: ResourceReconciler
) -> None:
    spec = RepositorySpec(description="Widgets", is_private=False, has_issues=True)

    first = reconciler.ensure_repository(WIDGET, spec)
    state_after_first = dict(fake_github.resources["repos/acme/widget"])
    second = reconciler.ensure_repository(WIDGET, spec)

    assert first.action == Action.CREATED
    assert second.action == Action.UPDATED
    assert fake_github.resources["repos/acme/widget"] == state_after_first


def test_unmanaged_fields_are_left_out_of_payloads(
    fake_github: FakeGitHub, reconciler: ResourceReconciler
) -> None:
    fake_github.resources["repos/acme/widget"] = {"name": "widget", "has_wiki": True}

    reconciler.ensure_repository(WIDGET, RepositorySpec(allow_merge_commit=False))

    assert fake_github.calls[-1] == ("PATCH", "repos/acme/widget", {"allow_merge_commit": False})
    assert fake_github.resources["repos/acme/widget"]["has_wiki"] is True


def test_branch_protection_sends_zero_reviews_and_unenforced_admins(
    fake_github: FakeGitHub, reconciler: ResourceReconciler
) -> None:
    key = BranchKey.of(WIDGET, "master")
    spec = BranchProtectionSpec(
        required_status_checks=("codecov/patch", "lint-build-test-publish"),
        required_approving_review_count=0,
        enforce_admins=False,
        required_linear_history=True,
        required_conversation_resolution=True,
    )

    applied = reconciler.ensure_branch_protection(key, spec)

    assert applied.action == Action.CREATED
    method, path, body = fake_github.calls[-1]
    assert (method, path) == ("PUT", "repos/acme/widget/branches/master/protection")
    assert body == {
        "required_status_checks": {
            "strict": True,
            "contexts": ["codecov/patch", "lint-build-test-publish"],
        },
        "enforce_admins": False,
        "required_pull_request_reviews": {"required_approving_review_count": 0},
        "restrictions": None,
        "required_linear_history": True,
        "allow_force_pushes": False,
        "allow_deletions": False,
        "required_conversation_resolution": True,
    }


def test_existing_branch_protection_is_replaced_with_put(
    fake_github: FakeGitHub, reconciler: ResourceReconciler
) -> None:
    key = BranchKey.of(WIDGET, "master")
    fake_github.resources[key.protection_path] = {"enforce_admins": True}

    applied = reconciler.ensure_branch_protection(key, BranchProtectionSpec())

    assert applied.action == Action.UPDATED
    assert [call[0] for call in fake_github.calls] == ["GET", "PUT"]


def test_review_count_outside_github_range_is_rejected() -> None:
    with pytest.raises(ValueError):
        BranchProtectionSpec(required_approving_review_count=7)


def test_commit_signature_protection_uses_its_own_endpoint(
    fake_github: FakeGitHub, reconciler: ResourceReconciler
) -> None:
    key = BranchKey.of(WIDGET, "master")

    reconciler.ensure_commit_signature_protection(key)

    assert fake_github.calls == [
        ("GET", "repos/acme/widget/branches/master/protection/required_signatures", None),
        ("POST", "repos/acme/widget/branches/master/protection/required_signatures", None),
    ]


def test_vulnerability_alerts_are_enabled_in_a_single_call(
    fake_github: FakeGitHub, reconciler: ResourceReconciler
) -> None:
    applied = reconciler.ensure_vulnerability_alerts(WIDGET)

    assert applied.action == Action.APPLIED
    assert fake_github.calls == [("PUT", "repos/acme/widget/vulnerability-alerts", None)]


def test_vulnerability_alerts_can_be_disabled(
    fake_github: FakeGitHub, reconciler: ResourceReconciler
) -> None:
    reconciler.ensure_vulnerability_alerts(WIDGET, VulnerabilityAlertsSpec(enabled=False))

    assert fake_github.calls == [("DELETE", "repos/acme/widget/vulnerability-alerts", None)]


def test_label_paths_are_quoted_and_updates_keep_the_name(
    fake_github: FakeGitHub, reconciler: ResourceReconciler
) -> None:
    spec = LabelSpec(name=":fire: P0", color="#d93f0b", description="Fire.")
    path = "repos/acme/widget/labels/%3Afire%3A%20P0"

    created = reconciler.ensure_label(WIDGET, spec)
    updated = reconciler.ensure_label(WIDGET, spec)

    assert created.action == Action.CREATED
    assert updated.action == Action.UPDATED
    assert fake_github.calls[1] == (
        "POST",
        "repos/acme/widget/labels",
        {"name": ":fire: P0", "color": "D93F0B", "description": "Fire."},
    )
    assert fake_github.calls[3] == (
        "PATCH",
        path,
        {"new_name": ":fire: P0", "color": "D93F0B", "description": "Fire."},
    )
    assert fake_github.resources[path]["name"] == ":fire: P0"


def test_generic_reconcile_rejects_mismatched_key_or_spec(reconciler: ResourceReconciler) -> None:
    with pytest.raises(TypeError):
        reconciler.reconcile(ResourceKind.REPOSITORY, LabelKey.of(WIDGET, "x"), RepositorySpec())
    with pytest.raises(TypeError):
        reconciler.reconcile(ResourceKind.REPOSITORY, WIDGET, BranchProtectionSpec())


def test_conflicts_are_surfaced_without_retry(
    fake_github: FakeGitHub, reconciler: ResourceReconciler
) -> None:
    key = BranchKey.of(WIDGET, "master")
    fake_github.failures[("PUT", key.protection_path)] = ResourceConflict(
        "Required status check does not exist", status=422, method="PUT", path=key.protection_path
    )

    with pytest.raises(ResourceConflict):
        reconciler.ensure_branch_protection(key, BranchProtectionSpec())

    assert [call[0] for call in fake_github.calls] == ["GET", "PUT"]


def test_transient_failures_are_not_retried(
    fake_github: FakeGitHub, reconciler: ResourceReconciler
) -> None:
    fake_github.failures[("GET", "repos/acme/widget")] = TransientProviderError(
        "Server Error", status=502, method="GET", path="repos/acme/widget"
    )

    with pytest.raises(TransientProviderError):
        reconciler.ensure_repository(WIDGET, RepositorySpec())

    assert len(fake_github.calls) == 1


def test_repository_key_parse() -> None:
    assert RepositoryKey.parse("acme/widget/") == WIDGET
    with pytest.raises(ValueError):
        RepositoryKey.parse("acme")
    with pytest.raises(ValueError):
        RepositoryKey.parse("acme/widget/extra")


@pytest.mark.parametrize(
    ("owner", "name"),
    [("", "widget"), ("acme", "  ")],
)
def test_branch_and_label_keys_require_owner_and_name(owner: str, name: str) -> None:
    with pytest.raises(ValueError):
        BranchKey(owner=owner, name=name, branch="master")
    with pytest.raises(ValueError):
        LabelKey(owner=owner, name=name, label=":bug: bug")
