#!/usr/bin/env python3
"""Programmatic reconciliation example.

This demonstrates using the reconciler directly, without generator units:

* load settings from `.env`
* make sure a repository exists with squash-only merges
* protect its default branch and require signed commits

Running it twice is safe; the second run updates instead of creating.
"""

from __future__ import annotations

import argparse
from typing import Sequence

from github_repo_scaffold.config import ScaffoldSettings
from github_repo_scaffold.github.client import GitHubClient
from github_repo_scaffold.github.reconciler import ResourceReconciler
from github_repo_scaffold.github.specs import (
    BranchKey,
    BranchProtectionSpec,
    RepositoryKey,
    RepositorySpec,
)
from github_repo_scaffold.logging import configure_logging


def _parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Reconcile one repository (programmatic example).")
    parser.add_argument("--repo", required=True, help='Target repository in the form "owner/repo"')
    parser.add_argument("--branch", default=None, help="Branch to protect (default from settings)")
    return parser.parse_args(argv)


def main(argv: Sequence[str] | None = None) -> int:
    args = _parse_args(argv)

    settings = ScaffoldSettings()
    configure_logging(settings.log_level)

    repo = RepositoryKey.parse(args.repo)
    branch = BranchKey.of(repo, args.branch or settings.protected_branch)

    client = GitHubClient(
        token=settings.require_github_token(),
        base_url=settings.github_base_url,
        timeout_seconds=settings.request_timeout_seconds,
    )
    reconciler = ResourceReconciler(client=client)

    try:
        applied = reconciler.ensure_repository(
            repo,
            RepositorySpec(
                allow_squash_merge=True,
                allow_merge_commit=False,
                allow_rebase_merge=False,
                delete_branch_on_merge=True,
            ),
        )
        print(f"{applied.action.value}: {repo}")

        applied = reconciler.ensure_branch_protection(
            branch,
            BranchProtectionSpec(
                required_status_checks=tuple(settings.required_status_checks),
                required_approving_review_count=1,
                required_linear_history=True,
            ),
        )
        print(f"{applied.action.value}: {branch} protection")

        reconciler.ensure_commit_signature_protection(branch)
        print(f"signed commits required on {branch}")
    finally:
        client.close()

    return 0


if __name__ == "__main__":
    raise SystemExit(main())
