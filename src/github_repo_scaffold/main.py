"""CLI entrypoint for the scaffolder."""

from __future__ import annotations

import argparse
import logging
import sys
from collections.abc import Sequence
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from github_repo_scaffold import __version__
from github_repo_scaffold.config import MissingGitHubTokenError, ScaffoldSettings
from github_repo_scaffold.generators import GeneratorUnitRef, UnitContext, compose, run
from github_repo_scaffold.generators.units import UNITS, GitHubUnit, RepositoryUnit
from github_repo_scaffold.github.client import GitHubClient
from github_repo_scaffold.github.errors import (
    AuthorizationDenied,
    ResourceConflict,
    TransientProviderError,
)
from github_repo_scaffold.github.label_sets import (
    LabelSetReconciler,
    LabelSyncError,
    LabelSyncReport,
)
from github_repo_scaffold.github.reconciler import AppliedState, ResourceReconciler
from github_repo_scaffold.github.specs import LabelSpec, RepositoryKey
from github_repo_scaffold.github_labels import label_spec_by_name
from github_repo_scaffold.logging import configure_logging
from github_repo_scaffold.prompting import PresetPrompter, Prompter, RichPrompter
from github_repo_scaffold.rendering import JinjaTemplateRenderer

logger = logging.getLogger(__name__)

EXIT_CONFIG_ERROR = 2
EXIT_AUTHORIZATION_DENIED = 3
EXIT_CONFLICT = 4
EXIT_TRANSIENT = 5


def _add_unit_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--unit",
        choices=sorted(UNITS),
        default=RepositoryUnit.identity,
        help="Root generator unit to run (default: repository)",
    )
    parser.add_argument(
        "--skip-github",
        action="store_true",
        help="Do not configure GitHub (only meaningful for the repository unit)",
    )
    parser.add_argument("--destination", type=Path, default=Path("."), help="Output directory")
    parser.add_argument("--owner", default=None, help="Repository owner (user or organization)")
    parser.add_argument("--name", default=None, help="Repository name")
    parser.add_argument("--description", default=None, help="Package description")
    parser.add_argument(
        "--private",
        action=argparse.BooleanOptionalAction,
        default=None,
        help="Create the repository as private (--no-private for public)",
    )
    parser.add_argument(
        "--yes",
        "-y",
        action="store_true",
        help="Do not prompt; use flags and question defaults",
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="scaffold",
        description="Scaffold a repository and reconcile its GitHub configuration",
    )
    parser.add_argument(
        "--version", action="version", version=f"github-repo-scaffold {__version__}"
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    generate = subparsers.add_parser("generate", help="Run the generator units")
    _add_unit_arguments(generate)

    plan = subparsers.add_parser("plan", help="Print the flattened generator plan without running")
    _add_unit_arguments(plan)

    sync_labels = subparsers.add_parser(
        "sync-labels", help="Create or update the standard label taxonomy on a repository"
    )
    sync_labels.add_argument(
        "--repo",
        "--repository",
        dest="repository",
        required=True,
        help="Target repository in the form 'owner/repo'",
    )
    sync_labels.add_argument(
        "--label",
        dest="labels",
        action="append",
        metavar="NAME",
        help="Only sync this standard label (repeatable), e.g. ':bug: bug'",
    )

    return parser


def _preset_options(args: argparse.Namespace) -> dict[str, Any]:
    candidates = {
        "repo_owner": args.owner,
        "repo_name": args.name,
        "package_description": args.description,
        "is_private_repo": args.private,
    }
    return {key: value for key, value in candidates.items() if value is not None}


def _root_ref(args: argparse.Namespace) -> GeneratorUnitRef:
    unit_type = UNITS[args.unit]
    if unit_type is RepositoryUnit:
        return GeneratorUnitRef.of(RepositoryUnit, include_github=not args.skip_github)
    return GeneratorUnitRef.of(unit_type)


def _build_client(settings: ScaffoldSettings) -> GitHubClient:
    return GitHubClient(
        token=settings.require_github_token(),
        base_url=settings.github_base_url,
        timeout_seconds=settings.request_timeout_seconds,
    )


def _generate(args: argparse.Namespace, settings: ScaffoldSettings, *, dry_run: bool) -> int:
    options = _preset_options(args)
    prompter: Prompter = PresetPrompter(options) if args.yes else RichPrompter()

    client = _build_client(settings) if settings.has_github_token else None
    try:
        context = UnitContext(
            destination=args.destination.resolve(),
            renderer=JinjaTemplateRenderer(),
            prompter=prompter,
            settings=settings,
            reconciler=None if client is None else ResourceReconciler(client=client),
            options=options,
        )
        plan = compose([_root_ref(args)], context)

        if dry_run:
            for planned in plan:
                print(f"{planned.identity}\t{planned.ref.location}")
            return 0

        if GitHubUnit.identity in plan.identities and context.reconciler is None:
            raise MissingGitHubTokenError(
                "SCAFFOLD_GITHUB_TOKEN is required to configure GitHub (or pass --skip-github)"
            )

        report = run(plan)
        print(f"Ran {len(report.executed)} phase behaviours across {len(plan)} units")
        return 0
    finally:
        if client is not None:
            client.close()


def _print_applied(applied: Sequence[AppliedState]) -> None:
    for state in applied:
        print(f"{state.action.value}\t{state.key}")


def _label_sync_exit_code(report: LabelSyncReport) -> int:
    errors = [failure.error for failure in report.failures]
    if any(isinstance(error, ResourceConflict) for error in errors):
        return EXIT_CONFLICT
    if errors and all(isinstance(error, TransientProviderError) for error in errors):
        return EXIT_TRANSIENT
    return 1


def _sync_labels(args: argparse.Namespace, settings: ScaffoldSettings) -> int:
    repo = RepositoryKey.parse(args.repository)

    selected: list[LabelSpec] = []
    for name in args.labels or ():
        spec = label_spec_by_name(name)
        if spec is None:
            print(f"Unknown label: {name!r} (not one of the standard labels)", file=sys.stderr)
            return EXIT_CONFIG_ERROR
        selected.append(spec)

    client = _build_client(settings)
    try:
        labels = LabelSetReconciler(ResourceReconciler(client=client))
        if selected:
            applied = labels.reconcile_label_set(repo, selected)
        else:
            applied = labels.reconcile_label_groups(repo).applied
    finally:
        client.close()

    _print_applied(applied)
    return 0


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        settings = ScaffoldSettings()
    except ValidationError as e:
        # Logging isn't configured yet; keep it simple and actionable.
        print("Configuration error (check your .env):", file=sys.stderr)
        print(e, file=sys.stderr)
        return EXIT_CONFIG_ERROR

    configure_logging(settings.log_level, settings.log_format)

    try:
        if args.command == "generate":
            return _generate(args, settings, dry_run=False)

        if args.command == "plan":
            return _generate(args, settings, dry_run=True)

        if args.command == "sync-labels":
            return _sync_labels(args, settings)

        logger.error("Unknown command", extra={"command": args.command})
        return EXIT_CONFIG_ERROR

    except MissingGitHubTokenError as e:
        print(str(e), file=sys.stderr)
        return EXIT_CONFIG_ERROR

    except AuthorizationDenied as e:
        logger.error(str(e), extra={"status": e.status, "path": e.path})
        print(str(e), file=sys.stderr)
        return EXIT_AUTHORIZATION_DENIED

    except ResourceConflict as e:
        logger.error(str(e), extra={"status": e.status, "path": e.path})
        print(str(e), file=sys.stderr)
        return EXIT_CONFLICT

    except TransientProviderError as e:
        logger.warning(str(e), extra={"status": e.status, "path": e.path})
        print(f"{e} (temporary GitHub failure; re-run to converge)", file=sys.stderr)
        return EXIT_TRANSIENT

    except LabelSyncError as e:
        _print_applied(e.report.applied)
        logger.error(
            str(e), extra={"failed_groups": [f.group for f in e.report.failures]}
        )
        code = _label_sync_exit_code(e.report)
        if code == EXIT_TRANSIENT:
            print(f"{e} (temporary GitHub failure; re-run to converge)", file=sys.stderr)
        else:
            print(str(e), file=sys.stderr)
        return code

    except Exception as e:
        logger.exception("Command failed")
        print(str(e), file=sys.stderr)
        return 1


if __name__ == "__main__":
    raise SystemExit(main())
