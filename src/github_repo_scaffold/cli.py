"""Console script shim; the CLI lives in `github_repo_scaffold.main`."""

from __future__ import annotations

from github_repo_scaffold.main import main

__all__ = ["main"]


if __name__ == "__main__":
    raise SystemExit(main())
