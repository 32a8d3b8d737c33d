"""Errors raised when talking to the GitHub REST API.

Status codes are mapped onto a small taxonomy so that callers can decide what
to do without inspecting raw responses:

- `ResourceNotFound`: 404. The reconciler turns this into a create.
- `ResourceConflict`: 409/422. The desired state cannot be applied given the
  current remote state (for example a required status check that GitHub does
  not know about yet). Not retried.
- `AuthorizationDenied`: 401/403. Fatal; the token lacks a scope or access.
- `TransientProviderError`: 429, 5xx, or a 403 caused by an exhausted rate
  limit. Callers may retry with backoff; nothing in this package retries.
"""

from __future__ import annotations


class GitHubApiError(RuntimeError):
    """Base class for GitHub API failures."""

    def __init__(
        self,
        message: str,
        *,
        status: int | None = None,
        method: str = "",
        path: str = "",
    ) -> None:
        super().__init__(message)
        self.message = message
        self.status = status
        self.method = method
        self.path = path

    def __str__(self) -> str:
        if self.status is None:
            return self.message
        return f"{self.method} {self.path} failed with {self.status}: {self.message}"


class ResourceNotFound(GitHubApiError):
    pass


class ResourceConflict(GitHubApiError):
    pass


class AuthorizationDenied(GitHubApiError):
    def __str__(self) -> str:
        return (
            f"{super().__str__()} "
            "(check that SCAFFOLD_GITHUB_TOKEN is valid and has the 'repo' and "
            "'admin:org' scopes for the target owner)"
        )


class TransientProviderError(GitHubApiError):
    pass
