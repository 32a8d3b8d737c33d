"""GitHub resource client and reconciliation."""

from github_repo_scaffold.github.client import ApiResponse, GitHubClient, ResourceClient
from github_repo_scaffold.github.errors import (
    AuthorizationDenied,
    GitHubApiError,
    ResourceConflict,
    ResourceNotFound,
    TransientProviderError,
)
from github_repo_scaffold.github.reconciler import (
    Action,
    AppliedState,
    ResourceKind,
    ResourceReconciler,
)

__all__ = [
    "Action",
    "ApiResponse",
    "AppliedState",
    "AuthorizationDenied",
    "GitHubApiError",
    "GitHubClient",
    "ResourceClient",
    "ResourceConflict",
    "ResourceKind",
    "ResourceNotFound",
    "ResourceReconciler",
    "TransientProviderError",
]
