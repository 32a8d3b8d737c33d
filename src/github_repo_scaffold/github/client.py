"""GitHub REST client used by the reconciler.

REST calls go through a `requests.Session` so that every status code can be
mapped onto the error taxonomy in `github.errors`. PyGithub is only used to
resolve the login behind the token, which decides whether repositories are
created under `/user` or under `/orgs/{owner}`.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Protocol

import requests
from github import Auth, BadCredentialsException, Github, GithubException

from github_repo_scaffold.github.errors import (
    AuthorizationDenied,
    GitHubApiError,
    ResourceConflict,
    ResourceNotFound,
    TransientProviderError,
)

logger = logging.getLogger(__name__)

_CONFLICT_STATUSES = frozenset({409, 422})
_AUTH_STATUSES = frozenset({401, 403})


@dataclass(frozen=True, slots=True)
class ApiResponse:
    """Decoded REST response.

    `body` is the parsed JSON payload, or None for empty responses (204).
    """

    status: int
    body: Any


class ResourceClient(Protocol):
    """The capability the reconciler needs from a GitHub client."""

    @property
    def authenticated_login(self) -> str: ...

    def request(
        self, method: str, path: str, body: dict[str, Any] | None = None
    ) -> ApiResponse: ...


def _error_message(resp: requests.Response) -> str:
    try:
        payload = resp.json()
    except ValueError:
        text = resp.text.strip()
        return text or (resp.reason or "Unknown error")

    if not isinstance(payload, dict):
        return resp.reason or "Unknown error"

    message = payload.get("message")
    parts = [message] if isinstance(message, str) and message.strip() else []

    errors = payload.get("errors")
    if isinstance(errors, list):
        for item in errors:
            if isinstance(item, dict):
                detail = item.get("message") or item.get("code")
                if isinstance(detail, str) and detail.strip():
                    parts.append(detail)
            elif isinstance(item, str) and item.strip():
                parts.append(item)

    return "; ".join(parts) if parts else (resp.reason or "Unknown error")


def _is_rate_limited(resp: requests.Response, message: str) -> bool:
    if resp.headers.get("X-RateLimit-Remaining") == "0":
        return True
    if "retry-after" in {key.lower() for key in resp.headers}:
        return True
    return "rate limit" in message.lower()


def raise_for_status(resp: requests.Response, *, method: str, path: str) -> None:
    """Raise the taxonomy error matching a failed response."""

    status = resp.status_code
    if status < 400:
        return

    message = _error_message(resp)
    kwargs = {"status": status, "method": method, "path": path}

    if status == 404:
        raise ResourceNotFound(message, **kwargs)
    if status in _CONFLICT_STATUSES:
        raise ResourceConflict(message, **kwargs)
    if status == 429 or status >= 500:
        raise TransientProviderError(message, **kwargs)
    if status in _AUTH_STATUSES:
        if status == 403 and _is_rate_limited(resp, message):
            raise TransientProviderError(message, **kwargs)
        raise AuthorizationDenied(message, **kwargs)
    raise GitHubApiError(message, **kwargs)


class GitHubClient:
    """Small authenticated wrapper around the GitHub REST API."""

    def __init__(
        self,
        *,
        token: str,
        base_url: str = "https://api.github.com",
        timeout_seconds: float = 30.0,
        session: requests.Session | None = None,
        github_api: Github | None = None,
    ) -> None:
        if not token:
            raise ValueError("GitHub token is required")

        self._token = token
        self._base_url = base_url.rstrip("/")
        self._timeout_seconds = timeout_seconds
        self._session = session or requests.Session()
        self._session.headers.update(
            {
                "Authorization": f"Bearer {token}",
                "Accept": "application/vnd.github+json",
                "X-GitHub-Api-Version": "2022-11-28",
                "User-Agent": "github-repo-scaffold",
            }
        )
        self._github = github_api
        self._login: str | None = None

    @property
    def base_url(self) -> str:
        return self._base_url

    def _url(self, path: str) -> str:
        path = path.strip().lstrip("/").rstrip("/")
        return f"{self._base_url}/{path}"

    @property
    def authenticated_login(self) -> str:
        """Return the login of the user that owns the token.

        The login is resolved once per client; it identifies the caller and is not
        part of any reconciled resource.
        """

        if self._login is not None:
            return self._login

        if self._github is None:
            self._github = Github(auth=Auth.Token(self._token), base_url=self._base_url)

        try:
            login = self._github.get_user().login
        except BadCredentialsException as e:
            raise AuthorizationDenied(
                "GitHub rejected the token", status=e.status, method="GET", path="user"
            ) from e
        except GithubException as e:
            raise GitHubApiError(
                "Failed to resolve the authenticated user",
                status=e.status,
                method="GET",
                path="user",
            ) from e

        self._login = login
        logger.info("Authenticated with GitHub", extra={"login": login})
        return login

    def request(self, method: str, path: str, body: dict[str, Any] | None = None) -> ApiResponse:
        """Issue one REST call and decode the response.

        Raises:
            ResourceNotFound, ResourceConflict, AuthorizationDenied,
            TransientProviderError, or GitHubApiError for other failures.
        """

        method = method.upper()
        url = self._url(path)
        logger.debug("GitHub request", extra={"method": method, "path": path})

        try:
            resp = self._session.request(method, url, json=body, timeout=self._timeout_seconds)
        except requests.RequestException as e:
            raise TransientProviderError(str(e), method=method, path=path) from e

        raise_for_status(resp, method=method, path=path)

        if resp.status_code == 204 or not resp.content:
            return ApiResponse(status=resp.status_code, body=None)

        try:
            payload = resp.json()
        except ValueError:
            payload = resp.text
        return ApiResponse(status=resp.status_code, body=payload)

    def close(self) -> None:
        """Release the HTTP session and the PyGithub connection, if one was opened."""

        self._session.close()
        if self._github is not None:
            self._github.close()
