"""Async GitHub REST/GraphQL client with structured errors and request logging."""

from __future__ import annotations

import logging
import os
import time
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Optional
from urllib.parse import urlencode

import httpx

from .config import (
    DETAILED_LEVEL,
    GITHUB_ACCEPT,
    GITHUB_API_BASE,
    GITHUB_API_VERSION,
    GITHUB_GRAPHQL_URL,
    GITHUB_LOGGER,
    GITHUB_TOKEN_ENV_VARS,
    HTTPX_TIMEOUT,
    USER_AGENT,
)
from .error_handling import error_for_graphql, error_for_status
from .exceptions import GitHubAPIError, GitHubAuthError
from .http_utils import extract_response_json, parse_response_body

TokenProvider = Callable[[], str]


# ---------------------------------------------------------------------------
# Token helpers
# ---------------------------------------------------------------------------


def get_github_token() -> str:
    """Return a trimmed GitHub token or raise when missing/empty.

    The helper reads from the current environment each time it is invoked
    instead of relying on module-level constants, so a rotated token is
    picked up without a restart.
    """

    token = None
    token_source = None
    for env_var in GITHUB_TOKEN_ENV_VARS:
        candidate = os.environ.get(env_var)
        if candidate is not None:
            token = candidate
            token_source = env_var
            break

    if token is None:
        raise GitHubAuthError(
            "Missing GitHub personal access token. "
            f"Set the {GITHUB_TOKEN_ENV_VARS[0]} environment variable."
        )

    token = token.strip()
    if not token:
        raise GitHubAuthError(f"GitHub personal access token is empty ({token_source}).")

    return token


# ---------------------------------------------------------------------------
# Request / response shapes
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class RestRequest:
    method: str
    url: str
    params: Dict[str, Any] = field(default_factory=dict)
    headers: Dict[str, str] = field(default_factory=dict)
    body: Any = None


@dataclass(frozen=True)
class GraphQLRequest:
    query: str
    variables: Dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class GitHubResponse:
    status_code: int
    headers: Dict[str, str]
    json: Any = None


def _clean_params(params: Optional[Mapping[str, Any]]) -> Dict[str, Any]:
    cleaned: Dict[str, Any] = {}
    for key, value in (params or {}).items():
        if value is None:
            continue
        if isinstance(value, bool):
            value = "true" if value else "false"
        cleaned[key] = value
    return cleaned


def _absolute_url(path: str) -> str:
    if path.startswith("http://") or path.startswith("https://"):
        return path
    normalized = path if path.startswith("/") else f"/{path}"
    return f"{GITHUB_API_BASE}{normalized}"


def build_rest_request(
    path: str,
    *,
    method: str = "GET",
    params: Optional[Mapping[str, Any]] = None,
    body: Any = None,
    headers: Optional[Mapping[str, str]] = None,
) -> RestRequest:
    """Build a REST request description; auth headers are added at send time."""

    return RestRequest(
        method=method.upper(),
        url=_absolute_url(path),
        params=_clean_params(params),
        headers=dict(headers or {}),
        body=body,
    )


def build_graphql_request(
    query: str, variables: Optional[Mapping[str, Any]] = None
) -> GraphQLRequest:
    if not isinstance(query, str) or not query.strip():
        raise ValueError("GraphQL query is missing")
    return GraphQLRequest(query=query, variables=dict(variables or {}))


def _url_for_logs(url: str, params: Optional[Mapping[str, Any]] = None) -> str:
    if params:
        qs = urlencode(params, doseq=True)
        if qs:
            return f"{url}?{qs}"
    return url


def _record_github_request(
    *,
    method: str,
    url: str,
    status_code: Optional[int],
    duration_ms: int,
    error: bool,
    exc: Optional[BaseException] = None,
) -> None:
    level = logging.WARNING if error else DETAILED_LEVEL
    GITHUB_LOGGER.log(
        level,
        "[github] %s %s -> %s %dms%s",
        method,
        url,
        status_code if status_code is not None else "n/a",
        duration_ms,
        f" ({exc.__class__.__name__}: {exc})" if exc is not None else "",
        extra={
            "event": "github_request",
            "method": method,
            "url": url,
            "status": status_code,
            "duration_ms": duration_ms,
            "error": bool(error),
        },
    )


# ---------------------------------------------------------------------------
# Client
# ---------------------------------------------------------------------------


class GitHubClient:
    """Stateless GitHub API client.

    The credential is resolved through ``token_provider`` on every call and a
    fresh ``httpx.AsyncClient`` is opened per request, so concurrent tool calls
    share nothing mutable. ``transport`` lets tests plug in
    ``httpx.MockTransport``.
    """

    def __init__(
        self,
        *,
        token_provider: Optional[TokenProvider] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        graphql_url: Optional[str] = None,
    ) -> None:
        self._token_provider = token_provider or get_github_token
        self._transport = transport
        self._graphql_url = graphql_url or GITHUB_GRAPHQL_URL

    def _default_headers(self) -> Dict[str, str]:
        token = self._token_provider()
        return {
            "Authorization": f"Bearer {token}",
            "Accept": GITHUB_ACCEPT,
            "X-GitHub-Api-Version": GITHUB_API_VERSION,
            "User-Agent": USER_AGENT,
        }

    def _http_client(self) -> httpx.AsyncClient:
        kwargs: Dict[str, Any] = {"transport": self._transport, "follow_redirects": True}
        if HTTPX_TIMEOUT is not None:
            kwargs["timeout"] = HTTPX_TIMEOUT
        return httpx.AsyncClient(**kwargs)

    async def send(self, request: RestRequest) -> GitHubResponse:
        """Send a REST request; non-2xx responses raise a classified error."""

        headers = self._default_headers()
        headers.update(request.headers)
        kwargs: Dict[str, Any] = {"params": request.params or None, "headers": headers}
        if request.body is not None:
            kwargs["json"] = request.body

        log_url = _url_for_logs(request.url, request.params)
        start = time.time()
        try:
            async with self._http_client() as client:
                resp = await client.request(request.method, request.url, **kwargs)
        except httpx.HTTPError as exc:
            _record_github_request(
                method=request.method,
                url=log_url,
                status_code=None,
                duration_ms=int((time.time() - start) * 1000),
                error=True,
                exc=exc,
            )
            raise GitHubAPIError(f"GitHub request failed: {exc}", 500, {"error": str(exc)}) from exc

        _record_github_request(
            method=request.method,
            url=log_url,
            status_code=resp.status_code,
            duration_ms=int((time.time() - start) * 1000),
            error=not resp.is_success,
        )

        if not resp.is_success:
            body = extract_response_json(resp)
            if body is None:
                body = resp.text
            raise error_for_status(resp.status_code, body, resp.headers)

        try:
            parsed = parse_response_body(resp)
        except ValueError as exc:
            raise GitHubAPIError(
                f"GitHub returned malformed JSON: {exc}", resp.status_code, resp.text
            ) from exc

        return GitHubResponse(
            status_code=resp.status_code,
            headers=dict(resp.headers),
            json=parsed,
        )

    async def rest(
        self,
        path: str,
        *,
        method: str = "GET",
        params: Optional[Mapping[str, Any]] = None,
        body: Any = None,
        headers: Optional[Mapping[str, str]] = None,
    ) -> Any:
        """Issue a REST call and return the parsed body."""

        request = build_rest_request(
            path, method=method, params=params, body=body, headers=headers
        )
        response = await self.send(request)
        return response.json

    async def graphql(
        self, query: str, variables: Optional[Mapping[str, Any]] = None
    ) -> Dict[str, Any]:
        """Run a query or mutation and return its ``data`` mapping.

        A 2xx response is not enough: a non-empty top-level ``errors`` array is
        classified by its first entry.
        """

        request = build_graphql_request(query, variables)
        response = await self.send(
            RestRequest(
                method="POST",
                url=self._graphql_url,
                body={"query": request.query, "variables": request.variables},
            )
        )

        payload = response.json
        if not isinstance(payload, Mapping):
            raise GitHubAPIError(
                "GraphQL response was not a JSON object", response.status_code, payload
            )

        errors = payload.get("errors")
        if errors:
            raise error_for_graphql(errors)

        return payload.get("data")


__all__ = [
    "GitHubClient",
    "GitHubResponse",
    "GraphQLRequest",
    "RestRequest",
    "TokenProvider",
    "build_graphql_request",
    "build_rest_request",
    "get_github_token",
]
