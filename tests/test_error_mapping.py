from datetime import datetime, timezone

import pytest

from github_tools_mcp.error_handling import (
    DEFAULT_RATE_LIMIT_WINDOW_SECONDS,
    error_for_graphql,
    error_for_status,
    wrap_unexpected,
)
from github_tools_mcp.exceptions import (
    GitHubAPIError,
    GitHubAuthError,
    GitHubConflictError,
    GitHubNotFoundError,
    GitHubPermissionError,
    GitHubRateLimitError,
    GitHubValidationError,
)
from github_tools_mcp.mcp_server.errors import render_github_error

RESET_EPOCH = 1735689600  # 2025-01-01T00:00:00Z


@pytest.mark.parametrize(
    "status_code, expected_type",
    [
        (401, GitHubAuthError),
        (403, GitHubPermissionError),
        (404, GitHubNotFoundError),
        (409, GitHubConflictError),
        (422, GitHubValidationError),
        (429, GitHubRateLimitError),
        (500, GitHubAPIError),
        (502, GitHubAPIError),
    ],
)
def test_status_codes_map_to_one_variant(status_code, expected_type):
    exc = error_for_status(status_code, {"message": "nope"}, {})

    assert type(exc) is expected_type
    assert exc.status == status_code
    assert exc.response == {"message": "nope"}


def test_not_found_and_conflict_messages_are_prefixed():
    assert error_for_status(404, {"message": "Not Found"}).message == "Resource not found: Not Found"
    assert error_for_status(404, None).message == "Resource not found: Not Found"
    assert error_for_status(409, {"message": "sha mismatch"}).message == "Conflict: sha mismatch"
    assert error_for_status(409, {}).message == "Conflict: Resource conflict"


def test_defaults_when_body_has_no_message():
    assert error_for_status(401, {}).message == "Authentication failed"
    assert error_for_status(403, {}).message == "Insufficient permissions"
    assert error_for_status(422, {}).message == "Validation failed"


def test_403_with_exhausted_quota_is_rate_limit():
    headers = {"X-RateLimit-Remaining": "0", "X-RateLimit-Reset": str(RESET_EPOCH)}

    exc = error_for_status(403, {"message": "API rate limit exceeded for user"}, headers)

    assert isinstance(exc, GitHubRateLimitError)
    assert exc.status == 403
    assert exc.reset_at == datetime(2025, 1, 1, tzinfo=timezone.utc)


@pytest.mark.parametrize(
    "headers, body",
    [
        ({"X-RateLimit-Reset": "1e20"}, {}),
        ({"Retry-After": "inf"}, {}),
        ({"X-RateLimit-Reset": "nan"}, {}),
        ({}, {"message": "slow", "reset_at": 10**20}),
    ],
)
def test_out_of_range_reset_falls_back_to_default_window(headers, body):
    exc = error_for_status(429, body, headers, now=2000.0)

    assert isinstance(exc, GitHubRateLimitError)
    assert exc.reset_at.timestamp() == 2000.0 + DEFAULT_RATE_LIMIT_WINDOW_SECONDS


def test_403_secondary_rate_limit_message_is_rate_limit():
    exc = error_for_status(403, {"message": "You have exceeded a secondary rate limit"}, {}, now=1000.0)

    assert isinstance(exc, GitHubRateLimitError)
    assert exc.reset_at.timestamp() == 1000.0 + DEFAULT_RATE_LIMIT_WINDOW_SECONDS


def test_403_with_remaining_quota_is_permission():
    headers = {"x-ratelimit-remaining": "42"}

    exc = error_for_status(403, {"message": "Resource not accessible by integration"}, headers)

    assert isinstance(exc, GitHubPermissionError)
    assert exc.message == "Resource not accessible by integration"


def test_429_uses_retry_after_header():
    exc = error_for_status(429, {"message": "slow down"}, {"Retry-After": "30"}, now=2000.0)

    assert isinstance(exc, GitHubRateLimitError)
    assert exc.reset_at.timestamp() == 2030.0


def test_rate_limit_reset_falls_back_to_body_reset_at():
    exc = error_for_status(429, {"message": "slow", "reset_at": "2025-01-01T00:00:00Z"}, {})

    assert exc.reset_at == datetime(2025, 1, 1, tzinfo=timezone.utc)


def test_unknown_status_with_text_body():
    exc = error_for_status(503, "upstream unavailable")

    assert isinstance(exc, GitHubAPIError)
    assert "503" in exc.message
    assert "upstream unavailable" in exc.message


@pytest.mark.parametrize(
    "error_type, expected_type, status",
    [
        ("NOT_FOUND", GitHubNotFoundError, 404),
        ("FORBIDDEN", GitHubPermissionError, 403),
        ("UNPROCESSABLE", GitHubValidationError, 422),
        ("SOMETHING_ELSE", GitHubAPIError, 500),
        (None, GitHubAPIError, 500),
    ],
)
def test_graphql_first_error_selects_variant(error_type, expected_type, status):
    errors = [{"type": error_type, "message": "first"}, {"type": "NOT_FOUND", "message": "second"}]

    exc = error_for_graphql(errors)

    assert type(exc) is expected_type
    assert exc.status == status
    assert exc.response == {"errors": errors}


def test_graphql_generic_and_validation_messages_are_prefixed():
    assert error_for_graphql([{"type": "UNPROCESSABLE", "message": "bad"}]).message == "GraphQL Error: bad"
    assert error_for_graphql([{"message": "boom"}]).message == "GraphQL Error: boom"
    assert error_for_graphql([{"type": "NOT_FOUND", "message": "gone"}]).message == "gone"


def test_wrap_unexpected_passes_domain_errors_through():
    original = GitHubNotFoundError("Resource not found: x", 404)

    assert wrap_unexpected(original, "get issue") is original


def test_wrap_unexpected_wraps_other_failures():
    exc = wrap_unexpected(KeyError("sha"), "push files")

    assert isinstance(exc, GitHubAPIError)
    assert exc.status == 500
    assert exc.message.startswith("Failed to push files: ")
    assert exc.response == {"error": "'sha'"}


def test_render_uses_human_labels():
    assert render_github_error(GitHubAuthError("Bad credentials", 401)) == "Authentication Failed: Bad credentials"
    assert render_github_error(GitHubPermissionError("nope", 403)) == "Permission Denied: nope"
    assert render_github_error(GitHubNotFoundError("Resource not found: x", 404)) == "Not Found: Resource not found: x"
    assert render_github_error(GitHubConflictError("Conflict: y", 409)) == "Conflict: Conflict: y"
    assert render_github_error(GitHubAPIError("boom", 500)) == "GitHub API Error: boom"


def test_render_validation_includes_details():
    exc = GitHubValidationError("Validation failed", 422, {"errors": [{"field": "title", "code": "missing"}]})

    rendered = render_github_error(exc)

    assert rendered.splitlines()[0] == "Validation Error: Validation failed"
    assert rendered.splitlines()[1] == 'Details: {"errors": [{"field": "title", "code": "missing"}]}'


def test_render_validation_without_details_is_one_line():
    assert render_github_error(GitHubValidationError("Validation failed", 422)) == "Validation Error: Validation failed"


def test_render_rate_limit_includes_reset_time():
    exc = GitHubRateLimitError("API rate limit exceeded", reset_at=datetime(2025, 1, 1, tzinfo=timezone.utc))

    rendered = render_github_error(exc)

    assert rendered == "Rate Limit Exceeded: API rate limit exceeded\nResets at: 2025-01-01T00:00:00+00:00"
