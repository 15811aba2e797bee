import httpx

from github_tools_mcp.http_utils import (
    extract_response_json,
    parse_rate_limit_reset_epoch,
    parse_response_body,
    rate_limit_exhausted,
)


def _response(status_code: int, **kwargs) -> httpx.Response:
    return httpx.Response(
        status_code=status_code,
        request=httpx.Request("GET", "https://api.github.com/user"),
        **kwargs,
    )


def test_parse_response_body_json():
    assert parse_response_body(_response(200, json={"login": "octocat"})) == {"login": "octocat"}


def test_parse_response_body_text():
    assert parse_response_body(_response(200, text="plain")) == "plain"


def test_parse_response_body_empty():
    assert parse_response_body(_response(204)) is None


def test_extract_response_json_ignores_non_json():
    assert extract_response_json(_response(500, text="<html>oops</html>")) is None
    assert extract_response_json(_response(422, json={"message": "bad"})) == {"message": "bad"}


def test_reset_epoch_prefers_ratelimit_reset_header():
    headers = {"X-RateLimit-Reset": "1700000000", "Retry-After": "10"}

    assert parse_rate_limit_reset_epoch(headers, now=0.0) == 1700000000.0


def test_reset_epoch_from_retry_after_seconds():
    assert parse_rate_limit_reset_epoch({"retry-after": "15"}, now=100.0) == 115.0


def test_reset_epoch_from_retry_after_http_date():
    epoch = parse_rate_limit_reset_epoch({"Retry-After": "Wed, 01 Jan 2025 00:00:00 GMT"}, now=0.0)

    assert epoch == 1735689600.0


def test_reset_epoch_absent():
    assert parse_rate_limit_reset_epoch({}, now=0.0) is None
    assert parse_rate_limit_reset_epoch({"Retry-After": "soon"}, now=0.0) is None


def test_rate_limit_exhausted_is_case_insensitive():
    assert rate_limit_exhausted({"x-ratelimit-remaining": "0"})
    assert not rate_limit_exhausted({"X-RateLimit-Remaining": "12"})
    assert not rate_limit_exhausted({})
