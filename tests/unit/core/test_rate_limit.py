"""Unit tests for rate-limit bucketing."""

from starlette.requests import Request

from core.rate_limit import rate_limit_key


def _request(headers: dict[str, str] | None = None) -> Request:
    scope = {
        "type": "http",
        "method": "GET",
        "path": "/",
        "headers": [(k.lower().encode(), v.encode()) for k, v in (headers or {}).items()],
        "client": ("203.0.113.7", 5555),
    }
    return Request(scope)


def test_anonymous_callers_bucket_by_address() -> None:
    assert rate_limit_key(_request()) == "ip:203.0.113.7"


def test_token_callers_bucket_by_token_digest() -> None:
    key = rate_limit_key(_request({"Authorization": "Bearer abc.def.ghi"}))

    assert key.startswith("token:")
    assert "abc.def.ghi" not in key
    assert len(key) == len("token:") + 32


def test_distinct_tokens_get_distinct_buckets() -> None:
    a = rate_limit_key(_request({"Authorization": "Bearer one"}))
    b = rate_limit_key(_request({"Authorization": "Bearer two"}))
    assert a != b
