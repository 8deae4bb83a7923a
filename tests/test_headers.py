"""Tests for protoroute.http.headers — case-insensitive header mapping."""

import pytest

from protoroute.http.headers import Headers


class TestHeaders:
    def test_case_insensitive_lookup(self) -> None:
        headers = Headers([("Content-Type", "application/json")])
        assert headers["content-type"] == "application/json"
        assert headers["CONTENT-TYPE"] == "application/json"

    def test_missing_key(self) -> None:
        with pytest.raises(KeyError):
            Headers()["host"]
        assert Headers().get("host") is None

    def test_from_mapping(self) -> None:
        headers = Headers({"Authorization": "Bearer x"})
        assert headers.get("authorization") == "Bearer x"

    def test_from_raw(self) -> None:
        headers = Headers.from_raw([(b"Host", b"records"), (b"Accept", b"*/*")])
        assert headers["host"] == "records"
        assert list(headers) == ["host", "accept"]

    def test_repeated_header(self) -> None:
        headers = Headers([("X-Tag", "a"), ("x-tag", "b")])
        assert headers["x-tag"] == "a"
        assert headers.get_list("X-Tag") == ["a", "b"]
        assert len(headers) == 1

    def test_contains(self) -> None:
        headers = Headers([("Host", "records")])
        assert "HOST" in headers
        assert "accept" not in headers

    def test_to_raw(self) -> None:
        assert Headers([("Host", "records")]).to_raw() == [(b"host", b"records")]
