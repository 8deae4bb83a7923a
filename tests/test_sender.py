"""Tests for protoroute.server.sender response emission rules."""

import pytest

from protoroute.http.response import Response
from protoroute.server.sender import send_response

pytestmark = pytest.mark.anyio


async def _send_all(response: Response) -> list[dict]:
    messages: list[dict] = []

    async def send(message: dict) -> None:
        messages.append(message)

    await send_response(response, send)
    return messages


class TestSendResponse:
    async def test_200_preserves_body(self) -> None:
        messages = await _send_all(Response("ok"))

        assert messages[0]["type"] == "http.response.start"
        assert messages[0]["status"] == 200
        headers = dict(messages[0]["headers"])
        assert headers[b"content-length"] == b"2"
        assert headers[b"content-type"] == b"text/plain; charset=utf-8"
        assert messages[1] == {"type": "http.response.body", "body": b"ok"}

    @pytest.mark.parametrize("status", [101, 204, 304])
    async def test_no_body_statuses(self, status: int) -> None:
        messages = await _send_all(Response("unexpected-body").with_status(status))

        headers = dict(messages[0]["headers"])
        assert headers[b"content-length"] == b"0"
        assert messages[1]["body"] == b""

    async def test_header_names_lowercased(self) -> None:
        messages = await _send_all(Response("ok").with_header("X-Record", "42"))
        assert (b"x-record", b"42") in messages[0]["headers"]

    async def test_head_keeps_length_drops_body(self) -> None:
        messages: list[dict] = []

        async def send(message: dict) -> None:
            messages.append(message)

        await send_response(Response("hello"), send, head=True)

        headers = dict(messages[0]["headers"])
        assert headers[b"content-length"] == b"5"
        assert messages[1] == {"type": "http.response.body", "body": b""}
