"""Tests for stitch.server.sender response emission rules."""

from stitch.http.response import Response, StreamingResponse
from stitch.server.sender import send_response, send_streaming_response


def _collector() -> tuple[list[dict], object]:
    messages: list[dict] = []

    async def send(message: dict) -> None:
        messages.append(message)

    return messages, send


class TestSendResponse:
    async def test_200_preserves_body(self) -> None:
        messages, send = _collector()
        await send_response(Response("ok"), send)
        headers = dict(messages[0]["headers"])
        assert headers[b"content-length"] == b"2"
        assert headers[b"content-type"] == b"text/html; charset=utf-8"
        assert messages[1]["body"] == b"ok"

    async def test_304_drops_body_and_sets_zero_content_length(self) -> None:
        messages, send = _collector()
        await send_response(Response("unexpected-body").with_status(304), send)
        assert dict(messages[0]["headers"])[b"content-length"] == b"0"
        assert messages[1]["body"] == b""

    async def test_none_body_sends_no_content_length(self) -> None:
        messages, send = _collector()
        await send_response(Response(None), send)
        assert b"content-length" not in dict(messages[0]["headers"])
        assert messages[1]["body"] == b""

    async def test_no_content_type_header_when_undeclared(self) -> None:
        messages, send = _collector()
        await send_response(Response(b"x", content_type=None), send)
        assert b"content-type" not in dict(messages[0]["headers"])

    async def test_stale_length_and_type_headers_dropped(self) -> None:
        messages, send = _collector()
        response = Response(
            "four",
            headers=(("Content-Length", "999"), ("Content-Type", "text/plain"), ("X-A", "1")),
        )
        await send_response(response, send)
        headers = messages[0]["headers"]
        assert (b"content-length", b"4") in headers
        assert (b"content-length", b"999") not in headers
        assert [v for k, v in headers if k == b"content-type"] == [b"text/html; charset=utf-8"]
        assert (b"x-a", b"1") in headers


class TestSendStreamingResponse:
    async def test_chunks_sent_in_order(self) -> None:
        messages, send = _collector()
        await send_streaming_response(StreamingResponse(chunks=iter(["a", "", b"b"])), send)
        assert (b"transfer-encoding", b"chunked") in messages[0]["headers"]
        bodies = [m["body"] for m in messages[1:]]
        assert bodies == [b"a", b"b", b""]
        assert messages[-1]["more_body"] is False

    async def test_async_chunks(self) -> None:
        async def chunks():
            yield "x"
            yield "y"

        messages, send = _collector()
        await send_streaming_response(StreamingResponse(chunks=chunks()), send)
        assert b"".join(m["body"] for m in messages[1:]) == b"xy"

    async def test_mid_stream_error_closes_stream(self, caplog) -> None:
        async def chunks():
            yield "partial"
            raise RuntimeError("origin went away")

        messages, send = _collector()
        await send_streaming_response(StreamingResponse(chunks=chunks()), send)
        assert messages[-1] == {"type": "http.response.body", "body": b"", "more_body": False}
        assert "error while streaming" in caplog.text
