"""Tests for stitch.http.response — immutable responses and header ops."""

import dataclasses

import pytest

from stitch.http.response import Redirect, Response, StreamingResponse


class TestResponse:
    def test_defaults(self) -> None:
        r = Response()
        assert r.body == ""
        assert r.status == 200
        assert r.content_type == "text/html; charset=utf-8"
        assert r.headers == ()

    def test_with_status(self) -> None:
        assert Response("x").with_status(404).status == 404

    def test_with_header(self) -> None:
        r = Response("x").with_header("X-A", "1")
        assert r.headers == (("X-A", "1"),)

    def test_with_headers_dict(self) -> None:
        r = Response("x").with_headers({"X-A": "1", "X-B": "2"})
        assert r.headers == (("X-A", "1"), ("X-B", "2"))

    def test_without_header_is_case_insensitive(self) -> None:
        r = Response("x", headers=(("ETag", "a"), ("etag", "b"), ("X-Keep", "1")))
        assert r.without_header("ETAG").headers == (("X-Keep", "1"),)

    def test_with_replaced_header_leaves_exactly_one(self) -> None:
        r = Response("x", headers=(("Cache-Control", "a"), ("cache-control", "b")))
        replaced = r.with_replaced_header("Cache-Control", "c")
        assert replaced.headers == (("Cache-Control", "c"),)

    def test_get_header(self) -> None:
        r = Response("x", headers=(("Last-Modified", "then"),))
        assert r.get_header("last-modified") == "then"
        assert r.get_header("missing") is None
        assert r.get_header("missing", "dflt") == "dflt"
        assert r.has_header("LAST-MODIFIED")

    def test_with_content_type(self) -> None:
        assert Response("x").with_content_type(None).content_type is None

    def test_chaining_returns_new_objects(self) -> None:
        r1 = Response("x")
        r2 = r1.with_status(201)
        r3 = r2.with_header("X-A", "1")
        assert r1.status == 200
        assert r2.headers == ()
        assert r3 is not r2

    def test_body_bytes(self) -> None:
        assert Response("héllo").body_bytes == "héllo".encode()
        assert Response(b"raw").body_bytes == b"raw"
        assert Response(None).body_bytes == b""

    def test_text(self) -> None:
        assert Response(b"abc").text == "abc"
        assert Response(None).text == ""

    def test_frozen(self) -> None:
        with pytest.raises(dataclasses.FrozenInstanceError):
            Response("x").status = 500  # type: ignore[misc]


class TestStreamingResponse:
    def test_header_ops(self) -> None:
        r = StreamingResponse(chunks=iter(["a"])).with_header("X-A", "1").with_status(404)
        assert r.status == 404
        assert r.get_header("x-a") == "1"

    def test_chunks_preserved(self) -> None:
        chunks = iter(["a"])
        assert StreamingResponse(chunks=chunks).with_status(201).chunks is chunks


class TestRedirect:
    def test_defaults(self) -> None:
        r = Redirect("/login")
        assert r.status == 302
        assert r.headers == ()
