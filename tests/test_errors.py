"""Tests for stitch.errors and the server's error mapping."""

import logging

import pytest

from stitch.errors import (
    AssetUnavailable,
    ConfigurationError,
    HTTPError,
    MethodNotAllowed,
    NotFound,
    StitchError,
)
from stitch.http.request import Request
from stitch.server.errors import handle_http_error, handle_internal_error


def _request() -> Request:
    async def receive() -> dict:
        return {"type": "http.request", "body": b"", "more_body": False}

    return Request.from_asgi({"type": "http", "method": "GET", "path": "/x"}, receive)


class TestHierarchy:
    @pytest.mark.parametrize(
        "cls", [ConfigurationError, AssetUnavailable, HTTPError, NotFound, MethodNotAllowed]
    )
    def test_all_are_stitch_errors(self, cls: type) -> None:
        assert issubclass(cls, StitchError)


class TestErrorValues:
    def test_http_error_str(self) -> None:
        assert str(HTTPError(status=418, detail="teapot")) == "418: teapot"
        assert str(HTTPError(status=500)) == "500"

    def test_not_found(self) -> None:
        exc = NotFound()
        assert exc.status == 404
        assert exc.detail == "Not Found"

    def test_method_not_allowed_allow_header(self) -> None:
        exc = MethodNotAllowed(frozenset({"POST", "GET"}))
        assert exc.status == 405
        assert exc.headers == (("Allow", "GET, POST"),)
        assert "GET, POST" in exc.detail

    def test_asset_unavailable(self) -> None:
        exc = AssetUnavailable("/partials/header.html", "HTTP 503")
        assert exc.path == "/partials/header.html"
        assert exc.reason == "HTTP 503"
        assert str(exc) == "/partials/header.html: HTTP 503"
        assert str(AssetUnavailable("/x")) == "/x"


class TestHandleHttpError:
    def test_plain_text_with_headers(self) -> None:
        response = handle_http_error(MethodNotAllowed(frozenset({"GET"})), _request(), debug=False)
        assert response.status == 405
        assert response.content_type == "text/plain; charset=utf-8"
        assert response.get_header("Allow") == "GET"

    def test_debug_prefixes_status(self) -> None:
        response = handle_http_error(NotFound("gone"), _request(), debug=True)
        assert response.text == "404: gone"

    def test_empty_detail(self) -> None:
        response = handle_http_error(HTTPError(status=503), _request(), debug=False)
        assert response.text == "Error 503"


class TestHandleInternalError:
    def test_hides_detail(self, caplog) -> None:
        with caplog.at_level(logging.ERROR, logger="stitch.server"):
            response = handle_internal_error(ValueError("secret"), _request(), debug=False)
        assert response.status == 500
        assert "secret" not in response.text
        assert "500 GET /x" in caplog.text

    def test_debug_shows_detail(self) -> None:
        response = handle_internal_error(ValueError("oops"), _request(), debug=True)
        assert response.text == "Internal Server Error: ValueError: oops"
