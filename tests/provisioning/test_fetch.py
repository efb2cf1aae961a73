"""Unit tests for the artifact content sources."""

import httpx
import pytest

from evdeploy.errors import ArtifactFetchError
from evdeploy.provisioning import (
    DEFAULT_ARTIFACT_BASE_URL,
    HttpContentSource,
    LocalContentSource,
    open_content_source,
)

BASE = "https://example.test/ev-stacks"


def _source(handler):
    client = httpx.Client(transport=httpx.MockTransport(handler), follow_redirects=True)
    return HttpContentSource(BASE, client=client)


# ── HttpContentSource ───────────────────────────────────────────


def test_http_fetch_returns_bytes():
    seen = []

    def handler(request):
        seen.append(str(request.url))
        return httpx.Response(200, content=b"CHAIN_ID=\n")

    source = _source(handler)
    assert source.fetch("stacks/fullnode/.env") == b"CHAIN_ID=\n"
    assert seen == [f"{BASE}/stacks/fullnode/.env"]


def test_http_fetch_follows_redirects():
    def handler(request):
        if request.url.path.endswith("old.sh"):
            return httpx.Response(302, headers={"Location": f"{BASE}/new.sh"})
        return httpx.Response(200, content=b"#!/bin/sh\n")

    assert _source(handler).fetch("old.sh") == b"#!/bin/sh\n"


def test_http_fetch_status_error():
    source = _source(lambda request: httpx.Response(404))
    with pytest.raises(ArtifactFetchError) as exc_info:
        source.fetch("lib/logging.sh")
    assert exc_info.value.path == "lib/logging.sh"
    assert "HTTP 404" in str(exc_info.value)


def test_http_fetch_transport_error():
    def handler(request):
        raise httpx.ConnectError("connection refused", request=request)

    with pytest.raises(ArtifactFetchError, match="connection refused"):
        _source(handler).fetch("lib/logging.sh")


def test_http_source_does_not_close_injected_client():
    client = httpx.Client(transport=httpx.MockTransport(lambda r: httpx.Response(200)))
    with HttpContentSource(BASE, client=client):
        pass
    assert not client.is_closed
    client.close()


def test_http_url_for_strips_trailing_slash():
    source = HttpContentSource(BASE + "/", client=httpx.Client())
    assert source.url_for("lib/logging.sh") == f"{BASE}/lib/logging.sh"
    assert str(source) == BASE


# ── LocalContentSource ──────────────────────────────────────────


def test_local_fetch(tmp_path):
    (tmp_path / "lib").mkdir()
    (tmp_path / "lib" / "logging.sh").write_bytes(b"log() { :; }\n")
    assert LocalContentSource(tmp_path).fetch("lib/logging.sh") == b"log() { :; }\n"


def test_local_fetch_missing(tmp_path):
    with pytest.raises(ArtifactFetchError) as exc_info:
        LocalContentSource(tmp_path).fetch("lib/logging.sh")
    assert exc_info.value.source == str(tmp_path)


# ── open_content_source ─────────────────────────────────────────


def test_open_default_is_https():
    source = open_content_source()
    try:
        assert isinstance(source, HttpContentSource)
        assert source.base_url == DEFAULT_ARTIFACT_BASE_URL
    finally:
        source.close()


def test_open_refuses_plain_http():
    with pytest.raises(ValueError, match="plain HTTP"):
        open_content_source("http://example.test/ev-stacks")


def test_open_local_directory(tmp_path):
    source = open_content_source(str(tmp_path))
    assert isinstance(source, LocalContentSource)
    assert source.root == tmp_path


def test_open_file_url(tmp_path):
    source = open_content_source(f"file://{tmp_path}")
    assert isinstance(source, LocalContentSource)
    assert source.root == tmp_path
