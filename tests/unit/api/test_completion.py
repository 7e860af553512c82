"""Unit tests for the completion-aware file server."""

import asyncio
import os

import httpx
import pytest

from swupd_server.api.completion import CompletionFileServer

IMAGE_BYTES = b"0123456789"

# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


@pytest.fixture
def served_root(tmp_path):
    """Served directory with an image, an empty file and a bare directory."""
    root = tmp_path / "www"
    (root / "images" / "r1").mkdir(parents=True)
    (root / "images" / "r1" / "a.img").write_bytes(IMAGE_BYTES)
    (root / "update" / "r1" / "42").mkdir(parents=True)
    (root / "update" / "r1" / "42" / "empty.pack").write_bytes(b"")
    (tmp_path / "secret.txt").write_bytes(b"top secret")
    return root


@pytest.fixture
def server(served_root):
    return CompletionFileServer(served_root)


@pytest.fixture
def client(server):
    transport = httpx.ASGITransport(app=server)
    return httpx.AsyncClient(transport=transport, base_url="http://testserver")


def _scope(path: str, *, method: str = "GET", range_header: str | None = None) -> dict:
    headers = [(b"host", b"testserver")]
    if range_header is not None:
        headers.append((b"range", range_header.encode()))
    return {
        "type": "http",
        "asgi": {"version": "3.0"},
        "http_version": "1.1",
        "method": method,
        "scheme": "http",
        "path": path,
        "raw_path": path.encode(),
        "root_path": "",
        "query_string": b"",
        "headers": headers,
        "client": ("127.0.0.1", 50000),
        "server": ("testserver", 80),
    }


async def _call(app, scope: dict) -> list[dict]:
    sent: list[dict] = []
    request_sent = False

    async def receive():
        nonlocal request_sent
        if not request_sent:
            request_sent = True
            return {"type": "http.request", "body": b"", "more_body": False}
        await asyncio.Event().wait()

    async def send(message):
        sent.append(message)

    await app(scope, receive, send)
    return sent


def _status(messages: list[dict]) -> int:
    return next(m["status"] for m in messages if m["type"] == "http.response.start")


def _body(messages: list[dict]) -> bytes:
    return b"".join(m.get("body", b"") for m in messages if m["type"] == "http.response.body")


# ---------------------------------------------------------------------------
# Completion probe
# ---------------------------------------------------------------------------


class TestCompletionProbe:
    @pytest.mark.asyncio
    async def test_probe_at_file_size_returns_empty_ok(self, client):
        async with client:
            resp = await client.get(
                "/images/r1/a.img", headers={"Range": f"bytes={len(IMAGE_BYTES)}-"}
            )

        assert resp.status_code == 200
        assert resp.content == b""
        assert resp.headers["content-length"] == "0"
        assert "content-range" not in resp.headers

    @pytest.mark.asyncio
    async def test_probe_on_empty_file(self, client):
        async with client:
            resp = await client.get("/update/r1/42/empty.pack", headers={"Range": "bytes=0-"})

        assert resp.status_code == 200
        assert resp.content == b""

    @pytest.mark.asyncio
    async def test_probe_ignores_method(self, client):
        async with client:
            resp = await client.head("/images/r1/a.img", headers={"Range": "bytes=10-"})

        assert resp.status_code == 200

    @pytest.mark.asyncio
    async def test_probe_does_not_reach_static_files(self, server, monkeypatch):
        called = False

        async def fallback(scope, receive, send):
            nonlocal called
            called = True

        monkeypatch.setattr(server, "fallback", fallback)
        messages = await _call(server, _scope("/images/r1/a.img", range_header="bytes=10-"))

        assert _status(messages) == 200
        assert _body(messages) == b""
        assert called is False


# ---------------------------------------------------------------------------
# Fall-through to StaticFiles
# ---------------------------------------------------------------------------


class TestFallThrough:
    @pytest.mark.asyncio
    async def test_no_range_serves_full_body(self, client):
        async with client:
            resp = await client.get("/images/r1/a.img")

        assert resp.status_code == 200
        assert resp.content == IMAGE_BYTES

    @pytest.mark.asyncio
    async def test_other_range_is_served_partially(self, client):
        async with client:
            resp = await client.get("/images/r1/a.img", headers={"Range": "bytes=4-"})

        assert resp.status_code == 206
        assert resp.content == IMAGE_BYTES[4:]

    @pytest.mark.asyncio
    @pytest.mark.parametrize("range_header", ["bytes=11-", "bytes=10-10", "bytes= 10-"])
    async def test_near_miss_probe_is_not_intercepted(self, client, range_header):
        async with client:
            resp = await client.get("/images/r1/a.img", headers={"Range": range_header})

        assert resp.status_code != 200

    @pytest.mark.asyncio
    @pytest.mark.parametrize("range_header", [None, "bytes=0-", "bytes=10-"])
    async def test_missing_file_is_not_found(self, client, range_header):
        headers = {"Range": range_header} if range_header else {}
        async with client:
            resp = await client.get("/images/r1/missing.img", headers=headers)

        assert resp.status_code == 404

    @pytest.mark.asyncio
    async def test_directory_is_never_a_probe_target(self, client, served_root):
        size = os.stat(served_root / "images" / "r1").st_size
        async with client:
            resp = await client.get("/images/r1", headers={"Range": f"bytes={size}-"})

        assert resp.status_code == 404

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "path",
        ["/images/r1/a\x00b", "/images/r1/" + "x" * 300],
        ids=["embedded-nul", "name-too-long"],
    )
    async def test_unresolvable_path_falls_through(self, server, monkeypatch, path):
        real_fallback = server.fallback
        called = False

        async def fallback(scope, receive, send):
            nonlocal called
            called = True
            await real_fallback(scope, receive, send)

        monkeypatch.setattr(server, "fallback", fallback)
        messages = await _call(server, _scope(path, range_header="bytes=0-"))

        assert called is True
        assert _status(messages) == 404

    @pytest.mark.asyncio
    @pytest.mark.skipif(
        not hasattr(os, "geteuid") or os.geteuid() == 0,
        reason="root ignores directory permissions",
    )
    async def test_unreadable_directory_falls_through(self, server, served_root):
        locked = served_root / "images" / "r1"
        locked.chmod(0)
        try:
            messages = await _call(
                server, _scope("/images/r1/a.img", range_header=f"bytes={len(IMAGE_BYTES)}-")
            )
        finally:
            locked.chmod(0o755)

        assert _status(messages) == 401

    @pytest.mark.asyncio
    async def test_non_get_methods_are_rejected_by_static_files(self, client):
        async with client:
            resp = await client.post("/images/r1/a.img")

        assert resp.status_code == 405


# ---------------------------------------------------------------------------
# Path normalization
# ---------------------------------------------------------------------------


class TestPathNormalization:
    @pytest.mark.asyncio
    async def test_relative_path_is_rooted_and_rewritten(self, server):
        scope = _scope("images/r1/a.img", range_header="bytes=10-")
        messages = await _call(server, scope)

        assert scope["path"] == "/images/r1/a.img"
        assert _status(messages) == 200
        assert _body(messages) == b""

    @pytest.mark.asyncio
    async def test_dot_segments_are_collapsed_before_serving(self, server):
        scope = _scope("/images/./x/../r1//a.img")
        messages = await _call(server, scope)

        assert scope["path"] == "/images/r1/a.img"
        assert _status(messages) == 200
        assert _body(messages) == IMAGE_BYTES

    @pytest.mark.asyncio
    async def test_cannot_probe_outside_root(self, server):
        scope = _scope("/../secret.txt", range_header="bytes=10-")
        messages = await _call(server, scope)

        assert scope["path"] == "/secret.txt"
        assert _status(messages) == 404
