"""
pytest configuration for rangeget tests.

Provides an in-process HTTP server that answers HEAD and ranged GET
requests for a fixed payload, and records every request it sees.
"""

import os
import re

import pytest
import pytest_asyncio
from aiohttp import web
from aiohttp.test_utils import TestServer

RANGE_RE = re.compile(r"bytes=(\d+)-(\d+)")


def make_payload(length: int) -> bytes:
    """Deterministic, non-repeating-looking payload so misordered merges are caught."""
    return bytes((i * 7 + i // 256) % 251 for i in range(length))


def build_app(payload: bytes, *, advertise_length: bool = True, ignore_range: bool = False,
              fail_offsets=(), path: str = "/files/data.bin") -> web.Application:
    app = web.Application()
    app["requests"] = []

    async def handle_head(request):
        app["requests"].append(("HEAD", None))
        if not advertise_length:
            return web.Response(status=200)
        return web.Response(body=payload, content_type="application/octet-stream")

    async def handle_get(request):
        range_header = request.headers.get("Range")
        app["requests"].append(("GET", range_header))
        match = RANGE_RE.fullmatch(range_header or "")
        if ignore_range or not match:
            return web.Response(body=payload, content_type="application/octet-stream")

        start, end = int(match.group(1)), int(match.group(2))
        if start in fail_offsets:
            return web.Response(status=500, text="boom")
        end = min(end, len(payload) - 1)
        return web.Response(
            status=206,
            body=payload[start:end + 1],
            content_type="application/octet-stream",
            headers={"Content-Range": f"bytes {start}-{end}/{len(payload)}"},
        )

    app.router.add_route("HEAD", path, handle_head)
    app.router.add_route("GET", path, handle_get)
    return app


@pytest_asyncio.fixture
async def make_server():
    """Factory fixture: ``server = await make_server(payload, **options)``."""
    servers = []

    async def factory(payload: bytes, **options) -> TestServer:
        server = TestServer(build_app(payload, **options))
        await server.start_server()
        servers.append(server)
        return server

    yield factory

    for server in servers:
        await server.close()


def get_requests(server: TestServer):
    return [entry for entry in server.app["requests"] if entry[0] == "GET"]


@pytest.fixture
def work_dir(tmp_path):
    """Isolated directory for output files and the parts folder."""
    directory = tmp_path / "downloads"
    directory.mkdir()
    return directory


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for key in list(os.environ):
        if key.startswith("RANGEGET_"):
            monkeypatch.delenv(key, raising=False)
