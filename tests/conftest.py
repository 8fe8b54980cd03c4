"""
Pytest configuration and fixtures for httpresp tests.
"""

from __future__ import annotations

from pathlib import Path
from typing import AsyncGenerator, Generator

import pytest
import pytest_asyncio
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient
from starlette.datastructures import MutableHeaders
from starlette.requests import Request

pytest_plugins = ("pytest_asyncio",)

PNG_SIGNATURE = b"\x89PNG\r\n\x1a\n"


class RecordingSink:
    """In-memory ResponseSink that records what a writer sends."""

    def __init__(self) -> None:
        self.headers = MutableHeaders()
        self.status_code: int | None = None
        self.header_writes = 0
        self.sent_headers: dict[str, str] | None = None
        self.body = bytearray()

    async def write_header(self, status_code: int) -> None:
        self.header_writes += 1
        if self.status_code is None:
            self.status_code = status_code
            self.sent_headers = dict(self.headers)

    async def write(self, data: bytes) -> None:
        if self.status_code is None:
            await self.write_header(200)
        self.body += data


@pytest.fixture(autouse=True)
def reset_global_state() -> Generator[None, None, None]:
    """Restore the default error policy and settings cache around each test."""
    from httpresp.core.config import get_settings
    from httpresp.core.errors import set_default_error_handler

    get_settings.cache_clear()
    yield
    set_default_error_handler(None)
    get_settings.cache_clear()


@pytest.fixture
def sink() -> RecordingSink:
    """Fresh recording sink."""
    return RecordingSink()


@pytest.fixture
def png_bytes() -> bytes:
    """PNG signature and IHDR chunk followed by more data than the sniff window."""
    ihdr = (
        b"\x00\x00\x00\rIHDR"
        b"\x00\x00\x00\x01\x00\x00\x00\x01\x08\x06\x00\x00\x00"
        b"\x1f\x15\xc4\x89"
    )
    return PNG_SIGNATURE + ihdr + bytes(range(256)) * 4


@pytest.fixture
def sample_file(tmp_path: Path) -> Path:
    """Plain-text file on disk."""
    path = tmp_path / "sample.txt"
    path.write_bytes(b"file contents for testing\n")
    return path


def create_app(files_dir: Path) -> FastAPI:
    """FastAPI app mixing writer endpoints and regular routes."""
    from httpresp.api import WriterEndpoint, register_exception_handlers, writer_endpoint
    from httpresp.core.writer import ResponseWriter
    from httpresp.models.errors import invalid_error, not_exist_error

    app = FastAPI()
    register_exception_handlers(app)

    async def hello(request: Request, resp: ResponseWriter) -> None:
        await resp.write_text(201, "hello")

    async def item(request: Request, resp: ResponseWriter) -> None:
        await resp.write_json(200, {"id": request.path_params["item_id"], "tags": ["a", "b"]})

    async def download(request: Request, resp: ResponseWriter) -> None:
        await resp.write_file(200, files_dir / request.path_params["name"])

    async def secret(request: Request, resp: ResponseWriter) -> None:
        await resp.write_unauthorized("restricted")

    async def explode(request: Request, resp: ResponseWriter) -> None:
        raise invalid_error("bad query")

    @writer_endpoint(cors=True)
    async def cors_text(request: Request, resp: ResponseWriter) -> None:
        await resp.write_text(200, "shared")

    app.add_route("/hello", WriterEndpoint(hello))
    app.add_route("/items/{item_id}", WriterEndpoint(item))
    app.add_route("/files/{name}", WriterEndpoint(download))
    app.add_route("/secret", WriterEndpoint(secret))
    app.add_route("/explode", WriterEndpoint(explode))
    app.add_route("/cors", cors_text)

    @app.get("/plain/{name}")
    async def plain(name: str) -> dict[str, str]:
        if name == "missing":
            raise not_exist_error(f"{name} does not exist")
        if name == "disk":
            raise FileNotFoundError("no such file: disk")
        return {"name": name}

    return app


@pytest_asyncio.fixture
async def async_client(tmp_path: Path) -> AsyncGenerator[AsyncClient, None]:
    """Async HTTP client against a FastAPI app wired with writer endpoints."""
    files_dir = tmp_path / "files"
    files_dir.mkdir()
    (files_dir / "notes.txt").write_text("served from disk", encoding="utf-8")

    transport = ASGITransport(app=create_app(files_dir))
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client
