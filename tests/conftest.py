"""Shared pytest fixtures for the headshot app tests."""

from __future__ import annotations

import struct
import sys
import zlib
from pathlib import Path
from types import SimpleNamespace

import pytest

# Make the repository root importable in test runner environments.
_repo_root = Path(__file__).resolve().parents[1]
if str(_repo_root) not in sys.path:
    sys.path.insert(0, str(_repo_root))


def make_png(width: int = 10, height: int = 10) -> bytes:
    """Build a small solid-colour RGB PNG."""

    def chunk(tag: bytes, payload: bytes) -> bytes:
        body = tag + payload
        return struct.pack(">I", len(payload)) + body + struct.pack(">I", zlib.crc32(body) & 0xFFFFFFFF)

    header = struct.pack(">IIBBBBB", width, height, 8, 2, 0, 0, 0)
    rows = b"".join(b"\x00" + b"\xff\x80\x00" * width for _ in range(height))
    return (
        b"\x89PNG\r\n\x1a\n"
        + chunk(b"IHDR", header)
        + chunk(b"IDAT", zlib.compress(rows))
        + chunk(b"IEND", b"")
    )


class DummyUpload:
    """Stands in for a Streamlit UploadedFile."""

    def __init__(self, data: bytes = b"", type: str = "image/png", name: str = "photo.png", error: Exception | None = None):
        self._data = data
        self.type = type
        self.name = name
        self._error = error

    def getvalue(self):
        if self._error is not None:
            raise self._error
        return self._data


def inline_part(data: bytes, mime_type: str = "image/png"):
    return SimpleNamespace(text=None, inline_data=SimpleNamespace(data=data, mime_type=mime_type))


def text_part(text: str):
    return SimpleNamespace(text=text, inline_data=None)


def response_with_parts(parts):
    return SimpleNamespace(candidates=[SimpleNamespace(content=SimpleNamespace(parts=parts))])


class DummyModels:
    def __init__(self, response=None, error: Exception | None = None):
        self.response = response
        self.error = error
        self.calls = []

    async def generate_content(self, **kwargs):
        self.calls.append(kwargs)
        if self.error is not None:
            raise self.error
        return self.response


class DummyGenaiClient:
    def __init__(self, response=None, error: Exception | None = None):
        self.models = DummyModels(response=response, error=error)
        self.aio = SimpleNamespace(models=self.models)


@pytest.fixture
def png_bytes() -> bytes:
    return make_png(10, 10)


@pytest.fixture
def api_key(monkeypatch):
    monkeypatch.setenv("GEMINI_API_KEY", "unit-test-key")
    monkeypatch.delenv("GEMINI_IMAGE_MODEL", raising=False)
    return "unit-test-key"


@pytest.fixture
def fake_client(monkeypatch):
    """Install a dummy Gemini client; call the fixture with response/error."""
    import gemini_service

    def _install(response=None, error: Exception | None = None) -> DummyGenaiClient:
        client = DummyGenaiClient(response=response, error=error)
        monkeypatch.setattr(gemini_service, "_create_client", lambda api_key: client)
        return client

    return _install
