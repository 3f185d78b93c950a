"""Shared test fixtures.

  repo          fresh in-memory ContentRepository per test.
  media_store   in-memory MediaStore whose URLs point at the TestClient host.
  sql_engine    temp-file SQLite engine with the schema created.
  client        FastAPI TestClient with repo + media_store injected.
  make_image    factory for encoded test images (Pillow, in memory).
"""
from io import BytesIO

import pytest
from PIL import Image

from cmsdash.imaging.types import DecodedSurface, SourceFile
from cmsdash.infra.media_store import InMemoryMediaStore
from cmsdash.infra.repository import InMemoryContentRepository


@pytest.fixture
def repo():
    return InMemoryContentRepository()


@pytest.fixture
def media_store():
    return InMemoryMediaStore(public_url="http://testserver/media")


@pytest.fixture
def sql_engine(tmp_path):
    """Isolated temp-file SQLite DB (a file, so WAL pragmas apply)."""
    from cmsdash.infra.db.engine import init_schema, make_engine

    engine = make_engine(f"sqlite:///{tmp_path / 'test_cms.db'}")
    init_schema(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def client(repo, media_store):
    """FastAPI TestClient backed by the in-memory repository and media store."""
    from fastapi.testclient import TestClient
    from cmsdash.api.app import create_app
    from cmsdash.api.deps import get_media_store, get_repository

    app = create_app()
    app.dependency_overrides[get_repository] = lambda: repo
    app.dependency_overrides[get_media_store] = lambda: media_store
    with TestClient(app) as c:
        yield c


def encode_image(img: Image.Image, fmt: str = "PNG", **save_kwargs) -> bytes:
    out = BytesIO()
    img.save(out, format=fmt, **save_kwargs)
    return out.getvalue()


@pytest.fixture
def make_image():
    """make_image(width, height, fmt="PNG", mode="RGB", color=...) -> bytes"""

    def _make(width, height, fmt="PNG", mode="RGB", color=(200, 30, 30), noise=False):
        if noise:
            img = Image.effect_noise((width, height), 80).convert(mode)
        else:
            img = Image.new(mode, (width, height), color)
        return encode_image(img, fmt)

    return _make


@pytest.fixture
def png_source(make_image):
    return SourceFile(data=make_image(200, 200), mime_type="image/png", filename="badge.png")


class SpyDecoder:
    """DecodeStrategy stand-in that records calls and hands back a fixed-size surface."""

    name = "spy"

    def __init__(self, width=4000, height=3000):
        self.width = width
        self.height = height
        self.calls = 0

    def decode(self, data):
        self.calls += 1
        img = Image.new("RGB", (8, 6))
        return DecodedSurface(image=img, width=self.width, height=self.height, decoder=self.name)


class SizedEncoder:
    """Encoder stand-in whose output size is a function of (width, quality)."""

    def __init__(self, size_for):
        self.size_for = size_for
        self.calls = []

    def encode(self, surface, width, height, output_type, quality):
        self.calls.append((width, height, quality))
        return b"\x00" * self.size_for(width, quality)


@pytest.fixture
def spy_decoder():
    return SpyDecoder()


@pytest.fixture
def sized_encoder():
    return SizedEncoder
