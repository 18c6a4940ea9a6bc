"""Shared fixtures for the bouquet codec tests."""

import pytest

from bouquet_codec.models import BouquetRecord, CodecConfig, DrawingPath, Point
from bouquet_codec.storage import BouquetStore

from helpers import SPOTIFY_URL


@pytest.fixture
def heart_path():
    """A curved stroke with plenty of near-collinear points."""
    points = [Point(100 + i * 4, 300 + (i % 7) * 0.3) for i in range(50)]
    points += [Point(300 + i * 2, 300 + i * 5) for i in range(1, 40)]
    return DrawingPath(color="#ED4B92", width=6, points=points)


@pytest.fixture
def record(heart_path):
    return BouquetRecord(
        song=SPOTIFY_URL,
        message="Happy Birthday!",
        paths=[
            heart_path,
            DrawingPath(color="#3B82F6", width=3, points=[Point(0, 0), Point(800, 800)]),
        ],
    )


@pytest.fixture
def store(tmp_path):
    return BouquetStore(str(tmp_path / "store.db"))


@pytest.fixture
def config(tmp_path):
    return CodecConfig(storage_path=str(tmp_path / "service.db"))
