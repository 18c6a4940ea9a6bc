#!/usr/bin/env python3
"""End-to-end sharing tests: encode/decode boundary, config and storage."""

import logging
import re
import sqlite3

import pytest

from bouquet_codec import (
    BouquetRecord,
    CodecConfig,
    DrawingPath,
    Point,
    SharingService,
    decode_bouquet,
    encode_bouquet,
)
from bouquet_codec.envelope import to_text
from bouquet_codec.geometry import QUANT_ERROR_BOUND
from bouquet_codec.palette import PALETTE

from helpers import SPOTIFY_URL, YOUTUBE_URL, legacy_text_link


URL_SAFE = re.compile(r"^[A-Za-z0-9_-]+$")


# =============================================================================
# Scenarios
# =============================================================================

def test_text_only_bouquet():
    encoded = encode_bouquet(BouquetRecord(song=SPOTIFY_URL, message="Happy Birthday!"))
    assert encoded
    assert URL_SAFE.match(encoded)

    decoded = decode_bouquet(encoded)
    assert decoded.song == "https://open.spotify.com/track/abc123"
    assert decoded.message == "Happy Birthday!"
    assert decoded.paths == []
    assert decoded.image is None


def test_diagonal_stroke():
    path = DrawingPath(color=PALETTE[4], width=5, points=[Point(0, 0), Point(800, 800)])
    decoded = decode_bouquet(encode_bouquet(BouquetRecord(song=SPOTIFY_URL, message="", paths=[path])))

    result = decoded.paths[0]
    assert result.color == PALETTE[4]
    assert result.width == 5
    assert len(result.points) == 2
    assert result.points[0].x == pytest.approx(0)
    assert result.points[0].y == pytest.approx(0)
    assert result.points[1].x == pytest.approx(800)
    assert result.points[1].y == pytest.approx(800)


def test_single_point_path_is_dropped():
    line = DrawingPath(color=PALETTE[2], width=2, points=[Point(10, 20), Point(300, 400)])
    dot = DrawingPath(color=PALETTE[1], width=8, points=[Point(50, 50)])
    without_dot = encode_bouquet(BouquetRecord(song=SPOTIFY_URL, message="m", paths=[line]))
    with_dot = encode_bouquet(BouquetRecord(song=SPOTIFY_URL, message="m", paths=[dot, line]))
    assert with_dot == without_dot
    assert len(decode_bouquet(with_dot).paths) == 1


def test_legacy_plain_text_link():
    decoded = decode_bouquet(legacy_text_link({"s": YOUTUBE_URL, "m": "From way back"}))
    assert decoded.song == YOUTUBE_URL
    assert decoded.message == "From way back"
    assert decoded.paths == []
    assert decoded.image is None


# =============================================================================
# Round trip
# =============================================================================

def test_round_trip(record):
    decoded = decode_bouquet(encode_bouquet(record))
    assert decoded.song == record.song
    assert decoded.message == record.message
    assert [p.color for p in decoded.paths] == [p.color for p in record.paths]
    assert [p.width for p in decoded.paths] == [p.width for p in record.paths]

    # Every decoded point sits on an original point, up to quantization
    for original, result in zip(record.paths, decoded.paths):
        assert result.points[0].x == pytest.approx(original.points[0].x, abs=QUANT_ERROR_BOUND)
        assert result.points[-1].y == pytest.approx(original.points[-1].y, abs=QUANT_ERROR_BOUND)
        for p in result.points:
            assert any(
                abs(p.x - o.x) <= QUANT_ERROR_BOUND and abs(p.y - o.y) <= QUANT_ERROR_BOUND
                for o in original.points
            )


def test_simplification_shrinks_link(heart_path):
    decoded = decode_bouquet(encode_bouquet(BouquetRecord(song="s", message="m", paths=[heart_path])))
    assert 2 <= len(decoded.paths[0].points) < len(heart_path.points)


def test_unknown_song_kept_verbatim():
    song = "https://soundcloud.example/artist/track?utm=1"
    assert decode_bouquet(encode_bouquet(BouquetRecord(song=song, message="m"))).song == song


def test_oversized_message_gives_empty_link(caplog):
    with caplog.at_level(logging.ERROR):
        encoded = encode_bouquet(BouquetRecord(song=SPOTIFY_URL, message="x" * 70000))
    assert encoded == ""
    assert "Message too long" in caplog.text


def test_decode_empty_and_garbage():
    assert decode_bouquet("") is None
    assert decode_bouquet("%%%") is None
    assert decode_bouquet("AAAA") is None


def test_record_dict_shape(record):
    data = record.to_dict()
    assert data["s"] == SPOTIFY_URL
    assert data["m"] == "Happy Birthday!"
    assert "i" not in data
    assert BouquetRecord.from_dict(data) == record


# =============================================================================
# Service, storage and config
# =============================================================================

def test_service_round_trip(config, record):
    service = SharingService(config)
    encoded = service.encode_bouquet(record)
    assert service.decode_bouquet(encoded).message == record.message


def test_service_stores_received_link(config):
    service = SharingService(config)
    assert service.get_stored_received_bouquet() is None

    service.save_received_bouquet("abc_-123")
    assert service.get_stored_received_bouquet() == "abc_-123"

    service.save_received_bouquet("")
    assert service.get_stored_received_bouquet() == "abc_-123"


def test_service_uses_configured_key(store, config):
    config.storage_key = "other_key"
    SharingService(config, store=store).save_received_bouquet("xyz")
    assert store.get("other_key") == "xyz"
    assert store.get("received_bouquet") is None


class BrokenStore:
    def set(self, key, value):
        raise sqlite3.OperationalError("disk I/O error")

    def get(self, key):
        raise sqlite3.OperationalError("disk I/O error")


def test_service_survives_store_errors(config, caplog):
    service = SharingService(config, store=BrokenStore())
    with caplog.at_level(logging.ERROR):
        service.save_received_bouquet("abc")
        assert service.get_stored_received_bouquet() is None
    assert "Error saving bouquet" in caplog.text
    assert "Error reading bouquet" in caplog.text


def test_store_replace_and_delete(store):
    store.set("k", "one")
    store.set("k", "two")
    assert store.get("k") == "two"
    assert store.get_entry("k").saved_at > 0
    assert store.delete("k")
    assert not store.delete("k")
    assert store.get("k") is None


def test_config_from_yaml(tmp_path):
    path = tmp_path / "config.yaml"
    path.write_text(
        "compression:\n"
        "  level: 9\n"
        "storage:\n"
        "  path: /tmp/bouquets.db\n"
        "logging:\n"
        "  level: DEBUG\n"
    )
    config = CodecConfig.from_yaml(str(path))
    assert config.compression_level == 9
    assert config.storage_path == "/tmp/bouquets.db"
    assert config.storage_key == "received_bouquet"
    assert config.log_level == "DEBUG"
    assert config.log_file == ""


def test_config_defaults_from_empty_yaml(tmp_path):
    path = tmp_path / "empty.yaml"
    path.write_text("")
    assert CodecConfig.from_yaml(str(path)) == CodecConfig()


def test_config_to_dict_round_trip(tmp_path):
    import yaml

    config = CodecConfig(compression_level=6, storage_key="k", log_file="codec.log")
    path = tmp_path / "dumped.yaml"
    path.write_text(yaml.safe_dump(config.to_dict()))
    assert CodecConfig.from_yaml(str(path)) == config


def test_compression_level_changes_nothing_on_decode(record):
    fast = encode_bouquet(record, level=1)
    best = encode_bouquet(record, level=9)
    assert decode_bouquet(fast) == decode_bouquet(best)


def test_infinite_width_gives_empty_link():
    path = DrawingPath(color=PALETTE[0], width=float("inf"), points=[Point(0, 0), Point(10, 10)])
    assert encode_bouquet(BouquetRecord(song="s", message="m", paths=[path])) == ""


def test_nan_coordinate_gives_empty_link():
    path = DrawingPath(color=PALETTE[0], width=4, points=[Point(float("nan"), 10), Point(10, 10)])
    assert encode_bouquet(BouquetRecord(song="s", message="m", paths=[path])) == ""


def test_nested_json_link_decodes_to_none():
    assert decode_bouquet(to_text(b"[" * 100000)) is None
