"""Frame and link builders for the bouquet codec tests."""

import gzip
import json
import struct
import zlib

from bouquet_codec.envelope import to_text


SPOTIFY_URL = "https://open.spotify.com/track/abc123"
YOUTUBE_URL = "https://www.youtube.com/watch?v=dQw4w9WgXcQ"

# Smallest RIFF/WEBP-looking blob; the codec treats it as opaque bytes
FAKE_WEBP = b"RIFF\x1a\x00\x00\x00WEBPVP8 \x0e\x00\x00\x00\x00\x01\x02\x03"


def build_v1_frame(song: str, message: str, image: bytes = b"") -> bytes:
    s = song.encode("utf-8")
    m = message.encode("utf-8")
    return struct.pack(">BH", 1, len(s)) + s + struct.pack(">H", len(m)) + m + image


def build_v3_frame(song: str, message: str, image: bytes = b"", tag: int = 3) -> bytes:
    s = song.encode("utf-8")
    m = message.encode("utf-8")
    return struct.pack(">BB", tag, len(s)) + s + struct.pack(">H", len(m)) + m + image


def zlib_link(frame: bytes) -> str:
    return to_text(zlib.compress(frame))


def gzip_link(frame: bytes) -> str:
    return to_text(gzip.compress(frame))


def legacy_text_link(payload) -> str:
    return to_text(json.dumps(payload).encode("utf-8"))
