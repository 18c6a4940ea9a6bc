#!/usr/bin/env python3
"""
Bouquet Wire Protocol

This module defines the binary frames carried inside a shared bouquet link.
Every frame starts with a one-byte tag naming the protocol version. Only V4
is ever written; V1-V3 are kept decode-only so old links keep working.

Frame Format (V4, current):
    Byte 0:            Tag (4)
    Byte 1:            Song length (uint8)
    Bytes 2+:          Shortened song reference (UTF-8)
    Next 2 bytes:      Message length (uint16)
    Next N bytes:      Message (UTF-8)
    Next 1 byte:       Path count (uint8)
    Per path:
        1 byte:        Style (color index << 4 | width)
        2 bytes:       Point count (uint16)
        2 * count:     Quantized (x, y) byte pairs in stroke order

Legacy Frames (decode only):
    V1: Tag 1, song length uint16 (unshortened), message length uint16,
        remaining bytes are a WebP picture.
    V2: Tag 2, read with the V3 layout (see decode_frame_v2).
    V3: Tag 3, song length uint8 (shortened), message length uint16,
        remaining bytes are a WebP picture.

All multi-byte integers are big-endian.

Legacy Text:
    The oldest links are plain JSON ({"s": ..., "m": ..., "i": ...}) with no
    frame at all.
"""

import base64
import json
import logging
import struct
from enum import IntEnum
from typing import List, Optional

from .errors import EncodeFailure, MalformedLegacyText, TruncatedFrame, UnrecognizedTag
from .geometry import (
    SIMPLIFY_EPSILON,
    dequantize_point,
    normalize_width,
    pack_style,
    quantize_point,
    simplify_path,
    unpack_style,
)
from .models import (
    MAX_MESSAGE_BYTES,
    MAX_PATHS,
    MAX_POINTS_PER_PATH,
    MAX_SONG_BYTES,
    BouquetRecord,
    DrawingPath,
)
from .palette import color_for_index, color_index
from .urls import expand_url, shorten_url


logger = logging.getLogger(__name__)


# =============================================================================
# Constants
# =============================================================================

# MIME type of pictures embedded in legacy frames
LEGACY_IMAGE_MIME = "image/webp"


# =============================================================================
# Enums
# =============================================================================

class ProtocolVersion(IntEnum):
    """Frame tag bytes."""
    V1 = 0x01  # gzip envelope, 2-byte song length, picture
    V2 = 0x02  # gzip envelope, picture
    V3 = 0x03  # zlib envelope, shortened song, picture
    V4 = 0x04  # zlib envelope, vector drawing


# =============================================================================
# Frame Reader
# =============================================================================

class FrameReader:
    """Sequential big-endian reader that refuses to read past the buffer."""

    def __init__(self, data: bytes, offset: int = 0):
        self.data = data
        self.offset = offset

    @property
    def remaining(self) -> int:
        return len(self.data) - self.offset

    def take(self, size: int, field_name: str) -> bytes:
        if size > self.remaining:
            raise TruncatedFrame(field_name, size, self.remaining)
        chunk = self.data[self.offset : self.offset + size]
        self.offset += size
        return chunk

    def u8(self, field_name: str) -> int:
        return self.take(1, field_name)[0]

    def u16(self, field_name: str) -> int:
        return struct.unpack(">H", self.take(2, field_name))[0]

    def text(self, size: int, field_name: str) -> str:
        return self.take(size, field_name).decode("utf-8", errors="replace")

    def rest(self) -> bytes:
        chunk = self.data[self.offset :]
        self.offset = len(self.data)
        return chunk


def _check_tag(reader: FrameReader, expected: ProtocolVersion) -> None:
    tag = reader.u8("tag")
    if tag != expected:
        raise UnrecognizedTag(f"Expected tag {int(expected)}, got {tag}")


# =============================================================================
# V4 (current)
# =============================================================================

def prepare_paths(paths: List[DrawingPath]) -> List[DrawingPath]:
    """
    Reduce drawing paths to what the V4 frame carries.

    Drops dots (fewer than 2 points), simplifies every stroke and applies the
    saturating path and point limits.
    """
    prepared = []
    for path in paths:
        if len(path.points) < 2:
            continue
        points = simplify_path(path.points, SIMPLIFY_EPSILON)
        prepared.append(
            DrawingPath(
                color=path.color,
                width=path.width,
                points=points[:MAX_POINTS_PER_PATH],
            )
        )
        if len(prepared) == MAX_PATHS:
            break
    return prepared


def encode_frame_v4(record: BouquetRecord) -> bytes:
    """
    Encode a record to a V4 frame.

    Raises:
        EncodeFailure: If the song or message exceeds its length field, or a
            width or coordinate is not a finite number.
    """
    try:
        song_bytes = shorten_url(record.song).encode("utf-8")
        message_bytes = record.message.encode("utf-8")
    except UnicodeEncodeError as e:
        raise EncodeFailure(f"Text is not encodable as UTF-8: {e}") from e

    if len(song_bytes) > MAX_SONG_BYTES:
        raise EncodeFailure(f"Song reference too long: {len(song_bytes)} > {MAX_SONG_BYTES}")
    if len(message_bytes) > MAX_MESSAGE_BYTES:
        raise EncodeFailure(f"Message too long: {len(message_bytes)} > {MAX_MESSAGE_BYTES}")

    paths = prepare_paths(record.paths)

    data = bytearray()
    data += struct.pack(">BB", ProtocolVersion.V4, len(song_bytes))
    data += song_bytes
    data += struct.pack(">H", len(message_bytes))
    data += message_bytes
    data += struct.pack(">B", len(paths))

    try:
        for path in paths:
            style = pack_style(color_index(path.color), normalize_width(path.width))
            data += struct.pack(">BH", style, len(path.points))
            for point in path.points:
                data += struct.pack(">BB", *quantize_point(point))
    except (ValueError, OverflowError, TypeError) as e:
        raise EncodeFailure(f"Path geometry is not encodable: {e}") from e

    logger.debug(
        f"Encoded V4 frame: {len(data)} bytes, {len(paths)} paths "
        f"({len(record.paths) - len(paths)} dropped)"
    )
    return bytes(data)


def decode_frame_v4(data: bytes) -> BouquetRecord:
    """
    Decode a V4 frame.

    Raises:
        TruncatedFrame: If any field runs past the end of the buffer.
        UnrecognizedTag: If the frame is not tagged V4.
    """
    reader = FrameReader(data)
    _check_tag(reader, ProtocolVersion.V4)

    song = expand_url(reader.text(reader.u8("song length"), "song"))
    message = reader.text(reader.u16("message length"), "message")

    paths = []
    for _ in range(reader.u8("path count")):
        color_idx, width = unpack_style(reader.u8("path style"))
        point_count = reader.u16("point count")
        raw = reader.take(point_count * 2, "points")
        points = [dequantize_point(raw[i], raw[i + 1]) for i in range(0, len(raw), 2)]
        paths.append(DrawingPath(color=color_for_index(color_idx), width=width, points=points))

    return BouquetRecord(song=song, message=message, paths=paths)


# =============================================================================
# Legacy Frames (decode only)
# =============================================================================

def image_data_uri(image: bytes) -> Optional[str]:
    """Wrap embedded picture bytes as a data URI, or None if there are none."""
    if not image:
        return None
    return f"data:{LEGACY_IMAGE_MIME};base64," + base64.b64encode(image).decode("ascii")


def _decode_picture_frame(reader: FrameReader, song: str) -> BouquetRecord:
    message = reader.text(reader.u16("message length"), "message")
    return BouquetRecord(
        song=song,
        message=message,
        paths=[],
        image=image_data_uri(reader.rest()),
    )


def decode_frame_v1(data: bytes) -> BouquetRecord:
    """Decode a V1 frame (unshortened song, 2-byte song length)."""
    reader = FrameReader(data)
    _check_tag(reader, ProtocolVersion.V1)
    song = reader.text(reader.u16("song length"), "song")
    return _decode_picture_frame(reader, song)


def _decode_v3_layout(data: bytes, expected: ProtocolVersion) -> BouquetRecord:
    reader = FrameReader(data)
    _check_tag(reader, expected)
    song = expand_url(reader.text(reader.u8("song length"), "song"))
    return _decode_picture_frame(reader, song)


def decode_frame_v3(data: bytes) -> BouquetRecord:
    """Decode a V3 frame (shortened song, 1-byte song length)."""
    return _decode_v3_layout(data, ProtocolVersion.V3)


def decode_frame_v2(data: bytes) -> BouquetRecord:
    """
    Decode a V2 frame.

    V2 links have always been read with the V3 layout, even though V2
    predates the 1-byte song length.
    """
    # TODO: confirm against a real V2 link whether the song length is 1 or 2 bytes
    return _decode_v3_layout(data, ProtocolVersion.V2)


# =============================================================================
# Legacy Text
# =============================================================================

def decode_legacy_text(data: bytes) -> BouquetRecord:
    """
    Decode the pre-binary JSON format.

    Raises:
        MalformedLegacyText: If the bytes are not a JSON bouquet object.
    """
    try:
        payload = json.loads(data.decode("utf-8", errors="replace"))
    except (ValueError, RecursionError) as e:
        raise MalformedLegacyText(f"Not JSON: {e}") from e

    if not isinstance(payload, dict):
        raise MalformedLegacyText("Legacy payload is not an object")

    song = payload.get("s")
    message = payload.get("m")
    image = payload.get("i")
    if not isinstance(song, str) or not isinstance(message, str):
        raise MalformedLegacyText("Legacy payload is missing 's' or 'm'")
    if image is not None and not isinstance(image, str):
        raise MalformedLegacyText("Legacy payload has a non-string 'i'")

    return BouquetRecord(song=song, message=message, paths=[], image=image)


def peek_tag(data: bytes) -> Optional[int]:
    """Return the leading tag byte, or None for an empty buffer."""
    return data[0] if data else None

