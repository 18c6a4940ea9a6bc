#!/usr/bin/env python3
"""
Compression Envelope

A frame is compressed and then base64-encoded with the URL-safe alphabet
(`+` -> `-`, `/` -> `_`) and no `=` padding, so the result can be dropped
into a query string as-is.

Two compression algorithms have been used over the lifetime of the format:

    ZLIB (algorithm A): RFC 1950 deflate stream. Written by V3 and V4.
    GZIP (algorithm B): RFC 1952 gzip member. Written by V1 and V2.

Only ZLIB is used for new links. Nothing outside the compressed payload
says which algorithm produced a link, so decoding tries them in turn
(see detector.py).
"""

import base64
import binascii
import gzip
import logging
import zlib
from enum import Enum

from .errors import EncodeFailure, UnwrapFailure


logger = logging.getLogger(__name__)


class Compression(Enum):
    """Envelope compression algorithms."""
    ZLIB = "deflate"
    GZIP = "gzip"


# Algorithm used for every newly written link
CURRENT_COMPRESSION = Compression.ZLIB


# =============================================================================
# URL-safe text framing
# =============================================================================

def to_text(data: bytes) -> str:
    """Encode bytes as unpadded URL-safe base64."""
    return base64.urlsafe_b64encode(data).decode("ascii").rstrip("=")


def to_bytes(text: str) -> bytes:
    """
    Decode unpadded URL-safe base64.

    Raises:
        UnwrapFailure: If the text is not valid base64 in either alphabet.
    """
    standard = text.replace("-", "+").replace("_", "/")
    standard += "=" * (-len(standard) % 4)
    try:
        return base64.b64decode(standard, validate=True)
    except (binascii.Error, ValueError) as e:
        raise UnwrapFailure(f"Invalid base64 text: {e}") from e


# =============================================================================
# Compression
# =============================================================================

def compress(data: bytes, algorithm: Compression = CURRENT_COMPRESSION, level: int = -1) -> bytes:
    """
    Compress a frame.

    Raises:
        EncodeFailure: If the compressor rejects the input or level.
    """
    try:
        if algorithm is Compression.ZLIB:
            return zlib.compress(data, level)
        return gzip.compress(data, compresslevel=9 if level < 0 else level)
    except (zlib.error, ValueError) as e:
        raise EncodeFailure(f"{algorithm.value} compression failed: {e}") from e


def decompress(data: bytes, algorithm: Compression) -> bytes:
    """
    Decompress an envelope.

    Raises:
        UnwrapFailure: If the data is not a complete stream of this algorithm.
    """
    try:
        if algorithm is Compression.ZLIB:
            return zlib.decompress(data)
        return gzip.decompress(data)
    except (zlib.error, OSError, EOFError) as e:
        raise UnwrapFailure(f"Not a {algorithm.value} stream: {e}") from e


def wrap(frame: bytes, level: int = -1) -> str:
    """Compress a frame with the current algorithm and frame it as text."""
    compressed = compress(frame, CURRENT_COMPRESSION, level)
    logger.debug(f"Wrapped {len(frame)} byte frame into {len(compressed)} compressed bytes")
    return to_text(compressed)
