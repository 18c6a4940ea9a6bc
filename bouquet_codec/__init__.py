"""
Bouquet Link Codec

Turns a bouquet (song link, short message, optional free-hand drawing) into
a single URL-safe string and back.

Architecture:
    Encode:
        song URL  -> shortened (s:<id> / y:<id>)
        drawing   -> dots dropped -> RDP simplified -> quantized to bytes
        V4 frame  -> zlib -> URL-safe base64 (no padding)

    Decode (first match wins):
        zlib + tag 4   -> V4 frame (vector drawing)
        zlib + tag 3   -> V3 frame (embedded picture)
        gzip + tag 2   -> V2 frame (embedded picture)
        gzip + tag 1   -> V1 frame (embedded picture)
        plain JSON     -> legacy text

Usage:
    from bouquet_codec import BouquetRecord, DrawingPath, Point, encode_bouquet, decode_bouquet

    record = BouquetRecord(
        song="https://open.spotify.com/track/abc123",
        message="Happy Birthday!",
        paths=[DrawingPath("#E31B44", 4, [Point(10, 10), Point(200, 180)])],
    )
    encoded = encode_bouquet(record)      # "" if the record cannot be shared
    decoded = decode_bouquet(encoded)     # None if nothing decodes
"""

from .errors import (
    CodecError,
    EncodeFailure,
    FailureKind,
    MalformedLegacyText,
    TruncatedFrame,
    UnrecognizedTag,
    UnwrapFailure,
)
from .models import BouquetRecord, CodecConfig, DrawingPath, Point
from .palette import PALETTE
from .protocol import ProtocolVersion
from .sharing import SharingService, decode_bouquet, encode_bouquet, setup_logging
from .storage import BouquetStore

__version__ = "0.4.0"
__all__ = [
    # Records
    "BouquetRecord",
    "DrawingPath",
    "Point",
    "PALETTE",
    # Codec
    "encode_bouquet",
    "decode_bouquet",
    "ProtocolVersion",
    # Service
    "SharingService",
    "BouquetStore",
    "CodecConfig",
    "setup_logging",
    # Errors
    "CodecError",
    "TruncatedFrame",
    "UnwrapFailure",
    "UnrecognizedTag",
    "MalformedLegacyText",
    "EncodeFailure",
    "FailureKind",
]
