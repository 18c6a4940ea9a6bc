#!/usr/bin/env python3
"""
Protocol Detection

A link carries no version marker outside its compressed payload, so decoding
probes a fixed, ordered list of (compression, tag, decoder) candidates:

    1. ZLIB  + tag 4  -> V4
    2. ZLIB  + tag 3  -> V3
    3. GZIP  + tag 2  -> V2
    4. GZIP  + tag 1  -> V1
    5. raw bytes as JSON text (legacy fallback)

Candidates are tried one at a time and the first one that decodes wins.
Each envelope is opened at most once per link.
"""

import logging
from dataclasses import dataclass
from typing import Callable, Dict, List, Optional, Tuple

from .envelope import Compression, decompress, to_bytes
from .errors import CodecError, FailureKind, failure_kind
from .models import BouquetRecord
from .protocol import (
    ProtocolVersion,
    decode_frame_v1,
    decode_frame_v2,
    decode_frame_v3,
    decode_frame_v4,
    decode_legacy_text,
    peek_tag,
)


logger = logging.getLogger(__name__)


FrameDecoder = Callable[[bytes], BouquetRecord]


# =============================================================================
# Data Classes
# =============================================================================

@dataclass(frozen=True)
class Candidate:
    """One (compression, tag, decoder) combination."""
    compression: Compression
    version: ProtocolVersion
    decoder: FrameDecoder


@dataclass
class DecodeResult:
    """Outcome of a single decode attempt: a record or a failure kind."""
    record: Optional[BouquetRecord] = None
    failure: Optional[FailureKind] = None
    source: str = ""
    detail: str = ""

    @property
    def ok(self) -> bool:
        return self.record is not None


CANDIDATES: Tuple[Candidate, ...] = (
    Candidate(Compression.ZLIB, ProtocolVersion.V4, decode_frame_v4),
    Candidate(Compression.ZLIB, ProtocolVersion.V3, decode_frame_v3),
    Candidate(Compression.GZIP, ProtocolVersion.V2, decode_frame_v2),
    Candidate(Compression.GZIP, ProtocolVersion.V1, decode_frame_v1),
)

LEGACY_TEXT_SOURCE = "legacy-text"


# =============================================================================
# Probing
# =============================================================================

def _attempt(decoder: FrameDecoder, data: bytes, source: str) -> DecodeResult:
    try:
        return DecodeResult(record=decoder(data), source=source)
    except CodecError as e:
        return DecodeResult(failure=failure_kind(e), source=source, detail=str(e))


def try_candidate(candidate: Candidate, unwrapped: bytes) -> DecodeResult:
    """Decode an already unwrapped buffer with one candidate."""
    source = f"{candidate.compression.value}/v{int(candidate.version)}"
    tag = peek_tag(unwrapped)
    if tag != candidate.version:
        return DecodeResult(
            failure=FailureKind.UNRECOGNIZED_TAG,
            source=source,
            detail=f"Leading byte {tag!r} not handled here",
        )
    return _attempt(candidate.decoder, unwrapped, source)


def probe(raw: bytes, candidates: Tuple[Candidate, ...] = CANDIDATES) -> List[DecodeResult]:
    """
    Run every candidate in order until one succeeds.

    Args:
        raw: Bytes obtained from the link text, still compressed.
        candidates: Ordered candidate table.

    Returns:
        All attempts made, in order. The last one is the winner if any
        attempt succeeded.
    """
    attempts: List[DecodeResult] = []
    unwrapped: Dict[Compression, Optional[bytes]] = {}

    for candidate in candidates:
        if candidate.compression not in unwrapped:
            try:
                unwrapped[candidate.compression] = decompress(raw, candidate.compression)
            except CodecError as e:
                unwrapped[candidate.compression] = None
                attempts.append(
                    DecodeResult(
                        failure=FailureKind.UNWRAP_FAILURE,
                        source=candidate.compression.value,
                        detail=str(e),
                    )
                )

        buffer = unwrapped[candidate.compression]
        if buffer is None:
            continue

        result = try_candidate(candidate, buffer)
        attempts.append(result)
        if result.ok:
            return attempts

    attempts.append(_attempt(decode_legacy_text, raw, LEGACY_TEXT_SOURCE))
    return attempts


def detect(text: str) -> DecodeResult:
    """
    Decode link text with whichever format produced it.

    Never raises for bad input; a failed result carries the failure kind of
    the last attempt.
    """
    try:
        raw = to_bytes(text)
    except CodecError as e:
        logger.debug(f"Link text is not base64: {e}")
        return DecodeResult(failure=FailureKind.UNWRAP_FAILURE, source="base64", detail=str(e))

    attempts = probe(raw)
    for attempt in attempts:
        if not attempt.ok:
            logger.debug(f"Probe {attempt.source} failed ({attempt.failure.value}): {attempt.detail}")

    final = attempts[-1]
    if final.ok:
        logger.debug(f"Decoded link via {final.source}")
    return final
