#!/usr/bin/env python3
"""
Codec Errors

Exception kinds raised inside the codec. Decode-side errors are recovered by
the protocol detector and never reach callers of decode_bouquet(); encode-side
errors are converted to an empty string by encode_bouquet().
"""

from enum import Enum


class CodecError(Exception):
    """Base class for all codec errors."""


class TruncatedFrame(CodecError):
    """A frame field declares more bytes than the buffer holds."""

    def __init__(self, field_name: str, needed: int, available: int):
        super().__init__(
            f"Truncated frame: {field_name} needs {needed} bytes, {available} available"
        )
        self.field_name = field_name
        self.needed = needed
        self.available = available


class UnwrapFailure(CodecError):
    """The compression envelope could not be opened."""


class UnrecognizedTag(CodecError):
    """The unwrapped buffer starts with a tag no decoder handles."""


class MalformedLegacyText(CodecError):
    """The plain-text fallback payload is not a valid bouquet object."""


class EncodeFailure(CodecError):
    """The record cannot be represented in the wire format."""


class FailureKind(Enum):
    """Outcome kinds of a single decode attempt."""
    TRUNCATED_FRAME = "truncated_frame"
    UNWRAP_FAILURE = "unwrap_failure"
    UNRECOGNIZED_TAG = "unrecognized_tag"
    MALFORMED_LEGACY_TEXT = "malformed_legacy_text"


def failure_kind(error: CodecError) -> FailureKind:
    """Map a decode-side exception to its failure kind."""
    if isinstance(error, TruncatedFrame):
        return FailureKind.TRUNCATED_FRAME
    if isinstance(error, UnwrapFailure):
        return FailureKind.UNWRAP_FAILURE
    if isinstance(error, MalformedLegacyText):
        return FailureKind.MALFORMED_LEGACY_TEXT
    return FailureKind.UNRECOGNIZED_TAG
