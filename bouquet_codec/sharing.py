#!/usr/bin/env python3
"""
Bouquet Sharing

Entry points used by the application to turn a bouquet into a link value and
back, plus the persistence boundary for a received link.

Usage:
    from bouquet_codec import BouquetRecord, SharingService

    service = SharingService()
    encoded = service.encode_bouquet(BouquetRecord(song=url, message="Hi!"))
    if encoded:
        link = f"{origin}/receive?d={encoded}"

    record = service.decode_bouquet(encoded)   # None if nothing decodes
"""

import logging
import sqlite3
import sys
from typing import Optional

from .detector import detect
from .envelope import wrap
from .errors import CodecError
from .models import BouquetRecord, CodecConfig
from .protocol import encode_frame_v4
from .storage import BouquetStore


logger = logging.getLogger(__name__)


def setup_logging(config: CodecConfig):
    """Configure logging based on config."""
    level = getattr(logging, config.log_level.upper(), logging.INFO)
    handlers = [logging.StreamHandler(sys.stdout)]
    if config.log_file:
        handlers.append(logging.FileHandler(config.log_file))

    logging.basicConfig(
        level=level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        handlers=handlers,
    )


def encode_bouquet(record: BouquetRecord, level: int = -1) -> str:
    """
    Encode a bouquet into a URL-safe link value.

    Returns:
        The encoded string, or "" if the record cannot be shared.
    """
    try:
        return wrap(encode_frame_v4(record), level)
    except CodecError as e:
        logger.error(f"Error encoding bouquet: {e}")
        return ""


def decode_bouquet(encoded: str) -> Optional[BouquetRecord]:
    """
    Decode a link value produced by any protocol version.

    Returns:
        The reconstructed record, or None if no format matches.
    """
    if not encoded:
        return None

    result = detect(encoded)
    if not result.ok:
        logger.warning(f"No valid bouquet data ({result.failure.value})")
        return None
    return result.record


class SharingService:
    """Encodes, decodes and stores shared bouquets."""

    def __init__(self, config: Optional[CodecConfig] = None, store: Optional[BouquetStore] = None):
        self.config = config or CodecConfig()
        self._store = store

    @property
    def store(self) -> BouquetStore:
        if self._store is None:
            self._store = BouquetStore(self.config.storage_path)
        return self._store

    def encode_bouquet(self, record: BouquetRecord) -> str:
        logger.info("Encoding bouquet...")
        return encode_bouquet(record, self.config.compression_level)

    def decode_bouquet(self, encoded: str) -> Optional[BouquetRecord]:
        return decode_bouquet(encoded)

    def save_received_bouquet(self, encoded: str) -> None:
        """Keep a received link value; empty values are ignored."""
        if not encoded:
            return
        try:
            self.store.set(self.config.storage_key, encoded)
            logger.info("Saved bouquet to storage")
        except sqlite3.Error as e:
            logger.error(f"Error saving bouquet to storage: {e}")

    def get_stored_received_bouquet(self) -> Optional[str]:
        """Return the kept link value, or None if absent or unreadable."""
        try:
            return self.store.get(self.config.storage_key)
        except sqlite3.Error as e:
            logger.error(f"Error reading bouquet from storage: {e}")
            return None
