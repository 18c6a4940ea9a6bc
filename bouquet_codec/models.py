#!/usr/bin/env python3
"""
Data Models for the Bouquet Codec

This module contains the record types carried by a shared bouquet link and
the codec configuration.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

import yaml


# =============================================================================
# Constants (wire format bounds)
# =============================================================================

# Logical drawing surface is CANVAS_SIZE x CANVAS_SIZE
CANVAS_SIZE = 800

# Brush width is stored in 4 bits
MAX_WIDTH = 15

# Saturating limits of the V4 frame
MAX_PATHS = 255
MAX_POINTS_PER_PATH = 65535

# Hard byte limits of the text fields
MAX_SONG_BYTES = 255
MAX_MESSAGE_BYTES = 65535

# Key under which the surrounding application keeps a received link
DEFAULT_STORAGE_KEY = "received_bouquet"

DEFAULT_DB_PATH = "bouquet_store.db"


# =============================================================================
# Data Classes
# =============================================================================

@dataclass
class Point:
    """A canvas coordinate in the 800x800 drawing space."""
    x: float
    y: float


@dataclass
class DrawingPath:
    """A single free-hand stroke, points in stroke order."""
    color: str
    width: float
    points: List[Point] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "color": self.color,
            "width": self.width,
            "points": [{"x": p.x, "y": p.y} for p in self.points],
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "DrawingPath":
        return cls(
            color=data.get("color", ""),
            width=data.get("width", 0),
            points=[Point(p["x"], p["y"]) for p in data.get("points", [])],
        )


@dataclass
class BouquetRecord:
    """
    The shareable payload.

    `image` is only ever set by the legacy (pre-drawing) decoders; it holds a
    self-contained data URI for the embedded picture.
    """
    song: str
    message: str
    paths: List[DrawingPath] = field(default_factory=list)
    image: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        """Convert to the short-key shape used by the application."""
        data: Dict[str, Any] = {"s": self.song, "m": self.message}
        if self.image is not None:
            data["i"] = self.image
        if self.paths:
            data["paths"] = [p.to_dict() for p in self.paths]
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "BouquetRecord":
        return cls(
            song=data.get("s", ""),
            message=data.get("m", ""),
            paths=[DrawingPath.from_dict(p) for p in data.get("paths", None) or []],
            image=data.get("i"),
        )


@dataclass
class CodecConfig:
    """Configuration for the sharing service."""
    # Compression settings (zlib level for the current envelope)
    compression_level: int = -1

    # Storage settings
    storage_path: str = DEFAULT_DB_PATH
    storage_key: str = DEFAULT_STORAGE_KEY

    # Logging
    log_level: str = "INFO"
    log_file: str = ""

    @classmethod
    def from_yaml(cls, path: str) -> "CodecConfig":
        """Load configuration from YAML file."""
        with open(path, "r") as f:
            data = yaml.safe_load(f) or {}

        return cls(
            compression_level=data.get("compression", {}).get("level", -1),
            storage_path=data.get("storage", {}).get("path", DEFAULT_DB_PATH),
            storage_key=data.get("storage", {}).get("key", DEFAULT_STORAGE_KEY),
            log_level=data.get("logging", {}).get("level", "INFO"),
            log_file=data.get("logging", {}).get("file", ""),
        )

    def to_dict(self) -> Dict:
        """Convert config to dictionary."""
        return {
            "compression": {
                "level": self.compression_level,
            },
            "storage": {
                "path": self.storage_path,
                "key": self.storage_key,
            },
            "logging": {
                "level": self.log_level,
                "file": self.log_file,
            },
        }
