#!/usr/bin/env python3
"""
Drawing Geometry: Simplification and Quantization

Strokes are reduced before they hit the wire in two lossy steps:

1. Ramer-Douglas-Peucker simplification drops points that lie within
   `epsilon` of the chord they sit on.
2. Each remaining coordinate is quantized from the 800-unit canvas to a
   single byte (0-255). Decoding maps the byte back onto the canvas, so a
   round trip is off by at most 800/255 units per axis.

Stroke style shares one byte: color index in the high nibble, brush width
in the low nibble.
"""

import math
from typing import List, Sequence, Tuple

from .models import CANVAS_SIZE, MAX_WIDTH, Point


# =============================================================================
# Constants
# =============================================================================

# RDP tolerance used by the encoder, in canvas units
SIMPLIFY_EPSILON = 2.5

# Largest quantized coordinate
QUANT_MAX = 255

# Worst-case per-axis error of quantize -> dequantize
QUANT_ERROR_BOUND = CANVAS_SIZE / QUANT_MAX


# =============================================================================
# Path Simplification
# =============================================================================

def point_line_distance(p: Point, a: Point, b: Point) -> float:
    """
    Perpendicular distance from p to the line through a and b.

    Falls back to the plain distance to a when a and b coincide.
    """
    dx = b.x - a.x
    dy = b.y - a.y
    if dx == 0 and dy == 0:
        return math.hypot(p.x - a.x, p.y - a.y)
    return abs(dy * p.x - dx * p.y + b.x * a.y - b.y * a.x) / math.hypot(dx, dy)


def simplify_path(points: Sequence[Point], epsilon: float = SIMPLIFY_EPSILON) -> List[Point]:
    """
    Reduce a stroke with Ramer-Douglas-Peucker.

    Works on index ranges with an explicit stack, so stroke length never
    turns into call depth. Ranges are pushed right-then-left and kept points
    are collected in stroke order.

    Args:
        points: Stroke points in drawing order.
        epsilon: Maximum allowed deviation of a dropped point.

    Returns:
        The kept points, first and last input points included.
    """
    if len(points) <= 2:
        return list(points)

    keep = [False] * len(points)
    keep[0] = True
    keep[-1] = True

    stack: List[Tuple[int, int]] = [(0, len(points) - 1)]
    while stack:
        start, end = stack.pop()
        if end - start < 2:
            continue

        dmax = 0.0
        index = start
        for i in range(start + 1, end):
            d = point_line_distance(points[i], points[start], points[end])
            if d > dmax:
                index = i
                dmax = d

        if dmax > epsilon and index > start:
            keep[index] = True
            stack.append((index, end))
            stack.append((start, index))

    return [p for p, kept in zip(points, keep) if kept]


# =============================================================================
# Quantization
# =============================================================================

def quantize_coord(value: float) -> int:
    """Map a canvas coordinate onto one byte."""
    q = math.floor(value / CANVAS_SIZE * QUANT_MAX)
    return max(0, min(q, QUANT_MAX))


def dequantize_coord(q: int) -> float:
    """Map a quantized byte back onto the canvas."""
    return q / QUANT_MAX * CANVAS_SIZE


def quantize_point(point: Point) -> Tuple[int, int]:
    return quantize_coord(point.x), quantize_coord(point.y)


def dequantize_point(qx: int, qy: int) -> Point:
    return Point(dequantize_coord(qx), dequantize_coord(qy))


def normalize_width(width: float) -> int:
    """Truncate a brush width toward zero and clamp it into 0..15."""
    return max(0, min(int(width), MAX_WIDTH))


def pack_style(color_index: int, width: int) -> int:
    """Pack color index (high nibble) and width (low nibble) into one byte."""
    return ((color_index & 0x0F) << 4) | (width & 0x0F)


def unpack_style(style: int) -> Tuple[int, int]:
    """Split a style byte into (color_index, width)."""
    return (style >> 4) & 0x0F, style & 0x0F
