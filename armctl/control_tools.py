"""Helper functions for writing control loops."""

from __future__ import annotations

import math
import sys
from collections.abc import Sequence
from pathlib import Path

__all__ = ["is_valid_elbow", "is_homogeneous_transformation", "has_realtime_kernel"]

_ORTHONORMAL_THRESHOLD = 1e-5
_REALTIME_MARKER = Path("/sys/kernel/realtime")


def is_valid_elbow(elbow: Sequence[float]) -> bool:
    """Return True if the elbow flip direction is -1 or +1."""
    return elbow[1] in (-1.0, 1.0)


def is_homogeneous_transformation(transform: Sequence[float]) -> bool:
    """Return True if the column-major 4x4 matrix is a homogeneous transformation."""
    if len(transform) != 16:
        raise ValueError(f"Transformation requires 16 values, got {len(transform)}.")
    if (
        transform[3] != 0.0
        or transform[7] != 0.0
        or transform[11] != 0.0
        or transform[15] != 1.0
    ):
        return False

    columns = [transform[col * 4 : col * 4 + 3] for col in range(3)]
    rows = list(zip(*columns))
    return all(
        abs(math.sqrt(sum(v * v for v in vector)) - 1.0) <= _ORTHONORMAL_THRESHOLD
        for vector in (*columns, *rows)
    )


def has_realtime_kernel() -> bool:
    """Return True if running on a realtime kernel; always True on Windows."""
    if sys.platform.startswith("win"):
        return True
    return _REALTIME_MARKER.exists()