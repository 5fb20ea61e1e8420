# ╔══════════════════════════════════════════════════════════════════════╗
# ║  Seqpad — Segment Padding Operators                                  ║
# ║  Copyright © 2026 Pictofeed, LLC. All rights reserved.               ║
# ╚══════════════════════════════════════════════════════════════════════╝
"""Closed set of element types understood by the operators."""
from __future__ import annotations

import enum
import numpy as np

from .errors import UnsupportedType


class dtype(enum.Enum):
    """Seqpad element types."""
    float32 = "float32"
    float64 = "float64"
    int32 = "int32"
    int64 = "int64"
    bool = "bool"

    def to_numpy(self) -> np.dtype:
        """Convert to numpy dtype."""
        _map = {
            dtype.float32: np.float32,
            dtype.float64: np.float64,
            dtype.int32: np.int32,
            dtype.int64: np.int64,
            dtype.bool: np.bool_,
        }
        return np.dtype(_map[self])

    @staticmethod
    def from_numpy(np_dtype: np.dtype) -> 'dtype':
        """Convert numpy dtype to seqpad dtype.

        Raises :class:`UnsupportedType` for anything outside the set;
        there is no silent fallback.
        """
        _map = {
            np.dtype(np.float32): dtype.float32,
            np.dtype(np.float64): dtype.float64,
            np.dtype(np.int32): dtype.int32,
            np.dtype(np.int64): dtype.int64,
            np.dtype(np.bool_): dtype.bool,
        }
        try:
            return _map[np.dtype(np_dtype)]
        except KeyError:
            raise UnsupportedType(
                f"unsupported element type {np.dtype(np_dtype).name}") from None

    @property
    def is_floating_point(self) -> bool:
        return self in (dtype.float32, dtype.float64)

    @property
    def itemsize(self) -> int:
        return self.to_numpy().itemsize

    def __repr__(self) -> str:
        return f"seqpad.{self.name}"


# Convenience aliases (seqpad.float32, seqpad.long, etc.)
float32 = dtype.float32
float64 = dtype.float64
double = dtype.float64
int32 = dtype.int32
int64 = dtype.int64
long = dtype.int64
bool = dtype.bool
