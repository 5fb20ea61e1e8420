# ╔══════════════════════════════════════════════════════════════════════╗
# ║  Seqpad — Segment Padding Operators                                  ║
# ║  Copyright © 2026 Pictofeed, LLC. All rights reserved.               ║
# ╚══════════════════════════════════════════════════════════════════════╝
"""Segment layout of a tensor packed along its leading dimension.

A tensor ``T<N, D1..., Dn>`` is viewed as ``N`` rows of ``block_size``
elements.  A lengths vector partitions the rows into consecutive
segments; without one, all ``N`` rows form a single segment.
"""
from __future__ import annotations

import math
import numpy as np
from typing import TYPE_CHECKING

from .errors import InvariantViolation, ShapeMismatch, UnsupportedType

if TYPE_CHECKING:
    from .tensor import Tensor


class SegmentLayout:
    """Validated per-segment lengths and row offsets for one invocation."""

    __slots__ = (
        'outer_size', 'block_shape', 'block_size',
        'lengths', 'offsets', 'explicit',
    )

    def __init__(self, outer_size: int, block_shape: tuple,
                 lengths: np.ndarray, offsets: np.ndarray, explicit: bool):
        self.outer_size = outer_size
        self.block_shape = block_shape
        self.block_size = math.prod(block_shape)
        self.lengths = lengths
        self.offsets = offsets
        self.explicit = explicit

    @classmethod
    def from_tensor(cls, data: 'Tensor',
                    lengths: 'Tensor | None' = None) -> 'SegmentLayout':
        if data.ndim < 1:
            raise ShapeMismatch(
                f"expected a tensor with at least 1 dimension, got {data.ndim}")
        outer_size = data.shape[0]
        block_shape = tuple(data.shape[1:])
        if lengths is None:
            return cls(outer_size, block_shape,
                       np.array([outer_size], dtype=np.int64),
                       np.zeros(1, dtype=np.int64), explicit=False)

        raw = lengths._data
        if raw.ndim != 1:
            raise ShapeMismatch(
                f"lengths must be 1-dimensional, got shape {raw.shape}")
        if not np.issubdtype(raw.dtype, np.integer):
            raise UnsupportedType(
                f"lengths must be an integer tensor, got {raw.dtype.name}")
        seg = raw.astype(np.int64)

        # errors name the first offending segment
        offsets = np.empty(len(seg), dtype=np.int64)
        total = 0
        for i, length in enumerate(seg.tolist()):
            if length < 0:
                raise InvariantViolation(
                    f"segment {i} has negative length {length}")
            offsets[i] = total
            total += length
            if total > outer_size:
                raise InvariantViolation(
                    f"segment {i}: cumulative length {total} exceeds "
                    f"leading dimension {outer_size}")
        return cls(outer_size, block_shape, seg, offsets, explicit=True)

    # ------------------------------------------------------------------ #

    @property
    def lengths_size(self) -> int:
        return len(self.lengths)

    @property
    def total_length(self) -> int:
        return int(self.lengths.sum())

    def segments(self):
        """Iterate over ``(start_row, length)`` pairs, one per segment."""
        return zip(self.offsets.tolist(), self.lengths.tolist())

    @property
    def tail_size(self) -> int:
        """Rows after the last segment that belong to no segment."""
        return self.outer_size - self.total_length

    def check_min_length(self, min_length: int) -> None:
        """Fail at the first segment shorter than *min_length* rows."""
        short = np.flatnonzero(self.lengths < min_length)
        if short.size:
            i = int(short[0])
            raise InvariantViolation(
                f"segment {i} has length {int(self.lengths[i])}, "
                f"shorter than the padding width {min_length}")

    def __repr__(self) -> str:
        return (f"SegmentLayout(outer_size={self.outer_size}, "
                f"block_size={self.block_size}, "
                f"lengths_size={self.lengths_size})")
