# ╔══════════════════════════════════════════════════════════════════════╗
# ║  Seqpad — Segment Padding Operators                                  ║
# ║  Copyright © 2026 Pictofeed, LLC. All rights reserved.               ║
# ╚══════════════════════════════════════════════════════════════════════╝
"""AddPadding, RemovePadding and GatherPadding operators.

All three view the data as ``(outer_size, block_size)`` rows and walk the
segments by the start offsets of their layout.  Results are computed into fresh
arrays and only then written to the outputs, so a failing invocation
leaves its outputs untouched and outputs may alias inputs.
"""
from __future__ import annotations

import logging
import numpy as np

from .core import OpSchema, Operator, dispatch, register_operator
from .errors import ConfigError, ShapeMismatch, UnsupportedType
from .layout import SegmentLayout
from .tensor import Tensor

logger = logging.getLogger(__name__)

_WIDTH_ARGS = {
    'padding_width': "Number of copies of padding around each range (default 1).",
    'end_padding_width': "(Optional) Different end-padding width; "
                         "negative means same as padding_width.",
}


class _PaddingOp(Operator):
    """Shared width arguments and output plumbing."""

    def __init__(self, op_def, inputs, outputs):
        super().__init__(op_def, inputs, outputs)
        self._start_width = self.get_single_argument('padding_width', 1)
        self._end_width = self.get_single_argument('end_padding_width', -1)
        if self._start_width < 0:
            raise ConfigError(
                f"{self.type}: padding_width must be >= 0, "
                f"got {self._start_width}")
        if self._end_width < 0:
            self._end_width = self._start_width
        logger.debug("%s: widths start=%d end=%d", self.type,
                     self._start_width, self._end_width)

    @property
    def start_width(self) -> int:
        return self._start_width

    @property
    def end_width(self) -> int:
        return self._end_width

    @property
    def pad_width(self) -> int:
        return self._start_width + self._end_width

    def _lengths_input(self) -> Tensor | None:
        return self.input(1) if self.input_size() > 1 else None

    def _emit(self, i: int, arr: np.ndarray) -> None:
        out = self.output(i)
        out.resize(arr.shape)
        out.mutable_data(arr.dtype)[...] = arr.reshape(-1)

    def _copy_through(self) -> bool:
        """Zero-width fast path: outputs are exact copies of the inputs."""
        layout = SegmentLayout.from_tensor(self.input(0))
        data = self.input(0).numpy()
        lengths = self._lengths_input()
        lengths_out = layout.lengths if lengths is None else lengths.numpy()
        self._emit(0, data)
        if self.output_size() == 2:
            self._emit(1, lengths_out)
        return True


# ──────────────────────── AddPadding ──────────────────────────────────

@register_operator('AddPadding')
class AddPaddingOp(_PaddingOp):
    schema = OpSchema(
        'AddPadding', (1, 4), (1, 2),
        doc="""
Given a partitioned tensor T<N, D1..., Dn>, where the partitions are
ranges on its outer-most dimension N with the given lengths, return a
tensor T<N + (start+end)*num_ranges, D1..., Dn> with paddings added to
the start and end of each range.  Different paddings may be provided for
the beginning and the end; a padding must hold D1*...*Dn elements.

Without a padding tensor, zeros are inserted.  Without a lengths vector,
padding is added once, at the start and end of the data.
""",
        args=_WIDTH_ARGS,
        inputs=[
            ('data_in', "(T<N, D1..., Dn>) Input data"),
            ('lengths', "(i64) Num of elements in each range. sum(lengths) <= N."),
            ('start_padding', "T<D1..., Dn> Padding data for range start."),
            ('end_padding', "T<D1..., Dn> (optional) Padding for range end. "
                            "If not provided, start_padding is used as "
                            "end_padding as well."),
        ],
        outputs=[
            ('data_out', "(T<N + pad*num_ranges, D1..., Dn>) Padded data."),
            ('lengths_out', "(i64, optional) Lengths for each padded range."),
        ],
    )

    def run_on_device(self) -> bool:
        if self._start_width == 0 and self._end_width == 0:
            return self._copy_through()
        return dispatch(self, self.input(0))

    def _padding_block(self, i: int, T: type, block_size: int) -> np.ndarray:
        pad = self.input(i)
        if pad.numel() != block_size:
            raise ShapeMismatch(
                f"{self.type}: padding input {i} has {pad.numel()} elements, "
                f"expected block size {block_size}")
        if pad._data.dtype != np.dtype(T):
            raise UnsupportedType(
                f"{self.type}: padding input {i} is {pad._data.dtype.name}, "
                f"data is {np.dtype(T).name}")
        return pad.data_as(T)

    def do_run_with_type(self, T: type) -> bool:
        data = self.input(0)
        layout = SegmentLayout.from_tensor(data, self._lengths_input())
        block_size = layout.block_size

        # input_size == 1 or 2 : pad with zeros
        # input_size == 3      : start and end paddings are the same
        # input_size == 4      : different start and end paddings
        start_pad = None
        if self.input_size() >= 3:
            start_pad = self._padding_block(2, T, block_size)
        if self.input_size() == 4:
            end_pad = self._padding_block(3, T, block_size)
        else:
            end_pad = start_pad

        sw, ew = self._start_width, self._end_width
        out_rows = layout.outer_size + self.pad_width * layout.lengths_size
        src = data.data_as(T).reshape(layout.outer_size, block_size)
        out = np.empty((out_rows, block_size), dtype=T)

        # segment i moves down by the padding of the i segments before it
        for i, (start, length) in enumerate(layout.segments()):
            pos = start + i * self.pad_width
            out[pos:pos + sw] = 0 if start_pad is None else start_pad
            pos += sw
            out[pos:pos + length] = src[start:start + length]
            pos += length
            out[pos:pos + ew] = 0 if end_pad is None else end_pad
        # rows past the last segment are carried over unchanged
        out[out_rows - layout.tail_size:] = src[layout.total_length:]

        logger.debug("%s: %s -> %d rows", self.type, layout, out_rows)
        self._emit(0, out.reshape((out_rows,) + layout.block_shape))
        if self.output_size() == 2:
            self._emit(1, layout.lengths + self.pad_width)
        return True


# ──────────────────────── RemovePadding ───────────────────────────────

@register_operator('RemovePadding')
class RemovePaddingOp(_PaddingOp):
    schema = OpSchema(
        'RemovePadding', (1, 2), (1, 2),
        doc="""
Remove padding around the edges of each segment of the input data.  This
is the reverse operation of AddPadding, and uses the same arguments and
conventions for input and output data format.
""",
        args=_WIDTH_ARGS,
        inputs=[
            ('data_in', "T<N, D1..., Dn> Input data"),
            ('lengths', "(i64) Num of elements in each range. sum(lengths) <= N. "
                        "If not provided, considers all data as a single segment."),
        ],
        outputs=[
            ('data_out', "(T<N - pad*num_ranges, D1..., Dn>) Unpadded data."),
            ('lengths_out', "(i64, optional) Lengths for each unpadded range."),
        ],
    )

    def run_on_device(self) -> bool:
        if self._start_width == 0 and self._end_width == 0:
            return self._copy_through()
        return dispatch(self, self.input(0))

    def do_run_with_type(self, T: type) -> bool:
        data = self.input(0)
        layout = SegmentLayout.from_tensor(data, self._lengths_input())
        layout.check_min_length(self.pad_width)
        block_size = layout.block_size

        sw, ew = self._start_width, self._end_width
        out_rows = layout.outer_size - self.pad_width * layout.lengths_size
        src = data.data_as(T).reshape(layout.outer_size, block_size)
        out = np.empty((out_rows, block_size), dtype=T)

        for i, (start, length) in enumerate(layout.segments()):
            pos = start - i * self.pad_width
            out[pos:pos + length - sw - ew] = src[start + sw:start + length - ew]
        out[out_rows - layout.tail_size:] = src[layout.total_length:]

        logger.debug("%s: %s -> %d rows", self.type, layout, out_rows)
        self._emit(0, out.reshape((out_rows,) + layout.block_shape))
        if self.output_size() == 2:
            self._emit(1, layout.lengths - self.pad_width)
        return True


# ──────────────────────── GatherPadding ───────────────────────────────

@register_operator('GatherPadding')
class GatherPaddingOp(_PaddingOp):
    schema = OpSchema(
        'GatherPadding', 2, (1, 2),
        doc="""
Gather the sum of start and end paddings in a padded input sequence.  Used
to compute the gradients of AddPadding w.r.t. the padding tensors.
""",
        args=_WIDTH_ARGS,
        inputs=[
            ('data_in', "T<N, D1..., Dn> Padded input data"),
            ('lengths', "(i64) Num of elements in each range. sum(lengths) <= N."),
        ],
        outputs=[
            ('padding_sum', "Sum of all start paddings, or of all paddings "
                            "if end_padding_sum is not provided."),
            ('end_padding_sum', "T<D1..., Dn> Sum of all end paddings, "
                                "if provided."),
        ],
    )

    def run_on_device(self) -> bool:
        if self._start_width == 0 and self._end_width == 0:
            empty = np.empty((0,), dtype=self.input(0)._data.dtype)
            for i in range(self.output_size()):
                self._emit(i, empty)
            return True
        return dispatch(self, self.input(0))

    def do_run_with_type(self, T: type) -> bool:
        data = self.input(0)
        layout = SegmentLayout.from_tensor(data, self.input(1))
        layout.check_min_length(self.pad_width)
        block_size = layout.block_size

        sw, ew = self._start_width, self._end_width
        src = data.data_as(T).reshape(layout.outer_size, block_size)
        start_sum = np.zeros(block_size, dtype=T)
        # with a single output, end paddings accumulate into the start sum
        end_sum = start_sum
        if self.output_size() == 2:
            end_sum = np.zeros(block_size, dtype=T)

        for start, length in layout.segments():
            np.add(start_sum, src[start:start + sw].sum(axis=0, dtype=T),
                   out=start_sum)
            end = start + length
            np.add(end_sum, src[end - ew:end].sum(axis=0, dtype=T),
                   out=end_sum)

        self._emit(0, start_sum.reshape(layout.block_shape))
        if self.output_size() == 2:
            self._emit(1, end_sum.reshape(layout.block_shape))
        return True
