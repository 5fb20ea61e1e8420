# ╔══════════════════════════════════════════════════════════════════════╗
# ║  Seqpad — Segment Padding Operators                                  ║
# ║  Copyright © 2026 Pictofeed, LLC. All rights reserved.               ║
# ╚══════════════════════════════════════════════════════════════════════╝
"""functional — tensor-level padding operations with autograd support.

Each call builds an :class:`OperatorDef`, runs the registered operator on
the given tensors and, when an input requires grad, records a GradFn
that replays the operator's registered gradient.
"""
from __future__ import annotations

import numpy as np

from . import autograd as _ag
from . import padding_ops  # noqa: F401  (registers the padding operators)
from .core import OperatorDef, create_operator, create_operator_instance
from .errors import ConfigError
from .layout import SegmentLayout
from .tensor import Tensor, _ensure_tensor


def _run(op_type: str, inputs: list[tuple[str, Tensor]],
         outputs: list[str], **args) -> tuple[OperatorDef, list[Tensor]]:
    op_def = create_operator(op_type, [name for name, _ in inputs],
                             outputs, **args)
    results = [Tensor(np.empty((0,), dtype=np.float32)) for _ in outputs]
    create_operator_instance(op_def, [t for _, t in inputs], results).run()
    return op_def, results


def _full_span_lengths(data: Tensor) -> Tensor:
    return Tensor(SegmentLayout.from_tensor(data).lengths)


def _record(out: Tensor, grad_fn: _ag.OperatorBackward, op_def: OperatorDef,
            inputs: list[tuple[str, Tensor]], lengths_out: Tensor) -> None:
    if not _ag.is_grad_enabled():
        return
    if not any(t._requires_grad for _, t in inputs):
        return
    grad_fn.inputs = [t for _, t in inputs]
    grad_fn.saved = {'op': op_def,
                     'blobs': {op_def.outputs[1]: lengths_out._data}}
    out._requires_grad = True
    out._grad_fn = grad_fn


# ──────────────────────── Padding ops ─────────────────────────────────

def add_padding(data: Tensor, lengths: Tensor | None = None,
                start_padding: Tensor | None = None,
                end_padding: Tensor | None = None,
                padding_width: int = 1,
                end_padding_width: int = -1) -> tuple[Tensor, Tensor]:
    """Insert padding blocks around each segment of *data*.

    Returns ``(data_out, lengths_out)``.  Without *lengths* the whole
    leading dimension is one segment.  Without *end_padding* the start
    padding is reused; without any padding, zeros are inserted.
    """
    if end_padding is not None and start_padding is None:
        raise ConfigError("end_padding requires start_padding")
    data = _ensure_tensor(data)
    inputs = [('data', data)]
    if start_padding is not None and lengths is None:
        lengths = _full_span_lengths(data)
    if lengths is not None:
        inputs.append(('lengths', _ensure_tensor(lengths)))
    if start_padding is not None:
        inputs.append(('start_padding', _ensure_tensor(start_padding)))
    if end_padding is not None:
        inputs.append(('end_padding', _ensure_tensor(end_padding)))

    op_def, (out, lengths_out) = _run(
        'AddPadding', inputs, ['data_out', 'lengths_out'],
        padding_width=padding_width, end_padding_width=end_padding_width)
    _record(out, _ag.AddPaddingBackward(), op_def, inputs, lengths_out)
    return out, lengths_out


def remove_padding(data: Tensor, lengths: Tensor | None = None,
                   padding_width: int = 1,
                   end_padding_width: int = -1) -> tuple[Tensor, Tensor]:
    """Strip padding blocks from each segment of *data*.

    Returns ``(data_out, lengths_out)``; the inverse of :func:`add_padding`
    with the same widths.
    """
    data = _ensure_tensor(data)
    inputs = [('data', data)]
    if lengths is not None:
        inputs.append(('lengths', _ensure_tensor(lengths)))

    op_def, (out, lengths_out) = _run(
        'RemovePadding', inputs, ['data_out', 'lengths_out'],
        padding_width=padding_width, end_padding_width=end_padding_width)
    _record(out, _ag.RemovePaddingBackward(), op_def, inputs, lengths_out)
    return out, lengths_out


def gather_padding(data: Tensor, lengths: Tensor | None = None,
                   padding_width: int = 1, end_padding_width: int = -1,
                   split_end: bool = False) -> Tensor | tuple[Tensor, Tensor]:
    """Sum the padding blocks of a padded tensor.

    With ``split_end=True`` returns ``(start_sum, end_sum)``; otherwise a
    single tensor accumulating start and end blocks together.
    """
    data = _ensure_tensor(data)
    if lengths is None:
        lengths = _full_span_lengths(data)
    inputs = [('data', data), ('lengths', _ensure_tensor(lengths))]
    outputs = ['padding_sum', 'end_padding_sum'] if split_end else ['padding_sum']
    _, results = _run('GatherPadding', inputs, outputs,
                      padding_width=padding_width,
                      end_padding_width=end_padding_width)
    if split_end:
        return results[0], results[1]
    return results[0]
