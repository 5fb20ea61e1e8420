# ╔══════════════════════════════════════════════════════════════════════╗
# ║  Seqpad — Segment Padding Operators                                  ║
# ║  Copyright © 2026 Pictofeed, LLC. All rights reserved.               ║
# ╚══════════════════════════════════════════════════════════════════════╝
"""Gradient registry and the gradient definitions of the padding operators.

A gradient maker is a pure function from a forward :class:`OperatorDef`
to the list of backward :class:`OperatorDef` s computing the gradients of
its inputs.  No runtime state is involved; arguments are propagated
verbatim so forward and backward agree on the padding widths.
"""
from __future__ import annotations

import logging
from collections import Counter
from typing import Callable

from .core import OperatorDef, create_operator
from .errors import ConfigError

logger = logging.getLogger(__name__)


def get_gradient_name(name: str) -> str:
    """The function that returns the gradient name for a blob."""
    return name + '_grad'


class GradientRegistry:
    """GradientRegistry holds the mapping from operators to their gradients."""
    gradient_registry_: dict[str, Callable[[OperatorDef], list[OperatorDef] | OperatorDef | None]] = {}

    @classmethod
    def register_gradient(cls, op_type: str):
        """A decorator for registering gradient mappings."""
        def wrapper(func):
            cls.gradient_registry_[op_type] = func
            return func
        return wrapper

    @classmethod
    def get_gradient(cls, op: OperatorDef) -> list[OperatorDef]:
        try:
            maker = cls.gradient_registry_[op.type]
        except KeyError:
            raise KeyError(f"No gradient registered for op: {op.type}") from None
        gradient_ops = maker(op)
        if gradient_ops is None:
            return []
        if not isinstance(gradient_ops, list):
            gradient_ops = [gradient_ops]
        return gradient_ops


def _lengths_gradient_inputs(op: OperatorDef) -> list[str]:
    """``[GO(0)]`` plus the forward's lengths output when it had lengths."""
    g_inputs = [get_gradient_name(op.outputs[0])]
    if len(op.inputs) > 1:
        if len(op.outputs) < 2:
            raise ConfigError(
                f"{op.type} consumes lengths, so its gradient needs the "
                f"lengths_out output; declare a second output")
        g_inputs.append(op.outputs[1])
    return g_inputs


@GradientRegistry.register_gradient('AddPadding')
def add_padding_gradient(op: OperatorDef) -> list[OperatorDef]:
    g_inputs = _lengths_gradient_inputs(op)
    # gradient on the data
    ops = [create_operator('RemovePadding', g_inputs,
                           [get_gradient_name(op.inputs[0])], arg=op.args)]
    # gradient on the start_padding (and end_padding)
    if len(op.inputs) >= 3:
        padding_grads = [get_gradient_name(op.inputs[2])]
        if len(op.inputs) == 4:
            padding_grads.append(get_gradient_name(op.inputs[3]))
        ops.append(create_operator('GatherPadding', list(g_inputs),
                                   padding_grads, arg=op.args))
    return ops


@GradientRegistry.register_gradient('RemovePadding')
def remove_padding_gradient(op: OperatorDef) -> OperatorDef:
    g_inputs = _lengths_gradient_inputs(op)
    return create_operator('AddPadding', g_inputs,
                           [get_gradient_name(op.inputs[0])], arg=op.args)


@GradientRegistry.register_gradient('GatherPadding')
def no_gradient_to_compute(op: OperatorDef) -> None:
    return


def add_gradient_operators(ops: list[OperatorDef], skip: int = 0) -> list[OperatorDef]:
    """Return the gradient operators for ``ops[skip:]`` in reverse order.

    Every blob must be produced by a single operator, and a gradient blob
    may be written by a single gradient operator; summing gradients of
    blobs consumed several times is not supported.
    """
    all_outputs = [name for op in ops for name in op.outputs]
    if len(all_outputs) != len(set(all_outputs)):
        counts = Counter(all_outputs)
        raise ConfigError(
            "Some blobs are produced multiple times: "
            + str({k: v for k, v in counts.items() if v > 1}))
    gradient_ops = []
    for i in range(len(ops) - 1, skip - 1, -1):
        gradient_ops.extend(GradientRegistry.get_gradient(ops[i]))
    grad_outputs = Counter(name for op in gradient_ops for name in op.outputs)
    shared = sorted(k for k, v in grad_outputs.items() if v > 1)
    if shared:
        raise ConfigError(
            f"Gradients {shared} would be written by several operators")
    logger.debug("built %d gradient op(s) for %d forward op(s)",
                 len(gradient_ops), len(ops) - skip)
    return gradient_ops
