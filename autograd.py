# ╔══════════════════════════════════════════════════════════════════════╗
# ║  Seqpad — Segment Padding Operators                                  ║
# ║  Copyright © 2026 Pictofeed, LLC. All rights reserved.               ║
# ╚══════════════════════════════════════════════════════════════════════╝
"""Autograd engine — reverse-mode automatic differentiation.

Builds a DAG of :class:`GradFn` nodes during the forward pass of the
functional API and traverses it in topological order during
:meth:`Tensor.backward`.  Padding nodes do not hand-code their
derivatives: they replay the backward operator definitions produced by
the gradient registry, so eager and declarative gradients are the same
computation.
"""
from __future__ import annotations

import functools
import logging
import numpy as np
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .core import OperatorDef
    from .tensor import Tensor

logger = logging.getLogger(__name__)


# ──────────────────────── Global grad mode ────────────────────────────

_grad_enabled: bool = True


def is_grad_enabled() -> bool:
    return _grad_enabled


def set_grad_enabled(mode: bool) -> None:
    global _grad_enabled
    _grad_enabled = mode


class no_grad:
    """Context manager / decorator that disables gradient recording."""

    def __enter__(self):
        self._prev = _grad_enabled
        set_grad_enabled(False)
        return self

    def __exit__(self, *args):
        set_grad_enabled(self._prev)

    def __call__(self, fn):
        @functools.wraps(fn)
        def wrapper(*a, **kw):
            with self:
                return fn(*a, **kw)
        return wrapper


# ──────────────────────── GradFn base class ───────────────────────────

class GradFn:
    """Base class for all autograd functions."""
    __slots__ = ('inputs', 'saved', 'name')

    def __init__(self, name: str = 'GradFn'):
        self.inputs: list[Tensor | None] = []
        self.saved: dict = {}
        self.name = name

    def backward(self, grad_output: np.ndarray) -> tuple[np.ndarray | None, ...]:
        raise NotImplementedError

    def __repr__(self) -> str:
        return f"<{self.name}>"


# ──────────────────────── Topological backward ────────────────────────

def _topo_sort(root: 'Tensor') -> list['Tensor']:
    """Return tensors in reverse topological order for backward.

    Uses iterative DFS to avoid Python recursion limits.
    """
    visited: set[int] = set()
    order: list['Tensor'] = []
    stack: list[tuple['Tensor', bool]] = [(root, False)]
    while stack:
        t, processed = stack[-1]
        tid = id(t)
        if processed:
            stack.pop()
            if tid not in visited:
                visited.add(tid)
                order.append(t)
            continue
        if tid in visited:
            stack.pop()
            continue
        stack[-1] = (t, True)
        if t._grad_fn is not None:
            for inp in t._grad_fn.inputs:
                if inp is not None and id(inp) not in visited:
                    stack.append((inp, False))
    order.reverse()
    return order


def backward(root: 'Tensor', grad: np.ndarray | None = None) -> None:
    """Run backward pass from *root* tensor."""
    if grad is None:
        if root._data.size == 1:
            grad = np.ones_like(root._data)
        else:
            raise RuntimeError(
                "grad must be specified for non-scalar tensors")
    if grad.shape != root._data.shape:
        raise RuntimeError(
            f"grad has shape {grad.shape}, expected {root._data.shape}")

    root._grad_out = grad
    order = _topo_sort(root)

    for t in order:
        g = getattr(t, '_grad_out', None)
        if g is None:
            continue
        gfn = t._grad_fn
        if gfn is not None:
            grads = gfn.backward(g)
            inputs = gfn.inputs
            for i in range(len(inputs)):
                inp = inputs[i]
                if inp is None:
                    continue
                if not inp._requires_grad:
                    continue
                ig = grads[i]
                if ig is None:
                    continue
                # Padding gradients come back in block shape
                inp_shape = inp._data.shape
                if ig.shape != inp_shape:
                    ig = ig.reshape(inp_shape)
                if inp._grad is not None:
                    np.add(inp._grad, ig, out=inp._grad)
                else:
                    inp._grad = ig.copy()
                prev = getattr(inp, '_grad_out', None)
                if prev is not None:
                    np.add(prev, ig, out=prev)
                else:
                    inp._grad_out = ig.copy()
            gfn.saved = None

    for t in order:
        try:
            del t._grad_out
        except AttributeError:
            pass


# ──────────────────────── Operator-backed GradFn nodes ────────────────

class OperatorBackward(GradFn):
    """Replays the registered gradient of a forward operator definition.

    ``saved['op']`` is the forward :class:`OperatorDef`; ``saved['blobs']``
    maps forward output names (other than the differentiated output) to
    the arrays the gradient operators read, e.g. ``lengths_out``.
    """

    def backward(self, g):
        from .gradients import GradientRegistry, get_gradient_name
        from .workspace import Workspace

        op: OperatorDef = self.saved['op']
        ws = Workspace()
        ws.feed_blob(get_gradient_name(op.outputs[0]), g)
        for name, arr in self.saved.get('blobs', {}).items():
            ws.feed_blob(name, arr)
        grad_ops = GradientRegistry.get_gradient(op)
        logger.debug("%s: replaying %d gradient op(s)", self.name, len(grad_ops))
        ws.run_operators_once(grad_ops)
        grads = []
        for name in op.inputs:
            gname = get_gradient_name(name)
            grads.append(ws.fetch_blob(gname) if ws.has_blob(gname) else None)
        return tuple(grads)


class AddPaddingBackward(OperatorBackward):
    def __init__(self):
        super().__init__('AddPaddingBackward')


class RemovePaddingBackward(OperatorBackward):
    def __init__(self):
        super().__init__('RemovePaddingBackward')
