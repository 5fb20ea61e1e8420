# ╔══════════════════════════════════════════════════════════════════════╗
# ║  Seqpad — Segment Padding Operators                                  ║
# ║  Copyright © 2026 Pictofeed, LLC. All rights reserved.               ║
# ╚══════════════════════════════════════════════════════════════════════╝
"""Core Tensor class backed by NumPy with autograd support."""
from __future__ import annotations

import math
import numpy as np
from typing import Any

from . import autograd as _ag
from .dtype import dtype as Dtype


class Tensor:
    """N-dimensional tensor with a contiguous row-major buffer.

    Wraps a :class:`numpy.ndarray`.  Operators treat a tensor as a typed
    buffer with a shape: they :meth:`resize` it, fetch its flat
    :meth:`mutable_data` and rewrite it.  The functional API additionally
    records operations for reverse-mode AD when ``requires_grad=True``.
    """

    __slots__ = ('_data', '_requires_grad', '_grad', '_grad_fn', '_grad_out')

    # ------------------------------------------------------------------ #
    #  Construction                                                      #
    # ------------------------------------------------------------------ #

    def __init__(
        self,
        data: Any,
        dtype: Dtype | np.dtype | None = None,
        requires_grad: bool = False,
    ):
        if isinstance(data, Tensor):
            arr = data._data.copy()
        elif isinstance(data, np.ndarray):
            arr = data
        else:
            arr = np.asarray(data)

        if dtype is not None:
            if isinstance(dtype, Dtype):
                arr = arr.astype(dtype.to_numpy())
            else:
                arr = arr.astype(dtype)

        # order='C' keeps 0-d arrays 0-d
        self._data: np.ndarray = np.asarray(arr, order='C')
        self._requires_grad: bool = requires_grad
        self._grad: np.ndarray | None = None
        self._grad_fn: _ag.GradFn | None = None

    # ------------------------------------------------------------------ #
    #  Properties                                                        #
    # ------------------------------------------------------------------ #

    @property
    def grad(self) -> 'Tensor | None':
        if self._grad is None:
            return None
        return Tensor._wrap(self._grad)

    @property
    def requires_grad(self) -> bool:
        return self._requires_grad

    @property
    def grad_fn(self):
        return self._grad_fn

    @property
    def shape(self) -> tuple:
        return self._data.shape

    @property
    def ndim(self) -> int:
        return self._data.ndim

    @property
    def dtype(self) -> Dtype:
        """Element type; raises UnsupportedType outside the closed set."""
        return Dtype.from_numpy(self._data.dtype)

    def numel(self) -> int:
        return self._data.size

    def __repr__(self) -> str:
        data_str = repr(self._data)
        prefix = "tensor("
        suffix = ")"
        if self._requires_grad:
            suffix = ", requires_grad=True)"
        elif self._grad_fn is not None:
            suffix = f", grad_fn={self._grad_fn})"
        return prefix + data_str + suffix

    # ------------------------------------------------------------------ #
    #  Buffer access                                                      #
    # ------------------------------------------------------------------ #

    @staticmethod
    def _wrap(data: np.ndarray, requires_grad: bool = False,
              grad_fn: _ag.GradFn | None = None) -> 'Tensor':
        t = Tensor.__new__(Tensor)
        t._data = data
        t._requires_grad = requires_grad
        t._grad = None
        t._grad_fn = grad_fn
        return t

    def resize(self, *dims) -> 'Tensor':
        """Change the shape, reallocating when the element count changes.

        Contents are unspecified after a reallocating resize; callers
        rewrite the whole buffer.
        """
        if len(dims) == 1 and isinstance(dims[0], (tuple, list)):
            dims = tuple(dims[0])
        dims = tuple(int(d) for d in dims)
        if math.prod(dims) == self._data.size:
            self._data = self._data.reshape(dims)
        else:
            self._data = np.empty(dims, dtype=self._data.dtype)
        return self

    def data_as(self, dtype: Dtype | np.dtype) -> np.ndarray:
        """Flat read-only view typed as *dtype*; the types must agree."""
        want = dtype.to_numpy() if isinstance(dtype, Dtype) else np.dtype(dtype)
        if self._data.dtype != want:
            raise TypeError(
                f"tensor holds {self._data.dtype.name}, requested {want.name}")
        view = self._data.reshape(-1)
        view.flags.writeable = False
        return view

    def mutable_data(self, dtype: Dtype | np.dtype | None = None) -> np.ndarray:
        """Flat writable view, reallocating if *dtype* differs."""
        if dtype is not None:
            want = dtype.to_numpy() if isinstance(dtype, Dtype) else np.dtype(dtype)
            if self._data.dtype != want:
                self._data = np.empty(self._data.shape, dtype=want)
        if not (self._data.flags.c_contiguous and self._data.flags.writeable):
            self._data = self._data.copy()
        return self._data.reshape(-1)

    def numpy(self) -> np.ndarray:
        return self._data.copy()

    # ---- Autograd methods ----

    def backward(self, gradient=None):
        if gradient is not None:
            if isinstance(gradient, Tensor):
                gradient = gradient._data
            else:
                gradient = np.asarray(gradient)
        _ag.backward(self, gradient)


# ====================================================================
# Module-level factory functions (seqpad.tensor, seqpad.zeros)
# ====================================================================

def _resolve_dtype(dtype) -> np.dtype | None:
    if dtype is None:
        return None
    if isinstance(dtype, Dtype):
        return dtype.to_numpy()
    return np.dtype(dtype)


def _size_arg(size) -> tuple:
    if len(size) == 1 and isinstance(size[0], (tuple, list)):
        return tuple(size[0])
    return tuple(size)


def tensor(data, dtype=None, requires_grad=False) -> Tensor:
    return Tensor(data, dtype=dtype, requires_grad=requires_grad)


def zeros(*size, dtype=None, requires_grad=False) -> Tensor:
    dt = _resolve_dtype(dtype) or np.float32
    return Tensor._wrap(np.zeros(_size_arg(size), dtype=dt), requires_grad)


def _ensure_tensor(x) -> Tensor:
    if isinstance(x, Tensor):
        return x
    return Tensor(x)
