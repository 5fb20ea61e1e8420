# ╔══════════════════════════════════════════════════════════════════════╗
# ║  Seqpad — Segment Padding Operators                                  ║
# ║  Copyright © 2026 Pictofeed, LLC. All rights reserved.               ║
# ╚══════════════════════════════════════════════════════════════════════╝
"""Named blob store that runs operator definitions.

Module-level functions (:func:`feed_blob`, :func:`run_operator_once`, ...)
act on a process-wide default workspace.
"""
from __future__ import annotations

import logging
import numpy as np

from . import padding_ops  # noqa: F401  (registers the padding operators)
from .core import OperatorDef, create_operator_instance
from .tensor import Tensor

logger = logging.getLogger(__name__)


class Workspace:
    """Holds blobs (name -> :class:`Tensor`) and runs operators on them."""

    def __init__(self):
        self._blobs: dict[str, Tensor] = {}

    def has_blob(self, name: str) -> bool:
        return name in self._blobs

    def blobs(self) -> list[str]:
        return sorted(self._blobs)

    def feed_blob(self, name: str, arr) -> bool:
        """Store a copy of *arr* (array-like or Tensor) under *name*."""
        if isinstance(arr, Tensor):
            arr = arr._data
        self._blobs[name] = Tensor(np.array(arr, copy=True))
        return True

    def fetch_blob(self, name: str) -> np.ndarray:
        """Return a copy of the blob's contents."""
        return self.get_tensor(name).numpy()

    def get_tensor(self, name: str) -> Tensor:
        try:
            return self._blobs[name]
        except KeyError:
            raise KeyError(f"Blob {name!r} does not exist in the workspace") from None

    def _output_tensor(self, name: str) -> Tensor:
        tensor = self._blobs.get(name)
        if tensor is None:
            tensor = Tensor(np.empty((0,), dtype=np.float32))
        return tensor

    def run_operator_once(self, op_def: OperatorDef) -> bool:
        inputs = [self.get_tensor(name) for name in op_def.inputs]
        outputs = [self._output_tensor(name) for name in op_def.outputs]
        op = create_operator_instance(op_def, inputs, outputs)
        logger.debug("running %s %s -> %s", op_def.type,
                     op_def.inputs, op_def.outputs)
        success = op.run()
        # outputs are only bound once the operator has succeeded
        for name, tensor in zip(op_def.outputs, outputs):
            self._blobs[name] = tensor
        return success

    def run_operators_once(self, ops: list[OperatorDef]) -> bool:
        for op in ops:
            success = self.run_operator_once(op)
            if not success:
                return False
        return True

    def reset(self) -> bool:
        self._blobs.clear()
        return True


# ──────────────────────── Default workspace ───────────────────────────

_default = Workspace()


def default_workspace() -> Workspace:
    return _default


def reset_workspace() -> bool:
    return _default.reset()


def has_blob(name: str) -> bool:
    return _default.has_blob(name)


def blobs() -> list[str]:
    return _default.blobs()


def feed_blob(name: str, arr) -> bool:
    return _default.feed_blob(name, arr)


def fetch_blob(name: str) -> np.ndarray:
    return _default.fetch_blob(name)


def run_operator_once(op_def: OperatorDef) -> bool:
    return _default.run_operator_once(op_def)


def run_operators_once(ops: list[OperatorDef]) -> bool:
    return _default.run_operators_once(ops)
