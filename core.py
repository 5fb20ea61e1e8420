# ╔══════════════════════════════════════════════════════════════════════╗
# ║  Seqpad — Segment Padding Operators                                  ║
# ║  Copyright © 2026 Pictofeed, LLC. All rights reserved.               ║
# ╚══════════════════════════════════════════════════════════════════════╝
"""Operator definitions, schemas, registry and element-type dispatch.

An :class:`OperatorDef` names an operator type, its input and output
blobs and its arguments.  The registry maps the type to an
:class:`Operator` subclass, which checks the def against its
:class:`OpSchema`, reads its arguments once at construction and is then
run against concrete input/output tensors.
"""
from __future__ import annotations

import logging
import numpy as np
from typing import Any, Callable

from .dtype import dtype as Dtype
from .errors import ConfigError, UnsupportedType
from .tensor import Tensor

logger = logging.getLogger(__name__)


# ──────────────────────── Operator definitions ────────────────────────

class OperatorDef:
    """Declarative description of one operator invocation."""

    __slots__ = ('type', 'inputs', 'outputs', 'args', 'name')

    def __init__(self, type: str, inputs: list[str], outputs: list[str],
                 args: dict[str, Any] | None = None, name: str = ''):
        self.type = type
        self.inputs = list(inputs)
        self.outputs = list(outputs)
        self.args = dict(args) if args else {}
        self.name = name

    def __eq__(self, other) -> bool:
        if not isinstance(other, OperatorDef):
            return NotImplemented
        return (self.type == other.type and self.inputs == other.inputs
                and self.outputs == other.outputs and self.args == other.args)

    def __repr__(self) -> str:
        return (f"OperatorDef(type={self.type!r}, inputs={self.inputs}, "
                f"outputs={self.outputs}, args={self.args})")


def create_operator(operator_type: str, inputs, outputs, name: str = '',
                    arg: dict[str, Any] | None = None,
                    **kwargs) -> OperatorDef:
    """Build an :class:`OperatorDef`; keyword arguments become op args."""
    if isinstance(inputs, str):
        inputs = [inputs]
    elif not isinstance(inputs, (list, tuple)):
        raise ConfigError(
            f"Unknown input format: {inputs!r} of type {type(inputs).__name__}.")
    if isinstance(outputs, str):
        outputs = [outputs]
    elif not isinstance(outputs, (list, tuple)):
        raise ConfigError(
            f"Unknown output format: {outputs!r} of type {type(outputs).__name__}.")
    args = dict(arg) if arg else {}
    args.update(kwargs)
    return OperatorDef(operator_type, [str(i) for i in inputs],
                       [str(o) for o in outputs], args, name)


# ──────────────────────── Schemas ─────────────────────────────────────

class OpSchema:
    """Arity and documentation of an operator type."""

    def __init__(self, name: str, num_inputs: int | tuple[int, int],
                 num_outputs: int | tuple[int, int], doc: str = '',
                 args: dict[str, str] | None = None,
                 inputs: list[tuple[str, str]] | None = None,
                 outputs: list[tuple[str, str]] | None = None):
        self.name = name
        if isinstance(num_inputs, int):
            num_inputs = (num_inputs, num_inputs)
        if isinstance(num_outputs, int):
            num_outputs = (num_outputs, num_outputs)
        self.min_inputs, self.max_inputs = num_inputs
        self.min_outputs, self.max_outputs = num_outputs
        self.doc = doc
        self.args = dict(args) if args else {}
        self.input_docs = list(inputs) if inputs else []
        self.output_docs = list(outputs) if outputs else []

    def verify(self, op_def: OperatorDef) -> None:
        n_in, n_out = len(op_def.inputs), len(op_def.outputs)
        if not self.min_inputs <= n_in <= self.max_inputs:
            raise ConfigError(
                f"{self.name} takes {self._range(self.min_inputs, self.max_inputs)} "
                f"inputs, got {n_in}")
        if not self.min_outputs <= n_out <= self.max_outputs:
            raise ConfigError(
                f"{self.name} produces {self._range(self.min_outputs, self.max_outputs)} "
                f"outputs, got {n_out}")

    @staticmethod
    def _range(lo: int, hi: int) -> str:
        return str(lo) if lo == hi else f"{lo} to {hi}"

    def __repr__(self) -> str:
        return f"OpSchema({self.name!r})"


# ──────────────────────── Registry ────────────────────────────────────

_OPERATOR_REGISTRY: dict[str, type['Operator']] = {}


def register_operator(name: str) -> Callable[[type], type]:
    """Class decorator registering an :class:`Operator` under *name*."""
    def wrapper(cls):
        _OPERATOR_REGISTRY[name] = cls
        return cls
    return wrapper


def registered_operators() -> list[str]:
    return sorted(_OPERATOR_REGISTRY)


def get_schema(name: str) -> OpSchema:
    try:
        return _OPERATOR_REGISTRY[name].schema
    except KeyError:
        raise ConfigError(f"No operator registered for type: {name}") from None


def create_operator_instance(op_def: OperatorDef, inputs: list[Tensor],
                             outputs: list[Tensor]) -> 'Operator':
    try:
        cls = _OPERATOR_REGISTRY[op_def.type]
    except KeyError:
        raise ConfigError(
            f"No operator registered for type: {op_def.type}") from None
    return cls(op_def, inputs, outputs)


# ──────────────────────── Element-type dispatch ───────────────────────

# Closed dispatch set shared by every padding operator
TensorTypes: tuple[Dtype, ...] = (
    Dtype.float32, Dtype.float64, Dtype.int32, Dtype.int64, Dtype.bool,
)


def dispatch(op: 'Operator', tensor: Tensor,
             types: tuple[Dtype, ...] = TensorTypes) -> bool:
    """Call ``op.do_run_with_type(T)`` for the element type of *tensor*.

    ``T`` is the numpy scalar type matching the tensor's tag; types
    outside *types* raise :class:`UnsupportedType`.
    """
    tag = tensor.dtype
    if tag not in types:
        raise UnsupportedType(
            f"{op.type} does not support element type {tag.name}")
    logger.debug("%s: dispatching on %s", op.type, tag.name)
    return op.do_run_with_type(tag.to_numpy().type)


# ──────────────────────── Operator base ───────────────────────────────

class Operator:
    """Base class for registered operators.

    Subclasses set :attr:`schema` and implement :meth:`run_on_device`.
    """

    schema: OpSchema

    def __init__(self, op_def: OperatorDef, inputs: list[Tensor],
                 outputs: list[Tensor]):
        self.schema.verify(op_def)
        if len(inputs) != len(op_def.inputs) or len(outputs) != len(op_def.outputs):
            raise ConfigError(
                f"{op_def.type}: got {len(inputs)} input / {len(outputs)} output "
                f"tensors for {len(op_def.inputs)} / {len(op_def.outputs)} blobs")
        self._def = op_def
        self._inputs = list(inputs)
        self._outputs = list(outputs)

    @property
    def type(self) -> str:
        return self._def.type

    @property
    def op_def(self) -> OperatorDef:
        return self._def

    def get_single_argument(self, name: str, default: Any) -> Any:
        value = self._def.args.get(name, default)
        if isinstance(default, int) and not isinstance(default, bool):
            if isinstance(value, (bool, float)) or not isinstance(value, (int, np.integer)):
                raise ConfigError(
                    f"{self.type}: argument {name!r} must be an int, got {value!r}")
            return int(value)
        return value

    def input(self, i: int) -> Tensor:
        return self._inputs[i]

    def output(self, i: int) -> Tensor:
        return self._outputs[i]

    def input_size(self) -> int:
        return len(self._inputs)

    def output_size(self) -> int:
        return len(self._outputs)

    def run(self) -> bool:
        return self.run_on_device()

    def run_on_device(self) -> bool:
        raise NotImplementedError

    def do_run_with_type(self, T: type) -> bool:
        raise NotImplementedError

    def __repr__(self) -> str:
        return f"<{type(self).__name__} {self.type}>"
