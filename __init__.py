# ╔══════════════════════════════════════════════════════════════════════╗
# ║  Seqpad — Segment Padding Operators                                  ║
# ║  Copyright © 2026 Pictofeed, LLC. All rights reserved.               ║
# ╚══════════════════════════════════════════════════════════════════════╝
"""
Seqpad — segment-aware padding operators on a NumPy tensor engine.

A tensor packed along its leading dimension is split into segments by a
lengths vector.  ``AddPadding`` inserts fixed-width padding blocks around
every segment, ``RemovePadding`` strips them, and ``GatherPadding`` sums
them (the gradient of the padding vectors).

Usage::

    import seqpad as sp
    import seqpad.functional as F

    out, lengths_out = F.add_padding(x, lengths, padding_width=2)

    # or declaratively, through a workspace
    from seqpad import workspace
    workspace.feed_blob('x', x)
    workspace.run_operator_once(
        sp.create_operator('AddPadding', ['x'], ['y'], padding_width=2))
"""
from __future__ import annotations

import logging

__version__ = "0.1.0"
__author__ = "Pictofeed, LLC"

logging.getLogger(__name__).addHandler(logging.NullHandler())

# ── Errors ──
from .errors import (
    SeqpadError,
    ConfigError,
    ShapeMismatch,
    InvariantViolation,
    UnsupportedType,
)

# ── Core tensor class & factory functions ──
from .tensor import (
    Tensor,
    tensor,
    zeros,
)

# ── Dtype constants ──
from .dtype import (
    dtype,
    float32, float64, double,
    int32, int64, long,
)
# Override bool carefully (don't shadow builtin at module level for internal use)
from .dtype import bool as bool

# ── Autograd ──
from .autograd import (
    no_grad,
    is_grad_enabled,
    set_grad_enabled,
)

# ── Operators ──
from .layout import SegmentLayout
from .core import (
    OperatorDef,
    OpSchema,
    TensorTypes,
    create_operator,
    get_schema,
    registered_operators,
)
from .padding_ops import AddPaddingOp, RemovePaddingOp, GatherPaddingOp
from .gradients import (
    GradientRegistry,
    add_gradient_operators,
    get_gradient_name,
)
from .workspace import Workspace

# ── Sub-modules ──
from . import functional
from . import workspace
from . import utils

__all__ = [
    "__version__",
    "__author__",

    # Errors
    'SeqpadError', 'ConfigError', 'ShapeMismatch', 'InvariantViolation',
    'UnsupportedType',
    # Tensor
    'Tensor', 'tensor', 'zeros',
    # Dtypes
    'dtype', 'float32', 'float64', 'double', 'int32', 'int64', 'long', 'bool',
    # Autograd
    'no_grad', 'is_grad_enabled', 'set_grad_enabled',
    # Operators
    'SegmentLayout', 'OperatorDef', 'OpSchema', 'TensorTypes',
    'create_operator', 'get_schema', 'registered_operators',
    'AddPaddingOp', 'RemovePaddingOp', 'GatherPaddingOp',
    'GradientRegistry', 'add_gradient_operators', 'get_gradient_name',
    'Workspace',
    # Sub-modules
    'functional', 'workspace', 'utils',
]
