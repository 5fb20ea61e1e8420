# ╔══════════════════════════════════════════════════════════════════════╗
# ║  Seqpad — Segment Padding Operators                                  ║
# ║  Copyright © 2026 Pictofeed, LLC. All rights reserved.               ║
# ╚══════════════════════════════════════════════════════════════════════╝
"""Exception types raised by operators and the operator framework.

Every error is fatal to the single operator invocation that raised it;
nothing is written to the invocation's outputs.
"""
from __future__ import annotations


class SeqpadError(Exception):
    """Base class for all seqpad errors."""


class ConfigError(SeqpadError, ValueError):
    """Bad operator configuration: negative width, arity, unknown type."""


class ShapeMismatch(SeqpadError, ValueError):
    """A tensor does not have the shape an operator requires."""


class InvariantViolation(SeqpadError, RuntimeError):
    """Segment lengths are inconsistent with the data they describe."""


class UnsupportedType(SeqpadError, TypeError):
    """Element type outside the operator's dispatch set."""
