"""Typed errors for programmer mistakes in the intake engine.

Unparseable input and malformed parts are NOT errors here: the shorthand
parser returns None and the confidence estimator degrades to its lowest band.
Only protocol violations raise.
"""

from enum import Enum


class ErrorCode(str, Enum):
    SESSION_STATE = "SESSION_STATE"
    SESSION_EMPTY = "SESSION_EMPTY"
    SESSION_UNKNOWN = "SESSION_UNKNOWN"
    PART_EXPORTED = "PART_EXPORTED"


class CutlistIntakeError(Exception):
    """Base class for all intake engine errors."""

    code: ErrorCode = ErrorCode.SESSION_STATE


class SessionError(CutlistIntakeError):
    """Accuracy session protocol violation."""


class SessionStateError(SessionError):
    """Operation not allowed in the session's current state."""

    code = ErrorCode.SESSION_STATE


class EmptySessionError(SessionError):
    """Finalize called before any original parts were recorded."""

    code = ErrorCode.SESSION_EMPTY


class UnknownSessionError(SessionError, KeyError):
    """Registry lookup for a session id that is not active."""

    code = ErrorCode.SESSION_UNKNOWN

    def __str__(self) -> str:
        # KeyError quotes its argument; keep the plain message
        return str(self.args[0]) if self.args else ""


class PartExportedError(CutlistIntakeError):
    """Mutation attempted on a part that was already exported."""

    code = ErrorCode.PART_EXPORTED


__all__ = [
    "ErrorCode",
    "CutlistIntakeError",
    "SessionError",
    "SessionStateError",
    "EmptySessionError",
    "UnknownSessionError",
    "PartExportedError",
]
