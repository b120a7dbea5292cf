# qstate/errors.py


class QStateError(Exception):
    """Base class for all simulator errors."""


class InvalidGateTarget(QStateError, ValueError):
    """Qubit index out of range, wrong arity, or control == target."""


class NotInitialized(QStateError, RuntimeError):
    """Operation on an engine that has no state yet."""


class InvalidQubitCount(QStateError, ValueError):
    """Qubit count below 1, above the configured maximum, or mismatched."""


class DegenerateInput(QStateError, ValueError):
    """Zero-norm vector where a normalized state is required."""


class ParameterShapeMismatch(QStateError, ValueError):
    pass
