# qstate/entanglement.py
from enum import Enum
from typing import List, Tuple, Union

import numpy as np

from .errors import InvalidQubitCount
from .gates import Gate, cnot


class EntanglementPattern(str, Enum):
    LINEAR = "linear"
    CIRCULAR = "circular"
    ALL_TO_ALL = "all-to-all"

    @classmethod
    def parse(cls, value: Union[str, "EntanglementPattern"]) -> "EntanglementPattern":
        if isinstance(value, cls):
            return value
        key = str(value).strip().lower().replace("_", "-")
        try:
            return cls(key)
        except ValueError:
            raise ValueError(f"pattern must be linear|circular|all-to-all, got {value!r}") from None


def pairs(n: int, pattern) -> List[Tuple[int, int]]:
    """Ordered (control, target) pairs for one entanglement layer."""
    if n < 1:
        raise InvalidQubitCount(f"need at least 1 qubit, got {n}")
    pattern = EntanglementPattern.parse(pattern)
    if pattern is EntanglementPattern.ALL_TO_ALL:
        return [(i, j) for i in range(n) for j in range(i + 1, n)]
    out = [(i, i + 1) for i in range(n - 1)]
    # a single qubit has nothing to wrap around to
    if pattern is EntanglementPattern.CIRCULAR and n >= 2:
        out.append((n - 1, 0))
    return out


def schedule(n: int, pattern) -> List[Gate]:
    return [cnot(c, t) for c, t in pairs(n, pattern)]


def coupling_strengths(n: int) -> np.ndarray:
    """Proximity coupling exp(-|i-j|/2) between qubits, zero diagonal."""
    idx = np.arange(n)
    dist = np.abs(idx[:, None] - idx[None, :])
    out = np.exp(-dist / 2.0)
    np.fill_diagonal(out, 0.0)
    return out
