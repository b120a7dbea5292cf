# qstate/encoding.py
import logging
from dataclasses import dataclass
from typing import Iterable, List

import numpy as np

from .errors import DegenerateInput, InvalidQubitCount
from .state import State

logger = logging.getLogger(__name__)


def num_qubits_for(length: int) -> int:
    """Smallest n >= 1 with 2**n >= length."""
    n = 1
    while (1 << n) < length:
        n += 1
    return n


@dataclass(frozen=True)
class AmplitudeEncoder:
    """Amplitude encoding of a real vector into an n-qubit state.

    For input v of length L <= 2**n:
      psi[i] = v[i] / ||v||  (i < L),  0 otherwise

    followed by one renormalization pass against floating-point drift. An
    all-zero vector has no direction to encode and raises DegenerateInput.
    """
    n_qubits: int
    dtype: type = np.complex128

    def __post_init__(self):
        if self.n_qubits < 1:
            raise InvalidQubitCount(f"need at least 1 qubit, got {self.n_qubits}")

    def encode(self, x) -> State:
        v = np.asarray(x, dtype=np.float64).reshape(-1)
        N = 1 << self.n_qubits
        if v.size > N:
            raise ValueError(f"vector of length {v.size} does not fit in {self.n_qubits} qubits ({N} amplitudes)")
        if not np.all(np.isfinite(v)):
            raise ValueError("vector contains non-finite values")
        norm = float(np.linalg.norm(v))
        if norm == 0.0:
            raise DegenerateInput("cannot encode an all-zero vector")

        psi = np.zeros(N, dtype=self.dtype)
        psi[:v.size] = v / norm
        return State(self.n_qubits, psi).renormalize()

    def encode_batch(self, rows: Iterable) -> List[State]:
        # one independent buffer per row
        states = [self.encode(row) for row in rows]
        logger.debug("encoded batch of %d rows into %d-qubit states", len(states), self.n_qubits)
        return states
