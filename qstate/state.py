# qstate/state.py
import logging
from dataclasses import dataclass
from typing import Sequence

import numpy as np

from .errors import DegenerateInput, InvalidQubitCount

logger = logging.getLogger(__name__)


@dataclass
class State:
    n: int
    psi: np.ndarray  # shape (2**n,), dtype complex128 (complex64 for benchmarks)

    @staticmethod
    def zero(n: int, dtype=np.complex128) -> "State":
        N = 1 << n
        psi = np.zeros(N, dtype=dtype)
        psi[0] = 1.0 + 0.0j
        return State(n=n, psi=psi)

    @property
    def dtype(self):
        return self.psi.dtype

    def norm2(self) -> float:
        return float(np.vdot(self.psi, self.psi).real)

    def check_normalized(self, tol=1e-9):
        n2 = self.norm2()
        if not (abs(1.0 - n2) <= tol):
            raise AssertionError(f"Normalization failed: ||psi||^2={n2}")

    def probabilities(self) -> np.ndarray:
        return self.psi.real ** 2 + self.psi.imag ** 2

    def renormalize(self) -> "State":
        """Divide in place by the actual L2 norm.

        Only for non-unitary preparation steps (encoding, superposition);
        unitary gates keep the norm on their own.
        """
        norm = np.sqrt(self.norm2())
        if not np.isfinite(norm) or norm == 0.0:
            raise DegenerateInput("cannot renormalize a zero-norm state")
        if norm != 1.0:
            logger.debug("renormalizing %d-qubit state, drift=%.3e", self.n, abs(1.0 - norm))
            self.psi /= norm
        return self

    def copy(self) -> "State":
        return State(self.n, self.psi.copy())

    def as_numpy(self) -> np.ndarray:
        return self.psi


def _same_width(states: Sequence[State]) -> int:
    if not states:
        raise InvalidQubitCount("need at least one state")
    n = states[0].n
    for st in states[1:]:
        if st.n != n:
            raise InvalidQubitCount(f"qubit counts differ: {n} vs {st.n}")
    return n


def inner(a: State, b: State) -> complex:
    _same_width([a, b])
    return complex(np.vdot(a.psi, b.psi))


def fidelity(a: State, b: State) -> float:
    return float(abs(inner(a, b)) ** 2)


def superpose(states: Sequence[State]) -> State:
    """Equal-weight superposition sum(|psi_k>)/sqrt(K), renormalized."""
    n = _same_width(states)
    weight = 1.0 / np.sqrt(len(states))
    psi = np.zeros(1 << n, dtype=np.result_type(*[st.dtype for st in states]))
    for st in states:
        psi += weight * st.psi
    return State(n, psi).renormalize()


def interfere(a: State, b: State) -> State:
    """(|a> + |b>)/sqrt(2), renormalized. Raises DegenerateInput if they cancel."""
    n = _same_width([a, b])
    psi = (a.psi + b.psi) / np.sqrt(2.0)
    return State(n, psi).renormalize()
