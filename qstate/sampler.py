# qstate/sampler.py
"""Shot sampling from a state's probability distribution.

Measurement here is *non-destructive*: the amplitudes are read, never
collapsed, so the same state can be sampled again or evolved further. Callers
that expect textbook collapse semantics must re-prepare the state themselves.
"""
import logging
from typing import Dict, Optional, Sequence

import numpy as np

from .errors import InvalidGateTarget
from .state import State

logger = logging.getLogger(__name__)


def probabilities(state: State) -> np.ndarray:
    """Per-index probability real**2 + imag**2."""
    return state.probabilities()


def _check_qubits(state: State, qubits: Sequence[int]):
    for q in qubits:
        if not (0 <= q < state.n):
            raise InvalidGateTarget(f"qubit {q} out of range for {state.n} qubits")


def sample_indices(probs: np.ndarray, shots: int, rng: np.random.Generator) -> np.ndarray:
    """Draw `shots` basis indices by cumulative-sum search over uniform draws in [0, 1)."""
    cdf = np.cumsum(probs)
    draws = rng.random(shots)
    idx = np.searchsorted(cdf, draws, side="right")
    # a draw past the final cumulative mass (float truncation) falls back to
    # the last index that carries any probability
    overshoot = idx >= probs.shape[0]
    if overshoot.any():
        nonzero = np.flatnonzero(probs > 0)
        last = int(nonzero[-1]) if nonzero.size else probs.shape[0] - 1
        logger.debug("clamped %d of %d draws to index %d", int(overshoot.sum()), shots, last)
        idx[overshoot] = last
    return idx


def measure_qubits(state: State, qubits: Sequence[int], shots: int,
                   rng: Optional[np.random.Generator] = None,
                   seed: Optional[int] = None) -> Dict[str, int]:
    """Counts per bitstring; char m of each key is the bit of qubits[m]."""
    qubits = [int(q) for q in qubits]
    _check_qubits(state, qubits)
    if shots < 0:
        raise ValueError("shots must be >= 0")
    if shots == 0:
        return {}
    if rng is None:
        rng = np.random.default_rng(seed)

    outcomes = sample_indices(probabilities(state), shots, rng)
    if not qubits:
        return {"": int(shots)}

    # pack requested bits into an integer key (first requested qubit is the
    # leading character), then tally
    m = len(qubits)
    keys = np.zeros(shots, dtype=np.int64)
    for pos, q in enumerate(qubits):
        keys |= ((outcomes.astype(np.int64) >> q) & 1) << (m - 1 - pos)
    uniq, tallies = np.unique(keys, return_counts=True)
    return {format(int(key), f"0{m}b"): int(c) for key, c in zip(uniq, tallies)}


def marginal_probabilities(state: State, qubits: Sequence[int]) -> Dict[str, float]:
    """Exact distribution that measure_qubits samples from."""
    qubits = [int(q) for q in qubits]
    _check_qubits(state, qubits)
    probs = probabilities(state)
    idx = np.arange(probs.shape[0], dtype=np.int64)
    out: Dict[str, float] = {}
    for i in np.flatnonzero(probs > 0):
        key = "".join(str((int(idx[i]) >> q) & 1) for q in qubits)
        out[key] = out.get(key, 0.0) + float(probs[i])
    return out


def counts_to_features(counts: Dict[str, int], shots: int, dim: int) -> np.ndarray:
    """Flatten counts into a fixed-size feature vector.

    For the k-th outcome in ascending bitstring order: features[2k] is the
    bitstring's value scaled to [0, 1), features[2k+1] its observed
    frequency. Unused slots stay 0; outcomes that do not fit are dropped.
    """
    features = np.zeros(dim, dtype=np.float64)
    if shots <= 0:
        return features
    idx = 0
    for bitstring, count in sorted(counts.items()):
        if idx >= dim:
            break
        width = len(bitstring)
        value = int(bitstring, 2) if width else 0
        features[idx] = value / float(1 << width)
        if idx + 1 < dim:
            features[idx + 1] = count / shots
        idx += 2
    return features
