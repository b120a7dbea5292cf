# qstate/apply_numpy.py
import numpy as np
from .state import State
from .gates import Gate, GateKind
from . import gates as G

# ----------------------------- views -----------------------------

def _pair_view(state: State, k: int) -> np.ndarray:
    """View psi as (right, 2, left) where the middle axis is bit k.

    psi3[r, 0, l] and psi3[r, 1, l] are exactly the pair (i, i | 1<<k).
    """
    left  = 1 << k
    right = 1 << (state.n - k - 1)
    return state.psi.reshape(right, 2, left)

def _quad_view(state: State, k: int, l: int) -> np.ndarray:
    """View psi as (outer, 2, mid, 2, inner) with axis 1 = bit hi, axis 3 = bit lo."""
    lo, hi = min(k, l), max(k, l)
    inner = 1 << lo
    mid   = 1 << (hi - lo - 1)
    outer = 1 << (state.n - hi - 1)
    return state.psi.reshape(outer, 2, mid, 2, inner)

def _slot(bit_hi: int, bit_lo: int):
    return (slice(None), bit_hi, slice(None), bit_lo, slice(None))

# -------------------------- core kernels --------------------------

def apply_single_qubit(state: State, U2: np.ndarray, k: int):
    """Apply a 2x2 gate U2 to qubit k, in place."""
    psi3 = _pair_view(state, k)
    U2 = np.asarray(U2, dtype=state.dtype)
    # out[r, a, l] = sum_b U2[a,b] * psi3[r, b, l]
    psi3[:] = np.einsum('ab,rbl->ral', U2, psi3)

def apply_H(state: State, gate: Gate):
    apply_single_qubit(state, G.H(state.dtype), gate.qubits[0])

def apply_X(state: State, gate: Gate):
    psi3 = _pair_view(state, gate.qubits[0])
    a0 = psi3[:, 0, :].copy()
    psi3[:, 0, :] = psi3[:, 1, :]
    psi3[:, 1, :] = a0

def apply_RX(state: State, gate: Gate):
    apply_single_qubit(state, G.RX(gate.angle, state.dtype), gate.qubits[0])

def apply_RY(state: State, gate: Gate):
    apply_single_qubit(state, G.RY(gate.angle, state.dtype), gate.qubits[0])

def apply_RZ(state: State, gate: Gate):
    psi3 = _pair_view(state, gate.qubits[0])
    psi3[:, 1, :] *= G.rz_phase(gate.angle)

def apply_CNOT(state: State, gate: Gate):
    control, target = gate.qubits
    psi5 = _quad_view(state, control, target)
    if control > target:
        a, b = _slot(1, 0), _slot(1, 1)
    else:
        a, b = _slot(0, 1), _slot(1, 1)
    tmp = psi5[a].copy()
    psi5[a] = psi5[b]
    psi5[b] = tmp

def apply_CZ(state: State, gate: Gate):
    psi5 = _quad_view(state, *gate.qubits)
    psi5[_slot(1, 1)] *= -1

GATE_TABLE = {
    GateKind.H: apply_H,
    GateKind.X: apply_X,
    GateKind.RX: apply_RX,
    GateKind.RY: apply_RY,
    GateKind.RZ: apply_RZ,
    GateKind.CNOT: apply_CNOT,
    GateKind.CZ: apply_CZ,
}
