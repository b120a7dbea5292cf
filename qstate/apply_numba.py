# qstate/apply_numba.py
import numpy as np
from numba import config, njit, prange, set_num_threads, get_num_threads
from .state import State
from .gates import Gate, GateKind
from . import gates as G

# ---------- low-level kernels (Numba JIT) ----------
# Every prange iteration owns a disjoint set of indices, so no pair is
# touched by two threads.

@njit(parallel=True, fastmath=True)
def _single_qubit_kernel(psi, U2, k):
    N = psi.shape[0]
    step = 1 << k
    block = step << 1
    nblocks = N // block
    for b in prange(nblocks):
        base = b * block
        for off in range(step):
            i0 = base + off
            i1 = i0 + step
            a0 = psi[i0]
            a1 = psi[i1]
            psi[i0] = U2[0,0]*a0 + U2[0,1]*a1
            psi[i1] = U2[1,0]*a0 + U2[1,1]*a1

@njit(parallel=True)
def _phase_kernel(psi, phase, k):
    N = psi.shape[0]
    step = 1 << k
    block = step << 1
    nblocks = N // block
    for b in prange(nblocks):
        base = b * block + step
        for off in range(step):
            psi[base + off] = psi[base + off] * phase

@njit(parallel=True)
def _swap_kernel(psi, k):
    N = psi.shape[0]
    step = 1 << k
    block = step << 1
    nblocks = N // block
    for b in prange(nblocks):
        base = b * block
        for off in range(step):
            i0 = base + off
            i1 = i0 + step
            a0 = psi[i0]
            psi[i0] = psi[i1]
            psi[i1] = a0

@njit(parallel=True)
def _cnot_kernel(psi, control, target):
    N = psi.shape[0]
    mc = 1 << control
    mt = 1 << target
    # only bases with control and target bits clear -> disjoint pairs
    for base in prange(N):
        if (base & mc) == 0 and (base & mt) == 0:
            i10 = base | mc          # control=1, target=0
            i11 = i10 | mt           # control=1, target=1
            a10 = psi[i10]
            psi[i10] = psi[i11]
            psi[i11] = a10

@njit(parallel=True)
def _cz_kernel(psi, control, target):
    N = psi.shape[0]
    both = (1 << control) | (1 << target)
    for i in prange(N):
        if (i & both) == both:
            psi[i] = -psi[i]

# ---------- user-facing apply helpers ----------

def max_threads() -> int:
    return config.NUMBA_NUM_THREADS

def set_threads(n: int):
    # numba refuses counts above the pool size it was started with
    set_num_threads(max(1, min(int(n), max_threads())))

def get_threads() -> int:
    return get_num_threads()

def apply_H(state: State, gate: Gate):
    _single_qubit_kernel(state.psi, G.H(state.dtype), gate.qubits[0])

def apply_X(state: State, gate: Gate):
    _swap_kernel(state.psi, gate.qubits[0])

def apply_RX(state: State, gate: Gate):
    _single_qubit_kernel(state.psi, G.RX(gate.angle, state.dtype), gate.qubits[0])

def apply_RY(state: State, gate: Gate):
    _single_qubit_kernel(state.psi, G.RY(gate.angle, state.dtype), gate.qubits[0])

def apply_RZ(state: State, gate: Gate):
    phase = state.dtype.type(G.rz_phase(gate.angle))
    _phase_kernel(state.psi, phase, gate.qubits[0])

def apply_CNOT(state: State, gate: Gate):
    _cnot_kernel(state.psi, *gate.qubits)

def apply_CZ(state: State, gate: Gate):
    _cz_kernel(state.psi, *gate.qubits)

GATE_TABLE = {
    GateKind.H: apply_H,
    GateKind.X: apply_X,
    GateKind.RX: apply_RX,
    GateKind.RY: apply_RY,
    GateKind.RZ: apply_RZ,
    GateKind.CNOT: apply_CNOT,
    GateKind.CZ: apply_CZ,
}
