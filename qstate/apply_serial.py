# qstate/apply_serial.py
import numpy as np
from .state import State
from .gates import Gate, GateKind
from . import gates as G

def apply_single_qubit(state: State, U2: np.ndarray, k: int):
    """Apply 2x2 gate U2 to qubit k (little-endian: bit k)."""
    psi = state.psi
    assert U2.shape == (2,2)
    u00, u01, u10, u11 = complex(U2[0,0]), complex(U2[0,1]), complex(U2[1,0]), complex(U2[1,1])
    N = psi.shape[0]
    step = 1 << k
    block = step << 1
    # iterate blocks of size 2^(k+1), update pairs (i0, i1=i0+step)
    for base in range(0, N, block):
        for off in range(step):
            i0 = base + off
            i1 = i0 + step
            a0 = psi[i0]
            a1 = psi[i1]
            psi[i0] = u00*a0 + u01*a1
            psi[i1] = u10*a0 + u11*a1

def apply_phase(state: State, phase: complex, k: int):
    """Multiply every amplitude with bit k set by `phase`; bit-clear ones are not touched."""
    psi = state.psi
    N = psi.shape[0]
    step = 1 << k
    block = step << 1
    for base in range(step, N, block):
        for off in range(step):
            psi[base + off] *= phase

def apply_H(state: State, gate: Gate):
    (k,) = gate.qubits
    s = np.sqrt(0.5)
    psi = state.psi
    N = psi.shape[0]
    step = 1 << k
    block = step << 1
    for base in range(0, N, block):
        for off in range(step):
            i0 = base + off
            i1 = i0 + step
            a0 = psi[i0]
            a1 = psi[i1]
            psi[i0] = (a0 + a1) * s
            psi[i1] = (a0 - a1) * s

def apply_X(state: State, gate: Gate):
    (k,) = gate.qubits
    psi = state.psi
    N = psi.shape[0]
    step = 1 << k
    block = step << 1
    for base in range(0, N, block):
        for off in range(step):
            i0 = base + off
            i1 = i0 + step
            a0 = psi[i0]
            psi[i0] = psi[i1]
            psi[i1] = a0

def apply_RX(state: State, gate: Gate):
    apply_single_qubit(state, G.RX(gate.angle), gate.qubits[0])

def apply_RY(state: State, gate: Gate):
    apply_single_qubit(state, G.RY(gate.angle), gate.qubits[0])

def apply_RZ(state: State, gate: Gate):
    apply_phase(state, G.rz_phase(gate.angle), gate.qubits[0])

def apply_CNOT(state: State, gate: Gate):
    control, target = gate.qubits
    psi = state.psi
    N = psi.shape[0]
    mc = 1 << control
    mt = 1 << target
    lo, hi = min(control, target), max(control, target)
    step_lo = 1 << lo
    # iterate quads by zeroing both bits; each (c=1,t=0)/(c=1,t=1) pair once
    for base in range(0, N, 1 << (hi+1)):
        for sub in range(0, 1 << hi, step_lo << 1):
            for off in range(step_lo):
                i00 = base + sub + off           # c=0,t=0
                i10 = i00 | mc                    # c=1,t=0
                i11 = i10 | mt                    # c=1,t=1
                a10 = psi[i10]
                psi[i10] = psi[i11]
                psi[i11] = a10

def apply_CZ(state: State, gate: Gate):
    control, target = gate.qubits
    psi = state.psi
    N = psi.shape[0]
    both = (1 << control) | (1 << target)
    for i in range(N):
        if (i & both) == both:
            psi[i] = -psi[i]

GATE_TABLE = {
    GateKind.H: apply_H,
    GateKind.X: apply_X,
    GateKind.RX: apply_RX,
    GateKind.RY: apply_RY,
    GateKind.RZ: apply_RZ,
    GateKind.CNOT: apply_CNOT,
    GateKind.CZ: apply_CZ,
}
