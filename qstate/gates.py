# qstate/gates.py
from dataclasses import dataclass
from enum import Enum
from typing import Optional, Tuple

import numpy as np

from .errors import InvalidGateTarget


class GateKind(str, Enum):
    H = "H"
    X = "X"
    RX = "RX"
    RY = "RY"
    RZ = "RZ"
    CNOT = "CNOT"
    CZ = "CZ"


SINGLE_QUBIT = frozenset({GateKind.H, GateKind.X, GateKind.RX, GateKind.RY, GateKind.RZ})
TWO_QUBIT = frozenset({GateKind.CNOT, GateKind.CZ})
ROTATIONS = frozenset({GateKind.RX, GateKind.RY, GateKind.RZ})


@dataclass(frozen=True)
class Gate:
    """One gate invocation: kind, target qubit(s), optional angle.

    Two-qubit gates list (control, target).
    """
    kind: GateKind
    qubits: Tuple[int, ...]
    angle: Optional[float] = None

    @property
    def arity(self) -> int:
        return 2 if self.kind in TWO_QUBIT else 1

    def validate(self, n: int) -> "Gate":
        if len(self.qubits) != self.arity:
            raise InvalidGateTarget(
                f"{self.kind.value} takes {self.arity} qubit(s), got {self.qubits}")
        for q in self.qubits:
            if not isinstance(q, (int, np.integer)) or isinstance(q, bool):
                raise InvalidGateTarget(
                    f"{self.kind.value}: qubit index must be an integer, got {q!r}")
            if not (0 <= q < n):
                raise InvalidGateTarget(
                    f"{self.kind.value}: qubit {q} out of range for {n} qubits")
        if self.arity == 2 and self.qubits[0] == self.qubits[1]:
            raise InvalidGateTarget("control and target must differ")
        if self.kind in ROTATIONS and self.angle is None:
            raise ValueError(f"{self.kind.value} needs an angle")
        return self

    def as_tuple(self):
        if self.kind in ROTATIONS:
            return (self.kind.value, (self.qubits[0], self.angle))
        return (self.kind.value, self.qubits)

    @staticmethod
    def from_tuple(op) -> "Gate":
        """Build from a Circuit op, e.g. ("H",(k,)), ("CNOT",(c,t)), ("RZ",(k,theta))."""
        name, args = op
        if isinstance(name, GateKind):
            kind = name
        else:
            try:
                kind = GateKind(str(name).upper())
            except ValueError:
                raise ValueError(f"Unknown gate {name}") from None
        if kind in ROTATIONS:
            k, theta = args
            return Gate(kind, (int(k),), float(theta))
        return Gate(kind, tuple(int(a) for a in args))


def hadamard(k: int) -> Gate: return Gate(GateKind.H, (k,))
def pauli_x(k: int) -> Gate: return Gate(GateKind.X, (k,))
def rx(k: int, theta: float) -> Gate: return Gate(GateKind.RX, (k,), float(theta))
def ry(k: int, theta: float) -> Gate: return Gate(GateKind.RY, (k,), float(theta))
def rz(k: int, theta: float) -> Gate: return Gate(GateKind.RZ, (k,), float(theta))
def cnot(c: int, t: int) -> Gate: return Gate(GateKind.CNOT, (c, t))
def cz(c: int, t: int) -> Gate: return Gate(GateKind.CZ, (c, t))


# ---------- 2x2 / 4x4 matrices (little-endian, target is bit k) ----------

def H(dtype=np.complex128) -> np.ndarray:
    s = np.sqrt(0.5)
    return np.array([[s, s],
                     [s, -s]], dtype=dtype)

def X(dtype=np.complex128) -> np.ndarray:
    return np.array([[0, 1],
                     [1, 0]], dtype=dtype)

def RX(theta: float, dtype=np.complex128) -> np.ndarray:
    c = np.cos(theta/2.0)
    s = -1j*np.sin(theta/2.0)
    return np.array([[c, s],
                     [s, c]], dtype=dtype)

def RY(theta: float, dtype=np.complex128) -> np.ndarray:
    c = np.cos(theta/2.0)
    s = np.sin(theta/2.0)
    return np.array([[c, -s],
                     [s, c]], dtype=dtype)

def RZ(theta: float, dtype=np.complex128) -> np.ndarray:
    # phase on |1> only; |0> component is left untouched
    return np.array([[1, 0],
                     [0, np.exp(0.5j*theta)]], dtype=dtype)

def rz_phase(theta: float) -> complex:
    return complex(np.exp(0.5j*theta))

def CNOT(dtype=np.complex128) -> np.ndarray:
    # 4x4 in order 00,01,10,11 (target is LSB, control is MSB)
    mat = np.eye(4, dtype=dtype)
    # swap |10> <-> |11>
    mat[2,2] = 0; mat[3,3] = 0
    mat[2,3] = 1; mat[3,2] = 1
    return mat

def CZ(dtype=np.complex128) -> np.ndarray:
    mat = np.eye(4, dtype=dtype)
    mat[3,3] = -1
    return mat


def matrix(gate: Gate, dtype=np.complex128) -> np.ndarray:
    """Dense matrix for a gate (2x2, or 4x4 with control as the high bit)."""
    k = gate.kind
    if k is GateKind.H: return H(dtype)
    if k is GateKind.X: return X(dtype)
    if k is GateKind.RX: return RX(gate.angle, dtype)
    if k is GateKind.RY: return RY(gate.angle, dtype)
    if k is GateKind.RZ: return RZ(gate.angle, dtype)
    if k is GateKind.CNOT: return CNOT(dtype)
    return CZ(dtype)
