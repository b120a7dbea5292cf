# qstate/variational.py
from __future__ import annotations

from typing import List, Optional, Tuple

import numpy as np

from .circuit import Circuit, check_qubit_count, gate_table
from .entanglement import EntanglementPattern, schedule
from .errors import InvalidQubitCount, ParameterShapeMismatch
from .gates import Gate, rx, ry, rz
from .state import State


class VariationalCircuit:
    """Depth-layered rotation + entanglement ansatz.

    Structure per layer:
    - RX, RY, RZ on each qubit (angles from that layer's parameters)
    - CNOTs from the entanglement schedule for `pattern`

    Parameters have shape (depth, n_qubits, 3) with the last axis holding
    (rx, ry, rz). They are drawn uniformly from (-pi, pi] unless given, and
    only change through set_parameters; forward() reads them and nothing else.
    """

    def __init__(self, n_qubits: int, depth: int = 4, pattern="linear",
                 seed: Optional[int] = None, parameters: Optional[np.ndarray] = None):
        check_qubit_count(n_qubits)
        if depth < 1:
            raise ValueError(f"depth must be >= 1, got {depth}")
        self.n_qubits = int(n_qubits)
        self.depth = int(depth)
        self.pattern = EntanglementPattern.parse(pattern)
        self._entangle = schedule(self.n_qubits, self.pattern)
        if parameters is None:
            rng = np.random.default_rng(seed)
            # pi - U[0, 2pi) lies in (-pi, pi]
            self._params = np.pi - rng.uniform(0.0, 2.0 * np.pi, size=self.shape)
        else:
            self._params = self._checked(parameters)

    @property
    def shape(self) -> Tuple[int, int, int]:
        return (self.depth, self.n_qubits, 3)

    def n_params(self) -> int:
        return self.depth * self.n_qubits * 3

    def n_gates(self) -> int:
        return self.depth * (3 * self.n_qubits + len(self._entangle))

    @property
    def parameters(self) -> np.ndarray:
        return self._params.copy()

    def _checked(self, params) -> np.ndarray:
        arr = np.array(params, dtype=np.float64)
        if arr.shape != self.shape:
            raise ParameterShapeMismatch(f"expected parameters of shape {self.shape}, got {arr.shape}")
        if not np.all(np.isfinite(arr)):
            raise ValueError("parameters must be finite")
        return arr

    def set_parameters(self, params) -> None:
        self._params = self._checked(params)

    def layer_gates(self, layer: int) -> List[Gate]:
        angles = self._params[layer]
        out: List[Gate] = []
        for q in range(self.n_qubits):
            a_x, a_y, a_z = (float(a) for a in angles[q])
            out.extend((rx(q, a_x), ry(q, a_y), rz(q, a_z)))
        out.extend(self._entangle)
        return out

    def gates(self) -> List[Gate]:
        return [g for layer in range(self.depth) for g in self.layer_gates(layer)]

    def ops(self):
        return [g.as_tuple() for g in self.gates()]

    def forward(self, state: State, backend: Optional[str] = None) -> State:
        """Apply every layer to `state` in place and return it.

        `backend=None` uses the default numpy backend.
        """
        if state.n != self.n_qubits:
            raise InvalidQubitCount(f"state has {state.n} qubits, circuit {self.n_qubits}")
        table = gate_table(backend or "numpy")
        for g in self.gates():
            table[g.kind](state, g)
        return state

    def state(self, backend: Optional[str] = None) -> State:
        return self.forward(State.zero(self.n_qubits), backend=backend)

    def as_circuit(self) -> Circuit:
        return Circuit(self.n_qubits, self.ops())
