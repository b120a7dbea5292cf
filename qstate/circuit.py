# qstate/circuit.py
import logging
from dataclasses import dataclass, replace
from enum import Enum
from typing import Dict, Iterable, List, Optional, Sequence, Tuple

import numpy as np

from .config import HARD_MAX_QUBITS, SimConfig
from .errors import InvalidQubitCount, NotInitialized
from .gates import Gate
from .sampler import measure_qubits
from .state import State

logger = logging.getLogger(__name__)

Op = Tuple[str, Tuple]  # e.g., ("H",(k,)) or ("CNOT",(c,t)) or ("RZ",(k,theta))


def gate_table(backend: str = "numpy") -> Dict:
    """GateKind -> apply function for one backend."""
    if backend == "serial":
        from .apply_serial import GATE_TABLE
    elif backend == "numpy":
        from .apply_numpy import GATE_TABLE
    elif backend == "numba":
        try:
            from .apply_numba import GATE_TABLE
        except ImportError as e:
            raise RuntimeError("Numba backend not available. Did you `pip install numba`?") from e
    else:
        raise NotImplementedError(f"Unknown backend: {backend}")
    return GATE_TABLE


def set_threads(backend: str, num_threads: Optional[int]):
    if num_threads is None or backend != "numba":
        return
    from .apply_numba import set_threads as _set
    _set(int(num_threads))


def apply_gate(state: State, gate: Gate, backend: str = "numpy") -> State:
    """Validate `gate` against `state` and apply it in place."""
    gate.validate(state.n)
    gate_table(backend)[gate.kind](state, gate)
    return state


def check_qubit_count(n: int, max_qubits: int = HARD_MAX_QUBITS):
    # checked before anything of size 2**n is allocated
    if not isinstance(n, (int, np.integer)) or isinstance(n, bool):
        raise InvalidQubitCount(f"qubit count must be an integer, got {n!r}")
    limit = min(int(max_qubits), HARD_MAX_QUBITS)
    if not (1 <= n <= limit):
        raise InvalidQubitCount(f"qubit count must be in [1, {limit}], got {n}")


@dataclass
class Circuit:
    n: int
    ops: List[Op]

    @staticmethod
    def empty(n:int) -> "Circuit":
        return Circuit(n, [])

    def h(self, k:int): self.ops.append(("H",(k,))); return self
    def x(self, k:int): self.ops.append(("X",(k,))); return self
    def cnot(self, c:int, t:int): self.ops.append(("CNOT",(c,t))); return self
    def cz(self, c:int, t:int): self.ops.append(("CZ",(c,t))); return self
    def rx(self, k:int, theta:float): self.ops.append(("RX",(k,theta))); return self
    def ry(self, k:int, theta:float): self.ops.append(("RY",(k,theta))); return self
    def rz(self, k:int, theta:float): self.ops.append(("RZ",(k,theta))); return self

    def append(self, gate: Gate):
        self.ops.append(gate.as_tuple()); return self

    def extend(self, ops: Iterable[Op]):
        self.ops.extend(ops); return self

    def gates(self) -> List[Gate]:
        return [Gate.from_tuple(op) for op in self.ops]

    def run(self, backend:str="numpy", dtype=np.complex128, check_norm=True, num_threads=None,
            check_norm_tol=1e-9, initial: Optional[State] = None) -> State:
        """Run on a fresh |0...0> (or a copy of `initial`) and return the final state."""
        check_qubit_count(self.n)
        table = gate_table(backend)
        set_threads(backend, num_threads)
        if initial is not None:
            if initial.n != self.n:
                raise InvalidQubitCount(f"circuit has {self.n} qubits, initial state {initial.n}")
            st = initial.copy()
        else:
            st = State.zero(self.n, dtype=dtype)

        # validate everything before touching the state
        gates = [g.validate(self.n) for g in self.gates()]
        for g in gates:
            table[g.kind](st, g)

        if check_norm:
            st.check_normalized(tol=check_norm_tol)
        return st


class EngineStatus(str, Enum):
    UNINITIALIZED = "uninitialized"
    READY = "ready"
    MEASURING = "measuring"


@dataclass
class EngineStats:
    gates_applied: int = 0
    measurements: int = 0
    shots_drawn: int = 0
    resets: int = 0


class CircuitEngine:
    """Stateful handle around one amplitude vector.

    UNINITIALIZED --initialize/load_state--> READY --measure--> MEASURING --> READY

    Measurement samples the current distribution and leaves the amplitudes
    untouched; it is not a projective collapse.
    """

    def __init__(self, config: Optional[SimConfig] = None):
        self.config = (config or SimConfig()).validate()
        self.status = EngineStatus.UNINITIALIZED
        self._stats = EngineStats()
        self._state: Optional[State] = None
        self._table = gate_table(self.config.backend)
        self._rng = np.random.default_rng(self.config.seed)
        set_threads(self.config.backend, self.config.num_threads)

    # ---------- lifecycle ----------

    @property
    def n(self) -> int:
        return self._require_state().n

    @property
    def state(self) -> State:
        return self._require_state()

    def amplitudes(self) -> np.ndarray:
        return self._require_state().psi.copy()

    def initialize(self, n: int) -> "CircuitEngine":
        check_qubit_count(n, self.config.max_qubits)
        self._state = State.zero(int(n))
        self.status = EngineStatus.READY
        logger.debug("engine initialized with %d qubits (%s backend)", n, self.config.backend)
        return self

    def load_state(self, state: State) -> "CircuitEngine":
        check_qubit_count(state.n, self.config.max_qubits)
        if state.psi.shape != (1 << state.n,):
            raise InvalidQubitCount(f"amplitude buffer of shape {state.psi.shape} does not match {state.n} qubits")
        # the engine owns its buffer; real input is promoted to complex
        dtype = np.result_type(state.psi.dtype, np.complex64)
        self._state = State(state.n, np.array(state.psi, dtype=dtype))
        self.status = EngineStatus.READY
        return self

    def reset(self) -> "CircuitEngine":
        n = self._require_state().n
        self._state = State.zero(n)
        self.status = EngineStatus.READY
        self._stats.resets += 1
        return self

    def _require_state(self) -> State:
        if self._state is None:
            raise NotInitialized("engine has no state; call initialize() first")
        return self._state

    def _require_ready(self) -> State:
        st = self._require_state()
        if self.status is not EngineStatus.READY:
            raise NotInitialized(f"engine is {self.status.value}, expected ready")
        return st

    # ---------- evolution ----------

    def apply_gate(self, gate: Gate) -> "CircuitEngine":
        st = self._require_ready()
        gate.validate(st.n)
        self._table[gate.kind](st, gate)
        self._stats.gates_applied += 1
        return self

    def apply_gates(self, gates: Iterable[Gate]) -> "CircuitEngine":
        for g in gates:
            self.apply_gate(g)
        return self

    def run(self, circuit: Circuit) -> "CircuitEngine":
        st = self._require_ready()
        if circuit.n != st.n:
            raise InvalidQubitCount(f"circuit has {circuit.n} qubits, engine {st.n}")
        gates = [g.validate(st.n) for g in circuit.gates()]
        return self.apply_gates(gates)

    def apply_variational_layer(self, vqc) -> "CircuitEngine":
        st = self._require_ready()
        if vqc.n_qubits != st.n:
            raise InvalidQubitCount(f"variational circuit has {vqc.n_qubits} qubits, engine {st.n}")
        vqc.forward(st, backend=self.config.backend)
        self._stats.gates_applied += vqc.n_gates()
        return self

    # ---------- readout ----------

    def measure(self, qubits: Sequence[int], shots: Optional[int] = None) -> Dict[str, int]:
        st = self._require_ready()
        shots = self.config.shots if shots is None else int(shots)
        self.status = EngineStatus.MEASURING
        try:
            counts = measure_qubits(st, qubits, shots, rng=self._rng)
        finally:
            self.status = EngineStatus.READY
        self._stats.measurements += 1
        self._stats.shots_drawn += shots
        return counts

    def probabilities(self) -> np.ndarray:
        return self._require_state().probabilities()

    def stats(self) -> EngineStats:
        """Snapshot of the operation counters."""
        return replace(self._stats)
