"""Dense state-vector simulation core.

This package provides:
- State: 2**n complex amplitudes, little-endian qubit order
- Gate descriptors (H, X, RX, RY, RZ, CNOT, CZ) and three in-place backends
  (serial, numpy, numba) sharing one dispatch table layout
- CircuitEngine: stateful handle with non-destructive shot measurement
- AmplitudeEncoder: classical vector -> normalized state
- EntanglementPattern / schedule: linear, circular and all-to-all CNOT layers
- VariationalCircuit: depth-layered RX/RY/RZ + entanglement ansatz
"""

from .errors import (
    QStateError,
    InvalidGateTarget,
    NotInitialized,
    InvalidQubitCount,
    DegenerateInput,
    ParameterShapeMismatch,
)
from .config import SimConfig
from .state import State, inner, fidelity, superpose, interfere
from .gates import Gate, GateKind, hadamard, pauli_x, rx, ry, rz, cnot, cz
from .circuit import Circuit, CircuitEngine, EngineStatus, apply_gate as apply_to_state
from .sampler import measure_qubits, marginal_probabilities, counts_to_features
from .encoding import AmplitudeEncoder, num_qubits_for
from .entanglement import EntanglementPattern, schedule, pairs, coupling_strengths
from .variational import VariationalCircuit
from .api import (
    create_circuit,
    apply_gate,
    apply_variational_layer,
    measure,
    encode_classical,
    decode_features,
    run_batch,
)

__all__ = [
    # Errors
    "QStateError", "InvalidGateTarget", "NotInitialized",
    "InvalidQubitCount", "DegenerateInput", "ParameterShapeMismatch",
    # Core
    "SimConfig",
    "State", "inner", "fidelity", "superpose", "interfere",
    "Gate", "GateKind", "hadamard", "pauli_x", "rx", "ry", "rz", "cnot", "cz",
    "Circuit", "CircuitEngine", "EngineStatus", "apply_to_state",
    "measure_qubits", "marginal_probabilities", "counts_to_features",
    "AmplitudeEncoder", "num_qubits_for",
    "EntanglementPattern", "schedule", "pairs", "coupling_strengths",
    "VariationalCircuit",
    # External interface
    "create_circuit", "apply_gate", "apply_variational_layer", "measure",
    "encode_classical", "decode_features", "run_batch",
]
