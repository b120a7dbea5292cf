# qstate/api.py
"""encode -> run circuit -> measure, for callers outside the simulator.

Every call takes an explicit handle; there is no shared simulator instance.
"""
import logging
from concurrent.futures import ThreadPoolExecutor
from typing import Callable, Dict, List, Optional, Sequence, TypeVar

import numpy as np

from .circuit import CircuitEngine, check_qubit_count
from .config import SimConfig
from .encoding import AmplitudeEncoder
from .gates import Gate
from .sampler import counts_to_features
from .variational import VariationalCircuit

logger = logging.getLogger(__name__)

T = TypeVar("T")


def create_circuit(n: int, config: Optional[SimConfig] = None) -> CircuitEngine:
    return CircuitEngine(config).initialize(n)


def apply_gate(handle: CircuitEngine, gate: Gate) -> CircuitEngine:
    return handle.apply_gate(gate)


def apply_variational_layer(handle: CircuitEngine, vqc: VariationalCircuit) -> CircuitEngine:
    return handle.apply_variational_layer(vqc)


def measure(handle: CircuitEngine, qubits: Sequence[int], shots: Optional[int] = None) -> Dict[str, int]:
    return handle.measure(qubits, shots)


def encode_classical(vector, n: int, config: Optional[SimConfig] = None) -> CircuitEngine:
    engine = CircuitEngine(config)
    check_qubit_count(n, engine.config.max_qubits)
    return engine.load_state(AmplitudeEncoder(n).encode(vector))


def decode_features(handle: CircuitEngine, shots: Optional[int] = None,
                    dim: Optional[int] = None) -> np.ndarray:
    """Measure every qubit and flatten the counts into a feature vector."""
    n = handle.n
    shots = handle.config.shots if shots is None else int(shots)
    if dim is None:
        dim = handle.config.feature_dim or 2 * (1 << n)
    counts = handle.measure(list(range(n)), shots)
    return counts_to_features(counts, shots, dim)


def run_batch(rows: Sequence, n: int, fn: Callable[[CircuitEngine], T],
              config: Optional[SimConfig] = None, workers: int = 1) -> List[T]:
    """Encode each row into its own engine and apply `fn` to it.

    Engines share nothing, so rows can run on separate threads. With a fixed
    seed each row gets its own derived seed, keeping results reproducible
    regardless of scheduling.
    """
    config = (config or SimConfig()).validate()
    seeds: List[Optional[int]]
    if config.seed is None:
        seeds = [None] * len(rows)
    else:
        seeds = [int(s) for s in np.random.SeedSequence(config.seed).generate_state(len(rows))]

    def _one(i: int) -> T:
        return fn(encode_classical(rows[i], n, config.with_overrides(seed=seeds[i])))

    if workers <= 1:
        return [_one(i) for i in range(len(rows))]
    logger.debug("running batch of %d rows on %d workers", len(rows), workers)
    with ThreadPoolExecutor(max_workers=workers) as pool:
        return list(pool.map(_one, range(len(rows))))
