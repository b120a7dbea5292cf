# qstate/tests/test_engine_api.py
import numpy as np
import pytest
import qstate
from qstate import (
    Circuit,
    CircuitEngine,
    DegenerateInput,
    EngineStatus,
    InvalidGateTarget,
    InvalidQubitCount,
    NotInitialized,
    SimConfig,
    State,
    VariationalCircuit,
    cnot,
    hadamard,
    rx,
    rz,
)

def test_hadamard_scenario():
    h = qstate.create_circuit(1, SimConfig(seed=1234))
    qstate.apply_gate(h, hadamard(0))
    counts = qstate.measure(h, [0], 10000)
    assert sum(counts.values()) == 10000
    assert abs(counts["0"] - 5000) < 150
    assert abs(counts["1"] - 5000) < 150

def test_encode_then_measure_is_deterministic():
    h = qstate.encode_classical([1, 0, 0, 0], 2)
    assert qstate.measure(h, [0, 1], 1000) == {"00": 1000}

def test_encode_degenerate():
    with pytest.raises(DegenerateInput):
        qstate.encode_classical([0, 0, 0, 0], 2)

@pytest.mark.parametrize("n", [0, -1, 21])
def test_bad_qubit_counts(n):
    with pytest.raises(InvalidQubitCount):
        qstate.create_circuit(n)

def test_configured_max_qubits():
    with pytest.raises(InvalidQubitCount):
        qstate.create_circuit(5, SimConfig(max_qubits=4))
    with pytest.raises(InvalidQubitCount):
        qstate.encode_classical([1.0], 5, SimConfig(max_qubits=4))
    assert qstate.create_circuit(4, SimConfig(max_qubits=4)).n == 4

def test_non_integer_qubit_count():
    with pytest.raises(InvalidQubitCount):
        qstate.create_circuit(2.5)

def test_not_initialized():
    eng = CircuitEngine()
    assert eng.status is EngineStatus.UNINITIALIZED
    with pytest.raises(NotInitialized):
        eng.apply_gate(hadamard(0))
    with pytest.raises(NotInitialized):
        eng.measure([0], 10)
    with pytest.raises(NotInitialized):
        eng.reset()
    with pytest.raises(NotInitialized):
        eng.n

def test_lifecycle():
    eng = CircuitEngine(SimConfig(seed=0)).initialize(2)
    assert eng.status is EngineStatus.READY
    eng.apply_gate(hadamard(0)).apply_gate(cnot(0, 1))
    before = eng.amplitudes()
    counts = eng.measure([0, 1], 500)
    assert set(counts) <= {"00", "11"}
    assert eng.status is EngineStatus.READY
    assert np.array_equal(eng.amplitudes(), before)
    eng.reset()
    assert np.array_equal(eng.amplitudes(), [1, 0, 0, 0])
    assert eng.n == 2
    assert eng.stats().gates_applied == 2
    assert eng.stats().measurements == 1
    assert eng.stats().shots_drawn == 500
    assert eng.stats().resets == 1

def test_status_restored_after_failed_measure():
    eng = CircuitEngine().initialize(1)
    with pytest.raises(InvalidGateTarget):
        eng.measure([3], 10)
    assert eng.status is EngineStatus.READY
    eng.apply_gate(hadamard(0))

def test_default_shots_from_config():
    eng = CircuitEngine(SimConfig(shots=321)).initialize(1)
    assert sum(eng.measure([0]).values()) == 321

def test_engine_rejects_bad_gate():
    eng = CircuitEngine().initialize(2)
    with pytest.raises(InvalidGateTarget):
        eng.apply_gate(cnot(0, 0))
    with pytest.raises(InvalidGateTarget):
        eng.apply_gate(rz(2, 0.1))

def test_run_circuit_on_engine():
    eng = CircuitEngine().initialize(2)
    eng.run(Circuit.empty(2).h(0).cnot(0, 1))
    assert np.allclose(eng.probabilities(), [0.5, 0, 0, 0.5])
    with pytest.raises(InvalidQubitCount):
        eng.run(Circuit.empty(3).h(0))
    with pytest.raises(InvalidGateTarget):
        eng.run(Circuit.empty(2).h(5))
    # rejected circuit applied nothing
    assert np.allclose(eng.probabilities(), [0.5, 0, 0, 0.5])

@pytest.mark.parametrize("backend", ["serial", "numpy", "numba"])
def test_variational_layer(backend):
    vqc = VariationalCircuit(3, depth=2, pattern="circular", seed=4)
    h = qstate.create_circuit(3, SimConfig(backend=backend))
    qstate.apply_variational_layer(h, vqc)
    assert np.allclose(h.amplitudes(), vqc.state().psi, atol=1e-9, rtol=0)
    assert h.stats().gates_applied == vqc.n_gates()
    with pytest.raises(InvalidQubitCount):
        qstate.apply_variational_layer(qstate.create_circuit(2), vqc)

def test_decode_features():
    h = qstate.encode_classical([0, 0, 0, 1], 2, SimConfig(seed=0))
    f = qstate.decode_features(h, shots=100)
    # |11> measured as "11" -> value 3/4, frequency 1
    assert f.shape == (8,)
    assert np.allclose(f[:2], [0.75, 1.0])
    assert not f[2:].any()
    assert qstate.decode_features(h, shots=10, dim=1).shape == (1,)

def test_run_batch_reproducible_and_thread_safe():
    rows = np.random.default_rng(0).normal(size=(6, 4))
    cfg = SimConfig(seed=99)
    fn = lambda h: h.measure([0, 1], 200)
    serial = qstate.run_batch(rows, 2, fn, cfg, workers=1)
    threaded = qstate.run_batch(rows, 2, fn, cfg, workers=3)
    assert serial == threaded
    assert all(sum(c.values()) == 200 for c in serial)

def test_handles_are_independent():
    a = qstate.create_circuit(1)
    b = qstate.create_circuit(1)
    a.apply_gate(hadamard(0))
    assert np.array_equal(b.amplitudes(), [1, 0])

def test_stats_is_a_snapshot():
    eng = CircuitEngine().initialize(1)
    snap = eng.stats()
    eng.apply_gate(hadamard(0))
    assert snap.gates_applied == 0
    assert eng.stats().gates_applied == 1

def test_load_state_copies_the_buffer():
    st = State.zero(1)
    eng = CircuitEngine().load_state(st)
    eng.apply_gate(hadamard(0))
    assert np.array_equal(st.psi, [1, 0])
    assert np.allclose(eng.amplitudes(), [np.sqrt(0.5), np.sqrt(0.5)])

def test_load_state_promotes_real_buffer():
    eng = CircuitEngine().load_state(State(1, np.array([1.0, 0.0])))
    assert eng.state.dtype == np.complex128
    eng.apply_gate(rx(0, np.pi))
    assert np.allclose(eng.amplitudes(), [0, -1j], atol=1e-12)
