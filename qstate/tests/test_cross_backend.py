# qstate/tests/test_cross_backend.py
import numpy as np
import pytest
from qstate.circuit import Circuit
from qstate.bench import random_circuit

def max_abs_diff(a, b):
    return float(np.max(np.abs(a - b)))

def test_serial_vs_numba_small():
    # 3-qubit mixed circuit
    c = Circuit.empty(3).h(0).x(1).cnot(1,2).h(2).cnot(0,1).x(2).ry(1, 0.4).cz(2,0)
    st_s = c.run(backend="serial")
    st_n = c.run(backend="numba", num_threads=4)
    assert max_abs_diff(st_s.as_numpy(), st_n.as_numpy()) < 1e-9

@pytest.mark.parametrize("other", ["numpy", "numba"])
def test_random_circuits_match(other):
    rng = np.random.default_rng(123)
    n = 4
    for depth in (5, 10, 20):
        c = Circuit.empty(n)
        for _ in range(depth):
            g = rng.integers(0, 7)
            k = int(rng.integers(0, n))
            theta = float(rng.uniform(-np.pi, np.pi))
            if g == 0:
                c.h(k)
            elif g == 1:
                c.x(k)
            elif g == 2:
                c.rx(k, theta)
            elif g == 3:
                c.ry(k, theta)
            elif g == 4:
                c.rz(k, theta)
            else:
                c2 = k
                while c2 == k:
                    c2 = int(rng.integers(0, n))
                if g == 5:
                    c.cnot(k, c2)
                else:
                    c.cz(k, c2)
        s = c.run(backend="serial")
        t = c.run(backend=other, num_threads=2)
        assert np.allclose(s.as_numpy(), t.as_numpy(), atol=1e-9, rtol=0)

def test_bench_circuits_match_on_six_qubits():
    c = random_circuit(6, 12, seed=3)
    ref = c.run(backend="serial").as_numpy()
    for backend in ("numpy", "numba"):
        assert np.allclose(c.run(backend=backend).as_numpy(), ref, atol=1e-9, rtol=0)

def test_thread_request_is_clamped_to_pool():
    from qstate.apply_numba import get_threads, max_threads, set_threads
    set_threads(1_000_000)
    assert get_threads() == max_threads()
    set_threads(1)
    assert get_threads() == 1
