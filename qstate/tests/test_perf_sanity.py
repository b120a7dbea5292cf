# qstate/tests/test_perf_sanity.py
import time
import numpy as np
from qstate.circuit import Circuit

def build_chain(n, depth):
    c = Circuit.empty(n)
    for _ in range(depth):
        for k in range(n):
            c.h(k)
            c.ry(k, 0.1 * (k + 1))
        for k in range(0, n-1, 2):
            c.cnot(k, k+1)
    return c

def timed(c, backend, **kw):
    t0 = time.perf_counter()
    st = c.run(backend=backend, **kw)
    return st, time.perf_counter() - t0

def test_backends_run_and_time():
    n, depth = 12, 3     # quick enough for the pure-Python loops
    c = build_chain(n, depth)
    # JIT compile outside the timed region
    build_chain(2, 1).run(backend="numba")

    s1, t1 = timed(c, "serial")
    s2, t2 = timed(c, "numpy")
    s3, t3 = timed(c, "numba", num_threads=4)

    assert np.allclose(s1.as_numpy(), s2.as_numpy(), atol=1e-9, rtol=0)
    assert np.allclose(s1.as_numpy(), s3.as_numpy(), atol=1e-9, rtol=0)
    assert t1 > 0 and t2 > 0 and t3 > 0
    # don't hard-assert speedup (machines vary); just ensure it isn't catastrophically slower
    assert t2 < 5.0 * t1
    assert t3 < 5.0 * t1
