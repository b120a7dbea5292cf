# qstate/tests/test_encoding.py
import numpy as np
import pytest
from qstate.encoding import AmplitudeEncoder, num_qubits_for
from qstate.errors import DegenerateInput, InvalidQubitCount
from qstate.sampler import measure_qubits

def test_basis_vector_round_trip():
    st = AmplitudeEncoder(2).encode([1, 0, 0, 0])
    assert measure_qubits(st, [0, 1], 1000, seed=0) == {"00": 1000}

def test_scaled_and_padded():
    st = AmplitudeEncoder(2).encode([3.0, 4.0])
    assert np.allclose(st.psi, [0.6, 0.8, 0.0, 0.0], atol=1e-15)
    assert not st.psi.imag.any()
    assert abs(st.norm2() - 1.0) < 1e-12

def test_negative_entries_keep_sign():
    st = AmplitudeEncoder(1).encode([-1.0, 1.0])
    assert np.allclose(st.psi, [-np.sqrt(0.5), np.sqrt(0.5)])

def test_all_zero_rejected():
    with pytest.raises(DegenerateInput):
        AmplitudeEncoder(2).encode([0, 0, 0, 0])

def test_too_long_rejected():
    with pytest.raises(ValueError):
        AmplitudeEncoder(1).encode([1, 2, 3])

def test_non_finite_rejected():
    with pytest.raises(ValueError):
        AmplitudeEncoder(2).encode([1.0, np.nan])
    with pytest.raises(ValueError):
        AmplitudeEncoder(2).encode([np.inf, 1.0])

def test_zero_qubits_rejected():
    with pytest.raises(InvalidQubitCount):
        AmplitudeEncoder(0)

def test_batch_rows_are_independent():
    enc = AmplitudeEncoder(2)
    a, b = enc.encode_batch([[1, 1, 1, 1], [0, 1]])
    assert a.psi is not b.psi
    a.psi[0] = 0
    assert np.allclose(b.psi, [0, 1, 0, 0])

def test_uneven_magnitudes_normalize():
    st = AmplitudeEncoder(3).encode([1e-8, 2.5, 1e6, -7.0, 0.0, 3.0])
    assert abs(st.norm2() - 1.0) < 1e-12

def test_num_qubits_for():
    assert [num_qubits_for(L) for L in (1, 2, 3, 4, 5, 8, 9)] == [1, 1, 2, 2, 3, 3, 4]
