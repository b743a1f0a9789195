import mpmath
import pytest
from mpmath import mpf

from su2synth.mix_su2 import MixSU2, choi_jamiolkowski, choi_jamiolkowski_magic_basis
from su2synth.numeric import Status
from su2synth.sdp import Options
from su2synth.su2 import SU2, random_unitary


def _max_abs(m):
    return max(abs(m[i, j]) for i in range(m.rows) for j in range(m.cols))


def test_choi_of_identity_is_bell_projector():
    cj = choi_jamiolkowski(SU2())
    assert cj.rows == 4 and cj.cols == 4
    for i, j in [(0, 0), (0, 3), (3, 0), (3, 3)]:
        assert abs(cj[i, j] - mpf("0.5")) < 1e-14
    assert abs(cj[1, 1]) < 1e-14
    assert abs(cj[0, 1]) < 1e-14


def test_choi_is_trace_one_projector():
    cj = choi_jamiolkowski(random_unitary(1234))
    trace = sum(cj[i, i] for i in range(4))
    assert abs(trace - 1) < 1e-12
    assert _max_abs(cj * cj - cj) < 1e-12
    assert _max_abs(cj - cj.H) < 1e-12


def test_choi_rejects_non_square():
    with pytest.raises(ValueError):
        choi_jamiolkowski(mpmath.matrix(2, 3))


def test_magic_basis_of_identity():
    m = choi_jamiolkowski_magic_basis(SU2())
    expected = mpmath.matrix([[1, 0, 0, 0], [0, 0, 0, 0], [0, 0, 0, 0], [0, 0, 0, 0]])
    assert _max_abs(m - expected) < 1e-12


def test_magic_basis_is_real_symmetric_projector():
    m = choi_jamiolkowski_magic_basis(random_unitary(5678))
    assert _max_abs(m - m.T) < 1e-12
    assert _max_abs(m * m - m) < 1e-12
    assert abs(sum(m[i, i] for i in range(4)) - 1) < 1e-12


def test_magic_basis_rejects_wrong_size():
    with pytest.raises(ValueError):
        choi_jamiolkowski_magic_basis(mpmath.eye(3))


def test_empty_mixture_rejected():
    with pytest.raises(ValueError):
        MixSU2().compute_optimal_prob(SU2())


def _options():
    return Options(epsilon1=1e-12, epsilon2=1e-12)


def test_compute_optimal_prob_random():
    available = [random_unitary(seed) for seed in (11, 22, 33)]
    target = random_unitary(44)
    res = MixSU2(available).compute_optimal_prob(target, _options())
    assert res.status == Status.SUCCESS
    assert abs(res.obj_primal - res.obj_dual) < 1e-8
    assert -1e-8 <= res.obj_primal <= mpf("0.5") + 1e-8
    probabilities = res.x[10:]
    assert len(probabilities) == 3
    assert all(p >= -1e-8 for p in probabilities)
    assert sum(probabilities) <= 1 + 1e-8


def test_compute_optimal_prob_target_available():
    available = [random_unitary(1), random_unitary(2)]
    res = MixSU2(available).compute_optimal_prob(available[0], _options())
    assert res.status == Status.SUCCESS
    assert abs(res.obj_primal) < 1e-8
    assert res.x[10] > mpf("0.99")