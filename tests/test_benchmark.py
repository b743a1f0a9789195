import pytest

from su2synth.benchmark import main, run
from su2synth.su2 import SU2, random_unitary


def test_large_eps_gives_zero_t_count():
    rows = list(run([SU2(), random_unitary(3)], [1.0]))
    assert len(rows) == 1
    row = rows[0]
    assert row.eps == 1.0
    assert row.t_counts == (0, 0)
    assert row.min_t_count == row.max_t_count == 0
    assert row.average_t_count == 0


def test_statistics_are_consistent():
    unitaries = [random_unitary(10), random_unitary(20)]
    rows = list(run(unitaries, [0.1]))
    assert len(rows) == 1
    row = rows[0]
    assert row.eps == 0.1
    assert len(row.t_counts) == 2
    assert len(row.seconds) == 2
    assert row.min_t_count == min(row.t_counts)
    assert row.max_t_count == max(row.t_counts)
    assert row.min_t_count <= row.average_t_count <= row.max_t_count
    assert all(s >= 0 for s in row.seconds)
    assert row.average_time_ms >= 0


def test_one_row_per_eps():
    rows = list(run([random_unitary(5)], [1.0, 0.5]))
    assert [row.eps for row in rows] == [1.0, 0.5]


def test_empty_input_rejected():
    with pytest.raises(ValueError):
        run([], [0.1])


def test_main_prints_summary(capsys):
    assert main(["--count", "1", "--start", "0.5", "--stop", "0.5"]) == 0
    out = capsys.readouterr().out
    assert "eps = [0.5, ]" in out
    assert "AVE = [" in out
    assert "MIN = [" in out
    assert "MAX = [" in out
    assert "TIME = [" in out
    assert "T-count" in out


def test_main_rejects_zero_count():
    with pytest.raises(SystemExit):
        main(["--count", "0"])