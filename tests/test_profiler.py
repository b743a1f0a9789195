import io

import pytest

from su2synth.profiler import Profiler, Timer


class FakeClock:
    def __init__(self):
        self.now = 0.0

    def __call__(self):
        return self.now

    def advance(self, seconds):
        self.now += seconds


@pytest.fixture
def clock():
    return FakeClock()


def test_timer_accumulates_over_runs(clock):
    timer = Timer(clock)
    timer.start()
    clock.advance(2.0)
    timer.stop()
    clock.advance(5.0)
    timer.start()
    clock.advance(1.5)
    timer.stop()
    assert timer.elapsed() == 3.5


def test_running_timer_includes_current_span(clock):
    timer = Timer(clock)
    timer.start()
    clock.advance(4.0)
    assert timer.running
    assert timer.elapsed() == 4.0


def test_second_start_does_not_restart(clock):
    timer = Timer(clock)
    timer.start()
    clock.advance(1.0)
    timer.start()
    clock.advance(1.0)
    timer.stop()
    assert timer.elapsed() == 2.0


def test_reset_clears_time(clock):
    timer = Timer(clock)
    timer.start()
    clock.advance(3.0)
    timer.reset()
    assert not timer.running
    assert timer.elapsed() == 0.0


def test_named_timers_are_shared(clock):
    profiler = Profiler(clock)
    profiler.start("work")
    clock.advance(2.0)
    profiler.stop("work")
    assert profiler.timer("work").elapsed() == 2.0
    assert profiler.timer("work") is profiler.timer("work")


def test_section_times_block(clock):
    profiler = Profiler(clock)
    with profiler.section("block"):
        clock.advance(0.25)
    assert profiler.timer("block").elapsed() == 0.25
    assert not profiler.timer("block").running


def test_section_stops_on_error(clock):
    profiler = Profiler(clock)
    with pytest.raises(RuntimeError):
        with profiler.section("fails"):
            clock.advance(1.0)
            raise RuntimeError("boom")
    assert not profiler.timer("fails").running
    assert profiler.timer("fails").elapsed() == 1.0


def test_report_lists_timers(clock):
    profiler = Profiler(clock)
    with profiler.section("lattice"):
        clock.advance(1.0)
    clock.advance(3.0)
    out = io.StringIO()
    profiler.report(out)
    text = out.getvalue()
    assert "timing summary" in text
    assert "lattice" in text
    assert "1000.000 ms" in text
    assert "25.00%" in text


def test_report_of_empty_profiler_writes_nothing(clock):
    profiler = Profiler(clock)
    out = io.StringIO()
    profiler.report(out)
    assert out.getvalue() == ""


def test_instance_is_shared():
    first = Profiler.instance()
    second = Profiler.instance()
    assert first is second