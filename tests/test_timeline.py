import pytest

from autoframe.camera import ViewportMotion
from autoframe.geometry import Rect, Size
from autoframe.schemas import OutputWindow
from autoframe.timeline import (
    ease_in,
    ease_in_out,
    ease_linear,
    ease_out,
    get_viewport_state_at_time,
    prepare_motions,
    sample_viewports,
    viewport_at,
)

OUTPUT = Size(1000, 1000)
FULL = Rect(0, 0, 1000, 1000)
WINDOWS = [OutputWindow(id="all", start_ms=0, end_ms=10000)]


def _rect_approx(actual, expected, abs_tol=1e-6):
    assert actual.x == pytest.approx(expected.x, abs=abs_tol)
    assert actual.y == pytest.approx(expected.y, abs=abs_tol)
    assert actual.width == pytest.approx(expected.width, abs=abs_tol)
    assert actual.height == pytest.approx(expected.height, abs=abs_tol)


def test_easing_curves():
    assert ease_in_out(0.0) == 0.0
    assert ease_in_out(0.25) == pytest.approx(0.125)
    assert ease_in_out(0.5) == pytest.approx(0.5)
    assert ease_in_out(0.75) == pytest.approx(0.875)
    assert ease_in_out(1.0) == pytest.approx(1.0)
    assert ease_in(0.5) == pytest.approx(0.25)
    assert ease_out(0.5) == pytest.approx(0.75)
    assert ease_linear(0.3) == 0.3


def test_no_motions_is_full_view():
    for t in (0, 500, 5000, 20000):
        assert get_viewport_state_at_time([], t, OUTPUT, WINDOWS) == FULL


def test_single_motion():
    target = Rect(250, 250, 500, 500)
    motions = [ViewportMotion(source_end_time_ms=1000, duration_ms=500, rect=target)]
    assert get_viewport_state_at_time(motions, 400, OUTPUT, WINDOWS) == FULL
    assert get_viewport_state_at_time(motions, 500, OUTPUT, WINDOWS) == FULL
    _rect_approx(get_viewport_state_at_time(motions, 750, OUTPUT, WINDOWS), Rect(125, 125, 750, 750))
    assert get_viewport_state_at_time(motions, 1000, OUTPUT, WINDOWS) == target
    assert get_viewport_state_at_time(motions, 5000, OUTPUT, WINDOWS) == target


def test_linear_ease():
    motions = [ViewportMotion(source_end_time_ms=1000, duration_ms=1000, rect=Rect(0, 0, 500, 500))]
    rect = get_viewport_state_at_time(motions, 250, OUTPUT, WINDOWS, ease="linear")
    _rect_approx(rect, Rect(0, 0, 875, 875))


def test_holds_between_motions():
    first = Rect(0, 0, 500, 500)
    second = Rect(500, 500, 500, 500)
    motions = [
        ViewportMotion(source_end_time_ms=1000, duration_ms=500, rect=first),
        ViewportMotion(source_end_time_ms=3000, duration_ms=500, rect=second),
    ]
    assert get_viewport_state_at_time(motions, 2000, OUTPUT, WINDOWS) == first
    assert get_viewport_state_at_time(motions, 2500, OUTPUT, WINDOWS) == first
    assert get_viewport_state_at_time(motions, 3000, OUTPUT, WINDOWS) == second


def test_interrupted_motion_is_continuous():
    first = Rect(0, 0, 500, 500)
    second = Rect(500, 500, 500, 500)
    motions = [
        ViewportMotion(source_end_time_ms=1000, duration_ms=500, rect=first),
        ViewportMotion(source_end_time_ms=1200, duration_ms=500, rect=second),
    ]
    at_interrupt = get_viewport_state_at_time(motions, 700, OUTPUT, WINDOWS)
    # 40% through the first motion: eased 0.32 of the way from the full view.
    _rect_approx(at_interrupt, Rect(0, 0, 840, 840))
    just_after = get_viewport_state_at_time(motions, 700.01, OUTPUT, WINDOWS)
    _rect_approx(just_after, at_interrupt, abs_tol=0.01)

    # The first target is never reached.
    assert get_viewport_state_at_time(motions, 1000, OUTPUT, WINDOWS) != first
    _rect_approx(get_viewport_state_at_time(motions, 1200, OUTPUT, WINDOWS), second)


def test_continuity_across_many_overlaps():
    motions = [
        ViewportMotion(source_end_time_ms=600 + idx * 150, duration_ms=500, rect=Rect(idx * 50, idx * 40, 500, 500))
        for idx in range(6)
    ]
    timed = prepare_motions(motions, WINDOWS, 0)
    for motion in timed[1:]:
        before = viewport_at(timed, motion.start_time, OUTPUT)
        after = viewport_at(timed, motion.start_time + 0.001, OUTPUT)
        _rect_approx(after, before, abs_tol=0.05)


def test_unsorted_motions_are_ordered():
    motions = [
        ViewportMotion(source_end_time_ms=3000, duration_ms=500, rect=Rect(500, 500, 500, 500)),
        ViewportMotion(source_end_time_ms=1000, duration_ms=500, rect=Rect(0, 0, 500, 500)),
    ]
    for t in (0, 800, 2000, 2800, 4000):
        assert get_viewport_state_at_time(motions, t, OUTPUT, WINDOWS) == get_viewport_state_at_time(
            list(reversed(motions)), t, OUTPUT, WINDOWS
        )


def test_motions_in_gaps_are_ignored():
    windows = [OutputWindow(id="a", start_ms=0, end_ms=1000), OutputWindow(id="b", start_ms=2000, end_ms=3000)]
    motions = [ViewportMotion(source_end_time_ms=1500, duration_ms=500, rect=Rect(0, 0, 500, 500))]
    assert prepare_motions(motions, windows, 0) == []
    for t in (0, 900, 1500, 1999):
        assert get_viewport_state_at_time(motions, t, OUTPUT, windows) == FULL


def test_motion_after_gap_uses_output_time():
    windows = [OutputWindow(id="a", start_ms=0, end_ms=1000), OutputWindow(id="b", start_ms=2000, end_ms=3000)]
    target = Rect(0, 0, 500, 500)
    motions = [ViewportMotion(source_end_time_ms=2500, duration_ms=500, rect=target)]
    # Timeline 2500 is output 1500, so the motion runs over output [1000, 1500].
    assert get_viewport_state_at_time(motions, 999, OUTPUT, windows) == FULL
    assert get_viewport_state_at_time(motions, 1500, OUTPUT, windows) == target


def test_zero_duration_snaps():
    target = Rect(100, 100, 500, 500)
    motions = [ViewportMotion(source_end_time_ms=1000, duration_ms=0, rect=target)]
    assert get_viewport_state_at_time(motions, 999, OUTPUT, WINDOWS) == FULL
    assert get_viewport_state_at_time(motions, 1000, OUTPUT, WINDOWS) == target
    assert get_viewport_state_at_time(motions, 1001, OUTPUT, WINDOWS) == target


def test_sample_viewports_covers_output():
    windows = [OutputWindow(id="a", start_ms=0, end_ms=1000)]
    motions = [ViewportMotion(source_end_time_ms=600, duration_ms=500, rect=Rect(0, 0, 500, 500))]
    samples = sample_viewports(motions, OUTPUT, windows, 0, fps=10)
    assert [s.time_ms for s in samples] == list(range(0, 1000, 100))
    assert samples[0].rect == FULL
    assert samples[-1].rect == Rect(0, 0, 500, 500)
    assert sample_viewports(motions, OUTPUT, [], 0, fps=10) == []
