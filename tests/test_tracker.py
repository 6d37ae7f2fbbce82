import pytest

from core.config import ScanConfig
from core.models import Point, TrackerState
from core.tracker import IDLE, advance, smooth_center

from conftest import make_candidate


def run(frames, ctx, config, state=IDLE):
    """Feed candidates; return (final_state, 1-based indices of triggering frames)."""
    triggers = []
    for i, cand in enumerate(frames, start=1):
        update = advance(state, cand, ctx, config)
        state = update.state
        if update.triggered:
            triggers.append(i)
    return state, triggers


def test_twenty_stable_frames_trigger_once_on_the_last(config, frame_ctx):
    state, triggers = run([make_candidate()] * 20, frame_ctx, config)
    assert triggers == [20]
    assert state == TrackerState(0, None, None)


def test_counter_never_reaches_threshold_without_trigger(config, frame_ctx):
    state = IDLE
    for _ in range(60):
        update = advance(state, make_candidate(), frame_ctx, config)
        state = update.state
        assert state.counter < config.stability_threshold


def test_trigger_reports_last_box(config, frame_ctx):
    state = IDLE
    for _ in range(19):
        state = advance(state, make_candidate(), frame_ctx, config).state
    update = advance(state, make_candidate(x=402), frame_ctx, config)
    assert update.trigger == make_candidate(x=402).box


def test_single_jitter_frame_costs_two_extra_frames(config, frame_ctx):
    # move limit is 0.02 * 1000 = 20px; a 40px jump gives 0.7 * 40 = 28px displacement
    state, triggers = run([make_candidate()] * 10, frame_ctx, config)
    assert state.counter == 10 and not triggers

    jitter = advance(state, make_candidate(x=440), frame_ctx, config)
    assert jitter.jittered
    assert jitter.state.counter == 8
    assert not jitter.triggered

    state, triggers = run([make_candidate()] * 12, frame_ctx, config, jitter.state)
    assert triggers == [12]


def test_jitter_never_goes_below_zero(config, frame_ctx):
    state = advance(IDLE, make_candidate(), frame_ctx, config).state
    update = advance(state, make_candidate(x=600), frame_ctx, config)
    assert update.jittered
    assert update.state.counter == 0


def test_gap_frame_decays_by_one_and_clears_smoothing(config, frame_ctx):
    state, _ = run([make_candidate()] * 5, frame_ctx, config)
    assert state.counter == 5

    gap = advance(state, None, frame_ctx, config)
    assert gap.state.counter == 4
    assert gap.state.smoothed_center is None
    assert gap.state.last_box is None
    assert not gap.triggered

    moved = make_candidate(x=700, y=100)
    after = advance(gap.state, moved, frame_ctx, config)
    assert after.state.smoothed_center == moved.box.center
    assert after.displacement == 0.0
    assert after.state.counter == 5


def test_gaps_decay_to_idle(config, frame_ctx):
    state, _ = run([make_candidate()] * 3, frame_ctx, config)
    state, _ = run([None] * 5, frame_ctx, config, state)
    assert state.is_idle


def test_smooth_center_ema():
    assert smooth_center(None, Point(3, 4), 0.3) == Point(3, 4)
    s = smooth_center(Point(0, 0), Point(10, 20), 0.3)
    assert s.x == pytest.approx(3.0)
    assert s.y == pytest.approx(6.0)


def test_trigger_sequence_is_deterministic(config, frame_ctx):
    seq = []
    for i in range(200):
        if i % 37 == 5:
            seq.append(None)
        elif i % 23 == 11:
            seq.append(make_candidate(x=460))
        else:
            seq.append(make_candidate())
    first = run(seq, frame_ctx, config)[1]
    assert first
    for _ in range(3):
        assert run(seq, frame_ctx, config)[1] == first


def test_reset_mode_wipes_counter_on_movement(frame_ctx):
    config = ScanConfig(stability_mode="reset")
    state, _ = run([make_candidate()] * 10, frame_ctx, config)
    assert state.counter == 9
    moved = advance(state, make_candidate(x=440), frame_ctx, config)
    assert moved.jittered
    assert moved.state.counter == 0


def test_reset_mode_triggers_after_threshold(frame_ctx):
    config = ScanConfig(stability_mode="reset", stability_threshold=5)
    _, triggers = run([make_candidate()] * 6, frame_ctx, config)
    assert triggers == [6]
