"""
Stability tracker: debounces per-frame candidates into a single capture trigger.

State lives in an immutable TrackerState that is threaded through advance();
the caller keeps the returned state for the next frame.
"""

from __future__ import annotations

from dataclasses import dataclass

from core.config import ScanConfig
from core.models import Box, Candidate, FrameContext, Point, TrackerState

IDLE = TrackerState()


@dataclass(frozen=True)
class TrackerUpdate:
    """Result of one tracker step."""

    state: TrackerState
    trigger: Box | None = None
    displacement: float = 0.0
    jittered: bool = False

    @property
    def triggered(self) -> bool:
        return self.trigger is not None


def smooth_center(previous: Point | None, raw: Point, alpha: float) -> Point:
    """EMA step. No averaging on re-acquisition (previous is None)."""
    if previous is None:
        return raw
    return Point(
        previous.x * (1 - alpha) + raw.x * alpha,
        previous.y * (1 - alpha) + raw.y * alpha,
    )


def advance(
    state: TrackerState,
    candidate: Candidate | None,
    frame: FrameContext,
    config: ScanConfig,
) -> TrackerUpdate:
    """Advance the tracker by one frame."""
    if candidate is None:
        # Absence decays slowly and drops the smoothed position
        return TrackerUpdate(TrackerState(counter=max(0, state.counter - 1)))

    raw = candidate.box.center
    move_limit = config.relative_movement_limit * frame.frame_width

    if config.stability_mode == "reset":
        # Alternative mode: compare raw centers frame to frame, wipe on movement
        reference = state.smoothed_center
        displacement = reference.distance_to(raw) if reference is not None else 0.0
        smoothed = raw
        if reference is None:
            counter = state.counter
        elif displacement > move_limit:
            return TrackerUpdate(
                TrackerState(0, smoothed, candidate.box), displacement=displacement, jittered=True
            )
        else:
            counter = state.counter + 1
    else:
        smoothed = smooth_center(state.smoothed_center, raw, config.ema_alpha)
        displacement = smoothed.distance_to(raw)
        if displacement > move_limit:
            return TrackerUpdate(
                TrackerState(max(0, state.counter - 2), smoothed, candidate.box),
                displacement=displacement,
                jittered=True,
            )
        counter = state.counter + 1

    if counter >= config.stability_threshold:
        return TrackerUpdate(IDLE, trigger=candidate.box, displacement=displacement)
    return TrackerUpdate(TrackerState(counter, smoothed, candidate.box), displacement=displacement)
