from __future__ import annotations

import math
import time
from typing import Callable, Optional

from .transitions import TransitionEngine

DEFAULT_FRAME_MS = 16.0


def monotonic_ms() -> float:
    return time.perf_counter() * 1000.0


class ManualClock:
    """A frame clock that only moves when told to (tests, headless runs)."""

    def __init__(self, start: float = 0.0) -> None:
        self.t = float(start)

    def __call__(self) -> float:
        return self.t

    def advance(self, ms: float) -> float:
        if ms < 0:
            raise ValueError("cannot move a clock backwards")
        self.t += float(ms)
        return self.t


def run_until_idle(
    engine: TransitionEngine,
    clock: ManualClock,
    *,
    frame_ms: float = DEFAULT_FRAME_MS,
    max_frames: int = 100_000,
    on_frame: Optional[Callable[[int, float], None]] = None,
) -> int:
    """Step `clock` one frame at a time and tick until nothing is animating.

    Returns the number of frames ticked. `on_frame(frame, now)` runs after
    each tick, the same point where a renderer would read the live poses.
    """

    if not (math.isfinite(frame_ms) and frame_ms > 0):
        raise ValueError("frame_ms must be a finite number > 0")

    frames = 0
    while engine.is_animating():
        if frames >= max_frames:
            raise RuntimeError(f"animation still running after {max_frames} frames")
        now = clock.advance(frame_ms)
        engine.tick(now)
        frames += 1
        if on_frame is not None:
            on_frame(frames, now)
    return frames
