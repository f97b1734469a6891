"""Transition engine and per-frame tween scheduler.

The engine owns the live card poses and the active transition batch. Starting
a batch replaces the previous one wholesale: each card restarts from wherever
the interrupted animation left it, so a mid-flight layout switch never jumps.

`tick()` is the only place live poses change.
"""
from __future__ import annotations

import logging
import math
import threading
from dataclasses import dataclass
from typing import Callable, List, Optional, Sequence

from .easing import clamp01, ease_in_out_expo
from .pose import Pose, mix_euler, mix_vec3

log = logging.getLogger(__name__)

Clock = Callable[[], float]


@dataclass(frozen=True)
class Transition:
    card_index: int
    from_pose: Pose
    to_pose: Pose
    start_time: float
    duration: float

    def instant(self) -> bool:
        # Non-positive or non-finite durations finish on the first tick.
        return not (math.isfinite(self.duration) and self.duration > 0)

    def progress(self, now: float) -> float:
        """Linear time fraction in [0, 1]; a malformed duration is already done."""

        if self.instant():
            return 1.0
        return clamp01((now - self.start_time) / self.duration)

    def finished(self, now: float) -> bool:
        return self.instant() or now - self.start_time >= self.duration


class TransitionEngine:
    def __init__(self, cards: Sequence[Pose], *, clock: Clock) -> None:
        self._cards: List[Pose] = list(cards)
        self._clock = clock
        self._active: List[Transition] = []
        self._lock = threading.Lock()

    @property
    def cards(self) -> List[Pose]:
        return self._cards

    @property
    def active(self) -> List[Transition]:
        return list(self._active)

    def active_count(self) -> int:
        return len(self._active)

    def is_animating(self) -> bool:
        return bool(self._active)

    def now(self) -> float:
        return self._clock()

    def replace_cards(self, cards: Sequence[Pose]) -> None:
        """Swap the live pose store; pending transitions refer to old indices and are dropped."""

        with self._lock:
            self._cards = list(cards)
            self._active = []

    def cancel(self) -> None:
        with self._lock:
            self._active = []

    def begin_transition(self, targets: Sequence[Pose], duration: float, now: Optional[float] = None) -> int:
        """Start moving every card that has a target; returns the batch size.

        Cards past the end of `targets` are left out of the batch and keep
        their current pose.
        """

        start = self._clock() if now is None else float(now)
        batch: List[Transition] = []
        with self._lock:
            for i, card in enumerate(self._cards):
                if i >= len(targets):
                    break
                batch.append(
                    Transition(
                        card_index=i,
                        from_pose=card.copy(),
                        to_pose=targets[i].copy(),
                        start_time=start,
                        duration=float(duration),
                    )
                )
            dropped = len(self._active)
            self._active = batch

        skipped = len(self._cards) - len(batch)
        log.debug(
            "transition batch: %d card(s) over %.0f ms (%d without target, %d in-flight replaced)",
            len(batch),
            duration,
            skipped,
            dropped,
        )
        return len(batch)

    def tick(self, now: Optional[float] = None) -> int:
        """Advance every active transition to `now`; returns how many remain."""

        t_now = self._clock() if now is None else float(now)
        with self._lock:
            remaining: List[Transition] = []
            for tr in self._active:
                eased = ease_in_out_expo(tr.progress(t_now))
                card = self._cards[tr.card_index]
                card.position = mix_vec3(tr.from_pose.position, tr.to_pose.position, eased)
                card.orientation = mix_euler(tr.from_pose.orientation, tr.to_pose.orientation, eased)
                if not tr.finished(t_now):
                    remaining.append(tr)
            retired = len(self._active) - len(remaining)
            self._active = remaining

        if retired:
            log.debug("retired %d transition(s), %d active", retired, len(remaining))
        return len(remaining)
