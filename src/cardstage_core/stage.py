from __future__ import annotations

import logging
import random
from typing import Dict, List, Mapping, Optional, Tuple

from .errors import MissingTargetError
from .frames import monotonic_ms
from .layouts import DEFAULT_DURATIONS_MS, generate_layout, normalize_scheme
from .pose import Euler, Pose, Vec3
from .transitions import Clock, TransitionEngine

log = logging.getLogger(__name__)

DEFAULT_SCATTER_EXTENT = 2000.0


def scatter_poses(count: int, *, extent: float = DEFAULT_SCATTER_EXTENT, rng: Optional[random.Random] = None) -> List[Pose]:
    """Random starting poses, uniform in the cube [-extent, extent]^3."""

    r = rng or random.Random()
    out: List[Pose] = []
    for _ in range(count):
        out.append(
            Pose(
                Vec3(r.uniform(-extent, extent), r.uniform(-extent, extent), r.uniform(-extent, extent)),
                Euler(),
            )
        )
    return out


class Stage:
    """One session: the cards, their cached layouts and the engine moving them."""

    def __init__(
        self,
        count: int,
        *,
        clock: Optional[Clock] = None,
        durations: Optional[Mapping[str, float]] = None,
        seed: Optional[int] = None,
        scatter_extent: float = DEFAULT_SCATTER_EXTENT,
    ) -> None:
        if count < 0:
            raise ValueError("count must be >= 0")
        self._rng = random.Random(seed)
        self._extent = float(scatter_extent)
        self._durations: Dict[str, float] = dict(DEFAULT_DURATIONS_MS)
        for k, v in (durations or {}).items():
            self._durations[normalize_scheme(k)] = float(v)

        self._count = int(count)
        self._targets: Dict[str, Tuple[Pose, ...]] = {}
        self.active_layout: str = ""
        self.engine = TransitionEngine(
            scatter_poses(self._count, extent=self._extent, rng=self._rng),
            clock=clock or monotonic_ms,
        )

    @property
    def count(self) -> int:
        return self._count

    @property
    def cards(self) -> List[Pose]:
        return self.engine.cards

    def duration_for(self, scheme: str) -> float:
        return self._durations[normalize_scheme(scheme)]

    def targets(self, scheme: str) -> Tuple[Pose, ...]:
        name = normalize_scheme(scheme)
        cached = self._targets.get(name)
        if cached is None:
            cached = tuple(generate_layout(name, self._count))
            self._targets[name] = cached
        return cached

    def target_pose(self, scheme: str, index: int) -> Pose:
        seq = self.targets(scheme)
        if not (0 <= index < len(seq)):
            raise MissingTargetError(normalize_scheme(scheme), index, len(seq))
        return seq[index].copy()

    def set_count(self, count: int) -> None:
        if count < 0:
            raise ValueError("count must be >= 0")
        cards = self.engine.cards[:count]
        if count > len(cards):
            cards.extend(scatter_poses(count - len(cards), extent=self._extent, rng=self._rng))
        self._count = int(count)
        self._targets.clear()
        self.active_layout = ""
        self.engine.replace_cards(cards)
        log.info("stage resized to %d card(s)", count)

    def switch(self, scheme: str, duration: Optional[float] = None, now: Optional[float] = None) -> int:
        name = normalize_scheme(scheme)
        ms = self._durations[name] if duration is None else float(duration)
        n = self.engine.begin_transition(self.targets(name), ms, now=now)
        self.active_layout = name
        log.info("switching to %s (%d card(s), %.0f ms)", name, n, ms)
        return n

    def tick(self, now: Optional[float] = None) -> int:
        return self.engine.tick(now)

    def is_animating(self) -> bool:
        return self.engine.is_animating()
