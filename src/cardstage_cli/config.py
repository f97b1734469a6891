from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Optional

from cardstage_cli.paths import config_path
from cardstage_core.frames import DEFAULT_FRAME_MS
from cardstage_core.layouts import DEFAULT_DURATIONS_MS, LAYOUT_NAMES
from cardstage_core.stage import DEFAULT_SCATTER_EXTENT

log = logging.getLogger(__name__)

CONFIG_VERSION = "2026-10-19-cardstage-config-v1"

DEFAULT_INITIAL_LAYOUT = "table"
DEFAULT_INITIAL_DURATION_MS = 1000.0


def _as_float(value: Any, default: float, *, minimum: float = 0.0) -> float:
    try:
        v = float(value)
    except (TypeError, ValueError):
        return default
    if v != v or v < minimum:
        return default
    return v


@dataclass
class CardstageConfig:
    version: str
    durations_ms: Dict[str, float] = field(default_factory=lambda: dict(DEFAULT_DURATIONS_MS))
    initial_layout: str = DEFAULT_INITIAL_LAYOUT
    initial_duration_ms: float = DEFAULT_INITIAL_DURATION_MS
    frame_ms: float = DEFAULT_FRAME_MS
    scatter_extent: float = DEFAULT_SCATTER_EXTENT
    seed: Optional[int] = None

    @staticmethod
    def default() -> "CardstageConfig":
        return CardstageConfig(version=CONFIG_VERSION)

    @staticmethod
    def from_dict(d: Dict[str, Any]) -> "CardstageConfig":
        durations = dict(DEFAULT_DURATIONS_MS)
        raw = d.get("durations_ms")
        if isinstance(raw, dict):
            for name, ms in raw.items():
                if name in durations:
                    durations[name] = _as_float(ms, durations[name])

        initial = str(d.get("initial_layout", "") or "").strip().lower()
        if initial not in LAYOUT_NAMES:
            initial = DEFAULT_INITIAL_LAYOUT

        seed = d.get("seed")
        try:
            seed = int(seed) if seed is not None else None
        except (TypeError, ValueError):
            seed = None

        return CardstageConfig(
            version=str(d.get("version", "")) or CONFIG_VERSION,
            durations_ms=durations,
            initial_layout=initial,
            initial_duration_ms=_as_float(d.get("initial_duration_ms"), DEFAULT_INITIAL_DURATION_MS),
            frame_ms=_as_float(d.get("frame_ms"), DEFAULT_FRAME_MS, minimum=1.0),
            scatter_extent=_as_float(d.get("scatter_extent"), DEFAULT_SCATTER_EXTENT),
            seed=seed,
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "version": self.version,
            "durations_ms": {k: float(v) for k, v in self.durations_ms.items()},
            "initial_layout": self.initial_layout,
            "initial_duration_ms": float(self.initial_duration_ms),
            "frame_ms": float(self.frame_ms),
            "scatter_extent": float(self.scatter_extent),
            "seed": self.seed,
        }


def load_config(path: Optional[Path] = None) -> CardstageConfig:
    p = path or config_path()
    if not p.exists():
        return CardstageConfig.default()
    try:
        with p.open("r", encoding="utf-8") as f:
            data = json.load(f)
    except (OSError, ValueError) as e:
        log.warning("ignoring unreadable config %s: %s", p, e)
        return CardstageConfig.default()
    if not isinstance(data, dict):
        return CardstageConfig.default()
    return CardstageConfig.from_dict(data)


def save_config(cfg: CardstageConfig, path: Optional[Path] = None) -> None:
    p = path or config_path()
    p.parent.mkdir(parents=True, exist_ok=True)
    tmp = p.with_suffix(p.suffix + ".tmp")
    with tmp.open("w", encoding="utf-8") as f:
        json.dump(cfg.to_dict(), f, indent=2, sort_keys=True)
        f.write("\n")
    tmp.replace(p)
