#!/usr/bin/env python3

# Usage:
# source .venv/bin/activate
# PYTHONPATH=src python3 scripts/plot_layouts.py \
#   --count 120 \
#   --layouts table,sphere,helix,grid,pyramid,triangle \
#   --out-dir out/layouts

from __future__ import annotations

import argparse
from pathlib import Path

import matplotlib

# In headless environments, force a non-interactive backend.
matplotlib.use("Agg")

import matplotlib.pyplot as plt
import numpy as np

from cardstage_cli.parsing import parse_scheme_list
from cardstage_cli.visualizer.viz import SceneConfig, card_styles, draw_cards, poses_to_arrays
from cardstage_core.layouts import LAYOUT_NAMES, generate_layout


def spacing_stats(positions: np.ndarray) -> tuple[float, float]:
    """Return (min, mean) nearest-neighbour distance; (0, 0) for fewer than 2 cards."""

    if len(positions) < 2:
        return 0.0, 0.0
    d = np.linalg.norm(positions[:, None, :] - positions[None, :, :], axis=-1)
    np.fill_diagonal(d, np.inf)
    nearest = d.min(axis=1)
    return float(nearest.min()), float(nearest.mean())


def main() -> int:
    p = argparse.ArgumentParser(description="Render every card layout to PNG.")
    p.add_argument("--count", type=int, default=120, help="Number of cards.")
    p.add_argument(
        "--layouts",
        type=str,
        default=",".join(LAYOUT_NAMES),
        help="Comma-separated layouts. Example: table,sphere",
    )
    p.add_argument("--no-facing", action="store_true", help="Do not draw facing arrows.")
    p.add_argument("--out-dir", type=str, default="./out", help="Output directory for PNGs.")

    args = p.parse_args()

    if args.count < 0:
        raise SystemExit("--count must be >= 0")
    try:
        names = parse_scheme_list([args.layouts])
    except ValueError as e:
        raise SystemExit(str(e))

    out_dir = Path(args.out_dir)
    out_dir.mkdir(parents=True, exist_ok=True)

    cfg = SceneConfig(show_facing=not args.no_facing)
    styles = card_styles(args.count)

    for name in names:
        targets = generate_layout(name, args.count)
        positions, _facing = poses_to_arrays(targets)
        min_d, mean_d = spacing_stats(positions)

        title = f"{name}  cards={args.count} targets={len(targets)}\nnearest min={min_d:.0f} mean={mean_d:.0f}"

        fig = plt.figure(figsize=(7, 7), dpi=150, facecolor=cfg.background)
        ax = fig.add_subplot(111, projection="3d")
        draw_cards(ax, targets, cfg=cfg, styles=styles, title=title)
        ax.title.set_color("#FFFFFF")

        path = out_dir / f"layout_{name}.png"
        fig.tight_layout()
        fig.savefig(path)
        plt.close(fig)

        # Summary to stdout for quick inspection.
        print(title.replace("\n", "  "))
        print(f"out: {path}")

    return 0


if __name__ == "__main__":
    raise SystemExit(main())
