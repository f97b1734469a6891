from __future__ import annotations

import logging
import sys
import tkinter as tk
from tkinter import ttk
from typing import Dict, List, Optional, Sequence

import matplotlib

# TkAgg gives us an embedded window with a minimal amount of code.
matplotlib.use("TkAgg")

from matplotlib.backends.backend_tkagg import FigureCanvasTkAgg, NavigationToolbar2Tk  # noqa: E402
from matplotlib.figure import Figure  # noqa: E402

from cardstage_cli.config import CardstageConfig
from cardstage_cli.dataset import Person
from cardstage_core.layouts import LAYOUT_NAMES
from cardstage_core.stage import Stage

from .viz import SceneConfig, card_styles, draw_cards

log = logging.getLogger(__name__)


class CardstageVisualizerApp:
    def __init__(
        self,
        root: tk.Tk,
        *,
        count: int,
        cfg: CardstageConfig,
        people: Optional[Sequence[Person]] = None,
    ) -> None:
        self.root = root
        self.cfg = cfg
        self.frame_ms = max(1, int(round(cfg.frame_ms)))

        root.title(f"Cardstage 3D ({count} cards)")
        root.geometry("1150x740")

        self.stage = Stage(
            count,
            durations=cfg.durations_ms,
            seed=cfg.seed,
            scatter_extent=cfg.scatter_extent,
        )
        self.styles = card_styles(count, people)
        self.scene_cfg = SceneConfig()

        # --- Controls ---
        controls = ttk.Frame(root, padding=10)
        controls.pack(side=tk.LEFT, fill=tk.Y)

        ttk.Label(controls, text="Layouts", font=("TkDefaultFont", 12, "bold")).pack(anchor="w")

        self.buttons: Dict[str, ttk.Button] = {}
        for name in LAYOUT_NAMES:
            btn = ttk.Button(controls, text=name.upper(), command=lambda n=name: self.on_switch(n))
            btn.pack(fill=tk.X, pady=(6, 0))
            self.buttons[name] = btn

        ttk.Separator(controls).pack(fill=tk.X, pady=10)

        self.show_facing_var = tk.BooleanVar(value=True)
        ttk.Checkbutton(
            controls, text="Show facing", variable=self.show_facing_var, command=self._redraw
        ).pack(anchor="w")
        ttk.Button(controls, text="Reset view", command=self.on_reset_view).pack(fill=tk.X, pady=(6, 0))

        self.status_var = tk.StringVar(value="")
        ttk.Label(controls, textvariable=self.status_var, foreground="#888", wraplength=220).pack(
            anchor="w", pady=(10, 0)
        )

        # --- Figure ---
        fig_frame = ttk.Frame(root, padding=10)
        fig_frame.pack(side=tk.RIGHT, fill=tk.BOTH, expand=True)

        self.fig = Figure(figsize=(7.6, 6.2), dpi=100, facecolor=self.scene_cfg.background)
        self.ax = self.fig.add_subplot(111, projection="3d")

        self.canvas = FigureCanvasTkAgg(self.fig, master=fig_frame)
        self.canvas_widget = self.canvas.get_tk_widget()
        self.canvas_widget.pack(fill=tk.BOTH, expand=True)

        self.toolbar = NavigationToolbar2Tk(self.canvas, fig_frame, pack_toolbar=False)
        self.toolbar.update()
        self.toolbar.pack(side=tk.BOTTOM, fill=tk.X)

        self._frame_job: Optional[str] = None

        # Cards fly in from their scattered start into the initial layout.
        self.stage.switch(cfg.initial_layout, duration=cfg.initial_duration_ms)
        self._mark_active(cfg.initial_layout)
        self._redraw(set_view=True)
        self._schedule_frame()

    def _mark_active(self, name: str) -> None:
        for n, btn in self.buttons.items():
            btn.state(["pressed"] if n == name else ["!pressed"])

    def _set_status(self, msg: str) -> None:
        self.status_var.set(msg)

    def _scene_config(self) -> SceneConfig:
        return SceneConfig(show_facing=bool(self.show_facing_var.get()))

    def _redraw(self, *, set_view: bool = False) -> None:
        title = self.stage.active_layout or "scatter"
        draw_cards(
            self.ax,
            self.stage.cards,
            cfg=self._scene_config(),
            styles=self.styles,
            title=title,
            set_view=set_view,
        )
        self.canvas.draw_idle()

    def _schedule_frame(self) -> None:
        if self._frame_job is None:
            self._frame_job = self.root.after(self.frame_ms, self._on_frame)

    def _on_frame(self) -> None:
        self._frame_job = None
        remaining = self.stage.tick()
        self._redraw()
        if remaining:
            self._set_status(f"{self.stage.active_layout}: {remaining} card(s) moving")
            self._schedule_frame()
        else:
            self._set_status(f"{self.stage.active_layout}: settled")

    def on_switch(self, name: str) -> None:
        n = self.stage.switch(name)
        self._mark_active(name)
        skipped = self.stage.count - n
        msg = f"{name}: {n} card(s) moving"
        if skipped:
            msg += f", {skipped} without a slot stay put"
            log.debug("%s has no slot for %d card(s)", name, skipped)
        self._set_status(msg)
        self._schedule_frame()

    def on_reset_view(self) -> None:
        self._redraw(set_view=True)
        self._set_status("View reset.")


def run_app(*, count: int, cfg: CardstageConfig, people: Optional[List[Person]] = None) -> int:
    root = tk.Tk()
    _ = CardstageVisualizerApp(root, count=count, cfg=cfg, people=people)
    root.mainloop()
    return 0


def main(argv: list[str]) -> int:
    # Minimal arg parser (keep this module importable without Typer).
    count = 60
    it = iter(argv[1:])
    for a in it:
        if a == "--count":
            v = next(it, None)
            if v is not None:
                count = int(v)

    return run_app(count=count, cfg=CardstageConfig.default())


if __name__ == "__main__":
    raise SystemExit(main(sys.argv))
