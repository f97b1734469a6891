from __future__ import annotations

import colorsys
import re
from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple

import numpy as np

from cardstage_cli.dataset import Person, fill_color, index_hue, net_worth_accent
from cardstage_core.geometry import euler_to_matrix
from cardstage_core.pose import Pose

RGBA = Tuple[float, float, float, float]

_CSS_RGBA_RE = re.compile(r"rgba?\(\s*([\d.]+)\s*,\s*([\d.]+)\s*,\s*([\d.]+)\s*(?:,\s*([\d.]+)\s*)?\)")


@dataclass(frozen=True)
class SceneConfig:
    # Visualization scaling factor applied to all world units.
    # This is purely a rendering concern.
    scale: float = 0.001

    # Half extent of the plotted cube, in world units.
    extent: float = 2200.0

    # Length of the facing arrow drawn from each card, in world units.
    facing_length: float = 160.0
    show_facing: bool = True

    background: str = "#05060F"
    facing_color: str = "#7FD3FF"
    marker_size: int = 22

    # Camera view
    elev_deg: float = 18.0
    azim_deg: float = -58.0


@dataclass(frozen=True)
class CardStyle:
    edge: str
    face: RGBA
    label: str = ""


def css_rgba(value: str) -> RGBA:
    """Parse a CSS `rgb()`/`rgba()` string into a matplotlib RGBA tuple."""

    m = _CSS_RGBA_RE.fullmatch(value.strip())
    if not m:
        raise ValueError(f"not a CSS rgb/rgba colour: {value!r}")
    r, g, b = (float(m.group(i)) / 255.0 for i in (1, 2, 3))
    a = float(m.group(4)) if m.group(4) is not None else 1.0
    return (r, g, b, a)


def card_styles(count: int, people: Optional[Sequence[Person]] = None) -> List[CardStyle]:
    """Colour each card by net worth, or by a golden-angle hue when there is no data."""

    out: List[CardStyle] = []
    for i in range(count):
        person = people[i] if people is not None and i < len(people) else None
        if person is not None and person.net_worth:
            accent = net_worth_accent(person.net_worth)
            out.append(CardStyle(edge=accent, face=css_rgba(fill_color(accent)), label=person.name))
            continue
        r, g, b = colorsys.hls_to_rgb(index_hue(i) / 360.0, 0.52, 0.7)
        out.append(CardStyle(edge="#FFFFFF", face=(r, g, b, 0.85), label=person.name if person else ""))
    return out


def poses_to_arrays(poses: Sequence[Pose]) -> Tuple[np.ndarray, np.ndarray]:
    """Return (positions, facing) as (N, 3) arrays; facing is each card's local +Z."""

    if not poses:
        return np.zeros((0, 3)), np.zeros((0, 3))
    positions = np.array([p.position.as_tuple() for p in poses], dtype=np.float64)
    facing = np.array([euler_to_matrix(p.orientation)[:, 2] for p in poses], dtype=np.float64)
    return positions, facing


def _set_axes_equal(ax) -> None:
    """Use one scale on all three axes so spheres look round."""

    limits = np.array([ax.get_xlim3d(), ax.get_ylim3d(), ax.get_zlim3d()], dtype=np.float64)
    centers = limits.mean(axis=1)
    radius = 0.5 * float(np.max(np.abs(limits[:, 1] - limits[:, 0])))
    ax.set_xlim3d(centers[0] - radius, centers[0] + radius)
    ax.set_ylim3d(centers[1] - radius, centers[1] + radius)
    ax.set_zlim3d(centers[2] - radius, centers[2] + radius)


def draw_cards(
    ax,
    poses: Sequence[Pose],
    *,
    cfg: SceneConfig,
    styles: Optional[Sequence[CardStyle]] = None,
    title: str = "",
    set_view: bool = True,
) -> None:
    """Draw the live card poses into a provided 3D matplotlib axis.

    Scene coordinates have +Y up. matplotlib's mplot3d treats Z as "up", so
    we map (X, Y, Z) -> (X_mpl, Y_mpl, Z_mpl) = (X, Z, Y).

    The camera angle is only (re)applied when `set_view` is true, so frames
    drawn with `set_view=False` keep whatever rotation the user dragged to.
    """

    ax.clear()
    ax.set_facecolor(cfg.background)

    s = float(cfg.scale)
    half = cfg.extent * s

    positions, facing = poses_to_arrays(poses)
    if len(positions):
        pts = positions[:, [0, 2, 1]] * s
        dirs = facing[:, [0, 2, 1]] * cfg.facing_length * s

        if styles:
            faces = [st.face for st in styles[: len(pts)]]
            edges = [st.edge for st in styles[: len(pts)]]
        else:
            faces = ["#FDCA35"] * len(pts)
            edges = ["#FFFFFF"] * len(pts)

        ax.scatter(
            pts[:, 0],
            pts[:, 1],
            pts[:, 2],
            c=faces,
            edgecolors=edges,
            s=cfg.marker_size,
            depthshade=False,
            linewidths=0.8,
        )
        if cfg.show_facing:
            ax.quiver(
                pts[:, 0],
                pts[:, 1],
                pts[:, 2],
                dirs[:, 0],
                dirs[:, 1],
                dirs[:, 2],
                color=cfg.facing_color,
                linewidth=0.6,
                arrow_length_ratio=0.0,
            )

    ax.set_xlabel("X")
    ax.set_ylabel("Z")
    ax.set_zlabel("Y (up)")
    if title:
        ax.set_title(title)

    if set_view:
        ax.view_init(elev=cfg.elev_deg, azim=cfg.azim_deg)
    ax.set_xlim(-half, half)
    ax.set_ylim(-half, half)
    ax.set_zlim(-half, half)
    _set_axes_equal(ax)

    ax.set_xticks([])
    ax.set_yticks([])
    ax.set_zticks([])


__all__ = [
    "CardStyle",
    "SceneConfig",
    "card_styles",
    "css_rgba",
    "draw_cards",
    "poses_to_arrays",
]
