"""Target layouts for a deck of cards.

Every generator is a pure function `count -> list[Pose]`; index i of the
result is the target for card i. Fixed-lattice layouts (table, grid) hold at
most 200 cards and silently leave the remaining cards without a target.

World units are roughly "CSS pixels": a card is about 200 units wide.
"""
from __future__ import annotations

import logging
import math
from typing import Callable, Dict, List, Optional

from .errors import UnknownLayoutError, capacity_warning, require_spread
from .geometry import look_at
from .pose import Euler, Pose, Vec3

log = logging.getLogger(__name__)

ORIGIN = Vec3(0.0, 0.0, 0.0)

TABLE_COLS = 20
TABLE_ROWS = 10
TABLE_COL_SPACING = 220.0
TABLE_ROW_SPACING = 280.0
TABLE_DEPTH = 50.0

SPHERE_RADIUS = 1400.0
GOLDEN_ANGLE = math.pi * (3.0 - math.sqrt(5.0))

HELIX_RADIUS = 1400.0
HELIX_TURNS = 4
HELIX_HEIGHT = 2000.0

GRID_DIMS = (5, 4, 10)
GRID_SPACING = (420.0, 420.0, 420.0)

PYRAMID_APEX_HEIGHT = 1400.0
PYRAMID_BASE_RADIUS = 1600.0
PYRAMID_SEAM_OFFSET = 10.0
PYRAMID_MAX_ROWS = 50

TETRA_RADIUS = 1200.0
TETRA_INSET = 0.15
TETRA_DIRECTIONS = (
    Vec3(1.0, 1.0, 1.0),
    Vec3(-1.0, -1.0, 1.0),
    Vec3(-1.0, 1.0, -1.0),
    Vec3(1.0, -1.0, -1.0),
)
TETRA_FACES = ((0, 1, 2), (0, 1, 3), (0, 2, 3), (1, 2, 3))


def _check_count(count: int) -> int:
    count = int(count)
    if count < 0:
        raise ValueError("count must be >= 0")
    return count


def _gen_table(count: int) -> List[Pose]:
    total_w = (TABLE_COLS - 1) * TABLE_COL_SPACING
    total_h = (TABLE_ROWS - 1) * TABLE_ROW_SPACING
    out: List[Pose] = []
    for i in range(min(count, TABLE_COLS * TABLE_ROWS)):
        col = i % TABLE_COLS
        row = i // TABLE_COLS
        pos = Vec3(
            col * TABLE_COL_SPACING - total_w / 2.0,
            total_h / 2.0 - row * TABLE_ROW_SPACING,
            TABLE_DEPTH,
        )
        out.append(Pose(pos, Euler()))
    return out


def _gen_sphere(count: int) -> List[Pose]:
    if count == 0:
        return []
    if count == 1:
        # The spiral formula needs two points; park a lone card on the north pole.
        pos = Vec3(0.0, SPHERE_RADIUS, 0.0)
        return [Pose(pos, look_at(pos, ORIGIN, turn_around=True))]

    denom = require_spread(count)
    out: List[Pose] = []
    for i in range(count):
        y = 1.0 - (i / denom) * 2.0
        radius_at_y = math.sqrt(max(0.0, 1.0 - y * y))
        theta = GOLDEN_ANGLE * i
        pos = Vec3(
            SPHERE_RADIUS * math.cos(theta) * radius_at_y,
            SPHERE_RADIUS * y,
            SPHERE_RADIUS * math.sin(theta) * radius_at_y,
        )
        out.append(Pose(pos, look_at(pos, ORIGIN, turn_around=True)))
    return out


def _gen_helix(count: int) -> List[Pose]:
    per_strand = math.ceil(count / 2)
    step_y = HELIX_HEIGHT / max(1, per_strand - 1)
    out: List[Pose] = []
    for i in range(count):
        strand = i % 2
        n = i // 2
        t = n / (per_strand - 1) if per_strand > 1 else 0.0
        angle = t * HELIX_TURNS * 2.0 * math.pi
        phase = 0.0 if strand == 0 else math.pi
        y = HELIX_HEIGHT / 2.0 - n * step_y
        pos = Vec3(
            HELIX_RADIUS * math.cos(angle + phase),
            y,
            HELIX_RADIUS * math.sin(angle + phase),
        )
        out.append(Pose(pos, look_at(pos, Vec3(0.0, y, 0.0), turn_around=True)))
    return out


def _gen_grid(count: int) -> List[Pose]:
    nx, ny, nz = GRID_DIMS
    sx, sy, sz = GRID_SPACING
    off_x = (nx - 1) * sx / 2.0
    off_y = (ny - 1) * sy / 2.0
    off_z = (nz - 1) * sz / 2.0
    out: List[Pose] = []
    for i in range(count):
        xi = i % nx
        yi = (i % (nx * ny)) // nx
        zi = i // (nx * ny)
        if zi >= nz:
            break
        pos = Vec3(xi * sx - off_x, off_y - yi * sy, zi * sz - off_z)
        out.append(Pose(pos, Euler()))
    return out


def _pyramid_row_count(count: int) -> tuple[int, int]:
    """Largest R whose full 3-face pyramid fits in `count`, and its card total."""

    rows = 1
    needed = 1
    while rows < PYRAMID_MAX_ROWS:
        nxt = 1 + 3 * ((rows + 1) * (rows + 2) - 2) // 2
        if nxt > count:
            break
        rows += 1
        needed = nxt
    return rows, needed


def _rows_for_face(cards: int) -> int:
    # Rows 2, 3, ... until the face's share fits (row 1 is the shared apex).
    rows, held = 1, 0
    while held < cards:
        rows += 1
        held += rows
    return rows


def _outward_face_normal(apex: Vec3, b1: Vec3, b2: Vec3, center: Vec3) -> Vec3:
    normal = (b1 - apex).cross(b2 - apex).normalized()
    face_center = (apex + b1 + b2) * (1.0 / 3.0)
    if normal.dot(face_center - center) < 0.0:
        normal = normal * -1.0
    return normal


def _gen_pyramid(count: int) -> List[Pose]:
    if count == 0:
        return []

    rows, needed = _pyramid_row_count(count)
    cards_per_face = rows * (rows + 1) // 2
    extra = count - needed

    apex = Vec3(0.0, PYRAMID_APEX_HEIGHT, 0.0)
    base: List[Vec3] = []
    for i in range(3):
        a = i * 2.0 * math.pi / 3.0 - math.pi / 2.0
        base.append(Vec3(PYRAMID_BASE_RADIUS * math.cos(a), 0.0, PYRAMID_BASE_RADIUS * math.sin(a)))
    center = (apex + base[0] + base[1] + base[2]) * 0.25

    apex_look = Vec3(0.0, PYRAMID_APEX_HEIGHT * 0.4, PYRAMID_BASE_RADIUS * 0.6)
    out: List[Pose] = [Pose(apex, look_at(apex, apex_look))]

    extra_per_face, remainder = divmod(extra, 3)
    for face in range(3):
        b1 = base[face]
        b2 = base[(face + 1) % 3]
        face_cards = cards_per_face - 1 + extra_per_face + (1 if face < remainder else 0)
        face_rows = _rows_for_face(face_cards)
        normal = _outward_face_normal(apex, b1, b2, center)

        # Extra cards grow the face past R rows instead of being dropped.
        placed = 0
        for row in range(2, face_rows + 1):
            in_row = min(row, face_cards - placed)
            if in_row <= 0:
                break
            t = (row - 1) / face_rows
            for col in range(in_row):
                s = col / (in_row - 1) if in_row > 1 else 0.5
                edge_point = b1 * (1.0 - s) + b2 * s
                pos = apex * (1.0 - t) + edge_point * t + normal * PYRAMID_SEAM_OFFSET
                out.append(Pose(pos, look_at(pos, pos + normal * 200.0)))
            placed += in_row
    return out


def _gen_triangle(count: int) -> List[Pose]:
    verts = [d.normalized() * TETRA_RADIUS for d in TETRA_DIRECTIONS]
    per_face = -(-count // len(TETRA_FACES))
    if per_face == 0:
        return []

    rows = math.ceil((math.sqrt(8 * per_face + 1) - 1) / 2)
    inset = TETRA_INSET / (rows + 1)

    out: List[Pose] = []
    for i in range(count):
        face = min(i // per_face, len(TETRA_FACES) - 1)
        idx = i % per_face

        row, before = 0, 0
        while row < rows and idx >= before + row + 1:
            before += row + 1
            row += 1
        col = idx - before
        in_row = row + 1

        t = 0.5 if rows <= 1 else inset + (row / (rows - 1)) * (1.0 - 2.0 * inset)
        s = 0.5 if in_row <= 1 else inset + (col / (in_row - 1)) * (1.0 - 2.0 * inset)

        a, b, c = (verts[k] for k in TETRA_FACES[face])
        pos = a * (1.0 - t) + b * (t * (1.0 - s)) + c * (t * s)
        out.append(Pose(pos, look_at(pos, pos * 2.0)))
    return out


LAYOUT_GENERATORS: Dict[str, Callable[[int], List[Pose]]] = {
    "table": _gen_table,
    "sphere": _gen_sphere,
    "helix": _gen_helix,
    "grid": _gen_grid,
    "pyramid": _gen_pyramid,
    "triangle": _gen_triangle,
}

LAYOUT_NAMES = tuple(LAYOUT_GENERATORS)

LAYOUT_CAPACITY: Dict[str, Optional[int]] = {
    "table": TABLE_COLS * TABLE_ROWS,
    "sphere": None,
    "helix": None,
    "grid": GRID_DIMS[0] * GRID_DIMS[1] * GRID_DIMS[2],
    "pyramid": None,
    "triangle": None,
}

DEFAULT_DURATIONS_MS: Dict[str, float] = {
    "table": 900.0,
    "sphere": 1100.0,
    "helix": 1100.0,
    "grid": 1100.0,
    "pyramid": 2000.0,
    "triangle": 2000.0,
}


def normalize_scheme(scheme: str) -> str:
    name = (scheme or "").strip().lower()
    if name not in LAYOUT_GENERATORS:
        raise UnknownLayoutError(f"unknown layout {scheme!r} (expected one of: {', '.join(LAYOUT_NAMES)})")
    return name


def layout_capacity(scheme: str) -> Optional[int]:
    return LAYOUT_CAPACITY[normalize_scheme(scheme)]


def generate_layout(scheme: str, count: int) -> List[Pose]:
    """Compute the target sequence of `scheme` for `count` cards."""

    name = normalize_scheme(scheme)
    count = _check_count(count)
    warning = capacity_warning(name, count, LAYOUT_CAPACITY[name])
    if warning is not None:
        log.debug("%s", warning)
    targets = LAYOUT_GENERATORS[name](count)
    log.debug("generated %s layout: %d target(s) for %d card(s)", name, len(targets), count)
    return targets
