from __future__ import annotations

from typing import List

from cardstage_core.layouts import normalize_scheme
from cardstage_core.pose import Pose


def parse_scheme_list(values: List[str]) -> List[str]:
    """Normalize scheme names given as separate args and/or comma lists.

    Examples:
    - ["table", "sphere"] -> ["table", "sphere"]
    - ["Table,SPHERE", "helix"] -> ["table", "sphere", "helix"]

    Raises UnknownLayoutError (a ValueError) on an unknown name, and
    ValueError if nothing was given.
    """
    out: List[str] = []
    for v in values:
        for part in v.split(","):
            part = part.strip()
            if part:
                out.append(normalize_scheme(part))
    if not out:
        raise ValueError("at least one layout is required")
    return out


def format_pose_line(index: int, pose: Pose) -> str:
    p = pose.position
    r = pose.orientation
    return (
        f"{index:04d} pos=({p.x:.2f}, {p.y:.2f}, {p.z:.2f}) "
        f"rot=({r.x:.4f}, {r.y:.4f}, {r.z:.4f})"
    )
