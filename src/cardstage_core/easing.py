from __future__ import annotations


def clamp01(v: float) -> float:
    if not v > 0.0:
        # NaN lands here too.
        return 0.0
    if v >= 1.0:
        return 1.0
    return v


def ease_in_out_expo(k: float) -> float:
    """Exponential ease-in-out on [0, 1].

    Exactly 0 at k=0 and exactly 1 at k=1; almost all of the motion happens in
    a narrow window around k=0.5.
    """

    k = clamp01(k)
    if k == 0.0 or k == 1.0:
        return k
    if k < 0.5:
        return 0.5 * 2.0 ** (20.0 * k - 10.0)
    return 1.0 - 0.5 * 2.0 ** (-20.0 * k + 10.0)
