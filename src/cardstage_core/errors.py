from __future__ import annotations

from typing import Optional


class DegenerateInputError(ValueError):
    """A card count for which a spread formula would divide by (count - 1)."""


class CapacityExceededWarning(UserWarning):
    """More cards than a fixed-lattice layout can hold; the rest stay put."""

    def __init__(self, scheme: str, count: int, capacity: int) -> None:
        self.scheme = scheme
        self.count = count
        self.capacity = capacity
        super().__init__(
            f"{scheme}: {count} cards exceed capacity {capacity}; "
            f"{count - capacity} card(s) get no target and stay put"
        )


class MissingTargetError(LookupError):
    """A card index has no entry in a layout's target sequence."""

    def __init__(self, scheme: str, index: int, available: int) -> None:
        self.scheme = scheme
        self.index = index
        self.available = available
        super().__init__(f"{scheme}: card {index} has no target ({available} targets)")


class UnknownLayoutError(ValueError):
    pass


def require_spread(count: int) -> int:
    """Return `count - 1` for spread formulas, refusing degenerate counts."""

    if count < 2:
        raise DegenerateInputError(f"count={count} is too small to spread (need >= 2)")
    return count - 1


def capacity_warning(scheme: str, count: int, capacity: Optional[int]) -> Optional[CapacityExceededWarning]:
    if capacity is None or count <= capacity:
        return None
    return CapacityExceededWarning(scheme, count, capacity)
