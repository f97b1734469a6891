from __future__ import annotations

import math
from dataclasses import dataclass


@dataclass(frozen=True)
class Vec3:
    x: float = 0.0
    y: float = 0.0
    z: float = 0.0

    def __add__(self, other: "Vec3") -> "Vec3":
        return Vec3(self.x + other.x, self.y + other.y, self.z + other.z)

    def __sub__(self, other: "Vec3") -> "Vec3":
        return Vec3(self.x - other.x, self.y - other.y, self.z - other.z)

    def __mul__(self, s: float) -> "Vec3":
        return Vec3(self.x * s, self.y * s, self.z * s)

    __rmul__ = __mul__

    def dot(self, other: "Vec3") -> float:
        return self.x * other.x + self.y * other.y + self.z * other.z

    def cross(self, other: "Vec3") -> "Vec3":
        return Vec3(
            self.y * other.z - self.z * other.y,
            self.z * other.x - self.x * other.z,
            self.x * other.y - self.y * other.x,
        )

    def length(self) -> float:
        return math.sqrt(self.dot(self))

    def normalized(self) -> "Vec3":
        n = self.length()
        if n == 0.0:
            return Vec3()
        return Vec3(self.x / n, self.y / n, self.z / n)

    def as_tuple(self) -> tuple[float, float, float]:
        return (self.x, self.y, self.z)

    def is_finite(self) -> bool:
        return all(math.isfinite(v) for v in (self.x, self.y, self.z))


@dataclass(frozen=True)
class Euler:
    """Rotation angles in radians about the local X, Y and Z axes (XYZ order)."""

    x: float = 0.0
    y: float = 0.0
    z: float = 0.0

    def as_tuple(self) -> tuple[float, float, float]:
        return (self.x, self.y, self.z)

    def is_finite(self) -> bool:
        return all(math.isfinite(v) for v in (self.x, self.y, self.z))


def mix(a: float, b: float, t: float) -> float:
    # Exact at t=0 and t=1.
    return (1.0 - t) * a + t * b


def mix_vec3(a: Vec3, b: Vec3, t: float) -> Vec3:
    return Vec3(mix(a.x, b.x, t), mix(a.y, b.y, t), mix(a.z, b.z, t))


def mix_euler(a: Euler, b: Euler, t: float) -> Euler:
    # Per-angle, not slerp: large deltas may take the long way round.
    return Euler(mix(a.x, b.x, t), mix(a.y, b.y, t), mix(a.z, b.z, t))


@dataclass
class Pose:
    position: Vec3 = Vec3()
    orientation: Euler = Euler()

    def copy(self) -> "Pose":
        # Vec3/Euler are immutable, so a shallow copy never aliases mutable state.
        return Pose(self.position, self.orientation)

    def is_finite(self) -> bool:
        return self.position.is_finite() and self.orientation.is_finite()

    @staticmethod
    def from_dict(d: dict) -> "Pose":
        p = d.get("position", [0.0, 0.0, 0.0])
        r = d.get("orientation", [0.0, 0.0, 0.0])
        return Pose(Vec3(*(float(v) for v in p)), Euler(*(float(v) for v in r)))

    def to_dict(self) -> dict:
        return {
            "position": list(self.position.as_tuple()),
            "orientation": list(self.orientation.as_tuple()),
        }
