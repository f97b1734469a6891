"""Rotation helpers for card orientation.

Cards follow the usual scene-graph convention: a card's front faces its local
+Z axis, world "up" is +Y, and orientations are stored as XYZ Euler angles
(the rotation matrix is Rx @ Ry @ Rz).

`look_at` reproduces the object (non-camera) look-at rule: it builds the
rotation whose +Z axis points from the card position toward a target point.
When the viewing direction is parallel to "up" the direction is nudged by a
tiny amount along Z (or X) so the basis stays well defined; this is what keeps
the two sphere poles finite.
"""
from __future__ import annotations

import math

import numpy as np

from .pose import Euler, Vec3

WORLD_UP = Vec3(0.0, 1.0, 0.0)

_GIMBAL_LIMIT = 0.9999999
_PARALLEL_NUDGE = 0.0001


def _vec(v: Vec3) -> np.ndarray:
    return np.array([v.x, v.y, v.z], dtype=np.float64)


def _unit(a: np.ndarray) -> np.ndarray:
    n = float(np.linalg.norm(a))
    if n == 0.0:
        return a
    return a / n


def rotation_x(angle: float) -> np.ndarray:
    c, s = math.cos(angle), math.sin(angle)
    return np.array([[1.0, 0.0, 0.0], [0.0, c, -s], [0.0, s, c]])


def rotation_y(angle: float) -> np.ndarray:
    c, s = math.cos(angle), math.sin(angle)
    return np.array([[c, 0.0, s], [0.0, 1.0, 0.0], [-s, 0.0, c]])


def rotation_z(angle: float) -> np.ndarray:
    c, s = math.cos(angle), math.sin(angle)
    return np.array([[c, -s, 0.0], [s, c, 0.0], [0.0, 0.0, 1.0]])


def euler_to_matrix(e: Euler) -> np.ndarray:
    return rotation_x(e.x) @ rotation_y(e.y) @ rotation_z(e.z)


def matrix_to_euler(m: np.ndarray) -> Euler:
    """Decompose a pure rotation matrix into XYZ Euler angles."""

    m13 = float(np.clip(m[0, 2], -1.0, 1.0))
    y = math.asin(m13)
    if abs(m13) < _GIMBAL_LIMIT:
        x = math.atan2(-m[1, 2], m[2, 2])
        z = math.atan2(-m[0, 1], m[0, 0])
    else:
        x = math.atan2(m[2, 1], m[1, 1])
        z = 0.0
    return Euler(float(x), float(y), float(z))


def look_at_matrix(position: Vec3, target: Vec3, up: Vec3 = WORLD_UP) -> np.ndarray:
    """Rotation whose local +Z axis points from `position` toward `target`."""

    up_v = _vec(up)
    z = _vec(target) - _vec(position)
    if float(np.linalg.norm(z)) == 0.0:
        z = np.array([0.0, 0.0, 1.0])
    z = _unit(z)

    x = np.cross(up_v, z)
    if float(np.linalg.norm(x)) == 0.0:
        if abs(up.z) == 1.0:
            z[0] += _PARALLEL_NUDGE
        else:
            z[2] += _PARALLEL_NUDGE
        z = _unit(z)
        x = np.cross(up_v, z)
    x = _unit(x)
    y = np.cross(z, x)

    return np.column_stack((x, y, z))


def look_at(position: Vec3, target: Vec3, *, turn_around: bool = False) -> Euler:
    """Orientation for a card at `position` facing `target`.

    With `turn_around` the card is additionally spun 180 degrees about its
    own Y axis, so it faces directly away from the target.
    """

    m = look_at_matrix(position, target)
    if turn_around:
        m = m @ rotation_y(math.pi)
    return matrix_to_euler(m)


def forward_vector(e: Euler) -> Vec3:
    """World-space direction of a card's local +Z axis."""

    f = euler_to_matrix(e)[:, 2]
    return Vec3(float(f[0]), float(f[1]), float(f[2]))
