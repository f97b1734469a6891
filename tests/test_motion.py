import math
import unittest

from cardstage_core.easing import clamp01, ease_in_out_expo
from cardstage_core.geometry import euler_to_matrix, forward_vector, look_at, matrix_to_euler
from cardstage_core.pose import Euler, Pose, Vec3, mix, mix_vec3


class TestEasing(unittest.TestCase):
    def test_boundaries_are_exact(self) -> None:
        self.assertEqual(ease_in_out_expo(0.0), 0.0)
        self.assertEqual(ease_in_out_expo(1.0), 1.0)
        self.assertEqual(ease_in_out_expo(0.5), 0.5)

    def test_clamps_outside_unit_interval(self) -> None:
        self.assertEqual(ease_in_out_expo(-3.0), 0.0)
        self.assertEqual(ease_in_out_expo(7.5), 1.0)
        self.assertEqual(clamp01(0.25), 0.25)
        self.assertEqual(clamp01(float("nan")), 0.0)
        self.assertEqual(ease_in_out_expo(float("nan")), 0.0)

    def test_monotonic(self) -> None:
        prev = -1.0
        for i in range(1001):
            v = ease_in_out_expo(i / 1000.0)
            self.assertGreaterEqual(v, prev)
            prev = v

    def test_slow_start_and_finish(self) -> None:
        self.assertLess(ease_in_out_expo(0.1), 0.01)
        self.assertGreater(ease_in_out_expo(0.9), 0.99)


class TestMix(unittest.TestCase):
    def test_mix_is_exact_at_the_ends(self) -> None:
        a, b = 0.1, 1234.5678
        self.assertEqual(mix(a, b, 0.0), a)
        self.assertEqual(mix(a, b, 1.0), b)

    def test_mix_vec3_midpoint(self) -> None:
        got = mix_vec3(Vec3(0, 0, 0), Vec3(10, -20, 30), 0.5)
        self.assertEqual(got, Vec3(5.0, -10.0, 15.0))

    def test_pose_dict_roundtrip(self) -> None:
        p = Pose(Vec3(1.5, -2.0, 3.0), Euler(0.1, 0.2, 0.3))
        self.assertEqual(Pose.from_dict(p.to_dict()), p)


class TestLookAt(unittest.TestCase):
    def test_card_faces_the_target(self) -> None:
        pos = Vec3(100.0, -50.0, 300.0)
        target = Vec3(-400.0, 250.0, 0.0)
        f = forward_vector(look_at(pos, target))
        want = (target - pos).normalized()
        self.assertAlmostEqual(f.dot(want), 1.0, places=9)

    def test_turn_around_faces_away(self) -> None:
        pos = Vec3(0.0, 0.0, 500.0)
        f = forward_vector(look_at(pos, Vec3(), turn_around=True))
        self.assertAlmostEqual(f.dot(Vec3(0.0, 0.0, 1.0)), 1.0, places=9)

    def test_straight_up_is_finite(self) -> None:
        e = look_at(Vec3(0.0, 0.0, 0.0), Vec3(0.0, 10.0, 0.0))
        self.assertTrue(e.is_finite())
        self.assertGreater(forward_vector(e).y, 0.999)

    def test_euler_matrix_roundtrip(self) -> None:
        for e in (Euler(0.3, -0.7, 1.1), Euler(-2.0, 0.4, -0.2), Euler(0.0, 0.0, 0.0)):
            got = matrix_to_euler(euler_to_matrix(e))
            for a, b in zip(got.as_tuple(), e.as_tuple()):
                self.assertAlmostEqual(a, b, places=9)

    def test_gimbal_lock_keeps_facing(self) -> None:
        e = Euler(0.4, math.pi / 2, 0.0)
        back = matrix_to_euler(euler_to_matrix(e))
        self.assertAlmostEqual(forward_vector(back).dot(forward_vector(e)), 1.0, places=6)


if __name__ == "__main__":
    unittest.main()
