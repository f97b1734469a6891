import unittest

from cardstage_core.errors import MissingTargetError, UnknownLayoutError
from cardstage_core.frames import ManualClock, run_until_idle
from cardstage_core.layouts import generate_layout
from cardstage_core.pose import Euler, Pose, Vec3
from cardstage_core.stage import Stage, scatter_poses
from cardstage_core.transitions import TransitionEngine


def _engine(cards, start: float = 0.0):
    clock = ManualClock(start)
    return TransitionEngine(cards, clock=clock), clock


class TestTransitionEngine(unittest.TestCase):
    def test_boundaries_hit_from_and_to_exactly(self) -> None:
        a = Pose(Vec3(1.0, 2.0, 3.0), Euler(0.1, 0.2, 0.3))
        b = Pose(Vec3(-5.0, 7.25, 11.0), Euler(1.0, -2.0, 3.0))
        engine, _clock = _engine([a.copy()], start=100.0)

        self.assertEqual(engine.begin_transition([b], 500.0), 1)
        self.assertEqual(engine.tick(100.0), 1)
        self.assertEqual(engine.cards[0], a)

        self.assertEqual(engine.tick(600.0), 0)
        self.assertEqual(engine.cards[0], b)
        self.assertFalse(engine.is_animating())

    def test_tick_before_start_holds_the_from_pose(self) -> None:
        a = Pose(Vec3(3.0, 3.0, 3.0))
        engine, _clock = _engine([a.copy()], start=50.0)
        engine.begin_transition([Pose(Vec3(9.0, 9.0, 9.0))], 100.0)
        engine.tick(10.0)
        self.assertEqual(engine.cards[0], a)

    def test_same_targets_twice_land_in_the_same_place(self) -> None:
        targets = generate_layout("helix", 8)
        cards = scatter_poses(8)

        once, c1 = _engine([p.copy() for p in cards])
        once.begin_transition(targets, 300.0)
        run_until_idle(once, c1)

        twice, c2 = _engine([p.copy() for p in cards])
        twice.begin_transition(targets, 300.0)
        twice.begin_transition(targets, 300.0)
        run_until_idle(twice, c2)

        self.assertEqual(once.cards, twice.cards)
        self.assertEqual(list(targets), once.cards)

    def test_interrupted_batch_restarts_from_live_pose(self) -> None:
        cards = scatter_poses(5)
        engine, clock = _engine(cards)
        engine.begin_transition(generate_layout("sphere", 5), 1000.0)

        clock.advance(300.0)
        engine.tick()
        live = [p.copy() for p in engine.cards]
        self.assertNotEqual(live[0], engine.active[0].from_pose)

        engine.begin_transition(generate_layout("grid", 5), 1000.0)
        self.assertEqual(engine.active_count(), 5)
        for tr in engine.active:
            self.assertEqual(tr.from_pose, live[tr.card_index])
            self.assertEqual(tr.start_time, 300.0)

        # The first frame of the new batch does not move anything.
        engine.tick()
        self.assertEqual(engine.cards, live)

    def test_new_batch_replaces_the_old_one(self) -> None:
        engine, _clock = _engine(scatter_poses(6))
        engine.begin_transition(generate_layout("table", 6), 1000.0)
        engine.begin_transition(generate_layout("table", 2), 1000.0)
        self.assertEqual(engine.active_count(), 2)
        self.assertEqual(sorted(tr.card_index for tr in engine.active), [0, 1])

    def test_cards_without_a_target_stay_put(self) -> None:
        cards = scatter_poses(3)
        before = cards[2].copy()
        engine, clock = _engine(cards)
        self.assertEqual(engine.begin_transition(generate_layout("table", 2), 200.0), 2)
        run_until_idle(engine, clock)
        self.assertEqual(engine.cards[2], before)

    def test_non_positive_duration_completes_on_next_tick(self) -> None:
        for duration in (0.0, -25.0):
            target = Pose(Vec3(10.0, 20.0, 30.0), Euler(0.5, 0.0, 0.0))
            engine, _clock = _engine([Pose()])
            engine.begin_transition([target], duration)
            self.assertEqual(engine.tick(), 0)
            self.assertEqual(engine.cards[0], target)

    def test_non_finite_duration_completes_on_next_tick(self) -> None:
        for duration in (float("nan"), float("inf"), float("-inf")):
            target = Pose(Vec3(1.0, 2.0, 3.0), Euler(0.0, 0.25, 0.0))
            engine, clock = _engine([Pose()])
            engine.begin_transition([target], duration)
            clock.advance(16.0)
            self.assertEqual(engine.tick(), 0)
            self.assertEqual(engine.cards[0], target)
            self.assertTrue(engine.cards[0].is_finite())

    def test_nan_time_holds_the_from_pose(self) -> None:
        a = Pose(Vec3(4.0, 5.0, 6.0))
        engine, _clock = _engine([a.copy()])
        engine.begin_transition([Pose(Vec3(-4.0, -5.0, -6.0))], 100.0)
        self.assertEqual(engine.tick(float("nan")), 1)
        self.assertEqual(engine.cards[0], a)

    def test_cancel_and_replace_cards(self) -> None:
        engine, _clock = _engine(scatter_poses(4))
        engine.begin_transition(generate_layout("grid", 4), 100.0)
        engine.cancel()
        self.assertFalse(engine.is_animating())

        engine.begin_transition(generate_layout("grid", 4), 100.0)
        engine.replace_cards(scatter_poses(2))
        self.assertEqual(len(engine.cards), 2)
        self.assertEqual(engine.active_count(), 0)


class TestFrames(unittest.TestCase):
    def test_frame_count_covers_the_duration(self) -> None:
        engine, clock = _engine(scatter_poses(3))
        engine.begin_transition(generate_layout("table", 3), 900.0)
        self.assertEqual(run_until_idle(engine, clock, frame_ms=16.0), 57)
        self.assertEqual(clock(), 912.0)

    def test_on_frame_sees_every_tick(self) -> None:
        engine, clock = _engine(scatter_poses(1))
        engine.begin_transition(generate_layout("sphere", 1), 100.0)
        seen = []
        run_until_idle(engine, clock, frame_ms=25.0, on_frame=lambda i, now: seen.append((i, now)))
        self.assertEqual(seen, [(1, 25.0), (2, 50.0), (3, 75.0), (4, 100.0)])

    def test_idle_engine_runs_no_frames(self) -> None:
        engine, clock = _engine(scatter_poses(2))
        self.assertEqual(run_until_idle(engine, clock), 0)

    def test_invalid_frame_settings(self) -> None:
        engine, clock = _engine(scatter_poses(1))
        engine.begin_transition(generate_layout("grid", 1), 1000.0)
        with self.assertRaises(ValueError):
            run_until_idle(engine, clock, frame_ms=0.0)
        with self.assertRaises(ValueError):
            run_until_idle(engine, clock, frame_ms=float("nan"))
        with self.assertRaises(RuntimeError):
            run_until_idle(engine, clock, frame_ms=16.0, max_frames=3)
        with self.assertRaises(ValueError):
            clock.advance(-1.0)


class TestStage(unittest.TestCase):
    def test_six_cards_settle_on_the_first_table_cells(self) -> None:
        clock = ManualClock()
        stage = Stage(6, clock=clock, seed=7)
        self.assertEqual(stage.switch("table"), 6)
        self.assertEqual(stage.duration_for("table"), 900.0)

        clock.advance(900.0)
        self.assertEqual(stage.tick(), 0)
        for col, card in enumerate(stage.cards):
            self.assertEqual(card.position, Vec3(col * 220.0 - 2090.0, 1260.0, 50.0))
            self.assertEqual(card.orientation, Euler())
        self.assertEqual(stage.engine.active_count(), 0)

    def test_seed_makes_the_scatter_repeatable(self) -> None:
        self.assertEqual(Stage(10, seed=3).cards, Stage(10, seed=3).cards)
        for card in Stage(50, seed=1).cards:
            for v in card.position.as_tuple():
                self.assertLessEqual(abs(v), 2000.0)

    def test_targets_are_cached_per_layout(self) -> None:
        stage = Stage(12)
        self.assertIs(stage.targets("sphere"), stage.targets("SPHERE"))
        self.assertEqual(len(stage.targets("grid")), 12)

    def test_overflow_cards_have_no_target(self) -> None:
        clock = ManualClock()
        stage = Stage(250, clock=clock, seed=2)
        with self.assertRaises(MissingTargetError) as ctx:
            stage.target_pose("table", 210)
        self.assertEqual(ctx.exception.available, 200)

        parked = [p.copy() for p in stage.cards[200:]]
        self.assertEqual(stage.switch("table"), 200)
        run_until_idle(stage.engine, clock)
        self.assertEqual(stage.cards[200:], parked)
        self.assertEqual(stage.cards[199], stage.target_pose("table", 199))

    def test_set_count_keeps_existing_cards(self) -> None:
        stage = Stage(4, seed=5)
        first = [p.copy() for p in stage.cards]
        stage.switch("helix")
        sphere4 = stage.targets("sphere")

        stage.set_count(7)
        self.assertEqual(stage.count, 7)
        self.assertEqual(stage.cards[:4], first)
        self.assertEqual(len(stage.targets("sphere")), 7)
        self.assertIsNot(stage.targets("sphere"), sphere4)
        self.assertFalse(stage.is_animating())
        self.assertEqual(stage.active_layout, "")

        stage.set_count(2)
        self.assertEqual(stage.cards, first[:2])

    def test_duration_overrides(self) -> None:
        stage = Stage(3, durations={"Pyramid": 50})
        self.assertEqual(stage.duration_for("pyramid"), 50.0)
        self.assertEqual(stage.duration_for("triangle"), 2000.0)
        self.assertEqual(stage.duration_for("sphere"), 1100.0)
        with self.assertRaises(UnknownLayoutError):
            Stage(3, durations={"cube": 10})

    def test_switch_with_explicit_duration(self) -> None:
        clock = ManualClock(1000.0)
        stage = Stage(3, clock=clock)
        stage.switch("grid", duration=0)
        self.assertEqual(stage.active_layout, "grid")
        stage.tick()
        self.assertEqual(stage.cards, list(stage.targets("grid")))

    def test_negative_count(self) -> None:
        with self.assertRaises(ValueError):
            Stage(-1)


if __name__ == "__main__":
    unittest.main()
