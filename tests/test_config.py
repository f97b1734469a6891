import json
import os
import tempfile
import unittest
from pathlib import Path

from cardstage_cli.config import CONFIG_VERSION, CardstageConfig, load_config, save_config
from cardstage_cli.paths import config_path


class TestConfig(unittest.TestCase):
    def setUp(self) -> None:
        self._old_home = os.environ.get("CARDSTAGE_HOME")
        self._old_path = os.environ.pop("CARDSTAGE_CONFIG_PATH", None)
        self._td = tempfile.TemporaryDirectory()
        os.environ["CARDSTAGE_HOME"] = self._td.name

    def tearDown(self) -> None:
        self._td.cleanup()
        if self._old_home is None:
            os.environ.pop("CARDSTAGE_HOME", None)
        else:
            os.environ["CARDSTAGE_HOME"] = self._old_home
        if self._old_path is not None:
            os.environ["CARDSTAGE_CONFIG_PATH"] = self._old_path

    def test_load_config_default_when_missing(self) -> None:
        cfg = load_config()
        self.assertEqual(cfg.version, CONFIG_VERSION)
        self.assertEqual(cfg.durations_ms["table"], 900.0)
        self.assertEqual(cfg.durations_ms["pyramid"], 2000.0)
        self.assertEqual(cfg.initial_layout, "table")
        self.assertEqual(cfg.initial_duration_ms, 1000.0)
        self.assertIsNone(cfg.seed)

    def test_save_and_load_config_roundtrip(self) -> None:
        cfg = CardstageConfig.default()
        cfg.durations_ms["helix"] = 450.0
        cfg.seed = 42
        save_config(cfg)

        self.assertEqual(config_path(), Path(self._td.name) / "config.json")
        got = load_config()
        self.assertEqual(got.durations_ms["helix"], 450.0)
        self.assertEqual(got.seed, 42)
        self.assertFalse(config_path().with_suffix(".json.tmp").exists())

    def test_config_path_override(self) -> None:
        p = Path(self._td.name) / "elsewhere" / "cfg.json"
        os.environ["CARDSTAGE_CONFIG_PATH"] = str(p)
        try:
            save_config(CardstageConfig.default())
            self.assertTrue(p.exists())
        finally:
            os.environ.pop("CARDSTAGE_CONFIG_PATH", None)

    def test_unreadable_config_falls_back_to_defaults(self) -> None:
        p = config_path()
        p.write_text("{not json", encoding="utf-8")
        with self.assertLogs("cardstage_cli.config", level="WARNING"):
            cfg = load_config()
        self.assertEqual(cfg.to_dict(), CardstageConfig.default().to_dict())

    def test_bad_values_are_replaced(self) -> None:
        config_path().write_text(
            json.dumps(
                {
                    "durations_ms": {"table": "fast", "grid": -5, "sphere": 300, "cube": 1},
                    "initial_layout": "Cube",
                    "frame_ms": 0,
                    "seed": "abc",
                }
            ),
            encoding="utf-8",
        )
        cfg = load_config()
        self.assertEqual(cfg.durations_ms["table"], 900.0)
        self.assertEqual(cfg.durations_ms["grid"], 1100.0)
        self.assertEqual(cfg.durations_ms["sphere"], 300.0)
        self.assertNotIn("cube", cfg.durations_ms)
        self.assertEqual(cfg.initial_layout, "table")
        self.assertEqual(cfg.frame_ms, 16.0)
        self.assertIsNone(cfg.seed)


if __name__ == "__main__":
    unittest.main()
