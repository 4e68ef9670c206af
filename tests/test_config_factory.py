import json
import tempfile
import unittest
from pathlib import Path

from euphonium_coach.audio.pitch_estimator import PitchEstimator
from euphonium_coach.core.config import ConfigManager
from euphonium_coach.core.factory import ComponentFactory
from euphonium_coach.errors import ConfigurationError
from euphonium_coach.practice import SCALES


class TestConfigManager(unittest.TestCase):
    def setUp(self):
        self.temp_dir = tempfile.TemporaryDirectory()
        self.config_dir = Path(self.temp_dir.name)

    def tearDown(self):
        self.temp_dir.cleanup()

    def test_defaults_written_on_first_use(self):
        manager = ConfigManager(self.config_dir)
        for name in ("pitch_estimator", "instrument", "fingering", "practice"):
            self.assertTrue((self.config_dir / f"{name}.json").exists())
        self.assertEqual(manager.get_config("pitch_estimator")["window_size"], 2048)
        self.assertEqual(manager.get_config("instrument")["name"], "Bb")
        self.assertEqual(manager.get_config("practice")["in_tune_cents"], 25)

    def test_missing_keys_filled_from_defaults(self):
        with open(self.config_dir / "pitch_estimator.json", "w") as f:
            json.dump({"algorithm": "yin"}, f)
        config = ConfigManager(self.config_dir).get_config("pitch_estimator")
        self.assertEqual(config["algorithm"], "yin")
        self.assertAlmostEqual(config["noise_gate"], 0.003)

    def test_corrupt_file_falls_back(self):
        (self.config_dir / "practice.json").write_text("{not json")
        config = ConfigManager(self.config_dir).get_config("practice")
        self.assertEqual(config["pool_high"], 71)

    def test_update_and_reset(self):
        manager = ConfigManager(self.config_dir)
        self.assertTrue(manager.update_config("practice", {"in_tune_cents": 10}))
        self.assertEqual(ConfigManager(self.config_dir).get_config("practice")["in_tune_cents"], 10)
        self.assertTrue(manager.reset_config("practice"))
        self.assertEqual(ConfigManager(self.config_dir).get_config("practice")["in_tune_cents"], 25)
        self.assertFalse(manager.update_config("unknown", {}))
        self.assertFalse(manager.reset_config("unknown"))

    def test_get_config_is_a_copy(self):
        manager = ConfigManager(self.config_dir)
        manager.get_config("instrument")["name"] = "C"
        self.assertEqual(manager.get_config("instrument")["name"], "Bb")
        self.assertEqual(manager.get_config("unknown"), {})


class TestComponentFactory(unittest.TestCase):
    def setUp(self):
        self.temp_dir = tempfile.TemporaryDirectory()
        self.manager = ConfigManager(self.temp_dir.name)
        self.factory = ComponentFactory(self.manager)

    def tearDown(self):
        self.temp_dir.cleanup()

    def test_pitch_estimator_from_config(self):
        self.manager.update_config("pitch_estimator", {"algorithm": "yin", "window_size": 4096})
        estimator = self.factory.create_pitch_estimator()
        self.assertIsInstance(estimator, PitchEstimator)
        self.assertEqual(estimator.algorithm, "yin")
        self.assertEqual(estimator.config.window_size, 4096)

    def test_pitch_estimator_overrides(self):
        estimator = self.factory.create_pitch_estimator(algorithm=None, noise_gate=0.02)
        self.assertEqual(estimator.algorithm, "autocorrelation")
        self.assertAlmostEqual(estimator.noise_gate, 0.02)

    def test_invalid_estimator_config(self):
        self.manager.update_config("pitch_estimator", {"algorithm": "fft"})
        with self.assertRaises(ConfigurationError):
            self.factory.create_pitch_estimator()

    def test_unknown_estimator_setting(self):
        self.manager.update_config("pitch_estimator", {"gain": 2.0})
        with self.assertRaises(ConfigurationError) as ctx:
            self.factory.create_pitch_estimator()
        self.assertIn("gain", str(ctx.exception))

    def test_instrument(self):
        self.assertEqual(self.factory.create_instrument().transposition_semitones, 2)
        self.assertEqual(self.factory.create_instrument("C").transposition_semitones, 0)
        self.manager.update_config("instrument", {"name": "Eb", "transposition_semitones": 9})
        self.assertEqual(self.factory.create_instrument().name, "Eb")

    def test_note_matcher_uses_reference_and_tolerance(self):
        self.manager.update_config("instrument", {"reference_a4": 442.0})
        self.manager.update_config("practice", {"in_tune_cents": 10})
        matcher = self.factory.create_note_matcher()
        self.assertAlmostEqual(matcher.target_frequency("B4"), 442.0)
        self.assertEqual(matcher.in_tune_cents, 10)

    def test_fingering_table_from_path(self):
        path = Path(self.temp_dir.name) / "table.json"
        path.write_text(json.dumps({"C4": ["0"], "C#4": ["12"]}))
        self.assertEqual(len(self.factory.create_fingering_table()), 12)
        self.manager.update_config("fingering", {"table_path": str(path)})
        table = self.factory.create_fingering_table()
        self.assertEqual(table.expected_for("C#4"), ["12"])

    def test_practice_session(self):
        self.manager.update_config("practice", {"pool_low": 62, "pool_high": 62})
        session = self.factory.create_practice_session()
        self.assertEqual(str(session.current_target), "D4")
        session = self.factory.create_practice_session(mode=SCALES, tonic="Eb")
        self.assertEqual(str(session.current_target), "D#4")


if __name__ == "__main__":
    unittest.main()
