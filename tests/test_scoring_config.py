import sys
import tempfile
import unittest
from pathlib import Path

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from resume_engine.core.config.scoring import (  # noqa: E402
    get_scoring_config,
    get_scoring_value,
    load_scoring_config,
)

VALID_WEIGHTS = """
dimensions:
  weights: {skill_capital: 0.30, execution_impact: 0.30, learning_adaptivity: 0.20, signal_quality: 0.20}
fit:
  weights: {technical: 0.40, seniority: 0.20, experience: 0.20, signal: 0.20}
  technical: {skills: 0.60, tools: 0.40}
gaps:
  weights: {skills: 0.40, tools: 0.20, experience: 0.20, seniority: 0.10, industry: 0.10}
"""


class ScoringConfigTests(unittest.TestCase):
    def test_loader_and_value_lookup(self):
        config = get_scoring_config()
        self.assertIsInstance(config, dict)
        self.assertEqual(get_scoring_value("fit.weights.technical"), 0.40)
        self.assertEqual(get_scoring_value("levels.exceptional"), 90)
        self.assertEqual(get_scoring_value("constraints.possible_spam.max_score"), 25)

    def test_missing_key_returns_default(self):
        self.assertEqual(get_scoring_value("fit.weights.unknown", 7), 7)
        self.assertIsNone(get_scoring_value(""))

    def test_shipped_weight_groups_sum_to_one(self):
        for group in ("dimensions.weights", "fit.weights", "fit.technical", "gaps.weights"):
            with self.subTest(group=group):
                self.assertAlmostEqual(sum(get_scoring_value(group).values()), 1.0)


class ScoringConfigValidationTests(unittest.TestCase):
    def setUp(self):
        self._tmp = tempfile.TemporaryDirectory()
        self.addCleanup(self._tmp.cleanup)
        self.path = Path(self._tmp.name) / "scoring.yaml"

    def test_valid_file_loads(self):
        self.path.write_text(VALID_WEIGHTS, encoding="utf-8")
        config = load_scoring_config(self.path)
        self.assertEqual(config["fit"]["technical"]["skills"], 0.60)

    def test_weights_that_do_not_sum_to_one_are_rejected(self):
        self.path.write_text(VALID_WEIGHTS.replace("signal_quality: 0.20", "signal_quality: 0.10"), encoding="utf-8")
        with self.assertRaises(RuntimeError) as ctx:
            load_scoring_config(self.path)
        self.assertIn("dimensions.weights", str(ctx.exception))

    def test_missing_weight_group_is_rejected(self):
        self.path.write_text("dimensions:\n  weights: {a: 1.0}\n", encoding="utf-8")
        with self.assertRaises(RuntimeError):
            load_scoring_config(self.path)

    def test_missing_file_and_non_mapping_are_rejected(self):
        with self.assertRaises(RuntimeError):
            load_scoring_config(Path(self._tmp.name) / "absent.yaml")

        self.path.write_text("- just\n- a list\n", encoding="utf-8")
        with self.assertRaises(RuntimeError):
            load_scoring_config(self.path)

    def test_invalid_yaml_is_rejected(self):
        self.path.write_text("dimensions: [unclosed\n", encoding="utf-8")
        with self.assertRaises(RuntimeError):
            load_scoring_config(self.path)


if __name__ == "__main__":
    unittest.main()
