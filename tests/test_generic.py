import sys
import unittest
from pathlib import Path
from unittest.mock import patch

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from resume_engine.schemas.evaluation import (  # noqa: E402
    DimensionScore,
    DimensionScores,
    ExtractedEntities,
)
from resume_engine.schemas.resume import DocumentMetadata  # noqa: E402
from resume_engine.scoring import evaluate_generic, get_level  # noqa: E402
from resume_engine.scoring.generic import (  # noqa: E402
    apply_constraints,
    calculate_global_score,
    generate_summary,
)
from resume_fixtures import EXCEPTIONAL_RAW_TEXT, exceptional_resume, minimal_resume  # noqa: E402


def _dimensions(skill=50, impact=50, learning=50, signal=50):
    return DimensionScores(
        skill_capital=DimensionScore(score=skill),
        execution_impact=DimensionScore(score=impact),
        learning_adaptivity=DimensionScore(score=learning),
        signal_quality=DimensionScore(score=signal),
    )


class LevelBandTests(unittest.TestCase):
    def test_band_boundaries(self):
        cases = {
            34: "Early",
            35: "Growing",
            54: "Growing",
            55: "Solid",
            74: "Solid",
            75: "Strong",
            89: "Strong",
            90: "Exceptional",
        }
        for score, level in cases.items():
            with self.subTest(score=score):
                self.assertEqual(get_level(score), level)


class GlobalScoreTests(unittest.TestCase):
    def test_poor_presentation_discounts_the_weighted_score(self):
        self.assertEqual(calculate_global_score(_dimensions(signal=30)), 41)

    def test_excellent_presentation_boosts_the_weighted_score(self):
        self.assertEqual(calculate_global_score(_dimensions(signal=90)), 61)

    def test_signal_of_exactly_80_is_neutral(self):
        self.assertEqual(calculate_global_score(_dimensions(signal=80)), 56)


class ConstraintTests(unittest.TestCase):
    def setUp(self):
        self.parsed = exceptional_resume()
        self.extracted = ExtractedEntities(skills=["AWS", "Docker", "Go", "Python", "React"])

    def test_lowest_applicable_cap_wins_and_only_binding_caps_are_recorded(self):
        result = apply_constraints(80, _dimensions(skill=20, impact=10), self.parsed, self.extracted)
        self.assertEqual(result.score, 45)
        self.assertEqual(result.constraints_applied, ["low_skill_capital"])

    def test_stagnant_learning_only_caps_scores_above_60(self):
        capped = apply_constraints(70, _dimensions(learning=20), self.parsed, self.extracted)
        self.assertEqual(capped.score, 60)
        self.assertEqual(capped.constraints_applied, ["stagnant_learning"])

        untouched = apply_constraints(58, _dimensions(learning=20), self.parsed, self.extracted)
        self.assertEqual(untouched.score, 58)
        self.assertEqual(untouched.constraints_applied, [])

    def test_low_parse_quality_caps_at_40(self):
        parsed = self.parsed.model_copy(
            update={"metadata": self.parsed.metadata.model_copy(update={"parse_quality": "low"})}
        )
        result = apply_constraints(70, _dimensions(), parsed, self.extracted)
        self.assertEqual(result.score, 40)
        self.assertEqual(result.constraints_applied, ["parsing_failed"])


class GenericEvaluationTests(unittest.TestCase):
    @classmethod
    def setUpClass(cls):
        cls.exceptional = evaluate_generic(exceptional_resume(), EXCEPTIONAL_RAW_TEXT)
        cls.minimal = evaluate_generic(minimal_resume())

    def test_exceptional_resume(self):
        result = self.exceptional
        self.assertGreaterEqual(result.resume_score, 85)
        self.assertIn(result.level, {"Strong", "Exceptional"})
        self.assertEqual(result.overall_score, result.resume_score)
        self.assertEqual(result.weaknesses, [])
        self.assertEqual(result.feedback.critical_gaps, [])
        self.assertEqual(result.constraints_applied, [])
        self.assertEqual(len(result.feedback.strengths), 4)
        self.assertTrue(result.summary.startswith(f"Your resume scores {result.resume_score}/100"))

    def test_minimal_resume(self):
        result = self.minimal
        self.assertLessEqual(result.resume_score, 25)
        self.assertEqual(result.level, "Early")
        self.assertTrue(result.flags.possible_spam)
        self.assertTrue(result.flags.no_experience)
        self.assertTrue(result.flags.too_short)
        self.assertIn("no_experience", result.weaknesses)

    def test_exceptional_and_minimal_are_well_separated(self):
        self.assertGreaterEqual(self.exceptional.resume_score - self.minimal.resume_score, 30)

    def test_scores_stay_in_range(self):
        for result in (self.exceptional, self.minimal):
            scores = [
                result.resume_score,
                result.content_quality_score,
                result.ats_compatibility_score,
                result.format_quality_score,
                result.impact_score,
                *(dimension.score for dimension in result.dimensions.as_dict().values()),
            ]
            for score in scores:
                self.assertGreaterEqual(score, 0)
                self.assertLessEqual(score, 100)

    def test_evaluation_is_deterministic(self):
        again = evaluate_generic(exceptional_resume(), EXCEPTIONAL_RAW_TEXT)
        self.assertEqual(
            again.model_dump(exclude={"meta"}),
            self.exceptional.model_dump(exclude={"meta"}),
        )

    def test_meta_describes_the_run(self):
        meta = self.exceptional.meta
        self.assertEqual(meta.version, "2.1")
        self.assertEqual(meta.parse_quality, "high")
        self.assertGreaterEqual(meta.processing_time_ms, 0)

    def test_weak_bullets_are_capped_at_five(self):
        self.assertLessEqual(len(self.minimal.weak_bullets), 5)
        self.assertEqual(self.exceptional.weak_bullets, [])


class StructuredInputTests(unittest.TestCase):
    @classmethod
    def setUpClass(cls):
        cls.with_text = evaluate_generic(exceptional_resume(), EXCEPTIONAL_RAW_TEXT)

    def test_parsed_fields_alone_score_like_the_document(self):
        result = evaluate_generic(exceptional_resume())
        signal = result.dimensions.signal_quality
        self.assertGreaterEqual(signal.breakdown["structure"], 25)
        self.assertNotIn("many_missing_sections", signal.issues)
        self.assertGreaterEqual(result.resume_score, 85)
        self.assertEqual(result.resume_score, self.with_text.resume_score)

    def test_missing_metadata_is_unknown_rather_than_empty(self):
        parsed = exceptional_resume().model_copy(update={"metadata": DocumentMetadata()})
        result = evaluate_generic(parsed)
        self.assertFalse(result.flags.too_short)
        self.assertFalse(result.flags.parsing_failed)
        self.assertNotIn("too_short", result.weaknesses)
        self.assertEqual(result.feedback.critical_gaps, [])
        self.assertIsNone(result.meta.parse_quality)
        self.assertEqual(result.resume_score, self.with_text.resume_score)

    def test_rendered_fields_still_reveal_a_short_resume(self):
        parsed = minimal_resume().model_copy(update={"metadata": DocumentMetadata()})
        self.assertTrue(evaluate_generic(parsed).flags.too_short)


class SummaryTests(unittest.TestCase):
    def test_summary_bands_follow_the_configured_levels(self):
        overrides = {"levels.strong": 85}

        def scoring_value(path, default=None):
            return overrides.get(path, default)

        with patch("resume_engine.scoring.generic.get_scoring_value", side_effect=scoring_value):
            self.assertEqual(get_level(80), "Solid")
            summary = generate_summary(80, _dimensions(), [])
        self.assertIn("Good foundation in presentation", summary)

    def test_summary_bands(self):
        self.assertIn("stands out", generate_summary(75, _dimensions(), []))
        self.assertIn("Good foundation", generate_summary(55, _dimensions(), []))
        self.assertIn("Focus on improving", generate_summary(54, _dimensions(), []))


if __name__ == "__main__":
    unittest.main()
