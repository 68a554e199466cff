import sys
import unittest
from pathlib import Path

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from resume_engine.core.utils import measured_word_count, resume_to_text  # noqa: E402
from resume_engine.extraction import extract_entities  # noqa: E402
from resume_engine.schemas.resume import (  # noqa: E402
    DocumentMetadata,
    ExperienceEntry,
    ParsedResume,
)
from resume_engine.scoring import (  # noqa: E402
    calculate_execution_impact_score,
    calculate_learning_adaptivity_score,
    calculate_signal_quality_score,
    calculate_skill_capital_score,
    detect_sections,
)
from resume_fixtures import EXCEPTIONAL_RAW_TEXT, exceptional_resume, junior_resume  # noqa: E402

BASE_BULLETS = [
    "Worked on internal tools for the support team",
    "Helped with deployments and release coordination",
]


def _with_bullets(bullets):
    return ParsedResume(
        experiences=[ExperienceEntry(title="Developer", company="Initech", duration_months=24, bullets=bullets)]
    )


class ExecutionImpactTests(unittest.TestCase):
    def test_no_bullets_scores_zero_without_raising(self):
        score, weak = calculate_execution_impact_score(ParsedResume())
        self.assertEqual(score.score, 0)
        self.assertEqual(score.issues, ["no_experience_bullets"])
        self.assertEqual(weak, [])

    def test_duty_style_bullets(self):
        score, weak = calculate_execution_impact_score(_with_bullets(BASE_BULLETS))

        # 8 metrics + 5 verbs (weak-verb penalty floor) + 5 scope.
        self.assertEqual(score.score, 18)
        self.assertIn("no_metrics", score.issues)
        self.assertIn("weak_verbs", score.issues)
        self.assertIn("low_impact_indicators", score.issues)
        self.assertEqual(len(weak), 2)
        self.assertEqual(weak[0].issues, ["no_metric", "weak_verb"])
        self.assertEqual(weak[0].location.company, "Initech")
        self.assertEqual(weak[1].location.index, 1)

    def test_adding_a_quantified_bullet_never_lowers_the_score(self):
        base, _ = calculate_execution_impact_score(_with_bullets(BASE_BULLETS))
        improved, _ = calculate_execution_impact_score(
            _with_bullets([*BASE_BULLETS, "Reduced page load time by 40% across the customer portal"])
        )
        self.assertEqual(improved.score, 50)
        self.assertGreaterEqual(improved.score, base.score)

    def test_metric_heavy_resume_hits_the_ceiling(self):
        score, weak = calculate_execution_impact_score(exceptional_resume())
        self.assertEqual(score.score, 100)
        self.assertEqual(score.issues, [])
        self.assertEqual(weak, [])


class SkillCapitalTests(unittest.TestCase):
    def test_broad_skill_set_scores_high(self):
        parsed = exceptional_resume()
        score = calculate_skill_capital_score(parsed, extract_entities(parsed))
        self.assertEqual(score.breakdown["skill_presence"], 30)
        self.assertEqual(score.breakdown["skill_diversity"], 40)
        self.assertGreaterEqual(score.score, 85)
        self.assertNotIn("no_certifications", score.issues)

    def test_sparse_skills_are_flagged(self):
        parsed = ParsedResume()
        score = calculate_skill_capital_score(parsed, extract_entities(parsed))
        self.assertIn("missing_skills", score.issues)
        self.assertIn("no_skills_section", score.issues)
        self.assertIn("no_certifications", score.issues)
        self.assertIn("no_projects", score.issues)
        self.assertLess(score.score, 25)


class LearningAdaptivityTests(unittest.TestCase):
    def test_progression_and_certifications_are_rewarded(self):
        parsed = exceptional_resume()
        score = calculate_learning_adaptivity_score(parsed, extract_entities(parsed))

        self.assertEqual(score.breakdown["skill_recency"], 30)
        self.assertEqual(score.breakdown["stagnation_penalty"], 0)
        # Two title steps (8) + same-company promotion (8) + larger scope (5).
        self.assertEqual(score.breakdown["progression"], 21)
        self.assertGreaterEqual(score.score, 75)

    def test_long_tenure_without_learning_is_penalized(self):
        parsed = ParsedResume(
            experiences=[
                ExperienceEntry(
                    title="Developer",
                    company="Initech",
                    duration_months=120,
                    bullets=["Maintained the billing system written in Perl and jQuery"],
                )
            ],
            skills=["Perl", "jQuery"],
        )
        score = calculate_learning_adaptivity_score(parsed, extract_entities(parsed))

        self.assertIn("legacy_tech_only", score.issues)
        self.assertIn("same_role_too_long", score.issues)
        self.assertIn("no_recent_learning", score.issues)
        self.assertEqual(score.breakdown["stagnation_penalty"], 15)
        self.assertEqual(score.score, 0)


class SignalQualityTests(unittest.TestCase):
    def test_sections_are_ordered_by_position(self):
        self.assertEqual(
            detect_sections(EXCEPTIONAL_RAW_TEXT),
            ["summary", "experience", "skills", "education", "projects", "certifications"],
        )

    def test_clean_resume_scores_full_marks(self):
        score = calculate_signal_quality_score(exceptional_resume(), EXCEPTIONAL_RAW_TEXT)
        self.assertEqual(score.breakdown["structure"], 30)
        self.assertEqual(score.breakdown["writing_quality"], 30)
        self.assertEqual(score.breakdown["formatting"], 25)
        self.assertEqual(score.breakdown["completeness"], 15)
        self.assertEqual(score.score, 100)

    def test_structured_fields_without_raw_text_keep_their_sections(self):
        parsed = exceptional_resume()
        self.assertEqual(
            detect_sections(resume_to_text(parsed)),
            ["experience", "skills", "education", "projects", "certifications"],
        )

        score = calculate_signal_quality_score(parsed)
        self.assertEqual(score.breakdown["structure"], 30)
        self.assertNotIn("many_missing_sections", score.issues)
        self.assertNotIn("unclear_section_headers", score.issues)
        self.assertEqual(score.score, calculate_signal_quality_score(parsed, EXCEPTIONAL_RAW_TEXT).score)

    def test_unmeasured_metadata_costs_nothing(self):
        parsed = exceptional_resume().model_copy(update={"metadata": DocumentMetadata()})
        score = calculate_signal_quality_score(parsed)
        self.assertEqual(score.breakdown["formatting"], 25)
        self.assertNotIn("resume_too_short", score.issues)

    def test_raw_text_supplies_a_missing_word_count(self):
        parsed = exceptional_resume().model_copy(update={"metadata": DocumentMetadata()})
        self.assertIsNone(measured_word_count(parsed))
        self.assertEqual(measured_word_count(parsed, "three short words"), 3)
        self.assertEqual(measured_word_count(exceptional_resume(), "three short words"), 420)

        score = calculate_signal_quality_score(parsed, " ".join(["word"] * 900))
        self.assertIn("resume_too_long", score.issues)

    def test_low_parse_quality_and_tables_cost_points(self):
        parsed = junior_resume().model_copy(
            update={"metadata": DocumentMetadata(word_count=350, parse_quality="low", has_tables=True)}
        )
        score = calculate_signal_quality_score(parsed)
        self.assertEqual(score.breakdown["formatting"], 12)
        self.assertIn("poor_formatting", score.issues)
        self.assertIn("tables_detected", score.issues)

    def test_missing_bullets_and_contacts(self):
        score = calculate_signal_quality_score(ParsedResume())
        self.assertIn("no_bullet_points", score.issues)
        self.assertIn("incomplete_contact_info", score.issues)
        self.assertIn("no_experience", score.issues)
        self.assertEqual(score.breakdown["writing_quality"], 10)


if __name__ == "__main__":
    unittest.main()
