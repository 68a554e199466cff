import sys
import unittest
from pathlib import Path

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from resume_engine.extraction import (  # noqa: E402
    analyze_bullet_quality,
    extract_entities,
    infer_seniority_from_title,
    normalize_title,
)
from resume_engine.schemas.resume import ExperienceEntry, ParsedResume  # noqa: E402
from resume_fixtures import exceptional_resume  # noqa: E402


class EntityExtractionTests(unittest.TestCase):
    def test_skills_are_normalized_and_merged_from_all_sources(self):
        extracted = extract_entities(exceptional_resume())

        self.assertIn("Python", extracted.skills)
        self.assertIn("Event-Driven Architecture", extracted.skills)
        # Implied by the certifications.
        self.assertIn("Container Orchestration", extracted.skills)
        self.assertEqual(extracted.skills, sorted(extracted.skills))
        self.assertEqual(len(extracted.skills), len(set(extracted.skills)))

    def test_tools_companies_and_industries(self):
        extracted = extract_entities(exceptional_resume())

        self.assertIn("Docker", extracted.tools)
        self.assertIn("AWS", extracted.tools)
        self.assertEqual(extracted.companies, ["Stripe", "Acme Analytics"])
        self.assertIn("fintech", extracted.industries)
        self.assertEqual(len(extracted.certifications), 3)

    def test_bullet_sample_takes_first_two_roles(self):
        extracted = extract_entities(exceptional_resume())
        self.assertEqual(len(extracted.bullets_sample), 5)
        self.assertTrue(extracted.bullets_sample[0].startswith("Led a team"))

    def test_title_abbreviations_expand(self):
        self.assertEqual(normalize_title("Sr. SWE"), "Senior Software Engineer")
        self.assertEqual(normalize_title("  Eng   Mgr "), "Eng Manager")

    def test_titles_are_deduplicated_in_order(self):
        parsed = ParsedResume(
            experiences=[
                ExperienceEntry(title="Sr. Engineer", company="A"),
                ExperienceEntry(title="Senior Engineer", company="B"),
                ExperienceEntry(title="Engineer", company="C"),
            ]
        )
        self.assertEqual(extract_entities(parsed).titles, ["Senior Engineer", "Engineer"])

    def test_seniority_from_title(self):
        self.assertEqual(infer_seniority_from_title("Principal Engineer"), "lead")
        self.assertEqual(infer_seniority_from_title("Senior Data Analyst"), "senior")
        self.assertEqual(infer_seniority_from_title("Junior Developer"), "entry")
        self.assertEqual(infer_seniority_from_title("Software Engineer"), "mid")

    def test_bullet_quality_issues(self):
        issues = analyze_bullet_quality("Worked on various things")
        self.assertEqual(issues, ["weak_verb", "no_metric", "vague", "too_short"])
        self.assertEqual(
            analyze_bullet_quality("Reduced checkout latency by 35% for two million monthly customers"),
            [],
        )

    def test_empty_resume_extracts_nothing(self):
        extracted = extract_entities(ParsedResume())
        self.assertEqual(extracted.skills, [])
        self.assertEqual(extracted.tools, [])
        self.assertEqual(extracted.industries, [])


if __name__ == "__main__":
    unittest.main()
