import sys
import unittest
from pathlib import Path

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from resume_engine.taxonomy import contains_phrase, get_default_taxonomy  # noqa: E402


class TaxonomyTests(unittest.TestCase):
    @classmethod
    def setUpClass(cls):
        cls.taxonomy = get_default_taxonomy()

    def test_synonym_normalization_resolves_canonical_name(self):
        self.assertEqual(self.taxonomy.normalize_skill("k8s"), "Kubernetes")
        self.assertEqual(self.taxonomy.normalize_skill(" ReactJS "), "React")
        self.assertEqual(self.taxonomy.normalize_skill("postgres"), "PostgreSQL")

    def test_unknown_skill_is_returned_trimmed(self):
        self.assertEqual(self.taxonomy.normalize_skill("  Basket Weaving "), "Basket Weaving")
        self.assertFalse(self.taxonomy.is_known_skill("Basket Weaving"))
        self.assertTrue(self.taxonomy.is_known_skill("golang"))

    def test_skill_category_lookup_accepts_synonyms(self):
        self.assertEqual(self.taxonomy.find_skill_category("postgres"), "databases")
        self.assertEqual(self.taxonomy.find_skill_category("Python"), "programming_languages")
        self.assertIsNone(self.taxonomy.find_skill_category("Basket Weaving"))

    def test_free_text_detection_uses_whole_words(self):
        self.assertEqual(self.taxonomy.detect_skills("Shipped Python services on k8s"), ["Kubernetes", "Python"])
        self.assertEqual(self.taxonomy.detect_skills("javascripting"), [])

    def test_ambiguous_short_names_are_not_detected_in_free_text(self):
        self.assertNotIn("Go", self.taxonomy.detect_skills("We go to market every quarter"))

    def test_in_order_detection_follows_first_mention(self):
        ordered = self.taxonomy.detect_skills_in_order("Redis first, then Python, then Redis again")
        self.assertEqual(ordered, ["Redis", "Python"])

    def test_tool_normalization(self):
        self.assertEqual(self.taxonomy.normalize_tool("Amazon Web Services"), "AWS")
        self.assertEqual(self.taxonomy.normalize_tool("docker"), "Docker")
        self.assertIsNone(self.taxonomy.normalize_tool("quantum widget"))
        self.assertIsNone(self.taxonomy.normalize_tool("   "))

    def test_company_industry_lookup(self):
        self.assertEqual(self.taxonomy.get_company_industry("Stripe"), "fintech")
        self.assertEqual(self.taxonomy.get_company_industry("stripe"), "fintech")
        self.assertIsNone(self.taxonomy.get_company_industry(""))

    def test_skill_and_tool_lists_are_sorted_and_deduplicated(self):
        self.assertEqual(self.taxonomy.normalize_skills(["k8s", "Kubernetes", "python", " "]), ["Kubernetes", "Python"])
        self.assertEqual(self.taxonomy.find_tool_category("Docker"), "containers_orchestration")

    def test_company_lists(self):
        self.assertTrue(self.taxonomy.is_big_tech("Google LLC"))
        self.assertTrue(self.taxonomy.is_high_growth("Stripe"))
        self.assertFalse(self.taxonomy.is_big_tech("Initech"))
        self.assertFalse(self.taxonomy.is_high_growth(""))
        self.assertEqual(self.taxonomy.industry_display_name("fintech"), "FinTech")

    def test_industry_detection_needs_two_keywords(self):
        self.assertIn("healthcare", self.taxonomy.detect_industries("Built patient intake tools for a healthcare network"))
        self.assertNotIn("healthcare", self.taxonomy.detect_industries("Visited a hospital once"))

    def test_transferable_skills(self):
        self.assertEqual(self.taxonomy.find_transferable_skills(["Rust", "Python"], ["Go"]), ["Rust"])
        self.assertEqual(self.taxonomy.find_transferable_skills(["Python"], ["Go"]), [])

    def test_certification_implies_skills(self):
        self.assertEqual(
            self.taxonomy.skills_for_certification("AWS Certified Developer"),
            ["AWS", "Cloud Computing"],
        )

    def test_contains_phrase_handles_symbols(self):
        self.assertTrue(contains_phrase("Wrote C++ and C# daily", "c++"))
        self.assertTrue(contains_phrase("Wrote C++ and C# daily", "c#"))
        self.assertFalse(contains_phrase("javascript", "java"))


if __name__ == "__main__":
    unittest.main()
