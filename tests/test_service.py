import sys
import unittest
from pathlib import Path

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from pydantic import ValidationError  # noqa: E402

from resume_engine.core.errors import EvaluationError, EvaluationErrorCode  # noqa: E402
from resume_engine.core.result_cache import ResultCache  # noqa: E402
from resume_engine.schemas.api import JobDescriptionInput, ResumeInput  # noqa: E402
from resume_engine.services.evaluation_service import (  # noqa: E402
    evaluate,
    evaluate_fit,
    get_fit_recommendation,
    get_score,
    parse_job,
    resume_fingerprint,
)
from resume_fixtures import EXCEPTIONAL_RAW_TEXT, backend_requirements, exceptional_resume  # noqa: E402


class EvaluationServiceTests(unittest.TestCase):
    def setUp(self):
        self.cache = ResultCache(ttl_seconds=300, max_size=10)

    def assertErrorCode(self, code, fn, *args):
        with self.assertRaises(EvaluationError) as ctx:
            fn(*args)
        self.assertEqual(ctx.exception.code, code)

    def test_repeated_evaluation_is_served_from_cache(self):
        resume = ResumeInput(parsed=exceptional_resume(), raw_text=EXCEPTIONAL_RAW_TEXT)
        first = evaluate(resume, self.cache)
        second = evaluate(resume, self.cache)

        self.assertIs(second, first)
        stats = self.cache.stats()
        self.assertEqual(stats["hits"], 1)
        self.assertEqual(stats["misses"], 1)
        self.assertEqual(get_score(resume, self.cache), first.resume_score)

    def test_cached_results_are_read_only(self):
        resume = ResumeInput(parsed=exceptional_resume())
        first = evaluate(resume, self.cache)
        with self.assertRaises(ValidationError):
            first.resume_score = 1
        with self.assertRaises(ValidationError):
            first.flags.too_short = True

        second = evaluate(resume, self.cache)
        self.assertGreaterEqual(second.resume_score, 85)
        self.assertFalse(second.flags.too_short)

    def test_raw_text_is_parsed_before_scoring(self):
        result = evaluate({"raw_text": EXCEPTIONAL_RAW_TEXT}, self.cache)
        self.assertIn("Stripe", result.extracted.companies)
        self.assertEqual(result.meta.parse_quality, "high")

    def test_input_errors(self):
        self.assertErrorCode(EvaluationErrorCode.MISSING_RESUME, evaluate, None, self.cache)
        self.assertErrorCode(EvaluationErrorCode.MISSING_RESUME, evaluate, {}, self.cache)
        self.assertErrorCode(EvaluationErrorCode.NO_CONTENT, evaluate, {"raw_text": "   "}, self.cache)
        self.assertErrorCode(
            EvaluationErrorCode.CONTENT_TOO_SHORT, evaluate, {"raw_text": "Jordan Rivera"}, self.cache
        )
        self.assertErrorCode(
            EvaluationErrorCode.FILE_TOO_LARGE, evaluate, {"raw_text": "x" * 100_001}, self.cache
        )
        self.assertErrorCode(
            EvaluationErrorCode.VALIDATION_ERROR,
            evaluate,
            {"parsed": {"experiences": "not a list"}},
            self.cache,
        )

    def test_fingerprint_depends_on_what_was_supplied(self):
        parsed = exceptional_resume()
        raw_only = resume_fingerprint(None, EXCEPTIONAL_RAW_TEXT)
        with_parsed = resume_fingerprint(parsed, EXCEPTIONAL_RAW_TEXT)

        self.assertNotEqual(raw_only, with_parsed)
        self.assertEqual(with_parsed, resume_fingerprint(exceptional_resume(), EXCEPTIONAL_RAW_TEXT))
        self.assertNotEqual(resume_fingerprint(parsed, None), with_parsed)

    def test_fit_reuses_the_cached_generic_evaluation(self):
        resume = ResumeInput(parsed=exceptional_resume())
        job = JobDescriptionInput(parsed_requirements=backend_requirements())

        generic = evaluate(resume, self.cache)
        result = evaluate_fit(resume, job, self.cache)

        self.assertEqual(result.resume_score, generic.resume_score)
        self.assertEqual(self.cache.stats()["hits"], 1)
        self.assertEqual(result.recommendation, "APPLY")

    def test_recommendation_only(self):
        recommendation, fit_score = get_fit_recommendation(
            ResumeInput(parsed=exceptional_resume()),
            {"parsed_requirements": backend_requirements().model_dump()},
            self.cache,
        )
        self.assertEqual(recommendation.recommendation, "APPLY")
        self.assertGreaterEqual(fit_score, 75)
        self.assertIn(f"{fit_score}/100", recommendation.reasoning)

    def test_job_errors(self):
        resume = ResumeInput(parsed=exceptional_resume())
        self.assertErrorCode(EvaluationErrorCode.MISSING_JOB_DESCRIPTION, evaluate_fit, resume, None, self.cache)
        self.assertErrorCode(
            EvaluationErrorCode.MISSING_JOB_DESCRIPTION, evaluate_fit, resume, {"raw_text": "  "}, self.cache
        )
        self.assertErrorCode(EvaluationErrorCode.JOB_PARSING_FAILED, parse_job, "too short")

    def test_parse_job_accepts_plain_text(self):
        requirements = parse_job(
            "Python developer working with Django, PostgreSQL and Redis to build internal services."
        )
        self.assertEqual(requirements.required_skills, ["Python", "Django", "PostgreSQL"])


if __name__ == "__main__":
    unittest.main()
