import sys
import unittest
from pathlib import Path

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from resume_engine.core.errors import (  # noqa: E402
    ERROR_MESSAGES,
    EvaluationError,
    EvaluationErrorCode,
    create_error,
    error_boundary,
    get_user_friendly_error,
    is_evaluation_error,
    to_evaluation_error,
    with_error_handling,
)


class EvaluationErrorTests(unittest.TestCase):
    def test_every_code_has_a_message(self):
        for code in EvaluationErrorCode:
            with self.subTest(code=code):
                self.assertIn(code, ERROR_MESSAGES)
                self.assertTrue(ERROR_MESSAGES[code].suggestion)

    def test_status_codes(self):
        self.assertEqual(create_error(EvaluationErrorCode.MISSING_RESUME).status_code, 400)
        self.assertEqual(create_error(EvaluationErrorCode.FILE_TOO_LARGE).status_code, 413)
        self.assertEqual(create_error(EvaluationErrorCode.UNSUPPORTED_FORMAT).status_code, 415)
        self.assertEqual(create_error(EvaluationErrorCode.JOB_PARSING_FAILED).status_code, 422)
        self.assertEqual(create_error(EvaluationErrorCode.INTERNAL_ERROR).status_code, 500)
        self.assertEqual(create_error(EvaluationErrorCode.TIMEOUT).status_code, 504)

    def test_user_friendly_payload_hides_details(self):
        error = create_error(EvaluationErrorCode.NO_CONTENT, details="empty upload")
        payload = error.to_user_friendly()
        self.assertEqual(set(payload), {"code", "title", "message", "suggestion"})
        self.assertEqual(payload["code"], "NO_CONTENT")
        self.assertEqual(error.to_dict()["details"], "empty upload")

    def test_unknown_errors_collapse_to_internal_error(self):
        payload = get_user_friendly_error(KeyError("boom"))
        self.assertEqual(payload["code"], "INTERNAL_ERROR")
        self.assertFalse(is_evaluation_error(KeyError("boom")))

    def test_to_evaluation_error_keeps_existing_errors(self):
        original = create_error(EvaluationErrorCode.TIMEOUT)
        self.assertIs(to_evaluation_error(original), original)
        wrapped = to_evaluation_error(ValueError("bad"), EvaluationErrorCode.SCORING_FAILED)
        self.assertEqual(wrapped.code, EvaluationErrorCode.SCORING_FAILED)


class ErrorBoundaryTests(unittest.TestCase):
    def test_plain_exceptions_are_wrapped(self):
        with self.assertRaises(EvaluationError) as ctx:
            with error_boundary(EvaluationErrorCode.GAP_ANALYSIS_FAILED):
                raise ValueError("bad gap")

        self.assertEqual(ctx.exception.code, EvaluationErrorCode.GAP_ANALYSIS_FAILED)
        self.assertIsInstance(ctx.exception.details, ValueError)
        self.assertEqual(ctx.exception.to_dict()["details"], "ValueError: bad gap")

    def test_evaluation_errors_pass_through_unchanged(self):
        original = create_error(EvaluationErrorCode.NO_CONTENT)
        with self.assertRaises(EvaluationError) as ctx:
            with error_boundary(EvaluationErrorCode.INTERNAL_ERROR):
                raise original
        self.assertIs(ctx.exception, original)

    def test_with_error_handling_returns_the_value(self):
        self.assertEqual(with_error_handling(lambda: 42), 42)

        def fail():
            raise ZeroDivisionError()

        with self.assertRaises(EvaluationError) as ctx:
            with_error_handling(fail, EvaluationErrorCode.SCORING_FAILED)
        self.assertEqual(ctx.exception.code, EvaluationErrorCode.SCORING_FAILED)


if __name__ == "__main__":
    unittest.main()
