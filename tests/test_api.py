import os
import sys
import unittest
from pathlib import Path

# Keep API tests independent of the per-client request quota.
os.environ.setdefault("RATE_LIMIT_ENABLED", "0")

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from fastapi.testclient import TestClient  # noqa: E402

from resume_engine.main import app  # noqa: E402
from resume_fixtures import EXCEPTIONAL_RAW_TEXT, backend_requirements, exceptional_resume  # noqa: E402


class EvaluationApiTests(unittest.TestCase):
    @classmethod
    def setUpClass(cls):
        cls.client = TestClient(app)
        cls.resume = {"parsed": exceptional_resume().model_dump(mode="json"), "raw_text": EXCEPTIONAL_RAW_TEXT}
        cls.job = {"parsed_requirements": backend_requirements().model_dump(mode="json")}

    def setUp(self):
        self.client.delete("/v1/cache")

    def test_health(self):
        response = self.client.get("/v1/health")
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json(), {"status": "healthy", "engine_version": "2.1"})

    def test_evaluate(self):
        response = self.client.post("/v1/evaluate", json={"resume": self.resume})
        self.assertEqual(response.status_code, 200)
        body = response.json()
        self.assertGreaterEqual(body["resume_score"], 85)
        self.assertEqual(body["meta"]["version"], "2.1")
        self.assertEqual(set(body["dimensions"]), {
            "skill_capital",
            "execution_impact",
            "learning_adaptivity",
            "signal_quality",
        })

    def test_score_only(self):
        full = self.client.post("/v1/evaluate", json={"resume": self.resume}).json()
        response = self.client.post("/v1/evaluate/score", json={"resume": self.resume})
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json(), {"score": full["resume_score"]})

    def test_missing_resume_maps_to_400(self):
        response = self.client.post("/v1/evaluate", json={})
        self.assertEqual(response.status_code, 400)
        detail = response.json()["detail"]
        self.assertEqual(detail["code"], "MISSING_RESUME")
        self.assertEqual(set(detail), {"code", "title", "message", "suggestion"})

    def test_evaluate_fit(self):
        response = self.client.post("/v1/evaluate-fit", json={"resume": self.resume, "job_description": self.job})
        self.assertEqual(response.status_code, 200)
        body = response.json()
        self.assertEqual(body["recommendation"], "APPLY")
        self.assertGreaterEqual(body["fit_score"], 75)
        self.assertIn("gap_summary", body)

    def test_fit_recommendation(self):
        response = self.client.post(
            "/v1/evaluate-fit/recommendation",
            json={"resume": self.resume, "job_description": self.job},
        )
        self.assertEqual(response.status_code, 200)
        body = response.json()
        self.assertEqual(set(body), {"recommendation", "fit_score", "reasoning"})
        self.assertEqual(body["recommendation"], "APPLY")

    def test_missing_job_description_maps_to_400(self):
        response = self.client.post("/v1/evaluate-fit", json={"resume": self.resume})
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json()["detail"]["code"], "MISSING_JOB_DESCRIPTION")

    def test_parse_job_description(self):
        response = self.client.post(
            "/v1/job-description/parse",
            json={"raw_text": "Python developer working with Django, PostgreSQL and Redis to build internal services."},
        )
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()["required_skills"], ["Python", "Django", "PostgreSQL"])

    def test_short_job_description_maps_to_422(self):
        response = self.client.post("/v1/job-description/parse", json={"raw_text": "too short"})
        self.assertEqual(response.status_code, 422)
        self.assertEqual(response.json()["detail"]["code"], "JOB_PARSING_FAILED")

    def test_cache_stats_and_clear(self):
        self.client.post("/v1/evaluate", json={"resume": self.resume})
        self.client.post("/v1/evaluate", json={"resume": self.resume})

        stats = self.client.get("/v1/cache/stats").json()
        self.assertEqual(stats["size"], 1)
        self.assertEqual(stats["hits"], 1)

        response = self.client.delete("/v1/cache")
        self.assertEqual(response.json(), {"cleared": True})
        self.assertEqual(self.client.get("/v1/cache/stats").json()["size"], 0)


if __name__ == "__main__":
    unittest.main()
