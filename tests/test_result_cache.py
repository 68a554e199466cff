import sys
import unittest
from pathlib import Path

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from resume_engine.core.result_cache import ResultCache, generate_resume_hash  # noqa: E402


class FakeClock:
    def __init__(self, now=1000.0):
        self.now = now

    def __call__(self):
        return self.now

    def advance(self, seconds):
        self.now += seconds


class ResultCacheTests(unittest.TestCase):
    def setUp(self):
        self.clock = FakeClock()
        self.cache = ResultCache(ttl_seconds=60, max_size=3, clock=self.clock)

    def test_set_then_get(self):
        self.cache.set("a", {"score": 80})
        self.assertEqual(self.cache.get("a"), {"score": 80})
        self.assertIsNone(self.cache.get("unknown"))

        stats = self.cache.stats()
        self.assertEqual(stats["hits"], 1)
        self.assertEqual(stats["misses"], 1)
        self.assertEqual(stats["hit_rate"], 0.5)

    def test_entries_expire_after_ttl(self):
        self.cache.set("a", 1)
        self.clock.advance(60)
        self.assertEqual(self.cache.get("a"), 1)

        self.clock.advance(1)
        self.assertIsNone(self.cache.get("a"))
        stats = self.cache.stats()
        self.assertEqual(stats["size"], 0)
        self.assertEqual(stats["evictions"], 1)

    def test_overflow_evicts_the_oldest_entry(self):
        for key in ("a", "b", "c"):
            self.cache.set(key, key)
            self.clock.advance(1)
        self.cache.set("d", "d")

        self.assertIsNone(self.cache.get("a"))
        self.assertEqual(self.cache.get("d"), "d")
        self.assertEqual(self.cache.stats()["size"], 3)
        self.assertEqual(self.cache.stats()["evictions"], 1)

    def test_overwriting_a_key_does_not_evict(self):
        for key in ("a", "b", "c"):
            self.cache.set(key, key)
        self.cache.set("b", "updated")
        self.assertEqual(self.cache.get("b"), "updated")
        self.assertEqual(self.cache.stats()["evictions"], 0)

    def test_invalidate_and_clear(self):
        self.cache.set("a", 1)
        self.assertTrue(self.cache.invalidate("a"))
        self.assertFalse(self.cache.invalidate("a"))

        self.cache.set("b", 2)
        self.cache.get("b")
        self.cache.clear()
        self.assertEqual(
            self.cache.stats(),
            {"size": 0, "max_size": 3, "hits": 0, "misses": 0, "evictions": 0, "hit_rate": 0.0},
        )

    def test_prune_expired(self):
        self.cache.set("old", 1)
        self.clock.advance(30)
        self.cache.set("new", 2)
        self.clock.advance(31)

        self.assertEqual(self.cache.prune_expired(), 1)
        self.assertEqual(self.cache.get("new"), 2)
        self.assertEqual(self.cache.stats()["evictions"], 1)

    def test_get_or_compute_only_computes_on_miss(self):
        calls = []

        def compute():
            calls.append(1)
            return "value"

        self.assertEqual(self.cache.get_or_compute("k", compute), "value")
        self.assertEqual(self.cache.get_or_compute("k", compute), "value")
        self.assertEqual(len(calls), 1)


class ResumeHashTests(unittest.TestCase):
    def test_hash_is_stable_and_truncated(self):
        digest = generate_resume_hash("Jordan Rivera")
        self.assertEqual(len(digest), 32)
        self.assertEqual(digest, generate_resume_hash(b"Jordan Rivera"))
        self.assertNotEqual(digest, generate_resume_hash("Jordan Rivera "))


if __name__ == "__main__":
    unittest.main()
