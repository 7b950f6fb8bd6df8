"""Unit tests for taskmanager.services.throttle: consecutive-failure counting per email."""

import threading
import unittest

from taskmanager.services.throttle import InMemoryAttemptStore, LoginThrottle


class TestInMemoryAttemptStore(unittest.TestCase):
    def test_increment_starts_at_one(self) -> None:
        store = InMemoryAttemptStore()
        self.assertIsNone(store.get("a@x.com"))
        self.assertEqual(store.increment("a@x.com"), 1)
        self.assertEqual(store.increment("a@x.com"), 2)
        self.assertEqual(store.get("a@x.com"), 2)

    def test_delete_missing_key_is_noop(self) -> None:
        store = InMemoryAttemptStore()
        store.delete("nobody@x.com")
        self.assertIsNone(store.get("nobody@x.com"))

    def test_concurrent_increments_are_not_lost(self) -> None:
        store = InMemoryAttemptStore()

        def worker() -> None:
            for _ in range(200):
                store.increment("a@x.com")

        threads = [threading.Thread(target=worker) for _ in range(8)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()
        self.assertEqual(store.get("a@x.com"), 1600)


class TestLoginThrottle(unittest.TestCase):
    """Blocked iff the counter is present and at or above max_attempts; no time decay."""

    def setUp(self) -> None:
        self.throttle = LoginThrottle(InMemoryAttemptStore(), max_attempts=6)

    def test_not_blocked_without_failures(self) -> None:
        self.assertFalse(self.throttle.is_blocked("a@x.com"))
        self.assertEqual(self.throttle.remaining_attempts("a@x.com"), 6)

    def test_blocked_after_six_failures(self) -> None:
        for expected in range(1, 6):
            self.assertEqual(self.throttle.record_failure("a@x.com"), expected)
            self.assertFalse(self.throttle.is_blocked("a@x.com"))
        self.throttle.record_failure("a@x.com")
        self.assertTrue(self.throttle.is_blocked("a@x.com"))
        self.assertEqual(self.throttle.remaining_attempts("a@x.com"), 0)

    def test_failure_log_reports_remaining_attempts(self) -> None:
        with self.assertLogs("taskmanager.services.throttle", level="INFO") as logs:
            self.throttle.record_failure("a@x.com")
            self.throttle.record_failure("a@x.com")
        self.assertEqual([r.remaining_attempts for r in logs.records], [5, 4])
        self.assertEqual(logs.records[-1].attempt_count, 2)

    def test_identities_are_independent(self) -> None:
        for _ in range(6):
            self.throttle.record_failure("a@x.com")
        self.assertTrue(self.throttle.is_blocked("a@x.com"))
        self.assertFalse(self.throttle.is_blocked("b@x.com"))

    def test_success_clears_counter(self) -> None:
        for _ in range(6):
            self.throttle.record_failure("a@x.com")
        self.throttle.record_success("a@x.com")
        self.assertFalse(self.throttle.is_blocked("a@x.com"))
        self.assertEqual(self.throttle.record_failure("a@x.com"), 1)

    def test_is_blocked_does_not_mutate_counter(self) -> None:
        for _ in range(6):
            self.throttle.record_failure("a@x.com")
        for _ in range(3):
            self.assertTrue(self.throttle.is_blocked("a@x.com"))
        self.assertEqual(self.throttle.remaining_attempts("a@x.com"), 0)
        self.assertEqual(self.throttle.record_failure("a@x.com"), 7)


if __name__ == "__main__":
    unittest.main()
