"""
Tests for the verification engine.
"""

import threading
from concurrent.futures import ThreadPoolExecutor

from otp_core.otp.models import VerificationStatus
from otp_core.otp.verification import VerificationEngine
from tests.conftest import RECIPIENT, START


class TestVerificationEngine:
    """Outcome and state-machine tests."""

    def test_correct_code_verifies_once(self, store):
        """A correct code verifies, then the challenge is gone."""
        engine = VerificationEngine(store)
        store.put(RECIPIENT, "123456", 300, START)

        first = engine.verify(RECIPIENT, "123456", START + 1)
        second = engine.verify(RECIPIENT, "123456", START + 2)

        assert first.status is VerificationStatus.VERIFIED
        assert first.success
        assert second.status is VerificationStatus.NOT_FOUND

    def test_unknown_recipient(self, store):
        engine = VerificationEngine(store)

        result = engine.verify(RECIPIENT, "123456", START)

        assert result.status is VerificationStatus.NOT_FOUND
        assert not result.success

    def test_expired(self, store):
        """Verifying after the TTL reports expiry and consumes the challenge."""
        engine = VerificationEngine(store)
        store.put(RECIPIENT, "123456", 300, START)

        result = engine.verify(RECIPIENT, "123456", START + 360)

        assert result.status is VerificationStatus.EXPIRED
        assert store.get(RECIPIENT) is None
        assert engine.verify(RECIPIENT, "123456", START + 361).status is VerificationStatus.NOT_FOUND

    def test_expiry_boundary_is_still_valid(self, store):
        """Expiry requires now strictly past expires_at."""
        engine = VerificationEngine(store)
        store.put(RECIPIENT, "123456", 300, START)

        assert engine.verify(RECIPIENT, "123456", START + 300).status is VerificationStatus.VERIFIED

    def test_wrong_code_sequence(self, store):
        """Three wrong codes: Mismatch(2), Mismatch(1), AttemptsExceeded, then NotFound."""
        engine = VerificationEngine(store, max_attempts=3)
        store.put(RECIPIENT, "123456", 300, START)

        results = [engine.verify(RECIPIENT, "000000", START + i) for i in range(4)]

        assert results[0].status is VerificationStatus.MISMATCH
        assert results[0].remaining_attempts == 2
        assert results[1].status is VerificationStatus.MISMATCH
        assert results[1].remaining_attempts == 1
        assert results[2].status is VerificationStatus.ATTEMPTS_EXCEEDED
        assert results[3].status is VerificationStatus.NOT_FOUND

    def test_mismatch_then_correct(self, store):
        engine = VerificationEngine(store)
        store.put(RECIPIENT, "123456", 300, START)

        engine.verify(RECIPIENT, "000000", START)

        assert engine.verify(RECIPIENT, "123456", START).status is VerificationStatus.VERIFIED

    def test_expiry_checked_before_attempts(self, store):
        """An expired, exhausted challenge reports Expired."""
        engine = VerificationEngine(store, max_attempts=3)
        store.put(RECIPIENT, "123456", 300, START)
        store.get(RECIPIENT).attempts = 3

        result = engine.verify(RECIPIENT, "123456", START + 301)

        assert result.status is VerificationStatus.EXPIRED

    def test_attempts_checked_before_code(self, store):
        """An exhausted challenge rejects even the correct code."""
        engine = VerificationEngine(store, max_attempts=3)
        store.put(RECIPIENT, "123456", 300, START)
        store.get(RECIPIENT).attempts = 3

        result = engine.verify(RECIPIENT, "123456", START + 1)

        assert result.status is VerificationStatus.ATTEMPTS_EXCEEDED
        assert store.get(RECIPIENT) is None

    def test_single_attempt_budget(self, store):
        engine = VerificationEngine(store, max_attempts=1)
        store.put(RECIPIENT, "123456", 300, START)

        assert engine.verify(RECIPIENT, "000000", START).status is VerificationStatus.ATTEMPTS_EXCEEDED

    def test_recipients_are_independent(self, store):
        engine = VerificationEngine(store)
        store.put("85511111111", "111111", 300, START)
        store.put("85522222222", "222222", 300, START)

        engine.verify("85511111111", "000000", START)

        assert store.get("85522222222").attempts == 0
        assert engine.verify("85522222222", "222222", START).success

    def test_verification_cancels_eviction_timer(self, store, scheduler):
        engine = VerificationEngine(store)
        store.put(RECIPIENT, "123456", 300, START)

        engine.verify(RECIPIENT, "123456", START)

        assert scheduler.handles[0].cancelled


class TestConcurrentVerification:
    """Concurrent callers must not lose updates."""

    def test_concurrent_wrong_codes_count_every_attempt(self, store):
        """N simultaneous wrong codes produce exactly N increments."""
        workers = 50
        engine = VerificationEngine(store, max_attempts=1000)
        store.put(RECIPIENT, "123456", 300, START)
        barrier = threading.Barrier(workers)

        def attempt(_):
            barrier.wait()
            return engine.verify(RECIPIENT, "000000", START + 1)

        with ThreadPoolExecutor(max_workers=workers) as pool:
            results = list(pool.map(attempt, range(workers)))

        assert store.get(RECIPIENT).attempts == workers
        remaining = sorted(r.remaining_attempts for r in results)
        assert remaining == list(range(1000 - workers, 1000))

    def test_concurrent_exhaustion_removes_once(self, store):
        """Only the attempt that reaches the limit reports AttemptsExceeded."""
        workers = 20
        engine = VerificationEngine(store, max_attempts=5)
        store.put(RECIPIENT, "123456", 300, START)
        barrier = threading.Barrier(workers)

        def attempt(_):
            barrier.wait()
            return engine.verify(RECIPIENT, "000000", START + 1).status

        with ThreadPoolExecutor(max_workers=workers) as pool:
            statuses = list(pool.map(attempt, range(workers)))

        assert statuses.count(VerificationStatus.MISMATCH) == 4
        assert statuses.count(VerificationStatus.ATTEMPTS_EXCEEDED) == 1
        assert statuses.count(VerificationStatus.NOT_FOUND) == workers - 5
        assert store.get(RECIPIENT) is None
