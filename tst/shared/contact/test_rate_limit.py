import threading

from src.shared.contact.rate_limit import (
    RATE_LIMIT_MAX_REQUESTS,
    RATE_LIMIT_WINDOW_MS,
    SlidingWindowRateLimiter,
)

T0 = 1_700_000_000_000


def test_defaults_match_policy():
    limiter = SlidingWindowRateLimiter()
    assert limiter.window_ms == RATE_LIMIT_WINDOW_MS == 600_000
    assert limiter.max_requests == RATE_LIMIT_MAX_REQUESTS == 10


def test_counts_and_limit_boundary():
    limiter = SlidingWindowRateLimiter()
    counts = [limiter.check_and_record("1.2.3.4", T0 + i) for i in range(11)]
    assert counts == list(range(1, 12))
    assert not limiter.is_over_limit(counts[9])
    assert limiter.is_over_limit(counts[10])


def test_expired_timestamps_are_dropped():
    limiter = SlidingWindowRateLimiter()
    for i in range(10):
        limiter.check_and_record("1.2.3.4", T0 + i)
    # Exactly one window after the first request, that request has expired
    assert limiter.check_and_record("1.2.3.4", T0 + RATE_LIMIT_WINDOW_MS) == 10
    assert limiter.check_and_record("1.2.3.4", T0 + 2 * RATE_LIMIT_WINDOW_MS + 10) == 1


def test_rejected_request_is_recorded():
    limiter = SlidingWindowRateLimiter(window_ms=1000, max_requests=2)
    for i in range(5):
        limiter.check_and_record("x", T0 + i)
    assert limiter.count("x", T0 + 5) == 5


def test_identifiers_are_independent():
    limiter = SlidingWindowRateLimiter()
    for _ in range(11):
        limiter.check_and_record("a", T0)
    assert limiter.check_and_record("b", T0) == 1


def test_retry_after_seconds():
    limiter = SlidingWindowRateLimiter(window_ms=10_000, max_requests=1)
    limiter.check_and_record("x", T0)
    limiter.check_and_record("x", T0 + 2_500)
    assert limiter.retry_after_seconds("x", T0 + 2_500) == 8
    assert limiter.retry_after_seconds("x", T0 + 7_000) == 3
    assert limiter.retry_after_seconds("unseen", T0) == 1


def test_sweep_removes_idle_identifiers():
    limiter = SlidingWindowRateLimiter(window_ms=1000)
    limiter.check_and_record("old", T0)
    limiter.check_and_record("fresh", T0 + 900)
    assert limiter.sweep(T0 + 1500) == 1
    assert limiter.tracked_identifiers() == 1
    assert limiter.count("fresh", T0 + 1500) == 1


def test_check_and_record_sweeps_once_per_window():
    limiter = SlidingWindowRateLimiter(window_ms=1000)
    limiter.check_and_record("a", T0)
    limiter.check_and_record("b", T0 + 500)
    # Less than a window since the last sweep: "a" is kept even though expired
    limiter.check_and_record("c", T0 + 999)
    assert limiter.tracked_identifiers() == 3
    limiter.check_and_record("c", T0 + 2000)
    assert limiter.tracked_identifiers() == 1


def test_reset_clears_state():
    limiter = SlidingWindowRateLimiter()
    limiter.check_and_record("a", T0)
    limiter.reset()
    assert limiter.tracked_identifiers() == 0
    assert limiter.count("a", T0) == 0


def test_concurrent_requests_do_not_lose_updates():
    limiter = SlidingWindowRateLimiter()
    barrier = threading.Barrier(8)

    def worker():
        barrier.wait()
        for _ in range(50):
            limiter.check_and_record("shared", T0)

    threads = [threading.Thread(target=worker) for _ in range(8)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()
    assert limiter.count("shared", T0) == 400
