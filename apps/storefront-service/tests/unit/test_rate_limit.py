from storefront.utils.rate_limit import RATE_LIMITS, RateLimiter, RateLimitResult, get_client_ip


class FakeClock:
    def __init__(self):
        self.now = 10_000.0

    def __call__(self):
        return self.now


def test_fixed_window_blocks_after_limit_then_resets():
    clock = FakeClock()
    limiter = RateLimiter(clock=clock)
    results = [limiter.hit("subscribe:1.2.3.4", 3, 60) for _ in range(4)]
    assert [r.success for r in results] == [True, True, True, False]
    assert [r.remaining for r in results] == [2, 1, 0, 0]

    clock.now += 61
    assert limiter.hit("subscribe:1.2.3.4", 3, 60).success


def test_keys_are_independent():
    limiter = RateLimiter(clock=FakeClock())
    for _ in range(3):
        limiter.check("contact:a", RATE_LIMITS.CONTACT)
    assert not limiter.check("contact:a", RATE_LIMITS.CONTACT).success
    assert limiter.check("contact:b", RATE_LIMITS.CONTACT).success


def test_expired_records_are_cleaned_up():
    clock = FakeClock()
    limiter = RateLimiter(clock=clock)
    limiter.hit("a", 1, 60)
    limiter.hit("b", 1, 60)
    assert len(limiter) == 2
    clock.now += 6 * 60
    limiter.hit("c", 1, 60)
    assert len(limiter) == 1


def test_retry_after_is_at_least_one_second():
    result = RateLimitResult(success=False, remaining=0, reset_at=100.0)
    assert result.retry_after_seconds(now=40.0) == 60
    assert result.retry_after_seconds(now=100.0) == 1


def test_client_ip_resolution_order():
    assert get_client_ip({"x-forwarded-for": "9.9.9.9, 10.0.0.1", "x-real-ip": "8.8.8.8"}) == "9.9.9.9"
    assert get_client_ip({"x-real-ip": "8.8.8.8"}) == "8.8.8.8"
    assert get_client_ip({"cf-connecting-ip": "7.7.7.7"}) == "7.7.7.7"
    assert get_client_ip({}, fallback="127.0.0.1") == "127.0.0.1"
    assert get_client_ip({}) == "unknown"
