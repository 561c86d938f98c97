from api.utils.rate_limit import FixedWindowRateLimiter


class FakeClock:
    def __init__(self):
        self.now = 1000.0

    def __call__(self):
        return self.now


def test_fixed_window_blocks_after_limit_and_resets():
    clock = FakeClock()
    limiter = FixedWindowRateLimiter(limit=3, window_seconds=60, clock=clock)

    assert [limiter.hit("1.2.3.4")[0] for _ in range(3)] == [True, True, True]
    allowed, retry_after = limiter.hit("1.2.3.4")
    assert not allowed
    assert retry_after == 60

    clock.now += 45
    allowed, retry_after = limiter.hit("1.2.3.4")
    assert not allowed
    assert retry_after == 15

    clock.now += 15
    assert limiter.hit("1.2.3.4")[0]


def test_keys_are_independent():
    limiter = FixedWindowRateLimiter(limit=1, window_seconds=60, clock=FakeClock())
    assert limiter.hit("a")[0]
    assert limiter.hit("b")[0]
    assert not limiter.hit("a")[0]


def test_expired_windows_are_discarded():
    clock = FakeClock()
    limiter = FixedWindowRateLimiter(limit=5, window_seconds=900, clock=clock)
    for i in range(10000):
        limiter.hit(f"10.0.{i // 256}.{i % 256}")
    assert len(limiter._windows) == 10000

    clock.now += 3600
    assert limiter.hit("192.168.0.1")[0]
    assert len(limiter._windows) == 1


def test_sweep_keeps_windows_still_open():
    clock = FakeClock()
    limiter = FixedWindowRateLimiter(limit=1, window_seconds=60, clock=clock)
    limiter.hit("old")
    clock.now += 50
    limiter.hit("recent")

    clock.now += 20
    limiter.hit("new")
    assert set(limiter._windows) == {"recent", "new"}
    assert not limiter.hit("recent")[0]


def test_sixth_login_attempt_gets_429_until_window_resets(app_factory):
    clock = FakeClock()
    app = app_factory(RATELIMIT_ENABLED=True, RATELIMIT_CLOCK=clock)
    client = app.test_client()
    payload = {"login": "ninguem", "password": "Errada123"}

    statuses = [client.post("/api/v1/auth/login", json=payload).status_code for _ in range(5)]
    assert statuses == [401] * 5

    blocked = client.post("/api/v1/auth/login", json=payload)
    assert blocked.status_code == 429
    body = blocked.get_json()
    assert body["error"]["code"] == "RATE_LIMIT_EXCEEDED"
    assert body["error"]["details"]["retryAfter"] == 900
    assert blocked.headers["Retry-After"] == "900"

    clock.now += 15 * 60
    assert client.post("/api/v1/auth/login", json=payload).status_code == 401


def test_rate_limit_disabled_in_tests(client):
    payload = {"login": "ninguem", "password": "Errada123"}
    statuses = {client.post("/api/v1/auth/login", json=payload).status_code for _ in range(8)}
    assert statuses == {401}
