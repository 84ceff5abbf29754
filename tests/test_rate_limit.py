from fastapi.testclient import TestClient

from conftest import make_settings
from garage.core.rate_limit import FixedWindowLimiter
from garage.main import create_app


class _Clock:
    def __init__(self):
        self.now = 1000.0

    def __call__(self):
        return self.now


def test_fixed_window_blocks_then_resets():
    clock = _Clock()
    limiter = FixedWindowLimiter(window_seconds=60, max_requests=2, clock=clock)

    assert limiter.allow("1.2.3.4") == (True, 0.0)
    assert limiter.allow("1.2.3.4") == (True, 0.0)
    allowed, retry_after = limiter.allow("1.2.3.4")
    assert allowed is False
    assert retry_after == 60

    # clés indépendantes
    assert limiter.allow("5.6.7.8")[0] is True

    clock.now += 45
    assert limiter.allow("1.2.3.4") == (False, 15)
    clock.now += 15
    assert limiter.allow("1.2.3.4") == (True, 0.0)


def test_auth_endpoints_limited_to_five_attempts(tmp_path):
    app = create_app(make_settings(tmp_path, RATE_LIMIT_ENABLED=True))
    with TestClient(app) as client:
        creds = {"email": "personne@example.com", "password": "Mauvais@01"}
        statuses = [client.post("/api/signin", json=creds).status_code for _ in range(6)]
        assert statuses == [401] * 5 + [429]

        blocked = client.post("/api/signin", json=creds)
        assert blocked.json() == {"error": "Trop de requêtes, veuillez réessayer plus tard."}
        assert int(blocked.headers["Retry-After"]) > 0

        # le reste de l'API garde sa propre fenêtre
        assert client.get("/api/csrf").status_code == 200


def test_global_limit(tmp_path):
    app = create_app(make_settings(tmp_path, RATE_LIMIT_ENABLED=True, RATE_LIMIT_MAX_REQUESTS=3))
    with TestClient(app) as client:
        statuses = [client.get("/api/csrf").status_code for _ in range(4)]
        assert statuses == [200, 200, 200, 429]


def test_disabled_outside_production(tmp_path):
    app = create_app(make_settings(tmp_path, RATE_LIMIT_ENABLED=None, ENV="dev"))
    assert app.state.settings.RATE_LIMIT_ENABLED is False
    with TestClient(app) as client:
        assert all(client.get("/api/csrf").status_code == 200 for _ in range(10))


def test_expired_windows_are_dropped():
    clock = _Clock()
    limiter = FixedWindowLimiter(window_seconds=60, max_requests=1, clock=clock)
    for i in range(50):
        limiter.allow(f"10.0.0.{i}")
    assert limiter.tracked_keys() == 50

    clock.now += 61
    assert limiter.allow("10.0.1.1") == (True, 0.0)
    assert limiter.tracked_keys() == 1
