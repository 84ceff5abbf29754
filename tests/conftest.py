import pytest
from fastapi.testclient import TestClient

from garage.core.config import Settings
from garage.db.models.users import Role, User
from garage.main import create_app
from garage.security.password import hash_password

ADMIN_EMAIL = "garagiste@vroumvroum.fr"
ADMIN_PASSWORD = "Azerty@01"
CLIENT_EMAIL = "edward.elric@example.com"
CLIENT_PASSWORD = "Client@2024"


def make_settings(tmp_path, **overrides) -> Settings:
    values = dict(
        ENV="test",
        DATABASE_URL=f"sqlite:///{tmp_path / 'garage_test.db'}",
        JWT_SECRET_KEY="test-jwt-secret-strong-value-123456",
        CSRF_SECRET="test-csrf-secret-value",
        BCRYPT_ROUNDS=4,
        RATE_LIMIT_ENABLED=False,
        DB_RECONNECT_DELAY_SECONDS=0.0,
        DB_CONNECT_MAX_ATTEMPTS=1,
    )
    values.update(overrides)
    return Settings(_env_file=None, **values)


def add_user(app, *, email: str, password: str, role: Role = Role.client,
             firstname: str = "Edward", lastname: str = "Elric") -> int:
    with app.state.database.session() as session:
        user = User(
            firstname=firstname,
            lastname=lastname,
            email=email,
            password=hash_password(password, 4),
            role=role,
        )
        session.add(user)
        session.commit()
        session.refresh(user)
        return user.id


def sign_in(client: TestClient, email: str, password: str):
    resp = client.post("/api/signin", json={"email": email, "password": password})
    assert resp.status_code == 200, resp.text
    return resp


@pytest.fixture
def settings(tmp_path) -> Settings:
    return make_settings(tmp_path)


@pytest.fixture
def app(settings):
    return create_app(settings)


@pytest.fixture
def client(app):
    """Client anonyme ; le `with` déclenche le démarrage (connexion + création des tables)."""
    with TestClient(app) as c:
        yield c


@pytest.fixture
def admin_id(app, client) -> int:
    return add_user(app, email=ADMIN_EMAIL, password=ADMIN_PASSWORD, role=Role.admin,
                    firstname="Vincent", lastname="Parrot")


@pytest.fixture
def client_id(app, client) -> int:
    return add_user(app, email=CLIENT_EMAIL, password=CLIENT_PASSWORD, role=Role.client)


@pytest.fixture
def admin_client(app, admin_id) -> TestClient:
    c = TestClient(app)
    sign_in(c, ADMIN_EMAIL, ADMIN_PASSWORD)
    return c


@pytest.fixture
def customer_client(app, client_id) -> TestClient:
    c = TestClient(app)
    sign_in(c, CLIENT_EMAIL, CLIENT_PASSWORD)
    return c


@pytest.fixture
def vehicle_payload() -> dict:
    return {
        "marque": "Peugeot",
        "modele": "208",
        "annee": 2023,
        "name": "AB-123-CD",
        "type": "Citadine",
    }
