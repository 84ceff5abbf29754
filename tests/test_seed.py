import pytest

from garage.db.models.users import Role
from garage.db.repositories.users import UserRepository
from garage.db.repositories.vehicles import VehicleRepository
from garage.db.seed import load_seed_yaml, seed_all
from garage.security.password import verify_password


def test_seed_is_idempotent(app, client):
    with app.state.database.session() as session:
        seed_all(session, bcrypt_rounds=4)
        seed_all(session, bcrypt_rounds=4)

        users = UserRepository(session)
        vehicles = VehicleRepository(session)
        assert users.count() == 3
        assert users.count_by_role(Role.client) == 2
        assert vehicles.count() == 3

        admin = users.get_by_email("garagiste@vroumvroum.fr")
        assert admin.role == Role.admin
        assert verify_password("Azerty@01", admin.password)

        rows = {row["name"]: row for row in vehicles.list_with_owner()}
        assert rows["AB-123-CD"]["firstname"] == "Marie"
        assert rows["IJ-789-KL"]["client_id"] is None


def test_seeded_admin_can_sign_in(app, client):
    with app.state.database.session() as session:
        seed_all(session, bcrypt_rounds=4)
    resp = client.post("/api/signin", json={"email": "garagiste@vroumvroum.fr", "password": "Azerty@01"})
    assert resp.json() == {"auth": True, "role": "admin"}


def test_seed_yaml_must_be_a_mapping(tmp_path):
    path = tmp_path / "seed.yaml"
    path.write_text("- just\n- a list\n", encoding="utf-8")
    with pytest.raises(ValueError):
        load_seed_yaml(path)
    with pytest.raises(FileNotFoundError):
        load_seed_yaml(tmp_path / "missing.yaml")
