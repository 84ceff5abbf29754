import pytest

from conftest import make_settings


@pytest.fixture
def settings(tmp_path):
    return make_settings(tmp_path, CSRF_PROTECTION=True)


def _csrf(c):
    return c.get("/api/csrf").json()["token"]


def test_write_without_token_is_rejected(admin_client, vehicle_payload):
    resp = admin_client.post("/api/vehicules", json=vehicle_payload)
    assert resp.status_code == 403
    assert resp.json() == {"error": "Jeton CSRF invalide"}


def test_write_with_forged_token_is_rejected(admin_client, vehicle_payload):
    resp = admin_client.post("/api/vehicules", json={**vehicle_payload, "token": "abc.def"})
    assert resp.status_code == 403


def test_write_with_token_is_accepted(admin_client, vehicle_payload):
    created = admin_client.post("/api/vehicules", json={**vehicle_payload, "token": _csrf(admin_client)})
    assert created.status_code == 201
    vehicle_id = created.json()["id"]

    updated = admin_client.put(
        f"/api/vehicules/{vehicle_id}",
        json={**vehicle_payload, "modele": "2008", "token": _csrf(admin_client)},
    )
    assert updated.status_code == 200

    deleted = admin_client.request("DELETE", f"/api/vehicules/{vehicle_id}", json={"token": _csrf(admin_client)})
    assert deleted.status_code == 200


def test_reads_do_not_need_token(admin_client):
    assert admin_client.get("/api/vehicules").status_code == 200


def test_update_and_delete_require_token(admin_client, vehicle_payload):
    vehicle_id = admin_client.post(
        "/api/vehicules", json={**vehicle_payload, "token": _csrf(admin_client)}
    ).json()["id"]

    updated = admin_client.put(f"/api/vehicules/{vehicle_id}", json={**vehicle_payload, "modele": "2008"})
    assert updated.status_code == 403
    assert updated.json() == {"error": "Jeton CSRF invalide"}

    deleted = admin_client.delete(f"/api/vehicules/{vehicle_id}")
    assert deleted.status_code == 403

    forged = admin_client.request("DELETE", f"/api/vehicules/{vehicle_id}", json={"token": "abc.def"})
    assert forged.status_code == 403

    # rien n'a bougé
    [row] = admin_client.get("/api/vehicules").json()
    assert row["id"] == vehicle_id
    assert row["modele"] == "208"

    updated = admin_client.put(
        f"/api/vehicules/{vehicle_id}",
        json={**vehicle_payload, "modele": "2008", "token": _csrf(admin_client)},
    )
    assert updated.status_code == 200
    deleted = admin_client.request("DELETE", f"/api/vehicules/{vehicle_id}", json={"token": _csrf(admin_client)})
    assert deleted.status_code == 200
    assert admin_client.get("/api/vehicules").json() == []
