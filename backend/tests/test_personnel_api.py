from __future__ import annotations

from core.security import verify_password
from models import Personnel
from tests.factories import session_json


def _create(client, headers, **fields):
    payload = {"name": "Dana Roy", "login": "dana", "password": "dana-pw", "role": "INSTRUCTOR"}
    payload.update(fields)
    return client.post("/api/personnel/", json=payload, headers=headers)


def test_code_is_generated_from_role(client, auth_headers):
    first = _create(client, auth_headers).json()
    second = _create(client, auth_headers, login="eli", name="Eli Park").json()
    head = _create(client, auth_headers, login="fay", role="head_of_department").json()

    assert first["code"] == "INS0001"
    assert second["code"] == "INS0002"
    assert head["code"] == "HOD0001"
    assert head["role"] == "HEAD_OF_DEPARTMENT"
    assert "password_hash" not in first


def test_login_is_unique_case_insensitively(client, auth_headers):
    _create(client, auth_headers)
    res = _create(client, auth_headers, login="DANA")
    assert res.status_code == 409
    assert res.json()["code"] == "LOGIN_ALREADY_EXISTS"


def test_unknown_role_is_rejected(client, auth_headers):
    res = _create(client, auth_headers, role="JANITOR")
    assert res.status_code == 400
    assert res.json()["details"]["field"] == "role"


def test_list_by_role(client, campus, auth_headers):
    heads = client.get("/api/personnel/", params={"role": "HEAD_OF_DEPARTMENT"}, headers=auth_headers).json()
    assert [p["code"] for p in heads] == ["P2"]
    assert client.get("/api/personnel/count", headers=auth_headers).json() == {"count": 3}


def test_put_keeps_code_and_rehashes_password_only_when_given(client, db, auth_headers):
    code = _create(client, auth_headers).json()["code"]

    res = client.put(
        f"/api/personnel/{code}",
        json={"name": "Dana Roy-Smith", "login": "dana", "role": "HEAD_OF_DEPARTMENT"},
        headers=auth_headers,
    )
    assert res.status_code == 200
    assert res.json()["code"] == code
    assert res.json()["role"] == "HEAD_OF_DEPARTMENT"
    assert verify_password("dana-pw", db.get(Personnel, code).password_hash)

    client.put(
        f"/api/personnel/{code}",
        json={"name": "Dana Roy-Smith", "login": "dana", "role": "INSTRUCTOR", "password": "new-pw"},
        headers=auth_headers,
    )
    db.expire_all()
    assert verify_password("new-pw", db.get(Personnel, code).password_hash)


def test_referenced_personnel_cannot_be_deleted(client, campus, auth_headers):
    client.post("/api/sessions/", json=session_json(), headers=auth_headers)
    res = client.delete("/api/personnel/P2", headers=auth_headers)
    assert res.status_code == 409
    assert res.json()["code"] == "PERSONNEL_IN_USE"


def test_delete_and_exists(client, auth_headers):
    code = _create(client, auth_headers).json()["code"]
    assert client.get(f"/api/personnel/{code}/exists", headers=auth_headers).json() == {"exists": True}
    assert client.delete(f"/api/personnel/{code}", headers=auth_headers).json() == {"ok": True}
    assert client.get(f"/api/personnel/{code}", headers=auth_headers).status_code == 404
