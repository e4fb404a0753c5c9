from __future__ import annotations


def test_create_and_list(client, campus, auth_headers):
    res = client.post("/api/assignments/", json={"course_code": "C10", "personnel_code": "P1"}, headers=auth_headers)
    assert res.status_code == 201, res.text
    body = res.json()
    assert body["personnel_code"] == "P1"
    assert body["course_code"] == "C10"
    assert body["personnel"]["name"] == "Alice Martin"
    assert body["personnel"]["role"] == "INSTRUCTOR"
    assert body["course"]["label"] == "Algorithms"

    listed = client.get("/api/assignments/", headers=auth_headers).json()
    assert [(a["course_code"], a["personnel_code"]) for a in listed] == [("C10", "P1")]


def test_duplicate_is_conflict(client, campus, auth_headers):
    payload = {"course_code": "C10", "personnel_code": "P1"}
    client.post("/api/assignments/", json=payload, headers=auth_headers)
    res = client.post("/api/assignments/", json=payload, headers=auth_headers)
    assert res.status_code == 409
    assert res.json()["code"] == "DUPLICATE_ASSIGNMENT"
    assert len(client.get("/api/assignments/", headers=auth_headers).json()) == 1


def test_missing_personnel_code_is_bad_request(client, campus, auth_headers):
    res = client.post("/api/assignments/", json={"course_code": "C10"}, headers=auth_headers)
    assert res.status_code == 400
    assert res.json()["details"]["field"] == "personnel_code"


def test_get_and_delete_by_composite_key(client, campus, auth_headers):
    client.post("/api/assignments/", json={"course_code": "C10", "personnel_code": "P2"}, headers=auth_headers)

    res = client.get("/api/assignments/C10/P2", headers=auth_headers)
    assert res.status_code == 200
    assert res.json()["personnel"]["role"] == "HEAD_OF_DEPARTMENT"

    assert client.delete("/api/assignments/C10/P2", headers=auth_headers).json() == {"ok": True}
    res = client.delete("/api/assignments/C10/P2", headers=auth_headers)
    assert res.status_code == 404
    assert res.json()["code"] == "ASSIGNMENT_NOT_FOUND"
