from __future__ import annotations

from tests.factories import add_course


def test_create_and_fetch(client, auth_headers):
    payload = {"code": "C20", "label": "Compilers", "credits": 6, "hours": 45}
    res = client.post("/api/courses/", json=payload, headers=auth_headers)
    assert res.status_code == 201, res.text

    body = client.get("/api/courses/C20", headers=auth_headers).json()
    assert body["label"] == "Compilers"
    assert body["credits"] == 6


def test_duplicate_code_is_conflict(client, db, auth_headers):
    add_course(db, "C20")
    res = client.post("/api/courses/", json={"code": "C20", "label": "Again"}, headers=auth_headers)
    assert res.status_code == 409
    assert res.json()["code"] == "COURSE_CODE_ALREADY_EXISTS"


def test_blank_label_is_missing_field(client, auth_headers):
    res = client.post("/api/courses/", json={"code": "C20", "label": "  "}, headers=auth_headers)
    assert res.status_code == 400
    assert res.json()["code"] == "MISSING_FIELD"


def test_label_search_is_case_insensitive_substring(client, db, auth_headers):
    add_course(db, "C10", label="Algorithms")
    add_course(db, "C11", label="Advanced ALGORITHMS")
    add_course(db, "C12", label="Networks")

    found = client.get("/api/courses/", params={"label": "algo"}, headers=auth_headers).json()
    assert [c["code"] for c in found] == ["C10", "C11"]


def test_threshold_filters(client, db, auth_headers):
    add_course(db, "C10", credits=2, hours=20)
    add_course(db, "C11", credits=5, hours=60)

    assert [c["code"] for c in client.get("/api/courses/", params={"min_credits": 3}, headers=auth_headers).json()] == ["C11"]
    assert [c["code"] for c in client.get("/api/courses/", params={"min_hours": 20}, headers=auth_headers).json()] == ["C10", "C11"]


def test_count_and_exists(client, db, auth_headers):
    add_course(db, "C10")
    assert client.get("/api/courses/count", headers=auth_headers).json() == {"count": 1}
    assert client.get("/api/courses/C10/exists", headers=auth_headers).json() == {"exists": True}


def test_put_replaces_fields(client, db, auth_headers):
    add_course(db, "C10")
    res = client.put("/api/courses/C10", json={"label": "Graph Theory", "credits": 4, "hours": 40}, headers=auth_headers)
    assert res.status_code == 200
    assert res.json()["label"] == "Graph Theory"


def test_assigned_course_cannot_be_deleted(client, campus, auth_headers):
    client.post("/api/assignments/", json={"course_code": "C10", "personnel_code": "P1"}, headers=auth_headers)
    res = client.delete("/api/courses/C10", headers=auth_headers)
    assert res.status_code == 409
    assert res.json()["code"] == "COURSE_IN_USE"


def test_delete_unknown_course_is_not_found(client, auth_headers):
    res = client.delete("/api/courses/C404", headers=auth_headers)
    assert res.status_code == 404


def test_negative_figures_are_validation_errors(client, auth_headers):
    res = client.post("/api/courses/", json={"code": "C20", "label": "Compilers", "credits": -1}, headers=auth_headers)
    assert res.status_code == 400
    assert res.json()["code"] == "VALIDATION_ERROR"
    assert res.json()["details"]["field"] == "credits"

    res = client.get("/api/courses/", params={"min_hours": -5}, headers=auth_headers)
    assert res.status_code == 400
    assert res.json()["details"]["field"] == "min_hours"
