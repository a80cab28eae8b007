# tests/api/test_api_errors.py
from __future__ import annotations


def test_unknown_route_is_problem_json(client):
    resp = client.get("/api/v1/nope")

    assert resp.status_code == 404
    assert resp.mimetype == "application/problem+json"
    assert resp.get_json()["detail"] == "Route '/api/v1/nope' not found"


def test_htmx_requests_get_an_inline_fragment(client):
    resp = client.post(
        "/api/v1/exercises",
        data={"name": "<b>x</b>", "target_sets": "1", "target_repetitions": "1"},
        headers={"HX-Request": "true"},
    )

    assert resp.status_code == 400
    assert resp.mimetype == "text/html"
    body = resp.get_data(as_text=True)
    assert body.startswith("<p ")
    assert "Target muscle is required" in body


def test_fragment_escapes_messages(client):
    resp = client.get("/api/v1/<script>", headers={"HX-Request": "true"})

    assert resp.status_code == 404
    body = resp.get_data(as_text=True)
    assert "<script>" not in body
    assert "&lt;script&gt;" in body


def test_invalid_limit_is_unprocessable(client):
    resp = client.get("/api/v1/plans?limit=0")

    assert resp.status_code == 422
    problem = resp.get_json()
    assert problem["code"] == "validation_error"
    assert "limit" in problem["details"]["errors"]


def test_request_id_is_echoed(client):
    resp = client.get("/api/v1/health", headers={"X-Request-ID": "req-42"})

    assert resp.headers["X-Request-ID"] == "req-42"


def test_method_not_allowed(client):
    resp = client.delete("/api/v1/plans")

    assert resp.status_code == 405
    assert resp.get_json()["code"] == "method_not_allowed"
