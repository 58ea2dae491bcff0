from __future__ import annotations

from fastapi.testclient import TestClient

from event_app.entity_types import get_entity_type_manager
from event_app.main import app


def _create_event(client: TestClient, **overrides):
    payload = {
        "title": "Test Event",
        "date": "2030-06-01T10:00:00+00:00",
    }
    payload.update(overrides)
    return client.post("/v1/events", json=payload)


def test_create_read_update_delete(client: TestClient):
    create_resp = _create_event(
        client,
        description={"value": "<strong>bold</strong><script>x()</script>", "format": "basic_html"},
    )
    assert create_resp.status_code == 200
    created = create_resp.json()
    event_id = created["id"]
    assert created["uuid"]
    assert created["description"]["processed"] == "<strong>bold</strong>"
    assert created["description"]["value"] == "<strong>bold</strong><script>x()</script>"

    get_resp = client.get(f"/v1/events/{event_id}")
    assert get_resp.status_code == 200
    assert get_resp.json()["uuid"] == created["uuid"]

    patch_resp = client.patch(f"/v1/events/{event_id}", json={"title": "Updated Title"})
    assert patch_resp.status_code == 200
    assert patch_resp.json()["title"] == "Updated Title"
    assert patch_resp.json()["uuid"] == created["uuid"]

    delete_resp = client.delete(f"/v1/events/{event_id}")
    assert delete_resp.status_code == 204

    assert client.get(f"/v1/events/{event_id}").status_code == 404


def test_create_without_title_is_rejected(client: TestClient):
    resp = _create_event(client, title="")
    assert resp.status_code == 422
    detail = resp.json()["detail"]
    assert detail["code"] == "VALIDATION_ERROR"
    assert detail["violations"] == ["title: Title field is required."]

    list_resp = client.get("/v1/events")
    assert list_resp.json()["total"] == 0


def test_create_without_date_is_rejected(client: TestClient):
    resp = client.post("/v1/events", json={"title": "No date"})
    assert resp.status_code == 422
    assert resp.json()["detail"]["violations"] == ["date: Date field is required."]


def test_unknown_format_is_rejected(client: TestClient):
    resp = _create_event(client, description={"value": "x", "format": "php_code"})
    assert resp.status_code == 422
    assert resp.json()["detail"]["code"] == "UNKNOWN_TEXT_FORMAT"


def test_overlong_title_is_rejected(client: TestClient):
    resp = _create_event(client, title="x" * 256)
    assert resp.status_code == 422
    assert resp.json()["detail"]["violations"] == [
        "title: Title cannot be longer than 255 characters."
    ]
    assert client.get("/v1/events").json()["total"] == 0


def test_patch_to_empty_title_keeps_stored_title(client: TestClient):
    event_id = _create_event(client).json()["id"]

    resp = client.patch(f"/v1/events/{event_id}", json={"title": ""})
    assert resp.status_code == 422
    assert client.get(f"/v1/events/{event_id}").json()["title"] == "Test Event"


def test_missing_event_returns_404(client: TestClient):
    assert client.get("/v1/events/4242").status_code == 404
    assert client.patch("/v1/events/4242", json={"title": "x"}).status_code == 404
    resp = client.delete("/v1/events/4242")
    assert resp.status_code == 404
    assert resp.json()["detail"]["code"] == "EVENT_NOT_FOUND"


def test_out_of_range_event_id_is_rejected(client: TestClient):
    for event_id in (2**70, 0):
        assert client.get(f"/v1/events/{event_id}").status_code == 422
        assert client.patch(f"/v1/events/{event_id}", json={"title": "x"}).status_code == 422
        assert client.delete(f"/v1/events/{event_id}").status_code == 422


def test_list_is_paginated(client: TestClient):
    for day in range(1, 4):
        _create_event(client, title=f"Event {day}", date=f"2030-06-0{day}T10:00:00+00:00")

    resp = client.get("/v1/events", params={"page": 2, "page_size": 2})
    assert resp.status_code == 200
    body = resp.json()
    assert body["total"] == 3
    assert [item["title"] for item in body["items"]] == ["Event 3"]


def test_form_display_is_ordered_by_weight(client: TestClient):
    resp = client.get("/v1/entity-types/event/fields")
    assert resp.status_code == 200
    body = resp.json()
    assert body["label"] == "Event"
    assert [f["name"] for f in body["fields"]] == ["title", "date", "description"]
    title = body["fields"][0]
    assert title["required"] is True
    assert title["kind"] == "string"
    assert title["default"] == ""
    assert title["max_length"] == 255


def test_view_display_includes_identity_fields(client: TestClient):
    resp = client.get("/v1/entity-types/event/fields", params={"display": "view"})
    assert [f["name"] for f in resp.json()["fields"]] == ["id", "uuid", "title", "date", "description"]


def test_unknown_entity_type_returns_404(client: TestClient):
    resp = client.get("/v1/entity-types/node/fields")
    assert resp.status_code == 404
    assert resp.json()["detail"]["code"] == "ENTITY_TYPE_NOT_FOUND"


def test_text_formats_are_listed(client: TestClient):
    resp = client.get("/v1/text-formats")
    assert [fmt["id"] for fmt in resp.json()] == ["basic_html", "restricted_html", "full_html", "plain_text"]


def test_request_id_is_echoed(client: TestClient):
    resp = client.get("/health", headers={"X-Request-ID": "abc-123"})
    assert resp.status_code == 200
    assert resp.headers["X-Request-ID"] == "abc-123"


def test_entity_type_handlers_resolve_to_routes():
    handlers = get_entity_type_manager().get_definition("event").handlers
    assert app.url_path_for(handlers["form.add"]) == "/v1/events"
    assert app.url_path_for(handlers["list_builder"]) == "/v1/events"
    for name in ("form.edit", "form.delete", "view_builder"):
        assert app.url_path_for(handlers[name], event_id="7") == "/v1/events/7"
