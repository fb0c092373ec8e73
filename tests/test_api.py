from __future__ import annotations

import pytest

from shiftboard.services import mailer


@pytest.fixture
def base(restaurant):
    return f"/api/restaurants/{restaurant.id}"


def _template(client, base, **overrides):
    body = {"name": "Lunch", "day_of_week": 1, "start_time": "09:00", "end_time": "17:00", "role_ids": []}
    body.update(overrides)
    response = client.post(f"{base}/shift-templates", json=body)
    assert response.status_code == 201, response.text
    return response.json()


def _schedule(client, base, start="2025-01-20", end="2025-01-26"):
    response = client.post(f"{base}/schedules", json={"start_date": start, "end_date": end})
    assert response.status_code == 201, response.text
    return response.json()


def test_health(client):
    assert client.get("/health").json()["status"] == "ok"


def test_unknown_restaurant_is_404(client):
    assert client.get("/api/restaurants/999/shift-templates").status_code == 404


def test_shift_template_crud(client, base, roles):
    server = roles["Server"].id
    created = _template(client, base, role_ids=[server, server])
    assert created["role_ids"] == [server]
    assert created["start_time"] == "09:00"

    response = client.patch(f"{base}/shift-templates/{created['id']}", json={"name": "Brunch", "end_time": "15:30"})
    assert response.status_code == 200
    assert response.json()["name"] == "Brunch"
    assert response.json()["end_time"] == "15:30"

    listed = client.get(f"{base}/shift-templates").json()
    assert [t["name"] for t in listed] == ["Brunch"]

    assert client.delete(f"{base}/shift-templates/{created['id']}").status_code == 204
    assert client.get(f"{base}/shift-templates").json() == []


@pytest.mark.parametrize(
    "overrides",
    [
        {"day_of_week": 7},
        {"day_of_week": -1},
        {"start_time": "17:00", "end_time": "09:00"},
        {"start_time": "25:00"},
        {"name": ""},
    ],
)
def test_shift_template_validation(client, base, overrides):
    body = {"name": "Lunch", "day_of_week": 1, "start_time": "09:00", "end_time": "17:00"}
    body.update(overrides)
    assert client.post(f"{base}/shift-templates", json=body).status_code == 422


def test_shift_template_rejects_foreign_roles(client, base):
    body = {"name": "Lunch", "day_of_week": 1, "start_time": "09:00", "end_time": "17:00", "role_ids": [404]}
    assert client.post(f"{base}/shift-templates", json=body).status_code == 400


def test_patch_rejects_inverted_window(client, base):
    created = _template(client, base)
    response = client.patch(f"{base}/shift-templates/{created['id']}", json={"start_time": "18:00"})
    assert response.status_code == 400


def test_schedule_dates(client, base):
    schedule = _schedule(client, base, start="2025-01-20T00:00:00Z", end="2025-01-26T23:59:59Z")
    assert schedule["start_date"] == "2025-01-20"
    assert schedule["end_date"] == "2025-01-26"
    assert schedule["published_at"] is None

    inverted = client.post(f"{base}/schedules", json={"start_date": "2025-01-26", "end_date": "2025-01-20"})
    assert inverted.status_code == 422

    response = client.patch(f"{base}/schedules/{schedule['id']}", json={"end_date": "2025-01-19"})
    assert response.status_code == 400


def test_generate_is_idempotent(client, base, roles):
    server, cook = roles["Server"].id, roles["Cook"].id
    _template(client, base, day_of_week=1, role_ids=[server, cook])
    _template(client, base, name="Close", day_of_week=5, start_time="12:00", end_time="00:00", role_ids=[cook])
    _template(client, base, name="Unstaffed", day_of_week=2)
    schedule = _schedule(client, base)
    url = f"{base}/schedules/{schedule['id']}/shifts"

    first = client.post(f"{url}/generate")
    assert first.status_code == 200
    assert first.json()["created_count"] == 3

    second = client.post(f"{url}/generate")
    assert second.json() == {"created_count": 0, "created_ids": []}

    shifts = client.get(url).json()
    assert [(s["shift_date"], s["role_id"], s["end_time"]) for s in shifts] == [
        ("2025-01-20", server, "17:00"),
        ("2025-01-20", cook, "17:00"),
        ("2025-01-24", cook, "00:00"),
    ]


def test_overlapping_schedules_share_generated_shifts(client, base, roles):
    _template(client, base, day_of_week=1, role_ids=[roles["Server"].id, roles["Cook"].id])
    first = _schedule(client, base)
    assert client.post(f"{base}/schedules/{first['id']}/shifts/generate").json()["created_count"] == 2

    second = _schedule(client, base, end="2025-02-09")
    url = f"{base}/schedules/{second['id']}/shifts"
    response = client.post(f"{url}/generate")
    assert response.status_code == 200, response.text
    assert response.json()["created_count"] == 4
    assert sorted({s["shift_date"] for s in client.get(url).json()}) == ["2025-01-27", "2025-02-03"]

    again = client.post(f"{url}/generate")
    assert again.status_code == 200
    assert again.json()["created_count"] == 0


def test_deleting_template_keeps_its_shifts(client, base, roles):
    template = _template(client, base, role_ids=[roles["Server"].id])
    schedule = _schedule(client, base)
    url = f"{base}/schedules/{schedule['id']}/shifts"
    client.post(f"{url}/generate")

    assert client.delete(f"{base}/shift-templates/{template['id']}").status_code == 204
    shifts = client.get(url).json()
    assert len(shifts) == 1
    assert shifts[0]["shift_template_id"] is None


def test_publish_once(client, base):
    schedule = _schedule(client, base)
    url = f"{base}/schedules/{schedule['id']}"
    assert client.post(f"{url}/publish").status_code == 204
    assert client.get(url).json()["published_at"] is not None
    assert client.post(f"{url}/publish").status_code == 400


def test_manual_shifts(client, base, roles, employees):
    template = _template(client, base, role_ids=[roles["Server"].id])
    schedule = _schedule(client, base)
    url = f"{base}/schedules/{schedule['id']}/shifts"
    body = {
        "role_id": roles["Server"].id,
        "shift_date": "2025-01-20",
        "start_time": "09:00",
        "end_time": "17:00",
        "shift_template_id": template["id"],
    }
    created = client.post(url, json=body)
    assert created.status_code == 201
    assert client.post(url, json=body).status_code == 409

    # Ad-hoc shifts carry no template and may repeat.
    adhoc = dict(body, shift_template_id=None)
    assert client.post(url, json=adhoc).status_code == 201
    assert client.post(url, json=adhoc).status_code == 201

    outside = dict(adhoc, shift_date="2025-02-01")
    assert client.post(url, json=outside).status_code == 400
    assert client.post(url, json=dict(adhoc, employee_id=999)).status_code == 400
    assert client.post(url, json=dict(body, shift_template_id=999)).status_code == 400
    tuesday = dict(body, shift_date="2025-01-21")
    assert client.post(url, json=tuesday).status_code == 400

    shift_id = created.json()["id"]
    alex = employees["Alex Rivera"].id
    assigned = client.patch(f"{url}/{shift_id}", json={"employee_id": alex, "notes": "Patio"})
    assert assigned.status_code == 200
    assert assigned.json()["employee_id"] == alex
    assert assigned.json()["notes"] == "Patio"

    unassigned = client.patch(f"{url}/{shift_id}", json={"employee_id": None})
    assert unassigned.json()["employee_id"] is None
    assert unassigned.json()["notes"] == "Patio"

    assert client.delete(f"{url}/{shift_id}").status_code == 204
    assert client.delete(f"{url}/{shift_id}").status_code == 404


def test_events(client, base):
    body = {"title": "Wine tasting", "event_date": "2025-01-23", "start_time": "18:00", "end_time": "21:00"}
    created = client.post(f"{base}/events", json=body)
    assert created.status_code == 201
    assert client.post(f"{base}/events", json=dict(body, start_time="22:00")).status_code == 400

    listed = client.get(f"{base}/events", params={"start": "2025-01-19", "end": "2025-01-25"}).json()
    assert [e["title"] for e in listed] == ["Wine tasting"]
    assert client.get(f"{base}/events", params={"start": "2025-02-01", "end": "2025-02-07"}).json() == []

    assert client.delete(f"{base}/events/{created.json()['id']}").status_code == 204


def test_calendar_week(client, base, roles):
    _template(client, base, name="Open", day_of_week=1, start_time="09:00", end_time="13:00", role_ids=[roles["Server"].id])
    _template(client, base, name="Prep", day_of_week=1, start_time="10:00", end_time="11:00")
    _template(client, base, name="Close", day_of_week=5, start_time="18:00", end_time="00:00")
    client.post(
        f"{base}/events",
        json={"title": "Inspection", "event_date": "2025-01-20", "start_time": "10:15", "end_time": "10:45"},
    )

    response = client.get(f"{base}/calendar/week", params={"start": "2025-01-22"})
    assert response.status_code == 200
    week = response.json()
    assert week["week_start"] == "2025-01-19"
    assert week["week_end"] == "2025-01-25"
    assert [d["day_label"] for d in week["days"]][:2] == ["Sunday", "Monday"]

    monday = week["days"][1]
    assert monday["date"] == "2025-01-20"
    assert [(t["title"], t["column_index"], t["column_count"]) for t in monday["templates"]] == [
        ("Open", 0, 2),
        ("Prep", 1, 2),
    ]
    assert {t["geometry"]["width"] for t in monday["templates"]} == {50}
    assert monday["templates"][0]["role_ids"] == [roles["Server"].id]
    assert monday["templates"][0]["geometry"]["top"] == 540
    assert [e["title"] for e in monday["events"]] == ["Inspection"]
    assert monday["events"][0]["geometry"]["width"] == 100
    assert monday["template_peak_overlap"] == 2
    assert monday["event_peak_overlap"] == 1

    friday = week["days"][5]
    assert friday["templates"][0]["end_time"] == "24:00"
    assert friday["templates"][0]["geometry"]["height"] == 360


def test_send_email(client, base, monkeypatch):
    outbox = []
    monkeypatch.setattr(mailer, "_send_email", lambda recipient, subject, body: outbox.append((recipient, subject, body)))
    schedule = _schedule(client, base)

    response = client.post(f"{base}/schedules/{schedule['id']}/send-email", json={"include_events": True})
    assert response.status_code == 200
    summary = response.json()
    assert summary["total_recipients"] == 2
    assert summary["successful"] == 1
    assert summary["failed"] == 1
    assert summary["failures"][0]["employee_name"] == "Jordan Patel"

    (recipient, subject, body), = outbox
    assert recipient == "alex@example.com"
    assert subject.startswith("Your schedule at Test Kitchen")
    assert "You have no shifts scheduled" in body
