"""
Test reminder scheduling endpoints and the upcoming window.
"""

from datetime import datetime, timedelta, timezone

from fastapi.testclient import TestClient

from healthvault.schemas.reminder import ReminderCreate
from healthvault.services.reminder_service import ReminderService


def _iso(delta: timedelta) -> str:
    return (datetime.utcnow() + delta).replace(microsecond=0).isoformat()


def _create(client: TestClient, headers, **fields):
    body = {
        "type": "MEDICINE",
        "title": "Metformin 500mg",
        "scheduledAt": _iso(timedelta(hours=2)),
        **fields,
    }
    return client.post("/api/v1/reminders", json=body, headers=headers)


def test_create_and_get_reminder(client: TestClient, auth_headers):
    response = _create(
        client, auth_headers, recurring=True, frequency="daily", description="With food"
    )

    assert response.status_code == 201
    reminder = response.json()
    assert reminder["type"] == "MEDICINE"
    assert reminder["recurring"] is True
    assert reminder["frequency"] == "daily"
    assert reminder["isActive"] is True
    assert reminder["completedAt"] is None

    fetched = client.get(f"/api/v1/reminders/{reminder['id']}", headers=auth_headers)
    assert fetched.status_code == 200
    assert fetched.json()["description"] == "With food"


def test_create_rejects_bad_frequency(client: TestClient, auth_headers):
    response = _create(client, auth_headers, frequency="hourly")
    assert response.status_code == 422


def test_list_filters(client: TestClient, auth_headers):
    _create(client, auth_headers, title="Pill")
    appointment = _create(
        client, auth_headers, type="APPOINTMENT", title="Dentist",
        scheduledAt=_iso(timedelta(days=3)),
    ).json()
    client.put(
        f"/api/v1/reminders/{appointment['id']}",
        json={"isActive": False},
        headers=auth_headers,
    )

    everything = client.get("/api/v1/reminders", headers=auth_headers).json()
    assert [r["title"] for r in everything] == ["Pill", "Dentist"]

    appointments = client.get(
        "/api/v1/reminders", params={"type": "APPOINTMENT"}, headers=auth_headers
    ).json()
    assert [r["title"] for r in appointments] == ["Dentist"]

    active = client.get(
        "/api/v1/reminders", params={"active": "true"}, headers=auth_headers
    ).json()
    assert [r["title"] for r in active] == ["Pill"]


def test_upcoming_window(client: TestClient, auth_headers):
    """Test only active reminders within the next 24 hours are upcoming."""
    _create(client, auth_headers, title="Soon", scheduledAt=_iso(timedelta(hours=1)))
    _create(client, auth_headers, title="Later", scheduledAt=_iso(timedelta(hours=30)))
    _create(client, auth_headers, title="Past", scheduledAt=_iso(timedelta(hours=-1)))
    paused = _create(
        client, auth_headers, title="Paused", scheduledAt=_iso(timedelta(hours=3))
    ).json()
    client.put(
        f"/api/v1/reminders/{paused['id']}", json={"isActive": False}, headers=auth_headers
    )

    upcoming = client.get("/api/v1/reminders/upcoming", headers=auth_headers).json()

    assert [r["title"] for r in upcoming] == ["Soon"]


def test_update_is_partial(client: TestClient, auth_headers):
    reminder = _create(client, auth_headers, description="Morning").json()

    response = client.put(
        f"/api/v1/reminders/{reminder['id']}",
        json={"title": "Metformin 850mg"},
        headers=auth_headers,
    )

    assert response.status_code == 200
    updated = response.json()
    assert updated["title"] == "Metformin 850mg"
    assert updated["description"] == "Morning"
    assert updated["scheduledAt"] == reminder["scheduledAt"]


def test_complete_reminder(client: TestClient, auth_headers):
    reminder = _create(client, auth_headers).json()

    response = client.post(
        f"/api/v1/reminders/{reminder['id']}/complete", headers=auth_headers
    )

    assert response.status_code == 200
    assert response.json()["completedAt"] is not None


def test_delete_reminder(client: TestClient, auth_headers):
    reminder = _create(client, auth_headers).json()

    response = client.delete(f"/api/v1/reminders/{reminder['id']}", headers=auth_headers)

    assert response.status_code == 200
    assert client.get(
        f"/api/v1/reminders/{reminder['id']}", headers=auth_headers
    ).status_code == 404


def test_reminders_are_private(client: TestClient, auth_headers, verified_user):
    reminder = _create(client, auth_headers).json()
    other = {"Authorization": f"Bearer {verified_user.token}"}

    assert client.get(f"/api/v1/reminders/{reminder['id']}", headers=other).status_code == 404
    assert client.post(
        f"/api/v1/reminders/{reminder['id']}/complete", headers=other
    ).status_code == 404
    assert client.get("/api/v1/reminders", headers=other).json() == []


def test_timezone_aware_times_stored_as_utc(db_session, verified_user):
    """Test an offset timestamp is normalized to naive UTC."""
    service = ReminderService(db_session)
    local = datetime(2030, 1, 1, 9, 0, tzinfo=timezone(timedelta(hours=5, minutes=30)))

    reminder = service.create_reminder(
        verified_user.user.id, ReminderCreate(title="Checkup", scheduled_at=local)
    )

    assert reminder.scheduled_at == datetime(2030, 1, 1, 3, 30)
    assert reminder.type == "OTHER"


def test_upcoming_with_fixed_clock(db_session, verified_user):
    service = ReminderService(db_session)
    now = datetime(2030, 6, 1, 12, 0)
    user_id = verified_user.user.id

    for title, offset in (("in-window", 23), ("edge", 24), ("outside", 25)):
        service.create_reminder(
            user_id,
            ReminderCreate(title=title, scheduled_at=now + timedelta(hours=offset)),
        )

    titles = [r.title for r in service.upcoming(user_id, now=now)]
    assert titles == ["in-window", "edge"]
