from datetime import datetime, timezone

from worktrack.core.enums import NotificationType
from worktrack.services import notification_service


def push(db, user_id, title):
    return notification_service.push_notification(
        db,
        user_id=user_id,
        notification_type=NotificationType.TEAM_ANNOUNCEMENT,
        title=title,
        message=f"{title} body",
    )


def test_listing_and_read_state(client, db, employee, make_profile, auth_headers):
    other = make_profile()
    first = push(db, employee.id, "First")
    push(db, employee.id, "Second")
    foreign = push(db, other.id, "Not yours")
    headers = auth_headers(employee)

    listed = client.get("/notifications", headers=headers).json()
    assert [n["title"] for n in listed] == ["Second", "First"]
    assert client.get("/notifications/unread-count", headers=headers).json() == {"unread_count": 2}

    assert client.patch(f"/notifications/{first.id}/read", headers=headers).status_code == 200
    assert client.get("/notifications/unread-count", headers=headers).json() == {"unread_count": 1}
    unread = client.get("/notifications", headers=headers, params={"unread_only": "true"}).json()
    assert [n["title"] for n in unread] == ["Second"]

    assert client.patch(f"/notifications/{foreign.id}/read", headers=headers).status_code == 404

    response = client.patch("/notifications/read-all", headers=headers)
    assert response.json()["updated"] == 1
    assert client.get("/notifications/unread-count", headers=headers).json() == {"unread_count": 0}


def test_scheduled_notification_is_not_sent_yet(db, employee):
    scheduled = notification_service.push_notification(
        db,
        user_id=employee.id,
        notification_type=NotificationType.CHECK_OUT_REMINDER,
        title="Check out",
        message="Don't forget to check out.",
        scheduled_for=datetime(2030, 1, 1, 17, 0, tzinfo=timezone.utc),
    )

    assert scheduled.sent_at is None
    assert notification_service.unread_count(db, employee.id) == 1
