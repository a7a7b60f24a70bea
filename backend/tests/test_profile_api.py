from datetime import date

from worktrack.core.enums import PeriodType
from worktrack.models.attendance_summary import AttendanceSummary


def test_get_and_update_profile(client, employee, auth_headers):
    headers = auth_headers(employee)

    response = client.put("/profile", headers=headers, json={
        "full_name": "  Dana Example ",
        "phone": "+1 (555) 010-2000",
        "timezone": "Asia/Kolkata",
    })

    assert response.status_code == 200
    body = response.json()
    assert body["full_name"] == "Dana Example"
    assert body["timezone"] == "Asia/Kolkata"
    assert client.get("/profile", headers=headers).json()["phone"] == "+1 (555) 010-2000"


def test_unknown_timezone_falls_back_to_utc(client, employee, auth_headers):
    response = client.put("/profile", headers=auth_headers(employee), json={"timezone": "Mars/Olympus"})

    assert response.json()["timezone"] == "UTC"


def test_zone_directory_name_falls_back_to_utc(client, employee, auth_headers):
    response = client.put("/profile", headers=auth_headers(employee), json={"timezone": "America"})

    assert response.status_code == 200
    assert response.json()["timezone"] == "UTC"


def test_invalid_phone_is_rejected(client, employee, auth_headers):
    response = client.put("/profile", headers=auth_headers(employee), json={"phone": "call me"})

    assert response.status_code == 400


def test_navigation_by_role(client, employee, admin, auth_headers):
    mine = client.get("/profile/navigation", headers=auth_headers(employee)).json()
    assert mine["role"] == "employee"
    assert mine["capabilities"] == ["own_records"]
    assert all(not item["path"].startswith("/admin") for item in mine["navigation"])

    theirs = client.get("/profile/navigation", headers=auth_headers(admin)).json()
    assert "manage_users" in theirs["capabilities"]
    assert {"label": "Admin", "path": "/admin"} in theirs["navigation"]


def test_dashboard_for_fresh_user(client, employee, auth_headers):
    body = client.get("/dashboard", headers=auth_headers(employee)).json()

    assert body["profile"]["id"] == employee.id
    assert body["today"]["state"] == "not_started"
    assert body["monthly_summary"] is None
    assert body["recent_attendance"] == []
    assert body["pending_leaves"] == []


def test_analytics_overview(client, db, employee, auth_headers):
    for month, pct in ((1, 100.0), (2, 80.0)):
        db.add(AttendanceSummary(
            user_id=employee.id,
            period_type=PeriodType.MONTHLY,
            period_start=date(2024, month, 1),
            period_end=date(2024, month, 28),
            total_days=20,
            present_days=19,
            total_work_hours=152.0,
            attendance_percentage=pct,
            punctuality_percentage=pct,
        ))
    db.commit()

    body = client.get("/analytics/overview", headers=auth_headers(employee)).json()

    assert body["current"]["period_start"] == "2024-02-01"
    assert body["yearly"]["months"] == 2
    assert body["yearly"]["attendance_percentage"] == 90.0
    assert body["yearly"]["total_work_hours"] == 304.0
    assert body["distribution"][0] == {"name": "Present", "value": 19}

    summaries = client.get("/analytics/summaries", headers=auth_headers(employee)).json()
    assert len(summaries) == 2


def test_analytics_without_summaries(client, employee, auth_headers):
    body = client.get("/analytics/overview", headers=auth_headers(employee)).json()

    assert body == {"current": None, "yearly": None, "distribution": []}
