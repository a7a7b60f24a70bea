from datetime import date, datetime, timezone

import pytest

from worktrack.config import settings
from worktrack.core.enums import Role
from worktrack.models.attendance import AttendanceRecord
from worktrack.models.attendance_edit_log import AttendanceEditLog
from worktrack.models.notification import AttendanceNotification
from worktrack.models.profile import Profile
from worktrack.routes import admin as admin_routes

DAY = "2024-03-04"


def upsert_body(user_id, **patch):
    return {"user_id": user_id, "date": DAY, "patch": patch}


def records(db, user_id):
    db.expire_all()
    return db.query(AttendanceRecord).filter(AttendanceRecord.user_id == user_id).all()


# ---------------- ATTENDANCE OVERRIDE ----------------

def test_put_attendance_without_token(client, employee, db):
    response = client.put("/api/admin/attendance", json=upsert_body(
        employee.id, check_in="2024-03-04T09:00:00Z"
    ))

    assert response.status_code == 401
    assert records(db, employee.id) == []


@pytest.mark.parametrize("role", [Role.EMPLOYEE, Role.ASSISTANT, Role.MANAGER])
def test_put_attendance_needs_admin(client, db, make_profile, auth_headers, role):
    caller = make_profile(role)
    target = make_profile()

    response = client.put(
        "/api/admin/attendance",
        headers=auth_headers(caller),
        json=upsert_body(target.id, check_in="2024-03-04T09:00:00Z"),
    )

    assert response.status_code == 403
    assert records(db, target.id) == []


@pytest.fixture
def seeded_day(db, employee):
    record = AttendanceRecord(
        user_id=employee.id,
        date=date(2024, 3, 4),
        check_in=datetime(2024, 3, 4, 9, 0, tzinfo=timezone.utc),
        total_break_minutes=0,
    )
    db.add(record)
    db.commit()
    return record


def test_delete_attendance_without_token(client, db, employee, seeded_day):
    response = client.request("DELETE", "/api/admin/attendance", json={"user_id": employee.id, "date": DAY})

    assert response.status_code == 401
    assert len(records(db, employee.id)) == 1


@pytest.mark.parametrize("role", [Role.EMPLOYEE, Role.ASSISTANT, Role.MANAGER])
def test_delete_attendance_needs_admin(client, db, make_profile, employee, seeded_day, auth_headers, role):
    caller = make_profile(role)

    response = client.request(
        "DELETE",
        "/api/admin/attendance",
        headers=auth_headers(caller),
        json={"user_id": employee.id, "date": DAY},
    )

    assert response.status_code == 403
    assert len(records(db, employee.id)) == 1
    assert db.query(AttendanceEditLog).count() == 0


def test_forbidden_comes_before_body_validation(client, employee, auth_headers):
    response = client.put("/api/admin/attendance", headers=auth_headers(employee), json={})

    assert response.status_code == 403


def test_put_then_get_then_delete(client, db, admin, employee, auth_headers):
    headers = auth_headers(admin)

    response = client.put("/api/admin/attendance", headers=headers, json=upsert_body(
        employee.id,
        check_in="2024-03-04T09:00:00Z",
        check_out="2024-03-04T17:30:00Z",
        total_break_minutes=30,
        status="late",
    ))
    assert response.status_code == 200
    data = response.json()["data"]
    assert data["work_hours"] == "8h 0m"
    assert data["status"] == "late"

    response = client.get(
        "/api/admin/attendance",
        headers=headers,
        params={"user_id": str(employee.id), "date": DAY},
    )
    assert response.status_code == 200
    assert response.json()["data"]["id"] == data["id"]

    response = client.request(
        "DELETE",
        "/api/admin/attendance",
        headers=headers,
        json={"user_id": employee.id, "date": DAY},
    )
    assert response.status_code == 200
    assert response.json() == {"ok": True}
    assert records(db, employee.id) == []

    actions = [log.action for log in db.query(AttendanceEditLog).order_by(AttendanceEditLog.id)]
    assert actions == ["create", "delete"]


def test_get_missing_day_returns_null(client, admin, employee, auth_headers):
    response = client.get(
        "/api/admin/attendance",
        headers=auth_headers(admin),
        params={"user_id": employee.id, "date": DAY},
    )

    assert response.status_code == 200
    assert response.json() == {"data": None}


@pytest.mark.parametrize("params", [
    {},
    {"user_id": "1"},
    {"date": DAY},
    {"user_id": "abc", "date": DAY},
    {"user_id": "1", "date": "04/03/2024"},
])
def test_get_attendance_param_validation(client, admin, auth_headers, params):
    response = client.get("/api/admin/attendance", headers=auth_headers(admin), params=params)

    assert response.status_code == 400
    assert response.json()["code"] == "invalid_input"


def test_put_invariant_violation_is_400(client, db, admin, employee, auth_headers):
    response = client.put("/api/admin/attendance", headers=auth_headers(admin), json=upsert_body(
        employee.id,
        check_in="2024-03-04T17:00:00Z",
        check_out="2024-03-04T09:00:00Z",
    ))

    assert response.status_code == 400
    assert records(db, employee.id) == []


def test_put_unknown_patch_field_is_400(client, db, admin, employee, auth_headers):
    response = client.put("/api/admin/attendance", headers=auth_headers(admin), json={
        "user_id": employee.id,
        "date": DAY,
        "patch": {"user_id": 12},
    })

    assert response.status_code == 400
    assert "patch.user_id is not an editable field" in response.json()["errors"]
    assert records(db, employee.id) == []


def test_put_unknown_user_is_400(client, db, admin, auth_headers):
    response = client.put("/api/admin/attendance", headers=auth_headers(admin), json=upsert_body(
        424242, check_in="2024-03-04T09:00:00Z",
    ))

    assert response.status_code == 400
    assert response.json()["code"] == "invalid_input"
    assert db.query(AttendanceEditLog).count() == 0


# ---------------- USER PROVISIONING ----------------

@pytest.fixture
def sent_invites(monkeypatch):
    sent = []
    monkeypatch.setattr(admin_routes, "send_invite_email_safely", lambda **kwargs: sent.append(kwargs))
    return sent


def test_create_user(client, db, admin, auth_headers, sent_invites):
    response = client.post("/api/admin/create-user", headers=auth_headers(admin), json={
        "email": "New.Hire@Example.com",
        "full_name": "New Hire",
        "role": "manager",
    })

    assert response.status_code == 200
    body = response.json()
    assert body["ok"] is True

    db.expire_all()
    created = db.query(Profile).filter(Profile.id == body["user_id"]).one()
    assert created.email == "new.hire@example.com"
    assert created.role == Role.MANAGER
    assert created.force_password_change is True
    assert created.employee_id.startswith("EMP")

    assert len(sent_invites) == 1
    assert sent_invites[0]["to_email"] == "new.hire@example.com"
    assert sent_invites[0]["temp_password"]

    welcome = db.query(AttendanceNotification).filter(AttendanceNotification.user_id == created.id).one()
    assert welcome.notification_type.value == "system_update"


def test_create_user_duplicate_email(client, admin, employee, auth_headers, sent_invites):
    response = client.post("/api/admin/create-user", headers=auth_headers(admin), json={
        "email": employee.email.upper(),
        "role": "employee",
    })

    assert response.status_code == 400
    assert response.json()["code"] == "email_taken"
    assert sent_invites == []


def test_create_user_rejects_unknown_role(client, admin, auth_headers, sent_invites):
    response = client.post("/api/admin/create-user", headers=auth_headers(admin), json={
        "email": "x@example.com",
        "role": "overlord",
    })

    assert response.status_code == 400


def test_create_user_without_mail_configured(client, db, admin, auth_headers, sent_invites, monkeypatch):
    monkeypatch.setattr(settings, "SMTP_HOST", None)

    response = client.post("/api/admin/create-user", headers=auth_headers(admin), json={
        "email": "someone@example.com",
        "role": "employee",
    })

    assert response.status_code == 500
    assert response.json()["code"] == "misconfigured"
    db.expire_all()
    assert db.query(Profile).filter(Profile.email == "someone@example.com").first() is None


def test_manager_cannot_create_users(client, manager, auth_headers, sent_invites):
    response = client.post("/api/admin/create-user", headers=auth_headers(manager), json={
        "email": "someone@example.com",
        "role": "admin",
    })

    assert response.status_code == 403


def test_list_and_update_users(client, db, admin, employee, auth_headers):
    headers = auth_headers(admin)

    users = client.get("/api/admin/users", headers=headers).json()
    assert {u["id"] for u in users} == {admin.id, employee.id}

    response = client.patch(f"/api/admin/users/{employee.id}", headers=headers, json={"role": "manager"})
    assert response.status_code == 200
    assert response.json()["role"] == "manager"


def test_admin_cannot_demote_self(client, admin, auth_headers):
    response = client.patch(f"/api/admin/users/{admin.id}", headers=auth_headers(admin), json={"role": "employee"})

    assert response.status_code == 403


def test_demotion_applies_to_existing_sessions(client, db, make_profile, employee, auth_headers):
    promoted = make_profile(Role.ADMIN)
    headers = auth_headers(promoted)
    body = upsert_body(employee.id, check_in="2024-03-04T09:00:00Z")
    assert client.put("/api/admin/attendance", headers=headers, json=body).status_code == 200

    promoted.role = Role.EMPLOYEE
    db.commit()

    assert client.put("/api/admin/attendance", headers=headers, json=body).status_code == 403


def test_admin_can_edit_own_profile_without_demotion(client, admin, auth_headers):
    response = client.patch(
        f"/api/admin/users/{admin.id}",
        headers=auth_headers(admin),
        json={"role": "admin", "department": "Operations"},
    )

    assert response.status_code == 200
    assert response.json()["role"] == "admin"
    assert response.json()["department"] == "Operations"
