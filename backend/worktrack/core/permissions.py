from __future__ import annotations

from enum import Enum

from worktrack.core.enums import Role


class Capability(str, Enum):
    OWN_RECORDS = "own_records"
    VIEW_ANY_ATTENDANCE = "view_any_attendance"
    DECIDE_LEAVE = "decide_leave"
    EDIT_ANY_ATTENDANCE = "edit_any_attendance"
    MANAGE_USERS = "manage_users"


_BASE = frozenset({Capability.OWN_RECORDS})
_MANAGER = _BASE | {Capability.VIEW_ANY_ATTENDANCE, Capability.DECIDE_LEAVE}
_ADMIN = _MANAGER | {Capability.EDIT_ANY_ATTENDANCE, Capability.MANAGE_USERS}

ROLE_CAPABILITIES: dict[Role, frozenset[Capability]] = {
    Role.EMPLOYEE: _BASE,
    Role.ASSISTANT: _BASE,
    Role.MANAGER: _MANAGER,
    Role.ADMIN: _ADMIN,
}

_RANK = {
    Role.EMPLOYEE: 0,
    Role.ASSISTANT: 0,
    Role.MANAGER: 1,
    Role.ADMIN: 2,
}

# (label, path, capability needed to see it)
NAVIGATION = [
    ("Dashboard", "/", Capability.OWN_RECORDS),
    ("History", "/history", Capability.OWN_RECORDS),
    ("Leave", "/leave", Capability.OWN_RECORDS),
    ("Analytics", "/analytics", Capability.OWN_RECORDS),
    ("Profile", "/profile", Capability.OWN_RECORDS),
    ("Team Attendance", "/history?scope=team", Capability.VIEW_ANY_ATTENDANCE),
    ("Leave Approvals", "/leave/approvals", Capability.DECIDE_LEAVE),
    ("Admin", "/admin", Capability.MANAGE_USERS),
    ("Attendance Editor", "/admin/attendance", Capability.EDIT_ANY_ATTENDANCE),
    ("Users", "/admin/users", Capability.MANAGE_USERS),
]


def parse_role(value) -> Role | None:
    try:
        return Role(value)
    except ValueError:
        return None


def role_rank(role) -> int:
    parsed = parse_role(role)
    if parsed is None:
        return -1
    return _RANK[parsed]


def has_capability(role, capability: Capability) -> bool:
    """Unknown roles get nothing, not the base set."""
    parsed = parse_role(role)
    if parsed is None:
        return False
    return capability in ROLE_CAPABILITIES[parsed]


def visible_navigation(role) -> list[dict]:
    """Navigation entries a client should render for ``role``.

    This only decides what to show. Every privileged route checks the
    caller's role again on the server.
    """
    return [
        {"label": label, "path": path}
        for label, path, capability in NAVIGATION
        if has_capability(role, capability)
    ]
