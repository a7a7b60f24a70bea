from __future__ import annotations

from enum import Enum


class Role(str, Enum):
    """Account roles, lowest privilege first."""

    EMPLOYEE = "employee"
    ASSISTANT = "assistant"
    MANAGER = "manager"
    ADMIN = "admin"


class AttendanceStatus(str, Enum):
    PRESENT = "present"
    ABSENT = "absent"
    LATE = "late"
    EARLY_LEAVE = "early_leave"
    HALF_DAY = "half_day"
    HOLIDAY = "holiday"
    SICK_LEAVE = "sick_leave"
    VACATION = "vacation"
    REMOTE = "remote"


class WorkMode(str, Enum):
    OFFICE = "office"
    REMOTE = "remote"
    HYBRID = "hybrid"
    FIELD = "field"


class DayState(str, Enum):
    """Where a (user, date) attendance record sits in the check-in lifecycle."""

    NOT_STARTED = "not_started"
    CHECKED_IN = "checked_in"
    ON_BREAK = "on_break"
    CHECKED_OUT = "checked_out"


class LeaveType(str, Enum):
    VACATION = "vacation"
    SICK = "sick"
    PERSONAL = "personal"
    MATERNITY = "maternity"
    PATERNITY = "paternity"
    BEREAVEMENT = "bereavement"
    UNPAID = "unpaid"


class LeaveStatus(str, Enum):
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"
    CANCELLED = "cancelled"


class PeriodType(str, Enum):
    WEEKLY = "weekly"
    MONTHLY = "monthly"
    YEARLY = "yearly"


class NotificationType(str, Enum):
    CHECK_IN_REMINDER = "check_in_reminder"
    CHECK_OUT_REMINDER = "check_out_reminder"
    ABSENCE_ALERT = "absence_alert"
    LATE_ARRIVAL = "late_arrival"
    EARLY_DEPARTURE = "early_departure"
    OVERTIME_ALERT = "overtime_alert"
    LEAVE_APPROVAL = "leave_approval"
    HOLIDAY_REMINDER = "holiday_reminder"
    SYSTEM_UPDATE = "system_update"
    TEAM_ANNOUNCEMENT = "team_announcement"
