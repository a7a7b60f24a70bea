"""Read side of the attendance summaries.

Summary rows are produced elsewhere; this module only picks them out and
derives the figures the analytics views show.
"""
from datetime import date, timedelta

from sqlalchemy.orm import Session

from worktrack.core.enums import PeriodType
from worktrack.models.attendance_summary import AttendanceSummary

DISTRIBUTION_FIELDS = (
    ("Present", "present_days"),
    ("Absent", "absent_days"),
    ("Late", "late_days"),
    ("Early Leave", "early_leave_days"),
    ("Leave", "leave_days"),
    ("Holiday", "holiday_days"),
)


def list_summaries(
    db: Session,
    user_id: int,
    period_type: PeriodType = PeriodType.MONTHLY,
    limit: int = 12,
) -> list[AttendanceSummary]:
    return db.query(AttendanceSummary).filter(
        AttendanceSummary.user_id == user_id,
        AttendanceSummary.period_type == period_type,
    ).order_by(AttendanceSummary.period_start.desc()).limit(limit).all()


def current_month_summary(db: Session, user_id: int, today: date) -> AttendanceSummary | None:
    month_start = today.replace(day=1)
    next_month = (month_start.replace(day=28) + timedelta(days=4)).replace(day=1)
    return db.query(AttendanceSummary).filter(
        AttendanceSummary.user_id == user_id,
        AttendanceSummary.period_type == PeriodType.MONTHLY,
        AttendanceSummary.period_start >= month_start,
        AttendanceSummary.period_start < next_month,
    ).first()


def status_distribution(summary: AttendanceSummary | None) -> list[dict]:
    if summary is None:
        return []
    return [
        {"name": name, "value": int(getattr(summary, field) or 0)}
        for name, field in DISTRIBUTION_FIELDS
    ]


def _mean(values: list[float]) -> float:
    return round(sum(values) / len(values), 2)


def yearly_rollup(summaries: list[AttendanceSummary]) -> dict | None:
    """Fold monthly rows into yearly figures.

    Counts and hours are summed. Percentages are a plain arithmetic mean of
    the monthly values, each month counting the same regardless of its length.
    """
    if not summaries:
        return None

    return {
        "months": len(summaries),
        "total_work_hours": round(sum(float(s.total_work_hours or 0) for s in summaries), 2),
        "total_overtime_hours": round(sum(float(s.total_overtime_hours or 0) for s in summaries), 2),
        "present_days": sum(int(s.present_days or 0) for s in summaries),
        "absent_days": sum(int(s.absent_days or 0) for s in summaries),
        "late_days": sum(int(s.late_days or 0) for s in summaries),
        "leave_days": sum(int(s.leave_days or 0) for s in summaries),
        "attendance_percentage": _mean([float(s.attendance_percentage or 0) for s in summaries]),
        "punctuality_percentage": _mean([float(s.punctuality_percentage or 0) for s in summaries]),
    }
