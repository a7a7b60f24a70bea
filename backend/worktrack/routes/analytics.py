from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from worktrack.core.dependencies import get_current_user
from worktrack.core.enums import PeriodType
from worktrack.database.session import get_db
from worktrack.models.profile import Profile
from worktrack.schemas.summary import AnalyticsOverview, SummaryOut
from worktrack.services import summary_service

router = APIRouter(prefix="/analytics", tags=["Analytics"])


@router.get("/summaries", response_model=list[SummaryOut])
def get_summaries(
    period_type: PeriodType = Query(default=PeriodType.MONTHLY),
    limit: int = Query(default=12, ge=1, le=60),
    db: Session = Depends(get_db),
    current_user: Profile = Depends(get_current_user)
):
    return summary_service.list_summaries(db, current_user.id, period_type, limit)


@router.get("/overview", response_model=AnalyticsOverview)
def get_overview(
    months: int = Query(default=12, ge=1, le=60),
    db: Session = Depends(get_db),
    current_user: Profile = Depends(get_current_user)
):
    summaries = summary_service.list_summaries(db, current_user.id, PeriodType.MONTHLY, months)
    latest = summaries[0] if summaries else None
    return {
        "current": latest,
        "yearly": summary_service.yearly_rollup(summaries),
        "distribution": summary_service.status_distribution(latest),
    }
