"""Dashboard router - headline stats."""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from waitlist.core.deps import get_current_account, get_db
from waitlist.db.models import Account
from waitlist.schemas.dashboard import DashboardStats
from waitlist.services import dashboard_service

router = APIRouter(prefix="/api/dashboard", tags=["dashboard"])


@router.get("/stats", response_model=DashboardStats)
def get_stats(
    account: Account = Depends(get_current_account),
    db: Session = Depends(get_db),
):
    """Totals for the caller. ``conversionRate`` is always null."""
    return DashboardStats(**dashboard_service.get_stats(db, account.id))
