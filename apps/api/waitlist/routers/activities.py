"""Activities router - the account timeline."""

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from waitlist.core.deps import get_current_account, get_db
from waitlist.db.models import Account, Activity
from waitlist.schemas.activities import ActivityRead
from waitlist.services import activity_service
from waitlist.services.activity_service import DEFAULT_ACTIVITY_LIMIT
from waitlist.utils.presentation import describe_activity

router = APIRouter(prefix="/api/activities", tags=["activities"])


def _activity_read(activity: Activity) -> ActivityRead:
    title, description = describe_activity(activity.type, activity.data)
    return ActivityRead(
        id=activity.id,
        account_id=activity.account_id,
        form_id=activity.form_id,
        subscriber_id=activity.subscriber_id,
        type=activity.type,
        data=activity.data,
        created_at=activity.created_at,
        title=title,
        description=description,
    )


@router.get("", response_model=list[ActivityRead])
def list_activities(
    limit: int = Query(DEFAULT_ACTIVITY_LIMIT, ge=1, le=100),
    account: Account = Depends(get_current_account),
    db: Session = Depends(get_db),
):
    activities = activity_service.list_activities(db, account.id, limit=limit)
    return [_activity_read(a) for a in activities]
