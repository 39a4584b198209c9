from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session
from onpoint.db.session import get_db
from onpoint.api.deps import get_current_user
from onpoint.core.config import settings
from onpoint.models.user import User
from onpoint.schemas.profile import ProfileOut, ProfileUpdate
from onpoint.services.account_service import update_profile
from onpoint.services.booking_service import count_recent_bookings
from onpoint.services.errors import ServiceError

router = APIRouter(tags=["profile"])


def _profile_out(db: Session, u: User) -> ProfileOut:
    return ProfileOut(
        id=u.id,
        email=u.email,
        firstName=u.first_name or "",
        lastName=u.last_name or "",
        avatarUrl=u.logo_url,
        recentBookingsCount=count_recent_bookings(db, u, settings.RECENT_BOOKINGS_DAYS),
    )


@router.get("/profile", response_model=ProfileOut)
def get_profile(db: Session = Depends(get_db), me: User = Depends(get_current_user)):
    return _profile_out(db, me)


@router.put("/profile", response_model=ProfileOut)
def put_profile(body: ProfileUpdate, db: Session = Depends(get_db), me: User = Depends(get_current_user)):
    try:
        u = update_profile(db, me, body.firstName, body.lastName, body.avatarUrl)
    except ServiceError as e:
        raise HTTPException(status_code=e.status_code, detail=str(e))
    return _profile_out(db, u)
