from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session
from onpoint.db.session import get_db
from onpoint.api.deps import get_current_user
from onpoint.api.v1.routes.catalog import trips_out
from onpoint.models.user import User
from onpoint.schemas.catalog import TripOut
from onpoint.schemas.favorites import FavoriteStatus
from onpoint.services import favorites_service
from onpoint.services.errors import ServiceError

router = APIRouter(tags=["favorites"])


@router.get("/favorites", response_model=list[TripOut])
def list_favorites(db: Session = Depends(get_db), me: User = Depends(get_current_user)):
    return trips_out(db, favorites_service.list_favorite_trips(db, me))


@router.get("/favorites/{trip_id}", response_model=FavoriteStatus)
def favorite_status(trip_id: str, db: Session = Depends(get_db), me: User = Depends(get_current_user)):
    return FavoriteStatus(tripId=trip_id, isFavorite=favorites_service.is_favorite(db, me, trip_id))


@router.post("/favorites/{trip_id}/toggle", response_model=FavoriteStatus)
def toggle_favorite(trip_id: str, db: Session = Depends(get_db), me: User = Depends(get_current_user)):
    """Flip the trip in the caller's favorites. 409 if a concurrent toggle won; re-read and retry."""
    try:
        is_fav = favorites_service.toggle_favorite(db, me, trip_id)
    except ServiceError as e:
        raise HTTPException(status_code=e.status_code, detail=str(e))
    return FavoriteStatus(tripId=trip_id, isFavorite=is_fav)
