"""Favorite trips stored as an ordered id list on the user row.

Every write is conditional on the favorites_version read alongside the list,
so two toggles racing on the same user cannot silently overwrite each other:
the later writer gets FavoritesConflictError and must re-read.
"""
import logging
from datetime import datetime, timezone

from sqlalchemy import select, update
from sqlalchemy.orm import Session

from onpoint.models.user import User
from onpoint.models.trip import Trip
from onpoint.services.errors import NotFoundError, FavoritesConflictError

logger = logging.getLogger(__name__)


def read_favorites(db: Session, user_id: str) -> tuple[list[str], int]:
    """Current favorites list and the version it was read at."""
    row = db.execute(
        select(User.favorite_trips, User.favorites_version).where(User.id == user_id)
    ).first()
    if row is None:
        raise NotFoundError("User not found")
    return list(row.favorite_trips or []), int(row.favorites_version or 0)


def write_favorites(db: Session, user_id: str, favorites: list[str], expected_version: int) -> int:
    """Store `favorites` if nobody wrote since `expected_version`; returns the new version."""
    deduped = list(dict.fromkeys(favorites))
    result = db.execute(
        update(User)
        .where(User.id == user_id, User.favorites_version == expected_version)
        .values(
            favorite_trips=deduped,
            favorites_version=expected_version + 1,
            updated_at=datetime.now(timezone.utc),
        )
        .execution_options(synchronize_session=False)
    )
    if result.rowcount != 1:
        db.rollback()
        logger.info("Favorites write for user %s lost the race at version %s", user_id, expected_version)
        raise FavoritesConflictError("Favorites were changed elsewhere, please try again.")
    db.commit()
    return expected_version + 1


def toggle_favorite(db: Session, user: User, trip_id: str) -> bool:
    """Flip membership of trip_id; returns whether it is a favorite afterwards."""
    if not db.get(Trip, trip_id):
        raise NotFoundError("Trip not found")

    favorites, version = read_favorites(db, user.id)
    if trip_id in favorites:
        favorites = [fid for fid in favorites if fid != trip_id]
        is_favorite = False
    else:
        favorites = favorites + [trip_id]
        is_favorite = True

    write_favorites(db, user.id, favorites, version)
    return is_favorite


def is_favorite(db: Session, user: User, trip_id: str) -> bool:
    favorites, _ = read_favorites(db, user.id)
    return trip_id in favorites


def list_favorite_trips(db: Session, user: User) -> list[Trip]:
    """Favorite trips in favorites-list order; ids whose trip no longer exists are skipped."""
    favorites, _ = read_favorites(db, user.id)
    if not favorites:
        return []
    by_id = {t.id: t for t in db.query(Trip).filter(Trip.id.in_(favorites)).all()}
    return [by_id[fid] for fid in favorites if fid in by_id]
