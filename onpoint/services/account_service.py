import logging
import uuid
from datetime import datetime, timezone
from typing import Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from onpoint.core.config import settings
from onpoint.core.security import hash_password, verify_password
from onpoint.models.user import User
from onpoint.services.errors import ValidationError, NotFoundError

logger = logging.getLogger(__name__)


def get_user_by_email(db: Session, email: str) -> Optional[User]:
    return db.query(User).filter(User.email == (email or "").strip().lower()).first()


def sign_up(db: Session, email: str, password: str, first_name: str, last_name: str) -> User:
    email = (email or "").strip().lower()
    if not email or "@" not in email:
        raise ValidationError("A valid email is required")
    if len(password or "") < settings.MIN_PASSWORD_LENGTH:
        raise ValidationError(f"Password should be at least {settings.MIN_PASSWORD_LENGTH} characters")
    if get_user_by_email(db, email):
        raise ValidationError("User already registered")

    u = User(
        id=str(uuid.uuid4()),
        email=email,
        password_hash=hash_password(password),
        first_name=(first_name or "").strip(),
        last_name=(last_name or "").strip(),
        role="user",
        favorite_trips=[],
        favorites_version=0,
    )
    db.add(u)
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise ValidationError("User already registered")
    logger.info("User %s signed up", u.id)
    return u


def authenticate(db: Session, email: str, password: str) -> Optional[User]:
    u = get_user_by_email(db, email)
    if not u or not verify_password(password, u.password_hash):
        return None
    return u


def update_profile(db: Session, user: User, first_name: str, last_name: str, logo_url: Optional[str]) -> User:
    first_name = (first_name or "").strip()
    last_name = (last_name or "").strip()
    if not first_name or not last_name:
        raise ValidationError("First name and last name are required")

    u = db.get(User, user.id)
    if not u:
        raise NotFoundError("User not found")
    u.first_name = first_name
    u.last_name = last_name
    u.logo_url = (logo_url or "").strip() or None
    u.updated_at = datetime.now(timezone.utc)
    db.commit()
    db.refresh(u)
    return u
