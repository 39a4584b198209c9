from typing import Optional

from fastapi import Depends, HTTPException
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from jose import JWTError
from sqlalchemy.orm import Session
from onpoint.db.session import get_db
from onpoint.core.security import decode_token
from onpoint.models.user import User

bearer = HTTPBearer(auto_error=False)


def _user_from_credentials(creds: HTTPAuthorizationCredentials, db: Session) -> User:
    try:
        payload = decode_token(creds.credentials)
    except (JWTError, ValueError):
        raise HTTPException(status_code=401, detail="Invalid token")
    user_id = payload.get("sub")
    user = db.get(User, user_id) if user_id else None
    if not user:
        raise HTTPException(status_code=401, detail="User not found")
    return user


def get_current_user(
    creds: HTTPAuthorizationCredentials | None = Depends(bearer),
    db: Session = Depends(get_db),
) -> User:
    if not creds:
        raise HTTPException(status_code=401, detail="Not authenticated")
    return _user_from_credentials(creds, db)


def get_optional_user(
    creds: HTTPAuthorizationCredentials | None = Depends(bearer),
    db: Session = Depends(get_db),
) -> Optional[User]:
    """Signed-in user if a valid token was sent, else None (public screens)."""
    if not creds:
        return None
    try:
        return _user_from_credentials(creds, db)
    except HTTPException:
        return None
