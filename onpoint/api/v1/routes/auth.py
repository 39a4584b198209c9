from fastapi import APIRouter, Depends, HTTPException
from jose import JWTError
from sqlalchemy.orm import Session
from onpoint.db.session import get_db
from onpoint.schemas.auth import LoginRequest, SignUpRequest, RefreshRequest, TokenPair, SessionUser
from onpoint.models.user import User
from onpoint.core.security import REFRESH, create_access_token, create_refresh_token, decode_token
from onpoint.api.deps import get_current_user
from onpoint.services.account_service import sign_up, authenticate
from onpoint.services.errors import ServiceError

router = APIRouter(tags=["auth"])


def _tokens(user: User) -> TokenPair:
    return TokenPair(
        access_token=create_access_token(user.id),
        refresh_token=create_refresh_token(user.id),
    )


@router.post("/auth/signup", response_model=TokenPair, status_code=201)
def signup(body: SignUpRequest, db: Session = Depends(get_db)):
    try:
        user = sign_up(db, body.email, body.password, body.firstName, body.lastName)
    except ServiceError as e:
        raise HTTPException(status_code=e.status_code, detail=str(e))
    return _tokens(user)


@router.post("/auth/login", response_model=TokenPair)
def login(body: LoginRequest, db: Session = Depends(get_db)):
    user = authenticate(db, body.email, body.password)
    if not user:
        raise HTTPException(status_code=401, detail="Invalid login credentials")
    return _tokens(user)


@router.post("/auth/refresh", response_model=TokenPair)
def refresh(body: RefreshRequest, db: Session = Depends(get_db)):
    try:
        payload = decode_token(body.refresh_token, expected_type=REFRESH)
    except (JWTError, ValueError):
        raise HTTPException(status_code=401, detail="Invalid refresh token")
    user_id = payload.get("sub")
    user = db.get(User, user_id) if user_id else None
    if not user:
        raise HTTPException(status_code=401, detail="User not found")
    return _tokens(user)


@router.get("/auth/me", response_model=SessionUser)
def me(me: User = Depends(get_current_user)):
    """Current session principal."""
    return SessionUser(
        id=me.id,
        email=me.email,
        firstName=me.first_name or "",
        lastName=me.last_name or "",
        role=me.role or "user",
    )
