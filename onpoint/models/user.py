from sqlalchemy import String, DateTime, Integer, JSON
from sqlalchemy.dialects import postgresql
from sqlalchemy.orm import Mapped, mapped_column
from datetime import datetime, timezone
from onpoint.db.session import Base

# text[] on Postgres, JSON list elsewhere (SQLite in tests)
TripIdList = JSON().with_variant(postgresql.ARRAY(String(36)), "postgresql")

class User(Base):
    __tablename__ = "users"

    id: Mapped[str] = mapped_column(String(36), primary_key=True)
    email: Mapped[str] = mapped_column(String(320), unique=True, index=True)
    password_hash: Mapped[str] = mapped_column(String(255))
    first_name: Mapped[str] = mapped_column(String(100), default="")
    last_name: Mapped[str] = mapped_column(String(100), default="")
    logo_url: Mapped[str] = mapped_column(String(1024), nullable=True)  # avatar
    role: Mapped[str] = mapped_column(String(30), default="user")

    # ordered trip ids; favorites_version guards the read-modify-write in favorites_service
    favorite_trips: Mapped[list] = mapped_column(TripIdList, nullable=True)
    favorites_version: Mapped[int] = mapped_column(Integer, default=0)

    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc))
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc))
