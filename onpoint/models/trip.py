from decimal import Decimal
from sqlalchemy import String, DateTime, Boolean, Text, Numeric, Float, JSON
from sqlalchemy.orm import Mapped, mapped_column
from datetime import datetime, timezone
from onpoint.db.session import Base

class Trip(Base):
    __tablename__ = "trips"

    id: Mapped[str] = mapped_column(String(36), primary_key=True)
    destination_id: Mapped[str] = mapped_column(String(36), index=True)
    name: Mapped[str] = mapped_column(String(200), index=True)
    slug: Mapped[str] = mapped_column(String(200), unique=True, nullable=True)
    short_description: Mapped[str] = mapped_column(String(500), default="")
    description: Mapped[str] = mapped_column(Text, default="")

    price: Mapped[Decimal] = mapped_column(Numeric(10, 2), nullable=True)  # USD per person
    rating: Mapped[float] = mapped_column(Float, nullable=True)

    main_featured_image_url: Mapped[str] = mapped_column(String(1024), default="")
    extra_featured_images: Mapped[list] = mapped_column(JSON, nullable=True)
    is_featured: Mapped[bool] = mapped_column(Boolean, nullable=True, default=False)

    created_by: Mapped[str] = mapped_column(String(36), nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc))
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc))
