from decimal import Decimal
from sqlalchemy import String, Integer, DateTime, Date, Numeric, Text, CheckConstraint
from sqlalchemy.orm import Mapped, mapped_column
from datetime import datetime, date, timezone
from onpoint.db.session import Base

class Booking(Base):
    __tablename__ = "bookings"
    __table_args__ = (
        CheckConstraint("number_of_people >= 1", name="ck_bookings_people_positive"),
    )

    id: Mapped[str] = mapped_column(String(36), primary_key=True)
    user_id: Mapped[str] = mapped_column(String(36), index=True)
    trip_id: Mapped[str] = mapped_column(String(36), index=True)

    start_date: Mapped[date] = mapped_column(Date)
    end_date: Mapped[date] = mapped_column(Date)
    number_of_people: Mapped[int] = mapped_column(Integer, default=1)

    total_price: Mapped[Decimal] = mapped_column(Numeric(10, 2))
    calculated_price: Mapped[Decimal] = mapped_column(Numeric(10, 2), nullable=True)
    discount_amount: Mapped[Decimal] = mapped_column(Numeric(10, 2), nullable=True)
    discount_percent: Mapped[Decimal] = mapped_column(Numeric(5, 2), nullable=True)
    discount_reason: Mapped[str] = mapped_column(String(255), nullable=True)

    status: Mapped[str] = mapped_column(String(30), default="pending")         # pending, confirmed
    payment_status: Mapped[str] = mapped_column(String(30), default="unpaid")  # unpaid, paid
    last_payment_id: Mapped[str] = mapped_column(String(36), nullable=True)

    notes: Mapped[str] = mapped_column(Text, nullable=True)
    special_requests: Mapped[str] = mapped_column(Text, nullable=True)

    booked_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc), index=True)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc))
