from decimal import Decimal
from sqlalchemy import String, DateTime, Date, Numeric, JSON
from sqlalchemy.orm import Mapped, mapped_column
from datetime import datetime, date, timezone
from onpoint.db.session import Base

class Invoice(Base):
    __tablename__ = "invoices"

    id: Mapped[str] = mapped_column(String(36), primary_key=True)
    booking_id: Mapped[str] = mapped_column(String(36), index=True)
    user_id: Mapped[str] = mapped_column(String(36), index=True)
    invoice_number: Mapped[str] = mapped_column(String(40), unique=True)
    total_amount: Mapped[Decimal] = mapped_column(Numeric(10, 2))
    currency: Mapped[str] = mapped_column(String(10), default="USD")
    status: Mapped[str] = mapped_column(String(20), default="issued")  # issued, paid, void
    details: Mapped[dict] = mapped_column(JSON, default=dict)
    due_date: Mapped[date] = mapped_column(Date, nullable=True)
    issued_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc))
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc))
