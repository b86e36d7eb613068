from datetime import date, datetime, timezone
from typing import Any

from sqlalchemy import JSON, Date, DateTime, func
from sqlalchemy.orm import DeclarativeBase, Mapped, MappedAsDataclass, mapped_column


class Base(MappedAsDataclass, DeclarativeBase):
    pass


class DailyRecordModel(Base):
    __tablename__ = "daily_records"

    record_date: Mapped[date] = mapped_column("date", Date, primary_key=True)

    checks: Mapped[list[dict[str, Any]]] = mapped_column(JSON, default_factory=list)
    summary: Mapped[dict[str, Any]] = mapped_column(JSON, default_factory=dict)

    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default_factory=lambda: datetime.now(timezone.utc),
        server_default=func.now(),
        onupdate=func.now(),
    )
