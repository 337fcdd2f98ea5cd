"""RankItem ORM model."""

import uuid
from datetime import datetime, timezone

from sqlalchemy import JSON, DateTime, Integer, String, Text, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from app.database import Base


def new_id() -> str:
    return uuid.uuid4().hex


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class RankItem(Base):
    __tablename__ = "rank_items"
    __table_args__ = (
        UniqueConstraint("site_name", name="uq_rank_items_site_name"),
        UniqueConstraint("rank", name="uq_rank_items_rank"),
    )

    id: Mapped[str] = mapped_column(String(32), primary_key=True, default=new_id)
    site_name: Mapped[str] = mapped_column(String, nullable=False)
    logo: Mapped[str] = mapped_column(Text, nullable=False)
    advantages: Mapped[list[str]] = mapped_column(JSON, nullable=False)
    welcome_bonus: Mapped[str] = mapped_column(String, nullable=False)
    payments: Mapped[list[str]] = mapped_column(JSON, nullable=False)
    promo_code: Mapped[str] = mapped_column(String, nullable=False)
    rank: Mapped[int] = mapped_column(Integer, nullable=False)
    # Not every site offers these
    create_account_url: Mapped[str | None] = mapped_column(Text, nullable=True)
    download_app_url: Mapped[str | None] = mapped_column(Text, nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=utcnow,
        onupdate=utcnow,
    )
