"""SQLAlchemy ORM models for bidder rounds, offers and reports.

Money is stored in integer cents. The repository converts to ``Decimal``
when building domain records.
"""

from __future__ import annotations

import datetime

from sqlalchemy import (
    Boolean,
    Column,
    DateTime,
    ForeignKey,
    Integer,
    String,
    Table,
    UniqueConstraint,
    func,
)
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column, relationship


class Base(DeclarativeBase):
    pass


bidder_round_participants = Table(
    "bidder_round_participants",
    Base.metadata,
    Column("bidder_round_id", ForeignKey("bidder_rounds.id", ondelete="CASCADE"), primary_key=True),
    Column("participant_id", ForeignKey("participants.id", ondelete="CASCADE"), primary_key=True),
)


class Participant(Base):
    __tablename__ = "participants"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    share_count: Mapped[int] = mapped_column(Integer, nullable=False, default=1)
    active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    created_at: Mapped[datetime.datetime] = mapped_column(DateTime, server_default=func.now())


class BidderRound(Base):
    __tablename__ = "bidder_rounds"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    target_amount_cents: Mapped[int] = mapped_column(Integer, nullable=False)
    count_offers: Mapped[int] = mapped_column(Integer, nullable=False)
    start_of_submission: Mapped[datetime.datetime | None] = mapped_column(DateTime, nullable=True)
    end_of_submission: Mapped[datetime.datetime | None] = mapped_column(DateTime, nullable=True)
    created_at: Mapped[datetime.datetime] = mapped_column(DateTime, server_default=func.now())

    participants: Mapped[list[Participant]] = relationship(secondary=bidder_round_participants)
    report: Mapped[BidderRoundReport | None] = relationship(back_populates="bidder_round")


class Offer(Base):
    __tablename__ = "offers"
    __table_args__ = (
        UniqueConstraint("bidder_round_id", "participant_id", "round_index", name="uq_offer_per_round"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    bidder_round_id: Mapped[int] = mapped_column(ForeignKey("bidder_rounds.id"), nullable=False, index=True)
    participant_id: Mapped[int] = mapped_column(ForeignKey("participants.id"), nullable=False)
    round_index: Mapped[int] = mapped_column(Integer, nullable=False)
    amount_cents: Mapped[int] = mapped_column(Integer, nullable=False)
    created_at: Mapped[datetime.datetime] = mapped_column(DateTime, server_default=func.now())

    participant: Mapped[Participant] = relationship()


class BidderRoundReport(Base):
    __tablename__ = "bidder_round_reports"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    # unique: one report per bidder round, enforced by the database
    bidder_round_id: Mapped[int] = mapped_column(ForeignKey("bidder_rounds.id"), nullable=False, unique=True)
    round_won: Mapped[int] = mapped_column(Integer, nullable=False)
    sum_amount_cents: Mapped[int] = mapped_column(Integer, nullable=False)
    count_participants: Mapped[int] = mapped_column(Integer, nullable=False)
    count_rounds: Mapped[int] = mapped_column(Integer, nullable=False)
    created_at: Mapped[datetime.datetime] = mapped_column(DateTime, server_default=func.now())

    bidder_round: Mapped[BidderRound] = relationship(back_populates="report")
