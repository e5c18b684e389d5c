"""SQL-backed repository for bidder round resolution.

:class:`BidderRoundRepository` satisfies the collaborator protocols in
:mod:`bidderround.resolution.ports`: it reads offers, counts expected
participants and writes reports. Each public method runs in its own short
session.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from decimal import ROUND_HALF_UP, Decimal
from typing import TYPE_CHECKING

import structlog
from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError

from bidderround.monitoring.logging import emit
from bidderround.resolution import domain
from bidderround.resolution.errors import BidderRoundNotFoundError
from bidderround.state.models import (
    BidderRound,
    BidderRoundReport,
    Offer,
    Participant,
    bidder_round_participants,
)

if TYPE_CHECKING:
    from sqlalchemy.orm import Session, sessionmaker

logger = structlog.get_logger("bidderround.state.repository")

_CENT = Decimal("0.01")


def cents_to_amount(cents: int) -> Decimal:
    return (Decimal(cents) / 100).quantize(_CENT)


def amount_to_cents(amount: Decimal) -> int:
    return int((amount * 100).to_integral_value(rounding=ROUND_HALF_UP))


@dataclass(frozen=True)
class SyncResult:
    """Participants attached to and detached from a bidder round."""

    attached: list[int] = field(default_factory=list)
    detached: list[int] = field(default_factory=list)


class BidderRoundRepository:
    """Persistence for bidder rounds, their offers and reports."""

    def __init__(self, session_factory: sessionmaker[Session]) -> None:
        self._session_factory = session_factory

    # ── Reads ────────────────────────────────────────────────────────

    def get_bidder_round(self, bidder_round_id: int) -> domain.BidderRound | None:
        with self._session_factory() as session:
            row = session.get(BidderRound, bidder_round_id)
            if row is None:
                return None
            return domain.BidderRound(
                id=row.id,
                target_amount=cents_to_amount(row.target_amount_cents),
                count_offers=row.count_offers,
                participant_count=self._count_participants(session, row.id),
                start_of_submission=row.start_of_submission,
                end_of_submission=row.end_of_submission,
            )

    def bidder_round_ids(self, unresolved_only: bool = False) -> list[int]:
        stmt = select(BidderRound.id).order_by(BidderRound.id)
        if unresolved_only:
            stmt = stmt.outerjoin(BidderRoundReport).where(BidderRoundReport.id.is_(None))
        with self._session_factory() as session:
            return list(session.scalars(stmt))

    def offers_for(self, bidder_round_id: int, participant_id: int | None = None) -> list[domain.Offer]:
        """All offers of a bidder round, weighted by the bidder's share count."""
        stmt = (
            select(Offer, Participant.share_count)
            .join(Participant, Offer.participant_id == Participant.id)
            .where(Offer.bidder_round_id == bidder_round_id)
            .order_by(Offer.round_index, Offer.participant_id)
        )
        if participant_id is not None:
            stmt = stmt.where(Offer.participant_id == participant_id)
        with self._session_factory() as session:
            return [
                domain.Offer(
                    bidder_round_id=row.bidder_round_id,
                    participant_id=row.participant_id,
                    round_index=row.round_index,
                    amount=cents_to_amount(row.amount_cents),
                    share_count=share_count,
                )
                for row, share_count in session.execute(stmt)
            ]

    def participant_count(self, bidder_round_id: int) -> int:
        """Number of participants expected to bid on every round."""
        with self._session_factory() as session:
            return self._count_participants(session, bidder_round_id)

    def has_report(self, bidder_round_id: int) -> bool:
        stmt = select(BidderRoundReport.id).where(BidderRoundReport.bidder_round_id == bidder_round_id)
        with self._session_factory() as session:
            return session.scalar(stmt) is not None

    def get_report(self, bidder_round_id: int) -> domain.BidderRoundReport | None:
        stmt = select(BidderRoundReport).where(BidderRoundReport.bidder_round_id == bidder_round_id)
        with self._session_factory() as session:
            row = session.scalar(stmt)
            if row is None:
                return None
            return domain.BidderRoundReport(
                bidder_round_id=row.bidder_round_id,
                round_won=row.round_won,
                sum_amount=cents_to_amount(row.sum_amount_cents),
                count_participants=row.count_participants,
                count_rounds=row.count_rounds,
                created_at=row.created_at,
            )

    # ── Writes ───────────────────────────────────────────────────────

    def create_report(self, report: domain.BidderRoundReport) -> bool:
        """Insert a report; False if the bidder round already has one.

        The unique constraint on ``bidder_round_id`` decides between
        concurrent writers.
        """
        row = BidderRoundReport(
            bidder_round_id=report.bidder_round_id,
            round_won=report.round_won,
            sum_amount_cents=amount_to_cents(report.sum_amount),
            count_participants=report.count_participants,
            count_rounds=report.count_rounds,
        )
        with self._session_factory() as session:
            session.add(row)
            try:
                session.commit()
            except IntegrityError:
                session.rollback()
                if not self.has_report(report.bidder_round_id):
                    raise
                emit(logger, "info", "report_insert_conflict", bidder_round_id=report.bidder_round_id)
                return False
        return True

    def sync_participants(self, bidder_round_id: int) -> SyncResult:
        """Attach exactly the currently active participants to a bidder round."""
        with self._session_factory() as session:
            bidder_round = session.get(BidderRound, bidder_round_id)
            if bidder_round is None:
                raise BidderRoundNotFoundError(bidder_round_id)

            active = list(session.scalars(select(Participant).where(Participant.active.is_(True))))
            current_ids = {p.id for p in bidder_round.participants}
            active_ids = {p.id for p in active}

            bidder_round.participants = active
            session.commit()

        result = SyncResult(
            attached=sorted(active_ids - current_ids),
            detached=sorted(current_ids - active_ids),
        )
        emit(
            logger,
            "info",
            "participants_synced",
            bidder_round_id=bidder_round_id,
            attached=result.attached,
            detached=result.detached,
        )
        return result

    # ── Internals ────────────────────────────────────────────────────

    @staticmethod
    def _count_participants(session: Session, bidder_round_id: int) -> int:
        stmt = (
            select(func.count())
            .select_from(bidder_round_participants)
            .where(bidder_round_participants.c.bidder_round_id == bidder_round_id)
        )
        return session.scalar(stmt) or 0
