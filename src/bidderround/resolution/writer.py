"""Idempotent persistence of resolution results."""

from __future__ import annotations

from typing import TYPE_CHECKING

import structlog

from bidderround.monitoring.logging import emit
from bidderround.resolution.domain import BidderRoundReport, ResolutionOutcome, ResolutionStatus

if TYPE_CHECKING:
    from bidderround.resolution.domain import BidderRound, RoundResolution
    from bidderround.resolution.ports import BidderRoundStore

logger = structlog.get_logger("bidderround.resolution.writer")


class RoundReportWriter:
    """Stores the report of a successful resolution exactly once.

    The store's atomic ``create_report`` is the only guard against double
    writes. A run that loses the insert gets ``ALREADY_RESOLVED``.
    """

    def __init__(self, store: BidderRoundStore) -> None:
        self._store = store

    def write(
        self,
        bidder_round: BidderRound,
        resolution: RoundResolution,
        participant_count: int,
    ) -> ResolutionOutcome:
        if not resolution.succeeded or resolution.round_won is None or resolution.reached_amount is None:
            raise ValueError(f"Only successful resolutions are persisted, got {resolution.status}")

        report = BidderRoundReport(
            bidder_round_id=bidder_round.id,
            round_won=resolution.round_won,
            sum_amount=resolution.reached_amount,
            count_participants=participant_count,
            count_rounds=bidder_round.count_offers,
        )

        if not self._store.create_report(report):
            emit(logger, "info", "report_already_present", bidder_round_id=bidder_round.id)
            return ResolutionOutcome(
                bidder_round_id=bidder_round.id,
                status=ResolutionStatus.ALREADY_RESOLVED,
                report=self._store.get_report(bidder_round.id),
            )

        emit(
            logger,
            "info",
            "report_created",
            bidder_round_id=bidder_round.id,
            round_won=report.round_won,
            sum_amount=str(report.sum_amount),
            count_participants=report.count_participants,
        )
        return ResolutionOutcome(
            bidder_round_id=bidder_round.id,
            status=ResolutionStatus.SUCCESS,
            round_won=report.round_won,
            reached_amount=report.sum_amount,
            report=self._store.get_report(bidder_round.id) or report,
        )
