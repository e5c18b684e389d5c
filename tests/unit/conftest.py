"""Shared fixtures for resolution tests."""

from __future__ import annotations

import logging
from decimal import Decimal

import pytest
import structlog

from bidderround.resolution.domain import BidderRound, BidderRoundReport, Offer


class InMemoryBidderRoundStore:
    """Dict-backed stand-in for the SQL repository.

    Implements ``BidderRoundStore`` and ``ParticipantCountProvider`` and
    counts offer reads so tests can assert that short-circuits skip them.
    """

    def __init__(self) -> None:
        self.bidder_rounds: dict[int, BidderRound] = {}
        self.offers: list[Offer] = []
        self.participant_counts: dict[int, int] = {}
        self.reports: dict[int, BidderRoundReport] = {}
        self.offer_reads = 0

    # ── Seeding ──────────────────────────────────────────────────────

    def add_bidder_round(
        self,
        bidder_round_id: int = 1,
        target_amount: str = "3600",
        count_offers: int = 5,
        participants: int = 3,
    ) -> BidderRound:
        bidder_round = BidderRound(
            id=bidder_round_id,
            target_amount=Decimal(target_amount),
            count_offers=count_offers,
            participant_count=participants,
        )
        self.bidder_rounds[bidder_round_id] = bidder_round
        self.participant_counts[bidder_round_id] = participants
        return bidder_round

    def add_round(
        self,
        round_index: int,
        amounts: list[str],
        bidder_round_id: int = 1,
        share_counts: list[int] | None = None,
    ) -> None:
        """Add one offer per amount, from participants 1, 2, 3, ..."""
        shares = share_counts or [1] * len(amounts)
        for participant_id, (amount, share_count) in enumerate(zip(amounts, shares, strict=True), start=1):
            self.offers.append(
                Offer(
                    bidder_round_id=bidder_round_id,
                    participant_id=participant_id,
                    round_index=round_index,
                    amount=Decimal(amount),
                    share_count=share_count,
                )
            )

    # ── Protocol ─────────────────────────────────────────────────────

    def offers_for(self, bidder_round_id: int, participant_id: int | None = None) -> list[Offer]:
        self.offer_reads += 1
        return [
            o
            for o in self.offers
            if o.bidder_round_id == bidder_round_id and (participant_id is None or o.participant_id == participant_id)
        ]

    def participant_count(self, bidder_round_id: int) -> int:
        return self.participant_counts.get(bidder_round_id, 0)

    def get_bidder_round(self, bidder_round_id: int) -> BidderRound | None:
        return self.bidder_rounds.get(bidder_round_id)

    def bidder_round_ids(self, unresolved_only: bool = False) -> list[int]:
        return sorted(i for i in self.bidder_rounds if not (unresolved_only and i in self.reports))

    def has_report(self, bidder_round_id: int) -> bool:
        return bidder_round_id in self.reports

    def get_report(self, bidder_round_id: int) -> BidderRoundReport | None:
        return self.reports.get(bidder_round_id)

    def create_report(self, report: BidderRoundReport) -> bool:
        if report.bidder_round_id in self.reports:
            return False
        self.reports[report.bidder_round_id] = report
        return True


@pytest.fixture
def store() -> InMemoryBidderRoundStore:
    return InMemoryBidderRoundStore()


def _failing_processor(logger: object, method_name: str, event_dict: dict) -> dict:
    raise OSError("log sink down")


@pytest.fixture
def broken_log_sink(monkeypatch: pytest.MonkeyPatch) -> None:
    """Replace the resolution-path loggers with ones whose processor chain raises."""
    from bidderround.resolution import service, writer
    from bidderround.state import repository

    for module in (service, writer, repository):
        failing = structlog.wrap_logger(
            logging.getLogger(module.__name__),
            processors=[_failing_processor],
            wrapper_class=structlog.stdlib.BoundLogger,
        )
        monkeypatch.setattr(module, "logger", failing)
