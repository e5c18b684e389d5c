"""Unit tests for idempotent report writing."""

from __future__ import annotations

from decimal import Decimal
from typing import TYPE_CHECKING

import pytest

from bidderround.resolution.domain import ResolutionStatus, RoundResolution
from bidderround.resolution.writer import RoundReportWriter

if TYPE_CHECKING:
    from conftest import InMemoryBidderRoundStore


def _success(round_won: int = 3, amount: str = "3960") -> RoundResolution:
    return RoundResolution(ResolutionStatus.SUCCESS, round_won=round_won, reached_amount=Decimal(amount))


class TestRoundReportWriter:
    def test_writes_report_snapshot(self, store: InMemoryBidderRoundStore) -> None:
        bidder_round = store.add_bidder_round(count_offers=5, participants=3)
        outcome = RoundReportWriter(store).write(bidder_round, _success(), participant_count=3)

        assert outcome.status == ResolutionStatus.SUCCESS
        assert outcome.round_won == 3
        assert outcome.reached_amount == Decimal("3960")

        report = store.reports[1]
        assert report.round_won == 3
        assert report.sum_amount == Decimal("3960")
        assert report.count_participants == 3
        assert report.count_rounds == 5
        assert outcome.report == report

    def test_second_write_is_already_resolved(self, store: InMemoryBidderRoundStore) -> None:
        bidder_round = store.add_bidder_round()
        writer = RoundReportWriter(store)
        writer.write(bidder_round, _success(round_won=3), participant_count=3)

        outcome = writer.write(bidder_round, _success(round_won=4, amount="4000"), participant_count=3)

        assert outcome.status == ResolutionStatus.ALREADY_RESOLVED
        assert outcome.report is not None
        assert outcome.report.round_won == 3
        assert len(store.reports) == 1
        assert store.reports[1].round_won == 3

    @pytest.mark.parametrize(
        "status",
        [ResolutionStatus.NOT_ALL_OFFERS_GIVEN, ResolutionStatus.NOT_ENOUGH_MONEY],
    )
    def test_rejects_non_success(self, store: InMemoryBidderRoundStore, status: ResolutionStatus) -> None:
        bidder_round = store.add_bidder_round()
        with pytest.raises(ValueError, match="Only successful"):
            RoundReportWriter(store).write(bidder_round, RoundResolution(status), participant_count=3)
        assert store.reports == {}
