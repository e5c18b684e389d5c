"""Domain records for bidder round resolution.

These are plain immutable values. The SQL rows in
:mod:`bidderround.state.models` are converted into them by the repository so
that aggregation and resolution never touch a database session.
"""

from __future__ import annotations

import datetime
from dataclasses import dataclass
from decimal import Decimal
from enum import StrEnum


@dataclass(frozen=True)
class Offer:
    """One participant's monthly bid for one round of a bidder round."""

    bidder_round_id: int
    participant_id: int
    round_index: int  # 1-based
    amount: Decimal  # monthly
    share_count: int = 1


@dataclass(frozen=True)
class BidderRound:
    """One instance of the recurring bidding process."""

    id: int
    target_amount: Decimal  # yearly
    count_offers: int
    participant_count: int = 0
    start_of_submission: datetime.datetime | None = None
    end_of_submission: datetime.datetime | None = None


@dataclass(frozen=True)
class RoundAggregate:
    """Offers of a single round, counted and summed."""

    round_index: int
    offer_count: int
    weighted_sum: Decimal


@dataclass(frozen=True)
class BidderRoundReport:
    """Persisted outcome of a successful resolution."""

    bidder_round_id: int
    round_won: int
    sum_amount: Decimal
    count_participants: int
    count_rounds: int
    created_at: datetime.datetime | None = None


class ResolutionStatus(StrEnum):
    """Outcome kind of a resolution attempt."""

    SUCCESS = "success"
    ALREADY_RESOLVED = "already_resolved"
    NOT_ALL_OFFERS_GIVEN = "not_all_offers_given"
    NOT_ENOUGH_MONEY = "not_enough_money"
    FAULT = "fault"  # only produced by batch runs


@dataclass(frozen=True)
class RoundResolution:
    """Result of applying the qualification policy to aggregated rounds."""

    status: ResolutionStatus
    round_won: int | None = None
    reached_amount: Decimal | None = None

    @property
    def succeeded(self) -> bool:
        return self.status == ResolutionStatus.SUCCESS


@dataclass(frozen=True)
class ResolutionOutcome:
    """Outcome of resolving one bidder round end to end."""

    bidder_round_id: int
    status: ResolutionStatus
    round_won: int | None = None
    reached_amount: Decimal | None = None
    report: BidderRoundReport | None = None
    error: str | None = None

    @property
    def succeeded(self) -> bool:
        return self.status == ResolutionStatus.SUCCESS
