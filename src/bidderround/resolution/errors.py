"""Faults that abort the resolution of a single bidder round.

Business outcomes such as "not enough money" are returned as
:class:`~bidderround.resolution.domain.ResolutionStatus` values. The
exceptions here signal broken preconditions instead.
"""

from __future__ import annotations


class ResolutionError(Exception):
    """Base class for resolution faults."""


class BidderRoundNotFoundError(ResolutionError):
    def __init__(self, bidder_round_id: int) -> None:
        super().__init__(f"Bidder round {bidder_round_id} does not exist")
        self.bidder_round_id = bidder_round_id


class InvalidParticipantCountError(ResolutionError):
    def __init__(self, participant_count: int) -> None:
        super().__init__(f"Participant count must be positive, got {participant_count}")
        self.participant_count = participant_count


class InvalidTargetAmountError(ResolutionError):
    def __init__(self, target_amount: object) -> None:
        super().__init__(f"Target amount must be positive, got {target_amount}")
        self.target_amount = target_amount


class DuplicateOfferError(ResolutionError):
    """More than one offer from the same participant for the same round."""

    def __init__(self, participant_id: int, round_index: int) -> None:
        super().__init__(f"Participant {participant_id} has more than one offer for round {round_index}")
        self.participant_id = participant_id
        self.round_index = round_index


class MixedBidderRoundError(ResolutionError):
    """Offers from several bidder rounds were aggregated together."""

    def __init__(self, bidder_round_ids: set[int]) -> None:
        super().__init__(f"Offers belong to more than one bidder round: {sorted(bidder_round_ids)}")
        self.bidder_round_ids = bidder_round_ids
