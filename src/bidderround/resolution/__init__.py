"""Round resolution: aggregation, winner selection and report writing."""

from bidderround.resolution.aggregator import aggregate_offers, offer_slots
from bidderround.resolution.domain import (
    BidderRound,
    BidderRoundReport,
    Offer,
    ResolutionOutcome,
    ResolutionStatus,
    RoundAggregate,
    RoundResolution,
)
from bidderround.resolution.errors import (
    BidderRoundNotFoundError,
    DuplicateOfferError,
    InvalidParticipantCountError,
    InvalidTargetAmountError,
    MixedBidderRoundError,
    ResolutionError,
)
from bidderround.resolution.resolver import resolve_rounds
from bidderround.resolution.service import ResolutionService
from bidderround.resolution.writer import RoundReportWriter

__all__ = [
    "BidderRound",
    "BidderRoundNotFoundError",
    "BidderRoundReport",
    "DuplicateOfferError",
    "InvalidParticipantCountError",
    "InvalidTargetAmountError",
    "MixedBidderRoundError",
    "Offer",
    "ResolutionError",
    "ResolutionOutcome",
    "ResolutionService",
    "ResolutionStatus",
    "RoundAggregate",
    "RoundReportWriter",
    "RoundResolution",
    "aggregate_offers",
    "offer_slots",
    "resolve_rounds",
]
