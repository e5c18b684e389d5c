"""Collaborator contracts the resolution service depends on."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from bidderround.resolution.domain import BidderRound, BidderRoundReport, Offer


class OfferSource(Protocol):
    def offers_for(self, bidder_round_id: int, participant_id: int | None = None) -> list[Offer]: ...


class ParticipantCountProvider(Protocol):
    def participant_count(self, bidder_round_id: int) -> int: ...


class BidderRoundStore(OfferSource, Protocol):
    def get_bidder_round(self, bidder_round_id: int) -> BidderRound | None: ...

    def bidder_round_ids(self, unresolved_only: bool = False) -> list[int]: ...

    def has_report(self, bidder_round_id: int) -> bool: ...

    def get_report(self, bidder_round_id: int) -> BidderRoundReport | None: ...

    def create_report(self, report: BidderRoundReport) -> bool:
        """Insert the report unless one exists for the bidder round.

        Must be atomic: of two concurrent calls for the same bidder round,
        exactly one returns True.
        """
        ...
