"""Resolution pipeline for bidder rounds.

For one bidder round::

    report exists? ──yes──▶ ALREADY_RESOLVED (offers are never read)
         │no
         ▼
    offers ─▶ aggregate_offers ─▶ resolve_rounds ─▶ RoundReportWriter

Non-success outcomes are logged and returned; only ``SUCCESS`` writes a
report. Faults (:class:`~bidderround.resolution.errors.ResolutionError`)
propagate from :meth:`ResolutionService.resolve` and are isolated per bidder
round in :meth:`ResolutionService.resolve_all`.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import structlog

from bidderround.monitoring.logging import emit
from bidderround.resolution.aggregator import DEFAULT_ANNUALIZATION_FACTOR, aggregate_offers, offer_slots
from bidderround.resolution.domain import ResolutionOutcome, ResolutionStatus
from bidderround.resolution.errors import BidderRoundNotFoundError, InvalidParticipantCountError
from bidderround.resolution.resolver import resolve_rounds
from bidderround.resolution.writer import RoundReportWriter

if TYPE_CHECKING:
    from bidderround.resolution.domain import BidderRound, Offer, RoundAggregate
    from bidderround.resolution.ports import BidderRoundStore, ParticipantCountProvider

logger = structlog.get_logger("bidderround.resolution.service")


class ResolutionService:
    """Resolves bidder rounds against their target amount.

    Usage::

        service = ResolutionService(repo, repo)
        outcome = service.resolve(bidder_round_id)
        if outcome.succeeded:
            notify_members(outcome.report)
    """

    def __init__(
        self,
        store: BidderRoundStore,
        participants: ParticipantCountProvider,
        annualization_factor: int = DEFAULT_ANNUALIZATION_FACTOR,
    ) -> None:
        self._store = store
        self._participants = participants
        self._annualization_factor = annualization_factor
        self._writer = RoundReportWriter(store)

    # ── Public API ────────────────────────────────────────────────────

    def resolve(self, bidder_round_id: int) -> ResolutionOutcome:
        """Run the full pipeline for one bidder round."""
        if self._store.has_report(bidder_round_id):
            report = self._store.get_report(bidder_round_id)
            emit(
                logger,
                "info",
                "bidder_round_already_resolved",
                bidder_round_id=bidder_round_id,
                round_won=report.round_won if report else None,
            )
            return ResolutionOutcome(
                bidder_round_id=bidder_round_id,
                status=ResolutionStatus.ALREADY_RESOLVED,
                report=report,
            )

        bidder_round = self._load(bidder_round_id)
        participant_count = self._participants.participant_count(bidder_round_id)
        if participant_count <= 0:
            raise InvalidParticipantCountError(participant_count)

        aggregates = self._aggregate(bidder_round)
        resolution = resolve_rounds(aggregates, bidder_round.target_amount, participant_count)

        if resolution.status == ResolutionStatus.NOT_ALL_OFFERS_GIVEN:
            emit(
                logger,
                "info",
                "no_round_with_all_offers",
                bidder_round_id=bidder_round_id,
                participant_count=participant_count,
                offer_counts={i: a.offer_count for i, a in aggregates.items()},
            )
        elif resolution.status == ResolutionStatus.NOT_ENOUGH_MONEY:
            emit(
                logger,
                "info",
                "no_round_reaches_target",
                bidder_round_id=bidder_round_id,
                target_amount=str(bidder_round.target_amount),
                sums={i: str(a.weighted_sum) for i, a in aggregates.items()},
            )

        if not resolution.succeeded:
            return ResolutionOutcome(bidder_round_id=bidder_round_id, status=resolution.status)

        return self._writer.write(bidder_round, resolution, participant_count)

    def resolve_all(self, include_resolved: bool = True) -> dict[int, ResolutionOutcome]:
        """Resolve every bidder round.

        A fault in one bidder round is recorded as a ``FAULT`` outcome for
        that id and does not stop the others.
        """
        outcomes: dict[int, ResolutionOutcome] = {}
        for bidder_round_id in self._store.bidder_round_ids(unresolved_only=not include_resolved):
            try:
                outcomes[bidder_round_id] = self.resolve(bidder_round_id)
            except Exception as exc:
                emit(logger, "exception", "bidder_round_resolution_failed", bidder_round_id=bidder_round_id)
                outcomes[bidder_round_id] = ResolutionOutcome(
                    bidder_round_id=bidder_round_id,
                    status=ResolutionStatus.FAULT,
                    error=str(exc),
                )
        return outcomes

    def get_aggregates(self, bidder_round_id: int) -> dict[int, RoundAggregate]:
        """Per-round counts and sums, without resolving."""
        return self._aggregate(self._load(bidder_round_id))

    def get_offer_slots(self, bidder_round_id: int, participant_id: int) -> dict[int, Offer | None]:
        """A participant's offers keyed by round index, ``None`` for open rounds."""
        bidder_round = self._load(bidder_round_id)
        offers = self._store.offers_for(bidder_round_id, participant_id=participant_id)
        return offer_slots(offers, bidder_round.count_offers)

    # ── Internals ─────────────────────────────────────────────────────

    def _load(self, bidder_round_id: int) -> BidderRound:
        bidder_round = self._store.get_bidder_round(bidder_round_id)
        if bidder_round is None:
            raise BidderRoundNotFoundError(bidder_round_id)
        return bidder_round

    def _aggregate(self, bidder_round: BidderRound) -> dict[int, RoundAggregate]:
        offers = self._store.offers_for(bidder_round.id)
        return aggregate_offers(offers, self._annualization_factor)
