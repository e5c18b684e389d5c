"""Per-round aggregation of offers.

Offers are entered as monthly amounts, the target amount of a bidder round
is yearly. Each offer therefore contributes::

    amount * annualization_factor * share_count

to the weighted sum of its round.
"""

from __future__ import annotations

from collections import defaultdict
from decimal import Decimal
from typing import TYPE_CHECKING

from bidderround.resolution.domain import RoundAggregate
from bidderround.resolution.errors import DuplicateOfferError, MixedBidderRoundError

if TYPE_CHECKING:
    from collections.abc import Iterable

    from bidderround.resolution.domain import Offer

DEFAULT_ANNUALIZATION_FACTOR = 12


def aggregate_offers(
    offers: Iterable[Offer],
    annualization_factor: int = DEFAULT_ANNUALIZATION_FACTOR,
) -> dict[int, RoundAggregate]:
    """Group offers by round index and compute count and weighted sum.

    Rounds nobody has bid on are absent from the result; a missing key means
    "no data yet", never "zero reached".

    Raises:
        DuplicateOfferError: a participant has two offers for one round.
        MixedBidderRoundError: the offers span several bidder rounds.
    """
    by_round: dict[int, list[Offer]] = defaultdict(list)
    seen: set[tuple[int, int]] = set()
    bidder_round_ids: set[int] = set()

    for offer in offers:
        key = (offer.participant_id, offer.round_index)
        if key in seen:
            raise DuplicateOfferError(offer.participant_id, offer.round_index)
        seen.add(key)
        bidder_round_ids.add(offer.bidder_round_id)
        by_round[offer.round_index].append(offer)

    if len(bidder_round_ids) > 1:
        raise MixedBidderRoundError(bidder_round_ids)

    return {
        round_index: RoundAggregate(
            round_index=round_index,
            offer_count=len(round_offers),
            weighted_sum=sum(
                (o.amount * annualization_factor * o.share_count for o in round_offers),
                Decimal(0),
            ),
        )
        for round_index, round_offers in sorted(by_round.items())
    }


def offer_slots(offers: Iterable[Offer], count_offers: int) -> dict[int, Offer | None]:
    """Map every round index of a bidder round to the participant's offer.

    Rounds ``1..count_offers`` without an offer map to ``None`` so a form can
    render one input per configured round. Offers beyond ``count_offers``
    (left over after the admin lowered the round count) are kept.
    """
    slots: dict[int, Offer | None] = {i: None for i in range(1, count_offers + 1)}
    for offer in offers:
        slots[offer.round_index] = offer
    return dict(sorted(slots.items()))
