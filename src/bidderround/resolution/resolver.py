"""Winning round selection.

A round qualifies when every expected participant has bid on it *and* its
weighted sum reaches the target amount. Among the qualifying rounds the one
with the smallest sum wins, so members pay no more than needed; equal sums
go to the lower round index.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from bidderround.resolution.domain import ResolutionStatus, RoundResolution
from bidderround.resolution.errors import InvalidParticipantCountError, InvalidTargetAmountError

if TYPE_CHECKING:
    from collections.abc import Mapping
    from decimal import Decimal

    from bidderround.resolution.domain import RoundAggregate


def resolve_rounds(
    aggregates: Mapping[int, RoundAggregate],
    target_amount: Decimal,
    participant_count: int,
) -> RoundResolution:
    """Pick the winning round, or report why there is none.

    Raises:
        InvalidParticipantCountError: ``participant_count`` is not positive.
        InvalidTargetAmountError: ``target_amount`` is not positive.
    """
    if participant_count <= 0:
        raise InvalidParticipantCountError(participant_count)
    if target_amount <= 0:
        raise InvalidTargetAmountError(target_amount)

    complete = [a for a in aggregates.values() if a.offer_count == participant_count]
    if not complete:
        return RoundResolution(ResolutionStatus.NOT_ALL_OFFERS_GIVEN)

    funded = [a for a in complete if a.weighted_sum >= target_amount]
    if not funded:
        return RoundResolution(ResolutionStatus.NOT_ENOUGH_MONEY)

    winner = min(funded, key=lambda a: (a.weighted_sum, a.round_index))
    return RoundResolution(
        ResolutionStatus.SUCCESS,
        round_won=winner.round_index,
        reached_amount=winner.weighted_sum,
    )
