from __future__ import annotations

import logging
import random
from dataclasses import dataclass
from typing import Sequence

from django.conf import settings
from django.db import transaction
from django.db.models import F

from .models import DrawRecord, Prize

logger = logging.getLogger(__name__)

# Rolls are taken from [0, min(total weight, WEIGHT_CEILING)); cumulative
# weight past the ceiling can never be reached.
WEIGHT_CEILING = 100


class PrizeUnavailableError(Exception):
    """Raised when no prize can be drawn from stock."""

    code = "pool_exhausted"


class DrawConflictError(Exception):
    """Raised when every selected prize sold out before it could be claimed."""

    code = "draw_conflict"


@dataclass(slots=True)
class DrawResult:
    prize: Prize
    record: DrawRecord


def _weight(prize: Prize) -> float:
    return max(prize.probability or 0, 0)


def choose_prize(candidates: Sequence[Prize], rng=random) -> Prize:
    """Pick one prize from ``candidates`` using cumulative-weight sampling.

    ``candidates`` must already be limited to in-stock prizes and kept in a
    stable order. When every weight is zero each candidate is equally likely.
    Otherwise the first candidate whose running weight reaches the roll wins;
    if float rounding leaves the roll above every running total, the last
    candidate wins.
    """

    if not candidates:
        raise PrizeUnavailableError("No prize with remaining stock is available.")

    weights = [_weight(prize) for prize in candidates]
    total = sum(weights)
    if total == 0:
        return rng.choice(list(candidates))

    roll = rng.random() * min(total, WEIGHT_CEILING)
    cumulative = 0.0
    for prize, weight in zip(candidates, weights):
        cumulative += weight
        if roll <= cumulative:
            return prize
    return candidates[-1]


def draw_prize(rng=None) -> DrawResult:
    """Select a prize, consume one unit of its stock and record the win.

    The decrement only applies while stock is still positive. If a concurrent
    draw claimed the last unit first, selection is repeated against the
    prizes that remain.
    """

    rng = rng or random
    max_attempts = max(getattr(settings, "PRIZE_DRAW_MAX_ATTEMPTS", 3), 1)

    for attempt in range(1, max_attempts + 1):
        with transaction.atomic():
            candidates = list(
                Prize.objects.select_for_update()
                .filter(stock__gt=0)
                .order_by("id")
            )
            prize = choose_prize(candidates, rng)

            claimed = (
                Prize.objects.filter(id=prize.id, stock__gt=0)
                .update(stock=F("stock") - 1)
            )
            if claimed:
                prize.refresh_from_db(fields=["stock"])
                record = DrawRecord.objects.create(
                    prize_id=prize.id,
                    prize_name=prize.name,
                )
                logger.info(
                    "Prize %s (%s) drawn, %s left.", prize.id, prize.name, prize.stock
                )
                return DrawResult(prize=prize, record=record)

        logger.warning(
            "Prize %s sold out during draw attempt %s/%s; reselecting.",
            prize.id,
            attempt,
            max_attempts,
        )

    raise DrawConflictError("Draw could not claim a prize. Please try again.")
