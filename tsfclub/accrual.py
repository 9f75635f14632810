"""
tsfclub.accrual
===============

The central point‑value table and certificate tiers.

Fixed‑value point types always award the amount in :data:`POINT_VALUES`;
open‑amount types (admin bonus, certificate milestone) take whatever
positive amount the awarding admin passes.
"""

from __future__ import annotations

from typing import List, NamedTuple, Optional

from .errors import ValidationError
from .models import CertificateType, PointType

POINT_VALUES = {
    PointType.MEETING_ATTENDANCE: 10,
    PointType.SPEAKER_ROLE: 15,
    PointType.ANCHOR_ROLE: 25,
    PointType.TOPIC_PROVIDER: 15,
    PointType.JUDGE_ROLE: 20,
    PointType.FEEDBACK_BONUS: 5,
}

OPEN_AMOUNT_TYPES = {PointType.ADMIN_BONUS, PointType.CERTIFICATE_MILESTONE}

# meeting role slot → point type awarded for holding it
ROLE_POINT_TYPES = {
    "Anchor": PointType.ANCHOR_ROLE,
    "Topic Provider": PointType.TOPIC_PROVIDER,
    "Judge": PointType.JUDGE_ROLE,
    "Speaker": PointType.SPEAKER_ROLE,
}


class Tier(NamedTuple):
    threshold: int
    type: CertificateType
    title: str


# ascending thresholds
CERTIFICATE_TIERS: List[Tier] = [
    Tier(100, CertificateType.BRONZE, "Bronze Certificate"),
    Tier(200, CertificateType.SILVER, "Silver Certificate"),
    Tier(300, CertificateType.GOLD, "Gold Certificate"),
]


def resolve_amount(
    point_type: PointType,
    amount: Optional[int] = None,
    override: bool = False,
    description: str = "",
) -> int:
    """
    Return the amount to record for an award, or raise :class:`ValidationError`.

    >>> resolve_amount(PointType.MEETING_ATTENDANCE)
    10
    >>> resolve_amount(PointType.ADMIN_BONUS, 40)
    40
    """
    if amount is not None and amount <= 0:
        raise ValidationError("points must be a positive amount")

    if point_type in OPEN_AMOUNT_TYPES:
        if amount is None:
            raise ValidationError(f"{point_type.value} requires an explicit amount")
        return amount

    standard = POINT_VALUES[point_type]
    if amount is None or amount == standard:
        return standard
    if not override:
        raise ValidationError(
            f"{point_type.value} is worth {standard} points, got {amount}"
        )
    if not description.strip():
        raise ValidationError("an override needs a description for the audit trail")
    return amount


def tiers_reached(total: int) -> List[Tier]:
    """Every tier whose threshold *total* meets."""
    return [t for t in CERTIFICATE_TIERS if total >= t.threshold]


def next_tier(total: int) -> Optional[Tier]:
    """The lowest tier not yet reached, or None at the top."""
    for tier in CERTIFICATE_TIERS:
        if total < tier.threshold:
            return tier
    return None
