"""
tests/test_accrual.py
=====================

Unit tests for the point table and certificate tiers.
"""

import pytest

from tsfclub.accrual import next_tier, resolve_amount, tiers_reached
from tsfclub.errors import ValidationError
from tsfclub.models import CertificateType, PointType


def test_fixed_types_use_standard_amount():
    assert resolve_amount(PointType.MEETING_ATTENDANCE) == 10
    assert resolve_amount(PointType.ANCHOR_ROLE, 25) == 25
    assert resolve_amount(PointType.JUDGE_ROLE) == 20


def test_deviating_amount_needs_override_and_description():
    with pytest.raises(ValidationError):
        resolve_amount(PointType.MEETING_ATTENDANCE, 12)
    with pytest.raises(ValidationError):
        resolve_amount(PointType.MEETING_ATTENDANCE, 12, override=True)
    assert resolve_amount(PointType.MEETING_ATTENDANCE, 12, True, "Stayed to help") == 12


def test_open_amount_types():
    assert resolve_amount(PointType.ADMIN_BONUS, 40) == 40
    with pytest.raises(ValidationError):
        resolve_amount(PointType.ADMIN_BONUS)


@pytest.mark.parametrize("amount", [0, -5])
def test_non_positive_amount_rejected(amount):
    with pytest.raises(ValidationError):
        resolve_amount(PointType.ADMIN_BONUS, amount)


def test_tiers():
    assert tiers_reached(99) == []
    assert [t.type for t in tiers_reached(110)] == [CertificateType.BRONZE]
    assert [t.type for t in tiers_reached(300)] == [
        CertificateType.BRONZE,
        CertificateType.SILVER,
        CertificateType.GOLD,
    ]
    assert next_tier(110).type is CertificateType.SILVER
    assert next_tier(300) is None
