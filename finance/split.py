"""Commission split between the marketplace and the seller."""

from collections import namedtuple
from decimal import Decimal, ROUND_HALF_UP

from django.conf import settings


CENT = Decimal('0.01')

Split = namedtuple('Split', ['total', 'admin_fee', 'seller_amount'])


def to_money(value) -> Decimal:
    return Decimal(str(value)).quantize(CENT, rounding=ROUND_HALF_UP)


def calculate_split(amount, admin_percentage=None) -> Split:
    """Split a gross amount into the marketplace fee and the seller's share.

    The fee is rounded half-up to 2 places and the seller gets the remainder,
    so ``admin_fee + seller_amount == total`` holds for every amount.
    """
    if admin_percentage is None:
        admin_percentage = settings.MARKETPLACE_ADMIN_PERCENTAGE
    admin_percentage = Decimal(str(admin_percentage))
    if not Decimal('0') <= admin_percentage <= Decimal('1'):
        raise ValueError('admin_percentage must be between 0 and 1.')

    total = to_money(amount)
    if total < 0:
        raise ValueError('Amount cannot be negative.')

    admin_fee = (total * admin_percentage).quantize(CENT, rounding=ROUND_HALF_UP)
    return Split(total=total, admin_fee=admin_fee, seller_amount=total - admin_fee)
