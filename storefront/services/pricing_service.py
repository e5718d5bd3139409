"""Pricing engine - pure totals computation over cart lines and a coupon."""

from decimal import Decimal
from typing import Any, Dict, Iterable, Optional

from storefront.data import DEFAULT_DURATION

ZERO = Decimal('0')


def to_decimal(value: Any) -> Decimal:
    """Coerce session/JSON values (str, int, float, Decimal) to Decimal."""
    if value is None or value == '':
        return ZERO
    if isinstance(value, Decimal):
        return value
    return Decimal(str(value))


def line_total(line: Dict[str, Any]) -> Decimal:
    return to_decimal(line['price']) * int(line['quantity'])


def compute_totals(lines: Iterable[Dict[str, Any]], coupon: Optional[Dict[str, Any]] = None) -> Dict[str, Decimal]:
    """
    Compute subtotal, discount and total for the given cart lines.

    subtotal = sum(price * quantity); discount = subtotal * percent / 100 when a
    coupon is applied; total = subtotal - discount. No rounding is applied here,
    formatting is left to the display layer. Always defined, an empty cart
    yields zeros.
    """
    subtotal = sum((line_total(line) for line in lines), ZERO)

    if coupon:
        discount_amount = subtotal * to_decimal(coupon['discount_percent']) / Decimal('100')
    else:
        discount_amount = ZERO

    return {
        'subtotal': subtotal,
        'discount_amount': discount_amount,
        'total': subtotal - discount_amount,
    }


def months_in(duration: str) -> int:
    """Number of months implied by a duration key ('3m' -> 3, '12m' -> 12)."""
    try:
        return int(duration.rstrip('m')) or 1
    except (AttributeError, ValueError):
        return 1


def unit_price(offering: Dict[str, Any], duration: Optional[str] = None) -> Decimal:
    """Sellable price of an offering, honoring the selected duration when it has variants."""
    durations = offering.get('durations')
    if durations:
        return to_decimal(durations[duration or DEFAULT_DURATION])
    return to_decimal(offering['discount_price'])


def comparison_price(offering: Dict[str, Any], duration: Optional[str] = None) -> Decimal:
    """Pre-discount reference price; for duration variants original_price x months."""
    original = to_decimal(offering['original_price'])
    if offering.get('durations'):
        return original * months_in(duration or DEFAULT_DURATION)
    return original


def savings(offering: Dict[str, Any], duration: Optional[str] = None) -> Decimal:
    return comparison_price(offering, duration) - unit_price(offering, duration)
