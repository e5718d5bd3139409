"""Coupon resolution against the static coupon table."""

import logging
from typing import Any, Dict, Optional

from storefront.data import COUPONS
from storefront.exceptions import InvalidCouponCode

logger = logging.getLogger(__name__)


def resolve(code: Optional[str]) -> Dict[str, Any]:
    """
    Look up a coupon code (case-insensitive).

    Returns the transient coupon descriptor held in the shopper session, or
    raises InvalidCouponCode.
    """
    normalized = (code or '').strip().upper()
    coupon = COUPONS.get(normalized)
    if not coupon:
        raise InvalidCouponCode(normalized)
    return {
        'code': normalized,
        'discount_percent': coupon['discount'],
        'label': coupon['label'],
    }


def apply_coupon(shop: Dict[str, Any], code: Optional[str]) -> Dict[str, Any]:
    """Replace the active coupon. On an invalid code the previous coupon stays applied."""
    try:
        coupon = resolve(code)
    except InvalidCouponCode:
        logger.info(f"[COUPON] rejected code={code!r}")
        raise
    shop['coupon'] = coupon
    logger.info(f"[COUPON] applied code={coupon['code']} percent={coupon['discount_percent']}")
    return coupon


def remove_coupon(shop: Dict[str, Any]) -> None:
    shop['coupon'] = None
