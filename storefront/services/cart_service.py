"""Cart service - in-session cart operations (single shopper)."""

import logging
from typing import Any, Dict, List, Optional, Tuple

from storefront.data import (
    DEFAULT_DURATION, DURATION_KEYS, DURATION_LABELS, DOMAINS, HOSTING_PLANS, SKIP,
    find_domain, find_hosting_plan,
)
from storefront.exceptions import NotFoundError, ValidationError
from storefront.models.offering import OfferingCategory
from storefront.services.pricing_service import comparison_price, compute_totals, line_total, unit_price

logger = logging.getLogger(__name__)

LINE_SERVICE = 'service'
LINE_DOMAIN = 'domain'
LINE_HOSTING = 'hosting'


def new_cart() -> Dict[str, Any]:
    """Empty cart. Lines are kept in a list so insertion order survives the session cookie."""
    return {'lines': []}


def line_key(offering: Dict[str, Any], duration: Optional[str] = None) -> str:
    """Identity key of a catalog line: offering id, plus ':<duration>' for duration variants."""
    if offering.get('durations'):
        return f"{offering['id']}:{duration or DEFAULT_DURATION}"
    return offering['id']


def find_line(cart: Dict[str, Any], key: str) -> Optional[Dict[str, Any]]:
    return next((line for line in cart['lines'] if line['key'] == key), None)


def _get_line_or_error(cart: Dict[str, Any], key: str) -> Dict[str, Any]:
    line = find_line(cart, key)
    if not line:
        raise NotFoundError('Item is not in the cart.')
    return line


def _merge_line(cart: Dict[str, Any], template: Dict[str, Any]) -> Dict[str, Any]:
    """Increment the line with the same key, or append the template as a new line."""
    existing = find_line(cart, template['key'])
    if existing:
        existing['quantity'] += 1
        return existing

    line = dict(template, quantity=1)
    cart['lines'].append(line)
    return line


def _resolve_duration(offering: Dict[str, Any], duration: Optional[str]) -> Optional[str]:
    durations = offering.get('durations')
    if not durations:
        return None
    duration = duration or DEFAULT_DURATION
    if duration not in durations:
        raise ValidationError(f'"{offering["name"]}" is not available for duration "{duration}".')
    return duration


def build_addon_prompt(offering: Dict[str, Any]) -> Dict[str, Any]:
    """Domain + hosting upsell shown once after a website design is added."""
    return {
        'offering_id': offering['id'],
        'offering_name': offering['name'],
        'domains': [{'name': d['name'], 'price': str(d['price'])} for d in DOMAINS],
        'hosting_plans': [
            {'name': h['name'], 'prices': {k: str(v) for k, v in h['prices'].items()}}
            for h in HOSTING_PLANS
        ],
        'durations': list(DURATION_KEYS),
    }


def add_to_cart(
    cart: Dict[str, Any],
    offering: Dict[str, Any],
    duration: Optional[str] = None
) -> Tuple[Dict[str, Any], Optional[Dict[str, Any]]]:
    """
    Add one unit of an offering to the cart.

    Returns the affected line and, for website design offerings, the add-on
    prompt to show. The prompt never blocks the cart mutation.
    """
    duration = _resolve_duration(offering, duration)

    line = _merge_line(cart, {
        'key': line_key(offering, duration),
        'offering_id': offering['id'],
        'type': LINE_SERVICE,
        'name': offering['name'],
        'category': offering['category'],
        'icon': offering.get('icon') or '',
        'duration': duration,
        'duration_label': DURATION_LABELS[duration] if duration else '',
        'price': str(unit_price(offering, duration)),
        'original_price': str(comparison_price(offering, duration)),
    })

    prompt = None
    if offering['category'] == OfferingCategory.WEBSITE_DESIGN.value:
        prompt = build_addon_prompt(offering)

    logger.info(f"[CART] add key={line['key']} qty={line['quantity']}")
    return line, prompt


def remove_from_cart(cart: Dict[str, Any], key: str) -> None:
    """Delete a line regardless of its quantity."""
    line = _get_line_or_error(cart, key)
    cart['lines'].remove(line)
    logger.info(f"[CART] remove key={key}")


def update_quantity(cart: Dict[str, Any], key: str, delta: int) -> Dict[str, Any]:
    """Adjust a line quantity; never drops below 1 and never removes the line."""
    line = _get_line_or_error(cart, key)
    line['quantity'] = max(1, line['quantity'] + int(delta))
    return line


def add_addons(
    cart: Dict[str, Any],
    domain_choice: str = SKIP,
    hosting_choice: str = SKIP,
    hosting_duration: str = DEFAULT_DURATION
) -> List[Dict[str, Any]]:
    """
    Add the selected domain and hosting plan as their own lines.

    Either choice may be the 'skip' sentinel. Add-on lines merge by key like
    catalog lines, so choosing the same add-on twice bumps its quantity.
    """
    added = []

    if domain_choice and domain_choice != SKIP:
        domain = find_domain(domain_choice)
        if not domain:
            raise ValidationError(f'Unknown domain extension "{domain_choice}".')
        added.append(_merge_line(cart, {
            'key': f"domain-{domain['name']}",
            'offering_id': None,
            'type': LINE_DOMAIN,
            'name': f"Domain ({domain['name']})",
            'category': 'Domain',
            'icon': '🌐',
            'duration': '12m',
            'duration_label': '1 year',
            'price': str(domain['price']),
            'original_price': str(domain['price']),
        }))

    if hosting_choice and hosting_choice != SKIP:
        plan = find_hosting_plan(hosting_choice)
        if not plan:
            raise ValidationError(f'Unknown hosting plan "{hosting_choice}".')
        if hosting_duration not in plan['prices']:
            raise ValidationError(f'Invalid hosting duration "{hosting_duration}".')
        price = plan['prices'][hosting_duration]
        added.append(_merge_line(cart, {
            'key': f"hosting-{plan['name']}-{hosting_duration}",
            'offering_id': None,
            'type': LINE_HOSTING,
            'name': f"Hosting ({plan['name']}) - {DURATION_LABELS[hosting_duration]}",
            'category': 'Hosting',
            'icon': '☁️',
            'duration': hosting_duration,
            'duration_label': DURATION_LABELS[hosting_duration],
            'price': str(price),
            'original_price': str(price),
        }))

    logger.info(f"[CART] addons added={[line['key'] for line in added]}")
    return added


def clear_cart(cart: Dict[str, Any]) -> None:
    cart['lines'] = []


def item_count(cart: Dict[str, Any]) -> int:
    return sum(line['quantity'] for line in cart['lines'])


def dismiss_addons(shop: Dict[str, Any]) -> None:
    """Close the add-on prompt without adding anything."""
    shop['addon_prompt'] = None


def cart_summary(shop: Dict[str, Any]) -> Dict[str, Any]:
    """Cart lines with line totals and freshly computed totals. Totals are never stored."""
    lines = shop['cart']['lines']
    totals = compute_totals(lines, shop.get('coupon'))
    return {
        'lines': [dict(line, line_total=line_total(line)) for line in lines],
        'item_count': item_count(shop['cart']),
        'coupon': shop.get('coupon'),
        'subtotal': totals['subtotal'],
        'discount_amount': totals['discount_amount'],
        'total': totals['total'],
    }
