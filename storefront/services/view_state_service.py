"""
Shopper session state and the screen (view) state machine.

The whole session lives in one plain dict so it can be stored in the Flask
session cookie:

    {'view': 'browse', 'cart': {'lines': [...]}, 'coupon': None,
     'checkout': {...}, 'invoice_number': None, 'addon_prompt': None,
     'admin_return': None}

Legal screen transitions:

    browse   -> checkout, admin
    checkout -> browse, invoice (successful submit only), admin
    invoice  -> browse (new order, full reset), admin
    admin    -> the screen it was opened from (toggle)
"""

import enum
import logging
from typing import Any, Dict

from storefront.exceptions import IllegalTransitionError, ValidationError
from storefront.services import cart_service, checkout_service

logger = logging.getLogger(__name__)


class ViewState(enum.Enum):
    """Top-level screens."""
    BROWSE = "browse"
    CHECKOUT = "checkout"
    INVOICE = "invoice"
    ADMIN = "admin"


TRANSITIONS = {
    ViewState.BROWSE: {ViewState.CHECKOUT, ViewState.ADMIN},
    ViewState.CHECKOUT: {ViewState.BROWSE, ViewState.INVOICE, ViewState.ADMIN},
    ViewState.INVOICE: {ViewState.BROWSE, ViewState.ADMIN},
    ViewState.ADMIN: {ViewState.BROWSE},
}

CART_EDITABLE_VIEWS = (ViewState.BROWSE, ViewState.CHECKOUT)


def new_shop_state() -> Dict[str, Any]:
    return {
        'view': ViewState.BROWSE.value,
        'cart': cart_service.new_cart(),
        'coupon': None,
        'checkout': checkout_service.empty_details(),
        'invoice_number': None,
        'addon_prompt': None,
        'admin_return': None,
    }


def current_view(shop: Dict[str, Any]) -> ViewState:
    try:
        return ViewState(shop.get('view'))
    except ValueError:
        return ViewState.BROWSE


def can_transition(shop: Dict[str, Any], target: ViewState) -> bool:
    return target in TRANSITIONS[current_view(shop)]


def transition(shop: Dict[str, Any], target: ViewState) -> None:
    current = current_view(shop)
    if not can_transition(shop, target):
        raise IllegalTransitionError(current.value, target.value)
    shop['view'] = target.value
    logger.debug(f"[VIEW] {current.value} -> {target.value}")


def require_view(shop: Dict[str, Any], *allowed: ViewState) -> None:
    """Guard an action that is only meaningful on some screens."""
    current = current_view(shop)
    if current not in allowed:
        raise IllegalTransitionError(current.value, ' or '.join(v.value for v in allowed))


def proceed_to_checkout(shop: Dict[str, Any]) -> None:
    require_view(shop, ViewState.BROWSE)
    if not shop['cart']['lines']:
        raise ValidationError('Your cart is empty.')
    transition(shop, ViewState.CHECKOUT)


def continue_shopping(shop: Dict[str, Any]) -> None:
    require_view(shop, ViewState.CHECKOUT)
    transition(shop, ViewState.BROWSE)


def complete_checkout(shop: Dict[str, Any], invoice_number: str) -> None:
    """Enter the invoice screen once the order write has been acknowledged."""
    transition(shop, ViewState.INVOICE)
    shop['invoice_number'] = invoice_number


def start_new_order(shop: Dict[str, Any]) -> None:
    """Invoice -> browse, clearing cart, coupon, checkout form and invoice reference."""
    require_view(shop, ViewState.INVOICE)
    transition(shop, ViewState.BROWSE)
    shop.update(new_shop_state())


def _admin_return_view(shop: Dict[str, Any]) -> ViewState:
    try:
        view = ViewState(shop.get('admin_return'))
    except ValueError:
        return ViewState.BROWSE
    if view == ViewState.INVOICE and not shop.get('invoice_number'):
        return ViewState.BROWSE
    if view == ViewState.ADMIN:
        return ViewState.BROWSE
    return view


def toggle_admin(shop: Dict[str, Any]) -> ViewState:
    """
    Open the admin panel from any screen, or close it again.

    Closing returns to the screen the panel was opened from. Cart, coupon,
    checkout form and invoice reference are untouched either way.
    """
    current = current_view(shop)
    if current == ViewState.ADMIN:
        target = _admin_return_view(shop)
        shop['view'] = target.value
        shop['admin_return'] = None
        logger.debug(f"[VIEW] admin -> {target.value}")
    else:
        transition(shop, ViewState.ADMIN)
        shop['admin_return'] = current.value
    return current_view(shop)


def describe(shop: Dict[str, Any]) -> Dict[str, Any]:
    """Public snapshot of the session: current screen, priced cart, pending prompt."""
    prompt = shop.get('addon_prompt')
    return {
        'view': current_view(shop).value,
        'cart': cart_service.cart_summary(shop),
        'addon_prompt': cart_service.build_addon_prompt(prompt) if prompt else None,
        'invoice_number': shop.get('invoice_number'),
    }
