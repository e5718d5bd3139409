"""Middleware for the shopper session state."""
from flask import session, g, request

from storefront.services.view_state_service import new_shop_state

SESSION_KEY = 'shop'

# Endpoints that never read or write the shopper state
_STATELESS_ENDPOINTS = ('metrics.metrics', 'main.health', 'main.health_cache', 'static')


def load_shop_state():
    """
    Load the shopper state into g (Flask's per-request global).

    Called before each request. A missing or malformed state starts a fresh
    session in the browse view.
    """
    if request.endpoint in _STATELESS_ENDPOINTS:
        return

    shop = session.get(SESSION_KEY)
    if not isinstance(shop, dict) or 'cart' not in shop:
        shop = new_shop_state()
    g.shop = shop


def save_shop_state(response):
    """Write g.shop back to the session cookie. Nested edits are not tracked by Flask."""
    shop = g.get('shop')
    if shop is not None:
        session[SESSION_KEY] = shop
    return response
