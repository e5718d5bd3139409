"""
View decorators for the shopper screen state.
"""

from functools import wraps
from flask import g, request

from storefront.services import view_state_service


def require_view(*allowed_views):
    """
    Decorator to restrict a route to some screens of the shopper session.

    Usage:
        @require_view(ViewState.CHECKOUT)
        @require_view(ViewState.BROWSE, ViewState.CHECKOUT)

    Raises IllegalTransitionError (409) from any other screen.
    """
    def decorator(f):
        @wraps(f)
        def decorated_function(*args, **kwargs):
            view_state_service.require_view(g.shop, *allowed_views)
            return f(*args, **kwargs)

        return decorated_function
    return decorator


def request_payload():
    """JSON body or form fields of the current request."""
    return request.get_json(silent=True) or request.form.to_dict()
