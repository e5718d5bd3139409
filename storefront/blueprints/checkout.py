"""Checkout blueprint - buyer details and order submission."""
from flask import Blueprint, jsonify, current_app, g

from storefront.data import DISTRICTS
from storefront.database import get_session
from storefront.decorators.views import require_view, request_payload
from storefront.exceptions import PersistenceError
from storefront.services import cart_service, checkout_service, view_state_service
from storefront.services.view_state_service import ViewState
from storefront.blueprints.metrics import orders_submitted_total, order_failures_total

checkout_bp = Blueprint('checkout', __name__, url_prefix='/checkout')


def _checkout_form():
    details = g.shop['checkout']
    return {
        'details': details,
        'missing_fields': checkout_service.missing_fields(details),
        'required_fields': list(checkout_service.REQUIRED_FIELDS),
        'field_labels': checkout_service.FIELD_LABELS,
        'districts': DISTRICTS,
    }


@checkout_bp.route('/start', methods=['POST'])
def start():
    """Browse -> Checkout. The cart must not be empty."""
    view_state_service.proceed_to_checkout(g.shop)
    return jsonify(dict(view_state_service.describe(g.shop), form=_checkout_form()))


@checkout_bp.route('', methods=['GET'])
@require_view(ViewState.CHECKOUT)
def show():
    return jsonify(dict(view_state_service.describe(g.shop), form=_checkout_form()))


@checkout_bp.route('/details', methods=['POST'])
@require_view(ViewState.CHECKOUT)
def details():
    """Save form values in the session without validating them."""
    checkout_service.update_details(g.shop['checkout'], request_payload())
    return jsonify({'status': 'success', 'form': _checkout_form()})


@checkout_bp.route('/continue-shopping', methods=['POST'])
def continue_shopping():
    view_state_service.continue_shopping(g.shop)
    return jsonify(view_state_service.describe(g.shop))


@checkout_bp.route('/submit', methods=['POST'])
@require_view(ViewState.CHECKOUT)
def submit():
    """
    Validate, persist the order and move to the invoice screen.

    On any failure the view stays on checkout with cart and form intact.
    """
    shop = g.shop
    payload = request_payload()
    if payload:
        checkout_service.update_details(shop['checkout'], payload)

    try:
        order = checkout_service.submit(
            get_session(),
            shop['checkout'],
            shop['cart']['lines'],
            shop.get('coupon'),
            invoice_prefix=current_app.config.get('INVOICE_PREFIX', 'BSE')
        )
    except PersistenceError:
        order_failures_total.inc()
        raise

    view_state_service.complete_checkout(shop, order.invoice_number)
    cart_service.dismiss_addons(shop)
    orders_submitted_total.inc()
    current_app.logger.info(f"[CHECKOUT] Invoice {order.invoice_number} issued")

    return jsonify({
        'status': 'success',
        'message': 'Order placed successfully!',
        'invoice_number': order.invoice_number,
        'total': order.total_amount,
        'view': shop['view'],
        'transition_delay_ms': current_app.config.get('INVOICE_TRANSITION_DELAY_MS', 1500),
    })
