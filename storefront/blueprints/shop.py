"""Shop blueprint - catalog browsing, cart and coupon (single shopper session)."""
from flask import Blueprint, request, jsonify, current_app, g

from storefront.data import DEFAULT_DURATION, DOMAINS, DURATION_LABELS, HOSTING_PLANS, SKIP
from storefront.database import get_session
from storefront.decorators.views import require_view, request_payload
from storefront.exceptions import InvalidCouponCode, ValidationError
from storefront.models import OfferingCategory
from storefront.services import cart_service, catalog_service, coupon_service, view_state_service
from storefront.services.pricing_service import comparison_price, savings, unit_price
from storefront.services.view_state_service import CART_EDITABLE_VIEWS
from storefront.blueprints.metrics import cart_mutations_total, coupon_attempts_total

shop_bp = Blueprint('shop', __name__)


def _offering_view(offering):
    """Catalog entry with its sellable, comparison and savings amounts at the default duration."""
    duration = DEFAULT_DURATION if offering.get('durations') else None
    return dict(
        offering,
        price=unit_price(offering, duration),
        comparison_price=comparison_price(offering, duration),
        savings=savings(offering, duration),
    )


def _cart_response(**extra):
    body = {'status': 'success', 'cart': cart_service.cart_summary(g.shop)}
    body.update(extra)
    return jsonify(body)


def _parse_delta(value):
    try:
        return int(value)
    except (TypeError, ValueError):
        raise ValidationError('Quantity change must be a whole number.')


@shop_bp.route('/')
def index():
    """Current session state."""
    return jsonify(view_state_service.describe(g.shop))


@shop_bp.route('/catalog')
def catalog():
    """Catalog filtered by ?q= and ?category= (falls back to the bundled catalog)."""
    offerings, notice = catalog_service.load_catalog(get_session())
    if notice:
        current_app.logger.warning(f"[CATALOG] Serving bundled catalog: {notice['kind']}")

    results = catalog_service.search_offerings(
        offerings,
        request.args.get('q', ''),
        request.args.get('category', '')
    )
    return jsonify({
        'offerings': [_offering_view(o) for o in results],
        'count': len(results),
        'categories': [catalog_service.ALL_CATEGORIES] + OfferingCategory.values(),
        'notice': notice,
    })


@shop_bp.route('/catalog/reference')
def reference():
    """Static tables: add-on domains and hosting plans, duration labels."""
    return jsonify({
        'domains': DOMAINS,
        'hosting_plans': HOSTING_PLANS,
        'durations': DURATION_LABELS,
    })


@shop_bp.route('/cart')
def cart():
    return jsonify(cart_service.cart_summary(g.shop))


@shop_bp.route('/cart/add', methods=['POST'])
@require_view(*CART_EDITABLE_VIEWS)
def cart_add():
    payload = request_payload()
    offering_id = (payload.get('offering_id') or '').strip()
    if not offering_id:
        raise ValidationError('offering_id is required.')

    offerings, _ = catalog_service.load_catalog(get_session())
    offering = catalog_service.find_offering(offerings, offering_id)

    line, prompt = cart_service.add_to_cart(g.shop['cart'], offering, payload.get('duration') or None)
    if prompt:
        g.shop['addon_prompt'] = {'id': offering['id'], 'name': offering['name']}
    cart_mutations_total.labels(operation='add').inc()

    return _cart_response(line=line, addon_prompt=prompt)


@shop_bp.route('/cart/remove', methods=['POST'])
@require_view(*CART_EDITABLE_VIEWS)
def cart_remove():
    payload = request_payload()
    cart_service.remove_from_cart(g.shop['cart'], payload.get('key', ''))
    cart_mutations_total.labels(operation='remove').inc()
    return _cart_response()


@shop_bp.route('/cart/quantity', methods=['POST'])
@require_view(*CART_EDITABLE_VIEWS)
def cart_quantity():
    payload = request_payload()
    line = cart_service.update_quantity(
        g.shop['cart'],
        payload.get('key', ''),
        _parse_delta(payload.get('delta'))
    )
    cart_mutations_total.labels(operation='quantity').inc()
    return _cart_response(line=line)


@shop_bp.route('/cart/addons', methods=['POST'])
@require_view(*CART_EDITABLE_VIEWS)
def cart_addons():
    """Add the chosen domain and/or hosting plan, closing the add-on prompt."""
    payload = request_payload()
    added = cart_service.add_addons(
        g.shop['cart'],
        payload.get('domain') or SKIP,
        payload.get('hosting') or SKIP,
        payload.get('hosting_duration') or DEFAULT_DURATION
    )
    cart_service.dismiss_addons(g.shop)
    if added:
        cart_mutations_total.labels(operation='addons').inc()
    return _cart_response(added=added)


@shop_bp.route('/cart/addons/skip', methods=['POST'])
def cart_addons_skip():
    cart_service.dismiss_addons(g.shop)
    return _cart_response()


@shop_bp.route('/coupon/apply', methods=['POST'])
@require_view(*CART_EDITABLE_VIEWS)
def coupon_apply():
    payload = request_payload()
    try:
        coupon = coupon_service.apply_coupon(g.shop, payload.get('code'))
    except InvalidCouponCode:
        coupon_attempts_total.labels(result='invalid').inc()
        raise
    coupon_attempts_total.labels(result='applied').inc()
    return _cart_response(coupon=coupon, message=f"Coupon applied: {coupon['label']}")


@shop_bp.route('/coupon/remove', methods=['POST'])
@require_view(*CART_EDITABLE_VIEWS)
def coupon_remove():
    coupon_service.remove_coupon(g.shop)
    return _cart_response()
