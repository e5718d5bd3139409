"""Admin blueprint - catalog price edits, new offerings, seeding and setup SQL."""
from flask import Blueprint, jsonify, current_app, g, Response
from werkzeug.datastructures import MultiDict

from storefront.database import get_session
from storefront.decorators.views import require_view, request_payload
from storefront.exceptions import ValidationError
from storefront.forms.admin_forms import OfferingForm, PriceUpdateForm, first_errors
from storefront.models import OfferingCategory
from storefront.services import catalog_service, view_state_service
from storefront.services.view_state_service import ViewState

admin_bp = Blueprint('admin', __name__, url_prefix='/admin')


def _formdata(payload):
    """Bind JSON values as strings so 0 is not mistaken for a missing input."""
    return MultiDict({k: str(v) for k, v in payload.items() if v is not None})


def _validated(form):
    if not form.validate():
        errors = first_errors(form)
        raise ValidationError(
            'Please correct the highlighted fields.',
            payload={'error': 'invalid_form', 'fields': errors}
        )
    return form


@admin_bp.route('/toggle', methods=['POST'])
def toggle():
    """Open or close the admin panel. Cart, coupon and checkout form are untouched."""
    view = view_state_service.toggle_admin(g.shop)
    return jsonify({'status': 'success', 'view': view.value})


@admin_bp.route('/offerings', methods=['GET'])
def offerings():
    """Every offering in the store. Unlike the shop catalog there is no fallback."""
    items = catalog_service.list_offerings(get_session())
    return jsonify({
        'offerings': items,
        'count': len(items),
        'categories': OfferingCategory.values(),
    })


@admin_bp.route('/offerings/<offering_id>/price', methods=['POST'])
@require_view(ViewState.ADMIN)
def update_price(offering_id):
    form = _validated(PriceUpdateForm(formdata=_formdata(request_payload())))

    offering = catalog_service.update_price(
        get_session(),
        offering_id,
        form.original_price.data,
        form.discount_price.data
    )
    current_app.logger.info(f"[ADMIN] Price updated for {offering_id}")
    return jsonify({'status': 'success', 'message': 'Price updated!', 'offering': offering})


@admin_bp.route('/offerings', methods=['POST'])
@require_view(ViewState.ADMIN)
def create_offering():
    form = _validated(OfferingForm(formdata=_formdata(request_payload())))

    created, items = catalog_service.create_offering(get_session(), form.to_draft())
    current_app.logger.info(f"[ADMIN] Offering created: {created['id']}")
    return jsonify({
        'status': 'success',
        'message': 'New service added!',
        'offering': created,
        'offerings': items,
    }), 201


@admin_bp.route('/seed', methods=['POST'])
@require_view(ViewState.ADMIN)
def seed():
    """Upsert the bundled catalog into the store."""
    items = catalog_service.seed_catalog(get_session())
    return jsonify({
        'status': 'success',
        'message': f'Synced {len(items)} services to the database.',
        'offerings': items,
    })


@admin_bp.route('/setup-sql')
def setup_sql():
    """DDL to run once when the store reports missing tables."""
    return Response(catalog_service.setup_sql(), mimetype='text/plain')
