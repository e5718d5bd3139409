"""Invoice blueprint - view, PDF export and WhatsApp share of the submitted order."""
from flask import Blueprint, jsonify, send_file, current_app, g

from storefront.database import get_session
from storefront.decorators.views import require_view
from storefront.services import checkout_service, invoice_service, view_state_service
from storefront.services.view_state_service import ViewState

invoice_bp = Blueprint('invoice', __name__, url_prefix='/invoice')


def _current_order():
    return checkout_service.get_order_by_invoice(get_session(), g.shop['invoice_number'])


def _business_info():
    config = current_app.config
    return {
        'name': config.get('BUSINESS_NAME'),
        'tagline': config.get('BUSINESS_TAGLINE'),
        'address': config.get('BUSINESS_ADDRESS'),
        'phone': config.get('BUSINESS_PHONE'),
        'email': config.get('BUSINESS_EMAIL'),
        'payment_number': config.get('PAYMENT_NUMBER'),
    }


@invoice_bp.route('', methods=['GET'])
@require_view(ViewState.INVOICE)
def show():
    """Invoice built from the stored order, independent of the current cart."""
    context = invoice_service.invoice_context(_current_order())
    context['business'] = _business_info()
    return jsonify(context)


@invoice_bp.route('/pdf')
@require_view(ViewState.INVOICE)
def pdf():
    order = _current_order()
    try:
        buffer = invoice_service.render_invoice_pdf(order, _business_info())
    except Exception as e:
        current_app.logger.error(f"[INVOICE] PDF generation failed for {order.invoice_number}: {e}")
        raise

    return send_file(
        buffer,
        mimetype='application/pdf',
        as_attachment=True,
        download_name=f"Invoice-{order.invoice_number}.pdf"
    )


@invoice_bp.route('/share')
@require_view(ViewState.INVOICE)
def share():
    order = _current_order()
    return jsonify({
        'message': invoice_service.build_share_message(order),
        'url': invoice_service.build_share_url(order, current_app.config['WHATSAPP_NUMBER']),
    })


@invoice_bp.route('/new-order', methods=['POST'])
def new_order():
    """Invoice -> Browse with a full reset of cart, coupon and checkout form."""
    view_state_service.start_new_order(g.shop)
    return jsonify(view_state_service.describe(g.shop))
