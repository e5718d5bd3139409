"""Invoice service - read-only views, share message and PDF export of a persisted order."""

from decimal import Decimal
from io import BytesIO
from typing import Any, Dict
from urllib.parse import quote
from xml.sax.saxutils import escape

from reportlab.lib.pagesizes import A4
from reportlab.lib import colors
from reportlab.lib.units import inch
from reportlab.platypus import SimpleDocTemplate, Table, TableStyle, Paragraph, Spacer
from reportlab.lib.styles import getSampleStyleSheet, ParagraphStyle
from reportlab.lib.enums import TA_CENTER

from storefront.models import Order
from storefront.utils.formatters import date_bd, datetime_bd, money_bd

PDF_CURRENCY = 'Tk '

PAYMENT_STATUS_LABELS = {
    'pending': 'Payment pending',
}


def invoice_context(order: Order) -> Dict[str, Any]:
    """Everything the invoice screen shows, built only from the stored order."""
    return {
        'invoice_number': order.invoice_number,
        'created_at': order.created_at,
        'status': order.status,
        'status_label': PAYMENT_STATUS_LABELS.get(order.status, order.status),
        'customer': {
            'full_name': order.full_name,
            'mobile': order.mobile,
            'email': order.email or '',
            'whatsapp': order.whatsapp or '',
            'business_name': order.business_name or '',
            'business_type': order.business_type or '',
            'business_link': order.business_link or '',
            'address': ', '.join(p for p in (order.address, order.upazila, order.district) if p),
            'start_date': order.start_date,
        },
        'items': [dict(item) for item in order.items],
        'subtotal': Decimal(str(order.subtotal_amount)),
        'coupon': (
            {'code': order.coupon_code, 'discount_percent': Decimal(str(order.coupon_percent))}
            if order.coupon_code else None
        ),
        'discount_amount': Decimal(str(order.discount_amount)),
        'total': Decimal(str(order.total_amount)),
    }


def build_share_message(order: Order) -> str:
    """Plain-text summary sent over WhatsApp: invoice number, total, buyer name and mobile."""
    return (
        f"New order invoice: {order.invoice_number}\n"
        f"Total: {money_bd(order.total_amount)}\n"
        f"Client: {order.full_name}\n"
        f"Mobile: {order.mobile}"
    )


def build_share_url(order: Order, phone: str) -> str:
    return f"https://wa.me/{phone}?text={quote(build_share_message(order))}"


def render_invoice_pdf(order: Order, business_info: Dict[str, Any]) -> BytesIO:
    """Render an A4 invoice for a persisted order."""
    buffer = BytesIO()
    doc = SimpleDocTemplate(
        buffer,
        pagesize=A4,
        rightMargin=0.75*inch,
        leftMargin=0.75*inch,
        topMargin=0.75*inch,
        bottomMargin=0.75*inch,
        title=f"Invoice {order.invoice_number}"
    )

    elements = []
    styles = getSampleStyleSheet()

    title_style = ParagraphStyle(
        'InvoiceTitle',
        parent=styles['Heading1'],
        fontSize=22,
        textColor=colors.HexColor('#0284C7'),
        spaceAfter=6,
        alignment=TA_CENTER,
        fontName='Helvetica-Bold'
    )
    header_style = ParagraphStyle(
        'InvoiceHeader',
        parent=styles['Normal'],
        fontSize=10,
        textColor=colors.HexColor('#64748B'),
        alignment=TA_CENTER,
        spaceAfter=4
    )

    # 1. Business header
    elements.append(Paragraph(escape(business_info.get("name") or "INVOICE"), title_style))
    if business_info.get('tagline'):
        elements.append(Paragraph(escape(business_info["tagline"]), header_style))
    contact_parts = [p for p in (business_info.get('address'), business_info.get('phone'),
                                 business_info.get('email')) if p]
    if contact_parts:
        elements.append(Paragraph(escape(" | ".join(contact_parts)), header_style))
    elements.append(Spacer(1, 0.3*inch))

    # 2. Invoice metadata and client
    context = invoice_context(order)
    customer = context['customer']
    meta_rows = [
        ['Invoice No:', order.invoice_number],
        ['Date:', datetime_bd(order.created_at)],
        ['Payment status:', context['status_label']],
        ['Client:', customer['full_name']],
        ['Mobile:', customer['mobile']],
        ['Business:', customer['business_name']],
    ]
    if customer['address']:
        meta_rows.append(['Address:', customer['address']])
    if customer['start_date']:
        meta_rows.append(['Start date:', date_bd(customer['start_date'])])

    meta_table = Table(meta_rows, colWidths=[1.6*inch, 4.4*inch])
    meta_table.setStyle(TableStyle([
        ('ALIGN', (0, 0), (0, -1), 'RIGHT'),
        ('FONTNAME', (0, 0), (0, -1), 'Helvetica-Bold'),
        ('FONTSIZE', (0, 0), (-1, -1), 10),
        ('TEXTCOLOR', (0, 0), (-1, -1), colors.HexColor('#334155')),
    ]))
    elements.append(meta_table)
    elements.append(Spacer(1, 0.3*inch))

    # 3. Items
    table_data = [['#', 'Service', 'Qty', 'Unit price', 'Amount']]
    for idx, item in enumerate(context['items'], start=1):
        name = item['name']
        if item.get('duration_label') and item['type'] == 'service':
            name = f"{name} ({item['duration_label']})"
        table_data.append([
            str(idx),
            name,
            str(item['quantity']),
            money_bd(item['price'], symbol=PDF_CURRENCY),
            money_bd(item['line_total'], symbol=PDF_CURRENCY),
        ])

    items_table = Table(table_data, colWidths=[0.4*inch, 3.3*inch, 0.6*inch, 1.2*inch, 1.2*inch], repeatRows=1)
    items_table.setStyle(TableStyle([
        ('BACKGROUND', (0, 0), (-1, 0), colors.HexColor('#0284C7')),
        ('TEXTCOLOR', (0, 0), (-1, 0), colors.whitesmoke),
        ('FONTNAME', (0, 0), (-1, 0), 'Helvetica-Bold'),
        ('BOTTOMPADDING', (0, 0), (-1, 0), 10),
        ('ALIGN', (2, 1), (2, -1), 'CENTER'),
        ('ALIGN', (3, 1), (-1, -1), 'RIGHT'),
        ('GRID', (0, 0), (-1, -1), 0.5, colors.HexColor('#CBD5E1')),
        ('ROWBACKGROUNDS', (0, 1), (-1, -1), [colors.white, colors.HexColor('#F0F9FF')]),
    ]))
    elements.append(items_table)
    elements.append(Spacer(1, 0.2*inch))

    # 4. Totals
    totals_rows = [['Subtotal:', money_bd(context['subtotal'], symbol=PDF_CURRENCY)]]
    if context['coupon']:
        percent = context['coupon']['discount_percent'].normalize()
        totals_rows.append([f"Coupon {context['coupon']['code']} ({percent:f}%):",
                            f"- {money_bd(context['discount_amount'], symbol=PDF_CURRENCY)}"])
    totals_rows.append(['TOTAL DUE:', money_bd(context['total'], symbol=PDF_CURRENCY)])

    totals_table = Table(totals_rows, colWidths=[5.5*inch, 1.2*inch])
    totals_table.setStyle(TableStyle([
        ('ALIGN', (0, 0), (-1, -1), 'RIGHT'),
        ('FONTNAME', (0, -1), (-1, -1), 'Helvetica-Bold'),
        ('FONTSIZE', (0, -1), (-1, -1), 13),
        ('TEXTCOLOR', (0, -1), (-1, -1), colors.HexColor('#0284C7')),
        ('LINEABOVE', (0, -1), (-1, -1), 1.5, colors.HexColor('#0284C7')),
    ]))
    elements.append(totals_table)
    elements.append(Spacer(1, 0.4*inch))

    # 5. Payment instructions
    footer_style = ParagraphStyle('Footer', parent=styles['Normal'], fontSize=9,
                                  textColor=colors.HexColor('#94A3B8'), alignment=TA_CENTER)
    footer_text = "<b>Payment methods:</b> bKash / Nagad / Rocket"
    if business_info.get('payment_number'):
        footer_text += f" - {business_info['payment_number']}"
    footer_text += "<br/>Contact us for bank transfer.<br/><br/>Thank you for your order!"
    elements.append(Paragraph(footer_text, footer_style))

    doc.build(elements)
    buffer.seek(0)
    return buffer
