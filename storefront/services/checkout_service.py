"""Checkout service - buyer details validation, invoice numbering and order persistence."""

import logging
import random
from datetime import date, datetime
from decimal import Decimal
from typing import Any, Callable, Dict, List, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from storefront.exceptions import MissingRequiredFieldError, NotFoundError, ValidationError
from storefront.exceptions import PersistenceError
from storefront.models import Order, OrderStatus
from storefront.services.pricing_service import compute_totals, line_total, to_decimal

logger = logging.getLogger(__name__)

REQUIRED_FIELDS = ('full_name', 'mobile', 'business_name', 'district', 'start_date')

TEXT_FIELDS = (
    'full_name', 'mobile', 'email', 'whatsapp',
    'business_name', 'business_type', 'business_link',
    'district', 'upazila', 'address', 'start_date',
    'instructions', 'source',
)

FIELD_LABELS = {
    'full_name': 'Full name',
    'mobile': 'Mobile number',
    'business_name': 'Business name',
    'district': 'District',
    'start_date': 'Preferred start date',
}


def empty_details() -> Dict[str, Any]:
    """Blank checkout form; the WhatsApp number mirrors the mobile number by default."""
    details = {field: '' for field in TEXT_FIELDS}
    details['whatsapp_same'] = True
    return details


def _as_bool(value: Any) -> bool:
    if isinstance(value, bool):
        return value
    return str(value).strip().lower() in ('1', 'true', 'on', 'yes')


def update_details(details: Dict[str, Any], data: Dict[str, Any]) -> Dict[str, Any]:
    """Merge submitted form values into the stored checkout details. Unknown keys are ignored."""
    for field in TEXT_FIELDS:
        if field in data:
            value = data[field]
            details[field] = '' if value is None else str(value).strip()
    if 'whatsapp_same' in data:
        details['whatsapp_same'] = _as_bool(data['whatsapp_same'])
    return details


def missing_fields(details: Dict[str, Any]) -> List[str]:
    return [field for field in REQUIRED_FIELDS if not str(details.get(field) or '').strip()]


def validate(details: Dict[str, Any]) -> None:
    """Raise MissingRequiredFieldError naming every empty required field."""
    missing = missing_fields(details)
    if missing:
        raise MissingRequiredFieldError(missing)


def effective_whatsapp(details: Dict[str, Any]) -> str:
    if details.get('whatsapp_same', True):
        return details.get('mobile', '')
    return details.get('whatsapp', '')


def _parse_start_date(value: str) -> date:
    try:
        return datetime.strptime(value, '%Y-%m-%d').date()
    except (TypeError, ValueError):
        raise ValidationError('Preferred start date must be in YYYY-MM-DD format.')


def generate_invoice_number(prefix: str = 'BSE', today: Optional[date] = None,
                            randint: Callable[[int, int], int] = random.randint) -> str:
    """
    Invoice number: <prefix>-<year>-<4 random digits in [1000, 9999]>.

    Not globally unique; a collision is rejected by the unique constraint on
    orders.invoice_number and surfaces as a PersistenceError.
    """
    year = (today or date.today()).year
    return f"{prefix}-{year}-{randint(1000, 9999)}"


def snapshot_lines(lines: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
    """Copy cart lines into the JSON form stored on the order."""
    return [
        {
            'key': line['key'],
            'offering_id': line.get('offering_id'),
            'type': line['type'],
            'name': line['name'],
            'category': line.get('category', ''),
            'duration': line.get('duration'),
            'duration_label': line.get('duration_label', ''),
            'quantity': int(line['quantity']),
            'price': str(to_decimal(line['price'])),
            'line_total': str(line_total(line)),
        }
        for line in lines
    ]


def submit(
    session: Session,
    details: Dict[str, Any],
    lines: List[Dict[str, Any]],
    coupon: Optional[Dict[str, Any]] = None,
    invoice_prefix: str = 'BSE',
    invoice_number: Optional[str] = None
) -> Order:
    """
    Validate and persist an order in a single commit.

    Validation failures never touch the store. A failed write is rolled back
    and raised as PersistenceError; the caller's cart and form stay as they were.
    """
    validate(details)
    if not lines:
        raise ValidationError('Your cart is empty.')
    start_date = _parse_start_date(details['start_date'])

    totals = compute_totals(lines, coupon)
    order = Order(
        invoice_number=invoice_number or generate_invoice_number(invoice_prefix),
        full_name=details['full_name'],
        mobile=details['mobile'],
        email=details.get('email') or None,
        whatsapp=effective_whatsapp(details) or None,
        business_name=details['business_name'],
        business_type=details.get('business_type') or None,
        business_link=details.get('business_link') or None,
        district=details['district'],
        upazila=details.get('upazila') or None,
        address=details.get('address') or None,
        start_date=start_date,
        instructions=details.get('instructions') or None,
        source=details.get('source') or None,
        subtotal_amount=totals['subtotal'],
        discount_amount=totals['discount_amount'],
        coupon_code=coupon['code'] if coupon else None,
        coupon_percent=Decimal(str(coupon['discount_percent'])) if coupon else None,
        total_amount=totals['total'],
        items=snapshot_lines(lines),
        status=OrderStatus.PENDING,
    )

    try:
        session.add(order)
        session.commit()
    except SQLAlchemyError as e:
        session.rollback()
        logger.error(f"[CHECKOUT] Failed to save order {order.invoice_number}: {e}")
        raise PersistenceError('Could not save your order. Please try again.')

    logger.info(f"[CHECKOUT] Order {order.invoice_number} saved, total={totals['total']}")
    return order


def get_order_by_invoice(session: Session, invoice_number: str) -> Order:
    order = session.query(Order).filter(Order.invoice_number == invoice_number).first()
    if not order:
        raise NotFoundError(f'Invoice {invoice_number} not found.')
    return order
