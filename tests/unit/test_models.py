"""
Unit tests for SQLAlchemy models.
"""

import pytest
from datetime import date
from decimal import Decimal

from sqlalchemy.exc import IntegrityError

from storefront.models import Offering, OfferingCategory, Order, OrderStatus


def _order(invoice_number):
    return Order(
        invoice_number=invoice_number,
        full_name='Test Buyer',
        mobile='01700000000',
        business_name='Test Shop',
        district='Dhaka',
        start_date=date(2026, 12, 1),
        subtotal_amount=Decimal('100'),
        discount_amount=Decimal('0'),
        total_amount=Decimal('100'),
        items=[{'key': 'x', 'quantity': 1, 'price': '100', 'line_total': '100'}],
    )


class TestOfferingModel:
    """Tests for Offering model."""

    def test_create_offering(self, session):
        offering = Offering(
            id='test-offering',
            name='Test Offering',
            category=OfferingCategory.GRAPHICS_DESIGN.value,
            original_price=Decimal('1000'),
            discount_price=Decimal('750.50'),
            search_tags=['test'],
        )
        session.add(offering)
        session.commit()

        data = session.query(Offering).filter_by(id='test-offering').one().to_dict()
        assert data['discount_price'] == Decimal('750.50')
        assert data['durations'] is None
        assert data['icon'] == ''
        assert data['search_tags'] == ['test']

    def test_categories(self):
        assert len(OfferingCategory.values()) == 8
        assert 'Website Design' in OfferingCategory.values()


class TestOrderModel:
    """Tests for Order model."""

    def test_create_order(self, session):
        order = _order('BSE-2026-1001')
        session.add(order)
        session.commit()

        assert order.id is not None
        assert order.status == OrderStatus.PENDING
        assert order.created_at is not None

    def test_invoice_number_unique(self, session):
        session.add(_order('BSE-2026-1002'))
        session.commit()

        session.add(_order('BSE-2026-1002'))
        with pytest.raises(IntegrityError):
            session.commit()
        session.rollback()
