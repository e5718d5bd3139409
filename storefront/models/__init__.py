"""Models package - exports all SQLAlchemy models."""
from storefront.models.offering import Offering, OfferingCategory
from storefront.models.order import Order, OrderStatus

__all__ = [
    'Offering', 'OfferingCategory',
    'Order', 'OrderStatus',
]
