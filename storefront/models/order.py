"""Order model for completed checkouts."""
from sqlalchemy import Column, BigInteger, Integer, String, Numeric, DateTime, Date, Text, JSON
from sqlalchemy.sql import func
from storefront.database import Base


class OrderStatus:
    """Order status values. Only PENDING is ever written by this application."""
    PENDING = 'pending'


class Order(Base):
    """
    Immutable record of a completed checkout.

    ``items`` is a snapshot of the cart lines at submission time; neither the
    items nor the amounts are updated after insert.
    """

    __tablename__ = 'orders'

    # SQLite only auto-increments INTEGER primary keys
    id = Column(BigInteger().with_variant(Integer, 'sqlite'), primary_key=True, autoincrement=True)
    invoice_number = Column(String(32), nullable=False, unique=True)

    # Buyer
    full_name = Column(String(255), nullable=False)
    mobile = Column(String(32), nullable=False)
    email = Column(String(255), nullable=True)
    whatsapp = Column(String(32), nullable=True)

    # Business
    business_name = Column(String(255), nullable=True)
    business_type = Column(String(128), nullable=True)
    business_link = Column(String(512), nullable=True)

    # Address & schedule
    district = Column(String(64), nullable=True)
    upazila = Column(String(128), nullable=True)
    address = Column(Text, nullable=True)
    start_date = Column(Date, nullable=True)
    instructions = Column(Text, nullable=True)
    source = Column(String(64), nullable=True)

    # Amounts
    subtotal_amount = Column(Numeric(14, 2), nullable=False, default=0)
    discount_amount = Column(Numeric(14, 2), nullable=False, default=0)
    coupon_code = Column(String(32), nullable=True)
    coupon_percent = Column(Numeric(5, 2), nullable=True)
    total_amount = Column(Numeric(14, 2), nullable=False)

    items = Column(JSON, nullable=False)
    status = Column(String(20), nullable=False, default=OrderStatus.PENDING)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())

    def __repr__(self):
        return f"<Order(id={self.id}, invoice='{self.invoice_number}', total={self.total_amount}, status='{self.status}')>"
