"""Offering model (catalog entry)."""
import enum
from decimal import Decimal
from sqlalchemy import Column, String, Numeric, Text, JSON
from storefront.database import Base


class OfferingCategory(enum.Enum):
    """Fixed set of catalog categories."""
    DIGITAL_MARKETING = "Digital Marketing"
    WEBSITE_DESIGN = "Website Design"
    GRAPHICS_DESIGN = "Graphics Design"
    VIDEO_EDITING = "Video Editing"
    TEMPLATES_THEMES = "Templates & Themes"
    PREMIUM_SUBSCRIPTIONS = "Premium Subscriptions"
    PREMIUM_PLUGINS = "Premium Plugins"
    SUBSCRIPTION_PLANS = "Subscription Plans"

    @classmethod
    def values(cls):
        return [c.value for c in cls]


class Offering(Base):
    """
    Purchasable service, plan or subscription.

    Subscription-type offerings carry ``durations``: a mapping of duration key
    ('1m', '3m', '6m', '12m') to the absolute price for that period. For those,
    the line price comes from the selected duration, not ``discount_price``.
    """

    __tablename__ = 'services'

    id = Column(String(64), primary_key=True)
    name = Column(String(255), nullable=False)
    category = Column(String(64), nullable=False, index=True)
    icon = Column(String(16), nullable=True)
    original_price = Column(Numeric(12, 2), nullable=False)
    discount_price = Column(Numeric(12, 2), nullable=False)
    description = Column(Text, nullable=True)
    search_tags = Column(JSON, nullable=False, default=list)
    durations = Column(JSON, nullable=True)

    def __repr__(self):
        return f"<Offering(id='{self.id}', name='{self.name}', category='{self.category}')>"

    def to_dict(self):
        """Plain mapping used by the session cart, the cache and JSON responses."""
        return {
            'id': self.id,
            'name': self.name,
            'category': self.category,
            'icon': self.icon or '',
            'original_price': Decimal(str(self.original_price)),
            'discount_price': Decimal(str(self.discount_price)),
            'description': self.description or '',
            'search_tags': list(self.search_tags or []),
            'durations': (
                {k: Decimal(str(v)) for k, v in self.durations.items()}
                if self.durations else None
            ),
        }
