"""
Bundled reference data.

SERVICES is the seed catalog: it is upserted into the store from the admin
panel (or ``flask seed-catalog``) and served as the fallback catalog when the
store cannot be read. Domain, hosting and coupon tables are static.
"""
from decimal import Decimal

from storefront.models.offering import OfferingCategory

DURATION_KEYS = ('1m', '3m', '6m', '12m')
DEFAULT_DURATION = '1m'

DURATION_LABELS = {
    '1m': '1 month',
    '3m': '3 months',
    '6m': '6 months',
    '12m': '12 months',
}

SKIP = 'skip'


def _durations(one, three, six, twelve):
    return {
        '1m': Decimal(one),
        '3m': Decimal(three),
        '6m': Decimal(six),
        '12m': Decimal(twelve),
    }


SERVICES = [
    {
        'id': 'facebook-ads',
        'name': 'Facebook Ads Campaign',
        'category': OfferingCategory.DIGITAL_MARKETING.value,
        'icon': '📢',
        'original_price': Decimal('5000'),
        'discount_price': Decimal('3500'),
        'description': 'Campaign setup, audience targeting and weekly reporting',
        'search_tags': ['facebook', 'ads', 'boost', 'marketing'],
        'durations': None,
    },
    {
        'id': 'seo-basic',
        'name': 'SEO Optimization',
        'category': OfferingCategory.DIGITAL_MARKETING.value,
        'icon': '🔍',
        'original_price': Decimal('8000'),
        'discount_price': Decimal('6000'),
        'description': 'On-page SEO, keyword research and Google Search Console setup',
        'search_tags': ['seo', 'google', 'ranking'],
        'durations': None,
    },
    {
        'id': 'business-website',
        'name': 'Business Website',
        'category': OfferingCategory.WEBSITE_DESIGN.value,
        'icon': '🌐',
        'original_price': Decimal('25000'),
        'discount_price': Decimal('18000'),
        'description': 'Responsive 5-page business website with contact form',
        'search_tags': ['website', 'business', 'wordpress'],
        'durations': None,
    },
    {
        'id': 'ecommerce-website',
        'name': 'E-commerce Website',
        'category': OfferingCategory.WEBSITE_DESIGN.value,
        'icon': '🛒',
        'original_price': Decimal('45000'),
        'discount_price': Decimal('35000'),
        'description': 'Online store with product management and payment gateway integration',
        'search_tags': ['ecommerce', 'shop', 'online store', 'woocommerce'],
        'durations': None,
    },
    {
        'id': 'logo-design',
        'name': 'Logo Design',
        'category': OfferingCategory.GRAPHICS_DESIGN.value,
        'icon': '🎨',
        'original_price': Decimal('3000'),
        'discount_price': Decimal('1500'),
        'description': 'Three logo concepts with unlimited revisions',
        'search_tags': ['logo', 'branding', 'design'],
        'durations': None,
    },
    {
        'id': 'social-media-post',
        'name': 'Social Media Post Design (10 posts)',
        'category': OfferingCategory.GRAPHICS_DESIGN.value,
        'icon': '🖼️',
        'original_price': Decimal('2500'),
        'discount_price': Decimal('2000'),
        'description': 'Ten branded post designs for Facebook and Instagram',
        'search_tags': ['post', 'social', 'banner'],
        'durations': None,
    },
    {
        'id': 'promo-video',
        'name': 'Promotional Video Editing',
        'category': OfferingCategory.VIDEO_EDITING.value,
        'icon': '🎬',
        'original_price': Decimal('4000'),
        'discount_price': Decimal('3000'),
        'description': 'Up to 60 seconds, motion graphics and background music',
        'search_tags': ['video', 'reels', 'edit', 'promo'],
        'durations': None,
    },
    {
        'id': 'wp-theme',
        'name': 'Premium WordPress Theme',
        'category': OfferingCategory.TEMPLATES_THEMES.value,
        'icon': '🧩',
        'original_price': Decimal('1500'),
        'discount_price': Decimal('500'),
        'description': 'Licensed premium theme with installation',
        'search_tags': ['theme', 'wordpress', 'template'],
        'durations': None,
    },
    {
        'id': 'elementor-pro',
        'name': 'Elementor Pro',
        'category': OfferingCategory.PREMIUM_PLUGINS.value,
        'icon': '🔌',
        'original_price': Decimal('1200'),
        'discount_price': Decimal('600'),
        'description': 'Elementor Pro license activated on one website',
        'search_tags': ['elementor', 'plugin', 'page builder'],
        'durations': None,
    },
    {
        'id': 'netflix-premium',
        'name': 'Netflix Premium',
        'category': OfferingCategory.PREMIUM_SUBSCRIPTIONS.value,
        'icon': '🎞️',
        'original_price': Decimal('450'),
        'discount_price': Decimal('350'),
        'description': 'Private 4K profile on a shared premium account',
        'search_tags': ['netflix', 'movie', 'streaming'],
        'durations': _durations('350', '1000', '1900', '3600'),
    },
    {
        'id': 'canva-pro',
        'name': 'Canva Pro',
        'category': OfferingCategory.PREMIUM_SUBSCRIPTIONS.value,
        'icon': '✏️',
        'original_price': Decimal('300'),
        'discount_price': Decimal('200'),
        'description': 'Canva Pro on your own email address',
        'search_tags': ['canva', 'design', 'pro'],
        'durations': _durations('200', '550', '1000', '1800'),
    },
    {
        'id': 'social-management',
        'name': 'Social Media Management',
        'category': OfferingCategory.SUBSCRIPTION_PLANS.value,
        'icon': '📅',
        'original_price': Decimal('10000'),
        'discount_price': Decimal('8000'),
        'description': 'Page management, 20 posts a month and monthly report',
        'search_tags': ['management', 'page', 'monthly'],
        'durations': _durations('8000', '22500', '42000', '78000'),
    },
]

# Yearly registration price per extension
DOMAINS = [
    {'name': '.com', 'price': Decimal('1500')},
    {'name': '.net', 'price': Decimal('1700')},
    {'name': '.org', 'price': Decimal('1600')},
    {'name': '.xyz', 'price': Decimal('500')},
    {'name': '.com.bd', 'price': Decimal('2500')},
]

HOSTING_PLANS = [
    {'name': 'Starter', 'prices': _durations('300', '850', '1600', '3000')},
    {'name': 'Business', 'prices': _durations('600', '1700', '3200', '6000')},
    {'name': 'Premium', 'prices': _durations('1000', '2800', '5400', '10000')},
]

COUPONS = {
    'WELCOME10': {'discount': 10, 'label': '10% welcome discount'},
    'BSE20': {'discount': 20, 'label': '20% special discount'},
    'EID25': {'discount': 25, 'label': '25% Eid offer'},
}

DISTRICTS = [
    'Bagerhat', 'Bandarban', 'Barguna', 'Barishal', 'Bhola', 'Bogura',
    'Brahmanbaria', 'Chandpur', 'Chapai Nawabganj', 'Chattogram', 'Chuadanga',
    "Cox's Bazar", 'Cumilla', 'Dhaka', 'Dinajpur', 'Faridpur', 'Feni',
    'Gaibandha', 'Gazipur', 'Gopalganj', 'Habiganj', 'Jamalpur', 'Jashore',
    'Jhalokathi', 'Jhenaidah', 'Joypurhat', 'Khagrachhari', 'Khulna',
    'Kishoreganj', 'Kurigram', 'Kushtia', 'Lakshmipur', 'Lalmonirhat',
    'Madaripur', 'Magura', 'Manikganj', 'Meherpur', 'Moulvibazar',
    'Munshiganj', 'Mymensingh', 'Naogaon', 'Narail', 'Narayanganj',
    'Narsingdi', 'Natore', 'Netrokona', 'Nilphamari', 'Noakhali', 'Pabna',
    'Panchagarh', 'Patuakhali', 'Pirojpur', 'Rajbari', 'Rajshahi',
    'Rangamati', 'Rangpur', 'Satkhira', 'Shariatpur', 'Sherpur', 'Sirajganj',
    'Sunamganj', 'Sylhet', 'Tangail', 'Thakurgaon',
]


def find_domain(name):
    return next((d for d in DOMAINS if d['name'] == name), None)


def find_hosting_plan(name):
    return next((h for h in HOSTING_PLANS if h['name'] == name), None)
