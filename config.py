"""Configuration module for Flask application."""
import os
from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()


class Config:
    """Base configuration class."""

    # Flask
    SECRET_KEY = os.getenv('SECRET_KEY', 'dev-secret-key-change-in-production')
    DEBUG = os.getenv('FLASK_DEBUG', '1') == '1'
    ENV = os.getenv('FLASK_ENV', 'development')

    # Session Configuration (Production-safe defaults)
    SESSION_COOKIE_SECURE = os.getenv('SESSION_COOKIE_SECURE', 'false').lower() == 'true'
    SESSION_COOKIE_HTTPONLY = True
    SESSION_COOKIE_SAMESITE = os.getenv('SESSION_COOKIE_SAMESITE', 'Lax')
    PERMANENT_SESSION_LIFETIME = 86400  # 24 hours

    # Database - Priority: DATABASE_URL > DB_* > POSTGRES_*
    DATABASE_URL = os.getenv('DATABASE_URL')

    if not DATABASE_URL:
        DB_HOST = os.getenv('DB_HOST') or os.getenv('POSTGRES_HOST', 'localhost')
        DB_PORT = os.getenv('DB_PORT') or os.getenv('POSTGRES_PORT', '5432')
        DB_NAME = os.getenv('DB_NAME') or os.getenv('POSTGRES_DB', 'storefront')
        DB_USER = os.getenv('DB_USER') or os.getenv('POSTGRES_USER', 'storefront')
        DB_PASSWORD = os.getenv('DB_PASSWORD') or os.getenv('POSTGRES_PASSWORD', 'storefront')

        DATABASE_URL = (
            f"postgresql://{DB_USER}:{DB_PASSWORD}"
            f"@{DB_HOST}:{DB_PORT}/{DB_NAME}"
        )

    # SQLAlchemy
    SQLALCHEMY_DATABASE_URI = DATABASE_URL
    SQLALCHEMY_ECHO = os.getenv('SQLALCHEMY_ECHO', '0') == '1'

    # Business Information (printed on invoices)
    BUSINESS_NAME = os.getenv('BUSINESS_NAME', 'Best Solution Experts')
    BUSINESS_TAGLINE = os.getenv('BUSINESS_TAGLINE', 'Digital Marketing & Technology Agency')
    BUSINESS_ADDRESS = os.getenv('BUSINESS_ADDRESS', 'Dhaka, Bangladesh')
    BUSINESS_PHONE = os.getenv('BUSINESS_PHONE', '01843067118')
    BUSINESS_EMAIL = os.getenv('BUSINESS_EMAIL', '')
    PAYMENT_NUMBER = os.getenv('PAYMENT_NUMBER', '01843067118')  # bKash / Nagad / Rocket

    # Order sharing
    WHATSAPP_NUMBER = os.getenv('WHATSAPP_NUMBER', '8801843067118')

    # Checkout
    INVOICE_PREFIX = os.getenv('INVOICE_PREFIX', 'BSE')
    # Delay the client waits before navigating to the invoice (success notice stays visible)
    INVOICE_TRANSITION_DELAY_MS = int(os.getenv('INVOICE_TRANSITION_DELAY_MS', '1500'))

    # Redis Cache Configuration
    REDIS_URL = os.getenv('REDIS_URL', 'redis://redis:6379/0')
    CACHE_ENABLED = os.getenv('CACHE_ENABLED', 'true').lower() == 'true'
    CACHE_CATALOG_TTL = int(os.getenv('CACHE_CATALOG_TTL', '300'))
    CACHE_KEY_PREFIX = os.getenv('CACHE_KEY_PREFIX', 'storefront')
