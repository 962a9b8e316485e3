"""
Models package initialization.
This file imports all models to make them available to Alembic for autogeneration.
"""

# IMPORTANT: Utiliser la MÊME Base que celle de database.py
from babobamboo.core.database import Base

from .user import User, Role, AccountType  # noqa: F401
from .language import Language  # noqa: F401
from .feature import FeatureSettings, FEATURE_DEFAULTS  # noqa: F401
from .product import Product, ProductTranslation  # noqa: F401
from .content import (  # noqa: F401
    Blog, BlogTranslation,
    Location, LocationTranslation,
    Faq, FaqTranslation,
    Province, ProvinceTranslation,
    Offer, OfferTranslation,
    OpenPosition, OpenPositionTranslation,
)
from .order import Order, OrderItem, PaymentStatus, PriceType, RatingState  # noqa: F401
from .rating import OrderRating  # noqa: F401

# Entités traduites exposées par l'API, indexées par segment d'URL
TRANSLATED_ENTITIES = {
    "products": Product,
    "blogs": Blog,
    "locations": Location,
    "faqs": Faq,
    "provinces": Province,
    "offers": Offer,
    "open-positions": OpenPosition,
}

__all__ = ['Base', 'TRANSLATED_ENTITIES']
