# ===================================
# babobamboo/schemas/content.py
# ===================================
"""
Schémas d'écriture des entités traduites.

Chaque entité reçoit ses champs de base et un dictionnaire
`translations` indexé par code langue :

    {"retail_price": 12.5, "translations": {"en": {"name": "Cup"}, "nl": {"name": "Beker"}}}

Les champs absents ne sont pas modifiés lors d'une mise à jour.
"""
from datetime import datetime
from decimal import Decimal
from typing import Dict, List, Optional
from pydantic import BaseModel, Field


# ---------- Traductions ----------

class ProductTranslationIn(BaseModel):
    name: Optional[str] = Field(default=None, max_length=255)
    description: Optional[str] = None


class BlogTranslationIn(BaseModel):
    title: Optional[str] = Field(default=None, max_length=255)
    content: Optional[str] = None
    excerpt: Optional[str] = None


class LocationTranslationIn(BaseModel):
    name: Optional[str] = Field(default=None, max_length=255)
    address: Optional[str] = Field(default=None, max_length=500)
    description: Optional[str] = None


class FaqTranslationIn(BaseModel):
    question: Optional[str] = None
    answer: Optional[str] = None


class ProvinceTranslationIn(BaseModel):
    name: Optional[str] = Field(default=None, max_length=255)


class OfferTranslationIn(BaseModel):
    title: Optional[str] = Field(default=None, max_length=255)
    description: Optional[str] = None


class OpenPositionTranslationIn(BaseModel):
    title: Optional[str] = Field(default=None, max_length=255)
    description: Optional[str] = None
    requirements: Optional[str] = None
    location: Optional[str] = Field(default=None, max_length=255)


# ---------- Entités ----------

class TranslatedEntityIn(BaseModel):
    """Base commune : les traductions sont converties en dict brut pour le service"""

    def base_values(self) -> dict:
        return self.model_dump(exclude={"translations"}, exclude_unset=True)

    def translation_values(self) -> Dict[str, Dict[str, Optional[str]]]:
        translations = getattr(self, "translations", None) or {}
        return {
            code: fields.model_dump(exclude_unset=True)
            for code, fields in translations.items()
        }


class ProductIn(TranslatedEntityIn):
    retail_price: Optional[Decimal] = Field(default=None, ge=0)
    wholesale_price: Optional[Decimal] = Field(default=None, ge=0)
    image_url: Optional[str] = Field(default=None, max_length=500)
    is_wholesale: Optional[bool] = None
    is_active: Optional[bool] = None
    translations: Dict[str, ProductTranslationIn] = Field(default_factory=dict)


class BlogIn(TranslatedEntityIn):
    image_url: Optional[str] = Field(default=None, max_length=500)
    is_published: Optional[bool] = None
    published_at: Optional[datetime] = None
    translations: Dict[str, BlogTranslationIn] = Field(default_factory=dict)


class LocationIn(TranslatedEntityIn):
    latitude: Optional[Decimal] = Field(default=None, ge=-90, le=90)
    longitude: Optional[Decimal] = Field(default=None, ge=-180, le=180)
    phone: Optional[str] = Field(default=None, max_length=50)
    image_url: Optional[str] = Field(default=None, max_length=500)
    translations: Dict[str, LocationTranslationIn] = Field(default_factory=dict)


class FaqIn(TranslatedEntityIn):
    sort_order: Optional[int] = None
    is_active: Optional[bool] = None
    translations: Dict[str, FaqTranslationIn] = Field(default_factory=dict)


class ProvinceIn(TranslatedEntityIn):
    code: Optional[str] = Field(default=None, max_length=20)
    is_active: Optional[bool] = None
    translations: Dict[str, ProvinceTranslationIn] = Field(default_factory=dict)


class OfferIn(TranslatedEntityIn):
    discount_percentage: Optional[Decimal] = Field(default=None, ge=0, le=100)
    image_url: Optional[str] = Field(default=None, max_length=500)
    starts_at: Optional[datetime] = None
    ends_at: Optional[datetime] = None
    is_active: Optional[bool] = None
    translations: Dict[str, OfferTranslationIn] = Field(default_factory=dict)


class OpenPositionIn(TranslatedEntityIn):
    employment_type: Optional[str] = Field(default=None, max_length=50)
    is_active: Optional[bool] = None
    translations: Dict[str, OpenPositionTranslationIn] = Field(default_factory=dict)


# Schéma d'écriture par segment d'URL (mêmes clés que TRANSLATED_ENTITIES)
ENTITY_SCHEMAS = {
    "products": ProductIn,
    "blogs": BlogIn,
    "locations": LocationIn,
    "faqs": FaqIn,
    "provinces": ProvinceIn,
    "offers": OfferIn,
    "open-positions": OpenPositionIn,
}


# ---------- Réponses ----------

class EntityResponse(BaseModel):
    success: bool = True
    message: Optional[str] = None
    data: dict


class EntitiesListResponse(BaseModel):
    success: bool = True
    data: List[dict]
    total: int
    page: int
    per_page: int
    has_more: bool
    language: str
