# ===================================
# babobamboo/models/content.py
# ===================================
"""Contenus éditoriaux traduits : blogs, points de vente, FAQ, provinces, offres, postes ouverts"""
from sqlalchemy import (
    Column, Integer, String, Boolean, DateTime, ForeignKey, Text, DECIMAL, UniqueConstraint
)
from sqlalchemy.orm import relationship
from sqlalchemy.orm.collections import attribute_keyed_dict

from babobamboo.core.database import Base
from babobamboo.models.translation import TranslatableMixin, TranslationMixin


# ---------- Blogs ----------

class BlogTranslation(TranslationMixin, Base):
    __tablename__ = "blog_translations"
    __table_args__ = (UniqueConstraint("blog_id", "language_code", name="uq_blog_translation_lang"),)
    ENTITY_FK = "blog_id"

    blog_id = Column(Integer, ForeignKey("blogs.id", ondelete="CASCADE"), nullable=False, index=True)
    title = Column(String(255), nullable=True)
    content = Column(Text, nullable=True)
    excerpt = Column(Text, nullable=True)

    blog = relationship("Blog", back_populates="translations")


class Blog(TranslatableMixin, Base):
    __tablename__ = "blogs"

    TRANSLATED_FIELDS = ("title", "content", "excerpt")
    REQUIRED_FIELDS = ("title", "content")
    BASE_FIELDS = ("image_url", "is_published", "published_at")
    LABEL = "Article"
    TRANSLATION_MODEL = BlogTranslation

    id = Column(Integer, primary_key=True, index=True)
    image_url = Column(String(500), nullable=True)
    is_published = Column(Boolean, default=True, nullable=False)
    published_at = Column(DateTime(timezone=True), nullable=True)

    translations = relationship(
        "BlogTranslation", back_populates="blog",
        collection_class=attribute_keyed_dict("language_code"),
        cascade="all, delete-orphan", lazy="selectin",
    )


# ---------- Points de vente ----------

class LocationTranslation(TranslationMixin, Base):
    __tablename__ = "location_translations"
    __table_args__ = (UniqueConstraint("location_id", "language_code", name="uq_location_translation_lang"),)
    ENTITY_FK = "location_id"

    location_id = Column(Integer, ForeignKey("locations.id", ondelete="CASCADE"), nullable=False, index=True)
    name = Column(String(255), nullable=True)
    address = Column(String(500), nullable=True)
    description = Column(Text, nullable=True)

    location = relationship("Location", back_populates="translations")


class Location(TranslatableMixin, Base):
    __tablename__ = "locations"

    TRANSLATED_FIELDS = ("name", "address", "description")
    REQUIRED_FIELDS = ("name",)
    BASE_FIELDS = ("latitude", "longitude", "phone", "image_url")
    LABEL = "Point de vente"
    TRANSLATION_MODEL = LocationTranslation

    id = Column(Integer, primary_key=True, index=True)
    latitude = Column(DECIMAL(10, 7), nullable=True)
    longitude = Column(DECIMAL(10, 7), nullable=True)
    phone = Column(String(50), nullable=True)
    image_url = Column(String(500), nullable=True)

    translations = relationship(
        "LocationTranslation", back_populates="location",
        collection_class=attribute_keyed_dict("language_code"),
        cascade="all, delete-orphan", lazy="selectin",
    )


# ---------- FAQ ----------

class FaqTranslation(TranslationMixin, Base):
    __tablename__ = "faq_translations"
    __table_args__ = (UniqueConstraint("faq_id", "language_code", name="uq_faq_translation_lang"),)
    ENTITY_FK = "faq_id"

    faq_id = Column(Integer, ForeignKey("faqs.id", ondelete="CASCADE"), nullable=False, index=True)
    question = Column(Text, nullable=True)
    answer = Column(Text, nullable=True)

    faq = relationship("Faq", back_populates="translations")


class Faq(TranslatableMixin, Base):
    __tablename__ = "faqs"

    TRANSLATED_FIELDS = ("question", "answer")
    REQUIRED_FIELDS = ("question", "answer")
    BASE_FIELDS = ("sort_order", "is_active")
    LABEL = "FAQ"
    TRANSLATION_MODEL = FaqTranslation

    id = Column(Integer, primary_key=True, index=True)
    sort_order = Column(Integer, default=0, nullable=False)
    is_active = Column(Boolean, default=True, nullable=False)

    translations = relationship(
        "FaqTranslation", back_populates="faq",
        collection_class=attribute_keyed_dict("language_code"),
        cascade="all, delete-orphan", lazy="selectin",
    )


# ---------- Provinces ----------

class ProvinceTranslation(TranslationMixin, Base):
    __tablename__ = "province_translations"
    __table_args__ = (UniqueConstraint("province_id", "language_code", name="uq_province_translation_lang"),)
    ENTITY_FK = "province_id"

    province_id = Column(Integer, ForeignKey("provinces.id", ondelete="CASCADE"), nullable=False, index=True)
    name = Column(String(255), nullable=True)

    province = relationship("Province", back_populates="translations")


class Province(TranslatableMixin, Base):
    __tablename__ = "provinces"

    TRANSLATED_FIELDS = ("name",)
    REQUIRED_FIELDS = ("name",)
    BASE_FIELDS = ("code", "is_active")
    LABEL = "Province"
    TRANSLATION_MODEL = ProvinceTranslation

    id = Column(Integer, primary_key=True, index=True)
    code = Column(String(20), unique=True, nullable=True)
    is_active = Column(Boolean, default=True, nullable=False)

    translations = relationship(
        "ProvinceTranslation", back_populates="province",
        collection_class=attribute_keyed_dict("language_code"),
        cascade="all, delete-orphan", lazy="selectin",
    )


# ---------- Offres ----------

class OfferTranslation(TranslationMixin, Base):
    __tablename__ = "offer_translations"
    __table_args__ = (UniqueConstraint("offer_id", "language_code", name="uq_offer_translation_lang"),)
    ENTITY_FK = "offer_id"

    offer_id = Column(Integer, ForeignKey("offers.id", ondelete="CASCADE"), nullable=False, index=True)
    title = Column(String(255), nullable=True)
    description = Column(Text, nullable=True)

    offer = relationship("Offer", back_populates="translations")


class Offer(TranslatableMixin, Base):
    __tablename__ = "offers"

    TRANSLATED_FIELDS = ("title", "description")
    REQUIRED_FIELDS = ("title",)
    BASE_FIELDS = ("discount_percentage", "image_url", "starts_at", "ends_at", "is_active")
    LABEL = "Offre"
    TRANSLATION_MODEL = OfferTranslation

    id = Column(Integer, primary_key=True, index=True)
    discount_percentage = Column(DECIMAL(5, 2), nullable=True)
    image_url = Column(String(500), nullable=True)
    starts_at = Column(DateTime(timezone=True), nullable=True)
    ends_at = Column(DateTime(timezone=True), nullable=True)
    is_active = Column(Boolean, default=True, nullable=False)

    translations = relationship(
        "OfferTranslation", back_populates="offer",
        collection_class=attribute_keyed_dict("language_code"),
        cascade="all, delete-orphan", lazy="selectin",
    )


# ---------- Postes ouverts ----------

class OpenPositionTranslation(TranslationMixin, Base):
    __tablename__ = "open_position_translations"
    __table_args__ = (UniqueConstraint("position_id", "language_code", name="uq_open_position_translation_lang"),)
    ENTITY_FK = "position_id"

    position_id = Column(Integer, ForeignKey("open_positions.id", ondelete="CASCADE"), nullable=False, index=True)
    title = Column(String(255), nullable=True)
    description = Column(Text, nullable=True)
    requirements = Column(Text, nullable=True)
    location = Column(String(255), nullable=True)

    position = relationship("OpenPosition", back_populates="translations")


class OpenPosition(TranslatableMixin, Base):
    __tablename__ = "open_positions"

    TRANSLATED_FIELDS = ("title", "description", "requirements", "location")
    REQUIRED_FIELDS = ("title",)
    BASE_FIELDS = ("employment_type", "is_active")
    LABEL = "Poste"
    TRANSLATION_MODEL = OpenPositionTranslation

    id = Column(Integer, primary_key=True, index=True)
    employment_type = Column(String(50), nullable=True)  # full_time, part_time, internship
    is_active = Column(Boolean, default=True, nullable=False)

    translations = relationship(
        "OpenPositionTranslation", back_populates="position",
        collection_class=attribute_keyed_dict("language_code"),
        cascade="all, delete-orphan", lazy="selectin",
    )
