# ===================================
# babobamboo/models/product.py
# ===================================
from sqlalchemy import Column, Integer, String, Boolean, ForeignKey, Text, DECIMAL, UniqueConstraint
from sqlalchemy.orm import relationship
from sqlalchemy.orm.collections import attribute_keyed_dict

from babobamboo.core.database import Base
from babobamboo.models.translation import TranslatableMixin, TranslationMixin


class ProductTranslation(TranslationMixin, Base):
    __tablename__ = "product_translations"
    __table_args__ = (
        UniqueConstraint("product_id", "language_code", name="uq_product_translation_lang"),
    )
    ENTITY_FK = "product_id"

    product_id = Column(Integer, ForeignKey("products.id", ondelete="CASCADE"), nullable=False, index=True)
    name = Column(String(255), nullable=True)
    description = Column(Text, nullable=True)

    product = relationship("Product", back_populates="translations")


class Product(TranslatableMixin, Base):
    __tablename__ = "products"

    TRANSLATED_FIELDS = ("name", "description")
    REQUIRED_FIELDS = ("name",)
    BASE_FIELDS = ("retail_price", "wholesale_price", "image_url", "is_wholesale", "is_active")
    LABEL = "Produit"
    TRANSLATION_MODEL = ProductTranslation

    id = Column(Integer, primary_key=True, index=True)

    # Prix (retail pour les particuliers, wholesale pour les entreprises)
    retail_price = Column(DECIMAL(10, 2), nullable=False, default=0)
    wholesale_price = Column(DECIMAL(10, 2), nullable=True)

    image_url = Column(String(500), nullable=True)
    is_wholesale = Column(Boolean, default=False, nullable=False)
    is_active = Column(Boolean, default=True, nullable=False, index=True)

    translations = relationship(
        "ProductTranslation",
        back_populates="product",
        collection_class=attribute_keyed_dict("language_code"),
        cascade="all, delete-orphan",
        lazy="selectin",
    )

    def __repr__(self):
        return f"<Product(id={self.id}, retail_price={self.retail_price})>"

    def price_for(self, price_type: str):
        """Prix unitaire selon le type de ligne de panier"""
        if price_type == "wholesale":
            return self.wholesale_price
        return self.retail_price
