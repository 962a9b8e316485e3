# ===================================
# babobamboo/models/translation.py
# ===================================
"""
Briques communes des entités traduites.

Chaque entité (produit, blog, FAQ...) possède une table `<entité>_translations`
avec au plus une ligne par (entité, langue). Les champs communs à toutes les
langues (prix, image, dates, drapeaux) restent sur la ligne de l'entité.
"""
from decimal import Decimal
from typing import Dict, Optional, Tuple

from sqlalchemy import Column, Integer, String, DateTime
from sqlalchemy.sql import func


class TranslationMixin:
    """Colonnes communes des tables de traduction"""

    id = Column(Integer, primary_key=True, index=True)
    language_code = Column(String(10), nullable=False, index=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    # Nom de la colonne FK vers l'entité (product_id, blog_id, position_id...)
    ENTITY_FK: str = ""

    def fields(self, names: Tuple[str, ...]) -> Dict[str, Optional[str]]:
        return {name: getattr(self, name) for name in names}


class TranslatableMixin:
    """
    Entité possédant des traductions.

    `translations` est une relation dict indexée par code langue, déclarée
    sur chaque classe concrète avec cascade="all, delete-orphan".
    """

    # Champs localisés et champs obligatoires pour la langue de référence
    TRANSLATED_FIELDS: Tuple[str, ...] = ()
    REQUIRED_FIELDS: Tuple[str, ...] = ()
    # Colonnes de base exposées dans les vues API
    BASE_FIELDS: Tuple[str, ...] = ()
    # Nom lisible pour les messages
    LABEL: str = "Ressource"

    created_at = Column(DateTime(timezone=True), server_default=func.now(), index=True)
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    # Fourni par la sous-classe concrète
    TRANSLATION_MODEL = None

    def base_dict(self) -> dict:
        data = {"id": self.id}
        for name in self.BASE_FIELDS:
            value = getattr(self, name)
            if hasattr(value, "isoformat"):
                value = value.isoformat()
            elif isinstance(value, Decimal):
                value = float(value)
            data[name] = value
        data["created_at"] = self.created_at.isoformat() if self.created_at else None
        return data

    def new_translation(self, language_code: str, **fields):
        """Construire une ligne de traduction rattachée à cette entité"""
        translation = self.TRANSLATION_MODEL(language_code=language_code, **fields)
        self.translations[language_code] = translation
        return translation
