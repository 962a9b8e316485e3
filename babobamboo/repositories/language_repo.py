# ===================================
# babobamboo/repositories/language_repo.py
# ===================================
from typing import List, Optional

from sqlalchemy import select, update, desc, asc
from sqlalchemy.orm import Session

from babobamboo.core.config import settings
from babobamboo.models.language import Language


class LanguageRepository:
    """Repository pour le catalogue des langues"""

    def __init__(self, db: Session):
        self.db = db

    def get_language(self, code: str) -> Optional[Language]:
        return self.db.get(Language, code)

    def get_active_languages(self) -> List[Language]:
        """Langues actives, la langue par défaut en premier"""
        return list(self.db.scalars(
            select(Language)
            .where(Language.is_active == True)  # noqa: E712
            .order_by(desc(Language.is_default), asc(Language.name))
        ))

    def get_active_codes(self) -> List[str]:
        codes = [language.code for language in self.get_active_languages()]
        return codes or list(settings.supported_languages)

    def get_default_code(self) -> str:
        """Code de la langue par défaut (configuration si la table est vide)"""
        code = self.db.scalar(
            select(Language.code).where(Language.is_default == True).limit(1)  # noqa: E712
        )
        return code or settings.default_language

    def create_language(self, code: str, name: str, native_name: Optional[str] = None,
                        is_default: bool = False, is_active: bool = True) -> Language:
        language = Language(code=code, name=name, native_name=native_name,
                            is_default=False, is_active=is_active)
        self.db.add(language)
        self.db.flush()
        if is_default:
            self.set_default_language(code, commit=False)
        self.db.commit()
        return language

    def set_default_language(self, code: str, commit: bool = True) -> Optional[Language]:
        """
        Marquer une langue comme défaut, toutes les autres perdent le drapeau
        dans la même transaction (une seule langue par défaut).
        """
        language = self.get_language(code)
        if language is None:
            return None

        try:
            self.db.execute(
                update(Language)
                .where(Language.code != code)
                .values(is_default=False)
            )
            language.is_default = True
            language.is_active = True
            if commit:
                self.db.commit()
        except Exception:
            self.db.rollback()
            raise
        return language
