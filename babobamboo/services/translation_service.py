# ===================================
# babobamboo/services/translation_service.py
# ===================================
"""
Résolution et écriture des contenus traduits.

Lecture : chaque champ localisé est pris dans la langue demandée, sinon dans
la langue par défaut, sinon ''. Le repli se fait champ par champ : une
traduction existante mais incomplète garde ses champs renseignés et complète
les autres avec la langue par défaut.

Écriture : l'entité puis toutes ses traductions sont écrites dans une seule
transaction. Une langue existante est mise à jour, une nouvelle est insérée.
"""
import logging
from typing import Dict, Iterable, List, Optional, Type

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from babobamboo.core.exceptions import AppError, NotFoundError, PersistenceError, ValidationError
from babobamboo.models.translation import TranslatableMixin
from babobamboo.repositories.translatable_repo import TranslatableRepository

logger = logging.getLogger(__name__)

TranslationsInput = Dict[str, Dict[str, Optional[str]]]


def _is_empty(value) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


def resolve_fields(entity: TranslatableMixin, language: str, default_language: str) -> Dict[str, str]:
    """Champs localisés fusionnés, repli champ par champ vers la langue par défaut"""
    requested = entity.translations.get(language)
    fallback = entity.translations.get(default_language)

    merged = {}
    for field in entity.TRANSLATED_FIELDS:
        value = getattr(requested, field, None) if requested is not None else None
        if _is_empty(value):
            value = getattr(fallback, field, None) if fallback is not None else None
        merged[field] = "" if _is_empty(value) else value
    return merged


def translations_sidecar(entity: TranslatableMixin) -> Dict[str, Dict[str, Optional[str]]]:
    """Toutes les langues d'une entité, pour les écrans d'édition admin"""
    return {
        code: translation.fields(entity.TRANSLATED_FIELDS)
        for code, translation in sorted(entity.translations.items())
    }


def merged_view(entity: TranslatableMixin, language: str, default_language: str,
                with_translations: bool = False) -> dict:
    """Vue publique (fusionnée) ou admin (fusionnée + toutes les traductions)"""
    data = entity.base_dict()
    data.update(resolve_fields(entity, language, default_language))
    data["language"] = language
    if with_translations:
        data["translations"] = translations_sidecar(entity)
    return data


class TranslationService:
    """CRUD transactionnel d'une entité traduite"""

    def __init__(self, db: Session, model: Type[TranslatableMixin]):
        self.db = db
        self.model = model
        self.repo = TranslatableRepository(db, model)

    # ----- Lecture -----

    def list_entities(self, language: str, default_language: str, with_translations: bool = False,
                      only_active: bool = True, skip: int = 0, limit: int = 100):
        entities, total = self.repo.get_all(skip=skip, limit=limit, only_active=only_active)
        views = [merged_view(e, language, default_language, with_translations) for e in entities]
        return views, total

    def get_entity(self, entity_id: int, only_active: bool = False) -> TranslatableMixin:
        entity = self.repo.get_by_id(entity_id, only_active=only_active)
        if entity is None:
            raise NotFoundError(f"{self.model.LABEL} non trouvé(e)")
        return entity

    def get_view(self, entity_id: int, language: str, default_language: str,
                 with_translations: bool = False, only_active: bool = True) -> dict:
        """Vue d'une entité ; par défaut, masquée (404) si elle n'est pas visible publiquement"""
        entity = self.get_entity(entity_id, only_active=only_active)
        return merged_view(entity, language, default_language, with_translations)

    # ----- Écriture -----

    def create_entity(self, base: dict, translations: TranslationsInput, required_language: str,
                      allowed_languages: Optional[Iterable[str]] = None) -> TranslatableMixin:
        """Créer l'entité et ses traductions atomiquement"""
        entity = self.model(**self._base_values(base))
        try:
            self.repo.add(entity)
            self.upsert_translations(entity, translations, required_language, allowed_languages)
            self.db.commit()
        except AppError:
            self.db.rollback()
            raise
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error("Création %s échouée, transaction annulée: %s", self.model.__tablename__, e)
            raise PersistenceError(f"La création de la ressource {self.model.LABEL} a échoué")

        self.db.refresh(entity)
        logger.info("%s créé(e) id=%s langues=%s", self.model.LABEL, entity.id, sorted(entity.translations))
        return entity

    def update_entity(self, entity_id: int, base: dict, translations: TranslationsInput,
                      required_language: Optional[str],
                      allowed_languages: Optional[Iterable[str]] = None) -> TranslatableMixin:
        entity = self.get_entity(entity_id)
        if required_language not in (translations or {}):
            # La langue de la requête n'est pas réécrite : rien à exiger
            required_language = None
        try:
            for name, value in self._base_values(base).items():
                setattr(entity, name, value)
            self.upsert_translations(entity, translations, required_language, allowed_languages)
            self.db.commit()
        except AppError:
            self.db.rollback()
            raise
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error("Mise à jour %s id=%s échouée, transaction annulée: %s",
                         self.model.__tablename__, entity_id, e)
            raise PersistenceError(f"La mise à jour de la ressource {self.model.LABEL} a échoué")

        self.db.refresh(entity)
        return entity

    def delete_entity(self, entity_id: int) -> None:
        entity = self.get_entity(entity_id)
        try:
            self.repo.delete(entity)
            self.db.commit()
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error("Suppression %s id=%s échouée: %s", self.model.__tablename__, entity_id, e)
            raise PersistenceError(f"La suppression de la ressource {self.model.LABEL} a échoué")

    def upsert_translations(self, entity: TranslatableMixin, translations: TranslationsInput,
                            required_language: Optional[str],
                            allowed_languages: Optional[Iterable[str]] = None) -> List[str]:
        """
        Insérer ou mettre à jour une traduction par langue fournie.
        Ne commit pas : l'appelant gère la transaction.
        Retourne les codes langue effectivement écrits.
        """
        translations = translations or {}
        self._validate(entity, translations, required_language, allowed_languages)

        written = []
        for code, fields in translations.items():
            fields = self._clean_fields(fields)
            existing = entity.translations.get(code)

            merged = dict(existing.fields(entity.TRANSLATED_FIELDS)) if existing is not None else {}
            merged.update(fields)
            if any(_is_empty(merged.get(name)) for name in entity.REQUIRED_FIELDS):
                # Langue optionnelle incomplète : ignorée sans erreur
                logger.debug("Traduction %s ignorée pour %s id=%s (champs requis vides)",
                             code, entity.__tablename__, entity.id)
                continue

            if existing is not None:
                for name, value in fields.items():
                    setattr(existing, name, value)
            else:
                entity.new_translation(code, **fields)
            written.append(code)

        self.db.flush()
        return written

    # ----- Interne -----

    def _validate(self, entity: TranslatableMixin, translations: TranslationsInput,
                  required_language: Optional[str], allowed_languages: Optional[Iterable[str]]) -> None:
        errors = []

        if allowed_languages is not None:
            allowed = set(allowed_languages)
            for code in translations:
                if code not in allowed:
                    errors.append(f"Langue non supportée: {code}")

        if required_language is not None:
            provided = self._clean_fields(translations.get(required_language) or {})
            existing = entity.translations.get(required_language)
            for name in entity.REQUIRED_FIELDS:
                value = provided.get(name) if name in provided else getattr(existing, name, None)
                if _is_empty(value):
                    errors.append(f"Le champ '{name}' est requis pour la langue '{required_language}'")

        if errors:
            raise ValidationError(errors)

    def _clean_fields(self, fields: Dict[str, Optional[str]]) -> Dict[str, Optional[str]]:
        """Garder les champs localisés connus, chaînes vides -> None"""
        cleaned = {}
        for name, value in (fields or {}).items():
            if name not in self.model.TRANSLATED_FIELDS:
                continue
            if isinstance(value, str):
                value = value.strip() or None
            cleaned[name] = value
        return cleaned

    def _base_values(self, base: dict) -> dict:
        return {
            name: value for name, value in (base or {}).items()
            if name in self.model.BASE_FIELDS and value is not None
        }
