# ===================================
# babobamboo/api/v1/content.py
# ===================================
"""
Routes CRUD des entités traduites (produits, blogs, points de vente, FAQ,
provinces, offres, postes ouverts), une instance de routeur par entité.
"""
from typing import Any, Type

from fastapi import APIRouter, Depends, Path, status
from sqlalchemy.orm import Session

from babobamboo.api.deps import LanguageContext, get_language_context, get_pagination_params, page_info
from babobamboo.core.database import get_db
from babobamboo.core.security import require_admin
from babobamboo.models.translation import TranslatableMixin
from babobamboo.schemas.content import EntitiesListResponse, EntityResponse, TranslatedEntityIn
from babobamboo.services.translation_service import TranslationService, merged_view


def build_entity_router(model: Type[TranslatableMixin], schema: Type[TranslatedEntityIn]) -> APIRouter:
    router = APIRouter()
    label = model.LABEL

    @router.get("/", response_model=EntitiesListResponse)
    def list_entities(
        pagination: tuple = Depends(get_pagination_params),
        lang: LanguageContext = Depends(get_language_context),
        db: Session = Depends(get_db)
    ) -> Any:
        """Liste publique, champs traduits dans la langue de la requête"""
        skip, limit = pagination
        views, total = TranslationService(db, model).list_entities(
            lang.language, lang.default_language, skip=skip, limit=limit
        )
        return EntitiesListResponse(data=views, language=lang.language, **page_info(skip, limit, total))

    @router.get("/admin/all", response_model=EntitiesListResponse)
    def list_entities_admin(
        pagination: tuple = Depends(get_pagination_params),
        lang: LanguageContext = Depends(get_language_context),
        current_user=Depends(require_admin),
        db: Session = Depends(get_db)
    ) -> Any:
        """Liste admin : inactifs compris, avec toutes les traductions"""
        skip, limit = pagination
        views, total = TranslationService(db, model).list_entities(
            lang.language, lang.default_language, with_translations=True,
            only_active=False, skip=skip, limit=limit
        )
        return EntitiesListResponse(data=views, language=lang.language, **page_info(skip, limit, total))

    @router.get("/{entity_id}", response_model=EntityResponse)
    def get_entity(
        entity_id: int = Path(..., ge=1),
        lang: LanguageContext = Depends(get_language_context),
        db: Session = Depends(get_db)
    ) -> Any:
        data = TranslationService(db, model).get_view(entity_id, lang.language, lang.default_language)
        return EntityResponse(data=data)

    @router.post("/", response_model=EntityResponse, status_code=status.HTTP_201_CREATED)
    def create_entity(
        payload: schema,
        lang: LanguageContext = Depends(get_language_context),
        current_user=Depends(require_admin),
        db: Session = Depends(get_db)
    ) -> Any:
        """Création (admin) : la langue par défaut doit fournir les champs requis"""
        entity = TranslationService(db, model).create_entity(
            payload.base_values(),
            payload.translation_values(),
            required_language=lang.default_language,
            allowed_languages=lang.supported,
        )
        return EntityResponse(
            message=f"{label} créé(e) avec succès",
            data=merged_view(entity, lang.language, lang.default_language, with_translations=True),
        )

    @router.put("/{entity_id}", response_model=EntityResponse)
    def update_entity(
        payload: schema,
        entity_id: int = Path(..., ge=1),
        lang: LanguageContext = Depends(get_language_context),
        current_user=Depends(require_admin),
        db: Session = Depends(get_db)
    ) -> Any:
        """Mise à jour (admin) : la langue de la requête doit rester complète"""
        entity = TranslationService(db, model).update_entity(
            entity_id,
            payload.base_values(),
            payload.translation_values(),
            required_language=lang.language,
            allowed_languages=lang.supported,
        )
        return EntityResponse(
            message=f"{label} mis(e) à jour avec succès",
            data=merged_view(entity, lang.language, lang.default_language, with_translations=True),
        )

    @router.delete("/{entity_id}", response_model=EntityResponse)
    def delete_entity(
        entity_id: int = Path(..., ge=1),
        current_user=Depends(require_admin),
        db: Session = Depends(get_db)
    ) -> Any:
        TranslationService(db, model).delete_entity(entity_id)
        return EntityResponse(message=f"{label} supprimé(e) avec succès", data={"id": entity_id})

    return router
