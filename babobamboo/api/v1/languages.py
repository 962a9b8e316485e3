# ===================================
# babobamboo/api/v1/languages.py
# ===================================
from typing import Any

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from babobamboo.api.deps import LanguageContext, get_language_context
from babobamboo.core.database import get_db
from babobamboo.core.security import require_admin
from babobamboo.repositories.language_repo import LanguageRepository
from babobamboo.schemas.language import Language, LanguageResponse, LanguagesListResponse

router = APIRouter()


@router.get("/", response_model=LanguagesListResponse)
def list_languages(db: Session = Depends(get_db)) -> Any:
    """Langues actives, la langue par défaut en premier"""
    languages = LanguageRepository(db).get_active_languages()
    return LanguagesListResponse(data=[Language.model_validate(language) for language in languages])


@router.get("/current")
def get_current_language(lang: LanguageContext = Depends(get_language_context)) -> Any:
    """Langue détectée pour cette requête"""
    return {
        "success": True,
        "data": {
            "language": lang.language,
            "default_language": lang.default_language,
            "supported": lang.supported,
        },
    }


@router.get("/codes")
def list_language_codes(db: Session = Depends(get_db)) -> Any:
    return {"success": True, "data": LanguageRepository(db).get_active_codes()}


@router.put("/{code}/default", response_model=LanguageResponse)
def set_default_language(
    code: str,
    current_user=Depends(require_admin),
    db: Session = Depends(get_db)
) -> Any:
    """Définir la langue par défaut (les autres perdent le drapeau)"""
    language = LanguageRepository(db).set_default_language(code.lower())
    if language is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Langue non trouvée"
        )
    return LanguageResponse(
        message=f"Langue par défaut: {language.code}",
        data=Language.model_validate(language)
    )
