# ===================================
# babobamboo/api/deps.py
# ===================================
from dataclasses import dataclass
from typing import List, Optional

from fastapi import Depends, HTTPException, Query, Request, Response, status
from sqlalchemy.orm import Session

from babobamboo.core.database import get_db
from babobamboo.repositories.language_repo import LanguageRepository


@dataclass
class LanguageContext:
    """Langue de la requête et langue par défaut du catalogue"""
    language: str
    default_language: str
    supported: List[str]


def parse_accept_language(header: Optional[str]) -> List[str]:
    """
    Codes langue primaires de l'en-tête Accept-Language, triés par qualité.
    "nl-BE,nl;q=0.9,en;q=0.8" -> ["nl", "en"]
    """
    if not header:
        return []

    weighted = []
    for position, part in enumerate(header.split(",")):
        pieces = part.strip().split(";")
        tag = pieces[0].strip()
        if not tag or tag == "*":
            continue

        quality = 1.0
        for param in pieces[1:]:
            name, _, value = param.strip().partition("=")
            if name.strip() == "q":
                try:
                    quality = float(value)
                except ValueError:
                    quality = 0.0
        if quality <= 0:
            continue
        weighted.append((-quality, position, tag.split("-")[0].lower()))

    codes = []
    for _, _, code in sorted(weighted):
        if code not in codes:
            codes.append(code)
    return codes


def get_language_context(
    request: Request,
    response: Response,
    lang: Optional[str] = Query(None, description="Code langue (prioritaire sur Accept-Language)"),
    db: Session = Depends(get_db)
) -> LanguageContext:
    """
    Détection de la langue : ?lang= puis Accept-Language puis langue par défaut.
    Un ?lang= explicite non supporté est refusé.
    """
    repo = LanguageRepository(db)
    supported = repo.get_active_codes()
    default_language = repo.get_default_code()

    language = None
    if lang:
        language = lang.strip().lower()
        if language not in supported:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail=f"Langue non supportée: {lang}. Langues disponibles: {', '.join(supported)}"
            )
    else:
        for code in parse_accept_language(request.headers.get("accept-language")):
            if code in supported:
                language = code
                break

    language = language or default_language
    response.headers["Content-Language"] = language
    response.headers["Vary"] = "Accept-Language"
    return LanguageContext(language=language, default_language=default_language, supported=supported)


def get_pagination_params(
    skip: int = Query(0, ge=0, description="Nombre d'éléments à ignorer"),
    limit: int = Query(20, ge=1, le=100, description="Nombre d'éléments à retourner")
) -> tuple[int, int]:
    """
    Paramètres de pagination communs
    """
    return skip, limit


def page_info(skip: int, limit: int, total: int) -> dict:
    return {
        "total": total,
        "page": (skip // limit) + 1,
        "per_page": limit,
        "has_more": (skip + limit) < total,
    }
