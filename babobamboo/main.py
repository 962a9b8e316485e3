# ===================================
# babobamboo/main.py
# ===================================
from fastapi import FastAPI, HTTPException, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException
from contextlib import asynccontextmanager
import logging

from babobamboo.core.config import settings
from babobamboo.core.database import init_db, check_db_connection
from babobamboo.core.exceptions import AppError
from babobamboo.core.logging import setup_logging
from babobamboo.core.scheduler import init_scheduler, shutdown_scheduler
from babobamboo.models import TRANSLATED_ENTITIES
from babobamboo.schemas.content import ENTITY_SCHEMAS

# Import des routes
from babobamboo.api.v1 import admin, auth, features, languages, orders, ratings
from babobamboo.api.v1.content import build_entity_router

setup_logging()
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Gestionnaire de cycle de vie de l'application"""
    # Démarrage
    logger.info("🚀 Démarrage de l'application Babobamboo...")

    # Vérifier la connexion DB
    if not check_db_connection():
        logger.error("❌ Impossible de se connecter à la base de données")
        raise RuntimeError("Database connection failed")

    # Initialiser la base de données
    init_db()

    # Démarrer le scheduler si activé
    if settings.scheduler_enabled:
        init_scheduler()

    logger.info("✅ Application démarrée avec succès")

    yield

    # Arrêt
    logger.info("⏹️ Arrêt de l'application...")
    shutdown_scheduler()


def _error_body(code, message: str, error_type: str, errors=None) -> dict:
    body = {
        "success": False,
        "error": {
            "code": code,
            "message": message,
            "type": error_type
        }
    }
    if errors:
        body["error"]["errors"] = errors
    return body


def create_app() -> FastAPI:
    """Factory pour créer l'application FastAPI"""

    app = FastAPI(
        title=settings.app_name,
        version=settings.app_version,
        openapi_url=f"{settings.api_prefix}/openapi.json",
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan
    )

    # CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=settings.cors_allow_credentials,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=["Content-Language"],
    )

    # Routes API v1
    app.include_router(auth.router, prefix=f"{settings.api_prefix}/auth", tags=["Auth"])
    app.include_router(languages.router, prefix=f"{settings.api_prefix}/languages", tags=["Languages"])
    app.include_router(features.router, prefix=f"{settings.api_prefix}/feature-settings", tags=["Feature settings"])
    for segment, model in TRANSLATED_ENTITIES.items():
        app.include_router(
            build_entity_router(model, ENTITY_SCHEMAS[segment]),
            prefix=f"{settings.api_prefix}/{segment}",
            tags=[segment.replace("-", " ").capitalize()]
        )
    app.include_router(orders.router, prefix=f"{settings.api_prefix}/orders", tags=["Orders"])
    app.include_router(ratings.router, prefix=f"{settings.api_prefix}/ratings", tags=["Ratings"])
    app.include_router(admin.router, prefix=f"{settings.api_prefix}/admin", tags=["Admin"])

    # Route de santé
    @app.get("/health")
    async def health_check():
        """Vérification de la santé de l'API"""
        db_status = "ok" if check_db_connection() else "error"

        return {
            "status": "ok" if db_status == "ok" else "error",
            "version": settings.app_version,
            "environment": settings.environment,
            "database": db_status,
            "scheduler": "ok" if settings.scheduler_enabled else "disabled"
        }

    # Route racine
    @app.get("/")
    async def root():
        return {
            "message": f"Bienvenue sur {settings.app_name}",
            "version": settings.app_version,
            "docs": "/docs",
            "health": "/health"
        }

    # Gestion globale des erreurs
    @app.exception_handler(AppError)
    async def app_error_handler(request: Request, exc: AppError):
        if exc.status_code >= 500:
            logger.error("Erreur %s sur %s %s: %s", exc.code, request.method, request.url.path, exc.message)
        return JSONResponse(
            status_code=exc.status_code,
            content=_error_body(exc.status_code, exc.message, exc.code, getattr(exc, "errors", None)),
        )

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: HTTPException):
        return JSONResponse(
            status_code=exc.status_code,
            content=_error_body(exc.status_code, exc.detail, "http_error"),
            headers=getattr(exc, "headers", None),
        )

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        errors = []
        for error in exc.errors():
            location = ".".join(str(part) for part in error.get("loc", ()) if part != "body")
            errors.append(f"{location}: {error.get('msg')}" if location else error.get("msg"))
        return JSONResponse(
            status_code=400,
            content=_error_body(400, "Données invalides", "validation_error", errors),
        )

    @app.exception_handler(Exception)
    async def general_exception_handler(request: Request, exc: Exception):
        logger.error(f"Erreur non gérée: {exc}", exc_info=True)
        return JSONResponse(
            status_code=500,
            content=_error_body(500, "Erreur interne du serveur", "internal_error"),
        )

    return app


# Créer l'instance de l'application
app = create_app()


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "babobamboo.main:app",
        host="0.0.0.0",
        port=8000,
        reload=settings.debug,
        log_level="info"
    )
