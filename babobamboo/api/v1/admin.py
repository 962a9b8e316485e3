# ===================================
# babobamboo/api/v1/admin.py
# ===================================
from typing import Any, Optional
from fastapi import APIRouter, Depends, HTTPException, status
from pydantic import BaseModel, EmailStr
from sqlalchemy.orm import Session

from babobamboo.core.config import settings
from babobamboo.core.database import get_db
from babobamboo.core.security import require_admin
from babobamboo.services.email_service import EmailService, build_rating_link
from babobamboo.services.rating_service import RatingEmailSweep

router = APIRouter()


class TestEmailRequest(BaseModel):
    email: Optional[EmailStr] = None


def get_email_service() -> EmailService:
    return EmailService()


@router.post("/rating-emails/trigger")
def trigger_rating_emails(
    current_user=Depends(require_admin),
    mailer: EmailService = Depends(get_email_service),
    db: Session = Depends(get_db)
) -> Any:
    """Lancer immédiatement le balayage des emails de notation"""
    sweep = RatingEmailSweep(
        db, mailer,
        frontend_url=settings.frontend_url,
        retry_days=settings.rating_email_retry_days,
    )
    result = sweep.run()
    return {
        "success": True,
        "message": "Balayage des emails de notation terminé",
        "data": result.to_dict(),
    }


@router.post("/rating-emails/test")
def send_test_rating_email(
    payload: Optional[TestEmailRequest] = None,
    current_user=Depends(require_admin),
    mailer: EmailService = Depends(get_email_service)
) -> Any:
    """Envoyer un email de notation factice (adresse fournie ou celle de l'admin)"""
    recipient = (payload.email if payload else None) or current_user.email
    if not recipient:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Adresse email requise"
        )

    link = build_rating_link("test-token-123", settings.frontend_url)
    if not mailer.send_rating_email(recipient, 0, link):
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Échec de l'envoi de l'email de test"
        )

    return {"success": True, "message": f"Email de test envoyé à {recipient}"}
