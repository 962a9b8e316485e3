# ===================================
# babobamboo/api/v1/auth.py
# ===================================
from typing import Any
from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from babobamboo.core.database import get_db
from babobamboo.core.config import settings
from babobamboo.core.security import verify_password, create_access_token, get_current_active_user
from babobamboo.repositories.user_repo import get_user_by_email, update_last_login
from babobamboo.schemas.user import LoginRequest, AuthResponse, Token, User, UserResponse

router = APIRouter()


@router.post("/login", response_model=AuthResponse)
def login(
    login_data: LoginRequest,
    db: Session = Depends(get_db)
) -> Any:
    """
    Connexion d'un utilisateur
    """
    user = get_user_by_email(db, email=login_data.email)

    if not user or not verify_password(login_data.password, user.password_hash):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Email ou mot de passe incorrect",
            headers={"WWW-Authenticate": "Bearer"},
        )

    if not user.is_active:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Compte désactivé"
        )

    access_token = create_access_token(
        subject=user.id,
        roles=[role.name for role in user.roles]
    )

    # Mettre à jour la dernière connexion
    update_last_login(db, user)

    token_data = Token(
        access_token=access_token,
        token_type="bearer",
        expires_in=settings.jwt_access_token_expire_minutes * 60,
        user=User.from_user(user)
    )

    return AuthResponse(
        message="Connexion réussie",
        data=token_data
    )


@router.get("/me", response_model=UserResponse)
def read_current_user(current_user=Depends(get_current_active_user)) -> Any:
    """Profil de l'utilisateur connecté"""
    return UserResponse(data=User.from_user(current_user))
