# ===================================
# babobamboo/core/security.py
# ===================================

from datetime import datetime, timedelta
from typing import Any, Union, Optional, List
from jose import jwt, JWTError
from passlib.context import CryptContext
from fastapi import HTTPException, status, Depends, Security
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlalchemy.orm import Session

from babobamboo.core.config import settings
from babobamboo.core.database import get_db

# Configuration du hachage des mots de passe
pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")

# Configuration du bearer token (auto_error=False : on renvoie nous-mêmes un 401)
security = HTTPBearer(auto_error=False)


def create_access_token(
    subject: Union[str, Any],
    expires_delta: timedelta = None,
    roles: List[str] = None
) -> str:
    """Créer un token d'accès JWT"""
    if expires_delta:
        expire = datetime.utcnow() + expires_delta
    else:
        expire = datetime.utcnow() + timedelta(
            minutes=settings.jwt_access_token_expire_minutes
        )

    to_encode = {
        "exp": expire,
        "sub": str(subject),
        "roles": roles or [],
        "type": "access",
    }
    return jwt.encode(to_encode, settings.jwt_secret_key, algorithm=settings.jwt_algorithm)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Vérifier un mot de passe"""
    return pwd_context.verify(plain_password, hashed_password)


def get_password_hash(password: str) -> str:
    """Hacher un mot de passe"""
    return pwd_context.hash(password, rounds=settings.password_hash_rounds)


def decode_token(token: str) -> dict:
    """Décoder et valider un token JWT"""
    try:
        return jwt.decode(
            token,
            settings.jwt_secret_key,
            algorithms=[settings.jwt_algorithm]
        )
    except JWTError:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Token invalide ou expiré",
            headers={"WWW-Authenticate": "Bearer"},
        )


def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Security(security),
    db: Session = Depends(get_db)
):
    """Obtenir l'utilisateur actuel à partir du token"""
    from babobamboo.repositories.user_repo import get_user_by_id  # Import local pour éviter les imports circulaires

    credentials_exception = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Impossible de valider les credentials",
        headers={"WWW-Authenticate": "Bearer"},
    )

    if credentials is None:
        raise credentials_exception

    payload = decode_token(credentials.credentials)
    user_id = payload.get("sub")
    if user_id is None or payload.get("type") != "access":
        raise credentials_exception

    try:
        user = get_user_by_id(db, user_id=int(user_id))
    except ValueError:
        raise credentials_exception
    if user is None:
        raise credentials_exception

    return user


def get_current_active_user(current_user=Depends(get_current_user)):
    """Obtenir l'utilisateur actuel actif"""
    if not current_user.is_active:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Utilisateur inactif"
        )
    return current_user


def get_current_user_or_none(
    credentials: Optional[HTTPAuthorizationCredentials] = Security(security),
    db: Session = Depends(get_db)
):
    """
    Récupérer l'utilisateur connecté ou None si pas authentifié
    Utile pour les endpoints qui acceptent les invités (checkout)
    """
    if not credentials:
        return None

    try:
        user = get_current_user(credentials, db)
    except HTTPException:
        return None
    return user if user.is_active else None


def require_roles(*required_roles: str):
    """Dépendance vérifiant les rôles utilisateur"""
    def role_checker(current_user=Depends(get_current_active_user)):
        if not any(current_user.has_role(role) for role in required_roles):
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail=f"Rôle requis: {' ou '.join(required_roles)}"
            )
        return current_user

    return role_checker


require_admin = require_roles("admin")
