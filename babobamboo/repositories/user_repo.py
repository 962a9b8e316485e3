# ===================================
# babobamboo/repositories/user_repo.py
# ===================================
from typing import Optional
from datetime import datetime

from sqlalchemy import select
from sqlalchemy.orm import Session, selectinload

from babobamboo.models.user import User, Role, AccountType
from babobamboo.core.security import get_password_hash


def get_user_by_id(db: Session, user_id: int) -> Optional[User]:
    """Récupérer un utilisateur par son ID"""
    return db.scalar(
        select(User)
        .where(User.id == user_id)
        .options(selectinload(User.roles))
    )


def get_user_by_email(db: Session, email: str) -> Optional[User]:
    """Récupérer un utilisateur par son email"""
    return db.scalar(
        select(User)
        .where(User.email == email.lower())
        .options(selectinload(User.roles))
    )


def get_or_create_role(db: Session, name: str) -> Role:
    role = db.scalar(select(Role).where(Role.name == name))
    if role is None:
        role = Role(name=name)
        db.add(role)
        db.flush()
    return role


def create_user(db: Session, email: str, password: str, full_name: Optional[str] = None,
                roles: tuple = ("customer",), account_type: AccountType = AccountType.CUSTOMER,
                is_active: bool = True) -> User:
    """Créer un utilisateur avec ses rôles"""
    user = User(
        email=email.lower(),
        full_name=full_name,
        password_hash=get_password_hash(password),
        account_type=account_type,
        is_active=is_active,
    )
    for role_name in roles:
        user.roles.append(get_or_create_role(db, role_name))

    db.add(user)
    db.commit()
    db.refresh(user)
    return user


def update_last_login(db: Session, user: User) -> None:
    user.last_login = datetime.utcnow()
    db.commit()
