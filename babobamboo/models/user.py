# ===================================
# babobamboo/models/user.py
# ===================================
import enum

from sqlalchemy import Column, Integer, String, Boolean, DateTime, ForeignKey, Table, Text, Enum
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from babobamboo.core.database import Base

# Table d'association pour les rôles utilisateur (many-to-many)
user_role_table = Table(
    'user_roles',
    Base.metadata,
    Column('user_id', Integer, ForeignKey('users.id', ondelete='CASCADE'), primary_key=True),
    Column('role_id', Integer, ForeignKey('roles.id', ondelete='CASCADE'), primary_key=True)
)


class AccountType(str, enum.Enum):
    """Type de compte client"""
    CUSTOMER = "customer"   # Particulier (prix retail)
    COMPANY = "company"     # Entreprise (accès wholesale)


class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    email = Column(String(255), unique=True, index=True, nullable=False)
    full_name = Column(String(255), nullable=True)
    phone = Column(String(50), nullable=True)
    account_type = Column(Enum(AccountType), default=AccountType.CUSTOMER, nullable=False)
    company_name = Column(String(255), nullable=True)

    # Authentification
    password_hash = Column(String, nullable=False)
    is_active = Column(Boolean, default=True)
    is_verified = Column(Boolean, default=False)

    # Timestamps
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())
    last_login = Column(DateTime(timezone=True), nullable=True)

    # Relations
    roles = relationship("Role", secondary=user_role_table, back_populates="users", lazy="selectin")
    orders = relationship("Order", back_populates="user")

    def __repr__(self):
        return f"<User(id={self.id}, email='{self.email}')>"

    def has_role(self, role_name: str) -> bool:
        """Vérifier si l'utilisateur a un rôle spécifique"""
        return any(role.name == role_name for role in self.roles)


class Role(Base):
    __tablename__ = "roles"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(50), unique=True, index=True, nullable=False)  # admin, customer
    description = Column(Text, nullable=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now())

    users = relationship("User", secondary=user_role_table, back_populates="roles")

    def __repr__(self):
        return f"<Role(id={self.id}, name='{self.name}')>"
