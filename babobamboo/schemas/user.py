# ===================================
# babobamboo/schemas/user.py
# ===================================
from typing import List, Optional
from datetime import datetime
from pydantic import BaseModel, EmailStr, Field

from babobamboo.models.user import AccountType


class LoginRequest(BaseModel):
    email: EmailStr
    password: str = Field(min_length=1)


class User(BaseModel):
    id: int
    email: EmailStr
    full_name: Optional[str] = None
    phone: Optional[str] = None
    account_type: AccountType
    company_name: Optional[str] = None
    is_active: bool
    is_verified: bool
    roles: List[str] = []
    created_at: Optional[datetime] = None
    last_login: Optional[datetime] = None

    class Config:
        from_attributes = True

    @classmethod
    def from_user(cls, user) -> "User":
        data = {name: getattr(user, name) for name in cls.model_fields if name != "roles"}
        data["roles"] = [role.name for role in user.roles]
        return cls(**data)


class Token(BaseModel):
    access_token: str
    token_type: str = "bearer"
    expires_in: int
    user: User


class AuthResponse(BaseModel):
    success: bool = True
    message: str
    data: Token


class UserResponse(BaseModel):
    success: bool = True
    data: User
