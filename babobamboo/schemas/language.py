# ===================================
# babobamboo/schemas/language.py
# ===================================
from typing import List, Optional
from pydantic import BaseModel


class Language(BaseModel):
    code: str
    name: str
    native_name: Optional[str] = None
    is_default: bool
    is_active: bool

    class Config:
        from_attributes = True


class LanguagesListResponse(BaseModel):
    success: bool = True
    data: List[Language]


class LanguageResponse(BaseModel):
    success: bool = True
    message: Optional[str] = None
    data: Language
