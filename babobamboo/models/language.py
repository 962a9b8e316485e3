# ===================================
# babobamboo/models/language.py
# ===================================
from sqlalchemy import Column, String, Boolean, DateTime
from sqlalchemy.sql import func

from babobamboo.core.database import Base


class Language(Base):
    __tablename__ = "languages"

    code = Column(String(10), primary_key=True)  # en, nl
    name = Column(String(100), nullable=False)
    native_name = Column(String(100), nullable=True)

    # Une seule langue par défaut : garanti par LanguageRepository.set_default_language
    is_default = Column(Boolean, default=False, nullable=False)
    is_active = Column(Boolean, default=True, nullable=False)

    created_at = Column(DateTime(timezone=True), server_default=func.now())

    def __repr__(self):
        return f"<Language(code='{self.code}', default={self.is_default})>"

    def to_dict(self):
        return {
            "code": self.code,
            "name": self.name,
            "native_name": self.native_name,
            "is_default": bool(self.is_default),
            "is_active": bool(self.is_active),
        }
