# ===================================
# babobamboo/repositories/translatable_repo.py
# ===================================
from datetime import datetime, timezone
from typing import List, Optional, Tuple, Type

from sqlalchemy import select, func, desc, or_
from sqlalchemy.orm import Session

from babobamboo.models.translation import TranslatableMixin


class TranslatableRepository:
    """Repository générique pour une entité traduite et sa table de traductions"""

    def __init__(self, db: Session, model: Type[TranslatableMixin]):
        self.db = db
        self.model = model

    def get_by_id(self, entity_id: int, only_active: bool = False) -> Optional[TranslatableMixin]:
        if not only_active:
            return self.db.get(self.model, entity_id)
        query = select(self.model).where(self.model.id == entity_id, *self._visibility_filters())
        return self.db.scalar(query)

    def get_all(self, skip: int = 0, limit: int = 100,
                only_active: bool = False) -> Tuple[List[TranslatableMixin], int]:
        """Entités les plus récentes d'abord, traductions chargées (selectin)"""
        query = select(self.model)
        if only_active:
            query = query.where(*self._visibility_filters())

        total = self.db.scalar(select(func.count()).select_from(query.subquery()))

        if hasattr(self.model, "sort_order"):
            query = query.order_by(self.model.sort_order, self.model.id)
        else:
            query = query.order_by(desc(self.model.created_at), desc(self.model.id))

        entities = self.db.scalars(query.offset(skip).limit(limit)).all()
        return list(entities), total or 0

    def add(self, entity: TranslatableMixin) -> TranslatableMixin:
        self.db.add(entity)
        self.db.flush()
        return entity

    def delete(self, entity: TranslatableMixin) -> None:
        # Les traductions suivent (cascade ORM + ON DELETE CASCADE)
        self.db.delete(entity)
        self.db.flush()

    def _visibility_filters(self) -> list:
        """Conditions de visibilité publique : actif (ou publié) et dans sa période de validité"""
        filters = []
        if hasattr(self.model, "is_active"):
            filters.append(self.model.is_active == True)  # noqa: E712
        elif hasattr(self.model, "is_published"):
            filters.append(self.model.is_published == True)  # noqa: E712

        # Bornes nulles = période ouverte
        now = datetime.now(timezone.utc)
        if hasattr(self.model, "starts_at"):
            filters.append(or_(self.model.starts_at.is_(None), self.model.starts_at <= now))
        if hasattr(self.model, "ends_at"):
            filters.append(or_(self.model.ends_at.is_(None), self.model.ends_at >= now))
        return filters
