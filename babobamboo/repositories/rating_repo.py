# ===================================
# babobamboo/repositories/rating_repo.py
# ===================================
from typing import List, Optional, Tuple

from sqlalchemy import select, func, desc
from sqlalchemy.orm import Session

from babobamboo.models.rating import OrderRating


class RatingRepository:
    """Repository pour les notes de commandes"""

    def __init__(self, db: Session):
        self.db = db

    def add_rating(self, order_id: int, user_id: Optional[int], product_id: Optional[int],
                   rating: int, comment: Optional[str] = None) -> OrderRating:
        """Insérer une note dans la transaction en cours (flush sans commit)"""
        order_rating = OrderRating(
            order_id=order_id,
            user_id=user_id,
            product_id=product_id,
            rating=rating,
            comment=comment or None,
        )
        self.db.add(order_rating)
        self.db.flush()
        return order_rating

    def get_order_ratings(self, order_id: int) -> List[OrderRating]:
        return list(self.db.scalars(
            select(OrderRating)
            .where(OrderRating.order_id == order_id)
            .order_by(OrderRating.id)
        ))

    def get_ratings(self, skip: int = 0, limit: int = 50) -> Tuple[List[OrderRating], int]:
        total = self.db.scalar(select(func.count(OrderRating.id)))
        ratings = self.db.scalars(
            select(OrderRating)
            .order_by(desc(OrderRating.created_at), desc(OrderRating.id))
            .offset(skip)
            .limit(limit)
        ).all()
        return list(ratings), total or 0
