# ===================================
# babobamboo/repositories/order_repo.py
# ===================================
from typing import List, Optional, Tuple
from datetime import date

from sqlalchemy import select, func, and_, desc, update
from sqlalchemy.orm import Session, selectinload

from babobamboo.models.order import Order, OrderItem


class OrderRepository:
    """Repository pour la gestion des commandes"""

    def __init__(self, db: Session):
        self.db = db

    def add_order(self, order: Order) -> Order:
        """Ajouter une commande (et ses lignes) à la transaction en cours"""
        self.db.add(order)
        self.db.flush()
        return order

    def get_order_by_rating_token(self, token: str) -> Optional[Order]:
        return self.db.scalar(
            select(Order)
            .where(Order.rating_token == token)
            .options(selectinload(Order.items).selectinload(OrderItem.product))
        )

    def get_order_for_rating(self, order_id: int, token: str) -> Optional[Order]:
        """
        Commande correspondant à la fois à l'ID et au jeton, verrouillée
        jusqu'à la fin de la transaction (FOR UPDATE, ignoré par SQLite)
        """
        return self.db.scalar(
            select(Order)
            .where(and_(Order.id == order_id, Order.rating_token == token))
            .with_for_update()
        )

    def claim_rating_token(self, order_id: int) -> bool:
        """
        Passer rating_token_used à True seulement s'il est encore False.
        Retourne False si une autre soumission l'a déjà consommé.
        """
        result = self.db.execute(
            update(Order)
            .where(and_(Order.id == order_id, Order.rating_token_used == False))  # noqa: E712
            .values(rating_token_used=True)
            .execution_options(synchronize_session=False)
        )
        return result.rowcount == 1

    def get_due_rating_orders(self, today: date, oldest: Optional[date] = None) -> List[Order]:
        """Commandes dont l'email de notation est dû et pas encore envoyé"""
        conditions = [
            Order.send_rating_email_date.is_not(None),
            Order.send_rating_email_date <= today,
            Order.rating_email_sent == False,  # noqa: E712
            Order.rating_token.is_not(None),
        ]
        if oldest is not None:
            conditions.append(Order.send_rating_email_date >= oldest)

        return list(self.db.scalars(
            select(Order)
            .where(and_(*conditions))
            .options(selectinload(Order.user))
        ))

    def mark_rating_email_sent(self, order_id: int) -> None:
        self.db.execute(
            update(Order)
            .where(Order.id == order_id)
            .values(rating_email_sent=True)
            .execution_options(synchronize_session=False)
        )

    def get_orders(self, skip: int = 0, limit: int = 50,
                   user_id: Optional[int] = None) -> Tuple[List[Order], int]:
        """Commandes les plus récentes d'abord, avec leurs lignes"""
        query = select(Order)
        if user_id is not None:
            query = query.where(Order.user_id == user_id)

        total = self.db.scalar(select(func.count()).select_from(query.subquery()))

        orders = self.db.scalars(
            query.options(selectinload(Order.items))
            .order_by(desc(Order.created_at), desc(Order.id))
            .offset(skip)
            .limit(limit)
        ).all()
        return list(orders), total or 0
