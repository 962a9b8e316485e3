# ===================================
# babobamboo/models/rating.py
# ===================================
from sqlalchemy import Column, Integer, DateTime, ForeignKey, Text, CheckConstraint
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from babobamboo.core.database import Base


class OrderRating(Base):
    """
    Note laissée via le lien de notation.
    product_id NULL = note globale de la commande, sinon note d'un produit de la commande.
    """
    __tablename__ = "order_ratings"
    __table_args__ = (
        CheckConstraint("rating BETWEEN 1 AND 5", name="ck_order_rating_range"),
    )

    id = Column(Integer, primary_key=True, index=True)
    order_id = Column(Integer, ForeignKey('orders.id', ondelete='CASCADE'), nullable=False, index=True)
    user_id = Column(Integer, ForeignKey('users.id', ondelete='SET NULL'), nullable=True)
    product_id = Column(Integer, ForeignKey('products.id', ondelete='SET NULL'), nullable=True)

    # Note (1-5 étoiles)
    rating = Column(Integer, nullable=False)
    comment = Column(Text, nullable=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now())

    # Relations
    order = relationship("Order", back_populates="ratings")
    product = relationship("Product")

    def __repr__(self):
        return f"<OrderRating(id={self.id}, order_id={self.order_id}, product_id={self.product_id}, rating={self.rating})>"

    @property
    def is_overall(self) -> bool:
        return self.product_id is None

    def to_dict(self):
        return {
            "id": self.id,
            "order_id": self.order_id,
            "user_id": self.user_id,
            "product_id": self.product_id,
            "rating": self.rating,
            "comment": self.comment,
            "created_at": self.created_at.isoformat() if self.created_at else None,
        }
