# ===================================
# babobamboo/models/order.py
# ===================================
from sqlalchemy import Column, Integer, String, Boolean, DateTime, Date, ForeignKey, DECIMAL, Text, Enum
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from sqlalchemy.ext.hybrid import hybrid_property
import enum

from babobamboo.core.database import Base


class PaymentStatus(str, enum.Enum):
    """Statuts de paiement"""
    PENDING = "pending"
    COMPLETED = "completed"
    FAILED = "failed"
    REFUNDED = "refunded"


class PriceType(str, enum.Enum):
    RETAIL = "retail"
    WHOLESALE = "wholesale"


class RatingState(str, enum.Enum):
    """Cycle de vie du lien de notation"""
    NO_TOKEN = "no_token"         # Notation désactivée à la création
    PENDING_SEND = "pending_send"  # Jeton émis, email pas encore parti
    SENT = "sent"                 # Email de notation envoyé
    USED = "used"                 # Notation soumise, jeton consommé


class Order(Base):
    __tablename__ = "orders"

    id = Column(Integer, primary_key=True, index=True)

    # Client (user_id NULL pour les commandes invités)
    user_id = Column(Integer, ForeignKey('users.id', ondelete='SET NULL'), nullable=True, index=True)
    full_name = Column(String(255), nullable=False)
    email = Column(String(255), nullable=True)
    phone_number = Column(String(50), nullable=True)
    address = Column(Text, nullable=True)
    address_id = Column(Integer, nullable=True)

    total_amount = Column(DECIMAL(10, 2), nullable=False)
    payment_status = Column(Enum(PaymentStatus), default=PaymentStatus.PENDING, nullable=False, index=True)

    # Notation post-achat
    rating_token = Column(String(64), unique=True, index=True, nullable=True)
    send_rating_email_date = Column(Date, nullable=True, index=True)
    rating_email_sent = Column(Boolean, default=False, nullable=False)
    rating_token_used = Column(Boolean, default=False, nullable=False)

    # Timestamps
    created_at = Column(DateTime(timezone=True), server_default=func.now(), index=True)
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    # Relations
    user = relationship("User", back_populates="orders")
    items = relationship("OrderItem", back_populates="order", cascade="all, delete-orphan", lazy="selectin")
    ratings = relationship("OrderRating", back_populates="order", cascade="all, delete-orphan")

    def __repr__(self):
        return f"<Order(id={self.id}, total={self.total_amount})>"

    @property
    def rating_state(self) -> RatingState:
        if not self.rating_token:
            return RatingState.NO_TOKEN
        if self.rating_token_used:
            return RatingState.USED
        if self.rating_email_sent:
            return RatingState.SENT
        return RatingState.PENDING_SEND

    @property
    def recipient_email(self):
        """Email du compte si la commande en a un, sinon celui saisi au checkout"""
        if self.user is not None and self.user.email:
            return self.user.email
        return self.email

    def calculate_total(self):
        """Recalculer le total depuis les lignes"""
        self.total_amount = sum(item.line_total for item in self.items)

    def to_dict(self, with_items: bool = True):
        """Convertir en dictionnaire pour l'API (jamais le jeton de notation)"""
        data = {
            "id": self.id,
            "user_id": self.user_id,
            "full_name": self.full_name,
            "email": self.email,
            "total_amount": float(self.total_amount),
            "payment_status": self.payment_status,
            "rating_state": self.rating_state,
            "send_rating_email_date": (
                self.send_rating_email_date.isoformat() if self.send_rating_email_date else None
            ),
            "created_at": self.created_at.isoformat() if self.created_at else None,
        }
        if with_items:
            data["items"] = [item.to_dict() for item in self.items]
        return data


class OrderItem(Base):
    __tablename__ = "order_items"

    id = Column(Integer, primary_key=True, index=True)
    order_id = Column(Integer, ForeignKey('orders.id', ondelete='CASCADE'), nullable=False, index=True)
    product_id = Column(Integer, ForeignKey('products.id', ondelete='RESTRICT'), nullable=False)

    quantity = Column(Integer, nullable=False)
    # Prix au moment de la commande (important pour l'historique)
    price = Column(DECIMAL(10, 2), nullable=False)
    price_type = Column(Enum(PriceType), default=PriceType.RETAIL, nullable=False)

    order = relationship("Order", back_populates="items")
    product = relationship("Product")

    def __repr__(self):
        return f"<OrderItem(id={self.id}, product_id={self.product_id}, qty={self.quantity})>"

    @hybrid_property
    def line_total(self):
        return self.price * self.quantity

    def to_dict(self):
        return {
            "id": self.id,
            "product_id": self.product_id,
            "quantity": self.quantity,
            "price": float(self.price),
            "price_type": self.price_type,
        }
