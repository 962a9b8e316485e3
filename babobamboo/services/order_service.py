# ===================================
# babobamboo/services/order_service.py
# ===================================
import logging
from datetime import date
from typing import Callable, List, Optional, Tuple

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from babobamboo.core.exceptions import FeatureDisabledError, PersistenceError, ValidationError
from babobamboo.models.order import Order, OrderItem, PaymentStatus, PriceType
from babobamboo.models.product import Product
from babobamboo.models.user import AccountType, User
from babobamboo.repositories.order_repo import OrderRepository
from babobamboo.schemas.order import OrderCreate
from babobamboo.services.feature_service import FeatureGate, ORDER_CREATION
from babobamboo.services.rating_service import compute_rating_schedule, utc_today

logger = logging.getLogger(__name__)

COMPANY_ONLY_WHOLESALE = "enable_company_only_wholesale"


class OrderService:
    """Service pour la création et la consultation des commandes"""

    def __init__(self, db: Session, today: Callable[[], date] = utc_today):
        self.db = db
        self.today = today
        self.repo = OrderRepository(db)
        self.gate = FeatureGate(db)

    def create_order(self, data: OrderCreate, user: Optional[User] = None) -> Order:
        """
        Créer une commande (invité ou connecté) avec ses lignes et le calendrier
        de notation, le tout dans une seule transaction.
        """
        flags = self.gate.get_flags()
        if not flags[ORDER_CREATION]:
            raise FeatureDisabledError("La création de commandes est désactivée")

        items = self._build_items(data, user, flags)
        schedule = compute_rating_schedule(flags, self.today())

        order = Order(
            user_id=user.id if user is not None else None,
            full_name=data.full_name,
            email=data.email or (user.email if user is not None else None),
            phone_number=data.phone_number,
            address=data.address,
            address_id=data.address_id,
            # La commande est enregistrée après confirmation du paiement
            payment_status=PaymentStatus.COMPLETED,
            rating_token=schedule.token,
            send_rating_email_date=schedule.send_date,
        )
        order.items.extend(items)
        order.calculate_total()

        try:
            self.repo.add_order(order)
            self.db.commit()
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error("Création de commande échouée, transaction annulée: %s", e)
            raise PersistenceError("La création de la commande a échoué")

        self.db.refresh(order)
        logger.info("Commande %s créée (%d lignes, notation: %s)",
                    order.id, len(items), order.rating_state.value)
        return order

    def list_orders(self, skip: int = 0, limit: int = 50,
                    user_id: Optional[int] = None) -> Tuple[List[Order], int]:
        return self.repo.get_orders(skip=skip, limit=limit, user_id=user_id)

    def _build_items(self, data: OrderCreate, user: Optional[User], flags: dict) -> List[OrderItem]:
        """Lignes de commande au prix actuel des produits"""
        errors = []
        items = []
        is_company = user is not None and user.account_type == AccountType.COMPANY

        for line in data.cart_items:
            product = self.db.get(Product, line.product_id)
            if product is None or not product.is_active:
                errors.append(f"Produit {line.product_id} introuvable ou inactif")
                continue

            if line.type == PriceType.WHOLESALE:
                if flags.get(COMPANY_ONLY_WHOLESALE) and not is_company:
                    errors.append(f"Le prix wholesale du produit {line.product_id} est réservé aux entreprises")
                    continue

            price = product.price_for(line.type.value)
            if price is None:
                errors.append(f"Aucun prix {line.type.value} pour le produit {line.product_id}")
                continue

            items.append(OrderItem(
                product_id=product.id,
                quantity=line.quantity,
                price=price,
                price_type=line.type,
            ))

        if errors:
            raise ValidationError(errors)
        return items
