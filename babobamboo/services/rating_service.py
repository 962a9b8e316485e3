# ===================================
# babobamboo/services/rating_service.py
# ===================================
"""
Cycle de vie du lien de notation d'une commande.

    NO_TOKEN -> PENDING_SEND -> SENT -> USED

- création de commande : jeton émis si la notation est active, date d'envoi
  calculée si l'email automatique est actif (J+3 ou J+1)
- balayage quotidien : envoi séquentiel des emails dus, marqués envoyés
  seulement en cas de succès, retentés au balayage suivant sinon
- soumission publique : le jeton est une capacité au porteur, consommée une
  seule fois, toutes les notes sont écrites ou aucune
"""
import logging
import uuid
from dataclasses import dataclass, field
from datetime import date, datetime, timedelta
from typing import Callable, Dict, List, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from babobamboo.core.exceptions import (
    AppError, NotFoundError, PersistenceError, RatingAlreadySubmittedError, ValidationError,
)
from babobamboo.repositories.order_repo import OrderRepository
from babobamboo.repositories.rating_repo import RatingRepository
from babobamboo.services.email_service import build_rating_link
from babobamboo.services.feature_service import (
    AUTO_RATING_EMAIL, ORDER_RATING, RATING_LINK_AFTER_3_DAYS,
)
from babobamboo.services.translation_service import resolve_fields

logger = logging.getLogger(__name__)

RATING_MIN = 1
RATING_MAX = 5


def utc_today() -> date:
    return datetime.utcnow().date()


def generate_rating_token() -> str:
    """Jeton aléatoire 128 bits (UUID4), imprévisible"""
    return uuid.uuid4().hex


@dataclass(frozen=True)
class RatingCapability:
    """
    Droit de noter une commande, détenu par quiconque possède le lien.
    Distinct d'une session utilisateur : ne jamais l'utiliser comme identité.
    """
    order_id: int
    token: str = field(repr=False)

    def __repr__(self):
        return f"RatingCapability(order_id={self.order_id}, token=***)"


@dataclass(frozen=True)
class RatingSchedule:
    token: Optional[str]
    send_date: Optional[date]


def compute_rating_schedule(flags: Dict[str, bool], today: date,
                            token_factory: Callable[[], str] = generate_rating_token) -> RatingSchedule:
    """Jeton et date d'envoi à enregistrer sur une nouvelle commande"""
    if not flags.get(ORDER_RATING, False):
        return RatingSchedule(token=None, send_date=None)

    token = token_factory()
    if not flags.get(AUTO_RATING_EMAIL, False):
        # Jeton utilisable si le client a le lien, mais jamais envoyé automatiquement
        return RatingSchedule(token=token, send_date=None)

    delay = 3 if flags.get(RATING_LINK_AFTER_3_DAYS, False) else 1
    return RatingSchedule(token=token, send_date=today + timedelta(days=delay))


@dataclass
class ProductRatingInput:
    product_id: int
    rating: int
    comment: Optional[str] = None


class RatingService:
    """Consultation et soumission des notes via le lien de notation"""

    def __init__(self, db: Session):
        self.db = db
        self.order_repo = OrderRepository(db)
        self.rating_repo = RatingRepository(db)

    def get_order_for_token(self, token: str, language: str, default_language: str) -> dict:
        """Commande et lignes pour la page publique de notation"""
        order = self.order_repo.get_order_by_rating_token(token) if token else None
        if order is None:
            raise NotFoundError("Lien de notation invalide ou introuvable")
        if order.rating_token_used:
            raise RatingAlreadySubmittedError()

        items = []
        for item in order.items:
            name = ""
            if item.product is not None:
                name = resolve_fields(item.product, language, default_language).get("name", "")
            items.append({**item.to_dict(), "product_name": name})

        return {
            "order_id": order.id,
            "created_at": order.created_at.isoformat() if order.created_at else None,
            "total_amount": float(order.total_amount),
            "items": items,
        }

    def submit_ratings(self, capability: RatingCapability, overall_rating: int,
                       overall_comment: Optional[str],
                       product_ratings: List[ProductRatingInput]) -> int:
        """
        Enregistrer la note globale et les notes produits en une transaction.
        Retourne le nombre de notes créées.
        """
        try:
            order = self.order_repo.get_order_for_rating(capability.order_id, capability.token)
            if order is None:
                raise NotFoundError("Commande ou lien de notation introuvable")
            if order.rating_token_used:
                raise RatingAlreadySubmittedError()

            self._validate_values(overall_rating, product_ratings)
            self._validate_products(order, product_ratings)

            # Vérification et consommation atomiques : une seule soumission concurrente gagne
            if not self.order_repo.claim_rating_token(order.id):
                raise RatingAlreadySubmittedError()

            self.rating_repo.add_rating(order.id, order.user_id, None, overall_rating, overall_comment)
            for product_rating in product_ratings:
                self.rating_repo.add_rating(
                    order.id, order.user_id, product_rating.product_id,
                    product_rating.rating, product_rating.comment,
                )

            self.db.commit()
        except AppError:
            self.db.rollback()
            raise
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error("Soumission des notes échouée pour la commande %s, annulée: %s",
                         capability.order_id, e)
            raise PersistenceError("L'enregistrement des notes a échoué")

        logger.info("Notes enregistrées pour la commande %s (%d produits)",
                    capability.order_id, len(product_ratings))
        return 1 + len(product_ratings)

    def _validate_values(self, overall_rating: int, product_ratings: List[ProductRatingInput]) -> None:
        errors = []
        if overall_rating is None:
            errors.append("La note globale est requise")
        elif not RATING_MIN <= overall_rating <= RATING_MAX:
            errors.append("La note globale doit être comprise entre 1 et 5")
        if not product_ratings:
            errors.append("Au moins une note produit est requise")
        for product_rating in product_ratings or []:
            if not RATING_MIN <= product_rating.rating <= RATING_MAX:
                errors.append(f"La note du produit {product_rating.product_id} doit être comprise entre 1 et 5")
        if errors:
            raise ValidationError(errors)

    def _validate_products(self, order, product_ratings: List[ProductRatingInput]) -> None:
        """Un seul avis par produit, et uniquement pour les produits de la commande"""
        ordered = {item.product_id for item in order.items}
        seen = set()
        errors = []
        for product_rating in product_ratings:
            if product_rating.product_id not in ordered:
                errors.append(f"Le produit {product_rating.product_id} ne fait pas partie de la commande")
            elif product_rating.product_id in seen:
                errors.append(f"Le produit {product_rating.product_id} est noté plusieurs fois")
            seen.add(product_rating.product_id)
        if errors:
            raise ValidationError(errors)


@dataclass
class SweepResult:
    attempted: int = 0
    sent: int = 0
    failed: int = 0

    def to_dict(self) -> dict:
        return {"attempted": self.attempted, "sent": self.sent, "failed": self.failed}


class RatingEmailSweep:
    """Envoi quotidien des emails de notation dus"""

    def __init__(self, db: Session, mailer, frontend_url: Optional[str] = None,
                 retry_days: Optional[int] = None):
        self.db = db
        self.mailer = mailer
        self.frontend_url = frontend_url
        self.retry_days = retry_days
        self.order_repo = OrderRepository(db)

    def run(self, today: Optional[date] = None) -> SweepResult:
        today = today or utc_today()
        oldest = today - timedelta(days=self.retry_days) if self.retry_days else None

        # Extraire les données avant la boucle : chaque commit expire les objets chargés
        due = [
            (order.id, order.recipient_email, order.rating_token)
            for order in self.order_repo.get_due_rating_orders(today, oldest)
        ]
        logger.info("Balayage des emails de notation: %d commande(s) due(s) au %s", len(due), today)

        result = SweepResult()
        # Séquentiel : borne les envois SMTP et écritures concurrents
        for order_id, recipient, token in due:
            self._process(order_id, recipient, token, result)

        logger.info("Balayage terminé: %d envoyé(s), %d échec(s)", result.sent, result.failed)
        return result

    def _process(self, order_id: int, recipient: Optional[str], token: str, result: SweepResult) -> None:
        result.attempted += 1
        link = build_rating_link(token, self.frontend_url)

        try:
            sent = self.mailer.send_rating_email(recipient, order_id, link)
        except Exception:
            # Une commande en échec ne doit pas bloquer les suivantes
            logger.exception("Erreur inattendue à l'envoi de l'email de notation (commande %s)", order_id)
            sent = False

        if not sent:
            result.failed += 1
            return

        try:
            self.order_repo.mark_rating_email_sent(order_id)
            self.db.commit()
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error("Impossible de marquer l'email de notation envoyé (commande %s): %s", order_id, e)
            result.failed += 1
            return

        result.sent += 1
