# ===================================
# babobamboo/api/v1/orders.py
# ===================================
from typing import Any, Optional
from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from babobamboo.api.deps import LanguageContext, get_language_context, get_pagination_params, page_info
from babobamboo.core.database import get_db
from babobamboo.core.security import get_current_active_user, get_current_user_or_none, require_admin
from babobamboo.models.user import User
from babobamboo.schemas.order import (
    OrderCreate, OrderCreated, OrderCreatedResponse, OrdersListResponse, RatingOrderResponse,
)
from babobamboo.services.order_service import OrderService
from babobamboo.services.rating_service import RatingService

router = APIRouter()


@router.post("/", response_model=OrderCreatedResponse, status_code=status.HTTP_201_CREATED)
def create_order(
    order_data: OrderCreate,
    current_user: Optional[User] = Depends(get_current_user_or_none),
    db: Session = Depends(get_db)
) -> Any:
    """
    Créer une commande (invité ou connecté).
    Le jeton et la date d'envoi de l'email de notation sont fixés ici.
    """
    order = OrderService(db).create_order(order_data, current_user)
    return OrderCreatedResponse(
        message="Commande créée avec succès",
        data=OrderCreated(order_id=order.id)
    )


@router.get("/", response_model=OrdersListResponse)
def list_all_orders(
    pagination: tuple = Depends(get_pagination_params),
    current_user: User = Depends(require_admin),
    db: Session = Depends(get_db)
) -> Any:
    """Récupérer toutes les commandes (Admin)"""
    skip, limit = pagination
    orders, total = OrderService(db).list_orders(skip=skip, limit=limit)
    return OrdersListResponse(data=[order.to_dict() for order in orders], **page_info(skip, limit, total))


@router.get("/mine", response_model=OrdersListResponse)
def list_my_orders(
    pagination: tuple = Depends(get_pagination_params),
    current_user: User = Depends(get_current_active_user),
    db: Session = Depends(get_db)
) -> Any:
    """Récupérer les commandes de l'utilisateur connecté"""
    skip, limit = pagination
    orders, total = OrderService(db).list_orders(skip=skip, limit=limit, user_id=current_user.id)
    return OrdersListResponse(data=[order.to_dict() for order in orders], **page_info(skip, limit, total))


@router.get("/by-token/{token}", response_model=RatingOrderResponse)
def get_order_by_rating_token(
    token: str,
    lang: LanguageContext = Depends(get_language_context),
    db: Session = Depends(get_db)
) -> Any:
    """
    Page publique de notation : 404 si le lien est inconnu,
    409 already_rated s'il a déjà servi
    """
    data = RatingService(db).get_order_for_token(token, lang.language, lang.default_language)
    return RatingOrderResponse(data=data)
