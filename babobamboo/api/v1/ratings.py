# ===================================
# babobamboo/api/v1/ratings.py
# ===================================
from typing import Any
from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from babobamboo.api.deps import get_pagination_params
from babobamboo.core.database import get_db
from babobamboo.core.security import require_admin
from babobamboo.repositories.rating_repo import RatingRepository
from babobamboo.schemas.rating import RatingSubmission, RatingSubmittedResponse, RatingsListResponse
from babobamboo.services.rating_service import ProductRatingInput, RatingCapability, RatingService

router = APIRouter()


@router.post("/", response_model=RatingSubmittedResponse, status_code=status.HTTP_201_CREATED)
def submit_ratings(
    submission: RatingSubmission,
    db: Session = Depends(get_db)
) -> Any:
    """
    Soumettre la note globale et les notes produits d'une commande.
    Pas de session requise : le jeton du lien de notation autorise l'opération, une seule fois.
    """
    capability = RatingCapability(order_id=submission.order_id, token=submission.rating_token)
    count = RatingService(db).submit_ratings(
        capability,
        submission.overall_rating,
        submission.overall_comment,
        [
            ProductRatingInput(product_id=item.product_id, rating=item.rating, comment=item.comment)
            for item in submission.product_ratings
        ],
    )
    return RatingSubmittedResponse(
        message="Merci pour votre avis !",
        data={"order_id": submission.order_id, "ratings_created": count}
    )


@router.get("/", response_model=RatingsListResponse)
def list_ratings(
    pagination: tuple = Depends(get_pagination_params),
    current_user=Depends(require_admin),
    db: Session = Depends(get_db)
) -> Any:
    """Toutes les notes, les plus récentes d'abord (Admin)"""
    skip, limit = pagination
    ratings, total = RatingRepository(db).get_ratings(skip=skip, limit=limit)
    return RatingsListResponse(data=[rating.to_dict() for rating in ratings], total=total)
