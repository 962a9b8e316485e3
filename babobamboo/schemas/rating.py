# ===================================
# babobamboo/schemas/rating.py
# ===================================
from typing import List, Optional
from pydantic import BaseModel, Field


# Bornes des notes (1 à 5) et liste non vide vérifiées par RatingService,
# après le contrôle du jeton : un lien déjà utilisé répond 409 quel que soit le contenu.
class ProductRatingIn(BaseModel):
    product_id: int
    rating: int = Field(description="Note de 1 à 5")
    comment: Optional[str] = Field(default=None, max_length=2000)


class RatingSubmission(BaseModel):
    """Soumission publique via le lien de notation (le jeton fait office d'autorisation)"""
    order_id: int
    rating_token: str = Field(min_length=1, max_length=64)
    overall_rating: int = Field(description="Note globale de 1 à 5")
    overall_comment: Optional[str] = Field(default=None, max_length=2000)
    product_ratings: List[ProductRatingIn] = Field(default_factory=list)

    def __repr__(self):
        return f"RatingSubmission(order_id={self.order_id}, token=***)"


class RatingSubmittedResponse(BaseModel):
    success: bool = True
    message: str
    data: dict


class RatingsListResponse(BaseModel):
    success: bool = True
    data: List[dict]
    total: int
