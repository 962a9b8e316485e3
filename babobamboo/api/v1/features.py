# ===================================
# babobamboo/api/v1/features.py
# ===================================
from typing import Any

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from babobamboo.core.database import get_db
from babobamboo.core.security import require_admin
from babobamboo.schemas.feature import FeatureSettingsResponse, FeatureSettingsUpdate
from babobamboo.services.feature_service import FeatureGate

router = APIRouter()


@router.get("/", response_model=FeatureSettingsResponse)
def get_feature_settings(db: Session = Depends(get_db)) -> Any:
    """Drapeaux de fonctionnalités (public, lu par le frontend)"""
    return FeatureSettingsResponse(data=FeatureGate(db).get_flags())


@router.put("/", response_model=FeatureSettingsResponse)
def update_feature_settings(
    payload: FeatureSettingsUpdate,
    current_user=Depends(require_admin),
    db: Session = Depends(get_db)
) -> Any:
    """Mettre à jour les drapeaux (admin), les drapeaux omis sont conservés"""
    values = payload.model_dump(exclude_none=True)
    flags = FeatureGate(db).update_flags(values)
    return FeatureSettingsResponse(message="Paramètres mis à jour", data=flags)
