# ===================================
# babobamboo/schemas/feature.py
# ===================================
from typing import Dict, Optional
from pydantic import BaseModel, ConfigDict, create_model

from babobamboo.models.feature import FEATURE_DEFAULTS

# Un champ booléen optionnel par drapeau, les drapeaux inconnus sont refusés
FeatureSettingsUpdate = create_model(
    "FeatureSettingsUpdate",
    __config__=ConfigDict(extra="forbid"),
    **{name: (Optional[bool], None) for name in FEATURE_DEFAULTS},
)


class FeatureSettingsResponse(BaseModel):
    success: bool = True
    message: Optional[str] = None
    data: Dict[str, bool]
