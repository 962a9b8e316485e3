# ===================================
# babobamboo/repositories/feature_repo.py
# ===================================
from typing import Optional

from sqlalchemy.orm import Session

from babobamboo.models.feature import FeatureSettings, FEATURE_DEFAULTS, FEATURE_SETTINGS_ID


class FeatureSettingsRepository:
    """Accès à la ligne unique feature_settings"""

    def __init__(self, db: Session):
        self.db = db

    def get_settings(self) -> Optional[FeatureSettings]:
        # populate_existing : toujours relire la ligne, pas la copie de l'identity map
        return self.db.get(FeatureSettings, FEATURE_SETTINGS_ID, populate_existing=True)

    def save_settings(self, values: dict) -> FeatureSettings:
        """Créer la ligne si absente puis appliquer les valeurs fournies (dernier écrivain gagne)"""
        row = self.get_settings()
        if row is None:
            row = FeatureSettings(id=FEATURE_SETTINGS_ID, **FEATURE_DEFAULTS)
            self.db.add(row)

        for name, value in values.items():
            if name in FEATURE_DEFAULTS and value is not None:
                setattr(row, name, bool(value))

        try:
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise
        self.db.refresh(row)
        return row
