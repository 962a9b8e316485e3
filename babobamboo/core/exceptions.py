# ===================================
# babobamboo/core/exceptions.py
# ===================================
"""
Exceptions métier de l'application.

Les services lèvent ces exceptions, les gestionnaires globaux de main.py
les traduisent en réponses JSON avec le bon code HTTP.
"""
from typing import List, Optional


class AppError(Exception):
    """Erreur applicative de base"""

    status_code = 500
    code = "internal_error"
    default_message = "Erreur interne du serveur"

    def __init__(self, message: Optional[str] = None, code: Optional[str] = None):
        self.message = message or self.default_message
        if code:
            self.code = code
        super().__init__(self.message)


class ValidationError(AppError):
    """Champ requis manquant ou invalide (400)"""

    status_code = 400
    code = "validation_error"
    default_message = "Données invalides"

    def __init__(self, errors: List[str], message: Optional[str] = None):
        self.errors = list(errors)
        super().__init__(message or (self.errors[0] if len(self.errors) == 1 else self.default_message))


class NotFoundError(AppError):
    status_code = 404
    code = "not_found"
    default_message = "Ressource non trouvée"


class ConflictError(AppError):
    status_code = 409
    code = "conflict"
    default_message = "Conflit avec l'état actuel de la ressource"


class RatingAlreadySubmittedError(ConflictError):
    """Le lien de notation a déjà été utilisé"""

    code = "already_rated"
    default_message = "Cette commande a déjà été notée"


class FeatureDisabledError(AppError):
    status_code = 403
    code = "feature_disabled"
    default_message = "Cette fonctionnalité est désactivée"


class PersistenceError(AppError):
    """Échec d'écriture en base, la transaction a été annulée"""

    status_code = 500
    code = "persistence_error"
    default_message = "L'enregistrement a échoué"
