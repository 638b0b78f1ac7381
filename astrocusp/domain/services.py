"""
Service d'identité astrologique (signe solaire/cuspide, ascendant, signe effectif).
"""

import random

from astrocusp.domain.cusp_resolver import resolve_cusp
from astrocusp.domain.entities import BirthInfo, CuspResult, RisingSignResult
from astrocusp.domain.rising import resolve_rising_for
from astrocusp.domain.sign_labels import normalize_label


def effective_sign(cusp: CuspResult | None, route_sign: str | None = None) -> str | None:
    """Signe à utiliser pour le contenu.

    Priorité: libellé passé par la route, puis nom de cuspide si l'utilisateur est en cuspide,
    puis signe principal. Aucun signe par défaut: None si rien n'est connu.
    """
    from_route = normalize_label(route_sign)
    if from_route:
        return from_route
    if cusp is None:
        return None
    if cusp.is_on_cusp and cusp.cusp_name:
        return cusp.cusp_name
    return cusp.primary_sign or None


class IdentityService:
    """Service métier pour le calcul d'identité à partir des données de naissance.

    Responsabilités:
    - Déterminer signe pur ou cuspide via le résolveur calendaire.
    - Estimer l'ascendant.
    - Exposer le signe effectif servant à choisir le contenu.
    """

    def __init__(self, rng: random.Random | None = None):
        """Initialise le service.

        Paramètres:
        - rng: source aléatoire du degré solaire cosmétique (graine fixe pour des sorties
          reproductibles).
        """
        self.rng = rng or random.Random()

    def cusp(self, birth: BirthInfo) -> CuspResult:
        return resolve_cusp(birth.date, self.rng)

    def rising(self, birth: BirthInfo) -> RisingSignResult:
        return resolve_rising_for(birth)

    def effective_sign(self, birth: BirthInfo, route_sign: str | None = None) -> str | None:
        """Signe effectif d'un utilisateur (voir `effective_sign`)."""
        if normalize_label(route_sign):
            return effective_sign(None, route_sign)
        return effective_sign(self.cusp(birth))
