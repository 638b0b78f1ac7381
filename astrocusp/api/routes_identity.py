"""
Routes d'identité: signe solaire ou cuspide, et ascendant estimé.

Les deux routes prennent un `BirthInfo`; une date ou heure invalide est renvoyée en 422
`INVALID_DATE` par le gestionnaire d'erreurs global.
"""

from fastapi import APIRouter

from astrocusp.api.schemas import CuspResponse
from astrocusp.core.container import container
from astrocusp.domain.entities import BirthInfo, RisingSignResult
from astrocusp.domain.services import effective_sign
from astrocusp.domain.sign_labels import slugify_sign

router = APIRouter(prefix="/identity", tags=["identity"])


@router.post("/cusp", response_model=CuspResponse)
def post_cusp(payload: BirthInfo):
    """
    Détermine signe pur ou cuspide pour une date de naissance.

    Paramètres:
    - payload: `BirthInfo` (seule la date est utilisée).

    Retour: `CuspResponse` avec le signe effectif et son slug.
    """
    result = container.identity.cusp(payload)
    sign = effective_sign(result) or result.primary_sign
    return CuspResponse(**result.model_dump(), effective_sign=sign, slug=slugify_sign(sign))


@router.post("/rising", response_model=RisingSignResult)
def post_rising(payload: BirthInfo):
    """Ascendant estimé à partir de l'heure et du jour de l'année de naissance."""
    return container.identity.rising(payload)
