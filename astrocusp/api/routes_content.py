"""
Routes de contenu: lecture quotidienne et prévision mensuelle pour un signe.

Un contenu non publié renvoie 404 `CONTENT_NOT_FOUND` (état vide normal); un dépôt injoignable
renvoie 503 `STORE_UNAVAILABLE`. Les deux cas ne sont jamais confondus.
"""

from datetime import date

from fastapi import APIRouter

from astrocusp.api.errors import content_not_found
from astrocusp.core.container import container
from astrocusp.domain.cusp_resolver import parse_birth_date
from astrocusp.domain.entities import DailyContentRow, MonthlyForecastRow
from astrocusp.domain.errors import InvalidDateError

router = APIRouter(prefix="/content", tags=["content"])


@router.get("/daily", response_model=DailyContentRow)
def get_daily(
    sign: str,
    hemisphere: str = "Northern",
    day: str | None = None,
    timezone: str | None = None,
    user: str = "anon",
):
    """
    Retourne le contenu du jour pour un signe ou une cuspide.

    Paramètres:
    - sign: libellé (casse et tirets indifférents, par ex. `aries-taurus cusp`).
    - hemisphere: `Northern`/`Southern` ou `NH`/`SH`.
    - day: date explicite `YYYY-MM-DD`; sinon aujourd'hui dans `timezone` (et dates voisines).
    - timezone: fuseau IANA de l'utilisateur.
    - user: identifiant pour la clé de cache.
    """
    explicit = parse_birth_date(day) if day else None
    row = container.content.daily(sign, hemisphere, user=user, day=explicit, timezone=timezone)
    if row is None:
        raise content_not_found(f"no daily content for {sign!r}", hemisphere=hemisphere)
    return row


@router.get("/monthly", response_model=MonthlyForecastRow)
def get_monthly(
    sign: str,
    hemisphere: str = "Northern",
    month: str | None = None,
    timezone: str | None = None,
):
    """Prévision mensuelle; `month` au format `YYYY-MM` (mois courant par défaut)."""
    first_day: date | None = None
    if month:
        try:
            first_day = date.fromisoformat(f"{month}-01")
        except ValueError as err:
            raise InvalidDateError(month, "invalid month") from err
    row = container.content.monthly(sign, hemisphere, month=first_day, timezone=timezone)
    if row is None:
        raise content_not_found(f"no monthly forecast for {sign!r}", hemisphere=hemisphere)
    return row
