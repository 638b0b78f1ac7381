"""Erreurs et avertissements du domaine.

- `InvalidDateError`: date ou heure de naissance hors calendrier (levée, jamais réessayée).
- `StoreUnavailable`: échec d'E/S du dépôt de contenus, propagé tel quel (distinct de
  l'absence de contenu, qui se traduit par `None`).
- `StaleModelWarning`: avertissement non bloquant quand le modèle planétaire est interrogé
  loin de sa fenêtre d'ancrage.
"""


class AstroCuspError(Exception):
    """Base des erreurs métier de l'application."""


class InvalidDateError(AstroCuspError, ValueError):
    """Date ou heure fournie invalide (format ou valeur calendaire)."""

    def __init__(self, value: object, reason: str = "invalid calendar date") -> None:
        super().__init__(f"{reason}: {value!r}")
        self.value = value
        self.reason = reason


class StoreUnavailable(AstroCuspError):
    """Le dépôt de contenus est injoignable ou a renvoyé une réponse illisible."""


class StaleModelWarning(UserWarning):
    """Le modèle planétaire ou les fenêtres rétrogrades sont utilisés hors de leur plage."""
