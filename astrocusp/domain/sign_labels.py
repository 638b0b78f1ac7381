"""
Adaptateur de libellés de signes (frontière chaînes externes <-> énumérations).

Les libellés reçus de l'extérieur (saisie, routes, lignes du dépôt de contenus) arrivent avec
des conventions hétérogènes: MAJUSCULES, tirets cadratins ou signes moins, espaces autour du
tiret, suffixes de version (`V2`), mot « Cusp » présent ou non. Toute la normalisation est
confinée ici; le reste du domaine travaille sur `Sign` / `Cusp`.

Aucune fonction de ce module ne lève: un libellé vide ou malformé donne une liste vide ou None.
"""

import re

from astrocusp.domain.zodiac import EN_DASH, Cusp, Hemisphere, Sign

# tirets typographiques U+2010..U+2015, moins U+2212, petits/pleine chasse
_DASHES = re.compile(r"[\u2010-\u2015\u2212\ufe58\ufe63\uff0d]")
_PAIR_SEPARATORS = re.compile(r"\s*[&/]\s*")
_SPACES = re.compile(r"\s+")
_HYPHEN_SPACING = re.compile(r"\s*-+\s*")
_TRAILING_VERSION = re.compile(r"\s*\bv\d+$", re.IGNORECASE)
_VERSION_BEFORE_CUSP = re.compile(r"\s*\bv\d+(?=\s+cusp$)", re.IGNORECASE)
_CUSP_WORD = re.compile(r"\bcusp\b", re.IGNORECASE)
_CUSP_SUFFIX = re.compile(r"\s*\bcusp\b.*$", re.IGNORECASE)
_PURE_SUFFIX = re.compile(r"\s*\(pure\)$", re.IGNORECASE)
_SLUG_STRIP = re.compile(r"[^a-z-]")


def _tidy(s: str) -> str:
    """Réduit espaces et tirets puis retire les suffixes de version, jusqu'à stabilité."""
    while True:
        tidied = _SPACES.sub(" ", s).strip()
        tidied = _HYPHEN_SPACING.sub("-", tidied).strip(" -")
        tidied = _VERSION_BEFORE_CUSP.sub("", _TRAILING_VERSION.sub("", tidied))
        if tidied == s:
            return s
        s = tidied


def _title(word: str) -> str:
    return "-".join(part[:1].upper() + part[1:].lower() for part in word.split("-"))


def normalize_label(label: str | None) -> str:
    """
    Forme canonique d'affichage d'un libellé.

    Tous les tirets deviennent `-` (ainsi que `&` et `/` entre deux signes), les espaces sont
    réduits et retirés autour du tiret, les suffixes de version finaux disparaissent et chaque
    mot est capitalisé. `normalize_label(normalize_label(x)) == normalize_label(x)`.

    Args:
        label: Libellé brut (peut être None ou vide).

    Returns:
        str: Libellé normalisé, par ex. `"ARIES – TAURUS CUSP V2"` -> `"Aries-Taurus Cusp"`.
    """
    s = _DASHES.sub("-", str(label or ""))
    s = _PAIR_SEPARATORS.sub("-", s)
    s = _tidy(s)
    return " ".join(_title(word) for word in s.split(" ") if word)


def is_cusp_label(label: str | None) -> bool:
    """True si le libellé mentionne le mot « cusp » (casse indifférente)."""
    return bool(_CUSP_WORD.search(str(label or "")))


def base_label(label: str | None) -> str:
    """Libellé normalisé sans le mot « Cusp » final ni la mention éditoriale « (pure) »."""
    s = _CUSP_SUFFIX.sub("", normalize_label(label))
    return _PURE_SUFFIX.sub("", s).strip(" -")


def _compare_forms(label: str | None) -> set[str]:
    return {form.lower() for form in (normalize_label(label), base_label(label)) if form}


def _pair_parts(label: str | None) -> list[str]:
    return [part for part in base_label(label).split("-") if part]


def build_candidates(label: str | None, allow_single_sign_fallback: bool = False) -> list[str]:
    """
    Construit la liste ordonnée des libellés à essayer contre le dépôt de contenus.

    Args:
        label: Libellé demandé (cuspide ou signe pur).
        allow_single_sign_fallback: Ajoute chaque signe composant d'une cuspide en fin de liste.
            Désactivé par défaut: servir un signe pur à un utilisateur en cuspide est une erreur
            de contenu.

    Returns:
        list[str]: Candidats dédupliqués, par priorité décroissante; vide si le libellé est
        vide ou si une cuspide n'a pas exactement deux composants.
    """
    if is_cusp_label(label):
        parts = _pair_parts(label)
        if len(parts) != 2:
            return []
        a, b = parts
        candidates = [
            f"{a}{EN_DASH}{b} Cusp",
            f"{a}-{b} Cusp",
            f"{a}{EN_DASH}{b}",
            f"{a}-{b}",
        ]
        if allow_single_sign_fallback:
            candidates += [a, b]
    else:
        candidates = [normalize_label(label), base_label(label)]
    return list(dict.fromkeys(c for c in candidates if c))


def labels_match(row_sign: str | None, candidate: str | None) -> bool:
    """Vrai si une des formes {complète, base} du candidat égale une de celles de la ligne."""
    return bool(_compare_forms(row_sign) & _compare_forms(candidate))


def cusp_components(label: str | None) -> list[str]:
    """Signes composants d'un libellé de cuspide, dans l'ordre (vide si malformé)."""
    parts = _pair_parts(label)
    return parts if len(parts) == 2 else []


def parse_identity(label: str | None) -> Sign | Cusp | None:
    """Traduit un libellé externe vers `Sign` ou `Cusp`; None si non reconnu."""
    parts = _pair_parts(label)
    if len(parts) == 1:
        return Sign.from_name(parts[0])
    if len(parts) == 2:
        first, second = Sign.from_name(parts[0]), Sign.from_name(parts[1])
        if first and second:
            return Cusp.between(first, second)
    return None


def slugify_sign(label: str | None) -> str:
    """Slug d'URL: `"Aries–Taurus Cusp"` -> `"aries-taurus-cusp"`."""
    s = normalize_label(label).lower().replace(" ", "-")
    return _SLUG_STRIP.sub("", s)


def normalize_hemisphere(value: Hemisphere | str | None) -> Hemisphere:
    """`Southern`, `SH`, `south`... -> SOUTHERN; tout le reste -> NORTHERN."""
    if isinstance(value, Hemisphere):
        return value
    if str(value or "").strip().lower().startswith("s"):
        return Hemisphere.SOUTHERN
    return Hemisphere.NORTHERN


def hemisphere_variants(value: Hemisphere | str | None) -> list[str]:
    """Formes longue et courte acceptées côté dépôt, par ex. `["Northern", "NH"]`."""
    hemi = normalize_hemisphere(value)
    return [hemi.value, hemi.code]
