"""
Fenêtre glissante d'évènements du ciel.

Assemble plusieurs générateurs indépendants (quartiers de Lune, équinoxes/solstices, entrées de
planètes dans un signe, stations rétrogrades/directes, pluies de météores) et un évènement
« permanent » de constellations de saison, puis filtre sur [aujourd'hui, maintenant + N jours]
par date calendaire, trie et déduplique sur (nom, date).

Rien n'est persisté: la liste est recalculée à chaque appel.
"""

from collections.abc import Iterable
from dataclasses import dataclass
from datetime import UTC, date, datetime, timedelta, tzinfo
from itertools import islice

from astrocusp.domain.entities import AstronomicalEvent, MoonPhase
from astrocusp.domain.lunar import MoonIllumination, iter_major_phases
from astrocusp.domain.planets import (
    PLANETS,
    RETROGRADE_WINDOWS,
    longitude_at,
    sign_and_degree,
)
from astrocusp.domain.zodiac import Hemisphere

DEFAULT_WINDOW_DAYS = 45
LUNAR_QUARTER_COUNT = 4
HIGHLIGHT_SIZE = 5

LUNAR_DESCRIPTIONS = {
    "New Moon": "Dark skies for deep intention-setting rituals.",
    "First Quarter": "Action/checkpoint energy — push plans forward.",
    "Full Moon": "Heightened illumination — perfect for release/celebration workings.",
    "Last Quarter": "Integration and review — recalibrate before the next cycle.",
}


@dataclass(frozen=True)
class SeasonMarker:
    month: int
    day: int
    hour: int
    kind: str  # "equinox" | "solstice"
    northern_name: str
    southern_name: str
    northern_description: str
    southern_description: str

    def at(self, year: int) -> datetime:
        return datetime(year, self.month, self.day, self.hour, tzinfo=UTC)


# Dates UTC approximatives, suffisantes pour placer l'évènement dans la bonne semaine
SEASON_MARKERS: tuple[SeasonMarker, ...] = (
    SeasonMarker(
        3, 20, 21, "equinox",
        "Vernal Equinox (North)", "Autumnal Equinox (South)",
        "Balance point: day ≈ night — Spring begins in the Northern Hemisphere.",
        "Balance point: day ≈ night — Autumn begins in the Southern Hemisphere.",
    ),
    SeasonMarker(
        6, 21, 9, "solstice",
        "Summer Solstice (North)", "Winter Solstice (South)",
        "Longest day of the year in the Northern Hemisphere.",
        "Shortest day of the year in the Southern Hemisphere.",
    ),
    SeasonMarker(
        9, 22, 13, "equinox",
        "Autumnal Equinox (North)", "Vernal Equinox (South)",
        "Balance point: day ≈ night — Autumn begins in the Northern Hemisphere.",
        "Balance point: day ≈ night — Spring begins in the Southern Hemisphere.",
    ),
    SeasonMarker(
        12, 21, 15, "solstice",
        "Winter Solstice (North)", "Summer Solstice (South)",
        "Shortest day of the year in the Northern Hemisphere.",
        "Longest day of the year in the Southern Hemisphere.",
    ),
)

# Index de saison: 0 = déc-fév, 1 = mars-mai, 2 = juin-août, 3 = sept-nov
CONSTELLATIONS: dict[Hemisphere, tuple[tuple[str, ...], ...]] = {
    Hemisphere.NORTHERN: (
        ("Orion", "Taurus", "Gemini", "Auriga", "Perseus", "Canis Major", "Ursa Major",
         "Cassiopeia"),
        ("Leo", "Virgo", "Boötes", "Corona Borealis", "Ursa Major", "Ursa Minor", "Draco",
         "Cassiopeia"),
        ("Cygnus", "Lyra", "Aquila", "Hercules", "Ophiuchus", "Ursa Major", "Cassiopeia",
         "Draco"),
        ("Pegasus", "Andromeda", "Cassiopeia", "Cepheus", "Ursa Major", "Perseus", "Aries",
         "Triangulum"),
    ),
    Hemisphere.SOUTHERN: (
        ("Southern Cross", "Centaurus", "Carina", "Vela", "Puppis", "Crux", "Musca",
         "Chamaeleon"),
        ("Southern Cross", "Centaurus", "Hydra", "Crater", "Corvus", "Carina", "Chamaeleon",
         "Volans"),
        ("Southern Cross", "Centaurus", "Carina", "Sagittarius", "Scorpius", "Ara",
         "Telescopium", "Corona Australis"),
        ("Southern Cross", "Centaurus", "Carina", "Grus", "Phoenix", "Tucana", "Pavo", "Indus"),
    ),
}


@dataclass(frozen=True)
class MeteorShower:
    name: str
    start: tuple[int, int]  # (mois, jour)
    peak: tuple[int, int]
    end: tuple[int, int]
    radiant: str  # "Northern" | "Southern" | "Both"
    zhr: int


METEOR_SHOWERS: tuple[MeteorShower, ...] = (
    MeteorShower("Quadrantids", (1, 1), (1, 3), (1, 5), "Northern", 110),
    MeteorShower("Lyrids", (4, 14), (4, 22), (4, 30), "Northern", 18),
    MeteorShower("Eta Aquariids", (4, 19), (5, 6), (5, 28), "Southern", 50),
    MeteorShower("Perseids", (7, 17), (8, 12), (8, 24), "Northern", 100),
    MeteorShower("Draconids", (10, 6), (10, 8), (10, 10), "Northern", 10),
    MeteorShower("Orionids", (10, 2), (10, 21), (11, 7), "Both", 20),
    MeteorShower("Leonids", (11, 6), (11, 17), (11, 30), "Both", 15),
    MeteorShower("Geminids", (12, 4), (12, 14), (12, 17), "Both", 150),
    MeteorShower("Ursids", (12, 17), (12, 22), (12, 26), "Northern", 10),
)


def _short(d: date) -> str:
    return f"{d:%b} {d.day}"


def _local_day(instant: datetime, tz: tzinfo) -> date:
    if instant.tzinfo is None:
        instant = instant.replace(tzinfo=UTC)
    return instant.astimezone(tz).date()


def visible_constellations(hemisphere: Hemisphere, month: int) -> list[str]:
    """Constellations remarquables de la saison (mois 1..12) pour un hémisphère."""
    return list(CONSTELLATIONS[hemisphere][(month % 12) // 3])


def lunar_quarter_events(
    now: datetime, moon: MoonIllumination, tz: tzinfo = UTC, count: int = LUNAR_QUARTER_COUNT
) -> list[AstronomicalEvent]:
    return [
        AstronomicalEvent(
            name=name,
            description=LUNAR_DESCRIPTIONS[name],
            date=_local_day(found, tz),
            kind="moon",
        )
        for name, found in islice(iter_major_phases(now, moon), count)
    ]


def season_events(
    hemisphere: Hemisphere, now: datetime, tz: tzinfo = UTC
) -> list[AstronomicalEvent]:
    """Équinoxes et solstices de l'année courante et suivante, libellés selon l'hémisphère."""
    year = _local_day(now, UTC).year
    northern = hemisphere is Hemisphere.NORTHERN
    events = []
    for y in (year, year + 1):
        for marker in SEASON_MARKERS:
            events.append(
                AstronomicalEvent(
                    name=marker.northern_name if northern else marker.southern_name,
                    description=(
                        marker.northern_description if northern else marker.southern_description
                    ),
                    date=_local_day(marker.at(y), tz),
                    hemisphere_scope=hemisphere.value,
                    kind=marker.kind,
                )
            )
    return events


def ingress_events(now: datetime, window_days: int, tz: tzinfo = UTC) -> list[AstronomicalEvent]:
    """Première entrée dans un nouveau signe de chaque planète (balayage quotidien)."""
    events = []
    for planet in PLANETS:
        previous, _ = sign_and_degree(longitude_at(planet, now))
        for i in range(1, window_days + 1):
            t = now + timedelta(days=i)
            sign, _ = sign_and_degree(longitude_at(planet, t))
            if sign is not previous:
                events.append(
                    AstronomicalEvent(
                        name=f"{planet} enters {sign.value}",
                        description=(
                            f"{planet} moves into {sign.value}, shifting the collective tone "
                            "for this area."
                        ),
                        date=_local_day(t, tz),
                        kind="planet",
                    )
                )
                break
    return events


def station_events() -> list[AstronomicalEvent]:
    """Stations rétrogrades (début de fenêtre) et directes (fin de fenêtre) des tables."""
    events = []
    for planet, spans in RETROGRADE_WINDOWS.items():
        for start, end in spans:
            events.append(
                AstronomicalEvent(
                    name=f"{planet} stations Retrograde",
                    description=(
                        f"{planet} appears to reverse — review, rework, and reframe themes "
                        "of this planet."
                    ),
                    date=start,
                    kind="planet",
                )
            )
            events.append(
                AstronomicalEvent(
                    name=f"{planet} stations Direct",
                    description=(
                        f"{planet} resumes forward motion — momentum returns in this domain."
                    ),
                    date=end,
                    kind="planet",
                )
            )
    return events


def meteor_events(
    hemisphere: Hemisphere, now: datetime, tz: tzinfo = UTC
) -> list[AstronomicalEvent]:
    """Pics de pluies de météores; radiant opposé signalé « (lower in your sky) »."""
    year = _local_day(now, tz).year
    events = []
    for y in (year, year + 1):
        for shower in METEOR_SHOWERS:
            start, peak, end = (date(y, *md) for md in (shower.start, shower.peak, shower.end))
            visible = shower.radiant in ("Both", hemisphere.value)
            events.append(
                AstronomicalEvent(
                    name=shower.name if visible else f"{shower.name} (lower in your sky)",
                    description=(
                        f"Active {_short(start)}–{_short(end)}. Best after midnight; "
                        f"ZHR ~{shower.zhr}."
                    ),
                    date=peak,
                    hemisphere_scope=shower.radiant,
                    kind="meteor",
                )
            )
    return events


def highlight_event(hemisphere: Hemisphere, today: date) -> AstronomicalEvent:
    names = visible_constellations(hemisphere, today.month)[:HIGHLIGHT_SIZE]
    return AstronomicalEvent(
        name=f"{hemisphere.value} sky highlight",
        description=f"Prime constellations this season: {', '.join(names)}…",
        date=today,
        hemisphere_scope=hemisphere.value,
        kind="planet",
    )


def in_window(
    events: Iterable[AstronomicalEvent], first_day: date, last_day: date
) -> list[AstronomicalEvent]:
    """Filtre [first_day, last_day], trie par date (stable) et déduplique sur (nom, date)."""
    kept = sorted((e for e in events if first_day <= e.date <= last_day), key=lambda e: e.date)
    seen: set[tuple[str, date]] = set()
    unique = []
    for event in kept:
        key = (event.name, event.date)
        if key not in seen:
            seen.add(key)
            unique.append(event)
    return unique


def upcoming_events(
    hemisphere: Hemisphere,
    now: datetime,
    moon: MoonIllumination,
    window_days: int = DEFAULT_WINDOW_DAYS,
    tz: tzinfo = UTC,
) -> list[AstronomicalEvent]:
    """
    Build the upcoming sky events for a hemisphere.

    Args:
        hemisphere: Hémisphère de l'observateur (libellés saisonniers, météores).
        now: Instant de référence.
        moon: Fournisseur d'éclairement lunaire.
        window_days: Largeur de la fenêtre en jours.
        tz: Fuseau servant à dater les évènements.

    Returns:
        list[AstronomicalEvent]: évènements datés dans [aujourd'hui, now + window_days], triés.
    """
    today = _local_day(now, tz)
    last_day = _local_day(now + timedelta(days=window_days), tz)
    events = [
        *lunar_quarter_events(now, moon, tz),
        *season_events(hemisphere, now, tz),
        *ingress_events(now, window_days, tz),
        *station_events(),
        *meteor_events(hemisphere, now, tz),
        highlight_event(hemisphere, today),
    ]
    return in_window(events, today, last_day)


def sky_insight(
    hemisphere: Hemisphere, moon_phase: MoonPhase, events: list[AstronomicalEvent]
) -> str:
    """Phrase de synthèse: phase lunaire, repères de l'hémisphère et premier évènement daté.

    L'évènement de constellations est permanent et ne compte pas comme « premier évènement ».
    """
    highlight = f"{hemisphere.value} sky highlight"
    first = next((e for e in events if e.name != highlight), None)
    top = f"{first.name} on {first.date:%d/%m/%Y}." if first else ""
    lead = f"The {moon_phase.phase_name.lower()} ({moon_phase.illumination_percent}% lit)"
    if hemisphere is Hemisphere.SOUTHERN:
        line = f"{lead} frames southern treasures like the Southern Cross and Carina. {top}"
    else:
        line = f"{lead} sets the stage for Polaris, Cassiopeia and Orion season. {top}"
    return line.strip()
