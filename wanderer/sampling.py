"""Location generation for game rounds."""

import random
from typing import Any, Callable, List, Optional

from .coordinates import random_point_in_radius
from .countries import Countries
from .models import GameSettings, Location, LocationMode
from .settlements import Settlements
from .starters import pick_starter
from .streetview import check_coverage

MAX_ATTEMPTS = 20


def pick_random_country(codes: List[str]) -> str:
    return random.choice(codes)


def generate_candidate(
    settings: GameSettings,
    countries: Optional[Countries] = None,
    settlements: Optional[Settlements] = None,
) -> Location:
    """Generate a candidate location from game settings, without a coverage check.

    Falls back to a starter location whenever the requested mode cannot be
    served (data not loaded, no matching settlement, no country chosen).

    Args:
        settings: Game settings for this round
        countries: Country borders, used in random mode
        settlements: Settlements, used in urban mode

    Returns:
        Candidate location
    """
    if settings.mode == LocationMode.CITY:
        if settings.city:
            return random_point_in_radius(settings.city.lat, settings.city.lon, settings.city_radius)

    elif settings.mode == LocationMode.URBAN:
        if settlements is not None and settlements.ready:
            country = settings.country
            if country == "all":
                codes = settlements.get_countries()
                country = pick_random_country(codes) if codes else None

            settlement = settlements.pick_random(country, settings.min_pop) if country else None
            if settlement:
                return Location(lat=settlement.lat, lon=settlement.lon)

    elif settings.mode == LocationMode.RANDOM:
        if countries is not None and countries.ready and settings.country != "all":
            point = countries.random_point_in(settings.country)
            if point:
                return point

    return pick_starter()


async def generate_location(
    settings: GameSettings,
    countries: Optional[Countries] = None,
    settlements: Optional[Settlements] = None,
    on_attempt: Optional[Callable[[int], None]] = None,
    transport: Optional[Any] = None,
    verbose: bool = False,
    max_attempts: int = MAX_ATTEMPTS,
) -> Location:
    """Generate a location with Street View coverage.

    Candidates are checked one at a time. The first one with coverage is
    returned as the snapped panorama location, so scoring uses the position
    the player actually sees.

    Args:
        settings: Game settings for this round
        countries: Country borders, used in random mode
        settlements: Settlements, used in urban mode
        on_attempt: Called with the attempt number (1-based) before each attempt
        transport: Coverage transport passed to check_coverage
        verbose: If True, print progress information
        max_attempts: Number of candidates to try before using a starter location

    Returns:
        Location with coverage. Never fails: falls back to a starter location
    """
    for attempt in range(1, max_attempts + 1):
        if on_attempt:
            on_attempt(attempt)
        if verbose and attempt > 1:
            print(f"🔄 Retry attempt {attempt}/{max_attempts}")

        candidate = generate_candidate(settings, countries, settlements)
        if verbose:
            print(f"🎯 Candidate ({settings.mode}): ({candidate.lat:.6f}, {candidate.lon:.6f})")

        snapped = await check_coverage(candidate.lat, candidate.lon, transport=transport, verbose=verbose)
        if snapped:
            if verbose:
                print(f"✅ Street View found at ({snapped.lat:.6f}, {snapped.lon:.6f})")
            return snapped

        if verbose:
            print("⚠️  No Street View imagery near candidate")

    # Starter locations are known to have coverage
    starter = pick_starter()
    if verbose:
        print(f"❌ No coverage after {max_attempts} attempts, using {starter.name}")
    return starter
