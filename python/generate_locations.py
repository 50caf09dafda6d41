#!/usr/bin/env python3
"""
Generate game locations from the command line.
Loads the country and settlement datasets, then asks the Street View
coverage service for locations matching the chosen settings.
"""

import argparse
import asyncio
import json
from dataclasses import asdict
from datetime import datetime
from pathlib import Path

from wanderer import Countries, GameSettings, LocationMode, Settlements, generate_location
from wanderer.asset import AssetError
from wanderer.distance import format_distance, haversine_distance
from wanderer.streetview import build_street_view_url, is_api_key_configured


def find_city(settlements: Settlements, country: str, name: str):
    """Find a settlement by name (case-insensitive) within a country."""
    name_lower = name.lower()
    for city in settlements.get_cities(country):
        if city.name.lower() == name_lower:
            return city
    return None


async def load_datasets(*stores, verbose: bool = True):
    """Load each store, leaving it unready if its dataset is unavailable or malformed."""
    for store in stores:
        try:
            await store.load(verbose=verbose)
        except (AssetError, json.JSONDecodeError) as e:
            print(f"⚠️  Could not load dataset, falling back to starter locations: {e}")


async def main():
    """Main entry point."""
    parser = argparse.ArgumentParser(description='Generate Street View locations for a guessing game')
    parser.add_argument('--country', default='all', help='ISO country code, or "all"')
    parser.add_argument('--mode', choices=LocationMode.ALL, default=LocationMode.RANDOM,
                        help='random point in country, random settlement, or around a city')
    parser.add_argument('--min-pop', type=int, default=0, help='Minimum settlement population (urban mode)')
    parser.add_argument('--city', help='City name within --country (city mode)')
    parser.add_argument('--radius', type=float, default=10.0, help='Radius around the city in km (city mode)')
    parser.add_argument('--count', type=int, default=1, help='Number of locations to generate')
    parser.add_argument('--quiet', action='store_true', help='Only print final locations')
    parser.add_argument('--output', type=str, help='Save locations to this JSON file')

    args = parser.parse_args()
    verbose = not args.quiet

    if not is_api_key_configured():
        print("⚠️  GOOGLE_MAPS_API_KEY not set, embed URLs will not work")

    countries = Countries()
    settlements = Settlements()

    await load_datasets(countries, settlements, verbose=verbose)

    city = None
    if args.mode == LocationMode.CITY:
        if args.city and settlements.ready:
            city = find_city(settlements, args.country, args.city)
        if city is None:
            print(f"⚠️  City {args.city!r} not found in {args.country}")

    settings = GameSettings(
        country=args.country,
        mode=args.mode,
        city=city,
        min_pop=args.min_pop,
        city_radius=args.radius,
    )

    locations = []
    previous = None
    for i in range(args.count):
        location = await generate_location(settings, countries, settlements, verbose=verbose)
        print(f"📍 Location {i + 1}: ({location.lat:.6f}, {location.lon:.6f})")
        print(f"   {build_street_view_url(location)}")
        if previous is not None:
            print(f"   📏 {format_distance(haversine_distance(previous, location))} from previous")
        locations.append(location)
        previous = location

    if args.output:
        with open(Path(args.output), 'w') as f:
            json.dump({
                'settings': {
                    'country': settings.country,
                    'mode': settings.mode,
                    'city': city.name if city else None,
                    'min_pop': settings.min_pop,
                    'city_radius': settings.city_radius,
                },
                'locations': [asdict(loc) for loc in locations],
                'timestamp': datetime.now().isoformat()
            }, f, indent=2)
        print(f"💾 Locations saved to {args.output}")

    return locations


if __name__ == "__main__":
    asyncio.run(main())
