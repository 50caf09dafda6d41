"""Populated places grouped by country, loaded from settlements.json."""

import json
import random
from typing import Dict, List, Optional

from .asset import Asset
from .models import Settlement, SettlementsData


class Settlements:
    """Named settlements with population, keyed by ISO country code."""

    def __init__(self, asset: Optional[Asset] = None):
        self.asset = asset or Asset("/settlements.json")
        self._data: Optional[SettlementsData] = None

    @property
    def ready(self) -> bool:
        return self.asset.ready and self._data is not None

    @property
    def loading(self) -> bool:
        return self.asset.loading

    @property
    def error(self) -> Optional[Exception]:
        return self.asset.error

    @property
    def progress(self) -> Dict[str, int]:
        return self.asset.progress

    async def load(self, verbose: bool = False) -> "Settlements":
        """Download and parse the settlements. Cached after the first success."""
        raw = await self.asset.load(verbose=verbose)
        if self._data is None:
            parsed = json.loads(raw)
            self._data = {
                code: [Settlement.from_dict(entry) for entry in entries]
                for code, entries in parsed.items()
            }
            if verbose:
                total = sum(len(entries) for entries in self._data.values())
                print(f"🏘️  Loaded {total} settlements in {len(self._data)} countries")
        return self

    def reset(self) -> None:
        self.asset.reset()
        self._data = None

    def pick_random(self, country: str, min_pop: int = 0) -> Optional[Settlement]:
        """Pick a random settlement with at least ``min_pop`` inhabitants.

        Returns:
            Settlement, or None if the country is unknown or nothing qualifies
        """
        candidates = self.get_cities(country, min_pop)
        if not candidates:
            return None
        return random.choice(candidates)

    def get_countries(self) -> List[str]:
        return sorted(self._data or {})

    def get_cities(self, country: str, min_pop: int = 0) -> List[Settlement]:
        return [s for s in (self._data or {}).get(country, []) if s.pop >= min_pop]
