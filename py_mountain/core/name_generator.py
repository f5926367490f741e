"""
Name pools for named map features.

Lakes, peaks and campsites draw names without replacement from themed
pools. When a pool runs dry, numbered synthetic names take over so every
feature in a world still gets a unique name.
"""

from __future__ import annotations

from enum import Enum
from typing import Dict, List, Optional, Sequence, Set, Tuple

from py_mountain.core.alea_prng import AleaPRNG


class GameMode(Enum):
    """Naming theme of a world."""

    EARTH = "earth"
    FUTURISTIC = "futuristic"


class EntityType(Enum):
    """Types of entities that can have generated names."""

    LAKE = "lake"
    PEAK = "peak"
    CAMPSITE = "campsite"


FUTURISTIC_LAKE_NAMES = (
    "Nebula Lake", "Starlake", "Quantum Pool", "Aurora Basin",
    "Galactic Lagoon", "Nova Reservoir", "Celestial Mere", "Photon Pond",
    "Gravity Bay", "Cosmic Tarn", "Astro Loch", "Plasma Pool",
    "Pulsar Pool", "Void Waters", "Neutron Nook", "Fusion Fjord",
    "Meteor Mere", "Solar Sea", "Lunar Lake", "Venus Vista",
    "Mars Marsh", "Jupiter Jetty", "Saturn Sound", "Uranus Bay",
    "Neptune Narrows", "Pluto Pond", "Andromeda Arm", "Orion Ocean",
    "Sirius Sea", "Vega Vista", "Polaris Pool", "Cassiopeia Cove",
    "Lyra Lagoon", "Cygnus Sound", "Aquila Arm", "Pegasus Pool",
    "Centaurus Cove", "Draco Delta", "Hydra Harbor", "Leo Lagoon",
    "Virgo Vista", "Libra Lake", "Scorpius Sound", "Sagittarius Sea",
    "Capricorn Cove", "Aquarius Arm", "Pisces Pool", "Aries Arm",
    "Taurus Tarn", "Gemini Gulf", "Cancer Cove", "Leo Lake",
)

EARTH_LAKE_NAMES = (
    "Crystal Lake", "Mirror Lake", "Emerald Lake", "Sapphire Lake",
    "Alpine Lake", "Mountain Lake", "Clear Lake", "Blue Lake",
    "Hidden Lake", "Tranquil Lake", "Serene Lake", "Peaceful Lake",
    "Bear Lake", "Deer Lake", "Eagle Lake", "Fish Lake",
    "Golden Lake", "Silver Lake", "Copper Lake", "Iron Lake",
    "Jade Lake", "Onyx Lake", "Pearl Lake", "Ruby Lake",
    "Diamond Lake", "Amethyst Lake", "Topaz Lake", "Garnet Lake",
    "Opal Lake", "Turquoise Lake", "Coral Lake", "Ivory Lake",
    "Sunset Lake", "Dawn Lake", "Twilight Lake", "Midnight Lake",
    "Morning Lake", "Evening Lake", "Noon Lake", "Dusk Lake",
    "Rainbow Lake", "Thunder Lake", "Lightning Lake", "Storm Lake",
    "Calm Lake", "Rough Lake", "Deep Lake", "Shallow Lake",
    "Long Lake", "Round Lake", "Wide Lake", "Narrow Lake",
)

FUTURISTIC_PEAK_NAMES = (
    "Nebula Peak", "Starlight Spire", "Quantum Summit", "Aurora Pinnacle",
    "Galactic Crest", "Nova Point", "Celestial Apex", "Photon Ridge",
    "Gravity Bluff", "Cosmic Spire", "Astro Horn", "Plasma Heights",
    "Pulsar Peak", "Void Vista", "Neutron Needle", "Fusion Face",
    "Meteor Mesa", "Solar Summit", "Lunar Ledge", "Venus Vantage",
    "Mars Mesa", "Jupiter Junction", "Saturn Spire", "Uranus Uplands",
    "Neptune Needle", "Pluto Peak", "Andromeda Apex", "Orion Overlook",
    "Sirius Spire", "Vega Vantage", "Polaris Peak", "Cassiopeia Crest",
    "Lyra Ledge", "Cygnus Crest", "Aquila Apex", "Pegasus Peak",
    "Centaurus Crest", "Draco Dome", "Hydra Heights", "Leo Ledge",
    "Virgo Verge", "Libra Ledge", "Scorpius Spire", "Sagittarius Summit",
    "Capricorn Crest", "Aquarius Apex", "Pisces Peak", "Aries Apex",
    "Taurus Tower", "Gemini Gorge", "Cancer Crest",
)

EARTH_PEAK_NAMES = (
    "Summit Peak", "Eagle Peak", "Thunder Peak", "Crystal Peak",
    "Alpine Peak", "Mountain Top", "High Point", "Vista Peak",
    "Rocky Peak", "Granite Peak", "Snow Peak", "Cloud Peak",
    "Bear Peak", "Deer Peak", "Elk Peak", "Moose Peak",
    "Wolf Peak", "Coyote Peak", "Fox Peak", "Lynx Peak",
    "Golden Peak", "Silver Peak", "Copper Peak", "Iron Peak",
    "Jade Peak", "Onyx Peak", "Pearl Peak", "Ruby Peak",
    "Diamond Peak", "Amethyst Peak", "Topaz Peak", "Garnet Peak",
    "Opal Peak", "Turquoise Peak", "Coral Peak", "Ivory Peak",
    "Sunset Peak", "Dawn Peak", "Twilight Peak", "Midnight Peak",
    "Morning Peak", "Evening Peak", "Noon Peak", "Dusk Peak",
    "Rainbow Peak", "Lightning Peak", "Storm Peak",
    "Calm Peak", "Rough Peak", "Deep Peak", "Shallow Peak",
)

CAMPSITE_NAMES = (
    "Eagle's Nest", "Bear Creek", "Mountain View", "Pine Ridge",
    "Crystal Lake", "Sunset Peak", "Wildflower Meadow", "Rocky Point",
    "Hidden Valley", "Thunder Ridge", "Misty Falls", "Golden Peak",
    "Emerald Basin", "Silver Creek", "Alpine Meadow", "Cedar Grove",
)

NAME_POOLS: Dict[Tuple[EntityType, GameMode], Sequence[str]] = {
    (EntityType.LAKE, GameMode.FUTURISTIC): FUTURISTIC_LAKE_NAMES,
    (EntityType.LAKE, GameMode.EARTH): EARTH_LAKE_NAMES,
    (EntityType.PEAK, GameMode.FUTURISTIC): FUTURISTIC_PEAK_NAMES,
    (EntityType.PEAK, GameMode.EARTH): EARTH_PEAK_NAMES,
    (EntityType.CAMPSITE, GameMode.FUTURISTIC): CAMPSITE_NAMES,
    (EntityType.CAMPSITE, GameMode.EARTH): CAMPSITE_NAMES,
}

FALLBACK_PREFIX = {
    EntityType.LAKE: "Lake",
    EntityType.PEAK: "Peak",
    EntityType.CAMPSITE: "Campsite",
}


class NamePool:
    """Draws unique names from a fixed list, then falls back to numbers."""

    def __init__(
        self,
        names: Sequence[str],
        fallback_prefix: str,
        prng: AleaPRNG,
    ):
        # Keep first occurrence only; the themed lists are hand-written
        self.names: List[str] = list(dict.fromkeys(names))
        self.fallback_prefix = fallback_prefix
        self.prng = prng
        self.used: Set[str] = set()

    @classmethod
    def for_entity(
        cls,
        entity: EntityType,
        prng: AleaPRNG,
        mode: GameMode = GameMode.FUTURISTIC,
    ) -> NamePool:
        """Build the themed pool for an entity type."""
        return cls(NAME_POOLS[(entity, mode)], FALLBACK_PREFIX[entity], prng)

    @property
    def available(self) -> List[str]:
        return [name for name in self.names if name not in self.used]

    def draw(self) -> str:
        """Draw an unused name."""
        available = self.available
        if available:
            name = self.prng.choice(available)
        else:
            name = self._synthetic_name()
        self.used.add(name)
        return name

    def _synthetic_name(self) -> str:
        number = len(self.used) + 1
        name = f"{self.fallback_prefix} {number}"
        while name in self.used:
            number += 1
            name = f"{self.fallback_prefix} {number}"
        return name

    def reset(self) -> None:
        self.used.clear()


def parse_game_mode(value: Optional[str]) -> GameMode:
    """Parse a game mode string, defaulting to futuristic."""
    if not value:
        return GameMode.FUTURISTIC
    try:
        return GameMode(value.lower())
    except ValueError:
        raise ValueError(
            f"Unknown game mode {value!r}; expected one of "
            f"{[mode.value for mode in GameMode]}"
        ) from None
