"""
Named plant archetypes available to the scripts and the video cache.
"""

from typing import Dict, List

from .archetype import ArchetypePolicy
from .pine import PinePolicy
from .sunflower import SunflowerPolicy


ARCHETYPES: Dict[str, ArchetypePolicy] = {
    PinePolicy.name: PinePolicy(),
    SunflowerPolicy.name: SunflowerPolicy(),
}


def available_archetypes() -> List[str]:
    return list(ARCHETYPES)


def get_archetype(name: str) -> ArchetypePolicy:
    if name not in ARCHETYPES:
        raise KeyError(
            f"Unknown archetype '{name}'. Available: {', '.join(available_archetypes())}"
        )
    return ARCHETYPES[name]
