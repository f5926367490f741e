"""
Random number generation utilities.

World generation takes its PRNG explicitly. These helpers turn an optional
user seed into an AleaPRNG and mint fresh seeds when none is given, so
every generated world can be reproduced from the seed it reports.
"""

import secrets
from typing import Optional, Union

from ..core.alea_prng import AleaPRNG

Seed = Union[str, int]


def new_seed() -> str:
    """Return a fresh random seed string."""
    return secrets.token_hex(4)


def resolve_seed(seed: Optional[Seed]) -> str:
    """
    Normalise a user-supplied seed.

    Args:
        seed: Seed string/number, or None for a fresh random one

    Returns:
        Seed as a string
    """
    if seed is None or seed == "":
        return new_seed()
    return str(seed)


def make_prng(seed: Optional[Seed] = None) -> AleaPRNG:
    """
    Build an Alea PRNG for the given seed.

    Args:
        seed: Seed to use; a fresh one is minted when omitted

    Returns:
        AleaPRNG instance
    """
    return AleaPRNG(resolve_seed(seed))
