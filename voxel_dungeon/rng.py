# voxel_dungeon/rng.py
"""Deterministic random source used by room placement.

A numpy ``Generator`` seeded from an integer or a string, exposing only
the helpers the dungeon pipeline draws from. Every integer is produced from
exactly one float draw so the draw order of a generation run is fixed and
reproducible.
"""

from __future__ import annotations

import hashlib
import math
import random
from typing import Any, Dict, Optional, Union

import numpy as np

Seed = Union[int, str]


def seed_to_int(seed: Seed) -> int:
    """Map a seed to a 64-bit integer, stable across processes."""
    if isinstance(seed, bool):
        raise TypeError("seed must be an int or a str, not bool")
    if isinstance(seed, int):
        return seed & 0xFFFFFFFFFFFFFFFF
    if isinstance(seed, str):
        digest = hashlib.sha256(seed.encode("utf-8")).digest()
        return int.from_bytes(digest[:8], "little")
    raise TypeError(f"Unsupported seed type: {type(seed).__name__}")


class DungeonRNG:
    def __init__(self, seed: Optional[Seed] = None) -> None:
        self.seed = seed if seed is not None else random.randint(0, 2**32 - 1)
        self.initial_seed = seed_to_int(self.seed)
        self.rng = np.random.default_rng(self.initial_seed)
        self.draws = 0

    def __call__(self) -> float:
        return self.get_float()

    def get_float(self) -> float:
        """Uniform float in [0, 1)."""
        self.draws += 1
        return float(self.rng.random())

    def get_int(self, a: int, b: int) -> int:
        """Uniform integer in [a, b] from a single float draw."""
        if a > b:
            raise ValueError("a <= b")
        return int(math.floor(self.get_float() * ((b - a) + 1) + a))

    # ------------------------------------------------------------------
    # state management
    # ------------------------------------------------------------------
    def get_state(self) -> Dict[str, Any]:
        return {
            "random_state": self.rng.bit_generator.state,
            "initial_seed": self.initial_seed,
            "draws": self.draws,
        }

    def set_state(self, state: Dict[str, Any]) -> None:
        if "random_state" in state:
            self.rng.bit_generator.state = state["random_state"]
        if "initial_seed" in state:
            self.initial_seed = state["initial_seed"]
        if "draws" in state:
            self.draws = state["draws"]


__all__ = ["DungeonRNG", "seed_to_int"]
