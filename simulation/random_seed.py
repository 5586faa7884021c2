"""
Seeded random number generator for reproducible quarters.

A linear congruential generator: two instances built from the same seed and
driven through the same calls return bit-identical values, so a quarter can be
replayed exactly. Sub-streams for individual teams are derived with
``split_seed`` so one team's extra pitches never shift another team's draws.
"""
from __future__ import annotations

import hashlib
from typing import Sequence, TypeVar

T = TypeVar("T")

_MULTIPLIER = 1664525
_INCREMENT = 1013904223
_MODULUS = 2 ** 32


class SeededRandom:
    """Deterministic pseudo-random stream; all helpers derive from ``next()``."""

    def __init__(self, seed: int) -> None:
        if not isinstance(seed, int):
            raise ValueError(f"seed must be an integer, got {seed!r}")
        self.seed = seed % _MODULUS

    def next(self) -> float:
        """Float in [0, 1)."""
        self.seed = (self.seed * _MULTIPLIER + _INCREMENT) % _MODULUS
        return self.seed / _MODULUS

    def next_int(self, lo: int, hi: int) -> int:
        """Integer in [lo, hi] inclusive."""
        if lo > hi:
            raise ValueError(f"next_int: min {lo} > max {hi}")
        return int(self.next() * (hi - lo + 1)) + lo

    def next_float(self, lo: float, hi: float) -> float:
        """Float in [lo, hi)."""
        if lo > hi:
            raise ValueError(f"next_float: min {lo} > max {hi}")
        return self.next() * (hi - lo) + lo

    def next_bool(self, probability: float) -> bool:
        """True with the given probability (0-1). Always consumes one draw."""
        if not 0.0 <= probability <= 1.0:
            raise ValueError(f"next_bool: probability must be within [0, 1], got {probability}")
        return self.next() < probability

    def pick(self, items: Sequence[T]) -> T:
        if not items:
            raise ValueError("pick: empty sequence")
        return items[int(self.next() * len(items))]

    def weighted_choice(self, keys: Sequence[str], weights: dict[str, float]) -> str:
        """Pick a key by cumulative weight, walking ``keys`` in the given order.
        Falls back to the last positively weighted key on rounding drift."""
        roll = self.next()
        cumulative = 0.0
        fallback = keys[-1]
        for key in keys:
            weight = weights.get(key, 0.0)
            if weight <= 0:
                continue
            fallback = key
            cumulative += weight
            if roll < cumulative:
                return key
        return fallback


def split_seed(master_seed: int, label: str) -> int:
    """Deterministically derive a sub-seed from (master_seed, label)."""
    h = hashlib.sha256(f"{master_seed}::{label}".encode("utf-8")).digest()
    return int.from_bytes(h[:4], "big", signed=False)


def team_random(master_seed: int, quarter: int, team_id: str) -> SeededRandom:
    """The stream a team's quarter resolution draws from."""
    return SeededRandom(split_seed(master_seed, f"q{quarter}:{team_id}"))


def market_random(master_seed: int, quarter: int) -> SeededRandom:
    """The shared stream for a quarter's events and opportunity pool."""
    return SeededRandom(master_seed + quarter)
