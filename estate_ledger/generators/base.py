"""Shared seeding and random helpers for sample data generators."""

from __future__ import annotations

import random
from abc import ABC
from decimal import Decimal
from typing import Sequence, TypeVar

from faker import Faker

T = TypeVar("T")


class BaseGenerator(ABC):
    """Base class for sample data generators.

    One seed drives both the Faker instance (names, addresses, dates) and
    the generator's own ``random.Random`` (counts, prices, choices), so a
    seeded run is reproducible without touching the global RNG.

    Parameters
    ----------
    seed : int | None
        Random seed for reproducibility.
    locale : str
        Faker locale (default ``en_US``).
    """

    def __init__(self, seed: int | None = None, locale: str = "en_US") -> None:
        self.fake = Faker(locale)
        self.rng = random.Random(seed)
        if seed is not None:
            self.fake.seed_instance(seed)

    def chance(self, probability: float) -> bool:
        return self.rng.random() < probability

    def pick(self, options: Sequence[T], weights: Sequence[float] | None = None) -> T:
        if weights is None:
            return self.rng.choice(options)
        return self.rng.choices(options, weights=weights, k=1)[0]

    def money(self, low: int, high: int, step: int = 1) -> Decimal:
        """Whole amount in ``[low, high)`` on a multiple of ``step``."""
        return Decimal(self.rng.randrange(low, high, step))
