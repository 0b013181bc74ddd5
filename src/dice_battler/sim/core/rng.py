"""Seeded random number generator for reproducible battles.

Every random decision the engine makes (dice, luck tests, the creature's
spell-cast roll, reaction lines) is drawn from a single ``GameRNG`` so a
battle can be replayed from its seed.

Batch simulation (:mod:`dice_battler.sim.runner`) forks three named
sub-streams from each run seed:

``"battle"``
    Handed to the engine: dice, luck tests, creature AI, reactions.
``"agent"``
    Consumed by :class:`RandomAgent` for its choices, so changing the
    agent never changes the dice a battle sees.
``"creatures"``
    Picks each campaign opponent from the configured creature pool.

Interactive play seeds from system entropy unless a seed is given.
"""

from __future__ import annotations

import hashlib
import random
from typing import Sequence, TypeVar

T = TypeVar("T")


class GameRNG:
    """Deterministic RNG that can be forked into independent sub-streams.

    Parameters
    ----------
    seed:
        Integer seed for the underlying Mersenne Twister.  ``None`` seeds
        from system entropy (interactive play).
    """

    def __init__(self, seed: int | None = None) -> None:
        if seed is None:
            seed = random.SystemRandom().randrange(2**32)
        self._seed = seed
        self._rng = random.Random(seed)

    @property
    def seed(self) -> int:
        """Return the seed this RNG was initialised with."""
        return self._seed

    # -- core random methods -------------------------------------------------

    def random_int(self, low: int, high: int) -> int:
        """Return a random integer *N* such that ``low <= N <= high``."""
        return self._rng.randint(low, high)

    def random_float(self) -> float:
        """Return a random float in the half-open interval ``[0.0, 1.0)``."""
        return self._rng.random()

    def random_choice(self, seq: Sequence[T]) -> T:
        """Return a random element from a non-empty sequence."""
        return self._rng.choice(seq)

    # -- forking -------------------------------------------------------------

    def fork(self, name: str) -> GameRNG:
        """Create a child RNG whose seed is derived from this RNG's seed and
        *name*.

        Forking with the same *name* always produces the same child seed,
        so ``GameRNG(7).fork("agent")`` is stable across processes.
        """
        digest = hashlib.sha256(f"{self._seed}:{name}".encode()).digest()
        child_seed = int.from_bytes(digest[:8], "big")
        return GameRNG(child_seed)

    def __repr__(self) -> str:
        return f"GameRNG(seed={self._seed})"
