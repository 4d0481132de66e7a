"""Random baseline bot."""

from __future__ import annotations

import random
from typing import Optional, Sequence

from piquet.cards import Card
from piquet.engine import RoundEngine

from .base import BotStrategy


class RandomBot(BotStrategy):
    name = "Random"

    def __init__(self, seed: Optional[int] = None) -> None:
        self._rng = random.Random(seed)

    def choose_exchange(self, engine: RoundEngine, player: int) -> Sequence[Card]:
        allowance = engine.exchange_allowance(player)
        if allowance == 0:
            return []
        count = self._rng.randint(0, allowance)
        return self._rng.sample(engine.hand(player), count)

    def play_card(self, engine: RoundEngine, player: int) -> Card:
        legal = engine.legal_moves(player)
        if not legal:
            raise RuntimeError("No legal plays available for bot.")
        return self._rng.choice(legal)
