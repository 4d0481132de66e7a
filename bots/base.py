"""Common bot strategy interfaces."""

from __future__ import annotations

from typing import Sequence

from piquet.cards import Card
from piquet.engine import RoundEngine


class BotStrategy:
    """Base class for bot policies."""

    name: str = "BaseBot"

    def on_round_start(self, engine: RoundEngine, player: int) -> None:
        """Optional hook invoked once the cards are dealt."""
        return None

    def choose_exchange(self, engine: RoundEngine, player: int) -> Sequence[Card]:
        """Return the cards to discard; an empty sequence declines the exchange."""
        return []

    def play_card(self, engine: RoundEngine, player: int) -> Card:
        legal = engine.legal_moves(player)
        if not legal:
            raise RuntimeError("No legal plays available for bot.")
        return legal[0]
