"""Baseline greedy bot."""

from __future__ import annotations

from typing import Sequence

from piquet.cards import Card, same_suit_beats
from piquet.engine import RoundEngine

from .base import BotStrategy


class GreedyBot(BotStrategy):
    """Throws away its shortest suits and takes every trick it cheaply can."""

    name = "Greedy"

    def choose_exchange(self, engine: RoundEngine, player: int) -> Sequence[Card]:
        cards = engine.hand(player)
        suit_sizes = {card.suit: sum(1 for c in cards if c.suit is card.suit) for card in cards}
        cards.sort(key=lambda c: (suit_sizes[c.suit], c.value()))
        return cards[: engine.exchange_allowance(player)]

    def play_card(self, engine: RoundEngine, player: int) -> Card:
        legal = engine.legal_moves(player)
        if not legal:
            raise RuntimeError("No legal plays available for bot.")
        trick = engine.current_trick()
        if not trick:
            return max(legal, key=Card.value)

        lead = trick[0]
        winners = [card for card in legal if same_suit_beats(card, lead)]
        if winners:
            return min(winners, key=Card.value)
        return min(legal, key=Card.value)
