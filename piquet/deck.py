"""Deck creation utilities for Piquet."""

from __future__ import annotations

from random import Random
from typing import List, Optional, Sequence

from .cards import RANK_ORDER, SUIT_ORDER, Card
from .errors import EmptyDeck

DECK_SIZE = 32


def build_deck() -> List[Card]:
    """Return the ordered 32-card deck."""
    return [Card(suit, rank) for suit in SUIT_ORDER for rank in RANK_ORDER]


class Deck:
    """The 32-card piquet pack with a front-first draw pointer."""

    def __init__(self, rng: Optional[Random] = None) -> None:
        self.rng = rng if rng is not None else Random()
        self.cards: List[Card] = build_deck()

    def __len__(self) -> int:
        return len(self.cards)

    def reset(self) -> None:
        self.cards = build_deck()

    def shuffle(self) -> None:
        # Fisher-Yates, drawing indices from the injected generator.
        for i in range(len(self.cards) - 1, 0, -1):
            j = self.rng.randrange(i + 1)
            self.cards[i], self.cards[j] = self.cards[j], self.cards[i]

    def stack(self, cards: Sequence[Card]) -> None:
        """Replace the draw order with ``cards``, which must be a full pack."""
        ordered = list(cards)
        if len(ordered) != DECK_SIZE or sorted(ordered, key=Card.sort_key) != build_deck():
            raise ValueError(f"A stacked deck must contain each of the {DECK_SIZE} cards exactly once.")
        self.cards = ordered

    def draw(self) -> Card:
        if not self.cards:
            raise EmptyDeck("Cannot draw from an empty deck.")
        return self.cards.pop(0)

    def draw_many(self, count: int) -> List[Card]:
        drawn: List[Card] = []
        while len(drawn) < count and self.cards:
            drawn.append(self.draw())
        return drawn

    def remaining(self) -> int:
        return len(self.cards)

    def return_card(self, card: Card) -> None:
        """Put a card back at the bottom of the deck."""
        self.cards.append(card)
