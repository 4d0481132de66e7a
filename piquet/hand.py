"""Player hand management."""

from __future__ import annotations

from collections import Counter
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Sequence

from .cards import SUIT_ORDER, Card, Rank, Suit, card_symbol
from .errors import CardNotInHand


@dataclass
class Hand:
    """A player's cards together with their running match score."""

    name: str
    cards: List[Card] = field(default_factory=list)
    score: int = 0

    def __len__(self) -> int:
        return len(self.cards)

    def __contains__(self, card: object) -> bool:
        return card in self.cards

    def add(self, card: Card) -> None:
        self.cards.append(card)

    def add_many(self, cards: Iterable[Card]) -> None:
        self.cards.extend(cards)

    def remove(self, card: Card) -> bool:
        try:
            self.cards.remove(card)
        except ValueError:
            return False
        return True

    def clear(self) -> None:
        self.cards.clear()

    def sort(self) -> None:
        self.cards.sort(key=Card.sort_key)

    def has_face_card(self) -> bool:
        return any(card.is_face_card() for card in self.cards)

    def missing(self, cards: Sequence[Card]) -> List[Card]:
        """Return the cards in ``cards`` that this hand cannot supply."""
        available = Counter(self.cards)
        absent: List[Card] = []
        for card in cards:
            if available[card] > 0:
                available[card] -= 1
            else:
                absent.append(card)
        return absent

    def exchange(self, cards_out: Sequence[Card], cards_in: Sequence[Card]) -> None:
        """Swap ``cards_out`` for ``cards_in``; nothing changes unless all are held."""
        absent = self.missing(cards_out)
        if absent:
            labels = ", ".join(card_symbol(card) for card in absent)
            raise CardNotInHand(f"{self.name} does not hold: {labels}")
        for card in cards_out:
            self.cards.remove(card)
        self.cards.extend(cards_in)
        self.sort()

    def group_by_suit(self) -> Dict[Suit, List[Card]]:
        """Every suit mapped to its cards, highest rank first."""
        return {
            suit: sorted(
                (card for card in self.cards if card.suit is suit),
                key=Card.value,
                reverse=True,
            )
            for suit in SUIT_ORDER
        }

    def group_by_rank(self) -> Dict[Rank, List[Card]]:
        groups: Dict[Rank, List[Card]] = {}
        for card in self.cards:
            groups.setdefault(card.rank, []).append(card)
        return groups

    def __str__(self) -> str:
        cards = ", ".join(card_symbol(card) for card in sorted(self.cards, key=Card.sort_key))
        return f"{self.name}: [{cards}] ({self.score} pts)"
