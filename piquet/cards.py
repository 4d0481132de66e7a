"""Card-related data structures and helpers for Piquet."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Mapping


class Suit(Enum):
    HEARTS = 0
    DIAMONDS = 1
    CLUBS = 2
    SPADES = 3

    def __str__(self) -> str:
        return self.name.lower()


class Rank(Enum):
    SEVEN = 7
    EIGHT = 8
    NINE = 9
    TEN = 10
    JACK = 11
    QUEEN = 12
    KING = 13
    ACE = 14

    def __str__(self) -> str:
        return self.name.lower()


# Fixed suit order used for card sorting and for deterministic tie-breaks.
SUIT_ORDER: list[Suit] = [Suit.HEARTS, Suit.DIAMONDS, Suit.CLUBS, Suit.SPADES]

# Rank order from lowest to highest.
RANK_ORDER: list[Rank] = [
    Rank.SEVEN,
    Rank.EIGHT,
    Rank.NINE,
    Rank.TEN,
    Rank.JACK,
    Rank.QUEEN,
    Rank.KING,
    Rank.ACE,
]

SUIT_INDEX: dict[Suit, int] = {suit: index for index, suit in enumerate(SUIT_ORDER)}

FACE_RANKS = frozenset({Rank.JACK, Rank.QUEEN, Rank.KING})

SUIT_SYMBOLS: dict[Suit, str] = {
    Suit.HEARTS: "♥",
    Suit.DIAMONDS: "♦",
    Suit.CLUBS: "♣",
    Suit.SPADES: "♠",
}

RANK_SYMBOLS: dict[Rank, str] = {
    Rank.JACK: "J",
    Rank.QUEEN: "Q",
    Rank.KING: "K",
    Rank.ACE: "A",
}


@dataclass(frozen=True)
class Card:
    """Immutable representation of a playing card."""

    suit: Suit
    rank: Rank

    def value(self) -> int:
        return self.rank.value

    def is_face_card(self) -> bool:
        return self.rank in FACE_RANKS

    def sort_key(self) -> tuple[int, int]:
        return SUIT_INDEX[self.suit], self.rank.value

    def compare(self, other: Card) -> int:
        """Compare by suit first, then rank. Returns -1, 0 or 1."""
        mine, theirs = self.sort_key(), other.sort_key()
        if mine == theirs:
            return 0
        return -1 if mine < theirs else 1

    def __lt__(self, other: Card) -> bool:
        if not isinstance(other, Card):
            return NotImplemented
        return self.sort_key() < other.sort_key()

    def __str__(self) -> str:
        return card_symbol(self)


def same_suit_beats(candidate: Card, current: Card) -> bool:
    """Return True if candidate outranks current within the same suit."""
    return candidate.suit is current.suit and candidate.value() > current.value()


def serialize_card(card: Card) -> dict[str, str]:
    return {"rank": card.rank.name.lower(), "suit": card.suit.name.lower()}


def deserialize_card(payload: Mapping[str, str]) -> Card:
    rank_name = payload["rank"].upper()
    suit_name = payload["suit"].upper()
    return Card(Suit[suit_name], Rank[rank_name])


def card_symbol(card: Card) -> str:
    rank = RANK_SYMBOLS.get(card.rank, str(card.rank.value))
    return f"{rank}{SUIT_SYMBOLS[card.suit]}"


def card_label(card: Card) -> str:
    return f"{card.rank.name.title()} of {card.suit.name.title()}"
