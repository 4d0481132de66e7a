"""Legal move generation for Piquet."""

from __future__ import annotations

from typing import Iterable, List

from .cards import Card
from .trick import Trick


def is_valid_follow(follow_card: Card, lead_card: Card) -> bool:
    """Suit-following is not enforced.

    A follower may discard any card; playing off the led suit simply loses the
    trick to the leader.
    """
    return True


def legal_moves(hand: Iterable[Card], trick: Trick) -> List[Card]:
    """Return the subset of cards that are legal to play given the current trick."""
    cards = sorted(hand, key=Card.sort_key)
    if trick.is_empty():
        return cards
    lead_card = trick.plays[0][1]
    return [card for card in cards if is_valid_follow(card, lead_card)]
