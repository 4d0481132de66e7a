"""Declarable combinations: Point, Sequence and Set.

All functions here are pure. They read the cards of the hand they are given at
call time and never keep a reference to it, so results always reflect the
hand as it currently stands.

Tie-breaks are explicit. When two suits hold the same number of cards the
Point goes to the suit that comes first in ``SUIT_ORDER``; equal-length
sequences with the same top card are split the same way.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Dict, List, Optional, Tuple

from .cards import SUIT_INDEX, SUIT_ORDER, Card
from .hand import Hand

MIN_SEQUENCE_LENGTH = 3
MIN_SET_SIZE = 3
SEQUENCE_BONUS_LENGTH = 5
SEQUENCE_BONUS = 10
QUATORZE_SCORE = 14
TRIO_SCORE = 3


class CombinationType(Enum):
    POINT = "point"
    SEQUENCE = "sequence"
    SET = "set"

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class Combination:
    type: CombinationType
    cards: Tuple[Card, ...]

    @property
    def size(self) -> int:
        return len(self.cards)

    @property
    def value(self) -> int:
        if self.type is CombinationType.POINT:
            return len(self.cards)
        if self.type is CombinationType.SEQUENCE:
            return max(card.value() for card in self.cards)
        return self.cards[0].value()

    @property
    def score(self) -> int:
        count = len(self.cards)
        if self.type is CombinationType.POINT:
            return count
        if self.type is CombinationType.SEQUENCE:
            return count + SEQUENCE_BONUS if count >= SEQUENCE_BONUS_LENGTH else count
        return QUATORZE_SCORE if count == 4 else TRIO_SCORE

    def __str__(self) -> str:
        cards = ", ".join(str(card) for card in self.cards)
        return f"{self.type}: [{cards}] (value {self.value}, score {self.score})"


def best_point(hand: Hand) -> Optional[Combination]:
    groups = hand.group_by_suit()
    best_suit = SUIT_ORDER[0]
    for suit in SUIT_ORDER:
        if len(groups[suit]) > len(groups[best_suit]):
            best_suit = suit
    if not groups[best_suit]:
        return None
    return Combination(CombinationType.POINT, tuple(groups[best_suit]))


def all_sequences(hand: Hand) -> List[Combination]:
    """Every maximal same-suit run of at least three consecutive ranks."""
    sequences: List[Combination] = []
    for suit, cards in hand.group_by_suit().items():
        if len(cards) < MIN_SEQUENCE_LENGTH:
            continue
        ascending = sorted(cards, key=Card.value)
        run = [ascending[0]]
        for card in ascending[1:]:
            if card.value() == run[-1].value() + 1:
                run.append(card)
                continue
            if len(run) >= MIN_SEQUENCE_LENGTH:
                sequences.append(Combination(CombinationType.SEQUENCE, tuple(run)))
            run = [card]
        if len(run) >= MIN_SEQUENCE_LENGTH:
            sequences.append(Combination(CombinationType.SEQUENCE, tuple(run)))
    return sequences


def _sequence_key(combo: Combination) -> Tuple[int, int, int]:
    # Longer first, then higher top card, then lower suit index.
    return combo.size, combo.value, -SUIT_INDEX[combo.cards[0].suit]


def best_sequence(hand: Hand) -> Optional[Combination]:
    sequences = all_sequences(hand)
    if not sequences:
        return None
    return max(sequences, key=_sequence_key)


def all_sets(hand: Hand) -> List[Combination]:
    return [
        Combination(CombinationType.SET, tuple(sorted(cards, key=Card.sort_key)))
        for cards in hand.group_by_rank().values()
        if len(cards) >= MIN_SET_SIZE
    ]


def best_set(hand: Hand) -> Optional[Combination]:
    sets = all_sets(hand)
    if not sets:
        return None
    return max(sets, key=lambda combo: (combo.size, combo.value))


def compare_combinations(first: Optional[Combination], second: Optional[Combination]) -> int:
    """Return 1 if ``first`` is better, -1 if ``second`` is, 0 on a tie."""
    if first is None and second is None:
        return 0
    if first is None:
        return -1
    if second is None:
        return 1
    mine = (first.size, first.value)
    theirs = (second.size, second.value)
    if mine == theirs:
        return 0
    return 1 if mine > theirs else -1


def best_combinations_for(hand: Hand) -> Dict[CombinationType, Combination]:
    finders = (
        (CombinationType.POINT, best_point),
        (CombinationType.SEQUENCE, best_sequence),
        (CombinationType.SET, best_set),
    )
    combinations: Dict[CombinationType, Combination] = {}
    for combo_type, finder in finders:
        combo = finder(hand)
        if combo is not None:
            combinations[combo_type] = combo
    return combinations
