"""Round scoring helpers and the per-round score ledger."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List, Sequence, Tuple

from .hand import Hand

TRICK_MAJORITY = 7
TRICK_MAJORITY_BONUS = 10
CAPOT_TRICKS = 12
CAPOT_BONUS = 40
CARTE_BLANCHE_POINTS = 10
PIQUE_POINTS = 30
REPIQUE_POINTS = 60
REPIQUE_THRESHOLD = 30

CATEGORIES: Tuple[str, ...] = (
    "carte_blanche",
    "point",
    "sequence",
    "set",
    "repique",
    "trick",
    "pique",
)


def trick_score(tricks: int, *, capot_tricks: int = CAPOT_TRICKS) -> int:
    """One point per trick, +10 for the majority, +40 more for taking them all."""
    score = tricks
    if tricks >= TRICK_MAJORITY:
        score += TRICK_MAJORITY_BONUS
    if tricks == capot_tricks:
        score += CAPOT_BONUS
    return score


def carte_blanche(hand: Hand) -> int:
    return 0 if hand.has_face_card() else CARTE_BLANCHE_POINTS


def pique(opponent_score: int) -> int:
    return PIQUE_POINTS if opponent_score == 0 else 0


def repique(own_declaration: int, opponent_declaration: int) -> int:
    if own_declaration >= REPIQUE_THRESHOLD and opponent_declaration == 0:
        return REPIQUE_POINTS
    return 0


@dataclass
class RoundScore:
    """Score breakdown of one round for both seats."""

    round_number: int
    categories: List[Dict[str, int]] = field(
        default_factory=lambda: [dict.fromkeys(CATEGORIES, 0), dict.fromkeys(CATEGORIES, 0)]
    )

    def add(self, player: int, category: str, points: int) -> None:
        if category not in CATEGORIES:
            raise KeyError(f"Unknown score category: {category!r}")
        self.categories[player][category] += points

    def get(self, player: int, category: str) -> int:
        return self.categories[player][category]

    def declaration_total(self, player: int) -> int:
        row = self.categories[player]
        return row["point"] + row["sequence"] + row["set"]

    def total(self, player: int) -> int:
        return sum(self.categories[player].values())

    @property
    def totals(self) -> Tuple[int, int]:
        return self.total(0), self.total(1)

    def describe(self, names: Sequence[str]) -> str:
        lines = [f"Round {self.round_number}:"]
        for player, name in enumerate(names):
            row = self.categories[player]
            parts = " + ".join(f"{category} {row[category]}" for category in CATEGORIES if row[category])
            lines.append(f"  {name}: {parts or '0'} = {self.total(player)}")
        return "\n".join(lines)


class ScoreManager:
    """Purely additive bookkeeping of round breakdowns and match totals."""

    def __init__(self) -> None:
        self._history: List[RoundScore] = []
        self._totals = [0, 0]

    def record_round(self, round_score: RoundScore) -> None:
        self._history.append(round_score)
        for player in (0, 1):
            self._totals[player] += round_score.total(player)

    def totals(self) -> Tuple[int, int]:
        return self._totals[0], self._totals[1]

    def history(self) -> List[RoundScore]:
        return list(self._history)

    def reset(self) -> None:
        self._history.clear()
        self._totals = [0, 0]

    def report(self, names: Sequence[str]) -> str:
        lines = [round_score.describe(names) for round_score in self._history]
        lines.append("Totals:")
        for player, name in enumerate(names):
            lines.append(f"  {name}: {self._totals[player]}")
        return "\n".join(lines)
