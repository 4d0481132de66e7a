"""Round phases and the legal transitions between them."""

from __future__ import annotations

from enum import Enum, auto
from typing import Dict, FrozenSet

from .errors import InvalidTransition


class GamePhase(Enum):
    SETUP = auto()
    DEALING = auto()
    EXCHANGING = auto()
    DECLARATION = auto()
    PLAYING = auto()
    SCORING = auto()
    GAME_OVER = auto()

    def __str__(self) -> str:
        return self.name.lower()


TRANSITIONS: Dict[GamePhase, FrozenSet[GamePhase]] = {
    GamePhase.SETUP: frozenset({GamePhase.DEALING}),
    GamePhase.DEALING: frozenset({GamePhase.EXCHANGING}),
    GamePhase.EXCHANGING: frozenset({GamePhase.DECLARATION}),
    GamePhase.DECLARATION: frozenset({GamePhase.PLAYING}),
    GamePhase.PLAYING: frozenset({GamePhase.SCORING}),
    GamePhase.SCORING: frozenset({GamePhase.DEALING, GamePhase.GAME_OVER}),
    GamePhase.GAME_OVER: frozenset(),
}


def can_transition(current: GamePhase, target: GamePhase) -> bool:
    return target in TRANSITIONS[current]


def ensure_transition(current: GamePhase, target: GamePhase) -> None:
    if not can_transition(current, target):
        raise InvalidTransition(f"Cannot move from {current} to {target}.")
