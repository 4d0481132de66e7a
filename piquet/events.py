"""Events emitted by the engine for presentation layers."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, List, Union

from .cards import Card
from .combinations import CombinationType
from .phases import GamePhase

logger = logging.getLogger(__name__)

DRAW = "draw"


@dataclass(frozen=True)
class CardsDealt:
    pass


@dataclass(frozen=True)
class PhaseChanged:
    phase: GamePhase


@dataclass(frozen=True)
class CardsExchanged:
    player_name: str
    count: int


@dataclass(frozen=True)
class ExchangeComplete:
    pass


@dataclass(frozen=True)
class BonusAwarded:
    player_name: str
    bonus: str
    points: int


@dataclass(frozen=True)
class CombinationScored:
    player_name: str
    combination_type: CombinationType
    score: int


@dataclass(frozen=True)
class DeclarationComplete:
    pass


@dataclass(frozen=True)
class CardPlayed:
    player_name: str
    card: Card


@dataclass(frozen=True)
class TrickWon:
    player_name: str
    trick_points: int
    total_tricks: int


@dataclass(frozen=True)
class RoundEnded:
    pass


@dataclass(frozen=True)
class GameOver:
    winner: str

    @property
    def is_draw(self) -> bool:
        return self.winner == DRAW


Event = Union[
    CardsDealt,
    PhaseChanged,
    CardsExchanged,
    ExchangeComplete,
    BonusAwarded,
    CombinationScored,
    DeclarationComplete,
    CardPlayed,
    TrickWon,
    RoundEnded,
    GameOver,
]

Listener = Callable[[Event], None]


class EventBus:
    """Synchronous listener registry.

    Listeners run in registration order, after the engine has committed the
    state change the event describes.
    """

    def __init__(self) -> None:
        self._listeners: List[Listener] = []

    def subscribe(self, listener: Listener) -> None:
        self._listeners.append(listener)

    def unsubscribe(self, listener: Listener) -> None:
        self._listeners.remove(listener)

    def publish(self, event: Event) -> None:
        logger.debug("event %s", event)
        for listener in list(self._listeners):
            listener(event)
