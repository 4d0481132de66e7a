"""Convenience service layer for UI and agents."""

from __future__ import annotations

from dataclasses import dataclass, fields
from enum import Enum
from typing import Optional, Sequence

from .cards import Card, card_label, deserialize_card, serialize_card
from .config import MatchConfig
from .engine import CommandResult, RoundEngine
from .errors import PiquetError
from .events import Event
from .phases import GamePhase


class CommandRejected(PiquetError):
    """Raised by the service when the engine refuses a command."""

    def __init__(self, result: CommandResult) -> None:
        super().__init__(result.message or result.reason or "Command rejected.")
        self.reason = result.reason or PiquetError.reason


@dataclass
class TrickPlayView:
    player: int
    card: dict
    label: str


@dataclass
class TrickView:
    leader: int
    plays: list[TrickPlayView]


@dataclass
class DeclarationView:
    combination_type: str
    cards: list[str]
    score: int


@dataclass
class RoundView:
    phase: str
    round_number: int
    total_rounds: int
    dealer: int
    non_dealer: int
    current_player: Optional[int]
    hand: list[dict]
    hand_labels: list[str]
    legal_moves: list[dict]
    legal_move_labels: list[str]
    exchange_allowance: int
    talon_count: int
    opponent_card_count: int
    trick: Optional[TrickView]
    trick_counts: list[int]
    trick_history: list[list[dict]]
    declarations: list[list[DeclarationView]]
    scores: list[int]
    winner: Optional[str]
    events: list[dict]


@dataclass
class MatchView:
    player_names: list[str]
    scores: list[int]
    round_history: list[list[int]]
    winner: Optional[str]
    round: Optional[RoundView]


def describe_event(event: Event) -> dict:
    payload: dict = {"type": type(event).__name__}
    for item in fields(event):
        value = getattr(event, item.name)
        if isinstance(value, Card):
            payload[item.name] = serialize_card(value)
        elif isinstance(value, Enum):
            payload[item.name] = str(value)
        else:
            payload[item.name] = value
    return payload


class MatchService:
    """Facade around RoundEngine for UI consumers."""

    def __init__(self, engine: Optional[RoundEngine] = None, config: Optional[MatchConfig] = None) -> None:
        self.engine = engine or RoundEngine(config)
        self.last_events: list[Event] = []

    # Match lifecycle ---------------------------------------------------

    def start_match(self, perspective: int = 0) -> RoundView:
        self._apply(self.engine.initialize_game())
        return self.get_round_view(perspective)

    def start_next_round(self, perspective: int = 0) -> RoundView:
        self._apply(self.engine.start_new_round())
        return self.get_round_view(perspective)

    def has_started(self) -> bool:
        return self.engine.phase != GamePhase.SETUP

    # Actions -----------------------------------------------------------

    def exchange(self, player: int, cards: Sequence[dict]) -> RoundView:
        card_objs = [deserialize_card(card) for card in cards]
        self._apply(self.engine.exchange_cards(player, card_objs))
        return self.get_round_view(player)

    def complete_exchange(self, perspective: int = 0) -> RoundView:
        self._apply(self.engine.complete_exchange())
        return self.get_round_view(perspective)

    def declare(self, perspective: int = 0) -> RoundView:
        self._apply(self.engine.declare_and_compare())
        return self.get_round_view(perspective)

    def play_card(self, player: int, card_payload: dict) -> RoundView:
        card = deserialize_card(card_payload)
        self._apply(self.engine.play_card(player, card))
        return self.get_round_view(player)

    # Views -------------------------------------------------------------

    def get_match_view(self, perspective: int = 0) -> MatchView:
        engine = self.engine
        return MatchView(
            player_names=[hand.name for hand in engine.hands],
            scores=list(engine.scores()),
            round_history=[list(round_score.totals) for round_score in engine.score_manager.history()],
            winner=engine.winner,
            round=self.get_round_view(perspective) if self.has_started() else None,
        )

    def get_round_view(self, perspective: int = 0) -> RoundView:
        engine = self.engine
        hand = engine.hand(perspective)
        legal = engine.legal_moves(perspective)

        trick_view: Optional[TrickView] = None
        plays = engine.trick_plays()
        if plays:
            trick_view = TrickView(
                leader=engine.trick_leader(),
                plays=[TrickPlayView(player=p, card=serialize_card(c), label=card_label(c)) for p, c in plays],
            )

        trick_history = [
            [
                {"player": record.leader, "card": serialize_card(record.lead_card), "label": card_label(record.lead_card)},
                {
                    "player": 1 - record.leader,
                    "card": serialize_card(record.follow_card),
                    "label": card_label(record.follow_card),
                },
                {"winner": record.winner},
            ]
            for record in engine.trick_history
        ]

        declarations = [
            [
                DeclarationView(
                    combination_type=str(combo_type),
                    cards=[card_label(card) for card in combo.cards],
                    score=combo.score,
                )
                for combo_type, combo in seat.items()
            ]
            for seat in engine.declarations
        ]

        return RoundView(
            phase=str(engine.phase),
            round_number=engine.round_number,
            total_rounds=engine.config.total_rounds,
            dealer=engine.dealer,
            non_dealer=engine.non_dealer,
            current_player=engine.current_player,
            hand=[serialize_card(card) for card in hand],
            hand_labels=[card_label(card) for card in hand],
            legal_moves=[serialize_card(card) for card in legal],
            legal_move_labels=[card_label(card) for card in legal],
            exchange_allowance=engine.exchange_allowance(perspective),
            talon_count=engine.talon_count(),
            opponent_card_count=len(engine.hand(1 - perspective)),
            trick=trick_view,
            trick_counts=list(engine.trick_counts()),
            trick_history=trick_history,
            declarations=declarations,
            scores=list(engine.scores()),
            winner=engine.winner,
            events=[describe_event(event) for event in self.last_events],
        )

    # Helpers -----------------------------------------------------------

    def _apply(self, result: CommandResult) -> CommandResult:
        if not result.ok:
            raise CommandRejected(result)
        self.last_events = list(result.events)
        return result
