"""Round and match orchestration for Piquet.

``RoundEngine`` owns the deck, both hands and the talon, and drives the phase
machine of ``piquet.phases``. Every command validates first and mutates only
once validation has passed, so a rejected command leaves the engine exactly as
it was. Rule violations come back as a failed ``CommandResult``; contract
violations (``EmptyDeck``, ``InvalidTransition``) propagate.

Events are queued while a command runs and published once it has finished.
For a single command they always arrive in this order:

* ``start_new_round``: ``PhaseChanged(DEALING)`` (from setup only),
  ``CardsDealt``, ``PhaseChanged(EXCHANGING)``.
* ``exchange_cards``: ``CardsExchanged``.
* ``complete_exchange``: ``BonusAwarded`` (carte blanche, if any),
  ``ExchangeComplete``, ``PhaseChanged(DECLARATION)``.
* ``declare_and_compare``: ``CombinationScored`` per won type in the order
  point, sequence, set, then ``BonusAwarded`` (repique, if enabled),
  ``DeclarationComplete``, ``PhaseChanged(PLAYING)``.
* ``play_card``: ``CardPlayed``, then for the second card ``TrickWon``; after
  the last trick ``PhaseChanged(SCORING)``, ``BonusAwarded`` (pique, if
  enabled), ``RoundEnded`` and either ``PhaseChanged(DEALING)`` or
  ``PhaseChanged(GAME_OVER)`` followed by ``GameOver``.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from random import Random
from typing import Callable, Dict, List, Optional, Sequence, Tuple

from .cards import Card, card_symbol
from .combinations import (
    Combination,
    CombinationType,
    best_combinations_for,
    compare_combinations,
)
from .config import MatchConfig
from .deck import Deck
from .errors import (
    CardNotInHand,
    EmptyDeck,
    ExchangeLimitExceeded,
    InvalidTransition,
    NotYourTurn,
    PiquetError,
    UnknownPlayer,
    WrongPhase,
)
from .events import (
    DRAW,
    BonusAwarded,
    CardPlayed,
    CardsDealt,
    CardsExchanged,
    CombinationScored,
    DeclarationComplete,
    Event,
    EventBus,
    ExchangeComplete,
    GameOver,
    Listener,
    PhaseChanged,
    RoundEnded,
    TrickWon,
)
from .hand import Hand
from .mechanics import legal_moves
from .phases import GamePhase, ensure_transition
from .scoring import (
    PIQUE_POINTS,
    RoundScore,
    ScoreManager,
    carte_blanche,
    pique,
    repique,
    trick_score,
)
from .trick import Trick

logger = logging.getLogger(__name__)

TRICK_POINTS = 1
DECLARATION_ORDER = (CombinationType.POINT, CombinationType.SEQUENCE, CombinationType.SET)


@dataclass(frozen=True)
class CommandResult:
    ok: bool
    reason: Optional[str] = None
    message: str = ""
    events: Tuple[Event, ...] = ()

    def __bool__(self) -> bool:
        return self.ok

    @classmethod
    def failure(cls, error: PiquetError) -> "CommandResult":
        return cls(ok=False, reason=error.reason, message=str(error))


@dataclass(frozen=True)
class TrickRecord:
    leader: int
    lead_card: Card
    follow_card: Card
    winner: int


class RoundEngine:
    """Run a Piquet match: deal, exchange, declare, play and score each round."""

    def __init__(self, config: Optional[MatchConfig] = None, *, rng: Optional[Random] = None) -> None:
        self.config = config or MatchConfig()
        self.rules = self.config.rules
        self.rng = rng if rng is not None else Random(self.config.seed)
        self.deck = Deck(self.rng)
        self.hands = [Hand(name) for name in self.config.player_names]
        self.score_manager = ScoreManager()
        self.bus = EventBus()

        self.phase = GamePhase.SETUP
        self.round_number = 0
        self.dealer = self.config.first_dealer
        self.current_player: Optional[int] = None
        self.winner: Optional[str] = None
        self.declarations: List[Dict[CombinationType, Combination]] = [{}, {}]
        self.trick_history: List[TrickRecord] = []

        self._talon: List[Card] = []
        self._discards: List[List[Card]] = [[], []]
        self._exchanged = [False, False]
        self._tricks = [0, 0]
        self._trick = Trick(leader=self.non_dealer)
        self._round_score = RoundScore(round_number=0)
        self._pending: List[Event] = []

    # Listeners ---------------------------------------------------------

    def subscribe(self, listener: Listener) -> None:
        self.bus.subscribe(listener)

    def unsubscribe(self, listener: Listener) -> None:
        self.bus.unsubscribe(listener)

    # Commands ----------------------------------------------------------

    def initialize_game(self, deck: Optional[Sequence[Card]] = None) -> CommandResult:
        """Reset the match and deal round one.

        ``deck`` stacks the first round's draw order instead of shuffling.
        """

        def action() -> None:
            if deck is not None:
                self.deck.stack(deck)
            self.phase = GamePhase.SETUP
            self._emit(PhaseChanged(self.phase))
            self._reset_match()
            self._deal_round(deck)

        return self._run(action)

    def start_new_round(self, deck: Optional[Sequence[Card]] = None) -> CommandResult:
        """Deal the next round; from setup this starts the match at round one."""

        def action() -> None:
            if self.phase not in (GamePhase.SETUP, GamePhase.DEALING):
                raise WrongPhase(f"Cannot deal during {self.phase}.")
            if deck is not None:
                self.deck.stack(deck)
            if self.phase == GamePhase.SETUP:
                self._reset_match()
            self._deal_round(deck)

        return self._run(action)

    def exchange_cards(self, player: int, cards_to_discard: Sequence[Card]) -> CommandResult:
        """Discard cards and draw the same number from the front of the talon.

        An empty discard declines the exchange.
        """

        def action() -> None:
            self._require_phase(GamePhase.EXCHANGING)
            self._check_seat(player)
            discards = list(cards_to_discard)
            if self._exchanged[player]:
                raise ExchangeLimitExceeded(f"{self._name(player)} has already exchanged this round.")
            if player == self.dealer and not self._exchanged[self.non_dealer]:
                raise NotYourTurn("The non-dealer exchanges first.")
            allowance = self.exchange_allowance(player)
            if len(discards) > allowance:
                raise ExchangeLimitExceeded(
                    f"{self._name(player)} may exchange at most {allowance} cards, asked for {len(discards)}."
                )
            hand = self.hands[player]
            if hand.missing(discards):
                raise CardNotInHand(f"{self._name(player)} does not hold every card offered for exchange.")

            drawn = self._talon[: len(discards)]
            del self._talon[: len(discards)]
            hand.exchange(discards, drawn)
            self._discards[player].extend(discards)
            self._exchanged[player] = True
            logger.debug("%s exchanged %d cards", hand.name, len(discards))
            self._emit(CardsExchanged(hand.name, len(discards)))

        return self._run(action)

    def complete_exchange(self) -> CommandResult:
        """Close the exchange, treating a player who did not exchange as declining."""

        def action() -> None:
            self._require_phase(GamePhase.EXCHANGING)
            self._exchanged = [True, True]
            if self.rules.carte_blanche_bonus:
                non_dealer = self.non_dealer
                bonus = carte_blanche(self.hands[non_dealer])
                if bonus:
                    self._award(non_dealer, "carte_blanche", bonus)
                    logger.info("%s declares carte blanche (+%d)", self._name(non_dealer), bonus)
            self._emit(ExchangeComplete())
            self._transition(GamePhase.DECLARATION)

        return self._run(action)

    def declare_and_compare(self) -> CommandResult:
        def action() -> None:
            self._require_phase(GamePhase.DECLARATION)
            self.declarations = [best_combinations_for(hand) for hand in self.hands]
            for combo_type in DECLARATION_ORDER:
                self._compare_declaration(combo_type)
            if self.rules.repique:
                self._apply_repique()
            self._emit(DeclarationComplete())
            self.current_player = self.non_dealer
            self._trick = Trick(leader=self.non_dealer)
            self._transition(GamePhase.PLAYING)
            logger.debug("Play begins, %s leads", self._name(self.non_dealer))

        return self._run(action)

    def play_card(self, player: int, card: Card) -> CommandResult:
        def action() -> None:
            self._require_phase(GamePhase.PLAYING)
            self._check_seat(player)
            if player != self.current_player:
                raise NotYourTurn(f"It is not {self._name(player)}'s turn.")
            hand = self.hands[player]
            if card not in hand:
                raise CardNotInHand(f"{hand.name} does not hold {card_symbol(card)}.")

            hand.remove(card)
            self._trick.add_play(player, card)
            self._emit(CardPlayed(hand.name, card))
            if self._trick.is_full():
                self._resolve_trick()
            else:
                self.current_player = self._opponent(player)

        return self._run(action)

    # Queries -----------------------------------------------------------

    @property
    def non_dealer(self) -> int:
        return 1 - self.dealer

    def dealer_name(self) -> str:
        return self._name(self.dealer)

    def hand(self, player: int) -> List[Card]:
        return list(self.hands[player].cards)

    def scores(self) -> Tuple[int, int]:
        return self.hands[0].score, self.hands[1].score

    def current_trick(self) -> List[Card]:
        return self._trick.cards()

    def trick_plays(self) -> List[Tuple[int, Card]]:
        return list(self._trick.plays)

    def trick_leader(self) -> int:
        return self._trick.leader

    def trick_counts(self) -> Tuple[int, int]:
        return self._tricks[0], self._tricks[1]

    def talon(self) -> List[Card]:
        return list(self._talon)

    def talon_count(self) -> int:
        return len(self._talon)

    def deck_remaining(self) -> int:
        return self.deck.remaining()

    def discards(self, player: int) -> List[Card]:
        return list(self._discards[player])

    def has_exchanged(self, player: int) -> bool:
        return self._exchanged[player]

    def round_score(self) -> RoundScore:
        return self._round_score

    def exchange_allowance(self, player: int) -> int:
        """Cards ``player`` may still exchange this round."""
        if self.phase != GamePhase.EXCHANGING or self._exchanged[player]:
            return 0
        if player == self.non_dealer:
            return min(self.rules.non_dealer_exchange_limit, len(self._talon))
        return len(self._talon)

    def legal_moves(self, player: int) -> List[Card]:
        if self.phase != GamePhase.PLAYING or player != self.current_player:
            return []
        return legal_moves(self.hands[player].cards, self._trick)

    def is_over(self) -> bool:
        return self.phase == GamePhase.GAME_OVER

    # Internal flow -----------------------------------------------------

    def _run(self, action: Callable[[], None]) -> CommandResult:
        self._pending = []
        try:
            action()
        except (EmptyDeck, InvalidTransition):
            self._pending = []
            raise
        except PiquetError as exc:
            self._pending = []
            logger.debug("Command rejected (%s): %s", exc.reason, exc)
            return CommandResult.failure(exc)
        events = tuple(self._pending)
        self._pending = []
        for event in events:
            self.bus.publish(event)
        return CommandResult(ok=True, events=events)

    def _emit(self, event: Event) -> None:
        self._pending.append(event)

    def _transition(self, target: GamePhase) -> None:
        ensure_transition(self.phase, target)
        self.phase = target
        self._emit(PhaseChanged(target))

    def _reset_match(self) -> None:
        for hand in self.hands:
            hand.clear()
            hand.score = 0
        self.score_manager.reset()
        self.round_number = 1
        self.dealer = self.config.first_dealer
        self.winner = None
        logger.info("Match started: %d rounds, target %d", self.config.total_rounds, self.config.target_score)

    def _deal_round(self, deck: Optional[Sequence[Card]]) -> None:
        if deck is not None:
            # Validate the stacked order before any round state is touched.
            self.deck.stack(deck)
        if self.phase == GamePhase.SETUP:
            self._transition(GamePhase.DEALING)

        for hand in self.hands:
            hand.clear()
        self._talon = []
        self._discards = [[], []]
        self._exchanged = [False, False]
        self._tricks = [0, 0]
        self._trick = Trick(leader=self.non_dealer)
        self.trick_history = []
        self.declarations = [{}, {}]
        self.current_player = None
        self._round_score = RoundScore(round_number=self.round_number)
        if deck is None:
            self.deck.reset()
            self.deck.shuffle()

        logger.info(
            "Round %d/%d: %s deals",
            self.round_number,
            self.config.total_rounds,
            self.dealer_name(),
        )
        non_dealer, dealer = self.hands[self.non_dealer], self.hands[self.dealer]
        non_dealer.add_many(self.deck.draw_many(self.rules.hand_size))
        dealer.add_many(self.deck.draw_many(self.rules.hand_size))
        self._talon = [self.deck.draw() for _ in range(self.rules.talon_size)]
        non_dealer.sort()
        dealer.sort()
        logger.debug("Dealt %s", ", ".join(str(hand) for hand in self.hands))

        self._emit(CardsDealt())
        self._transition(GamePhase.EXCHANGING)

    def _compare_declaration(self, combo_type: CombinationType) -> None:
        first = self.declarations[0].get(combo_type)
        second = self.declarations[1].get(combo_type)
        outcome = compare_combinations(first, second)
        if outcome == 0:
            if first is not None:
                logger.debug("%s: tie, nobody scores", combo_type)
            return
        player = 0 if outcome > 0 else 1
        combo = first if outcome > 0 else second
        assert combo is not None
        self.hands[player].score += combo.score
        self._round_score.add(player, combo_type.value, combo.score)
        logger.debug("%s wins %s with %s", self._name(player), combo_type, combo)
        self._emit(CombinationScored(self._name(player), combo_type, combo.score))

    def _apply_repique(self) -> None:
        declared = [self._round_score.declaration_total(player) for player in (0, 1)]
        for player in (0, 1):
            bonus = repique(declared[player], declared[self._opponent(player)])
            if bonus:
                self._award(player, "repique", bonus)

    def _apply_pique(self) -> None:
        pre_play = [
            self._round_score.declaration_total(player) + self._round_score.get(player, "carte_blanche")
            for player in (0, 1)
        ]
        for player in (0, 1):
            if self._round_score.get(player, "repique"):
                continue
            if self._round_score.total(player) < PIQUE_POINTS:
                continue
            bonus = pique(pre_play[self._opponent(player)])
            if bonus:
                self._award(player, "pique", bonus)

    def _award(self, player: int, bonus: str, points: int) -> None:
        self.hands[player].score += points
        self._round_score.add(player, bonus, points)
        self._emit(BonusAwarded(self._name(player), bonus, points))

    def _resolve_trick(self) -> None:
        (leader, lead_card), (_, follow_card) = self._trick.plays
        winner, _ = self._trick.winning_play()
        self._tricks[winner] += 1
        self.trick_history.append(TrickRecord(leader, lead_card, follow_card, winner))
        logger.debug(
            "%s takes the trick %s/%s (%d tricks)",
            self._name(winner),
            card_symbol(lead_card),
            card_symbol(follow_card),
            self._tricks[winner],
        )
        self._emit(TrickWon(self._name(winner), TRICK_POINTS, self._tricks[winner]))

        self._trick = Trick(leader=winner)
        self.current_player = winner
        if all(len(hand) == 0 for hand in self.hands):
            self._end_round()

    def _end_round(self) -> None:
        self._transition(GamePhase.SCORING)
        self.current_player = None
        for player in (0, 1):
            points = trick_score(self._tricks[player], capot_tricks=self.rules.hand_size)
            self.hands[player].score += points
            self._round_score.add(player, "trick", points)
        if self.rules.pique:
            self._apply_pique()
        self.score_manager.record_round(self._round_score)
        logger.info(
            "Round %d scored: %s %d, %s %d",
            self.round_number,
            self._name(0),
            self.hands[0].score,
            self._name(1),
            self.hands[1].score,
        )
        self._emit(RoundEnded())

        target_reached = any(hand.score >= self.config.target_score for hand in self.hands)
        if self.round_number >= self.config.total_rounds or target_reached:
            self._end_game()
            return

        self.round_number += 1
        self.dealer = self.non_dealer
        self._transition(GamePhase.DEALING)
        if self.config.auto_deal:
            self._deal_round(None)

    def _end_game(self) -> None:
        self._transition(GamePhase.GAME_OVER)
        first, second = self.scores()
        if first > second:
            self.winner = self._name(0)
        elif second > first:
            self.winner = self._name(1)
        else:
            self.winner = DRAW
        logger.info("Game over: %s (%d-%d)", self.winner, first, second)
        self._emit(GameOver(self.winner))

    # Helpers -----------------------------------------------------------

    def _require_phase(self, expected: GamePhase) -> None:
        if self.phase != expected:
            raise WrongPhase(f"Action not allowed in phase {self.phase}. Expected {expected}.")

    def _check_seat(self, player: int) -> None:
        if player not in (0, 1):
            raise UnknownPlayer(f"Unknown seat {player!r}; expected 0 or 1.")

    def _opponent(self, player: int) -> int:
        return 1 - player

    def _name(self, player: int) -> str:
        return self.hands[player].name
