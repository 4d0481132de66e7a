from piquet.cards import Card, Rank, Suit
from piquet.config import MatchConfig
from piquet.deck import DECK_SIZE
from piquet.engine import RoundEngine
from piquet.events import (
    CardPlayed,
    CardsDealt,
    DeclarationComplete,
    ExchangeComplete,
    GameOver,
    PhaseChanged,
    RoundEnded,
    TrickWon,
)
from piquet.phases import GamePhase


def stacked_engine(deck, **overrides):
    engine = RoundEngine(MatchConfig(**overrides))
    assert engine.initialize_game(deck=deck).ok
    return engine


def test_deal_partitions_the_pack():
    engine = RoundEngine(MatchConfig(seed=5))
    result = engine.initialize_game()

    assert result.ok
    assert engine.phase == GamePhase.EXCHANGING
    assert len(engine.hand(0)) == 12
    assert len(engine.hand(1)) == 12
    assert engine.talon_count() == 8
    assert engine.deck_remaining() == 0

    all_cards = engine.hand(0) + engine.hand(1) + engine.talon()
    assert len(set(all_cards)) == DECK_SIZE
    assert engine.deck_remaining() + len(all_cards) == DECK_SIZE


def test_same_seed_deals_the_same_hands():
    first = RoundEngine(MatchConfig(seed=99))
    second = RoundEngine(MatchConfig(seed=99))
    first.initialize_game()
    second.initialize_game()
    assert first.hand(0) == second.hand(0)
    assert first.talon() == second.talon()


def test_deal_goes_to_the_non_dealer_first(quiet_deck):
    engine = stacked_engine(quiet_deck)
    assert engine.dealer == 1
    assert engine.non_dealer == 0
    assert engine.hand(0) == sorted(quiet_deck[:12])
    assert engine.hand(1) == sorted(quiet_deck[12:24])
    assert engine.talon()[:2] == [Card(Suit.HEARTS, Rank.KING), Card(Suit.HEARTS, Rank.ACE)]


def test_initialize_game_events_arrive_in_order(quiet_deck):
    engine = RoundEngine()
    seen = []
    engine.subscribe(seen.append)
    result = engine.initialize_game(deck=quiet_deck)

    assert list(result.events) == seen
    assert seen == [
        PhaseChanged(GamePhase.SETUP),
        PhaseChanged(GamePhase.DEALING),
        CardsDealt(),
        PhaseChanged(GamePhase.EXCHANGING),
    ]

    engine.unsubscribe(seen.append)
    engine.complete_exchange()
    assert len(seen) == 4


def test_commands_outside_their_phase_are_rejected(quiet_deck):
    engine = stacked_engine(quiet_deck)
    card = engine.hand(0)[0]

    for result in (
        engine.play_card(0, card),
        engine.declare_and_compare(),
        engine.start_new_round(),
    ):
        assert not result.ok
        assert result.reason == "wrong_phase"

    assert engine.phase == GamePhase.EXCHANGING
    assert engine.hand(0)[0] == card


def test_declaration_ties_score_nothing(quiet_deck):
    engine = stacked_engine(quiet_deck)
    assert engine.complete_exchange().ok
    result = engine.declare_and_compare()

    assert result.ok
    assert engine.scores() == (0, 0)
    assert result.events[-2:] == (DeclarationComplete(), PhaseChanged(GamePhase.PLAYING))
    assert engine.phase == GamePhase.PLAYING
    assert engine.current_player == engine.non_dealer


def test_play_rejects_wrong_player_and_missing_card(quiet_deck):
    engine = stacked_engine(quiet_deck)
    engine.complete_exchange()
    engine.declare_and_compare()

    result = engine.play_card(1, engine.hand(1)[0])
    assert result.reason == "not_your_turn"

    result = engine.play_card(0, engine.hand(1)[0])
    assert result.reason == "card_not_in_hand"
    assert engine.current_trick() == []
    assert len(engine.hand(0)) == 12
    assert engine.legal_moves(1) == []


def test_trick_resolution_inside_the_engine(quiet_deck):
    engine = stacked_engine(quiet_deck)
    engine.complete_exchange()
    engine.declare_and_compare()

    lead = Card(Suit.SPADES, Rank.EIGHT)
    assert engine.play_card(0, lead).ok
    assert engine.current_trick() == [lead]
    engine.current_trick().clear()
    assert engine.current_trick() == [lead]
    assert engine.current_player == 1

    result = engine.play_card(1, Card(Suit.SPADES, Rank.KING))
    assert result.events == (
        CardPlayed("Player 2", Card(Suit.SPADES, Rank.KING)),
        TrickWon("Player 2", 1, 1),
    )
    assert engine.trick_counts() == (0, 1)
    assert engine.current_player == 1
    assert engine.current_trick() == []

    engine.play_card(1, Card(Suit.SPADES, Rank.SEVEN))
    engine.play_card(0, Card(Suit.HEARTS, Rank.SEVEN))
    assert engine.trick_counts() == (0, 2)

    engine.play_card(1, Card(Suit.HEARTS, Rank.NINE))
    engine.play_card(0, Card(Suit.CLUBS, Rank.ACE))
    assert engine.trick_counts() == (0, 3)


def test_full_round_then_next_deal(quiet_deck, play_capot):
    engine = stacked_engine(quiet_deck, total_rounds=6, target_score=100)
    assert engine.round_number == 1
    assert engine.exchange_cards(0, []).ok
    assert engine.exchange_cards(1, []).ok
    assert engine.complete_exchange().ok
    assert engine.declare_and_compare().ok
    assert engine.scores() == (0, 0)

    seen = []
    engine.subscribe(seen.append)
    play_capot(engine)

    assert engine.trick_counts() == (12, 0)
    assert engine.scores() == (62, 0)
    assert engine.phase == GamePhase.DEALING
    assert engine.round_number == 2
    assert engine.dealer == 0
    assert engine.non_dealer == 1
    assert seen[-5:] == [
        CardPlayed("Player 2", Card(Suit.CLUBS, Rank.JACK)),
        TrickWon("Player 1", 1, 12),
        PhaseChanged(GamePhase.SCORING),
        RoundEnded(),
        PhaseChanged(GamePhase.DEALING),
    ]
    history = engine.score_manager.history()
    assert len(history) == 1
    assert history[0].get(0, "trick") == 62

    result = engine.start_new_round()
    assert result.ok
    assert result.events == (CardsDealt(), PhaseChanged(GamePhase.EXCHANGING))
    assert engine.scores() == (62, 0)
    assert engine.trick_counts() == (0, 0)
    assert len(engine.hand(0)) == 12
    assert engine.exchange_allowance(1) == 5


def test_match_ends_after_the_last_round(quiet_deck, play_capot):
    engine = stacked_engine(quiet_deck, total_rounds=1)
    engine.complete_exchange()
    engine.declare_and_compare()
    seen = []
    engine.subscribe(seen.append)
    play_capot(engine)

    assert engine.phase == GamePhase.GAME_OVER
    assert engine.is_over()
    assert engine.winner == "Player 1"
    assert seen[-2:] == [PhaseChanged(GamePhase.GAME_OVER), GameOver("Player 1")]
    assert not engine.start_new_round().ok


def test_match_ends_when_target_is_reached(quiet_deck, play_capot):
    engine = stacked_engine(quiet_deck, target_score=60)
    engine.complete_exchange()
    engine.declare_and_compare()
    play_capot(engine)
    assert engine.phase == GamePhase.GAME_OVER
    assert engine.round_number == 1


def test_equal_scores_are_a_draw(quiet_deck, play_capot):
    engine = stacked_engine(quiet_deck, total_rounds=1)
    engine.complete_exchange()
    engine.declare_and_compare()
    engine.hands[1].score = 62
    play_capot(engine)
    assert engine.winner == "draw"


def test_initialize_game_restarts_the_match(quiet_deck, play_capot):
    engine = stacked_engine(quiet_deck, total_rounds=1)
    engine.complete_exchange()
    engine.declare_and_compare()
    play_capot(engine)

    assert engine.initialize_game().ok
    assert engine.scores() == (0, 0)
    assert engine.round_number == 1
    assert engine.winner is None
    assert engine.phase == GamePhase.EXCHANGING
    assert engine.score_manager.history() == []


def test_auto_deal_moves_straight_to_the_exchange(quiet_deck, play_capot):
    engine = stacked_engine(quiet_deck, auto_deal=True)
    engine.complete_exchange()
    engine.declare_and_compare()
    play_capot(engine)
    assert engine.phase == GamePhase.EXCHANGING
    assert engine.round_number == 2
    assert len(engine.hand(1)) == 12


def test_complete_exchange_emits_in_order(quiet_deck):
    engine = stacked_engine(quiet_deck)
    result = engine.complete_exchange()
    assert result.events == (ExchangeComplete(), PhaseChanged(GamePhase.DECLARATION))
    assert engine.exchange_allowance(0) == 0
    assert not engine.complete_exchange().ok


def test_start_new_round_from_setup_starts_the_match(quiet_deck, play_capot):
    engine = RoundEngine(MatchConfig(total_rounds=1))
    engine.hands[0].score = 40

    result = engine.start_new_round(deck=quiet_deck)

    assert result.events == (
        PhaseChanged(GamePhase.DEALING),
        CardsDealt(),
        PhaseChanged(GamePhase.EXCHANGING),
    )
    assert engine.round_number == 1
    assert engine.scores() == (0, 0)
    assert engine.dealer == 1

    engine.complete_exchange()
    engine.declare_and_compare()
    play_capot(engine)
    assert engine.phase == GamePhase.GAME_OVER
    assert engine.round_number == 1
    assert len(engine.score_manager.history()) == 1


def test_unknown_seat_is_a_rejected_command(quiet_deck):
    engine = stacked_engine(quiet_deck)
    result = engine.exchange_cards(2, [])
    assert not result.ok
    assert result.reason == "unknown_player"
    assert engine.talon_count() == 8

    engine.complete_exchange()
    engine.declare_and_compare()
    assert engine.play_card(-1, engine.hand(0)[0]).reason == "unknown_player"
    assert len(engine.hand(0)) == 12
