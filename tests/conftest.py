import pytest

from piquet.cards import Card, Rank, Suit
from piquet.deck import build_deck

H, D, C, S = Suit.HEARTS, Suit.DIAMONDS, Suit.CLUBS, Suit.SPADES

# Each seat holds three cards of every suit, no three consecutive ranks in a
# suit and no rank more than twice, so neither side has a sequence or a set
# and their points tie.
NON_DEALER_CARDS = [
    Card(H, Rank.SEVEN), Card(H, Rank.EIGHT), Card(H, Rank.TEN),
    Card(D, Rank.NINE), Card(D, Rank.JACK), Card(D, Rank.QUEEN),
    Card(C, Rank.SEVEN), Card(C, Rank.KING), Card(C, Rank.ACE),
    Card(S, Rank.EIGHT), Card(S, Rank.TEN), Card(S, Rank.QUEEN),
]
DEALER_CARDS = [
    Card(H, Rank.NINE), Card(H, Rank.JACK), Card(H, Rank.QUEEN),
    Card(D, Rank.SEVEN), Card(D, Rank.EIGHT), Card(D, Rank.TEN),
    Card(C, Rank.EIGHT), Card(C, Rank.NINE), Card(C, Rank.JACK),
    Card(S, Rank.SEVEN), Card(S, Rank.KING), Card(S, Rank.ACE),
]


def stack(first, second):
    """Deck order dealing ``first`` to the non-dealer and ``second`` to the dealer."""
    used = set(first) | set(second)
    return list(first) + list(second) + [card for card in build_deck() if card not in used]


def off_suit_or_lowest(hand, lead):
    for card in hand:
        if card.suit is not lead.suit:
            return card
    return hand[0]


@pytest.fixture
def quiet_deck():
    return stack(NON_DEALER_CARDS, DEALER_CARDS)


@pytest.fixture
def play_capot():
    """Play out a round where the leader always leads its lowest card and the
    follower discards off-suit whenever it can."""

    def _play(engine):
        while engine.current_player is not None and engine.legal_moves(engine.current_player):
            leader = engine.current_player
            lead = engine.hand(leader)[0]
            assert engine.play_card(leader, lead).ok
            follower = engine.current_player
            assert engine.play_card(follower, off_suit_or_lowest(engine.hand(follower), lead)).ok

    return _play
