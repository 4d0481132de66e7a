"""Exception hierarchy shared by the Piquet engine."""

from __future__ import annotations


class PiquetError(RuntimeError):
    """Base class for rule violations reported by the engine."""

    reason = "error"


class WrongPhase(PiquetError):
    """Raised when a command is invoked outside its phase."""

    reason = "wrong_phase"


class NotYourTurn(PiquetError):
    """Raised when a player acts while the other player is due."""

    reason = "not_your_turn"


class CardNotInHand(PiquetError):
    """Raised when a referenced card is not held by the acting player."""

    reason = "card_not_in_hand"


class ExchangeLimitExceeded(PiquetError):
    """Raised when an exchange asks for more cards than allowed."""

    reason = "exchange_limit_exceeded"


class EmptyDeck(PiquetError):
    """Raised when drawing from an exhausted deck."""

    reason = "empty_deck"


class InvalidTransition(PiquetError):
    """Raised when the phase machine is asked for an illegal transition."""

    reason = "invalid_transition"


class UnknownPlayer(PiquetError):
    """Raised when a command names a seat other than 0 or 1."""

    reason = "unknown_player"
