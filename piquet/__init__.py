"""Core rules engine for two-player Piquet."""

__all__ = [
    "cards",
    "deck",
    "hand",
    "combinations",
    "trick",
    "mechanics",
    "phases",
    "events",
    "errors",
    "scoring",
    "config",
    "engine",
    "service",
    "logging_utils",
]
