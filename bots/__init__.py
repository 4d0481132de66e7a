"""Placeholder bot strategies for Piquet."""

from .base import BotStrategy
from .baseline_greedy import GreedyBot
from .random_bot import RandomBot

__all__ = ["BotStrategy", "GreedyBot", "RandomBot"]
