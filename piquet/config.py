"""Validated configuration for Piquet matches."""

from __future__ import annotations

from pathlib import Path
from typing import Optional, Tuple

import yaml
from pydantic import BaseModel, Field, field_validator, model_validator

from .deck import DECK_SIZE

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


class RulesConfig(BaseModel):
    hand_size: int = Field(12, ge=1, description="Cards dealt to each player.")
    talon_size: int = Field(8, ge=0, description="Cards left face down for the exchange.")
    non_dealer_exchange_limit: int = Field(5, ge=0, description="Most cards the non-dealer may exchange.")
    carte_blanche_bonus: bool = Field(True, description="Award +10 to a non-dealer holding no face card.")
    pique: bool = Field(False, description="Apply the +30 pique bonus at round end.")
    repique: bool = Field(False, description="Apply the +60 repique bonus after declaration.")

    @model_validator(mode="after")
    def check_card_budget(self) -> "RulesConfig":
        if self.hand_size * 2 + self.talon_size != DECK_SIZE:
            raise ValueError(
                f"Two hands of {self.hand_size} plus a talon of {self.talon_size} must use all {DECK_SIZE} cards."
            )
        if self.non_dealer_exchange_limit > self.talon_size:
            raise ValueError("Non-dealer exchange limit cannot exceed the talon size.")
        return self


class LoggingConfig(BaseModel):
    level: str = "INFO"

    @field_validator("level")
    @classmethod
    def validate_level(cls, value: str) -> str:
        normalized = value.upper()
        if normalized not in LOG_LEVELS:
            raise ValueError(f"Unknown log level: {value!r}")
        return normalized


class MatchConfig(BaseModel):
    total_rounds: int = Field(6, ge=1, description="Rounds played before the match ends.")
    target_score: int = Field(100, ge=1, description="Score that ends the match early.")
    player_names: Tuple[str, str] = ("Player 1", "Player 2")
    seed: Optional[int] = Field(None, description="Seed for the deck shuffle; None draws from the OS.")
    first_dealer: int = Field(1, ge=0, le=1, description="Seat that deals round one.")
    auto_deal: bool = Field(False, description="Deal the next round as soon as a round is scored.")
    rules: RulesConfig = Field(default_factory=RulesConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    @field_validator("player_names")
    @classmethod
    def validate_names(cls, value: Tuple[str, str]) -> Tuple[str, str]:
        names = tuple(name.strip() for name in value)
        if not all(names):
            raise ValueError("Player names must not be empty.")
        if names[0] == names[1]:
            raise ValueError("Player names must be distinct.")
        return names


def load_config(path: Path | str | None = None) -> MatchConfig:
    """Load a match configuration from YAML, falling back to defaults."""
    if path is None:
        return MatchConfig()

    config_path = Path(path)
    if not config_path.exists():
        return MatchConfig()

    with open(config_path, encoding="utf-8") as f:
        data = yaml.safe_load(f)

    return MatchConfig(**data) if data else MatchConfig()
