"""Simple bot arena for Piquet."""

from __future__ import annotations

import argparse
import logging
from typing import Dict, Iterable, Optional, Sequence

from piquet.config import MatchConfig, load_config
from piquet.engine import CommandResult, RoundEngine
from piquet.logging_utils import setup_logging
from piquet.phases import GamePhase

from .base import BotStrategy
from .baseline_greedy import GreedyBot
from .random_bot import RandomBot

logger = logging.getLogger(__name__)

BOT_REGISTRY: Dict[str, type[BotStrategy]] = {
    "first": BotStrategy,
    "greedy": GreedyBot,
    "random": RandomBot,
}


def build_bot(name: str, seed: Optional[int] = None) -> BotStrategy:
    """Instantiate a registered bot; seeded bots get ``seed``."""
    bot_cls = BOT_REGISTRY[name]
    if issubclass(bot_cls, RandomBot):
        return bot_cls(seed=seed)
    return bot_cls()


def _require(result: CommandResult) -> None:
    if not result.ok:
        raise RuntimeError(f"Bot command rejected ({result.reason}): {result.message}")


def _resolve_exchange(engine: RoundEngine, bots: Sequence[BotStrategy]) -> None:
    for player in (engine.non_dealer, engine.dealer):
        bots[player].on_round_start(engine, player)
        cards = list(bots[player].choose_exchange(engine, player))
        _require(engine.exchange_cards(player, cards))
    _require(engine.complete_exchange())


def _play_out(engine: RoundEngine, bots: Sequence[BotStrategy]) -> None:
    while engine.phase == GamePhase.PLAYING:
        player = engine.current_player
        assert player is not None
        card = bots[player].play_card(engine, player)
        _require(engine.play_card(player, card))


def play_round(engine: RoundEngine, bots: Sequence[BotStrategy]) -> None:
    if engine.phase == GamePhase.DEALING:
        _require(engine.start_new_round())
    _resolve_exchange(engine, bots)
    _require(engine.declare_and_compare())
    _play_out(engine, bots)


def run_match(
    bot_a: BotStrategy,
    bot_b: BotStrategy,
    *,
    config: Optional[MatchConfig] = None,
    seed: int | None = None,
) -> dict:
    if config is None:
        config = MatchConfig(seed=seed)
    elif seed is not None:
        config = config.model_copy(update={"seed": seed})
    engine = RoundEngine(config)
    bots = [bot_a, bot_b]
    _require(engine.initialize_game())
    while not engine.is_over():
        play_round(engine, bots)

    history = [
        {"round": round_score.round_number, "scores": round_score.totals}
        for round_score in engine.score_manager.history()
    ]
    logger.debug("Match finished: %s", engine.score_manager.report(config.player_names))
    return {"scores": engine.scores(), "winner": engine.winner, "history": history}


def main(argv: Iterable[str] | None = None) -> None:
    parser = argparse.ArgumentParser(description="Run bot matches.")
    parser.add_argument("--bot-a", default="greedy", choices=BOT_REGISTRY.keys())
    parser.add_argument("--bot-b", default="random", choices=BOT_REGISTRY.keys())
    parser.add_argument("--n", type=int, default=10, help="Number of matches to play.")
    parser.add_argument("--seed", type=int, default=42)
    parser.add_argument("--config", default=None, help="YAML match configuration.")
    args = parser.parse_args(argv)

    config = load_config(args.config)
    setup_logging(config.logging.level)

    wins = {f"A ({args.bot_a})": 0, f"B ({args.bot_b})": 0, "draw": 0}
    for index in range(args.n):
        match_seed = args.seed + index
        bot_a = build_bot(args.bot_a, seed=2 * match_seed)
        bot_b = build_bot(args.bot_b, seed=2 * match_seed + 1)
        results = run_match(bot_a, bot_b, config=config, seed=match_seed)
        first, second = results["scores"]
        if first > second:
            wins[f"A ({args.bot_a})"] += 1
        elif second > first:
            wins[f"B ({args.bot_b})"] += 1
        else:
            wins["draw"] += 1

    print(f"Results after {args.n} matches: {wins}")


if __name__ == "__main__":
    main()
