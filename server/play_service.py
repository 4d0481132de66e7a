"""REST service to play Piquet against a placeholder bot."""

from __future__ import annotations

import logging
import uuid
from dataclasses import asdict
from typing import Dict, List, Optional

from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel, Field, ValidationError

from bots.base import BotStrategy
from bots.bot_arena import BOT_REGISTRY, build_bot
from piquet.cards import serialize_card
from piquet.config import MatchConfig
from piquet.phases import GamePhase
from piquet.service import CommandRejected, MatchService

logger = logging.getLogger(__name__)

HUMAN = 0
BOT = 1


class StartRequest(BaseModel):
    opponent: str = "greedy"
    target_score: int = Field(100, ge=1)
    total_rounds: int = Field(6, ge=1)
    seed: Optional[int] = None
    player_name: str = "You"


class CardPayload(BaseModel):
    rank: str
    suit: str


class ExchangeRequest(BaseModel):
    cards: List[CardPayload] = Field(default_factory=list)


class PlayRequest(BaseModel):
    card: CardPayload


class SessionState:
    def __init__(self, service: MatchService, opponent: BotStrategy) -> None:
        self.service = service
        self.opponent = opponent


sessions: Dict[str, SessionState] = {}


app = FastAPI(title="Piquet Play Service")
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


def ensure_session(session_id: str) -> SessionState:
    session = sessions.get(session_id)
    if session is None:
        raise HTTPException(status_code=404, detail="Session not found")
    return session


def advance_bot(session: SessionState) -> None:
    """Let the bot act until the human is due or the round needs them."""
    service = session.service
    engine = service.engine
    bot = session.opponent
    while True:
        if engine.phase == GamePhase.EXCHANGING:
            bot_due = not engine.has_exchanged(BOT) and (BOT == engine.non_dealer or engine.has_exchanged(HUMAN))
            if bot_due:
                bot.on_round_start(engine, BOT)
                service.exchange(BOT, [serialize_card(card) for card in bot.choose_exchange(engine, BOT)])
                continue
            if engine.has_exchanged(HUMAN) and engine.has_exchanged(BOT):
                service.complete_exchange(HUMAN)
                continue
            return
        if engine.phase == GamePhase.DECLARATION:
            service.declare(HUMAN)
            continue
        if engine.phase == GamePhase.PLAYING and engine.current_player == BOT:
            service.play_card(BOT, serialize_card(bot.play_card(engine, BOT)))
            continue
        return


def serialize_state(session: SessionState) -> Dict[str, object]:
    return asdict(session.service.get_match_view(HUMAN))


def _run_command(session: SessionState, command) -> Dict[str, object]:
    try:
        command()
        advance_bot(session)
    except CommandRejected as exc:
        raise HTTPException(status_code=400, detail={"reason": exc.reason, "message": str(exc)}) from exc
    except KeyError as exc:
        raise HTTPException(status_code=400, detail={"reason": "unknown_card", "message": str(exc)}) from exc
    return {"state": serialize_state(session)}


@app.post("/session/start")
def start_session(request: StartRequest) -> Dict[str, object]:
    bot_cls = BOT_REGISTRY.get(request.opponent)
    if bot_cls is None:
        raise HTTPException(status_code=404, detail=f"Unknown opponent {request.opponent!r}")
    try:
        config = MatchConfig(
            total_rounds=request.total_rounds,
            target_score=request.target_score,
            seed=request.seed,
            player_names=(request.player_name, bot_cls.name),
        )
    except ValidationError as exc:
        messages = "; ".join(error["msg"] for error in exc.errors())
        raise HTTPException(status_code=400, detail={"reason": "invalid_config", "message": messages}) from exc
    opponent = build_bot(request.opponent, seed=request.seed)
    session = SessionState(service=MatchService(config=config), opponent=opponent)
    session_id = uuid.uuid4().hex
    sessions[session_id] = session
    logger.info("Session %s started against %s", session_id, bot_cls.name)
    result = _run_command(session, lambda: session.service.start_match(HUMAN))
    return {"session_id": session_id, **result}


@app.get("/session/{session_id}")
def get_state(session_id: str) -> Dict[str, object]:
    session = ensure_session(session_id)
    return {"state": serialize_state(session)}


@app.post("/session/{session_id}/exchange")
def exchange(session_id: str, request: ExchangeRequest) -> Dict[str, object]:
    session = ensure_session(session_id)
    cards = [card.model_dump() for card in request.cards]
    return _run_command(session, lambda: session.service.exchange(HUMAN, cards))


@app.post("/session/{session_id}/play")
def play(session_id: str, request: PlayRequest) -> Dict[str, object]:
    session = ensure_session(session_id)
    return _run_command(session, lambda: session.service.play_card(HUMAN, request.card.model_dump()))


@app.post("/session/{session_id}/next-round")
def next_round(session_id: str) -> Dict[str, object]:
    session = ensure_session(session_id)
    return _run_command(session, lambda: session.service.start_next_round(HUMAN))
