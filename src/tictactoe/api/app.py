from __future__ import annotations

import asyncio
import logging
from typing import Dict, List, Optional, Set

from fastapi import FastAPI, HTTPException, WebSocket, WebSocketDisconnect
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel

from tictactoe.ai.agent import Strategy
from tictactoe.config import Settings
from tictactoe.engine import GameState, Move
from tictactoe.scheduler import AsyncioScheduler
from tictactoe.session import GameMode, GameSession

logger = logging.getLogger(__name__)


class MoveRequest(BaseModel):
    index: int


class ModeRequest(BaseModel):
    mode: GameMode


class DifficultyRequest(BaseModel):
    difficulty: Strategy


class FeedbackRequest(BaseModel):
    enabled: bool


class HistoryEntry(BaseModel):
    index: int
    mark: str


class GameResponse(BaseModel):
    board: List[Optional[str]]
    turn: str
    outcome: str
    winner: Optional[str] = None
    winning_line: Optional[List[int]] = None
    history: List[HistoryEntry]
    mode: str
    difficulty: str
    computer_mark: str
    scores: Dict[str, int]
    status: str
    feedback_enabled: bool
    computer_pending: bool


class HintResponse(BaseModel):
    index: Optional[int] = None


class Hub:
    def __init__(self) -> None:
        self.connections: Set[WebSocket] = set()
        self._lock = asyncio.Lock()

    async def connect(self, websocket: WebSocket) -> None:
        await websocket.accept()
        async with self._lock:
            self.connections.add(websocket)

    async def disconnect(self, websocket: WebSocket) -> None:
        async with self._lock:
            self.connections.discard(websocket)

    async def broadcast(self, payload: Dict) -> None:
        async with self._lock:
            recipients = list(self.connections)
        for ws in recipients:
            try:
                await ws.send_json(payload)
            except WebSocketDisconnect:
                await self.disconnect(ws)
            except Exception:
                logger.warning("Dropping websocket after failed send", exc_info=True)
                await self.disconnect(ws)


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """Build the local UI bridge around a single game session."""
    settings = settings or Settings.from_env()
    app = FastAPI(title="Tic-Tac-Toe API")
    hub = Hub()
    holder: Dict[str, GameSession] = {}

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    def publish(event: str, session: GameSession, **extra: object) -> None:
        payload: Dict = {"event": event, "game": session.snapshot()}
        payload.update(extra)
        asyncio.get_running_loop().create_task(hub.broadcast(payload))

    def require_session() -> GameSession:
        # Built lazily so the deferred-move scheduler binds to the server's running loop.
        session = holder.get("session")
        if session is None:
            session = GameSession(
                mode=settings.mode,
                difficulty=settings.difficulty,
                computer_mark=settings.computer_mark,
                computer_delay=settings.computer_delay,
                scheduler=AsyncioScheduler(),
            )

            def on_move(move: Move, state: GameState) -> None:
                publish(
                    "move",
                    session,
                    move={"index": move.index, "mark": move.mark.value},
                    feedback=session.feedback_enabled,
                )

            session.subscribe(on_move, feedback=False)
            holder["session"] = session
        return session

    def respond(session: GameSession) -> GameResponse:
        return GameResponse(**session.snapshot())

    @app.get("/health")
    async def health() -> Dict[str, str]:
        return {"status": "ok"}

    @app.get("/game", response_model=GameResponse)
    async def get_game() -> GameResponse:
        return respond(require_session())

    @app.post("/game/move", response_model=GameResponse)
    async def play_move(body: MoveRequest) -> GameResponse:
        session = require_session()
        if not session.apply_move(body.index):
            raise HTTPException(status_code=409, detail=f"Move {body.index} rejected")
        return respond(session)

    @app.post("/game/computer-move", response_model=GameResponse)
    async def computer_move() -> GameResponse:
        session = require_session()
        if not session.computer_move():
            raise HTTPException(status_code=409, detail="The computer is not on turn")
        return respond(session)

    @app.get("/game/hint", response_model=HintResponse)
    async def hint() -> HintResponse:
        return HintResponse(index=require_session().select_move())

    @app.post("/game/reset", response_model=GameResponse)
    async def reset_game() -> GameResponse:
        session = require_session()
        session.reset_game()
        publish("reset", session)
        return respond(session)

    @app.post("/game/mode", response_model=GameResponse)
    async def set_mode(body: ModeRequest) -> GameResponse:
        session = require_session()
        session.set_mode(body.mode)
        publish("reset", session)
        return respond(session)

    @app.post("/game/difficulty", response_model=GameResponse)
    async def set_difficulty(body: DifficultyRequest) -> GameResponse:
        session = require_session()
        session.set_difficulty(body.difficulty)
        publish("reset", session)
        return respond(session)

    @app.post("/game/feedback", response_model=GameResponse)
    async def set_feedback(body: FeedbackRequest) -> GameResponse:
        session = require_session()
        session.set_feedback_enabled(body.enabled)
        return respond(session)

    @app.websocket("/ws")
    async def ws_game(websocket: WebSocket) -> None:
        await hub.connect(websocket)
        try:
            await websocket.send_json({"event": "state", "game": require_session().snapshot()})
            while True:
                # Inbound messages are ignored; moves go through the HTTP routes.
                await websocket.receive_text()
        except WebSocketDisconnect:
            await hub.disconnect(websocket)
        except Exception:
            await hub.disconnect(websocket)

    return app
