"""Turn engine: plays, lists and undoes turns while tracking the game state."""

from __future__ import annotations

import logging

from chessturn.core.board import BoardGrid
from chessturn.core.config import RulesConfig
from chessturn.core.enums import Color, PieceType
from chessturn.core.errors import ChessTurnError, GameOver
from chessturn.core.gamestate import Gamestate
from chessturn.core.legality import legal_moves as generate_legal_moves
from chessturn.core.move import Move
from chessturn.core.notation.fen import position_to_fen
from chessturn.core.notation.san import encode_move, resolve_squares, resolve_turn
from chessturn.core.piece import Piece
from chessturn.core.position import Position
from chessturn.core.rules import Rules
from chessturn.game.history import HistoryEntry, HistoryLog
from chessturn.game.setup import Setup
from chessturn.game.turns import AvailableTurn, available_turns

_LOGGER = logging.getLogger(__name__)


class TurnEngine:
    """Single-game rules authority.

    Owns the position, the history log and the cached legal-move list for the
    side to move. Every public operation is atomic: when it raises, the
    engine is left exactly as it was.

    This is a pure logic class — no threading, no UI.
    """

    __slots__ = ("_config", "_setup", "_position", "_history", "_legal", "_turns", "_gamestate")

    def __init__(self, setup: Setup | None = None, config: RulesConfig | None = None) -> None:
        self._config = config or RulesConfig()
        self._setup = setup or Setup.normal()
        self._position = self._setup.build(self._config.en_passant_signature)
        self._history = HistoryLog()
        self._legal: list[Move] = []
        self._turns: list[AvailableTurn] | None = None
        self._gamestate = Gamestate.ongoing()
        self._refresh()

    # ── Turns ────────────────────────────────────────────────────────────

    def play_turn(self, notation: str) -> Gamestate:
        """Play *notation* (algebraic, e.g. ``"Nf3"`` or ``"O-O"``)."""
        self._ensure_playable()
        try:
            move = resolve_turn(notation, self._legal, self._config.default_promotion)
        except ChessTurnError as exc:
            _LOGGER.debug("Rejected turn %r: %s", notation, exc)
            raise
        return self._play(move)

    def play_move(
        self, src: str, dst: str, promotion: PieceType | None = None
    ) -> Gamestate:
        """Play the legal move from *src* to *dst*, e.g. ``("e2", "e4")``."""
        self._ensure_playable()
        try:
            move = resolve_squares(
                src, dst, self._legal, promotion, self._config.default_promotion
            )
        except ChessTurnError as exc:
            _LOGGER.debug("Rejected move %s-%s: %s", src, dst, exc)
            raise
        return self._play(move)

    def undo_turn(self) -> Gamestate:
        """Take back the most recent ply."""
        try:
            entry = self._history.pop()
        except ChessTurnError as exc:
            _LOGGER.debug("Rejected undo: %s", exc)
            raise
        self._position.restore(entry.snapshot)
        self._refresh()
        _LOGGER.debug("Undid %s; %s", entry.notation, self._gamestate)
        return self._gamestate

    def available_turns(self) -> list[AvailableTurn]:
        """Legal turns for the side to move; empty once the game is over."""
        if self._turns is None:
            self._turns = available_turns(self._position, self._legal)
        return list(self._turns)

    # ── Query helpers ────────────────────────────────────────────────────

    @property
    def gamestate(self) -> Gamestate:
        return self._gamestate

    @property
    def side_to_move(self) -> Color:
        return self._position.side_to_move

    @property
    def position(self) -> Position:
        """Current position; callers must not mutate it."""
        return self._position

    @property
    def config(self) -> RulesConfig:
        return self._config

    @property
    def ply_count(self) -> int:
        """Number of half-moves played."""
        return len(self._history)

    def legal_moves(self) -> list[Move]:
        """Legal moves in the current position."""
        return list(self._legal)

    def board_snapshot(self) -> BoardGrid:
        """Read-only grid indexed ``[rank][file]``."""
        return self._position.board.grid()

    def history(self) -> list[str]:
        """Played notations, oldest first."""
        return self._history.notations()

    def captured_pieces(self) -> list[Piece]:
        return self._history.captured_pieces()

    def fen(self) -> str:
        return position_to_fen(self._position)

    # ── Internal ─────────────────────────────────────────────────────────

    def _ensure_playable(self) -> None:
        if self._gamestate.is_terminal:
            _LOGGER.debug("Rejected play: game is over (%s)", self._gamestate)
            raise GameOver(self._gamestate)

    def _play(self, move: Move) -> Gamestate:
        notation = encode_move(self._position, move, self._legal)
        self._history.push(HistoryEntry(move, self._position.snapshot(), notation))
        self._position.apply(move)
        self._refresh()

        _LOGGER.debug("Played %s (%s); %s", notation, move, self._gamestate)
        if self._gamestate.is_terminal:
            _LOGGER.info("Game over after %d plies: %s", len(self._history), self._gamestate)
        return self._gamestate

    def _refresh(self) -> None:
        legal = generate_legal_moves(self._position)
        self._gamestate = Rules.evaluate(self._position, legal, self._config)
        self._legal = [] if self._gamestate.is_terminal else legal
        self._turns = None
