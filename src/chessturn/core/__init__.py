"""Core domain layer — pure chess rules with zero external dependencies.

Quick start::

    from chessturn.core import Position, legal_moves, position_from_fen, STARTING_FEN

    pos = position_from_fen(STARTING_FEN)
    for move in legal_moves(pos):
        print(move)
"""

from chessturn.core.board import Board
from chessturn.core.config import RulesConfig
from chessturn.core.enums import (
    CastlingRights,
    Color,
    DrawReason,
    EnPassantSignature,
    GameStatus,
    MoveFlag,
    PieceType,
)
from chessturn.core.errors import (
    AmbiguousNotation,
    ChessTurnError,
    GameOver,
    IllegalMove,
    InvalidSetup,
    MalformedNotation,
    NoHistory,
)
from chessturn.core.gamestate import Gamestate
from chessturn.core.legality import LegalityFilter, legal_moves
from chessturn.core.move import Move
from chessturn.core.move_generator import MoveGenerator
from chessturn.core.notation import (
    STARTING_FEN,
    ParsedTurn,
    encode_move,
    parse_turn,
    position_from_fen,
    position_to_fen,
    resolve_squares,
    resolve_turn,
)
from chessturn.core.piece import Piece
from chessturn.core.position import Position, PositionSnapshot
from chessturn.core.rules import Rules
from chessturn.core.types import (
    Square,
    file_of,
    make_square,
    parse_square,
    rank_of,
    square_name,
)

__all__ = [
    # Enums / flags
    "CastlingRights",
    "Color",
    "DrawReason",
    "EnPassantSignature",
    "GameStatus",
    "MoveFlag",
    "PieceType",
    # Types / helpers
    "Square",
    "file_of",
    "make_square",
    "parse_square",
    "rank_of",
    "square_name",
    # Domain objects
    "Board",
    "Gamestate",
    "LegalityFilter",
    "Move",
    "MoveGenerator",
    "Piece",
    "Position",
    "PositionSnapshot",
    "Rules",
    "RulesConfig",
    "legal_moves",
    # Errors
    "AmbiguousNotation",
    "ChessTurnError",
    "GameOver",
    "IllegalMove",
    "InvalidSetup",
    "MalformedNotation",
    "NoHistory",
    # Notation
    "STARTING_FEN",
    "ParsedTurn",
    "encode_move",
    "parse_turn",
    "position_from_fen",
    "position_to_fen",
    "resolve_squares",
    "resolve_turn",
]
