"""Notation package: FEN and algebraic move parsing and serialization."""

from chessturn.core.notation.fen import STARTING_FEN, position_from_fen, position_to_fen
from chessturn.core.notation.models import ParsedTurn
from chessturn.core.notation.san import (
    encode_move,
    parse_turn,
    resolve_squares,
    resolve_turn,
)

__all__ = [
    "STARTING_FEN",
    "ParsedTurn",
    "position_from_fen",
    "position_to_fen",
    "parse_turn",
    "resolve_turn",
    "resolve_squares",
    "encode_move",
]
