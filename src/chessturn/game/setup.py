"""Setup — how a game's initial position is chosen."""

from __future__ import annotations

from dataclasses import dataclass

from chessturn.core.board import Board
from chessturn.core.enums import CastlingRights, Color, EnPassantSignature
from chessturn.core.errors import InvalidSetup
from chessturn.core.notation.fen import (
    STARTING_FEN,
    position_from_fen,
    validate_kings,
    validate_position,
)
from chessturn.core.piece import LETTER_PIECES, Piece
from chessturn.core.position import Position
from chessturn.core.types import parse_square

_SIDES: dict[str, Color] = {"w": Color.WHITE, "b": Color.BLACK}


def parse_custom_setup(
    text: str,
    en_passant_signature: EnPassantSignature = EnPassantSignature.WHEN_CAPTURABLE,
) -> Position:
    """Build a position from ``square,side,piece`` triples.

    Example: ``"a1,w,R e1,w,K e8,b,K"``. White moves first and no castling
    rights are granted.
    """
    board = Board()
    for token in text.split():
        fields = token.split(",")
        if len(fields) != 3:
            raise InvalidSetup(f"Expected square,side,piece: {token!r}")
        square_text, side_text, piece_text = fields
        try:
            sq = parse_square(square_text)
        except ValueError as exc:
            raise InvalidSetup(str(exc)) from exc
        color = _SIDES.get(side_text)
        if color is None:
            raise InvalidSetup(f"Invalid side {side_text!r} in {token!r}")
        piece_type = LETTER_PIECES.get(piece_text)
        if piece_type is None:
            raise InvalidSetup(f"Invalid piece {piece_text!r} in {token!r}")
        if not board.is_empty(sq):
            raise InvalidSetup(f"Square {square_text} is set twice")
        board[sq] = Piece(color, piece_type)

    validate_kings(board)
    position = Position(
        board,
        Color.WHITE,
        CastlingRights.NONE,
        en_passant_signature=en_passant_signature,
    )
    validate_position(position)
    return position


@dataclass(frozen=True, slots=True)
class Setup:
    """Initial position description: the standard start, FEN, or custom triples."""

    fen: str | None = None
    custom: str | None = None

    def __post_init__(self) -> None:
        if self.fen is not None and self.custom is not None:
            raise InvalidSetup("Setup takes either a FEN or a custom placement, not both")
        # Fail at construction rather than when a game starts.
        self.build()

    @classmethod
    def normal(cls) -> Setup:
        return cls()

    @classmethod
    def from_fen(cls, fen: str) -> Setup:
        return cls(fen=fen)

    @classmethod
    def from_custom(cls, text: str) -> Setup:
        return cls(custom=text)

    def build(
        self,
        en_passant_signature: EnPassantSignature = EnPassantSignature.WHEN_CAPTURABLE,
    ) -> Position:
        """Create a fresh :class:`Position` for this setup."""
        if self.custom is not None:
            return parse_custom_setup(self.custom, en_passant_signature)
        return position_from_fen(self.fen or STARTING_FEN, en_passant_signature)
