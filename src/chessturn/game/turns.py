"""AvailableTurn — caller-facing view of one legal move."""

from __future__ import annotations

from dataclasses import dataclass

from chessturn.core.move import Move
from chessturn.core.notation.san import encode_move
from chessturn.core.piece import Piece
from chessturn.core.position import Position
from chessturn.core.types import Square, square_name


@dataclass(frozen=True, slots=True)
class AvailableTurn:
    """Legal move as presented to callers, with its rendered notation."""

    src: Square
    dst: Square
    piece: Piece
    captured: Piece | None
    notation: str

    @property
    def src_name(self) -> str:
        return square_name(self.src)

    @property
    def dst_name(self) -> str:
        return square_name(self.dst)

    def __str__(self) -> str:
        return self.notation


def available_turns(position: Position, legal: list[Move]) -> list[AvailableTurn]:
    """One :class:`AvailableTurn` per legal move, in generation order."""
    return [
        AvailableTurn(
            src=move.from_sq,
            dst=move.to_sq,
            piece=move.piece,
            captured=move.captured,
            notation=encode_move(position, move, legal),
        )
        for move in legal
    ]
