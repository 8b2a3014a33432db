"""Shared notation-layer data models."""

from __future__ import annotations

from dataclasses import dataclass

from chessturn.core.enums import MoveFlag, PieceType
from chessturn.core.types import Square


@dataclass(frozen=True, slots=True)
class ParsedTurn:
    """Partial move descriptor tokenized from algebraic input.

    Castling input sets ``castle`` and leaves ``to_sq`` unset.
    """

    text: str
    piece_type: PieceType = PieceType.PAWN
    to_sq: Square | None = None
    from_file: int | None = None
    from_rank: int | None = None
    is_capture: bool = False
    promotion: PieceType | None = None
    castle: MoveFlag | None = None
