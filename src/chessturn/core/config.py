"""Rule-evaluation settings."""

from __future__ import annotations

from dataclasses import dataclass

from chessturn.core.enums import EnPassantSignature, PieceType
from chessturn.core.special_moves import PROMOTION_TYPES


@dataclass(slots=True, frozen=True)
class RulesConfig:
    """Draw thresholds and defaults applied by the turn engine.

    Args:
        fifty_move_limit: Halfmoves without pawn move or capture that end the game.
        repetition_limit: Occurrences of one position signature that end the game.
        en_passant_signature: Whether an en-passant target always counts toward
            the repetition signature, or only when a capture is actually possible.
        default_promotion: Piece chosen when input omits the promotion piece.
    """

    fifty_move_limit: int = 100
    repetition_limit: int = 3
    en_passant_signature: EnPassantSignature = EnPassantSignature.WHEN_CAPTURABLE
    default_promotion: PieceType = PieceType.QUEEN

    def __post_init__(self) -> None:
        if self.fifty_move_limit < 1:
            raise ValueError(f"fifty_move_limit must be positive: {self.fifty_move_limit}")
        if self.repetition_limit < 2:
            raise ValueError(f"repetition_limit must be at least 2: {self.repetition_limit}")
        if self.default_promotion not in PROMOTION_TYPES:
            raise ValueError(f"Invalid promotion piece: {self.default_promotion!r}")
