"""High-level chess rules: checkmate, stalemate, draw detection."""

from __future__ import annotations

from typing import TYPE_CHECKING

from chessturn.core.config import RulesConfig
from chessturn.core.enums import Color, DrawReason, PieceType
from chessturn.core.gamestate import Gamestate
from chessturn.core.legality import legal_moves as generate_legal_moves
from chessturn.core.move_generator import MoveGenerator

if TYPE_CHECKING:
    from chessturn.core.move import Move
    from chessturn.core.position import Position

_MINOR_PIECES: tuple[PieceType, PieceType] = (PieceType.KNIGHT, PieceType.BISHOP)


class Rules:
    """Static rule-checker that operates on a :class:`Position`."""

    # Evaluation order: checkmate, stalemate, fifty-move, repetition,
    # insufficient material, then check / ongoing.

    @staticmethod
    def is_in_check(position: Position) -> bool:
        gen = MoveGenerator(position)
        return gen.is_in_check(position.side_to_move)

    @staticmethod
    def is_checkmate(position: Position) -> bool:
        if not Rules.is_in_check(position):
            return False
        return len(generate_legal_moves(position)) == 0

    @staticmethod
    def is_stalemate(position: Position) -> bool:
        if Rules.is_in_check(position):
            return False
        return len(generate_legal_moves(position)) == 0

    @staticmethod
    def is_insufficient_material(position: Position) -> bool:
        """K vs K, or K + a single knight or bishop vs K."""
        board = position.board
        white_occ = board.all_pieces_bitboard(Color.WHITE)
        black_occ = board.all_pieces_bitboard(Color.BLACK)
        total = (white_occ | black_occ).bit_count()

        # K vs K
        if total == 2:
            return True

        # K+minor vs K
        if total == 3:
            return any(
                board.has_piece(color, pt) for color in Color for pt in _MINOR_PIECES
            )

        return False

    @staticmethod
    def is_fifty_move_rule(position: Position, limit: int = 100) -> bool:
        return position.halfmove_clock >= limit  # 100 half-moves = 50 full moves

    @staticmethod
    def is_repetition(position: Position, limit: int = 3) -> bool:
        return position.repetition_count() >= limit

    @staticmethod
    def evaluate(
        position: Position,
        legal_moves: list[Move] | None = None,
        config: RulesConfig | None = None,
    ) -> Gamestate:
        """Classify *position* for the side to move.

        *legal_moves* may be passed when the caller already generated them.
        """
        config = config or RulesConfig()
        if legal_moves is None:
            legal_moves = generate_legal_moves(position)
        in_check = Rules.is_in_check(position)

        if not legal_moves:
            if in_check:
                return Gamestate.checkmate(position.side_to_move.opposite)
            return Gamestate.stalemate()

        if Rules.is_fifty_move_rule(position, config.fifty_move_limit):
            return Gamestate.draw(DrawReason.FIFTY_MOVE)
        if Rules.is_repetition(position, config.repetition_limit):
            return Gamestate.draw(DrawReason.REPETITION)
        if Rules.is_insufficient_material(position):
            return Gamestate.draw(DrawReason.INSUFFICIENT_MATERIAL)

        return Gamestate.check() if in_check else Gamestate.ongoing()
