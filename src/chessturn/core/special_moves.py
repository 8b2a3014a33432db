"""Castling, en passant and promotion rules.

The move generator asks this module for castling candidates and promotion
choices; the position uses it to execute the secondary effects of a move
(rook slide, removal of the en-passant victim).
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from chessturn.core.enums import CastlingRights, Color, MoveFlag, PieceType
from chessturn.core.move import Move
from chessturn.core.piece import Piece
from chessturn.core.types import Square, file_of, make_square, rank_of

if TYPE_CHECKING:
    from chessturn.core.board import Board
    from chessturn.core.move_generator import MoveGenerator
    from chessturn.core.position import Position


PROMOTION_TYPES: tuple[PieceType, ...] = (
    PieceType.QUEEN,
    PieceType.ROOK,
    PieceType.BISHOP,
    PieceType.KNIGHT,
)


# ── Castling ─────────────────────────────────────────────────────────────────


@dataclass(frozen=True, slots=True)
class CastlingPath:
    """Fixed geometry of one castling move."""

    color: Color
    flag: MoveFlag
    right: CastlingRights
    king_from: Square
    king_to: Square
    rook_from: Square
    rook_to: Square
    # Squares strictly between king and rook.
    empty_squares: tuple[Square, ...]
    # Squares the king stands on, crosses or lands on.
    safe_squares: tuple[Square, ...]


def _build_paths(color: Color) -> tuple[CastlingPath, CastlingPath]:
    rank = 0 if color == Color.WHITE else 7

    def sq(file: int) -> Square:
        return make_square(file, rank)

    kingside = CastlingPath(
        color=color,
        flag=MoveFlag.CASTLE_KINGSIDE,
        right=CastlingRights.kingside(color),
        king_from=sq(4),
        king_to=sq(6),
        rook_from=sq(7),
        rook_to=sq(5),
        empty_squares=(sq(5), sq(6)),
        safe_squares=(sq(4), sq(5), sq(6)),
    )
    queenside = CastlingPath(
        color=color,
        flag=MoveFlag.CASTLE_QUEENSIDE,
        right=CastlingRights.queenside(color),
        king_from=sq(4),
        king_to=sq(2),
        rook_from=sq(0),
        rook_to=sq(3),
        empty_squares=(sq(3), sq(2), sq(1)),
        safe_squares=(sq(4), sq(3), sq(2)),
    )
    return kingside, queenside


# Per color, kingside first.
CASTLING_PATHS: tuple[tuple[CastlingPath, CastlingPath], ...] = (
    _build_paths(Color.WHITE),
    _build_paths(Color.BLACK),
)

# Rook home square -> the right lost when that rook moves or is captured.
ROOK_CORNERS: dict[Square, CastlingRights] = {
    path.rook_from: path.right for paths in CASTLING_PATHS for path in paths
}


def castling_path(color: Color, flag: MoveFlag) -> CastlingPath:
    kingside, queenside = CASTLING_PATHS[int(color)]
    if flag == MoveFlag.CASTLE_KINGSIDE:
        return kingside
    if flag == MoveFlag.CASTLE_QUEENSIDE:
        return queenside
    raise ValueError(f"Not a castling flag: {flag!r}")


def can_castle(position: Position, gen: MoveGenerator, path: CastlingPath) -> bool:
    """Full castling legality for the side to move along *path*."""
    if not position.castling & path.right:
        return False

    board = position.board
    color = path.color
    if board[path.king_from] != Piece(color, PieceType.KING):
        return False
    if board[path.rook_from] != Piece(color, PieceType.ROOK):
        return False
    if any(not board.is_empty(sq) for sq in path.empty_squares):
        return False

    # The king's own square is first in safe_squares: no castling out of check.
    opponent = color.opposite
    return not any(gen.is_square_attacked(sq, opponent) for sq in path.safe_squares)


def castling_moves(position: Position, gen: MoveGenerator, king_sq: Square) -> list[Move]:
    """Castling candidates for the king on *king_sq*, kingside before queenside."""
    color = position.side_to_move
    king = Piece(color, PieceType.KING)
    moves: list[Move] = []
    for path in CASTLING_PATHS[int(color)]:
        if path.king_from != king_sq:
            continue
        if can_castle(position, gen, path):
            moves.append(Move(path.king_from, path.king_to, king, flag=path.flag))
    return moves


def revoked_rights(move: Move) -> CastlingRights:
    """Rights lost once *move* is played (king/rook leaves home, rook taken)."""
    lost = CastlingRights.NONE
    if move.piece.piece_type == PieceType.KING:
        lost |= CastlingRights.both(move.piece.color)
    for sq in (move.from_sq, move.to_sq):
        lost |= ROOK_CORNERS.get(sq, CastlingRights.NONE)
    return lost


# ── En passant ───────────────────────────────────────────────────────────────


def en_passant_target(move: Move) -> Square | None:
    """Square skipped by a double pawn push, else None."""
    if move.flag != MoveFlag.DOUBLE_PAWN:
        return None
    return make_square(file_of(move.from_sq), (rank_of(move.from_sq) + rank_of(move.to_sq)) // 2)


def en_passant_capture_square(from_sq: Square, to_sq: Square) -> Square:
    """Where the captured pawn stands for an en-passant capture from/to."""
    return make_square(file_of(to_sq), rank_of(from_sq))


def en_passant_capturers(board: Board, target: Square, side_to_move: Color) -> list[Square]:
    """Squares of *side_to_move*'s pawns standing beside the double-pushed pawn.

    Only placement is checked; whether the capture would expose the king is
    left to the caller.
    """
    # The pushed pawn sits one rank past the target from the capturer's view.
    victim_rank = rank_of(target) - 1 if side_to_move == Color.WHITE else rank_of(target) + 1
    file = file_of(target)
    pawn = Piece(side_to_move, PieceType.PAWN)
    squares: list[Square] = []
    for df in (-1, 1):
        f = file + df
        if 0 <= f < 8 and board[make_square(f, victim_rank)] == pawn:
            squares.append(make_square(f, victim_rank))
    return squares


# ── Promotion ────────────────────────────────────────────────────────────────


def promotion_rank(color: Color) -> int:
    return 7 if color == Color.WHITE else 0


def is_promotion_square(color: Color, sq: Square) -> bool:
    return rank_of(sq) == promotion_rank(color)
