"""Pseudo-legal move generation + attack detection."""

from __future__ import annotations

from collections.abc import Callable
from typing import TYPE_CHECKING

from chessturn.core.enums import Color, MoveFlag, PieceType
from chessturn.core.move import Move
from chessturn.core.piece import Piece
from chessturn.core.special_moves import (
    PROMOTION_TYPES,
    castling_moves,
    en_passant_capture_square,
    is_promotion_square,
)
from chessturn.core.types import Square, make_square

if TYPE_CHECKING:
    from chessturn.core.board import Board
    from chessturn.core.position import Position


# Offsets are (file, rank) steps; tuple order is generation order.
KNIGHT_OFFSETS: tuple[tuple[int, int], ...] = (
    (1, 2),
    (1, -2),
    (-1, 2),
    (-1, -2),
    (2, 1),
    (2, -1),
    (-2, 1),
    (-2, -1),
)

BISHOP_DIRS: tuple[tuple[int, int], ...] = ((1, 1), (1, -1), (-1, -1), (-1, 1))
ROOK_DIRS: tuple[tuple[int, int], ...] = ((0, 1), (1, 0), (0, -1), (-1, 0))
QUEEN_DIRS: tuple[tuple[int, int], ...] = (
    (0, 1),
    (1, 1),
    (1, 0),
    (1, -1),
    (0, -1),
    (-1, -1),
    (-1, 0),
    (-1, 1),
)
KING_OFFSETS: tuple[tuple[int, int], ...] = QUEEN_DIRS

# Pawn capture file steps: higher file first.
_PAWN_CAPTURE_FILES: tuple[int, int] = (1, -1)
_PAWN_FORWARD: tuple[int, int] = (1, -1)
_PAWN_START_RANK: tuple[int, int] = (1, 6)


# -- Precomputed lookup tables ---------------------------------------------


def _build_targets(
    offsets: tuple[tuple[int, int], ...],
) -> tuple[tuple[Square, ...], ...]:
    targets: list[tuple[Square, ...]] = []
    for sq in range(64):
        file_idx = sq & 7
        rank_idx = sq >> 3
        moves: list[Square] = []
        for df, dr in offsets:
            af = file_idx + df
            ar = rank_idx + dr
            if 0 <= af < 8 and 0 <= ar < 8:
                moves.append(make_square(af, ar))
        targets.append(tuple(moves))
    return tuple(targets)


def _build_attack_masks(targets: tuple[tuple[Square, ...], ...]) -> tuple[int, ...]:
    masks: list[int] = [0] * 64
    for sq in range(64):
        mask = 0
        for to_sq in targets[sq]:
            mask |= 1 << to_sq
        masks[sq] = mask
    return tuple(masks)


def _build_pawn_attacker_masks() -> tuple[tuple[int, ...], tuple[int, ...]]:
    """Per color, squares from which a pawn of that color attacks each square."""
    white_masks: list[int] = [0] * 64
    black_masks: list[int] = [0] * 64

    for sq in range(64):
        file_idx = sq & 7
        rank_idx = sq >> 3

        white_mask = 0
        if rank_idx > 0:
            if file_idx > 0:
                white_mask |= 1 << make_square(file_idx - 1, rank_idx - 1)
            if file_idx < 7:
                white_mask |= 1 << make_square(file_idx + 1, rank_idx - 1)

        black_mask = 0
        if rank_idx < 7:
            if file_idx > 0:
                black_mask |= 1 << make_square(file_idx - 1, rank_idx + 1)
            if file_idx < 7:
                black_mask |= 1 << make_square(file_idx + 1, rank_idx + 1)

        white_masks[sq] = white_mask
        black_masks[sq] = black_mask

    return (tuple(white_masks), tuple(black_masks))


def _build_rays(
    directions: tuple[tuple[int, int], ...],
) -> tuple[tuple[tuple[Square, ...], ...], ...]:
    rays_per_square: list[tuple[tuple[Square, ...], ...]] = []
    for sq in range(64):
        file_idx = sq & 7
        rank_idx = sq >> 3
        square_rays: list[tuple[Square, ...]] = []
        for df, dr in directions:
            af = file_idx + df
            ar = rank_idx + dr
            ray: list[Square] = []
            while 0 <= af < 8 and 0 <= ar < 8:
                ray.append(make_square(af, ar))
                af += df
                ar += dr
            square_rays.append(tuple(ray))
        rays_per_square.append(tuple(square_rays))
    return tuple(rays_per_square)


_KNIGHT_TARGETS = _build_targets(KNIGHT_OFFSETS)
_KING_TARGETS = _build_targets(KING_OFFSETS)
_KNIGHT_ATTACK_MASKS = _build_attack_masks(_KNIGHT_TARGETS)
_KING_ATTACK_MASKS = _build_attack_masks(_KING_TARGETS)
_PAWN_ATTACKER_MASKS = _build_pawn_attacker_masks()

_BISHOP_RAYS = _build_rays(BISHOP_DIRS)
_ROOK_RAYS = _build_rays(ROOK_DIRS)
_QUEEN_RAYS = _build_rays(QUEEN_DIRS)


class MoveGenerator:
    """Generates pseudo-legal moves for a given :class:`Position`.

    Pieces of the side to move are visited in board scan order (a1, b1, ...,
    h8) and each is expanded by the generator registered for its kind. The
    result ignores self-check; :mod:`chessturn.core.legality` filters it.

    The board is read through the position on every call, so a generator
    stays valid after :meth:`Position.restore` swaps the board object.
    """

    __slots__ = ("_pos",)

    def __init__(self, position: Position) -> None:
        self._pos = position

    @property
    def _board(self) -> Board:
        return self._pos.board

    # -- Public API ---------------------------------------------------------

    def generate_pseudo_legal_moves(self) -> list[Move]:
        """All pseudo-legal moves (may leave own king in check)."""
        moves: list[Move] = []
        board = self._board
        color = self._pos.side_to_move
        for sq in board.occupied(color):
            piece = board[sq]
            assert piece is not None
            _GENERATORS[piece.piece_type](self, sq, piece, moves)
        return moves

    # -- Attack detection (public) -----------------------------------------

    def is_in_check(self, color: Color) -> bool:
        """Is *color*'s king attacked by the opponent?"""
        king_sq = self._board.king_square(color)
        return self.is_square_attacked(king_sq, color.opposite)

    def is_square_attacked(self, sq: Square, by_color: Color) -> bool:
        """Is *sq* attacked by any piece of *by_color*?"""
        board = self._board
        by_idx = int(by_color)

        if (
            board.pieces_bitboard(by_color, PieceType.PAWN)
            & _PAWN_ATTACKER_MASKS[by_idx][sq]
        ):
            return True

        if board.pieces_bitboard(by_color, PieceType.KNIGHT) & _KNIGHT_ATTACK_MASKS[sq]:
            return True

        if board.pieces_bitboard(by_color, PieceType.KING) & _KING_ATTACK_MASKS[sq]:
            return True

        if board.pieces_bitboard(by_color, PieceType.BISHOP) or board.pieces_bitboard(
            by_color, PieceType.QUEEN
        ):
            for ray in _BISHOP_RAYS[sq]:
                for to_sq in ray:
                    piece = board[to_sq]
                    if piece is None:
                        continue
                    if piece.color == by_color and piece.piece_type in (
                        PieceType.BISHOP,
                        PieceType.QUEEN,
                    ):
                        return True
                    break

        if board.pieces_bitboard(by_color, PieceType.ROOK) or board.pieces_bitboard(
            by_color, PieceType.QUEEN
        ):
            for ray in _ROOK_RAYS[sq]:
                for to_sq in ray:
                    piece = board[to_sq]
                    if piece is None:
                        continue
                    if piece.color == by_color and piece.piece_type in (
                        PieceType.ROOK,
                        PieceType.QUEEN,
                    ):
                        return True
                    break

        return False

    # -- Piece-specific generators (private) -------------------------------

    def _gen_pawn(self, sq: Square, piece: Piece, moves: list[Move]) -> None:
        board = self._board
        color = piece.color
        forward = _PAWN_FORWARD[int(color)]
        file_idx = sq & 7
        rank_idx = sq >> 3

        next_rank = rank_idx + forward
        if not 0 <= next_rank < 8:
            return

        one_step = make_square(file_idx, next_rank)
        if board.is_empty(one_step):
            self._add_pawn_move(sq, one_step, piece, None, moves)
            if rank_idx == _PAWN_START_RANK[int(color)]:
                two_step = make_square(file_idx, next_rank + forward)
                if board.is_empty(two_step):
                    moves.append(Move(sq, two_step, piece, flag=MoveFlag.DOUBLE_PAWN))

        ep_square = self._pos.en_passant
        for df in _PAWN_CAPTURE_FILES:
            cap_file = file_idx + df
            if not 0 <= cap_file < 8:
                continue
            cap_sq = make_square(cap_file, next_rank)
            target = board[cap_sq]
            if target is not None:
                if target.color != color:
                    self._add_pawn_move(sq, cap_sq, piece, target, moves)
            elif cap_sq == ep_square:
                victim = board[en_passant_capture_square(sq, cap_sq)]
                if victim == Piece(color.opposite, PieceType.PAWN):
                    moves.append(
                        Move(sq, cap_sq, piece, victim, flag=MoveFlag.EN_PASSANT)
                    )

    @staticmethod
    def _add_pawn_move(
        from_sq: Square,
        to_sq: Square,
        piece: Piece,
        captured: Piece | None,
        moves: list[Move],
    ) -> None:
        if is_promotion_square(piece.color, to_sq):
            for pt in PROMOTION_TYPES:
                moves.append(Move(from_sq, to_sq, piece, captured, pt, MoveFlag.PROMOTION))
        else:
            moves.append(Move(from_sq, to_sq, piece, captured))

    def _gen_knight(self, sq: Square, piece: Piece, moves: list[Move]) -> None:
        self._gen_steps(sq, piece, _KNIGHT_TARGETS[sq], moves)

    def _gen_bishop(self, sq: Square, piece: Piece, moves: list[Move]) -> None:
        self._gen_sliding(sq, piece, _BISHOP_RAYS[sq], moves)

    def _gen_rook(self, sq: Square, piece: Piece, moves: list[Move]) -> None:
        self._gen_sliding(sq, piece, _ROOK_RAYS[sq], moves)

    def _gen_queen(self, sq: Square, piece: Piece, moves: list[Move]) -> None:
        self._gen_sliding(sq, piece, _QUEEN_RAYS[sq], moves)

    def _gen_king(self, sq: Square, piece: Piece, moves: list[Move]) -> None:
        self._gen_steps(sq, piece, _KING_TARGETS[sq], moves)
        moves.extend(castling_moves(self._pos, self, sq))

    def _gen_steps(
        self,
        sq: Square,
        piece: Piece,
        targets: tuple[Square, ...],
        moves: list[Move],
    ) -> None:
        board = self._board
        for to_sq in targets:
            target = board[to_sq]
            if target is None:
                moves.append(Move(sq, to_sq, piece))
            elif target.color != piece.color:
                moves.append(Move(sq, to_sq, piece, target))

    def _gen_sliding(
        self,
        sq: Square,
        piece: Piece,
        rays: tuple[tuple[Square, ...], ...],
        moves: list[Move],
    ) -> None:
        board = self._board
        for ray in rays:
            for to_sq in ray:
                target = board[to_sq]
                if target is None:
                    moves.append(Move(sq, to_sq, piece))
                    continue
                if target.color != piece.color:
                    moves.append(Move(sq, to_sq, piece, target))
                break


_GENERATORS: dict[PieceType, Callable[[MoveGenerator, Square, Piece, list[Move]], None]] = {
    PieceType.PAWN: MoveGenerator._gen_pawn,
    PieceType.KNIGHT: MoveGenerator._gen_knight,
    PieceType.BISHOP: MoveGenerator._gen_bishop,
    PieceType.ROOK: MoveGenerator._gen_rook,
    PieceType.QUEEN: MoveGenerator._gen_queen,
    PieceType.KING: MoveGenerator._gen_king,
}
