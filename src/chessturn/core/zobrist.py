"""Zobrist keys for the repetition signature of a position.

Keys are drawn once at import from a seeded ``random.Random``, so a
position's signature is the same in every run and every process. Castling
rights contribute one key per individual right and en passant one key per
file: the rank of the target is implied by the side to move.
"""

from __future__ import annotations

import random
from collections.abc import Mapping
from dataclasses import dataclass
from types import MappingProxyType
from typing import TYPE_CHECKING, Final

from chessturn.core.enums import CastlingRights, Color, PieceType
from chessturn.core.piece import Piece
from chessturn.core.types import Square, file_of

if TYPE_CHECKING:
    from chessturn.core.board import Board

SIGNATURE_SEED: Final = 0x5EED_C4E5

_SINGLE_RIGHTS: Final = (
    CastlingRights.WHITE_KINGSIDE,
    CastlingRights.WHITE_QUEENSIDE,
    CastlingRights.BLACK_KINGSIDE,
    CastlingRights.BLACK_QUEENSIDE,
)


@dataclass(frozen=True, slots=True)
class SignatureKeys:
    """One full set of 64-bit keys.

    ``pieces`` maps every piece to its 64 per-square keys. ``castling`` holds
    one key per single right, in :data:`_SINGLE_RIGHTS` order.
    """

    pieces: Mapping[Piece, tuple[int, ...]]
    black_to_move: int
    castling: tuple[int, ...]
    en_passant_files: tuple[int, ...]

    @classmethod
    def generate(cls, seed: int) -> SignatureKeys:
        rng = random.Random(seed)

        def draw(count: int) -> tuple[int, ...]:
            return tuple(rng.getrandbits(64) for _ in range(count))

        pieces = {
            Piece(color, piece_type): draw(64)
            for color in Color
            for piece_type in PieceType
        }
        return cls(
            pieces=MappingProxyType(pieces),
            black_to_move=rng.getrandbits(64),
            castling=draw(len(_SINGLE_RIGHTS)),
            en_passant_files=draw(8),
        )

    def piece(self, piece: Piece, sq: Square) -> int:
        return self.pieces[piece][sq]

    def rights(self, castling: CastlingRights) -> int:
        key = 0
        for right, right_key in zip(_SINGLE_RIGHTS, self.castling):
            if castling & right:
                key ^= right_key
        return key

    def en_passant(self, target: Square) -> int:
        return self.en_passant_files[file_of(target)]

    def placement(self, board: Board) -> int:
        key = 0
        for color in Color:
            for sq in board.occupied(color):
                piece = board[sq]
                assert piece is not None
                key ^= self.pieces[piece][sq]
        return key


KEYS: Final = SignatureKeys.generate(SIGNATURE_SEED)


def piece_key(piece: Piece, sq: Square) -> int:
    """Key for *piece* standing on *sq*."""
    return KEYS.piece(piece, sq)


def placement_key(board: Board) -> int:
    """Combined key of every piece on *board*."""
    return KEYS.placement(board)


def side_to_move_key() -> int:
    return KEYS.black_to_move


def castling_key(castling: CastlingRights) -> int:
    """XOR of the keys of each right present in *castling*."""
    return KEYS.rights(castling)


def en_passant_key(ep_square: Square) -> int:
    return KEYS.en_passant(ep_square)
