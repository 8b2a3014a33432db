"""Position — complete game state (board + metadata) with apply/restore."""

from __future__ import annotations

from dataclasses import dataclass

from chessturn.core.board import Board
from chessturn.core.enums import CastlingRights, Color, EnPassantSignature, MoveFlag, PieceType
from chessturn.core.move import Move
from chessturn.core.move_generator import MoveGenerator
from chessturn.core.piece import Piece
from chessturn.core.special_moves import (
    castling_path,
    en_passant_capture_square,
    en_passant_capturers,
    en_passant_target,
    revoked_rights,
)
from chessturn.core.types import Square
from chessturn.core.zobrist import (
    castling_key as zobrist_castling_key,
)
from chessturn.core.zobrist import (
    en_passant_key as zobrist_en_passant_key,
)
from chessturn.core.zobrist import (
    piece_key as zobrist_piece_key,
)
from chessturn.core.zobrist import (
    placement_key as zobrist_placement_key,
)
from chessturn.core.zobrist import (
    side_to_move_key as zobrist_side_to_move_key,
)


@dataclass(frozen=True, slots=True)
class PositionSnapshot:
    """Full position state captured before a move, for exact restoration.

    ``board`` is a private copy and is never mutated. Only the length of the
    signature history is kept; restoring trims the history back to it.
    """

    board: Board
    side_to_move: Color
    castling: CastlingRights
    en_passant: Square | None
    halfmove_clock: int
    fullmove_number: int
    base_key: int
    history_length: int


class Position:
    """Full chess position: board + side to move + castling + en passant + clocks.

    :meth:`apply` performs no validation: the caller hands it a move taken from
    the legal-move list. :meth:`snapshot` / :meth:`restore` give exact undo.

    Every position reached is recorded by its repetition signature (placement,
    side to move, castling rights, en-passant target) so repetitions can be
    counted. ``en_passant_signature`` decides whether an uncapturable
    en-passant target still makes a position distinct.
    """

    __slots__ = (
        "board",
        "side_to_move",
        "castling",
        "en_passant",
        "halfmove_clock",
        "fullmove_number",
        "en_passant_signature",
        "_base_hash",
        "_signatures",
        "_signature_counts",
    )

    def __init__(
        self,
        board: Board | None = None,
        side_to_move: Color = Color.WHITE,
        castling: CastlingRights = CastlingRights.ALL,
        en_passant: Square | None = None,
        halfmove_clock: int = 0,
        fullmove_number: int = 1,
        en_passant_signature: EnPassantSignature = EnPassantSignature.WHEN_CAPTURABLE,
    ) -> None:
        self.board = board if board is not None else Board.initial()
        self.side_to_move = side_to_move
        self.castling = castling
        self.en_passant = en_passant
        self.halfmove_clock = halfmove_clock
        self.fullmove_number = fullmove_number
        self.en_passant_signature = en_passant_signature
        self._base_hash = self._compute_base_hash()
        signature = self._current_signature()
        self._signatures: list[int] = [signature]
        self._signature_counts: dict[int, int] = {signature: 1}

    # ── Core move operations ─────────────────────────────────────────────

    def apply(self, move: Move) -> Piece | None:
        """Play *move* and return the captured piece, if any."""
        board = self.board
        piece = move.piece

        capture_sq = move.to_sq
        if move.flag == MoveFlag.EN_PASSANT:
            capture_sq = en_passant_capture_square(move.from_sq, move.to_sq)
        captured = board[capture_sq]

        # Lift piece from origin
        self._toggle_piece_hash(piece, move.from_sq)
        board[move.from_sq] = None

        if captured is not None:
            self._toggle_piece_hash(captured, capture_sq)
            board[capture_sq] = None

        placed = piece
        if move.promotion is not None:
            placed = Piece(piece.color, move.promotion)
        board[move.to_sq] = placed
        self._toggle_piece_hash(placed, move.to_sq)

        if move.is_castling:
            path = castling_path(piece.color, move.flag)
            rook = board[path.rook_from]
            assert rook is not None
            self._toggle_piece_hash(rook, path.rook_from)
            board.move_piece(path.rook_from, path.rook_to)
            self._toggle_piece_hash(rook, path.rook_to)

        self.en_passant = en_passant_target(move)
        self._set_castling(self.castling & ~revoked_rights(move))

        if piece.piece_type == PieceType.PAWN or captured is not None:
            self.halfmove_clock = 0
        else:
            self.halfmove_clock += 1

        if self.side_to_move == Color.BLACK:
            self.fullmove_number += 1

        self.side_to_move = self.side_to_move.opposite
        self._base_hash ^= zobrist_side_to_move_key()

        signature = self._current_signature()
        self._signatures.append(signature)
        self._signature_counts[signature] = self._signature_counts.get(signature, 0) + 1
        return captured

    def snapshot(self) -> PositionSnapshot:
        """Capture everything :meth:`restore` needs to rebuild this state."""
        return PositionSnapshot(
            board=self.board.copy(),
            side_to_move=self.side_to_move,
            castling=self.castling,
            en_passant=self.en_passant,
            halfmove_clock=self.halfmove_clock,
            fullmove_number=self.fullmove_number,
            base_key=self._base_hash,
            history_length=len(self._signatures),
        )

    def restore(self, snapshot: PositionSnapshot) -> None:
        """Overwrite the whole position with *snapshot*.

        Snapshots are restored newest first: *snapshot* must have been taken
        from this position at or before its current ply.
        """
        if snapshot.history_length > len(self._signatures):
            raise ValueError("Snapshot is newer than this position's history")
        self.board = snapshot.board.copy()
        self.side_to_move = snapshot.side_to_move
        self.castling = snapshot.castling
        self.en_passant = snapshot.en_passant
        self.halfmove_clock = snapshot.halfmove_clock
        self.fullmove_number = snapshot.fullmove_number
        self._base_hash = snapshot.base_key
        counts = self._signature_counts
        while len(self._signatures) > snapshot.history_length:
            signature = self._signatures.pop()
            remaining = counts[signature] - 1
            if remaining:
                counts[signature] = remaining
            else:
                del counts[signature]

    # ── Castling bookkeeping ─────────────────────────────────────────────

    def _set_castling(self, castling: CastlingRights) -> None:
        if castling == self.castling:
            return
        self._base_hash ^= zobrist_castling_key(self.castling)
        self.castling = castling
        self._base_hash ^= zobrist_castling_key(self.castling)

    def _toggle_piece_hash(self, piece: Piece, sq: Square) -> None:
        self._base_hash ^= zobrist_piece_key(piece, sq)

    # ── Repetition signature ─────────────────────────────────────────────

    def _en_passant_counts(self) -> bool:
        if self.en_passant is None:
            return False
        if self.en_passant_signature == EnPassantSignature.ALWAYS:
            return True
        return any(
            self._en_passant_is_legal(from_sq)
            for from_sq in en_passant_capturers(self.board, self.en_passant, self.side_to_move)
        )

    def _en_passant_is_legal(self, from_sq: Square) -> bool:
        """Whether the en-passant capture from *from_sq* leaves the mover's king safe."""
        assert self.en_passant is not None
        board = self.board.copy()
        board[en_passant_capture_square(from_sq, self.en_passant)] = None
        board.move_piece(from_sq, self.en_passant)
        scratch = Position(board, self.side_to_move, CastlingRights.NONE)
        return not MoveGenerator(scratch).is_in_check(self.side_to_move)

    def _current_signature(self) -> int:
        signature = self._base_hash
        if self._en_passant_counts():
            assert self.en_passant is not None
            signature ^= zobrist_en_passant_key(self.en_passant)
        return signature

    def _compute_base_hash(self) -> int:
        key = zobrist_placement_key(self.board) ^ zobrist_castling_key(self.castling)
        if self.side_to_move == Color.BLACK:
            key ^= zobrist_side_to_move_key()
        return key

    @property
    def signature(self) -> int:
        """Repetition signature of the current position."""
        return self._signatures[-1]

    def repetition_count(self) -> int:
        """How many times the current signature occurred in this game."""
        return self._signature_counts.get(self.signature, 0)

    # ── Utilities ────────────────────────────────────────────────────────

    def copy(self, keep_history: bool = True) -> Position:
        """Independent copy; without history only the current signature is kept."""
        pos = Position.__new__(Position)
        pos.board = self.board.copy()
        pos.side_to_move = self.side_to_move
        pos.castling = self.castling
        pos.en_passant = self.en_passant
        pos.halfmove_clock = self.halfmove_clock
        pos.fullmove_number = self.fullmove_number
        pos.en_passant_signature = self.en_passant_signature
        pos._base_hash = self._base_hash
        if keep_history:
            pos._signatures = self._signatures.copy()
            pos._signature_counts = self._signature_counts.copy()
        else:
            pos._signatures = [self.signature]
            pos._signature_counts = {self.signature: 1}
        return pos

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Position):
            return NotImplemented
        return (
            self.board == other.board
            and self.side_to_move == other.side_to_move
            and self.castling == other.castling
            and self.en_passant == other.en_passant
            and self.halfmove_clock == other.halfmove_clock
            and self.fullmove_number == other.fullmove_number
            and self._signatures == other._signatures
        )

    def __repr__(self) -> str:
        return f"{self.board!r}\n{self.side_to_move.label} to move"
