"""FEN parsing and serialization."""

from __future__ import annotations

from chessturn.core.board import Board
from chessturn.core.enums import CastlingRights, Color, EnPassantSignature, PieceType
from chessturn.core.errors import InvalidSetup
from chessturn.core.move_generator import MoveGenerator
from chessturn.core.piece import Piece
from chessturn.core.position import Position
from chessturn.core.types import Square, make_square, parse_square, rank_of, square_name

STARTING_FEN = "rnbqkbnr/pppppppp/8/8/8/8/PPPPPPPP/RNBQKBNR w KQkq - 0 1"

_CASTLING_CHARS: dict[str, CastlingRights] = {
    "K": CastlingRights.WHITE_KINGSIDE,
    "Q": CastlingRights.WHITE_QUEENSIDE,
    "k": CastlingRights.BLACK_KINGSIDE,
    "q": CastlingRights.BLACK_QUEENSIDE,
}


def validate_kings(board: Board) -> None:
    """Raise :class:`InvalidSetup` unless each side has exactly one king."""
    for color in Color:
        count = board.pieces_bitboard(color, PieceType.KING).bit_count()
        if count != 1:
            raise InvalidSetup(f"{color.label} must have exactly one king, found {count}")


def validate_position(position: Position) -> None:
    """Raise :class:`InvalidSetup` if the side not to move is in check."""
    waiting = position.side_to_move.opposite
    if MoveGenerator(position).is_in_check(waiting):
        raise InvalidSetup(f"{waiting.label} is in check but it is not their move")


def _parse_clock(text: str, name: str, minimum: int) -> int:
    try:
        value = int(text)
    except ValueError:
        raise InvalidSetup(f"Invalid FEN {name}: {text!r}") from None
    if value < minimum:
        raise InvalidSetup(f"Invalid FEN {name}: {text!r}")
    return value


def position_from_fen(
    fen: str,
    en_passant_signature: EnPassantSignature = EnPassantSignature.WHEN_CAPTURABLE,
) -> Position:
    """Parse a FEN string into a :class:`Position`."""
    parts = fen.split()
    if not (4 <= len(parts) <= 6):
        raise InvalidSetup(f"Invalid FEN (need 4-6 fields): {fen!r}")

    placement, side_part, castling_part, ep_part = parts[:4]

    # 1. Piece placement
    ranks = placement.split("/")
    if len(ranks) != 8:
        raise InvalidSetup(f"Invalid FEN board (must contain 8 ranks): {fen!r}")
    board = Board()
    for rank_idx, rank_text in enumerate(ranks):
        rank = 7 - rank_idx
        file = 0
        for ch in rank_text:
            if ch.isdigit():
                step = int(ch)
                if not (1 <= step <= 8):
                    raise InvalidSetup(f"Invalid FEN digit {ch!r}: {fen!r}")
                file += step
            else:
                if file >= 8:
                    raise InvalidSetup(f"Invalid FEN rank width: {fen!r}")
                try:
                    board[make_square(file, rank)] = Piece.from_char(ch)
                except ValueError as exc:
                    raise InvalidSetup(str(exc)) from exc
                file += 1
            if file > 8:
                raise InvalidSetup(f"Invalid FEN rank width: {fen!r}")
        if file != 8:
            raise InvalidSetup(f"Invalid FEN rank width: {fen!r}")
    validate_kings(board)

    # 2. Side to move
    if side_part == "w":
        side = Color.WHITE
    elif side_part == "b":
        side = Color.BLACK
    else:
        raise InvalidSetup(f"Invalid FEN side-to-move field: {side_part!r}")

    # 3. Castling
    castling = CastlingRights.NONE
    if castling_part != "-":
        seen: set[str] = set()
        for ch in castling_part:
            right = _CASTLING_CHARS.get(ch)
            if right is None or ch in seen:
                raise InvalidSetup(f"Invalid FEN castling field: {castling_part!r}")
            seen.add(ch)
            castling |= right

    # 4. En passant
    ep: Square | None = None
    if ep_part != "-":
        try:
            ep = parse_square(ep_part)
        except ValueError as exc:
            raise InvalidSetup(str(exc)) from exc
        expected_ep_rank = 5 if side == Color.WHITE else 2
        if rank_of(ep) != expected_ep_rank:
            raise InvalidSetup(
                f"Invalid FEN en-passant square for side-to-move: {ep_part!r}"
            )

    # 5–6. Clocks (optional)
    halfmove = _parse_clock(parts[4], "halfmove clock", 0) if len(parts) > 4 else 0
    fullmove = _parse_clock(parts[5], "fullmove number", 1) if len(parts) > 5 else 1

    position = Position(board, side, castling, ep, halfmove, fullmove, en_passant_signature)
    validate_position(position)
    return position


def position_to_fen(pos: Position) -> str:
    """Serialise a :class:`Position` to FEN."""
    # 1. Board
    rows: list[str] = []
    for rank in range(7, -1, -1):
        empty = 0
        row = ""
        for file in range(8):
            piece = pos.board[make_square(file, rank)]
            if piece is None:
                empty += 1
            else:
                if empty:
                    row += str(empty)
                    empty = 0
                row += str(piece)
        if empty:
            row += str(empty)
        rows.append(row)
    board_str = "/".join(rows)

    # 2. Side
    side_str = "w" if pos.side_to_move == Color.WHITE else "b"

    # 3. Castling
    castling_str = "".join(ch for ch, right in _CASTLING_CHARS.items() if pos.castling & right)
    if not castling_str:
        castling_str = "-"

    # 4. En passant
    ep_str = square_name(pos.en_passant) if pos.en_passant is not None else "-"

    return f"{board_str} {side_str} {castling_str} {ep_str} {pos.halfmove_clock} {pos.fullmove_number}"
