"""Algebraic notation: parsing, resolution against legal moves, encoding."""

from __future__ import annotations

import re

from chessturn.core.enums import MoveFlag, PieceType
from chessturn.core.errors import AmbiguousNotation, IllegalMove, MalformedNotation
from chessturn.core.legality import legal_moves as generate_legal_moves
from chessturn.core.move import Move
from chessturn.core.move_generator import MoveGenerator
from chessturn.core.notation.models import ParsedTurn
from chessturn.core.piece import LETTER_PIECES, PIECE_LETTERS
from chessturn.core.position import Position
from chessturn.core.special_moves import PROMOTION_TYPES
from chessturn.core.types import (
    FILE_NAMES,
    RANK_NAMES,
    Square,
    file_char,
    file_of,
    parse_square,
    rank_char,
    rank_of,
    square_name,
)

_MOVE_RE = re.compile(
    r"^(?P<piece>[NBRQK])?"
    r"(?P<file>[a-h])?(?P<rank>[1-8])?"
    r"(?P<capture>x)?"
    r"(?P<dest>[a-h][1-8])"
    r"(?:=?(?P<promotion>[NBRQ]))?$"
)
_CASTLE_TOKENS: dict[str, MoveFlag] = {
    "O-O": MoveFlag.CASTLE_KINGSIDE,
    "0-0": MoveFlag.CASTLE_KINGSIDE,
    "O-O-O": MoveFlag.CASTLE_QUEENSIDE,
    "0-0-0": MoveFlag.CASTLE_QUEENSIDE,
}
_CASTLE_NOTATION: dict[MoveFlag, str] = {
    MoveFlag.CASTLE_KINGSIDE: "O-O",
    MoveFlag.CASTLE_QUEENSIDE: "O-O-O",
}
_ANNOTATION_CHARS = "+#!?"


# -- Parsing ------------------------------------------------------------


def parse_turn(text: str) -> ParsedTurn:
    """Tokenize algebraic *text* into a :class:`ParsedTurn`.

    Trailing check, mate and ``!``/``?`` annotations are accepted and ignored.
    """
    clean = text.strip().rstrip(_ANNOTATION_CHARS)
    if not clean:
        raise MalformedNotation(text, "empty move")

    castle = _CASTLE_TOKENS.get(clean)
    if castle is not None:
        return ParsedTurn(text=text, piece_type=PieceType.KING, castle=castle)

    match = _MOVE_RE.match(clean)
    if match is None:
        raise MalformedNotation(text)

    piece_letter = match.group("piece")
    piece_type = LETTER_PIECES[piece_letter] if piece_letter else PieceType.PAWN
    promotion_letter = match.group("promotion")
    promotion = LETTER_PIECES[promotion_letter] if promotion_letter else None
    if promotion is not None and piece_type != PieceType.PAWN:
        raise MalformedNotation(text, "only pawns promote")

    file_text = match.group("file")
    rank_text = match.group("rank")
    return ParsedTurn(
        text=text,
        piece_type=piece_type,
        to_sq=parse_square(match.group("dest")),
        from_file=FILE_NAMES.index(file_text) if file_text else None,
        from_rank=RANK_NAMES.index(rank_text) if rank_text else None,
        is_capture=match.group("capture") is not None,
        promotion=promotion,
    )


# -- Resolution ---------------------------------------------------------


def square_from_name(name: str) -> Square:
    """Parse *name* as a square, reporting bad input as malformed notation."""
    try:
        return parse_square(name.strip())
    except ValueError as exc:
        raise MalformedNotation(name, str(exc)) from exc


def _matches(parsed: ParsedTurn, move: Move) -> bool:
    if parsed.castle is not None:
        return move.flag == parsed.castle
    if move.is_castling:
        return False
    if move.piece.piece_type != parsed.piece_type or move.to_sq != parsed.to_sq:
        return False
    if parsed.from_file is not None and file_of(move.from_sq) != parsed.from_file:
        return False
    if parsed.from_rank is not None and rank_of(move.from_sq) != parsed.from_rank:
        return False
    return True


def _pick_promotion(
    candidates: list[Move], promotion: PieceType | None, default: PieceType
) -> list[Move]:
    """Narrow promotion variants to the requested (or default) piece."""
    if promotion is not None:
        return [m for m in candidates if m.promotion == promotion]
    if any(m.promotion is not None for m in candidates):
        return [m for m in candidates if m.promotion in (None, default)]
    return candidates


def _reaches_destination(parsed: ParsedTurn, legal: list[Move]) -> bool:
    """True when some legal move of the parsed piece kind lands on its square."""
    if parsed.castle is not None:
        return False
    return any(
        not m.is_castling
        and m.piece.piece_type == parsed.piece_type
        and m.to_sq == parsed.to_sq
        for m in legal
    )


def resolve_turn(
    text: str,
    legal: list[Move],
    default_promotion: PieceType = PieceType.QUEEN,
) -> Move:
    """Resolve algebraic *text* to the unique matching move in *legal*.

    Input naming a piece and destination that no legal move combines is an
    :class:`IllegalMove`. When such a move exists but the origin hint,
    capture marker or promotion suffix contradicts it, the notation itself
    is wrong and :class:`MalformedNotation` is raised.
    """
    parsed = parse_turn(text)
    candidates = [m for m in legal if _matches(parsed, m)]
    if not candidates:
        if _reaches_destination(parsed, legal):
            raise MalformedNotation(text, "origin does not match a legal move")
        raise IllegalMove(text)

    candidates = _pick_promotion(candidates, parsed.promotion, default_promotion)
    if not candidates:
        raise MalformedNotation(text, "promotion does not match")

    if parsed.castle is None:
        candidates = [m for m in candidates if m.is_capture == parsed.is_capture]
        if not candidates:
            reason = "not a capture" if parsed.is_capture else "capture marker missing"
            raise MalformedNotation(text, reason)

    if len(candidates) > 1:
        raise AmbiguousNotation(text, candidates)
    return candidates[0]


def resolve_squares(
    src: str,
    dst: str,
    legal: list[Move],
    promotion: PieceType | None = None,
    default_promotion: PieceType = PieceType.QUEEN,
) -> Move:
    """Resolve a layman source/destination pair to a move in *legal*."""
    text = f"{src}{dst}"
    from_sq = square_from_name(src)
    to_sq = square_from_name(dst)
    if promotion is not None and promotion not in PROMOTION_TYPES:
        raise MalformedNotation(text, f"invalid promotion piece {promotion!r}")

    candidates = [m for m in legal if m.from_sq == from_sq and m.to_sq == to_sq]
    if not candidates:
        raise IllegalMove(text)
    candidates = _pick_promotion(candidates, promotion, default_promotion)
    if not candidates:
        raise MalformedNotation(text, "promotion does not match")
    if len(candidates) > 1:
        raise AmbiguousNotation(text, candidates)
    return candidates[0]


# -- Encoding -----------------------------------------------------------


def _disambiguation(move: Move, legal: list[Move]) -> str:
    rivals = [
        m.from_sq
        for m in legal
        if m.to_sq == move.to_sq
        and m.from_sq != move.from_sq
        and m.piece == move.piece
    ]
    if not rivals:
        return ""
    if all(file_of(sq) != file_of(move.from_sq) for sq in rivals):
        return file_char(move.from_sq)
    if all(rank_of(sq) != rank_of(move.from_sq) for sq in rivals):
        return rank_char(move.from_sq)
    return square_name(move.from_sq)


def _check_suffix(position: Position, move: Move) -> str:
    scratch = position.copy(keep_history=False)
    scratch.apply(move)
    if not MoveGenerator(scratch).is_in_check(scratch.side_to_move):
        return ""
    return "#" if not generate_legal_moves(scratch) else "+"


def encode_move(position: Position, move: Move, legal: list[Move]) -> str:
    """Minimal algebraic notation for legal *move* played from *position*."""
    if move.is_castling:
        return _CASTLE_NOTATION[move.flag] + _check_suffix(position, move)

    parts: list[str] = []
    if move.piece.piece_type == PieceType.PAWN:
        if move.is_capture:
            parts.append(file_char(move.from_sq))
    else:
        parts.append(PIECE_LETTERS[move.piece.piece_type])
        parts.append(_disambiguation(move, legal))

    if move.is_capture:
        parts.append("x")
    parts.append(square_name(move.to_sq))
    if move.promotion is not None:
        parts.append("=" + PIECE_LETTERS[move.promotion])
    parts.append(_check_suffix(position, move))
    return "".join(parts)

