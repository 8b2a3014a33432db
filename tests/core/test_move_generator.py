"""Perft tests — the gold standard for move-generator correctness.

Reference values: https://www.chessprogramming.org/Perft_Results
"""

import pytest

from chessturn.core.enums import Color, MoveFlag, PieceType
from chessturn.core.legality import LegalityFilter, legal_moves
from chessturn.core.move_generator import MoveGenerator
from chessturn.core.notation import STARTING_FEN, position_from_fen
from chessturn.core.position import Position
from chessturn.core.types import parse_square


def perft(position: Position, depth: int) -> int:
    """Count leaf nodes at *depth* using apply/restore."""
    moves = legal_moves(position)
    if depth == 1:
        return len(moves)
    nodes = 0
    for move in moves:
        snapshot = position.snapshot()
        position.apply(move)
        nodes += perft(position, depth - 1)
        position.restore(snapshot)
    return nodes


def _ucis(position: Position) -> list[str]:
    return [m.uci for m in MoveGenerator(position).generate_pseudo_legal_moves()]


# ── Starting position ────────────────────────────────────────────────────────


class TestPerftStarting:
    def test_depth_1(self) -> None:
        pos = position_from_fen(STARTING_FEN)
        assert perft(pos, 1) == 20

    def test_depth_2(self) -> None:
        pos = position_from_fen(STARTING_FEN)
        assert perft(pos, 2) == 400

    def test_depth_3(self) -> None:
        pos = position_from_fen(STARTING_FEN)
        assert perft(pos, 3) == 8_902

    @pytest.mark.slow
    def test_depth_4(self) -> None:
        pos = position_from_fen(STARTING_FEN)
        assert perft(pos, 4) == 197_281


# ── Kiwipete (rich in tactics: castling, ep, promotions) ─────────────────────

KIWIPETE = "r3k2r/p1ppqpb1/bn2pnp1/3PN3/1p2P3/2N2Q1p/PPPBBPPP/R3K2R w KQkq - 0 1"


class TestPerftKiwipete:
    def test_depth_1(self) -> None:
        pos = position_from_fen(KIWIPETE)
        assert perft(pos, 1) == 48

    def test_depth_2(self) -> None:
        pos = position_from_fen(KIWIPETE)
        assert perft(pos, 2) == 2_039

    @pytest.mark.slow
    def test_depth_3(self) -> None:
        pos = position_from_fen(KIWIPETE)
        assert perft(pos, 3) == 97_862


# ── Position 3: en-passant + promotion edge cases ───────────────────────────

POS3 = "8/2p5/3p4/KP5r/1R3p1k/8/4P1P1/8 w - - 0 1"


class TestPerftPos3:
    def test_depth_1(self) -> None:
        pos = position_from_fen(POS3)
        assert perft(pos, 1) == 14

    def test_depth_2(self) -> None:
        pos = position_from_fen(POS3)
        assert perft(pos, 2) == 191

    def test_depth_3(self) -> None:
        pos = position_from_fen(POS3)
        assert perft(pos, 3) == 2_812


# ── Position 4: mirrored, many promotions ────────────────────────────────────

POS4 = "r3k2r/Pppp1ppp/1b3nbN/nP6/BBP1P3/q4N2/Pp1P2PP/R2Q1RK1 w kq - 0 1"


class TestPerftPos4:
    def test_depth_1(self) -> None:
        pos = position_from_fen(POS4)
        assert perft(pos, 1) == 6

    def test_depth_2(self) -> None:
        pos = position_from_fen(POS4)
        assert perft(pos, 2) == 264

    def test_depth_3(self) -> None:
        pos = position_from_fen(POS4)
        assert perft(pos, 3) == 9_467


# ── Position 5 ───────────────────────────────────────────────────────────────

POS5 = "rnbq1k1r/pp1Pbppp/2p5/8/2B5/8/PPP1NnPP/RNBQK2R w KQ - 1 8"


class TestPerftPos5:
    def test_depth_1(self) -> None:
        pos = position_from_fen(POS5)
        assert perft(pos, 1) == 44

    def test_depth_2(self) -> None:
        pos = position_from_fen(POS5)
        assert perft(pos, 2) == 1_486

    @pytest.mark.slow
    def test_depth_3(self) -> None:
        pos = position_from_fen(POS5)
        assert perft(pos, 3) == 62_379


# ── Generation order ─────────────────────────────────────────────────────────


class TestGenerationOrder:
    def test_starting_order(self) -> None:
        pos = position_from_fen(STARTING_FEN)
        pawn_moves = [f"{f}2{f}{r}" for f in "abcdefgh" for r in "34"]
        assert _ucis(pos) == ["b1c3", "b1a3", "g1h3", "g1f3", *pawn_moves]

    def test_knight_offsets(self) -> None:
        pos = position_from_fen("4k3/8/8/8/3N4/8/8/4K3 w - - 0 1")
        knight = [u for u in _ucis(pos) if u.startswith("d4")]
        assert knight == ["d4e6", "d4e2", "d4c6", "d4c2", "d4f5", "d4f3", "d4b5", "d4b3"]

    def test_rook_rays_north_east_south_west(self) -> None:
        pos = position_from_fen("4k3/8/3p4/8/1P1R2p1/8/8/4K3 w - - 0 1")
        rook = [u for u in _ucis(pos) if u.startswith("d4")]
        assert rook == [
            "d4d5", "d4d6",
            "d4e4", "d4f4", "d4g4",
            "d4d3", "d4d2", "d4d1",
            "d4c4",
        ]  # fmt: skip

    def test_bishop_rays_stop_at_blockers(self) -> None:
        pos = position_from_fen("4k3/8/8/8/4p3/8/P7/1B2K3 w - - 0 1")
        bishop = [u for u in _ucis(pos) if u.startswith("b1")]
        # NE ray ends on the enemy pawn; NW ray blocked by the own pawn.
        assert bishop == ["b1c2", "b1d3", "b1e4"]

    def test_queen_direction_order(self) -> None:
        pos = position_from_fen("8/8/8/7k/3Q4/8/7K/8 w - - 0 1")
        queen = [u for u in _ucis(pos) if u.startswith("d4")]
        assert queen == [
            "d4d5", "d4d6", "d4d7", "d4d8",
            "d4e5", "d4f6", "d4g7", "d4h8",
            "d4e4", "d4f4", "d4g4", "d4h4",
            "d4e3", "d4f2", "d4g1",
            "d4d3", "d4d2", "d4d1",
            "d4c3", "d4b2", "d4a1",
            "d4c4", "d4b4", "d4a4",
            "d4c5", "d4b6", "d4a7",
        ]  # fmt: skip

    def test_pawn_captures_higher_file_first(self) -> None:
        pos = position_from_fen("4k3/8/8/2p1p3/3P4/8/8/4K3 w - - 0 1")
        pawn = [u for u in _ucis(pos) if u.startswith("d4")]
        assert pawn == ["d4d5", "d4e5", "d4c5"]

    def test_black_pawn_captures_higher_file_first(self) -> None:
        pos = position_from_fen("4k3/8/8/3p4/2P1P3/8/8/4K3 b - - 0 1")
        pawn = [u for u in _ucis(pos) if u.startswith("d5")]
        assert pawn == ["d5d4", "d5e4", "d5c4"]

    def test_promotion_order(self) -> None:
        pos = position_from_fen("1n2k3/P7/8/8/8/8/8/4K3 w - - 0 1")
        pawn = [u for u in _ucis(pos) if u.startswith("a7")]
        assert pawn == ["a7a8q", "a7a8r", "a7a8b", "a7a8n", "a7b8q", "a7b8r", "a7b8b", "a7b8n"]

    def test_king_steps_then_castling(self) -> None:
        pos = position_from_fen("4k3/8/8/8/8/8/8/R3K2R w KQ - 0 1")
        king = [u for u in _ucis(pos) if u.startswith("e1")]
        assert king == ["e1e2", "e1f2", "e1f1", "e1d1", "e1d2", "e1g1", "e1c1"]

    def test_regeneration_is_identical(self) -> None:
        pos = position_from_fen(KIWIPETE)
        gen = MoveGenerator(pos)
        first = gen.generate_pseudo_legal_moves()
        assert gen.generate_pseudo_legal_moves() == first
        assert gen.generate_pseudo_legal_moves() is not first


# ── Attack detection ─────────────────────────────────────────────────────────


class TestAttacks:
    def test_pawn_attacks_diagonally_only(self) -> None:
        pos = position_from_fen("4k3/8/8/8/4P3/8/8/4K3 w - - 0 1")
        gen = MoveGenerator(pos)
        assert gen.is_square_attacked(parse_square("d5"), Color.WHITE)
        assert gen.is_square_attacked(parse_square("f5"), Color.WHITE)
        assert not gen.is_square_attacked(parse_square("e5"), Color.WHITE)

    def test_slider_blocked(self) -> None:
        pos = position_from_fen("4k3/8/8/8/8/8/4P3/4R1K1 w - - 0 1")
        gen = MoveGenerator(pos)
        assert gen.is_square_attacked(parse_square("e2"), Color.WHITE)
        assert not gen.is_square_attacked(parse_square("e3"), Color.WHITE)

    def test_is_in_check(self) -> None:
        pos = position_from_fen("4k3/8/8/8/8/8/8/4RK2 b - - 0 1")
        assert MoveGenerator(pos).is_in_check(Color.BLACK)
        assert not MoveGenerator(pos).is_in_check(Color.WHITE)


# ── Legality filter ──────────────────────────────────────────────────────────


class TestLegality:
    def test_pinned_piece_cannot_move(self) -> None:
        pos = position_from_fen("4r1k1/8/8/8/8/8/4N3/4K3 w - - 0 1")
        assert not any(m.piece.piece_type == PieceType.KNIGHT for m in legal_moves(pos))

    def test_filter_preserves_order(self) -> None:
        pos = position_from_fen(KIWIPETE)
        pseudo = MoveGenerator(pos).generate_pseudo_legal_moves()
        legal = LegalityFilter(pos).filter(pseudo)
        positions = [pseudo.index(m) for m in legal]
        assert positions == sorted(positions)

    def test_filter_leaves_position_untouched(self) -> None:
        pos = position_from_fen(KIWIPETE)
        reference = pos.copy()
        legal_moves(pos)
        assert pos == reference

    def test_no_castling_out_of_check(self) -> None:
        pos = position_from_fen("4r1k1/8/8/8/8/8/8/R3K2R w KQ - 0 1")
        assert not any(m.is_castling for m in legal_moves(pos))

    def test_no_castling_through_attacked_square(self) -> None:
        pos = position_from_fen("5rk1/8/8/8/8/8/8/R3K2R w KQ - 0 1")
        flags = {m.flag for m in legal_moves(pos) if m.is_castling}
        assert flags == {MoveFlag.CASTLE_QUEENSIDE}

    def test_queenside_allows_attacked_b_file(self) -> None:
        pos = position_from_fen("1r4k1/8/8/8/8/8/8/R3K3 w Q - 0 1")
        assert any(m.flag == MoveFlag.CASTLE_QUEENSIDE for m in legal_moves(pos))

    def test_queenside_needs_empty_b_file(self) -> None:
        pos = position_from_fen("6k1/8/8/8/8/8/8/RN2K3 w Q - 0 1")
        assert not any(m.is_castling for m in legal_moves(pos))

    def test_en_passant_exposing_king_is_illegal(self) -> None:
        # Capturing en passant would open the fifth rank to the rook.
        pos = position_from_fen("8/8/8/K2pP2r/8/8/8/7k w - d6 0 1")
        assert not any(m.flag == MoveFlag.EN_PASSANT for m in legal_moves(pos))
