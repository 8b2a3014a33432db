"""Tests for Rules: checkmate, stalemate, draw detection."""

import pytest

from chessturn.core.config import RulesConfig
from chessturn.core.enums import Color, DrawReason, EnPassantSignature, GameStatus, PieceType
from chessturn.core.gamestate import Gamestate
from chessturn.core.notation import position_from_fen
from chessturn.core.rules import Rules

FOOLS_MATE = "rnb1kbnr/pppp1ppp/8/4p3/6Pq/5P2/PPPPP2P/RNBQKBNR w KQkq - 1 3"


class TestCheck:
    def test_starting_not_in_check(self) -> None:
        pos = position_from_fen(
            "rnbqkbnr/pppppppp/8/8/8/8/PPPPPPPP/RNBQKBNR w KQkq - 0 1"
        )
        assert not Rules.is_in_check(pos)
        assert Rules.evaluate(pos) == Gamestate.ongoing()

    def test_fools_mate_in_check(self) -> None:
        # After 1.f3 e5 2.g4 Qh4# white is in check
        assert Rules.is_in_check(position_from_fen(FOOLS_MATE))

    def test_check_status(self) -> None:
        pos = position_from_fen("4k3/8/8/8/8/8/8/r3K3 w - - 0 1")
        state = Rules.evaluate(pos)
        assert state.status == GameStatus.CHECK
        assert state.is_check
        assert not state.is_terminal


class TestCheckmate:
    def test_fools_mate(self) -> None:
        pos = position_from_fen(FOOLS_MATE)
        assert Rules.is_checkmate(pos)
        assert Rules.evaluate(pos) == Gamestate.checkmate(Color.BLACK)

    def test_back_rank_mate(self) -> None:
        # R on a8 checks black king d8; white king d6 covers all escapes
        pos = position_from_fen("R2k4/8/3K4/8/8/8/8/8 b - - 0 1")
        assert Rules.is_checkmate(pos)
        state = Rules.evaluate(pos)
        assert state.winner == Color.WHITE
        assert state.is_check
        assert state.is_terminal

    def test_not_checkmate_when_can_escape(self) -> None:
        pos = position_from_fen("4k3/8/8/8/8/8/8/r3K3 w - - 0 1")
        assert not Rules.is_checkmate(pos)

    def test_checkmate_beats_fifty_move_rule(self) -> None:
        pos = position_from_fen("R2k4/8/3K4/8/8/8/8/8 b - - 120 90")
        assert Rules.evaluate(pos).status == GameStatus.CHECKMATE


class TestStalemate:
    def test_king_trapped(self) -> None:
        # Black king on h8, white K on f6, white Q on g6
        pos = position_from_fen("7k/8/5KQ1/8/8/8/8/8 b - - 0 1")
        assert Rules.is_stalemate(pos)
        state = Rules.evaluate(pos)
        assert state == Gamestate.stalemate()
        assert state.winner is None
        assert state.draw_reason is None
        assert state.is_terminal

    def test_not_stalemate_when_has_moves(self) -> None:
        pos = position_from_fen("7k/8/5K2/8/8/8/8/8 b - - 0 1")
        assert not Rules.is_stalemate(pos)

    def test_stalemate_beats_insufficient_material(self) -> None:
        # Lone bishop, black king boxed in the corner.
        pos = position_from_fen("k7/8/1K6/4B3/8/8/8/8 b - - 0 1")
        assert Rules.evaluate(pos).status == GameStatus.STALEMATE


class TestInsufficientMaterial:
    def test_k_vs_k(self) -> None:
        pos = position_from_fen("8/8/4k3/8/8/4K3/8/8 w - - 0 1")
        assert Rules.is_insufficient_material(pos)
        assert Rules.evaluate(pos) == Gamestate.draw(DrawReason.INSUFFICIENT_MATERIAL)

    @pytest.mark.parametrize(
        "fen",
        [
            "8/8/4k3/8/8/4KB2/8/8 w - - 0 1",
            "8/8/4k3/8/8/4KN2/8/8 w - - 0 1",
            "8/8/4kn2/8/8/4K3/8/8 w - - 0 1",
            "8/8/4kb2/8/8/4K3/8/8 w - - 0 1",
        ],
    )
    def test_k_minor_vs_k(self, fen: str) -> None:
        assert Rules.is_insufficient_material(position_from_fen(fen))

    @pytest.mark.parametrize(
        "fen",
        [
            "8/8/4k3/8/8/4KR2/8/8 w - - 0 1",
            "8/8/4k3/8/8/4KQ2/8/8 w - - 0 1",
            "8/8/4k3/8/8/4KP2/8/8 w - - 0 1",
            "8/8/4kb2/8/8/4KB2/8/8 w - - 0 1",
            "8/8/4k3/8/8/3NKN2/8/8 w - - 0 1",
        ],
    )
    def test_sufficient_material(self, fen: str) -> None:
        assert not Rules.is_insufficient_material(position_from_fen(fen))


class TestFiftyMoveRule:
    def test_at_limit(self) -> None:
        pos = position_from_fen("4k3/8/8/8/8/8/8/R3K3 w - - 100 80")
        assert Rules.is_fifty_move_rule(pos)
        assert Rules.evaluate(pos) == Gamestate.draw(DrawReason.FIFTY_MOVE)

    def test_below_limit(self) -> None:
        pos = position_from_fen("4k3/8/8/8/8/8/8/R3K3 w - - 99 80")
        assert Rules.evaluate(pos).status == GameStatus.ONGOING

    def test_configured_limit(self) -> None:
        pos = position_from_fen("4k3/8/8/8/8/8/8/R3K3 w - - 20 80")
        config = RulesConfig(fifty_move_limit=20)
        assert Rules.evaluate(pos, config=config).draw_reason == DrawReason.FIFTY_MOVE


class TestGamestate:
    def test_winner_only_for_checkmate(self) -> None:
        with pytest.raises(ValueError):
            Gamestate(GameStatus.ONGOING, winner=Color.WHITE)

    def test_draw_needs_reason(self) -> None:
        with pytest.raises(ValueError):
            Gamestate(GameStatus.DRAW)

    def test_str(self) -> None:
        assert str(Gamestate.checkmate(Color.BLACK)) == "checkmate, black wins"
        assert str(Gamestate.draw(DrawReason.REPETITION)) == "draw by threefold repetition"
        assert str(Gamestate.ongoing()) == "ongoing"


class TestRulesConfig:
    def test_defaults(self) -> None:
        config = RulesConfig()
        assert config.fifty_move_limit == 100
        assert config.repetition_limit == 3
        assert config.en_passant_signature == EnPassantSignature.WHEN_CAPTURABLE
        assert config.default_promotion == PieceType.QUEEN

    @pytest.mark.parametrize(
        "kwargs",
        [
            {"fifty_move_limit": 0},
            {"repetition_limit": 1},
            {"default_promotion": PieceType.KING},
            {"default_promotion": PieceType.PAWN},
        ],
    )
    def test_invalid(self, kwargs: dict[str, object]) -> None:
        with pytest.raises(ValueError):
            RulesConfig(**kwargs)  # type: ignore[arg-type]
