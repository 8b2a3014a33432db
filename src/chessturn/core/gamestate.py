"""Gamestate value object."""

from __future__ import annotations

from dataclasses import dataclass

from chessturn.core.enums import Color, DrawReason, GameStatus

_TERMINAL = frozenset({GameStatus.CHECKMATE, GameStatus.STALEMATE, GameStatus.DRAW})


@dataclass(frozen=True, slots=True)
class Gamestate:
    """Classification of the current position.

    ``winner`` is set only for checkmate, ``draw_reason`` only for a draw.
    """

    status: GameStatus
    winner: Color | None = None
    draw_reason: DrawReason | None = None

    def __post_init__(self) -> None:
        if (self.winner is not None) != (self.status == GameStatus.CHECKMATE):
            raise ValueError(f"winner must be set exactly for checkmate: {self!r}")
        if (self.draw_reason is not None) != (self.status == GameStatus.DRAW):
            raise ValueError(f"draw_reason must be set exactly for a draw: {self!r}")

    # ── Factories ────────────────────────────────────────────────────────

    @classmethod
    def ongoing(cls) -> Gamestate:
        return cls(GameStatus.ONGOING)

    @classmethod
    def check(cls) -> Gamestate:
        return cls(GameStatus.CHECK)

    @classmethod
    def checkmate(cls, winner: Color) -> Gamestate:
        return cls(GameStatus.CHECKMATE, winner=winner)

    @classmethod
    def stalemate(cls) -> Gamestate:
        return cls(GameStatus.STALEMATE)

    @classmethod
    def draw(cls, reason: DrawReason) -> Gamestate:
        return cls(GameStatus.DRAW, draw_reason=reason)

    # ── Queries ──────────────────────────────────────────────────────────

    @property
    def is_terminal(self) -> bool:
        return self.status in _TERMINAL

    @property
    def is_check(self) -> bool:
        """Side to move is in check (includes checkmate)."""
        return self.status in (GameStatus.CHECK, GameStatus.CHECKMATE)

    def __str__(self) -> str:
        if self.status == GameStatus.CHECKMATE:
            assert self.winner is not None
            return f"checkmate, {self.winner} wins"
        if self.status == GameStatus.DRAW:
            return f"draw by {self.draw_reason}"
        return self.status.name.lower()
