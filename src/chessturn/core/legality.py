"""Legality filtering: drop candidates that leave the mover's king attacked."""

from __future__ import annotations

from typing import TYPE_CHECKING

from chessturn.core.move_generator import MoveGenerator

if TYPE_CHECKING:
    from chessturn.core.move import Move
    from chessturn.core.position import Position


class LegalityFilter:
    """Checks candidates on a private scratch copy of *position*.

    The caller's position is never touched. Each candidate is applied to the
    scratch copy, the mover's king is tested for attack, and the copy is
    restored from a snapshot before the next candidate.
    """

    __slots__ = ("_scratch", "_gen")

    def __init__(self, position: Position) -> None:
        self._scratch = position.copy(keep_history=False)
        self._gen = MoveGenerator(self._scratch)

    def is_legal(self, move: Move) -> bool:
        scratch = self._scratch
        mover = scratch.side_to_move
        snapshot = scratch.snapshot()
        scratch.apply(move)
        try:
            return not self._gen.is_in_check(mover)
        finally:
            scratch.restore(snapshot)

    def filter(self, candidates: list[Move]) -> list[Move]:
        """Legal subset of *candidates*, generation order preserved."""
        return [move for move in candidates if self.is_legal(move)]


def legal_moves(position: Position) -> list[Move]:
    """All strictly legal moves for the side to move."""
    candidates = MoveGenerator(position).generate_pseudo_legal_moves()
    return LegalityFilter(position).filter(candidates)
