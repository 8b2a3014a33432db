"""Move history with pre-move snapshots for exact undo."""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass

from chessturn.core.errors import NoHistory
from chessturn.core.move import Move
from chessturn.core.piece import Piece
from chessturn.core.position import PositionSnapshot


@dataclass(frozen=True, slots=True)
class HistoryEntry:
    """A single entry in the move history."""

    move: Move
    snapshot: PositionSnapshot
    notation: str


class HistoryLog:
    """Stack of played turns; the last entry is the most recent ply."""

    __slots__ = ("_entries",)

    def __init__(self) -> None:
        self._entries: list[HistoryEntry] = []

    def push(self, entry: HistoryEntry) -> None:
        self._entries.append(entry)

    def pop(self) -> HistoryEntry:
        """Remove and return the most recent entry."""
        if not self._entries:
            raise NoHistory()
        return self._entries.pop()

    def peek(self) -> HistoryEntry | None:
        return self._entries[-1] if self._entries else None

    def notations(self) -> list[str]:
        """Played notations, oldest first."""
        return [entry.notation for entry in self._entries]

    def captured_pieces(self) -> list[Piece]:
        """Pieces taken so far, in capture order."""
        return [entry.move.captured for entry in self._entries if entry.move.captured is not None]

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[HistoryEntry]:
        return iter(self._entries)
