"""Caller-facing error kinds.

Every error here is recoverable: the engine leaves its state untouched when
one is raised.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from chessturn.core.gamestate import Gamestate
    from chessturn.core.move import Move


class ChessTurnError(ValueError):
    """Base class for all rule-engine errors."""


class MalformedNotation(ChessTurnError):
    """Input could not be tokenized, or its hints contradict the move it names."""

    def __init__(self, text: str, reason: str = "unparsable move") -> None:
        super().__init__(f"Malformed notation {text!r}: {reason}")
        self.text = text


class IllegalMove(ChessTurnError):
    """Input parsed but no legal move of that piece reaches the destination."""

    def __init__(self, text: str, reason: str = "no legal move matches") -> None:
        super().__init__(f"Illegal move {text!r}: {reason}")
        self.text = text


class AmbiguousNotation(ChessTurnError):
    """Input matches several legal moves; more origin information is needed."""

    def __init__(self, text: str, candidates: list[Move]) -> None:
        options = ", ".join(str(m) for m in candidates)
        super().__init__(f"Ambiguous move {text!r}: matches {options}")
        self.text = text
        self.candidates = candidates


class NoHistory(ChessTurnError):
    """Undo requested with an empty history log."""

    def __init__(self) -> None:
        super().__init__("Undo not available: no turns have been played")


class GameOver(ChessTurnError):
    """A move was submitted after the game reached a terminal state."""

    def __init__(self, gamestate: Gamestate) -> None:
        super().__init__(f"Game over: {gamestate}")
        self.gamestate = gamestate


class InvalidSetup(ChessTurnError):
    """Starting position description is malformed or not a playable board."""
