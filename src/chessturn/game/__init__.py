"""Game layer — turn engine, setups and move history.

Quick start::

    from chessturn.game import TurnEngine

    engine = TurnEngine()
    for notation in ("f3", "e5", "g4", "Qh4#"):
        state = engine.play_turn(notation)
    print(state)  # checkmate, black wins
"""

from chessturn.game.engine import TurnEngine
from chessturn.game.history import HistoryEntry, HistoryLog
from chessturn.game.setup import Setup, parse_custom_setup
from chessturn.game.turns import AvailableTurn, available_turns

__all__ = [
    "AvailableTurn",
    "HistoryEntry",
    "HistoryLog",
    "Setup",
    "TurnEngine",
    "available_turns",
    "parse_custom_setup",
]
