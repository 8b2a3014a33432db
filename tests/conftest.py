"""Shared pytest fixtures used across the test suite."""

from __future__ import annotations

import pytest

from chessturn.core.notation import STARTING_FEN, position_from_fen
from chessturn.core.position import Position
from chessturn.game.engine import TurnEngine


@pytest.fixture
def engine() -> TurnEngine:
    """Fresh engine at the standard starting position."""
    return TurnEngine()


@pytest.fixture
def start_position() -> Position:
    return position_from_fen(STARTING_FEN)
