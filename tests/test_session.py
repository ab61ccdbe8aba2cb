"""Tests for the game session rules."""

import random

import numpy as np
import pytest

from lightweaver.config import MAX_LIGHT_DURATION
from lightweaver.game.core.session import GameSession, GameState, LevelState
from lightweaver.game.data.level.config import Difficulty
from lightweaver.game.data.level.levelGen import GenerationResult
from lightweaver.game.data.level.placement import Collectible
from lightweaver.game.data.level.utils import BLOCKED


def make_session(exit_pos=(5, 1), collectible_cells=(), difficulty=Difficulty.MEDIUM, blocked=()):
    """Session playing a hand-built 8x8 level."""
    grid = np.zeros((8, 8), dtype=np.uint8)
    for x, y in blocked:
        grid[y, x] = BLOCKED
    result = GenerationResult(
        grid=grid,
        exit=exit_pos,
        collectibles=[Collectible.at_cell(cell) for cell in collectible_cells],
        success=True,
        difficulty=difficulty,
    )
    session = GameSession(difficulty, rng=random.Random(0))
    session.level = LevelState.from_result(result)
    session.state = GameState.PLAYING
    return session, result


def test_new_game_resets_player_and_level():
    session = GameSession(Difficulty.HARD, rng=random.Random(7))
    assert session.state == GameState.MENU

    level = session.start_new_game()

    assert session.state == GameState.PLAYING
    assert tuple(session.player.position) == (1.5, 1.5)
    assert session.player.light == MAX_LIGHT_DURATION
    assert session.player.collected == 0
    assert level.difficulty is Difficulty.HARD
    assert session.settings.time_limit == 30


def test_level_grid_is_read_only():
    session = GameSession(rng=random.Random(1))
    level = session.start_new_game()
    with pytest.raises(ValueError):
        level.grid[0, 0] = BLOCKED


def test_level_state_copies_collectibles():
    session, result = make_session(collectible_cells=[(2, 1)])
    session.move(1, 0)

    assert session.level.collectibles[0].active is False
    assert result.collectibles[0].active is True


def test_invalid_moves_rejected():
    session, _ = make_session(blocked=[(2, 1)])

    assert session.move(1, 0) is False  # into obstacle
    assert session.move(0, -1) is True
    assert session.move(0, -1) is False  # off the top edge
    assert tuple(session.player.position) == (1.5, 0.5)


def test_pickup_boosts_light_with_cap():
    session, _ = make_session(collectible_cells=[(2, 1), (3, 1)])
    session.player.light = 50

    session.move(1, 0)
    assert session.player.collected == 1
    assert session.player.light == pytest.approx(70)

    session.player.light = 95
    session.move(1, 0)
    assert session.player.collected == 2
    assert session.player.light == MAX_LIGHT_DURATION
    assert session.remaining_collectibles() == []


def test_win_requires_all_collectibles():
    session, _ = make_session(exit_pos=(3, 1), collectible_cells=[(1, 4)])

    session.move(1, 0)
    session.move(1, 0)
    assert session.state == GameState.PLAYING  # at exit, collectible missing

    for dx, dy in [(-1, 0), (-1, 0), (0, 1), (0, 1), (0, 1)]:
        session.move(dx, dy)
    assert session.player.collected == 1

    for dx, dy in [(0, -1), (0, -1), (0, -1), (1, 0), (1, 0)]:
        session.move(dx, dy)
    assert session.state == GameState.WIN
    assert session.move(0, 1) is False


def test_light_decay_and_time_limit():
    session, _ = make_session(difficulty=Difficulty.MEDIUM)
    session.update(elapsed_seconds=1)
    assert session.player.light == pytest.approx(MAX_LIGHT_DURATION - 0.5)
    assert session.state == GameState.PLAYING

    session.update(elapsed_seconds=45)
    assert session.state == GameState.LOSE


def test_light_exhaustion_loses():
    session, _ = make_session(difficulty=Difficulty.HARD)
    session.player.light = 0.5
    session.update(elapsed_seconds=0)
    assert session.state == GameState.LOSE


def test_difficulty_change_updates_settings():
    session = GameSession(Difficulty.EASY, rng=random.Random(2))
    assert session.settings.time_limit == 60
    session.set_difficulty(Difficulty.HARD)
    assert session.settings.time_limit == 30
    assert session.start_new_game().difficulty is Difficulty.HARD

    session.return_to_menu()
    assert session.state == GameState.MENU
    session.update(elapsed_seconds=999)
    assert session.state == GameState.MENU


def test_level_state_compares_by_identity():
    session, result = make_session(collectible_cells=[(2, 1)])
    level = session.level

    assert level == level
    assert level != LevelState.from_result(result)
    assert {level: 'current'}[level] == 'current'
