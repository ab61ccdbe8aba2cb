"""
Game session: owns the current level and applies the gameplay rules to it.

Renderers and input handlers read `session.level` and `session.player` and
call `move()` / `update()`; none of them touch the generator directly.
"""

import random
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import List, Optional, Tuple
import numpy as np
from pygame.math import Vector2

from lightweaver.config import get_logger, MAX_LIGHT_DURATION
from lightweaver.game.data.level.config import Difficulty, DifficultySettings, LevelConfig
from lightweaver.game.data.level.levelGen import GenerationResult, LevelGenerator
from lightweaver.game.data.level.placement import Collectible
from lightweaver.game.data.level.utils import Position, cell_center, is_open

PICKUP_RADIUS = 0.7  # cells


class GameState(Enum):
    MENU = 'menu'
    PLAYING = 'playing'
    WIN = 'win'
    LOSE = 'lose'


@dataclass(frozen=True, eq=False)
class LevelState:
    """Snapshot of a generated level. Only collectible flags change during play."""
    grid: np.ndarray
    exit: Position
    collectibles: Tuple[Collectible, ...]
    difficulty: Difficulty
    source: str

    @classmethod
    def from_result(cls, result: GenerationResult) -> 'LevelState':
        grid = result.grid.copy()
        grid.setflags(write=False)
        return cls(
            grid=grid,
            exit=result.exit,
            collectibles=tuple(replace(c) for c in result.collectibles),
            difficulty=result.difficulty,
            source=result.source,
        )

    @property
    def exit_center(self) -> Tuple[float, float]:
        return cell_center(self.exit)

    @property
    def total_collectibles(self) -> int:
        return len(self.collectibles)


@dataclass
class Player:
    position: Vector2 = field(default_factory=lambda: Vector2(1.5, 1.5))
    light: float = MAX_LIGHT_DURATION
    collected: int = 0


class GameSession:
    """
    One player's run of games.

    Usage:
        session = GameSession(Difficulty.MEDIUM, rng=random.Random(3))
        session.start_new_game()
        session.move(1, 0)
    """

    def __init__(self, difficulty: Difficulty = Difficulty.MEDIUM,
                 rng: Optional[random.Random] = None, config: LevelConfig = None):
        self.logger = get_logger(__name__)
        self.config = config or LevelConfig()
        self.generator = LevelGenerator(self.config, rng)
        self.difficulty = difficulty
        self.settings = DifficultySettings.for_difficulty(difficulty)
        self.state = GameState.MENU
        self.level: Optional[LevelState] = None
        self.player = Player()

    # -------------------------
    # Lifecycle
    # -------------------------
    def set_difficulty(self, difficulty: Difficulty):
        self.difficulty = difficulty
        self.settings = DifficultySettings.for_difficulty(difficulty)
        self.logger.info(f"Difficulty set to {difficulty.value}")

    def start_new_game(self, guarantee_path: bool = False) -> LevelState:
        result = self.generator.generate(self.difficulty, guarantee_path=guarantee_path)
        self.level = LevelState.from_result(result)
        self.player = Player(position=Vector2(cell_center(self.config.start)))
        self.state = GameState.PLAYING
        self.logger.info(
            f"New {self.difficulty.value} game: {self.level.total_collectibles} collectibles, "
            f"time limit {self.settings.time_limit}s"
        )
        return self.level

    def return_to_menu(self):
        self.state = GameState.MENU

    # -------------------------
    # Rules
    # -------------------------
    def is_valid_move(self, x: float, y: float) -> bool:
        """A position is valid when it is inside the grid and its cell is open."""
        if self.level is None or x < 0 or y < 0:
            return False
        return is_open(self.level.grid, int(x), int(y))

    def move(self, dx: int, dy: int) -> bool:
        """Step the player by (dx, dy) cells. Returns True when the move happened."""
        if self.state != GameState.PLAYING:
            return False

        target = self.player.position + Vector2(dx, dy)
        if not self.is_valid_move(target.x, target.y):
            return False

        self.player.position = target
        self._collect_nearby()
        self._check_win()
        return True

    def update(self, elapsed_seconds: float):
        """Apply one gameplay tick of light decay and check the lose condition."""
        if self.state != GameState.PLAYING:
            return

        self.player.light -= self.settings.light_decay
        if self.player.light <= 0 or elapsed_seconds >= self.settings.time_limit:
            self.state = GameState.LOSE
            self.logger.info(
                f"Game lost: light={self.player.light:.1f}, elapsed={elapsed_seconds:.0f}s"
            )

    def remaining_collectibles(self) -> List[Collectible]:
        if self.level is None:
            return []
        return [c for c in self.level.collectibles if c.active]

    def _collect_nearby(self):
        for collectible in self.remaining_collectibles():
            if self.player.position.distance_to(collectible.center) < PICKUP_RADIUS:
                collectible.active = False
                self.player.collected += 1
                self.player.light = min(MAX_LIGHT_DURATION, self.player.light + self.settings.energy_boost)
                self.logger.debug(f"Collected {collectible.cell} ({self.player.collected} total)")

    def _check_win(self):
        at_exit = self.player.position.distance_to(self.level.exit_center) < PICKUP_RADIUS
        if at_exit and self.player.collected == self.level.total_collectibles:
            self.state = GameState.WIN
            self.logger.info(f"Game won with {self.player.light:.1f} light remaining")
