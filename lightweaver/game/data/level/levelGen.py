"""
Level generator with retry-until-valid orchestration and a guaranteed
fallback.

This module implements LevelGenerator which exposes:
    config = LevelConfig(...)
    generator = LevelGenerator(config)
    result = generator.generate(Difficulty.HARD)
    stats = generator.get_statistics()

and the one-call entry point generate_environment(difficulty, guarantee_path).
"""
import random
from dataclasses import dataclass, field
from typing import List, Dict, Optional, Tuple
import numpy as np

from lightweaver.config import get_logger, get_level_logger, PerformanceTimer
from lightweaver.game.data.level.config import Difficulty, LevelConfig
from lightweaver.game.data.level.obstacles import generate_grid
from lightweaver.game.data.level.placement import Collectible, place_exit, place_collectibles
from lightweaver.game.data.level.verifier import verify
from lightweaver.game.data.level.guaranteedPath import create_guaranteed_path
from lightweaver.game.data.level.utils import Position, cell_center, count_blocked, grid_to_ascii

SOURCE_RANDOMIZED = 'randomized'
SOURCE_GUARANTEED = 'guaranteed'


@dataclass(eq=False)
class GenerationResult:
    """Everything a finished generation call hands to gameplay."""
    grid: np.ndarray
    exit: Position
    collectibles: List[Collectible]
    success: bool
    difficulty: Difficulty
    source: str = SOURCE_RANDOMIZED
    attempts: int = 0
    waypoints: List[Position] = field(default_factory=list)

    @property
    def exit_center(self) -> Tuple[float, float]:
        return cell_center(self.exit)

    @property
    def active_collectibles(self) -> List[Collectible]:
        return [c for c in self.collectibles if c.active]

    def to_ascii(self, start: Position = (1, 1)) -> str:
        """Text dump: S start, E exit, * collectible, # blocked."""
        markers = {c.cell: '*' for c in self.active_collectibles}
        markers[start] = 'S'
        markers[self.exit] = 'E'
        return grid_to_ascii(self.grid, markers)


class LevelGenerator:
    """
    Level generator class.

    - Uses LevelConfig for all configurable parameters.
    - Uses a deterministic RNG (explicit rng, else config.seed) for reproducibility.
    - Public method `generate()` always returns a usable level.
    """
    def __init__(self, config: LevelConfig = None, rng: Optional[random.Random] = None):
        self.config = config or LevelConfig()
        self.logger = get_logger(__name__)
        self.level_logger = get_level_logger()

        if rng is not None:
            self.rng = rng
            self.logger.debug("Generator initialized with caller-provided RNG")
        elif self.config.seed is not None:
            self.rng = random.Random(self.config.seed)
            self.logger.info(f"Generator initialized with seed: {self.config.seed}")
        else:
            self.rng = random.Random()
            self.logger.info("Generator initialized with random seed")

        self.last_result: Optional[GenerationResult] = None

    # -------------------------
    # Entry point
    # -------------------------
    def generate(self, difficulty: Difficulty, guarantee_path: bool = False) -> GenerationResult:
        """
        Produce a verified level, or a constructed one if verification keeps failing.

        Pipeline per attempt:
          - obstacle grid
          - exit placement
          - collectible placement
          - connectivity verification
        """
        with PerformanceTimer(self.level_logger, f"{difficulty.value} level generation"):
            if guarantee_path:
                result = self._construct_guaranteed(difficulty, attempts=0)
            else:
                result = self._generate_randomized(difficulty)

        self.last_result = result
        self.logger.info(
            f"Level ready ({result.source}): exit={result.exit}, "
            f"collectibles={len(result.collectibles)}, attempts={result.attempts}"
        )
        return result

    def _generate_randomized(self, difficulty: Difficulty) -> GenerationResult:
        start = self.config.start
        max_attempts = self.config.generation_attempts

        for attempt in range(1, max_attempts + 1):
            grid = generate_grid(difficulty, self.rng, self.config)
            exit_pos = place_exit(grid, difficulty, self.rng, self.config)
            collectibles = place_collectibles(grid, start, exit_pos, difficulty, self.rng, self.config)

            if verify(grid, start, exit_pos, collectibles):
                self.level_logger.debug(f"Attempt {attempt}/{max_attempts} verified")
                return GenerationResult(
                    grid=grid, exit=exit_pos, collectibles=collectibles, success=True,
                    difficulty=difficulty, source=SOURCE_RANDOMIZED, attempts=attempt
                )
            self.level_logger.debug(f"Attempt {attempt}/{max_attempts} failed verification")

        self.logger.warning(
            f"Randomized generation failed {max_attempts} times; building guaranteed path"
        )
        return self._construct_guaranteed(difficulty, attempts=max_attempts)

    def _construct_guaranteed(self, difficulty: Difficulty, attempts: int) -> GenerationResult:
        grid, exit_pos, collectibles, waypoints = create_guaranteed_path(self.rng, self.config)
        return GenerationResult(
            grid=grid, exit=exit_pos, collectibles=collectibles, success=True,
            difficulty=difficulty, source=SOURCE_GUARANTEED, attempts=attempts,
            waypoints=waypoints
        )

    # -------------------------
    # Statistics helpers
    # -------------------------
    def get_statistics(self) -> Dict:
        """Return a dictionary of summary statistics about the last generated level."""
        stats = {
            'width': self.config.width,
            'height': self.config.height,
            'area': self.config.area,
            'seed': self.config.seed,
        }
        result = self.last_result
        if result is None:
            return stats

        obstacles = count_blocked(result.grid)
        stats.update({
            'difficulty': result.difficulty.value,
            'obstacles': obstacles,
            'open_ratio': 1.0 - obstacles / self.config.area,
            'collectibles': len(result.active_collectibles),
            'collectible_target': self.config.collectible_target(result.difficulty),
            'exit': result.exit,
            'attempts': result.attempts,
            'source': result.source,
        })
        return stats


def generate_environment(difficulty: Difficulty, guarantee_path: bool = False,
                         rng: Optional[random.Random] = None,
                         config: LevelConfig = None) -> GenerationResult:
    """
    Generate a level: start, exit and collectibles all mutually reachable.

    Never raises for generation failures; falls back to a constructed level.
    """
    return LevelGenerator(config, rng).generate(difficulty, guarantee_path=guarantee_path)
