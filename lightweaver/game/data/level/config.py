"""
Level generation configuration.

Difficulty tiers and the tunable parameters of the generation pipeline live
here. LevelConfig validates its own invariants on construction, so a bad
configuration fails before any grid is built.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional, Tuple

from lightweaver.config import (
    GRID_WIDTH, GRID_HEIGHT, MAX_COLLECTIBLES, MAX_PATH_LENGTH,
    MAX_LIGHT_DURATION, LIGHT_DECAY_RATE
)


class Difficulty(Enum):
    EASY = 'easy'
    MEDIUM = 'medium'
    HARD = 'hard'

    @classmethod
    def from_name(cls, name: str) -> 'Difficulty':
        """Parse a difficulty from its (case-insensitive) name."""
        try:
            return cls(name.strip().lower())
        except ValueError:
            valid = ', '.join(d.value for d in cls)
            raise ValueError(f"Unknown difficulty '{name}' (expected one of: {valid})") from None


class LevelConfigError(ValueError):
    """Raised when a LevelConfig violates a structural invariant."""


# ============================================================================
# DIFFICULTY TABLES
# ============================================================================

# Obstacle budget = cell count // divisor
OBSTACLE_DIVISOR = {
    Difficulty.EASY: 8,
    Difficulty.MEDIUM: 6,
    Difficulty.HARD: 4,
}

# Collectible target = capacity - reduction
COLLECTIBLE_REDUCTION = {
    Difficulty.EASY: 3,
    Difficulty.MEDIUM: 1,
    Difficulty.HARD: 0,
}

# Minimum exit distance from start = grid width / divisor
EXIT_DISTANCE_DIVISOR = {
    Difficulty.EASY: 3.0,
    Difficulty.MEDIUM: 2.5,
    Difficulty.HARD: 2.0,
}


@dataclass(frozen=True)
class DifficultySettings:
    """Gameplay rules that scale with difficulty."""
    time_limit: int  # seconds
    light_decay: float  # light lost per update tick
    energy_boost: float  # light gained per collectible

    @classmethod
    def for_difficulty(cls, difficulty: Difficulty) -> 'DifficultySettings':
        return DIFFICULTY_SETTINGS[difficulty]


DIFFICULTY_SETTINGS = {
    Difficulty.EASY: DifficultySettings(60, LIGHT_DECAY_RATE * 0.6, MAX_LIGHT_DURATION * 0.25),
    Difficulty.MEDIUM: DifficultySettings(45, LIGHT_DECAY_RATE * 1.0, MAX_LIGHT_DURATION * 0.20),
    Difficulty.HARD: DifficultySettings(30, LIGHT_DECAY_RATE * 1.5, MAX_LIGHT_DURATION * 0.15),
}


# ============================================================================
# LEVEL CONFIG
# ============================================================================

@dataclass
class LevelConfig:
    """
    Complete level generation configuration.

    Defaults reproduce the stock 15x15 level. Every field can be overridden,
    e.g. LevelConfig(width=21, height=21, seed=7).
    """
    width: int = GRID_WIDTH
    height: int = GRID_HEIGHT
    seed: Optional[int] = None
    start: Tuple[int, int] = (1, 1)

    # Capacities
    max_collectibles: int = MAX_COLLECTIBLES
    max_path_length: int = MAX_PATH_LENGTH

    # Protected corners (start zone top-left, exit zone bottom-right)
    safe_zone_size: int = 4

    # Grid generation
    cluster_block_chance: float = 0.6
    cluster_radius_min: int = 1
    cluster_radius_max: int = 2

    # Attempt limits
    exit_attempts: int = 100
    collectible_attempts: int = 200
    generation_attempts: int = 5

    # Spacing rules (Euclidean, in cells)
    collectible_min_spacing: float = 3.0
    collectible_clearance: float = 2.0

    # Guaranteed path decoration
    decoration_chance: float = 1 / 3
    decoration_block_chance: float = 0.3
    decoration_radius: int = 3

    def __post_init__(self):
        min_side = 2 * self.safe_zone_size
        if self.width < min_side or self.height < min_side:
            raise LevelConfigError(
                f"Grid {self.width}x{self.height} too small for two {self.safe_zone_size}x"
                f"{self.safe_zone_size} safe zones (need at least {min_side}x{min_side})"
            )

        sx, sy = self.start
        if not (0 <= sx < self.safe_zone_size and 0 <= sy < self.safe_zone_size):
            raise LevelConfigError(f"Start {self.start} must lie inside the start safe zone")

        if self.max_collectibles < max(COLLECTIBLE_REDUCTION.values()) + 1:
            raise LevelConfigError(
                f"max_collectibles={self.max_collectibles} leaves no collectibles on some difficulty"
            )

        # Waypoint buffer must hold a full corridor walk to the exit
        min_path = (self.width - 3 - sx) + (self.height - 3 - sy) + 2
        if self.max_path_length < min_path:
            raise LevelConfigError(
                f"max_path_length={self.max_path_length} cannot hold a corridor of {min_path} waypoints"
            )

        for name in ('cluster_block_chance', 'decoration_chance', 'decoration_block_chance'):
            value = getattr(self, name)
            if not 0.0 <= value <= 1.0:
                raise LevelConfigError(f"{name}={value} must be within [0, 1]")

        if not 1 <= self.cluster_radius_min <= self.cluster_radius_max:
            raise LevelConfigError("cluster radius bounds must satisfy 1 <= min <= max")

        for name in ('exit_attempts', 'collectible_attempts', 'generation_attempts'):
            if getattr(self, name) < 1:
                raise LevelConfigError(f"{name} must be at least 1")

    @property
    def area(self) -> int:
        return self.width * self.height

    @property
    def search_capacity(self) -> int:
        """Open set / BFS queue capacity: one slot per cell."""
        return self.area

    @property
    def exit_fallback(self) -> Tuple[int, int]:
        return (self.width - 3, self.height - 3)

    def obstacle_budget(self, difficulty: Difficulty) -> int:
        return self.area // OBSTACLE_DIVISOR[difficulty]

    def collectible_target(self, difficulty: Difficulty) -> int:
        return self.max_collectibles - COLLECTIBLE_REDUCTION[difficulty]

    def min_exit_distance(self, difficulty: Difficulty) -> float:
        return self.width / EXIT_DISTANCE_DIVISOR[difficulty]

    def in_start_zone(self, x: int, y: int) -> bool:
        return x < self.safe_zone_size and y < self.safe_zone_size

    def in_exit_zone(self, x: int, y: int) -> bool:
        return x >= self.width - self.safe_zone_size and y >= self.height - self.safe_zone_size

    def is_protected(self, x: int, y: int) -> bool:
        """True for cells the randomized obstacle passes must never block."""
        return self.in_start_zone(x, y) or self.in_exit_zone(x, y)
