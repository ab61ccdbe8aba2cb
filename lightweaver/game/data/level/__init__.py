"""
Level Package - Procedural Level Generation with Reachability Guarantees

Builds a grid level (obstacles, exit, collectibles) where the exit and every
collectible are reachable from the start.

MODULES:
--------
config.py
    Difficulty tiers, per-difficulty tables and the LevelConfig dataclass.

utils.py
    Grid operations, neighbor iteration, distances, breadth-first search.

pathfinding.py
    Manhattan heuristic, octile move costs and the A* Pathfinder with
    corner-cut prevention.

obstacles.py
    Clustered + scattered obstacle grid synthesis.

placement.py
    Exit placement and collectible placement (random sampling with a
    path-tracing fallback).

verifier.py
    Whole-level connectivity check.

guaranteedPath.py
    Corridor-based level builder that is valid by construction.

levelGen.py
    LevelGenerator orchestrating retries and the guaranteed fallback.

USAGE:
------
```python
import random
from lightweaver.game.data.level import Difficulty, generate_environment

result = generate_environment(Difficulty.HARD, rng=random.Random(42))
print(result.to_ascii())
```
"""

from lightweaver.game.data.level.config import (
    Difficulty, DifficultySettings, LevelConfig, LevelConfigError
)
from lightweaver.game.data.level.pathfinding import (
    Pathfinder, PathResult, CapacityError, heuristic, move_cost, is_reachable
)
from lightweaver.game.data.level.obstacles import generate_grid
from lightweaver.game.data.level.placement import Collectible, place_exit, place_collectibles
from lightweaver.game.data.level.verifier import verify
from lightweaver.game.data.level.guaranteedPath import create_guaranteed_path
from lightweaver.game.data.level.levelGen import (
    GenerationResult, LevelGenerator, generate_environment
)

__all__ = [
    # Configuration
    'Difficulty',
    'DifficultySettings',
    'LevelConfig',
    'LevelConfigError',

    # Search
    'Pathfinder',
    'PathResult',
    'CapacityError',
    'heuristic',
    'move_cost',
    'is_reachable',

    # Pipeline stages
    'generate_grid',
    'place_exit',
    'place_collectibles',
    'Collectible',
    'verify',
    'create_guaranteed_path',

    # Generator
    'GenerationResult',
    'LevelGenerator',
    'generate_environment',
]
