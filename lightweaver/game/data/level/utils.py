"""
Utility functions for level generation.

Grids are NumPy uint8 arrays of shape (height, width) indexed grid[y][x],
holding OPEN (0) or BLOCKED (1). Positions are (x, y) tuples.
"""

import math
from collections import deque
from typing import List, Tuple, Optional, Iterator
import numpy as np

OPEN = 0
BLOCKED = 1

Position = Tuple[int, int]


class CapacityError(RuntimeError):
    """Raised when a fixed-capacity search buffer would overflow."""


# ============================================================================
# DIRECTION DEFINITIONS
# ============================================================================

DIRECTIONS_4 = [
    ('north', 0, -1), ('east', 1, 0),
    ('south', 0, 1), ('west', -1, 0)
]

DIRECTIONS_8 = DIRECTIONS_4 + [
    ('northeast', 1, -1), ('southeast', 1, 1),
    ('southwest', -1, 1), ('northwest', -1, -1)
]


# ============================================================================
# GRID OPERATIONS
# ============================================================================

def create_grid(width: int, height: int) -> np.ndarray:
    """Create a fully open grid (height x width)."""
    return np.zeros((height, width), dtype=np.uint8)


def grid_size(grid: np.ndarray) -> Tuple[int, int]:
    """Return (width, height) of a grid."""
    height, width = grid.shape
    return width, height


def valid_pos(x: int, y: int, width: int, height: int) -> bool:
    """Check if position is within grid bounds."""
    return 0 <= x < width and 0 <= y < height


def is_open(grid: np.ndarray, x: int, y: int) -> bool:
    """True when (x, y) is inside the grid and not blocked."""
    height, width = grid.shape
    return valid_pos(x, y, width, height) and grid[y, x] == OPEN


def clear_area(grid: np.ndarray, cx: int, cy: int, radius: int = 1) -> None:
    """Force every in-bounds cell within `radius` (Chebyshev) of (cx, cy) open."""
    height, width = grid.shape
    y0, y1 = max(0, cy - radius), min(height, cy + radius + 1)
    x0, x1 = max(0, cx - radius), min(width, cx + radius + 1)
    grid[y0:y1, x0:x1] = OPEN


def count_blocked(grid: np.ndarray) -> int:
    return int(np.count_nonzero(grid == BLOCKED))


def grid_to_ascii(grid: np.ndarray, markers: Optional[dict] = None) -> str:
    """
    Render a grid as text: '#' blocked, '.' open.

    Args:
        grid: Occupancy grid
        markers: Optional {(x, y): char} overlay (start, exit, collectibles)
    """
    markers = markers or {}
    height, width = grid.shape
    rows = []
    for y in range(height):
        row = []
        for x in range(width):
            if (x, y) in markers:
                row.append(markers[(x, y)])
            else:
                row.append('#' if grid[y, x] == BLOCKED else '.')
        rows.append(''.join(row))
    return '\n'.join(rows)


def neighbors_4(x: int, y: int, width: int, height: int) -> Iterator[Tuple[int, int, str]]:
    """Yield cardinal neighbors (nx, ny, direction) within bounds."""
    for direction, dx, dy in DIRECTIONS_4:
        nx, ny = x + dx, y + dy
        if valid_pos(nx, ny, width, height):
            yield (nx, ny, direction)


# ============================================================================
# DISTANCE CALCULATIONS
# ============================================================================

def manhattan(pos1: Position, pos2: Position) -> int:
    """Manhattan (L1) distance between two positions."""
    return abs(pos1[0] - pos2[0]) + abs(pos1[1] - pos2[1])


def euclidean(pos1: Position, pos2: Position) -> float:
    """Euclidean (L2) distance between two positions."""
    return math.hypot(pos1[0] - pos2[0], pos1[1] - pos2[1])


def cell_center(pos: Position) -> Tuple[float, float]:
    """Continuous coordinates of a cell's center."""
    return (pos[0] + 0.5, pos[1] + 0.5)


# ============================================================================
# BREADTH-FIRST SEARCH
# ============================================================================

def bfs_path(grid: np.ndarray, start: Position, goal: Position,
             capacity: Optional[int] = None) -> Optional[List[Position]]:
    """
    Breadth-First Search over 4-directional open moves.

    Returns the path from start to goal (both inclusive) or None. Each cell is
    enqueued at most once, and at most `capacity` cells (default: the grid
    area) may be enqueued in total.

    Raises:
        CapacityError: capacity is smaller than the grid area, or the search
            would enqueue more cells than capacity allows.
    """
    width, height = grid_size(grid)
    capacity = width * height if capacity is None else capacity
    if capacity < width * height:
        raise CapacityError(f"BFS capacity {capacity} smaller than grid area {width * height}")
    if not is_open(grid, *start) or not is_open(grid, *goal):
        return None

    came_from = {start: None}
    queue = deque([start])

    while queue:
        current = queue.popleft()

        if current == goal:
            path: List[Position] = []
            while current is not None:
                path.append(current)
                current = came_from[current]
            path.reverse()
            return path

        x, y = current
        for nx, ny, _ in neighbors_4(x, y, width, height):
            if (nx, ny) in came_from or grid[ny, nx] != OPEN:
                continue
            if len(came_from) >= capacity:
                raise CapacityError(f"BFS capacity {capacity} exceeded")
            came_from[(nx, ny)] = current
            queue.append((nx, ny))

    return None
