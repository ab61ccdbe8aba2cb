"""
A* reachability search over an occupancy grid.

Movement is 8-directional. Cardinal moves cost 1, diagonal moves cost
DIAGONAL_COST, and a diagonal move is only allowed when both cardinal cells it
slips between are open (no corner cutting).

The heuristic is Manhattan distance. It overestimates once diagonal moves are
available, so returned costs are not guaranteed optimal; the reachability
answer is unaffected.

Open set ordering: each step expands the node with the lowest f found by a
linear scan of the open set's slots. Ties keep the first slot scanned. The
expanded node's slot is refilled with the last node, so slot order (and with
it the tie-break) is fully deterministic.
"""

from dataclasses import dataclass
from typing import Dict, List, Optional, Tuple
import numpy as np

from lightweaver.game.data.level.utils import (
    OPEN, DIRECTIONS_8, CapacityError, Position, grid_size, valid_pos, manhattan
)

CARDINAL_COST = 1.0
DIAGONAL_COST = 1.41421


# ============================================================================
# HEURISTIC & COST MODEL
# ============================================================================

def heuristic(a: Position, b: Position) -> float:
    """Manhattan distance estimate between two cells."""
    return float(manhattan(a, b))


def move_cost(dx: int, dy: int) -> float:
    """Cost of a single step by offset (dx, dy)."""
    return DIAGONAL_COST if dx != 0 and dy != 0 else CARDINAL_COST


# ============================================================================
# SEARCH STRUCTURES
# ============================================================================

@dataclass
class SearchNode:
    position: Position
    parent: int  # flat index (y * width + x) of the parent cell, -1 for none
    g: float
    h: float
    f: float


@dataclass
class PathResult:
    path: List[Position]  # start to goal, both inclusive
    cost: float
    expanded: int


class OpenSet:
    """
    Arena-style open set with a fixed number of slots.

    Nodes are stored in slot order with an explicit length counter; a
    position index gives O(1) membership lookups for in-place updates.
    """

    def __init__(self, capacity: int):
        self.capacity = capacity
        self._slots: List[Optional[SearchNode]] = [None] * capacity
        self._size = 0
        self._index: Dict[Position, SearchNode] = {}

    def __len__(self):
        return self._size

    def push(self, node: SearchNode):
        if self._size >= self.capacity:
            raise CapacityError(f"Open set capacity {self.capacity} exceeded")
        self._slots[self._size] = node
        self._size += 1
        self._index[node.position] = node

    def find(self, position: Position) -> Optional[SearchNode]:
        return self._index.get(position)

    def relax(self, position: Position, g: float, parent: int) -> bool:
        """
        Lower the cost of an open node reached by a cheaper route.

        The node is only touched when g is strictly smaller than its current
        cost; equal or worse routes keep the existing parent.

        Returns:
            True if the node was updated.
        """
        node = self._index[position]
        if g >= node.g:
            return False
        node.g = g
        node.f = g + node.h
        node.parent = parent
        return True

    def pop_lowest(self) -> SearchNode:
        """Remove and return the node with the lowest f (first slot wins ties)."""
        best = 0
        for i in range(1, self._size):
            if self._slots[i].f < self._slots[best].f:
                best = i

        node = self._slots[best]
        self._size -= 1
        self._slots[best] = self._slots[self._size]
        self._slots[self._size] = None
        del self._index[node.position]
        return node


# ============================================================================
# PATHFINDER
# ============================================================================

class Pathfinder:
    """
    Reachability oracle bound to one grid.

    Usage:
        finder = Pathfinder(grid)
        finder.is_reachable((1, 1), (12, 12))
        finder.find_path((1, 1), (12, 12))  # PathResult or None
    """

    def __init__(self, grid: np.ndarray, capacity: Optional[int] = None):
        self.grid = grid
        self.width, self.height = grid_size(grid)
        self.capacity = self.width * self.height if capacity is None else capacity
        if self.capacity < self.width * self.height:
            raise CapacityError(
                f"Search capacity {self.capacity} smaller than grid area {self.width * self.height}"
            )

    def is_reachable(self, start: Position, goal: Position) -> bool:
        return self._search(start, goal) is not None

    def find_path(self, start: Position, goal: Position) -> Optional[PathResult]:
        """Search and reconstruct the path through the parent chain."""
        found = self._search(start, goal)
        if found is None:
            return None
        goal_node, parents, expanded = found

        path = [goal_node.position]
        parent = goal_node.parent
        while parent != -1:
            path.append((parent % self.width, parent // self.width))
            parent = int(parents[parent])
        path.reverse()
        return PathResult(path=path, cost=goal_node.g, expanded=expanded)

    def _passable(self, x: int, y: int) -> bool:
        return valid_pos(x, y, self.width, self.height) and self.grid[y, x] == OPEN

    def _search(self, start: Position, goal: Position) -> Optional[Tuple[SearchNode, np.ndarray, int]]:
        if not self._passable(*start) or not self._passable(*goal):
            return None

        open_set = OpenSet(self.capacity)
        closed = np.zeros((self.height, self.width), dtype=bool)
        parents = np.full(self.width * self.height, -1, dtype=np.int32)
        expanded = 0

        h = heuristic(start, goal)
        open_set.push(SearchNode(position=start, parent=-1, g=0.0, h=h, f=h))

        while len(open_set) > 0:
            current = open_set.pop_lowest()
            x, y = current.position
            expanded += 1

            if current.position == goal:
                return current, parents, expanded

            closed[y, x] = True
            current_index = y * self.width + x
            parents[current_index] = current.parent

            for _, dx, dy in DIRECTIONS_8:
                nx, ny = x + dx, y + dy
                if not self._passable(nx, ny) or closed[ny, nx]:
                    continue

                # No squeezing between two touching obstacles
                if dx != 0 and dy != 0:
                    if self.grid[y, nx] != OPEN or self.grid[ny, x] != OPEN:
                        continue

                g = current.g + move_cost(dx, dy)
                neighbor = open_set.find((nx, ny))

                if neighbor is not None:
                    open_set.relax(neighbor.position, g, current_index)
                else:
                    h = heuristic((nx, ny), goal)
                    open_set.push(SearchNode(position=(nx, ny), parent=current_index, g=g, h=h, f=g + h))

        return None


def is_reachable(grid: np.ndarray, start: Position, goal: Position) -> bool:
    """One-shot reachability query."""
    return Pathfinder(grid).is_reachable(start, goal)
