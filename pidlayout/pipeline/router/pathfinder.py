"""A* pathfinder on the implicit routing grid.

There is no grid array: a cell is any multiple of ``grid_size`` inside
the drawable bounds, and obstruction is tested on demand against the
occupied-space field.
"""

from __future__ import annotations

import heapq
import math

from .models import Point
from .occupancy import ObstacleField


# Manhattan directions: (dx, dy)
DIRS = ((1, 0), (-1, 0), (0, 1), (0, -1))


def _sign(v: float) -> int:
    return (v > 0) - (v < 0)


def find_path(
    start: Point,
    goal: Point,
    field: ObstacleField,
    bounds: tuple[float, float, float, float],
    grid_size: float,
    *,
    max_expansions: int = 1000,
) -> list[Point]:
    """A* point-to-point search with a Manhattan heuristic.

    Both endpoints are snapped to the grid.  Search succeeds once the
    popped cell is within one cell of the goal.  Returns grid points
    from start to the reached cell, or an empty list when the open set
    runs dry or *max_expansions* cells have been expanded.
    """
    xmin, ymin, xmax, ymax = bounds
    sx = math.floor(start[0] / grid_size + 0.5)
    sy = math.floor(start[1] / grid_size + 0.5)
    tx = math.floor(goal[0] / grid_size + 0.5)
    ty = math.floor(goal[1] / grid_size + 0.5)

    counter = 0
    heap: list[tuple[int, int, int, int]] = [(abs(sx - tx) + abs(sy - ty), counter, sx, sy)]
    g_scores: dict[tuple[int, int], int] = {(sx, sy): 0}
    parents: dict[tuple[int, int], tuple[int, int]] = {}
    closed: set[tuple[int, int]] = set()
    expansions = 0

    while heap and expansions < max_expansions:
        _f, _cnt, cx, cy = heapq.heappop(heap)
        if (cx, cy) in closed:
            continue
        closed.add((cx, cy))
        expansions += 1

        if math.hypot(cx - tx, cy - ty) < 1:
            cells = [(cx, cy)]
            while cells[-1] in parents:
                cells.append(parents[cells[-1]])
            cells.reverse()
            return [(gx * grid_size, gy * grid_size) for gx, gy in cells]

        cur_g = g_scores[(cx, cy)]
        for dx, dy in DIRS:
            nx, ny = cx + dx, cy + dy
            wx, wy = nx * grid_size, ny * grid_size
            if not (xmin <= wx <= xmax and ymin <= wy <= ymax):
                continue
            if (nx, ny) in closed or field.blocked(wx, wy):
                continue
            tentative_g = cur_g + 1
            if tentative_g < g_scores.get((nx, ny), math.inf):
                g_scores[(nx, ny)] = tentative_g
                parents[(nx, ny)] = (cx, cy)
                counter += 1
                h = abs(nx - tx) + abs(ny - ty)
                heapq.heappush(heap, (tentative_g + h, counter, nx, ny))

    return []


def simplify_path(path: list[Point]) -> list[Point]:
    """Drop interior points where the segment direction does not change."""
    if len(path) <= 2:
        return list(path)
    simplified = [path[0]]
    for prev, cur, nxt in zip(path, path[1:], path[2:]):
        same = (_sign(cur[0] - prev[0]) == _sign(nxt[0] - cur[0])
                and _sign(cur[1] - prev[1]) == _sign(nxt[1] - cur[1]))
        if not same:
            simplified.append(cur)
    simplified.append(path[-1])
    return simplified
