#Visibility graph over the corners of a maze
#Two points are connected when the straight segment between them crosses no wall

import logging
import math
from collections import defaultdict

from parallel import parallel_for, resolve_workers

logger = logging.getLogger(__name__)

# Anchor points are nudged off the lattice into each of the four quadrants.
# The magnitudes differ so that no two candidates ever coincide.
ANCHOR_OFFSETS = ((0.1, 0.1), (-0.11, 0.11), (-0.12, -0.12), (0.13, -0.13))


def heuristic(p0, p1):
    """Euclidean distance between two points, used for edge weights and by A*."""
    return math.hypot(p0[0] - p1[0], p0[1] - p1[1])


def is_straight_wall(maze, x, y):
    """True when two collinear wall segments meet at lattice point (x, y)."""
    if maze.has_horizontal_wall(x - 1, y) and maze.has_horizontal_wall(x, y):
        return True
    if maze.has_vertical_wall(x, y - 1) and maze.has_vertical_wall(x, y):
        return True
    return False


def is_anchor_corner(maze, x, y):
    """
    Check whether lattice point (x, y) is a corner a path may have to bend around.

    Walls that end or turn at (x, y) make it an anchor. Points outside the maze,
    points no wall touches and points a wall runs straight through are not.
    """
    if not (0 <= x <= maze.width and 0 <= y <= maze.height):
        return False
    touching = (
        maze.has_horizontal_wall(x - 1, y),
        maze.has_horizontal_wall(x, y),
        maze.has_vertical_wall(x, y - 1),
        maze.has_vertical_wall(x, y),
    )
    if not any(touching):
        return False
    return not is_straight_wall(maze, x, y)


def anchor_corners(maze):
    """All anchor lattice points of the maze, row by row."""
    return [(x, y)
            for y in range(maze.height + 1)
            for x in range(maze.width + 1)
            if is_anchor_corner(maze, x, y)]


def anchor_candidates(x, y):
    """The four off-lattice points standing in for anchor (x, y)."""
    return [(x + ox, y + oy) for ox, oy in ANCHOR_OFFSETS]


def _inside(maze, p):
    return 0 <= p[0] < maze.width and 0 <= p[1] < maze.height


def is_visible(maze, p0, p1):
    """
    Decide whether the segment p0-p1 stays clear of every wall.

    The segment is swept twice: once over the vertical grid lines it crosses and
    once over the horizontal ones. A crossing strictly between two lattice points
    is blocked by the wall on that line. A crossing exactly on a lattice point is
    blocked when the walls meeting there lie on both sides of the segment, which
    depends on the direction of travel. Endpoints are ordered along the swept axis,
    so the result does not depend on argument order.

    :return: False for points outside [0, width) x [0, height)
    """
    if not (_inside(maze, p0) and _inside(maze, p1)):
        return False

    # Vertical grid lines, sweeping x
    (x0, y0), (x1, y1) = (p0, p1) if p0[0] <= p1[0] else (p1, p0)
    x = math.floor(x0) + 1
    if x < x1:
        dydx = (y1 - y0) / (x1 - x0)
        while x < x1:
            y = y0 + (x - x0) * dydx
            gy = math.floor(y)
            if y == gy:
                v0 = maze.has_vertical_wall(x, gy)
                v1 = maze.has_vertical_wall(x, gy - 1)
                if v0 and v1:
                    return False
                if y1 > y0:
                    if v0 and maze.has_horizontal_wall(x, gy):
                        return False
                    if v1 and maze.has_horizontal_wall(x - 1, gy):
                        return False
                elif y1 < y0:
                    if v0 and maze.has_horizontal_wall(x - 1, gy):
                        return False
                    if v1 and maze.has_horizontal_wall(x, gy):
                        return False
            elif maze.has_vertical_wall(x, gy):
                return False
            x += 1

    # Horizontal grid lines, sweeping y
    (x0, y0), (x1, y1) = (p0, p1) if p0[1] <= p1[1] else (p1, p0)
    y = math.floor(y0) + 1
    if y < y1:
        dxdy = (x1 - x0) / (y1 - y0)
        while y < y1:
            x = x0 + (y - y0) * dxdy
            gx = math.floor(x)
            if x == gx:
                h0 = maze.has_horizontal_wall(gx, y)
                h1 = maze.has_horizontal_wall(gx - 1, y)
                if h0 and h1:
                    return False
                if x1 > x0:
                    if h0 and maze.has_vertical_wall(gx, y):
                        return False
                    if h1 and maze.has_vertical_wall(gx, y - 1):
                        return False
                elif x1 < x0:
                    if h1 and maze.has_vertical_wall(gx, y):
                        return False
                    if h0 and maze.has_vertical_wall(gx, y - 1):
                        return False
            elif maze.has_horizontal_wall(gx, y):
                return False
            y += 1

    return True


class VisibilityGraph:
    """Multimap from a point to the (point, weight) links leaving it."""

    def __init__(self):
        self._links = defaultdict(list)

    def __contains__(self, point):
        return point in self._links

    def __len__(self):
        return len(self._links)

    def __repr__(self):
        return f"VisibilityGraph({len(self._links)} vertices, {self.edge_count()} edges)"

    def add_edge(self, p0, p1, weight):
        self._links[p0].append((p1, weight))

    def connect(self, p0, p1, weight):
        self._links[p0].append((p1, weight))
        self._links[p1].append((p0, weight))

    def neighbors(self, point):
        return list(self._links.get(point, ()))

    def merge(self, other):
        for point, links in other._links.items():
            self._links[point].extend(links)

    def vertices(self):
        return list(self._links)

    def edges(self):
        for p0, links in self._links.items():
            for p1, weight in links:
                yield p0, p1, weight

    def edge_count(self):
        return sum(len(links) for links in self._links.values())


def build_visibility_graph(maze, start, goal, workers=None):
    """
    Build the search graph for one (start, goal) query.

    When start sees goal directly the graph is the single edge start -> goal.
    Otherwise every pair of mutually visible anchor candidates is linked in both
    directions, then start and goal are linked to every candidate they can see.

    :param maze: Maze to route through, only read
    :param start: (x, y) start point
    :param goal: (x, y) goal point
    :param workers: Worker count for the all-pairs scan, defaults to n_workers()
    :return: VisibilityGraph
    """
    start = (float(start[0]), float(start[1]))
    goal = (float(goal[0]), float(goal[1]))

    if is_visible(maze, start, goal):
        logger.debug("%s sees %s directly", start, goal)
        graph = VisibilityGraph()
        graph.add_edge(start, goal, heuristic(start, goal))
        return graph

    # Candidates outside the maze can never be visible, drop them up front
    candidates = []
    for x, y in anchor_corners(maze):
        points = [p for p in anchor_candidates(x, y) if _inside(maze, p)]
        if points:
            candidates.append(points)
    logger.debug("%d anchors, %d candidate points",
                 len(candidates), sum(len(points) for points in candidates))

    workers = resolve_workers(workers)
    graphs = [VisibilityGraph() for _ in range(workers)]

    def scan(i, worker):
        graph = graphs[worker]
        for j in range(i, len(candidates)):
            for k0, p0 in enumerate(candidates[i]):
                for k1, p1 in enumerate(candidates[j]):
                    # Each unordered pair once, including quadrants of the same anchor
                    if i == j and k1 <= k0:
                        continue
                    if is_visible(maze, p0, p1):
                        graph.connect(p0, p1, heuristic(p0, p1))

    parallel_for(len(candidates), scan, workers=workers)

    graph = graphs[0]
    for other in graphs[1:]:
        graph.merge(other)

    for point in (start, goal):
        for points in candidates:
            for p in points:
                if p != point and is_visible(maze, point, p):
                    graph.connect(point, p, heuristic(point, p))

    logger.debug("built %r", graph)
    return graph
