#Shortest paths over any graph given as a neighbor callback
#neighbor_fn(vertex) -> iterable of (neighbor, edge_weight)

import logging
import math
from heapq import heappop, heappush
from itertools import count

from visibility import build_visibility_graph, heuristic

logger = logging.getLogger(__name__)


def _reconstruct(came_from, start, goal):
    path = [goal]
    while path[-1] != start:
        path.append(came_from[path[-1]])
    path.reverse()
    return path


def a_star_search(start, goal, neighbor_fn, heuristic_fn):
    """
    Perform A* search from start to goal.

    The frontier is ordered by accumulated cost plus heuristic_fn(vertex, goal).
    A vertex is only marked visited when it is popped; stale frontier entries for
    visited vertices are skipped. With an admissible, consistent heuristic the
    first pop of a vertex carries its shortest distance.

    :param start: Start vertex, any hashable
    :param goal: Goal vertex
    :param neighbor_fn: Callable returning (neighbor, weight) pairs of a vertex
    :param heuristic_fn: Callable estimating the remaining cost between two vertices
    :return: List of vertices from start to goal inclusive, [] if goal is unreachable
    """
    if start == goal:
        return [start]

    tie = count()  # keeps the heap from comparing vertices
    open_set = []  # Priority queue of (priority, tie, cost, predecessor, vertex)
    visited = {start}
    came_from = {}  # Best predecessor of every visited vertex

    for neighbor, weight in neighbor_fn(start):
        heappush(open_set, (weight + heuristic_fn(neighbor, goal), next(tie), weight, start, neighbor))

    expanded = 0
    while open_set:
        _, _, cost, previous, current = heappop(open_set)
        if current in visited:
            continue
        visited.add(current)
        came_from[current] = previous

        if current == goal:
            logger.debug("A*: reached goal with cost %.4f after %d expansions", cost, expanded)
            return _reconstruct(came_from, start, goal)

        expanded += 1
        for neighbor, weight in neighbor_fn(current):
            if neighbor not in visited:
                tentative = cost + weight
                heappush(open_set, (tentative + heuristic_fn(neighbor, goal), next(tie),
                                    tentative, current, neighbor))

    logger.debug("A*: no path after %d expansions", expanded)
    return []


def find_path(start, goal, neighbor_fn, heuristic_fn):
    """Shortest path from start to goal; an empty list means there is no route."""
    return a_star_search(start, goal, neighbor_fn, heuristic_fn)


def dijkstra_search(start, goal, neighbor_fn):
    """
    Uniform-cost search that stops when the goal is reached.

    :return: (distance, path), (inf, []) when goal is unreachable
    """
    distances = {start: 0.0}
    came_from = {}
    visited = set()
    tie = count()
    queue = [(0.0, next(tie), start)]  # Min-heap with (distance, tie, vertex)

    while queue:
        dist, _, current = heappop(queue)

        if current == goal:
            return dist, _reconstruct(came_from, start, goal)

        if current in visited:
            continue
        visited.add(current)

        for neighbor, weight in neighbor_fn(current):
            if neighbor in visited:
                continue
            new_dist = dist + weight
            if new_dist < distances.get(neighbor, math.inf):
                distances[neighbor] = new_dist
                came_from[neighbor] = current
                heappush(queue, (new_dist, next(tie), neighbor))

    return math.inf, []


def path_length(path):
    """Sum of the Euclidean lengths of consecutive path segments."""
    return sum(heuristic(p0, p1) for p0, p1 in zip(path, path[1:]))


def shortest_path(maze, start, goal, workers=None):
    """
    Route between two points of a maze along the visibility graph.

    :return: List of points from start to goal, [] when no route exists
    """
    graph = build_visibility_graph(maze, start, goal, workers=workers)
    start = (float(start[0]), float(start[1]))
    goal = (float(goal[0]), float(goal[1]))
    return find_path(start, goal, graph.neighbors, heuristic)
