import math
import random

import pytest

from maze import Maze, generate_maze
from path_finding import a_star_search, dijkstra_search, find_path, path_length, shortest_path
from visibility import build_visibility_graph, heuristic, is_visible


def zero(a, b):
    return 0


def random_graph(rng, n=40, p=0.15):
    """Random points joined by edges at least as long as their straight-line distance."""
    points = [(rng.uniform(0, 10), rng.uniform(0, 10)) for _ in range(n)]
    links = {point: [] for point in points}
    weights = {}
    for i in range(n):
        for j in range(i + 1, n):
            if rng.random() < p:
                a, b = points[i], points[j]
                w = heuristic(a, b) * (1 + rng.random())
                links[a].append((b, w))
                links[b].append((a, w))
                weights[a, b] = weights[b, a] = w
    return points, links, weights


def test_one_cell_maze_takes_the_direct_edge():
    maze = Maze(1, 1)
    start, goal = (0.25, 0.75), (0.9, 0.1)

    assert shortest_path(maze, start, goal) == [start, goal]


def test_route_detours_around_wall_end(single_wall_maze):
    maze = single_wall_maze
    start, goal = (0.1, 0.1), (1.9, 0.1)

    path = shortest_path(maze, start, goal, workers=2)

    assert path[0] == start
    assert path[-1] == goal
    assert len(path) >= 3
    assert path_length(path) > heuristic(start, goal)
    assert any(heuristic(p, (1, 1)) < 0.2 for p in path[1:-1])
    for p0, p1 in zip(path, path[1:]):
        assert is_visible(maze, p0, p1)


def test_route_matches_dijkstra_on_visibility_graph(serpentine_maze):
    maze = serpentine_maze
    start, goal = (0.5, 0.5), (0.5, 3.5)

    graph = build_visibility_graph(maze, start, goal)
    path = find_path(start, goal, graph.neighbors, heuristic)
    distance, _ = dijkstra_search(start, goal, graph.neighbors)

    assert path[0] == start and path[-1] == goal
    assert path_length(path) == pytest.approx(distance)
    # has to run the length of all four corridors
    assert path_length(path) > 9


def test_closed_maze_has_no_route():
    maze = Maze(3, 3)

    assert shortest_path(maze, (0.5, 0.5), (2.5, 2.5)) == []


def test_out_of_range_point_has_no_route():
    maze = generate_maze(3, 3, random.Random(1))

    assert shortest_path(maze, (-1.0, -1.0), (2.5, 2.5), workers=1) == []


@pytest.mark.parametrize("seed", range(8))
def test_a_star_is_optimal(seed):
    rng = random.Random(seed)
    points, links, weights = random_graph(rng)

    for _ in range(10):
        start, goal = rng.sample(points, 2)
        path = a_star_search(start, goal, links.__getitem__, heuristic)
        distance, _ = dijkstra_search(start, goal, links.__getitem__)

        if distance == math.inf:
            assert path == []
            continue
        assert path[0] == start and path[-1] == goal
        cost = sum(weights[a, b] for a, b in zip(path, path[1:]))
        assert cost == pytest.approx(distance)


def test_vertex_is_settled_when_popped_not_when_pushed():
    # G is pushed first through the expensive direct edge
    links = {"S": [("G", 10), ("A", 1)], "A": [("G", 1)], "G": []}

    assert a_star_search("S", "G", links.__getitem__, zero) == ["S", "A", "G"]


def test_cheaper_route_found_later_wins():
    links = {
        "S": [("B", 5), ("A", 1)],
        "A": [("B", 1)],
        "B": [("G", 1)],
        "G": [],
    }

    assert find_path("S", "G", links.__getitem__, zero) == ["S", "A", "B", "G"]
    assert dijkstra_search("S", "G", links.__getitem__) == (3, ["S", "A", "B", "G"])


def test_search_is_idempotent():
    rng = random.Random(99)
    points, links, _ = random_graph(rng, n=30, p=0.3)
    start, goal = points[0], points[-1]

    first = find_path(start, goal, links.__getitem__, heuristic)
    second = find_path(start, goal, links.__getitem__, heuristic)

    assert first == second


def test_unreachable_goal_gives_empty_path():
    links = {1: [(2, 1.0)], 2: [(1, 1.0)], 3: []}

    assert find_path(1, 3, links.__getitem__, zero) == []
    assert dijkstra_search(1, 3, links.__getitem__) == (math.inf, [])


def test_start_is_goal():
    links = {"S": [("A", 1)], "A": [("S", 1)]}

    assert find_path("S", "S", links.__getitem__, zero) == ["S"]
    assert dijkstra_search("S", "S", links.__getitem__) == (0, ["S"])


def test_vertices_need_not_be_orderable():
    class Node:
        pass

    s, a, b, g = Node(), Node(), Node(), Node()
    links = {s: [(a, 1), (b, 1)], a: [(g, 1)], b: [(g, 1)], g: []}

    path = find_path(s, g, links.__getitem__, zero)

    assert path[0] is s and path[-1] is g
    assert len(path) == 3


def test_path_length():
    assert path_length([(0, 0), (3, 4), (3, 5)]) == 6
    assert path_length([(1, 1)]) == 0
    assert path_length([]) == 0
