#Benchmark of the maze routing pipeline
#Compares sequential and threaded visibility graph construction, and A* against Dijkstra

import argparse
import logging
import random
from time import perf_counter

from maze import generate_maze
from parallel import n_workers
from path_finding import a_star_search, dijkstra_search, path_length
from visibility import build_visibility_graph, heuristic

SIZES = [4, 6, 8, 10, 12]  # Maze sizes
N_MAZES = 5  # Number of mazes per size
N_RUNS = 2  # Number of runs per maze


class Timer:
    """Wall-clock stopwatch in seconds."""

    def __init__(self):
        self.t0 = perf_counter()

    def __call__(self):
        return perf_counter() - self.t0

    def reset(self):
        elapsed = self()
        self.t0 = perf_counter()
        return elapsed


def corner_query(size):
    """Start in the bottom-left cell, goal in the top-right cell."""
    return (0.5, 0.5), (size - 0.5, size - 0.5)


def time_query(maze, start, goal, workers):
    """
    Time one routing query.

    Returns:
        dict: graph build time, A* and Dijkstra times (ms) and both distances.
    """
    timer = Timer()
    graph = build_visibility_graph(maze, start, goal, workers=workers)
    build_time = timer.reset() * 1000

    path = a_star_search(start, goal, graph.neighbors, heuristic)
    a_star_time = timer.reset() * 1000

    distance, _ = dijkstra_search(start, goal, graph.neighbors)
    dijkstra_time = timer.reset() * 1000

    a_star_distance = path_length(path) if path else float("inf")
    return {
        "build": build_time,
        "a_star": a_star_time,
        "dijkstra": dijkstra_time,
        "a_star_distance": a_star_distance,
        "dijkstra_distance": distance,
    }


def benchmark(sizes=SIZES, n=N_MAZES, m=N_RUNS, workers=None, seed=None):
    """Run the benchmark and return per-size averages."""
    workers = workers or n_workers()
    rng = random.Random(seed)
    results = []

    for maze_size in sizes:
        print(f"Benchmarking for maze size: {maze_size}x{maze_size}")
        total_sequential_time = total_parallel_time = 0
        total_a_star_time = total_dijkstra_time = 0
        mismatches = 0

        for _ in range(n):
            maze = generate_maze(maze_size, maze_size, rng)
            start, goal = corner_query(maze_size)

            for _ in range(m):
                sequential = time_query(maze, start, goal, workers=1)
                parallel = time_query(maze, start, goal, workers=workers)
                total_sequential_time += sequential["build"]
                total_parallel_time += parallel["build"]
                total_a_star_time += sequential["a_star"] + parallel["a_star"]
                total_dijkstra_time += sequential["dijkstra"] + parallel["dijkstra"]

                for run in (sequential, parallel):
                    if abs(run["a_star_distance"] - run["dijkstra_distance"]) > 1e-9:
                        mismatches += 1

        # Average times
        avg_sequential_time = total_sequential_time / (n * m)
        avg_parallel_time = total_parallel_time / (n * m)
        avg_a_star_time = total_a_star_time / (2 * n * m)
        avg_dijkstra_time = total_dijkstra_time / (2 * n * m)

        results.append({
            "size": maze_size,
            "sequential_build": avg_sequential_time,
            "parallel_build": avg_parallel_time,
            "a_star": avg_a_star_time,
            "dijkstra": avg_dijkstra_time,
            "mismatches": mismatches,
        })

        # Print results for this maze size
        print(f"Maze size: {maze_size}x{maze_size}")
        print(f"  Graph build, 1 worker: {avg_sequential_time:.2f} ms")
        print(f"  Graph build, {workers} workers: {avg_parallel_time:.2f} ms")
        if avg_parallel_time > 0:
            print(f"  Build Speedup: {avg_sequential_time / avg_parallel_time:.2f}x")
        print(f"  Dijkstra Time: {avg_dijkstra_time:.2f} ms")
        print(f"  A* Time: {avg_a_star_time:.2f} ms")
        if avg_a_star_time > 0:
            print(f"  A* Speedup over Dijkstra: {avg_dijkstra_time / avg_a_star_time:.2f}x")
        if mismatches:
            print(f"  WARNING: A* and Dijkstra disagreed on {mismatches} queries")

    return results


def main(argv=None):
    parser = argparse.ArgumentParser(description='Benchmark maze visibility-graph routing')
    parser.add_argument('--sizes', type=int, nargs='+', default=SIZES, help='Maze sizes to benchmark')
    parser.add_argument('--mazes', type=int, default=N_MAZES, help='Number of mazes per size')
    parser.add_argument('--runs', type=int, default=N_RUNS, help='Number of runs per maze')
    parser.add_argument('--workers', type=int, default=None, help='Workers for the threaded build')
    parser.add_argument('--seed', type=int, default=None, help='Random seed for maze generation')
    parser.add_argument('--verbose', action='store_true', help='Log debug output')
    args = parser.parse_args(argv)

    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.WARNING)

    results = benchmark(args.sizes, args.mazes, args.runs, args.workers, args.seed)

    # Print summary
    print("Maze Sizes:", [r["size"] for r in results])
    print("Sequential Build Times (ms):", [round(r["sequential_build"], 2) for r in results])
    print("Parallel Build Times (ms):", [round(r["parallel_build"], 2) for r in results])
    print("Dijkstra Times (ms):", [round(r["dijkstra"], 2) for r in results])
    print("A* Times (ms):", [round(r["a_star"], 2) for r in results])
    return results


# Example usage
if __name__ == "__main__":
    main()
