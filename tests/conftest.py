import pytest

from maze import DOWN, RIGHT, UP, Maze


@pytest.fixture
def single_wall_maze():
    """2x2 maze whose only inner wall separates cell (0, 0) from cell (1, 0)."""
    maze = Maze(2, 2)
    maze.carve(0, 0, UP)
    maze.carve(0, 1, RIGHT)
    maze.carve(1, 1, DOWN)
    return maze


@pytest.fixture
def serpentine_maze():
    """4x4 maze whose rows are corridors joined alternately at the right and left ends."""
    maze = Maze(4, 4)
    for y in range(4):
        for x in range(3):
            maze.carve(x, y, RIGHT)
    for y in range(3):
        maze.carve(3 if y % 2 == 0 else 0, y, UP)
    return maze


@pytest.fixture
def l_corner_maze():
    """2x2 maze with inner walls left of and below lattice point (1, 1)."""
    maze = Maze(2, 2)
    maze.carve(0, 1, RIGHT)
    maze.carve(1, 0, UP)
    return maze
