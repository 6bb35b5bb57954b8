#Used randomized depth-first search (DFS) algorithm to generate a perfect maze
#Every cell stores its walls as a bitmask: right, up, left, down

import logging
import random

import numpy as np

logger = logging.getLogger(__name__)

# Wall bits, one per direction
RIGHT, UP, LEFT, DOWN = 0, 1, 2, 3
DIRECTIONS = (RIGHT, UP, LEFT, DOWN)
WALL_MASK = 0b1111
VISITED = 0b10000  # only set while generating

# (dx, dy) for every direction, +y is "up"
OFFSETS = {RIGHT: (1, 0), UP: (0, 1), LEFT: (-1, 0), DOWN: (0, -1)}
OPPOSITE = {RIGHT: LEFT, UP: DOWN, LEFT: RIGHT, DOWN: UP}


class Maze:
    """
    Rectangular maze of width x height cells.

    A new maze has every wall closed. Call generate() to carve a perfect maze,
    or carve()/set_wall() to lay out walls by hand. The cells array is exposed
    read-only so the cached wall-line grids never go stale.

    :param width: Number of columns in the maze
    :param height: Number of rows in the maze
    """

    def __init__(self, width, height):
        for name, value in (("width", width), ("height", height)):
            if isinstance(value, bool) or not isinstance(value, (int, np.integer)):
                raise ValueError(f"maze {name} must be an integer, got {value!r}")
            if value < 1:
                raise ValueError(f"maze {name} must be at least 1, got {value}")
        self.width = int(width)
        self.height = int(height)
        # Create a grid with every wall present, indexed cells[x, y]
        self._cells = np.full((self.width, self.height), WALL_MASK, dtype=np.uint8)
        self._wall_grids = None

    def __getitem__(self, cell):
        x, y = cell
        return int(self._cells[x, y])

    @property
    def cells(self):
        """Read-only view of the cell bitmasks. Walls change through carve() and set_wall()."""
        view = self._cells.view()
        view.flags.writeable = False
        return view

    def __repr__(self):
        return f"Maze({self.width}, {self.height})"

    def in_bounds(self, x, y):
        return 0 <= x < self.width and 0 <= y < self.height

    def has_wall(self, cell, direction):
        """Wall query for one side of a cell. Cells outside the grid have no walls."""
        x, y = cell
        if not self.in_bounds(x, y):
            return False
        return bool((self._cells[x, y] >> direction) & 1)

    def has_vertical_wall(self, x, y):
        """Wall on grid line x between lattice points (x, y) and (x, y + 1)."""
        v_walls, _ = self._grids()
        if 0 <= x <= self.width and 0 <= y < self.height:
            return v_walls[x][y]
        return False

    def has_horizontal_wall(self, x, y):
        """Wall on grid line y between lattice points (x, y) and (x + 1, y)."""
        _, h_walls = self._grids()
        if 0 <= x < self.width and 0 <= y <= self.height:
            return h_walls[x][y]
        return False

    def _grids(self):
        # Wall-line grids are rebuilt lazily after any mutation
        if self._wall_grids is None:
            walls = self._cells & WALL_MASK
            right = (walls >> RIGHT) & 1 == 1
            up = (walls >> UP) & 1 == 1
            left = (walls >> LEFT) & 1 == 1
            down = (walls >> DOWN) & 1 == 1

            v_walls = np.zeros((self.width + 1, self.height), dtype=bool)
            v_walls[1:, :] |= right
            v_walls[:-1, :] |= left

            h_walls = np.zeros((self.width, self.height + 1), dtype=bool)
            h_walls[:, 1:] |= up
            h_walls[:, :-1] |= down

            # Plain lists are much faster than numpy for scalar lookups
            self._wall_grids = (v_walls.tolist(), h_walls.tolist())
        return self._wall_grids

    def _toggle(self, x, y, direction, present):
        if not self.in_bounds(x, y):
            raise IndexError(f"cell ({x}, {y}) is outside {self!r}")
        bit = 1 << direction
        if present:
            self._cells[x, y] |= bit
        else:
            self._cells[x, y] &= ~bit & 0xFF
        dx, dy = OFFSETS[direction]
        nx, ny = x + dx, y + dy
        if self.in_bounds(nx, ny):
            bit = 1 << OPPOSITE[direction]
            if present:
                self._cells[nx, ny] |= bit
            else:
                self._cells[nx, ny] &= ~bit & 0xFF
        self._wall_grids = None

    def set_wall(self, x, y, direction, present=True):
        """Add or remove the wall on one side of a cell and the matching side of its neighbor."""
        self._toggle(x, y, direction, present)

    def carve(self, x, y, direction):
        """Open the passage from (x, y) towards direction, on both sides."""
        dx, dy = OFFSETS[direction]
        if not self.in_bounds(x + dx, y + dy):
            raise IndexError(f"cannot carve through the outer wall at ({x}, {y})")
        self._toggle(x, y, direction, False)

    def open_neighbors(self, x, y):
        """Cells reachable from (x, y) through one open passage."""
        neighbors = []
        for direction in DIRECTIONS:
            dx, dy = OFFSETS[direction]
            nx, ny = x + dx, y + dy
            if self.in_bounds(nx, ny) and not self.has_wall((x, y), direction):
                neighbors.append((nx, ny))
        return neighbors

    def passage_count(self):
        """Number of open passages between adjacent cells."""
        walls = self._cells & WALL_MASK
        right_open = np.count_nonzero(((walls[:-1, :] >> RIGHT) & 1) == 0)
        up_open = np.count_nonzero(((walls[:, :-1] >> UP) & 1) == 0)
        return int(right_open + up_open)

    def generate(self, rng=None):
        """
        Carve a perfect maze with randomized depth-first backtracking from cell (0, 0).

        :param rng: Object with a choice() method, e.g. random.Random(seed).
                    Defaults to the random module.
        :return: self
        """
        if rng is None:
            rng = random

        # Close everything and flag every cell as not yet visited
        self._cells.fill(WALL_MASK | VISITED)

        # Iterative Depth-First Search to carve the maze
        stack = [(0, 0)]  # Use a stack to avoid recursion limit
        self._cells[0, 0] &= ~VISITED & 0xFF
        while stack:
            cx, cy = stack[-1]  # Look at the top of the stack
            next_moves = []
            for direction in DIRECTIONS:
                dx, dy = OFFSETS[direction]
                nx, ny = cx + dx, cy + dy
                if self.in_bounds(nx, ny) and self._cells[nx, ny] & VISITED:
                    next_moves.append((direction, nx, ny))

            if next_moves:
                direction, nx, ny = rng.choice(next_moves)
                self.carve(cx, cy, direction)  # Carve through the wall
                self._cells[nx, ny] &= ~VISITED & 0xFF
                stack.append((nx, ny))
            else:
                stack.pop()  # Backtrack if no moves are available

        # The visited bit is not part of the finished maze
        self._cells &= WALL_MASK
        self._wall_grids = None
        logger.debug("generated %dx%d maze with %d passages",
                     self.width, self.height, self.passage_count())
        return self


def generate_maze(width, height, rng=None):
    """
    Generate a perfect maze: every pair of cells is joined by exactly one walk.

    :param width: Number of columns in the maze
    :param height: Number of rows in the maze
    :param rng: Optional random.Random for reproducible mazes
    :return: A generated Maze
    """
    maze = Maze(width, height)
    return maze.generate(rng)
