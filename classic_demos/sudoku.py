# classic_demos/sudoku.py

"""
================================================================================
SUDOKU BACKTRACKING SOLVER
================================================================================
A 9x9 Sudoku grid with two solving strategies and a step-wise animator.

Strategies:
- 'backtracking': always branch on the first empty cell in reading order.
- 'leastentropies': branch on the empty cell with the fewest candidates.

The SudokuAnimator runs the same depth-first search as Grid.solve() but keeps
its progress on an explicit stack of (cell, remaining candidates) frames, so
a display loop can advance the search one visible change at a time.

Data Contract:
---------------
- Inputs: A 9x9 list of rows holding ints 1-9 or None for empty cells.
- Outputs: The mutated grid; solve() returns True if a solution was found.
- Side Effects: Cell values are changed in place.
================================================================================
"""
from dataclasses import dataclass, field
from enum import Enum

GRID_SIZE = 9
BOX_SIZE = 3

METHOD_BACKTRACKING = "backtracking"
METHOD_LEAST_ENTROPIES = "leastentropies"
METHODS = (METHOD_BACKTRACKING, METHOD_LEAST_ENTROPIES)

_ = None
DEFAULT_PUZZLE = [
    [6, 4, _, _, 8, _, _, _, _],
    [7, _, _, 2, 1, 6, _, _, _],
    [_, 1, 9, _, _, _, _, 7, _],
    [9, _, _, _, 7, _, _, _, 4],
    [5, _, _, 9, _, 4, _, _, 2],
    [8, _, _, _, 3, _, _, _, 7],
    [_, 7, _, _, _, _, 3, 9, _],
    [_, _, _, 5, 2, 1, _, _, 6],
    [_, _, _, _, 9, _, _, 8, 1],
]
del _


class Cell:
    def __init__(self, row: int, col: int, value: int = None):
        self.row = row
        self.col = col
        self.value = value
        self.candidates: list[int] = []

    def calculate_candidates(self, cells: list[list["Cell"]]):
        """Digits not yet used in this cell's row, column or box."""
        if self.value is not None:
            self.candidates = []
            return

        used = set()
        for i in range(GRID_SIZE):
            used.add(cells[self.row][i].value)
            used.add(cells[i][self.col].value)

        box_row = (self.row // BOX_SIZE) * BOX_SIZE
        box_col = (self.col // BOX_SIZE) * BOX_SIZE
        for r in range(box_row, box_row + BOX_SIZE):
            for c in range(box_col, box_col + BOX_SIZE):
                used.add(cells[r][c].value)

        self.candidates = [n for n in range(1, GRID_SIZE + 1) if n not in used]

    def __repr__(self):
        return f"Cell({self.row}, {self.col}, {self.value})"


class Grid:
    def __init__(self, cells: list[list[Cell]], method: str = METHOD_BACKTRACKING):
        if method not in METHODS:
            raise ValueError(f"Unknown solving method '{method}'. Expected one of {METHODS}.")
        self.cells = cells
        self.method = method
        self.iterations = 0

    @classmethod
    def from_values(cls, rows: list[list], method: str = METHOD_BACKTRACKING) -> "Grid":
        if len(rows) != GRID_SIZE or any(len(row) != GRID_SIZE for row in rows):
            raise ValueError("A Sudoku grid needs 9 rows of 9 values.")
        cells = [[Cell(r, c, rows[r][c]) for c in range(GRID_SIZE)] for r in range(GRID_SIZE)]
        return cls(cells, method)

    def values(self) -> list[list]:
        return [[cell.value for cell in row] for row in self.cells]

    def get_next_empty_cell(self) -> Cell | None:
        if self.method == METHOD_LEAST_ENTROPIES:
            target = None
            fewest = GRID_SIZE + 1
            for row in self.cells:
                for cell in row:
                    if cell.value is None:
                        cell.calculate_candidates(self.cells)
                        if len(cell.candidates) < fewest:
                            fewest = len(cell.candidates)
                            target = cell
            return target

        for row in self.cells:
            for cell in row:
                if cell.value is None:
                    return cell
        return None

    def solve(self) -> bool:
        """Solves the grid in place. Returns False if no solution exists."""
        empty = self.get_next_empty_cell()
        if empty is None:
            return True
        if self.method == METHOD_BACKTRACKING:
            empty.calculate_candidates(self.cells)
        self.iterations += 1

        original_candidates = empty.candidates
        for candidate in original_candidates:
            empty.value = candidate
            empty.candidates = []
            if self.solve():
                return True
            empty.value = None
            empty.candidates = original_candidates
        return False

    def is_complete(self) -> bool:
        return all(cell.value is not None for row in self.cells for cell in row)

    def is_solved(self) -> bool:
        """Every cell filled and no digit repeated in any row, column or box."""
        if not self.is_complete():
            return False
        digits = set(range(1, GRID_SIZE + 1))
        values = self.values()
        for i in range(GRID_SIZE):
            if set(values[i]) != digits:
                return False
            if {values[r][i] for r in range(GRID_SIZE)} != digits:
                return False
        for box_row in range(0, GRID_SIZE, BOX_SIZE):
            for box_col in range(0, GRID_SIZE, BOX_SIZE):
                box = {
                    values[r][c]
                    for r in range(box_row, box_row + BOX_SIZE)
                    for c in range(box_col, box_col + BOX_SIZE)
                }
                if box != digits:
                    return False
        return True


class StepResult(Enum):
    ASSIGNED = "assigned"
    BACKTRACKED = "backtracked"
    SOLVED = "solved"
    EXHAUSTED = "exhausted"


@dataclass
class _Frame:
    cell: Cell
    remaining: list[int] = field(default_factory=list)


class SudokuAnimator:
    """
    Step-wise depth-first search over a Grid.
    Each call to step() makes exactly one visible change (a digit placed or
    a cell cleared) until the search reports SOLVED or EXHAUSTED.
    """
    def __init__(self, grid: Grid):
        self.grid = grid
        self.steps = 0
        self._stack: list[_Frame] = []
        self._descend = True
        self._result: StepResult | None = None

    @property
    def done(self) -> bool:
        return self._result in (StepResult.SOLVED, StepResult.EXHAUSTED)

    @property
    def solved(self) -> bool:
        return self._result is StepResult.SOLVED

    def step(self) -> StepResult:
        if self.done:
            return self._result
        self.steps += 1
        self._result = self._advance()
        return self._result

    def _advance(self) -> StepResult:
        while True:
            if self._descend:
                self._descend = False
                cell = self.grid.get_next_empty_cell()
                if cell is None:
                    return StepResult.SOLVED
                if self.grid.method == METHOD_BACKTRACKING:
                    cell.calculate_candidates(self.grid.cells)
                self.grid.iterations += 1
                self._stack.append(_Frame(cell, list(cell.candidates)))

            if not self._stack:
                return StepResult.EXHAUSTED

            frame = self._stack[-1]
            if frame.cell.value is not None:
                # The subtree below this assignment failed
                frame.cell.value = None
                return StepResult.BACKTRACKED
            if frame.remaining:
                frame.cell.value = frame.remaining.pop(0)
                self._descend = True
                return StepResult.ASSIGNED
            self._stack.pop()

    def run(self, max_steps: int = None) -> StepResult:
        """Steps until the search ends or max_steps have been taken."""
        taken = 0
        while not self.done and (max_steps is None or taken < max_steps):
            self.step()
            taken += 1
        return self._result
