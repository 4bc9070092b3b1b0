# classic_demos/life.py

"""
================================================================================
CONWAY'S GAME OF LIFE
================================================================================
An unbounded Game of Life board (rule B3/S23). Only live cells are stored, as
a set of (x, y) integer tuples, so patterns can wander without hitting edges.

Data Contract:
---------------
- Inputs: Cell coordinates, patterns as lists of (x, y) offsets.
- Outputs: next_generation() advances the board; stats() reports counts.
- Side Effects: None beyond the board's own state.
- Invariants: ages has exactly the same keys as the live cell set.
================================================================================
"""
import numpy as np

STABILITY_GENERATIONS = 3
DENSITY_RADIUS = 2  # 5x5 neighbourhood

_NEIGHBOR_OFFSETS = [(dx, dy) for dx in (-1, 0, 1) for dy in (-1, 0, 1) if (dx, dy) != (0, 0)]

PATTERNS = {
    "glider": [(1, 0), (2, 1), (0, 2), (1, 2), (2, 2)],
    "blinker": [(0, 0), (1, 0), (2, 0)],
    "toad": [(1, 0), (2, 0), (3, 0), (0, 1), (1, 1), (2, 1)],
    "beacon": [(0, 0), (1, 0), (0, 1), (3, 2), (2, 3), (3, 3)],
    "block": [(0, 0), (1, 0), (0, 1), (1, 1)],
    "lwss": [(1, 0), (4, 0), (0, 1), (0, 2), (4, 2), (0, 3), (1, 3), (2, 3), (3, 3)],
    "r_pentomino": [(1, 0), (2, 0), (0, 1), (1, 1), (1, 2)],
}


class LifeBoard:
    def __init__(self, cells=None):
        self.cells: set[tuple[int, int]] = set()
        self.ages: dict[tuple[int, int], int] = {}
        self._reset_stats()
        for x, y in cells or []:
            self.set_alive(x, y)
        self.initial_cell_count = len(self.cells)

    def _reset_stats(self):
        self.generation = 0
        self.births_this_generation = 0
        self.deaths_this_generation = 0
        self.total_births = 0
        self.total_deaths = 0
        self.peak_population = 0
        self.previous_population = 0
        self.stability_counter = 0
        self.initial_cell_count = 0

    @property
    def population(self) -> int:
        return len(self.cells)

    @property
    def is_stable(self) -> bool:
        """True once the population has held steady for three generations."""
        return self.stability_counter >= STABILITY_GENERATIONS

    def is_alive(self, x: int, y: int) -> bool:
        return (x, y) in self.cells

    def set_alive(self, x: int, y: int, alive: bool = True):
        key = (x, y)
        if alive:
            if key not in self.cells:
                self.cells.add(key)
                self.ages[key] = 0
        else:
            self.cells.discard(key)
            self.ages.pop(key, None)

    def toggle_cell(self, x: int, y: int) -> bool:
        """Flips a cell and returns its new state."""
        alive = not self.is_alive(x, y)
        self.set_alive(x, y, alive)
        if self.generation == 0:
            self.initial_cell_count = len(self.cells)
        return alive

    def neighbor_count(self, x: int, y: int) -> int:
        return sum((x + dx, y + dy) in self.cells for dx, dy in _NEIGHBOR_OFFSETS)

    def local_density(self, x: int, y: int) -> int:
        """Live cells in the 5x5 square centred on (x, y), the cell itself included."""
        r = DENSITY_RADIUS
        return sum(
            (x + dx, y + dy) in self.cells
            for dx in range(-r, r + 1)
            for dy in range(-r, r + 1)
        )

    def next_generation(self):
        """Applies B3/S23 once and updates the statistics."""
        to_check = {(x + dx, y + dy) for x, y in self.cells for dx in (-1, 0, 1) for dy in (-1, 0, 1)}

        new_cells = set()
        new_ages = {}
        births = 0
        deaths = 0
        for key in to_check:
            neighbors = self.neighbor_count(*key)
            alive = key in self.cells
            if alive and neighbors in (2, 3):
                new_cells.add(key)
                new_ages[key] = self.ages.get(key, 0) + 1
            elif not alive and neighbors == 3:
                new_cells.add(key)
                new_ages[key] = 0
                births += 1
            elif alive:
                deaths += 1

        self.cells = new_cells
        self.ages = new_ages
        self.generation += 1

        population = len(self.cells)
        self.births_this_generation = births
        self.deaths_this_generation = deaths
        self.total_births += births
        self.total_deaths += deaths
        self.peak_population = max(self.peak_population, population)

        if population == self.previous_population:
            self.stability_counter += 1
        else:
            self.stability_counter = 0
        self.previous_population = population

    def clear(self):
        self.cells.clear()
        self.ages.clear()
        self._reset_stats()

    def random_seed(self, cols: int, rows: int, center: tuple[int, int] = (0, 0), rng: np.random.Generator = None):
        """Clears the board and scatters cols * rows / 8 cells over a cols x rows window."""
        rng = rng or np.random.default_rng()
        self.clear()
        cx, cy = center
        for _ in range(int(cols * rows / 8)):
            x = cx + int(rng.integers(0, cols)) - cols // 2
            y = cy + int(rng.integers(0, rows)) - rows // 2
            self.set_alive(x, y)
        self.initial_cell_count = len(self.cells)

    def place_pattern(self, cells, origin: tuple[int, int] = (0, 0)):
        """Sets every cell of a pattern alive, offset by origin."""
        ox, oy = origin
        for x, y in cells:
            self.set_alive(ox + x, oy + y)
        if self.generation == 0:
            self.initial_cell_count = len(self.cells)

    def stability_label(self) -> str:
        if self.is_stable:
            return "STABLE"
        if self.stability_counter > 0:
            return f"{self.stability_counter}/{STABILITY_GENERATIONS}"
        return "CHANGING"

    def stats(self) -> dict:
        return {
            "generation": self.generation,
            "population": self.population,
            "initial_cells": self.initial_cell_count,
            "peak_population": self.peak_population,
            "births": self.births_this_generation,
            "deaths": self.deaths_this_generation,
            "total_births": self.total_births,
            "total_deaths": self.total_deaths,
            "stability": self.stability_label(),
        }
