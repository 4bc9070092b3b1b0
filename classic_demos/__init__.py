# classic_demos/__init__.py

# This file makes the 'classic_demos' directory a Python package.
# It also defines the public API of the package.

from .sudoku import Cell, Grid, SudokuAnimator, StepResult, DEFAULT_PUZZLE
from .life import LifeBoard, PATTERNS

__all__ = ["Cell", "Grid", "SudokuAnimator", "StepResult", "DEFAULT_PUZZLE", "LifeBoard", "PATTERNS"]
