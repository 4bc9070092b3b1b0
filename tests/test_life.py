"""
Tests for the Game of Life board
"""
import numpy as np

from classic_demos.life import PATTERNS, LifeBoard


def test_blinker_oscillates():
    """Test that a blinker flips between horizontal and vertical"""
    board = LifeBoard(PATTERNS["blinker"])
    board.next_generation()
    assert board.cells == {(1, -1), (1, 0), (1, 1)}
    assert board.births_this_generation == 2
    assert board.deaths_this_generation == 2
    board.next_generation()
    assert board.cells == {(0, 0), (1, 0), (2, 0)}
    assert board.generation == 2


def test_ages():
    """Test that survivors age and newborns start at zero"""
    board = LifeBoard(PATTERNS["blinker"])
    board.next_generation()
    assert board.ages == {(1, -1): 0, (1, 0): 1, (1, 1): 0}


def test_block_becomes_stable():
    """Test the stability counter on a still life"""
    board = LifeBoard(PATTERNS["block"])
    for _ in range(3):
        board.next_generation()
    assert not board.is_stable
    assert board.stability_label() == "2/3"
    board.next_generation()
    assert board.is_stable
    assert board.stats()["stability"] == "STABLE"


def test_glider_moves_diagonally():
    """Test that a glider shifts by (1, 1) every four generations"""
    board = LifeBoard(PATTERNS["glider"])
    for _ in range(4):
        board.next_generation()
    assert board.cells == {(x + 1, y + 1) for x, y in PATTERNS["glider"]}


def test_statistics():
    """Test peak population and running totals"""
    board = LifeBoard(PATTERNS["r_pentomino"])
    for _ in range(10):
        board.next_generation()
    assert board.peak_population >= board.population
    assert board.total_births - board.total_deaths == board.population - 5
    assert board.initial_cell_count == 5


def test_neighbor_count_and_density():
    """Test the 3x3 neighbour count and the 5x5 density"""
    board = LifeBoard(PATTERNS["block"])
    assert board.neighbor_count(0, 0) == 3
    assert board.neighbor_count(2, 2) == 1
    assert board.local_density(0, 0) == 4
    assert board.local_density(5, 5) == 0


def test_toggle_and_clear():
    """Test toggling cells and clearing the board"""
    board = LifeBoard()
    assert board.toggle_cell(3, 4)
    assert board.is_alive(3, 4)
    assert board.initial_cell_count == 1
    assert not board.toggle_cell(3, 4)
    assert board.population == 0
    board.place_pattern(PATTERNS["glider"], origin=(10, 10))
    board.next_generation()
    board.clear()
    assert board.population == 0
    assert board.generation == 0
    assert board.ages == {}


def test_place_pattern_offsets_cells():
    """Test that a pattern is placed at its origin"""
    board = LifeBoard()
    board.place_pattern(PATTERNS["blinker"], origin=(-5, 7))
    assert board.cells == {(-5, 7), (-4, 7), (-3, 7)}


def test_random_seed_stays_in_window():
    """Test the random fill around a centre"""
    board = LifeBoard()
    board.random_seed(40, 20, center=(100, -50), rng=np.random.default_rng(3))
    assert 0 < board.population <= 40 * 20 // 8
    for x, y in board.cells:
        assert 80 <= x < 120
        assert -60 <= y < -40
    assert set(board.ages) == board.cells
