import unittest

from game import (
    Board,
    Direction,
    Tile,
    build_traversals,
    find_farthest_position,
    get_vector,
    moves_available,
    tile_matches_available,
    to_direction,
)


def make_board(rows):
    size = len(rows)
    board = Board(size)
    for y, row in enumerate(rows):
        for x, value in enumerate(row):
            if value:
                board.insert_tile(Tile((x, y), value))
    return board


class TestVectors(unittest.TestCase):
    def test_given_directions_when_getting_vectors_then_expected_values(self):
        self.assertEqual(get_vector(0), (0, -1))
        self.assertEqual(get_vector(1), (1, 0))
        self.assertEqual(get_vector(2), (0, 1))
        self.assertEqual(get_vector(3), (-1, 0))
        self.assertEqual(get_vector(Direction.LEFT), (-1, 0))

    def test_given_unknown_direction_when_converting_then_value_error(self):
        for bad in (4, -1, "up", None, True):
            with self.assertRaises(ValueError):
                to_direction(bad)
        self.assertIs(to_direction(2), Direction.DOWN)

    def test_given_vectors_when_building_traversals_then_reversed_towards_target_edge(self):
        self.assertEqual(build_traversals(4, (1, 0)), ([3, 2, 1, 0], [0, 1, 2, 3]))
        self.assertEqual(build_traversals(4, (0, 1)), ([0, 1, 2, 3], [3, 2, 1, 0]))
        self.assertEqual(build_traversals(4, (-1, 0)), ([0, 1, 2, 3], [0, 1, 2, 3]))
        self.assertEqual(build_traversals(4, (0, -1)), ([0, 1, 2, 3], [0, 1, 2, 3]))


class TestFarthestPosition(unittest.TestCase):
    def test_given_empty_row_when_sliding_left_then_stops_at_edge(self):
        board = make_board([
            [0, 0, 0, 2],
            [0, 0, 0, 0],
            [0, 0, 0, 0],
            [0, 0, 0, 0],
        ])
        farthest, nxt = find_farthest_position(board, (3, 0), (-1, 0))
        self.assertEqual(farthest, (0, 0))
        self.assertEqual(nxt, (-1, 0))

    def test_given_obstacle_when_sliding_then_next_is_obstacle(self):
        board = make_board([
            [4, 0, 0, 2],
            [0, 0, 0, 0],
            [0, 0, 0, 0],
            [0, 0, 0, 0],
        ])
        farthest, nxt = find_farthest_position(board, (3, 0), (-1, 0))
        self.assertEqual(farthest, (1, 0))
        self.assertEqual(nxt, (0, 0))

    def test_given_adjacent_tile_when_sliding_then_farthest_is_start(self):
        board = make_board([
            [4, 2, 0, 0],
            [0, 0, 0, 0],
            [0, 0, 0, 0],
            [0, 0, 0, 0],
        ])
        farthest, nxt = find_farthest_position(board, (1, 0), (-1, 0))
        self.assertEqual(farthest, (1, 0))
        self.assertEqual(nxt, (0, 0))


class TestMovesAvailable(unittest.TestCase):
    def test_given_full_board_without_pairs_when_checking_then_no_moves(self):
        board = make_board([
            [2, 4, 2, 4],
            [4, 2, 4, 2],
            [2, 4, 2, 4],
            [4, 2, 4, 2],
        ])
        self.assertFalse(tile_matches_available(board))
        self.assertFalse(moves_available(board))

    def test_given_full_board_with_vertical_pair_when_checking_then_moves(self):
        board = make_board([
            [2, 4, 2, 4],
            [4, 2, 4, 2],
            [2, 4, 2, 8],
            [4, 2, 4, 8],
        ])
        self.assertTrue(tile_matches_available(board))
        self.assertTrue(moves_available(board))

    def test_given_empty_cell_when_checking_then_moves(self):
        board = make_board([
            [2, 4, 2, 4],
            [4, 2, 4, 2],
            [2, 4, 2, 4],
            [4, 2, 4, 0],
        ])
        self.assertFalse(tile_matches_available(board))
        self.assertTrue(moves_available(board))


if __name__ == '__main__':
    unittest.main(verbosity=2)
