import random
import unittest

from game import Board, Tile


def make_board(rows):
    # rows[y][x], 0 = empty
    size = len(rows)
    board = Board(size)
    for y, row in enumerate(rows):
        assert len(row) == size
        for x, value in enumerate(row):
            if value:
                board.insert_tile(Tile((x, y), value))
    return board


class TestTile(unittest.TestCase):
    def test_given_non_positive_value_when_creating_tile_then_value_error(self):
        with self.assertRaises(ValueError):
            Tile((0, 0), 0)
        with self.assertRaises(ValueError):
            Tile((0, 0), -2)
        with self.assertRaises(ValueError):
            Tile((0, 0), True)

    def test_given_tile_when_saving_and_updating_position_then_previous_kept(self):
        tile = Tile((1, 2), 4)
        tile.save_position()
        tile.update_position((3, 2))
        self.assertEqual(tile.position, (3, 2))
        self.assertEqual(tile.previous_position, (1, 2))
        self.assertEqual((tile.x, tile.y), (3, 2))

    def test_given_tile_when_serialized_then_transient_fields_only_in_snapshot(self):
        tile = Tile((0, 1), 8)
        tile.save_position()
        tile.merged_from = (11, 12)
        self.assertEqual(tile.serialize(), {"position": {"x": 0, "y": 1}, "value": 8})
        snap = tile.snapshot()
        self.assertEqual(snap["previousPosition"], {"x": 0, "y": 1})
        self.assertEqual(snap["mergedFrom"], [11, 12])
        tile.clear_merge()
        self.assertIsNone(tile.snapshot()["mergedFrom"])

    def test_given_two_tiles_when_created_then_ids_are_distinct(self):
        self.assertNotEqual(Tile((0, 0), 2).id, Tile((0, 0), 2).id)


class TestBoard(unittest.TestCase):
    def test_given_new_board_when_queried_then_all_cells_available(self):
        board = Board(4)
        self.assertTrue(board.cells_available())
        self.assertEqual(len(board.available_cells()), 16)
        self.assertEqual(board.tiles(), [])
        self.assertTrue(board.within_bounds((3, 3)))
        self.assertFalse(board.within_bounds((4, 0)))
        self.assertFalse(board.within_bounds((0, -1)))
        self.assertIsNone(board.cell_content((-1, 0)))

    def test_given_tile_when_inserted_and_removed_then_cell_updates(self):
        board = Board(4)
        tile = Tile((2, 1), 2)
        board.insert_tile(tile)
        self.assertIs(board.cell_content((2, 1)), tile)
        self.assertTrue(board.cell_occupied((2, 1)))
        self.assertFalse(board.cell_available((2, 1)))
        board.remove_tile(tile)
        self.assertTrue(board.cell_available((2, 1)))

    def test_given_occupied_cell_when_inserting_then_value_error(self):
        board = Board(4)
        board.insert_tile(Tile((0, 0), 2))
        with self.assertRaises(ValueError):
            board.insert_tile(Tile((0, 0), 4))
        with self.assertRaises(ValueError):
            board.insert_tile(Tile((4, 0), 4))

    def test_given_full_board_when_random_available_cell_then_value_error(self):
        board = make_board([[2, 4], [4, 2]])
        self.assertFalse(board.cells_available())
        with self.assertRaises(ValueError):
            board.random_available_cell(random.Random(0))

    def test_given_one_empty_cell_when_random_available_cell_then_that_cell(self):
        board = make_board([[2, 4], [0, 2]])
        self.assertEqual(board.random_available_cell(random.Random(3)), (0, 1))

    def test_given_board_when_iterating_cells_then_x_major_order(self):
        board = Board(2)
        self.assertEqual([(x, y) for x, y, _ in board.each_cell()], [(0, 0), (0, 1), (1, 0), (1, 1)])

    def test_given_board_when_moving_tile_then_old_cell_freed(self):
        board = Board(4)
        tile = Tile((3, 0), 2)
        board.insert_tile(tile)
        board.move_tile(tile, (0, 0))
        self.assertIsNone(board.cell_content((3, 0)))
        self.assertIs(board.cell_content((0, 0)), tile)
        self.assertEqual(tile.position, (0, 0))

    def test_given_board_when_serialize_roundtrip_then_equal(self):
        board = make_board([
            [2, 0, 0, 4],
            [0, 8, 0, 0],
            [0, 0, 16, 0],
            [32768, 0, 0, 2],
        ])
        data = board.serialize()
        self.assertEqual(data["size"], 4)
        self.assertEqual(data["cells"][3][0], {"position": {"x": 3, "y": 0}, "value": 4})
        self.assertIsNone(data["cells"][1][0])
        rebuilt = Board.from_serialized(data)
        self.assertEqual(rebuilt, board)
        self.assertIsNot(rebuilt.cell_content((0, 0)), board.cell_content((0, 0)))

    def test_given_boards_with_different_values_when_compared_then_not_equal(self):
        self.assertNotEqual(make_board([[2, 0], [0, 0]]), make_board([[4, 0], [0, 0]]))
        self.assertNotEqual(Board(2), Board(3))

    def test_given_board_when_values_and_pretty_then_rows_by_y(self):
        board = make_board([
            [2, 0],
            [0, 128],
        ])
        self.assertEqual(board.values(), ((2, 0), (0, 128)))
        txt = board.pretty()
        lines = txt.splitlines()
        self.assertEqual(len(lines), 2)
        self.assertIn("128", lines[1])
        self.assertIn(".", lines[0])


if __name__ == '__main__':
    unittest.main(verbosity=2)
