import os
import random
import tempfile
import unittest
from unittest.mock import patch

from game import (
    Board,
    GameManager,
    MemoryStorage,
    SessionSnapshot,
    SnapshotError,
    SqliteStorage,
    Tile,
)


def make_board(rows):
    size = len(rows)
    board = Board(size)
    for y, row in enumerate(rows):
        for x, value in enumerate(row):
            if value:
                board.insert_tile(Tile((x, y), value))
    return board


class TestSessionSnapshot(unittest.TestCase):
    def _valid(self):
        board = make_board([[2, 0], [0, 4]])
        return SessionSnapshot.capture(board, 12, False, True, True).to_json()

    def test_given_snapshot_when_json_roundtrip_then_equal(self):
        data = self._valid()
        self.assertEqual(data["version"], 1)
        self.assertTrue(data["keepPlaying"])
        snap = SessionSnapshot.from_json(data)
        self.assertEqual(snap.to_json(), data)
        self.assertEqual(snap.board(), make_board([[2, 0], [0, 4]]))

    def test_given_unversioned_snapshot_when_loading_then_accepted(self):
        data = self._valid()
        del data["version"]
        snap = SessionSnapshot.from_json(data)
        self.assertEqual(snap.score, 12)

    def test_given_malformed_snapshots_when_loading_then_snapshot_error(self):
        bad_cases = []

        d = self._valid()
        d["version"] = 2
        bad_cases.append(d)

        d = self._valid()
        d["score"] = -1
        bad_cases.append(d)

        d = self._valid()
        d["over"] = "no"
        bad_cases.append(d)

        d = self._valid()
        d["grid"]["cells"][0][0]["position"] = {"x": 1, "y": 1}
        bad_cases.append(d)

        d = self._valid()
        d["grid"]["cells"][1][1]["value"] = 0
        bad_cases.append(d)

        d = self._valid()
        d["grid"]["cells"] = [[None, None]]
        bad_cases.append(d)

        d = self._valid()
        d["grid"]["size"] = True
        bad_cases.append(d)

        bad_cases.append([1, 2, 3])

        for case in bad_cases:
            with self.assertRaises(SnapshotError):
                SessionSnapshot.from_json(case)

    def test_given_other_board_size_when_loading_with_expected_size_then_snapshot_error(self):
        data = self._valid()
        self.assertEqual(SessionSnapshot.from_json(data, expected_size=2).grid["size"], 2)
        with self.assertRaises(SnapshotError):
            SessionSnapshot.from_json(data, expected_size=4)

    def test_given_snapshot_error_when_caught_as_value_error_then_matches(self):
        self.assertTrue(issubclass(SnapshotError, ValueError))


class TestMemoryStorage(unittest.TestCase):
    def test_given_state_when_stored_then_copies_returned(self):
        storage = MemoryStorage()
        self.assertIsNone(storage.get_game_state())
        self.assertEqual(storage.get_best_score(), 0)
        state = {"score": 1, "grid": {"size": 1, "cells": [[None]]}}
        storage.set_game_state(state)
        state["score"] = 99
        loaded = storage.get_game_state()
        self.assertEqual(loaded["score"], 1)
        loaded["score"] = 50
        self.assertEqual(storage.get_game_state()["score"], 1)
        storage.clear_game_state()
        self.assertIsNone(storage.get_game_state())


class TestSqliteStorage(unittest.TestCase):
    def setUp(self):
        self.tmp = tempfile.TemporaryDirectory()
        self.db_path = os.path.join(self.tmp.name, "nested", "merge2048.db")

    def tearDown(self):
        self.tmp.cleanup()

    def test_given_new_db_when_reading_then_defaults(self):
        storage = SqliteStorage(self.db_path)
        self.assertIsNone(storage.get_game_state())
        self.assertEqual(storage.get_best_score(), 0)
        self.assertTrue(os.path.isdir(os.path.dirname(self.db_path)))

    def test_given_values_when_stored_then_persist_across_instances(self):
        SqliteStorage(self.db_path, "a").set_best_score(2048)
        SqliteStorage(self.db_path, "a").set_game_state({"score": 8})
        reader = SqliteStorage(self.db_path, "a")
        self.assertEqual(reader.get_best_score(), 2048)
        self.assertEqual(reader.get_game_state(), {"score": 8})
        reader.clear_game_state()
        self.assertIsNone(SqliteStorage(self.db_path, "a").get_game_state())

    def test_given_unwritable_db_dir_when_opening_then_fallback_dir_used(self):
        fallback = os.path.join(self.tmp.name, "fallback")
        with patch.dict(os.environ, {"MERGE2048_DB_DIR": fallback}), \
                patch("merge2048_core.storage._make_parent_dir", side_effect=PermissionError):
            storage = SqliteStorage("/root-only/merge2048.db")
        self.assertEqual(storage.db_path, os.path.join(fallback, "merge2048.db"))
        storage.set_best_score(64)
        self.assertEqual(SqliteStorage(storage.db_path).get_best_score(), 64)

    def test_given_namespaces_when_storing_then_isolated(self):
        SqliteStorage(self.db_path, "a").set_best_score(16)
        self.assertEqual(SqliteStorage(self.db_path, "b").get_best_score(), 0)

    def test_given_sqlite_storage_when_game_resumed_then_same_board(self):
        storage = SqliteStorage(self.db_path, "session-1")
        first = GameManager(storage=storage, rng=random.Random(8))
        first.move(3)
        first.move(0)
        second = GameManager(storage=SqliteStorage(self.db_path, "session-1"), rng=random.Random(1))
        self.assertEqual(second.grid, first.grid)
        self.assertEqual(second.score, first.score)


if __name__ == '__main__':
    unittest.main(verbosity=2)
