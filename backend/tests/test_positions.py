import unittest
from types import SimpleNamespace

from app.errors import NotFoundError
from app.services.positions import apply_dense_positions, dense_updates, index_of, splice


def _items(*positions):
    return [SimpleNamespace(id=i + 1, position=p) for i, p in enumerate(positions)]


class TestSplice(unittest.TestCase):
    def test_move_forward(self) -> None:
        self.assertEqual(splice(["a", "b", "c", "d"], 0, 2), ["b", "c", "a", "d"])

    def test_move_backward(self) -> None:
        self.assertEqual(splice(["a", "b", "c"], 2, 0), ["c", "a", "b"])

    def test_same_index_keeps_order(self) -> None:
        self.assertEqual(splice(["a", "b", "c"], 1, 1), ["a", "b", "c"])

    def test_destination_is_clamped(self) -> None:
        self.assertEqual(splice(["a", "b", "c"], 0, 10), ["b", "c", "a"])
        self.assertEqual(splice(["a", "b", "c"], 2, -3), ["c", "a", "b"])

    def test_source_out_of_range(self) -> None:
        with self.assertRaises(IndexError):
            splice(["a"], 3, 0)

    def test_input_is_not_mutated(self) -> None:
        items = ["a", "b", "c"]
        splice(items, 0, 2)
        self.assertEqual(items, ["a", "b", "c"])


class TestDensePositions(unittest.TestCase):
    def test_only_changed_rows_are_reported(self) -> None:
        items = _items(0, 3, 2)
        updates = dense_updates(items)
        self.assertEqual([(item.id, position) for item, position in updates], [(2, 1)])

    def test_apply_makes_positions_dense(self) -> None:
        items = _items(4, 9, 9, 12)
        changed = apply_dense_positions(items)
        self.assertEqual(changed, 4)
        self.assertEqual([item.position for item in items], [0, 1, 2, 3])

    def test_already_dense(self) -> None:
        self.assertEqual(apply_dense_positions(_items(0, 1, 2)), 0)

    def test_index_of_unknown_id(self) -> None:
        with self.assertRaises(NotFoundError) as err:
            index_of(_items(0, 1), 42, "List")
        self.assertEqual(err.exception.message, "List 42 not found")


if __name__ == "__main__":
    unittest.main()
