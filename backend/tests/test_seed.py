import unittest
from types import SimpleNamespace

from app.seed import sync_user_id_sequence


class FakeAsyncSession:
    def __init__(self, dialect_name: str) -> None:
        self.bind = SimpleNamespace(dialect=SimpleNamespace(name=dialect_name))
        self.executed = []

    async def execute(self, stmt):
        self.executed.append(stmt)


class TestSyncUserIdSequence(unittest.IsolatedAsyncioTestCase):
    async def test_postgres_sequence_is_moved_past_seeded_ids(self) -> None:
        db = FakeAsyncSession("postgresql")
        await sync_user_id_sequence(db)
        self.assertEqual(len(db.executed), 1)
        sql = str(db.executed[0])
        self.assertIn("setval(pg_get_serial_sequence('users', 'id')", sql)
        self.assertIn("GREATEST(MAX(id), 1) + 1", sql)

    async def test_other_backends_are_left_alone(self) -> None:
        db = FakeAsyncSession("sqlite")
        await sync_user_id_sequence(db)
        self.assertEqual(db.executed, [])


if __name__ == "__main__":
    unittest.main()
