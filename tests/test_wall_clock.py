import os
import unittest
from datetime import date, datetime, timedelta, timezone

os.environ.setdefault("DATABASE_URL", "sqlite+pysqlite:///:memory:")

from sqlalchemy import create_engine, text
from sqlalchemy.pool import StaticPool

from app.db.session import build_session_factory
from app.db.wall_clock import (
    from_storage,
    local_date,
    local_day_bounds,
    local_midnight,
    to_storage,
    utcnow,
)
from app.models.plant import Plant


class WallClockConversionTests(unittest.TestCase):
    def test_storage_value_is_naive_and_seven_hours_ahead(self):
        instant = datetime(2024, 3, 15, 20, 30, tzinfo=timezone.utc)
        stored = to_storage(instant)
        self.assertIsNone(stored.tzinfo)
        self.assertEqual(stored, datetime(2024, 3, 16, 3, 30))

    def test_round_trip_preserves_the_instant(self):
        for instant in (
            datetime(2024, 1, 1, 0, 0, tzinfo=timezone.utc),
            datetime(2024, 12, 31, 23, 59, 59, 999999, tzinfo=timezone.utc),
            datetime(2024, 6, 1, 12, 0, tzinfo=timezone(timedelta(hours=-5))),
        ):
            with self.subTest(instant=instant):
                self.assertEqual(from_storage(to_storage(instant)), instant)

    def test_write_then_read_returns_the_same_instant(self):
        written = datetime(2025, 1, 1, 11, 0, tzinfo=timezone.utc)
        self.assertEqual(to_storage(written), datetime(2025, 1, 1, 18, 0))
        self.assertEqual(from_storage(to_storage(written)), written)

    def test_none_passes_through(self):
        self.assertIsNone(to_storage(None))
        self.assertIsNone(from_storage(None))

    def test_local_day_helpers(self):
        self.assertEqual(local_midnight(date(2024, 3, 15)), datetime(2024, 3, 14, 17, 0, tzinfo=timezone.utc))
        start, end = local_day_bounds(datetime(2024, 3, 14, 18, 0, tzinfo=timezone.utc))
        self.assertEqual(start, local_midnight(date(2024, 3, 15)))
        self.assertEqual(end, local_midnight(date(2024, 3, 16)))
        self.assertEqual(local_date(datetime(2024, 3, 14, 16, 59, tzinfo=timezone.utc)), date(2024, 3, 14))


class WallClockColumnTests(unittest.TestCase):
    @classmethod
    def setUpClass(cls):
        cls.engine = create_engine(
            "sqlite+pysqlite:///:memory:",
            connect_args={"check_same_thread": False},
            poolclass=StaticPool,
        )
        cls.SessionLocal = build_session_factory(cls.engine)
        Plant.__table__.create(bind=cls.engine)

    @classmethod
    def tearDownClass(cls):
        Plant.__table__.drop(bind=cls.engine)
        cls.engine.dispose()

    def setUp(self):
        with self.SessionLocal() as db:
            db.query(Plant).delete()
            db.commit()

    def test_column_stores_wall_clock_and_reads_utc(self):
        instant = datetime(2024, 3, 15, 20, 30, tzinfo=timezone.utc)
        with self.SessionLocal() as db:
            plant = Plant(name="Plant A", subplant="Main", created_at=instant, updated_at=instant)
            db.add(plant)
            db.commit()
            plant_id = plant.id

        with self.engine.connect() as conn:
            raw = conn.execute(text("SELECT created_at FROM plants")).scalar_one()
        self.assertTrue(str(raw).startswith("2024-03-16 03:30:00"))

        with self.SessionLocal() as db:
            loaded = db.get(Plant, plant_id)
            self.assertEqual(loaded.created_at, instant)
            self.assertEqual(loaded.created_at.tzinfo, timezone.utc)

    def test_filter_values_are_shifted_like_stored_values(self):
        instant = datetime(2024, 3, 15, 20, 30, tzinfo=timezone.utc)
        with self.SessionLocal() as db:
            db.add(Plant(name="Plant A", subplant="Main", created_at=instant, updated_at=instant))
            db.commit()
            self.assertEqual(db.query(Plant).filter(Plant.created_at == instant).count(), 1)
            self.assertEqual(db.query(Plant).filter(Plant.created_at > instant).count(), 0)

    def test_timestamps_are_stamped_on_insert_and_update(self):
        before = utcnow()
        with self.SessionLocal() as db:
            plant = Plant(name="Plant B", subplant="Main")
            db.add(plant)
            db.commit()
            db.refresh(plant)
            created = plant.created_at
            self.assertGreaterEqual(created, before - timedelta(seconds=1))
            self.assertIsNotNone(plant.updated_at)

            plant.subplant = "East"
            db.commit()
            db.refresh(plant)
            self.assertEqual(plant.created_at, created)
            self.assertGreaterEqual(plant.updated_at, created)


if __name__ == "__main__":
    unittest.main()
