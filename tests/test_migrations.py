import os
import unittest
from pathlib import Path

from alembic import command
from alembic.config import Config
from sqlalchemy import create_engine, inspect, text
from sqlalchemy.engine import make_url

PROJECT_ROOT = Path(__file__).resolve().parents[1]


def _alembic_config(url) -> Config:
    # No ini file: keeps alembic from reconfiguring logging for the rest of the run.
    cfg = Config()
    cfg.set_main_option("script_location", str(PROJECT_ROOT / "alembic"))
    cfg.set_main_option("sqlalchemy.url", url.render_as_string(hide_password=False).replace("%", "%%"))
    return cfg


class MigrationTests(unittest.TestCase):
    """Runs ``upgrade head`` against a scratch PostgreSQL database."""

    @classmethod
    def setUpClass(cls):
        raw_url = os.getenv("DATABASE_URL", "")
        if not raw_url.startswith("postgresql"):
            raise unittest.SkipTest("migrations are checked against PostgreSQL only")

        base = make_url(raw_url)
        cls.scratch_name = f"{base.database}_schema_check"
        cls.scratch_url = base.set(database=cls.scratch_name)
        cls.server = create_engine(base.set(database="postgres"), isolation_level="AUTOCOMMIT")

        cls._recreate_scratch(create=True)
        command.upgrade(_alembic_config(cls.scratch_url), "head")

        cls.engine = create_engine(cls.scratch_url)
        cls.inspector = inspect(cls.engine)

    @classmethod
    def tearDownClass(cls):
        if getattr(cls, "engine", None) is not None:
            cls.engine.dispose()
        if getattr(cls, "server", None) is not None:
            cls._recreate_scratch(create=False)
            cls.server.dispose()

    @classmethod
    def _recreate_scratch(cls, *, create: bool):
        with cls.server.connect() as conn:
            conn.execute(
                text(
                    "SELECT pg_terminate_backend(pid) FROM pg_stat_activity "
                    "WHERE datname = :name AND pid <> pg_backend_pid()"
                ),
                {"name": cls.scratch_name},
            )
            conn.execute(text(f'DROP DATABASE IF EXISTS "{cls.scratch_name}"'))
            if create:
                conn.execute(text(f'CREATE DATABASE "{cls.scratch_name}"'))

    def test_head_revision_is_recorded(self):
        with self.engine.connect() as conn:
            version = conn.execute(text("SELECT version_num FROM alembic_version")).scalar_one()
        self.assertEqual(version, "0001_init")

    def test_every_model_table_exists_with_the_same_columns(self):
        from app.db.session import load_models

        metadata = load_models()
        migrated_tables = set(self.inspector.get_table_names())
        self.assertEqual(len(metadata.sorted_tables), 19)
        for table in metadata.sorted_tables:
            with self.subTest(table=table.name):
                self.assertIn(table.name, migrated_tables)
                migrated = {column["name"] for column in self.inspector.get_columns(table.name)}
                self.assertEqual(migrated, {column.name for column in table.columns})

    def test_wall_clock_columns_are_stored_without_zone(self):
        for table, column_name in (
            ("production_plans", "plan_date"),
            ("plants", "created_at"),
            ("rejection_events", "occurred_at"),
        ):
            with self.subTest(table=table, column=column_name):
                columns = {column["name"]: column for column in self.inspector.get_columns(table)}
                self.assertFalse(getattr(columns[column_name]["type"], "timezone", False))

    def test_downgrade_removes_the_schema(self):
        cfg = _alembic_config(self.scratch_url)
        command.downgrade(cfg, "base")
        try:
            remaining = set(inspect(self.engine).get_table_names()) - {"alembic_version"}
            self.assertEqual(remaining, set())
        finally:
            command.upgrade(cfg, "head")
