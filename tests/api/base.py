import os
import unittest
from datetime import date, time, timedelta
from uuid import uuid4

from fastapi.testclient import TestClient
from sqlalchemy import create_engine, delete
from sqlalchemy.pool import StaticPool

# Ensure settings can be initialized in test environments
os.environ.setdefault("DATABASE_URL", "sqlite+pysqlite:///:memory:")

from app.core.config import settings
from app.core.security import create_jwt, hash_password
from app.db.session import build_session_factory, get_db
from app.db.wall_clock import local_midnight
from app.main import app
from app.models.child_part import ChildPart
from app.models.downtime_event import DowntimeEvent
from app.models.line import Line
from app.models.machine import Machine
from app.models.machine_type import MachineType
from app.models.machine_type_parameter import MachineTypeParameter
from app.models.notification import Notification
from app.models.oee_record import OeeRecord
from app.models.parameter import Parameter
from app.models.part import Part
from app.models.pdt_category import PdtCategory
from app.models.plant import Plant
from app.models.production_plan import ProductionPlan
from app.models.reject_criteria import RejectCriteria
from app.models.rejection_event import RejectionEvent
from app.models.shift import Shift
from app.models.updt_category import UpdtCategory
from app.models.user import User
from app.models.user_per_line import UserPerLine

# Creation order; rows are deleted in reverse.
MODELS = (
    Plant,
    Line,
    MachineType,
    Parameter,
    MachineTypeParameter,
    Machine,
    Part,
    ChildPart,
    Shift,
    PdtCategory,
    UpdtCategory,
    RejectCriteria,
    User,
    UserPerLine,
    ProductionPlan,
    OeeRecord,
    RejectionEvent,
    DowntimeEvent,
    Notification,
)


class ApiTestBase(unittest.TestCase):
    @classmethod
    def setUpClass(cls):
        cls.engine = create_engine(
            "sqlite+pysqlite:///:memory:",
            connect_args={"check_same_thread": False},
            poolclass=StaticPool,
        )
        cls.SessionLocal = build_session_factory(cls.engine)
        for model in MODELS:
            model.__table__.create(bind=cls.engine)

    @classmethod
    def tearDownClass(cls):
        for model in reversed(MODELS):
            model.__table__.drop(bind=cls.engine)
        cls.engine.dispose()

    def setUp(self):
        with self.SessionLocal() as db:
            for model in reversed(MODELS):
                db.execute(delete(model))
            db.commit()

        def override_get_db():
            db = self.SessionLocal()
            try:
                yield db
            finally:
                db.close()

        app.dependency_overrides[get_db] = override_get_db
        self.client = TestClient(app)

    def tearDown(self):
        self.client.close()
        app.dependency_overrides.clear()

    @staticmethod
    def _auth_headers(role: str = "ADMIN", user_id=None, npk: str = "000001", is_active: bool = True) -> dict[str, str]:
        token = create_jwt(
            {"userId": str(user_id or uuid4()), "npk": npk, "role": role, "isActive": is_active},
            settings.JWT_SECRET,
            timedelta(minutes=30),
        )
        return {"Authorization": f"Bearer {token}"}

    def _create_user(self, *, npk: str, password: str = "secret1", role: str = "USER", is_active: bool = True, name: str = "Test User"):
        with self.SessionLocal() as db:
            user = User(name=name, npk=npk, password_hash=hash_password(password), role=role, is_active=is_active)
            db.add(user)
            db.commit()
            db.refresh(user)
            return user.id

    def _seed_line(self, *, plant_name: str = "Plant A", line_name: str = "Line 1", shift_numbers=(1,)):
        """Plant, line, shifts and one part; returns their ids."""
        with self.SessionLocal() as db:
            plant = Plant(name=plant_name, subplant="Main")
            db.add(plant)
            db.flush()
            line = Line(name=line_name, plant_id=plant.id)
            db.add(line)
            db.flush()
            shifts = []
            for number in shift_numbers:
                shift = Shift(
                    line_id=line.id,
                    number=number,
                    work_start=time(7, 0),
                    work_end=time(15, 0),
                    break1_start=time(12, 0),
                    break1_end=time(13, 0),
                    loading_time_in_sec=7 * 3600,
                )
                db.add(shift)
                shifts.append(shift)
            part = Part(part_no=f"P-{line_name}", name=f"Bracket {line_name}", line_id=line.id, cycle_time_sec=30.0)
            db.add(part)
            db.commit()
            return {
                "plant_id": plant.id,
                "line_id": line.id,
                "shift_ids": [shift.id for shift in shifts],
                "shift_id": shifts[0].id if shifts else None,
                "part_id": part.id,
            }

    def _create_plan(self, ids: dict, *, work_order_no: str, day: date, sequence: int = 1, status: str = "OPEN", shift_id=None, **extra):
        with self.SessionLocal() as db:
            plan = ProductionPlan(
                work_order_no=work_order_no,
                plan_date=local_midnight(day),
                line_id=ids["line_id"],
                shift_id=shift_id or ids["shift_id"],
                part_id=ids["part_id"],
                cycle_time_sec=30.0,
                planned_qty=100,
                sequence=sequence,
                status=status,
                **extra,
            )
            db.add(plan)
            db.commit()
            return plan.id
