import logging
from datetime import datetime, timedelta, timezone

from tests.api.base import *  # noqa: F401,F403

from app.core.errors import InvalidSearchFilter
from app.models.machine_type import STATUS_DELETED
from app.repositories import lines as line_repo
from app.repositories import machine_type_parameters as mtp_repo
from app.repositories import machines as machine_repo
from app.repositories import plants as plant_repo
from app.repositories.base import fetch_page
from app.schemas.master_data import LineQuery, MachineQuery, MachineTypeParameterQuery
from app.schemas.query import ListQuery

_BASE_TIME = datetime(2024, 5, 1, 8, 0, tzinfo=timezone.utc)


def _query(model=ListQuery, **payload):
    return model.model_validate(payload)


def _filter(column, operator, value, type_):
    return {"column": column, "operator": operator, "value": value, "type": type_}


class ListingTests(ApiTestBase):
    def _seed_plants(self, names, **overrides):
        with self.SessionLocal() as db:
            for index, name in enumerate(names):
                stamp = _BASE_TIME + timedelta(minutes=index)
                db.add(Plant(name=name, subplant="Main", created_at=stamp, updated_at=stamp, **overrides))
            db.commit()

    def _names(self, result):
        return [row.name for row in result.rows]

    def test_second_page_of_twelve(self):
        self._seed_plants([f"Plant {index:02d}" for index in range(1, 13)])
        with self.SessionLocal() as db:
            result = plant_repo.get_all(db, _query(page=2, limit=5))
        # Default order is newest first: Plant 12 .. Plant 01.
        self.assertEqual(self._names(result), ["Plant 07", "Plant 06", "Plant 05", "Plant 04", "Plant 03"])
        self.assertEqual(result.pagination.model_dump(by_alias=True), {"page": 2, "limit": 5, "total": 12, "totalPages": 3})

    def test_last_page_is_short_and_past_the_end_is_empty(self):
        self._seed_plants([f"Plant {index:02d}" for index in range(1, 13)])
        with self.SessionLocal() as db:
            last = plant_repo.get_all(db, _query(page=3, limit=5))
            beyond = plant_repo.get_all(db, _query(page=9, limit=5))
        self.assertEqual(len(last.rows), 2)
        self.assertEqual(beyond.rows, [])
        self.assertEqual(beyond.pagination.total, 12)

    def test_contains_filter(self):
        self._seed_plants(["Line A1", "Line A2", "Line B"])
        params = _query(searchFilters=[_filter("name", "contains", "Line A", "string")], sortBy="name", sortOrder="asc")
        with self.SessionLocal() as db:
            result = plant_repo.get_all(db, params)
        self.assertEqual(self._names(result), ["Line A1", "Line A2"])
        self.assertEqual(result.pagination.total, 2)

    def test_contains_filter_is_case_insensitive_and_escapes_wildcards(self):
        self._seed_plants(["Press 100%", "Press 1000", "press small"])
        with self.SessionLocal() as db:
            wildcard = plant_repo.get_all(db, _query(searchFilters=[_filter("name", "contains", "100%", "string")]))
            folded = plant_repo.get_all(db, _query(searchFilters=[_filter("name", "startsWith", "PRESS", "string")]))
        self.assertEqual(self._names(wildcard), ["Press 100%"])
        self.assertEqual(folded.pagination.total, 3)

    def test_soft_deleted_rows_never_appear(self):
        self._seed_plants(["Alive"])
        self._seed_plants(["Gone"], deleted_at=_BASE_TIME)
        with self.SessionLocal() as db:
            plain = plant_repo.get_all(db, _query())
            targeted = plant_repo.get_all(db, _query(searchFilters=[_filter("name", "equals", "Gone", "string")]))
        self.assertEqual(self._names(plain), ["Alive"])
        self.assertEqual(targeted.rows, [])
        self.assertEqual(targeted.pagination.total, 0)

    def test_unknown_column_is_ignored(self):
        self._seed_plants(["North", "South"])
        with self.SessionLocal() as db:
            baseline = plant_repo.get_all(db, _query())
            with self.assertLogs("app.query", level=logging.WARNING):
                with_unknown = plant_repo.get_all(db, _query(searchFilters=[_filter("colour", "equals", "red", "string")]))
        self.assertEqual(self._names(with_unknown), self._names(baseline))
        self.assertEqual(with_unknown.pagination, baseline.pagination)

    def test_unparsable_value_is_ignored(self):
        self._seed_plants(["North", "South"])
        with self.SessionLocal() as db:
            result = plant_repo.get_all(db, _query(searchFilters=[_filter("createdAt", "before", "not-a-date", "date")]))
        self.assertEqual(result.pagination.total, 2)

    def test_filters_on_distinct_columns_compose_with_and(self):
        self._seed_plants(["Alpha", "Apex"])
        self._seed_plants(["Atlas", "Beta"], is_active=False)
        params = _query(
            searchFilters=[
                _filter("name", "contains", "A", "string"),
                _filter("isActive", "equals", "false", "boolean"),
            ]
        )
        with self.SessionLocal() as db:
            result = plant_repo.get_all(db, params)
        self.assertEqual(self._names(result), ["Atlas"])

    def test_filters_on_the_same_column_all_apply(self):
        self._seed_plants([f"Plant {index}" for index in range(1, 6)])
        params = _query(
            searchFilters=[
                _filter("createdAt", "after", (_BASE_TIME + timedelta(seconds=30)).isoformat(), "date"),
                _filter("createdAt", "before", (_BASE_TIME + timedelta(minutes=3, seconds=30)).isoformat(), "date"),
            ],
            sortBy="createdAt",
            sortOrder="asc",
        )
        with self.SessionLocal() as db:
            result = plant_repo.get_all(db, params)
        self.assertEqual(self._names(result), ["Plant 2", "Plant 3", "Plant 4"])

    def test_date_equals_matches_the_wall_clock_day(self):
        # 16:30 UTC is 23:30 local on May 1st, 17:30 UTC is already May 2nd locally.
        with self.SessionLocal() as db:
            for name, stamp in (
                ("Late", datetime(2024, 5, 1, 16, 30, tzinfo=timezone.utc)),
                ("Next day", datetime(2024, 5, 1, 17, 30, tzinfo=timezone.utc)),
            ):
                db.add(Plant(name=name, subplant="Main", created_at=stamp, updated_at=stamp))
            db.commit()
            result = plant_repo.get_all(db, _query(searchFilters=[_filter("createdAt", "equals", "2024-05-01", "date")]))
        self.assertEqual(self._names(result), ["Late"])

    def test_filter_typed_for_another_column_kind_is_ignored(self):
        self._seed_plants(["North", "South"])
        mismatched = [
            _filter("createdAt", "contains", "2024", "string"),
            _filter("createdAt", "gt", "5", "number"),
            _filter("isActive", "equals", "1", "number"),
            _filter("name", "equals", "true", "boolean"),
        ]
        with self.SessionLocal() as db:
            baseline = plant_repo.get_all(db, _query())
            for search_filter in mismatched:
                with self.subTest(search_filter=search_filter):
                    with self.assertLogs("app.query", level=logging.WARNING):
                        result = plant_repo.get_all(db, _query(searchFilters=[search_filter]))
                    self.assertEqual(self._names(result), self._names(baseline))
                    self.assertEqual(result.pagination, baseline.pagination)
            with self.assertRaises(InvalidSearchFilter):
                fetch_page(db, plant_repo.LISTING, _query(searchFilters=[mismatched[0]]), strict=True)

    def test_filter_typed_for_another_column_kind_is_ignored_over_http(self):
        self._seed_plants(["North", "South"])
        for search_filter in (
            _filter("createdAt", "contains", "2024", "string"),
            _filter("createdAt", "gt", "5", "number"),
        ):
            with self.subTest(search_filter=search_filter):
                response = self.client.post(
                    "/api/plants/query",
                    headers=self._auth_headers("ADMIN"),
                    json={"searchFilters": [search_filter]},
                )
                self.assertEqual(response.status_code, 200)
                self.assertEqual(response.json()["pagination"]["total"], 2)

    def test_limit_above_max_page_size_is_rejected(self):
        response = self.client.post("/api/plants/query", headers=self._auth_headers("ADMIN"), json={"limit": 501})
        self.assertEqual(response.status_code, 422)

    def test_date_equals_with_a_time_matches_only_that_instant(self):
        with self.SessionLocal() as db:
            for name, stamp in (
                ("Exact", datetime(2024, 5, 1, 3, 0, tzinfo=timezone.utc)),
                ("SameDay", datetime(2024, 5, 1, 9, 0, tzinfo=timezone.utc)),
            ):
                db.add(Plant(name=name, subplant="Main", created_at=stamp, updated_at=stamp))
            db.commit()
            exact = plant_repo.get_all(db, _query(searchFilters=[_filter("createdAt", "equals", "2024-05-01T03:00:00Z", "date")]))
            whole_day = plant_repo.get_all(
                db, _query(searchFilters=[_filter("createdAt", "equals", "2024-05-01", "date")], sortBy="name", sortOrder="asc")
            )
        self.assertEqual(self._names(exact), ["Exact"])
        self.assertEqual(self._names(whole_day), ["Exact", "SameDay"])

    def test_unknown_sort_falls_back_to_default(self):
        self._seed_plants(["Bravo", "Alpha", "Charlie"])
        with self.SessionLocal() as db:
            with self.assertLogs("app.query", level=logging.WARNING):
                result = plant_repo.get_all(db, _query(sortBy="colour", sortOrder="asc"))
        self.assertEqual(self._names(result), ["Charlie", "Alpha", "Bravo"])

    def test_scoping_clause_restricts_rows(self):
        first = self._seed_line(plant_name="Plant A", line_name="Line A1")
        self._seed_line(plant_name="Plant B", line_name="Line B1")
        with self.SessionLocal() as db:
            result = line_repo.get_all(db, _query(LineQuery, plantId=str(first["plant_id"])))
        self.assertEqual(self._names(result), ["Line A1"])

    def _seed_machines(self):
        west = self._seed_line(plant_name="West Plant", line_name="Assembly")
        east = self._seed_line(plant_name="East Plant", line_name="Welding")
        with self.SessionLocal() as db:
            press = MachineType(name="Press", code="PRS")
            retired = MachineType(name="Old Lathe", code="LTH", status=STATUS_DELETED)
            db.add_all([press, retired])
            db.flush()
            db.add_all(
                [
                    Machine(name="M-1", line_id=west["line_id"], machine_type_id=press.id, sequence=1),
                    Machine(name="M-2", line_id=east["line_id"], machine_type_id=press.id, sequence=1),
                    Machine(name="M-3", line_id=east["line_id"], machine_type_id=press.id, sequence=2),
                    Machine(name="M-4", line_id=west["line_id"], machine_type_id=retired.id, sequence=3),
                ]
            )
            db.commit()

    def test_nested_relation_filter(self):
        self._seed_machines()
        params = _query(MachineQuery, searchFilters=[_filter("plantName", "equals", "East Plant", "string")])
        with self.SessionLocal() as db:
            result = machine_repo.get_all(db, params)
        self.assertEqual(sorted(self._names(result)), ["M-2", "M-3"])

    def test_default_sort_walks_relations(self):
        self._seed_machines()
        with self.SessionLocal() as db:
            result = machine_repo.get_all(db, _query(MachineQuery))
        # sequence, then plant name, then line name; M-4 hangs off a retired type.
        self.assertEqual(self._names(result), ["M-2", "M-1", "M-3"])
        self.assertEqual(result.rows[0].line.plant.name, "East Plant")

    def test_sort_by_related_column(self):
        self._seed_machines()
        with self.SessionLocal() as db:
            result = machine_repo.get_all(db, _query(MachineQuery, sortBy="lineName", sortOrder="desc"))
        names = self._names(result)
        self.assertEqual(sorted(names[:2]), ["M-2", "M-3"])
        self.assertEqual(names[2], "M-1")

    def test_inactive_joined_reference_is_excluded(self):
        with self.SessionLocal() as db:
            press = MachineType(name="Press", code="PRS")
            live = Parameter(name="Pressure", unit="bar", opc_tag_name="ns=2;s=Pressure")
            retired = Parameter(name="Speed", unit="rpm", opc_tag_name="ns=2;s=Speed", status=STATUS_DELETED)
            db.add_all([press, live, retired])
            db.flush()
            db.add_all(
                [
                    MachineTypeParameter(machine_type_id=press.id, parameter_id=live.id),
                    MachineTypeParameter(machine_type_id=press.id, parameter_id=retired.id),
                ]
            )
            db.commit()
            params = _query(MachineTypeParameterQuery, searchFilters=[_filter("machineTypeCode", "equals", "PRS", "string")])
            result = mtp_repo.get_all(db, params)
            names = [row.parameter.name for row in result.rows]
        self.assertEqual(names, ["Pressure"])
        self.assertEqual(result.pagination.total, 1)

    def test_strict_mode_raises_instead_of_dropping(self):
        self._seed_plants(["North"])
        with self.SessionLocal() as db:
            with self.assertRaises(InvalidSearchFilter):
                fetch_page(
                    db,
                    plant_repo.LISTING,
                    _query(searchFilters=[_filter("colour", "equals", "red", "string")]),
                    strict=True,
                )
            with self.assertRaises(InvalidSearchFilter):
                fetch_page(
                    db,
                    plant_repo.LISTING,
                    _query(searchFilters=[_filter("createdAt", "after", "soon", "date")]),
                    strict=True,
                )

    def test_strict_mode_returns_400_over_http(self):
        self._seed_plants(["North"])
        original = settings.STRICT_SEARCH_FILTERS
        settings.STRICT_SEARCH_FILTERS = True
        try:
            response = self.client.post(
                "/api/plants/query",
                headers=self._auth_headers("ADMIN"),
                json={"searchFilters": [_filter("colour", "equals", "red", "string")]},
            )
        finally:
            settings.STRICT_SEARCH_FILTERS = original
        self.assertEqual(response.status_code, 400)
        self.assertFalse(response.json()["success"])
