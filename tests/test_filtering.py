import os
import unittest
from datetime import date, datetime, timedelta, timezone

os.environ.setdefault("DATABASE_URL", "sqlite+pysqlite:///:memory:")

from pydantic import ValidationError

from app.db.session import load_models
from app.db.wall_clock import local_midnight
from app.schemas.query import OPERATORS_BY_TYPE, ListQuery, Pagination, SearchFilter
from app.services.filtering import (
    Condition,
    boolean_condition,
    build_condition,
    date_condition,
    column_value_type,
    number_condition,
    parse_date_value,
    string_condition,
)

_SAMPLE_VALUES = {"string": "abc", "number": "42", "date": "2024-03-15", "boolean": "true"}
_ALL_OPERATORS = sorted({op for ops in OPERATORS_BY_TYPE.values() for op in ops})


class TranslatorTests(unittest.TestCase):
    def test_every_legal_pair_yields_a_condition(self):
        for value_type, operators in OPERATORS_BY_TYPE.items():
            for operator in operators:
                with self.subTest(type=value_type, operator=operator):
                    self.assertIsNotNone(build_condition(operator, _SAMPLE_VALUES[value_type], value_type))

    def test_illegal_pairs_yield_none(self):
        for value_type, operators in OPERATORS_BY_TYPE.items():
            for operator in set(_ALL_OPERATORS) - operators:
                with self.subTest(type=value_type, operator=operator):
                    self.assertIsNone(build_condition(operator, _SAMPLE_VALUES[value_type], value_type))

    def test_unknown_type_yields_none(self):
        self.assertIsNone(build_condition("equals", "x", "uuid"))

    def test_string_operators_map_to_case_insensitive_matches(self):
        self.assertEqual(string_condition("equals", "Line"), Condition("eq", "Line"))
        self.assertEqual(string_condition("contains", "ine"), Condition("icontains", "ine"))
        self.assertEqual(string_condition("startsWith", "Li"), Condition("istartswith", "Li"))
        self.assertEqual(string_condition("endsWith", "ne"), Condition("iendswith", "ne"))

    def test_number_parses_value(self):
        self.assertEqual(number_condition("gte", "2.5"), Condition("gte", 2.5))
        self.assertEqual(number_condition("equals", " 7 "), Condition("eq", 7.0))

    def test_number_rejects_garbage(self):
        for raw in ("", "abc", "nan", "inf", "-Infinity", "1,5"):
            with self.subTest(raw=raw):
                self.assertIsNone(number_condition("gt", raw))

    def test_boolean_accepts_only_true_or_false(self):
        self.assertEqual(boolean_condition("equals", "TRUE"), Condition("eq", True))
        self.assertEqual(boolean_condition("equals", "false"), Condition("eq", False))
        self.assertIsNone(boolean_condition("equals", "yes"))
        self.assertIsNone(boolean_condition("equals", "1"))

    def test_date_equals_covers_the_whole_wall_clock_day(self):
        condition = date_condition("equals", "2024-03-15")
        self.assertEqual(condition.op, "range")
        self.assertEqual(condition.value, local_midnight(date(2024, 3, 15)))
        self.assertEqual(condition.upper - condition.value, timedelta(days=1))
        self.assertEqual(condition.value, datetime(2024, 3, 14, 17, 0, tzinfo=timezone.utc))

    def test_date_equals_with_a_time_matches_that_instant(self):
        condition = date_condition("equals", "2024-03-15T03:00:00Z")
        self.assertEqual(condition, Condition("eq", datetime(2024, 3, 15, 3, 0, tzinfo=timezone.utc)))

    def test_date_before_and_after_use_the_instant(self):
        before = date_condition("before", "2024-03-15T10:00:00Z")
        self.assertEqual(before, Condition("lt", datetime(2024, 3, 15, 10, 0, tzinfo=timezone.utc)))
        after = date_condition("after", "2024-03-15")
        self.assertEqual(after, Condition("gt", local_midnight(date(2024, 3, 15))))

    def test_date_rejects_garbage(self):
        for raw in ("", "yesterday", "2024-13-01", "15/03/2024"):
            with self.subTest(raw=raw):
                self.assertIsNone(date_condition("equals", raw))

    def test_parse_date_value_treats_naive_datetimes_as_utc(self):
        parsed = parse_date_value("2024-03-15T08:30:00")
        self.assertEqual(parsed, datetime(2024, 3, 15, 8, 30, tzinfo=timezone.utc))
        self.assertEqual(parse_date_value("2024-03-15"), date(2024, 3, 15))

    def test_column_value_type_follows_the_mapped_column(self):
        from app.models.plant import Plant
        from app.models.production_plan import ProductionPlan
        from app.models.shift import Shift

        load_models()
        self.assertEqual(column_value_type(Plant.name), "string")
        self.assertEqual(column_value_type(Plant.is_active), "boolean")
        self.assertEqual(column_value_type(Plant.created_at), "date")
        self.assertEqual(column_value_type(ProductionPlan.sequence), "number")
        self.assertEqual(column_value_type(ProductionPlan.cycle_time_sec), "number")
        self.assertIsNone(column_value_type(Shift.work_start))


class QueryWireModelTests(unittest.TestCase):
    def test_search_filter_reads_camel_case_and_stringifies_scalars(self):
        flt = SearchFilter.model_validate({"column": "isActive", "operator": "equals", "value": True, "type": "boolean"})
        self.assertEqual(flt.value, "true")
        flt = SearchFilter.model_validate({"column": "sequence", "operator": "gt", "value": 3, "type": "number"})
        self.assertEqual(flt.value, "3")

    def test_operator_type_mismatch_is_rejected(self):
        with self.assertRaises(ValidationError):
            SearchFilter.model_validate({"column": "name", "operator": "gt", "value": "a", "type": "string"})
        with self.assertRaises(ValidationError):
            SearchFilter.model_validate({"column": "name", "operator": "like", "value": "a", "type": "string"})

    def test_list_query_defaults_and_limits(self):
        query = ListQuery.model_validate({})
        self.assertEqual(query.page, 1)
        self.assertEqual(query.limit, 10)
        self.assertEqual(query.search_filters, [])
        self.assertEqual(ListQuery.model_validate({"page": 3, "limit": 10}).skip, 20)
        self.assertEqual(ListQuery.model_validate({"limit": 500}).limit, 500)
        with self.assertRaises(ValidationError):
            ListQuery.model_validate({"limit": 501})
        with self.assertRaises(ValidationError):
            ListQuery.model_validate({"page": 0})

    def test_pagination_counts_pages(self):
        pagination = Pagination.build(page=2, limit=5, total=12)
        self.assertEqual(pagination.total_pages, 3)
        self.assertEqual(pagination.model_dump(by_alias=True), {"page": 2, "limit": 5, "total": 12, "totalPages": 3})
        self.assertEqual(Pagination.build(page=1, limit=10, total=0).total_pages, 0)


if __name__ == "__main__":
    unittest.main()
