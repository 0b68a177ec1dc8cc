from django.test import SimpleTestCase

from apps.records.services.filters import apply_filters, matches, paginate, search_records, sort_records
from apps.records.services.scoring import calculate_score, priority_for
from apps.records.services.duplicates import values_match
from apps.records.services.assignment import pick_least_loaded, pick_round_robin

RECORDS = [
    {"id": "1", "name": "Asha Rao", "status": "New", "expectedValue": 120000, "city": "Pune", "createdAt": "2026-01-10"},
    {"id": "2", "name": "Vikram Shah", "status": "Qualified", "expectedValue": "45000", "createdAt": "2026-02-01"},
    {"id": "3", "name": "Meera Nair", "status": "new", "expectedValue": 9000, "city": "", "createdAt": "2026-03-15"},
]


class FilterOperatorTests(SimpleTestCase):
    def ids(self, filters):
        return [record["id"] for record in apply_filters(RECORDS, filters)]

    def test_equals_ignores_case(self):
        self.assertEqual(self.ids([{"field": "status", "operator": "equals", "value": "NEW"}]), ["1", "3"])

    def test_numeric_comparison_handles_strings(self):
        self.assertEqual(self.ids([{"field": "expectedValue", "operator": "greaterThan", "value": "40000"}]), ["1", "2"])
        self.assertEqual(
            self.ids([{"field": "expectedValue", "operator": "between", "value": 10000, "value2": 50000}]),
            ["2"],
        )

    def test_text_operators(self):
        self.assertEqual(self.ids([{"field": "name", "operator": "contains", "value": "sha"}]), ["1", "2"])
        self.assertEqual(self.ids([{"field": "name", "operator": "startsWith", "value": "m"}]), ["3"])
        self.assertEqual(self.ids([{"field": "name", "operator": "notContains", "value": "a"}]), [])

    def test_in_accepts_comma_separated_values(self):
        self.assertEqual(self.ids([{"field": "status", "operator": "in", "value": "Qualified, Lost"}]), ["2"])
        self.assertEqual(self.ids([{"field": "status", "operator": "notIn", "value": ["new"]}]), ["2"])

    def test_null_and_empty(self):
        self.assertEqual(self.ids([{"field": "city", "operator": "isNull"}]), ["2"])
        self.assertEqual(self.ids([{"field": "city", "operator": "isEmpty"}]), ["2", "3"])
        self.assertEqual(self.ids([{"field": "city", "operator": "isNotEmpty"}]), ["1"])

    def test_date_operators(self):
        self.assertEqual(self.ids([{"field": "createdAt", "operator": "dateAfter", "value": "2026-01-31"}]), ["2", "3"])
        self.assertEqual(
            self.ids([{"field": "createdAt", "operator": "dateBetween", "value": "2026-01-01", "value2": "2026-02-01"}]),
            ["1", "2"],
        )

    def test_between_includes_both_bounds(self):
        self.assertEqual(
            self.ids([{"field": "expectedValue", "operator": "between", "value": 45000, "value2": 120000}]),
            ["1", "2"],
        )
        self.assertEqual(
            self.ids([{"field": "expectedValue", "operator": "between", "value": "9000", "value2": "9000"}]),
            ["3"],
        )
        self.assertEqual(self.ids([{"field": "expectedValue", "operator": "between", "value": 1}]), [])

    def test_date_between_includes_both_bounds(self):
        self.assertEqual(
            self.ids([{"field": "createdAt", "operator": "dateBetween", "value": "2026-02-01", "value2": "2026-03-15"}]),
            ["2", "3"],
        )
        late = {"id": "4", "createdAt": "2026-03-15T18:30:00+00:00"}
        condition = {"field": "createdAt", "operator": "dateBetween", "value": "2026-03-01", "value2": "2026-03-15"}
        self.assertTrue(matches(late, condition))
        self.assertFalse(matches(late, {**condition, "value2": None}))

    def test_conditions_are_anded(self):
        filters = [
            {"field": "status", "operator": "equals", "value": "new"},
            {"field": "expectedValue", "operator": "lessThan", "value": 10000},
        ]
        self.assertEqual(self.ids(filters), ["3"])

    def test_unknown_operator_matches(self):
        self.assertTrue(matches(RECORDS[0], {"field": "name", "operator": "soundsLike", "value": "x"}))

    def test_missing_value_never_compares(self):
        self.assertFalse(matches({"id": "9"}, {"field": "expectedValue", "operator": "lessThan", "value": 5}))


class SearchSortPaginateTests(SimpleTestCase):
    def test_search_is_case_insensitive_across_fields(self):
        found = search_records(RECORDS, "PUNE", ["name", "city"])
        self.assertEqual([record["id"] for record in found], ["1"])
        self.assertEqual(len(search_records(RECORDS, "  ", ["name"])), 3)

    def test_sort_numbers_and_missing_last(self):
        ordered = sort_records(RECORDS, "expectedValue", "asc")
        self.assertEqual([record["id"] for record in ordered], ["3", "2", "1"])
        ordered = sort_records(RECORDS, "city", "desc")
        self.assertEqual([record["id"] for record in ordered], ["1", "2", "3"])

    def test_paginate(self):
        result = paginate(RECORDS, page=2, page_size=2)
        self.assertEqual([record["id"] for record in result["data"]], ["3"])
        self.assertEqual(result["pagination"], {"page": 2, "pageSize": 2, "total": 3, "totalPages": 2})


class ScoringTests(SimpleTestCase):
    criteria = [
        {"field": "source", "weights": {"website": 20, "referral": 30}},
        {"field": "expectedValue", "ranges": [{"min": 100000, "score": 30}, {"min": 50000, "score": 20}, {"min": 0, "score": 10}]},
    ]

    def test_weights_and_first_matching_range(self):
        self.assertEqual(calculate_score({"source": "Referral", "expectedValue": "150000"}, self.criteria), 60)
        self.assertEqual(calculate_score({"source": "cold_call", "expectedValue": 60000}, self.criteria), 20)
        self.assertEqual(calculate_score({}, self.criteria), 0)

    def test_priority_thresholds(self):
        thresholds = {"hot": 61, "warm": 31, "cold": 0}
        self.assertEqual(priority_for(61, thresholds), "Hot")
        self.assertEqual(priority_for(31, thresholds), "Warm")
        self.assertEqual(priority_for(0, thresholds), "Cold")
        self.assertEqual(priority_for(0, {"warm": 0}), "Warm")


class MatchingTests(SimpleTestCase):
    def test_values_match(self):
        self.assertTrue(values_match(" Priya@Example.com", "priya@example.com"))
        self.assertFalse(values_match("", ""))
        self.assertTrue(values_match("98200-12345", "9820012345", "fuzzy"))
        self.assertTrue(values_match("example.com", "priya@example.com", "partial"))
        self.assertFalse(values_match("98200-12345", "9820012345", "exact"))

    def test_round_robin_moves_past_latest_owner(self):
        records = [{"assignedTo": 7}, {"assignedTo": 5}]
        self.assertEqual(pick_round_robin(records, [5, 7, 9]), 9)
        self.assertEqual(pick_round_robin([{"assignedTo": 9}], [5, 7, 9]), 5)
        self.assertEqual(pick_round_robin([], [5, 7]), 5)
        self.assertIsNone(pick_round_robin(records, []))

    def test_least_loaded_prefers_lowest_id_on_ties(self):
        records = [{"assignedTo": 5}, {"assignedTo": 5}, {"assignedTo": 7}]
        self.assertEqual(pick_least_loaded(records, [5, 7, 9]), 9)
        self.assertEqual(pick_least_loaded(records, [5, 7]), 7)
