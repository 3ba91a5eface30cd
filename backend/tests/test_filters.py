from datetime import date, datetime

import pytest
from pydantic import ValidationError

from travelcrm.schemas.customer import CustomerResponse
from travelcrm.schemas.filters import FilterOptions
from travelcrm.services.filters import apply_filters, filter_customers, filter_logs

NOW = datetime(2024, 3, 15, 12, 0)

CUSTOMERS = [
    {"name": "Alice Brown", "email": "alice@example.com", "company": "Acme Corp", "phone": "555-0100", "status": "active"},
    {"name": "Bob Stone", "email": "bob@example.com", "company": "Globex", "phone": "555-0199", "status": "prospect"},
    {"name": "Carol White", "email": None, "company": None, "phone": None, "status": "dead"},
    {"name": "Dan Green", "email": "dan@acme.io", "company": "Initech", "phone": "555-0123", "status": "active"},
]

LOGS = [
    {
        "id": 1, "customer_name": "Alice Brown", "subject": "Visa call", "description": "Discussed visa",
        "date": "2024-03-01", "type": "call", "outcome": "positive", "employee_id": "e1",
        "follow_up_required": True, "follow_up_date": "2024-03-10",
    },
    {
        "id": 2, "customer_name": "Bob Stone", "subject": "Quote", "description": "Sent hotel quote",
        "date": "2024-03-05", "type": "email", "outcome": "neutral", "employee_id": "e2",
        "follow_up_required": False, "follow_up_date": None,
    },
    {
        "id": 3, "customer_name": "Alice Brown", "subject": "Booking", "description": "Confirmed flights",
        "date": "2024-03-10", "type": "call", "outcome": "negative", "employee_id": "e1",
        "follow_up_required": True, "follow_up_date": "2024-03-20",
    },
    {
        "id": 4, "customer_name": "Dan Green", "subject": "Intro meeting", "description": "",
        "date": "2024-03-14", "type": "meeting", "outcome": "positive", "employee_id": "e2",
        "follow_up_required": False, "follow_up_date": None,
    },
]


def ids(logs):
    return [log["id"] for log in logs]


class TestFilterOptions:
    def test_all_and_blank_mean_no_filter(self):
        options = FilterOptions(customer_status="all", activity_type="ALL", outcome=" ", search_term="")
        assert options.customer_status is None
        assert options.activity_type is None
        assert options.outcome is None
        assert options.search_term is None
        assert options.is_empty()

    def test_explicit_false_is_a_filter(self):
        options = FilterOptions(follow_up_required=False)
        assert options.follow_up_required is False
        assert not options.is_empty()

    def test_rejects_unknown_values(self):
        with pytest.raises(ValidationError):
            FilterOptions(customer_status="travelling")
        with pytest.raises(ValidationError):
            FilterOptions(date_from="15/03/2024")

    @pytest.mark.parametrize("value", ["20240301", "2024-W10-1", "2024-3-1", "2024-02-30", "2024-03-01T00:00"])
    def test_dates_must_be_plain_calendar_dates(self, value):
        with pytest.raises(ValidationError):
            FilterOptions(date_from=value)
        with pytest.raises(ValidationError):
            FilterOptions(date_to=value)

    def test_search_term_is_kept_as_typed(self):
        assert FilterOptions(search_term=" john ").search_term == " john "
        assert FilterOptions(search_term="all").search_term == "all"

    def test_presets(self):
        today = date(2024, 3, 15)
        assert FilterOptions.today(today) == FilterOptions(date_from="2024-03-15", date_to="2024-03-15")
        assert FilterOptions.this_week(today) == FilterOptions(date_from="2024-03-08", date_to="2024-03-15")
        assert FilterOptions.positive_outcomes().outcome == "positive"
        assert FilterOptions.pending_follow_ups().follow_up_required is True
        assert FilterOptions.active_customers().customer_status == "active"


class TestNoOpAndLaws:
    def test_empty_options_return_input(self):
        assert filter_logs(LOGS, FilterOptions()) == LOGS
        assert filter_customers(CUSTOMERS, FilterOptions()) == CUSTOMERS
        assert filter_logs(LOGS, None) == LOGS

    def test_all_sentinels_are_no_ops(self):
        options = FilterOptions(customer_status="all", activity_type="all", outcome="all")
        assert filter_logs(LOGS, options) == LOGS
        assert filter_customers(CUSTOMERS, options) == CUSTOMERS

    def test_idempotent(self):
        options = FilterOptions(search_term="alice", outcome="positive")
        once = filter_logs(LOGS, options)
        assert filter_logs(once, options) == once

    def test_independent_fields_commute(self):
        by_type = FilterOptions(activity_type="call")
        by_outcome = FilterOptions(outcome="positive")
        combined = FilterOptions(activity_type="call", outcome="positive")

        assert filter_logs(filter_logs(LOGS, by_type), by_outcome) == filter_logs(LOGS, combined)
        assert filter_logs(filter_logs(LOGS, by_outcome), by_type) == filter_logs(LOGS, combined)
        assert ids(filter_logs(LOGS, combined)) == [1]

    def test_output_keeps_input_order(self):
        assert ids(filter_logs(LOGS, FilterOptions(search_term="a"))) == [1, 3, 4]

    def test_non_list_input_is_empty(self):
        assert apply_filters(None, FilterOptions(outcome="positive"), "logs") == []


class TestCustomerFilters:
    def test_search_matches_company_case_insensitively(self):
        result = filter_customers(CUSTOMERS, FilterOptions(search_term="acme"))
        assert [c["name"] for c in result] == ["Alice Brown", "Dan Green"]

    def test_search_term_whitespace_is_significant(self):
        customers = [{"name": "John Smith"}, {"name": "Johnson"}]

        result = filter_customers(customers, FilterOptions(search_term="john "))

        assert [c["name"] for c in result] == ["John Smith"]

    def test_search_covers_phone(self):
        result = filter_customers(CUSTOMERS, FilterOptions(search_term="0199"))
        assert [c["name"] for c in result] == ["Bob Stone"]

    def test_missing_fields_do_not_raise(self):
        result = filter_customers(CUSTOMERS, FilterOptions(search_term="carol"))
        assert [c["name"] for c in result] == ["Carol White"]

    def test_status(self):
        result = filter_customers(CUSTOMERS, FilterOptions(customer_status="active"))
        assert [c["name"] for c in result] == ["Alice Brown", "Dan Green"]

    def test_log_only_criteria_do_not_touch_customers(self):
        assert filter_customers(CUSTOMERS, FilterOptions(outcome="positive", date_from="2030-01-01")) == CUSTOMERS

    def test_works_on_schema_objects(self):
        customers = [
            CustomerResponse(id=1, name="Acme Traveller", status="active"),
            CustomerResponse(id=2, name="Other", status="prospect"),
        ]
        assert [c.id for c in filter_customers(customers, FilterOptions(search_term="ACME"))] == [1]


class TestLogFilters:
    def test_follow_up_required_true_keeps_only_flagged(self):
        logs = [
            {"id": 1, "follow_up_required": True},
            {"id": 2, "follow_up_required": False},
        ]
        assert ids(filter_logs(logs, FilterOptions(follow_up_required=True))) == [1]
        assert ids(filter_logs(logs, FilterOptions(follow_up_required=False))) == [2]
        assert ids(filter_logs(logs, FilterOptions())) == [1, 2]

    def test_search_fields(self):
        assert ids(filter_logs(LOGS, FilterOptions(search_term="HOTEL"))) == [2]
        assert ids(filter_logs(LOGS, FilterOptions(search_term="alice"))) == [1, 3]
        # type is not a searchable log field in list filters
        assert ids(filter_logs(LOGS, FilterOptions(search_term="meeting"))) == [4]

    def test_date_range_is_inclusive(self):
        options = FilterOptions(date_from="2024-03-05", date_to="2024-03-10")
        assert ids(filter_logs(LOGS, options)) == [2, 3]

    def test_open_ended_date_range(self):
        assert ids(filter_logs(LOGS, FilterOptions(date_from="2024-03-10"))) == [3, 4]
        assert ids(filter_logs(LOGS, FilterOptions(date_to="2024-03-01"))) == [1]

    def test_type_and_outcome(self):
        assert ids(filter_logs(LOGS, FilterOptions(activity_type="call"))) == [1, 3]
        assert ids(filter_logs(LOGS, FilterOptions(outcome="positive"))) == [1, 4]

    def test_employee(self):
        assert ids(filter_logs(LOGS, FilterOptions(employee_id="e2"))) == [2, 4]

    def test_follow_up_status(self):
        assert ids(filter_logs(LOGS, FilterOptions(follow_up_status="required"), now=NOW)) == [1, 3]
        assert ids(filter_logs(LOGS, FilterOptions(follow_up_status="overdue"), now=NOW)) == [1]
        assert ids(filter_logs(LOGS, FilterOptions(follow_up_status="upcoming"), now=NOW)) == [3]
