import math

from ticket_trends import UNKNOWN, Dimension, normalize_row, normalize_rows, unique_values
from ticket_trends.normalize import normalize_created_date


def test_meridiem_dates_become_iso():
    assert normalize_created_date("2023-01-01 01:12:19 PM") == "2023-01-01T13:12:19.000Z"
    assert normalize_created_date("01/15/2023 09:05:00 AM") == "2023-01-15T09:05:00.000Z"


def test_unparsable_dates_pass_through_unchanged():
    assert normalize_created_date("not a date at") == "not a date at"
    assert normalize_created_date("2023-02-03T04:05:06Z") == "2023-02-03T04:05:06Z"
    assert normalize_created_date(None) is None


def test_csv_headers_map_to_ticket_fields():
    ticket = normalize_row(
        {
            "ID": 42,
            "Created Date": "2023-03-09 11:30:00 PM",
            "Groups": "Service Desk",
            "Agent Name": "Chen Li",
            "Category": "Access",
            "Subject": "Reset password",
            "Source": "Email",
            "Priority": "High",
            "Status": "Open",
            "Unrelated": "ignored",
        }
    )

    assert ticket.id == "42"
    assert ticket.created_date == "2023-03-09T23:30:00.000Z"
    assert ticket.year_month == "2023-03"
    assert ticket.group == "Service Desk"
    assert ticket.agent_name == "Chen Li"
    assert ticket.category == "Access"
    assert ticket.subject == "Reset password"
    assert ticket.source == "Email"
    assert ticket.priority == "High"
    assert ticket.status == "Open"


def test_camel_case_aliases_are_accepted():
    ticket = normalize_row(
        {"id": "7", "createdDate": "2023-05-01T08:00:00Z", "group": "Coreshack", "agentName": "Dana"}
    )

    assert ticket.id == "7"
    assert ticket.group == "Coreshack"
    assert ticket.agent_name == "Dana"
    assert ticket.year_month == "2023-05"


def test_blank_values_stay_empty_on_the_entity():
    ticket = normalize_row({"Groups": "  ", "Category": math.nan, "Created Date": "garbage"})

    assert ticket.group is None
    assert ticket.category is None
    assert ticket.created_date == "garbage"
    assert ticket.year_month == UNKNOWN
    assert ticket.label(Dimension.CATEGORY) == UNKNOWN


def test_rows_keep_their_order():
    tickets = normalize_rows([{"ID": str(index)} for index in range(5)])
    assert [ticket.id for ticket in tickets] == ["0", "1", "2", "3", "4"]


def test_unique_values_are_sorted_and_skip_blanks():
    tickets = normalize_rows(
        [{"Agent Name": "Zoe"}, {"Agent Name": "Adam"}, {"Agent Name": ""}, {"Agent Name": "Zoe"}]
    )
    assert unique_values(tickets, Dimension.AGENT) == ["Adam", "Zoe"]
