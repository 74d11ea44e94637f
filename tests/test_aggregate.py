from ticket_trends import (
    CORESHACK_TEAM,
    IT_TEAM,
    UNKNOWN,
    AggregateBucket,
    Dimension,
    Granularity,
    PeriodValue,
    Ticket,
    count_by_period,
    group_by,
    group_by_period_and_dimension,
    volume_series,
)


def test_missing_values_bucket_under_unknown(make_ticket):
    tickets = [make_ticket(category=None), make_ticket(category="Access"), make_ticket()]
    buckets = group_by(tickets, Dimension.CATEGORY)
    assert buckets[0] == AggregateBucket(label=UNKNOWN, count=2, percentage=67)
    assert buckets[1] == AggregateBucket(label="Access", count=1, percentage=33)


def test_counts_sum_to_ticket_total(make_ticket):
    tickets = [make_ticket(status=s) for s in ["Open", "Closed", "Open", None, "Pending", "Open"]]
    buckets = group_by(tickets, Dimension.STATUS)
    assert sum(bucket.count for bucket in buckets) == len(tickets)
    assert [bucket.label for bucket in buckets] == ["Open", "Closed", UNKNOWN, "Pending"]


def test_ties_keep_first_seen_order(make_ticket):
    tickets = [make_ticket(agent_name=name) for name in ["Bo", "Al", "Cy", "Al", "Bo"]]
    labels = [bucket.label for bucket in group_by(tickets, Dimension.AGENT)]
    assert labels == ["Bo", "Al", "Cy"]


def test_empty_input_has_no_buckets():
    assert group_by([], Dimension.GROUP) == []


def test_group_by_is_repeatable(make_ticket):
    tickets = [make_ticket(priority=p) for p in ["High", "Low", "High"]]
    assert group_by(tickets, Dimension.PRIORITY) == group_by(tickets, Dimension.PRIORITY)


def test_percentages_round_half_up(make_ticket):
    tickets = [make_ticket(source="Email")] + [make_ticket(source="Phone")] * 7
    buckets = {bucket.label: bucket for bucket in group_by(tickets, Dimension.SOURCE)}
    assert buckets["Email"].percentage == 13
    assert buckets["Phone"].percentage == 88


def test_count_by_period_month_and_week(make_ticket):
    tickets = [
        make_ticket("2023-01-02T09:00:00.000Z"),
        make_ticket("2023-01-03T09:00:00.000Z"),
        make_ticket("2023-01-10T09:00:00.000Z"),
        make_ticket("bad date"),
    ]
    assert count_by_period(tickets, Granularity.MONTH) == {"2023-01": 3, UNKNOWN: 1}
    assert count_by_period(tickets, Granularity.WEEK) == {
        "2023-W01": 2,
        "2023-W02": 1,
        UNKNOWN: 1,
    }


def test_volume_series_fills_empty_months(make_ticket):
    tickets = [
        make_ticket("2023-01-05T00:00:00.000Z"),
        make_ticket("2023-03-05T00:00:00.000Z"),
        make_ticket("2023-03-06T00:00:00.000Z"),
        make_ticket("unparsable"),
    ]
    assert volume_series(tickets, Granularity.MONTH) == [
        PeriodValue("2023-01", 1),
        PeriodValue("2023-02", 0),
        PeriodValue("2023-03", 2),
    ]


def test_team_counts_roll_up_into_it_team(make_ticket):
    tickets = [
        make_ticket("2023-04-01T00:00:00.000Z", group="Network Ops"),
        make_ticket("2023-04-02T00:00:00.000Z", group="Service Desk"),
        make_ticket("2023-04-03T00:00:00.000Z", group=CORESHACK_TEAM),
        make_ticket("2023-05-01T00:00:00.000Z", group=None),
    ]
    counts = group_by_period_and_dimension(tickets, Granularity.MONTH, Dimension.GROUP)
    assert counts == {
        "2023-04": {IT_TEAM: 2, "Network Ops": 1, "Service Desk": 1, CORESHACK_TEAM: 1},
        "2023-05": {IT_TEAM: 1, UNKNOWN: 1},
    }


def test_coreshack_ticket_only_counts_once(make_ticket):
    tickets = [make_ticket("2023-04-03T00:00:00.000Z", group=CORESHACK_TEAM)]
    counts = group_by_period_and_dimension(tickets, Granularity.WEEK, Dimension.GROUP)
    assert counts == {"2023-W14": {CORESHACK_TEAM: 1}}


def test_agents_are_not_rolled_up(make_ticket):
    tickets = [
        make_ticket("2023-04-03T00:00:00.000Z", agent_name="Chen", group="Network Ops"),
        make_ticket("2023-04-04T00:00:00.000Z", agent_name="Chen", group=CORESHACK_TEAM),
        make_ticket("2023-04-05T00:00:00.000Z", agent_name=None),
    ]
    counts = group_by_period_and_dimension(tickets, Granularity.WEEK, Dimension.AGENT)
    assert counts == {"2023-W14": {"Chen": 2, UNKNOWN: 1}}


def test_tickets_without_a_stored_month_bucket_by_their_date():
    tickets = [
        Ticket(id="1", created_date="2023-03-05T09:00:00Z"),
        Ticket(id="2", created_date="2023-03-06T09:00:00Z", year_month="2023-03"),
        Ticket(id="3", created_date="not a date"),
    ]
    assert count_by_period(tickets, Granularity.MONTH) == {"2023-03": 2, UNKNOWN: 1}
    assert count_by_period(tickets, Granularity.WEEK) == {"2023-W09": 1, "2023-W10": 1, UNKNOWN: 1}
