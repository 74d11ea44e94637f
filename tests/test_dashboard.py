import pytest

import dashboard


@pytest.fixture()
def rendered(monkeypatch):
    calls = []
    monkeypatch.setattr(dashboard.st, "markdown", lambda body, **kwargs: calls.append(body))
    return calls


def test_insights_without_tickets_prompt_for_data(rendered):
    dashboard.insights_report([])

    card = rendered[-1]
    assert "No insights available yet. Add data to unlock trends." in card
    assert "—" not in card


def test_insights_name_the_busiest_month(rendered, make_ticket):
    tickets = [
        make_ticket("2023-01-05T00:00:00.000Z", group="Network Ops", category="Access"),
        make_ticket("2023-03-05T00:00:00.000Z", group="Network Ops", category="Access"),
        make_ticket("2023-03-09T00:00:00.000Z", group="Coreshack", category="Network"),
    ]
    dashboard.insights_report(tickets)

    card = rendered[-1]
    assert "<strong>2023-03</strong> with 2 tickets" in card
    assert "1 month(s) had no tickets" in card
    assert "<strong>Network Ops</strong> is handling 2 of 3 tickets (67% of workload)" in card
