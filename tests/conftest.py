from typing import Any, Callable

import pytest

from ticket_trends import Ticket, month_key


@pytest.fixture()
def make_ticket() -> Callable[..., Ticket]:
    counter = {"next": 1}

    def factory(created_date: str = "2023-01-15T10:00:00.000Z", **fields: Any) -> Ticket:
        ticket_id = fields.pop("id", str(counter["next"]))
        counter["next"] += 1
        return Ticket(
            id=ticket_id,
            created_date=created_date,
            year_month=month_key(created_date),
            **fields,
        )

    return factory
