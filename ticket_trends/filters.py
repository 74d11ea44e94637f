from __future__ import annotations

from typing import Iterable, List, Optional, Sequence

from .models import CORESHACK_TEAM, IT_TEAM, FilterSpecification, Ticket
from .periods import parse_timestamp


def _in_selection(value: Optional[str], selection: Sequence[str]) -> bool:
    return not selection or value in selection


def matches_group(group: Optional[str], selection: Sequence[str]) -> bool:
    """Team check with IT Team standing for every team except Coreshack."""
    if not selection:
        return True
    if IT_TEAM in selection and group != CORESHACK_TEAM:
        return True
    return group in selection


def matches_date_range(created_date: Optional[str], spec: FilterSpecification) -> bool:
    if not spec.date_range_active:
        return True
    start, end = (parse_timestamp(bound) for bound in spec.date_range)
    moment = parse_timestamp(created_date)
    if moment is None:
        # Undated tickets are kept; they sit under Unknown elsewhere.
        return True
    return start <= moment <= end


def matches(ticket: Ticket, spec: FilterSpecification) -> bool:
    return (
        matches_date_range(ticket.created_date, spec)
        and matches_group(ticket.group, spec.groups)
        and _in_selection(ticket.category, spec.categories)
        and _in_selection(ticket.agent_name, spec.agents)
        and _in_selection(ticket.source, spec.sources)
        and _in_selection(ticket.priority, spec.priorities)
    )


def filter_tickets(tickets: Iterable[Ticket], spec: FilterSpecification) -> List[Ticket]:
    return [ticket for ticket in tickets if matches(ticket, spec)]
