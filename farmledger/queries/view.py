"""
View Query Layer

Read-only accessors over the store's state.

DESIGN DECISION: Every query is a pure function of an AppState.
StateView re-reads the store on every call and caches nothing, because
the state can be replaced at any time by a write from another context.

Dates are compared by calendar day. Timestamps without a timezone are
treated as UTC when ordering, so naive and aware values can be mixed.
"""

from datetime import date, datetime, timezone
from typing import Optional, Union

from farmledger.agents.insights import FinancialInsightsInput
from farmledger.models.records import (
    AppState,
    Enterprise,
    FarmTask,
    TaskStatus,
    Transaction,
)
from farmledger.store.state_store import StateStore


def _sort_key(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def records_for(
    state: AppState,
    enterprise: Union[Enterprise, str],
) -> list[Transaction]:
    """Transactions of one enterprise, in insertion order."""
    enterprise = Enterprise(enterprise)
    return [t for t in state.transactions if t.enterprise == enterprise]


def records_between(
    state: AppState,
    start: Optional[date] = None,
    end: Optional[date] = None,
    enterprise: Optional[Union[Enterprise, str]] = None,
) -> list[Transaction]:
    """
    Transactions whose calendar date lies in [start, end].

    Either bound may be omitted. Insertion order is preserved.
    """
    transactions = (
        records_for(state, enterprise) if enterprise is not None
        else list(state.transactions)
    )
    results = []
    for transaction in transactions:
        day = transaction.date.date()
        if start is not None and day < start:
            continue
        if end is not None and day > end:
            continue
        results.append(transaction)
    return results


def all_tasks(state: AppState) -> list[FarmTask]:
    """All tasks, newest first."""
    return sorted(state.tasks, key=lambda t: _sort_key(t.date), reverse=True)


def upcoming_tasks(state: AppState, today: Optional[date] = None) -> list[FarmTask]:
    """Pending tasks dated today or later, soonest first."""
    today = today or date.today()
    pending = [
        t for t in state.tasks
        if t.status == TaskStatus.PENDING and t.date.date() >= today
    ]
    return sorted(pending, key=lambda t: _sort_key(t.date))


def tasks_on(state: AppState, day: date) -> list[FarmTask]:
    """Tasks scheduled on one calendar day, earliest first."""
    matching = [t for t in state.tasks if t.date.date() == day]
    return sorted(matching, key=lambda t: _sort_key(t.date))


def task_dates(state: AppState) -> list[date]:
    """Distinct calendar days that have tasks, newest first."""
    return sorted({t.date.date() for t in state.tasks}, reverse=True)


def insights_request(
    state: AppState,
    enterprise: Union[Enterprise, str],
) -> FinancialInsightsInput:
    """Build the insights collaborator request for one enterprise."""
    return FinancialInsightsInput(
        currency=state.settings.currency,
        transactions=records_for(state, enterprise),
    )


class StateView:
    """
    Read-only view of a store for consuming UI code.

    It has no mutation rights: it only calls get_state().
    """

    def __init__(self, store: StateStore):
        self._store = store

    @property
    def state(self) -> AppState:
        return self._store.get_state()

    def records_for(self, enterprise: Union[Enterprise, str]) -> list[Transaction]:
        return records_for(self.state, enterprise)

    def records_between(
        self,
        start: Optional[date] = None,
        end: Optional[date] = None,
        enterprise: Optional[Union[Enterprise, str]] = None,
    ) -> list[Transaction]:
        return records_between(self.state, start, end, enterprise)

    def tasks(self) -> list[FarmTask]:
        return all_tasks(self.state)

    def upcoming_tasks(self, today: Optional[date] = None) -> list[FarmTask]:
        return upcoming_tasks(self.state, today)

    def tasks_on(self, day: date) -> list[FarmTask]:
        return tasks_on(self.state, day)

    def task_dates(self) -> list[date]:
        return task_dates(self.state)

    def insights_request(self, enterprise: Union[Enterprise, str]) -> FinancialInsightsInput:
        return insights_request(self.state, enterprise)
