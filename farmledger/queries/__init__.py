"""Read-only query package."""

from farmledger.queries.view import (
    StateView,
    all_tasks,
    insights_request,
    records_between,
    records_for,
    task_dates,
    tasks_on,
    upcoming_tasks,
)

__all__ = [
    "StateView",
    "all_tasks",
    "insights_request",
    "records_between",
    "records_for",
    "task_dates",
    "tasks_on",
    "upcoming_tasks",
]
