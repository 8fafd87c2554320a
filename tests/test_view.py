"""Tests for the read-only view query layer."""

import pytest
from datetime import date, datetime, timezone

from farmledger.agents import FinancialInsightsInput
from farmledger.models.commands import AddTask, AddTransaction, UpdateSettings
from farmledger.models.records import (
    AppState,
    Enterprise,
    FarmSettings,
    FarmTask,
    SettingsPatch,
    TaskStatus,
)
from farmledger.queries import (
    StateView,
    all_tasks,
    insights_request,
    records_between,
    records_for,
    task_dates,
    tasks_on,
    upcoming_tasks,
)


def make_task(task_id, when, status=TaskStatus.PENDING):
    return FarmTask(id=task_id, date=when, title=f"Task {task_id}", status=status)


class TestRecordQueries:
    """Tests for transaction filters."""

    def test_records_for_preserves_order(self, t1, t2, t3):
        """Test enterprise filter keeps insertion order."""
        state = AppState(transactions=[t3, t2, t1])
        assert records_for(state, Enterprise.DAIRY) == [t3, t1]
        assert records_for(state, "poultry") == [t2]

    def test_records_for_rejects_unknown_enterprise(self, t1):
        """Test that unknown enterprises are an error, not an empty list."""
        with pytest.raises(ValueError):
            records_for(AppState(transactions=[t1]), "goats")

    def test_records_between_inclusive(self, t1, t2, t3):
        """Test calendar-day bounds are inclusive."""
        state = AppState(transactions=[t1, t2, t3])
        result = records_between(state, date(2024, 1, 1), date(2024, 1, 3))
        assert [t.id for t in result] == ["t1", "t2"]

    def test_records_between_open_bounds(self, t1, t2, t3):
        """Test omitted bounds."""
        state = AppState(transactions=[t1, t2, t3])
        assert [t.id for t in records_between(state, start=date(2024, 1, 2))] == ["t2", "t3"]
        assert [t.id for t in records_between(state, end=date(2024, 1, 2))] == ["t1"]
        assert len(records_between(state)) == 3

    def test_records_between_with_enterprise(self, t1, t2, t3):
        """Test combining date and enterprise filters."""
        state = AppState(transactions=[t1, t2, t3])
        result = records_between(state, start=date(2024, 1, 2), enterprise="dairy")
        assert result == [t3]

    def test_queries_do_not_mutate(self, t1, t2):
        """Test that returned lists are copies."""
        state = AppState(transactions=[t1, t2])
        records_for(state, "dairy").clear()
        assert state.transactions == (t1, t2)


class TestTaskQueries:
    """Tests for task views."""

    def test_all_tasks_newest_first(self):
        """Test ordering, with naive and aware timestamps mixed."""
        state = AppState(tasks=[
            make_task("a", datetime(2024, 3, 1)),
            make_task("b", datetime(2024, 3, 5, tzinfo=timezone.utc)),
            make_task("c", datetime(2024, 3, 3)),
        ])
        assert [t.id for t in all_tasks(state)] == ["b", "c", "a"]

    def test_upcoming_tasks(self):
        """Test pending tasks from today on, soonest first."""
        state = AppState(tasks=[
            make_task("past", datetime(2024, 2, 28)),
            make_task("later", datetime(2024, 3, 10)),
            make_task("today", datetime(2024, 3, 1, 17, 0)),
            make_task("done", datetime(2024, 3, 2), status=TaskStatus.COMPLETED),
        ])
        result = upcoming_tasks(state, today=date(2024, 3, 1))
        assert [t.id for t in result] == ["today", "later"]

    def test_tasks_on_day(self):
        """Test filtering by one calendar day."""
        state = AppState(tasks=[
            make_task("evening", datetime(2024, 3, 1, 18, 0)),
            make_task("other", datetime(2024, 3, 2)),
            make_task("morning", datetime(2024, 3, 1, 6, 0)),
        ])
        assert [t.id for t in tasks_on(state, date(2024, 3, 1))] == ["morning", "evening"]

    def test_task_dates(self):
        """Test distinct days, newest first."""
        state = AppState(tasks=[
            make_task("a", datetime(2024, 3, 1, 6, 0)),
            make_task("b", datetime(2024, 3, 1, 18, 0)),
            make_task("c", datetime(2024, 3, 4)),
        ])
        assert task_dates(state) == [date(2024, 3, 4), date(2024, 3, 1)]


class TestInsightsRequest:
    """Tests for building the insights collaborator request."""

    def test_request_uses_currency_and_enterprise(self, t1, t2):
        """Test the request contents."""
        state = AppState(
            transactions=[t1, t2],
            settings=FarmSettings(currency="KES"),
        )
        request = insights_request(state, "dairy")
        assert isinstance(request, FinancialInsightsInput)
        assert request.currency == "KES"
        assert request.transactions == [t1]


class TestStateView:
    """Tests for the store-backed view."""

    def test_view_reads_latest_state(self, store, t1, task):
        """Test that the view recomputes on every call."""
        view = StateView(store)
        assert view.records_for("dairy") == []
        assert view.tasks() == []

        store.dispatch(AddTransaction(transaction=t1))
        store.dispatch(AddTask(task=task))
        store.dispatch(UpdateSettings(settings=SettingsPatch(currency="EUR")))

        assert view.records_for("dairy") == [t1]
        assert view.records_between(date(2024, 1, 1), date(2024, 1, 1)) == [t1]
        assert view.tasks() == [task]
        assert view.tasks_on(date(2024, 3, 1)) == [task]
        assert view.task_dates() == [date(2024, 3, 1)]
        assert view.upcoming_tasks(today=date(2024, 1, 1)) == [task]
        assert view.insights_request("dairy").currency == "EUR"
