"""Tests for the pure state reducer."""

import pytest
from decimal import Decimal

from farmledger.models.commands import (
    AddTask,
    AddTransaction,
    DeleteTask,
    DeleteTransaction,
    DeleteTransactions,
    ReplaceState,
    UpdateSettings,
    UpdateTask,
    UpdateTransaction,
)
from farmledger.models.records import (
    AppState,
    FarmSettings,
    SettingsPatch,
    TaskStatus,
    default_app_state,
)
from farmledger.store.reducer import reduce


def apply_all(state, commands):
    for command in commands:
        state = reduce(state, command)
    return state


class TestTransactionCommands:
    """Tests for transaction reduction rules."""

    def test_add_appends_in_order(self, t1, t2, t3):
        """Test that insertion order is the iteration order."""
        state = apply_all(
            default_app_state(),
            [AddTransaction(transaction=t) for t in (t2, t1, t3)],
        )
        assert [t.id for t in state.transactions] == ["t2", "t1", "t3"]

    def test_add_existing_id_is_noop(self, t1):
        """Test that a duplicate id leaves state untouched."""
        state = reduce(default_app_state(), AddTransaction(transaction=t1))
        duplicate = t1.model_copy(update={"amount": Decimal("999")})

        result = reduce(state, AddTransaction(transaction=duplicate))

        assert result is state
        assert result.transactions[0].amount == Decimal("120")

    def test_update_replaces_whole_record(self, t1, t2):
        """Test that update replaces the record and nothing else."""
        state = apply_all(
            default_app_state(),
            [AddTransaction(transaction=t1), AddTransaction(transaction=t2)],
        )
        updated = t1.model_copy(update={"amount": Decimal("200"), "description": "Spring"})

        result = reduce(state, UpdateTransaction(transaction=updated))

        assert result.transactions[0] == updated
        assert result.transactions[1] is t2

    def test_update_missing_id_is_noop(self, t1):
        """Test that updating an unknown id changes nothing."""
        state = default_app_state()
        assert reduce(state, UpdateTransaction(transaction=t1)) is state

    def test_delete_removes_record(self, t1, t2):
        """Test delete by id."""
        state = apply_all(
            default_app_state(),
            [AddTransaction(transaction=t1), AddTransaction(transaction=t2)],
        )
        result = reduce(state, DeleteTransaction(transaction_id="t1"))
        assert [t.id for t in result.transactions] == ["t2"]

    def test_delete_is_idempotent(self, t1, t2):
        """Test that deleting twice equals deleting once."""
        state = apply_all(
            default_app_state(),
            [AddTransaction(transaction=t1), AddTransaction(transaction=t2)],
        )
        once = reduce(state, DeleteTransaction(transaction_id="t1"))
        twice = reduce(once, DeleteTransaction(transaction_id="t1"))
        assert twice == once

    def test_delete_many(self, t1, t2, t3):
        """Test bulk delete, ignoring unknown ids."""
        state = apply_all(
            default_app_state(),
            [AddTransaction(transaction=t) for t in (t1, t2, t3)],
        )
        result = reduce(state, DeleteTransactions(transaction_ids=["t1", "t3", "zzz"]))
        assert [t.id for t in result.transactions] == ["t2"]

    def test_delete_many_empty_is_noop(self, t1):
        """Test that an empty bulk delete changes nothing."""
        state = reduce(default_app_state(), AddTransaction(transaction=t1))
        assert reduce(state, DeleteTransactions(transaction_ids=[])) is state


class TestTaskCommands:
    """Tests for task reduction rules."""

    def test_add_update_delete_task(self, task):
        """Test the task lifecycle."""
        state = reduce(default_app_state(), AddTask(task=task))
        assert state.tasks == (task,)

        done = task.model_copy(update={"status": TaskStatus.COMPLETED})
        state = reduce(state, UpdateTask(task=done))
        assert state.tasks[0].status == TaskStatus.COMPLETED

        state = reduce(state, DeleteTask(task_id=task.id))
        assert state.tasks == ()

    def test_task_preconditions(self, task):
        """Test duplicate add and missing update are no-ops."""
        state = reduce(default_app_state(), AddTask(task=task))
        assert reduce(state, AddTask(task=task)) is state

        other = task.model_copy(update={"id": "other"})
        assert reduce(state, UpdateTask(task=other)) is state
        assert reduce(state, DeleteTask(task_id="other")) is state


class TestSettingsCommands:
    """Tests for settings merge."""

    def test_merge_preserves_omitted_fields(self):
        """Test shallow merge."""
        state = reduce(
            default_app_state(),
            UpdateSettings(settings=SettingsPatch(farm_name="Hill Farm")),
        )
        assert state.settings.farm_name == "Hill Farm"
        assert state.settings.currency == "USD"
        assert state.settings.location == "Green Valley"

    def test_disjoint_updates_commute(self):
        """Test that disjoint patches give the same result in any order."""
        a = UpdateSettings(settings=SettingsPatch(currency="KES"))
        b = UpdateSettings(settings=SettingsPatch(manager_name="Wanjiru", location="Nakuru"))

        ab = apply_all(default_app_state(), [a, b])
        ba = apply_all(default_app_state(), [b, a])

        assert ab == ba
        assert ab.settings == FarmSettings(
            currency="KES", manager_name="Wanjiru", location="Nakuru"
        )

    def test_empty_patch_is_noop(self):
        """Test that a patch with nothing in it changes nothing."""
        state = default_app_state()
        assert reduce(state, UpdateSettings(settings=SettingsPatch())) is state


class TestReplaceState:
    """Tests for full replacement."""

    def test_replace_discards_current_state(self, t1, t2):
        """Test that nothing of the old state survives."""
        s1 = apply_all(
            default_app_state(),
            [
                AddTransaction(transaction=t1),
                UpdateSettings(settings=SettingsPatch(farm_name="Old Farm")),
            ],
        )
        s2 = AppState(transactions=[t2])

        result = reduce(s1, ReplaceState(state=s2))

        assert result == s2
        assert result.settings.farm_name == "My Farm"


class TestReducerPurity:
    """Tests for determinism and non-mutation."""

    def test_same_commands_same_result(self, t1, t2, task):
        """Test determinism over a command sequence."""
        commands = [
            AddTransaction(transaction=t1),
            AddTransaction(transaction=t2),
            AddTask(task=task),
            UpdateTransaction(transaction=t1.model_copy(update={"amount": Decimal("5")})),
            DeleteTransaction(transaction_id="t2"),
            UpdateSettings(settings=SettingsPatch(currency="EUR")),
        ]
        assert apply_all(default_app_state(), commands) == apply_all(
            default_app_state(), commands
        )

    def test_input_state_is_not_mutated(self, t1, t2):
        """Test that the previous state is untouched."""
        before = reduce(default_app_state(), AddTransaction(transaction=t1))
        snapshot = before.model_dump()

        reduce(before, AddTransaction(transaction=t2))
        reduce(before, DeleteTransaction(transaction_id="t1"))

        assert before.model_dump() == snapshot

    def test_unknown_command_raises(self):
        """Test that the reducer does not silently accept foreign objects."""
        with pytest.raises(TypeError):
            reduce(default_app_state(), object())
