"""
State Reducer

reduce(state, command) -> state

The reducer is pure: it never mutates its input, never performs I/O and
always returns the same result for the same arguments. Commands whose
precondition does not hold (adding an existing id, updating a missing
one) return the input state object itself, so callers can detect a
no-op with an identity check.
"""

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
    FarmTask,
    SettingsPatch,
    Transaction,
)


def reduce(state: AppState, command) -> AppState:
    """Apply one command to a state and return the next state."""
    if isinstance(command, AddTransaction):
        return _add_transaction(state, command.transaction)
    elif isinstance(command, UpdateTransaction):
        return _update_transaction(state, command.transaction)
    elif isinstance(command, DeleteTransaction):
        return _delete_transactions(state, {command.transaction_id})
    elif isinstance(command, DeleteTransactions):
        return _delete_transactions(state, set(command.transaction_ids))
    elif isinstance(command, AddTask):
        return _add_task(state, command.task)
    elif isinstance(command, UpdateTask):
        return _update_task(state, command.task)
    elif isinstance(command, DeleteTask):
        return _delete_task(state, command.task_id)
    elif isinstance(command, UpdateSettings):
        return _update_settings(state, command.settings)
    elif isinstance(command, ReplaceState):
        return command.state
    raise TypeError(f"Unknown command: {type(command).__name__}")


# =============================================================================
# TRANSACTIONS
# =============================================================================

def _add_transaction(state: AppState, transaction: Transaction) -> AppState:
    if state.find_transaction(transaction.id) is not None:
        return state
    return state.model_copy(
        update={"transactions": state.transactions + (transaction,)}
    )


def _update_transaction(state: AppState, transaction: Transaction) -> AppState:
    if state.find_transaction(transaction.id) is None:
        return state
    return state.model_copy(
        update={
            "transactions": tuple(
                transaction if t.id == transaction.id else t
                for t in state.transactions
            )
        }
    )


def _delete_transactions(state: AppState, ids: set[str]) -> AppState:
    remaining = tuple(t for t in state.transactions if t.id not in ids)
    if len(remaining) == len(state.transactions):
        return state
    return state.model_copy(update={"transactions": remaining})


# =============================================================================
# TASKS
# =============================================================================

def _add_task(state: AppState, task: FarmTask) -> AppState:
    if state.find_task(task.id) is not None:
        return state
    return state.model_copy(update={"tasks": state.tasks + (task,)})


def _update_task(state: AppState, task: FarmTask) -> AppState:
    if state.find_task(task.id) is None:
        return state
    return state.model_copy(
        update={"tasks": tuple(task if t.id == task.id else t for t in state.tasks)}
    )


def _delete_task(state: AppState, task_id: str) -> AppState:
    remaining = tuple(t for t in state.tasks if t.id != task_id)
    if len(remaining) == len(state.tasks):
        return state
    return state.model_copy(update={"tasks": remaining})


# =============================================================================
# SETTINGS
# =============================================================================

def _update_settings(state: AppState, patch: SettingsPatch) -> AppState:
    changes = patch.changes()
    if not changes:
        return state
    merged = state.settings.model_copy(update=changes)
    if merged == state.settings:
        return state
    return state.model_copy(update={"settings": merged})
