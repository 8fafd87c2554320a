"""
Store Commands

A command is a tagged request to mutate the store's state.
The set of commands is closed: the `type` field discriminates the union,
and the reducer handles every member of it.

Commands can be built directly:

    AddTransaction(transaction=t)

or parsed from plain dicts, the way a UI layer would send them:

    parse_command({"type": "DELETE_TRANSACTION", "payload": "t1"})
"""

from typing import Annotated, Any, Literal, Union

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter

from farmledger.models.records import (
    AppState,
    FarmTask,
    SettingsPatch,
    Transaction,
)


class _Command(BaseModel):
    # Payload fields accept "payload" as an alias
    model_config = ConfigDict(frozen=True, populate_by_name=True)


class AddTransaction(_Command):
    type: Literal["ADD_TRANSACTION"] = "ADD_TRANSACTION"
    transaction: Transaction = Field(..., alias="payload")


class UpdateTransaction(_Command):
    type: Literal["UPDATE_TRANSACTION"] = "UPDATE_TRANSACTION"
    transaction: Transaction = Field(..., alias="payload")


class DeleteTransaction(_Command):
    type: Literal["DELETE_TRANSACTION"] = "DELETE_TRANSACTION"
    transaction_id: str = Field(..., alias="payload")


class DeleteTransactions(_Command):
    type: Literal["DELETE_TRANSACTIONS"] = "DELETE_TRANSACTIONS"
    transaction_ids: tuple[str, ...] = Field(..., alias="payload")


class AddTask(_Command):
    type: Literal["ADD_TASK"] = "ADD_TASK"
    task: FarmTask = Field(..., alias="payload")


class UpdateTask(_Command):
    type: Literal["UPDATE_TASK"] = "UPDATE_TASK"
    task: FarmTask = Field(..., alias="payload")


class DeleteTask(_Command):
    type: Literal["DELETE_TASK"] = "DELETE_TASK"
    task_id: str = Field(..., alias="payload")


class UpdateSettings(_Command):
    type: Literal["UPDATE_SETTINGS"] = "UPDATE_SETTINGS"
    settings: SettingsPatch = Field(..., alias="payload")


class ReplaceState(_Command):
    """Adopt a complete state. Used for external changes."""
    type: Literal["REPLACE_STATE"] = "REPLACE_STATE"
    state: AppState = Field(..., alias="payload")


Command = Annotated[
    Union[
        AddTransaction,
        UpdateTransaction,
        DeleteTransaction,
        DeleteTransactions,
        AddTask,
        UpdateTask,
        DeleteTask,
        UpdateSettings,
        ReplaceState,
    ],
    Field(discriminator="type"),
]

COMMAND_TYPES: tuple[type[BaseModel], ...] = (
    AddTransaction,
    UpdateTransaction,
    DeleteTransaction,
    DeleteTransactions,
    AddTask,
    UpdateTask,
    DeleteTask,
    UpdateSettings,
    ReplaceState,
)

_command_adapter: TypeAdapter = TypeAdapter(Command)


def parse_command(data: Any) -> BaseModel:
    """
    Build a command from a dict (or return an existing command as is).

    Raises:
        pydantic.ValidationError: unknown `type` or bad payload
    """
    if isinstance(data, COMMAND_TYPES):
        return data
    return _command_adapter.validate_python(data)
