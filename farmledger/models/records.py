"""
Core Data Models for Farm Ledger

These models define the strict schemas for everything the store owns.
They are designed to:
1. Be immutable, so a committed state can never change under a reader
2. Serialize to exactly the persisted JSON document
3. Tolerate absent fields by filling structural defaults

DESIGN DECISION: All models are frozen pydantic v2 models and all
collections are tuples. The reducer builds new values instead of
mutating old ones, and pydantic enforces that at runtime.
"""

from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_serializer
from pydantic.alias_generators import to_camel


# =============================================================================
# ENUMS - Finite set of valid values
# =============================================================================

class Enterprise(str, Enum):
    """The livestock line of business a transaction belongs to."""
    DAIRY = "dairy"
    POULTRY = "poultry"


class TransactionKind(str, Enum):
    """Direction of money for a transaction."""
    INCOME = "income"
    EXPENSE = "expense"


class TaskEnterprise(str, Enum):
    """Tasks can also belong to the farm as a whole."""
    DAIRY = "dairy"
    POULTRY = "poultry"
    GENERAL = "general"


class TaskStatus(str, Enum):
    PENDING = "pending"
    COMPLETED = "completed"


# =============================================================================
# RECORDS
# =============================================================================

class Transaction(BaseModel):
    """
    A single financial transaction.

    CRITICAL: `id` is generated by the caller and never changes.
    The store does not generate or deduplicate ids.
    """
    model_config = ConfigDict(frozen=True)

    id: str = Field(
        ...,
        min_length=1,
        description="Opaque, caller-generated unique identifier"
    )
    date: datetime = Field(
        ...,
        description="When the transaction happened (ISO 8601)"
    )
    enterprise: Enterprise
    kind: TransactionKind
    category: str = Field(
        ...,
        description="Free-form category such as 'Milk Sales' or 'Feed'"
    )
    amount: Decimal = Field(
        ...,
        ge=0,
        description="Non-negative amount, currency-agnostic"
    )
    description: str = Field(
        default="",
        description="Optional free text"
    )

    @field_serializer("amount", when_used="json")
    def serialize_amount(self, amount: Decimal) -> Union[int, float]:
        """Persist amounts as JSON numbers (120, 45.5), not strings."""
        if amount == amount.to_integral_value():
            return int(amount)
        return float(amount)


class FarmTask(BaseModel):
    """A scheduled farm chore, e.g. vaccinating the herd."""
    model_config = ConfigDict(frozen=True)

    id: str = Field(..., min_length=1)
    date: datetime
    title: str = Field(..., min_length=1)
    enterprise: TaskEnterprise = TaskEnterprise.GENERAL
    description: str = ""
    status: TaskStatus = TaskStatus.PENDING


# =============================================================================
# SETTINGS
# =============================================================================

class FarmSettings(BaseModel):
    """
    Singleton farm settings.

    Persisted with camelCase keys (farmName, managerName, ...).
    Every field has a default, so a default instance always exists.
    """
    model_config = ConfigDict(
        frozen=True,
        alias_generator=to_camel,
        populate_by_name=True,
    )

    farm_name: str = "My Farm"
    manager_name: str = "Farm Manager"
    location: str = "Green Valley"
    currency: str = "USD"


class SettingsPatch(BaseModel):
    """
    Partial settings update.

    Only fields that are supplied and not None are merged.
    """
    model_config = ConfigDict(
        frozen=True,
        alias_generator=to_camel,
        populate_by_name=True,
    )

    farm_name: Optional[str] = None
    manager_name: Optional[str] = None
    location: Optional[str] = None
    currency: Optional[str] = None

    def changes(self) -> dict[str, str]:
        """Return the supplied fields keyed by attribute name."""
        return self.model_dump(exclude_none=True)


# =============================================================================
# AGGREGATE ROOT
# =============================================================================

class AppState(BaseModel):
    """
    Everything the user owns, as one value.

    This is the only unit ever persisted or restored.
    """
    model_config = ConfigDict(frozen=True)

    transactions: tuple[Transaction, ...] = ()
    tasks: tuple[FarmTask, ...] = ()
    settings: FarmSettings = Field(default_factory=FarmSettings)

    def to_json(self) -> str:
        """Serialize to the persisted JSON document."""
        return self.model_dump_json(by_alias=True)

    def find_transaction(self, transaction_id: str) -> Optional[Transaction]:
        for transaction in self.transactions:
            if transaction.id == transaction_id:
                return transaction
        return None

    def find_task(self, task_id: str) -> Optional[FarmTask]:
        for task in self.tasks:
            if task.id == task_id:
                return task
        return None


def default_app_state() -> AppState:
    """The structural default: no records, default settings."""
    return AppState()
