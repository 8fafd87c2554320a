"""Shared pytest fixtures for farmledger tests."""

from datetime import datetime
from decimal import Decimal

import pytest

from farmledger.audit import AuditLogger, MemoryAuditSink
from farmledger.models.records import (
    Enterprise,
    FarmTask,
    TaskEnterprise,
    Transaction,
    TransactionKind,
)
from farmledger.storage import ChangeBus, MemoryBackend, PersistenceAdapter
from farmledger.store import StateStore


STORAGE_KEY = "test-farm-data"


@pytest.fixture
def audit_sink():
    return MemoryAuditSink()


@pytest.fixture
def audit_logger(audit_sink):
    return AuditLogger(sink=audit_sink)


@pytest.fixture
def bus(audit_logger):
    return ChangeBus(audit_logger)


@pytest.fixture
def backend(bus):
    """In-memory storage shared by every store of one test."""
    return MemoryBackend(bus=bus)


@pytest.fixture
def make_store(backend, bus, audit_logger):
    """Build a store (a "tab") attached to the shared storage."""
    stores = []

    def _make(context_id=None, default=None):
        adapter = PersistenceAdapter(backend, context_id=context_id, audit_logger=audit_logger)
        store = StateStore(adapter, bus=bus, key=STORAGE_KEY, default=default)
        stores.append(store)
        return store

    yield _make

    for store in stores:
        store.close()


@pytest.fixture
def store(make_store):
    return make_store("tab-1")


@pytest.fixture
def t1():
    return Transaction(
        id="t1",
        enterprise=Enterprise.DAIRY,
        kind=TransactionKind.INCOME,
        category="Milk Sales",
        amount=Decimal("120"),
        date=datetime(2024, 1, 1),
        description="",
    )


@pytest.fixture
def t2():
    return Transaction(
        id="t2",
        enterprise=Enterprise.POULTRY,
        kind=TransactionKind.EXPENSE,
        category="Feed",
        amount=Decimal("45.50"),
        date=datetime(2024, 1, 3),
        description="Layer mash",
    )


@pytest.fixture
def t3():
    return Transaction(
        id="t3",
        enterprise=Enterprise.DAIRY,
        kind=TransactionKind.EXPENSE,
        category="Veterinary",
        amount=Decimal("80"),
        date=datetime(2024, 2, 10),
    )


@pytest.fixture
def task():
    return FarmTask(
        id="task-1",
        date=datetime(2024, 3, 1, 8, 0),
        title="Vaccinate herd",
        enterprise=TaskEnterprise.DAIRY,
    )
