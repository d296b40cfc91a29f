from collections.abc import Iterator

import pytest
from loguru import logger

from medbook.records.adapters.memory import InMemoryRecordStore
from medbook.scheduling.engine import SchedulingEngine
from tests.factories import fixed_clock, make_doctor, make_patient


@pytest.fixture
def store() -> InMemoryRecordStore:
    return InMemoryRecordStore(patients=[make_patient()], doctors=[make_doctor()])


@pytest.fixture
def engine(store: InMemoryRecordStore) -> SchedulingEngine:
    return SchedulingEngine(store, clock=fixed_clock)


@pytest.fixture
def logged_warnings() -> Iterator[list[str]]:
    """Collect the messages of every loguru record at WARNING or above."""
    messages: list[str] = []
    handler_id = logger.add(lambda m: messages.append(m.record["message"]), level="WARNING")
    yield messages
    logger.remove(handler_id)
