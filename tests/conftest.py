from datetime import datetime, timezone
import pytest
from coordinator import SessionCoordinator, coordinator as shared_coordinator
from transport import transport as shared_transport

FIXED_TIME = datetime(2026, 10, 17, 12, 30, 45, 123000, tzinfo=timezone.utc)


@pytest.fixture
def coordinator():
    return SessionCoordinator(clock=lambda: FIXED_TIME)


@pytest.fixture(autouse=True)
def reset_shared_state():
    shared_coordinator.clear()
    shared_transport.clear()
    yield
    shared_coordinator.clear()
    shared_transport.clear()


def by_event(outbound):
    """Map event name -> list of Emit for assertions that ignore ordering across recipients."""
    grouped = {}
    for emit in outbound:
        grouped.setdefault(emit.event, []).append(emit)
    return grouped
