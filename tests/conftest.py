import pytest

from floorgen.generators.builtin import (
    EXIT_ELEVATOR_ROOM,
    SAFE_ELEVATOR_ROOM,
    STRAIGHT_CORRIDOR,
    create_default_catalog,
)
from floorgen.generators.catalog import RoomCatalog
from floorgen.pipeline import FloorStateManager


@pytest.fixture
def corridor_catalog() -> RoomCatalog:
    """Start/exit elevator pair plus a single two-socket corridor."""
    catalog = RoomCatalog(name="corridors", start_room=SAFE_ELEVATOR_ROOM, exit_room=EXIT_ELEVATOR_ROOM)
    catalog.register(STRAIGHT_CORRIDOR)
    return catalog


@pytest.fixture
def station_catalog() -> RoomCatalog:
    return create_default_catalog()


@pytest.fixture
def floor_states() -> FloorStateManager:
    states = FloorStateManager()
    states.initialize(12345)
    return states
