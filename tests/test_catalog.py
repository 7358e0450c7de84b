from typing import List, Tuple

import pytest

from floorgen.generators.builtin import (
    CORNER_CORRIDOR,
    CROSS_HUB,
    EXIT_ELEVATOR_ROOM,
    LAB_CORRIDOR,
    SAFE_ELEVATOR_ROOM,
    STRAIGHT_CORRIDOR,
    create_default_catalog,
)
from floorgen.generators.catalog import RoomCatalog
from floorgen.generators.catalog_storage import load_catalog_from_path, save_catalog
from floorgen.generators.random_source import SeededRandom
from floorgen.generators.room_types import RoomCategory, RoomGeometry, RoomTemplate
from floorgen.generators.socket_system import SocketSpec, SocketType
from floorgen.geometry.bounds import BoundsShape


class ScriptedRandom:
    """Returns queued values and records the requested ranges."""

    def __init__(self, values: List[int]) -> None:
        self.values = list(values)
        self.calls: List[Tuple[int, int]] = []

    def uniform_int(self, minimum: int, maximum_exclusive: int) -> int:
        self.calls.append((minimum, maximum_exclusive))
        return self.values.pop(0)


def _template(room_id: str, weight: int = 5, category: RoomCategory = RoomCategory.CORRIDOR,
              sector: int = 1, display_name: str = "", geometry_name: str = "") -> RoomTemplate:
    return RoomTemplate(
        room_id=room_id,
        display_name=display_name,
        category=category,
        sector_number=sector,
        spawn_weight=weight,
        geometry=RoomGeometry(
            name=geometry_name or room_id,
            bounds=BoundsShape.box((0.0, 2.0, 0.0), (4.0, 4.0, 4.0)),
            sockets=[SocketSpec.facing("south", (0.0, 0.0, -1.75), 180.0)],
        ),
    )


@pytest.mark.parametrize("roll, expected", [(0, "a"), (4, "a"), (5, "b"), (6, "c"), (8, "c")])
def test_weighted_pick_walks_cumulative_weights(roll: int, expected: str) -> None:
    candidates = [_template("a", weight=5), _template("b", weight=0), _template("c", weight=3)]
    rng = ScriptedRandom([roll])

    picked = RoomCatalog.weighted_pick(candidates, rng)

    assert picked.room_id == expected
    # Zero weight counts as one: 5 + 1 + 3
    assert rng.calls == [(0, 9)]


def test_weighted_pick_empty_returns_none_without_drawing() -> None:
    rng = ScriptedRandom([])

    assert RoomCatalog.weighted_pick([], rng) is None
    assert rng.calls == []


def test_lookup_filters_by_socket_type_and_enabled(station_catalog: RoomCatalog) -> None:
    standard = station_catalog.lookup(SocketType.STANDARD)

    assert [t.room_id for t in standard] == [
        "corridor_straight", "corridor_corner", "junction_t", "hub_cross", "storage_closet",
    ]
    assert LAB_CORRIDOR in station_catalog.lookup(SocketType.STANDARD, include_disabled=True)
    assert station_catalog.lookup(SocketType.MAINTENANCE) == []
    assert station_catalog.lookup(SocketType.MAINTENANCE, include_disabled=True) == [LAB_CORRIDOR]


def test_lookup_by_category_and_sector(station_catalog: RoomCatalog) -> None:
    assert station_catalog.lookup(SocketType.STANDARD, category=RoomCategory.HUB) == [CROSS_HUB]
    assert station_catalog.lookup(SocketType.STANDARD, sector=3) == []
    assert station_catalog.lookup(SocketType.STANDARD, sector=3, include_disabled=True) == [LAB_CORRIDOR]


def test_special_rooms_stay_out_of_growth_pool() -> None:
    catalog = RoomCatalog()
    extra_exit = _template("service_lift", category=RoomCategory.EXIT_ELEVATOR)
    catalog.register(_template("hall"))
    catalog.register(extra_exit)

    assert [t.room_id for t in catalog.lookup(SocketType.STANDARD)] == ["hall"]
    assert catalog.lookup(SocketType.STANDARD, category=RoomCategory.EXIT_ELEVATOR) == [extra_exit]
    assert catalog.exit_candidates(SocketType.STANDARD) == [extra_exit]
    assert catalog.has_exit()


def test_single_candidate_is_returned_without_drawing(corridor_catalog: RoomCatalog) -> None:
    rng = SeededRandom(1)

    picked = corridor_catalog.random_room_with_socket_type(SocketType.STANDARD, rng)

    assert picked is STRAIGHT_CORRIDOR
    assert rng.draw_count == 0


def test_empty_sector_falls_back_to_all_sectors(station_catalog: RoomCatalog) -> None:
    rng = SeededRandom(7)

    picked = station_catalog.random_room_with_socket_type(SocketType.STANDARD, rng, sector=5)

    assert picked in station_catalog.lookup(SocketType.STANDARD)
    assert rng.draw_count == 1


def test_find_by_identity_handles_aliases(station_catalog: RoomCatalog) -> None:
    assert station_catalog.find_by_identity("SafeElevatorRoom") is station_catalog.start_room
    assert station_catalog.find_by_identity("EntryRoom") is station_catalog.start_room
    assert station_catalog.find_by_identity("ExitRoom") is station_catalog.exit_room
    assert station_catalog.find_by_identity("Corridor_Straight") == STRAIGHT_CORRIDOR
    assert station_catalog.find_by_identity("corridor_corner") == CORNER_CORRIDOR
    assert station_catalog.find_by_identity("Nonexistent") is None
    assert station_catalog.find_by_identity("") is None


def test_find_by_identity_priority() -> None:
    catalog = RoomCatalog()
    by_geometry = _template("r1", geometry_name="Shared")
    by_display = _template("r2", display_name="Shared")
    catalog.register(by_geometry)
    catalog.register(by_display)

    assert catalog.find_by_identity("Shared") is by_display
    assert catalog.find_by_identity("r1") is by_geometry


def test_identity_of_designated_rooms(station_catalog: RoomCatalog) -> None:
    assert station_catalog.identity_of(station_catalog.start_room) == "SafeElevatorRoom"
    assert station_catalog.identity_of(station_catalog.exit_room) == "ExitElevatorRoom"
    assert station_catalog.identity_of(CROSS_HUB) == "Hub_Cross"


def test_register_replaces_same_room_id() -> None:
    catalog = RoomCatalog()
    catalog.register(_template("hall", weight=1))
    catalog.register(_template("hall", weight=9))

    assert len(catalog) == 1
    assert catalog.get("hall").spawn_weight == 9
    assert catalog.unregister("hall")
    assert not catalog.unregister("hall")


def test_refresh_recomputes_socket_inventory() -> None:
    template = _template("hall")
    template.geometry.sockets.append(SocketSpec.facing("hatch", (0.0, 0.0, 1.75), 0.0,
                                                       socket_type=SocketType.MAINTENANCE))
    catalog = RoomCatalog()
    catalog.register(template)

    catalog.refresh_all_rooms()

    assert template.socket_count == 2
    assert template.socket_types == [SocketType.STANDARD, SocketType.MAINTENANCE]


def test_validate_reports_missing_pieces() -> None:
    problems = RoomCatalog().validate()

    assert "Catalog has no room templates" in problems
    assert "No start room designated" in problems
    assert "No exit room designated" in problems


def test_station_catalog_is_valid(station_catalog: RoomCatalog) -> None:
    assert station_catalog.is_valid()
    assert station_catalog.has_all_special_rooms()


def test_statistics(station_catalog: RoomCatalog) -> None:
    stats = station_catalog.statistics()

    assert stats.total_rooms == 6
    assert stats.enabled_rooms == 5
    assert stats.by_category == {"CORRIDOR": 2, "INTERSECTION": 1, "HUB": 1, "TERMINUS": 1}
    assert stats.by_socket_type == {"standard": 5}
    assert "5/6 rooms enabled" in stats.summary()


def test_catalog_file_round_trip(station_catalog: RoomCatalog, tmp_path) -> None:
    path = save_catalog(station_catalog, tmp_path / "station.json")

    loaded = load_catalog_from_path(path)

    assert loaded is not None
    assert loaded.name == "station"
    assert [t.room_id for t in loaded.rooms] == [t.room_id for t in station_catalog.rooms]
    assert loaded.start_room.identifier == "SafeElevatorRoom"
    assert loaded.get("corridor_corner").geometry.bounds.is_compound
    assert loaded.get("lab_corridor").socket_types == [SocketType.STANDARD, SocketType.MAINTENANCE]
    assert loaded.is_valid()


def test_load_catalog_missing_or_malformed(tmp_path) -> None:
    bad = tmp_path / "bad.json"
    bad.write_text("{not json", encoding="utf-8")

    assert load_catalog_from_path(tmp_path / "missing.json") is None
    assert load_catalog_from_path(bad) is None


def test_rooms_by_sector_lists_enabled_rooms(station_catalog: RoomCatalog) -> None:
    assert [t.room_id for t in station_catalog.rooms_by_sector(1)] == [
        "corridor_straight", "corridor_corner", "junction_t", "hub_cross", "storage_closet",
    ]
    # The lab corridor is the only sector 3 room and ships disabled
    assert station_catalog.rooms_by_sector(3) == []


def test_default_catalogs_do_not_share_templates() -> None:
    first = create_default_catalog()
    second = create_default_catalog()

    first.start_room.geometry.sockets.pop()
    first.start_room.refresh_socket_info()
    first.get("corridor_straight").spawn_weight = 1

    assert second.start_room.socket_count == 3
    assert second.start_room == SAFE_ELEVATOR_ROOM
    assert second.start_room is not SAFE_ELEVATOR_ROOM
    assert second.exit_room == EXIT_ELEVATOR_ROOM
    assert second.get("corridor_straight").spawn_weight == STRAIGHT_CORRIDOR.spawn_weight
    assert SAFE_ELEVATOR_ROOM.socket_count == 3
