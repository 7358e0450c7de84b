import dataclasses

import pytest

from floorgen.config import GeneratorSettings
from floorgen.generators.layout_cache import (
    CachedLayout,
    CachedRoomPlacement,
    capture_layout,
    resolve_placements,
)
from floorgen.errors import CacheReplayError
from floorgen.pipeline import FloorGenerator, FloorStateManager


def _layout(generator: FloorGenerator):
    return [
        (generator.catalog.identity_of(room.template), room.transform_tuple(), room.name)
        for room in generator.rooms
    ]


def test_first_success_is_cached(corridor_catalog, floor_states) -> None:
    generator = FloorGenerator(corridor_catalog, floor_states)
    generator.generate(1)

    layout = floor_states.get_floor_state(1).cached_layout

    assert layout is not None and layout.is_replayable
    assert len(layout.placements) == len(generator.rooms)
    assert layout.placements[0].template_identity == "SafeElevatorRoom"
    assert layout.placements[-1].template_identity == "ExitElevatorRoom"
    assert layout.placements[1].instance_name == "Corridor_Straight_1"


def test_cache_is_written_only_once(corridor_catalog, floor_states) -> None:
    generator = FloorGenerator(corridor_catalog, floor_states)
    generator.generate(1)
    layout = floor_states.get_floor_state(1).cached_layout

    generator.generate(1)

    assert floor_states.get_floor_state(1).cached_layout is layout


def test_revisit_replays_exactly_without_drawing(corridor_catalog, floor_states) -> None:
    generator = FloorGenerator(corridor_catalog, floor_states)
    original = generator.generate(1)
    expected = _layout(generator)
    draws_before = generator.rng.draw_count

    floor_states.mark_floor_visited(1)
    replayed = generator.generate(1)

    assert replayed.success
    assert replayed.replayed
    assert generator.rng.draw_count == draws_before
    assert _layout(generator) == expected
    assert replayed.connections_made == original.connections_made
    assert replayed.credits_remaining == 0
    assert generator.exit_room is not None
    assert replayed.validation.passed, replayed.validation.report()


def test_replay_restores_connections_and_seals(station_catalog, floor_states) -> None:
    generator = FloorGenerator(station_catalog, floor_states)
    generator.generate(1)
    connected = sorted(s.qualified_name for r in generator.rooms for s in r.sockets if s.is_connected)

    floor_states.mark_floor_visited(1)
    generator.generate(1)

    replayed = {s.qualified_name for r in generator.rooms for s in r.sockets if s.is_connected}
    # Flush neighbours whose doorways line up may gain a connection on replay
    assert set(connected) <= replayed
    open_sockets = [s for r in generator.rooms for s in r.sockets if not s.is_connected]
    assert len(generator.blockades) == len(open_sockets)


def test_replay_from_saved_floor_states(corridor_catalog, floor_states, tmp_path) -> None:
    generator = FloorGenerator(corridor_catalog, floor_states)
    generator.generate(2)
    expected = _layout(generator)
    floor_states.mark_floor_visited(2)
    path = floor_states.save_to_json(tmp_path / "floor_states.json")

    restored = FloorStateManager()
    assert restored.load_from_json(path)
    fresh = FloorGenerator(corridor_catalog, restored)
    result = fresh.generate(2)

    assert result.replayed
    assert fresh.rng.draw_count == 0
    assert _layout(fresh) == expected


def test_replay_budget_grows_to_cover_cached_connections(corridor_catalog, floor_states) -> None:
    generator = FloorGenerator(corridor_catalog, floor_states, GeneratorSettings(door_credit_budget=20))
    generator.generate(1)
    floor_states.mark_floor_visited(1)

    generator.settings.door_credit_budget = 5
    result = generator.generate(1)

    assert result.replayed
    assert result.budget == 20
    assert result.credits_remaining == 0


def test_unresolvable_cache_is_discarded_and_regenerated(corridor_catalog, floor_states) -> None:
    state = floor_states.get_or_create_floor_state(1)
    state.is_visited = True
    state.cached_layout = CachedLayout(placements=(
        CachedRoomPlacement("RemovedRoom", (0.0, 0.0, 0.0), (1.0, 0.0, 0.0, 0.0), "RemovedRoom_0"),
    ))
    generator = FloorGenerator(corridor_catalog, floor_states)

    result = generator.generate(1)

    assert result.success
    assert not result.replayed
    assert state.cached_layout is not None
    assert state.cached_layout.placements[0].template_identity == "SafeElevatorRoom"


def test_resolve_placements_rejects_empty_or_invalid(corridor_catalog) -> None:
    with pytest.raises(CacheReplayError):
        resolve_placements(CachedLayout(), corridor_catalog)

    placement = CachedRoomPlacement("EntryRoom", (0.0, 0.0, 0.0), (1.0, 0.0, 0.0, 0.0), "SafeElevatorRoom")
    with pytest.raises(CacheReplayError):
        resolve_placements(CachedLayout(placements=(placement,), is_valid=False), corridor_catalog)

    resolved = resolve_placements(CachedLayout(placements=(placement,)), corridor_catalog)
    assert resolved[0][1] is corridor_catalog.start_room


def test_capture_uses_catalog_identities(corridor_catalog, floor_states) -> None:
    generator = FloorGenerator(corridor_catalog, floor_states)
    generator.generate(1)

    layout = capture_layout(generator.rooms, corridor_catalog)

    identities = {p.template_identity for p in layout.placements}
    assert identities == {"SafeElevatorRoom", "Corridor_Straight", "ExitElevatorRoom"}


def test_placement_rotation_must_be_quaternion() -> None:
    with pytest.raises(ValueError):
        CachedRoomPlacement.from_dict({'template': 'x', 'position': [0, 0, 0], 'rotation': [0, 90, 0]})


def test_replay_with_stranded_exit_reports_exit_002(corridor_catalog, floor_states) -> None:
    generator = FloorGenerator(corridor_catalog, floor_states)
    generator.generate(1)
    state = floor_states.get_floor_state(1)
    placements = list(state.cached_layout.placements)
    exit_placement = placements[-1]
    x, y, z = exit_placement.position
    placements[-1] = dataclasses.replace(exit_placement, position=(x + 500.0, y, z))
    state.cached_layout = CachedLayout(placements=tuple(placements))
    floor_states.mark_floor_visited(1)

    result = generator.generate(1)

    assert result.replayed
    assert generator.exit_room is not None
    assert "EXIT-002" in result.validation.codes()
    assert any("EXIT-002" in w and "ExitRoom_ExitElevatorRoom" in w for w in result.warnings)
