import pytest

from floorgen.generators.builtin import EXIT_ELEVATOR_ROOM, SAFE_ELEVATOR_ROOM, STRAIGHT_CORRIDOR
from floorgen.generators.room_types import RoomInstance
from floorgen.geometry.vector_math import Quaternion
from floorgen.validation import ValidationError, ValidationStage, room_overlap_report, validate_floor_layout
from floorgen.validation.checks import (
    check_credits,
    check_exit,
    check_room_overlaps,
    check_socket_symmetry,
    classify_overlap,
    reachable_rooms,
)
from floorgen.validation.rules import ALL_RULES


def _room(template=STRAIGHT_CORRIDOR, position=(0.0, 0.0, 0.0), name: str = "") -> RoomInstance:
    return RoomInstance(template, position, Quaternion(), name)


def _start_corridor_exit():
    """Start room, corridor north of it and an exit at the corridor's far end."""
    start = _room(SAFE_ELEVATOR_ROOM, name="SafeElevatorRoom")
    corridor = _room(position=(0.0, 0.0, 8.5), name="Corridor_Straight_1")
    exit_room = RoomInstance(EXIT_ELEVATOR_ROOM, (0.0, 0.0, 16.0), Quaternion(), "ExitRoom_ExitElevatorRoom")
    exit_room.is_exit = True
    start.socket_named("north").connect_to(corridor.socket_named("south"))
    corridor.socket_named("north").connect_to(exit_room.socket_named("south"))
    return start, corridor, exit_room


def test_well_formed_layout_passes() -> None:
    start, corridor, exit_room = _start_corridor_exit()

    result = validate_floor_layout([start, corridor, exit_room], start, budget=2,
                                   credits_remaining=0, connections_made=2,
                                   stage=ValidationStage.REPLAY)

    assert result.passed, result.report()
    assert result.to_dict()['stage'] == "replay"


def test_unconnected_overlap_is_layout_001() -> None:
    a = _room(name="A")
    b = _room(position=(1.0, 0.0, 0.0), name="B")

    result = check_room_overlaps([a, b])

    assert result.codes() == ["LAYOUT-001"]


def test_deep_connected_overlap_is_layout_002() -> None:
    a = _room(name="A")
    b = _room(position=(0.0, 0.0, 2.0), name="B")
    a.socket_named("north").connect_to(b.socket_named("south"))

    result = check_room_overlaps([a, b], max_source_overlap_fraction=0.15)

    assert result.codes() == ["LAYOUT-002"]


def test_doorway_overlap_between_connected_rooms_is_allowed() -> None:
    start, corridor, exit_room = _start_corridor_exit()

    assert check_room_overlaps([start, corridor, exit_room]).passed


def test_one_sided_link_is_sock_001() -> None:
    room = _room(name="A")
    room.socket_named("north").is_connected = True

    result = check_socket_symmetry([room])

    assert result.codes() == ["SOCK-001"]
    assert result.errors[0].socket == "north"


def test_missing_exit_is_exit_001() -> None:
    start = _room(SAFE_ELEVATOR_ROOM)

    assert check_exit([start], start).codes() == ["EXIT-001"]


def test_unreachable_exit_is_exit_002() -> None:
    start = _room(SAFE_ELEVATOR_ROOM, name="start")
    exit_room = RoomInstance(EXIT_ELEVATOR_ROOM, (40.0, 0.0, 0.0), Quaternion(), "exit")
    exit_room.is_exit = True

    result = check_exit([start, exit_room], start)

    assert result.codes() == ["EXIT-002"]
    issue = result.errors[0]
    assert issue.message == "Exit room exit is not reachable from start"
    assert issue.room == "exit"
    assert "room=exit" in issue.format()


def test_reachable_rooms_follows_connections() -> None:
    start, corridor, exit_room = _start_corridor_exit()

    assert reachable_rooms(start) == {start.instance_id, corridor.instance_id, exit_room.instance_id}


def test_credit_mismatch_is_cred_001() -> None:
    assert check_credits(20, 0, 20).passed
    assert check_credits(20, 3, 20).codes() == ["CRED-001"]


def test_fail_fast_raises() -> None:
    start = _room(SAFE_ELEVATOR_ROOM)

    with pytest.raises(ValidationError) as excinfo:
        validate_floor_layout([start], start, 1, 1, 0, fail_fast=True)
    assert "EXIT-001" in excinfo.value.result.codes()


@pytest.mark.parametrize("area, label", [
    (40.0, "MAJOR OVERLAP"),
    (10.0, "MODERATE OVERLAP"),
    (2.0, "minor, likely door connection"),
])
def test_classify_overlap(area: float, label: str) -> None:
    assert classify_overlap(area) == label


def test_overlap_report_lists_pairs() -> None:
    a = _room(name="A")
    b = _room(name="B")

    report = room_overlap_report([a, b])

    assert "Registered rooms: 2" in report
    assert "[MAJOR OVERLAP] [0] A <-> [1] B" in report
    assert "Total overlapping pairs: 1" in report


def test_overlap_report_without_overlaps() -> None:
    report = room_overlap_report([_room(name="A"), _room(position=(30.0, 0.0, 0.0), name="B")])

    assert "No overlapping bounds detected." in report


def test_every_reported_code_is_a_known_rule() -> None:
    start = _room(SAFE_ELEVATOR_ROOM, name="start")
    stranded = RoomInstance(EXIT_ELEVATOR_ROOM, (40.0, 0.0, 0.0), Quaternion(), "exit")
    stranded.is_exit = True
    overlapping = _room(name="overlapping")

    result = validate_floor_layout([start, stranded, overlapping], start, 20, 3, 20)

    assert set(result.codes()) == {"LAYOUT-001", "EXIT-002", "CRED-001"}
    for issue in result.issues:
        rule = ALL_RULES[issue.code]
        assert rule.code == issue.code
        assert rule.severity == issue.severity
