"""
Whole-floor layout checks.

Validates a finished floor for:
- LAYOUT-001: Overlap between rooms that are not directly connected
- LAYOUT-002: Excessive overlap between directly connected rooms
- SOCK-001: Asymmetric socket links
- EXIT-001 / EXIT-002: Exactly one exit, reachable from the start room
- CRED-001: Door credit accounting
"""

import logging
from collections import deque
from typing import List, Optional, Sequence, Set

from floorgen.generators.occupancy import DEFAULT_MAX_SOURCE_OVERLAP, footprint_overlap_fraction
from floorgen.generators.room_types import RoomInstance
from ..core import ValidationError, ValidationResult, ValidationStage
from ..rules import CRED_001, EXIT_001, EXIT_002, LAYOUT_001, LAYOUT_002, SOCK_001

logger = logging.getLogger(__name__)

# Slack for floating point noise when comparing overlap fractions
FRACTION_TOLERANCE = 1e-9


def check_room_overlaps(rooms: Sequence[RoomInstance],
                        max_source_overlap_fraction: float = DEFAULT_MAX_SOURCE_OVERLAP
                        ) -> ValidationResult:
    result = ValidationResult()
    records = [room.spatial_record() for room in rooms]

    for i, room_a in enumerate(rooms):
        neighbours = room_a.connected_rooms()
        for j in range(i + 1, len(rooms)):
            room_b = rooms[j]
            if room_b in neighbours:
                fraction = footprint_overlap_fraction(records[i], records[j])
                if fraction > max_source_overlap_fraction + FRACTION_TOLERANCE:
                    result.add_issue(LAYOUT_002.issue(
                        room=room_a.name, room_a=room_a.name, room_b=room_b.name,
                        fraction=fraction, limit=max_source_overlap_fraction,
                    ))
            elif records[i].intersects(records[j]):
                result.add_issue(LAYOUT_001.issue(
                    room=room_a.name, room_a=room_a.name, room_b=room_b.name,
                ))
    return result


def check_socket_symmetry(rooms: Sequence[RoomInstance]) -> ValidationResult:
    result = ValidationResult()
    for room in rooms:
        for socket in room.sockets:
            peer = socket.connected_socket
            details = None
            if socket.is_connected and peer is None:
                details = f"{socket.qualified_name} is connected without a peer"
            elif peer is not None and not socket.is_connected:
                details = f"{socket.qualified_name} has a peer but is not connected"
            elif peer is not None and (peer.connected_socket is not socket or not peer.is_connected):
                details = f"{socket.qualified_name} -> {peer.qualified_name} is not linked back"
            if details:
                result.add_issue(SOCK_001.issue(room=room.name, socket=socket.name, details=details))
    return result


def reachable_rooms(start: RoomInstance) -> Set[int]:
    """Instance ids reachable from `start` through connected sockets."""
    seen = {start.instance_id}
    queue = deque([start])
    while queue:
        room = queue.popleft()
        for neighbour in room.connected_rooms():
            if neighbour.instance_id not in seen:
                seen.add(neighbour.instance_id)
                queue.append(neighbour)
    return seen


def check_exit(rooms: Sequence[RoomInstance], start_room: Optional[RoomInstance]) -> ValidationResult:
    result = ValidationResult()
    exits = [room for room in rooms if room.is_exit]
    if len(exits) != 1:
        result.add_issue(EXIT_001.issue(count=len(exits)))
        return result

    exit_room = exits[0]
    if start_room is None or exit_room.instance_id not in reachable_rooms(start_room):
        start = start_room.name if start_room is not None else "<no start room>"
        result.add_issue(EXIT_002.issue(room=exit_room.name, start=start))
    return result


def check_credits(budget: int, credits_remaining: int, connections_made: int) -> ValidationResult:
    result = ValidationResult()
    if connections_made != budget - credits_remaining:
        result.add_issue(CRED_001.issue(
            connections=connections_made, budget=budget, remaining=credits_remaining,
        ))
    return result


def validate_floor_layout(rooms: List[RoomInstance],
                          start_room: Optional[RoomInstance],
                          budget: int,
                          credits_remaining: int,
                          connections_made: int,
                          max_source_overlap_fraction: float = DEFAULT_MAX_SOURCE_OVERLAP,
                          stage: ValidationStage = ValidationStage.GENERATION,
                          fail_fast: bool = False) -> ValidationResult:
    """Run every floor check.

    Args:
        fail_fast: Raise ValidationError instead of returning a failed result

    Raises:
        ValidationError: If fail_fast is set and any FAIL issue was found
    """
    result = ValidationResult(stage=stage)
    result.merge(check_room_overlaps(rooms, max_source_overlap_fraction))
    result.merge(check_socket_symmetry(rooms))
    result.merge(check_exit(rooms, start_room))
    result.merge(check_credits(budget, credits_remaining, connections_made))

    if result.failed:
        logger.debug(result.report())
        if fail_fast:
            raise ValidationError(result)
    return result
