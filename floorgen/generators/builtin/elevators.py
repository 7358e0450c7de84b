"""
Elevator rooms: the floor's start point and its exit.
"""

from ...geometry.bounds import BoundsShape
from ..room_types import RoomCategory, RoomGeometry, RoomTemplate
from .dimensions import FRAME_INSET, ROOM_HEIGHT, doorway

# 8 x 8 lobby with doorways north, east and west
SAFE_ELEVATOR_ROOM = RoomTemplate(
    room_id="safe_elevator",
    display_name="SafeElevatorRoom",
    category=RoomCategory.SAFE_ROOM,
    spawn_weight=1,
    geometry=RoomGeometry(
        name="SafeElevatorRoom",
        bounds=BoundsShape.box((0.0, ROOM_HEIGHT / 2, 0.0), (8.0, ROOM_HEIGHT, 8.0)),
        sockets=[
            doorway("north", 0.0, 4.0 - FRAME_INSET, 0.0),
            doorway("east", 4.0 - FRAME_INSET, 0.0, 90.0),
            doorway("west", -4.0 + FRAME_INSET, 0.0, 270.0),
        ],
    ),
)

# 6 x 6 car with a single doorway to the south
EXIT_ELEVATOR_ROOM = RoomTemplate(
    room_id="exit_elevator",
    display_name="ExitElevatorRoom",
    category=RoomCategory.EXIT_ELEVATOR,
    spawn_weight=1,
    geometry=RoomGeometry(
        name="ExitElevatorRoom",
        bounds=BoundsShape.box((0.0, ROOM_HEIGHT / 2, 0.0), (6.0, ROOM_HEIGHT, 6.0)),
        sockets=[
            doorway("south", 0.0, -3.0 + FRAME_INSET, 180.0),
        ],
    ),
)
