"""
Corridor rooms.
"""

from ...geometry.bounds import BoundsShape, LocalBox
from ..room_types import RoomCategory, RoomGeometry, RoomTemplate
from ..socket_system import SocketType
from .dimensions import FRAME_INSET, ROOM_HEIGHT, doorway

H = ROOM_HEIGHT
CY = ROOM_HEIGHT / 2

# 4 wide, 10 long
STRAIGHT_CORRIDOR = RoomTemplate(
    room_id="corridor_straight",
    display_name="Corridor_Straight",
    category=RoomCategory.CORRIDOR,
    spawn_weight=5,
    geometry=RoomGeometry(
        name="Corridor_Straight",
        bounds=BoundsShape.box((0.0, CY, 0.0), (4.0, H, 10.0)),
        sockets=[
            doorway("south", 0.0, -5.0 + FRAME_INSET, 180.0),
            doorway("north", 0.0, 5.0 - FRAME_INSET, 0.0),
        ],
    ),
)

# L shape: leg along Z (x -2..2, z -6..2) turning east (x 2..6, z -2..2)
CORNER_CORRIDOR = RoomTemplate(
    room_id="corridor_corner",
    display_name="Corridor_Corner",
    category=RoomCategory.CORRIDOR,
    spawn_weight=4,
    geometry=RoomGeometry(
        name="Corridor_Corner",
        bounds=BoundsShape.compound([
            LocalBox((0.0, CY, -2.0), (4.0, H, 8.0), "leg"),
            LocalBox((4.0, CY, 0.0), (4.0, H, 4.0), "turn"),
        ]),
        sockets=[
            doorway("south", 0.0, -6.0 + FRAME_INSET, 180.0),
            doorway("east", 6.0 - FRAME_INSET, 0.0, 90.0),
        ],
    ),
)

# Sector 3 service corridor with a maintenance hatch at the far end.
# Disabled until maintenance ducts ship.
LAB_CORRIDOR = RoomTemplate(
    room_id="lab_corridor",
    display_name="Lab_Corridor",
    category=RoomCategory.FEATURE,
    sector_number=3,
    spawn_weight=2,
    is_enabled=False,
    geometry=RoomGeometry(
        name="Lab_Corridor",
        bounds=BoundsShape.box((0.0, CY, 0.0), (6.0, H, 12.0)),
        sockets=[
            doorway("south", 0.0, -6.0 + FRAME_INSET, 180.0),
            doorway("hatch", 0.0, 6.0 - FRAME_INSET, 0.0, SocketType.MAINTENANCE),
        ],
    ),
)
