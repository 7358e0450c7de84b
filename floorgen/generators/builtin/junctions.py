"""
Junctions, hubs and dead-end rooms.
"""

from ...geometry.bounds import BoundsShape, LocalBox
from ..room_types import RoomCategory, RoomGeometry, RoomTemplate
from .dimensions import FRAME_INSET, ROOM_HEIGHT, doorway

H = ROOM_HEIGHT
CY = ROOM_HEIGHT / 2

# T shape: cross bar (x -6..6, z 0..4) over a stem (x -2..2, z -6..0)
T_JUNCTION = RoomTemplate(
    room_id="junction_t",
    display_name="Junction_T",
    category=RoomCategory.INTERSECTION,
    spawn_weight=3,
    geometry=RoomGeometry(
        name="Junction_T",
        bounds=BoundsShape.compound([
            LocalBox((0.0, CY, 2.0), (12.0, H, 4.0), "bar"),
            LocalBox((0.0, CY, -3.0), (4.0, H, 6.0), "stem"),
        ]),
        sockets=[
            doorway("south", 0.0, -6.0 + FRAME_INSET, 180.0),
            doorway("west", -6.0 + FRAME_INSET, 2.0, 270.0),
            doorway("east", 6.0 - FRAME_INSET, 2.0, 90.0),
        ],
    ),
)

# Plus shape, 14 x 14 overall with 4-wide arms
CROSS_HUB = RoomTemplate(
    room_id="hub_cross",
    display_name="Hub_Cross",
    category=RoomCategory.HUB,
    spawn_weight=2,
    geometry=RoomGeometry(
        name="Hub_Cross",
        bounds=BoundsShape.compound([
            LocalBox((0.0, CY, 0.0), (14.0, H, 4.0), "east_west"),
            LocalBox((0.0, CY, 4.5), (4.0, H, 5.0), "north_arm"),
            LocalBox((0.0, CY, -4.5), (4.0, H, 5.0), "south_arm"),
        ]),
        sockets=[
            doorway("south", 0.0, -7.0 + FRAME_INSET, 180.0),
            doorway("north", 0.0, 7.0 - FRAME_INSET, 0.0),
            doorway("east", 7.0 - FRAME_INSET, 0.0, 90.0),
            doorway("west", -7.0 + FRAME_INSET, 0.0, 270.0),
        ],
    ),
)

STORAGE_CLOSET = RoomTemplate(
    room_id="storage_closet",
    display_name="Storage_Closet",
    category=RoomCategory.TERMINUS,
    spawn_weight=2,
    geometry=RoomGeometry(
        name="Storage_Closet",
        bounds=BoundsShape.box((0.0, CY, 0.0), (4.0, H, 4.0)),
        sockets=[
            doorway("south", 0.0, -2.0 + FRAME_INSET, 180.0),
        ],
    ),
)
