"""
Built-in station room templates.
"""

import copy

from ..catalog import RoomCatalog
from .elevators import SAFE_ELEVATOR_ROOM, EXIT_ELEVATOR_ROOM
from .corridors import STRAIGHT_CORRIDOR, CORNER_CORRIDOR, LAB_CORRIDOR
from .junctions import T_JUNCTION, CROSS_HUB, STORAGE_CLOSET


def register_builtin_rooms(catalog: RoomCatalog) -> None:
    """Register all built-in rooms and designate the elevators.

    The catalog receives its own copies, so editing one catalog's geometry
    leaves the module templates and every other catalog untouched.
    """
    catalog.start_room = copy.deepcopy(SAFE_ELEVATOR_ROOM)
    catalog.exit_room = copy.deepcopy(EXIT_ELEVATOR_ROOM)
    for template in (STRAIGHT_CORRIDOR, CORNER_CORRIDOR, LAB_CORRIDOR,
                     T_JUNCTION, CROSS_HUB, STORAGE_CLOSET):
        catalog.register(copy.deepcopy(template))


def create_default_catalog() -> RoomCatalog:
    catalog = RoomCatalog(name="station")
    register_builtin_rooms(catalog)
    return catalog


__all__ = [
    'SAFE_ELEVATOR_ROOM',
    'EXIT_ELEVATOR_ROOM',
    'STRAIGHT_CORRIDOR',
    'CORNER_CORRIDOR',
    'LAB_CORRIDOR',
    'T_JUNCTION',
    'CROSS_HUB',
    'STORAGE_CLOSET',
    'register_builtin_rooms',
    'create_default_catalog',
]
