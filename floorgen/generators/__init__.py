"""
Room templates, sockets, catalog lookup and placement bookkeeping.
"""

from .socket_system import (
    Blockade,
    ConnectionResolver,
    Connector,
    Socket,
    SocketSpec,
    SocketType,
    is_compatible,
)
from .room_types import RoomCategory, RoomGeometry, RoomInstance, RoomTemplate
from .random_source import SeededRandom
from .catalog import (
    EXIT_ROOM_IDENTIFIER,
    START_ROOM_IDENTIFIER,
    CatalogStatistics,
    RoomCatalog,
)
from .catalog_storage import load_catalog_from_path, save_catalog
from .occupancy import OccupancyEntry, OccupancyRegistry, footprint_overlap_fraction
from .instantiation import InMemoryInstantiator, InstantiationService
from .layout_cache import CachedLayout, CachedRoomPlacement, capture_layout, resolve_placements

__all__ = [
    'Blockade', 'ConnectionResolver', 'Connector', 'Socket', 'SocketSpec',
    'SocketType', 'is_compatible',
    'RoomCategory', 'RoomGeometry', 'RoomInstance', 'RoomTemplate',
    'SeededRandom',
    'EXIT_ROOM_IDENTIFIER', 'START_ROOM_IDENTIFIER', 'CatalogStatistics', 'RoomCatalog',
    'load_catalog_from_path', 'save_catalog',
    'OccupancyEntry', 'OccupancyRegistry', 'footprint_overlap_fraction',
    'InMemoryInstantiator', 'InstantiationService',
    'CachedLayout', 'CachedRoomPlacement', 'capture_layout', 'resolve_placements',
]
