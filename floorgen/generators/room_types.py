"""
Room templates and placed room instances.

A RoomTemplate is a catalog entry: tags used for selection plus a
RoomGeometry describing the local bounds and sockets. A RoomInstance is a
template placed at a world transform; it owns live Socket objects.
"""

from __future__ import annotations

import itertools
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple

import numpy as np

from floorgen.geometry.bounds import BoundsShape, SpatialRecord
from floorgen.geometry.vector_math import Quaternion, VectorLike, as_vec3, vector_tuple
from .socket_system import Socket, SocketSpec, SocketType


class RoomCategory(Enum):
    """Room role. Special categories never enter the growth pool."""
    CORRIDOR = 0
    INTERSECTION = 1
    HUB = 2
    FEATURE = 3
    TERMINUS = 4
    ENTRY_ELEVATOR = 100
    EXIT_ELEVATOR = 101
    SAFE_ROOM = 102

    @property
    def is_special(self) -> bool:
        return self.value >= 100


# Valid sector numbers for sector-restricted templates
MIN_SECTOR = 1
MAX_SECTOR = 5


@dataclass
class RoomGeometry:
    """Instantiable geometry: local bounds and socket declarations."""
    name: str
    bounds: BoundsShape
    sockets: List[SocketSpec] = field(default_factory=list)
    default_rotation: Quaternion = Quaternion()

    def socket_named(self, name: str) -> Optional[SocketSpec]:
        for spec in self.sockets:
            if spec.name == name:
                return spec
        return None

    def to_dict(self) -> Dict[str, Any]:
        return {
            'name': self.name,
            'bounds': self.bounds.to_dict(),
            'sockets': [s.to_dict() for s in self.sockets],
            'default_rotation': list(self.default_rotation.as_tuple()),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'RoomGeometry':
        return cls(
            name=data['name'],
            bounds=BoundsShape.from_dict(data.get('bounds', {})),
            sockets=[SocketSpec.from_dict(s) for s in data.get('sockets', [])],
            default_rotation=Quaternion.from_tuple(data.get('default_rotation', (1.0, 0.0, 0.0, 0.0))),
        )


@dataclass
class RoomTemplate:
    """Catalog entry for a room.

    socket_types and socket_count are derived from the geometry by
    refresh_socket_info() and are otherwise treated as read-only.
    """
    room_id: str
    display_name: str = ""
    category: RoomCategory = RoomCategory.CORRIDOR
    sector_number: int = MIN_SECTOR
    spawn_weight: int = 5
    is_enabled: bool = True
    socket_types: List[SocketType] = field(default_factory=list)
    socket_count: int = 0
    geometry: Optional[RoomGeometry] = None

    def __post_init__(self):
        if self.geometry is not None and not self.socket_types:
            self.refresh_socket_info()

    @property
    def identifier(self) -> str:
        """Display name, falling back to the id and then the geometry name."""
        if self.display_name:
            return self.display_name
        if self.room_id:
            return self.room_id
        return self.geometry.name if self.geometry is not None else ""

    def refresh_socket_info(self) -> None:
        """Recompute the socket-type inventory and count from the geometry."""
        self.socket_types = []
        self.socket_count = 0
        if self.geometry is None:
            return
        for spec in self.geometry.sockets:
            if spec.socket_type not in self.socket_types:
                self.socket_types.append(spec.socket_type)
        self.socket_count = len(self.geometry.sockets)

    def has_socket_type(self, socket_type: SocketType) -> bool:
        return socket_type in self.socket_types

    def find_compatible_socket(self, socket_type: SocketType) -> Optional[SocketSpec]:
        """First socket declaration of the given type."""
        if self.geometry is None:
            return None
        for spec in self.geometry.sockets:
            if spec.socket_type == socket_type:
                return spec
        return None

    def is_valid(self) -> bool:
        return (
            self.geometry is not None
            and bool(self.identifier)
            and MIN_SECTOR <= self.sector_number <= MAX_SECTOR
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            'room_id': self.room_id,
            'display_name': self.display_name,
            'category': self.category.name,
            'sector_number': self.sector_number,
            'spawn_weight': self.spawn_weight,
            'is_enabled': self.is_enabled,
            'geometry': self.geometry.to_dict() if self.geometry is not None else None,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'RoomTemplate':
        geometry = data.get('geometry')
        template = cls(
            room_id=data.get('room_id', ''),
            display_name=data.get('display_name', ''),
            category=RoomCategory[data.get('category', RoomCategory.CORRIDOR.name)],
            sector_number=int(data.get('sector_number', MIN_SECTOR)),
            spawn_weight=int(data.get('spawn_weight', 5)),
            is_enabled=bool(data.get('is_enabled', True)),
            geometry=RoomGeometry.from_dict(geometry) if geometry else None,
        )
        template.refresh_socket_info()
        return template


_instance_ids = itertools.count(1)


class RoomInstance:
    """A template placed in the world.

    Acts as the instance handle returned by the instantiation service: its
    transform can be read and set, and its sockets and bounds enumerated.
    """

    def __init__(self, template: RoomTemplate, position: VectorLike,
                 rotation: Quaternion, name: str = ""):
        if template.geometry is None:
            raise ValueError(f"Template '{template.identifier}' has no geometry")
        self.instance_id = next(_instance_ids)
        self.template = template
        self.name = name or template.identifier
        self.bounds: BoundsShape = template.geometry.bounds
        self._position = as_vec3(position)
        self._rotation = rotation
        self.sockets: List[Socket] = [Socket(spec, self) for spec in template.geometry.sockets]
        self.is_exit = False

    def __repr__(self) -> str:
        return f"RoomInstance({self.name!r}, pos={vector_tuple(self._position)})"

    @property
    def position(self) -> np.ndarray:
        return self._position

    @property
    def rotation(self) -> Quaternion:
        return self._rotation

    def set_transform(self, position: VectorLike, rotation: Quaternion) -> None:
        self._position = as_vec3(position)
        self._rotation = rotation

    def transform_tuple(self) -> Tuple[Tuple[float, float, float], Tuple[float, float, float, float]]:
        return vector_tuple(self._position), self._rotation.as_tuple()

    def spatial_record(self) -> SpatialRecord:
        """World footprint at the current transform."""
        return self.bounds.world_record(self._position, self._rotation)

    def unconnected_sockets(self) -> List[Socket]:
        return [s for s in self.sockets if not s.is_connected and s.connected_socket is None]

    def socket_named(self, name: str) -> Optional[Socket]:
        for socket in self.sockets:
            if socket.name == name:
                return socket
        return None

    def find_matching_socket(self, spec: SocketSpec) -> Optional[Socket]:
        """Live socket created from `spec`, else the first open one of its type."""
        socket = self.socket_named(spec.name)
        if socket is not None and socket.socket_type == spec.socket_type and not socket.is_connected:
            return socket
        for candidate in self.sockets:
            if candidate.socket_type == spec.socket_type and not candidate.is_connected:
                return candidate
        return None

    def connected_rooms(self) -> List['RoomInstance']:
        rooms = []
        for socket in self.sockets:
            peer = socket.connected_socket
            if peer is not None and peer.owner is not None and peer.owner not in rooms:
                rooms.append(peer.owner)
        return rooms

    def release(self) -> None:
        """Disconnect every socket (used when the instance is destroyed)."""
        for socket in self.sockets:
            socket.disconnect()
