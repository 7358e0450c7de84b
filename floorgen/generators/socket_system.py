"""
Socket system: typed doorway attachment points and their connections.

Every room template declares SocketSpecs in its local frame. Placed rooms
own live Socket objects that track connection state, the door (connector)
spawned for a connection, and the blockade spawned when a socket is sealed.

The ConnectionResolver computes the rigid transform that puts a candidate
room's socket face-to-face with an open socket, and performs the
narrow-phase acceptance check when the two are joined.
"""

from __future__ import annotations

import hashlib
import logging
import weakref
from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, Any, ClassVar, Dict, Optional, Tuple

import numpy as np

from floorgen.geometry.vector_math import (
    FORWARD, UP, ZERO, Quaternion, as_vec3, distance, vector_tuple,
)

if TYPE_CHECKING:
    from .room_types import RoomInstance

logger = logging.getLogger(__name__)


# ==============================================================================
# SOCKET TYPES
# ==============================================================================

class SocketType(Enum):
    """Doorway size/kind. Only identical types may connect."""
    STANDARD = "standard"
    LARGE = "large"
    AIRLOCK = "airlock"
    EMERGENCY = "emergency"
    MAINTENANCE = "maintenance"


def is_compatible(type_a: SocketType, type_b: SocketType) -> bool:
    """Sockets connect only on an exact type match (no subtyping)."""
    return type_a == type_b


# ==============================================================================
# INERT PLACEMENT RECORDS
# ==============================================================================

@dataclass(frozen=True)
class Connector:
    """Door placed between two connected sockets."""
    template_id: str
    position: Tuple[float, float, float]
    rotation: Tuple[float, float, float, float]
    name: str = ""


@dataclass(frozen=True)
class Blockade:
    """Filler object sealing a socket that never received a connection."""
    template_id: str
    position: Tuple[float, float, float]
    rotation: Tuple[float, float, float, float]
    name: str = ""


def _stable_index(key: str, count: int) -> int:
    """Deterministic index in [0, count) derived from a string key."""
    return int(hashlib.md5(key.encode('utf-8')).hexdigest(), 16) % count


# ==============================================================================
# SOCKET SPEC (template level)
# ==============================================================================

@dataclass(frozen=True)
class SocketSpec:
    """Socket declaration in a room template's local frame.

    Attributes:
        name: Unique name within the template (e.g. "north")
        socket_type: Compatibility tag
        position: Socket pivot, room-local
        rotation: Socket orientation, room-local; forward is local +Z
        forward_angle_offset: Fixed yaw correction (degrees) for authored
            sockets whose pivot does not face out of the room
        connection_offset: Connection point relative to the pivot, in the
            socket's frame
        door_spawn_offset: Dedicated door spawn point in the socket's frame;
            None uses the connection point
        blockade_templates: Blockade variants for sealing this socket
        spawn_blockade_if_unconnected: Disable to leave the doorway open
    """
    name: str
    socket_type: SocketType = SocketType.STANDARD
    position: Tuple[float, float, float] = (0.0, 0.0, 0.0)
    rotation: Quaternion = Quaternion()
    forward_angle_offset: float = 0.0
    connection_offset: Tuple[float, float, float] = (0.0, 0.0, 0.0)
    door_spawn_offset: Optional[Tuple[float, float, float]] = None
    blockade_templates: Tuple[str, ...] = ()
    spawn_blockade_if_unconnected: bool = True

    @classmethod
    def facing(cls, name: str, position, yaw: float, **kwargs) -> 'SocketSpec':
        """Socket at `position` facing `yaw` degrees about the up axis."""
        return cls(
            name=name,
            position=vector_tuple(position),
            rotation=Quaternion.from_axis_angle(UP, yaw),
            **kwargs,
        )

    @property
    def local_rotation(self) -> Quaternion:
        """Room-local orientation including the angle correction."""
        if self.forward_angle_offset:
            return self.rotation * Quaternion.from_axis_angle(UP, self.forward_angle_offset)
        return self.rotation

    def local_connection_point(self) -> np.ndarray:
        """Connection point relative to the room origin."""
        return as_vec3(self.position) + self.rotation.rotate(self.connection_offset)

    def local_forward(self) -> np.ndarray:
        return self.local_rotation.rotate(FORWARD)

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {
            'name': self.name,
            'socket_type': self.socket_type.value,
            'position': list(self.position),
            'rotation': list(self.rotation.as_tuple()),
        }
        if self.forward_angle_offset:
            data['forward_angle_offset'] = self.forward_angle_offset
        if any(self.connection_offset):
            data['connection_offset'] = list(self.connection_offset)
        if self.door_spawn_offset is not None:
            data['door_spawn_offset'] = list(self.door_spawn_offset)
        if self.blockade_templates:
            data['blockade_templates'] = list(self.blockade_templates)
        if not self.spawn_blockade_if_unconnected:
            data['spawn_blockade_if_unconnected'] = False
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'SocketSpec':
        """Create a SocketSpec from a dictionary.

        Accepts either a full 'rotation' quaternion [w, x, y, z] or a 'yaw'
        shortcut in degrees for hand-written catalogs.
        """
        if 'rotation' in data:
            rotation = Quaternion.from_tuple(data['rotation'])
        else:
            rotation = Quaternion.from_axis_angle(UP, float(data.get('yaw', 0.0)))
        door = data.get('door_spawn_offset')
        return cls(
            name=data['name'],
            socket_type=SocketType(data.get('socket_type', SocketType.STANDARD.value)),
            position=vector_tuple(data.get('position', (0.0, 0.0, 0.0))),
            rotation=rotation,
            forward_angle_offset=float(data.get('forward_angle_offset', 0.0)),
            connection_offset=vector_tuple(data.get('connection_offset', (0.0, 0.0, 0.0))),
            door_spawn_offset=vector_tuple(door) if door is not None else None,
            blockade_templates=tuple(data.get('blockade_templates', ())),
            spawn_blockade_if_unconnected=bool(data.get('spawn_blockade_if_unconnected', True)),
        )


# ==============================================================================
# SOCKET (instance level)
# ==============================================================================

class Socket:
    """Live socket on a placed room.

    The peer link is a weak reference: a socket never keeps another room
    alive. A connected pair always points at each other and exactly one of
    them (the source) owns the connector.
    """

    def __init__(self, spec: SocketSpec, owner: Optional['RoomInstance'] = None):
        self.spec = spec
        self.owner = owner
        self.is_connected = False
        self._peer: Optional[weakref.ReferenceType] = None
        self.connector: Optional[Connector] = None
        self.blockade: Optional[Blockade] = None

    def __repr__(self) -> str:
        state = "connected" if self.is_connected else "open"
        return f"Socket({self.qualified_name}, {self.socket_type.value}, {state})"

    @property
    def name(self) -> str:
        return self.spec.name

    @property
    def socket_type(self) -> SocketType:
        return self.spec.socket_type

    @property
    def qualified_name(self) -> str:
        owner = self.owner.name if self.owner is not None else "<unowned>"
        return f"{owner}.{self.spec.name}"

    @property
    def connected_socket(self) -> Optional['Socket']:
        if self._peer is None:
            return None
        return self._peer()

    # --- world transform -------------------------------------------------

    def _owner_transform(self) -> Tuple[np.ndarray, Quaternion]:
        if self.owner is None:
            return ZERO.copy(), Quaternion.identity()
        return self.owner.position, self.owner.rotation

    @property
    def position(self) -> np.ndarray:
        """World connection point."""
        pos, rot = self._owner_transform()
        return pos + rot.rotate(self.spec.local_connection_point())

    @property
    def rotation(self) -> Quaternion:
        _, rot = self._owner_transform()
        return rot * self.spec.local_rotation

    @property
    def forward(self) -> np.ndarray:
        """World direction pointing out of the owning room."""
        return self.rotation.rotate(FORWARD)

    @property
    def door_spawn_position(self) -> np.ndarray:
        if self.spec.door_spawn_offset is None:
            return self.position
        pos, rot = self._owner_transform()
        pivot = pos + rot.rotate(self.spec.position)
        return pivot + (rot * self.spec.rotation).rotate(self.spec.door_spawn_offset)

    # --- connection state --------------------------------------------------

    def is_compatible_with(self, other: 'Socket') -> bool:
        return is_compatible(self.socket_type, other.socket_type)

    def connect_to(self, other: 'Socket', door_template: Optional[str] = None) -> bool:
        """Link this socket (the source) with `other`.

        Fails without side effects if either socket is already connected or
        the types differ. On success both sockets point at each other and,
        when a door template is given, this socket owns the new connector.
        """
        if other is self or self.is_connected or other.is_connected:
            return False
        if not self.is_compatible_with(other):
            return False

        # A connection replaces any seal placed earlier
        self._remove_blockade()
        other._remove_blockade()

        self.is_connected = True
        other.is_connected = True
        self._peer = weakref.ref(other)
        other._peer = weakref.ref(self)

        if door_template:
            self.connector = Connector(
                template_id=door_template,
                position=vector_tuple(self.door_spawn_position),
                rotation=self.rotation.as_tuple(),
                name=f"Door_{self.qualified_name}_{other.qualified_name}",
            )
        return True

    def disconnect(self) -> None:
        """Return this socket and its peer to the open state. Idempotent."""
        peer = self.connected_socket
        self._release()
        if peer is not None and peer.connected_socket is self:
            peer._release()

    def _release(self) -> None:
        self.is_connected = False
        self._peer = None
        self.connector = None
        self._remove_blockade()

    def _remove_blockade(self) -> None:
        self.blockade = None

    def spawn_blockade(self) -> Optional[Blockade]:
        """Seal an unconnected socket.

        No-op (returns None) when the socket is connected, has no blockade
        templates, or blockade spawning is disabled for it. The variant is
        chosen from a hash of the socket's name so sealing never consumes
        draws from the shared random stream.
        """
        if self.is_connected or self.connected_socket is not None:
            return None
        if not self.spec.spawn_blockade_if_unconnected or not self.spec.blockade_templates:
            return None
        if self.blockade is not None:
            return self.blockade

        templates = self.spec.blockade_templates
        template_id = templates[_stable_index(self.qualified_name, len(templates))]
        self.blockade = Blockade(
            template_id=template_id,
            position=vector_tuple(self.position),
            rotation=self.rotation.as_tuple(),
            name=f"Blockade_{self.qualified_name}",
        )
        return self.blockade


# ==============================================================================
# CONNECTION RESOLVER
# ==============================================================================

@dataclass
class ConnectionResolver:
    """Aligns and joins sockets.

    Narrow phase: after alignment the two connection points must coincide
    within POSITION_TOLERANCE and the forwards must be opposed within
    FACING_TOLERANCE. Overlap between the two rooms is the broad phase's
    responsibility.
    """
    door_template: Optional[str] = None

    POSITION_TOLERANCE: ClassVar[float] = 1e-3
    FACING_TOLERANCE: ClassVar[float] = 1e-4

    @staticmethod
    def compute_alignment(source: Socket, target: SocketSpec,
                          owner_rotation: Quaternion) -> Tuple[np.ndarray, Quaternion]:
        """World (position, rotation) that puts `target` face-to-face with `source`.

        Rotation first: turn the target's current world forward onto the
        negated source forward. Position second: the rotated local offset of
        the target's connection point is subtracted from the source's world
        connection point. Reversing the order uses the stale rotation for
        the offset.
        """
        target_forward = owner_rotation.rotate(target.local_forward())
        correction = Quaternion.from_to_rotation(target_forward, -source.forward)
        rotation = (correction * owner_rotation).normalized()
        position = source.position - rotation.rotate(target.local_connection_point())
        return position, rotation

    def is_aligned(self, source: Socket, target: Socket) -> bool:
        """Narrow-phase check: coincident connection points, opposed forwards."""
        if distance(source.position, target.position) > self.POSITION_TOLERANCE:
            return False
        facing = float(np.dot(source.forward, target.forward))
        return facing <= -1.0 + self.FACING_TOLERANCE

    def connect_rooms(self, source: Socket, target: Socket, target_room: 'RoomInstance') -> bool:
        """Move `target_room` so `target` meets `source`, then link them.

        Returns False without side effects if either socket is connected,
        the types mismatch, or the aligned sockets fail the narrow phase.
        """
        if source.is_connected or target.is_connected:
            logger.debug(f"Connect rejected: {source} or {target} already connected")
            return False
        if not source.is_compatible_with(target):
            logger.debug(f"Connect rejected: {source.socket_type.value} vs {target.socket_type.value}")
            return False

        previous = (target_room.position, target_room.rotation)
        if not self.is_aligned(source, target):
            position, rotation = self.compute_alignment(source, target.spec, target_room.rotation)
            target_room.set_transform(position, rotation)

        if not self.is_aligned(source, target):
            target_room.set_transform(*previous)
            logger.debug(f"Connect rejected: {source} and {target} failed alignment")
            return False

        if not source.connect_to(target, self.door_template):
            target_room.set_transform(*previous)
            return False

        return True

    def connect_in_place(self, socket_a: Socket, socket_b: Socket) -> bool:
        """Link two sockets without moving either room (layout replay)."""
        return socket_a.connect_to(socket_b, self.door_template)

    @staticmethod
    def disconnect(socket_a: Socket, socket_b: Optional[Socket] = None) -> None:
        """Clear both sockets' links, connectors and blockades. Idempotent."""
        socket_a.disconnect()
        if socket_b is not None:
            socket_b.disconnect()
