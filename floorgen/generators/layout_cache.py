"""
Layout cache: snapshot and replay data for previously generated floors.

A CachedLayout lists every placed room as (template identity, world
position, world rotation, instance name). It is written once, on a floor's
first successful generation, and replayed verbatim on later visits.
Rotations are stored as quaternions so replay is transform-exact.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Iterable, List, Tuple

from floorgen.errors import CacheReplayError
from floorgen.geometry.vector_math import vector_tuple
from .catalog import RoomCatalog
from .room_types import RoomInstance, RoomTemplate


@dataclass(frozen=True)
class CachedRoomPlacement:
    template_identity: str
    position: Tuple[float, float, float]
    rotation: Tuple[float, float, float, float]
    instance_name: str

    def to_dict(self) -> Dict[str, Any]:
        return {
            'template': self.template_identity,
            'position': list(self.position),
            'rotation': list(self.rotation),
            'name': self.instance_name,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'CachedRoomPlacement':
        rotation = tuple(float(v) for v in data['rotation'])
        if len(rotation) != 4:
            raise ValueError(f"Rotation must have 4 components, got {len(rotation)}")
        return cls(
            template_identity=data['template'],
            position=vector_tuple(data['position']),
            rotation=rotation,
            instance_name=data.get('name', ''),
        )


@dataclass(frozen=True)
class CachedLayout:
    placements: Tuple[CachedRoomPlacement, ...] = ()
    is_valid: bool = True

    @property
    def is_replayable(self) -> bool:
        return self.is_valid and len(self.placements) > 0

    def to_dict(self) -> Dict[str, Any]:
        return {
            'is_valid': self.is_valid,
            'rooms': [p.to_dict() for p in self.placements],
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'CachedLayout':
        return cls(
            placements=tuple(CachedRoomPlacement.from_dict(d) for d in data.get('rooms', [])),
            is_valid=bool(data.get('is_valid', True)),
        )


def capture_layout(rooms: Iterable[RoomInstance], catalog: RoomCatalog) -> CachedLayout:
    """Snapshot placed rooms in placement order."""
    placements = []
    for room in rooms:
        position, rotation = room.transform_tuple()
        placements.append(CachedRoomPlacement(
            template_identity=catalog.identity_of(room.template),
            position=position,
            rotation=rotation,
            instance_name=room.name,
        ))
    return CachedLayout(placements=tuple(placements))


def resolve_placements(layout: CachedLayout,
                       catalog: RoomCatalog) -> List[Tuple[CachedRoomPlacement, RoomTemplate]]:
    """Pair every cached placement with its template.

    Raises:
        CacheReplayError: If the layout is invalid or empty, or an identity
            no longer resolves (the whole cache is then unusable)
    """
    if not layout.is_replayable:
        raise CacheReplayError("Cached layout is invalid or empty")

    resolved = []
    for placement in layout.placements:
        template = catalog.find_by_identity(placement.template_identity)
        if template is None or template.geometry is None:
            raise CacheReplayError(
                f"Cached room '{placement.instance_name}' references unknown "
                f"template '{placement.template_identity}'"
            )
        resolved.append((placement, template))
    return resolved
