"""
Axis-aligned bounds and spatial records for placed rooms.

A room's geometry is described in its own local frame by a BoundsShape:
one box, or a compound set of sub-boxes for L/T/cross shaped footprints.
Placing the room produces an immutable SpatialRecord in world space whose
encapsulating AABB always contains every world sub-box.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Optional, Tuple

import numpy as np

from .vector_math import Quaternion, VectorLike, as_vec3, vector_tuple

# Boxes must overlap by more than this on every axis to count as intersecting.
# Rooms that merely share a wall face do not collide.
CONTACT_EPSILON = 1e-6


@dataclass(frozen=True)
class AABB:
    """Axis-Aligned Bounding Box in world space."""
    min_x: float
    min_y: float
    min_z: float
    max_x: float
    max_y: float
    max_z: float

    @classmethod
    def from_center_size(cls, center: VectorLike, size: VectorLike) -> 'AABB':
        c = as_vec3(center)
        half = np.abs(as_vec3(size)) * 0.5
        lo = c - half
        hi = c + half
        return cls(float(lo[0]), float(lo[1]), float(lo[2]),
                   float(hi[0]), float(hi[1]), float(hi[2]))

    @property
    def center(self) -> np.ndarray:
        return np.array([
            (self.min_x + self.max_x) * 0.5,
            (self.min_y + self.max_y) * 0.5,
            (self.min_z + self.max_z) * 0.5,
        ], dtype=np.float64)

    @property
    def size(self) -> np.ndarray:
        return np.array([
            self.max_x - self.min_x,
            self.max_y - self.min_y,
            self.max_z - self.min_z,
        ], dtype=np.float64)

    @property
    def area_xz(self) -> float:
        """Footprint area on the XZ (floor) plane."""
        return (self.max_x - self.min_x) * (self.max_z - self.min_z)

    @property
    def volume(self) -> float:
        return (
            (self.max_x - self.min_x) *
            (self.max_y - self.min_y) *
            (self.max_z - self.min_z)
        )

    def intersects(self, other: 'AABB', epsilon: float = CONTACT_EPSILON) -> bool:
        """Check if this AABB intersects another AABB."""
        # Two AABBs intersect if they overlap on all three axes
        return (
            self.min_x < other.max_x - epsilon and self.max_x > other.min_x + epsilon and
            self.min_y < other.max_y - epsilon and self.max_y > other.min_y + epsilon and
            self.min_z < other.max_z - epsilon and self.max_z > other.min_z + epsilon
        )

    def intersection_volume(self, other: 'AABB') -> float:
        """Calculate the intersection volume with another AABB."""
        if not self.intersects(other):
            return 0.0

        overlap_x = min(self.max_x, other.max_x) - max(self.min_x, other.min_x)
        overlap_y = min(self.max_y, other.max_y) - max(self.min_y, other.min_y)
        overlap_z = min(self.max_z, other.max_z) - max(self.min_z, other.min_z)

        return max(0.0, overlap_x) * max(0.0, overlap_y) * max(0.0, overlap_z)

    def overlap_area_xz(self, other: 'AABB') -> float:
        """Area of the XZ-plane overlap between the two footprints."""
        overlap_x = min(self.max_x, other.max_x) - max(self.min_x, other.min_x)
        overlap_z = min(self.max_z, other.max_z) - max(self.min_z, other.min_z)
        return max(0.0, overlap_x) * max(0.0, overlap_z)

    def encapsulate(self, other: 'AABB') -> 'AABB':
        """Smallest AABB containing both boxes."""
        return AABB(
            min(self.min_x, other.min_x), min(self.min_y, other.min_y),
            min(self.min_z, other.min_z), max(self.max_x, other.max_x),
            max(self.max_y, other.max_y), max(self.max_z, other.max_z),
        )

    def contains(self, other: 'AABB', tolerance: float = 1e-9) -> bool:
        return (
            self.min_x <= other.min_x + tolerance and self.max_x >= other.max_x - tolerance and
            self.min_y <= other.min_y + tolerance and self.max_y >= other.max_y - tolerance and
            self.min_z <= other.min_z + tolerance and self.max_z >= other.max_z - tolerance
        )

    def expanded(self, padding: float) -> 'AABB':
        """Grow the box by `padding` on every side."""
        return AABB(
            self.min_x - padding, self.min_y - padding, self.min_z - padding,
            self.max_x + padding, self.max_y + padding, self.max_z + padding,
        )

    def to_dict(self) -> Dict[str, List[float]]:
        return {
            'center': list(vector_tuple(self.center)),
            'size': list(vector_tuple(self.size)),
        }


def rotated_aabb(center: VectorLike, size: VectorLike,
                 position: VectorLike, rotation: Quaternion) -> AABB:
    """World AABB of a local box after rotating and translating it.

    The half extent along each world axis is the sum of the rotated local
    axes' absolute components weighted by the local half sizes, so the
    result stays tight for 90-degree turns and conservative otherwise.
    """
    matrix = rotation.to_matrix()
    half = np.abs(as_vec3(size)) * 0.5
    world_half = np.abs(matrix) @ half
    world_center = as_vec3(position) + matrix @ as_vec3(center)
    return AABB.from_center_size(world_center, world_half * 2.0)


@dataclass(frozen=True)
class LocalBox:
    """One box in a room's local frame."""
    center: Tuple[float, float, float]
    size: Tuple[float, float, float]
    label: str = ""

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {'center': list(self.center), 'size': list(self.size)}
        if self.label:
            data['label'] = self.label
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'LocalBox':
        return cls(
            center=vector_tuple(data['center']),
            size=vector_tuple(data['size']),
            label=data.get('label', ''),
        )


@dataclass
class BoundsShape:
    """Local-space bounding volume of a room template.

    Attributes:
        center: Local center of the encapsulating box
        size: Local size of the encapsulating box
        sub_boxes: Sub-volumes for non-rectangular footprints (compound when 2+)
    """
    center: Tuple[float, float, float] = (0.0, 0.0, 0.0)
    size: Tuple[float, float, float] = (1.0, 1.0, 1.0)
    sub_boxes: Tuple[LocalBox, ...] = field(default_factory=tuple)

    @classmethod
    def box(cls, center: VectorLike, size: VectorLike) -> 'BoundsShape':
        return cls(center=vector_tuple(center), size=vector_tuple(size))

    @classmethod
    def compound(cls, boxes: Iterable[LocalBox]) -> 'BoundsShape':
        """Build a compound shape whose encapsulating box covers every sub-box."""
        shape = cls(sub_boxes=tuple(boxes))
        shape.recalculate_encapsulating()
        return shape

    @property
    def is_compound(self) -> bool:
        return len(self.sub_boxes) >= 2

    def recalculate_encapsulating(self) -> None:
        """Grow the local box to the union of all sub-boxes."""
        if not self.sub_boxes:
            return
        lo = None
        hi = None
        for sub in self.sub_boxes:
            c = as_vec3(sub.center)
            half = np.abs(as_vec3(sub.size)) * 0.5
            lo = c - half if lo is None else np.minimum(lo, c - half)
            hi = c + half if hi is None else np.maximum(hi, c + half)
        self.center = vector_tuple((lo + hi) * 0.5)
        self.size = vector_tuple(hi - lo)

    def world_record(self, position: VectorLike, rotation: Quaternion) -> 'SpatialRecord':
        """Snapshot this shape at a world transform."""
        encapsulating = rotated_aabb(self.center, self.size, position, rotation)
        subs: Tuple[AABB, ...] = ()
        if self.is_compound:
            subs = tuple(
                rotated_aabb(sub.center, sub.size, position, rotation)
                for sub in self.sub_boxes
            )
            # Rounding must never leave a sub-box poking out of the outer box
            for sub in subs:
                encapsulating = encapsulating.encapsulate(sub)
        return SpatialRecord(encapsulating=encapsulating, sub_boxes=subs)

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {'center': list(self.center), 'size': list(self.size)}
        if self.sub_boxes:
            data['sub_boxes'] = [sub.to_dict() for sub in self.sub_boxes]
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'BoundsShape':
        subs = tuple(LocalBox.from_dict(d) for d in data.get('sub_boxes', []))
        if subs:
            return cls.compound(subs)
        return cls.box(data.get('center', (0.0, 0.0, 0.0)), data.get('size', (1.0, 1.0, 1.0)))


@dataclass(frozen=True)
class SpatialRecord:
    """World-space footprint of a placed room."""
    encapsulating: AABB
    sub_boxes: Tuple[AABB, ...] = ()

    @property
    def is_compound(self) -> bool:
        return len(self.sub_boxes) >= 2

    @property
    def boxes(self) -> Tuple[AABB, ...]:
        """Boxes used for precise tests: sub-boxes when compound, else the single box."""
        if self.is_compound:
            return self.sub_boxes
        return (self.encapsulating,)

    @property
    def footprint_area_xz(self) -> float:
        return sum(box.area_xz for box in self.boxes)

    def overlap_area_xz(self, other: 'SpatialRecord') -> float:
        """XZ overlap summed pairwise over both records' boxes."""
        total = 0.0
        for a in self.boxes:
            for b in other.boxes:
                total += a.overlap_area_xz(b)
        return total

    def intersects(self, other: 'SpatialRecord') -> bool:
        """Sub-box aware intersection test.

        Compound shapes only collide when an actual pair of sub-boxes
        overlaps; the empty corner of an L never blocks a neighbour.
        """
        if not self.encapsulating.intersects(other.encapsulating):
            return False
        if not (self.is_compound or other.is_compound):
            return True
        return any(a.intersects(b) for a in self.boxes for b in other.boxes)

    def contains_all_sub_boxes(self) -> bool:
        return all(self.encapsulating.contains(sub) for sub in self.sub_boxes)


def combined_bounds(records: Iterable[SpatialRecord]) -> Optional[AABB]:
    """Union of the encapsulating boxes, or None for an empty input."""
    result: Optional[AABB] = None
    for record in records:
        box = record.encapsulating
        result = box if result is None else result.encapsulate(box)
    return result
