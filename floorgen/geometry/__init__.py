"""
Geometry helpers: vectors, quaternions and bounding volumes.
"""

from .vector_math import (
    FORWARD,
    RIGHT,
    UP,
    Quaternion,
    as_vec3,
    distance,
    normalize,
    vec3,
    vector_tuple,
)
from .bounds import (
    AABB,
    CONTACT_EPSILON,
    BoundsShape,
    LocalBox,
    SpatialRecord,
    combined_bounds,
    rotated_aabb,
)

__all__ = [
    'FORWARD', 'RIGHT', 'UP', 'Quaternion', 'as_vec3', 'distance',
    'normalize', 'vec3', 'vector_tuple',
    'AABB', 'CONTACT_EPSILON', 'BoundsShape', 'LocalBox', 'SpatialRecord',
    'combined_bounds', 'rotated_aabb',
]
