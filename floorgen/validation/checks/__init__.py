"""
Validation check modules.

- layout_checks: Overlap, socket symmetry, exit reachability, credit accounting
- diagnostics: Text report of room bounds and overlapping pairs
"""

from .layout_checks import (
    check_credits,
    check_exit,
    check_room_overlaps,
    check_socket_symmetry,
    reachable_rooms,
    validate_floor_layout,
)
from .diagnostics import classify_overlap, room_overlap_report

__all__ = [
    'check_credits',
    'check_exit',
    'check_room_overlaps',
    'check_socket_symmetry',
    'reachable_rooms',
    'validate_floor_layout',
    'classify_overlap',
    'room_overlap_report',
]
