"""
Human-readable overlap diagnostics for a placed floor.
"""

from typing import List, Sequence

from floorgen.generators.room_types import RoomInstance

# XZ overlap areas (square metres) separating the report's severity classes
MAJOR_OVERLAP_AREA = 20.0
MODERATE_OVERLAP_AREA = 5.0


def classify_overlap(area_xz: float) -> str:
    if area_xz > MAJOR_OVERLAP_AREA:
        return "MAJOR OVERLAP"
    if area_xz > MODERATE_OVERLAP_AREA:
        return "MODERATE OVERLAP"
    return "minor, likely door connection"


def room_overlap_report(rooms: Sequence[RoomInstance]) -> str:
    """Room list with AABBs followed by every pair of intersecting bounds."""
    lines: List[str] = ["=== Room Overlap Diagnostics ===", f"Registered rooms: {len(rooms)}", ""]
    lines.append("--- Room Details ---")

    records = [room.spatial_record() for room in rooms]
    for i, (room, record) in enumerate(zip(rooms, records)):
        x, y, z = room.position
        box = record.encapsulating
        cx, cy, cz = box.center
        sx, sy, sz = box.size
        shape = f" compound({len(record.sub_boxes)})" if record.is_compound else ""
        lines.append(f"  [{i}] {room.name}{shape}")
        lines.append(f"      pos=({x:.2f}, {y:.2f}, {z:.2f}) yaw={room.rotation.yaw_degrees():.0f}")
        lines.append(
            f"      AABB center=({cx:.2f}, {cy:.2f}, {cz:.2f}) size=({sx:.2f}, {sy:.2f}, {sz:.2f})"
        )

    lines.append("")
    lines.append("--- Overlap Pairs ---")
    overlap_count = 0
    for i in range(len(rooms)):
        for j in range(i + 1, len(rooms)):
            a = records[i].encapsulating
            b = records[j].encapsulating
            if not a.intersects(b):
                continue
            overlap_count += 1
            area = records[i].overlap_area_xz(records[j])
            lines.append(f"  [{classify_overlap(area)}] [{i}] {rooms[i].name} <-> [{j}] {rooms[j].name}")
            lines.append(f"      overlap XZ area={area:.1f}m2 volume={a.intersection_volume(b):.1f}m3")

    if overlap_count == 0:
        lines.append("  No overlapping bounds detected.")
    else:
        lines.append(f"  Total overlapping pairs: {overlap_count}")
    lines.append("")
    lines.append("--- End Report ---")
    return "\n".join(lines)
