"""
Shared dimensions for built-in rooms (metres, Y-up).

Sockets sit FRAME_INSET inside the room's outer wall, so two connected
rooms overlap by twice that depth across the doorway.
"""

from ..socket_system import SocketSpec, SocketType

ROOM_HEIGHT = 4.0
FRAME_INSET = 0.25

STANDARD_BLOCKADES = ("Blockade_Wall", "Blockade_Debris")


def doorway(name: str, x: float, z: float, yaw: float,
            socket_type: SocketType = SocketType.STANDARD) -> SocketSpec:
    """Floor-level socket at (x, 0, z) facing `yaw` degrees."""
    return SocketSpec.facing(
        name, (x, 0.0, z), yaw,
        socket_type=socket_type,
        door_spawn_offset=(0.0, 0.0, 0.0),
        blockade_templates=STANDARD_BLOCKADES,
    )
