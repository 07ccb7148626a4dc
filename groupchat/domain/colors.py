# groupchat/domain/colors.py
from enum import Enum


class Color(str, Enum):
    GREEN = "Green"
    YELLOW = "Yellow"
    ORANGE = "Orange"
    RED = "Red"
    VIOLET = "Violet"


COLORS: list[Color] = [
    Color.GREEN,
    Color.YELLOW,
    Color.ORANGE,
    Color.RED,
    Color.VIOLET,
]


def assign_color(member_index: int) -> Color:
    """Map a member's zero-based position in a chat to its anonymous color.

    Positions wrap around after five, so a sixth member would share the
    first member's color; group capacity must therefore stay at five.
    """
    if member_index < 0:
        raise ValueError(f"member index must be non-negative, got {member_index}")
    return COLORS[member_index % len(COLORS)]
