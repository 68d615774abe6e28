"""
Chevron indicator used by collapsible rows and preview navigation.
"""
from enum import Enum
from typing import Union

from mediadb.core.errors import ContractViolation


class Direction(Enum):
    UP = "up"
    DOWN = "down"
    LEFT = "left"
    RIGHT = "right"


# Degrees clockwise from a right-pointing chevron
_ROTATION = {
    Direction.RIGHT: 0,
    Direction.DOWN: 90,
    Direction.LEFT: 180,
    Direction.UP: 270,
}


def chevron_rotation(direction: Union[Direction, str]) -> int:
    """
    Rotation for a chevron pointing in ``direction``.

    Raises:
        ContractViolation: ``direction`` is not one of Direction
    """
    try:
        return _ROTATION[Direction(direction)]
    except ValueError:
        raise ContractViolation(f"Unknown chevron direction: {direction!r}") from None
