"""Catpoint test fixtures and drill data."""

from .standard_config import (
    BACK_WINDOW_ID,
    FRONT_DOOR_ID,
    LIVING_ROOM_MOTION_ID,
    create_standard_sensors,
)

__all__ = [
    'BACK_WINDOW_ID',
    'FRONT_DOOR_ID',
    'LIVING_ROOM_MOTION_ID',
    'create_standard_sensors',
]
