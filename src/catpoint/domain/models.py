"""
Catpoint Core Models

Uses Pydantic for validation and serialization.
"""

import uuid

from pydantic import BaseModel, ConfigDict, Field

from .enums import SensorType


class Sensor(BaseModel):
    """Binary door/window/motion detector.

    Identity is ``sensor_id`` only: a sensor whose ``active`` flag changed is
    still the same member of the store's sensor set.
    """
    model_config = ConfigDict(validate_assignment=True)

    sensor_id: str = Field(default_factory=lambda: uuid.uuid4().hex)
    name: str
    sensor_type: SensorType
    active: bool = False

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Sensor):
            return NotImplemented
        return self.sensor_id == other.sensor_id

    def __hash__(self) -> int:
        return hash(self.sensor_id)

    def sort_key(self) -> tuple[str, str, str]:
        """Ordering used for display: name, then type, then id."""
        return (self.name, self.sensor_type.value, self.sensor_id)
