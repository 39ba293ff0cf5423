"""
State Store - alarm status, arming status and sensor set holder

StateStore is the narrow persistence boundary consumed by AlarmController.
It carries no transition logic: every method is a plain get/set.
"""

import logging
import threading
from abc import ABC, abstractmethod
from typing import Optional

from ..domain.enums import AlarmStatus, ArmingStatus
from ..domain.models import Sensor

logger = logging.getLogger(__name__)


# =============================================================================
# StateStore Abstract Base
# =============================================================================

class StateStore(ABC):
    """Durable holder of alarm status, arming status and sensors."""

    @abstractmethod
    def get_alarm_status(self) -> AlarmStatus:
        pass

    @abstractmethod
    def set_alarm_status(self, status: AlarmStatus) -> None:
        pass

    @abstractmethod
    def get_arming_status(self) -> ArmingStatus:
        pass

    @abstractmethod
    def set_arming_status(self, status: ArmingStatus) -> None:
        pass

    @abstractmethod
    def get_sensors(self) -> set[Sensor]:
        pass

    @abstractmethod
    def add_sensor(self, sensor: Sensor) -> None:
        pass

    @abstractmethod
    def remove_sensor(self, sensor: Sensor) -> None:
        pass

    @abstractmethod
    def update_sensor(self, sensor: Sensor) -> None:
        pass


# =============================================================================
# In-memory implementation
# =============================================================================

class InMemoryStateStore(StateStore):
    """
    Process-local StateStore.

    - Sensors keyed by sensor_id, last write wins
    - get_sensors() returns the stored objects, not copies
    - Removing an unknown sensor is a no-op
    """

    def __init__(
        self,
        alarm_status: AlarmStatus = AlarmStatus.NO_ALARM,
        arming_status: ArmingStatus = ArmingStatus.DISARMED,
        sensors: Optional[list[Sensor]] = None,
    ):
        self._lock = threading.Lock()
        self._alarm_status = alarm_status
        self._arming_status = arming_status
        self._sensors: dict[str, Sensor] = {}
        for sensor in sensors or []:
            self._sensors[sensor.sensor_id] = sensor

    def get_alarm_status(self) -> AlarmStatus:
        return self._alarm_status

    def set_alarm_status(self, status: AlarmStatus) -> None:
        self._alarm_status = AlarmStatus(status)

    def get_arming_status(self) -> ArmingStatus:
        return self._arming_status

    def set_arming_status(self, status: ArmingStatus) -> None:
        self._arming_status = ArmingStatus(status)

    def get_sensors(self) -> set[Sensor]:
        with self._lock:
            return set(self._sensors.values())

    def add_sensor(self, sensor: Sensor) -> None:
        with self._lock:
            self._sensors[sensor.sensor_id] = sensor
        logger.debug("Sensor added: %s (%s)", sensor.name, sensor.sensor_id)

    def remove_sensor(self, sensor: Sensor) -> None:
        with self._lock:
            removed = self._sensors.pop(sensor.sensor_id, None)
        if removed is None:
            logger.debug("Remove ignored, unknown sensor: %s", sensor.sensor_id)

    def update_sensor(self, sensor: Sensor) -> None:
        with self._lock:
            self._sensors[sensor.sensor_id] = sensor

    def get_sensor(self, sensor_id: str) -> Optional[Sensor]:
        """Look up a sensor by id."""
        with self._lock:
            return self._sensors.get(sensor_id)

    def get_status(self) -> dict:
        """Snapshot for diagnostics."""
        sensors = sorted(self.get_sensors(), key=Sensor.sort_key)
        return {
            "alarm_status": self._alarm_status.value,
            "arming_status": self._arming_status.value,
            "sensors": [
                {
                    "sensor_id": s.sensor_id,
                    "name": s.name,
                    "sensor_type": s.sensor_type.value,
                    "active": s.active,
                }
                for s in sensors
            ],
        }
