"""
Status listeners

Observers registered on an AlarmController. Only ``notify`` is required; the
controller also accepts a bare callable taking the new AlarmStatus.
"""

from abc import ABC, abstractmethod

from ..domain.enums import AlarmStatus


class StatusListener(ABC):
    """Observer of alarm status changes."""

    @abstractmethod
    def notify(self, status: AlarmStatus) -> None:
        """Called with the new status on every set_alarm_status."""
        pass

    def cat_detected(self, cat: bool) -> None:
        """Called with the detector outcome after every processed image."""

    def sensor_status_changed(self) -> None:
        """Called after sensors were toggled, added, removed or reset."""


class StatusRecorder(StatusListener):
    """Listener that keeps every notification, in order."""

    def __init__(self):
        self.statuses: list[AlarmStatus] = []
        self.cat_results: list[bool] = []
        self.sensor_changes = 0

    def notify(self, status: AlarmStatus) -> None:
        self.statuses.append(status)

    def cat_detected(self, cat: bool) -> None:
        self.cat_results.append(cat)

    def sensor_status_changed(self) -> None:
        self.sensor_changes += 1
