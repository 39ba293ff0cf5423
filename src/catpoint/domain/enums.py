"""
Catpoint Core Enums

Alarm status, arming status and sensor categories shared by the controller,
the state store and the drill runner.
"""

from enum import Enum


# =============================================================================
# Alarm Status
# =============================================================================

class AlarmStatus(str, Enum):
    """Current escalation level.

    Severity is ordered NO_ALARM < PENDING_ALARM < ALARM.
    """
    NO_ALARM = "no_alarm"             # Premises normal
    PENDING_ALARM = "pending_alarm"   # Awaiting confirmation
    ALARM = "alarm"                   # Alarm active, sticky until disarm

    @property
    def description(self) -> str:
        return _ALARM_DESCRIPTIONS[self]

    @property
    def severity(self) -> int:
        return _ALARM_SEVERITY[self]


_ALARM_DESCRIPTIONS = {
    AlarmStatus.NO_ALARM: "Cool and Good",
    AlarmStatus.PENDING_ALARM: "I'm in Danger...",
    AlarmStatus.ALARM: "Awooga!",
}

_ALARM_SEVERITY = {
    AlarmStatus.NO_ALARM: 0,
    AlarmStatus.PENDING_ALARM: 1,
    AlarmStatus.ALARM: 2,
}


# =============================================================================
# Arming Status
# =============================================================================

class ArmingStatus(str, Enum):
    """Arming mode selected by the user."""
    DISARMED = "disarmed"
    ARMED_HOME = "armed_home"
    ARMED_AWAY = "armed_away"

    @property
    def is_armed(self) -> bool:
        return self != ArmingStatus.DISARMED

    @property
    def description(self) -> str:
        return {
            ArmingStatus.DISARMED: "Disarmed",
            ArmingStatus.ARMED_HOME: "Armed - At Home",
            ArmingStatus.ARMED_AWAY: "Armed - Away",
        }[self]


# =============================================================================
# Sensor Types
# =============================================================================

class SensorType(str, Enum):
    """Sensor category. Opaque to the alarm controller."""
    DOOR = "door"
    WINDOW = "window"
    MOTION = "motion"
