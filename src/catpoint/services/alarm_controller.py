"""
Catpoint Alarm Controller

Computes alarm status from sensor, arming and image events:
NO_ALARM → PENDING_ALARM → ALARM

Key rules:
1. ALARM is sticky against sensor changes; only disarming (or an all-clear
   image with no active sensor) brings it down
2. Armed + sensor activation escalates one level per call
3. Disarm always clears to NO_ALARM
4. Arming resets every sensor to inactive
5. A cat seen while ARMED_HOME (or before arming home) raises ALARM

Each public method runs under one re-entrant lock. The cat detector call has
no timeout: a hanging detector blocks the controller.
"""

import logging
import threading
from collections import deque
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from functools import cached_property
from typing import Any, Callable, Iterable, Optional

from ..domain.enums import AlarmStatus, ArmingStatus
from ..domain.models import Sensor
from ..hardware.cat_detector import CatDetector
from .state_store import StateStore

logger = logging.getLogger(__name__)

CAT_CONFIDENCE_THRESHOLD = 50.0


class TransitionTrigger(str, Enum):
    """Event kind that led to a rule evaluation."""
    SENSOR_ACTIVATED = "sensor_activated"
    SENSOR_DEACTIVATED = "sensor_deactivated"
    DISARMED = "disarmed"
    ARMED_HOME = "armed_home"
    ARMED_AWAY = "armed_away"
    CAT_DETECTED = "cat_detected"
    NO_CAT_DETECTED = "no_cat_detected"


_ARMING_TRIGGERS = {
    ArmingStatus.DISARMED: TransitionTrigger.DISARMED,
    ArmingStatus.ARMED_HOME: TransitionTrigger.ARMED_HOME,
    ArmingStatus.ARMED_AWAY: TransitionTrigger.ARMED_AWAY,
}


@dataclass
class AlarmControllerConfig:
    """Configuration for AlarmController."""
    cat_confidence_threshold: float = CAT_CONFIDENCE_THRESHOLD  # percent
    history_size: int = 100

    def __post_init__(self):
        if not 0.0 <= self.cat_confidence_threshold <= 100.0:
            raise ValueError("cat_confidence_threshold must be between 0 and 100")
        if self.history_size <= 0:
            raise ValueError("history_size must be positive")


@dataclass
class TransitionResult:
    """Result of a rule evaluation."""
    success: bool
    from_status: AlarmStatus
    to_status: AlarmStatus
    trigger: TransitionTrigger
    rule: Optional[str]
    reason: str
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))


# =============================================================================
# Transition Table
# =============================================================================

@dataclass
class TransitionContext:
    """Inputs a rule guard may look at.

    ``any_sensor_active`` is read from the store on first access only, so
    rules that never ask for it cost no sensor scan.
    """
    trigger: TransitionTrigger
    alarm_status: AlarmStatus
    arming_status: ArmingStatus
    cat_detected: bool
    store: StateStore

    @cached_property
    def any_sensor_active(self) -> bool:
        return any(sensor.active for sensor in self.store.get_sensors())


@dataclass(frozen=True)
class TransitionRule:
    """A named case of the transition table.

    ``to_status`` of None holds the current status and stops evaluation.
    """
    name: str
    trigger: TransitionTrigger
    guard: Callable[[TransitionContext], bool]
    to_status: Optional[AlarmStatus]
    reason: str


def _always(ctx: TransitionContext) -> bool:
    return True


TRANSITION_RULES: tuple[TransitionRule, ...] = (
    # Sensor activation
    TransitionRule(
        "alarm_sticky_on_activation",
        TransitionTrigger.SENSOR_ACTIVATED,
        lambda ctx: ctx.alarm_status == AlarmStatus.ALARM,
        None,
        "Alarm active, sensor changes ignored",
    ),
    TransitionRule(
        "disarmed_ignores_activation",
        TransitionTrigger.SENSOR_ACTIVATED,
        lambda ctx: ctx.arming_status == ArmingStatus.DISARMED,
        None,
        "System disarmed, sensor activation ignored",
    ),
    TransitionRule(
        "activation_starts_pending",
        TransitionTrigger.SENSOR_ACTIVATED,
        lambda ctx: ctx.alarm_status == AlarmStatus.NO_ALARM,
        AlarmStatus.PENDING_ALARM,
        "Sensor activated while armed",
    ),
    TransitionRule(
        "activation_escalates_pending",
        TransitionTrigger.SENSOR_ACTIVATED,
        lambda ctx: ctx.alarm_status == AlarmStatus.PENDING_ALARM,
        AlarmStatus.ALARM,
        "Sensor activated while alarm pending",
    ),

    # Sensor deactivation
    TransitionRule(
        "alarm_sticky_on_deactivation",
        TransitionTrigger.SENSOR_DEACTIVATED,
        lambda ctx: ctx.alarm_status == AlarmStatus.ALARM,
        None,
        "Alarm active, sensor changes ignored",
    ),
    TransitionRule(
        "last_deactivation_clears_pending",
        TransitionTrigger.SENSOR_DEACTIVATED,
        lambda ctx: ctx.alarm_status == AlarmStatus.PENDING_ALARM and not ctx.any_sensor_active,
        AlarmStatus.NO_ALARM,
        "No sensor active while alarm pending",
    ),

    # Arming
    TransitionRule(
        "disarm_clears_alarm",
        TransitionTrigger.DISARMED,
        _always,
        AlarmStatus.NO_ALARM,
        "System disarmed",
    ),
    TransitionRule(
        "arm_home_with_cat_seen",
        TransitionTrigger.ARMED_HOME,
        lambda ctx: ctx.cat_detected,
        AlarmStatus.ALARM,
        "Armed home while a cat was last seen",
    ),

    # Image
    TransitionRule(
        "cat_while_armed_home",
        TransitionTrigger.CAT_DETECTED,
        lambda ctx: ctx.arming_status == ArmingStatus.ARMED_HOME,
        AlarmStatus.ALARM,
        "Cat detected while armed home",
    ),
    TransitionRule(
        "no_cat_all_clear",
        TransitionTrigger.NO_CAT_DETECTED,
        lambda ctx: not ctx.any_sensor_active,
        AlarmStatus.NO_ALARM,
        "No cat and no active sensor",
    ),
)


def resolve_transition(
    ctx: TransitionContext,
    rules: Iterable[TransitionRule] = TRANSITION_RULES,
) -> Optional[TransitionRule]:
    """Return the first rule for ctx.trigger whose guard holds."""
    for rule in rules:
        if rule.trigger == ctx.trigger and rule.guard(ctx):
            return rule
    return None


# =============================================================================
# Alarm Controller
# =============================================================================

class AlarmController:
    """Alarm state-transition engine.

    Reads and writes all state through the StateStore; the only state owned
    here is the listener set and the last cat-detection outcome.
    """

    def __init__(
        self,
        store: StateStore,
        cat_detector: CatDetector,
        config: Optional[AlarmControllerConfig] = None,
        listeners: Iterable[Any] = (),
    ):
        self.config = config or AlarmControllerConfig()
        self._store = store
        self._cat_detector = cat_detector
        self._listeners: set[Any] = set(listeners)
        self._lock = threading.RLock()

        # Last detector outcome, written by process_image only
        self._cat_detected = False

        self._transitions: deque[TransitionResult] = deque(maxlen=self.config.history_size)

    @property
    def last_cat_detected(self) -> bool:
        return self._cat_detected

    # =========================================================================
    # Listeners
    # =========================================================================

    def add_status_listener(self, listener: Any) -> None:
        with self._lock:
            self._listeners.add(listener)

    def remove_status_listener(self, listener: Any) -> None:
        with self._lock:
            self._listeners.discard(listener)

    @property
    def listener_count(self) -> int:
        return len(self._listeners)

    def _notify_status(self, status: AlarmStatus) -> None:
        for listener in list(self._listeners):
            notify = getattr(listener, "notify", None)
            if notify is None:
                listener(status)
            else:
                notify(status)

    def _fan_out(self, hook: str, *args: Any) -> None:
        """Call an optional listener hook on listeners that define it."""
        for listener in list(self._listeners):
            method = getattr(listener, hook, None)
            if callable(method):
                method(*args)

    # =========================================================================
    # Status mutation
    # =========================================================================

    def set_alarm_status(self, status: AlarmStatus) -> None:
        """Persist the status, then notify every listener once.

        Listeners are notified even when the status is unchanged.
        """
        status = AlarmStatus(status)
        with self._lock:
            self._store.set_alarm_status(status)
            logger.debug("Notifying %d listener(s): %s", len(self._listeners), status.value)
            self._notify_status(status)

    # =========================================================================
    # Transitions
    # =========================================================================

    def set_sensor_activation(self, sensor: Sensor, active: bool) -> TransitionResult:
        """Toggle a sensor, persist it, and apply the sensor rules."""
        with self._lock:
            sensor.active = active
            self._store.update_sensor(sensor)

            trigger = (
                TransitionTrigger.SENSOR_ACTIVATED
                if active else TransitionTrigger.SENSOR_DEACTIVATED
            )
            result = self._apply(trigger)
            self._fan_out("sensor_status_changed")
            return result

    def set_arming_status(self, status: ArmingStatus) -> TransitionResult:
        """Change arming mode.

        Arming (home or away) resets every known sensor to inactive before
        the arming rules run.
        """
        status = ArmingStatus(status)
        with self._lock:
            if status.is_armed:
                self._reset_sensors()
            self._store.set_arming_status(status)
            return self._apply(_ARMING_TRIGGERS[status])

    def process_image(self, image: Any) -> TransitionResult:
        """Classify an image and apply the image rules.

        The outcome is remembered for a later arm-home.
        """
        with self._lock:
            cat = bool(self._cat_detector.contains_cat(
                image, self.config.cat_confidence_threshold
            ))
            self._cat_detected = cat

            trigger = (
                TransitionTrigger.CAT_DETECTED
                if cat else TransitionTrigger.NO_CAT_DETECTED
            )
            result = self._apply(trigger)
            self._fan_out("cat_detected", cat)
            return result

    def _reset_sensors(self) -> None:
        sensors = sorted(self._store.get_sensors(), key=Sensor.sort_key)
        for sensor in sensors:
            sensor.active = False
            self._store.update_sensor(sensor)
        if sensors:
            logger.debug("Reset %d sensor(s) to inactive", len(sensors))
            self._fan_out("sensor_status_changed")

    def _apply(self, trigger: TransitionTrigger) -> TransitionResult:
        ctx = TransitionContext(
            trigger=trigger,
            alarm_status=self._store.get_alarm_status(),
            arming_status=self._store.get_arming_status(),
            cat_detected=self._cat_detected,
            store=self._store,
        )
        rule = resolve_transition(ctx)

        if rule is None or rule.to_status is None:
            result = TransitionResult(
                success=False,
                from_status=ctx.alarm_status,
                to_status=ctx.alarm_status,
                trigger=trigger,
                rule=rule.name if rule else None,
                reason=rule.reason if rule else f"No rule for {trigger.value}",
            )
            logger.debug("%s: status held (%s)", trigger.value, result.reason)
            return result

        self.set_alarm_status(rule.to_status)
        result = TransitionResult(
            success=True,
            from_status=ctx.alarm_status,
            to_status=rule.to_status,
            trigger=trigger,
            rule=rule.name,
            reason=rule.reason,
        )
        self._transitions.append(result)
        logger.info(
            "Alarm status %s -> %s [%s]",
            ctx.alarm_status.value,
            rule.to_status.value,
            rule.name,
        )
        return result

    def get_transition_history(self) -> list[TransitionResult]:
        """Most recent applied transitions, oldest first."""
        return list(self._transitions)

    def clear_history(self) -> None:
        self._transitions.clear()

    # =========================================================================
    # Pass-through accessors
    # =========================================================================

    def get_alarm_status(self) -> AlarmStatus:
        return self._store.get_alarm_status()

    def get_arming_status(self) -> ArmingStatus:
        return self._store.get_arming_status()

    def get_sensors(self) -> set[Sensor]:
        return self._store.get_sensors()

    def add_sensor(self, sensor: Sensor) -> None:
        with self._lock:
            self._store.add_sensor(sensor)
            self._fan_out("sensor_status_changed")

    def remove_sensor(self, sensor: Sensor) -> None:
        with self._lock:
            self._store.remove_sensor(sensor)
            self._fan_out("sensor_status_changed")
