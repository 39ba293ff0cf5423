"""
Catpoint Drill Runner

Executes scripted drill cases (JSON) against a fresh AlarmController backed by
an InMemoryStateStore seeded with the standard sensors and a
ScriptedCatDetector.

Drill file layout:

    {
      "cases": [
        {
          "caseId": "D-001",
          "title": "Away: single door opening goes pending",
          "armingStatus": "armed_away",
          "alarmStatus": "no_alarm",
          "activeSensors": [],
          "tags": ["sensor"],
          "steps": [
            {"action": "sensor", "sensorId": "front_door", "active": true},
            {"action": "image", "cat": false},
            {"action": "arm", "status": "armed_home"},
            {"action": "add_sensor", "sensorId": "garage", "name": "Garage", "sensorType": "door"},
            {"action": "remove_sensor", "sensorId": "garage"}
          ],
          "expected": {
            "alarmStatus": "pending_alarm",
            "armingStatus": "armed_away",
            "notifications": ["pending_alarm"],
            "mustNotReach": ["alarm"]
          }
        }
      ]
    }
"""

import json
import logging
import time
from collections import Counter
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Optional, Union

from ..domain.enums import AlarmStatus, ArmingStatus, SensorType
from ..domain.models import Sensor
from ..hardware.cat_detector import ScriptedCatDetector
from ..testing.standard_config import create_standard_sensors
from .alarm_controller import AlarmController, AlarmControllerConfig
from .state_store import InMemoryStateStore
from .status_listener import StatusRecorder

logger = logging.getLogger(__name__)

DRILL_ACTIONS = ("sensor", "arm", "image", "add_sensor", "remove_sensor")


# =============================================================================
# Drill Case Structures
# =============================================================================

@dataclass
class DrillStep:
    """One scripted action."""
    action: str
    sensor_id: Optional[str] = None
    active: Optional[bool] = None
    status: Optional[ArmingStatus] = None
    cat: Optional[bool] = None
    name: Optional[str] = None
    sensor_type: Optional[SensorType] = None


@dataclass
class DrillExpectation:
    """Expected results from drill case."""
    alarm_status: Optional[AlarmStatus] = None
    arming_status: Optional[ArmingStatus] = None
    notifications: Optional[list[AlarmStatus]] = None
    must_not_reach: list[AlarmStatus] = field(default_factory=list)


@dataclass
class DrillCase:
    """A single drill test case."""
    case_id: str
    title: str
    steps: list[DrillStep]
    expected: DrillExpectation
    arming_status: ArmingStatus = ArmingStatus.DISARMED
    alarm_status: AlarmStatus = AlarmStatus.NO_ALARM
    active_sensors: list[str] = field(default_factory=list)
    tags: list[str] = field(default_factory=list)


@dataclass
class DrillResult:
    """Result of running a single drill."""
    case_id: str
    passed: bool = False
    failures: list[str] = field(default_factory=list)
    transitions: list[dict] = field(default_factory=list)
    notifications: list[str] = field(default_factory=list)
    final_alarm_status: Optional[str] = None
    final_arming_status: Optional[str] = None
    duration_ms: float = 0


# =============================================================================
# Drill Runner
# =============================================================================

class DrillRunner:
    """Runs drill cases against an AlarmController."""

    def __init__(
        self,
        drills_path: Optional[Union[str, Path]] = None,
        config: Optional[AlarmControllerConfig] = None,
    ):
        self.config = config or AlarmControllerConfig()
        self.cases: list[DrillCase] = []

        if drills_path:
            self.load_drills(drills_path)

    def load_drills(self, path: Union[str, Path]) -> None:
        """Load drills from JSON file."""
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
        self.load_data(data)
        logger.info("Loaded %d drill case(s) from %s", len(self.cases), path)

    def load_data(self, data: dict) -> None:
        """Load drills from an already-decoded document."""
        if not isinstance(data, dict) or not isinstance(data.get("cases"), list):
            raise ValueError("Drill document must be an object with a 'cases' list")
        for case_data in data["cases"]:
            self.cases.append(self._parse_case(case_data))

    def _parse_case(self, data: dict) -> DrillCase:
        """Parse a drill case from JSON."""
        if not isinstance(data, dict):
            raise ValueError(f"Malformed drill case: {data!r}")
        case_id = data.get("caseId", "UNKNOWN")
        try:
            steps = [self._parse_step(s) for s in data.get("steps", [])]

            expected_data = data.get("expected", {})
            notifications = expected_data.get("notifications")
            expected = DrillExpectation(
                alarm_status=_optional(AlarmStatus, expected_data.get("alarmStatus")),
                arming_status=_optional(ArmingStatus, expected_data.get("armingStatus")),
                notifications=(
                    [AlarmStatus(n) for n in notifications]
                    if notifications is not None else None
                ),
                must_not_reach=[AlarmStatus(s) for s in expected_data.get("mustNotReach", [])],
            )

            return DrillCase(
                case_id=case_id,
                title=data.get("title", ""),
                steps=steps,
                expected=expected,
                arming_status=ArmingStatus(data.get("armingStatus", "disarmed")),
                alarm_status=AlarmStatus(data.get("alarmStatus", "no_alarm")),
                active_sensors=list(data.get("activeSensors", [])),
                tags=data.get("tags", []),
            )
        except (KeyError, ValueError, TypeError, AttributeError) as e:
            raise ValueError(f"Malformed drill case {case_id}: {e}") from e

    def _parse_step(self, data: dict) -> DrillStep:
        action = data["action"]
        # JSON booleans only: "false" or a missing key would change the scenario
        if action == "sensor" and not isinstance(data.get("active"), bool):
            raise ValueError(f"sensor step needs a boolean 'active', got {data.get('active')!r}")
        if action == "image" and not isinstance(data.get("cat"), bool):
            raise ValueError(f"image step needs a boolean 'cat', got {data.get('cat')!r}")

        return DrillStep(
            action=action,
            sensor_id=data.get("sensorId"),
            active=data.get("active"),
            status=_optional(ArmingStatus, data.get("status")),
            cat=data.get("cat"),
            name=data.get("name"),
            sensor_type=_optional(SensorType, data.get("sensorType")),
        )

    def run_case(self, case: DrillCase) -> DrillResult:
        """Run a single drill case."""
        start_time = time.time()

        result = DrillResult(case_id=case.case_id)
        failures = []

        store = InMemoryStateStore(
            sensors=create_standard_sensors(),
            alarm_status=case.alarm_status,
            arming_status=case.arming_status,
        )
        for sensor_id in case.active_sensors:
            sensor = store.get_sensor(sensor_id)
            if sensor is None:
                failures.append(f"Unknown initial active sensor: {sensor_id}")
                continue
            sensor.active = True
            store.update_sensor(sensor)

        detector = ScriptedCatDetector()
        recorder = StatusRecorder()
        controller = AlarmController(store, detector, self.config, listeners=[recorder])

        for index, step in enumerate(case.steps):
            failure = self._run_step(controller, store, detector, step)
            if failure:
                failures.append(f"Step {index} ({step.action}): {failure}")

        result.transitions = [
            {
                "from": t.from_status.value,
                "to": t.to_status.value,
                "trigger": t.trigger.value,
                "rule": t.rule,
            }
            for t in controller.get_transition_history()
        ]
        result.notifications = [s.value for s in recorder.statuses]
        result.final_alarm_status = store.get_alarm_status().value
        result.final_arming_status = store.get_arming_status().value

        failures.extend(self._validate_case(case, result))

        result.failures = failures
        result.passed = len(failures) == 0
        result.duration_ms = (time.time() - start_time) * 1000
        return result

    def _run_step(
        self,
        controller: AlarmController,
        store: InMemoryStateStore,
        detector: ScriptedCatDetector,
        step: DrillStep,
    ) -> Optional[str]:
        """Apply one step. Returns a failure message or None."""
        if step.action == "arm":
            if step.status is None:
                return "missing status"
            controller.set_arming_status(step.status)

        elif step.action == "image":
            detector.push(step.cat)
            controller.process_image(None)

        elif step.action == "sensor":
            sensor = store.get_sensor(step.sensor_id or "")
            if sensor is None:
                return f"unknown sensor {step.sensor_id}"
            controller.set_sensor_activation(sensor, step.active)

        elif step.action == "add_sensor":
            if not step.sensor_id or step.sensor_type is None:
                return "add_sensor needs sensorId and sensorType"
            controller.add_sensor(Sensor(
                sensor_id=step.sensor_id,
                name=step.name or step.sensor_id,
                sensor_type=step.sensor_type,
            ))

        elif step.action == "remove_sensor":
            sensor = store.get_sensor(step.sensor_id or "")
            if sensor is None:
                return f"unknown sensor {step.sensor_id}"
            controller.remove_sensor(sensor)

        else:
            return f"unknown action (expected one of {', '.join(DRILL_ACTIONS)})"

        return None

    def _validate_case(self, case: DrillCase, result: DrillResult) -> list[str]:
        """Validate result against expectations."""
        failures = []
        exp = case.expected

        if exp.alarm_status and exp.alarm_status.value != result.final_alarm_status:
            failures.append(
                f"Alarm status: expected {exp.alarm_status.value}, got {result.final_alarm_status}"
            )

        if exp.arming_status and exp.arming_status.value != result.final_arming_status:
            failures.append(
                f"Arming status: expected {exp.arming_status.value}, got {result.final_arming_status}"
            )

        if exp.notifications is not None:
            expected_values = [s.value for s in exp.notifications]
            if expected_values != result.notifications:
                failures.append(
                    f"Notifications: expected {expected_values}, got {result.notifications}"
                )

        for status in exp.must_not_reach:
            if status.value in result.notifications:
                failures.append(f"Status {status.value} was reached but should not have been")

        return failures

    def run_all(self, tags: Optional[list[str]] = None) -> list[DrillResult]:
        """Run every case, or only cases sharing at least one of ``tags``."""
        wanted = set(tags or ())
        return [
            self.run_case(case)
            for case in self.cases
            if not wanted or wanted.intersection(case.tags)
        ]

    def get_summary(self, results: list[DrillResult]) -> dict:
        """Pass/fail counts plus how many cases ended in each alarm status."""
        passed = [r for r in results if r.passed]
        final_status = Counter(r.final_alarm_status for r in results)

        return {
            "total": len(results),
            "passed": len(passed),
            "failed": len(results) - len(passed),
            "pass_rate": f"{100 * len(passed) / len(results):.1f}%" if results else "N/A",
            "final_alarm_status": {
                status.value: final_status.get(status.value, 0) for status in AlarmStatus
            },
            "failures": {r.case_id: r.failures for r in results if not r.passed},
        }


def _optional(enum_cls: Any, value: Any) -> Any:
    return enum_cls(value) if value is not None else None
