"""Catpoint - home security alarm controller."""

__version__ = "1.0.0"

from .domain import AlarmStatus, ArmingStatus, Sensor, SensorType
from .hardware import CatDetector, FakeCatDetector, ScriptedCatDetector
from .services import (
    AlarmController,
    AlarmControllerConfig,
    InMemoryStateStore,
    StateStore,
    StatusListener,
    TransitionResult,
)

__all__ = [
    'AlarmStatus',
    'ArmingStatus',
    'Sensor',
    'SensorType',
    'CatDetector',
    'FakeCatDetector',
    'ScriptedCatDetector',
    'AlarmController',
    'AlarmControllerConfig',
    'InMemoryStateStore',
    'StateStore',
    'StatusListener',
    'TransitionResult',
]
