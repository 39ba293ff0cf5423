"""Catpoint Services"""

from .state_store import StateStore, InMemoryStateStore
from .status_listener import StatusListener, StatusRecorder
from .alarm_controller import (
    AlarmController,
    AlarmControllerConfig,
    CAT_CONFIDENCE_THRESHOLD,
    TRANSITION_RULES,
    TransitionContext,
    TransitionResult,
    TransitionRule,
    TransitionTrigger,
    resolve_transition,
)
from .drill_runner import (
    DrillRunner,
    DrillCase,
    DrillResult,
    DrillStep,
    DrillExpectation,
)

__all__ = [
    # State Store
    'StateStore',
    'InMemoryStateStore',
    # Listeners
    'StatusListener',
    'StatusRecorder',
    # Alarm Controller
    'AlarmController',
    'AlarmControllerConfig',
    'CAT_CONFIDENCE_THRESHOLD',
    'TRANSITION_RULES',
    'TransitionContext',
    'TransitionResult',
    'TransitionRule',
    'TransitionTrigger',
    'resolve_transition',
    # Drill Runner
    'DrillRunner',
    'DrillCase',
    'DrillResult',
    'DrillStep',
    'DrillExpectation',
]
