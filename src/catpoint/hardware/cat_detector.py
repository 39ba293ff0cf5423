"""
Cat detectors

CatDetector is the narrow classification boundary consumed by AlarmController:
given an image and a confidence threshold in percent, report whether a cat is
present. Implementations here need no model:

- FakeCatDetector: random answers, for demos
- ScriptedCatDetector: queued answers, for drills and tests
"""

import logging
import random
from abc import ABC, abstractmethod
from collections import deque
from typing import Any, Iterable, Optional

logger = logging.getLogger(__name__)


class CatDetector(ABC):
    """Image classifier boundary."""

    @abstractmethod
    def contains_cat(self, image: Any, confidence_threshold: float) -> bool:
        """
        Args:
            image: Frame or image handle, interpreted by the implementation
            confidence_threshold: Minimum confidence in percent (0-100)

        Returns:
            True if a cat is detected at or above the threshold
        """
        pass


class FakeCatDetector(CatDetector):
    """Answers at random. Seed it for reproducible runs."""

    def __init__(self, seed: Optional[int] = None):
        self._random = random.Random(seed)

    def contains_cat(self, image: Any, confidence_threshold: float) -> bool:
        return self._random.random() < 0.5


class ScriptedCatDetector(CatDetector):
    """
    Returns queued answers in order.

    When the queue runs dry the default answer is returned.
    """

    def __init__(self, answers: Iterable[bool] = (), default: bool = False):
        self._answers = deque(bool(a) for a in answers)
        self.default = default
        self.calls: list[tuple[Any, float]] = []

    def push(self, answer: bool) -> None:
        self._answers.append(bool(answer))

    @property
    def remaining(self) -> int:
        return len(self._answers)

    def contains_cat(self, image: Any, confidence_threshold: float) -> bool:
        self.calls.append((image, confidence_threshold))
        if self._answers:
            return self._answers.popleft()
        logger.debug("Scripted answers exhausted, returning default %s", self.default)
        return self.default
