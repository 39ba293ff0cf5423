"""Catpoint Detectors"""

from .cat_detector import (
    CatDetector,
    FakeCatDetector,
    ScriptedCatDetector,
)

__all__ = [
    'CatDetector',
    'FakeCatDetector',
    'ScriptedCatDetector',
]
