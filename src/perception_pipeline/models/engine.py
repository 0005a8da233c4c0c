"""
Engine capability protocols - the interface every inference backend exposes.

The pipeline only ever talks to these protocols. Model loading, tensor
pre/post-processing and the forward pass live behind them.
"""

from typing import Protocol, runtime_checkable

import numpy as np

from .frames import CameraInfo
from .results import ClassificationResult, DetectionResult, LocalizationResult


@runtime_checkable
class Classifier(Protocol):
    """Precision level 1 capability."""

    def classify(self, frame: np.ndarray) -> ClassificationResult:
        """
        Classify a whole frame.

        Args:
            frame: BGR frame (numpy array)

        Returns:
            Labels ordered best first
        """
        ...


@runtime_checkable
class Detector(Protocol):
    """Precision level 2 and 3 capability (level 3 also fills masks)."""

    def detect(self, frame: np.ndarray) -> DetectionResult:
        """Detect objects and return boxes, scores and class indices."""
        ...

    def detect_visualize(self, frame: np.ndarray) -> np.ndarray:
        """Detect objects and return the frame annotated with the results."""
        ...


@runtime_checkable
class Localizer(Protocol):
    """Localization capability (image + depth + calibration)."""

    def localize(
        self, frame: np.ndarray, depth: np.ndarray, calibration: CameraInfo
    ) -> LocalizationResult:
        """Detect objects and place them in 3D using depth and intrinsics."""
        ...

    def localize_visualize(
        self, frame: np.ndarray, depth: np.ndarray, calibration: CameraInfo
    ) -> np.ndarray:
        """Localize objects and return the frame annotated with the results."""
        ...
