"""
Consolidated data models for the perception pipeline.

This package contains all core data structures used across the application.
"""

from .engine import Classifier, Detector, Localizer
from .frames import CameraInfo, Frame, ImageMessage
from .records import (
    AnnotatedImage,
    Header,
    ImageClassificationRecord,
    LocalizedObjectRecord,
    ObjectDetectionRecord,
    ObjectLocalizationRecord,
    RegionOfInterest,
)
from .results import (
    ClassificationResult,
    DetectionResult,
    LocalizationResult,
    LocalizedObject,
)

__all__ = [
    # Records
    "AnnotatedImage",
    # Sensor data
    "CameraInfo",
    # Results
    "ClassificationResult",
    # Protocols
    "Classifier",
    "DetectionResult",
    "Detector",
    "Frame",
    "Header",
    "ImageClassificationRecord",
    "ImageMessage",
    "LocalizationResult",
    "LocalizedObject",
    "LocalizedObjectRecord",
    "Localizer",
    "ObjectDetectionRecord",
    "ObjectLocalizationRecord",
    "RegionOfInterest",
]
