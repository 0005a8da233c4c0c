"""
Raw inference output, one shape per precision level.

Produced fresh by an engine capability for every call and consumed by the
result formatter. Nothing here is retained across frames.
"""

from dataclasses import dataclass, field

import numpy as np


@dataclass
class ClassificationResult:
    """Precision level 1: labels ordered best first."""

    labels: list[str] = field(default_factory=list)


@dataclass
class DetectionResult:
    """
    Precision level 2 and 3 output.

    Attributes:
        class_indices: Model class index per detection
        scores: Confidence per detection
        boxes: Corner-form boxes (x1, y1, x2, y2) in pixels
        masks: Per-detection float32 masks (level 3 only, None for level 2)
    """

    class_indices: list[int] = field(default_factory=list)
    scores: list[float] = field(default_factory=list)
    boxes: list[tuple[float, float, float, float]] = field(default_factory=list)
    masks: list[np.ndarray] | None = None

    def __post_init__(self):
        counts = {len(self.class_indices), len(self.scores), len(self.boxes)}
        if self.masks is not None:
            counts.add(len(self.masks))
        if len(counts) > 1:
            raise ValueError(
                f"Detection arrays differ in length: classes={len(self.class_indices)}, "
                f"scores={len(self.scores)}, boxes={len(self.boxes)}, "
                f"masks={None if self.masks is None else len(self.masks)}"
            )

    def __len__(self) -> int:
        return len(self.class_indices)

    @property
    def has_masks(self) -> bool:
        return self.masks is not None


@dataclass
class LocalizedObject:
    """An object placed in the camera frame using depth and calibration."""

    name: str
    position: tuple[float, float, float]  # metres, camera frame
    box: tuple[float, float, float, float]  # x1, y1, x2, y2 pixels
    length: float  # metres along the optical axis
    breadth: float  # metres, image x direction
    height: float  # metres, image y direction


@dataclass
class LocalizationResult:
    """Localization path output."""

    objects: list[LocalizedObject] = field(default_factory=list)

    def __len__(self) -> int:
        return len(self.objects)
