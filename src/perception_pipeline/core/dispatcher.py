"""
Inference dispatcher - table-driven routing to engine capabilities.

Every (inference path, visualize) pair maps to exactly one handler. Handlers
are registered with a decorator, so the tier-2/tier-3 branching lives in one
place and precision level 1 visibly has no visualization variant.
"""

import logging
import time
from collections.abc import Callable
from dataclasses import dataclass
from enum import Enum
from typing import Any, Protocol

import numpy as np

from ..models import CameraInfo, Frame

logger = logging.getLogger(__name__)


class InferencePath(str, Enum):
    """Inference operation family."""

    CLASSIFICATION = "classification"  # precision level 1
    DETECTION = "detection"  # precision level 2
    SEGMENTATION = "segmentation"  # precision level 3
    LOCALIZATION = "localization"  # synchronized route only


class OutputKind(str, Enum):
    """Shape of the raw output a handler produced."""

    VISUALIZATION = "visualization"
    CLASSIFICATION = "classification"
    DETECTION = "detection"
    SEGMENTATION = "segmentation"
    LOCALIZATION = "localization"


PRECISION_PATHS: dict[int, InferencePath] = {
    1: InferencePath.CLASSIFICATION,
    2: InferencePath.DETECTION,
    3: InferencePath.SEGMENTATION,
}

# Ultralytics model tasks able to serve each path
MODEL_TASKS: dict[InferencePath, tuple[str, ...]] = {
    InferencePath.CLASSIFICATION: ("classify",),
    InferencePath.DETECTION: ("detect", "segment"),
    InferencePath.SEGMENTATION: ("segment",),
    InferencePath.LOCALIZATION: ("segment",),
}


class CapabilityProvider(Protocol):
    """Anything that hands out the capability for an inference path."""

    def capability_for(self, path: InferencePath) -> Any: ...


@dataclass
class DispatchResult:
    """Raw handler output plus the measured inference latency."""

    kind: OutputKind
    output: Any
    elapsed_ms: float

    @property
    def fps(self) -> float:
        return 1000.0 / self.elapsed_ms if self.elapsed_ms > 0 else 0.0


Handler = Callable[[Any, np.ndarray, np.ndarray | None, CameraInfo | None], tuple[OutputKind, Any]]

# Registry: (path, visualize) -> handler
DISPATCH_TABLE: dict[tuple[InferencePath, bool], Handler] = {}


def register(path: InferencePath, visualize: bool | None = None):
    """
    Decorator to register a handler for an inference path.

    Args:
        path: Inference path the handler serves
        visualize: Mode the handler serves; None registers it for both modes
    """

    def decorator(fn: Handler) -> Handler:
        modes = (False, True) if visualize is None else (visualize,)
        for mode in modes:
            DISPATCH_TABLE[(path, mode)] = fn
        return fn

    return decorator


@register(InferencePath.CLASSIFICATION)
def _classify(capability, image, _depth, _calibration):
    return OutputKind.CLASSIFICATION, capability.classify(image)


@register(InferencePath.DETECTION, visualize=False)
def _detect(capability, image, _depth, _calibration):
    return OutputKind.DETECTION, capability.detect(image)


@register(InferencePath.SEGMENTATION, visualize=False)
def _segment(capability, image, _depth, _calibration):
    return OutputKind.SEGMENTATION, capability.detect(image)


@register(InferencePath.DETECTION, visualize=True)
@register(InferencePath.SEGMENTATION, visualize=True)
def _detect_visualize(capability, image, _depth, _calibration):
    return OutputKind.VISUALIZATION, capability.detect_visualize(image)


@register(InferencePath.LOCALIZATION, visualize=False)
def _localize(capability, image, depth, calibration):
    return OutputKind.LOCALIZATION, capability.localize(image, depth, calibration)


@register(InferencePath.LOCALIZATION, visualize=True)
def _localize_visualize(capability, image, depth, calibration):
    return OutputKind.VISUALIZATION, capability.localize_visualize(image, depth, calibration)


def path_for_precision(precision_level: int) -> InferencePath:
    """Map a precision level (1-3) to its inference path."""
    try:
        return PRECISION_PATHS[precision_level]
    except KeyError:
        raise ValueError(f"Unknown precision level: {precision_level}") from None


def dispatch(
    engine: CapabilityProvider,
    path: InferencePath,
    visualize: bool,
    frame: Frame,
    depth: Frame | None = None,
    calibration: CameraInfo | None = None,
) -> DispatchResult:
    """
    Run the inference operation for a path and mode.

    Engine failures are not caught here; they reach the caller unchanged.

    Args:
        engine: Initialized engine exposing capability_for()
        path: Inference path
        visualize: Produce an annotated image instead of structured output
        frame: Decoded, non-empty frame
        depth: Depth frame (localization only)
        calibration: Camera calibration (localization only)

    Returns:
        DispatchResult with output kind, raw output and elapsed milliseconds

    Raises:
        ValueError: Empty frame, or localization without depth/calibration
    """
    if frame.is_empty:
        raise ValueError("Cannot dispatch an empty frame")
    if path is InferencePath.LOCALIZATION and (depth is None or calibration is None):
        raise ValueError("Localization needs both a depth image and calibration")

    handler = DISPATCH_TABLE[(path, visualize)]
    capability = engine.capability_for(path)
    depth_image = depth.image if depth is not None else None

    begin = time.perf_counter()
    kind, output = handler(capability, frame.image, depth_image, calibration)
    elapsed_ms = (time.perf_counter() - begin) * 1000.0

    logger.debug(f"{path.value} (visualize={visualize}) took {elapsed_ms:.1f}ms")
    return DispatchResult(kind=kind, output=output, elapsed_ms=elapsed_ms)
