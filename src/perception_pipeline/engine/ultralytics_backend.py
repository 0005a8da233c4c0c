"""
Ultralytics backend - YOLO classification, detection, segmentation and localization.
"""

import logging

import cv2
import numpy as np
import torch
from ultralytics import YOLO

from ..config.schemas import PipelineConfig
from ..core.dispatcher import MODEL_TASKS, InferencePath
from ..models import (
    CameraInfo,
    ClassificationResult,
    DetectionResult,
    LocalizationResult,
    LocalizedObject,
)
from .geometry import depth_in_metres, estimate_extent
from .registry import register_backend
from .visualize import draw_localized_objects

logger = logging.getLogger(__name__)


def select_device(requested: str | None = None) -> str:
    """Use the requested torch device, else GPU if available."""
    if requested:
        return requested
    return "cuda" if torch.cuda.is_available() else "cpu"


def load_model(model_file: str, device: str) -> YOLO:
    """Load YOLO weights onto a device."""
    model = YOLO(model_file)
    model.to(device)

    logger.info(f"Model initialized: {model_file}")
    logger.info(f"Device: {device}")

    if device.startswith("cuda"):
        logger.info(f"GPU: {torch.cuda.get_device_name(0)}")
    else:
        logger.warning("Running on CPU - performance will be slow")

    return model


def check_model_task(model: YOLO, path: InferencePath, model_file: str) -> None:
    """
    Reject weights whose task cannot serve an inference path.

    Raises:
        ValueError: e.g. a detection checkpoint configured for classification
    """
    expected = MODEL_TASKS[path]
    if model.task not in expected:
        raise ValueError(
            f"Model {model_file} is a '{model.task}' model but the {path.value} path "
            f"needs a {' or '.join(expected)} model"
        )


class YoloClassifier:
    """Precision level 1: whole-frame labels."""

    def __init__(self, model: YOLO, device: str, top_k: int, confidence: float):
        self.model = model
        self.device = device
        self.top_k = top_k
        self.confidence = confidence

    def classify(self, frame: np.ndarray) -> ClassificationResult:
        result = self.model.predict(source=frame, device=self.device, verbose=False)[0]
        probs = result.probs.data.cpu().numpy()
        order = np.argsort(probs)[::-1][: self.top_k]
        labels = [result.names[int(i)] for i in order if probs[i] >= self.confidence]
        return ClassificationResult(labels=labels)


class YoloDetector:
    """Precision level 2: boxes, scores and class indices."""

    with_masks = False

    def __init__(self, model: YOLO, device: str, confidence: float):
        self.model = model
        self.device = device
        self.confidence = confidence

    def _predict(self, frame: np.ndarray):
        return self.model.predict(
            source=frame, conf=self.confidence, device=self.device, verbose=False
        )[0]

    def detect(self, frame: np.ndarray) -> DetectionResult:
        return self._to_detection(self._predict(frame), frame.shape[:2])

    def detect_visualize(self, frame: np.ndarray) -> np.ndarray:
        return self._predict(frame).plot()

    @property
    def names(self) -> dict[int, str]:
        return self.model.names

    def _to_detection(self, result, shape: tuple[int, int]) -> DetectionResult:
        boxes = result.boxes
        xyxy = boxes.xyxy.cpu().numpy()
        detection = DetectionResult(
            class_indices=[int(c) for c in boxes.cls.cpu().numpy()],
            scores=[float(s) for s in boxes.conf.cpu().numpy()],
            boxes=[tuple(float(c) for c in box) for box in xyxy],
            masks=rasterize_masks(result, shape) if self.with_masks else None,
        )
        return detection


class YoloSegmenter(YoloDetector):
    """Precision level 3: detections plus full-frame instance masks."""

    with_masks = True


def rasterize_masks(result, shape: tuple[int, int]) -> list[np.ndarray]:
    """Full-frame float32 masks (1.0 inside) from the result's mask polygons."""
    if result.masks is None:
        return []

    height, width = shape
    masks = []
    for polygon in result.masks.xy:
        mask = np.zeros((height, width), dtype=np.float32)
        if len(polygon):
            cv2.fillPoly(mask, [np.asarray(polygon, dtype=np.int32)], 1.0)
        masks.append(mask)
    return masks


class YoloLocalizer:
    """Segments objects and places them in 3D using depth and intrinsics."""

    def __init__(
        self,
        detector: YoloSegmenter,
        depth_scale: float,
        min_depth_m: float,
        max_depth_m: float,
    ):
        self.detector = detector
        self.depth_scale = depth_scale
        self.min_depth_m = min_depth_m
        self.max_depth_m = max_depth_m

    def localize(
        self, frame: np.ndarray, depth: np.ndarray, calibration: CameraInfo
    ) -> LocalizationResult:
        height, width = frame.shape[:2]
        depth_m = depth_in_metres(depth, self.depth_scale)
        if depth_m.shape[:2] != (height, width):
            depth_m = cv2.resize(depth_m, (width, height), interpolation=cv2.INTER_NEAREST)

        detection = self.detector.detect(frame)
        masks = detection.masks or [None] * len(detection)
        names = self.detector.names

        objects = []
        for cls, box, mask in zip(detection.class_indices, detection.boxes, masks):
            extent = estimate_extent(
                depth_m, mask, box, calibration, self.min_depth_m, self.max_depth_m
            )
            if extent is None:
                logger.debug(f"No valid depth for {names.get(cls, cls)}; skipped")
                continue
            objects.append(
                LocalizedObject(
                    name=names.get(cls, str(cls)),
                    position=extent.position,
                    box=box,
                    length=extent.length,
                    breadth=extent.breadth,
                    height=extent.height,
                )
            )

        return LocalizationResult(objects=objects)

    def localize_visualize(
        self, frame: np.ndarray, depth: np.ndarray, calibration: CameraInfo
    ) -> np.ndarray:
        return draw_localized_objects(frame, self.localize(frame, depth, calibration).objects)


@register_backend("ultralytics")
def build_ultralytics_session(
    path: InferencePath, config: PipelineConfig, width: int, height: int
):
    """Build the YOLO capability for an inference path."""
    engine = config.engine
    device = select_device(engine.device)

    model_file = engine.model_file
    if path is InferencePath.LOCALIZATION:
        model_file = engine.localization_model_file or engine.model_file
    if path not in MODEL_TASKS:
        raise ValueError(f"Unsupported inference path: {path}")

    model = load_model(model_file, device)
    check_model_task(model, path, model_file)

    if path is InferencePath.CLASSIFICATION:
        return YoloClassifier(model, device, engine.top_k, engine.confidence_threshold)

    if path is InferencePath.DETECTION:
        return YoloDetector(model, device, engine.confidence_threshold)

    segmenter = YoloSegmenter(model, device, engine.confidence_threshold)
    if path is InferencePath.SEGMENTATION:
        return segmenter

    return YoloLocalizer(segmenter, config.depth.scale, config.depth.min_m, config.depth.max_m)
