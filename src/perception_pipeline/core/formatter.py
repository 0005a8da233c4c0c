"""
Result formatter - raw inference output to output records.

Exactly one record per dispatch. Visualization output bypasses every
structured record.
"""

from collections.abc import Callable
from typing import Any

from ..models import (
    AnnotatedImage,
    CameraInfo,
    ClassificationResult,
    DetectionResult,
    Frame,
    Header,
    ImageClassificationRecord,
    ImageMessage,
    LocalizationResult,
    LocalizedObjectRecord,
    ObjectDetectionRecord,
    ObjectLocalizationRecord,
    RegionOfInterest,
)
from .dispatcher import DispatchResult, OutputKind


def format_result(
    result: DispatchResult,
    frame: Frame,
    calibration: CameraInfo | None = None,
    depth_message: ImageMessage | None = None,
) -> Any:
    """
    Build the record for a dispatch result.

    Args:
        result: Output of dispatch()
        frame: Frame the inference ran on (dimensions and header)
        calibration: Camera calibration (localization only)
        depth_message: Depth image message (localization only)

    Returns:
        AnnotatedImage, ImageClassificationRecord, ObjectDetectionRecord or
        ObjectLocalizationRecord depending on result.kind
    """
    header = Header(stamp=frame.stamp, frame_id=frame.frame_id)
    builder = _BUILDERS[result.kind]
    return builder(result, header, frame, calibration, depth_message)


def _annotated_image(result, header, _frame, _calibration, _depth_message) -> AnnotatedImage:
    return AnnotatedImage(header=header, image=result.output)


def _classification(result, header, _frame, _calibration, _depth_message) -> ImageClassificationRecord:
    output: ClassificationResult = result.output
    return ImageClassificationRecord(header=header, object_names=list(output.labels))


def _detection(result, header, _frame, _calibration, _depth_message) -> ObjectDetectionRecord:
    output: DetectionResult = result.output
    record = ObjectDetectionRecord(header=header)

    for class_index, score, box in zip(output.class_indices, output.scores, output.boxes):
        record.class_indices.append(int(class_index))
        record.scores.append(float(score))
        record.bboxes.append(RegionOfInterest.from_corners(*box))

    if result.kind is OutputKind.SEGMENTATION:
        masks = output.masks or []
        if len(masks) != len(record.bboxes):
            raise ValueError(
                f"Segmentation returned {len(masks)} masks for {len(record.bboxes)} boxes"
            )
        record.masks = list(masks)

    return record


def _localization(result, header, frame, calibration, depth_message) -> ObjectLocalizationRecord:
    output: LocalizationResult = result.output
    record = ObjectLocalizationRecord(
        header=header,
        frame_width=frame.width,
        frame_height=frame.height,
        depth_image=depth_message,
        camera_info=calibration,
        num_objects=len(output.objects),
        process_time=result.elapsed_ms,
    )

    for obj in output.objects:
        roi = RegionOfInterest.from_corners(*obj.box)
        record.objects.append(
            LocalizedObjectRecord(
                name=obj.name,
                pos=obj.position,
                roi=roi,
                length=obj.length,
                breadth=obj.breadth,
                height=obj.height,
            )
        )
        record.roi_array.append(roi)

    return record


_BUILDERS: dict[OutputKind, Callable[..., Any]] = {
    OutputKind.VISUALIZATION: _annotated_image,
    OutputKind.CLASSIFICATION: _classification,
    OutputKind.DETECTION: _detection,
    OutputKind.SEGMENTATION: _detection,
    OutputKind.LOCALIZATION: _localization,
}
