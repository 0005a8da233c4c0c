"""
Tests for building output records from dispatch results
"""

import unittest

import numpy as np

from perception_pipeline.core import DispatchResult, OutputKind, format_result
from perception_pipeline.models import (
    AnnotatedImage,
    CameraInfo,
    ClassificationResult,
    DetectionResult,
    Frame,
    ImageClassificationRecord,
    ImageMessage,
    LocalizationResult,
    LocalizedObject,
    ObjectDetectionRecord,
    ObjectLocalizationRecord,
)

K = (500.0, 0.0, 50.0, 0.0, 500.0, 40.0, 0.0, 0.0, 1.0)


def make_frame() -> Frame:
    return Frame(image=np.zeros((80, 100, 3), dtype=np.uint8), stamp=4.25, frame_id="cam")


class TestFormatResult(unittest.TestCase):
    """Test one record per output kind."""

    def test_visualization(self):
        annotated = np.ones((80, 100, 3), dtype=np.uint8)
        record = format_result(DispatchResult(OutputKind.VISUALIZATION, annotated, 3.0), make_frame())

        self.assertIsInstance(record, AnnotatedImage)
        self.assertIs(record.image, annotated)
        self.assertEqual(record.header.stamp, 4.25)
        self.assertEqual(record.header.frame_id, "cam")

    def test_classification(self):
        output = ClassificationResult(labels=["tabby", "tiger_cat"])
        record = format_result(DispatchResult(OutputKind.CLASSIFICATION, output, 1.0), make_frame())

        self.assertIsInstance(record, ImageClassificationRecord)
        self.assertEqual(record.object_names, ["tabby", "tiger_cat"])

    def test_detection_box_conversion(self):
        output = DetectionResult(class_indices=[3], scores=[0.75], boxes=[(10, 20, 50, 80)])
        record = format_result(DispatchResult(OutputKind.DETECTION, output, 1.0), make_frame())

        self.assertIsInstance(record, ObjectDetectionRecord)
        roi = record.bboxes[0]
        self.assertEqual((roi.x_offset, roi.y_offset, roi.width, roi.height), (10, 20, 40, 60))
        self.assertEqual(record.class_indices, [3])
        self.assertEqual(record.scores, [0.75])
        self.assertEqual(record.masks, [])

    def test_empty_detection(self):
        record = format_result(
            DispatchResult(OutputKind.DETECTION, DetectionResult(), 1.0), make_frame()
        )

        self.assertEqual(len(record.bboxes), 0)

    def test_segmentation_attaches_masks(self):
        masks = [np.zeros((80, 100), np.float32), np.ones((80, 100), np.float32)]
        output = DetectionResult(
            class_indices=[0, 1],
            scores=[0.9, 0.8],
            boxes=[(0, 0, 10, 10), (5, 5, 20, 30)],
            masks=masks,
        )
        record = format_result(DispatchResult(OutputKind.SEGMENTATION, output, 1.0), make_frame())

        self.assertEqual(len(record.masks), 2)
        self.assertEqual(len(record.masks), len(record.bboxes))

    def test_segmentation_without_masks_rejected(self):
        output = DetectionResult(class_indices=[0], scores=[0.9], boxes=[(0, 0, 10, 10)])

        with self.assertRaises(ValueError):
            format_result(DispatchResult(OutputKind.SEGMENTATION, output, 1.0), make_frame())

    def test_localization(self):
        calibration = CameraInfo(stamp=4.25, width=100, height=80, k=K)
        depth = ImageMessage(
            stamp=4.26, width=100, height=80, encoding="16UC1", data=np.zeros((80, 100), np.uint16)
        )
        output = LocalizationResult(
            objects=[
                LocalizedObject("cup", (0.1, 0.0, 1.2), (10, 20, 50, 80), 0.05, 0.1, 0.12),
                LocalizedObject("book", (-0.2, 0.1, 2.0), (0, 0, 30, 20), 0.02, 0.12, 0.08),
            ]
        )
        record = format_result(
            DispatchResult(OutputKind.LOCALIZATION, output, 42.0),
            make_frame(),
            calibration=calibration,
            depth_message=depth,
        )

        self.assertIsInstance(record, ObjectLocalizationRecord)
        self.assertEqual((record.frame_width, record.frame_height), (100, 80))
        self.assertEqual(record.num_objects, 2)
        self.assertEqual(len(record.roi_array), 2)
        self.assertEqual(record.objects[0].roi.width, 40)
        self.assertEqual(record.objects[0].name, "cup")
        self.assertEqual(record.process_time, 42.0)
        self.assertIs(record.depth_image, depth)
        self.assertIs(record.camera_info, calibration)


if __name__ == "__main__":
    unittest.main()
