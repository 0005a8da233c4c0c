"""
Tests for data models
"""

import json
import unittest

import numpy as np

from perception_pipeline.models import (
    AnnotatedImage,
    CameraInfo,
    DetectionResult,
    Frame,
    Header,
    ImageClassificationRecord,
    ImageMessage,
    LocalizedObjectRecord,
    ObjectDetectionRecord,
    ObjectLocalizationRecord,
    RegionOfInterest,
)

K = (600.0, 0.0, 320.0, 0.0, 610.0, 240.0, 0.0, 0.0, 1.0)


class TestCameraInfo(unittest.TestCase):
    """Test calibration record."""

    def test_intrinsics(self):
        info = CameraInfo(stamp=1.0, width=640, height=480, k=K)

        self.assertEqual(info.fx, 600.0)
        self.assertEqual(info.fy, 610.0)
        self.assertEqual(info.cx, 320.0)
        self.assertEqual(info.cy, 240.0)

    def test_rejects_short_matrix(self):
        with self.assertRaises(ValueError):
            CameraInfo(stamp=1.0, width=640, height=480, k=(1.0, 2.0, 3.0))


class TestFrame(unittest.TestCase):
    """Test decoded frame properties."""

    def test_colour_frame(self):
        frame = Frame(image=np.zeros((480, 640, 3), dtype=np.uint8))

        self.assertEqual(frame.width, 640)
        self.assertEqual(frame.height, 480)
        self.assertEqual(frame.channels, 3)
        self.assertFalse(frame.is_empty)

    def test_empty_frame(self):
        frame = Frame(image=np.zeros((0, 640, 3), dtype=np.uint8))

        self.assertTrue(frame.is_empty)


class TestRegionOfInterest(unittest.TestCase):
    """Test corner-form to offset + size conversion."""

    def test_from_corners(self):
        roi = RegionOfInterest.from_corners(10, 20, 50, 80)

        self.assertEqual(roi.x_offset, 10)
        self.assertEqual(roi.y_offset, 20)
        self.assertEqual(roi.width, 40)
        self.assertEqual(roi.height, 60)
        self.assertFalse(roi.do_rectify)

    def test_fractional_corners_truncate(self):
        roi = RegionOfInterest.from_corners(10.7, 20.2, 50.9, 80.6)

        self.assertEqual((roi.x_offset, roi.y_offset), (10, 20))
        self.assertEqual((roi.width, roi.height), (40, 60))


class TestDetectionResult(unittest.TestCase):
    """Test parallel-array validation."""

    def test_parallel_arrays(self):
        result = DetectionResult(
            class_indices=[0, 2], scores=[0.9, 0.8], boxes=[(0, 0, 1, 1), (1, 1, 2, 2)]
        )
        self.assertEqual(len(result), 2)
        self.assertFalse(result.has_masks)

    def test_mismatched_lengths_rejected(self):
        with self.assertRaises(ValueError):
            DetectionResult(class_indices=[0], scores=[0.9, 0.8], boxes=[(0, 0, 1, 1)])

    def test_mask_count_must_match(self):
        with self.assertRaises(ValueError):
            DetectionResult(
                class_indices=[0],
                scores=[0.9],
                boxes=[(0, 0, 1, 1)],
                masks=[],
            )


class TestRecordSerialization(unittest.TestCase):
    """Test that every record serializes to JSON without inlining pixels."""

    def test_annotated_image_summarizes_pixels(self):
        record = AnnotatedImage(header=Header(1.5, "cam"), image=np.zeros((4, 6, 3), np.uint8))
        data = record.to_dict()

        self.assertEqual(data["record_type"], "annotated_image")
        self.assertEqual(data["image"]["shape"], [4, 6, 3])
        json.dumps(data)

    def test_classification_record(self):
        record = ImageClassificationRecord(header=Header(), object_names=["cat", "dog"])

        self.assertEqual(record.to_dict()["object_names"], ["cat", "dog"])

    def test_detection_record_masks(self):
        record = ObjectDetectionRecord(
            header=Header(),
            class_indices=[1],
            scores=[0.5],
            bboxes=[RegionOfInterest(1, 2, 3, 4)],
            masks=[np.zeros((8, 8), np.float32)],
        )
        data = record.to_dict()

        self.assertEqual(data["masks"][0]["dtype"], "float32")
        self.assertEqual(data["bboxes"][0]["width"], 3)
        json.dumps(data)

    def test_localization_record(self):
        depth = ImageMessage(
            stamp=2.0, width=8, height=6, encoding="16UC1", data=np.zeros((6, 8), np.uint16)
        )
        info = CameraInfo(stamp=2.0, width=8, height=6, k=K)
        roi = RegionOfInterest(1, 1, 2, 2)
        record = ObjectLocalizationRecord(
            header=Header(2.0, "cam"),
            frame_width=8,
            frame_height=6,
            depth_image=depth,
            camera_info=info,
            num_objects=1,
            objects=[LocalizedObjectRecord("cup", (0.1, 0.2, 1.0), roi, 0.1, 0.2, 0.3)],
            roi_array=[roi],
            process_time=12.5,
        )
        data = record.to_dict()

        self.assertEqual(data["record_type"], "object_localization")
        self.assertEqual(data["objects"][0]["pos"], {"x": 0.1, "y": 0.2, "z": 1.0})
        self.assertEqual(data["depth_image"]["encoding"], "16UC1")
        self.assertEqual(data["camera_info"]["k"], list(K))
        json.dumps(data)


if __name__ == "__main__":
    unittest.main()
