"""
Tests for building YOLO capabilities (model loading is mocked)
"""

import unittest
from types import SimpleNamespace
from unittest import mock

from perception_pipeline.config import PipelineConfig
from perception_pipeline.core import InferencePath
from perception_pipeline.engine import ultralytics_backend
from perception_pipeline.engine.ultralytics_backend import (
    YoloClassifier,
    YoloDetector,
    YoloLocalizer,
    YoloSegmenter,
    build_ultralytics_session,
    check_model_task,
)


def make_config(**engine):
    settings = {"precision_level": 2, "model_file": "yolo11n.pt", "device": "cpu"}
    settings.update(engine)
    return PipelineConfig.model_validate({"engine": settings})


def fake_model(task):
    return SimpleNamespace(task=task, names={0: "person"})


class TestCheckModelTask(unittest.TestCase):
    def test_matching_tasks(self):
        check_model_task(fake_model("classify"), InferencePath.CLASSIFICATION, "m-cls.pt")
        check_model_task(fake_model("detect"), InferencePath.DETECTION, "m.pt")
        check_model_task(fake_model("segment"), InferencePath.DETECTION, "m-seg.pt")
        check_model_task(fake_model("segment"), InferencePath.LOCALIZATION, "m-seg.pt")

    def test_detection_model_for_classification(self):
        with self.assertRaises(ValueError) as ctx:
            check_model_task(fake_model("detect"), InferencePath.CLASSIFICATION, "yolo11n.pt")

        self.assertIn("yolo11n.pt", str(ctx.exception))
        self.assertIn("classify", str(ctx.exception))

    def test_detection_model_for_masks(self):
        for path in (InferencePath.SEGMENTATION, InferencePath.LOCALIZATION):
            with self.assertRaises(ValueError):
                check_model_task(fake_model("detect"), path, "yolo11n.pt")


class TestBuildUltralyticsSession(unittest.TestCase):
    def build(self, path, task, **engine):
        with mock.patch.object(
            ultralytics_backend, "load_model", return_value=fake_model(task)
        ) as load:
            session = build_ultralytics_session(path, make_config(**engine), 640, 480)
        return session, load

    def test_builds_capability_per_path(self):
        cases = [
            (InferencePath.CLASSIFICATION, "classify", YoloClassifier),
            (InferencePath.DETECTION, "detect", YoloDetector),
            (InferencePath.SEGMENTATION, "segment", YoloSegmenter),
            (InferencePath.LOCALIZATION, "segment", YoloLocalizer),
        ]
        for path, task, expected in cases:
            session, _ = self.build(path, task)
            self.assertIsInstance(session, expected)

    def test_localization_uses_localization_weights(self):
        _, load = self.build(
            InferencePath.LOCALIZATION, "segment", localization_model_file="yolo11n-seg.pt"
        )

        load.assert_called_once_with("yolo11n-seg.pt", "cpu")

    def test_wrong_task_fails_at_build(self):
        with self.assertRaises(ValueError):
            self.build(InferencePath.CLASSIFICATION, "detect")
        with self.assertRaises(ValueError):
            self.build(InferencePath.SEGMENTATION, "detect", precision_level=3)


if __name__ == "__main__":
    unittest.main()
