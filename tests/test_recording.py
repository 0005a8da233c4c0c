"""
Tests for recording replay into the synchronized streams
"""

import os
import tempfile
import unittest

import cv2
import numpy as np
import yaml

from perception_pipeline.sources import RecordingSource

K = [600.0, 0.0, 16.0, 0.0, 600.0, 12.0, 0.0, 0.0, 1.0]


class TestRecordingSource(unittest.TestCase):
    def setUp(self):
        self.tmp = tempfile.TemporaryDirectory()
        self.dir = self.tmp.name
        self.stamps = [1_000_000_000, 1_100_000_000, 1_200_000_000]

        for stamp in self.stamps:
            cv2.imwrite(
                os.path.join(self.dir, f"{stamp}_rgb.jpg"), np.zeros((24, 32, 3), np.uint8)
            )
        for stamp in self.stamps[:2]:
            cv2.imwrite(
                os.path.join(self.dir, f"{stamp}_depth.png"), np.full((24, 32), 1500, np.uint16)
            )
        with open(os.path.join(self.dir, "camera_info.yaml"), "w", encoding="utf-8") as f:
            yaml.safe_dump({"width": 32, "height": 24, "k": K, "d": [0.0] * 5}, f)

        self.received = {"image": [], "depth": [], "camera_info": []}
        self.handlers = {name: msgs.append for name, msgs in self.received.items()}

    def tearDown(self):
        self.tmp.cleanup()

    def test_replays_in_stamp_order(self):
        source = RecordingSource(self.dir)

        replayed = source.replay(self.handlers)

        self.assertEqual(replayed, 3)
        self.assertEqual([m.stamp for m in self.received["image"]], [1.0, 1.1, 1.2])
        self.assertEqual(len(self.received["depth"]), 2)
        self.assertEqual(len(self.received["camera_info"]), 3)

    def test_message_contents(self):
        RecordingSource(self.dir).replay(self.handlers, max_frames=1)

        image = self.received["image"][0]
        depth = self.received["depth"][0]
        info = self.received["camera_info"][0]
        self.assertEqual((image.width, image.height, image.encoding), (32, 24, "bgr8"))
        self.assertEqual(depth.encoding, "16UC1")
        self.assertEqual(depth.data.dtype, np.uint16)
        self.assertEqual(info.fx, 600.0)
        self.assertEqual(info.stamp, image.stamp)

    def test_missing_calibration(self):
        os.unlink(os.path.join(self.dir, "camera_info.yaml"))

        with self.assertRaises(FileNotFoundError):
            RecordingSource(self.dir)

    def test_missing_directory(self):
        with self.assertRaises(FileNotFoundError):
            RecordingSource(os.path.join(self.dir, "nope"))


if __name__ == "__main__":
    unittest.main()
