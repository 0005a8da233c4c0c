"""
Tests for image message decoding
"""

import unittest

import numpy as np

from perception_pipeline.adapters import (
    FrameConversionError,
    frame_to_image_message,
    image_message_to_frame,
)
from perception_pipeline.models import ImageMessage


class TestImageMessageToFrame(unittest.TestCase):
    """Test decoding to bgr8 and passthrough."""

    def test_rgb_to_bgr(self):
        rgb = np.zeros((2, 3, 3), dtype=np.uint8)
        rgb[..., 0] = 255  # red
        msg = ImageMessage(stamp=1.0, width=3, height=2, encoding="rgb8", data=rgb)

        frame = image_message_to_frame(msg, "bgr8")

        self.assertEqual(frame.image.shape, (2, 3, 3))
        self.assertTrue((frame.image[..., 2] == 255).all())
        self.assertTrue((frame.image[..., 0] == 0).all())
        self.assertEqual(frame.stamp, 1.0)

    def test_same_encoding_copies(self):
        bgr = np.full((2, 2, 3), 7, dtype=np.uint8)
        msg = ImageMessage(stamp=0.0, width=2, height=2, encoding="bgr8", data=bgr)

        frame = image_message_to_frame(msg, "bgr8")
        bgr[0, 0, 0] = 0

        self.assertEqual(frame.image[0, 0, 0], 7)

    def test_passthrough_keeps_depth(self):
        depth = np.array([[1000, 2000], [0, 65535]], dtype=np.uint16)
        msg = ImageMessage(stamp=0.0, width=2, height=2, encoding="16UC1", data=depth)

        frame = image_message_to_frame(msg, "passthrough")

        self.assertEqual(frame.image.dtype, np.uint16)
        np.testing.assert_array_equal(frame.image, depth)

    def test_raw_bytes_with_row_padding(self):
        rows = np.arange(6, dtype=np.uint16).reshape(2, 3)
        padded = np.zeros((2, 4), dtype=np.uint16)
        padded[:, :3] = rows
        msg = ImageMessage(
            stamp=0.0, width=3, height=2, encoding="16UC1", data=padded.tobytes(), step=8
        )

        frame = image_message_to_frame(msg, "passthrough")

        np.testing.assert_array_equal(frame.image, rows)

    def test_unknown_encoding(self):
        msg = ImageMessage(stamp=0.0, width=1, height=1, encoding="yuv422", data=b"\x00\x00")

        with self.assertRaises(FrameConversionError):
            image_message_to_frame(msg)

    def test_unsupported_conversion(self):
        depth = np.zeros((2, 2), dtype=np.uint16)
        msg = ImageMessage(stamp=0.0, width=2, height=2, encoding="16UC1", data=depth)

        with self.assertRaises(FrameConversionError):
            image_message_to_frame(msg, "bgr8")

    def test_short_payload(self):
        msg = ImageMessage(stamp=0.0, width=4, height=4, encoding="mono8", data=b"\x00" * 8)

        with self.assertRaises(FrameConversionError):
            image_message_to_frame(msg, "passthrough")


class TestFrameToImageMessage(unittest.TestCase):
    """Test wrapping pixel buffers."""

    def test_wraps_dimensions(self):
        image = np.zeros((5, 7, 3), dtype=np.uint8)

        msg = frame_to_image_message(image, stamp=3.0, frame_id="cam")

        self.assertEqual((msg.width, msg.height), (7, 5))
        self.assertEqual(msg.step, 21)
        self.assertEqual(msg.frame_id, "cam")

    def test_unknown_encoding(self):
        with self.assertRaises(FrameConversionError):
            frame_to_image_message(np.zeros((1, 1), np.uint8), encoding="bogus")


if __name__ == "__main__":
    unittest.main()
