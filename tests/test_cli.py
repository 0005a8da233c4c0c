"""
Tests for CLI argument parsing and output wiring
"""

import os
import tempfile
import unittest

from perception_pipeline.cli import build_output_channels, parse_args
from perception_pipeline.config import PipelineConfig
from perception_pipeline.output import AnnotatedFrameWriter, JsonlRecordWriter


class TestParseArgs(unittest.TestCase):
    def test_defaults(self):
        args = parse_args([])

        self.assertEqual(args.config, "config.yaml")
        self.assertFalse(args.validate)
        self.assertFalse(args.quiet)
        self.assertIsNone(args.max_frames)

    def test_flags(self):
        args = parse_args(["-c", "site.yaml", "--validate", "-q", "--max-frames", "50"])

        self.assertEqual(args.config, "site.yaml")
        self.assertTrue(args.validate)
        self.assertTrue(args.quiet)
        self.assertEqual(args.max_frames, 50)


class TestBuildOutputChannels(unittest.TestCase):
    def setUp(self):
        self.tmp = tempfile.TemporaryDirectory()

    def tearDown(self):
        self.tmp.cleanup()

    def make_config(self, save_frames):
        return PipelineConfig.model_validate(
            {
                "engine": {"precision_level": 2, "model_file": "model.pt"},
                "output": {
                    "json_dir": os.path.join(self.tmp.name, "data"),
                    "frames_dir": os.path.join(self.tmp.name, "frames"),
                    "save_annotated_frames": save_frames,
                },
            }
        )

    def test_structured_records_share_writer(self):
        channels, writer = build_output_channels(self.make_config(save_frames=True))
        try:
            self.assertIsInstance(writer, JsonlRecordWriter)
            for name in ("p1", "p2", "p3", "localize"):
                self.assertIs(getattr(channels, name), writer)
            self.assertIsInstance(channels.visual, AnnotatedFrameWriter)
        finally:
            writer.close()

    def test_annotated_frames_disabled(self):
        channels, writer = build_output_channels(self.make_config(save_frames=False))
        writer.close()

        self.assertIsNone(channels.visual)


if __name__ == "__main__":
    unittest.main()
