"""
Annotated frame saving.
"""

import logging
import os

import cv2

from ..models import AnnotatedImage
from ..utils.constants import DEFAULT_FRAMES_DIR

logger = logging.getLogger(__name__)


class AnnotatedFrameWriter:
    """
    RecordChannel that saves annotated images as JPEG files.

    Each image is written as <stamp>_<n>.jpg. With keep_latest, the most
    recent image is also written to latest.jpg for quick viewing.
    """

    def __init__(
        self,
        output_dir: str = DEFAULT_FRAMES_DIR,
        save_every: bool = True,
        keep_latest: bool = True,
        jpeg_quality: int = 90,
    ):
        os.makedirs(output_dir, exist_ok=True)
        self.output_dir = output_dir
        self.save_every = save_every
        self.keep_latest = keep_latest
        self._params = [int(cv2.IMWRITE_JPEG_QUALITY), int(jpeg_quality)]
        self.frame_count = 0

        logger.info(f"Annotated frames: {output_dir}")

    def put(self, record: AnnotatedImage) -> None:
        """Write one annotated image."""
        self.frame_count += 1

        if self.save_every:
            filename = f"{record.header.stamp:.3f}_{self.frame_count:06d}.jpg"
            self._write(os.path.join(self.output_dir, filename), record)

        if self.keep_latest:
            self._write(os.path.join(self.output_dir, "latest.jpg"), record)

    def _write(self, path: str, record: AnnotatedImage) -> None:
        image = record.image
        if record.encoding == "rgb8":
            image = cv2.cvtColor(image, cv2.COLOR_RGB2BGR)

        if not cv2.imwrite(path, image, self._params):
            logger.warning(f"Failed to write annotated frame: {path}")
