"""
Recording replay - feeds recorded colour, depth and calibration into the
synchronized streams.

A recording directory holds one pair of files per capture plus a single
calibration file:

    <stamp_ns>_rgb.jpg      colour image (bgr8)
    <stamp_ns>_depth.png    16-bit depth image (16UC1)
    camera_info.yaml        width, height, k (9 values), d, distortion_model
"""

import logging
import threading
import time
from collections.abc import Callable
from pathlib import Path
from typing import Any

import cv2
import yaml

from ..models import CameraInfo, ImageMessage

logger = logging.getLogger(__name__)

RGB_SUFFIX = "_rgb.jpg"
DEPTH_SUFFIX = "_depth.png"
CAMERA_INFO_FILE = "camera_info.yaml"


class RecordingSource:
    """Replays a recording directory into image, depth and camera_info handlers."""

    def __init__(self, path: str, frame_id: str = "camera"):
        self.path = Path(path)
        self.frame_id = frame_id
        if not self.path.is_dir():
            raise FileNotFoundError(f"Recording directory not found: {path}")

        self.calibration = self._load_calibration()
        self.stamps_ns = sorted(
            int(p.name[: -len(RGB_SUFFIX)]) for p in self.path.glob(f"*{RGB_SUFFIX}")
        )
        logger.info(f"Recording {self.path}: {len(self.stamps_ns)} captures")

    def __len__(self) -> int:
        return len(self.stamps_ns)

    def _load_calibration(self) -> dict:
        info_path = self.path / CAMERA_INFO_FILE
        if not info_path.exists():
            raise FileNotFoundError(f"Missing {CAMERA_INFO_FILE} in {self.path}")

        with open(info_path, encoding="utf-8") as f:
            info = yaml.safe_load(f) or {}

        missing = [key for key in ("width", "height", "k") if key not in info]
        if missing:
            raise ValueError(f"{info_path} missing keys: {', '.join(missing)}")
        return info

    def camera_info(self, stamp: float) -> CameraInfo:
        info = self.calibration
        return CameraInfo(
            stamp=stamp,
            width=int(info["width"]),
            height=int(info["height"]),
            k=tuple(float(v) for v in info["k"]),
            d=tuple(float(v) for v in info.get("d", ())),
            distortion_model=info.get("distortion_model", "plumb_bob"),
            frame_id=self.frame_id,
        )

    def load_image(self, stamp_ns: int) -> ImageMessage | None:
        image = cv2.imread(str(self.path / f"{stamp_ns}{RGB_SUFFIX}"), cv2.IMREAD_COLOR)
        if image is None:
            logger.warning(f"Unreadable colour image for stamp {stamp_ns}")
            return None
        return self._message(stamp_ns, image, "bgr8")

    def load_depth(self, stamp_ns: int) -> ImageMessage | None:
        depth_path = self.path / f"{stamp_ns}{DEPTH_SUFFIX}"
        if not depth_path.exists():
            return None
        depth = cv2.imread(str(depth_path), cv2.IMREAD_UNCHANGED)
        if depth is None:
            logger.warning(f"Unreadable depth image for stamp {stamp_ns}")
            return None
        if depth.dtype.name != "uint16":
            logger.warning(f"Depth for stamp {stamp_ns} is {depth.dtype.name}, expected uint16")
            return None
        return self._message(stamp_ns, depth, "16UC1")

    def _message(self, stamp_ns: int, data, encoding: str) -> ImageMessage:
        height, width = data.shape[:2]
        return ImageMessage(
            stamp=stamp_ns / 1e9,
            width=width,
            height=height,
            encoding=encoding,
            data=data,
            frame_id=self.frame_id,
        )

    def replay(
        self,
        handlers: dict[str, Callable[[Any], Any]],
        shutdown_event: threading.Event | None = None,
        rate_hz: float | None = None,
        max_frames: int | None = None,
    ) -> int:
        """
        Feed every capture to the stream handlers in stamp order.

        Args:
            handlers: Stream name -> handler; "image", "depth" and "camera_info" are fed
            shutdown_event: Stops replay when set
            rate_hz: Captures per second; as fast as possible if None
            max_frames: Stop after this many captures

        Returns:
            Number of captures replayed
        """
        period = 1.0 / rate_hz if rate_hz else 0.0
        replayed = 0

        for stamp_ns in self.stamps_ns:
            if shutdown_event is not None and shutdown_event.is_set():
                logger.info("Shutdown signal received")
                break
            if max_frames is not None and replayed >= max_frames:
                break

            begin = time.monotonic()
            image = self.load_image(stamp_ns)
            if image is None:
                continue
            depth = self.load_depth(stamp_ns)

            handlers["image"](image)
            if depth is not None:
                handlers["depth"](depth)
            else:
                logger.debug(f"No depth for stamp {stamp_ns}")
            handlers["camera_info"](self.camera_info(image.stamp))
            replayed += 1

            if period:
                remaining = period - (time.monotonic() - begin)
                if remaining > 0:
                    time.sleep(remaining)

        logger.info(f"Replayed {replayed} captures from {self.path}")
        return replayed
