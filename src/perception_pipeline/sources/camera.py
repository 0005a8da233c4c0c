"""
Camera initialization and frame intake.
"""

import logging
import threading
import time
from collections.abc import Iterator

import cv2

from ..models import ImageMessage
from ..utils.constants import CAMERA_RECONNECT_DELAY, MAX_CAMERA_RECONNECT_ATTEMPTS

logger = logging.getLogger(__name__)


def initialize_camera(camera_url: str | int) -> cv2.VideoCapture:
    """
    Initialize camera with retry logic.

    Args:
        camera_url: Camera URL, device path or device index

    Returns:
        OpenCV VideoCapture object

    Raises:
        RuntimeError: If camera cannot be opened after retries
    """
    for attempt in range(MAX_CAMERA_RECONNECT_ATTEMPTS + 1):
        logger.info(f"Connecting to camera: {camera_url} (attempt {attempt + 1})")
        cap = cv2.VideoCapture(camera_url)

        if cap.isOpened():
            logger.info("Camera connected successfully")
            return cap

        if attempt < MAX_CAMERA_RECONNECT_ATTEMPTS:
            logger.warning(f"Failed to connect, retrying in {CAMERA_RECONNECT_DELAY}s...")
            time.sleep(CAMERA_RECONNECT_DELAY)

    logger.error(
        f"Failed to connect to camera after {MAX_CAMERA_RECONNECT_ATTEMPTS + 1} attempts"
    )
    raise RuntimeError(f"Cannot connect to camera: {camera_url}")


def iter_camera_messages(
    cap: cv2.VideoCapture,
    shutdown_event: threading.Event | None = None,
    frame_id: str = "camera",
) -> Iterator[ImageMessage]:
    """
    Yield camera frames as bgr8 image messages until shutdown or read failure.

    Args:
        cap: Opened VideoCapture
        shutdown_event: Stops iteration when set
        frame_id: Sensor frame stamped on every message
    """
    while True:
        if shutdown_event is not None and shutdown_event.is_set():
            logger.info("Shutdown signal received")
            return

        ret, frame = cap.read()
        if not ret:
            logger.warning("Failed to read frame")
            return

        height, width = frame.shape[:2]
        yield ImageMessage(
            stamp=time.time(),
            width=width,
            height=height,
            encoding="bgr8",
            data=frame,
            frame_id=frame_id,
        )
