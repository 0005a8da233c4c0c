"""
Utility modules for constants.
"""

from .constants import (
    DEFAULT_DEPTH_SCALE,
    DEFAULT_SYNC_QUEUE_SIZE,
    DEFAULT_SYNC_TOLERANCE,
    ENV_CAMERA_URL,
    ENV_PRECISION_LEVEL,
    ENV_VISUALIZE,
    FPS_REPORT_INTERVAL,
    FPS_WINDOW_SIZE,
)

__all__ = [
    "DEFAULT_DEPTH_SCALE",
    "DEFAULT_SYNC_QUEUE_SIZE",
    "DEFAULT_SYNC_TOLERANCE",
    "ENV_CAMERA_URL",
    "ENV_PRECISION_LEVEL",
    "ENV_VISUALIZE",
    "FPS_REPORT_INTERVAL",
    "FPS_WINDOW_SIZE",
]
