"""
Intake drivers: live camera for the single-stream route, recording replay
for the synchronized route.
"""

from .camera import initialize_camera, iter_camera_messages
from .recording import RecordingSource

__all__ = ["RecordingSource", "initialize_camera", "iter_camera_messages"]
