"""
Adapters between transport messages and in-memory pixel buffers.
"""

from .frame_adapter import (
    FrameConversionError,
    frame_to_image_message,
    image_message_to_frame,
)

__all__ = [
    "FrameConversionError",
    "frame_to_image_message",
    "image_message_to_frame",
]
