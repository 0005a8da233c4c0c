"""
Frame buffer adapter - converts encoded image messages to pixel buffers.

Handles the handful of encodings camera drivers publish: 8-bit colour and
grayscale, 16-bit depth (16UC1) and float images (32FC1).
"""

import logging

import cv2
import numpy as np

from ..models import Frame, ImageMessage

logger = logging.getLogger(__name__)

# encoding -> (numpy dtype, channels)
ENCODINGS: dict[str, tuple[type, int]] = {
    "bgr8": (np.uint8, 3),
    "rgb8": (np.uint8, 3),
    "bgra8": (np.uint8, 4),
    "rgba8": (np.uint8, 4),
    "mono8": (np.uint8, 1),
    "8UC1": (np.uint8, 1),
    "mono16": (np.uint16, 1),
    "16UC1": (np.uint16, 1),
    "32FC1": (np.float32, 1),
}

# (source, target) -> OpenCV colour conversion code
COLOR_CONVERSIONS: dict[tuple[str, str], int] = {
    ("rgb8", "bgr8"): cv2.COLOR_RGB2BGR,
    ("bgra8", "bgr8"): cv2.COLOR_BGRA2BGR,
    ("rgba8", "bgr8"): cv2.COLOR_RGBA2BGR,
    ("mono8", "bgr8"): cv2.COLOR_GRAY2BGR,
    ("bgr8", "rgb8"): cv2.COLOR_BGR2RGB,
    ("rgba8", "rgb8"): cv2.COLOR_RGBA2RGB,
    ("bgra8", "rgb8"): cv2.COLOR_BGRA2RGB,
    ("mono8", "rgb8"): cv2.COLOR_GRAY2RGB,
    ("bgr8", "mono8"): cv2.COLOR_BGR2GRAY,
    ("rgb8", "mono8"): cv2.COLOR_RGB2GRAY,
}

# Aliases that share a pixel layout
_LAYOUT_ALIASES = {"8UC1": "mono8", "mono16": "16UC1"}


class FrameConversionError(ValueError):
    """Raised when an image message cannot be decoded to the requested encoding."""

    pass


def image_message_to_frame(msg: ImageMessage, desired_encoding: str = "bgr8") -> Frame:
    """
    Decode an image message into a Frame.

    Args:
        msg: Encoded image message
        desired_encoding: Target encoding, or "passthrough" to keep the source layout

    Returns:
        Frame owning a fresh copy of the pixels

    Raises:
        FrameConversionError: If the encoding is unknown or the conversion unsupported
    """
    pixels = _message_pixels(msg)

    source = _LAYOUT_ALIASES.get(msg.encoding, msg.encoding)
    target = _LAYOUT_ALIASES.get(desired_encoding, desired_encoding)

    if target in ("passthrough", source):
        image = pixels.copy()
    else:
        code = COLOR_CONVERSIONS.get((source, target))
        if code is None:
            raise FrameConversionError(
                f"Cannot convert image from '{msg.encoding}' to '{desired_encoding}'"
            )
        image = cv2.cvtColor(pixels, code)

    return Frame(image=image, stamp=msg.stamp, frame_id=msg.frame_id)


def frame_to_image_message(
    image: np.ndarray,
    stamp: float = 0.0,
    frame_id: str = "",
    encoding: str = "bgr8",
) -> ImageMessage:
    """
    Wrap a pixel buffer in an image message.

    Args:
        image: Pixel buffer laid out as the encoding describes
        stamp: Capture time in seconds
        frame_id: Sensor frame
        encoding: Encoding of image

    Returns:
        ImageMessage referencing image (no copy)
    """
    if encoding not in ENCODINGS:
        raise FrameConversionError(f"Unknown encoding: {encoding}")

    height, width = image.shape[:2]
    return ImageMessage(
        stamp=stamp,
        width=int(width),
        height=int(height),
        encoding=encoding,
        data=image,
        step=int(image.strides[0]) if image.size else 0,
        frame_id=frame_id,
    )


def _message_pixels(msg: ImageMessage) -> np.ndarray:
    """Return the message payload as an (H, W[, C]) array."""
    if msg.encoding not in ENCODINGS:
        raise FrameConversionError(f"Unknown encoding: {msg.encoding}")

    dtype, channels = ENCODINGS[msg.encoding]
    shape = (msg.height, msg.width) if channels == 1 else (msg.height, msg.width, channels)

    if isinstance(msg.data, np.ndarray):
        pixels = msg.data
        if pixels.shape[:2] != (msg.height, msg.width):
            raise FrameConversionError(
                f"Payload shape {pixels.shape} does not match "
                f"{msg.width}x{msg.height} {msg.encoding}"
            )
        return pixels.reshape(shape)

    itemsize = np.dtype(dtype).itemsize
    row_bytes = msg.width * channels * itemsize
    step = msg.step or row_bytes
    raw = np.frombuffer(msg.data, dtype=np.uint8)

    if step < row_bytes or raw.size < step * msg.height:
        raise FrameConversionError(
            f"Payload of {raw.size} bytes too small for {msg.width}x{msg.height} "
            f"{msg.encoding} (step={step})"
        )

    rows = raw[: step * msg.height].reshape(msg.height, step)[:, :row_bytes]
    return np.ascontiguousarray(rows).view(dtype).reshape(shape)
