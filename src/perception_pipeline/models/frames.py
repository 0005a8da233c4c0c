"""
Sensor data models - wire-level messages and decoded frames.
"""

from dataclasses import dataclass

import numpy as np


@dataclass
class ImageMessage:
    """
    Encoded image as delivered by the transport.

    Attributes:
        stamp: Capture time in seconds
        width: Image width in pixels
        height: Image height in pixels (0 in either dimension means empty)
        encoding: Pixel encoding (bgr8, rgb8, bgra8, rgba8, mono8, 16UC1, 32FC1)
        data: Pixel payload, either a numpy array or raw bytes
        step: Row stride in bytes for raw payloads (0 = tightly packed)
        frame_id: Sensor frame the image was captured in
    """

    stamp: float
    width: int
    height: int
    encoding: str
    data: np.ndarray | bytes
    step: int = 0
    frame_id: str = ""


@dataclass
class CameraInfo:
    """
    Calibration record for a pinhole camera.

    Attributes:
        stamp: Time in seconds the calibration applies to
        width: Calibrated image width
        height: Calibrated image height
        k: Row-major 3x3 intrinsic matrix
        d: Distortion coefficients
        distortion_model: Name of the distortion model
        frame_id: Sensor frame the calibration belongs to
    """

    stamp: float
    width: int
    height: int
    k: tuple[float, ...]
    d: tuple[float, ...] = ()
    distortion_model: str = "plumb_bob"
    frame_id: str = ""

    def __post_init__(self):
        if len(self.k) != 9:
            raise ValueError(f"Intrinsic matrix needs 9 values, got {len(self.k)}")

    @property
    def fx(self) -> float:
        return float(self.k[0])

    @property
    def fy(self) -> float:
        return float(self.k[4])

    @property
    def cx(self) -> float:
        return float(self.k[2])

    @property
    def cy(self) -> float:
        return float(self.k[5])

    def to_dict(self) -> dict:
        return {
            "stamp": self.stamp,
            "width": self.width,
            "height": self.height,
            "k": list(self.k),
            "d": list(self.d),
            "distortion_model": self.distortion_model,
            "frame_id": self.frame_id,
        }


@dataclass
class Frame:
    """Decoded pixel buffer, consumed synchronously by the pipeline."""

    image: np.ndarray
    stamp: float = 0.0
    frame_id: str = ""

    @property
    def height(self) -> int:
        return int(self.image.shape[0]) if self.image.ndim >= 1 else 0

    @property
    def width(self) -> int:
        return int(self.image.shape[1]) if self.image.ndim >= 2 else 0

    @property
    def channels(self) -> int:
        return int(self.image.shape[2]) if self.image.ndim == 3 else 1

    @property
    def is_empty(self) -> bool:
        return self.image.size == 0 or self.height == 0

