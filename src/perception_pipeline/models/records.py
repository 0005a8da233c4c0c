"""
Output records published by the pipeline.

One record type per output channel. Records are plain dataclasses so that
transports can serialize them however they like; to_dict() gives a JSON-safe
view where image payloads are summarized rather than inlined.
"""

from dataclasses import dataclass, field
from typing import Any

import numpy as np

from .frames import CameraInfo, ImageMessage


def describe_array(array: np.ndarray | None, encoding: str | None = None) -> dict | None:
    """Summarize an array for JSON output."""
    if array is None:
        return None
    summary = {"shape": list(array.shape), "dtype": str(array.dtype)}
    if encoding:
        summary["encoding"] = encoding
    return summary


@dataclass
class Header:
    """Stamp and frame of the input that produced a record."""

    stamp: float = 0.0
    frame_id: str = ""

    def to_dict(self) -> dict[str, Any]:
        return {"stamp": self.stamp, "frame_id": self.frame_id}


@dataclass
class RegionOfInterest:
    """Axis-aligned box as offset + size."""

    x_offset: int
    y_offset: int
    width: int
    height: int
    do_rectify: bool = False

    @classmethod
    def from_corners(
        cls, x1: float, y1: float, x2: float, y2: float
    ) -> "RegionOfInterest":
        """Convert corner form (x1, y1, x2, y2) to offset + size."""
        return cls(
            x_offset=int(x1),
            y_offset=int(y1),
            width=int(x2 - x1),
            height=int(y2 - y1),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "x_offset": self.x_offset,
            "y_offset": self.y_offset,
            "width": self.width,
            "height": self.height,
            "do_rectify": self.do_rectify,
        }


@dataclass
class AnnotatedImage:
    """Visualization output, any precision level."""

    header: Header
    image: np.ndarray
    encoding: str = "bgr8"

    def to_dict(self) -> dict[str, Any]:
        return {
            "record_type": "annotated_image",
            "header": self.header.to_dict(),
            "image": describe_array(self.image, self.encoding),
        }


@dataclass
class ImageClassificationRecord:
    """Precision level 1 output."""

    header: Header
    object_names: list[str] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "record_type": "image_classification",
            "header": self.header.to_dict(),
            "object_names": list(self.object_names),
        }


@dataclass
class ObjectDetectionRecord:
    """Precision level 2 output, and level 3 when masks are present."""

    header: Header
    class_indices: list[int] = field(default_factory=list)
    scores: list[float] = field(default_factory=list)
    bboxes: list[RegionOfInterest] = field(default_factory=list)
    masks: list[np.ndarray] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "record_type": "object_detection",
            "header": self.header.to_dict(),
            "class_indices": list(self.class_indices),
            "scores": [float(s) for s in self.scores],
            "bboxes": [roi.to_dict() for roi in self.bboxes],
            "masks": [describe_array(m, "32FC1") for m in self.masks],
        }


@dataclass
class LocalizedObjectRecord:
    """One localized object inside an ObjectLocalizationRecord."""

    name: str
    pos: tuple[float, float, float]
    roi: RegionOfInterest
    length: float
    breadth: float
    height: float

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "pos": {"x": self.pos[0], "y": self.pos[1], "z": self.pos[2]},
            "roi": self.roi.to_dict(),
            "length": self.length,
            "breadth": self.breadth,
            "height": self.height,
        }


@dataclass
class ObjectLocalizationRecord:
    """Localization path output."""

    header: Header
    frame_width: int
    frame_height: int
    depth_image: ImageMessage | None
    camera_info: CameraInfo | None
    num_objects: int = 0
    objects: list[LocalizedObjectRecord] = field(default_factory=list)
    roi_array: list[RegionOfInterest] = field(default_factory=list)
    process_time: float = 0.0  # milliseconds

    def to_dict(self) -> dict[str, Any]:
        depth = None
        if self.depth_image is not None:
            depth = {
                "stamp": self.depth_image.stamp,
                "width": self.depth_image.width,
                "height": self.depth_image.height,
                "encoding": self.depth_image.encoding,
            }
        return {
            "record_type": "object_localization",
            "header": self.header.to_dict(),
            "frame_width": self.frame_width,
            "frame_height": self.frame_height,
            "depth_image": depth,
            "camera_info": self.camera_info.to_dict() if self.camera_info else None,
            "num_objects": self.num_objects,
            "objects": [obj.to_dict() for obj in self.objects],
            "roi_array": [roi.to_dict() for roi in self.roi_array],
            "process_time": self.process_time,
        }
