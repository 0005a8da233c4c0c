"""
Depth geometry helpers - pinhole back-projection and object extent.
"""

from dataclasses import dataclass

import numpy as np

from ..models import CameraInfo
from ..utils.constants import DEFAULT_DEPTH_SCALE, DEFAULT_MAX_DEPTH_M, DEFAULT_MIN_DEPTH_M


@dataclass(frozen=True)
class ObjectExtent:
    """Position and size of an object in the camera frame (metres)."""

    position: tuple[float, float, float]
    length: float
    breadth: float
    height: float


def depth_in_metres(depth: np.ndarray, scale: float = DEFAULT_DEPTH_SCALE) -> np.ndarray:
    """
    Convert a depth image to float32 metres.

    16-bit depth (16UC1) is multiplied by scale; float depth (32FC1) is
    assumed to already be in metres.

    Raises:
        ValueError: Depth is neither uint16 nor floating point
    """
    if depth.dtype == np.uint16:
        return depth.astype(np.float32) * np.float32(scale)
    if np.issubdtype(depth.dtype, np.floating):
        return depth.astype(np.float32, copy=False)
    raise ValueError(f"Unsupported depth dtype: {depth.dtype}")


def deproject_pixel(u: float, v: float, z: float, camera_info: CameraInfo) -> tuple[float, float, float]:
    """Back-project pixel (u, v) at depth z into camera coordinates."""
    x = (u - camera_info.cx) / camera_info.fx * z
    y = (v - camera_info.cy) / camera_info.fy * z
    return float(x), float(y), float(z)


def estimate_extent(
    depth_m: np.ndarray,
    mask: np.ndarray | None,
    box: tuple[float, float, float, float],
    camera_info: CameraInfo,
    min_m: float = DEFAULT_MIN_DEPTH_M,
    max_m: float = DEFAULT_MAX_DEPTH_M,
) -> ObjectExtent | None:
    """
    Estimate where an object is and how big it is.

    Depth samples are taken inside the mask (or the whole box when there is
    no mask). Samples outside [min_m, max_m] or non-finite are ignored. The
    object sits at the median sample depth behind the box centre; breadth and
    height scale the box by that depth, and length is the spread between the
    10th and 90th percentile of the samples.

    Args:
        depth_m: Depth in metres, same size as the frame
        mask: Object mask (non-zero inside), same size as depth_m, or None
        box: Corner-form box (x1, y1, x2, y2) in pixels
        camera_info: Intrinsics of the colour camera
        min_m: Nearest valid depth
        max_m: Farthest valid depth

    Returns:
        ObjectExtent, or None if the object has no valid depth
    """
    rows, cols = depth_m.shape[:2]
    x1, y1, x2, y2 = box
    c1, r1 = max(int(x1), 0), max(int(y1), 0)
    c2, r2 = min(int(np.ceil(x2)), cols), min(int(np.ceil(y2)), rows)
    if c2 <= c1 or r2 <= r1:
        return None

    region = depth_m[r1:r2, c1:c2]
    if mask is not None:
        region = region[mask[r1:r2, c1:c2] > 0]

    samples = region[np.isfinite(region)]
    samples = samples[(samples >= min_m) & (samples <= max_m)]
    if samples.size == 0:
        return None

    z = float(np.median(samples))
    near, far = np.percentile(samples, [10, 90])

    return ObjectExtent(
        position=deproject_pixel((x1 + x2) / 2.0, (y1 + y2) / 2.0, z, camera_info),
        length=float(far - near),
        breadth=float((x2 - x1) * z / camera_info.fx),
        height=float((y2 - y1) * z / camera_info.fy),
    )
