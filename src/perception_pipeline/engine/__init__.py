"""
Inference engine - capability sessions behind the pipeline's protocols.

Backends register a factory by name; the ultralytics backend is imported
only when it is requested, so torch is not loaded for tests or validation.
"""

from .container import EngineContainer
from .geometry import ObjectExtent, deproject_pixel, depth_in_metres, estimate_extent
from .registry import BACKEND_REGISTRY, get_backend, register_backend
from .visualize import draw_localized_objects

__all__ = [
    "BACKEND_REGISTRY",
    "EngineContainer",
    "ObjectExtent",
    "deproject_pixel",
    "depth_in_metres",
    "draw_localized_objects",
    "estimate_extent",
    "get_backend",
    "register_backend",
]
