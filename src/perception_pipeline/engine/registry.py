"""
Backend Registry - Maps backend names to capability factories.

Registry is populated by backend modules. A factory builds the capability
session for one inference path:

    factory(path, config, width, height) -> capability
"""

import logging
from collections.abc import Callable
from typing import Any

logger = logging.getLogger(__name__)

# Registry: backend name -> capability factory
BACKEND_REGISTRY: dict[str, Callable[..., Any]] = {}


def register_backend(name: str):
    """Decorator to register a capability factory under a backend name."""

    def decorator(fn):
        BACKEND_REGISTRY[name] = fn
        return fn

    return decorator


def get_backend(name: str) -> Callable[..., Any]:
    """
    Look up a backend factory by name.

    Raises:
        ValueError: No backend registered under that name
    """
    # Import backends to populate registry (decorators register on import)
    if name == "ultralytics":
        from . import ultralytics_backend  # noqa: F401

    if name not in BACKEND_REGISTRY:
        available = ", ".join(sorted(BACKEND_REGISTRY)) or "none"
        raise ValueError(f"Unknown engine backend: {name} (available: {available})")
    return BACKEND_REGISTRY[name]
