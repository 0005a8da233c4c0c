"""
Route selection - which intake is active for this process.

Decided once from the configured use-case mode. The two routes are mutually
exclusive: a process either takes single images, or synchronized
image + depth + calibration tuples.
"""

import logging
from enum import Enum

logger = logging.getLogger(__name__)


class UseCaseMode(str, Enum):
    """Configured use case."""

    DEFAULT = "default"
    LOCALIZATION = "localization"


class Route(str, Enum):
    """Intake route."""

    SINGLE_STREAM = "single_stream"
    SYNCHRONIZED = "synchronized"


# Streams each route subscribes to
ROUTE_STREAMS: dict[Route, tuple[str, ...]] = {
    Route.SINGLE_STREAM: ("image",),
    Route.SYNCHRONIZED: ("image", "depth", "camera_info"),
}


def select_route(use_case_mode: UseCaseMode | str) -> Route:
    """
    Pick the intake route for a use-case mode.

    Args:
        use_case_mode: Configured mode (enum or its string value)

    Returns:
        SYNCHRONIZED for localization, SINGLE_STREAM for everything else
    """
    value = use_case_mode.value if isinstance(use_case_mode, UseCaseMode) else str(use_case_mode)
    localization = value.lower() == UseCaseMode.LOCALIZATION.value
    route = Route.SYNCHRONIZED if localization else Route.SINGLE_STREAM
    logger.info(f"Use case '{value}' -> {route.value} intake")
    return route
