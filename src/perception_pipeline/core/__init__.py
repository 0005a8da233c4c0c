"""
Core orchestration components.

Session state, stream synchronization, dispatch, formatting and the
pipeline that ties them together.
"""

from .dispatcher import (
    DISPATCH_TABLE,
    DispatchResult,
    MODEL_TASKS,
    InferencePath,
    OutputKind,
    dispatch,
    path_for_precision,
)
from .formatter import format_result
from .pipeline import PerceptionPipeline
from .routes import Route, UseCaseMode, select_route
from .session import FrameDimensionChangedError, SessionState
from .synchronizer import ApproximateTimeSynchronizer

__all__ = [
    "DISPATCH_TABLE",
    "ApproximateTimeSynchronizer",
    "DispatchResult",
    "FrameDimensionChangedError",
    "InferencePath",
    "MODEL_TASKS",
    "OutputKind",
    "PerceptionPipeline",
    "Route",
    "SessionState",
    "UseCaseMode",
    "dispatch",
    "format_result",
    "path_for_precision",
    "select_route",
]
