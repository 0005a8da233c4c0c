"""
Engine container - builds and owns the capability sessions.
"""

import logging
from collections.abc import Callable
from typing import Any

from ..config.schemas import PipelineConfig
from ..core.dispatcher import InferencePath, path_for_precision
from ..core.routes import UseCaseMode
from .registry import get_backend

logger = logging.getLogger(__name__)


class EngineContainer:
    """
    Owns the inference sessions for one pipeline.

    Sessions are built on the first frame, when the frame size is known,
    and never rebuilt. In localization mode only the localizer is built;
    otherwise only the capability for the configured precision level.
    """

    def __init__(self, config: PipelineConfig, factory: Callable[..., Any] | None = None):
        """
        Create container.

        Args:
            config: Validated pipeline configuration
            factory: Capability factory; looked up from config.engine.backend if None
        """
        self.config = config
        self._factory = factory
        self._sessions: dict[InferencePath, Any] = {}
        self._frame_size: tuple[int, int] | None = None

    @property
    def initialized(self) -> bool:
        return self._frame_size is not None

    @property
    def frame_size(self) -> tuple[int, int] | None:
        return self._frame_size

    def required_paths(self) -> list[InferencePath]:
        """Inference paths this configuration needs."""
        engine = self.config.engine
        if engine.use_case_mode is UseCaseMode.LOCALIZATION:
            return [InferencePath.LOCALIZATION]
        return [path_for_precision(engine.precision_level)]

    def initialize(self, width: int, height: int) -> None:
        """
        Build every required capability session for frames of this size.

        Raises:
            RuntimeError: Already initialized
        """
        if self.initialized:
            raise RuntimeError(
                f"Engine already initialized for {self._frame_size[0]}x{self._frame_size[1]}"
            )

        factory = self._factory or get_backend(self.config.engine.backend)
        for path in self.required_paths():
            logger.info(f"Building {path.value} session for {width}x{height}")
            self._sessions[path] = factory(path, self.config, width, height)

        self._frame_size = (width, height)

    def capability_for(self, path: InferencePath) -> Any:
        """
        Capability session for an inference path.

        Raises:
            RuntimeError: Not initialized, or the path was not built
        """
        if not self.initialized:
            raise RuntimeError("Engine not initialized")
        try:
            return self._sessions[path]
        except KeyError:
            raise RuntimeError(f"No {path.value} session built for this configuration") from None
