"""
Session state - one-time, dimension-locked engine initialization.

The engine is sized to the first frame it sees and cannot be resized. Any
later frame with different dimensions is fatal for the process.
"""

import logging
import threading
from collections.abc import Callable

from ..models import Frame
from .routes import UseCaseMode

logger = logging.getLogger(__name__)


class FrameDimensionChangedError(RuntimeError):
    """Raised when a frame does not match the dimensions the engine was built for."""

    def __init__(
        self, expected: tuple[int, int], received: tuple[int, int]
    ):
        self.expected = expected
        self.received = received
        super().__init__(
            f"Input camera changed from {expected[0]}x{expected[1]} to "
            f"{received[0]}x{received[1]}. Please restart."
        )


class SessionState:
    """
    Process-wide inference session state.

    Shared by both intake routes, so every read-modify-write of the
    initialization fields happens under a single lock.

    Attributes:
        precision_level: Configured precision level (1, 2 or 3)
        visualize: Emit annotated images instead of structured records
        use_case_mode: Configured use case
    """

    def __init__(
        self,
        precision_level: int,
        visualize: bool,
        use_case_mode: UseCaseMode = UseCaseMode.DEFAULT,
    ):
        if precision_level not in (1, 2, 3):
            raise ValueError(f"precision_level must be 1, 2 or 3, got {precision_level}")

        self.precision_level = precision_level
        self.visualize = visualize
        self.use_case_mode = UseCaseMode(use_case_mode)

        self._lock = threading.Lock()
        self._initialized = False
        self._locked_width: int | None = None
        self._locked_height: int | None = None
        self._failure: FrameDimensionChangedError | None = None
        self.initialization_count = 0

    @property
    def initialized(self) -> bool:
        return self._initialized

    @property
    def locked_width(self) -> int | None:
        return self._locked_width

    @property
    def locked_height(self) -> int | None:
        return self._locked_height

    @property
    def halted(self) -> bool:
        """True once a dimension change has been seen."""
        return self._failure is not None

    def ensure_initialized(
        self, frame: Frame, initializer: Callable[[int, int], None]
    ) -> None:
        """
        Initialize on the first frame, validate dimensions on every later one.

        Args:
            frame: Decoded, non-empty frame
            initializer: One-time engine construction, called with (width, height)

        Raises:
            FrameDimensionChangedError: Frame size differs from the locked size,
                or an earlier frame already did
        """
        with self._lock:
            if self._failure is not None:
                raise FrameDimensionChangedError(self._failure.expected, self._failure.received)

            if not self._initialized:
                logger.info(
                    f"Initializing inference session for {frame.width}x{frame.height} "
                    f"(precision level {self.precision_level}, "
                    f"visualize={self.visualize})"
                )
                initializer(frame.width, frame.height)
                self._locked_width = frame.width
                self._locked_height = frame.height
                self._initialized = True
                self.initialization_count += 1
                return

            # TODO: rebuild the engine for the new size instead of halting
            if frame.width != self._locked_width or frame.height != self._locked_height:
                self._failure = FrameDimensionChangedError(
                    (self._locked_width, self._locked_height),
                    (frame.width, frame.height),
                )
                logger.error(str(self._failure))
                raise self._failure
