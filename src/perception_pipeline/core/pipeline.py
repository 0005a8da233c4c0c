"""
Perception Pipeline - intake, initialization, dispatch, formatting, publish.

Control flow per input:
    image (single stream) or synchronized tuple (localization)
      -> empty-frame guard
      -> session initialization / dimension check
      -> dispatch to the engine capability for (path, visualize)
      -> format one record
      -> publish on the channel for the record kind
"""

import logging
import threading
from collections import deque
from collections.abc import Callable
from typing import Any, Protocol

from ..adapters import image_message_to_frame
from ..models import CameraInfo, ImageMessage
from ..output.channels import OutputChannels
from ..utils.constants import (
    DEFAULT_SYNC_QUEUE_SIZE,
    DEFAULT_SYNC_TOLERANCE,
    FPS_REPORT_INTERVAL,
    FPS_WINDOW_SIZE,
)
from .dispatcher import (
    CapabilityProvider,
    DispatchResult,
    InferencePath,
    dispatch,
    path_for_precision,
)
from .formatter import format_result
from .routes import ROUTE_STREAMS, Route, UseCaseMode, select_route
from .session import SessionState
from .synchronizer import ApproximateTimeSynchronizer

logger = logging.getLogger(__name__)


class InitializableEngine(CapabilityProvider, Protocol):
    """Engine the pipeline can size on the first frame."""

    def initialize(self, width: int, height: int) -> None: ...


class PerceptionPipeline:
    """
    Orchestrates one inference session for the whole process.

    Exactly one intake route is active, chosen from the use-case mode at
    construction. Handlers run to completion on the caller's thread; the
    session state they share is lock-protected, so an executor may call the
    handlers from several threads.
    """

    def __init__(
        self,
        engine: InitializableEngine,
        channels: OutputChannels | None = None,
        precision_level: int = 2,
        visualize: bool = False,
        use_case_mode: UseCaseMode | str = UseCaseMode.DEFAULT,
        sync_queue_size: int = DEFAULT_SYNC_QUEUE_SIZE,
        sync_tolerance: float = DEFAULT_SYNC_TOLERANCE,
    ):
        """
        Create pipeline.

        Args:
            engine: Inference engine (initialized lazily on the first frame)
            channels: Output channels, one per record kind
            precision_level: 1 classification, 2 detection, 3 detection + masks
            visualize: Publish annotated images instead of structured records
            use_case_mode: DEFAULT (single stream) or LOCALIZATION (synchronized)
            sync_queue_size: Pending messages kept per synchronized stream
            sync_tolerance: Maximum stamp spread (seconds) of a synchronized tuple
        """
        self.engine = engine
        self.channels = channels or OutputChannels()
        self.route = select_route(use_case_mode)
        mode = UseCaseMode.LOCALIZATION if self.route is Route.SYNCHRONIZED else UseCaseMode.DEFAULT
        self.session = SessionState(precision_level, visualize, mode)

        self.synchronizer: ApproximateTimeSynchronizer | None = None
        if self.route is Route.SYNCHRONIZED:
            self.synchronizer = ApproximateTimeSynchronizer(
                ROUTE_STREAMS[Route.SYNCHRONIZED],
                self.on_synchronized,
                queue_size=sync_queue_size,
                tolerance=sync_tolerance,
            )
            if precision_level != 3:
                logger.info(
                    f"Localization mode ignores precision level {precision_level}"
                )

        self._stats_lock = threading.Lock()
        self._fps_list: deque[float] = deque(maxlen=FPS_WINDOW_SIZE)
        self.frames_received = 0
        self.frames_discarded = 0
        self.frames_processed = 0

    @classmethod
    def from_config(
        cls, config, engine: InitializableEngine, channels: OutputChannels | None = None
    ) -> "PerceptionPipeline":
        """Create pipeline from a validated PipelineConfig."""
        return cls(
            engine=engine,
            channels=channels,
            precision_level=config.engine.precision_level,
            visualize=config.engine.visualize,
            use_case_mode=config.engine.use_case_mode,
            sync_queue_size=config.synchronization.queue_size,
            sync_tolerance=config.synchronization.tolerance_seconds,
        )

    def intake_handlers(self) -> dict[str, Callable[[Any], Any]]:
        """
        Handlers for the streams the active route subscribes to.

        Returns:
            {"image": on_image} for the single-stream route, or one handler
            per synchronized stream feeding the synchronizer
        """
        if self.route is Route.SINGLE_STREAM:
            return {"image": self.on_image}

        sync = self.synchronizer
        return {name: (lambda msg, name=name: sync.add(name, msg)) for name in sync.stream_names}

    def on_image(self, msg: ImageMessage) -> Any:
        """
        Single-stream intake: one image in, at most one record out.

        Returns:
            Published record, or None if the image was discarded

        Raises:
            FrameDimensionChangedError: Image size differs from the locked size
        """
        if self.route is not Route.SINGLE_STREAM:
            logger.warning("Single-stream intake inactive in localization mode; ignoring image")
            return None
        if not self._accept(msg):
            return None

        frame = image_message_to_frame(msg, "bgr8")
        self.session.ensure_initialized(frame, self.engine.initialize)

        path = path_for_precision(self.session.precision_level)
        result = dispatch(self.engine, path, self.session.visualize, frame)
        record = format_result(result, frame)
        self._publish(result, record)
        return record

    def on_synchronized(
        self, image: ImageMessage, depth: ImageMessage, calibration: CameraInfo
    ) -> Any:
        """
        Synchronized intake: image + depth + calibration in, at most one record out.

        Always takes the localization path, whatever the precision level.

        Returns:
            Published record, or None if the tuple was discarded

        Raises:
            FrameDimensionChangedError: Image size differs from the locked size
        """
        if self.route is not Route.SYNCHRONIZED:
            logger.warning("Synchronized intake inactive outside localization mode; ignoring tuple")
            return None
        if not self._accept(image):
            return None

        frame = image_message_to_frame(image, "bgr8")
        depth_frame = image_message_to_frame(depth, "passthrough")
        self.session.ensure_initialized(frame, self.engine.initialize)

        result = dispatch(
            self.engine,
            InferencePath.LOCALIZATION,
            self.session.visualize,
            frame,
            depth=depth_frame,
            calibration=calibration,
        )
        record = format_result(result, frame, calibration=calibration, depth_message=depth)
        self._publish(result, record)
        return record

    def stats(self) -> dict[str, Any]:
        """Frame counters and rolling average FPS."""
        with self._stats_lock:
            return {
                "route": self.route.value,
                "initialized": self.session.initialized,
                "frames_received": self.frames_received,
                "frames_discarded": self.frames_discarded,
                "frames_processed": self.frames_processed,
                "avg_fps": self._average_fps(),
            }

    def _accept(self, msg: ImageMessage) -> bool:
        """Empty-frame guard shared by both routes."""
        with self._stats_lock:
            self.frames_received += 1
            if msg.height == 0 or msg.width == 0:
                self.frames_discarded += 1
                logger.warning("Input image empty. Discarding.")
                return False
        return True

    def _publish(self, result: DispatchResult, record: Any) -> None:
        channel = self.channels.for_kind(result.kind)
        if channel is None:
            logger.debug(f"No channel for {result.kind.value} records; not published")
        else:
            channel.put(record)

        with self._stats_lock:
            self.frames_processed += 1
            self._fps_list.append(result.fps)
            logger.debug(f"FPS: {result.fps:.1f}")
            if self.frames_processed % FPS_REPORT_INTERVAL == 0:
                logger.info(
                    f"Frame {self.frames_processed} | FPS: {self._average_fps():.1f} | "
                    f"Discarded: {self.frames_discarded}"
                )

    def _average_fps(self) -> float:
        return sum(self._fps_list) / len(self._fps_list) if self._fps_list else 0.0
