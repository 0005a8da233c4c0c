"""
Perception Pipeline CLI
Main entry point for running the pipeline.

  --validate  Check configuration validity and show derived settings
"""

import argparse
import logging
import signal
import sys
import threading

from .config import (
    ConfigValidationError,
    load_config_file,
    load_config_with_env,
    print_validation_result,
    validate_config_full,
)
from .config.schemas import PipelineConfig
from .core import PerceptionPipeline, Route, select_route
from .engine import EngineContainer
from .output import AnnotatedFrameWriter, JsonlRecordWriter, OutputChannels
from .sources import RecordingSource, initialize_camera, iter_camera_messages

logger = logging.getLogger(__name__)

# Module-level shutdown signal for SIGTERM/SIGINT handling
_shutdown_signal = threading.Event()


def _handle_shutdown_signal(signum, _frame):
    """Handle SIGTERM/SIGINT for graceful shutdown."""
    signal_name = "SIGTERM" if signum == signal.SIGTERM else "SIGINT"
    # Note: print is safer than logger in signal handlers
    print(f"\nReceived {signal_name}, initiating graceful shutdown...")
    _shutdown_signal.set()


def _setup_signal_handlers():
    """Register signal handlers for graceful shutdown."""
    signal.signal(signal.SIGTERM, _handle_shutdown_signal)
    signal.signal(signal.SIGINT, _handle_shutdown_signal)


def setup_logging(quiet: bool = False) -> None:
    """
    Setup logging configuration.

    Args:
        quiet: If True, only show warnings and errors
    """
    level = logging.WARNING if quiet else logging.INFO

    # Custom formatter with shorter module names
    class ShortNameFormatter(logging.Formatter):
        def format(self, record):
            record.name = record.name.replace("perception_pipeline.", "pp.")
            return super().format(record)

    handler = logging.StreamHandler()
    handler.setFormatter(
        ShortNameFormatter(
            fmt="%(asctime)s %(name)s %(levelname)s %(message)s", datefmt="%H:%M:%S"
        )
    )
    logging.root.addHandler(handler)
    logging.root.setLevel(level)


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        description="Perception Pipeline - classification, detection, segmentation and localization",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python -m perception_pipeline                     # Run with ./config.yaml
  python -m perception_pipeline -c site.yaml        # Run with a specific config
  python -m perception_pipeline --max-frames 500    # Stop after 500 frames
  python -m perception_pipeline --validate          # Check config validity

Environment Variables:
  CAMERA_URL       - Override camera URL from config
  PRECISION_LEVEL  - Override engine.precision_level (1-3)
  VISUALIZE        - Override engine.visualize (true/false)
        """,
    )

    parser.add_argument(
        "-c",
        "--config",
        default="config.yaml",
        help="Path to config file (default: config.yaml)",
    )

    parser.add_argument(
        "-q",
        "--quiet",
        action="store_true",
        help="Quiet mode - only show warnings and errors",
    )

    parser.add_argument(
        "--validate",
        action="store_true",
        help="Validate configuration and show derived settings",
    )

    parser.add_argument(
        "--max-frames",
        type=int,
        default=None,
        metavar="N",
        help="Stop after N input frames",
    )

    return parser.parse_args(argv)


def load_config(config_path: str) -> PipelineConfig:
    """
    Load, override and validate configuration.

    Raises:
        SystemExit: If config cannot be loaded or is invalid
    """
    try:
        config = load_config_with_env(load_config_file(config_path))
    except ConfigValidationError as e:
        logger.error(str(e))
        sys.exit(1)

    result = validate_config_full(config)
    if not result.valid:
        print_validation_result(result)
        sys.exit(1)

    for warning in result.warnings:
        logger.warning(warning)
    logger.info("Configuration validated")
    return result.config


def build_output_channels(config: PipelineConfig) -> tuple[OutputChannels, JsonlRecordWriter]:
    """JSONL file for structured records, JPEG files for annotated images."""
    writer = JsonlRecordWriter(config.output.json_dir)
    visual = None
    if config.output.save_annotated_frames:
        visual = AnnotatedFrameWriter(config.output.frames_dir)

    channels = OutputChannels(visual=visual, p1=writer, p2=writer, p3=writer, localize=writer)
    return channels, writer


def print_banner(config: PipelineConfig) -> None:
    """Print system startup banner."""
    engine = config.engine
    route = select_route(engine.use_case_mode)

    print("\n" + "=" * 70)
    print("PERCEPTION PIPELINE")
    print("=" * 70)
    print(f"\nModel: {engine.model_file}")
    print(f"Precision level: {engine.precision_level}")
    print(f"Mode: {engine.use_case_mode.value} ({route.value})")
    print(f"Visualize: {engine.visualize}")
    if route is Route.SINGLE_STREAM:
        print(f"Camera: {config.camera.url}")
    else:
        print(f"Recording: {config.recording.path}")
    print("  Press Ctrl+C to stop early")
    print("=" * 70)
    print()


def run_camera(pipeline: PerceptionPipeline, config: PipelineConfig, max_frames: int | None) -> None:
    """Feed live camera frames to the single-stream route."""
    cap = initialize_camera(config.camera.url)
    try:
        on_image = pipeline.intake_handlers()["image"]
        for count, msg in enumerate(iter_camera_messages(cap, _shutdown_signal), start=1):
            on_image(msg)
            if max_frames is not None and count >= max_frames:
                logger.info(f"Reached --max-frames {max_frames}")
                break
    finally:
        cap.release()


def run_recording(
    pipeline: PerceptionPipeline, config: PipelineConfig, max_frames: int | None
) -> None:
    """Replay a recording into the synchronized route."""
    if not config.recording.path:
        logger.error("Localization mode needs recording.path in the config")
        sys.exit(1)

    source = RecordingSource(config.recording.path)
    source.replay(
        pipeline.intake_handlers(),
        shutdown_event=_shutdown_signal,
        rate_hz=config.recording.rate_hz,
        max_frames=max_frames,
    )


def print_final_status(pipeline: PerceptionPipeline, writer: JsonlRecordWriter) -> None:
    """Print frame counters and output location."""
    stats = pipeline.stats()

    print(f"\n{'=' * 70}")
    print("PIPELINE SHUTDOWN COMPLETE")
    print("=" * 70)
    print(f"  Frames received:  {stats['frames_received']}")
    print(f"  Frames discarded: {stats['frames_discarded']}")
    print(f"  Frames processed: {stats['frames_processed']}")
    print(f"  Average FPS:      {stats['avg_fps']:.1f}")
    print(f"\nRecords written to: {writer.path}")
    print(f"{'=' * 70}\n")


def run_validate(config_path: str) -> None:
    """Run validation mode."""
    try:
        config = load_config_with_env(load_config_file(config_path))
    except ConfigValidationError as e:
        logger.error(str(e))
        sys.exit(1)

    result = validate_config_full(config)
    print_validation_result(result)
    sys.exit(0 if result.valid else 1)


def main(argv: list[str] | None = None) -> None:
    """Main entry point."""
    args = parse_args(argv)
    setup_logging(args.quiet)

    if args.validate:
        run_validate(args.config)
        return

    _setup_signal_handlers()
    config = load_config(args.config)

    channels, writer = build_output_channels(config)
    engine = EngineContainer(config)
    pipeline = PerceptionPipeline.from_config(config, engine, channels)

    print_banner(config)

    exit_code = 0
    try:
        if pipeline.route is Route.SINGLE_STREAM:
            run_camera(pipeline, config, args.max_frames)
        else:
            run_recording(pipeline, config, args.max_frames)
    except KeyboardInterrupt:
        logger.info("Pipeline stopped by user")
    except Exception as e:
        logger.error(f"Fatal error in pipeline: {e}", exc_info=True)
        exit_code = 1
    finally:
        writer.close()
        print_final_status(pipeline, writer)

    sys.exit(exit_code)


if __name__ == "__main__":
    main()
