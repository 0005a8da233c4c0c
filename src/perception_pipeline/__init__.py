"""
Perception Pipeline

Camera-driven perception built on YOLO. Each incoming image, or each
synchronized image + depth + calibration tuple, runs through one inference
path chosen at startup and produces exactly one published record.

Package structure:
  models/    - Messages, raw inference results and output records
  adapters/  - Image message <-> numpy frame conversion
  core/      - Session, synchronizer, dispatcher, formatter, pipeline
  engine/    - Inference backends (ultralytics) and depth geometry
  sources/   - Camera and recording intake
  output/    - Output channels (JSONL, annotated frames, callbacks)
  config/    - Configuration loading and validation
  utils/     - Constants
"""

__version__ = "1.0.0"

from .config import (
    ConfigValidationError,
    PipelineConfig,
    ValidationResult,
    validate_config_full,
)
from .core import (
    FrameDimensionChangedError,
    PerceptionPipeline,
    Route,
    UseCaseMode,
)
from .engine import EngineContainer
from .output import OutputChannels

__all__ = [
    # Config
    "ConfigValidationError",
    # Engine
    "EngineContainer",
    # Core
    "FrameDimensionChangedError",
    "OutputChannels",
    "PerceptionPipeline",
    "PipelineConfig",
    "Route",
    "UseCaseMode",
    "ValidationResult",
    "validate_config_full",
]
