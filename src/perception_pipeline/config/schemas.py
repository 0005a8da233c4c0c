"""
Pydantic schemas for configuration validation.

Provides type-safe, declarative validation with clear error messages.
"""

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from ..core.routes import UseCaseMode
from ..utils.constants import (
    DEFAULT_DEPTH_SCALE,
    DEFAULT_FRAMES_DIR,
    DEFAULT_JSON_DIR,
    DEFAULT_MAX_DEPTH_M,
    DEFAULT_MIN_DEPTH_M,
    DEFAULT_SYNC_QUEUE_SIZE,
    DEFAULT_SYNC_TOLERANCE,
    DEFAULT_TOP_K,
)


class StrictModel(BaseModel):
    """Base model that rejects unknown fields."""

    model_config = ConfigDict(extra="forbid")


class EngineConfig(StrictModel):
    """Inference engine and session settings."""

    backend: str = Field(default="ultralytics", description="Registered engine backend")
    precision_level: Literal[1, 2, 3] = Field(
        ..., description="1 classification, 2 detection, 3 detection + masks"
    )
    visualize: bool = Field(default=False, description="Publish annotated images only")
    use_case_mode: UseCaseMode = UseCaseMode.DEFAULT
    model_file: str = Field(..., min_length=1, description="Model weights for the precision level")
    localization_model_file: str | None = Field(
        default=None, description="Segmentation weights for localization (defaults to model_file)"
    )
    confidence_threshold: float = Field(default=0.25, ge=0.0, le=1.0)
    top_k: int = Field(default=DEFAULT_TOP_K, ge=1, description="Labels kept by classification")
    device: str | None = Field(default=None, description="Torch device; auto-detected if unset")

    @field_validator("use_case_mode", mode="before")
    @classmethod
    def normalize_use_case_mode(cls, v):
        return v.lower() if isinstance(v, str) else v


class SynchronizationConfig(StrictModel):
    """Approximate-time synchronization of image, depth and calibration."""

    tolerance_seconds: float = Field(default=DEFAULT_SYNC_TOLERANCE, gt=0)
    queue_size: int = Field(default=DEFAULT_SYNC_QUEUE_SIZE, ge=1)


class DepthConfig(StrictModel):
    """Depth image interpretation."""

    scale: float = Field(default=DEFAULT_DEPTH_SCALE, gt=0, description="Metres per 16UC1 unit")
    min_m: float = Field(default=DEFAULT_MIN_DEPTH_M, ge=0)
    max_m: float = Field(default=DEFAULT_MAX_DEPTH_M, gt=0)

    @model_validator(mode="after")
    def validate_range(self):
        if self.max_m <= self.min_m:
            raise ValueError("max_m must be > min_m")
        return self


class CameraConfig(StrictModel):
    """Camera connection for the single-stream route."""

    url: str | int = Field(default=0, description="Camera URL, device path or index")


class RecordingConfig(StrictModel):
    """Recorded image/depth/calibration for the synchronized route."""

    path: str | None = None
    rate_hz: float | None = Field(default=None, gt=0, description="Replay rate; as fast as possible if unset")


class OutputConfig(StrictModel):
    """Where published records go."""

    json_dir: str = DEFAULT_JSON_DIR
    frames_dir: str = DEFAULT_FRAMES_DIR
    save_annotated_frames: bool = True


class PipelineConfig(StrictModel):
    """Complete configuration schema."""

    engine: EngineConfig
    synchronization: SynchronizationConfig = Field(default_factory=SynchronizationConfig)
    depth: DepthConfig = Field(default_factory=DepthConfig)
    camera: CameraConfig = Field(default_factory=CameraConfig)
    recording: RecordingConfig = Field(default_factory=RecordingConfig)
    output: OutputConfig = Field(default_factory=OutputConfig)


def validate_config_pydantic(config: dict) -> PipelineConfig:
    """
    Validate config dict and parse into a PipelineConfig.

    Raises:
        pydantic.ValidationError: If the config does not match the schema
    """
    return PipelineConfig.model_validate(config)
