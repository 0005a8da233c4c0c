"""
Configuration loading and validation.

- load_config_file: Find and read YAML (pointer files supported)
- load_config_with_env: Apply environment variable overrides
- validate_config_full: Comprehensive validation with errors/warnings

Pydantic schemas available for type-safe validation:
- PipelineConfig: Complete configuration schema
- validate_config_pydantic: Validate and parse config to Pydantic model
"""

from .loader import find_config_file, load_config_file, load_config_with_env
from .schemas import (
    CameraConfig,
    DepthConfig,
    EngineConfig,
    OutputConfig,
    PipelineConfig,
    RecordingConfig,
    SynchronizationConfig,
    validate_config_pydantic,
)
from .validator import (
    ConfigValidationError,
    ValidationResult,
    print_validation_result,
    validate_config_full,
)

__all__ = [
    "CameraConfig",
    # Exception
    "ConfigValidationError",
    "DepthConfig",
    "EngineConfig",
    "OutputConfig",
    # Pydantic validation
    "PipelineConfig",
    "RecordingConfig",
    "SynchronizationConfig",
    "ValidationResult",
    # Loading
    "find_config_file",
    "load_config_file",
    "load_config_with_env",
    # Display
    "print_validation_result",
    # Validation
    "validate_config_full",
    "validate_config_pydantic",
]
