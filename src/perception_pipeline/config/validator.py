"""
Configuration Validator - Validates config syntax and semantic correctness.

Provides comprehensive validation with detailed error messages.
"""

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from ..core.dispatcher import MODEL_TASKS, InferencePath, path_for_precision
from ..core.routes import Route, UseCaseMode, select_route
from .schemas import PipelineConfig, validate_config_pydantic

logger = logging.getLogger(__name__)


class ConfigValidationError(Exception):
    """Raised when config validation fails."""

    pass


@dataclass
class ValidationResult:
    """Result of config validation."""

    valid: bool
    errors: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)
    derived: dict[str, Any] = field(default_factory=dict)
    config: PipelineConfig | None = None


def validate_config_full(config: dict) -> ValidationResult:
    """
    Comprehensive config validation with detailed error messages.

    Args:
        config: Configuration dictionary to validate

    Returns:
        ValidationResult with errors, warnings, derived settings and, when
        valid, the parsed PipelineConfig.
    """
    result = ValidationResult(valid=True)

    if not isinstance(config, dict):
        result.valid = False
        result.errors.append("Configuration must be a mapping")
        return result

    try:
        parsed = validate_config_pydantic(config)
    except ValidationError as e:
        result.valid = False
        result.errors.extend(_format_pydantic_errors(e))
        return result

    result.config = parsed
    _check_model_files(parsed, result)
    _check_mode_combinations(parsed, result)
    _check_model_tasks(parsed, result)
    _derive_settings(parsed, result)

    return result


def print_validation_result(result: ValidationResult) -> None:
    """Print validation errors, warnings and derived settings."""
    print("\n" + "=" * 70)
    print("CONFIGURATION VALIDATION")
    print("=" * 70)

    if result.errors:
        print(f"\nErrors ({len(result.errors)}):")
        for error in result.errors:
            print(f"  - {error}")

    if result.warnings:
        print(f"\nWarnings ({len(result.warnings)}):")
        for warning in result.warnings:
            print(f"  - {warning}")

    if result.derived:
        print("\nDerived:")
        for key, value in result.derived.items():
            print(f"  {key}: {value}")

    print(f"\nResult: {'VALID' if result.valid else 'INVALID'}")
    print("=" * 70 + "\n")


def _format_pydantic_errors(error: ValidationError) -> list[str]:
    """Flatten pydantic errors into 'section.field: message' strings."""
    messages = []
    for item in error.errors():
        location = ".".join(str(part) for part in item["loc"]) or "config"
        messages.append(f"{location}: {item['msg']}")
    return messages


def _check_model_files(config: PipelineConfig, result: ValidationResult) -> None:
    """Warn about model files that are not on disk."""
    engine = config.engine
    files = [engine.model_file]
    if engine.localization_model_file:
        files.append(engine.localization_model_file)

    for model_file in files:
        if not Path(model_file).exists():
            result.warnings.append(
                f"Model file not found: {model_file} (will be downloaded if valid)"
            )


def _check_mode_combinations(config: PipelineConfig, result: ValidationResult) -> None:
    """Warn about settings that are accepted but have no effect."""
    engine = config.engine
    localization = engine.use_case_mode is UseCaseMode.LOCALIZATION

    if engine.precision_level == 1 and engine.visualize and not localization:
        result.warnings.append(
            "engine.visualize has no effect at precision level 1 "
            "(classification records are published instead)"
        )

    if localization:
        if engine.precision_level != 3:
            result.warnings.append(
                f"engine.precision_level {engine.precision_level} is ignored in "
                "localization mode (localization uses a segmentation model)"
            )
        if not config.recording.path:
            result.warnings.append(
                "recording.path not set - localization input must be fed by an external source"
            )


# Ultralytics checkpoint naming: yolo11n-seg.pt, yolov8s-cls.pt, yolo11n.pt
MODEL_FILE_SUFFIXES = {"-cls": "classify", "-seg": "segment", "-pose": "pose", "-obb": "obb"}


def model_task_from_filename(model_file: str) -> str | None:
    """Guess a checkpoint's task from its file name, None if unknown."""
    stem = Path(model_file).stem.lower()
    for suffix, task in MODEL_FILE_SUFFIXES.items():
        if stem.endswith(suffix):
            return task
    return "detect" if stem.startswith("yolo") else None


def _check_model_tasks(config: PipelineConfig, result: ValidationResult) -> None:
    """Warn when the model file name suggests the wrong task for the path."""
    engine = config.engine
    if select_route(engine.use_case_mode) is Route.SYNCHRONIZED:
        path = InferencePath.LOCALIZATION
        model_file = engine.localization_model_file or engine.model_file
    else:
        path = path_for_precision(engine.precision_level)
        model_file = engine.model_file

    task = model_task_from_filename(model_file)
    if task is not None and task not in MODEL_TASKS[path]:
        result.warnings.append(
            f"Model {model_file} looks like a '{task}' model; the {path.value} path "
            f"needs a {' or '.join(MODEL_TASKS[path])} model"
        )


def _derive_settings(config: PipelineConfig, result: ValidationResult) -> None:
    """Record the route and output channel this config activates."""
    engine = config.engine
    route = select_route(engine.use_case_mode)

    if engine.visualize and not (engine.precision_level == 1 and route is Route.SINGLE_STREAM):
        channel = "visual"
    elif route is Route.SYNCHRONIZED:
        channel = "localize"
    else:
        channel = f"p{engine.precision_level}"

    result.derived["route"] = route.value
    result.derived["output_channel"] = channel
    if route is Route.SYNCHRONIZED:
        result.derived["sync_tolerance_seconds"] = config.synchronization.tolerance_seconds
        result.derived["sync_queue_size"] = config.synchronization.queue_size
