"""
Pipe builder for declarative configuration.

Steps are resolved to unit factories by import path and called with their
configured arguments. Argument values are resolved recursively, so nested
schemas can be declared inline:

- a mapping with a ``steps`` key builds a nested pipe
- a mapping with an ``import_path`` key builds a single unit
- other mappings and lists are resolved item by item
"""

import importlib
from pathlib import Path
from typing import Any, Callable, Dict, Optional, Union

import yaml
from pydantic import ValidationError

from pipecheck.utils.logging import get_logger

from .core import Pipe, pipe, pipe_async
from .exceptions import PipelineAssemblyError
from .pipeline_config import PipeConfig, StepConfig
from .units import BaseUnit

logger = get_logger(__name__)

STEPS_MODULE = "pipecheck.steps"


def _import_factory(import_path: str) -> Callable[..., Any]:
    """
    Import a unit factory.

    Bare names resolve against ``pipecheck.steps``; dotted paths are split
    into module and attribute.

    Raises:
        PipelineAssemblyError: If the module or attribute cannot be imported
    """
    if "." in import_path:
        module_path, attr = import_path.rsplit(".", 1)
    else:
        module_path, attr = STEPS_MODULE, import_path

    try:
        module = importlib.import_module(module_path)
    except ImportError as e:
        raise PipelineAssemblyError(f"Failed to import '{import_path}': {e}") from e

    target = getattr(module, attr, None)
    if target is None or not callable(target):
        raise PipelineAssemblyError(
            f"Could not import unit factory from '{import_path}'"
        )
    return target


def _resolve_value(value: Any, config_path: Optional[str]) -> Any:
    if isinstance(value, dict):
        if "steps" in value:
            return _build(_validate_config(value, config_path), config_path)
        if "import_path" in value:
            try:
                step_config = StepConfig.model_validate(value)
            except ValidationError as e:
                raise PipelineAssemblyError(
                    f"Invalid step configuration: {e}", config_path=config_path
                ) from e
            return _create_unit(step_config, config_path)
        return {key: _resolve_value(item, config_path) for key, item in value.items()}
    if isinstance(value, list):
        return [_resolve_value(item, config_path) for item in value]
    return value


def _create_unit(step_config: StepConfig, config_path: Optional[str]) -> BaseUnit:
    """
    Create a unit instance from configuration.

    Raises:
        PipelineAssemblyError: If the factory cannot be imported, rejects its
            arguments, or returns something that is not a unit
    """
    factory = _import_factory(step_config.import_path)
    args = [_resolve_value(arg, config_path) for arg in step_config.args]
    options = {
        key: _resolve_value(value, config_path)
        for key, value in step_config.options.items()
    }

    try:
        unit = factory(*args, **options)
    except PipelineAssemblyError:
        raise
    except Exception as e:
        raise PipelineAssemblyError(
            f"Failed to create step: {e}",
            config_path=config_path,
            step_name=step_config.name or step_config.factory_name,
        ) from e

    if not isinstance(unit, BaseUnit):
        raise PipelineAssemblyError(
            f"Factory '{step_config.import_path}' did not return a unit",
            config_path=config_path,
            step_name=step_config.name or step_config.factory_name,
        )

    logger.debug(
        "builder.step_created",
        step_name=step_config.name or step_config.factory_name,
        import_path=step_config.import_path,
        unit_type=unit.type,
        kind=unit.kind.value,
    )
    return unit


def _validate_config(
    config: Union[Dict[str, Any], PipeConfig], config_path: Optional[str]
) -> PipeConfig:
    if isinstance(config, PipeConfig):
        return config
    try:
        return PipeConfig.model_validate(config)
    except ValidationError as e:
        raise PipelineAssemblyError(
            f"Invalid pipe configuration: {e}", config_path=config_path
        ) from e


def _build(pipe_config: PipeConfig, config_path: Optional[str]) -> Pipe:
    units = [_create_unit(step, config_path) for step in pipe_config.steps]
    factory = pipe_async if pipe_config.is_async else pipe

    try:
        built = factory(*units)
    except PipelineAssemblyError as e:
        raise PipelineAssemblyError(
            f"Pipe '{pipe_config.name}' cannot be assembled: {e}",
            config_path=config_path,
        ) from e

    logger.debug(
        "builder.pipe_built",
        pipe=pipe_config.name,
        steps=len(units),
        is_async=pipe_config.is_async,
    )
    return built


def build_pipe(
    config: Union[Dict[str, Any], PipeConfig],
    config_path: Optional[str] = None,
) -> Pipe:
    """
    Build a pipe from declarative configuration.

    Args:
        config: Pipe configuration as dict or PipeConfig object
        config_path: Source of the configuration, used in error messages

    Returns:
        Assembled sync or async pipe

    Raises:
        PipelineAssemblyError: If configuration is invalid or assembly fails

    Example:
        >>> config = {
        ...     "name": "username",
        ...     "steps": [
        ...         {"import_path": "string"},
        ...         {"import_path": "trim"},
        ...         {"import_path": "min_length", "args": [3]},
        ...     ],
        ... }
        >>> schema = build_pipe(config)
    """
    return _build(_validate_config(config, config_path), config_path)


def load_pipe_config(path: Union[str, Path]) -> PipeConfig:
    """
    Read a pipe configuration from a YAML file.

    Raises:
        PipelineAssemblyError: If the file is missing or not valid YAML
    """
    config_path = Path(path)
    if not config_path.is_file():
        raise PipelineAssemblyError(
            "Pipe configuration not found", config_path=str(config_path)
        )

    try:
        with open(config_path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise PipelineAssemblyError(
            f"Invalid YAML in pipe configuration: {e}", config_path=str(config_path)
        ) from e

    if not isinstance(data, dict):
        raise PipelineAssemblyError(
            "Pipe configuration must be a mapping", config_path=str(config_path)
        )
    return _validate_config(data, str(config_path))


def build_pipe_from_file(path: Union[str, Path]) -> Pipe:
    """Load a YAML pipe configuration and build it."""
    return _build(load_pipe_config(path), str(path))
