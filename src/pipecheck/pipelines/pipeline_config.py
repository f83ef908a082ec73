"""
Configuration models for declarative pipes.

A pipe can be described in YAML or JSON instead of code. Each step names a
unit factory by import path (or by bare name for factories exported from
``pipecheck.steps``) together with its positional and keyword arguments.
"""

import re
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

_NAME_PATTERN = re.compile(r"^[a-zA-Z0-9_-]+$")
_IMPORT_PATH_PATTERN = re.compile(r"^[a-zA-Z_][a-zA-Z0-9_.]*[a-zA-Z0-9_]$")


class StepConfig(BaseModel):
    """
    Configuration for a single unit of a pipe.

    Args:
        name: Identifier of this step within the pipe; PipeConfig assigns
            the factory name to unnamed steps
        import_path: Full import path of a unit factory (e.g.
            "pipecheck.steps.min_length") or a bare name exported by
            ``pipecheck.steps`` (e.g. "min_length")
        args: Positional arguments passed to the factory
        options: Keyword arguments passed to the factory
    """

    name: Optional[str] = Field(default=None, description="Step name")
    import_path: str = Field(..., description="Import path of the unit factory")
    args: List[Any] = Field(default_factory=list, description="Positional arguments")
    options: Dict[str, Any] = Field(
        default_factory=dict, description="Keyword arguments"
    )

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: Optional[str]) -> Optional[str]:
        """Validate step name is suitable for identification."""
        if v is None:
            return v
        if not v.strip():
            raise ValueError("Step name cannot be empty")
        if not _NAME_PATTERN.match(v.strip()):
            raise ValueError(
                "Step name must contain only alphanumeric characters, "
                "underscores, and hyphens"
            )
        return v.strip()

    @field_validator("import_path")
    @classmethod
    def validate_import_path(cls, v: str) -> str:
        """Validate import path format."""
        if not v or not v.strip():
            raise ValueError("Import path cannot be empty")
        if not _IMPORT_PATH_PATTERN.match(v.strip()):
            raise ValueError("Import path must be a valid Python module/attribute path")
        return v.strip()

    @property
    def factory_name(self) -> str:
        return self.import_path.rsplit(".", 1)[-1]


class PipeConfig(BaseModel):
    """
    Configuration for a whole pipe.

    Args:
        name: Human-readable pipe identifier
        description: Optional free text
        steps: Units in execution order; the first must build a schema
        is_async: Build with ``pipe_async`` (YAML key ``async``)
    """

    model_config = ConfigDict(populate_by_name=True)

    name: str = Field(default="pipe", description="Pipe name")
    description: Optional[str] = Field(default=None)
    steps: List[StepConfig] = Field(
        ..., min_length=1, description="Pipe steps in execution order"
    )
    is_async: bool = Field(default=False, alias="async")

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str) -> str:
        if not v or not v.strip():
            raise ValueError("Pipe name cannot be empty")
        return v.strip()

    @model_validator(mode="after")
    def assign_step_names(self) -> "PipeConfig":
        """
        Reject duplicate explicit names and name the remaining steps.

        Unnamed steps take their factory name; repeated factories are
        numbered ("regex", "regex_2", ...).
        """
        taken = set()
        for step in self.steps:
            if step.name is None:
                continue
            if step.name in taken:
                raise ValueError(f"Duplicate step name '{step.name}'")
            taken.add(step.name)

        for step in self.steps:
            if step.name is not None:
                continue
            name = step.factory_name
            counter = 1
            while name in taken:
                counter += 1
                name = f"{step.factory_name}_{counter}"
            step.name = name
            taken.add(name)
        return self
