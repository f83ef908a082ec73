"""
Unit contract shared by every schema, validation, transformation and
metadata step.

Every unit exposes ``run(dataset, config) -> Dataset``. Async units set
``is_async = True`` and implement ``run`` as a coroutine function with the
same signature. The engine dispatches on ``kind``:

- schema units establish (or revoke) ``dataset.typed``
- validation units check a constraint on an already typed value and skip
  untyped datasets
- transformation units map the value to a new value and never raise issues
- metadata units carry documentation only and are skipped

Units are configured once at construction and hold no per-run state, so the
same instance can be shared by concurrent runs.
"""

from abc import ABC, abstractmethod
from typing import Any, ClassVar, Dict, Optional

from .issues import add_issue
from .messages import Message
from .run_config import RunConfig
from .types import Dataset, UnitKind


class BaseUnit(ABC):
    """Base class for all pipeline units."""

    kind: ClassVar[UnitKind]
    type: str = "unit"
    expects: Optional[str] = None
    message: Optional[Message] = None
    requirement: Any = None
    is_async: bool = False

    @property
    def reference(self) -> type:
        """Identity of the unit implementation, used for debugging."""
        return type(self)

    @property
    def name(self) -> str:
        """Return human-friendly unit name used for logging."""
        return self.type

    @abstractmethod
    def run(self, dataset: Dataset, config: RunConfig) -> Dataset:
        """Process the dataset and return it."""

    def __repr__(self) -> str:
        return f"<{type(self).__name__} type={self.type!r} kind={self.kind.value}>"


class BaseSchema(BaseUnit):
    """Unit that checks the overall shape of a value and sets ``typed``."""

    kind = UnitKind.SCHEMA
    label: ClassVar[str] = "type"


class BaseValidation(BaseUnit):
    """
    Unit that checks a constraint on a typed value.

    Subclasses implement ``_check`` as a pure predicate over the value and the
    configuration captured at construction. ``_issue_details`` can override
    fields of the raised issue (typically ``received``).
    """

    kind = UnitKind.VALIDATION
    label: ClassVar[str] = "input"

    def run(self, dataset: Dataset, config: RunConfig) -> Dataset:
        if dataset.typed and not self._check(dataset.value):
            self._fail(dataset, config)
        return dataset

    @abstractmethod
    def _check(self, value: Any) -> bool:
        """Return True when ``value`` satisfies the requirement."""

    def _issue_details(self, value: Any) -> Dict[str, Any]:
        return {}

    def _fail(self, dataset: Dataset, config: RunConfig) -> None:
        add_issue(
            self, self.label, dataset, config, **self._issue_details(dataset.value)
        )


class BaseValidationAsync(BaseValidation):
    """Validation whose predicate is a coroutine function."""

    is_async = True

    async def run(self, dataset: Dataset, config: RunConfig) -> Dataset:  # type: ignore[override]
        if dataset.typed and not await self._check_async(dataset.value):
            self._fail(dataset, config)
        return dataset

    def _check(self, value: Any) -> bool:
        raise TypeError(f"{type(self).__name__} only supports async execution")

    @abstractmethod
    async def _check_async(self, value: Any) -> bool:
        """Return True when ``value`` satisfies the requirement."""


class BaseTransformation(BaseUnit):
    """
    Unit that deterministically maps the value to a new value.

    Transformations are total functions over validated input: they never raise
    issues, and an exception inside ``_transform`` is a programming error.
    """

    kind = UnitKind.TRANSFORMATION

    def run(self, dataset: Dataset, config: RunConfig) -> Dataset:
        dataset.value = self._transform(dataset.value)
        return dataset

    @abstractmethod
    def _transform(self, value: Any) -> Any:
        """Return the transformed value."""


class BaseTransformationAsync(BaseTransformation):
    """Transformation implemented as a coroutine function."""

    is_async = True

    async def run(self, dataset: Dataset, config: RunConfig) -> Dataset:  # type: ignore[override]
        dataset.value = await self._transform_async(dataset.value)
        return dataset

    def _transform(self, value: Any) -> Any:
        raise TypeError(f"{type(self).__name__} only supports async execution")

    @abstractmethod
    async def _transform_async(self, value: Any) -> Any:
        """Return the transformed value."""


class BaseMetadata(BaseUnit):
    """Unit carrying documentation only; the engine skips it."""

    kind = UnitKind.METADATA

    def run(self, dataset: Dataset, config: RunConfig) -> Dataset:
        return dataset
