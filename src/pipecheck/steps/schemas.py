"""
Schema units.

Schemas check the overall shape of a value and establish ``dataset.typed``.
Container schemas (``object_``, ``array``) run a child schema for each entry
on a fresh dataset and merge the child issues with their own path segment
prepended, so callers always see root-to-leaf paths.

Container schemas honour ``abort_early`` by stopping at the first failing
entry. ``abort_pipe_early`` only concerns pipes and is not inspected here.
"""

import math
from abc import abstractmethod
from collections.abc import Mapping
from decimal import Decimal
from typing import Any, Dict, Iterator, List, Optional, Tuple

from pipecheck.pipelines.exceptions import PipelineAssemblyError
from pipecheck.pipelines.fallback import (
    SchemaWithFallback,
    get_fallback,
    get_fallback_async,
)
from pipecheck.pipelines.issues import add_issue
from pipecheck.pipelines.messages import Message
from pipecheck.pipelines.run_config import RunConfig
from pipecheck.pipelines.types import MISSING, Dataset, PathItem
from pipecheck.pipelines.units import BaseSchema

# --------------------------------------------------------------------- #
# Primitive schemas
# --------------------------------------------------------------------- #


class _TypeSchema(BaseSchema):
    def __init__(self, message: Optional[Message] = None):
        self.message = message

    def run(self, dataset: Dataset, config: RunConfig) -> Dataset:
        if self._matches(dataset.value):
            dataset.typed = True
        else:
            add_issue(self, self.label, dataset, config)
        return dataset

    @abstractmethod
    def _matches(self, value: Any) -> bool:
        """Return True when ``value`` has the schema's type."""


class StringSchema(_TypeSchema):
    type = "string"
    expects = "string"

    def _matches(self, value: Any) -> bool:
        return isinstance(value, str)


class NumberSchema(_TypeSchema):
    """Accepts int, float and Decimal; rejects bool and NaN."""

    type = "number"
    expects = "number"

    def _matches(self, value: Any) -> bool:
        if isinstance(value, bool) or not isinstance(value, (int, float, Decimal)):
            return False
        if isinstance(value, Decimal):
            return not value.is_nan()
        return not (isinstance(value, float) and math.isnan(value))


class BooleanSchema(_TypeSchema):
    type = "boolean"
    expects = "boolean"

    def _matches(self, value: Any) -> bool:
        return isinstance(value, bool)


class AnySchema(_TypeSchema):
    type = "any"
    expects = "any"

    def _matches(self, value: Any) -> bool:
        return True


def string(message: Optional[Message] = None) -> StringSchema:
    return StringSchema(message)


def number(message: Optional[Message] = None) -> NumberSchema:
    return NumberSchema(message)


def boolean(message: Optional[Message] = None) -> BooleanSchema:
    return BooleanSchema(message)


def any_() -> AnySchema:
    return AnySchema()


# --------------------------------------------------------------------- #
# Optional / nullable wrappers
# --------------------------------------------------------------------- #


def get_default(
    schema: "_WrapperSchema",
    dataset: Optional[Dataset] = None,
    config: Optional[RunConfig] = None,
) -> Any:
    """Resolve the default of ``schema``, calling it with ``(dataset, config)``."""
    default = schema.default
    if callable(default):
        return default(dataset, config)
    return default


class _WrapperSchema(BaseSchema):
    """Schema accepting one sentinel value in addition to the wrapped schema."""

    accepted: Any = None
    accepted_text = "null"

    def __init__(self, wrapped: BaseSchema, default: Any = MISSING):
        if not isinstance(wrapped, BaseSchema):
            raise PipelineAssemblyError(
                f"{self.type}() expects a schema",
                step_name=getattr(wrapped, "type", type(wrapped).__name__),
            )
        if wrapped.is_async and not self.is_async:
            raise PipelineAssemblyError(
                f"Async schema cannot be wrapped by {self.type}(); "
                f"use {self.type}_async()",
                step_name=wrapped.type,
            )
        self.wrapped = wrapped
        self.default = default
        self.expects = f"({wrapped.expects} | {self.accepted_text})"

    def _substitute(self, dataset: Dataset, config: RunConfig) -> bool:
        """Apply the default to an accepted sentinel; True when the run is done."""
        if dataset.value is not self.accepted:
            return False
        if self.default is not MISSING:
            dataset.value = get_default(self, dataset, config)
        if dataset.value is self.accepted:
            dataset.typed = True
            return True
        return False

    def run(self, dataset: Dataset, config: RunConfig) -> Dataset:
        if self._substitute(dataset, config):
            return dataset
        return self.wrapped.run(dataset, config)


class _WrapperSchemaAsync(_WrapperSchema):
    is_async = True

    async def run(self, dataset: Dataset, config: RunConfig) -> Dataset:  # type: ignore[override]
        if self._substitute(dataset, config):
            return dataset
        if self.wrapped.is_async:
            return await self.wrapped.run(dataset, config)
        return self.wrapped.run(dataset, config)


class OptionalSchema(_WrapperSchema):
    """Accepts MISSING (an absent key) in addition to the wrapped schema."""

    type = "optional"
    accepted = MISSING
    accepted_text = "missing"


class NullableSchema(_WrapperSchema):
    """Accepts None in addition to the wrapped schema."""

    type = "nullable"


class OptionalSchemaAsync(_WrapperSchemaAsync):
    type = "optional"
    accepted = MISSING
    accepted_text = "missing"


class NullableSchemaAsync(_WrapperSchemaAsync):
    type = "nullable"


def optional(schema: BaseSchema, default: Any = MISSING) -> OptionalSchema:
    """
    Allow the value to be missing.

    Inside ``object_`` a missing key is omitted from the output, or set to
    ``default`` when one is given.
    """
    return OptionalSchema(schema, default)


def nullable(schema: BaseSchema, default: Any = MISSING) -> NullableSchema:
    return NullableSchema(schema, default)


def optional_async(schema: BaseSchema, default: Any = MISSING) -> OptionalSchemaAsync:
    return OptionalSchemaAsync(schema, default)


def nullable_async(schema: BaseSchema, default: Any = MISSING) -> NullableSchemaAsync:
    return NullableSchemaAsync(schema, default)


# --------------------------------------------------------------------- #
# Container schemas
# --------------------------------------------------------------------- #

_RUN = "run"
_OMIT = "omit"
_FALLBACK = "fallback"
_MISSING_KEY = "missing_key"


def _optional_root(schema: BaseSchema) -> Optional[_WrapperSchema]:
    while hasattr(schema, "root") and schema is not getattr(schema, "root"):
        schema = schema.root  # type: ignore[attr-defined]
    if isinstance(schema, (OptionalSchema, OptionalSchemaAsync)):
        return schema
    return None


def _entry_action(schema: BaseSchema, input: Mapping, key: Any) -> Tuple[str, Any]:
    if key in input:
        return _RUN, input[key]
    optional_schema = _optional_root(schema)
    if optional_schema is not None:
        if optional_schema.default is not MISSING:
            return _RUN, MISSING
        return _OMIT, None
    if isinstance(schema, SchemaWithFallback):
        return _FALLBACK, None
    return _MISSING_KEY, None


def _merge_child(
    dataset: Dataset, child: Dataset, item: PathItem, config: RunConfig
) -> bool:
    """Merge a child run into ``dataset``; True when the container must stop."""
    if child.issues:
        dataset.extend_issues([issue.with_path_prefix(item) for issue in child.issues])
        if config.abort_early:
            dataset.typed = False
            return True
    if not child.typed:
        dataset.typed = False
    return False


def _check_entries(owner: BaseSchema, schemas: List[BaseSchema]) -> None:
    for schema in schemas:
        if not isinstance(schema, BaseSchema):
            raise PipelineAssemblyError(
                f"{owner.type}() entries must be schemas, got {type(schema).__name__}"
            )
        if schema.is_async and not owner.is_async:
            raise PipelineAssemblyError(
                f"Async schema cannot be used in {owner.type}(); "
                f"use {owner.type}_async()",
                step_name=schema.type,
            )


class ObjectSchema(BaseSchema):
    """
    Schema for dicts with a fixed set of keys.

    Unknown keys are stripped from the output. A missing key whose schema is
    neither optional nor a fallback is reported as a ``key`` issue with an
    object path segment of origin ``key``.
    """

    type = "object"
    expects = "dict"

    def __init__(
        self, entries: Dict[Any, BaseSchema], message: Optional[Message] = None
    ):
        self.entries = dict(entries)
        self.message = message
        _check_entries(self, list(self.entries.values()))

    def _begin(self, dataset: Dataset, config: RunConfig) -> bool:
        if isinstance(dataset.value, Mapping):
            dataset.typed = True
            return True
        add_issue(self, self.label, dataset, config)
        return False

    def _missing_key(
        self, dataset: Dataset, config: RunConfig, input: Mapping, key: Any
    ) -> None:
        add_issue(
            self,
            "key",
            dataset,
            config,
            input=MISSING,
            expected=f'"{key}"',
            path=[
                PathItem(
                    type="object", origin="key", input=input, key=key, value=MISSING
                )
            ],
        )

    def _items(self, input: Mapping) -> Iterator[Tuple[Any, BaseSchema, str, Any]]:
        for key, schema in self.entries.items():
            action, value = _entry_action(schema, input, key)
            yield key, schema, action, value

    def run(self, dataset: Dataset, config: RunConfig) -> Dataset:
        if not self._begin(dataset, config):
            return dataset
        input = dataset.value
        output: Dict[Any, Any] = {}

        for key, schema, action, value in self._items(input):
            if action == _OMIT:
                continue
            if action == _FALLBACK:
                output[key] = get_fallback(schema, None, config)  # type: ignore[arg-type]
                continue
            if action == _MISSING_KEY:
                self._missing_key(dataset, config, input, key)
                if config.abort_early:
                    break
                continue

            child = schema.run(Dataset(value=value), config)
            item = PathItem(
                type="object", origin="value", input=input, key=key, value=value
            )
            if _merge_child(dataset, child, item, config):
                break
            output[key] = child.value

        dataset.value = output
        return dataset


class ObjectSchemaAsync(ObjectSchema):
    """Object schema accepting async entries; entries run one at a time."""

    is_async = True

    async def run(self, dataset: Dataset, config: RunConfig) -> Dataset:  # type: ignore[override]
        if not self._begin(dataset, config):
            return dataset
        input = dataset.value
        output: Dict[Any, Any] = {}

        for key, schema, action, value in self._items(input):
            if action == _OMIT:
                continue
            if action == _FALLBACK:
                output[key] = await get_fallback_async(schema, None, config)  # type: ignore[arg-type]
                continue
            if action == _MISSING_KEY:
                self._missing_key(dataset, config, input, key)
                if config.abort_early:
                    break
                continue

            child = Dataset(value=value)
            if schema.is_async:
                child = await schema.run(child, config)
            else:
                child = schema.run(child, config)
            item = PathItem(
                type="object", origin="value", input=input, key=key, value=value
            )
            if _merge_child(dataset, child, item, config):
                break
            output[key] = child.value

        dataset.value = output
        return dataset


class ArraySchema(BaseSchema):
    """Schema for lists (and tuples) whose items all match one schema."""

    type = "array"
    expects = "list"

    def __init__(self, item: BaseSchema, message: Optional[Message] = None):
        self.item = item
        self.message = message
        _check_entries(self, [item])

    def _begin(self, dataset: Dataset, config: RunConfig) -> bool:
        if isinstance(dataset.value, (list, tuple)):
            dataset.typed = True
            return True
        add_issue(self, self.label, dataset, config)
        return False

    def run(self, dataset: Dataset, config: RunConfig) -> Dataset:
        if not self._begin(dataset, config):
            return dataset
        input = dataset.value
        output: List[Any] = []

        for index, value in enumerate(input):
            child = self.item.run(Dataset(value=value), config)
            item = PathItem(
                type="array", origin="value", input=input, key=index, value=value
            )
            if _merge_child(dataset, child, item, config):
                break
            output.append(child.value)

        dataset.value = output
        return dataset


class ArraySchemaAsync(ArraySchema):
    is_async = True

    async def run(self, dataset: Dataset, config: RunConfig) -> Dataset:  # type: ignore[override]
        if not self._begin(dataset, config):
            return dataset
        input = dataset.value
        output: List[Any] = []

        for index, value in enumerate(input):
            child = Dataset(value=value)
            if self.item.is_async:
                child = await self.item.run(child, config)
            else:
                child = self.item.run(child, config)
            item = PathItem(
                type="array", origin="value", input=input, key=index, value=value
            )
            if _merge_child(dataset, child, item, config):
                break
            output.append(child.value)

        dataset.value = output
        return dataset


def object_(
    entries: Dict[Any, BaseSchema], message: Optional[Message] = None
) -> ObjectSchema:
    """
    Build an object schema.

    Example:
        >>> schema = object_({"name": pipe(string(), min_length(1)), "age": number()})
    """
    return ObjectSchema(entries, message)


def object_async(
    entries: Dict[Any, BaseSchema], message: Optional[Message] = None
) -> ObjectSchemaAsync:
    return ObjectSchemaAsync(entries, message)


def array(item: BaseSchema, message: Optional[Message] = None) -> ArraySchema:
    return ArraySchema(item, message)


def array_async(
    item: BaseSchema, message: Optional[Message] = None
) -> ArraySchemaAsync:
    return ArraySchemaAsync(item, message)
