"""
Transformation units.

Transformations map an already validated value to a new value. They never
raise issues; an exception inside a transformation is reported by the engine
as a TransformationError.
"""

from typing import Any, Awaitable, Callable, Dict, Optional, Sequence

from pipecheck.pipelines.units import BaseTransformation, BaseTransformationAsync


def snake_case(text: str) -> str:
    """
    Convert a camelCase or PascalCase string to snake_case.

    Every upper case character after the first one is lowered and prefixed
    with an underscore. The first character and all other characters are
    kept as they are.

    Examples:
        >>> snake_case("fooBar")
        'foo_bar'
        >>> snake_case("FooBar")
        'Foo_bar'
        >>> snake_case("userID")
        'user_i_d'
    """
    chars = []
    for ch in text:
        lower = ch.lower()
        if chars and ch == ch.upper() and ch != lower:
            chars.append(f"_{lower}")
        else:
            chars.append(ch)
    return "".join(chars)


class TrimTransformation(BaseTransformation):
    type = "trim"

    def _transform(self, value: Any) -> Any:
        return value.strip()


class ToLowerCaseTransformation(BaseTransformation):
    type = "to_lower_case"

    def _transform(self, value: Any) -> Any:
        return value.lower()


class ToUpperCaseTransformation(BaseTransformation):
    type = "to_upper_case"

    def _transform(self, value: Any) -> Any:
        return value.upper()


class ToSnakeCaseTransformation(BaseTransformation):
    """
    Rename dict keys to snake_case.

    When the renamed key already exists in the input, the existing entry is
    kept and the original key is dropped. Selected keys that are absent from
    the input are ignored, as are non-string keys.
    """

    type = "to_snake_case"

    def __init__(self, selected_keys: Optional[Sequence[str]] = None):
        self.selected_keys = tuple(selected_keys) if selected_keys is not None else None
        self.requirement = self.selected_keys

    def _transform(self, value: Any) -> Any:
        output: Dict[Any, Any] = dict(value)
        keys = self.selected_keys if self.selected_keys is not None else tuple(value)
        for key in keys:
            if not isinstance(key, str) or key not in value:
                continue
            renamed = snake_case(key)
            if renamed == key:
                continue
            if renamed not in output:
                output[renamed] = output[key]
            del output[key]
        return output


class CustomTransformation(BaseTransformation):
    type = "transform"

    def __init__(self, operation: Callable[[Any], Any]):
        self.requirement = operation

    def _transform(self, value: Any) -> Any:
        return self.requirement(value)


class CustomTransformationAsync(BaseTransformationAsync):
    type = "transform"

    def __init__(self, operation: Callable[[Any], Awaitable[Any]]):
        self.requirement = operation

    async def _transform_async(self, value: Any) -> Any:
        return await self.requirement(value)


def trim() -> TrimTransformation:
    return TrimTransformation()


def to_lower_case() -> ToLowerCaseTransformation:
    return ToLowerCaseTransformation()


def to_upper_case() -> ToUpperCaseTransformation:
    return ToUpperCaseTransformation()


def to_snake_case(
    selected_keys: Optional[Sequence[str]] = None,
) -> ToSnakeCaseTransformation:
    """
    Rename the keys of a dict to snake_case.

    Args:
        selected_keys: Only rename these keys; all keys when omitted

    Example:
        >>> schema = pipe(object_({"fooBar": string()}), to_snake_case())
        >>> execute(schema, {"fooBar": "x"}).output
        {'foo_bar': 'x'}
    """
    return ToSnakeCaseTransformation(selected_keys)


def transform(operation: Callable[[Any], Any]) -> CustomTransformation:
    """Apply a custom total function to the value."""
    return CustomTransformation(operation)


def transform_async(
    operation: Callable[[Any], Awaitable[Any]],
) -> CustomTransformationAsync:
    return CustomTransformationAsync(operation)
