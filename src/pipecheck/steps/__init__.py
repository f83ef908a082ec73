"""
Unit catalog for pipecheck pipes.

Available Steps:
    Schemas:
    - string, number, boolean, any_: Primitive type checks
    - object_, array: Containers with per-entry schemas and issue paths
    - optional, nullable: Accept a missing value or None, with optional default
    - object_async, array_async, optional_async, nullable_async: Async variants

    Validations:
    - min_length, max_length, length: Length comparisons
    - min_value, max_value: Value comparisons
    - regex, decimal, base64url, jwt: String formats
    - min_words, max_words, words: Locale-aware word counts
    - check, check_async: Custom predicates

    Transformations:
    - trim, to_lower_case, to_upper_case: String normalisation
    - to_snake_case: Rename dict keys
    - transform, transform_async: Custom functions

    Metadata:
    - description, title

Example Usage:
    >>> from pipecheck import execute, pipe
    >>> from pipecheck.steps import object_, string, trim, min_length, to_snake_case
    >>>
    >>> schema = pipe(
    ...     object_({"firstName": pipe(string(), trim(), min_length(1))}),
    ...     to_snake_case(),
    ... )
    >>> execute(schema, {"firstName": " Ada "}).output
    {'first_name': 'Ada'}
"""

from .metadata import description, title
from .schemas import (
    any_,
    array,
    array_async,
    boolean,
    nullable,
    nullable_async,
    number,
    object_,
    object_async,
    optional,
    optional_async,
    string,
)
from .transformations import (
    snake_case,
    to_lower_case,
    to_snake_case,
    to_upper_case,
    transform,
    transform_async,
    trim,
)
from .validations import (
    base64url,
    check,
    check_async,
    decimal,
    jwt,
    length,
    max_length,
    max_value,
    max_words,
    min_length,
    min_value,
    min_words,
    regex,
    words,
)

__all__ = [
    # Schemas
    "any_",
    "array",
    "array_async",
    "boolean",
    "nullable",
    "nullable_async",
    "number",
    "object_",
    "object_async",
    "optional",
    "optional_async",
    "string",
    # Validations
    "base64url",
    "check",
    "check_async",
    "decimal",
    "jwt",
    "length",
    "max_length",
    "max_value",
    "max_words",
    "min_length",
    "min_value",
    "min_words",
    "regex",
    "words",
    # Transformations
    "snake_case",
    "to_lower_case",
    "to_snake_case",
    "to_upper_case",
    "transform",
    "transform_async",
    "trim",
    # Metadata
    "description",
    "title",
]
