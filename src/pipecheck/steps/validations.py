"""
Validation units.

Validations check one constraint on an already typed value and are skipped
for untyped datasets. Each unit is configured once at construction; the
failing value is described in the issue's ``received`` field.
"""

import base64
import binascii
import json
import re
from typing import Any, Awaitable, Callable, Dict, Optional, Pattern, Union

from pipecheck.pipelines.issues import stringify
from pipecheck.pipelines.messages import Message
from pipecheck.pipelines.units import BaseValidation, BaseValidationAsync
from pipecheck.utils.segmenter import get_word_count

BASE64URL_REGEX = re.compile(
    r"(?:[\w-]{4})*(?:[\w-]{2}(?:==|%3D%3D)?|[\w-]{3}(?:=|%3D)?)?",
    re.IGNORECASE | re.ASCII,
)
DECIMAL_REGEX = re.compile(r"[+-]?(?:\d*\.)?\d+", re.ASCII)
POSSIBLE_JWT_REGEX = re.compile(r"(?:[\w-]+\.){2}[\w-]+", re.ASCII)


# --------------------------------------------------------------------- #
# Length and value comparisons
# --------------------------------------------------------------------- #


class _LengthValidation(BaseValidation):
    label = "length"
    operator = ""

    def __init__(self, requirement: int, message: Optional[Message] = None):
        self.requirement = requirement
        self.message = message
        self.expects = f"{self.operator}{requirement}"

    def _issue_details(self, value: Any) -> Dict[str, Any]:
        return {"received": str(len(value))}


class MinLengthValidation(_LengthValidation):
    type = "min_length"
    operator = ">="

    def _check(self, value: Any) -> bool:
        return len(value) >= self.requirement


class MaxLengthValidation(_LengthValidation):
    type = "max_length"
    operator = "<="

    def _check(self, value: Any) -> bool:
        return len(value) <= self.requirement


class LengthValidation(_LengthValidation):
    type = "length"

    def _check(self, value: Any) -> bool:
        return len(value) == self.requirement


class _ValueValidation(BaseValidation):
    label = "value"
    operator = ""

    def __init__(self, requirement: Any, message: Optional[Message] = None):
        self.requirement = requirement
        self.message = message
        self.expects = f"{self.operator}{stringify(requirement)}"


class MinValueValidation(_ValueValidation):
    type = "min_value"
    operator = ">="

    def _check(self, value: Any) -> bool:
        return value >= self.requirement


class MaxValueValidation(_ValueValidation):
    type = "max_value"
    operator = "<="

    def _check(self, value: Any) -> bool:
        return value <= self.requirement


def min_length(
    requirement: int, message: Optional[Message] = None
) -> MinLengthValidation:
    """
    Require ``len(value) >= requirement``.

    Works for strings, lists and dicts. The issue reports the actual length
    as ``received``.
    """
    return MinLengthValidation(requirement, message)


def max_length(
    requirement: int, message: Optional[Message] = None
) -> MaxLengthValidation:
    return MaxLengthValidation(requirement, message)


def length(requirement: int, message: Optional[Message] = None) -> LengthValidation:
    return LengthValidation(requirement, message)


def min_value(
    requirement: Any, message: Optional[Message] = None
) -> MinValueValidation:
    return MinValueValidation(requirement, message)


def max_value(
    requirement: Any, message: Optional[Message] = None
) -> MaxValueValidation:
    return MaxValueValidation(requirement, message)


# --------------------------------------------------------------------- #
# String formats
# --------------------------------------------------------------------- #


class RegexValidation(BaseValidation):
    """Requires the pattern to match somewhere in the value (``re.search``)."""

    type = "regex"
    label = "format"

    def __init__(
        self, pattern: Union[str, Pattern[str]], message: Optional[Message] = None
    ):
        self.requirement = re.compile(pattern) if isinstance(pattern, str) else pattern
        self.message = message
        self.expects = f"/{self.requirement.pattern}/"

    def _check(self, value: Any) -> bool:
        return self.requirement.search(value) is not None


class DecimalValidation(BaseValidation):
    """Requires a decimal number literal such as ``"-1.5"``, ``".5"`` or ``"42"``."""

    type = "decimal"
    label = "decimal"
    requirement = DECIMAL_REGEX

    def __init__(self, message: Optional[Message] = None):
        self.message = message

    def _check(self, value: Any) -> bool:
        return self.requirement.fullmatch(value) is not None


class Base64UrlValidation(BaseValidation):
    """Requires URL-safe Base64; padding may be ``=`` or percent-encoded ``%3D``."""

    type = "base64url"
    label = "Base64URL"
    requirement = BASE64URL_REGEX

    def __init__(self, message: Optional[Message] = None):
        self.message = message

    def _check(self, value: Any) -> bool:
        return self.requirement.fullmatch(value) is not None


def _decode_base64url(segment: str) -> bytes:
    padded = segment + "=" * (-len(segment) % 4)
    return base64.urlsafe_b64decode(padded)


class JwtValidation(BaseValidation):
    """
    Requires a JSON Web Token shape.

    The value must consist of three dot separated Base64URL segments and the
    first segment must decode to a JSON object with ``typ == "JWT"``. When an
    algorithm is configured, the header's ``alg`` must match it. Signatures
    are not verified.
    """

    type = "jwt"
    label = "jwt"
    requirement = POSSIBLE_JWT_REGEX

    def __init__(
        self, algorithm: Optional[str] = None, message: Optional[Message] = None
    ):
        self.algorithm = algorithm
        self.message = message

    def _check(self, value: Any) -> bool:
        if self.requirement.fullmatch(value) is None:
            return False
        try:
            header = json.loads(_decode_base64url(value.split(".")[0]))
        except (binascii.Error, ValueError, RecursionError):
            return False
        if not isinstance(header, dict) or header.get("typ") != "JWT":
            return False
        return self.algorithm is None or header.get("alg") == self.algorithm


def regex(
    pattern: Union[str, Pattern[str]], message: Optional[Message] = None
) -> RegexValidation:
    return RegexValidation(pattern, message)


def decimal(message: Optional[Message] = None) -> DecimalValidation:
    return DecimalValidation(message)


def base64url(message: Optional[Message] = None) -> Base64UrlValidation:
    return Base64UrlValidation(message)


def jwt(
    algorithm: Optional[str] = None, message: Optional[Message] = None
) -> JwtValidation:
    """
    Validate the shape of a JSON Web Token.

    Example:
        >>> schema = pipe(string(), jwt("HS256"))
    """
    return JwtValidation(algorithm, message)


# --------------------------------------------------------------------- #
# Word counts
# --------------------------------------------------------------------- #


class _WordsValidation(BaseValidation):
    label = "words"
    operator = ""

    def __init__(
        self,
        locale: Optional[str],
        requirement: int,
        message: Optional[Message] = None,
    ):
        self.locale = locale
        self.requirement = requirement
        self.message = message
        self.expects = f"{self.operator}{requirement}"

    def _issue_details(self, value: Any) -> Dict[str, Any]:
        return {"received": str(get_word_count(self.locale, value))}


class MinWordsValidation(_WordsValidation):
    type = "min_words"
    operator = ">="

    def _check(self, value: Any) -> bool:
        return get_word_count(self.locale, value) >= self.requirement


class MaxWordsValidation(_WordsValidation):
    type = "max_words"
    operator = "<="

    def _check(self, value: Any) -> bool:
        return get_word_count(self.locale, value) <= self.requirement


class WordsValidation(_WordsValidation):
    type = "words"

    def _check(self, value: Any) -> bool:
        return get_word_count(self.locale, value) == self.requirement


def min_words(
    locale: Optional[str], requirement: int, message: Optional[Message] = None
) -> MinWordsValidation:
    """Require at least ``requirement`` words as segmented for ``locale``."""
    return MinWordsValidation(locale, requirement, message)


def max_words(
    locale: Optional[str], requirement: int, message: Optional[Message] = None
) -> MaxWordsValidation:
    return MaxWordsValidation(locale, requirement, message)


def words(
    locale: Optional[str], requirement: int, message: Optional[Message] = None
) -> WordsValidation:
    return WordsValidation(locale, requirement, message)


# --------------------------------------------------------------------- #
# Custom predicates
# --------------------------------------------------------------------- #


class CheckValidation(BaseValidation):
    type = "check"

    def __init__(
        self, requirement: Callable[[Any], bool], message: Optional[Message] = None
    ):
        self.requirement = requirement
        self.message = message

    def _check(self, value: Any) -> bool:
        return bool(self.requirement(value))


class CheckValidationAsync(BaseValidationAsync):
    type = "check"

    def __init__(
        self,
        requirement: Callable[[Any], Awaitable[bool]],
        message: Optional[Message] = None,
    ):
        self.requirement = requirement
        self.message = message

    async def _check_async(self, value: Any) -> bool:
        return bool(await self.requirement(value))


def check(
    requirement: Callable[[Any], bool], message: Optional[Message] = None
) -> CheckValidation:
    """
    Validate with a custom predicate.

    Example:
        >>> schema = pipe(number(), check(lambda v: v % 2 == 0, "Must be even"))
    """
    return CheckValidation(requirement, message)


def check_async(
    requirement: Callable[[Any], Awaitable[bool]],
    message: Optional[Message] = None,
) -> CheckValidationAsync:
    return CheckValidationAsync(requirement, message)
