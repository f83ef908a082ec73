"""
Message registries for issue messages.

Three registries are consulted when an issue is raised (see
``pipecheck.pipelines.issues.add_issue`` for the full precedence order):

1. specific messages, keyed by unit type ("min_length") and language
2. schema messages, used for every schema-kind issue
3. global messages, used for every issue

Each registry is keyed by language. A lookup for ``lang`` returns the entry
registered for that exact language, then the language independent entry
registered with ``lang=None``.

Catalogs can be loaded from YAML:

    de:
      global: "Ungültiger Wert: {received}"
      schema: "Ungültiger Typ: {expected} erwartet, {received} erhalten"
      specific:
        min_length: "Mindestens {requirement} Zeichen erwartet"

Catalog entries are ``str.format`` templates over the issue fields
(kind, type, expected, received, requirement, lang); unknown
placeholders are left untouched.
"""

from pathlib import Path
from typing import Any, Callable, Dict, Optional, Union

import yaml

from pipecheck.config import get_settings
from pipecheck.utils.logging import get_logger

from .exceptions import PipelineAssemblyError

logger = get_logger(__name__)

Message = Union[str, Callable[..., str]]

_global_messages: Dict[Optional[str], Message] = {}
_schema_messages: Dict[Optional[str], Message] = {}
_specific_messages: Dict[str, Dict[Optional[str], Message]] = {}


def _lookup(store: Dict[Optional[str], Message], lang: Optional[str]) -> Optional[Message]:
    if lang in store:
        return store[lang]
    return store.get(None)


# --------------------------------------------------------------------- #
# Global messages
# --------------------------------------------------------------------- #


def set_global_message(message: Message, lang: Optional[str] = None) -> None:
    _global_messages[lang] = message


def get_global_message(lang: Optional[str] = None) -> Optional[Message]:
    return _lookup(_global_messages, lang)


def delete_global_message(lang: Optional[str] = None) -> None:
    _global_messages.pop(lang, None)


# --------------------------------------------------------------------- #
# Schema messages
# --------------------------------------------------------------------- #


def set_schema_message(message: Message, lang: Optional[str] = None) -> None:
    _schema_messages[lang] = message


def get_schema_message(lang: Optional[str] = None) -> Optional[Message]:
    return _lookup(_schema_messages, lang)


def delete_schema_message(lang: Optional[str] = None) -> None:
    _schema_messages.pop(lang, None)


# --------------------------------------------------------------------- #
# Specific messages
# --------------------------------------------------------------------- #


def set_specific_message(
    unit_type: str, message: Message, lang: Optional[str] = None
) -> None:
    """Register a message for every issue raised by units of ``unit_type``."""
    _specific_messages.setdefault(unit_type, {})[lang] = message


def get_specific_message(
    unit_type: str, lang: Optional[str] = None
) -> Optional[Message]:
    store = _specific_messages.get(unit_type)
    if not store:
        return None
    return _lookup(store, lang)


def delete_specific_message(unit_type: str, lang: Optional[str] = None) -> None:
    store = _specific_messages.get(unit_type)
    if store is not None:
        store.pop(lang, None)
        if not store:
            del _specific_messages[unit_type]


def clear_messages() -> None:
    """Remove every registered message (used by tests and catalog reloads)."""
    _global_messages.clear()
    _schema_messages.clear()
    _specific_messages.clear()


# --------------------------------------------------------------------- #
# Catalog loading
# --------------------------------------------------------------------- #


class _KeepMissing(dict):
    def __missing__(self, key: str) -> str:
        return "{" + key + "}"


def message_template(template: str) -> Callable[..., str]:
    """
    Build a message callable from a ``str.format`` template.

    Example:
        >>> render = message_template("Expected {expected}, got {received}")
    """

    def render(issue: Any) -> str:
        fields = _KeepMissing(
            kind=getattr(issue.kind, "value", issue.kind),
            type=issue.type,
            expected=issue.expected,
            received=issue.received,
            requirement=issue.requirement,
            lang=issue.lang,
        )
        return template.format_map(fields)

    render.template = template  # type: ignore[attr-defined]
    return render


def load_message_catalog(path: Optional[Union[str, Path]] = None) -> int:
    """
    Load a YAML message catalog into the registries.

    Args:
        path: Catalog file; defaults to settings.messages_file

    Returns:
        Number of messages registered

    Raises:
        PipelineAssemblyError: If no path is configured, the file is missing,
            or the catalog structure is invalid
    """
    if path is None:
        path = get_settings().messages_file
    if not path:
        raise PipelineAssemblyError("No message catalog configured")

    catalog_path = Path(path)
    if not catalog_path.is_file():
        raise PipelineAssemblyError(
            "Message catalog not found", config_path=str(catalog_path)
        )

    try:
        with open(catalog_path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
    except yaml.YAMLError as e:
        raise PipelineAssemblyError(
            f"Invalid YAML in message catalog: {e}", config_path=str(catalog_path)
        ) from e

    if not isinstance(data, dict):
        raise PipelineAssemblyError(
            "Message catalog must be a mapping of languages",
            config_path=str(catalog_path),
        )

    count = 0
    for lang_key, entries in data.items():
        lang = None if lang_key in (None, "default", "*") else str(lang_key)
        if not isinstance(entries, dict):
            raise PipelineAssemblyError(
                f"Catalog entry for language '{lang_key}' must be a mapping",
                config_path=str(catalog_path),
            )

        if "global" in entries:
            set_global_message(message_template(str(entries["global"])), lang)
            count += 1
        if "schema" in entries:
            set_schema_message(message_template(str(entries["schema"])), lang)
            count += 1
        for unit_type, template in (entries.get("specific") or {}).items():
            set_specific_message(str(unit_type), message_template(str(template)), lang)
            count += 1

    logger.info(
        "messages.catalog_loaded",
        path=str(catalog_path),
        languages=len(data),
        messages=count,
    )
    return count
