"""
Locale-aware word counting.

Word counting is a pluggable capability keyed by locale. The default
segmenter follows the Unicode word boundary rules closely enough for
validation purposes: a word is a run of letters, combining marks, digits and
connector punctuation, optionally joined by mid-word punctuation (``can't``,
``e.g``). Symbols and emoji never form words.

Swedish and Finnish treat the colon as a mid-word character (``foo:bar`` is
one word there, two words in English).

Custom segmenters can be registered per locale:

    >>> register_segmenter("ja", my_dictionary_segmenter)
    >>> get_word_count("ja", "...")
"""

import unicodedata
from typing import Callable, Dict, FrozenSet, Iterator, List, Optional

Segmenter = Callable[[str], List[str]]

# Characters that join two word characters into a single word
MID_WORD_CHARS: FrozenSet[str] = frozenset(
    {
        "'",
        ".",
        "\u00b7",
        "\u0387",
        "\u05f4",
        "\u2018",
        "\u2019",
        "\u2024",
        "\u2027",
        "\ufe13",
        "\ufe52",
        "\ufe55",
        "\uff07",
        "\uff0e",
        "\uff1a",
    }
)

# Locale tailorings adding extra mid-word characters
LOCALE_MID_WORD_CHARS: Dict[str, FrozenSet[str]] = {
    "sv": frozenset({":"}),
    "fi": frozenset({":"}),
}

_segmenters: Dict[str, Segmenter] = {}


def _is_word_char(ch: str) -> bool:
    category = unicodedata.category(ch)
    return category[0] in ("L", "M", "N") or category == "Pc"


def _base_language(locale: Optional[str]) -> str:
    if not locale:
        return ""
    return locale.replace("_", "-").split("-")[0].lower()


def _iter_words(text: str, mid_word: FrozenSet[str]) -> Iterator[str]:
    start: Optional[int] = None
    length = len(text)
    for index, ch in enumerate(text):
        if _is_word_char(ch):
            if start is None:
                start = index
            continue
        if (
            start is not None
            and ch in mid_word
            and index + 1 < length
            and _is_word_char(text[index + 1])
        ):
            continue
        if start is not None:
            yield text[start:index]
            start = None
    if start is not None:
        yield text[start:]


def default_segmenter(locale: Optional[str]) -> Segmenter:
    """Return the built-in segmenter tailored for ``locale``."""
    mid_word = MID_WORD_CHARS | LOCALE_MID_WORD_CHARS.get(
        _base_language(locale), frozenset()
    )

    def segment(text: str) -> List[str]:
        return list(_iter_words(text, mid_word))

    return segment


def register_segmenter(locale: str, segmenter: Segmenter) -> None:
    """Register a custom segmenter for a locale (e.g. ``"ja"`` or ``"de-CH"``)."""
    _segmenters[locale.lower()] = segmenter


def unregister_segmenter(locale: str) -> None:
    _segmenters.pop(locale.lower(), None)


def get_segmenter(locale: Optional[str]) -> Segmenter:
    """Resolve the segmenter for a locale: exact match, base language, default."""
    if locale:
        key = locale.lower()
        if key in _segmenters:
            return _segmenters[key]
        base = _base_language(locale)
        if base in _segmenters:
            return _segmenters[base]
    return default_segmenter(locale)


def get_word_count(locale: Optional[str], text: str) -> int:
    """
    Count the words of ``text`` as segmented for ``locale``.

    Examples:
        >>> get_word_count("en", "hello world")
        2
        >>> get_word_count("en", "foo:bar baz:qux")
        4
        >>> get_word_count("sv", "foo:bar baz:qux")
        2
    """
    return len(get_segmenter(locale)(text))
