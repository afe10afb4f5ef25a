"""Text statistics and case transforms over flat text."""

import re
from typing import Any

from gdocs_mcp.text_index.models import FlatDocument

CASE_TYPES = ("UPPERCASE", "LOWERCASE", "TITLE_CASE")

_TOKEN_RE = re.compile(r"\S+")


def document_statistics(flat: FlatDocument) -> dict[str, Any]:
    """Count words, characters and paragraphs in a FlatDocument."""
    text = flat.text
    return {
        "words": len(text.split()),
        "characters": len(text),
        "characters_no_spaces": sum(1 for char in text if not char.isspace()),
        "paragraphs": flat.paragraph_count,
    }


def transform_case(text: str, case_type: str) -> str:
    """Apply ``UPPERCASE``, ``LOWERCASE`` or ``TITLE_CASE`` to ``text``.

    Title case upper-cases the first character of each whitespace-delimited
    token and lower-cases the rest; whitespace is preserved as-is.

    Raises:
        ValueError: If ``case_type`` is not recognised.
    """
    if case_type == "UPPERCASE":
        return text.upper()
    if case_type == "LOWERCASE":
        return text.lower()
    if case_type == "TITLE_CASE":
        return _TOKEN_RE.sub(lambda m: m.group(0)[:1].upper() + m.group(0)[1:].lower(), text)
    raise ValueError(f"Unknown case type: {case_type}. Expected one of {', '.join(CASE_TYPES)}")


COMMON_WORDS = frozenset(
    """
    the and or but in on at to for of with by a an is are was were be been being
    have has had do does did will would could should may might can this that these
    those i you he she it we they me him her us them my your his its our their
    """.split()
)

_WORD_RE = re.compile(r"\b\w+\b")


def spelling_suggestions(text: str) -> list[dict[str, Any]]:
    """Flag uncommon words and propose simple variations.

    This is a heuristic, not a dictionary check: every word longer than two
    characters that is not in COMMON_WORDS is reported once, with plural,
    truncated, past-tense and gerund variants as suggestions.
    """
    results: list[dict[str, Any]] = []
    seen: set[str] = set()
    for word in _WORD_RE.findall(text.lower()):
        if word in COMMON_WORDS or len(word) <= 2 or word in seen:
            continue
        seen.add(word)
        variants = [word + "s", word[:-1], word + "ed", word + "ing"]
        results.append({"word": word, "suggestions": [v for v in variants if v != word]})
    return results
