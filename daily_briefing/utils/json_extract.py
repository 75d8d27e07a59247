"""
Recovery of JSON arrays from free-form model output.

Language models asked for "only JSON" still wrap their answer in prose or
markdown fences. ``extract_json_array`` finds the first balanced ``[...]``
span, and ``parse_json_array`` the first such span that is valid JSON, so
the caller can parse it without caring about the surrounding text.
"""

import json
from typing import Any, Iterator, List, Optional


class JSONArrayNotFoundError(ValueError):
    """Raised when the text contains no balanced JSON array."""


def _balanced_span_end(text: str, start: int) -> int:
    """
    Find the index just past the bracket closing the one at ``start``.

    Brackets inside JSON string literals are ignored. Returns -1 if the
    span never closes.
    """
    depth = 0
    in_string = False
    escaped = False

    for i in range(start, len(text)):
        char = text[i]
        if in_string:
            if escaped:
                escaped = False
            elif char == "\\":
                escaped = True
            elif char == '"':
                in_string = False
            continue

        if char == '"':
            in_string = True
        elif char == "[":
            depth += 1
        elif char == "]":
            depth -= 1
            if depth == 0:
                return i + 1

    return -1


def _candidate_spans(text: str) -> Iterator[str]:
    """Yield every balanced ``[...]`` span, left to right, without overlap."""
    start = text.find("[")
    while start != -1:
        end = _balanced_span_end(text, start)
        if end == -1:
            start = text.find("[", start + 1)
            continue
        yield text[start:end]
        start = text.find("[", end)


def extract_json_array(text: str) -> str:
    """
    Return the first balanced ``[...]`` span in ``text``.

    Args:
        text: Model output, possibly with prose before or after the array

    Returns:
        The array substring, brackets included

    Raises:
        JSONArrayNotFoundError: If no balanced span exists
    """
    if not text:
        raise JSONArrayNotFoundError("Empty text")

    span = next(_candidate_spans(text), None)
    if span is None:
        raise JSONArrayNotFoundError("No JSON array found in text")
    return span


def parse_json_array(text: str) -> List[Any]:
    """
    Decode the first balanced span in ``text`` that is a valid JSON array.

    Bracketed prose such as ``[past 24 hours]`` is skipped.

    Raises:
        JSONArrayNotFoundError: If no balanced span exists
        json.JSONDecodeError: The first decode error, if no span is valid JSON
    """
    if not text:
        raise JSONArrayNotFoundError("Empty text")

    first_error: Optional[json.JSONDecodeError] = None
    for span in _candidate_spans(text):
        try:
            return json.loads(span)
        except json.JSONDecodeError as e:
            if first_error is None:
                first_error = e

    if first_error is not None:
        raise first_error
    raise JSONArrayNotFoundError("No JSON array found in text")
