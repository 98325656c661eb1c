"""Size optimizer: lossy reductions applied in order until the budget is met."""

import copy
import json
from typing import Any

from spec_shaver.console import Console, format_bytes

ELLIPSIS = "..."
EXAMPLE_KEYS = ("example", "examples")


def to_json(document: Any, indent: int | None = None) -> str:
    """Canonical JSON text; compact unless ``indent`` is given."""
    separators = None if indent is not None else (",", ":")
    # default=str covers YAML-native values such as dates
    return json.dumps(document, indent=indent, separators=separators, ensure_ascii=False, default=str)


def calculate_size(document: Any) -> int:
    """UTF-8 byte length of the compact JSON serialization."""
    return len(to_json(document).encode("utf-8"))


def remove_examples(node: Any) -> None:
    """Delete every ``example`` / ``examples`` key in place, at any depth."""
    if isinstance(node, dict):
        for key in EXAMPLE_KEYS:
            node.pop(key, None)
        for value in node.values():
            remove_examples(value)
    elif isinstance(node, list):
        for item in node:
            remove_examples(item)


def truncate_descriptions(node: Any, max_length: int) -> None:
    """Shorten long ``description`` strings in place to ``max_length`` + "...".

    A description is only cut when that makes it shorter: one of
    ``max_length + 1`` to ``max_length + 3`` characters stays whole, since
    cutting it to ``max_length`` plus the ellipsis would grow the document.
    Keep the ``+ len(ELLIPSIS)`` bound; optimization must never add bytes.
    """
    if isinstance(node, dict):
        description = node.get("description")
        if isinstance(description, str) and len(description) > max_length + len(ELLIPSIS):
            node["description"] = description[:max_length] + ELLIPSIS
        for value in node.values():
            truncate_descriptions(value, max_length)
    elif isinstance(node, list):
        for item in node:
            truncate_descriptions(item, max_length)


def optimize_size(
    document: dict,
    max_bytes: int,
    include_examples: bool = False,
    max_description_length: int = 200,
    console: Console | None = None,
) -> dict:
    """Trim ``document`` towards ``max_bytes``.

    Steps, each only while still over budget:
      1. nothing (already small enough: the input is returned as is),
      2. strip examples everywhere unless ``include_examples``,
      3. truncate long descriptions.

    Everything after step 1 happens on a deep copy. The result may still be
    over budget; callers check ``calculate_size`` themselves.
    """
    console = console or Console()

    size = calculate_size(document)
    if size <= max_bytes:
        console.verbose(f"Size {format_bytes(size)} is within budget, no optimization needed")
        return document

    optimized = copy.deepcopy(document)

    if not include_examples:
        remove_examples(optimized)
        size = calculate_size(optimized)
        console.verbose(f"Removed examples: {format_bytes(size)}")
        if size <= max_bytes:
            return optimized

    truncate_descriptions(optimized, max_description_length)
    console.verbose(
        f"Truncated descriptions to {max_description_length} characters: "
        f"{format_bytes(calculate_size(optimized))}"
    )
    return optimized
