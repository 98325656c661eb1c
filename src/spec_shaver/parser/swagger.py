"""OpenAPI document loading and operation traversal.

Loads OpenAPI 3.x documents from JSON or YAML and walks their operations in
declared path/method order.
"""

import json
from collections.abc import Iterator
from pathlib import Path

import yaml

from spec_shaver.errors import InputNotFoundError, ParseError
from spec_shaver.parser.base import ELIGIBLE_METHODS
from spec_shaver.parser.detect import detect_format


def load_document(file_path: Path) -> dict:
    """Read an OpenAPI JSON/YAML file into a dict."""
    if not file_path.exists():
        raise InputNotFoundError(f"Input file not found: {file_path}")

    text = file_path.read_text(encoding="utf-8")
    return parse_document(text, fmt=detect_format(file_path, text), source=str(file_path))


def parse_document(text: str, fmt: str = "json", source: str = "<string>") -> dict:
    """Parse document text; the result must be a mapping."""
    try:
        if fmt == "json":
            doc = json.loads(text)
        else:
            doc = yaml.safe_load(text)
    except (json.JSONDecodeError, yaml.YAMLError) as e:
        raise ParseError(f"Failed to parse {source}: {e}") from e

    if not isinstance(doc, dict):
        raise ParseError(f"Failed to parse {source}: expected an object at the top level")
    return doc


def is_eligible_method(method: str) -> bool:
    return isinstance(method, str) and method.lower() in ELIGIBLE_METHODS


def iter_operations(document: dict) -> Iterator[tuple[str, str, dict]]:
    """Yield (path, method, operation) for every eligible operation, in document order.

    Non-dict path items and operations are skipped.
    """
    paths = document.get("paths")
    if not isinstance(paths, dict):
        return
    for path, path_item in paths.items():
        if not isinstance(path_item, dict):
            continue
        for method, operation in path_item.items():
            if is_eligible_method(method) and isinstance(operation, dict):
                yield path, method, operation


def count_operations(document: dict) -> int:
    """Number of eligible operations in a document."""
    return sum(1 for _ in iter_operations(document))
