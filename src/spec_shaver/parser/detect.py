"""Auto-detect the serialization format of an OpenAPI document."""

import json
from pathlib import Path


def detect_format(file_path: Path, text: str | None = None) -> str:
    """Detect whether a document is JSON or YAML.

    Returns: 'json' or 'yaml'.
    """
    if file_path.suffix.lower() == ".json":
        return "json"
    if file_path.suffix.lower() in (".yaml", ".yml"):
        return "yaml"

    if text is None:
        text = file_path.read_text(encoding="utf-8")

    # Unknown extension: sniff the content
    try:
        json.loads(text)
        return "json"
    except (json.JSONDecodeError, ValueError):
        return "yaml"
