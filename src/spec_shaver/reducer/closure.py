"""Schema closure: which component schemas a set of operations depends on."""

import re
from collections.abc import Iterable
from typing import Any

COMPONENT_REF = re.compile(r"^#/components/([^/]+)/(.+)$")


def parse_component_ref(ref: str) -> tuple[str, str] | None:
    """Split "#/components/schemas/User" into ("schemas", "User")."""
    m = COMPONENT_REF.match(ref)
    if not m:
        return None
    return m.group(1), m.group(2)


def find_referenced_schemas(roots: Iterable[Any], components: dict | None) -> set[str]:
    """Collect every schema name reachable from ``roots`` through ``$ref``.

    ``components`` is the source document's components object; referenced
    bodies are read from it and walked in turn. A ``$ref`` node is a leaf, its
    sibling keys are not walked. Names missing from ``components.schemas`` are
    still returned; the caller decides what to copy.
    """
    components = components if isinstance(components, dict) else {}
    references: set[str] = set()
    visited: set[tuple[str, str]] = set()

    stack = list(roots)
    stack.reverse()
    while stack:
        node = stack.pop()
        if isinstance(node, dict):
            ref = node.get("$ref")
            if isinstance(ref, str):
                target = _follow(ref, components, references, visited)
                if target is not None:
                    stack.append(target)
                continue
            stack.extend(reversed(list(node.values())))
        elif isinstance(node, list):
            stack.extend(reversed(node))

    return references


def _follow(ref: str, components: dict, references: set[str], visited: set[tuple[str, str]]) -> Any:
    """Record a ref and return the body still to walk, or None."""
    parsed = parse_component_ref(ref)
    if parsed is None:
        return None
    section, name = parsed
    if section == "schemas":
        references.add(name)
    if parsed in visited:
        return None
    visited.add(parsed)

    bucket = components.get(section)
    if not isinstance(bucket, dict):
        return None
    return bucket.get(name)
