"""Replaces ``$ref`` pointers with the content they point to."""

import copy
from typing import Any

from spec_shaver.parser.swagger import is_eligible_method
from spec_shaver.reducer.closure import parse_component_ref

INLINE_SECTIONS = ("schemas", "parameters", "responses")


def circular_placeholder(ref: str) -> dict:
    return {"type": "object", "description": f"Circular reference to {ref}"}


def resolve_references(document: dict) -> dict:
    """Return a copy of ``document`` with operation responses, request bodies
    and component schemas fully inlined.

    Operation ``parameters`` keep their refs. Every top-level inlining starts
    with a fresh ancestor set: empty for operations, the schema's own ref for
    a named component schema.
    """
    components = document.get("components")
    if not isinstance(components, dict):
        components = {}

    resolved = copy.deepcopy(document)

    paths = resolved.get("paths")
    if isinstance(paths, dict):
        for path_item in paths.values():
            if not isinstance(path_item, dict):
                continue
            for method, operation in path_item.items():
                if not is_eligible_method(method) or not isinstance(operation, dict):
                    continue
                for key in ("responses", "requestBody"):
                    if key in operation:
                        operation[key] = inline_refs(operation[key], components)

    resolved_components = resolved.get("components")
    if isinstance(resolved_components, dict) and isinstance(resolved_components.get("schemas"), dict):
        schemas = resolved_components["schemas"]
        for name in schemas:
            # A schema's own ref is already on the path: self-references close immediately
            schemas[name] = inline_refs(schemas[name], components, frozenset({f"#/components/schemas/{name}"}))

    return resolved


def inline_refs(node: Any, components: dict, ancestors: frozenset[str] = frozenset()) -> Any:
    """Inline refs found in ``node``; returns a new structure.

    ``ancestors`` holds the refs being expanded on the current branch. Meeting
    one of them again closes a cycle and yields a placeholder object. Works
    from an explicit stack so long ref chains do not hit the recursion limit.
    """
    root: list[Any] = [None]
    # (source node, refs active on its branch, container to write into, key in it)
    stack: list[tuple[Any, frozenset[str], Any, Any]] = [(node, ancestors, root, 0)]

    while stack:
        current, active, parent, key = stack.pop()

        if isinstance(current, dict):
            ref = current.get("$ref")
            if isinstance(ref, str):
                if ref in active:
                    parent[key] = circular_placeholder(ref)
                    continue
                target = _lookup(ref, components)
                if target is None:
                    parent[key] = copy.deepcopy(current)
                else:
                    stack.append((target, active | {ref}, parent, key))
                continue

            copied = dict.fromkeys(current)
            parent[key] = copied
            for child_key, value in current.items():
                stack.append((value, active, copied, child_key))
        elif isinstance(current, list):
            copied_list = [None] * len(current)
            parent[key] = copied_list
            for index, item in enumerate(current):
                stack.append((item, active, copied_list, index))
        else:
            parent[key] = current

    return root[0]


def _lookup(ref: str, components: dict) -> Any:
    parsed = parse_component_ref(ref)
    if parsed is None:
        return None
    section, name = parsed
    if section not in INLINE_SECTIONS:
        return None
    bucket = components.get(section)
    if not isinstance(bucket, dict):
        return None
    return bucket.get(name)
