"""Builds the reduced document shell around a set of selected operations."""

from collections.abc import Iterable

from spec_shaver.parser.base import OperationInfo, PrioritizedOperation
from spec_shaver.reducer.closure import find_referenced_schemas

# Path-item fields that travel with any operation kept on that path
PATH_ITEM_FIELDS = ("summary", "description", "servers", "parameters")


def build_reduced_document(
    document: dict,
    selected: Iterable[PrioritizedOperation | OperationInfo],
) -> dict:
    """Assemble a new document holding only ``selected`` and what they reference.

    Metadata and operations are shared with ``document`` by reference; the
    input is never modified. ``components.schemas`` is pruned to the schema
    closure, every other components section is copied whole.
    """
    source_paths = document.get("paths")
    if not isinstance(source_paths, dict):
        source_paths = {}

    paths: dict = {}
    for op in selected:
        path_item = paths.get(op.path)
        if path_item is None:
            path_item = paths[op.path] = {}
            source_item = source_paths.get(op.path)
            if isinstance(source_item, dict):
                for key in PATH_ITEM_FIELDS:
                    if key in source_item:
                        path_item[key] = source_item[key]
        path_item[op.method.lower()] = op.operation

    components = document.get("components")
    if not isinstance(components, dict):
        components = {}
    source_schemas = components.get("schemas")
    if not isinstance(source_schemas, dict):
        source_schemas = {}

    copied_sections = {key: value for key, value in components.items() if key != "schemas"}

    # Copied sections are walked too so their own schema refs stay resolvable
    needed = find_referenced_schemas([paths, *copied_sections.values()], components)
    schemas = {name: body for name, body in source_schemas.items() if name in needed}

    reduced: dict = {}
    for key in ("openapi", "info", "servers"):
        if key in document:
            reduced[key] = document[key]
    reduced["paths"] = paths
    reduced["components"] = {"schemas": schemas, **copied_sections}
    for key in ("security", "tags", "externalDocs"):
        if key in document:
            reduced[key] = document[key]

    return reduced
