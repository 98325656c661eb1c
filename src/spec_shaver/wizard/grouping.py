"""Groups operations by tag for presentation and selection."""

from spec_shaver.parser.base import OperationGroup, OperationInfo
from spec_shaver.parser.swagger import iter_operations

METHOD_ORDER = ["GET", "POST", "PUT", "PATCH", "DELETE"]


def derive_tag_from_path(path: str) -> str:
    """Fallback tag: "/users/{id}" -> "users", "/{tenant}" -> "tenant", "/" -> "root"."""
    parts = [p for p in path.split("/") if p]
    if not parts:
        return "root"
    for part in parts:
        if not part.startswith("{"):
            return part
    return parts[0].replace("{", "").replace("}", "")


def operation_tag(path: str, operation: dict) -> str:
    tags = operation.get("tags")
    if isinstance(tags, list) and tags and isinstance(tags[0], str) and tags[0]:
        return tags[0]
    return derive_tag_from_path(path)


def extract_operation_groups(document: dict) -> list[OperationGroup]:
    """Group every eligible operation under its first tag (or a path-derived one).

    Groups are sorted by tag; members by path, then GET, POST, PUT, PATCH, DELETE.
    """
    by_tag: dict[str, list[OperationInfo]] = {}
    for path, method, operation in iter_operations(document):
        tag = operation_tag(path, operation)
        by_tag.setdefault(tag, []).append(
            OperationInfo(
                path=path,
                method=method.upper(),
                operation=operation,
                tag=tag,
                display_name=f"{method.upper().ljust(7)} {path}",
            )
        )

    return [
        OperationGroup(
            tag=tag,
            operations=sorted(ops, key=lambda op: (op.path, METHOD_ORDER.index(op.method))),
        )
        for tag, ops in sorted(by_tag.items())
    ]
