"""Operation scoring and selection."""

from collections.abc import Iterable

from spec_shaver.parser.base import PrioritizedOperation
from spec_shaver.parser.swagger import iter_operations

METHOD_WEIGHTS = {
    "get": 50,
    "post": 40,
    "put": 30,
    "patch": 30,
    "delete": 20,
}

CORE_ENTITY_BONUS = 100
COLLECTION_BONUS = 15
ITEM_BONUS = 10
SUMMARY_BONUS = 5
MIN_SUMMARY_LENGTH = 10


def score_operation(path: str, method: str, operation: dict, core_entities: list[str]) -> int:
    """Deterministic priority for one operation. Higher is kept first."""
    priority = 0

    path_lower = path.lower()
    for entity in core_entities:
        if f"/{entity.lower()}" in path_lower:
            priority += CORE_ENTITY_BONUS
            break

    priority += METHOD_WEIGHTS.get(method.lower(), 0)

    # Collection endpoints (/users) rank above single resources (/users/{id})
    priority += ITEM_BONUS if "{" in path else COLLECTION_BONUS

    summary = operation.get("summary")
    if isinstance(summary, str) and len(summary) > MIN_SUMMARY_LENGTH:
        priority += SUMMARY_BONUS

    return priority


def prioritize_operations(
    document: dict,
    core_entities: list[str],
    method_filter: list[str] | None = None,
) -> list[PrioritizedOperation]:
    """Score every eligible operation and sort by descending priority.

    The sort is stable, so equal scores keep document order.
    """
    allowed = {m.lower() for m in method_filter} if method_filter else None

    operations = []
    for path, method, operation in iter_operations(document):
        if allowed is not None and method.lower() not in allowed:
            continue
        operations.append(
            PrioritizedOperation(
                path=path,
                method=method,
                operation=operation,
                priority=score_operation(path, method, operation, core_entities),
            )
        )

    return sorted(operations, key=lambda op: op.priority, reverse=True)


def select_operations(prioritized: list[PrioritizedOperation], max_actions: int) -> list[PrioritizedOperation]:
    """Keep the first ``max_actions`` operations of an already sorted list."""
    return prioritized[:max(max_actions, 0)]


def parse_endpoint_spec(spec: str) -> tuple[str | None, str]:
    """Parse "GET:/v1/users" or "/v1/users" into (method_or_None, path)."""
    spec = spec.strip()
    if not spec.startswith("/") and ":" in spec:
        method, path = spec.split(":", 1)
        return method.strip().lower(), path.strip()
    return None, spec


def select_endpoints(document: dict, endpoints: Iterable[str]) -> list[PrioritizedOperation]:
    """Explicit selection: operations matching the endpoint specs, in document order.

    Each result carries ``priority=0``; order is the document's, not a score.
    """
    specs = [parse_endpoint_spec(e) for e in endpoints]

    selected = []
    for path, method, operation in iter_operations(document):
        for spec_method, spec_path in specs:
            if spec_path == path and (spec_method is None or spec_method == method.lower()):
                selected.append(PrioritizedOperation(path=path, method=method, operation=operation, priority=0))
                break
    return selected
