"""OpenAPIReducer: ties scoring, selection, assembly, optimization and inlining together."""

from collections.abc import Sequence

from spec_shaver.console import Console
from spec_shaver.fetcher import DEFAULT_TIMEOUT, fetch_document
from spec_shaver.parser.base import (
    OperationInfo,
    OperationSummary,
    PrioritizedOperation,
    ReducerOptions,
    ReductionResult,
)
from spec_shaver.parser.swagger import count_operations
from spec_shaver.reducer.assembler import build_reduced_document
from spec_shaver.reducer.inliner import resolve_references
from spec_shaver.reducer.optimizer import calculate_size, optimize_size
from spec_shaver.reducer.priority import prioritize_operations, select_endpoints, select_operations


class OpenAPIReducer:
    """Reduce an OpenAPI document to a bounded set of operations and bytes.

    Stateless between calls: every call works from its arguments only and
    never modifies the document it is given.
    """

    def __init__(self, options: ReducerOptions | None = None, console: Console | None = None):
        self.options = options or ReducerOptions()
        self.console = console or Console()

    def prioritize(self, document: dict) -> list[PrioritizedOperation]:
        return prioritize_operations(document, self.options.core_entities, self.options.method_filter)

    def reduce(self, document: dict) -> ReductionResult:
        """Keep the ``max_actions`` highest-priority operations."""
        prioritized = self.prioritize(document)
        selected = select_operations(prioritized, self.options.max_actions)
        self.console.verbose(
            f"Selected {len(selected)} of {len(prioritized)} eligible operations "
            f"(limit {self.options.max_actions})"
        )
        return self.reduce_selection(document, selected)

    def reduce_endpoints(self, document: dict, endpoints: Sequence[str]) -> ReductionResult:
        """Keep exactly the operations named by endpoint specs like "GET:/users"."""
        selected = select_endpoints(document, endpoints)
        self.console.verbose(f"Matched {len(selected)} operations from {len(endpoints)} endpoint specs")
        return self.reduce_selection(document, selected)

    def reduce_selection(
        self,
        document: dict,
        selected: Sequence[PrioritizedOperation | OperationInfo],
    ) -> ReductionResult:
        """Build a result from an already chosen, ordered list of operations."""
        reduced = build_reduced_document(document, selected)
        self.console.verbose(f"Kept {len(reduced['components']['schemas'])} referenced schemas")

        reduced = optimize_size(
            reduced,
            self.options.max_size_bytes,
            include_examples=self.options.include_examples,
            max_description_length=self.options.max_description_length,
            console=self.console,
        )

        if self.options.resolve_refs:
            self.console.verbose("Resolving $ref references...")
            reduced = resolve_references(reduced)

        return ReductionResult(
            document=reduced,
            original_operation_count=count_operations(document),
            reduced_operation_count=count_operations(reduced),
            size_bytes=calculate_size(reduced),
            operations=[
                OperationSummary(
                    method=op.method.upper(),
                    path=op.path,
                    summary=_summary_of(op.operation),
                )
                for op in selected
            ],
        )


def _summary_of(operation: dict) -> str | None:
    summary = operation.get("summary")
    return summary if isinstance(summary, str) else None


def reduce_from_url(
    url: str,
    options: ReducerOptions | None = None,
    headers: dict[str, str] | None = None,
    timeout: float = DEFAULT_TIMEOUT,
    console: Console | None = None,
) -> ReductionResult:
    """Fetch a document and reduce it in one call."""
    document = fetch_document(url, headers=headers, timeout=timeout)
    return OpenAPIReducer(options, console=console).reduce(document)
