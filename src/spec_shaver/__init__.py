"""Reduce OpenAPI documents to a bounded set of operations under a byte budget."""

from spec_shaver.fetcher import SchemaFetcher, fetch_document
from spec_shaver.parser.base import (
    OperationGroup,
    OperationInfo,
    OperationSummary,
    PrioritizedOperation,
    ReducerOptions,
    ReductionResult,
)
from spec_shaver.reducer.engine import OpenAPIReducer, reduce_from_url
from spec_shaver.wizard.grouping import extract_operation_groups
from spec_shaver.wizard.machine import run_wizard

__all__ = [
    "OpenAPIReducer",
    "OperationGroup",
    "OperationInfo",
    "OperationSummary",
    "PrioritizedOperation",
    "ReducerOptions",
    "ReductionResult",
    "SchemaFetcher",
    "extract_operation_groups",
    "fetch_document",
    "reduce_from_url",
    "run_wizard",
]
