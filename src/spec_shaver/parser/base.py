"""Data models shared by the loader, the reducer and the wizard.

Operations and component bodies stay plain dicts: the engine only looks at
their ``$ref``, ``summary``, ``tags``, ``example(s)`` and ``description`` keys.
"""

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

ELIGIBLE_METHODS = ("get", "post", "put", "patch", "delete")

DEFAULT_CORE_ENTITIES = [
    "users",
    "accounts",
    "organizations",
    "projects",
    "items",
    "resources",
    "events",
    "messages",
    "files",
    "settings",
]


class ReducerOptions(BaseModel):
    """Knobs for a reduction run. Config files use the camelCase aliases."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    max_actions: int = Field(default=30, ge=0)
    max_size_bytes: int = Field(default=1024 * 1024, ge=0)
    core_entities: list[str] = Field(default_factory=lambda: list(DEFAULT_CORE_ENTITIES))
    include_examples: bool = False
    max_description_length: int = Field(default=200, ge=0)
    method_filter: list[str] | None = None  # e.g. ["get"]
    resolve_refs: bool = False

    @field_validator("method_filter")
    @classmethod
    def _lowercase_methods(cls, value: list[str] | None) -> list[str] | None:
        if value is None:
            return None
        return [m.lower() for m in value]


class PrioritizedOperation(BaseModel):
    """An eligible operation with its priority score."""

    path: str
    method: str  # as declared in the document, e.g. "get"
    operation: dict
    priority: int


class OperationInfo(BaseModel):
    """An operation as presented for selection in the wizard."""

    path: str
    method: str  # upper-case
    operation: dict
    tag: str
    display_name: str


class OperationGroup(BaseModel):
    tag: str
    operations: list[OperationInfo]


class OperationSummary(BaseModel):
    method: str
    path: str
    summary: str | None = None


class ReductionResult(BaseModel):
    """What every caller (CLI, library, wizard) gets back from a reduction."""

    document: dict
    original_operation_count: int
    reduced_operation_count: int
    size_bytes: int
    operations: list[OperationSummary]
