"""Structural OpenAPI validation of input and reduced documents."""

from openapi_spec_validator import OpenAPIV30SpecValidator, OpenAPIV31SpecValidator
from pydantic import BaseModel

from spec_shaver.errors import ValidationFailure


class ValidationResult(BaseModel):
    valid: bool
    errors: list[str] = []


def _validator_for(document: dict):
    version = str(document.get("openapi", ""))
    if version.startswith("3.1"):
        return OpenAPIV31SpecValidator(document)
    return OpenAPIV30SpecValidator(document)


def validate_document(document: dict) -> ValidationResult:
    """Validate a document against the OpenAPI 3.0/3.1 spec.

    Returns every error found instead of stopping at the first one.
    """
    try:
        errors = [err.message for err in _validator_for(document).iter_errors()]
    except Exception as e:
        # Unresolvable refs and similar surface as exceptions, not errors
        return ValidationResult(valid=False, errors=[str(e) or type(e).__name__])

    return ValidationResult(valid=not errors, errors=errors)


def validate_document_or_raise(document: dict, context: str = "Schema") -> None:
    """Raise ValidationFailure listing every error if the document is invalid."""
    result = validate_document(document)
    if not result.valid:
        details = "\n".join(f"  - {e}" for e in result.errors)
        raise ValidationFailure(f"{context} validation failed:\n{details}", errors=result.errors)
