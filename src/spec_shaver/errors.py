"""Error types raised at the edges of spec-shaver (I/O, config, validation)."""


class SpecShaverError(Exception):
    """Base class for all errors that carry a user-facing message."""


class FetchError(SpecShaverError):
    """The remote document could not be retrieved."""


class InputNotFoundError(SpecShaverError):
    """A local input file does not exist."""


class ParseError(SpecShaverError):
    """The input document is not valid JSON/YAML or not a mapping."""


class ConfigError(SpecShaverError):
    """An explicitly given config file is missing or unparsable."""


class ValidationFailure(SpecShaverError):
    """A document failed OpenAPI structural validation."""

    def __init__(self, message: str, errors: list[str] | None = None):
        super().__init__(message)
        self.errors = errors or []


class WizardCancelled(SpecShaverError):
    """The user cancelled the interactive wizard."""
