"""
Error types for the model catalog.

Lookup, validation and no-candidate errors are caller-facing: they signal a
malformed request string or an exhausted candidate list and are raised
synchronously. Configuration errors are raised by a single provider adapter
and contained by the registry aggregate. Probe failures never reach callers.
"""


class CatalogError(Exception):
    """Base class for all catalog errors."""


class ProviderConfigurationError(CatalogError, ValueError):
    """A provider adapter is missing required credentials or endpoints."""

    def __init__(self, message: str, provider: str | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.provider = provider


class ModelLookupError(CatalogError, LookupError):
    """A model name could not be resolved to exactly one registered model."""

    def __init__(self, message: str, name: str | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.name = name

    def __str__(self) -> str:
        return self.message


class ModelNotFoundError(ModelLookupError):
    """No registered model matches the requested name or pattern."""


class AmbiguousModelError(ModelLookupError):
    """A wildcard pattern matched more than one registered model."""

    def __init__(self, message: str, name: str | None = None, matches: list[str] | None = None) -> None:
        super().__init__(message, name)
        self.matches = matches or []


class UnknownFeatureError(ModelLookupError):
    """A feature query references a feature the model does not declare."""


class UnknownCategoryError(ModelLookupError):
    """The requested model category does not exist."""


class FeatureValidationError(CatalogError, ValueError):
    """A feature value does not satisfy its declared type or bounds."""

    def __init__(self, message: str, feature: str | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.feature = feature


class RequirementSyntaxError(CatalogError, ValueError):
    """A requirement condition could not be parsed or applied."""


class NoOnlineModelError(CatalogError, RuntimeError):
    """Every model passing a requirement filter is offline."""
