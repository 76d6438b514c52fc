"""Custom exceptions for encodable declarations and serialization."""

from typing import Any


class EncodableError(Exception):
    """Base exception for encodable errors."""

    pass


class ConfigurationError(EncodableError):
    """Raised when an attribute declaration is malformed."""

    def __init__(self, message: str, option: str | None = None):
        super().__init__(message)
        self.option = option


class UnmappedModelError(EncodableError):
    """Raised when a class cannot be introspected as a persisted model."""

    def __init__(self, model: Any):
        name = getattr(model, "__name__", repr(model))
        message = f"{name} is not a mapped model class"
        super().__init__(message)
        self.model = model
