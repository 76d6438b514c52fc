"""Per-model control over which attributes appear in serialized output."""

from encodable.encoder import (
    Encoder,
    declare_encodable,
    declare_unencodable,
    get_encoder,
    register,
    reset,
    reset_encoder,
    serialize,
    to_json,
)
from encodable.exceptions import ConfigurationError, EncodableError, UnmappedModelError

__all__ = [
    "ConfigurationError",
    "EncodableError",
    "Encoder",
    "UnmappedModelError",
    "declare_encodable",
    "declare_unencodable",
    "get_encoder",
    "register",
    "reset",
    "reset_encoder",
    "serialize",
    "to_json",
]
