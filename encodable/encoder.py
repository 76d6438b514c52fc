"""Encoder facade: registration, declarations and serialization.

Usage:
    from encodable import declare_encodable, register, serialize

    @register
    class User(Base):
        ...

    declare_encodable(User, "login", "first_name", {"id": "identifier"})
    serialize(user, {"include": "permissions"})
"""

import json
import logging
from typing import Any, Mapping

from encodable.adapters.sqlalchemy import ModelAdapter, SQLAlchemyModelAdapter
from encodable.config import Settings, get_settings
from encodable.planning.options import Options
from encodable.planning.planner import Planner
from encodable.registry.attributes import AttributeDeclaration
from encodable.registry.declarations import RegistryStore, TypeRegistry
from encodable.serializers import ModelSerializer

logger = logging.getLogger(__name__)


class Encoder:
    """Owns the declaration store and serializes registered models."""

    def __init__(
        self,
        adapter: ModelAdapter | None = None,
        serializer: ModelSerializer | None = None,
        settings: Settings | None = None,
    ):
        """
        Initialize encoder.

        Args:
            adapter: Model introspection. If None, uses SQLAlchemy introspection.
            serializer: Generic serializer. If None, builds a ModelSerializer.
            settings: Settings. If None, reads from environment.
        """
        self.settings = settings or get_settings()
        self.adapter = adapter or SQLAlchemyModelAdapter()
        self.serializer = serializer or ModelSerializer(self.adapter, self.settings)
        self.serializer.nested = self.serialize
        self.store = RegistryStore(self.adapter.native_field_names, separator=self.settings.prefix_separator)
        self.planner = Planner(self.store, self.adapter, self.serializer.serialize)

    def register(self, model: type) -> type:
        """Attach declaration handling to a model class; usable as a decorator."""
        if not self.store.is_registered(model):
            self.store.register(model)
            logger.info("Registered %s for encodable serialization", model.__name__)
        return model

    def is_managed(self, model: type) -> bool:
        return self.store.is_managed(model)

    def registry(self, model: type) -> TypeRegistry:
        """Get the declaration registry of a model, registering it if needed."""
        if not self.store.is_managed(model):
            self.register(model)
        return self.store.registry_for(model)

    def declare_encodable(
        self, model: type, *attributes: str | Mapping[str, str], **options: Any
    ) -> list[AttributeDeclaration]:
        """
        Whitelist attributes, methods or associations of a model.

        Args:
            model: Model class
            *attributes: Bare names or {source: exposed} mappings
            **options: ``prefix`` is the only recognized option

        Returns:
            The recorded declarations

        Raises:
            ConfigurationError: If an unknown option is given
        """
        return self.registry(model).declare_encodable(attributes, **options)

    def declare_unencodable(self, model: type, *attributes: str) -> None:
        """Blacklist attributes of a model."""
        self.registry(model).declare_unencodable(attributes)

    def serialize(self, instance: Any, options: Options | None = None) -> dict[str, Any]:
        """
        Serialize an instance to a nested dictionary.

        Instances of classes that are not managed are serialized without
        any declarations applied.
        """
        if not self.store.is_managed(type(instance)):
            return self.serializer.serialize(instance, options)
        return self.planner.serialize(instance, options)

    def to_json(self, instance: Any, options: Options | None = None, **dumps_kwargs: Any) -> str:
        """Serialize an instance to a JSON string."""
        return json.dumps(self.serialize(instance, options), **dumps_kwargs)

    def reset(self, model: type | None = None) -> None:
        """Clear declarations of one model, or of every model (useful for testing)."""
        self.store.reset(model)
        if model is None:
            self.adapter.reset()


# Global encoder instance
_encoder: Encoder | None = None


def get_encoder() -> Encoder:
    """Get or create the global encoder instance."""
    global _encoder
    if _encoder is None:
        _encoder = Encoder()
    return _encoder


def reset_encoder() -> None:
    """Reset the global encoder instance (useful for testing)."""
    global _encoder
    _encoder = None


def register(model: type) -> type:
    return get_encoder().register(model)


def declare_encodable(model: type, *attributes: str | Mapping[str, str], **options: Any) -> list[AttributeDeclaration]:
    return get_encoder().declare_encodable(model, *attributes, **options)


def declare_unencodable(model: type, *attributes: str) -> None:
    get_encoder().declare_unencodable(model, *attributes)


def serialize(instance: Any, options: Options | None = None) -> dict[str, Any]:
    return get_encoder().serialize(instance, options)


def to_json(instance: Any, options: Options | None = None, **dumps_kwargs: Any) -> str:
    return get_encoder().to_json(instance, options, **dumps_kwargs)


def reset(model: type | None = None) -> None:
    get_encoder().reset(model)
