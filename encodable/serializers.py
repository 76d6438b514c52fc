"""Generic model serialization to nested dictionaries.

Recognized options:
    only: Names of native fields to keep; every other field is dropped
    except: Names of native fields to drop (ignored when ``only`` is given)
    methods: Names of methods or properties whose values are added
    include: Associations to nest. A name or list of names inherits the
             parent's ``only``/``except``; a mapping gives each association
             its own options.
"""

from typing import Any, Callable, Mapping

from encodable.adapters.sqlalchemy import ModelAdapter
from encodable.config import Settings, get_settings
from encodable.planning.options import EXCEPT, INCLUDE, METHODS, ONLY, Options, as_name_list


class ModelSerializer:
    """Serializes SQLAlchemy model instances with only/except/include/methods."""

    def __init__(self, adapter: ModelAdapter, settings: Settings | None = None):
        self.adapter = adapter
        self.settings = settings or get_settings()
        # Re-entry point for nested instances; set by the encoder
        self.nested: Callable[[Any, Options], dict[str, Any]] | None = None

    def serialize(self, obj: Any, options: Options | None = None) -> dict[str, Any]:
        """
        Serialize a model instance to dictionary.

        Args:
            obj: SQLAlchemy model instance
            options: Serialization options

        Returns:
            Dictionary representation of the model
        """
        options = options or {}
        fields = self.adapter.native_field_names(type(obj))

        if options.get(ONLY) is not None:
            only = set(as_name_list(options[ONLY]))
            names = [name for name in fields if name in only]
        else:
            excluded = set(as_name_list(options.get(EXCEPT)))
            names = [name for name in fields if name not in excluded]

        result = {name: self.encode_value(getattr(obj, name)) for name in names}

        for name in as_name_list(options.get(METHODS)):
            value = getattr(obj, name)
            if callable(value):
                value = value()
            result[name] = self.encode_value(value)

        for name, nested_options in self._include_entries(options):
            result[name] = self._serialize_related(getattr(obj, name), nested_options)

        return result

    def _include_entries(self, options: Options) -> list[tuple[str, Options]]:
        include = options.get(INCLUDE)
        if include is None:
            return []
        if isinstance(include, Mapping):
            return [(str(name), nested or {}) for name, nested in include.items()]
        inherited = {key: options[key] for key in (ONLY, EXCEPT) if options.get(key) is not None}
        return [(name, dict(inherited)) for name in as_name_list(include)]

    def _serialize_related(self, related: Any, options: Options) -> Any:
        if related is None:
            return None
        if isinstance(related, (list, tuple, set)):
            return [self.serialize_nested(item, options) for item in related]
        return self.serialize_nested(related, options)

    def serialize_nested(self, obj: Any, options: Options) -> dict[str, Any]:
        if self.nested is not None:
            return self.nested(obj, options)
        return self.serialize(obj, options)

    def encode_value(self, value: Any) -> Any:
        if self.settings.datetime_isoformat and hasattr(value, "isoformat"):
            return value.isoformat()
        return value
