"""SQLAlchemy model introspection.

Answers the questions the planner asks about a model class: which names are
native persisted fields, which are relationships, and which are plain
methods or properties. A declared name is classified once per class and the
answer is cached.
"""

import inspect
import logging
import threading
from enum import Enum
from typing import Any, Protocol

from sqlalchemy import inspect as sqlalchemy_inspect
from sqlalchemy.exc import NoInspectionAvailable
from sqlalchemy.ext.hybrid import hybrid_method, hybrid_property
from sqlalchemy.orm import Mapper

from encodable.exceptions import UnmappedModelError

logger = logging.getLogger(__name__)


class AttributeKind(str, Enum):
    """Classification of a declared attribute name."""

    FIELD = "field"
    ASSOCIATION = "association"
    METHOD = "method"
    UNKNOWN = "unknown"


class ModelAdapter(Protocol):
    """Model introspection used by the registry, planner and serializer."""

    def is_model(self, obj: Any) -> bool: ...

    def native_field_names(self, model: type) -> list[str]: ...

    def is_association(self, model: type, name: str) -> bool: ...

    def classify(self, model: type, name: str) -> AttributeKind: ...

    def reset(self) -> None: ...


class SQLAlchemyModelAdapter:
    """Introspects SQLAlchemy declarative classes."""

    def __init__(self):
        self._kinds: dict[tuple[type, str], AttributeKind] = {}
        self._lock = threading.Lock()

    @staticmethod
    def _mapper(model: type) -> Mapper:
        try:
            mapper = sqlalchemy_inspect(model)
        except NoInspectionAvailable as e:
            raise UnmappedModelError(model) from e
        if not isinstance(mapper, Mapper):
            raise UnmappedModelError(model)
        return mapper

    def is_model(self, obj: Any) -> bool:
        """Check if object is a mapped class or an instance of one."""
        model = obj if isinstance(obj, type) else type(obj)
        return sqlalchemy_inspect(model, raiseerr=False) is not None

    def native_field_names(self, model: type) -> list[str]:
        """
        Get the column attribute keys of a model, in mapper order.

        Reads ``Mapper.columns``, which does not configure mappers, so this is
        safe while related classes are still being declared.
        """
        return list(self._mapper(model).columns.keys())

    def is_association(self, model: type, name: str) -> bool:
        return name in self._mapper(model).relationships

    def classify(self, model: type, name: str) -> AttributeKind:
        """Classify a name on a model, caching the answer."""
        key = (model, name)
        kind = self._kinds.get(key)
        if kind is None:
            kind = self._classify(model, name)
            with self._lock:
                self._kinds[key] = kind
            logger.debug("Classified %s.%s as %s", model.__name__, name, kind.value)
        return kind

    def _classify(self, model: type, name: str) -> AttributeKind:
        if self.is_association(model, name):
            return AttributeKind.ASSOCIATION
        if name in self.native_field_names(model):
            return AttributeKind.FIELD

        attribute = inspect.getattr_static(model, name, None)
        if isinstance(attribute, (property, hybrid_property, hybrid_method)):
            return AttributeKind.METHOD
        if isinstance(attribute, (staticmethod, classmethod)) or callable(attribute):
            return AttributeKind.METHOD
        return AttributeKind.UNKNOWN

    def reset(self) -> None:
        """Forget cached classifications."""
        with self._lock:
            self._kinds.clear()
