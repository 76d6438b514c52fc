"""Per-type storage of attribute declarations.

A ``TypeRegistry`` records what one class declared itself: whitelist entries
(with renames and prefixes applied), blacklist entries and whether the
blacklist has been seeded with the class's native fields. Resolved views,
merged with the nearest managed ancestor, are computed lazily and cached
until a declaration on the class or one of its ancestors drops them.

The ``RegistryStore`` owns every ``TypeRegistry`` and knows which classes
are managed (registered, or subclasses of a registered class).
"""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass
from typing import Any, Callable, Iterable, Mapping

from encodable.exceptions import ConfigurationError
from encodable.registry.attributes import AttributeDeclaration, BlacklistOperation
from encodable.registry.resolver import (
    resolve_default_attributes,
    resolve_renames,
    resolve_unencodable,
)

logger = logging.getLogger(__name__)

NativeFieldSource = Callable[[type], Iterable[str]]

# Keywords accepted by declare_encodable
DECLARATION_OPTIONS = frozenset({"prefix"})


@dataclass(frozen=True)
class ResolvedView:
    """Ancestor-merged declarations of one type."""

    default_attributes: tuple[AttributeDeclaration, ...]
    unencodable: frozenset[str]
    renames: Mapping[str, str]

    @property
    def default_sources(self) -> frozenset[str]:
        return frozenset(declaration.source for declaration in self.default_attributes)


EMPTY_VIEW = ResolvedView(default_attributes=(), unencodable=frozenset(), renames={})


def build_declarations(
    attributes: Iterable[str | Mapping[str, str]],
    prefix: str | None = None,
    separator: str = "_",
) -> list[AttributeDeclaration]:
    """
    Turn declare_encodable arguments into attribute declarations.

    Args:
        attributes: Bare source names or {source: exposed} mappings
        prefix: Optional prefix applied to every exposed name
        separator: String placed between prefix and exposed name

    Returns:
        Declarations in argument order

    Raises:
        ConfigurationError: If an element is neither a name nor a mapping, or the
                            prefix is empty
    """
    if prefix is not None and not str(prefix):
        raise ConfigurationError("Encodable prefix cannot be empty", "prefix")

    pairs: list[tuple[str, str]] = []
    for attribute in attributes:
        if isinstance(attribute, Mapping):
            pairs.extend((str(source), str(exposed)) for source, exposed in attribute.items())
        elif isinstance(attribute, str):
            pairs.append((attribute, attribute))
        else:
            raise ConfigurationError(
                f"Encodable attributes must be names or mappings, got {attribute!r}"
            )

    declarations = []
    for source, exposed in pairs:
        if prefix is not None:
            exposed = f"{prefix}{separator}{exposed}"
        declarations.append(AttributeDeclaration(source=source, exposed=exposed))
    return declarations


class TypeRegistry:
    """Declarations made on one model class."""

    def __init__(self, model: type, store: RegistryStore):
        self.model = model
        self.store = store
        self.whitelist_seeded = False
        self._own_attributes: list[AttributeDeclaration] = []
        self._own_operations: list[BlacklistOperation] = []
        self._resolved: ResolvedView | None = None

    @property
    def own_attributes(self) -> tuple[AttributeDeclaration, ...]:
        return tuple(self._own_attributes)

    @property
    def own_unencodable(self) -> frozenset[str]:
        return resolve_unencodable((), self._own_operations)

    def declare_encodable(
        self,
        attributes: Iterable[str | Mapping[str, str]],
        **options: Any,
    ) -> list[AttributeDeclaration]:
        """
        Whitelist attributes, seeding the blacklist on first use.

        Args:
            attributes: Bare source names or {source: exposed} mappings
            **options: Declaration options; only ``prefix`` is recognized

        Returns:
            The declarations that were recorded

        Raises:
            ConfigurationError: If an unknown option or malformed attribute is given
        """
        unknown = sorted(set(options) - DECLARATION_OPTIONS)
        if unknown:
            raise ConfigurationError(
                f"Unknown encodable option(s) for {self.model.__name__}: {', '.join(unknown)}",
                unknown[0],
            )
        declarations = build_declarations(attributes, options.get("prefix"), self.store.separator)

        with self.store.lock:
            if not self.whitelist_seeded:
                self._seed_blacklist()
            for declaration in declarations:
                self._own_operations.append(BlacklistOperation(declaration.source, hidden=False))
                self._own_attributes.append(declaration)
            self.store.invalidate(self.model)

        logger.debug(
            "%s declared encodable: %s",
            self.model.__name__,
            ", ".join(f"{d.source}->{d.exposed}" if d.renamed else d.source for d in declarations),
        )
        return declarations

    def declare_unencodable(self, names: Iterable[str]) -> None:
        """Blacklist names without seeding or touching default attributes."""
        names = [str(name) for name in names]
        with self.store.lock:
            self._own_operations.extend(BlacklistOperation(name) for name in names)
            self.store.invalidate(self.model)
        logger.debug("%s declared unencodable: %s", self.model.__name__, ", ".join(names))

    def _seed_blacklist(self) -> None:
        seeded = list(self.store.native_fields(self.model))
        self._own_operations.extend(BlacklistOperation(name) for name in seeded)
        self.whitelist_seeded = True
        logger.debug("%s seeded blacklist with %d native field(s)", self.model.__name__, len(seeded))

    @property
    def resolved(self) -> ResolvedView:
        """Ancestor-merged view, computed once and cached."""
        resolved = self._resolved
        if resolved is None:
            with self.store.lock:
                if self._resolved is None:
                    inherited = self.store.inherited_view(self.model)
                    default_attributes = resolve_default_attributes(
                        inherited.default_attributes, self._own_attributes
                    )
                    self._resolved = ResolvedView(
                        default_attributes=default_attributes,
                        unencodable=resolve_unencodable(inherited.unencodable, self._own_operations),
                        renames=resolve_renames(default_attributes),
                    )
                resolved = self._resolved
        return resolved

    @property
    def default_attributes(self) -> tuple[AttributeDeclaration, ...]:
        return self.resolved.default_attributes

    @property
    def unencodable(self) -> frozenset[str]:
        return self.resolved.unencodable

    @property
    def renames(self) -> Mapping[str, str]:
        return self.resolved.renames

    def invalidate(self) -> None:
        self._resolved = None

    def __repr__(self) -> str:
        return f"<TypeRegistry(model={self.model.__name__!r}, seeded={self.whitelist_seeded!r})>"


class RegistryStore:
    """Type-keyed store of declaration registries."""

    def __init__(self, native_fields: NativeFieldSource, separator: str = "_"):
        """
        Initialize the store.

        Args:
            native_fields: Returns the native persisted field names of a model class
            separator: String placed between a declaration prefix and the exposed name
        """
        self.native_fields = native_fields
        self.separator = separator
        self.lock = threading.RLock()
        self._registered: set[type] = set()
        self._registries: dict[type, TypeRegistry] = {}

    def register(self, model: type) -> type:
        """Mark a class (and, through inheritance, its subclasses) as managed."""
        with self.lock:
            self._registered.add(model)
            self.invalidate(model)
        return model

    def is_registered(self, model: type) -> bool:
        return model in self._registered

    def is_managed(self, model: type) -> bool:
        """Check if the class or one of its ancestors is registered."""
        return any(base in self._registered for base in model.__mro__)

    def ancestor(self, model: type) -> type | None:
        """Nearest managed class in the MRO after the class itself."""
        for base in model.__mro__[1:]:
            if self.is_managed(base):
                return base
        return None

    def registry_for(self, model: type) -> TypeRegistry:
        """Get the registry of a class, creating it on first access."""
        registry = self._registries.get(model)
        if registry is None:
            with self.lock:
                registry = self._registries.setdefault(model, TypeRegistry(model, self))
        return registry

    def inherited_view(self, model: type) -> ResolvedView:
        """Resolved view of the nearest managed ancestor, or an empty view."""
        ancestor = self.ancestor(model)
        if ancestor is None:
            return EMPTY_VIEW
        return self.registry_for(ancestor).resolved

    def invalidate(self, model: type) -> None:
        """Drop cached views of a class and every subclass of it."""
        with self.lock:
            for registered_model, registry in self._registries.items():
                if issubclass(registered_model, model):
                    registry.invalidate()

    def reset(self, model: type | None = None) -> None:
        """
        Clear declarations.

        Args:
            model: Class whose declarations are dropped. If None, drops all.
                   Registrations are kept either way.
        """
        with self.lock:
            if model is None:
                self._registries.clear()
            else:
                self._registries.pop(model, None)
                self.invalidate(model)
