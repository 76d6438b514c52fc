"""Declaration registry and inheritance resolution."""

from encodable.registry.attributes import AttributeDeclaration, BlacklistOperation
from encodable.registry.declarations import (
    RegistryStore,
    ResolvedView,
    TypeRegistry,
    build_declarations,
)
from encodable.registry.resolver import (
    resolve_default_attributes,
    resolve_renames,
    resolve_unencodable,
)

__all__ = [
    "AttributeDeclaration",
    "BlacklistOperation",
    "RegistryStore",
    "ResolvedView",
    "TypeRegistry",
    "build_declarations",
    "resolve_default_attributes",
    "resolve_renames",
    "resolve_unencodable",
]
