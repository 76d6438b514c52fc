"""Merging of a type's own declarations with its ancestor's resolved view."""

from typing import Iterable

from encodable.registry.attributes import AttributeDeclaration, BlacklistOperation


def resolve_default_attributes(
    inherited: Iterable[AttributeDeclaration],
    own: Iterable[AttributeDeclaration],
) -> tuple[AttributeDeclaration, ...]:
    """Ancestor's sequence followed by own declarations in call order."""
    return tuple(inherited) + tuple(own)


def resolve_unencodable(
    inherited: Iterable[str],
    operations: Iterable[BlacklistOperation],
) -> frozenset[str]:
    """
    Apply own blacklist operations on top of the inherited blacklist.

    Args:
        inherited: Resolved blacklist of the ancestor
        operations: Own (name, hidden) operations in call order; hidden=False
                    un-blacklists a whitelisted name

    Returns:
        Resolved blacklist
    """
    names = set(inherited)
    for operation in operations:
        if operation.hidden:
            names.add(operation.name)
        else:
            names.discard(operation.name)
    return frozenset(names)


def resolve_renames(default_attributes: Iterable[AttributeDeclaration]) -> dict[str, str]:
    """
    Compute the source -> exposed map from resolved default attributes.

    The last declaration for a source decides its exposed name, so a plain
    re-declaration removes an inherited rename.
    """
    exposed_by_source: dict[str, str] = {}
    for declaration in default_attributes:
        exposed_by_source[declaration.source] = declaration.exposed
    return {
        source: exposed
        for source, exposed in exposed_by_source.items()
        if source != exposed
    }
