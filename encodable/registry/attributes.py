"""Value types recorded by attribute declarations."""

from dataclasses import dataclass


@dataclass(frozen=True)
class AttributeDeclaration:
    """An always-included attribute and the key it is exposed under."""

    source: str
    exposed: str

    @property
    def renamed(self) -> bool:
        return self.source != self.exposed


@dataclass(frozen=True)
class BlacklistOperation:
    """A single change to a type's blacklist, in declaration order."""

    name: str
    hidden: bool = True
