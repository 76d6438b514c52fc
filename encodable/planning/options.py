"""Normalization of per-call serialization options.

Callers pass options as a plain mapping with the keys ``only``, ``except``,
``include`` and ``methods``. ``include`` takes three shapes (a single name, a
list of names, or a mapping of name to nested options) and is parsed once
into a closed set of variants.
"""

from dataclasses import dataclass, field
from typing import Any, Iterable, Mapping, Union

ONLY = "only"
EXCEPT = "except"
INCLUDE = "include"
METHODS = "methods"

Options = Mapping[str, Any]


def as_name_list(value: Any) -> list[str]:
    """Normalize a name, an iterable of names, or None to a list of names."""
    if value is None:
        return []
    if isinstance(value, str):
        return [value]
    return [str(name) for name in value]


@dataclass(frozen=True)
class SingleInclude:
    name: str

    @property
    def names(self) -> tuple[str, ...]:
        return (self.name,)


@dataclass(frozen=True)
class ManyInclude:
    names: tuple[str, ...]


@dataclass(frozen=True)
class DetailedInclude:
    """Caller-authored options per association; never rewritten."""

    entries: Mapping[str, Options]


IncludeOption = Union[SingleInclude, ManyInclude, DetailedInclude]


def parse_include(value: Any) -> IncludeOption | None:
    """Parse the ``include`` option into its variant, or None when absent."""
    if value is None:
        return None
    if isinstance(value, str):
        return SingleInclude(value)
    if isinstance(value, Mapping):
        return DetailedInclude(
            {str(name): dict(options or {}) for name, options in value.items()}
        )
    return ManyInclude(tuple(as_name_list(value)))


@dataclass
class SerializationPlan:
    """Concrete options handed to the serializer."""

    except_: set[str] = field(default_factory=set)
    include: dict[str, dict[str, Any]] = field(default_factory=dict)
    methods: list[str] = field(default_factory=list)
    passthrough: dict[str, Any] = field(default_factory=dict)
    authored_includes: frozenset[str] = frozenset()

    def add_method(self, name: str) -> None:
        if name not in self.methods:
            self.methods.append(name)

    def to_options(self) -> dict[str, Any]:
        options = dict(self.passthrough)
        options[EXCEPT] = self.except_
        options[INCLUDE] = self.include
        options[METHODS] = self.methods
        return options


def build_include(
    option: IncludeOption | None,
    propagated_except: Iterable[str],
) -> tuple[dict[str, dict[str, Any]], frozenset[str]]:
    """
    Expand an include option into a per-association mapping.

    Args:
        option: Parsed include option
        propagated_except: Exclusions forwarded to bare-name includes

    Returns:
        The include mapping and the names the caller configured explicitly
    """
    if option is None:
        return {}, frozenset()
    if isinstance(option, DetailedInclude):
        return dict(option.entries), frozenset(option.entries)
    return {name: {EXCEPT: set(propagated_except)} for name in option.names}, frozenset()
