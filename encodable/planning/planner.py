"""Serialization planning.

The planner merges a model's resolved declarations with the options of one
serialization call and hands the result to the serializer:

- ``only`` bypasses every declaration.
- The declared blacklist is added to ``except``.
- Declared associations are added to ``include`` and declared methods to
  ``methods``.
- Exclusions the caller passed are forwarded to included associations,
  minus the model's own default attribute names. Otherwise a parent that
  forces, say, ``id`` into its own output would strip ``id`` from every
  nested association serialized with it.
- Renames are applied to the serialized mapping last.
"""

import logging
from typing import Any, Callable

from encodable.adapters.sqlalchemy import AttributeKind, ModelAdapter
from encodable.planning.options import (
    EXCEPT,
    INCLUDE,
    METHODS,
    ONLY,
    Options,
    SerializationPlan,
    as_name_list,
    build_include,
    parse_include,
)
from encodable.planning.renamer import apply_renames
from encodable.registry.declarations import RegistryStore

logger = logging.getLogger(__name__)

SerializeFunc = Callable[[Any, Options], dict[str, Any]]


class Planner:
    """Computes serializer options from declarations and call options."""

    def __init__(self, store: RegistryStore, adapter: ModelAdapter, serialize: SerializeFunc):
        """
        Initialize planner.

        Args:
            store: Registry store holding declarations
            adapter: Model introspection used to classify declared names
            serialize: Generic serializer invoked with the planned options
        """
        self.store = store
        self.adapter = adapter
        self.serialize_raw = serialize

    def plan(self, instance: Any, options: Options | None = None) -> SerializationPlan | None:
        """
        Plan the serializer options for one call.

        Args:
            instance: Model instance being serialized
            options: Caller options (``only``, ``except``, ``include``, ``methods``, ...)

        Returns:
            The plan, or None when ``only`` is given and declarations are bypassed
        """
        options = dict(options or {})
        if options.get(ONLY) is not None:
            return None

        model = type(instance)
        resolved = self.store.registry_for(model).resolved

        explicit_except = set(as_name_list(options.pop(EXCEPT, None)))
        propagated_except = explicit_except - resolved.default_sources

        include, authored = build_include(parse_include(options.pop(INCLUDE, None)), propagated_except)
        plan = SerializationPlan(
            except_=explicit_except | resolved.unencodable,
            include=include,
            methods=as_name_list(options.pop(METHODS, None)),
            passthrough=options,
            authored_includes=authored,
        )

        for declaration in resolved.default_attributes:
            kind = self.adapter.classify(model, declaration.source)
            if kind is AttributeKind.ASSOCIATION:
                if declaration.source not in plan.authored_includes:
                    plan.include[declaration.source] = {EXCEPT: set(propagated_except)}
            elif kind is AttributeKind.METHOD:
                plan.add_method(declaration.source)

        logger.debug(
            "Planned %s: except=%s include=%s methods=%s",
            model.__name__,
            sorted(plan.except_),
            sorted(plan.include),
            plan.methods,
        )
        return plan

    def serialize(self, instance: Any, options: Options | None = None) -> dict[str, Any]:
        """Serialize an instance with its declarations applied."""
        plan = self.plan(instance, options)
        if plan is None:
            return self.serialize_raw(instance, options)

        raw = self.serialize_raw(instance, plan.to_options())
        return apply_renames(raw, self.store.registry_for(type(instance)).renames)
