"""Model introspection adapters."""

from encodable.adapters.sqlalchemy import AttributeKind, ModelAdapter, SQLAlchemyModelAdapter

__all__ = ["AttributeKind", "ModelAdapter", "SQLAlchemyModelAdapter"]
