"""Schema introspection and caching."""

from activerow.schema.cache import SchemaCache
from activerow.schema.introspector import SchemaIntrospector

__all__ = ["SchemaCache", "SchemaIntrospector"]
