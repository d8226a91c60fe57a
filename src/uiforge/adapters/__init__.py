"""
Backend adapters.

`select_adapter` picks the adapter for a schema/context pair once, when a
resource is registered; the choice is stored on the resource.
"""

from typing import Any

from uiforge.core.errors import RegistryError

from .base import BackendAdapter
from .declarative import (
    Action,
    Attribute,
    DeclarativeAdapter,
    DeclarativeResource,
    Domain,
    Interface,
    Relationship,
    ResourceDefinition,
)
from .simple_schema import BelongsTo, HasMany, NativeType, SimpleSchemaAdapter

# Checked in order
ADAPTERS: tuple[type[BackendAdapter], ...] = (DeclarativeAdapter, SimpleSchemaAdapter)


def select_adapter(schema: Any, context: Any, resource_name: str) -> BackendAdapter:
    """Instantiate the adapter that understands `schema` and `context`."""
    for adapter_cls in ADAPTERS:
        if adapter_cls.handles(schema, context):
            return adapter_cls()
    raise RegistryError(
        f"No backend adapter understands schema {schema!r} of resource '{resource_name}'"
    )


__all__ = [
    "ADAPTERS",
    "Action",
    "Attribute",
    "BackendAdapter",
    "BelongsTo",
    "DeclarativeAdapter",
    "DeclarativeResource",
    "Domain",
    "HasMany",
    "Interface",
    "NativeType",
    "Relationship",
    "ResourceDefinition",
    "SimpleSchemaAdapter",
    "select_adapter",
]
