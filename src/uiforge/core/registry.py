"""
Resource registry assembly.

Registration runs in two passes over the declarations:

1. Select an adapter per declaration and collect (name, schema) pairs, so
   associations can be matched against every declared resource regardless
   of declaration order.
2. Resolve fields, associations and operations of each declaration, then
   synthesize the resources of its embeds.

The result is a plain name -> ResourceSpec mapping; nothing is global.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass, field
from typing import Any

from uiforge.adapters import BackendAdapter, select_adapter

from .associations import EmbeddedResource, resolve_associations, resolve_embeds
from .declarations import ResourceDeclaration
from .errors import ConfigurationError, ErrorContext, QueryError, RegistryError
from .field_resolver import customize_fields, derive_field
from .ir import FieldSpec, ResourceSpec
from .naming import NamingPolicy
from .operations import resolve_operations
from .query import parse_order_by

logger = logging.getLogger(__name__)


@dataclass
class ResourceRegistry:
    """
    Resources registered during one compile.

    Tracks which declaration each resource came from so duplicate names
    can be reported against both sources.
    """

    naming: NamingPolicy = field(default_factory=NamingPolicy)
    resources: dict[str, ResourceSpec] = field(default_factory=dict)

    # Track the declared resource each name came from (for error reporting)
    sources: dict[str, str] = field(default_factory=dict)

    def add(self, resource: ResourceSpec, source: str) -> None:
        """Add a resource, checking for duplicates."""
        if resource.name in self.resources:
            existing = self.sources.get(resource.name, "unknown")
            raise RegistryError(
                f"Duplicate resource '{resource.name}' registered by "
                f"'{existing}' and '{source}'"
            )
        self.resources[resource.name] = resource
        self.sources[resource.name] = source

    def discover_fields(
        self,
        adapter: BackendAdapter,
        schema: Any,
        resource_name: str,
        known: list[tuple[str, Any]],
    ) -> list[FieldSpec]:
        """Attribute fields followed by association and embed fields."""
        attributes = [
            derive_field(attribute, resource_name, self.naming)
            for attribute in adapter.list_attributes(schema)
        ]
        associations = resolve_associations(adapter, schema, resource_name, known, self.naming)
        return [*attributes, *associations]

    def register_declared(
        self,
        declaration: ResourceDeclaration,
        adapter: BackendAdapter,
        known: list[tuple[str, Any]],
    ) -> None:
        name = declaration.name
        discovered = self.discover_fields(adapter, declaration.schema_ref, name, known)
        fields, order = customize_fields(discovered, declaration.fields, name, self.naming)

        opts = dict(declaration.opts)
        if "order_by" in opts:
            _check_order_by(name, opts["order_by"])

        self.add(
            ResourceSpec(
                name=name,
                backend_kind=adapter.kind,
                schema_ref=declaration.schema_ref,
                context_ref=declaration.context,
                fields=fields,
                fields_order=order,
                operations=resolve_operations(adapter, declaration),
                opts=opts,
                adapter=adapter,
            ),
            name,
        )
        logger.debug(f"Registered resource '{name}' ({adapter.kind.value})")

        for embedded in resolve_embeds(adapter, name, declaration.schema_ref):
            self.register_embedded(embedded, adapter, known, name)

    def register_embedded(
        self,
        embedded: EmbeddedResource,
        adapter: BackendAdapter,
        known: list[tuple[str, Any]],
        source: str,
    ) -> None:
        discovered = self.discover_fields(adapter, embedded.schema_ref, embedded.name, known)
        self.add(
            ResourceSpec(
                name=embedded.name,
                backend_kind=adapter.kind,
                schema_ref=embedded.schema_ref,
                fields={f.key: f for f in discovered},
                fields_order=tuple(f.key for f in discovered),
                embedded_in=embedded.parent,
                adapter=adapter,
            ),
            source,
        )
        logger.debug(f"Registered embedded resource '{embedded.name}'")


def _check_order_by(resource: str, order_by: Any) -> None:
    try:
        parse_order_by(order_by)
    except (QueryError, TypeError, ValueError) as e:
        raise ConfigurationError(
            f"Invalid order_by {order_by!r}: {e}",
            ErrorContext(resource=resource, subject="order_by"),
        ) from e


def build_registry(
    declarations: Iterable[ResourceDeclaration],
    naming: NamingPolicy | None = None,
) -> dict[str, ResourceSpec]:
    """
    Resolve every declaration into the resource registry.

    Raises:
        RegistryError: On duplicate resource names or unknown backends
        ConfigurationError: On any field, operation or option defect
    """
    registry = ResourceRegistry(naming=naming or NamingPolicy())
    declarations = list(declarations)

    adapters: list[BackendAdapter] = []
    seen: set[str] = set()
    for declaration in declarations:
        if declaration.name in seen:
            raise RegistryError(f"Duplicate resource '{declaration.name}' declared")
        seen.add(declaration.name)
        adapters.append(
            select_adapter(declaration.schema_ref, declaration.context, declaration.name)
        )

    known = [(d.name, d.schema_ref) for d in declarations]
    for declaration, adapter in zip(declarations, adapters, strict=True):
        registry.register_declared(declaration, adapter, known)

    logger.debug(f"Registry holds {len(registry.resources)} resources")
    return registry.resources
