"""
Association resolution.

Relationships reported by a backend adapter become association fields:

- many-to-one: a select over the target resource
- one-to-many: a nested list of target entities
- embeds_one / embeds_many: nested sub-forms backed by a synthesized
  resource named `<parent>__<field>`

Targets of many-to-one and one-to-many relationships are matched against
the declared resources by schema. An unmatched target leaves the field's
`data.resource` unset; the field is kept and renders empty.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from typing import Any

from pydantic import BaseModel, ConfigDict

from uiforge.adapters.base import BackendAdapter

from .errors import EmbedCycleError, ErrorContext
from .ir import (
    AssociationData,
    EmbedData,
    FieldSpec,
    FieldType,
    HtmlType,
    RelationshipKind,
    RelationshipMeta,
)
from .naming import NamingPolicy
from .strings import humanize

logger = logging.getLogger(__name__)

EMBED_SEPARATOR = "__"


class EmbeddedResource(BaseModel):
    """A resource synthesized from an embed relationship."""

    name: str
    schema_ref: Any
    parent: str
    owner: Any

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)


def embedded_resource_name(parent: str, field_key: str) -> str:
    """
    Name of the resource synthesized for an embed.

    Examples:
        >>> embedded_resource_name("post__comment", "reply")
        'post__comment__reply'
    """
    return f"{parent}{EMBED_SEPARATOR}{field_key}"


def match_resource(destination: Any, known: Iterable[tuple[str, Any]]) -> str | None:
    """First known resource name whose schema is `destination`."""
    for name, schema in known:
        if schema is not None and schema is destination:
            return name
    return None


def _relationship_field(
    relationship: RelationshipMeta,
    schema: Any,
    resource_name: str,
    known: list[tuple[str, Any]],
    naming: NamingPolicy,
) -> FieldSpec:
    key = relationship.name
    flags = {
        "disabled": naming.is_disabled(key),
        "hidden": naming.is_hidden(key),
        "omitted": naming.is_omitted(key),
    }

    if relationship.kind.is_embed:
        embed_name = embedded_resource_name(resource_name, key)
        many = relationship.kind == RelationshipKind.EMBEDS_MANY
        return FieldSpec(
            key=key,
            type=FieldType.EMBEDS_MANY if many else FieldType.EMBEDS_ONE,
            html_type=HtmlType.EMBEDS_MANY if many else HtmlType.EMBEDS_ONE,
            resource=resource_name,
            label=humanize(f"{resource_name} {key}") if many else humanize(key),
            filterable=False,
            data=EmbedData(owner=schema, resource=embed_name, related=relationship.destination),
            **flags,
        )

    target = match_resource(relationship.destination, known)
    if target is None:
        logger.warning(
            f"{resource_name}.{key}: no resource registered for "
            f"{getattr(relationship.destination, '__name__', relationship.destination)!r}; "
            "field will render empty"
        )

    many_to_one = relationship.kind == RelationshipKind.MANY_TO_ONE
    return FieldSpec(
        key=key,
        type=FieldType.MANY_TO_ONE if many_to_one else FieldType.ONE_TO_MANY,
        html_type=HtmlType.SELECT if many_to_one else HtmlType.ONE_TO_MANY,
        resource=resource_name,
        label=humanize(key),
        placeholder=humanize(key),
        filterable=many_to_one,
        data=AssociationData(
            resource=target,
            related=relationship.destination,
            owner_key=relationship.owner_key,
            related_key=relationship.related_key,
        ),
        **flags,
    )


def resolve_associations(
    adapter: BackendAdapter,
    schema: Any,
    resource_name: str,
    known: Iterable[tuple[str, Any]],
    naming: NamingPolicy | None = None,
) -> list[FieldSpec]:
    """
    Association and embed fields of a schema, in relationship order.

    Args:
        adapter: Adapter of the owning resource
        schema: Schema of the owning resource
        resource_name: Name of the owning resource
        known: (resource name, schema) pairs of every declared resource
        naming: Naming policy for disabled/hidden/omitted flags
    """
    naming = naming or NamingPolicy()
    known = list(known)
    fields = [
        _relationship_field(relationship, schema, resource_name, known, naming)
        for relationship in adapter.list_relationships(schema)
    ]
    if fields:
        logger.debug(f"{resource_name}: associations {[f.key for f in fields]}")
    return fields


def resolve_embeds(
    adapter: BackendAdapter,
    resource_name: str,
    schema: Any,
    _chain: tuple[Any, ...] = (),
) -> list[EmbeddedResource]:
    """
    Resources synthesized for the embeds of a schema, depth first.

    Raises:
        EmbedCycleError: If an embed chain leads back to a schema already on it
    """
    if schema is None:
        return []

    chain = (*_chain, schema)
    embedded: list[EmbeddedResource] = []
    for relationship in adapter.list_relationships(schema):
        if not relationship.kind.is_embed:
            continue

        name = embedded_resource_name(resource_name, relationship.name)
        if any(relationship.destination is seen for seen in chain):
            path = " -> ".join(
                getattr(s, "__name__", repr(s)) for s in (*chain, relationship.destination)
            )
            raise EmbedCycleError(
                f"Embedded schemas form a cycle: {path}",
                ErrorContext(resource=resource_name, subject=f"embed {relationship.name}"),
            )

        logger.debug(f"{resource_name}: synthesizing embedded resource '{name}'")
        embedded.append(
            EmbeddedResource(
                name=name,
                schema_ref=relationship.destination,
                parent=resource_name,
                owner=schema,
            )
        )
        embedded.extend(resolve_embeds(adapter, name, relationship.destination, chain))
    return embedded
