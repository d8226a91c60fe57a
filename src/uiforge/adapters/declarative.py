"""
Declarative-action backend.

Resources subclass `DeclarativeResource` and describe themselves with a
`ResourceDefinition`: typed attributes, relationships and named actions
flagged `primary` and `pagination`. A `Domain` groups resources and exposes
actions under interface names, so an operation can be named through the
domain without knowing which resource implements it.

    class Product(DeclarativeResource):
        definition = ResourceDefinition(
            attributes=[Attribute(name="reference", type="string")],
            actions=[Action(name="read", kind=ActionKind.READ, primary=True)],
        )

    inventory = Domain(name="inventory", resources=[Product])
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import Any, ClassVar

from pydantic import BaseModel, ConfigDict, Field

from uiforge.core.ir import (
    ActionKind,
    ActionMeta,
    AttributeMeta,
    BackendKind,
    OperationName,
    RelationshipKind,
    RelationshipMeta,
)
from uiforge.core.query import ClauseQuery, QueryOptions, apply_to_clause_query

from .base import BackendAdapter

logger = logging.getLogger(__name__)


# =============================================================================
# Definition types
# =============================================================================


class Attribute(BaseModel):
    """A typed attribute of a declarative resource."""

    name: str
    type: str
    one_of: tuple[str, ...] | None = None
    allow_nil: bool = True

    model_config = ConfigDict(frozen=True)


class Relationship(BaseModel):
    """
    A relationship or embed of a declarative resource.

    `destination` is a resource class or a zero-argument callable returning
    one, for classes defined later in the module.
    """

    name: str
    kind: RelationshipKind
    destination: Any
    source_attribute: str | None = None
    destination_attribute: str | None = None

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)


class Action(BaseModel):
    """A named action of a declarative resource."""

    name: str
    kind: ActionKind
    primary: bool = False
    pagination: bool = False

    model_config = ConfigDict(frozen=True)


class ResourceDefinition(BaseModel):
    """Attributes, relationships and actions of a declarative resource."""

    attributes: list[Attribute] = Field(default_factory=list)
    relationships: list[Relationship] = Field(default_factory=list)
    actions: list[Action] = Field(default_factory=list)

    model_config = ConfigDict(frozen=True)


class DeclarativeResource:
    """
    Base class for declarative resources.

    Instances are plain attribute holders built from keyword arguments.
    """

    definition: ClassVar[ResourceDefinition] = ResourceDefinition()

    def __init__(self, **attrs: Any) -> None:
        for key, value in attrs.items():
            setattr(self, key, value)

    def __repr__(self) -> str:
        attrs = ", ".join(f"{k}={v!r}" for k, v in vars(self).items())
        return f"{type(self).__name__}({attrs})"


class Interface(BaseModel):
    """Exposes one action of one resource under a domain-level name."""

    name: str
    resource: Any
    action: str

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)


class Domain(BaseModel):
    """A group of declarative resources with named action interfaces."""

    name: str
    resources: list[Any] = Field(default_factory=list)
    interfaces: list[Interface] = Field(default_factory=list)

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    def resource_for(self, name: str) -> Any | None:
        """
        Resource that implements `name`.

        Interface names are checked first, then action names of member
        resources, in resource order.
        """
        for interface in self.interfaces:
            if interface.name == name:
                return interface.resource
        for resource in self.resources:
            if any(action.name == name for action in resource.definition.actions):
                return resource
        return None

    def action_name(self, name: str) -> str:
        """Action name behind an interface name (identity for plain names)."""
        for interface in self.interfaces:
            if interface.name == name:
                return interface.action
        return name


def _is_declarative(value: Any) -> bool:
    return isinstance(value, type) and issubclass(value, DeclarativeResource)


def _resolve_destination(destination: Any) -> Any:
    if callable(destination) and not isinstance(destination, type):
        return destination()
    return destination


# =============================================================================
# Adapter
# =============================================================================


class DeclarativeAdapter(BackendAdapter):
    """Adapter for `DeclarativeResource` classes grouped in a `Domain`."""

    kind: ClassVar[BackendKind] = BackendKind.DECLARATIVE
    operation_aliases: ClassVar[dict[OperationName, tuple[str, ...]]] = {
        OperationName.LIST: ("read_action",),
        OperationName.LIST_PAGINATED: ("read_action_paginated",),
        OperationName.GET: ("get_action",),
        OperationName.CREATE: ("create_action",),
        OperationName.UPDATE: ("update_action",),
        OperationName.DELETE: ("destroy_action",),
        OperationName.CHANGE: ("change_action",),
        OperationName.NEW: ("new_function",),
    }

    @classmethod
    def handles(cls, schema: Any, context: Any) -> bool:
        if schema is None:
            return isinstance(context, Domain)
        return _is_declarative(schema)

    def list_attributes(self, schema: Any) -> list[AttributeMeta]:
        if schema is None:
            return []
        return [
            AttributeMeta(
                name=attribute.name,
                native_type=attribute.type,
                one_of=attribute.one_of,
                required=not attribute.allow_nil,
            )
            for attribute in schema.definition.attributes
        ]

    def list_relationships(self, schema: Any) -> list[RelationshipMeta]:
        if schema is None:
            return []

        relationships = []
        for relationship in schema.definition.relationships:
            owner_key = relationship.source_attribute
            related_key = relationship.destination_attribute
            if relationship.kind == RelationshipKind.MANY_TO_ONE:
                owner_key = owner_key or f"{relationship.name}_id"
                related_key = related_key or "id"
            elif relationship.kind == RelationshipKind.ONE_TO_MANY:
                owner_key = owner_key or "id"
            relationships.append(
                RelationshipMeta(
                    name=relationship.name,
                    kind=relationship.kind,
                    destination=_resolve_destination(relationship.destination),
                    owner_key=owner_key,
                    related_key=related_key,
                )
            )
        return relationships

    def list_actions(
        self,
        target: Any,
        kind: ActionKind,
        *,
        operation: OperationName,
        context: Any = None,
        name: str | None = None,
    ) -> list[ActionMeta]:
        if target is None:
            return []

        if name is not None and isinstance(context, Domain):
            name = context.action_name(name)

        actions = [
            ActionMeta(
                name=action.name,
                kind=action.kind,
                primary=action.primary,
                pagination=action.pagination,
            )
            for action in target.definition.actions
            if action.kind == kind and (name is None or action.name == name)
        ]
        logger.debug(
            f"{operation.value}: {len(actions)} {kind.value} action(s) on {target.__name__}"
        )
        return actions

    def candidate_names(
        self, target: Any, kind: ActionKind, operation: OperationName, name: str | None = None
    ) -> tuple[str, ...]:
        if name is not None:
            return (name,)
        if target is None:
            return ()
        return tuple(a.name for a in target.definition.actions if a.kind == kind)

    def resolve_action_target(self, context: Any, action_name: str) -> Any | None:
        if not isinstance(context, Domain):
            return None
        return context.resource_for(action_name)

    def default_new(self, schema: Any, context: Any) -> Callable[[dict, dict], Any] | None:
        if schema is None:
            return None

        def new_entity(attrs: dict, opts: dict) -> Any:
            return schema(**attrs)

        return new_entity

    def apply_query(self, query: ClauseQuery, options: QueryOptions) -> ClauseQuery:
        return apply_to_clause_query(query, options)
