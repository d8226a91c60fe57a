"""
Simple-schema backend adapter.

Schemas are pydantic models. Attributes come from `model_fields`;
relationships are declared with `Annotated` markers, and nested models are
embeds. CRUD capabilities are plain functions on a context object (usually
a module) found by naming convention and checked for arity:

    list_<source>(opts)              get_<module>(id, opts)
    list_<source>_paginated(opts)    create_<module>(attrs)
    update_<module>(entity, attrs)   change_<module>(entity, attrs)
    delete_<module>(entity)          new_<module>(attrs, opts)

`<module>` is the snake_case model name, `<source>` its plural (override it
with a `__source__` class attribute).
"""

from __future__ import annotations

import logging
import types
from collections.abc import Callable
from dataclasses import dataclass
from datetime import date, datetime, time
from decimal import Decimal
from enum import Enum
from typing import Any, ClassVar, Literal, Union, get_args, get_origin
from uuid import UUID

from pydantic import BaseModel

from uiforge.core.ir import (
    ActionKind,
    ActionMeta,
    AttributeMeta,
    BackendKind,
    OperationName,
    RelationshipKind,
    RelationshipMeta,
)
from uiforge.core.query import QueryOptions, apply_to_select
from uiforge.core.signatures import accepts_positional
from uiforge.core.strings import pluralize, to_snake_case

from .base import BackendAdapter
from .declarative import Domain

logger = logging.getLogger(__name__)


# =============================================================================
# Schema markers
# =============================================================================


@dataclass(frozen=True)
class BelongsTo:
    """
    Marks a foreign key attribute as the owner side of a many-to-one.

    The attribute itself stays a plain field; a relationship named `name`
    (default: the key without its `_id` suffix) is added next to it.

    Example:
        author_id: Annotated[int | None, BelongsTo(lambda: Author)] = None
    """

    destination: Any
    name: str | None = None
    related_key: str = "id"


@dataclass(frozen=True)
class HasMany:
    """
    Marks a list field as a one-to-many relationship.

    Example:
        posts: Annotated[list[Post], HasMany(lambda: Post, foreign_key="author_id")] = []
    """

    destination: Any
    foreign_key: str
    owner_key: str = "id"


@dataclass(frozen=True)
class NativeType:
    """Overrides the native type name derived from the annotation."""

    name: str


_SCALAR_TYPES: list[tuple[type, str]] = [
    # bool before int: bool is an int subclass
    (bool, "boolean"),
    (int, "integer"),
    (float, "float"),
    (Decimal, "decimal"),
    (str, "string"),
    (UUID, "uuid"),
    (bytes, "binary"),
    # datetime before date: datetime is a date subclass
    (datetime, "datetime"),
    (date, "date"),
    (time, "time"),
    (dict, "map"),
    (tuple, "tuple"),
]


def _resolve_destination(destination: Any) -> Any:
    """Destinations may be given lazily as zero-argument callables."""
    if callable(destination) and not isinstance(destination, type):
        return destination()
    return destination


def _strip_optional(annotation: Any) -> Any:
    origin = get_origin(annotation)
    if origin in (Union, types.UnionType):
        args = [a for a in get_args(annotation) if a is not type(None)]
        if len(args) == 1:
            return args[0]
    return annotation


def _is_model(value: Any) -> bool:
    return isinstance(value, type) and issubclass(value, BaseModel)


def _list_item(annotation: Any) -> Any | None:
    if get_origin(annotation) in (list, tuple, set, frozenset):
        args = get_args(annotation)
        if args:
            return args[0]
    return None


def native_type_of(annotation: Any) -> tuple[str, tuple[str, ...] | None]:
    """
    Native type name and enumerated values for a field annotation.

    Unknown annotations pass through as their lowercased type name.
    """
    annotation = _strip_optional(annotation)

    if get_origin(annotation) is Literal:
        return "enum", tuple(str(v) for v in get_args(annotation))
    if isinstance(annotation, type) and issubclass(annotation, Enum):
        return "enum", tuple(str(member.value) for member in annotation)

    origin = get_origin(annotation) or annotation
    if isinstance(origin, type):
        if origin is list:
            return "array", None
        for python_type, name in _SCALAR_TYPES:
            if issubclass(origin, python_type):
                return name, None
        return origin.__name__.lower(), None
    return str(annotation).lower(), None


# Candidate function name templates and expected arity per operation
_CONVENTIONS: dict[OperationName, tuple[tuple[str, ...], int]] = {
    OperationName.LIST: (("list_{source}", "list_{module}"), 1),
    OperationName.LIST_PAGINATED: (
        ("list_{source}_paginated", "list_{module}_paginated"),
        1,
    ),
    OperationName.GET: (("get_{module}", "fetch_{module}"), 2),
    OperationName.DELETE: (("delete_{module}",), 1),
    OperationName.CREATE: (("create_{module}",), 1),
    OperationName.UPDATE: (("update_{module}",), 2),
    OperationName.CHANGE: (("change_{module}",), 2),
    OperationName.NEW: (("new_{module}",), 2),
}


def expected_arity(operation: OperationName) -> int:
    """Arity a context function must accept for an operation."""
    return _CONVENTIONS[operation][1]


def schema_names(schema: Any) -> tuple[str, str]:
    """(source, module) naming pair of a schema class."""
    module = to_snake_case(schema.__name__)
    source = getattr(schema, "__source__", None) or pluralize(module)
    return source, module


class SimpleSchemaAdapter(BackendAdapter):
    """Adapter for pydantic schemas with convention-named context functions."""

    kind: ClassVar[BackendKind] = BackendKind.SIMPLE_SCHEMA
    requires_context: ClassVar[bool] = True
    operation_aliases: ClassVar[dict[OperationName, tuple[str, ...]]] = {
        OperationName.LIST: ("list_function",),
        OperationName.LIST_PAGINATED: ("list_function_paginated",),
        OperationName.GET: ("get_function",),
        OperationName.CREATE: ("create_function",),
        OperationName.UPDATE: ("update_function",),
        OperationName.DELETE: ("delete_function",),
        OperationName.CHANGE: ("change_function",),
        OperationName.NEW: ("new_function",),
    }

    @classmethod
    def handles(cls, schema: Any, context: Any) -> bool:
        if isinstance(context, Domain):
            return False
        return schema is None or _is_model(schema)

    def list_attributes(self, schema: Any) -> list[AttributeMeta]:
        if schema is None:
            return []

        attributes = []
        for name, info in schema.model_fields.items():
            if any(isinstance(m, HasMany) for m in info.metadata):
                continue
            annotation = _strip_optional(info.annotation)
            item = _list_item(annotation)
            if _is_model(annotation) or _is_model(item):
                continue

            override = next((m for m in info.metadata if isinstance(m, NativeType)), None)
            if override is not None:
                native, one_of = override.name, None
            elif name == "id" and annotation is int:
                native, one_of = "id", None
            else:
                native, one_of = native_type_of(annotation)

            attributes.append(
                AttributeMeta(
                    name=name,
                    native_type=native,
                    one_of=one_of,
                    required=info.is_required(),
                )
            )
        return attributes

    def list_relationships(self, schema: Any) -> list[RelationshipMeta]:
        if schema is None:
            return []

        relationships = []
        for name, info in schema.model_fields.items():
            belongs_to = next((m for m in info.metadata if isinstance(m, BelongsTo)), None)
            has_many = next((m for m in info.metadata if isinstance(m, HasMany)), None)
            annotation = _strip_optional(info.annotation)

            if belongs_to is not None:
                relationships.append(
                    RelationshipMeta(
                        name=belongs_to.name or name.removesuffix("_id"),
                        kind=RelationshipKind.MANY_TO_ONE,
                        destination=_resolve_destination(belongs_to.destination),
                        owner_key=name,
                        related_key=belongs_to.related_key,
                    )
                )
            elif has_many is not None:
                relationships.append(
                    RelationshipMeta(
                        name=name,
                        kind=RelationshipKind.ONE_TO_MANY,
                        destination=_resolve_destination(has_many.destination),
                        owner_key=has_many.owner_key,
                        related_key=has_many.foreign_key,
                    )
                )
            elif _is_model(annotation):
                relationships.append(
                    RelationshipMeta(
                        name=name, kind=RelationshipKind.EMBEDS_ONE, destination=annotation
                    )
                )
            elif _is_model(_list_item(annotation)):
                relationships.append(
                    RelationshipMeta(
                        name=name,
                        kind=RelationshipKind.EMBEDS_MANY,
                        destination=_list_item(annotation),
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
        function_names = self.candidate_names(target, kind, operation, name)
        if context is None or not function_names:
            return []

        arity = expected_arity(operation)
        actions = []
        for function_name in function_names:
            fn = getattr(context, function_name, None)
            if accepts_positional(fn, arity):
                actions.append(
                    ActionMeta(
                        name=function_name,
                        kind=kind,
                        pagination=operation == OperationName.LIST_PAGINATED,
                        handler=fn,
                    )
                )
        logger.debug(
            f"{operation.value}: {len(actions)} of {function_names} found on {context!r}"
        )
        return actions

    def candidate_names(
        self, target: Any, kind: ActionKind, operation: OperationName, name: str | None = None
    ) -> tuple[str, ...]:
        """Convention names for `operation`, or just `name` when one is given."""
        if name is not None:
            return (name,)
        if target is None:
            return ()
        source, module = schema_names(target)
        return tuple(t.format(source=source, module=module) for t in _CONVENTIONS[operation][0])

    def resolve_action_target(self, context: Any, action_name: str) -> Any | None:
        """
        Context functions carry no schema of their own.

        A resource declared with a context but no schema keeps `target`
        unset; its operations are still bound through the context.
        """
        return None

    def default_new(self, schema: Any, context: Any) -> Callable[[dict, dict], Any] | None:
        if schema is None:
            return None
        if context is not None:
            _, module = schema_names(schema)
            fn = getattr(context, f"new_{module}", None)
            if accepts_positional(fn, 2):
                return fn

        def new_entity(attrs: dict, opts: dict) -> Any:
            return schema.model_construct(**attrs)

        return new_entity

    def apply_query(self, query: Any, options: QueryOptions) -> Any:
        return apply_to_select(query, options)

    def accepts_callable(self, fn: Any, operation: OperationName) -> bool:
        """Whether a user supplied callable fits the operation's arity."""
        return accepts_positional(fn, expected_arity(operation))
