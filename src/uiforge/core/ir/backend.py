"""
Backend metadata types for uiforge IR.

Backend adapters translate their native schema and action information into
these shapes. Everything downstream of an adapter only sees these types.
"""

from __future__ import annotations

from collections.abc import Callable
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict


class BackendKind(str, Enum):
    """Which adapter family produced a resource."""

    SIMPLE_SCHEMA = "simple_schema"
    DECLARATIVE = "declarative"


class ActionKind(str, Enum):
    """Backend action kinds that CRUD operations map onto."""

    READ = "read"
    CREATE = "create"
    UPDATE = "update"
    DESTROY = "destroy"


class RelationshipKind(str, Enum):
    """Relationship kinds understood by the association resolver."""

    MANY_TO_ONE = "many_to_one"
    ONE_TO_MANY = "one_to_many"
    EMBEDS_ONE = "embeds_one"
    EMBEDS_MANY = "embeds_many"

    @property
    def is_embed(self) -> bool:
        return self in (RelationshipKind.EMBEDS_ONE, RelationshipKind.EMBEDS_MANY)


class AttributeMeta(BaseModel):
    """
    A plain attribute as reported by a backend adapter.

    Attributes:
        name: Attribute key on the schema
        native_type: Backend type name (e.g. "string", "utc_datetime_usec")
        one_of: Enumerated values, when the attribute is constrained to a set
        required: Whether the backend requires a value
    """

    name: str
    native_type: str
    one_of: tuple[str, ...] | None = None
    required: bool = False

    model_config = ConfigDict(frozen=True)


class RelationshipMeta(BaseModel):
    """
    A relationship as reported by a backend adapter.

    For many-to-one, `owner_key` is the local foreign key and `related_key`
    the target's primary key. For one-to-many, `owner_key` is the local
    primary key and `related_key` the foreign key on the target.
    """

    name: str
    kind: RelationshipKind
    destination: Any
    owner_key: str | None = None
    related_key: str | None = None

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)


class ActionMeta(BaseModel):
    """
    One backend action (or convention-named context function).

    Attributes:
        name: Action or function name
        kind: Action kind it serves
        primary: Preferred action among those of the same kind
        pagination: Whether the action supports paginated reads
        handler: Bound callable, for backends that expose plain functions
    """

    name: str
    kind: ActionKind
    primary: bool = False
    pagination: bool = False
    handler: Callable[..., Any] | None = None

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)
