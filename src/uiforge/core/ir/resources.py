"""
Resource and operation reference types for uiforge IR.
"""

from __future__ import annotations

from collections.abc import Callable
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from .backend import ActionKind, ActionMeta, BackendKind
from .fields import FieldSpec


class OperationName(str, Enum):
    """Logical CRUD operations a resource exposes to the view layer."""

    LIST = "list"
    LIST_PAGINATED = "list_paginated"
    GET = "get"
    CREATE = "create"
    UPDATE = "update"
    DELETE = "delete"
    CHANGE = "change"
    NEW = "new"

    @property
    def action_kind(self) -> ActionKind | None:
        """Backend action kind this operation binds to; None for `new`."""
        return _OPERATION_ACTION_KINDS.get(self)


_OPERATION_ACTION_KINDS: dict[OperationName, ActionKind] = {
    OperationName.LIST: ActionKind.READ,
    OperationName.LIST_PAGINATED: ActionKind.READ,
    OperationName.GET: ActionKind.READ,
    OperationName.CREATE: ActionKind.CREATE,
    OperationName.UPDATE: ActionKind.UPDATE,
    OperationName.DELETE: ActionKind.DESTROY,
    OperationName.CHANGE: ActionKind.UPDATE,
}


class OperationRef(BaseModel):
    """
    An opaque, resolved handle to a backend CRUD capability.

    uiforge never invokes it. The execution layer uses `handler` for plain
    function backends, or `target` + `action` (+ `context`) for declarative
    backends.

    Attributes:
        name: Logical operation name
        resource: Owning resource name
        backend_kind: Adapter family that resolved it
        action_kind: Backend action kind (None for `new`)
        context: Context or domain handle the operation was resolved through
        target: Schema or resource class the action belongs to
        action: Selected backend action
        handler: Callable to invoke, when the backend exposes one
        undefined: True for placeholder references with nothing behind them
    """

    name: OperationName
    resource: str
    backend_kind: BackendKind
    action_kind: ActionKind | None = None
    context: Any = None
    target: Any = None
    action: ActionMeta | None = None
    handler: Callable[..., Any] | None = None
    undefined: bool = False

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)


class ResourceSpec(BaseModel):
    """
    A fully resolved UI-facing resource.

    Attributes:
        name: Unique resource name; embedded resources use parent__field
        backend_kind: Adapter family that produced it
        schema_ref: Backend schema handle (never interpreted by the core)
        context_ref: Backend context or domain handle
        fields: Resolved fields by key
        fields_order: Declared keys first, then discovered ones
        operations: Resolved operation references by logical name
        opts: Resource level options (e.g. order_by)
        embedded_in: Parent resource name for synthesized embed resources
        adapter: The backend adapter selected for this resource
    """

    name: str
    backend_kind: BackendKind
    schema_ref: Any = None
    context_ref: Any = None
    fields: dict[str, FieldSpec] = Field(default_factory=dict)
    fields_order: tuple[str, ...] = ()
    operations: dict[OperationName, OperationRef] = Field(default_factory=dict)
    opts: dict[str, Any] = Field(default_factory=dict)
    embedded_in: str | None = None
    adapter: Any = Field(default=None, repr=False)

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    @property
    def is_embedded(self) -> bool:
        return self.embedded_in is not None

    def get_field(self, key: str) -> FieldSpec | None:
        """Get field by key."""
        return self.fields.get(key)

    def visible_keys(self) -> list[str]:
        """Keys in field order, excluding omitted fields."""
        return [key for key in self.fields_order if not self.fields[key].omitted]

    def operation(self, name: OperationName | str) -> OperationRef | None:
        """Get a resolved operation reference by logical name."""
        return self.operations.get(OperationName(name))
