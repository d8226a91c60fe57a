"""
Backend adapter interface.

An adapter answers three questions about a backend schema: what are its
attributes, what are its relationships, and which actions can serve a
logical CRUD operation. It also applies translated query options to the
backend's native query value. One adapter is selected per resource at
registration time and stored on the resource.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Callable
from typing import Any, ClassVar

from uiforge.core.ir import (
    ActionKind,
    ActionMeta,
    AttributeMeta,
    BackendKind,
    OperationName,
    RelationshipMeta,
)


class BackendAdapter(ABC):
    """
    Capability contract every backend adapter implements.

    Subclasses set `kind` and `operation_aliases`. Aliases are the option
    keys a resource declaration may use to name the action or function for
    each logical operation, in precedence order.
    """

    kind: ClassVar[BackendKind]
    operation_aliases: ClassVar[dict[OperationName, tuple[str, ...]]] = {}
    # Capabilities live on a context only; without one nothing can be bound
    requires_context: ClassVar[bool] = False

    @classmethod
    @abstractmethod
    def handles(cls, schema: Any, context: Any) -> bool:
        """Whether this adapter understands the given schema/context pair."""

    @abstractmethod
    def list_attributes(self, schema: Any) -> list[AttributeMeta]:
        """Plain attributes of a schema, in declaration order."""

    @abstractmethod
    def list_relationships(self, schema: Any) -> list[RelationshipMeta]:
        """Relationships and embeds of a schema, in declaration order."""

    @abstractmethod
    def list_actions(
        self,
        target: Any,
        kind: ActionKind,
        *,
        operation: OperationName,
        context: Any = None,
        name: str | None = None,
    ) -> list[ActionMeta]:
        """
        Candidate actions of one kind for a logical operation.

        When `name` is given only actions with exactly that name qualify.
        Candidates are returned in declaration order; selection policy is
        applied by the operation resolver.
        """

    def candidate_names(
        self, target: Any, kind: ActionKind, operation: OperationName, name: str | None = None
    ) -> tuple[str, ...]:
        """Action or function names `list_actions` searches, for error reports."""
        return (name,) if name is not None else ()

    @abstractmethod
    def resolve_action_target(self, context: Any, action_name: str) -> Any | None:
        """Schema that exposes `action_name` through a context, or None."""

    @abstractmethod
    def default_new(self, schema: Any, context: Any) -> Callable[[dict, dict], Any] | None:
        """Initializer used for `new` when no override is given."""

    @abstractmethod
    def apply_query(self, query: Any, options: Any) -> Any:
        """Apply parsed query options to the backend's native query value."""

    def accepts_callable(self, fn: Any, operation: OperationName) -> bool:
        """Whether a user supplied callable may stand in for an operation."""
        return False

    def option_keys(self, operation: OperationName) -> tuple[str, ...]:
        """Declaration keys accepted for an operation, generic name first."""
        return (operation.value, *self.operation_aliases.get(operation, ()))
