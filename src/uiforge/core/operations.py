"""
CRUD operation resolution.

Binds each logical operation of a resource to a backend capability:

1. An operation named in the declaration (under its generic key or a
   backend alias) restricts candidates to that exact name.
2. Otherwise every action of the operation's kind is a candidate.
3. `list_paginated` keeps only candidates supporting pagination.
4. The primary candidate wins, else the first one; no candidate is a fatal
   configuration error.

`new` is not a backend action: it binds to a two-argument `(attrs, opts)`
initializer, either user supplied or the adapter's default.
"""

from __future__ import annotations

import logging
from typing import Any

from uiforge.adapters.base import BackendAdapter

from .declarations import ResourceDeclaration
from .errors import make_operation_error
from .ir import ActionMeta, OperationName, OperationRef
from .signatures import accepts_positional

logger = logging.getLogger(__name__)

ERROR_ACTION_TYPE = "Does not exist or it is of the wrong type"
ERROR_NEEDS_PAGINATION = f"{ERROR_ACTION_TYPE}, or pagination is not supported"
ERROR_NEW_INVALID = (
    "The function reference is missing or invalid, "
    "should be a function of 2 arguments (attrs, opts)"
)


def requested_override(
    adapter: BackendAdapter, declaration: ResourceDeclaration, operation: OperationName
) -> Any | None:
    """First non-None override among the keys accepted for `operation`."""
    for key in adapter.option_keys(operation):
        value = declaration.operations.get(key)
        if value is not None:
            return value
    return None


def select_action(actions: list[ActionMeta]) -> ActionMeta | None:
    """
    Apply the primary-first, first-available policy.

    Examples:
        >>> from uiforge.core.ir import ActionKind
        >>> select_action([
        ...     ActionMeta(name="list", kind=ActionKind.READ),
        ...     ActionMeta(name="index", kind=ActionKind.READ, primary=True),
        ... ]).name
        'index'
    """
    for action in actions:
        if action.primary:
            return action
    return actions[0] if actions else None


def _unbound(declaration: ResourceDeclaration, adapter: BackendAdapter) -> bool:
    context = declaration.context
    return context is None and (declaration.schema_ref is None or adapter.requires_context)


def _placeholder(
    adapter: BackendAdapter, declaration: ResourceDeclaration, operation: OperationName
) -> OperationRef:
    logger.debug(f"{declaration.name}: nothing to search, '{operation.value}' left undefined")
    return OperationRef(
        name=operation,
        resource=declaration.name,
        backend_kind=adapter.kind,
        action_kind=operation.action_kind,
        target=declaration.schema_ref,
        undefined=True,
    )


def _resolve_new(
    adapter: BackendAdapter, declaration: ResourceDeclaration
) -> OperationRef:
    override = requested_override(adapter, declaration, OperationName.NEW)
    if override is None and declaration.schema_ref is None and declaration.context is None:
        return _placeholder(adapter, declaration, OperationName.NEW)
    if override is None:
        initializer = adapter.default_new(declaration.schema_ref, declaration.context)
    elif isinstance(override, str):
        initializer = getattr(declaration.context, override, None)
    else:
        initializer = override

    if initializer is None or not accepts_positional(initializer, 2):
        raise make_operation_error(
            f"Error processing option '{OperationName.NEW.value}': {ERROR_NEW_INVALID}",
            declaration.name,
            OperationName.NEW.value,
            adapter.option_keys(OperationName.NEW),
        )

    return OperationRef(
        name=OperationName.NEW,
        resource=declaration.name,
        backend_kind=adapter.kind,
        context=declaration.context,
        target=declaration.schema_ref,
        handler=initializer,
    )


def resolve_operation(
    adapter: BackendAdapter,
    declaration: ResourceDeclaration,
    operation: OperationName | str,
) -> OperationRef:
    """
    Resolve one logical operation of a declared resource.

    Raises:
        OperationResolutionError: If no backend capability fits
    """
    operation = OperationName(operation)
    if operation == OperationName.NEW:
        return _resolve_new(adapter, declaration)

    kind = operation.action_kind
    if kind is None:
        raise make_operation_error(
            f"Operation '{operation.value}' has no backend action kind",
            declaration.name,
            operation.value,
        )
    requested = requested_override(adapter, declaration, operation)
    schema = declaration.schema_ref
    context = declaration.context

    if requested is False:
        raise make_operation_error(
            f"Operation '{operation.value}' is disabled", declaration.name, operation.value
        )

    if callable(requested):
        if not adapter.accepts_callable(requested, operation):
            raise make_operation_error(
                f"Callable override {requested!r} does not fit operation '{operation.value}'",
                declaration.name,
                operation.value,
            )
        action = ActionMeta(
            name=getattr(requested, "__name__", operation.value),
            kind=kind,
            pagination=operation == OperationName.LIST_PAGINATED,
            handler=requested,
        )
        return _reference(adapter, declaration, operation, schema, action)

    target = schema
    if target is None and context is not None and requested is not None:
        target = adapter.resolve_action_target(context, requested)

    if requested is None and _unbound(declaration, adapter):
        return _placeholder(adapter, declaration, operation)

    candidates = adapter.list_actions(
        target, kind, operation=operation, context=context, name=requested
    )
    message = ERROR_ACTION_TYPE
    if operation == OperationName.LIST_PAGINATED:
        candidates = [action for action in candidates if action.pagination]
        message = ERROR_NEEDS_PAGINATION

    action = select_action(candidates)
    if action is None:
        requested_name = requested if requested is not None else "<any>"
        raise make_operation_error(
            f"Error processing action '{requested_name}' with expected type "
            f"'{kind.value}': {message}",
            declaration.name,
            operation.value,
            adapter.candidate_names(target, kind, operation, requested),
        )

    return _reference(adapter, declaration, operation, target, action)


def _reference(
    adapter: BackendAdapter,
    declaration: ResourceDeclaration,
    operation: OperationName,
    target: Any,
    action: ActionMeta,
) -> OperationRef:
    logger.debug(f"{declaration.name}: {operation.value} -> {action.name}")
    return OperationRef(
        name=operation,
        resource=declaration.name,
        backend_kind=adapter.kind,
        action_kind=action.kind,
        context=declaration.context,
        target=target,
        action=action,
        handler=action.handler,
    )


def resolve_operations(
    adapter: BackendAdapter, declaration: ResourceDeclaration
) -> dict[OperationName, OperationRef]:
    """
    Resolve every logical operation of a declared resource.

    Operations overridden with `False` are disabled and left out.
    """
    return {
        op: resolve_operation(adapter, declaration, op)
        for op in OperationName
        if requested_override(adapter, declaration, op) is not False
    }
