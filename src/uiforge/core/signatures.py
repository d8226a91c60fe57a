"""
Callable signature checks.

Overrides supplied by users (renderers, `new` initializers, context
functions) are checked against the number of positional arguments they
will be called with.
"""

from __future__ import annotations

import inspect
from typing import Any


def accepts_positional(fn: Any, arity: int) -> bool:
    """
    Whether `fn` can be called with exactly `arity` positional arguments.

    Examples:
        >>> accepts_positional(lambda a, b=None: a, 1)
        True
        >>> accepts_positional(lambda a, b=None: a, 2)
        True
        >>> accepts_positional(lambda a: a, 2)
        False
    """
    if not callable(fn):
        return False
    try:
        signature = inspect.signature(fn)
    except (TypeError, ValueError):
        return False

    required = 0
    total = 0
    variadic = False
    for param in signature.parameters.values():
        if param.kind == param.VAR_POSITIONAL:
            variadic = True
        elif param.kind in (param.POSITIONAL_ONLY, param.POSITIONAL_OR_KEYWORD):
            total += 1
            if param.default is param.empty:
                required += 1
        elif param.kind == param.KEYWORD_ONLY and param.default is param.empty:
            return False
    return required <= arity and (variadic or arity <= total)
