"""
Route manifests.

Each resource exposes a flat list of enabled routes to the routing layer,
derived from optional allow (`only`) and deny (`except_`) lists.
"""

from __future__ import annotations

from collections.abc import Iterable

from .errors import ConfigurationError, ErrorContext

ROUTE_NAMES: tuple[str, ...] = ("index", "new", "edit", "show", "delete")


def route_manifest(
    resource: str,
    only: Iterable[str] | None = None,
    except_: Iterable[str] = (),
) -> tuple[str, ...]:
    """
    Enabled routes for a resource, in canonical order.

    Examples:
        >>> route_manifest("product")
        ('index', 'new', 'edit', 'show', 'delete')
        >>> route_manifest("product", only=["index", "show"], except_=["show"])
        ('index',)
    """
    allowed = set(ROUTE_NAMES if only is None else only)
    denied = set(except_)

    unknown = sorted((allowed | denied) - set(ROUTE_NAMES))
    if unknown:
        raise ConfigurationError(
            f"Unknown route name(s): {', '.join(unknown)}",
            ErrorContext(resource=resource, subject="routes", searched=ROUTE_NAMES),
        )

    return tuple(name for name in ROUTE_NAMES if name in allowed and name not in denied)
