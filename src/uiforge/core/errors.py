"""
Error types for uiforge resource resolution and layout compilation.

Every error raised here signals a static configuration defect. They are
raised while the application schema is compiled and never deferred to
request time.
"""

from dataclasses import dataclass, field
from typing import Optional


class UiForgeError(Exception):
    """Base exception for all uiforge errors."""

    def __init__(self, message: str, context: Optional["ErrorContext"] = None):
        self.message = message
        self.context = context
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        """Format error message with context if available."""
        if self.context:
            return f"{self.context.format()}\n{self.message}"
        return self.message


class ConfigurationError(UiForgeError):
    """
    Raised when resource declarations cannot be compiled.

    Examples:
    - Unknown field customization keys
    - Renderer overrides with an unsupported signature
    - Unknown route names in an allow/deny list
    """

    pass


class OperationResolutionError(ConfigurationError):
    """
    Raised when a CRUD operation cannot be bound to a backend capability.

    Examples:
    - No read action of the requested name on a declarative resource
    - No paginated read action available
    - Context function missing or of the wrong arity
    - Invalid `new` initializer override
    """

    pass


class LayoutError(ConfigurationError):
    """
    Raised when a layout declaration is invalid.

    Examples:
    - Layout referencing a field the resource does not have
    - Layout referencing an omitted field
    - `section` placed outside a `sections` container
    - Containers inside an index column list
    """

    pass


class EmbedCycleError(ConfigurationError):
    """Raised when embedded schemas reference each other in a loop."""

    pass


class RegistryError(ConfigurationError):
    """
    Raised when the resource registry cannot be assembled.

    Examples:
    - Two resources (declared or synthesized) sharing a name
    - Layout declared for a resource that was never registered
    """

    pass


class ConfigError(UiForgeError):
    """Raised when a uiforge configuration file holds invalid values."""

    pass


class QueryError(UiForgeError):
    """Raised when query options cannot be expressed by a backend query."""

    pass


@dataclass
class ErrorContext:
    """
    Context information for an error.

    Attributes:
        resource: Name of the resource being compiled
        subject: What was being resolved (operation, field, layout tag)
        searched: Candidate names that were tried, in order
    """

    resource: str
    subject: str | None = None
    searched: tuple[str, ...] = field(default_factory=tuple)

    def format(self) -> str:
        """
        Format error context as a human-readable string.

        Returns:
            Formatted string like: "resource 'product' (list)\\n  searched: list_products"
        """
        location = f"resource '{self.resource}'"
        if self.subject:
            location += f" ({self.subject})"

        if self.searched:
            return f"{location}\n  searched: {', '.join(self.searched)}"
        return location


def make_operation_error(
    message: str,
    resource: str,
    operation: str,
    searched: tuple[str, ...] | list[str] = (),
) -> OperationResolutionError:
    """Create an OperationResolutionError with resource context."""
    context = ErrorContext(resource=resource, subject=operation, searched=tuple(searched))
    return OperationResolutionError(message, context)


def make_layout_error(message: str, resource: str, tag: str) -> LayoutError:
    """Create a LayoutError with resource context."""
    return LayoutError(message, ErrorContext(resource=resource, subject=f"{tag} layout"))
