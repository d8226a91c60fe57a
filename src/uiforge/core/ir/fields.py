"""
Field descriptor types for uiforge IR.

A FieldSpec is one UI-bindable attribute or relationship terminus of a
resource. Its `data` payload is a tagged variant selected by what the field
is for: association linkage, embed linkage, fixed select options, or a
time input step.
"""

from __future__ import annotations

from collections.abc import Callable
from enum import Enum
from typing import Annotated, Any, Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator


class FieldType(str, Enum):
    """Semantic field types produced by the field resolver."""

    STRING = "string"
    BINARY_ID = "binary_id"
    INTEGER = "integer"
    FLOAT = "float"
    DECIMAL = "decimal"
    BOOLEAN = "boolean"
    DATE = "date"
    TIME = "time"
    TIME_USEC = "time_usec"
    DATETIME = "datetime"
    DATETIME_USEC = "datetime_usec"
    BINARY = "binary"
    MAP = "map"
    MANY_TO_ONE = "many_to_one_association"
    ONE_TO_MANY = "one_to_many_association"
    EMBEDS_ONE = "embeds_one"
    EMBEDS_MANY = "embeds_many"
    UNDEFINED = "undefined"


ASSOCIATION_TYPES = frozenset(
    t.value
    for t in (
        FieldType.MANY_TO_ONE,
        FieldType.ONE_TO_MANY,
        FieldType.EMBEDS_ONE,
        FieldType.EMBEDS_MANY,
    )
)


class HtmlType(str, Enum):
    """Rendering hints handed to the view layer."""

    TEXT = "text"
    NUMBER = "number"
    CHECKBOX = "checkbox"
    SELECT = "select"
    TEXTAREA = "textarea"
    DATE = "date"
    TIME = "time"
    DATETIME_LOCAL = "datetime-local"
    ONE_TO_MANY = "one_to_many_association"
    EMBEDS_ONE = "embeds_one"
    EMBEDS_MANY = "embeds_many"
    UNIMPLEMENTED = "unimplemented"


# =============================================================================
# Option labels
# =============================================================================


class AttributeLabel(BaseModel):
    """Use an attribute of the related entity as the option label."""

    kind: Literal["attribute"] = "attribute"
    name: str

    model_config = ConfigDict(frozen=True)


class EntityLabel(BaseModel):
    """Compute the option label from the related entity alone."""

    kind: Literal["entity"] = "entity"
    fn: Callable[[Any], str]

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)


class ContextLabel(BaseModel):
    """Compute the option label from the render context and the entity."""

    kind: Literal["context"] = "context"
    fn: Callable[[Any, Any], str]

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)


OptionLabel = Annotated[
    AttributeLabel | EntityLabel | ContextLabel, Field(discriminator="kind")
]


def option_label_text(label: OptionLabel, entity: Any, context: Any = None) -> str:
    """
    Produce the display label for one related entity.

    This is the single dispatch point over the OptionLabel variants.
    """
    if isinstance(label, AttributeLabel):
        if isinstance(entity, dict):
            return str(entity.get(label.name, ""))
        return str(getattr(entity, label.name, ""))
    if isinstance(label, EntityLabel):
        return label.fn(entity)
    return label.fn(context, entity)


# =============================================================================
# Field data payloads
# =============================================================================


class AssociationData(BaseModel):
    """
    Linkage of a many-to-one or one-to-many field.

    `resource` is None when no registered resource matches the relationship
    destination; such fields render empty.
    """

    kind: Literal["association"] = "association"
    resource: str | None = None
    related: Any = None
    owner_key: str | None = None
    related_key: str | None = None
    option_label: OptionLabel | None = None
    query_opts: dict[str, Any] = Field(default_factory=dict)

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)


class EmbedData(BaseModel):
    """Linkage of an embedded field to its synthesized resource."""

    kind: Literal["embed"] = "embed"
    owner: Any = None
    resource: str
    related: Any = None

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)


class SelectData(BaseModel):
    """Fixed options for an enumerated attribute."""

    kind: Literal["select"] = "select"
    opts: tuple[tuple[str, str], ...] = ()
    multiple: bool = False

    model_config = ConfigDict(frozen=True)


class StepData(BaseModel):
    """Input step for sub-second time values."""

    kind: Literal["step"] = "step"
    step: int = 1

    model_config = ConfigDict(frozen=True)


FieldData = Annotated[
    AssociationData | EmbedData | SelectData | StepData, Field(discriminator="kind")
]


# =============================================================================
# Field spec
# =============================================================================


class FieldSpec(BaseModel):
    """
    A resolved field of a resource.

    Attributes:
        key: Unique key within the owning resource
        type: Semantic type; unknown backend types pass through as-is
        html_type: Rendering hint
        resource: Name of the owning resource
        renderer: Optional 1 or 2 argument callable replacing default rendering
        data: Purpose-specific payload
    """

    key: str
    type: str
    html_type: str
    resource: str | None = None
    label: str = ""
    placeholder: str = ""
    length: int = 0
    precision: int = 0
    scale: int = 0
    required: bool = False
    readonly: bool = False
    disabled: bool = False
    hidden: bool = False
    omitted: bool = False
    filterable: bool = True
    renderer: Callable[..., Any] | None = None
    data: FieldData | None = None

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    @field_validator("type", "html_type", mode="before")
    @classmethod
    def plain_type_value(cls, v: Any) -> Any:
        """Store enum members as their plain string value."""
        if isinstance(v, Enum):
            return v.value
        return v

    @property
    def is_association(self) -> bool:
        """True for relationship and embed fields."""
        return self.type in ASSOCIATION_TYPES

    @property
    def target_resource(self) -> str | None:
        """Name of the linked resource, for association and embed fields."""
        if isinstance(self.data, AssociationData | EmbedData):
            return self.data.resource
        return None
