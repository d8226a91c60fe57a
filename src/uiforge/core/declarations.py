"""
Resource declarations.

Declarations are the user-facing input of a compile: which schema a
resource wraps, through which context its operations are found, and how
individual fields are customized.

    product = resource(
        "product",
        schema=Product,
        context=inventory,
        fields=[field("reference", readonly=True, length=30)],
        order_by="reference",
    )
"""

from __future__ import annotations

from collections.abc import Iterable
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator


class FieldDeclaration(BaseModel):
    """Customization of one field: overrides merged onto derived defaults."""

    key: str
    overrides: dict[str, Any] = Field(default_factory=dict)

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)


class ResourceDeclaration(BaseModel):
    """
    Declaration of one UI resource.

    Attributes:
        name: Resource name, unique within the compile
        schema_ref: Backend schema (pydantic model or declarative resource)
        context: Context object or Domain used to find operations
        fields: Field customizations, in the order they should appear
        operations: Operation overrides keyed by operation name or alias
        opts: Resource options (order_by, columns)
        only: Routes to enable (all when unset)
        except_: Routes to disable
    """

    name: str
    schema_ref: Any = None
    context: Any = None
    fields: tuple[FieldDeclaration, ...] = ()
    operations: dict[str, Any] = Field(default_factory=dict)
    opts: dict[str, Any] = Field(default_factory=dict)
    only: tuple[str, ...] | None = None
    except_: tuple[str, ...] = ()

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str) -> str:
        if not v.isidentifier():
            raise ValueError(f"Resource name '{v}' is not a valid identifier")
        return v


def field(key: str, **overrides: Any) -> FieldDeclaration:
    """Declare customization for one field."""
    return FieldDeclaration(key=key, overrides=overrides)


def fields(keys: Iterable[str], **overrides: Any) -> list[FieldDeclaration]:
    """Declare the same customization for several fields."""
    return [FieldDeclaration(key=key, overrides=overrides) for key in keys]


def resource(
    name: str,
    *,
    schema: Any = None,
    context: Any = None,
    fields: Iterable[FieldDeclaration | Iterable[FieldDeclaration]] = (),
    operations: dict[str, Any] | None = None,
    only: Iterable[str] | None = None,
    except_: Iterable[str] = (),
    **opts: Any,
) -> ResourceDeclaration:
    """
    Declare a resource.

    Args:
        name: Resource name
        schema: Backend schema
        context: Context object or Domain
        fields: Field declarations; nested lists from `fields()` are flattened
        operations: Operation overrides, e.g. {"list": "list_active_products"}
        only: Routes to enable
        except_: Routes to disable
        **opts: Resource options such as `order_by` or `columns`
    """
    flat: list[FieldDeclaration] = []
    for item in fields:
        if isinstance(item, FieldDeclaration):
            flat.append(item)
        else:
            flat.extend(item)

    return ResourceDeclaration(
        name=name,
        schema_ref=schema,
        context=context,
        fields=tuple(flat),
        operations=dict(operations or {}),
        opts=opts,
        only=tuple(only) if only is not None else None,
        except_=tuple(except_),
    )
