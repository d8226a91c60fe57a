"""
Field resolution.

Turns backend attributes into FieldSpec values using static type tables,
then merges user customization on top. Derivation is a pure function of
the attribute, the owning resource name and the naming policy.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from typing import Any

from .declarations import FieldDeclaration
from .errors import ConfigurationError, ErrorContext
from .ir import (
    AssociationData,
    AttributeLabel,
    AttributeMeta,
    ContextLabel,
    EntityLabel,
    FieldSpec,
    FieldType,
    HtmlType,
    SelectData,
    StepData,
)
from .naming import NamingPolicy
from .signatures import accepts_positional
from .strings import humanize

logger = logging.getLogger(__name__)

# =============================================================================
# Static tables
# =============================================================================

NATIVE_TYPES: dict[str, FieldType] = {
    "string": FieldType.STRING,
    "ci_string": FieldType.STRING,
    "atom": FieldType.STRING,
    "enum": FieldType.STRING,
    "duration_name": FieldType.STRING,
    "uuid": FieldType.BINARY_ID,
    "binary_id": FieldType.BINARY_ID,
    "id": FieldType.INTEGER,
    "integer": FieldType.INTEGER,
    "float": FieldType.FLOAT,
    "decimal": FieldType.DECIMAL,
    "boolean": FieldType.BOOLEAN,
    "date": FieldType.DATE,
    "time": FieldType.TIME,
    "time_usec": FieldType.TIME_USEC,
    "datetime": FieldType.DATETIME,
    "utc_datetime": FieldType.DATETIME,
    "naive_datetime": FieldType.DATETIME,
    "datetime_usec": FieldType.DATETIME_USEC,
    "utc_datetime_usec": FieldType.DATETIME_USEC,
    "naive_datetime_usec": FieldType.DATETIME_USEC,
    "binary": FieldType.BINARY,
    "bitstring": FieldType.BINARY,
    "url_encoded_binary": FieldType.BINARY,
    "map": FieldType.MAP,
    "keyword": FieldType.MAP,
    "term": FieldType.MAP,
    "tuple": FieldType.MAP,
    "struct": FieldType.MAP,
    "union": FieldType.MAP,
}

HTML_TYPES: dict[str, HtmlType] = {
    FieldType.STRING.value: HtmlType.TEXT,
    FieldType.BINARY_ID.value: HtmlType.TEXT,
    FieldType.INTEGER.value: HtmlType.NUMBER,
    FieldType.FLOAT.value: HtmlType.NUMBER,
    FieldType.DECIMAL.value: HtmlType.NUMBER,
    FieldType.BOOLEAN.value: HtmlType.CHECKBOX,
    FieldType.DATE.value: HtmlType.DATE,
    FieldType.TIME.value: HtmlType.TIME,
    FieldType.TIME_USEC.value: HtmlType.TIME,
    FieldType.DATETIME.value: HtmlType.DATETIME_LOCAL,
    FieldType.DATETIME_USEC.value: HtmlType.DATETIME_LOCAL,
    FieldType.BINARY.value: HtmlType.TEXT,
    FieldType.MAP.value: HtmlType.TEXTAREA,
}

LENGTHS: dict[str, int] = {
    FieldType.STRING.value: 255,
    FieldType.BINARY.value: 255,
    FieldType.BINARY_ID.value: 36,
    FieldType.INTEGER.value: 10,
    FieldType.FLOAT.value: 12,
    FieldType.DECIMAL.value: 12,
    FieldType.BOOLEAN.value: 5,
    FieldType.DATE.value: 10,
    FieldType.TIME.value: 10,
    FieldType.TIME_USEC.value: 10,
    FieldType.DATETIME.value: 20,
    FieldType.DATETIME_USEC.value: 20,
}
DEFAULT_LENGTH = 50

NUMERIC_TYPES = frozenset(
    t.value for t in (FieldType.INTEGER, FieldType.FLOAT, FieldType.DECIMAL)
)
FRACTIONAL_TYPES = frozenset(t.value for t in (FieldType.FLOAT, FieldType.DECIMAL))
DATETIME_TYPES = frozenset(t.value for t in (FieldType.DATETIME, FieldType.DATETIME_USEC))
TIME_TYPES = frozenset(t.value for t in (FieldType.TIME, FieldType.TIME_USEC))
USEC_TYPES = frozenset(t.value for t in (FieldType.TIME_USEC, FieldType.DATETIME_USEC))

UNFILTERABLE_NATIVE_TYPES = frozenset({"map", "tuple", "struct", "union", "term"})

UUID_PLACEHOLDER = "AAAAAAAA-AAAA-AAAA-AAAA-AAAAAAAAAAAA"
DATETIME_PLACEHOLDER = "yyyy/MM/dd HH:mm:ss"
TIME_PLACEHOLDER = "HH:mm:ss"

# Customization keys stored on the association payload instead of the field
DATA_KEYS = frozenset({"option_label", "order_by", "where", "resource"})
FIELD_KEYS = frozenset(FieldSpec.model_fields) - {"key", "resource", "data"}


# =============================================================================
# Derivation
# =============================================================================


def field_type(native_type: str) -> str:
    """Semantic type for a native type; unknown types pass through."""
    mapped = NATIVE_TYPES.get(native_type)
    return mapped.value if mapped else native_type


def field_html_type(type_: str, one_of: tuple[str, ...] | None = None) -> str:
    """Rendering hint for a semantic type; enumerated strings become selects."""
    if one_of and type_ == FieldType.STRING.value:
        return HtmlType.SELECT.value
    html_type = HTML_TYPES.get(type_)
    return html_type.value if html_type else type_


def field_length(type_: str, one_of: tuple[str, ...] | None = None) -> int:
    if one_of:
        return max(len(value) for value in one_of)
    return LENGTHS.get(type_, DEFAULT_LENGTH)


def field_placeholder(key: str, type_: str) -> str:
    if type_ in NUMERIC_TYPES:
        return "0"
    if type_ == FieldType.BINARY_ID.value:
        return UUID_PLACEHOLDER
    if type_ in DATETIME_TYPES:
        return DATETIME_PLACEHOLDER
    if type_ in TIME_TYPES:
        return TIME_PLACEHOLDER
    return humanize(key)


def field_data(type_: str, one_of: tuple[str, ...] | None) -> SelectData | StepData | None:
    if one_of:
        return SelectData(opts=tuple((value, humanize(value)) for value in one_of))
    if type_ in USEC_TYPES:
        return StepData(step=1)
    return None


def derive_field(
    attribute: AttributeMeta,
    resource_name: str,
    naming: NamingPolicy | None = None,
) -> FieldSpec:
    """Field with every property derived from backend metadata."""
    naming = naming or NamingPolicy()
    type_ = field_type(attribute.native_type)
    return FieldSpec(
        key=attribute.name,
        type=type_,
        html_type=field_html_type(type_, attribute.one_of),
        resource=resource_name,
        label=humanize(attribute.name),
        placeholder=field_placeholder(attribute.name, type_),
        length=field_length(type_, attribute.one_of),
        precision=10 if type_ in NUMERIC_TYPES else 0,
        scale=2 if type_ in FRACTIONAL_TYPES else 0,
        required=attribute.required,
        disabled=naming.is_disabled(attribute.name),
        hidden=naming.is_hidden(attribute.name),
        omitted=naming.is_omitted(attribute.name),
        filterable=attribute.native_type not in UNFILTERABLE_NATIVE_TYPES,
        data=field_data(type_, attribute.one_of),
    )


def added_field(key: str, resource_name: str, naming: NamingPolicy | None = None) -> FieldSpec:
    """Field for a declared key the backend does not report."""
    naming = naming or NamingPolicy()
    return FieldSpec(
        key=key,
        type=FieldType.UNDEFINED,
        html_type=HtmlType.UNIMPLEMENTED,
        resource=resource_name,
        label=humanize(key),
        placeholder=humanize(key),
        length=DEFAULT_LENGTH,
        disabled=naming.is_disabled(key),
        hidden=naming.is_hidden(key),
        omitted=naming.is_omitted(key),
    )


# =============================================================================
# Customization
# =============================================================================


def _option_label(value: Any, resource_name: str, key: str) -> Any:
    if isinstance(value, str):
        return AttributeLabel(name=value)
    if isinstance(value, AttributeLabel | EntityLabel | ContextLabel):
        return value
    raise ConfigurationError(
        f"option_label of field '{key}' must be an attribute name, "
        f"EntityLabel(fn) or ContextLabel(fn), got {value!r}",
        ErrorContext(resource=resource_name, subject=f"field {key}"),
    )


def apply_overrides(field: FieldSpec, overrides: dict[str, Any]) -> FieldSpec:
    """
    Shallow-merge user overrides onto a field.

    None values keep the derived default. Association options
    (`option_label`, `order_by`, `where`, `resource`) go to the field's
    association payload.
    """
    resource_name = field.resource or ""
    context = ErrorContext(resource=resource_name, subject=f"field {field.key}")
    values = {k: v for k, v in overrides.items() if v is not None}

    unknown = sorted(set(values) - FIELD_KEYS - DATA_KEYS)
    if unknown:
        raise ConfigurationError(f"Unknown field option(s): {', '.join(unknown)}", context)

    renderer = values.get("renderer")
    if renderer is not None and not (
        accepts_positional(renderer, 1) or accepts_positional(renderer, 2)
    ):
        raise ConfigurationError("renderer must accept one or two positional arguments", context)

    data_values = {k: values.pop(k) for k in DATA_KEYS & set(values)}
    if data_values:
        if not isinstance(field.data, AssociationData):
            raise ConfigurationError(
                f"Option(s) {', '.join(sorted(data_values))} only apply to association fields",
                context,
            )
        update: dict[str, Any] = {}
        if "option_label" in data_values:
            update["option_label"] = _option_label(
                data_values["option_label"], resource_name, field.key
            )
        if "resource" in data_values:
            update["resource"] = data_values["resource"]
        query_opts = {k: data_values[k] for k in ("order_by", "where") if k in data_values}
        if query_opts:
            update["query_opts"] = {**field.data.query_opts, **query_opts}
        values["data"] = field.data.model_copy(update=update)

    return FieldSpec(**{**dict(field), **values})


def resolve_field(
    attribute: AttributeMeta,
    resource_name: str,
    overrides: dict[str, Any] | None = None,
    naming: NamingPolicy | None = None,
) -> FieldSpec:
    """Derive a field and apply user overrides to it."""
    field = derive_field(attribute, resource_name, naming)
    if overrides:
        field = apply_overrides(field, overrides)
    return field


def customize_fields(
    discovered: Iterable[FieldSpec],
    declarations: Iterable[FieldDeclaration],
    resource_name: str,
    naming: NamingPolicy | None = None,
) -> tuple[dict[str, FieldSpec], tuple[str, ...]]:
    """
    Merge declarations into discovered fields and compute field order.

    Declared keys come first, in declaration order (a key declared twice
    has its overrides merged and keeps its first position). Declared keys
    the backend does not report become added fields, placed after the
    declared ones it does report. Discovered keys that were not declared
    follow in discovery order.

    Returns:
        (fields by key, fields order)
    """
    fields = {f.key: f for f in discovered}
    discovery_order = list(fields)

    merged: dict[str, dict[str, Any]] = {}
    for declaration in declarations:
        merged.setdefault(declaration.key, {}).update(declaration.overrides)

    for key, overrides in merged.items():
        if key not in fields:
            logger.debug(f"{resource_name}: adding field '{key}' not reported by the backend")
            fields[key] = added_field(key, resource_name, naming)
        fields[key] = apply_overrides(fields[key], overrides)

    added = [key for key in merged if key not in discovery_order]
    declared = [key for key in merged if key in discovery_order]
    order = [*declared, *added, *(key for key in discovery_order if key not in merged)]
    logger.debug(f"{resource_name}: resolved fields {order}")
    return fields, tuple(order)
