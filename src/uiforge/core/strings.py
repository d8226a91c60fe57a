"""
String utility functions for uiforge.

Provides the naming transformations used to derive labels, resource
source names and generated element ids.
"""

from __future__ import annotations

import re

# Irregular plurals that don't follow standard rules
_IRREGULAR_PLURALS = {
    "person": "people",
    "child": "children",
    "datum": "data",
    "medium": "media",
    "criterion": "criteria",
    "index": "indices",
    "matrix": "matrices",
    "status": "statuses",
    "address": "addresses",
}

_CAMEL_BOUNDARY = re.compile(r"(?<=[a-z0-9])(?=[A-Z])|(?<=[A-Z])(?=[A-Z][a-z])")
_NON_SLUG = re.compile(r"[^a-z0-9]+")


def humanize(value: object) -> str:
    """
    Turn an identifier into a display label.

    Underscores become spaces (runs collapse to one) and the first letter
    is capitalized. The rest of the text keeps its case.

    Examples:
        >>> humanize("inserted_at")
        'Inserted at'
        >>> humanize("post__comment")
        'Post comment'
        >>> humanize(None)
        ''
    """
    if value is None:
        return ""
    text = " ".join(str(value).replace("_", " ").split())
    if not text:
        return text
    return text[0].upper() + text[1:]


def to_snake_case(name: str) -> str:
    """
    Convert a CamelCase class name to snake_case.

    Examples:
        >>> to_snake_case("ProductLocation")
        'product_location'
        >>> to_snake_case("HTTPRequest")
        'http_request'
    """
    return _CAMEL_BOUNDARY.sub("_", name).lower()


def pluralize(word: str) -> str:
    """
    Convert a singular snake_case word to its plural form.

    Only the last underscore-separated segment is pluralized.

    Examples:
        >>> pluralize("product_location")
        'product_locations'
        >>> pluralize("category")
        'categories'
        >>> pluralize("person")
        'people'
    """
    if not word:
        return word

    head, sep, last = word.rpartition("_")
    lower_word = last.lower()

    if lower_word in _IRREGULAR_PLURALS:
        return f"{head}{sep}{_IRREGULAR_PLURALS[lower_word]}"

    if lower_word.endswith(("s", "x", "z", "ch", "sh")):
        plural = last + "es"
    elif lower_word.endswith("y") and len(last) > 1 and lower_word[-2] not in "aeiou":
        plural = last[:-1] + "ies"
    elif lower_word.endswith("fe"):
        plural = last[:-2] + "ves"
    else:
        plural = last + "s"
    return f"{head}{sep}{plural}"


def slugify(value: str) -> str:
    """
    Lowercase slug suitable for element ids.

    Examples:
        >>> slugify("Main Details")
        'main-details'
    """
    return _NON_SLUG.sub("-", value.lower()).strip("-")
