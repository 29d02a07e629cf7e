"""Normalize documented type tokens and property names.

Documentation pages use OData-style type names (``Edm.Guid``, ``Edm.Int32``)
mixed with plain ones (``String``, ``Boolean``). Everything is folded into
four canonical types: string, int, float and bool.
"""

import re

CANONICAL_TYPES = ("string", "int", "float", "bool")

ACRONYMS = ("ID", "URL", "API", "JSON", "XML", "HTML", "HTTP", "HTTPS", "SQL")

_TYPE_MAP: dict[str, str] = {
    "edm.guid": "string",
    "guid": "string",
    "uuid": "string",
    "edm.int32": "int",
    "edm.int16": "int",
    "int": "int",
    "integer": "int",
    "edm.double": "float",
    "edm.decimal": "float",
    "double": "float",
    "decimal": "float",
    "float": "float",
    "edm.boolean": "bool",
    "bool": "bool",
    "boolean": "bool",
    # Dates are kept as their documented string form
    "edm.datetime": "string",
    "edm.datetimeoffset": "string",
    "datetime": "string",
    "date": "string",
    "edm.string": "string",
    "string": "string",
    "edm.byte": "int",
    "byte": "int",
}

_WORD_DELIMITERS = re.compile(r"[ _\-]+")


def normalize_type(raw_type: str) -> str:
    """Map a documented type token to a canonical type. Unknown tokens become 'string'."""
    return _TYPE_MAP.get(raw_type.strip().lower(), "string")


def property_name_from(raw_name: str) -> str:
    """Convert a documented property name into a camelCase field name.

    ``ID`` -> ``id``, ``IsActive`` -> ``isActive``, ``account_name`` -> ``accountName``.
    """
    name = raw_name.strip()
    if name.upper() in ACRONYMS:
        return name.lower()

    words = [w for w in _WORD_DELIMITERS.split(name) if w]
    joined = "".join(w[:1].upper() + w[1:] for w in words)
    return joined[:1].lower() + joined[1:]


def upper_first(value: str) -> str:
    """Upper-case only the first character of *value*."""
    return value[:1].upper() + value[1:]
