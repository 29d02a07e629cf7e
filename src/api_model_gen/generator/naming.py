"""Identifier helpers shared by the code emitters.

Examples:
  isActive      -> is_active
  GLAccounts    -> gl_accounts
  class         -> class_
  Financial transactions -> financial_transactions
"""

import keyword
import re


def camel_to_snake(name: str) -> str:
    """Convert camelCase or PascalCase to snake_case."""
    s1 = re.sub(r"([A-Z]+)([A-Z][a-z])", r"\1_\2", name)
    return re.sub(r"([a-z\d])([A-Z])", r"\1_\2", s1).lower()


def sanitize_segment(segment: str) -> str:
    """Sanitize a namespace segment for use in a Python module path."""
    name = camel_to_snake(segment)
    name = re.sub(r"[^a-z0-9_]", "_", name)
    name = re.sub(r"_+", "_", name)
    return name.strip("_") or "_"


def python_identifier(name: str) -> str:
    """Make *name* a usable Python attribute name."""
    ident = sanitize_segment(name)
    if ident[0].isdigit():
        ident = "_" + ident
    if keyword.iskeyword(ident):
        ident += "_"
    return ident


def pascal_segment(segment: str) -> str:
    """Strip characters that cannot appear in a PHP namespace segment."""
    return re.sub(r"[^A-Za-z0-9_]", "", segment)
