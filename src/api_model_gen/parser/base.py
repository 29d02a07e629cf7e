"""Data models for parsed API documentation.

The documentation parser produces these models, and the code generator
consumes them. Both are immutable; use ``Resource.with_overrides`` to derive
an updated copy.
"""

import re
from typing import Literal

from pydantic import BaseModel, ConfigDict, model_validator

from api_model_gen.parser.normalize import property_name_from, upper_first

PropertyType = Literal["string", "int", "float", "bool"]

DEFAULT_NAMESPACE_ROOT = "Models"

_ENDPOINT_SERVICE = re.compile(r"/api/v1/\{?division\}?/([^/]+)")
_NON_ALNUM = re.compile(r"[^a-zA-Z0-9]")


class Property(BaseModel):
    """A single documented field of a resource."""

    model_config = ConfigDict(frozen=True)

    name: str  # original documented name, e.g. "ID"
    type: PropertyType
    description: str = ""
    is_required: bool = True
    is_nullable: bool = False

    @model_validator(mode="after")
    def _required_xor_nullable(self) -> "Property":
        if self.is_required and self.is_nullable:
            raise ValueError(f"property {self.name!r} cannot be both required and nullable")
        return self

    @property
    def field_name(self) -> str:
        return property_name_from(self.name)

    @property
    def accessor_name(self) -> str:
        prefix = "is" if self.type == "bool" else "get"
        return prefix + upper_first(self.field_name)

    @property
    def type_declaration(self) -> str:
        """Canonical type, prefixed with '?' when the value may be absent."""
        return f"?{self.type}" if self.is_nullable else self.type


class Resource(BaseModel):
    """A documented API resource with its routing metadata and properties."""

    model_config = ConfigDict(frozen=True)

    name: str
    endpoint: str
    description: str
    properties: tuple[Property, ...] = ()
    service: str | None = None
    resource_uri: str | None = None
    supported_methods: str | None = None
    has_webhook: bool | None = None
    scope: str | None = None
    detail_url: str | None = None

    def with_overrides(self, **changes) -> "Resource":
        """Return a validated copy of this resource with *changes* applied."""
        return type(self).model_validate({**dict(self), **changes})

    @property
    def class_name(self) -> str:
        """PascalCase class name, e.g. 'Test Account' -> 'TestAccount'."""
        words = _NON_ALNUM.sub(" ", self.name).split()
        return "".join(upper_first(w) for w in words)

    @property
    def group(self) -> str | None:
        """Grouping key: the service name, else the service segment of the endpoint."""
        if self.service and self.service.strip():
            return upper_first(self.service.strip().lower())

        match = _ENDPOINT_SERVICE.search(self.endpoint)
        if match:
            return upper_first(match.group(1).lower())

        return None

    @property
    def namespace(self) -> tuple[str, ...]:
        group = self.group
        if group is None:
            return (DEFAULT_NAMESPACE_ROOT,)
        return (DEFAULT_NAMESPACE_ROOT, group)
