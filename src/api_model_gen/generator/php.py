"""PHP target: one ``final readonly`` class implementing JsonSerializable per resource."""

import re
from pathlib import PurePosixPath
from typing import Any

import jinja2

from api_model_gen.errors import GenerationError
from api_model_gen.generator.base import ModelEmitter
from api_model_gen.generator.naming import pascal_segment
from api_model_gen.parser.base import Property, Resource

CASTS = {
    "string": ("(string)", "''"),
    "int": ("(int)", "0"),
    "float": ("(float)", "0.0"),
    "bool": ("(bool)", "false"),
}
DEFAULT_VENDOR = "ExactOnline"

_PHP_IDENTIFIER = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")


class PhpEmitter(ModelEmitter):
    target = "php"
    file_extension = ".php"
    template_name = "model.php.j2"
    reserved_names = ("__construct", "fromArray", "toArray", "jsonSerialize")

    def __init__(self, env: jinja2.Environment | None = None, vendor: str = DEFAULT_VENDOR):
        super().__init__(env)
        self.vendor = vendor

    def build_context(self, resource: Resource) -> dict[str, Any]:
        return {
            "namespace": self.namespace(resource),
            "class_name": resource.class_name,
            "doc": self.class_doc(resource),
            "fields": [self._field(resource, p) for p in resource.properties],
        }

    def _field(self, resource: Resource, prop: Property) -> dict[str, Any]:
        attr = _identifier(resource, pascal_segment(prop.field_name))
        cast, fallback = CASTS[prop.type]
        return {
            "attr": attr,
            "key": prop.name,
            "type": prop.type_declaration,
            "has_default": prop.is_nullable and not prop.is_required,
            "nullable": prop.is_nullable,
            "cast": cast,
            "fallback": fallback,
            "accessor": _identifier(resource, pascal_segment(prop.accessor_name)),
            "description": prop.description,
        }

    def namespace(self, resource: Resource) -> str:
        return "\\".join([self.vendor, *(pascal_segment(s) for s in resource.namespace)])

    def relative_path(self, resource: Resource) -> PurePosixPath:
        parts = [pascal_segment(s) for s in resource.namespace]
        return PurePosixPath(*parts, resource.class_name + self.file_extension)


def _identifier(resource: Resource, name: str) -> str:
    if not _PHP_IDENTIFIER.match(name):
        raise GenerationError(f"{resource.name}: {name!r} is not a valid PHP identifier")
    return name
