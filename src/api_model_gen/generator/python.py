"""Python target: one frozen dataclass per resource."""

from pathlib import PurePosixPath
from typing import Any

from api_model_gen.generator.base import ModelEmitter
from api_model_gen.generator.naming import camel_to_snake, python_identifier, sanitize_segment
from api_model_gen.parser.base import Property, Resource

PYTHON_TYPES = {"string": "str", "int": "int", "float": "float", "bool": "bool"}
FALLBACKS = {"string": '""', "int": "0", "float": "0.0", "bool": "False"}


class PythonEmitter(ModelEmitter):
    target = "python"
    file_extension = ".py"
    template_name = "model.py.j2"
    reserved_names = ("from_dict", "to_dict", "to_json")

    def build_context(self, resource: Resource) -> dict[str, Any]:
        return {
            "class_name": resource.class_name,
            "doc": self.class_doc(resource),
            "fields": [self._field(p) for p in resource.properties],
        }

    def _field(self, prop: Property) -> dict[str, Any]:
        py_type = PYTHON_TYPES[prop.type]
        return {
            "attr": python_identifier(prop.field_name),
            "key": prop.name,
            "annotation": f"{py_type} | None" if prop.is_nullable else py_type,
            "has_default": prop.is_nullable and not prop.is_required,
            "nullable": prop.is_nullable,
            "cast": py_type,
            "fallback": FALLBACKS[prop.type],
            "accessor": python_identifier(camel_to_snake(prop.accessor_name)),
            "description": prop.description,
        }

    def namespace(self, resource: Resource) -> str:
        return ".".join(sanitize_segment(s) for s in resource.namespace)

    def relative_path(self, resource: Resource) -> PurePosixPath:
        parts = [sanitize_segment(s) for s in resource.namespace]
        return PurePosixPath(*parts, sanitize_segment(resource.class_name) + self.file_extension)
