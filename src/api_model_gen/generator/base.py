"""Code emission interface.

An emitter turns one ``Resource`` into the source text of one model class
for a specific target language. The parser and crawler never look at the
emitted syntax; they only ask an emitter for text and a relative path.
"""

import json
from abc import ABC, abstractmethod
from pathlib import Path, PurePosixPath
from typing import Any

import jinja2

from api_model_gen.errors import GenerationError
from api_model_gen.parser.base import Resource

TEMPLATE_DIR = Path(__file__).parent.parent / "templates"


def _docstring(text: str) -> str:
    return text.replace("\\", "\\\\").replace('"', '\\"')


def _oneline(text: str) -> str:
    return " ".join(text.split())


def _phpstr(text: str) -> str:
    return "'" + text.replace("\\", "\\\\").replace("'", "\\'") + "'"


def _phpdoc(text: str) -> str:
    return _oneline(text).replace("*/", "* /")


def create_environment() -> jinja2.Environment:
    """Jinja2 environment shared by all emitters."""
    env = jinja2.Environment(
        loader=jinja2.FileSystemLoader(str(TEMPLATE_DIR)),
        keep_trailing_newline=True,
        trim_blocks=True,
        lstrip_blocks=True,
        undefined=jinja2.StrictUndefined,
    )
    env.filters["pystr"] = json.dumps
    env.filters["docstring"] = _docstring
    env.filters["oneline"] = _oneline
    env.filters["phpstr"] = _phpstr
    env.filters["phpdoc"] = _phpdoc
    return env


class ModelEmitter(ABC):
    """Renders a resource as a model class in one target language."""

    target: str
    file_extension: str
    template_name: str
    reserved_names: tuple[str, ...] = ()

    def __init__(self, env: jinja2.Environment | None = None):
        self.env = env or create_environment()

    def render(self, resource: Resource) -> str:
        """Return the full source text for *resource*."""
        if not resource.class_name.isidentifier():
            raise GenerationError(f"cannot derive a class name from {resource.name!r}")
        context = self.build_context(resource)
        names = list(self.reserved_names)
        for f in context["fields"]:
            names.extend((f["attr"], f["accessor"]))
        _check_unique(names, resource)
        template = self.env.get_template(self.template_name)
        return template.render(**context)

    def class_doc(self, resource: Resource) -> list[str]:
        return [
            resource.description or f"Model for {resource.name}",
            "",
            f"Generated from: {resource.endpoint}",
        ]

    @abstractmethod
    def build_context(self, resource: Resource) -> dict[str, Any]:
        """Template variables for *resource*. Must include a 'fields' list with 'attr' and 'accessor' keys."""

    @abstractmethod
    def namespace(self, resource: Resource) -> str:
        """Fully qualified namespace of the generated class."""

    @abstractmethod
    def relative_path(self, resource: Resource) -> PurePosixPath:
        """Output path of the generated file, relative to the output directory."""


def _check_unique(attrs: list[str], resource: Resource) -> None:
    seen: set[str] = set()
    for attr in attrs:
        if attr in seen:
            raise GenerationError(f"{resource.name}: name {attr!r} is generated more than once")
        seen.add(attr)
