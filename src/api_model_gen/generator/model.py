"""Model generator: converts parsed resources into model source files."""

from pathlib import Path

from api_model_gen.generator.base import ModelEmitter
from api_model_gen.generator.php import PhpEmitter
from api_model_gen.generator.python import PythonEmitter
from api_model_gen.parser.base import Resource

EMITTERS: dict[str, type[ModelEmitter]] = {
    PythonEmitter.target: PythonEmitter,
    PhpEmitter.target: PhpEmitter,
}

DEFAULT_TARGET = PythonEmitter.target


def get_emitter(target: str = DEFAULT_TARGET) -> ModelEmitter:
    """Return an emitter for *target* ('python' or 'php')."""
    try:
        return EMITTERS[target]()
    except KeyError:
        raise ValueError(f"unknown target {target!r}, expected one of {sorted(EMITTERS)}") from None


class ModelGenerator:
    """Generates one model class per resource.

    Output is a pure function of the resource: the same resource always
    renders to byte-identical text and the same path.
    """

    def __init__(self, emitter: ModelEmitter | None = None):
        self.emitter = emitter or get_emitter()

    def generate(self, resource: Resource) -> str:
        """Return the source text of the model class for *resource*."""
        return self.emitter.render(resource)

    def output_path(self, resource: Resource, output_directory: Path) -> Path:
        """Where the model for *resource* is written under *output_directory*."""
        return output_directory / self.emitter.relative_path(resource)
